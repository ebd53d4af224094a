import numpy as np
import pytest

from numopt.optimize.finite_diff import (
    HESSIAN_STEP,
    FiniteDifferenceConfig,
    finite_gradient,
    finite_hessian,
    stencil,
)


def poly(x: np.ndarray) -> float:
    return float(x[0] ** 8 + x[0] ** 3 * x[1] ** 5)


def poly_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            8 * x[0] ** 7 + 3 * x[0] ** 2 * x[1] ** 5,
            5 * x[0] ** 3 * x[1] ** 4,
        ]
    )


def rosen(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosen_hess(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [1200 * x[0] ** 2 - 400 * x[1] + 2, -400 * x[0]],
            [-400 * x[0], 200.0],
        ]
    )


@pytest.mark.parametrize("accuracy", [0, 1, 2, 3])
def test_stencil_is_consistent_first_derivative(accuracy):
    coeffs, offsets, divisor = stencil(accuracy)
    assert coeffs.size == offsets.size == 2 * (accuracy + 1)
    assert np.isclose(coeffs.sum(), 0.0)
    assert np.isclose(coeffs @ offsets, divisor)


def test_stencil_tables_are_not_exposed_for_mutation():
    coeffs, _, _ = stencil(1)
    coeffs[:] = 0.0
    assert np.array_equal(stencil(1)[0], np.array([1.0, -8.0, 8.0, -1.0]))


@pytest.mark.parametrize("accuracy", [0, 1, 2, 3])
def test_finite_gradient_matches_sine(accuracy):
    x = np.array([0.3, -1.2, 2.0])
    grad = finite_gradient(lambda v: float(np.sum(np.sin(v))), x, accuracy=accuracy)
    assert np.allclose(grad, np.cos(x), atol=1e-7)


def test_gradient_error_decreases_with_accuracy():
    x = np.array([1.0, 0.8])
    config = FiniteDifferenceConfig(gradient_step=0.05)
    exact = poly_grad(x)
    errors = [
        np.linalg.norm(finite_gradient(poly, x, accuracy=a, config=config) - exact)
        for a in range(4)
    ]
    assert errors[0] > errors[1] > errors[2] > errors[3]
    assert errors[3] < 1e-9


@pytest.mark.parametrize("accuracy,per_coordinate", [(0, 2), (1, 4), (2, 6), (3, 8)])
def test_finite_gradient_evaluation_count(accuracy, per_coordinate):
    calls = []

    def fun(x: np.ndarray) -> float:
        calls.append(x.copy())
        return float(x @ x)

    _, evals = finite_gradient(fun, np.zeros(5), accuracy=accuracy, return_evals=True)
    assert evals == len(calls) == 5 * per_coordinate


def test_finite_gradient_does_not_modify_input():
    x = np.array([1.0, 2.0])
    before = x.copy()
    finite_gradient(poly, x, accuracy=3)
    finite_hessian(poly, x, accuracy=1)
    assert np.array_equal(x, before)


def test_finite_gradient_is_reproducible():
    x = np.array([0.7, -0.4])
    first = finite_gradient(rosen, x, accuracy=2)
    second = finite_gradient(rosen, x, accuracy=2)
    assert np.array_equal(first, second)


def test_finite_hessian_of_quadratic(spd_matrix):
    b = np.array([1.0, -2.0, 0.5])

    def fun(x: np.ndarray) -> float:
        return float(0.5 * x @ (spd_matrix @ x) - b @ x)

    x = np.array([0.3, -0.7, 1.1])
    for accuracy in (0, 1):
        hess = finite_hessian(fun, x, accuracy=accuracy)
        assert np.allclose(hess, spd_matrix, atol=1e-4)


@pytest.mark.parametrize("accuracy", [0, 2])
def test_finite_hessian_rosenbrock(accuracy):
    x = np.array([-1.2, 1.0])
    hess = finite_hessian(rosen, x, accuracy=accuracy)
    assert np.allclose(hess, rosen_hess(x), rtol=1e-4, atol=1e-2)


@pytest.mark.parametrize("accuracy,per_entry", [(0, 4), (1, 16), (3, 16)])
def test_finite_hessian_evaluation_count(accuracy, per_entry):
    _, evals = finite_hessian(rosen, np.zeros(2), accuracy=accuracy, return_evals=True)
    assert evals == per_entry * 4


def test_hessian_step_squared_is_scaled_machine_epsilon():
    assert np.isclose(HESSIAN_STEP**2, np.finfo(float).eps * 1e8)


@pytest.mark.parametrize("accuracy", [-1, 4, 1.5, True, None])
def test_invalid_accuracy_raises(accuracy):
    with pytest.raises(ValueError):
        finite_gradient(rosen, np.zeros(2), accuracy=accuracy)
    with pytest.raises(ValueError):
        finite_hessian(rosen, np.zeros(2), accuracy=accuracy)


def test_non_vector_input_raises():
    with pytest.raises(ValueError):
        finite_gradient(rosen, np.zeros((2, 2)))


def test_invalid_step_raises():
    with pytest.raises(ValueError):
        FiniteDifferenceConfig(gradient_step=0.0)
    with pytest.raises(ValueError):
        FiniteDifferenceConfig(hessian_step=-1e-4)
