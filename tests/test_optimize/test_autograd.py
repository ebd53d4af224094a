import numpy as np
import pytest
import torch

from numopt.optimize import linesearch
from numopt.optimize.autograd import autograd_problem, torch_gradient, torch_hessian


def torch_rosen(x: torch.Tensor) -> torch.Tensor:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def test_autograd_gradient_matches_analytic():
    grad = torch_gradient(torch_rosen)
    x = np.array([-1.2, 1.0])
    expected = np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )
    result = grad(x)
    assert isinstance(result, np.ndarray)
    assert np.allclose(result, expected)


def test_autograd_hessian_matches_analytic():
    hess = torch_hessian(torch_rosen)
    x = np.array([0.5, -0.3])
    expected = np.array(
        [
            [1200 * x[0] ** 2 - 400 * x[1] + 2, -400 * x[0]],
            [-400 * x[0], 200.0],
        ]
    )
    assert np.allclose(hess(x), expected)


def test_autograd_problem_passes_derivative_checks():
    problem = autograd_problem(lambda t: torch.sum(torch.exp(t) * t**2), dim=3)
    x = np.array([0.1, -0.4, 0.9])
    assert problem.check_gradient(x)
    assert problem.check_hessian(x)


def test_autograd_problem_without_hessian_uses_finite_differences():
    problem = autograd_problem(torch_rosen, dim=2, hessian=False)
    assert problem.hess is None
    x = np.array([1.0, 1.0])
    assert np.allclose(problem.hessian(x), [[802.0, -400.0], [-400.0, 200.0]], rtol=1e-3)


def test_autograd_problem_drives_line_search():
    problem = autograd_problem(torch_rosen, dim=2)
    x = np.array([-1.2, 1.0])
    direction = -problem.gradient(x)
    alpha = linesearch(x, direction, problem)
    assert problem.value(x + alpha * direction) < problem.value(x)


def test_non_scalar_objective_raises():
    problem = autograd_problem(lambda t: t * 2.0, dim=2)
    with pytest.raises(ValueError):
        problem.value(np.ones(2))
