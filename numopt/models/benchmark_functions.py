"""Smooth benchmark objectives with hand-derived derivatives."""

from __future__ import annotations

import numpy as np

from numopt.optimize.core import Problem


def _rosenbrock(x: np.ndarray) -> float:
    return float((1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2)


def _rosenbrock_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def _rosenbrock_hess(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [1200 * x[0] ** 2 - 400 * x[1] + 2, -400 * x[0]],
            [-400 * x[0], 200.0],
        ]
    )


def rosenbrock_problem() -> Problem:
    """
    Two-dimensional Rosenbrock function ``(1 - x)^2 + 100 (y - x^2)^2``.

    Non-convex with a curved valley and its minimum at ``(1, 1)``. Gradient
    and Hessian are analytic.
    """
    return Problem(
        fun=_rosenbrock, grad=_rosenbrock_grad, hess=_rosenbrock_hess, dim=2
    )


def quadratic_problem(A: np.ndarray, b: np.ndarray) -> Problem:
    """
    Quadratic ``0.5 x^T A x - b^T x`` with gradient ``A x - b``.

    ``A`` is symmetrized, so the Hessian returned is ``0.5 (A + A^T)``.
    """
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"A must be square, got shape {A.shape}")
    if b.shape != (A.shape[0],):
        raise ValueError(f"b must have shape {(A.shape[0],)}, got {b.shape}")
    sym = 0.5 * (A + A.T)

    def fun(x: np.ndarray) -> float:
        return float(0.5 * x @ (sym @ x) - b @ x)

    def grad(x: np.ndarray) -> np.ndarray:
        return sym @ x - b

    def hess(x: np.ndarray) -> np.ndarray:
        return sym.copy()

    return Problem(fun=fun, grad=grad, hess=hess, dim=b.size)


__all__ = ["quadratic_problem", "rosenbrock_problem"]
