"""Regression losses over a fixed design matrix.

The design matrix ``X`` (``m x n``) and targets ``y`` (length ``m``) are
captured at construction and never modified; the optimization variable is the
coefficient vector ``beta`` of length ``n``.
"""

from __future__ import annotations

import numpy as np

from numopt.optimize.core import Problem


def _design(X: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    X = np.array(X, dtype=float)
    y = np.array(y, dtype=float)
    if X.ndim != 2:
        raise ValueError(f"X must be a 2D matrix, got shape {X.shape}")
    if y.shape != (X.shape[0],):
        raise ValueError(f"y must have shape {(X.shape[0],)}, got {y.shape}")
    return X, y


def _sigmoid(z: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-z))


def linear_regression_problem(X: np.ndarray, y: np.ndarray) -> Problem:
    """Least squares ``0.5 ||X beta - y||^2`` with analytic derivatives."""
    X, y = _design(X, y)
    XtX = X.T @ X
    Xty = X.T @ y

    def fun(beta: np.ndarray) -> float:
        r = X @ beta - y
        return float(0.5 * r @ r)

    def grad(beta: np.ndarray) -> np.ndarray:
        return XtX @ beta - Xty

    def hess(beta: np.ndarray) -> np.ndarray:
        return XtX.copy()

    return Problem(fun=fun, grad=grad, hess=hess, dim=X.shape[1])


def logistic_regression_problem(X: np.ndarray, y: np.ndarray) -> Problem:
    """
    Squared error of logistic predictions, ``||sigmoid(X beta) - y||^2``.

    The gradient is analytic; the Hessian uses the finite-difference fallback.
    """
    X, y = _design(X, y)

    def fun(beta: np.ndarray) -> float:
        r = _sigmoid(X @ beta) - y
        return float(r @ r)

    def grad(beta: np.ndarray) -> np.ndarray:
        p = _sigmoid(X @ beta)
        return 2.0 * X.T @ ((p - y) * p * (1.0 - p))

    return Problem(fun=fun, grad=grad, dim=X.shape[1])


def nonnegative_least_squares_problem(X: np.ndarray, y: np.ndarray) -> Problem:
    """
    Least squares ``||X beta - y||^2`` subject to ``beta >= 0``.

    Only the lower bound is set, so ``has_upper_bound()`` stays False.
    """
    X, y = _design(X, y)

    def fun(beta: np.ndarray) -> float:
        r = X @ beta - y
        return float(r @ r)

    def grad(beta: np.ndarray) -> np.ndarray:
        return 2.0 * X.T @ (X @ beta - y)

    def hess(beta: np.ndarray) -> np.ndarray:
        return 2.0 * X.T @ X

    problem = Problem(fun=fun, grad=grad, hess=hess, dim=X.shape[1])
    problem.set_lower_bound(np.zeros(X.shape[1]))
    return problem


__all__ = [
    "linear_regression_problem",
    "logistic_regression_problem",
    "nonnegative_least_squares_problem",
]
