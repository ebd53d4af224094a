"""Armijo backtracking line searches.

Given an iterate ``x`` and a descent direction ``d`` the step length ``alpha``
is shrunk geometrically, ``alpha <- rho * alpha``, until the sufficient
decrease condition

    f(x + alpha d) <= f(x) + alpha * slope

holds. The first-order variant uses ``slope = c * grad(x) . d``; the
second-order variant adds the curvature term ``0.5 * c**2 * d^T H(x) d``.

References:
    - Nocedal & Wright, *Numerical Optimization* (2006), Algorithm 3.1
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from numopt.logging import get_logger

from .core import ObjectiveLike
from .finite_diff import Array

logger = get_logger(__name__)

ARMIJO_C = 0.2
ARMIJO_RHO = 0.9


class LineSearchFailed(RuntimeError):
    """Raised when backtracking cannot satisfy the Armijo condition.

    ``alpha`` is the last step tried. ``nfev`` counts objective evaluations,
    including ``f(x)``.
    """

    def __init__(self, message: str, alpha: float, nfev: int) -> None:
        super().__init__(message)
        self.alpha = alpha
        self.nfev = nfev


@dataclass(frozen=True)
class ArmijoConfig:
    """Constants of the backtracking search.

    Attributes:
        c: Fraction of the model decrease that must be achieved.
        rho: Shrink factor applied to ``alpha`` after each rejected step.
        max_iter: Maximum number of shrink steps before giving up.
        min_step: Smallest step length tried before giving up.
    """

    c: float = ARMIJO_C
    rho: float = ARMIJO_RHO
    max_iter: int = 1000
    min_step: float = 1e-20

    def __post_init__(self) -> None:
        if not (0 < self.c < 1):
            raise ValueError("Armijo constant c must lie in (0, 1)")
        if not (0 < self.rho < 1):
            raise ValueError("rho must lie in (0, 1)")
        if self.max_iter < 1:
            raise ValueError("max_iter must be at least 1")
        if not self.min_step > 0:
            raise ValueError("min_step must be positive")


DEFAULT_ARMIJO = ArmijoConfig()


def _prepare(x: Array, direction: Array, alpha0: float) -> tuple[Array, Array, float]:
    x = np.asarray(x, dtype=float)
    direction = np.asarray(direction, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"x must be a 1D vector, got shape {x.shape}")
    if direction.shape != x.shape:
        raise ValueError(
            f"direction has shape {direction.shape}, expected {x.shape}"
        )
    alpha0 = float(alpha0)
    if not (np.isfinite(alpha0) and alpha0 > 0):
        raise ValueError("alpha0 must be a positive finite number")
    return x, direction, alpha0


def _backtrack(
    problem: ObjectiveLike,
    x: Array,
    direction: Array,
    alpha: float,
    fx: float,
    slope: float,
    config: ArmijoConfig,
) -> float:
    # f(x) and the first trial point
    nfev = 2
    f_new = problem.value(x + alpha * direction)
    shrinks = 0
    while not f_new <= fx + alpha * slope:
        if shrinks >= config.max_iter or alpha * config.rho < config.min_step:
            logger.warning(
                "Armijo search failed after %d shrinks (alpha=%.3e, f(x)=%.6g, slope=%.6g)",
                shrinks,
                alpha,
                fx,
                slope,
            )
            raise LineSearchFailed(
                f"Armijo condition not satisfied after {shrinks} shrinks; "
                f"last alpha={alpha:.3e}",
                alpha=alpha,
                nfev=nfev,
            )
        alpha *= config.rho
        f_new = problem.value(x + alpha * direction)
        nfev += 1
        shrinks += 1
    logger.debug(
        "Armijo accepted alpha=%.6g after %d shrinks (%d evaluations)",
        alpha,
        shrinks,
        nfev,
    )
    return alpha


def armijo(
    problem: ObjectiveLike,
    x: Array,
    direction: Array,
    alpha0: float = 1.0,
    config: ArmijoConfig | None = None,
) -> float:
    """First-order Armijo backtracking.

    Parameters
    ----------
    problem:
        Object exposing ``value`` and ``gradient``.
    x:
        Current iterate.
    direction:
        Search direction; must satisfy ``grad(x) . direction <= 0``.
    alpha0:
        Initial step length.
    config:
        Search constants; defaults to ``c=0.2``, ``rho=0.9``.

    Returns
    -------
    float
        Accepted step length in ``(0, alpha0]``.

    Raises
    ------
    ValueError
        On shape mismatch, invalid ``alpha0`` or an ascent direction.
    LineSearchFailed
        If the guards in ``config`` are exhausted.
    """
    config = DEFAULT_ARMIJO if config is None else config
    x, direction, alpha0 = _prepare(x, direction, alpha0)
    fx = problem.value(x)
    grad_dot = float(np.dot(problem.gradient(x), direction))
    if grad_dot > 0:
        raise ValueError("Search direction must be a descent direction.")
    slope = config.c * grad_dot
    return _backtrack(problem, x, direction, alpha0, fx, slope, config)


def armijo_second_order(
    problem: ObjectiveLike,
    x: Array,
    direction: Array,
    alpha0: float = 1.0,
    config: ArmijoConfig | None = None,
) -> float:
    """Armijo backtracking against a quadratic decrease model.

    The slope is ``c * grad . d + 0.5 * c**2 * d^T H d``. If the curvature
    term makes the model predict no decrease, the first-order slope is used
    instead so that accepted steps never increase the objective.
    """
    config = DEFAULT_ARMIJO if config is None else config
    x, direction, alpha0 = _prepare(x, direction, alpha0)
    fx = problem.value(x)
    grad_dot = float(np.dot(problem.gradient(x), direction))
    if grad_dot > 0:
        raise ValueError("Search direction must be a descent direction.")
    hess = np.asarray(problem.hessian(x), dtype=float)
    curvature = float(direction @ (hess @ direction))
    slope = config.c * grad_dot + 0.5 * config.c**2 * curvature
    if slope > 0:
        logger.debug(
            "quadratic model predicts ascent (slope=%.6g); using first-order slope",
            slope,
        )
        slope = config.c * grad_dot
    return _backtrack(problem, x, direction, alpha0, fx, slope, config)


def linesearch(
    x: Array,
    direction: Array,
    problem: ObjectiveLike,
    alpha_init: float = 1.0,
    order: int = 1,
    config: ArmijoConfig | None = None,
) -> float:
    """Return an Armijo step length of the given model ``order`` (1 or 2)."""
    if order == 1:
        return armijo(problem, x, direction, alpha0=alpha_init, config=config)
    if order == 2:
        return armijo_second_order(problem, x, direction, alpha0=alpha_init, config=config)
    raise ValueError(f"order must be 1 or 2, got {order!r}")


__all__ = [
    "ARMIJO_C",
    "ARMIJO_RHO",
    "ArmijoConfig",
    "DEFAULT_ARMIJO",
    "LineSearchFailed",
    "armijo",
    "armijo_second_order",
    "linesearch",
]
