"""Finite-difference derivatives of scalar objectives.

Gradients use central stencils of increasing width selected by an accuracy
level in ``{0, 1, 2, 3}``; each level costs ``2 * (accuracy + 1)`` objective
evaluations per coordinate. Hessians use either a symmetric four-point mixed
difference (accuracy 0) or a sixteen-point stencil (accuracy > 0), costing
``4 n^2`` and ``16 n^2`` evaluations respectively.

All routines are deterministic pure NumPy and never modify ``x``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]

GRADIENT_STEP = 2.2204e-6
# The mixed second difference divides by h**2; h**2 is pinned to
# machine epsilon * 1e8 so the quotient stays well above round-off.
HESSIAN_STEP = float(np.sqrt(np.finfo(float).eps * 1e8))

ACCURACY_LEVELS = (0, 1, 2, 3)

_GRADIENT_COEFFICIENTS = (
    np.array([1.0, -1.0]),
    np.array([1.0, -8.0, 8.0, -1.0]),
    np.array([-1.0, 9.0, -45.0, 45.0, -9.0, 1.0]),
    np.array([3.0, -32.0, 168.0, -672.0, 672.0, -168.0, 32.0, -3.0]),
)
_GRADIENT_OFFSETS = (
    np.array([1.0, -1.0]),
    np.array([-2.0, -1.0, 1.0, 2.0]),
    np.array([-3.0, -2.0, -1.0, 1.0, 2.0, 3.0]),
    np.array([-4.0, -3.0, -2.0, -1.0, 1.0, 2.0, 3.0, 4.0]),
)
_GRADIENT_DIVISORS = (2.0, 12.0, 60.0, 840.0)

# (weight, ((di, dj), ...)) groups of the fifth-order mixed partial formula
#   d2f/dxdy ~ [-63 (f(1,-2) + f(2,-1) + f(-2,1) + f(-1,2))
#              + 63 (f(-1,-2) + f(-2,-1) + f(1,2) + f(2,1))
#              + 44 (f(2,-2) + f(-2,2) - f(-2,-2) - f(2,2))
#              + 74 (f(-1,-1) + f(1,1) - f(1,-1) - f(-1,1))] / (600 h^2)
_HESSIAN_STENCIL = (
    (-63.0, ((1, -2, 1.0), (2, -1, 1.0), (-2, 1, 1.0), (-1, 2, 1.0))),
    (63.0, ((-1, -2, 1.0), (-2, -1, 1.0), (1, 2, 1.0), (2, 1, 1.0))),
    (44.0, ((2, -2, 1.0), (-2, 2, 1.0), (-2, -2, -1.0), (2, 2, -1.0))),
    (74.0, ((-1, -1, 1.0), (1, 1, 1.0), (1, -1, -1.0), (-1, 1, -1.0))),
)
_HESSIAN_DIVISOR = 600.0


@dataclass(frozen=True)
class FiniteDifferenceConfig:
    """Step sizes used by the finite-difference engine."""

    gradient_step: float = GRADIENT_STEP
    hessian_step: float = HESSIAN_STEP

    def __post_init__(self) -> None:
        if not (np.isfinite(self.gradient_step) and self.gradient_step > 0):
            raise ValueError("gradient_step must be a positive finite number")
        if not (np.isfinite(self.hessian_step) and self.hessian_step > 0):
            raise ValueError("hessian_step must be a positive finite number")


DEFAULT_CONFIG = FiniteDifferenceConfig()


def validate_accuracy(accuracy: int) -> int:
    """Return ``accuracy`` as an int, raising ``ValueError`` if it is not 0-3."""
    if isinstance(accuracy, bool) or not isinstance(accuracy, (int, np.integer)):
        raise ValueError(f"accuracy must be an integer in {ACCURACY_LEVELS}, got {accuracy!r}")
    accuracy = int(accuracy)
    if accuracy not in ACCURACY_LEVELS:
        raise ValueError(f"accuracy must be one of {ACCURACY_LEVELS}, got {accuracy}")
    return accuracy


def stencil(accuracy: int) -> tuple[Array, Array, float]:
    """Return ``(coefficients, offsets, divisor)`` of the gradient stencil."""
    accuracy = validate_accuracy(accuracy)
    return (
        _GRADIENT_COEFFICIENTS[accuracy].copy(),
        _GRADIENT_OFFSETS[accuracy].copy(),
        _GRADIENT_DIVISORS[accuracy],
    )


def _as_vector(x: Array) -> Array:
    x = np.asarray(x, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"x must be a 1D vector, got shape {x.shape}")
    return x


def finite_gradient(
    fun: Objective,
    x: Array,
    accuracy: int = 0,
    config: FiniteDifferenceConfig | None = None,
    return_evals: bool = False,
) -> Array | tuple[Array, int]:
    """Approximate the gradient of ``fun`` at ``x`` with a central stencil.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    accuracy:
        Stencil selector in ``{0, 1, 2, 3}``; higher levels are more accurate
        and cost more evaluations.
    config:
        Step sizes; defaults to :data:`DEFAULT_CONFIG`.
    return_evals:
        Also return the number of objective evaluations.
    """
    accuracy = validate_accuracy(accuracy)
    config = DEFAULT_CONFIG if config is None else config
    x = _as_vector(x)
    eps = config.gradient_step
    coeffs = _GRADIENT_COEFFICIENTS[accuracy]
    offsets = _GRADIENT_OFFSETS[accuracy]
    divisor = _GRADIENT_DIVISORS[accuracy]

    grad = np.zeros_like(x)
    evals = 0
    for d in range(x.size):
        total = 0.0
        for coeff, offset in zip(coeffs, offsets):
            xx = x.copy()
            xx[d] += offset * eps
            total += coeff * float(fun(xx))
            evals += 1
        grad[d] = total / (divisor * eps)
    if return_evals:
        return grad, evals
    return grad


def _mixed_difference(fun: Objective, x: Array, i: int, j: int, h: float) -> float:
    xx = x.copy()
    xx[i] += h
    xx[j] += h
    f_pp = float(fun(xx))
    xx = x.copy()
    xx[i] += h
    xx[j] -= h
    f_pm = float(fun(xx))
    xx = x.copy()
    xx[i] -= h
    xx[j] += h
    f_mp = float(fun(xx))
    xx = x.copy()
    xx[i] -= h
    xx[j] -= h
    f_mm = float(fun(xx))
    return (f_pp - f_pm - f_mp + f_mm) / (4.0 * h * h)


def _high_order_mixed(fun: Objective, x: Array, i: int, j: int, h: float) -> float:
    total = 0.0
    for weight, points in _HESSIAN_STENCIL:
        term = 0.0
        for di, dj, sign in points:
            xx = x.copy()
            xx[i] += di * h
            xx[j] += dj * h
            term += sign * float(fun(xx))
        total += weight * term
    return total / (_HESSIAN_DIVISOR * h * h)


def finite_hessian(
    fun: Objective,
    x: Array,
    accuracy: int = 0,
    config: FiniteDifferenceConfig | None = None,
    return_evals: bool = False,
) -> Array | tuple[Array, int]:
    """Approximate the Hessian of ``fun`` at ``x``.

    Every entry ``(i, j)`` is evaluated independently, so the result is only
    symmetric up to round-off. Accuracy 0 uses the four-point mixed
    difference; any higher accuracy uses the sixteen-point stencil.
    """
    accuracy = validate_accuracy(accuracy)
    config = DEFAULT_CONFIG if config is None else config
    x = _as_vector(x)
    h = config.hessian_step
    n = x.size

    if accuracy == 0:
        entry, per_entry = _mixed_difference, 4
    else:
        entry, per_entry = _high_order_mixed, 16

    hess = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(n):
            hess[i, j] = entry(fun, x, i, j, h)
    if return_evals:
        return hess, per_entry * n * n
    return hess


__all__ = [
    "ACCURACY_LEVELS",
    "Array",
    "DEFAULT_CONFIG",
    "FiniteDifferenceConfig",
    "GRADIENT_STEP",
    "HESSIAN_STEP",
    "Objective",
    "finite_gradient",
    "finite_hessian",
    "stencil",
    "validate_accuracy",
]
