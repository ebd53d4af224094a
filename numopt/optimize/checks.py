"""Consistency checks between supplied and finite-difference derivatives.

The checks are diagnostic queries: a mismatch is reported as ``False`` and
logged, never raised. They are meant for validating hand-written derivatives
and are not part of the optimization hot path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from numopt.logging import get_logger

from .finite_diff import Array, FiniteDifferenceConfig, finite_gradient, finite_hessian

if TYPE_CHECKING:
    from .core import ObjectiveLike

logger = get_logger(__name__)

GRADIENT_CHECK_RTOL = 1e-2
HESSIAN_CHECK_RTOL = 1e-1


def _mismatch(actual: Array, expected: Array, rtol: float) -> Array:
    """Boolean mask of entries failing ``|a - e| <= rtol * max(|a|, |e|, 1)``.

    NaN entries fail the comparison and are therefore reported.
    """
    scale = np.maximum(np.maximum(np.abs(actual), np.abs(expected)), 1.0)
    ok = np.abs(actual - expected) <= rtol * scale
    return ~ok


def gradient_mismatch(
    problem: "ObjectiveLike",
    x: Array,
    accuracy: int = 3,
    rtol: float = GRADIENT_CHECK_RTOL,
    config: FiniteDifferenceConfig | None = None,
) -> list[int]:
    """Return the coordinates where ``problem.gradient`` disagrees with finite differences."""
    x = np.asarray(x, dtype=float)
    actual = np.asarray(problem.gradient(x), dtype=float)
    expected = finite_gradient(problem.value, x, accuracy=accuracy, config=config)
    if actual.shape != expected.shape:
        raise ValueError(
            f"gradient has shape {actual.shape}, expected {expected.shape}"
        )
    bad = [int(d) for d in np.flatnonzero(_mismatch(actual, expected, rtol))]
    for d in bad:
        logger.warning(
            "gradient mismatch at coordinate %d: supplied %.6g, finite difference %.6g",
            d,
            actual[d],
            expected[d],
        )
    return bad


def hessian_mismatch(
    problem: "ObjectiveLike",
    x: Array,
    accuracy: int = 3,
    rtol: float = HESSIAN_CHECK_RTOL,
    config: FiniteDifferenceConfig | None = None,
) -> list[tuple[int, int]]:
    """Return the ``(i, j)`` entries where ``problem.hessian`` disagrees with finite differences."""
    x = np.asarray(x, dtype=float)
    actual = np.asarray(problem.hessian(x), dtype=float)
    expected = finite_hessian(problem.value, x, accuracy=accuracy, config=config)
    if actual.shape != expected.shape:
        raise ValueError(
            f"hessian has shape {actual.shape}, expected {expected.shape}"
        )
    rows, cols = np.nonzero(_mismatch(actual, expected, rtol))
    bad = [(int(i), int(j)) for i, j in zip(rows, cols)]
    for i, j in bad:
        logger.warning(
            "hessian mismatch at entry (%d, %d): supplied %.6g, finite difference %.6g",
            i,
            j,
            actual[i, j],
            expected[i, j],
        )
    return bad


def check_gradient(
    problem: "ObjectiveLike",
    x: Array,
    accuracy: int = 3,
    rtol: float = GRADIENT_CHECK_RTOL,
    config: FiniteDifferenceConfig | None = None,
) -> bool:
    """Return True if the supplied gradient matches finite differences at ``x``."""
    return not gradient_mismatch(problem, x, accuracy=accuracy, rtol=rtol, config=config)


def check_hessian(
    problem: "ObjectiveLike",
    x: Array,
    accuracy: int = 3,
    rtol: float = HESSIAN_CHECK_RTOL,
    config: FiniteDifferenceConfig | None = None,
) -> bool:
    """Return True if the supplied Hessian matches finite differences at ``x``."""
    return not hessian_mismatch(problem, x, accuracy=accuracy, rtol=rtol, config=config)


__all__ = [
    "GRADIENT_CHECK_RTOL",
    "HESSIAN_CHECK_RTOL",
    "check_gradient",
    "check_hessian",
    "gradient_mismatch",
    "hessian_mismatch",
]
