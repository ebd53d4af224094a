"""Core interfaces shared across optimization routines.

A :class:`Problem` bundles a scalar objective with optional analytic
derivatives. Missing derivatives fall back to the finite-difference engine, so
every problem exposes the same ``value`` / ``gradient`` / ``hessian``
capability regardless of what the user supplied. Box constraints are carried
as metadata only; enforcing them is up to a bound-aware solver.
"""

from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np

from .checks import (
    GRADIENT_CHECK_RTOL,
    HESSIAN_CHECK_RTOL,
    check_gradient,
    check_hessian,
)
from .finite_diff import Array, FiniteDifferenceConfig, Objective, finite_gradient, finite_hessian

Gradient = Callable[[Array], Array]
Hessian = Callable[[Array], Array]


@dataclass
class Criteria:
    """Progress record handed from a solver to :meth:`Problem.callback`.

    The optimization core never inspects it; solvers fill in whatever they
    track.
    """

    iterations: int = 0
    x_delta: float = 0.0
    f_delta: float = 0.0
    grad_norm: float = 0.0
    condition: float = 0.0


Callback = Callable[[Criteria, Array], bool]


@runtime_checkable
class ObjectiveLike(Protocol):
    """Capability set consumed by line searches and derivative checks."""

    def value(self, x: Array) -> float:
        ...

    def gradient(self, x: Array) -> Array:
        ...

    def hessian(self, x: Array) -> Array:
        ...


def _as_bound(vec: Array, name: str) -> Array:
    vec = np.array(vec, dtype=float)
    if vec.ndim != 1:
        raise ValueError(f"{name} must be a 1D vector, got shape {vec.shape}")
    return vec


def box_is_consistent(lower: Array, upper: Array) -> bool:
    """Return True if ``lower <= upper`` holds componentwise.

    Raises ``ValueError`` when the two vectors have different shapes.
    """
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    if lower.shape != upper.shape:
        raise ValueError(
            f"bound vectors differ in shape: {lower.shape} vs {upper.shape}"
        )
    return bool(np.all(lower <= upper))


@dataclass
class Problem:
    """Objective function with optional analytic derivatives.

    Attributes:
        fun: Objective returning a scalar for a 1D vector.
        grad: Optional analytic gradient. Finite differences (accuracy 0) are
            used when omitted.
        hess: Optional analytic Hessian. Finite differences (accuracy 0) are
            used when omitted.
        dim: Optional dimension. When set, every point and bound vector is
            checked against it.
        on_iteration: Optional hook called by :meth:`callback`.
        fd_config: Step sizes for the finite-difference fallback.
    """

    fun: Objective
    grad: Optional[Gradient] = None
    hess: Optional[Hessian] = None
    dim: Optional[int] = None
    on_iteration: Optional[Callback] = None
    fd_config: Optional[FiniteDifferenceConfig] = None
    _lower: Optional[Array] = field(default=None, init=False, repr=False, compare=False)
    _upper: Optional[Array] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.dim is not None:
            if isinstance(self.dim, bool) or int(self.dim) != self.dim or self.dim <= 0:
                raise ValueError(f"dim must be a positive integer, got {self.dim!r}")
            self.dim = int(self.dim)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def _as_point(self, x: Array) -> Array:
        x = np.asarray(x, dtype=float)
        if x.ndim != 1:
            raise ValueError(f"x must be a 1D vector, got shape {x.shape}")
        if self.dim is not None and x.size != self.dim:
            raise ValueError(f"x has length {x.size}, problem dimension is {self.dim}")
        return x

    def value(self, x: Array) -> float:
        """Objective value at ``x``."""
        return float(self.fun(self._as_point(x)))

    def __call__(self, x: Array) -> float:
        return self.value(x)

    def gradient(self, x: Array) -> Array:
        """Gradient at ``x``; analytic if supplied, else finite differences."""
        x = self._as_point(x)
        if self.grad is None:
            return finite_gradient(self.value, x, accuracy=0, config=self.fd_config)
        grad = np.asarray(self.grad(x), dtype=float)
        if grad.shape != x.shape:
            raise ValueError(f"gradient has shape {grad.shape}, expected {x.shape}")
        return grad

    def hessian(self, x: Array) -> Array:
        """Hessian at ``x``; analytic if supplied, else finite differences."""
        x = self._as_point(x)
        if self.hess is None:
            return finite_hessian(self.value, x, accuracy=0, config=self.fd_config)
        hess = np.asarray(self.hess(x), dtype=float)
        if hess.shape != (x.size, x.size):
            raise ValueError(
                f"hessian has shape {hess.shape}, expected {(x.size, x.size)}"
            )
        return hess

    def finite_gradient(self, x: Array, accuracy: int = 0) -> Array:
        return finite_gradient(
            self.value, self._as_point(x), accuracy=accuracy, config=self.fd_config
        )

    def finite_hessian(self, x: Array, accuracy: int = 0) -> Array:
        return finite_hessian(
            self.value, self._as_point(x), accuracy=accuracy, config=self.fd_config
        )

    def callback(self, state: Criteria, x: Array) -> bool:
        """Per-iteration hook for solvers. Returning False requests a stop."""
        if self.on_iteration is None:
            return True
        return bool(self.on_iteration(state, x))

    # ------------------------------------------------------------------
    # Derivative checks
    # ------------------------------------------------------------------
    def check_gradient(self, x: Array, accuracy: int = 3) -> bool:
        """Compare :meth:`gradient` with a finite-difference gradient."""
        return check_gradient(
            self,
            self._as_point(x),
            accuracy=accuracy,
            rtol=GRADIENT_CHECK_RTOL,
            config=self.fd_config,
        )

    def check_hessian(self, x: Array, accuracy: int = 3) -> bool:
        """Compare :meth:`hessian` with a finite-difference Hessian."""
        return check_hessian(
            self,
            self._as_point(x),
            accuracy=accuracy,
            rtol=HESSIAN_CHECK_RTOL,
            config=self.fd_config,
        )

    # ------------------------------------------------------------------
    # Bounds
    # ------------------------------------------------------------------
    def _validate_bound(self, vec: Array, name: str) -> Array:
        vec = _as_bound(vec, name)
        if self.dim is not None and vec.size != self.dim:
            raise ValueError(f"{name} has length {vec.size}, problem dimension is {self.dim}")
        return vec

    def _adopt_dim(self, size: int) -> None:
        if self.dim is None:
            self.dim = size

    def set_lower_bound(self, lower: Array) -> None:
        lower = self._validate_bound(lower, "lower bound")
        self._adopt_dim(lower.size)
        self._lower = lower

    def set_upper_bound(self, upper: Array) -> None:
        upper = self._validate_bound(upper, "upper bound")
        self._adopt_dim(upper.size)
        self._upper = upper

    def set_box_constraint(self, lower: Array, upper: Array) -> None:
        """Replace both bounds; nothing is assigned if either is invalid."""
        lower = self._validate_bound(lower, "lower bound")
        upper = self._validate_bound(upper, "upper bound")
        if lower.shape != upper.shape:
            raise ValueError(
                f"bound vectors differ in shape: {lower.shape} vs {upper.shape}"
            )
        self._adopt_dim(lower.size)
        self._lower = lower
        self._upper = upper

    def has_lower_bound(self) -> bool:
        return self._lower is not None

    def has_upper_bound(self) -> bool:
        return self._upper is not None

    def _unset_bound(self, fill: float) -> Array:
        if self.dim is None:
            raise ValueError("bound is unset and the problem dimension is unknown")
        return np.full(self.dim, fill)

    def lower_bound(self) -> Array:
        """Lower bound vector; ``-inf`` everywhere when unset."""
        if self._lower is None:
            return self._unset_bound(-np.inf)
        return self._lower.copy()

    def upper_bound(self) -> Array:
        """Upper bound vector; ``+inf`` everywhere when unset."""
        if self._upper is None:
            return self._unset_bound(np.inf)
        return self._upper.copy()

    def check_box_constraint(self) -> bool:
        """Return True if the current bounds satisfy ``lower <= upper``."""
        return box_is_consistent(self.lower_bound(), self.upper_bound())


@dataclass
class BoundedProblem(Problem):
    """Problem that always carries a lower and an upper bound vector.

    Bounds default to ``-inf`` / ``+inf`` so unconstrained and bounded problems
    are interchangeable. ``dim`` may be omitted when a bound is given.
    Ordering of the bounds is not enforced; see :meth:`check_box_constraint`.
    """

    lower: InitVar[Optional[Array]] = None
    upper: InitVar[Optional[Array]] = None

    def __post_init__(self, lower: Optional[Array], upper: Optional[Array]) -> None:
        if self.dim is None:
            given = lower if lower is not None else upper
            if given is None:
                raise ValueError("BoundedProblem needs dim or a bound vector")
            self.dim = int(np.asarray(given).size)
        super().__post_init__()
        lb = np.full(self.dim, -np.inf) if lower is None else lower
        ub = np.full(self.dim, np.inf) if upper is None else upper
        self.set_box_constraint(lb, ub)


__all__ = [
    "BoundedProblem",
    "Callback",
    "Criteria",
    "Gradient",
    "Hessian",
    "ObjectiveLike",
    "Problem",
    "box_is_consistent",
]
