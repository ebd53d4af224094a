"""numopt - derivative-based building blocks for local minimization."""

__version__ = "0.1.0"

from .logging import configure_logging, get_logger, set_log_level
from .optimize import (
    ArmijoConfig,
    BoundedProblem,
    Criteria,
    FiniteDifferenceConfig,
    LineSearchFailed,
    ObjectiveLike,
    Problem,
    armijo,
    armijo_second_order,
    box_is_consistent,
    check_gradient,
    check_hessian,
    finite_gradient,
    finite_hessian,
    linesearch,
)

__all__ = [
    "ArmijoConfig",
    "BoundedProblem",
    "Criteria",
    "FiniteDifferenceConfig",
    "LineSearchFailed",
    "ObjectiveLike",
    "Problem",
    "__version__",
    "armijo",
    "armijo_second_order",
    "box_is_consistent",
    "check_gradient",
    "check_hessian",
    "configure_logging",
    "finite_gradient",
    "finite_hessian",
    "get_logger",
    "linesearch",
    "set_log_level",
]
