"""Problem contract, finite differences and Armijo line searches.

Example
-------
>>> import numpy as np
>>> from numopt.optimize import Problem, linesearch
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> problem = Problem(fun=rosen, dim=2)
>>> x = np.array([-1.2, 1.0])
>>> direction = -problem.gradient(x)
>>> alpha = linesearch(x, direction, problem)
>>> bool(problem.value(x + alpha * direction) < problem.value(x))
True
"""

from .checks import (
    GRADIENT_CHECK_RTOL,
    HESSIAN_CHECK_RTOL,
    check_gradient,
    check_hessian,
    gradient_mismatch,
    hessian_mismatch,
)
from .core import (
    BoundedProblem,
    Criteria,
    ObjectiveLike,
    Problem,
    box_is_consistent,
)
from .finite_diff import (
    GRADIENT_STEP,
    HESSIAN_STEP,
    FiniteDifferenceConfig,
    finite_gradient,
    finite_hessian,
    stencil,
)
from .line_search import (
    ARMIJO_C,
    ARMIJO_RHO,
    ArmijoConfig,
    LineSearchFailed,
    armijo,
    armijo_second_order,
    linesearch,
)

__all__ = [
    "ARMIJO_C",
    "ARMIJO_RHO",
    "ArmijoConfig",
    "BoundedProblem",
    "Criteria",
    "FiniteDifferenceConfig",
    "GRADIENT_CHECK_RTOL",
    "GRADIENT_STEP",
    "HESSIAN_CHECK_RTOL",
    "HESSIAN_STEP",
    "LineSearchFailed",
    "ObjectiveLike",
    "Problem",
    "armijo",
    "armijo_second_order",
    "box_is_consistent",
    "check_gradient",
    "check_hessian",
    "finite_gradient",
    "finite_hessian",
    "gradient_mismatch",
    "hessian_mismatch",
    "linesearch",
    "stencil",
]
