"""Ready-made objectives: classic benchmark functions and regression losses."""

from .benchmark_functions import quadratic_problem, rosenbrock_problem
from .regression import (
    linear_regression_problem,
    logistic_regression_problem,
    nonnegative_least_squares_problem,
)

__all__ = [
    "linear_regression_problem",
    "logistic_regression_problem",
    "nonnegative_least_squares_problem",
    "quadratic_problem",
    "rosenbrock_problem",
]
