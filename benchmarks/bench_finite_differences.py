"""Benchmark finite-difference derivatives across accuracy levels."""

import time
from typing import Dict

import numpy as np

from numopt.optimize.finite_diff import finite_gradient, finite_hessian


def _rosenbrock_nd(x: np.ndarray) -> float:
    return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))


def benchmark_finite_gradient(dim: int, accuracy: int, repeats: int = 20) -> Dict[str, float]:
    """Benchmark the finite-difference gradient.

    Args:
        dim: Problem dimension.
        accuracy: Stencil accuracy level (0-3).
        repeats: Number of timed gradient evaluations.

    Returns:
        Dictionary with timing results and evaluation counts.
    """
    x = np.linspace(-1.0, 1.0, dim)

    # Warmup
    _, evals = finite_gradient(_rosenbrock_nd, x, accuracy=accuracy, return_evals=True)

    start = time.perf_counter()
    for _ in range(repeats):
        finite_gradient(_rosenbrock_nd, x, accuracy=accuracy)
    end = time.perf_counter()

    total_time = end - start
    return {
        "dim": dim,
        "accuracy": accuracy,
        "evals_per_call": evals,
        "time_per_call_sec": total_time / repeats,
    }


def benchmark_finite_hessian(dim: int, accuracy: int, repeats: int = 5) -> Dict[str, float]:
    """Benchmark the finite-difference Hessian (cost grows with dim**2)."""
    x = np.linspace(-1.0, 1.0, dim)
    _, evals = finite_hessian(_rosenbrock_nd, x, accuracy=accuracy, return_evals=True)

    start = time.perf_counter()
    for _ in range(repeats):
        finite_hessian(_rosenbrock_nd, x, accuracy=accuracy)
    end = time.perf_counter()

    return {
        "dim": dim,
        "accuracy": accuracy,
        "evals_per_call": evals,
        "time_per_call_sec": (end - start) / repeats,
    }


if __name__ == "__main__":
    print("Benchmarking finite-difference gradients...")
    for accuracy in range(4):
        results = benchmark_finite_gradient(dim=100, accuracy=accuracy)
        print(f"Gradient (dim 100, accuracy {accuracy}):")
        print(f"  Evaluations per call: {results['evals_per_call']}")
        print(f"  Time per call: {results['time_per_call_sec']*1e3:.2f} ms")

    print("Benchmarking finite-difference Hessians...")
    for accuracy in (0, 1):
        results = benchmark_finite_hessian(dim=20, accuracy=accuracy)
        print(f"Hessian (dim 20, accuracy {accuracy}):")
        print(f"  Evaluations per call: {results['evals_per_call']}")
        print(f"  Time per call: {results['time_per_call_sec']*1e3:.2f} ms")
