"""Pytest configuration and shared fixtures for numopt tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Shared objectives used across the optimize test modules
"""

import os

import numpy as np
import pytest
import torch


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture
def spd_matrix() -> np.ndarray:
    """Well-conditioned symmetric positive-definite 3x3 matrix."""
    return np.array(
        [
            [4.0, 1.0, 0.5],
            [1.0, 3.0, 0.2],
            [0.5, 0.2, 2.0],
        ]
    )
