"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def tall_matrix(rng):
    """Random 6 x 4 matrix (m > n)."""
    return rng.standard_normal((6, 4))


@pytest.fixture
def square_matrix(rng):
    """Random 5 x 5 matrix."""
    return rng.standard_normal((5, 5))


@pytest.fixture
def wide_matrix(rng):
    """Random 3 x 5 matrix (m < n)."""
    return rng.standard_normal((3, 5))


@pytest.fixture
def graded_matrix(rng):
    """Rows scaled from 1e-8 to 1e8: a badly scaled but exact input."""
    A = rng.standard_normal((5, 4))
    scales = np.array([1e-8, 1e-4, 1.0, 1e4, 1e8])
    return A * scales[:, np.newaxis]


@pytest.fixture
def rank_deficient_matrix(rng):
    """6 x 4 matrix of rank 2."""
    return rng.standard_normal((6, 2)) @ rng.standard_normal((2, 4))


@pytest.fixture
def split_block_matrix():
    """
    4 x 4 matrix whose last row and column are decoupled.

    The trailing 5.0 deflates without a single QR sweep while the dense
    3 x 3 block needs several, so max_iterations=0 fails at index 2 with
    index 3 already final.
    """
    A = np.zeros((4, 4))
    A[:3, :3] = [
        [4.0, 1.0, 2.0],
        [1.0, 3.0, 0.5],
        [2.0, 0.5, 5.0],
    ]
    A[3, 3] = 5.0
    return A


@pytest.fixture
def flatten():
    """Build a row-major flat buffer holding A with a given row stride."""
    def _flatten(A, leading_dim, fill=0.0):
        m, n = A.shape
        buffer = np.full((m - 1) * leading_dim + n, fill)
        for i in range(m):
            buffer[i * leading_dim:i * leading_dim + n] = A[i]
        return buffer
    return _flatten
