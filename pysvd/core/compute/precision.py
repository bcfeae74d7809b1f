"""
Numerical precision constants and utilities.

Provides machine epsilon and the default singular-value cutoff shared by
the kernels and the solvers.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any


# Machine epsilon for float64
EPSILON_64: float = float(np.finfo(np.float64).eps)  # ~2.22e-16

# QR sweeps allowed per singular value before giving up
MAX_ITERATIONS: int = 30


def default_tolerance(
    singular_values: NDArray[np.floating[Any]],
    shape: tuple[int, int],
) -> float:
    """
    Cutoff below which singular values are treated as zero.
    
    Uses max(m, n) * eps * max(s), the same rule as LAPACK-based rank
    estimates. Falls back to the smallest positive double for an all-zero
    spectrum so that the result is always a valid (positive) tolerance.
    
    Args:
        singular_values: Singular values, in any order
        shape: (m, n) of the decomposed matrix
        
    Returns:
        Positive tolerance
    """
    s_max = float(np.max(singular_values)) if singular_values.size else 0.0
    tol = max(shape) * EPSILON_64 * s_max
    if tol <= 0.0:
        return float(np.finfo(np.float64).tiny)
    return tol


def condition_number(singular_values: NDArray[np.floating[Any]]) -> float:
    """
    Ratio of largest to smallest singular value.
    
    Args:
        singular_values: Singular values, in any order
        
    Returns:
        Condition number, or inf if the smallest singular value is zero.
    """
    s_min = float(np.min(singular_values))
    if s_min == 0.0:
        return float(np.inf)
    return float(np.max(singular_values)) / s_min
