"""
Input validation utilities for pysvd.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pysvd.core.exceptions import ValidationError, DimensionError


# Smallest row and column count the Golub-Reinsch kernel accepts
MIN_DIMENSION = 2


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.
    
    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data)
    and complex input, which the real-valued kernels cannot represent.
    
    Args:
        array: Input to validate
        name: Parameter name for error messages
        
    Returns:
        numpy.ndarray with float64 dtype
        
    Raises:
        ValidationError: If input cannot be converted to a real numeric array
    """
    if array is None:
        raise ValidationError(f"{name}: required, got None")
    
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e
    
    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: complex dtype {result.dtype}, expected real data"
        )

    # The kernels work in double precision throughout
    if result.dtype != np.float64:
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.
    
    Args:
        array: Array to check
        name: Parameter name for error messages
        
    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.
    
    Args:
        array: Array to check
        ndim: Required number of dimensions
        name: Parameter name for error messages
        
    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_matrix_shape(m: int, n: int, name: str) -> None:
    """
    Verify a matrix has at least MIN_DIMENSION rows and columns.
    
    Args:
        m: Row count
        n: Column count
        name: Parameter name for error messages
        
    Raises:
        DimensionError: If either dimension is below MIN_DIMENSION
    """
    if m < MIN_DIMENSION or n < MIN_DIMENSION:
        raise DimensionError(
            f"{name}: requires at least {MIN_DIMENSION} rows and "
            f"{MIN_DIMENSION} columns, got shape ({m}, {n})"
        )


def check_leading_dim(leading_dim: int, m: int, n: int) -> None:
    """
    Verify a row stride can hold an m x n matrix and its n x n partner.
    
    Args:
        leading_dim: Row stride of the flat buffers
        m: Row count
        n: Column count
        
    Raises:
        DimensionError: If leading_dim < max(m, n)
    """
    if leading_dim < max(m, n):
        raise DimensionError(
            f"leading_dim: must be at least max(m, n) = {max(m, n)}, got {leading_dim}"
        )


def check_positive(value: float, name: str) -> None:
    """
    Verify a scalar is strictly positive and finite.
    
    Raises:
        ValidationError: If value is not a number or is not positive and finite
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ValidationError(f"{name}: expected a number, got {type(value).__name__}")
    if not np.isfinite(value) or value <= 0.0:
        raise ValidationError(f"{name}: must be a positive finite number, got {value!r}")


def check_non_negative_int(value: int, name: str) -> None:
    """
    Verify a value is a non-negative integer (bool excluded).
    
    Raises:
        ValidationError: If value is not an int or is negative
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
        raise ValidationError(f"{name}: must be a non-negative integer, got {value!r}")
