"""
Exception hierarchy for pysvd.

All exceptions inherit from PySVDError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

from __future__ import annotations

from typing import Any


class PySVDError(Exception):
    """Base exception for all pysvd errors."""
    pass


class ValidationError(PySVDError):
    """
    Input validation failed.
    
    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    
    Raised when array shapes don't match expected dimensions, when a
    leading dimension is too small for the logical matrix, or when a flat
    buffer is too short to hold it.
    """
    pass


class NumericalError(PySVDError):
    """
    Numerical computation failed.
    
    Base class for errors arising from numerical issues during computation.
    """
    pass


class AllocationError(PySVDError):
    """
    Workspace allocation failed.
    
    Raised when the scratch vector needed by the decomposition or the
    solver cannot be allocated. No caller buffer has been written past
    the initial copy of A.
    
    Attributes:
        size: Number of float64 elements requested
    """
    
    def __init__(self, message: str, size: int | None = None):
        super().__init__(message)
        self.size = size


class ConvergenceError(PySVDError):
    """
    Iterative algorithm failed to converge.
    
    Raised when the implicit-shift QR phase fails to deflate a singular
    value within the maximum number of iterations.
    
    Attributes:
        iterations: Iteration cap that was exhausted, or None if unknown
        index: First index whose singular value (and U/V columns) is valid,
               or None when the backend cannot tell
        failed_index: Index of the singular value that did not converge
        partial: The partially diagonalized decomposition, if available
    """
    
    def __init__(
        self, 
        message: str, 
        iterations: int | None = None, 
        index: int | None = None,
        partial: Any | None = None,
    ):
        super().__init__(message)
        self.iterations = iterations
        self.index = index
        self.partial = partial
    
    @property
    def failed_index(self) -> int | None:
        if self.index is None:
            return None
        return self.index - 1
