"""
Core infrastructure for pysvd.

This module provides shared abstractions, utilities, and numeric kernels
used by the domain-specific submodules (decomposition, lstsq).

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, precision, Golub-Reinsch kernels
"""

from pysvd.core.protocols import Backend
from pysvd.core.result import Result
from pysvd.core.exceptions import (
    PySVDError,
    ValidationError,
    DimensionError,
    NumericalError,
    AllocationError,
    ConvergenceError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PySVDError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "AllocationError",
    "ConvergenceError",
]
