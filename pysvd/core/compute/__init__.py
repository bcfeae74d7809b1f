"""
Shared compute infrastructure for pysvd.

This module provides timing utilities, precision constants, and the linear
algebra kernels that the domain-specific backends build on.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    precision: Machine epsilon, default cutoffs, iteration cap
    tolerances: Tolerance tiers for validating decompositions
    linalg: Golub-Reinsch SVD and pseudo-inverse solve
"""

from pysvd.core.compute.timing import Timer

__all__ = [
    # Timing
    "Timer",
]
