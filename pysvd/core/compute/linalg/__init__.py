"""
Linear algebra kernels for pysvd.

This module holds the from-scratch Golub-Reinsch SVD and the
pseudo-inverse solve built on it.

All functions follow these conventions:
    - Kernels operate on validated float64 NumPy arrays
    - Each decomposition returns a structured result dataclass
    - Expected numerical outcomes (non-convergence) are reported in an
      SVDStatus; only allocation failures raise

Submodules:
    bidiagonal: Householder bidiagonalization and accumulation of U, V
    diagonalize: Implicit-shift QR on the bidiagonal form
    svd: Golub-Reinsch driver and pseudo-inverse solve
    buffers: Flat row-major buffers with an explicit leading dimension
    status: Discriminated call status
"""

from pysvd.core.compute.linalg.status import SVDStatus, StatusCode
from pysvd.core.compute.linalg.svd import SVDResult, golub_reinsch, pinv_solve
from pysvd.core.compute.linalg.buffers import (
    DecomposeOutput,
    SolveOutput,
    matrix_view,
    svd_decompose,
    svd_solve,
)

__all__ = [
    # Status
    "SVDStatus",
    "StatusCode",
    # Decomposition
    "SVDResult",
    "golub_reinsch",
    "pinv_solve",
    # Flat buffers
    "DecomposeOutput",
    "SolveOutput",
    "matrix_view",
    "svd_decompose",
    "svd_solve",
]
