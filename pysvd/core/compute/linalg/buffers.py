"""
Flat-buffer interface to the SVD kernels.

Mirrors the classic routine signatures: matrices are 1-D row-major
buffers with an explicit row stride (leading dimension) that may exceed
the logical column count, so a matrix can live inside a larger
allocation. Element (i, j) of any matrix is at i * leading_dim + j, and
A, U and V share one leading dimension.

These functions never raise for bad input, allocation failure or
non-convergence; they report it in the returned SVDStatus and leave the
caller's buffers untouched (input errors) or in a documented partial state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.lib.stride_tricks import as_strided
from numpy.typing import NDArray

from pysvd.core.exceptions import AllocationError
from pysvd.core.validation import MIN_DIMENSION
from pysvd.core.compute.linalg.status import SVDStatus
from pysvd.core.compute.linalg.svd import golub_reinsch, pinv_solve
from pysvd.core.compute.precision import MAX_ITERATIONS


@dataclass(frozen=True)
class DecomposeOutput:
    """
    Outcome of svd_decompose().
    
    Attributes:
        singular_values: The filled singular value buffer (n,), or None on
                         input or allocation errors
        u: The caller's U buffer, or None if U was not requested
        v: The caller's V buffer, or None if V was not requested
        status: What happened
    """
    singular_values: NDArray[np.floating[Any]] | None
    u: NDArray[np.floating[Any]] | None
    v: NDArray[np.floating[Any]] | None
    status: SVDStatus


@dataclass(frozen=True)
class SolveOutput:
    """Outcome of svd_solve(); x is None unless status is OK."""
    x: NDArray[np.floating[Any]] | None
    status: SVDStatus


def matrix_view(
    buffer: NDArray[np.floating[Any]],
    rows: int,
    cols: int,
    leading_dim: int,
) -> NDArray[np.floating[Any]]:
    """
    2-D view of a flat row-major buffer with row stride leading_dim.
    
    Writes through the view land in the buffer. The caller must have
    checked that the buffer holds (rows - 1) * leading_dim + cols elements.
    """
    step = buffer.strides[0]
    return as_strided(
        buffer,
        shape=(rows, cols),
        strides=(leading_dim * step, step),
        writeable=buffer.flags.writeable,
    )


def _required_length(rows: int, cols: int, leading_dim: int) -> int:
    return (rows - 1) * leading_dim + cols


def _check_buffer(
    buffer: Any,
    name: str,
    required: int,
    writable: bool = False,
) -> str | None:
    """Return an error message, or None if the buffer is usable."""
    if buffer is None:
        return f"{name}: required, got None"
    if not isinstance(buffer, np.ndarray) or buffer.dtype != np.float64 or buffer.ndim != 1:
        return f"{name}: expected a 1-D float64 ndarray"
    if buffer.shape[0] < required:
        return f"{name}: needs at least {required} elements, got {buffer.shape[0]}"
    if writable and not buffer.flags.writeable:
        return f"{name}: buffer is read-only"
    return None


def _check_shape(m: int, n: int, leading_dim: int) -> str | None:
    if m < MIN_DIMENSION or n < MIN_DIMENSION:
        return f"m, n: both must be at least {MIN_DIMENSION}, got m={m}, n={n}"
    if leading_dim < max(m, n):
        return f"leading_dim: must be at least max(m, n) = {max(m, n)}, got {leading_dim}"
    return None


def svd_decompose(
    m: int,
    n: int,
    leading_dim: int,
    a: NDArray[np.floating[Any]],
    compute_u: bool,
    compute_v: bool,
    *,
    u: NDArray[np.floating[Any]] | None = None,
    v: NDArray[np.floating[Any]] | None = None,
    singular_values: NDArray[np.floating[Any]] | None = None,
    max_iterations: int = MAX_ITERATIONS,
) -> DecomposeOutput:
    """
    Decompose the m x n matrix stored in the flat buffer a.
    
    The working copy of A is built in u. A u buffer is required when
    compute_u is True. Otherwise u is optional scratch whose contents are
    unspecified on return, and a private buffer is used if it is omitted.
    Pass u=a to decompose in place. v is only referenced when compute_v
    is True.
    
    Args:
        m: Rows of A and U
        n: Columns of A and U, order of V
        leading_dim: Row stride shared by a, u and v, >= max(m, n)
        a: Input buffer, at least (m - 1) * leading_dim + n elements
        compute_u: Fill u with the left singular vectors
        compute_v: Fill v with the right singular vectors
        u: Output/working buffer, same layout as a (may be a itself)
        v: Output buffer, at least (n - 1) * leading_dim + n elements
        singular_values: Output buffer of at least n elements
        max_iterations: QR sweeps allowed per singular value
        
    Returns:
        DecomposeOutput. On NOT_CONVERGED, status.index is the first
        index whose singular value and U/V columns are final.
    """
    message = _check_shape(m, n, leading_dim)
    if message is None:
        message = _check_buffer(a, 'a', _required_length(m, n, leading_dim))
    if message is None and (compute_u or u is not None):
        message = _check_buffer(u, 'u', _required_length(m, n, leading_dim), writable=True)
    if message is None and compute_v:
        message = _check_buffer(v, 'v', _required_length(n, n, leading_dim), writable=True)
    if message is None and singular_values is not None:
        message = _check_buffer(singular_values, 'singular_values', n, writable=True)
    if message is None and (
        isinstance(max_iterations, bool)
        or not isinstance(max_iterations, (int, np.integer))
        or max_iterations < 0
    ):
        message = f"max_iterations: must be a non-negative integer, got {max_iterations!r}"
    if message is not None:
        return DecomposeOutput(None, None, None, SVDStatus.invalid_input(message))
    
    a_view = matrix_view(a, m, n, leading_dim)
    u_view = None if u is None else matrix_view(u, m, n, leading_dim)
    v_view = matrix_view(v, n, n, leading_dim) if compute_v else None
    s_view = None if singular_values is None else singular_values[:n]
    
    try:
        result = golub_reinsch(
            a_view,
            compute_u,
            compute_v,
            max_iterations,
            u=u_view,
            v=v_view,
            s=s_view,
        )
    except AllocationError as e:
        return DecomposeOutput(None, None, None, SVDStatus.allocation_failed(str(e)))
    
    return DecomposeOutput(
        singular_values=result.s,
        u=u if compute_u else None,
        v=v if compute_v else None,
        status=result.status,
    )


def svd_solve(
    m: int,
    n: int,
    leading_dim: int,
    u: NDArray[np.floating[Any]],
    singular_values: NDArray[np.floating[Any]],
    v: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    tolerance: float,
    *,
    x: NDArray[np.floating[Any]] | None = None,
) -> SolveOutput:
    """
    Solve A x = b from a decomposition held in flat buffers.
    
    Computes x = V diag(1/s) U^T b, treating singular values below
    tolerance as zero. u, singular_values, v and b are only read.
    
    Args:
        m, n, leading_dim: As for svd_decompose()
        u: Left factor buffer as filled by svd_decompose()
        singular_values: At least n singular values
        v: Right factor buffer as filled by svd_decompose()
        b: Right-hand side, at least m elements
        tolerance: Positive cutoff for significant singular values
        x: Optional output buffer of at least n elements
        
    Returns:
        SolveOutput; x is written only when the status is OK.
    """
    message = _check_shape(m, n, leading_dim)
    if message is None:
        message = _check_buffer(u, 'u', _required_length(m, n, leading_dim))
    if message is None:
        message = _check_buffer(singular_values, 'singular_values', n)
    if message is None:
        message = _check_buffer(v, 'v', _required_length(n, n, leading_dim))
    if message is None:
        message = _check_buffer(b, 'b', m)
    if message is None and x is not None:
        message = _check_buffer(x, 'x', n, writable=True)
    if message is None and not (tolerance > 0.0):
        message = f"tolerance: must be positive, got {tolerance!r}"
    if message is not None:
        return SolveOutput(None, SVDStatus.invalid_input(message))
    
    try:
        solution = pinv_solve(
            matrix_view(u, m, n, leading_dim),
            singular_values[:n],
            matrix_view(v, n, n, leading_dim),
            b[:m],
            tolerance,
        )
    except AllocationError as e:
        return SolveOutput(None, SVDStatus.allocation_failed(str(e)))
    
    if x is None:
        x = solution
    else:
        x[:n] = solution
    return SolveOutput(x, SVDStatus.success())
