"""
Singular value decomposition by the Golub-Reinsch algorithm.

Computes A = U diag(s) V^T for a real m x n matrix (m, n >= 2):

    1. householder_bidiagonalize(): A -> bidiagonal (d, e)
    2. accumulate_right() / accumulate_left(): reflections -> V, U
    3. diagonalize(): implicit-shift QR until e vanishes

Singular values come back non-negative but unordered; s[i] belongs to
column i of U and of V. U is m x n and V is n x n.

Also provides pinv_solve(), which applies a decomposition to one or more
right-hand sides through the truncated pseudo-inverse.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray

from pysvd.core.exceptions import AllocationError
from pysvd.core.compute.linalg.bidiagonal import (
    accumulate_left,
    accumulate_right,
    householder_bidiagonalize,
)
from pysvd.core.compute.linalg.diagonalize import diagonalize
from pysvd.core.compute.linalg.status import SVDStatus
from pysvd.core.compute.precision import MAX_ITERATIONS
from pysvd.core.compute.timing import Timer


@dataclass(frozen=True)
class SVDResult:
    """
    Result of the Golub-Reinsch decomposition.
    
    Attributes:
        s: Singular values (n,), non-negative, unordered
        U: Left factor (m x n), or None if not requested
        V: Right factor (n x n), or None if not requested
        anorm: Largest |d_i| + |e_i| of the bidiagonal form
        iterations: QR sweeps spent on each index (n,)
        status: OK, or NOT_CONVERGED with the first valid index
    """
    s: NDArray[np.floating[Any]]
    U: NDArray[np.floating[Any]] | None
    V: NDArray[np.floating[Any]] | None
    anorm: float
    iterations: NDArray[np.int_]
    status: SVDStatus


@contextmanager
def workspace(n: int) -> Iterator[NDArray[np.floating[Any]]]:
    """
    Scratch vector owned by a single kernel call.
    
    Nothing outside the with block keeps a reference to it, so it is
    dropped on every exit path, exceptions included.

    Raises:
        AllocationError: If the vector cannot be allocated
    """
    try:
        buffer = np.zeros(n, dtype=np.float64)
    except MemoryError as e:
        raise AllocationError(
            f"could not allocate workspace of {n} doubles", size=n
        ) from e
    yield buffer


def golub_reinsch(
    a: NDArray[np.floating[Any]],
    compute_u: bool = True,
    compute_v: bool = True,
    max_iterations: int = MAX_ITERATIONS,
    *,
    u: NDArray[np.floating[Any]] | None = None,
    v: NDArray[np.floating[Any]] | None = None,
    s: NDArray[np.floating[Any]] | None = None,
    timer: Timer | None = None,
) -> SVDResult:
    """
    Golub-Reinsch SVD of a validated 2-D float64 array.
    
    A is copied into the U working array first and never written
    afterwards. Passing u=a decomposes in place.
    
    Args:
        a: Matrix to decompose (m x n)
        compute_u: Return U. If False, the U array is scratch only.
        compute_v: Return V. If False, V is never touched.
        max_iterations: QR sweeps allowed per singular value
        u: Optional output/working array (m x n), may alias a
        v: Optional output array (n x n)
        s: Optional output array (n,)
        timer: Optional Timer receiving per-phase sections
        
    Returns:
        SVDResult. A convergence failure is reported in .status, not raised.
        
    Raises:
        AllocationError: If the workspace or an output array cannot be allocated
    """
    m, n = a.shape
    if timer is None:
        timer = Timer()
    
    try:
        work = np.empty((m, n), dtype=np.float64) if u is None else u
        if s is None:
            s = np.empty(n, dtype=np.float64)
        if compute_v and v is None:
            v = np.empty((n, n), dtype=np.float64)
    except MemoryError as e:
        raise AllocationError(f"could not allocate output arrays for a {m} x {n} matrix") from e
    
    with workspace(n) as e:
        work[...] = a
        
        with timer.section('bidiagonalization'):
            anorm = householder_bidiagonalize(work, s, e)
        
        with timer.section('accumulation'):
            if compute_v:
                accumulate_right(work, e, v)
            if compute_u:
                accumulate_left(work, s)
        
        with timer.section('diagonalization'):
            status, iterations = diagonalize(
                s,
                e,
                anorm,
                u=work if compute_u else None,
                v=v if compute_v else None,
                max_iterations=max_iterations,
            )
    
    return SVDResult(
        s=s,
        U=work if compute_u else None,
        V=v if compute_v else None,
        anorm=anorm,
        iterations=iterations,
        status=status,
    )


def pinv_solve(
    u: NDArray[np.floating[Any]],
    s: NDArray[np.floating[Any]],
    v: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    tolerance: float,
) -> NDArray[np.floating[Any]]:
    """
    Apply the truncated pseudo-inverse V diag(1/s) U^T to b.
    
    Components whose singular value is below tolerance contribute zero
    instead of being divided by a near-zero value. The result is the
    minimum-norm least-squares solution of A x = b.
    
    Args:
        u: Left factor (m x n)
        s: Singular values (n,), any order
        v: Right factor (n x n)
        b: Right-hand side (m,) or block of right-hand sides (m x k)
        tolerance: Positive cutoff for significant singular values
        
    Returns:
        x with shape (n,) or (n, k), matching b
        
    Raises:
        AllocationError: If the intermediate vector cannot be allocated
    """
    keep = s >= tolerance
    try:
        inverse = np.zeros_like(s)
        utb = u.T @ b
    except MemoryError as e:
        raise AllocationError(f"could not allocate solve workspace for n={s.shape[0]}") from e

    inverse[keep] = 1.0 / s[keep]
    if utb.ndim == 1:
        t = utb * inverse
    else:
        t = utb * inverse[:, np.newaxis]
    return v @ t
