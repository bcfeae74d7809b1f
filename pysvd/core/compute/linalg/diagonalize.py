"""
Implicit-shift QR diagonalization of an upper bidiagonal matrix.

Phase 3 of the Golub-Reinsch SVD. For each index k from the bottom up the
driver repeats

    split test -> (cancellation) -> converged?  -> next k
                                 -> QR sweep    -> split test again

until d[k] deflates or the iteration cap is reached. Each phase is its own
function; the split test reports a SplitOutcome that drives the loop.

Scalars are processed as Python floats on list copies of d and e; the
lists are written back on every exit so that a partial result is visible
to the caller after a convergence failure.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pysvd.core.compute.linalg.bidiagonal import sign_of
from pysvd.core.compute.linalg.status import SVDStatus
from pysvd.core.compute.precision import MAX_ITERATIONS


class SplitOutcome(Enum):
    CONVERGED = 'converged'
    NEEDS_CANCELLATION = 'needs_cancellation'
    NEEDS_SHIFT = 'needs_shift'


def _negligible(value: float, anorm: float) -> bool:
    return abs(value) + anorm == anorm


def _rotate(mat: NDArray[np.floating[Any]], p: int, q: int, c: float, s: float) -> None:
    """Apply a Givens rotation to columns p and q of mat."""
    col_p = mat[:, p].copy()
    col_q = mat[:, q]
    mat[:, p] = col_p * c + col_q * s
    mat[:, q] = col_q * c - col_p * s


def split_test(d: list[float], e: list[float], anorm: float, k: int) -> tuple[int, SplitOutcome]:
    """
    Find the top l of the unreduced block ending at k.
    
    Scans upwards from k. Stops at the first l whose coupling e[l] is
    negligible (the block splits there) or whose predecessor d[l-1] is
    negligible (e[l] must first be chased out by cancel()).
    
    Returns:
        (l, outcome). CONVERGED means l == k with no cancellation needed.
    """
    for l in range(k, -1, -1):
        # e[0] is always zero, so the scan never runs past the top
        if l == 0 or _negligible(e[l], anorm):
            break
        if _negligible(d[l - 1], anorm):
            return l, SplitOutcome.NEEDS_CANCELLATION
    if l == k:
        return l, SplitOutcome.CONVERGED
    return l, SplitOutcome.NEEDS_SHIFT


def cancel(
    d: list[float],
    e: list[float],
    anorm: float,
    l: int,
    k: int,
    u: NDArray[np.floating[Any]] | None,
) -> SplitOutcome:
    """
    Zero e[l] when d[l-1] is negligible.
    
    A chain of left rotations between row l-1 and rows l..k pushes the
    unwanted element down the superdiagonal until it falls below anorm
    precision. The rotations are accumulated into U when given.
    
    Returns:
        CONVERGED if the block is now a single element, NEEDS_SHIFT otherwise.
    """
    l1 = l - 1
    c = 0.0
    s = 1.0
    for i in range(l, k + 1):
        f = s * e[i]
        e[i] = c * e[i]
        if _negligible(f, anorm):
            break
        g = d[i]
        h = math.hypot(f, g)
        d[i] = h
        c = g / h
        s = -f / h
        if u is not None:
            _rotate(u, l1, i, c, s)
    if l == k:
        return SplitOutcome.CONVERGED
    return SplitOutcome.NEEDS_SHIFT


def converge(d: list[float], k: int, v: NDArray[np.floating[Any]] | None) -> None:
    """Make d[k] non-negative, flipping column k of V to compensate."""
    if d[k] < 0.0:
        d[k] = -d[k]
        if v is not None:
            v[:, k] = -v[:, k]


def wilkinson_shift(d: list[float], e: list[float], l: int, k: int) -> float:
    """
    Shifted first element of the QR sweep.
    
    Uses the eigenvalue of the trailing 2x2 minor of B^T B that is closer
    to d[k]^2, folded into the (l, l) entry so the sweep can start without
    forming B^T B.
    """
    x = d[l]
    y = d[k - 1]
    z = d[k]
    g = e[k - 1]
    h = e[k]
    f = ((y - z) * (y + z) + (g - h) * (g + h)) / (2.0 * h * y)
    g = math.hypot(f, 1.0)
    return ((x - z) * (x + z) + h * (y / (f + sign_of(g, f)) - h)) / x


def qr_sweep(
    d: list[float],
    e: list[float],
    l: int,
    k: int,
    u: NDArray[np.floating[Any]] | None,
    v: NDArray[np.floating[Any]] | None,
) -> None:
    """
    One implicit-shift QR step on the block l..k.
    
    Alternating right and left Givens rotations chase the bulge created
    by the shift down to row k. Right rotations go into V, left rotations
    into U.
    """
    f = wilkinson_shift(d, e, l, k)
    x = d[l]
    c = 1.0
    s = 1.0
    for i1 in range(l, k):
        i = i1 + 1
        g = e[i]
        y = d[i]
        h = s * g
        g = c * g
        z = math.hypot(f, h)
        e[i1] = z
        # Rotation can be arbitrary if z is zero
        if z != 0.0:
            c = f / z
            s = h / z
        f = x * c + g * s
        g = g * c - x * s
        h = y * s
        y = y * c
        if v is not None:
            _rotate(v, i1, i, c, s)
        z = math.hypot(f, h)
        d[i1] = z
        if z != 0.0:
            c = f / z
            s = h / z
        f = c * g + s * y
        x = c * y - s * g
        if u is not None:
            _rotate(u, i1, i, c, s)
    e[l] = 0.0
    e[k] = f
    d[k] = x


def diagonalize(
    d: NDArray[np.floating[Any]],
    e: NDArray[np.floating[Any]],
    anorm: float,
    u: NDArray[np.floating[Any]] | None = None,
    v: NDArray[np.floating[Any]] | None = None,
    max_iterations: int = MAX_ITERATIONS,
) -> tuple[SVDStatus, NDArray[np.int_]]:
    """
    Drive the bidiagonal (d, e) to diagonal form.
    
    Args:
        d: Diagonal (n,), overwritten with the singular values
        e: Superdiagonal (n,) with e[0] == 0, destroyed
        anorm: Scale for negligibility tests, max(|d| + |e|)
        u: Left factor whose columns receive the left rotations, or None
        v: Right factor whose columns receive the right rotations, or None
        max_iterations: QR sweeps allowed per index
        
    Returns:
        (status, iterations) where iterations[k] is the number of QR
        sweeps spent on index k. On NOT_CONVERGED the status index is the
        first index whose value is final.
    """
    n = d.shape[0]
    w = d.tolist()
    rv1 = e.tolist()
    iterations = np.zeros(n, dtype=np.int_)
    
    try:
        for k in range(n - 1, -1, -1):
            its = 0
            while True:
                l, outcome = split_test(w, rv1, anorm, k)
                if outcome is SplitOutcome.NEEDS_CANCELLATION:
                    outcome = cancel(w, rv1, anorm, l, k, u)
                if outcome is SplitOutcome.CONVERGED:
                    converge(w, k, v)
                    break
                if its >= max_iterations:
                    iterations[k] = its
                    return SVDStatus.not_converged(k + 1, its), iterations
                its += 1
                qr_sweep(w, rv1, l, k, u, v)
            iterations[k] = its
    finally:
        d[:] = w
        e[:] = rv1
    
    return SVDStatus.success(), iterations
