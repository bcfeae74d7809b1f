"""
Householder reduction to upper bidiagonal form.

Phase 1 and 2 of the Golub-Reinsch SVD. The working matrix is reduced in
place: on return its diagonal and superdiagonal live in the vectors d and
e, and the Householder vectors that produced them are left in the lower
and upper parts of the working matrix, where accumulate_left() and
accumulate_right() turn them into U and V.

Every reflection is computed on a copy of its column (or row) scaled by
the L1 norm, so the sum of squares neither overflows nor underflows. The
reflection sign is opposite to the pivot to avoid cancellation in f - g.

References:
    Golub, G. H. & Reinsch, C. (1970). Singular value decomposition and
    least squares solutions. Numerische Mathematik 14, 403-420.
    Forsythe, G. E., Malcolm, M. A. & Moler, C. B. (1977). Computer Methods
    for Mathematical Computations, pp. 229-235.
"""

import math
from typing import Any

import numpy as np
from numpy.typing import NDArray


def sign_of(a: float, b: float) -> float:
    """|a| carrying the sign of b, with b == 0 counted as positive."""
    return abs(a) if b >= 0.0 else -abs(a)


def householder_bidiagonalize(
    u: NDArray[np.floating[Any]],
    d: NDArray[np.floating[Any]],
    e: NDArray[np.floating[Any]],
) -> float:
    """
    Reduce u (m x n) to upper bidiagonal form in place.
    
    For each column i a left reflection zeroes u[i+1:, i]; for each row i
    except the last a right reflection zeroes u[i, i+2:].
    
    Args:
        u: Working matrix, overwritten with the Householder vectors
        d: Output diagonal (n,)
        e: Output superdiagonal (n,), e[0] is always zero and e[i]
           couples d[i-1] and d[i]
        
    Returns:
        anorm: max_i(|d[i]| + |e[i]|), the scale for negligibility tests
    """
    m, n = u.shape
    g = 0.0
    scale = 0.0
    anorm = 0.0
    
    for i in range(n):
        l = i + 1
        e[i] = scale * g
        
        # Left reflection on column i, rows i..m-1
        g = 0.0
        scale = 0.0
        if i < m:
            col = u[i:, i]
            scale = float(np.sum(np.abs(col)))
            if scale != 0.0:
                col /= scale
                s = float(col @ col)
                f = float(col[0])
                g = -sign_of(math.sqrt(s), f)
                h = f * g - s
                col[0] = f - g
                if i != n - 1:
                    factors = (col @ u[i:, l:]) / h
                    u[i:, l:] += np.outer(col, factors)
                col *= scale
        d[i] = scale * g
        
        # Right reflection on row i, columns i+1..n-1
        g = 0.0
        scale = 0.0
        if i < m and i != n - 1:
            row = u[i, l:]
            scale = float(np.sum(np.abs(row)))
            if scale != 0.0:
                row /= scale
                s = float(row @ row)
                f = float(row[0])
                g = -sign_of(math.sqrt(s), f)
                h = f * g - s
                row[0] = f - g
                e[l:] = row / h
                if i != m - 1:
                    sums = u[l:, l:] @ row
                    u[l:, l:] += np.outer(sums, e[l:])
                row *= scale
        
        anorm = max(anorm, abs(float(d[i])) + abs(float(e[i])))
    
    return anorm


def accumulate_right(
    u: NDArray[np.floating[Any]],
    e: NDArray[np.floating[Any]],
    v: NDArray[np.floating[Any]],
) -> None:
    """
    Build V (n x n) from the right reflections stored in the rows of u.
    
    Reflections are applied to the identity from the last one backwards,
    so each step only touches the trailing block v[i:, i:].
    
    Args:
        u: Working matrix as left by householder_bidiagonalize()
        e: Superdiagonal; e[i+1] is the g of the reflection on row i
        v: Output matrix, fully overwritten
    """
    n = v.shape[0]
    g = 0.0
    l = n
    
    for i in range(n - 1, -1, -1):
        if i != n - 1:
            if g != 0.0:
                # Double division avoids possible underflow
                v[l:, i] = (u[i, l:] / u[i, l]) / g
                sums = u[i, l:] @ v[l:, l:]
                v[l:, l:] += np.outer(v[l:, i], sums)
            v[i, l:] = 0.0
            v[l:, i] = 0.0
        v[i, i] = 1.0
        g = float(e[i])
        l = i


def accumulate_left(
    u: NDArray[np.floating[Any]],
    d: NDArray[np.floating[Any]],
) -> None:
    """
    Overwrite u with the product of its left reflections.
    
    Walks i = min(m, n)-1 .. 0. Columns beyond the reflection structure
    start as the matching identity column. When m < n the trailing
    columns end up zero; they carry no weight once the QR phase has
    deflated their (zero) singular values.
    
    Args:
        u: Working matrix as left by householder_bidiagonalize()
        d: Diagonal of the bidiagonal form
    """
    m, n = u.shape
    mn = min(m, n)
    
    for i in range(mn - 1, -1, -1):
        l = i + 1
        g = float(d[i])
        if i != n - 1:
            u[i, l:] = 0.0
        if g != 0.0:
            if i != mn - 1:
                sums = u[l:, i] @ u[l:, l:]
                # Double division avoids possible underflow
                factors = (sums / u[i, i]) / g
                u[i:, l:] += np.outer(u[i:, i], factors)
            u[i:, i] /= g
        else:
            u[i:, i] = 0.0
        u[i, i] += 1.0
