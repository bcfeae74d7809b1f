"""
Decomposition Design.

Design validates the matrix to be decomposed and records its shape.
It accepts either a 2-D array or a flat row-major buffer with an explicit
leading dimension, and always holds its own 2-D float64 copy so that the
decomposition can be checked against it later.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysvd.core.compute.linalg.buffers import matrix_view
from pysvd.core.exceptions import DimensionError
from pysvd.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_finite,
    check_leading_dim,
    check_matrix_shape,
)


@dataclass(frozen=True)
class SVDDesign:
    """
    Matrix specification for a singular value decomposition.
    
    Immutable after construction.
    
    Construction:
        SVDDesign.from_array(A)                         # 2-D array-like
        SVDDesign.from_buffer(buf, m, n, leading_dim)   # flat row-major buffer
    """
    _A: NDArray[np.floating[Any]]
    _m: int
    _n: int
    
    @classmethod
    def from_array(cls, A: ArrayLike) -> SVDDesign:
        """Build Design from a 2-D array-like."""
        A_arr = check_array(A, 'A')
        check_2d(A_arr, 'A')
        return cls._build(np.array(A_arr, dtype=np.float64, copy=True))
    
    @classmethod
    def from_buffer(
        cls,
        buffer: ArrayLike,
        m: int,
        n: int,
        leading_dim: int,
    ) -> SVDDesign:
        """
        Build Design from a flat buffer where A[i, j] = buffer[i * leading_dim + j].
        
        Args:
            buffer: 1-D array-like holding at least (m - 1) * leading_dim + n values
            m: Row count
            n: Column count
            leading_dim: Row stride, at least max(m, n)
        """
        check_matrix_shape(m, n, 'A')
        check_leading_dim(leading_dim, m, n)
        buf = check_array(buffer, 'buffer')
        check_1d(buf, 'buffer')
        required = (m - 1) * leading_dim + n
        if buf.shape[0] < required:
            raise DimensionError(
                f"buffer: needs at least {required} elements for a {m} x {n} "
                f"matrix with leading_dim={leading_dim}, got {buf.shape[0]}"
            )
        return cls._build(np.array(matrix_view(buf, m, n, leading_dim), copy=True))
    
    @classmethod
    def _build(cls, A: NDArray) -> SVDDesign:
        """Internal builder with validation."""
        m, n = A.shape
        check_matrix_shape(m, n, 'A')
        check_finite(A, 'A')
        return cls(_A=A, _m=m, _n=n)
    
    # === Properties ===
    
    @property
    def A(self) -> NDArray[np.floating[Any]]:
        """Matrix to decompose (m x n)."""
        return self._A
    
    @property
    def m(self) -> int:
        """Number of rows."""
        return self._m
    
    @property
    def n(self) -> int:
        """Number of columns."""
        return self._n
    
    @property
    def shape(self) -> tuple[int, int]:
        return (self._m, self._n)
    
    @property
    def frobenius_norm(self) -> float:
        return float(np.linalg.norm(self._A))
