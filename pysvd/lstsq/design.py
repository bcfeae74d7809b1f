"""
Least-squares Design.

Pairs a cached decomposition with one right-hand side (or a block of
them) and the cutoff for significant singular values. The decomposition
is never modified, so one SVDSolution can back any number of designs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysvd.core.exceptions import DimensionError, ValidationError
from pysvd.core.validation import check_array, check_finite, check_positive
from pysvd.decomposition.solution import SVDSolution


@dataclass(frozen=True)
class LstsqDesign:
    """
    Specification of A x = b against an existing decomposition of A.
    
    Construction:
        LstsqDesign.build(decomposition, b)              # default tolerance
        LstsqDesign.build(decomposition, b, tolerance)   # explicit cutoff
    """
    _decomposition: SVDSolution
    _b: NDArray[np.floating[Any]]
    _tolerance: float
    
    @classmethod
    def build(
        cls,
        decomposition: SVDSolution,
        b: ArrayLike,
        tolerance: float | None = None,
    ) -> LstsqDesign:
        """
        Validate and build.
        
        Args:
            decomposition: Converged SVDSolution with both U and V
            b: Right-hand side (m,) or block of right-hand sides (m x k)
            tolerance: Positive cutoff; singular values below it are
                       treated as zero. Defaults to max(m, n) * eps * max(s).
        """
        if not isinstance(decomposition, SVDSolution):
            raise ValidationError(
                f"decomposition: expected SVDSolution, got {type(decomposition).__name__}"
            )
        if not decomposition.has_vectors:
            raise ValidationError(
                "decomposition: solving needs both U and V; decompose with "
                "compute_u=True and compute_v=True"
            )
        if not decomposition.converged:
            raise ValidationError(
                f"decomposition: did not converge (first valid index "
                f"{decomposition.first_valid_index}), cannot be used to solve"
            )
        
        b_arr = check_array(b, 'b')
        if b_arr.ndim not in (1, 2):
            raise DimensionError(
                f"b: expected 1D or 2D array, got {b_arr.ndim}D with shape {b_arr.shape}"
            )
        m, _ = decomposition.shape
        if b_arr.shape[0] != m:
            raise DimensionError(
                f"b: length {b_arr.shape[0]} does not match the {m} rows of A"
            )
        check_finite(b_arr, 'b')
        
        if tolerance is None:
            tolerance = decomposition.default_tolerance()
        else:
            check_positive(tolerance, 'tolerance')
        
        return cls(_decomposition=decomposition, _b=b_arr, _tolerance=float(tolerance))
    
    # === Properties ===
    
    @property
    def decomposition(self) -> SVDSolution:
        return self._decomposition
    
    @property
    def b(self) -> NDArray[np.floating[Any]]:
        """Right-hand side (m,) or (m, k)."""
        return self._b
    
    @property
    def tolerance(self) -> float:
        return self._tolerance
    
    @property
    def m(self) -> int:
        return self._decomposition.shape[0]
    
    @property
    def n(self) -> int:
        return self._decomposition.shape[1]
