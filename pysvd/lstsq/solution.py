"""
Least-squares solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pysvd.core.result import Result

if TYPE_CHECKING:
    from pysvd.lstsq.design import LstsqDesign


@dataclass(frozen=True)
class LstsqParams:
    """
    Parameter payload for a pseudo-inverse solve.
    
    This is the immutable data computed by backends.
    """
    x: NDArray[np.floating[Any]]
    rank: int
    tolerance: float
    discarded: tuple[int, ...]


@dataclass
class LstsqSolution:
    """
    User-facing least-squares results.
    
    x = V diag(1/s) U^T b with singular values below the tolerance
    dropped: the least-squares solution for overdetermined systems and
    the minimum-norm one when A is wide or rank-deficient.
    """
    _result: Result[LstsqParams]
    _design: LstsqDesign
    
    # Cached computations
    _residuals: NDArray[np.floating[Any]] | None = None
    
    @property
    def x(self) -> NDArray[np.floating[Any]]:
        return self._result.params.x
    
    @property
    def rank(self) -> int:
        """Number of singular values that took part in the solve."""
        return self._result.params.rank
    
    @property
    def tolerance(self) -> float:
        return self._result.params.tolerance
    
    @property
    def discarded(self) -> tuple[int, ...]:
        """Indices of singular values treated as zero."""
        return self._result.params.discarded
    
    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        """b - A x, using the matrix that was decomposed."""
        if self._residuals is None:
            A = self._design.decomposition.design.A
            self._residuals = self._design.b - A @ self.x
        return self._residuals
    
    @property
    def residual_norm(self) -> float | NDArray[np.floating[Any]]:
        """||b - A x||_2, one value per right-hand side for a block b."""
        r = self.residuals
        if r.ndim == 1:
            return float(np.linalg.norm(r))
        return np.linalg.norm(r, axis=0)
    
    @property
    def info(self) -> dict[str, Any]:
        return self._result.info
    
    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing
    
    @property
    def backend_name(self) -> str:
        return self._result.backend_name
    
    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings
    
    def summary(self) -> str:
        """Plain-text overview of the solve."""
        lines = [
            "Least Squares Solution (truncated pseudo-inverse)",
            "=" * 60,
            f"Shape of A: {self._design.m} x {self._design.n}",
            f"Rank used: {self.rank}",
            f"Tolerance: {self.tolerance:.6e}",
            f"Discarded: {list(self.discarded) if self.discarded else 'none'}",
            "",
        ]
        if self.x.ndim == 1:
            lines.append("Solution:")
            lines.append("-" * 60)
            for i, xi in enumerate(self.x):
                lines.append(f"  x[{i}]: {xi:14.6f}")
            lines.append("-" * 60)
            lines.append(f"Residual norm: {self.residual_norm:.6e}")
        else:
            lines.append(f"Right-hand sides: {self.x.shape[1]}")
        lines.append(f"Backend: {self.backend_name}")
        
        return "\n".join(lines)
    
    def __repr__(self) -> str:
        return (
            f"LstsqSolution(n={self._design.n}, rank={self.rank}, "
            f"tolerance={self.tolerance:.3g})"
        )
