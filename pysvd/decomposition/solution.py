"""
Decomposition solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysvd.core.compute.linalg.svd import pinv_solve
from pysvd.core.compute.precision import condition_number, default_tolerance
from pysvd.core.compute.tolerances import ORTHOGONALITY, RECONSTRUCTION, ToleranceTier
from pysvd.core.exceptions import ValidationError
from pysvd.core.result import Result

if TYPE_CHECKING:
    from pysvd.decomposition.design import SVDDesign
    from pysvd.lstsq.solution import LstsqSolution


@dataclass(frozen=True)
class SVDParams:
    """
    Parameter payload for a singular value decomposition.
    
    This is the immutable data computed by backends. singular_values[i]
    belongs to column i of U and of V; reorder them together or not at all.

    anorm is the bidiagonal scale max(|d| + |e|) for the Golub-Reinsch
    backend and max(s) for LAPACK, which does not expose its bidiagonal.
    iterations is None when the backend does not report sweeps.
    """
    singular_values: NDArray[np.floating[Any]]
    U: NDArray[np.floating[Any]] | None
    V: NDArray[np.floating[Any]] | None
    anorm: float
    iterations: NDArray[np.int_] | None
    first_valid_index: int


@dataclass
class SVDSolution:
    """
    User-facing decomposition results.
    
    Wraps the backend Result and provides the factors, derived
    quantities (rank, condition number, pseudo-inverse) and checks of the
    defining identities A = U diag(s) V^T, U^T U = I, V^T V = I.
    """
    _result: Result[SVDParams]
    _design: SVDDesign
    
    # Cached computations
    _reconstruction: NDArray[np.floating[Any]] | None = None
    
    @property
    def singular_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.singular_values
    
    @property
    def U(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.U
    
    @property
    def V(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.V
    
    @property
    def Vt(self) -> NDArray[np.floating[Any]] | None:
        V = self._result.params.V
        return None if V is None else V.T
    
    @property
    def shape(self) -> tuple[int, int]:
        return self._design.shape
    
    @property
    def design(self) -> SVDDesign:
        return self._design
    
    @property
    def converged(self) -> bool:
        return bool(self._result.info.get('converged', True))
    
    @property
    def first_valid_index(self) -> int:
        """Lowest index whose singular value and vectors are final (0 if converged)."""
        return self._result.params.first_valid_index
    
    @property
    def iterations(self) -> NDArray[np.int_] | None:
        return self._result.params.iterations
    
    @property
    def has_vectors(self) -> bool:
        return self.U is not None and self.V is not None
    
    def default_tolerance(self) -> float:
        """Cutoff max(m, n) * eps * max(s) used when none is given."""
        return default_tolerance(self.singular_values, self.shape)
    
    def rank(self, tolerance: float | None = None) -> int:
        """Number of singular values at or above tolerance."""
        if tolerance is None:
            tolerance = self.default_tolerance()
        return int(np.sum(self.singular_values >= tolerance))
    
    @property
    def condition_number(self) -> float:
        return condition_number(self.singular_values)
    
    def _require_vectors(self, operation: str) -> None:
        if not self.has_vectors:
            raise ValidationError(
                f"{operation} needs both U and V; decompose with "
                f"compute_u=True and compute_v=True"
            )
    
    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """U diag(s) V^T."""
        self._require_vectors('reconstruct()')
        if self._reconstruction is None:
            self._reconstruction = (self.U * self.singular_values) @ self.V.T
        return self._reconstruction
    
    @property
    def reconstruction_error(self) -> float:
        """||A - U diag(s) V^T||_F / ||A||_F (absolute when A is zero)."""
        diff = float(np.linalg.norm(self._design.A - self.reconstruct()))
        scale = self._design.frobenius_norm
        return diff / scale if scale > 0.0 else diff
    
    @property
    def orthogonality_error(self) -> float:
        """
        Largest deviation of the factors from orthonormality.
        
        Checks V^T V = I and U^T U = I. For a wide matrix (m < n) U has
        more columns than rows, so its rows are checked (U U^T = I) instead.
        """
        self._require_vectors('orthogonality_error')
        m, n = self.shape
        U, V = self.U, self.V
        gram_u = U.T @ U if m >= n else U @ U.T
        err_u = np.max(np.abs(gram_u - np.eye(gram_u.shape[0])))
        err_v = np.max(np.abs(V.T @ V - np.eye(n)))
        return float(max(err_u, err_v))
    
    def check(
        self,
        reconstruction: ToleranceTier = RECONSTRUCTION,
        orthogonality: ToleranceTier = ORTHOGONALITY,
    ) -> bool:
        """True if both identities hold within the given tolerance tiers."""
        if self.reconstruction_error > reconstruction.rtol + reconstruction.atol:
            return False
        return self.orthogonality_error <= orthogonality.atol
    
    def sorted(self, descending: bool = True) -> SVDSolution:
        """
        Copy with singular values ordered, U and V columns permuted to match.
        
        The decomposition itself leaves the values unordered.
        """
        params = self._result.params
        order = np.argsort(params.singular_values, kind='stable')
        if descending:
            order = order[::-1]
        new_params = replace(
            params,
            singular_values=params.singular_values[order],
            U=None if params.U is None else params.U[:, order],
            V=None if params.V is None else params.V[:, order],
            iterations=None if params.iterations is None else params.iterations[order],
        )
        info = dict(self._result.info)
        info['sorted'] = 'descending' if descending else 'ascending'
        return SVDSolution(_result=replace(self._result, params=new_params, info=info), _design=self._design)
    
    def solve(self, b: ArrayLike, tolerance: float | None = None) -> LstsqSolution:
        """
        Least-squares / minimum-norm solution of A x = b.
        
        Shortcut for pysvd.lstsq.solve(self, b, tolerance=tolerance).
        """
        from pysvd.lstsq.solvers import solve
        return solve(self, b, tolerance=tolerance)
    
    def pinv(self, tolerance: float | None = None) -> NDArray[np.floating[Any]]:
        """Moore-Penrose pseudo-inverse (n x m) with singular values below tolerance dropped."""
        self._require_vectors('pinv()')
        if tolerance is None:
            tolerance = self.default_tolerance()
        return pinv_solve(self.U, self.singular_values, self.V, np.eye(self.shape[0]), tolerance)
    
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
        """Plain-text overview of the decomposition."""
        m, n = self.shape
        lines = [
            "Singular Value Decomposition",
            "=" * 60,
            f"Shape: {m} x {n}",
            f"Converged: {self.converged}",
            f"Rank: {self.rank()}",
            f"Condition number: {self.condition_number:.6g}",
            "",
            "Singular values:",
            "-" * 60,
        ]
        iterations = self.iterations
        for i, s in enumerate(self.singular_values):
            flag = "" if i >= self.first_valid_index else "  (not converged)"
            its = "" if iterations is None else f"  [{int(iterations[i])} its]"
            lines.append(f"  s[{i}]: {s:14.6e}{its}{flag}")
        lines.append("-" * 60)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        
        return "\n".join(lines)
    
    def __repr__(self) -> str:
        m, n = self.shape
        return (
            f"SVDSolution(m={m}, n={n}, rank={self.rank()}, "
            f"converged={self.converged})"
        )
