"""
Solver dispatch for least squares.

This module provides solve() and lstsq() (public API) and backend selection.
"""

from __future__ import annotations

from typing import Literal
from numpy.typing import ArrayLike

from pysvd.core.compute.precision import MAX_ITERATIONS
from pysvd.core.exceptions import ValidationError
from pysvd.decomposition.solution import SVDSolution
from pysvd.decomposition.solvers import BackendChoice as DecompositionBackend
from pysvd.decomposition.solvers import decompose
from pysvd.lstsq.design import LstsqDesign
from pysvd.lstsq.solution import LstsqSolution
from pysvd.lstsq.backends.cpu import CPUPseudoInverseBackend


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu']


def solve(
    decomposition: SVDSolution,
    b: ArrayLike,
    *,
    tolerance: float | None = None,
    backend: BackendChoice = 'auto',
) -> LstsqSolution:
    """
    Solve A x = b from an existing decomposition of A.
    
    Computes x = V diag(1/s) U^T b, where singular values below tolerance
    contribute zero instead of being inverted. The same decomposition can
    be reused for any number of right-hand sides; it is never modified,
    and repeating a call gives bit-identical results.
    
    Args:
        decomposition: Converged SVDSolution with both U and V
        b: Right-hand side (m,) or block of right-hand sides (m x k)
        tolerance: Positive cutoff for significant singular values.
            Defaults to max(m, n) * eps * max(s).
        backend: 'auto' or 'cpu'
        
    Returns:
        LstsqSolution with x, the rank used, and residual diagnostics
        
    Raises:
        ValidationError: If inputs are invalid or tolerance <= 0
        DimensionError: If b does not have m rows
        NumericalError: If the solution overflows
        
    Example:
        >>> svd = decompose([[2, 0, 0], [0, 3, 0], [0, 0, 4]])
        >>> solve(svd, [2, 3, 4]).x
        array([1., 1., 1.])
    """
    design = LstsqDesign.build(decomposition, b, tolerance)
    backend_impl = _get_backend(backend)
    result = backend_impl.solve(design)
    return LstsqSolution(_result=result, _design=design)


def lstsq(
    A: ArrayLike,
    b: ArrayLike,
    *,
    tolerance: float | None = None,
    max_iterations: int = MAX_ITERATIONS,
    backend: DecompositionBackend = 'auto',
) -> LstsqSolution:
    """
    Decompose A and solve A x = b in one call.
    
    Convenience wrapper around decompose() followed by solve(). Keep the
    decomposition and call solve() directly when several right-hand sides
    share one matrix.
    
    Raises:
        ConvergenceError: If the decomposition does not converge
    """
    decomposition = decompose(A, max_iterations=max_iterations, backend=backend)
    return solve(decomposition, b, tolerance=tolerance)


def _get_backend(choice: BackendChoice):
    """Select backend based on preference."""
    if choice in ('auto', 'cpu'):
        return CPUPseudoInverseBackend()
    
    raise ValidationError(f"Unknown backend: {choice!r}")
