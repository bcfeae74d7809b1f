"""
Solver dispatch for the singular value decomposition.

This module provides the decompose() function (public API) and backend selection.
"""

from __future__ import annotations

import warnings
from typing import Literal
from numpy.typing import ArrayLike

from pysvd.core.compute.precision import MAX_ITERATIONS
from pysvd.core.exceptions import ConvergenceError, ValidationError
from pysvd.core.validation import check_non_negative_int
from pysvd.decomposition.design import SVDDesign
from pysvd.decomposition.solution import SVDSolution
from pysvd.decomposition.backends.cpu import CPUGolubReinschBackend


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'cpu_lapack']


def decompose(
    A: ArrayLike | SVDDesign,
    *,
    compute_u: bool = True,
    compute_v: bool = True,
    max_iterations: int = MAX_ITERATIONS,
    sort: bool = False,
    strict: bool = True,
    backend: BackendChoice = 'auto',
) -> SVDSolution:
    """
    Compute the singular value decomposition A = U diag(s) V^T.
    
    This is the primary public API for the decomposition. All input
    validation, backend selection, and result wrapping happens here.
    
    Args:
        A: Matrix (m x n, m >= 2, n >= 2) as any 2-D array-like, or an
           SVDDesign (e.g. built from a flat buffer with a leading dimension).
        compute_u: Compute the left factor U (m x n).
        compute_v: Compute the right factor V (n x n).
        max_iterations: QR sweeps allowed per singular value
            ('cpu' backend only).
        sort: Return singular values in descending order, with U and V
            columns permuted to match. By default the order is whatever
            the algorithm produced.
        strict: If True, a singular value that fails to converge raises
            ConvergenceError. If False, a RuntimeWarning is issued and the
            partial decomposition is returned with converged == False;
            values at first_valid_index and above are still exact.
        backend: Computational backend to use:
            - 'auto': The Golub-Reinsch CPU kernel
            - 'cpu': The Golub-Reinsch CPU kernel
            - 'cpu_lapack': LAPACK gesvd through SciPy
            
    Returns:
        SVDSolution with singular values, factors and diagnostics
        
    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If A is not 2-D or smaller than 2 x 2
        ConvergenceError: If strict and the QR phase does not converge.
            The exception carries the partial SVDSolution as .partial.
        AllocationError: If a workspace cannot be allocated
        
    Example:
        >>> import numpy as np
        >>> from pysvd.decomposition import decompose
        >>> 
        >>> result = decompose(np.array([[3.0, 0.0], [4.0, 5.0]]))
        >>> result.sorted().singular_values
        array([6.70820393, 2.23606798])
    """
    # === Input Validation ===
    # This is the boundary - validate here, trust everywhere else
    design = A if isinstance(A, SVDDesign) else SVDDesign.from_array(A)
    check_non_negative_int(max_iterations, 'max_iterations')
    
    # === Select Backend ===
    backend_impl = _get_backend(backend, compute_u, compute_v, max_iterations)
    
    # === Solve ===
    result = backend_impl.solve(design)
    solution = SVDSolution(_result=result, _design=design)
    
    if not solution.converged:
        message = (
            f"SVD did not converge: {result.info['status']}. "
            f"Singular values from index {solution.first_valid_index} on are final."
        )
        if strict:
            raise ConvergenceError(
                message,
                iterations=max_iterations,
                index=solution.first_valid_index,
                partial=solution,
            )
        warnings.warn(message, RuntimeWarning, stacklevel=2)
        return solution
    
    # === Wrap and Return ===
    if sort:
        return solution.sorted()
    return solution


def _get_backend(
    choice: BackendChoice,
    compute_u: bool,
    compute_v: bool,
    max_iterations: int,
):
    """
    Select and instantiate the appropriate backend.
    
    Raises:
        ValidationError: If unknown backend specified
    """
    if choice in ('auto', 'cpu'):
        return CPUGolubReinschBackend(compute_u, compute_v, max_iterations)
    
    if choice == 'cpu_lapack':
        from pysvd.decomposition.backends.lapack import CPULapackBackend
        return CPULapackBackend(compute_u, compute_v)
    
    raise ValidationError(f"Unknown backend: {choice!r}")
