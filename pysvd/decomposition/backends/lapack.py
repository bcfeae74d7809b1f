"""
LAPACK reference backend for the singular value decomposition.

Uses scipy's gesvd driver, which follows the same Householder
bidiagonalization + implicit-shift QR scheme as the Golub-Reinsch kernel.
Output is brought to the same contract: n singular values, U m x n,
V n x n. For a wide matrix (m < n) the n - m extra singular values are
zero and the matching columns of U are zero.
"""

from typing import Any

import numpy as np
import scipy.linalg as sla

from pysvd.core.compute.timing import Timer
from pysvd.core.exceptions import ConvergenceError
from pysvd.core.result import Result
from pysvd.decomposition.design import SVDDesign
from pysvd.decomposition.solution import SVDParams


class CPULapackBackend:
    """
    CPU backend using LAPACK gesvd (via SciPy).
    
    Implements the Backend protocol for SVDDesign -> SVDParams.
    """
    
    def __init__(self, compute_u: bool = True, compute_v: bool = True):
        self._compute_u = compute_u
        self._compute_v = compute_v
    
    @property
    def name(self) -> str:
        return 'cpu_lapack'
    
    def solve(self, design: SVDDesign) -> Result[SVDParams]:
        """
        Decompose design.A with LAPACK.
        
        Raises:
            ConvergenceError: If gesvd reports that its QR iteration failed
        """
        timer = Timer()
        timer.start()
        
        m, n = design.shape
        want_vectors = self._compute_u or self._compute_v
        
        with timer.section('gesvd'):
            try:
                if want_vectors:
                    U, s, Vt = sla.svd(
                        design.A,
                        full_matrices=m < n,
                        compute_uv=True,
                        lapack_driver='gesvd',
                    )
                else:
                    s = sla.svd(design.A, compute_uv=False, lapack_driver='gesvd')
            except np.linalg.LinAlgError as e:
                raise ConvergenceError(
                    f"LAPACK gesvd did not converge: {e}",
                    iterations=None,
                ) from e
        
        if m < n:
            s = np.concatenate([s, np.zeros(n - m)])
            if want_vectors:
                U = np.hstack([U, np.zeros((m, n - m))])
        
        timer.stop()
        
        params = SVDParams(
            singular_values=s,
            U=U if self._compute_u else None,
            V=Vt.T.copy() if self._compute_v else None,
            anorm=float(np.max(s)),
            iterations=None,
            first_valid_index=0,
        )
        
        info: dict[str, Any] = {
            'method': 'lapack_gesvd',
            'converged': True,
            'status': 'Ok',
        }
        
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
