"""
CPU reference backend for the singular value decomposition.

Runs the from-scratch Golub-Reinsch kernel: Householder bidiagonalization,
accumulation of the orthogonal factors, and implicit-shift QR. Convergence
failures are reported in the result (info['converged'] = False) together
with the partial decomposition; the solver decides whether to raise.
"""

from typing import Any

from pysvd.core.compute.linalg.svd import golub_reinsch
from pysvd.core.compute.linalg.status import StatusCode
from pysvd.core.compute.precision import MAX_ITERATIONS
from pysvd.core.compute.timing import Timer
from pysvd.core.result import Result
from pysvd.decomposition.design import SVDDesign
from pysvd.decomposition.solution import SVDParams


class CPUGolubReinschBackend:
    """
    CPU backend using the Golub-Reinsch algorithm.
    
    Implements the Backend protocol for SVDDesign -> SVDParams.
    """
    
    def __init__(
        self,
        compute_u: bool = True,
        compute_v: bool = True,
        max_iterations: int = MAX_ITERATIONS,
    ):
        self._compute_u = compute_u
        self._compute_v = compute_v
        self._max_iterations = max_iterations
    
    @property
    def name(self) -> str:
        return 'cpu_golub_reinsch'
    
    def solve(self, design: SVDDesign) -> Result[SVDParams]:
        """
        Decompose design.A.
        
        Args:
            design: Validated decomposition design
            
        Returns:
            Result containing SVDParams
            
        Raises:
            AllocationError: If a workspace cannot be allocated
        """
        timer = Timer()
        timer.start()
        
        svd = golub_reinsch(
            design.A,
            self._compute_u,
            self._compute_v,
            self._max_iterations,
            timer=timer,
        )
        
        timer.stop()
        
        converged = svd.status.code is StatusCode.OK
        first_valid = 0 if converged else svd.status.index
        
        params = SVDParams(
            singular_values=svd.s,
            U=svd.U,
            V=svd.V,
            anorm=svd.anorm,
            iterations=svd.iterations,
            first_valid_index=first_valid,
        )
        
        info: dict[str, Any] = {
            'method': 'golub_reinsch',
            'converged': converged,
            'status': str(svd.status),
            'max_iterations': self._max_iterations,
            'total_iterations': int(svd.iterations.sum()),
            'anorm': svd.anorm,
        }
        
        warnings: tuple[str, ...] = ()
        if not converged:
            warnings = (svd.status.message,)
        
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )
