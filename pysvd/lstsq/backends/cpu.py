"""
CPU backend for least-squares solves from a cached decomposition.

Applies the truncated pseudo-inverse: t = diag(1/s) U^T b with small
singular values contributing zero, then x = V t.
"""

from typing import Any
import numpy as np

from pysvd.core.compute.linalg.svd import pinv_solve
from pysvd.core.compute.timing import Timer
from pysvd.core.exceptions import NumericalError
from pysvd.core.result import Result
from pysvd.lstsq.design import LstsqDesign
from pysvd.lstsq.solution import LstsqParams


class CPUPseudoInverseBackend:
    """
    CPU backend using the truncated pseudo-inverse.
    
    Implements the Backend protocol for LstsqDesign -> LstsqParams.
    Reads the decomposition and b; writes nothing but the new x.
    """
    
    @property
    def name(self) -> str:
        return 'cpu_pinv'
    
    def solve(self, design: LstsqDesign) -> Result[LstsqParams]:
        """
        Solve A x = b through the pseudo-inverse.
        
        Raises:
            NumericalError: If x overflows (tolerance too small for the spectrum)
            AllocationError: If the intermediate vector cannot be allocated
        """
        timer = Timer()
        timer.start()
        
        svd = design.decomposition
        s = svd.singular_values
        tol = design.tolerance
        
        with timer.section('solve'):
            x = pinv_solve(svd.U, s, svd.V, design.b, tol)
        
        timer.stop()
        
        if not np.all(np.isfinite(x)):
            raise NumericalError(
                f"solution overflowed with tolerance={tol:.3e}; "
                f"smallest retained singular value is {float(np.min(s[s >= tol])):.3e}"
            )
        
        discarded = tuple(int(i) for i in np.flatnonzero(s < tol))
        rank = s.shape[0] - len(discarded)
        
        params = LstsqParams(
            x=x,
            rank=rank,
            tolerance=tol,
            discarded=discarded,
        )
        
        info: dict[str, Any] = {
            'method': 'pseudo_inverse',
            'rank': rank,
            'tolerance': tol,
        }
        
        warnings: tuple[str, ...] = ()
        if discarded:
            warnings = (
                f"{len(discarded)} singular value(s) below tolerance {tol:.3e} "
                f"were treated as zero: indices {list(discarded)}",
            )
        
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )
