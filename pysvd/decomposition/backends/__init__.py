"""
Decomposition backends.

Available backends:
    CPUGolubReinschBackend: From-scratch Golub-Reinsch kernel (reference)
    CPULapackBackend: LAPACK gesvd via SciPy
"""

from pysvd.decomposition.backends.cpu import CPUGolubReinschBackend
from pysvd.decomposition.backends.lapack import CPULapackBackend

__all__ = [
    "CPUGolubReinschBackend",
    "CPULapackBackend",
]
