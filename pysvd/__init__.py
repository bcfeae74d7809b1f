"""
pysvd: Golub-Reinsch singular value decomposition for Python.

Computes A = U diag(s) V^T for real matrices with a from-scratch
implementation of Householder bidiagonalization and implicit-shift QR,
and solves least-squares systems through the truncated pseudo-inverse.

Submodules:
    decomposition: decompose() and SVDSolution
    lstsq: solve() against a cached decomposition, lstsq() one-shot
    core.compute.linalg: raw kernels and the flat-buffer interface
"""

__version__ = "0.1.0"

from pysvd import decomposition
from pysvd import lstsq
from pysvd.decomposition import decompose
from pysvd.lstsq import solve

__all__ = [
    "__version__",
    "decomposition",
    "lstsq",
    "decompose",
    "solve",
]
