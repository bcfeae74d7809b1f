"""
Least-squares backends.

Available backends:
    CPUPseudoInverseBackend: Truncated pseudo-inverse from a cached SVD
"""

from pysvd.lstsq.backends.cpu import CPUPseudoInverseBackend

__all__ = [
    "CPUPseudoInverseBackend",
]
