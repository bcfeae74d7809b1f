"""
Least-squares and minimum-norm solves through the SVD.

Public API:
    solve(decomposition, b, ...) -> LstsqSolution
    lstsq(A, b, ...) -> LstsqSolution

Example:
    >>> from pysvd.decomposition import decompose
    >>> from pysvd.lstsq import solve
    >>> svd = decompose(A)
    >>> x1 = solve(svd, b1).x
    >>> x2 = solve(svd, b2, tolerance=1e-8).x
"""

from pysvd.lstsq.design import LstsqDesign
from pysvd.lstsq.solution import LstsqSolution, LstsqParams
from pysvd.lstsq.solvers import lstsq, solve

__all__ = [
    "solve",
    "lstsq",
    "LstsqDesign",
    "LstsqSolution",
    "LstsqParams",
]
