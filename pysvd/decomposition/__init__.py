"""
Singular value decomposition.

Public API:
    decompose(A, ...) -> SVDSolution

The decompose() function is the only entry point. It handles:
    - Input validation
    - Design construction
    - Backend selection
    - Result wrapping

Example:
    >>> from pysvd.decomposition import decompose
    >>> result = decompose(A)
    >>> print(result.singular_values)
    >>> x = result.solve(b).x
"""

from pysvd.decomposition.design import SVDDesign
from pysvd.decomposition.solution import SVDSolution, SVDParams
from pysvd.decomposition.solvers import decompose

__all__ = [
    "decompose",
    "SVDDesign",
    "SVDSolution",
    "SVDParams",
]
