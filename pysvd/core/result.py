"""
Generic result container for all pysvd computations.

The Result class provides a standardized envelope that all domain-specific
results use. This enables shared tooling for timing, diagnostics,
reproducibility, and serialization while allowing domains to define their
own parameter structures.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (converged, iterations, diagnostics)
    - timing is optional (don't burden unit tests)
    - provenance for reproducibility (package and numpy versions)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, Any]:
    """Generate minimal provenance metadata."""
    import numpy as np
    import pysvd
    return {
        'pysvd_version': pysvd.__version__,
        'numpy_version': np.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for numerical computations.
    
    Type Parameters:
        P: The domain-specific parameter payload type
        
    Attributes:
        params: Domain-specific payload (singular values, solution vector, ...)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Versions of the software that produced the result
        
    Examples:
        >>> # Direct method (no convergence notion)
        >>> Result(
        ...     params=LstsqParams(x=x, rank=3, ...),
        ...     info={'method': 'pseudo_inverse', 'rank': 3},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_pinv'
        ... )
        
        >>> # Iterative method
        >>> Result(
        ...     params=SVDParams(singular_values=s, U=U, V=V, ...),
        ...     info={'method': 'golub_reinsch', 'converged': True},
        ...     timing={'total_seconds': 0.5, 'diagonalization': 0.3},
        ...     backend_name='cpu_golub_reinsch'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, Any] = field(default_factory=_default_provenance)
    
    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
