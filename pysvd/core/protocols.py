"""
Core protocols for pysvd.

These define structural interfaces that domain-specific implementations must satisfy.
We use Protocol (structural typing) rather than ABC (nominal typing) to allow
flexibility while maintaining type safety.
"""

from typing import Protocol, TypeVar, runtime_checkable

from pysvd.core.result import Result

# Type variables for generic payloads
P = TypeVar('P', covariant=True)  # Parameter payload type
D = TypeVar('D', contravariant=True)  # Design type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.
    
    Each backend knows how to take a domain-specific design and produce
    a domain-specific parameter payload.
    
    Backends are stateless; all configuration is passed via the design
    or at construction time. This makes them easy to test and swap.
    
    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """
    
    @property
    def name(self) -> str:
        """
        Backend identifier.
        
        Convention: '{device}_{algorithm}'
        Examples: 'cpu_golub_reinsch', 'cpu_lapack', 'cpu_pinv'
        """
        ...
    
    def solve(self, design: D) -> Result[P]:
        """
        Execute the computation.
        
        Args:
            design: Validated domain-specific design
            
        Returns:
            Result envelope containing parameter payload and metadata
            
        Raises:
            ConvergenceError: If the iterative phase fails to converge
            AllocationError: If a workspace cannot be allocated
            ValidationError: If design is invalid for this backend
        """
        ...
