"""
Outcome of a raw decomposition or solve call.

The flat-buffer kernels never raise for the three expected failure kinds.
They return an SVDStatus instead, which callers inspect with `ok` or
match on `code`. None of these failures is ever encoded in the numeric
output.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StatusCode(Enum):
    OK = 'ok'
    INVALID_INPUT = 'invalid_input'
    ALLOCATION_FAILED = 'allocation_failed'
    NOT_CONVERGED = 'not_converged'


@dataclass(frozen=True)
class SVDStatus:
    """
    Discriminated status of a kernel call.
    
    Attributes:
        code: Which outcome occurred
        index: For NOT_CONVERGED only, the first index whose singular value
               and U/V columns are final. Everything at index and above
               is usable; the value at index - 1 did not converge.
        message: Human-readable detail (empty for OK)
    """
    code: StatusCode
    index: int | None = None
    message: str = ''
    
    @classmethod
    def success(cls) -> SVDStatus:
        return cls(StatusCode.OK)
    
    @classmethod
    def invalid_input(cls, message: str) -> SVDStatus:
        return cls(StatusCode.INVALID_INPUT, message=message)
    
    @classmethod
    def allocation_failed(cls, message: str) -> SVDStatus:
        return cls(StatusCode.ALLOCATION_FAILED, message=message)
    
    @classmethod
    def not_converged(cls, index: int, iterations: int) -> SVDStatus:
        return cls(
            StatusCode.NOT_CONVERGED,
            index=index,
            message=(
                f"singular value {index - 1} did not converge after "
                f"{iterations} iterations"
            ),
        )
    
    @property
    def ok(self) -> bool:
        return self.code is StatusCode.OK
    
    @property
    def failed_index(self) -> int | None:
        if self.index is None:
            return None
        return self.index - 1
    
    def __str__(self) -> str:
        if self.code is StatusCode.NOT_CONVERGED:
            return f"NotConverged({self.index})"
        return self.code.name.title().replace('_', '')
