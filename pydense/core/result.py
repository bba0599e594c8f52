"""
Result envelope returned by diagnostic entry points such as
solve_determinant(). The payload type P is owned by the caller's domain
(DeterminantParams for determinants).
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Payload plus run metadata.

    Attributes:
        params: Computed payload
        info: Algorithm metadata (method, row_swaps, singular, atol)
        timing: Section timings from Timer.result(), or None
        backend_name: Algorithm identifier, e.g. 'cpu_cofactor'
        warnings: Notes about the run that did not stop it
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        return any(substring in note for note in self.warnings)
