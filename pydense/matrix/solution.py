"""
Determinant solution types.

Contains the parameter payload and user-facing solution wrapper returned by
solve_determinant().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydense.core.result import Result


@dataclass(frozen=True)
class DeterminantParams:
    """Parameter payload for a determinant computation."""
    value: Any
    order: int


@dataclass
class DeterminantSolution:
    """
    User-facing determinant result.

    Wraps Result[DeterminantParams] and provides convenient accessors.
    """
    _result: Result[DeterminantParams]

    @property
    def value(self) -> Any:
        """The determinant, in the matrix element type."""
        return self._result.params.value

    @property
    def order(self) -> int:
        """n for an n x n input."""
        return self._result.params.order

    @property
    def method(self) -> str:
        """'elimination' or 'cofactor'."""
        return self._result.info['method']

    @property
    def row_swaps(self) -> int:
        """Row exchanges performed while pivoting (always 0 for cofactor)."""
        return self._result.info['row_swaps']

    @property
    def singular(self) -> bool:
        """Whether the determinant is zero (or a pivot fell within tolerance)."""
        return self._result.info['singular']

    @property
    def atol(self) -> float:
        """Singularity tolerance used by elimination."""
        return self._result.info['atol']

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Short human-readable report."""
        lines = [
            f"Determinant of {self.order}x{self.order} matrix",
            f"  value:     {self.value}",
            f"  method:    {self.method} ({self.backend_name})",
        ]
        if self.method == 'elimination':
            lines.append(f"  row swaps: {self.row_swaps}")
            lines.append(f"  tolerance: {self.atol:g}")
        lines.append(f"  singular:  {'yes' if self.singular else 'no'}")
        if self.timing is not None:
            lines.append(f"  time:      {self.timing['total_seconds']:.6f}s")
        for w in self.warnings:
            lines.append(f"  warning:   {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"DeterminantSolution(value={self.value!r}, method={self.method!r})"
