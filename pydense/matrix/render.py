"""
Textual rendering of matrices.

Format:
    rows = 2, cols = 3
    | 1 2 3 |
    | 4 5 6 |

The header reports the row and column counts; each following line is one
row, elements separated by single spaces and framed by ``| `` and `` |``.
An empty row renders as ``| |``.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol


class _Renderable(Protocol):
    @property
    def shape(self) -> tuple[int, int]: ...

    def __iter__(self) -> Iterable[Iterable[Any]]: ...


def format_row(values: Iterable[Any]) -> str:
    """Format one row as ``| v0 v1 ... vk |``."""
    body = " ".join(str(v) for v in values)
    return f"| {body} |" if body else "| |"


def render(matrix: _Renderable) -> str:
    """Render a matrix (or DenseStore) as text, without a trailing newline."""
    rows, cols = matrix.shape
    lines = [f"rows = {rows}, cols = {cols}"]
    lines.extend(format_row(row) for row in matrix)
    return "\n".join(lines)
