"""
Cursor - random-access position into a RawBuffer.

A Cursor is a (buffer, position) pair. It does not own anything and is
not bounds-checked: dereferencing outside the live range of the buffer is
undefined, exactly like indexing with RawBuffer.at(). Writes are still
validated against the element dtype, like RawBuffer.__setitem__(). A cursor records the
buffer epoch at creation; once the buffer is reallocated, moved or swapped
the cursor is stale. Staleness is reported by is_valid() but not enforced.

Python has no unary dereference or ++/--, so:

    *it        -> it.value            (get and set)
    it->field  -> it.field            (falls through to the element)
    ++it       -> it.advance()
    it++       -> it.post_advance()
    it[k]      -> it[k]
    it + n     -> it + n, n + it, it - n, it += n, it -= n
    b - a      -> b - a               (signed element distance)
"""

from __future__ import annotations

from functools import total_ordering
from numbers import Integral
from typing import Any, Iterator, TYPE_CHECKING

from pydense.core.exceptions import ValidationError
from pydense.core.validation import check_scalar

if TYPE_CHECKING:
    from pydense.storage.buffer import RawBuffer


@total_ordering
class Cursor:
    """Random-access position over a contiguous buffer range."""

    __slots__ = ("_buffer", "_pos", "_epoch")

    def __init__(self, buffer: RawBuffer, position: int = 0):
        self._buffer = buffer
        self._pos = int(position)
        self._epoch = buffer.epoch

    def _derive(self, position: int) -> Cursor:
        moved = Cursor.__new__(Cursor)
        moved._buffer = self._buffer
        moved._pos = position
        moved._epoch = self._epoch
        return moved

    def _check_same(self, other: Cursor, operation: str) -> None:
        if other._buffer is not self._buffer:
            raise ValidationError(
                f"{operation}: cursors point into different buffers"
            )

    @property
    def buffer(self) -> RawBuffer:
        """The buffer this cursor points into."""
        return self._buffer

    @property
    def position(self) -> int:
        """Element offset from the start of the buffer."""
        return self._pos

    def is_valid(self) -> bool:
        """Whether the buffer has not been reallocated since this cursor was taken."""
        return self._epoch == self._buffer.epoch

    def copy(self) -> Cursor:
        return self._derive(self._pos)

    # -------------------------------------------------------------------------
    # Dereference
    # -------------------------------------------------------------------------

    @property
    def value(self) -> Any:
        """The element under the cursor."""
        return self._buffer.at(self._pos)

    @value.setter
    def value(self, new_value: Any) -> None:
        self._buffer.set_at(self._pos, check_scalar(new_value, self._buffer.dtype, "value"))

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        return getattr(self._buffer.at(self._pos), name)

    def __getitem__(self, offset: int) -> Any:
        return self._buffer.at(self._pos + offset)

    def __setitem__(self, offset: int, new_value: Any) -> None:
        self._buffer.set_at(self._pos + offset, check_scalar(new_value, self._buffer.dtype, "value"))

    # -------------------------------------------------------------------------
    # Movement
    # -------------------------------------------------------------------------

    def advance(self, n: int = 1) -> Cursor:
        """Move forward by n elements (prefix form); returns self."""
        self._pos += n
        return self

    def retreat(self, n: int = 1) -> Cursor:
        """Move back by n elements (prefix form); returns self."""
        self._pos -= n
        return self

    def post_advance(self) -> Cursor:
        """Move forward by one; returns a cursor at the old position."""
        old = self.copy()
        self._pos += 1
        return old

    def post_retreat(self) -> Cursor:
        """Move back by one; returns a cursor at the old position."""
        old = self.copy()
        self._pos -= 1
        return old

    def __add__(self, n: int) -> Cursor:
        if not isinstance(n, Integral):
            return NotImplemented
        return self._derive(self._pos + int(n))

    __radd__ = __add__

    def __sub__(self, other: Cursor | int) -> Cursor | int:
        if isinstance(other, Cursor):
            self._check_same(other, "distance")
            return self._pos - other._pos
        if not isinstance(other, Integral):
            return NotImplemented
        return self._derive(self._pos - int(other))

    def __iadd__(self, n: int) -> Cursor:
        if not isinstance(n, Integral):
            return NotImplemented
        self._pos += int(n)
        return self

    def __isub__(self, n: int) -> Cursor:
        if not isinstance(n, Integral):
            return NotImplemented
        self._pos -= int(n)
        return self

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self._buffer is other._buffer and self._pos == other._pos

    def __lt__(self, other: Cursor) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        self._check_same(other, "ordering")
        return self._pos < other._pos

    __hash__ = None

    def __repr__(self) -> str:
        state = "valid" if self.is_valid() else "stale"
        return f"Cursor(position={self._pos}, {state})"

    # -------------------------------------------------------------------------
    # Range helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def iterate(first: Cursor, last: Cursor, step: int = 1) -> Iterator[Any]:
        """
        Yield the elements of [first, last), stepping ``step`` elements.

        Raises:
            ValidationError: If the cursors belong to different buffers or
                             step is not positive
        """
        first._check_same(last, "iterate")
        if step < 1:
            raise ValidationError(f"step: must be positive, got {step}")
        buffer = first._buffer
        for pos in range(first._pos, last._pos, step):
            yield buffer.at(pos)
