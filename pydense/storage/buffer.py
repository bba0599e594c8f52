"""
RawBuffer - growable contiguous storage.

A RawBuffer owns one NumPy array used as a fixed-capacity slab. The first
``size`` slots are live; the remaining ``capacity - size`` slots are raw
storage whose contents are unspecified. Appending past capacity grows the
slab to the next power of two, so n sequential appends relocate O(n)
elements in total.

Reallocation always builds the new slab completely before the old one is
released: if allocation or relocation fails the buffer is left exactly as
it was.

Usage:
    buf = RawBuffer(dtype=np.int64)   # capacity 8, size 0
    for i in range(100):
        buf.append(i)
    buf.capacity                      # -> 128
    buf.remove_last()                 # -> 99
    first, last = buf.begin(), buf.end()
    last - first                      # -> 99
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, TYPE_CHECKING

import numpy as np
from numpy.typing import DTypeLike, NDArray

from pydense.core.dtypes import as_dtype, infer_dtype
from pydense.core.exceptions import AllocationError, EmptyBufferError, ValidationError
from pydense.core.validation import can_store, check_count, check_scalar

if TYPE_CHECKING:
    from pydense.storage.cursor import Cursor


DEFAULT_CAPACITY = 8


def next_capacity(capacity: int) -> int:
    """Smallest power of two strictly greater than capacity."""
    return 1 << capacity.bit_length()


def allocate(capacity: int, dtype: np.dtype) -> NDArray:
    """
    Allocate an uninitialized slab of ``capacity`` elements.

    Raises:
        AllocationError: If the memory cannot be obtained
    """
    try:
        return np.empty(capacity, dtype=dtype)
    except (MemoryError, ValueError) as e:
        raise AllocationError(
            f"cannot allocate {capacity} elements of {dtype}: {e}",
            requested=capacity,
            dtype=dtype,
        ) from e


def coerce_values(values: list[Any], dtype: np.dtype, name: str) -> NDArray:
    """
    Convert a list of Python values to a 1D array of dtype.

    Numeric storage rejects values whose kind would change on conversion
    (floats into integer storage), matching check_scalar().

    Raises:
        ValidationError: If values cannot be stored without changing kind
    """
    if dtype.hasobject:
        out = np.empty(len(values), dtype=object)
        for i, value in enumerate(values):
            out[i] = value
        return out
    try:
        arr = np.asarray(values)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e
    if arr.ndim != 1:
        raise ValidationError(f"{name}: expected flat sequence, got shape {arr.shape}")
    if arr.size and not can_store(arr.dtype, dtype):
        raise ValidationError(
            f"{name}: {arr.dtype} values cannot be stored as {dtype} "
            f"without changing their kind"
        )
    return arr.astype(dtype, copy=False)


class RawBuffer:
    """
    Growable contiguous buffer of a single NumPy dtype.

    Attributes:
        size: Number of live elements
        capacity: Number of allocated slots
        dtype: Element dtype
        epoch: Bumped whenever the backing slab is replaced, moved or
               swapped. Cursors taken in an older epoch are stale.
        relocations: Total elements copied by reserve()/growth so far
    """

    __slots__ = ("_data", "_size", "_dtype", "_epoch", "_relocations")

    def __init__(self, dtype: DTypeLike | None = None):
        self._dtype = as_dtype(dtype)
        self._data = allocate(DEFAULT_CAPACITY, self._dtype)
        self._size = 0
        self._epoch = 0
        self._relocations = 0

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def _from_array(cls, data: NDArray, size: int) -> RawBuffer:
        buf = cls.__new__(cls)
        buf._dtype = data.dtype
        buf._data = data
        buf._size = size
        buf._epoch = 0
        buf._relocations = 0
        return buf

    @classmethod
    def with_capacity(cls, capacity: int, dtype: DTypeLike | None = None) -> RawBuffer:
        """Create an empty buffer with exactly ``capacity`` slots."""
        capacity = check_count(capacity, "capacity")
        return cls._from_array(allocate(capacity, as_dtype(dtype)), 0)

    @classmethod
    def filled(cls, count: int, value: Any, dtype: DTypeLike | None = None) -> RawBuffer:
        """Create a buffer of ``count`` copies of ``value`` (capacity == count)."""
        count = check_count(count, "count")
        dtype = as_dtype(dtype)
        value = check_scalar(value, dtype, "value")
        data = allocate(count, dtype)
        data.fill(value)
        return cls._from_array(data, count)

    @classmethod
    def from_iterable(
        cls,
        values: Iterable[Any],
        dtype: DTypeLike | None = None,
    ) -> RawBuffer:
        """
        Copy a finite iterable into a new buffer.

        Args:
            values: Elements to copy, in order
            dtype: Element dtype; inferred from the values when None
        """
        values = list(values)
        dtype = infer_dtype(values) if dtype is None else as_dtype(dtype)
        return cls._from_array(coerce_values(values, dtype, "values"), len(values))

    @classmethod
    def from_range(
        cls,
        first: Cursor,
        last: Cursor,
        dtype: DTypeLike | None = None,
    ) -> RawBuffer:
        """
        Copy the cursor range [first, last) into a new buffer.

        Args:
            first: Cursor to the first element to copy
            last: Cursor one past the last element to copy
            dtype: Element dtype; defaults to the source buffer's dtype
        """
        count = last - first
        if count < 0:
            raise ValidationError(f"range: last precedes first by {-count} elements")
        source = first.buffer.view(first.position, last.position)
        dtype = source.dtype if dtype is None else as_dtype(dtype)
        data = allocate(count, dtype)
        if dtype.hasobject or source.dtype.hasobject:
            for i in range(count):
                data[i] = source[i]
        else:
            if not can_store(source.dtype, dtype):
                raise ValidationError(
                    f"range: {source.dtype} elements cannot be stored as {dtype}"
                )
            np.copyto(data, source, casting='unsafe')
        return cls._from_array(data, count)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of live elements."""
        return self._size

    @property
    def capacity(self) -> int:
        """Number of allocated slots."""
        return len(self._data)

    @property
    def dtype(self) -> np.dtype:
        """Element dtype."""
        return self._dtype

    @property
    def empty(self) -> bool:
        """Whether the buffer holds no live elements."""
        return self._size == 0

    @property
    def epoch(self) -> int:
        """Reallocation epoch."""
        return self._epoch

    @property
    def relocations(self) -> int:
        """Total number of elements relocated by growth."""
        return self._relocations

    def __len__(self) -> int:
        return self._size

    # -------------------------------------------------------------------------
    # Capacity management
    # -------------------------------------------------------------------------

    def reserve(self, capacity: int) -> None:
        """
        Ensure at least ``capacity`` slots are allocated.

        No-op when capacity <= self.capacity. Otherwise a slab of exactly
        ``capacity`` slots is built, the live elements are relocated into
        it, and only then is the old slab released.

        Raises:
            AllocationError: If the new slab cannot be allocated; the buffer
                             is unchanged
        """
        capacity = check_count(capacity, "capacity")
        if capacity <= len(self._data):
            return

        fresh = allocate(capacity, self._dtype)
        n = self._size
        if self._dtype.hasobject:
            for i in range(n):
                fresh[i] = self._data[i]
        else:
            np.copyto(fresh[:n], self._data[:n])

        self._data = fresh
        self._relocations += n
        self._epoch += 1

    def _grow(self) -> None:
        self.reserve(next_capacity(len(self._data)))

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def append(self, value: Any) -> None:
        """Append value at the end, growing first if the buffer is full."""
        value = check_scalar(value, self._dtype, "value")
        if self._size == len(self._data):
            self._grow()
        self._data[self._size] = value
        self._size += 1

    def remove_last(self) -> Any:
        """
        Remove and return the last live element.

        Raises:
            EmptyBufferError: If the buffer is empty
        """
        if self._size == 0:
            raise EmptyBufferError("remove_last() on an empty buffer")
        self._size -= 1
        value = self._data[self._size]
        if self._dtype.hasobject:
            self._data[self._size] = None
        return value

    def front(self) -> Any:
        """First live element."""
        if self._size == 0:
            raise EmptyBufferError("front() on an empty buffer")
        return self._data[0]

    def last(self) -> Any:
        """Last live element."""
        if self._size == 0:
            raise EmptyBufferError("last() on an empty buffer")
        return self._data[self._size - 1]

    def clear(self) -> None:
        """Drop all live elements. Capacity is unchanged."""
        if self._dtype.hasobject:
            self._data[:self._size] = None
        self._size = 0

    def at(self, index: int) -> Any:
        """Unchecked element read. Precondition: 0 <= index < size."""
        return self._data[index]

    def set_at(self, index: int, value: Any) -> None:
        """Unchecked element write. Precondition: 0 <= index < size."""
        self._data[index] = value

    def _check_index(self, index: int) -> int:
        if index < 0:
            index += self._size
        if index < 0 or index >= self._size:
            raise IndexError(f"index {index} out of range [0, {self._size})")
        return index

    def __getitem__(self, index: int) -> Any:
        return self._data[self._check_index(index)]

    def __setitem__(self, index: int, value: Any) -> None:
        self._data[self._check_index(index)] = check_scalar(value, self._dtype, "value")

    def __iter__(self) -> Iterator[Any]:
        for i in range(self._size):
            yield self._data[i]

    def data(self) -> NDArray:
        """Writable view of the live elements."""
        return self._data[:self._size]

    def view(self, start: int, stop: int) -> NDArray:
        """Writable view of slots [start, stop). Unchecked against size."""
        return self._data[start:stop]

    def tolist(self) -> list[Any]:
        """Live elements as a Python list."""
        return self.data().tolist()

    def begin(self) -> Cursor:
        """Cursor to the first live element."""
        from pydense.storage.cursor import Cursor
        return Cursor(self, 0)

    def end(self) -> Cursor:
        """Cursor one past the last live element."""
        from pydense.storage.cursor import Cursor
        return Cursor(self, self._size)

    # -------------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------------

    def copy(self) -> RawBuffer:
        """Deep copy: same capacity, live elements copied, no shared slab."""
        clone = RawBuffer._from_array(allocate(len(self._data), self._dtype), self._size)
        clone._data[:self._size] = self._data[:self._size]
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> RawBuffer:
        return self.copy()

    def assign(self, other: RawBuffer) -> None:
        """Copy-assign from other. Self-assignment is a no-op."""
        if other is self:
            return
        replacement = other.copy()
        self._dtype = replacement._dtype
        self._data = replacement._data
        self._size = replacement._size
        self._epoch += 1

    def take(self) -> RawBuffer:
        """
        Move the storage into a new buffer.

        The source is left in the default-empty state (capacity 8, size 0)
        with the same dtype, and every cursor into it becomes stale.
        """
        moved = RawBuffer._from_array(self._data, self._size)
        moved._relocations = self._relocations
        self._data = allocate(DEFAULT_CAPACITY, self._dtype)
        self._size = 0
        self._relocations = 0
        self._epoch += 1
        return moved

    def swap(self, other: RawBuffer) -> None:
        """Exchange storage with other. Cursors into both become stale."""
        if other is self:
            return
        self._data, other._data = other._data, self._data
        self._size, other._size = other._size, self._size
        self._dtype, other._dtype = other._dtype, self._dtype
        self._relocations, other._relocations = other._relocations, self._relocations
        self._epoch += 1
        other._epoch += 1

    def adopt(self, data: NDArray) -> None:
        """
        Replace the storage with a fully built 1D array.

        The array becomes the new slab with every slot live. Used by
        containers that compute a result out of place and then swap it in.
        """
        if data.ndim != 1:
            raise ValidationError(f"data: expected 1D array, got shape {data.shape}")
        self._dtype = data.dtype
        self._data = data
        self._size = len(data)
        self._epoch += 1

    # -------------------------------------------------------------------------
    # Comparison / display
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawBuffer):
            return NotImplemented
        return self._size == other._size and bool(np.array_equal(self.data(), other.data()))

    __hash__ = None

    def __repr__(self) -> str:
        name = type(self).__name__
        if self._size <= 8:
            content = ", ".join(str(x) for x in self)
        else:
            first = ", ".join(str(self._data[i]) for i in range(4))
            last = ", ".join(str(self._data[i]) for i in range(self._size - 2, self._size))
            content = f"{first}, ..., {last}"
        return f"{name}([{content}], size={self._size}, capacity={self.capacity})"
