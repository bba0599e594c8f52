"""
DenseStore: row-major dense matrix storage.

A DenseStore is a RawBuffer of exactly rows x cols elements plus the shape.
Every constructor establishes len(buffer) == rows * cols and every mutator
preserves it. Mutators that change values compute the result into a fresh
array and only then swap it into the buffer, so a failed operation leaves
the receiver unchanged.

Construction:
    DenseStore(rows, cols, fill=0, dtype=None)
    DenseStore.from_list(rows, cols, values)
    DenseStore.from_range(rows, cols, first, last)
    DenseStore.from_rows([[1, 2], [3, 4]])
    DenseStore.from_array(ndarray)
    DenseStore.zero(rows, cols) / identity(n) / diag(n, values)
"""

from __future__ import annotations

from itertools import islice
from typing import Any, Iterable, Iterator, Sequence

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from pydense.core.compute.tolerances import resolve_atol
from pydense.core.dtypes import as_dtype, infer_dtype, is_floating, one_of, zero_of
from pydense.core.exceptions import DimensionError, ValidationError
from pydense.core.validation import (
    can_store,
    check_chainable,
    check_nonzero,
    check_same_shape,
    check_scalar,
    check_shape,
    check_square,
)
from pydense.matrix.render import render
from pydense.storage.buffer import RawBuffer, allocate, coerce_values
from pydense.storage.cursor import Cursor


class RowView:
    """
    Bounds-carrying view of one matrix row.

    Holds the owning buffer, the row's start offset and its length. The
    view reads through to the buffer, so it observes later writes but is
    invalidated, like a Cursor, when the buffer is reallocated.
    """

    __slots__ = ("_buffer", "_offset", "_length")

    def __init__(self, buffer: RawBuffer, offset: int, length: int):
        self._buffer = buffer
        self._offset = offset
        self._length = length

    @property
    def offset(self) -> int:
        return self._offset

    def __len__(self) -> int:
        return self._length

    def _check_index(self, index: int) -> int:
        if index < 0:
            index += self._length
        if index < 0 or index >= self._length:
            raise IndexError(f"column {index} out of range [0, {self._length})")
        return index

    def __getitem__(self, index: int) -> Any:
        return self._buffer.at(self._offset + self._check_index(index))

    def __setitem__(self, index: int, value: Any) -> None:
        value = check_scalar(value, self._buffer.dtype, "value")
        self._buffer.set_at(self._offset + self._check_index(index), value)

    def __iter__(self) -> Iterator[Any]:
        for j in range(self._length):
            yield self._buffer.at(self._offset + j)

    def begin(self) -> Cursor:
        """Cursor to the first element of the row."""
        return Cursor(self._buffer, self._offset)

    def end(self) -> Cursor:
        """Cursor one past the last element of the row."""
        return Cursor(self._buffer, self._offset + self._length)

    @property
    def values(self) -> NDArray:
        """Writable NumPy view of the row."""
        return self._buffer.view(self._offset, self._offset + self._length)

    def tolist(self) -> list[Any]:
        return self.values.tolist()

    def __repr__(self) -> str:
        return f"RowView({self.tolist()})"


class DenseStore:
    """
    Row-major dense matrix storage.

    Attributes:
        rows: Number of rows
        cols: Number of columns
        dtype: Element dtype
        buffer: Underlying RawBuffer (length rows * cols)
    """

    __slots__ = ("_rows", "_cols", "_buffer")

    # NumPy scalars on the left of an operator defer to our reflected methods
    __array_ufunc__ = None

    def __init__(
        self,
        rows: int,
        cols: int,
        fill: Any = 0,
        dtype: DTypeLike | None = None,
    ):
        rows, cols = check_shape(rows, cols)
        self._rows = rows
        self._cols = cols
        self._buffer = RawBuffer.filled(rows * cols, fill, dtype)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def _wrap(cls, rows: int, cols: int, buffer: RawBuffer) -> DenseStore:
        store = cls.__new__(cls)
        store._rows = rows
        store._cols = cols
        store._buffer = buffer
        return store

    @classmethod
    def _from_prefix(
        cls,
        rows: int,
        cols: int,
        prefix: NDArray,
        dtype: np.dtype,
    ) -> DenseStore:
        count = rows * cols
        if len(prefix) > count:
            raise DimensionError(
                f"values: {len(prefix)} elements do not fit a {rows}x{cols} matrix",
                expected=(rows, cols),
                actual=(len(prefix),),
            )
        store = cls(rows, cols, zero_of(dtype), dtype)
        store._buffer.data()[:len(prefix)] = prefix
        return store

    @classmethod
    def from_list(
        cls,
        rows: int,
        cols: int,
        values: Iterable[Any],
        dtype: DTypeLike | None = None,
    ) -> DenseStore:
        """
        Build from a flat row-major list.

        Fewer than rows * cols values fill the leading elements and leave the
        rest at zero; more values raise DimensionError.
        """
        rows, cols = check_shape(rows, cols)
        values = list(values)
        dtype = infer_dtype(values) if dtype is None else as_dtype(dtype)
        return cls._from_prefix(rows, cols, coerce_values(values, dtype, "values"), dtype)

    @classmethod
    def from_range(
        cls,
        rows: int,
        cols: int,
        first: Cursor,
        last: Cursor,
        dtype: DTypeLike | None = None,
    ) -> DenseStore:
        """Build from the cursor range [first, last), same fill rule as from_list()."""
        rows, cols = check_shape(rows, cols)
        prefix = RawBuffer.from_range(first, last, dtype)
        return cls._from_prefix(rows, cols, prefix.data(), prefix.dtype)

    @classmethod
    def from_rows(
        cls,
        nested: Sequence[Sequence[Any]],
        dtype: DTypeLike | None = None,
    ) -> DenseStore:
        """
        Build from a sequence of equal-length rows.

        Raises:
            DimensionError: If the rows are ragged
        """
        row_lists = [list(row) for row in nested]
        rows = len(row_lists)
        cols = len(row_lists[0]) if rows else 0
        for i, row in enumerate(row_lists):
            if len(row) != cols:
                raise DimensionError(
                    f"rows: row {i} has {len(row)} elements, row 0 has {cols}",
                    expected=(rows, cols),
                )
        flat = [v for row in row_lists for v in row]
        return cls.from_list(rows, cols, flat, dtype)

    @classmethod
    def from_array(cls, array: ArrayLike, dtype: DTypeLike | None = None) -> DenseStore:
        """
        Build from a 2D array-like (copied).

        Raises:
            DimensionError: If the input is not 2D
        """
        arr = np.asarray(array)
        if arr.ndim != 2:
            raise DimensionError(
                f"array: expected 2D array, got {arr.ndim}D with shape {arr.shape}",
                expected="2D",
                actual=arr.shape,
            )
        rows, cols = arr.shape
        dtype = as_dtype(arr.dtype if dtype is None else dtype)
        return cls._wrap(rows, cols, RawBuffer.from_iterable(arr.reshape(-1).tolist(), dtype))

    @classmethod
    def zero(cls, rows: int, cols: int, dtype: DTypeLike | None = None) -> DenseStore:
        """rows x cols matrix of zeros."""
        dtype = as_dtype(dtype)
        return cls(rows, cols, zero_of(dtype), dtype)

    @classmethod
    def identity(cls, n: int, dtype: DTypeLike | None = None) -> DenseStore:
        """n x n identity: ones at stride n + 1 from the first element."""
        store = cls.zero(n, n, dtype)
        store._buffer.data()[::n + 1] = one_of(store.dtype)
        return store

    @classmethod
    def diag(
        cls,
        n: int,
        values: Iterable[Any],
        dtype: DTypeLike | None = None,
    ) -> DenseStore:
        """
        n x n zero matrix with ``values`` placed along the diagonal.

        Placement stops at whichever runs out first, n or the values;
        unfilled diagonal positions stay zero.
        """
        n, _ = check_shape(n, n)
        head = list(islice(values, n))
        dtype = infer_dtype(head) if dtype is None else as_dtype(dtype)
        store = cls.zero(n, n, dtype)
        if head:
            store._buffer.data()[:len(head) * (n + 1):n + 1] = coerce_values(head, dtype, "values")
        return store

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    @property
    def buffer(self) -> RawBuffer:
        return self._buffer

    @property
    def epoch(self) -> int:
        """Epoch of the backing buffer; changes whenever storage is replaced."""
        return self._buffer.epoch

    @property
    def square(self) -> bool:
        return self._rows == self._cols

    def __len__(self) -> int:
        return self._rows

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def _check_row(self, row: int) -> int:
        if row < 0:
            row += self._rows
        if row < 0 or row >= self._rows:
            raise IndexError(f"row {row} out of range [0, {self._rows})")
        return row

    def at(self, row: int) -> RowView:
        """View of row ``row``."""
        row = self._check_row(row)
        return RowView(self._buffer, row * self._cols, self._cols)

    def __getitem__(self, key: int | tuple[int, int]) -> Any:
        if isinstance(key, tuple):
            i, j = key
            return self.at(i)[j]
        return self.at(key)

    def __setitem__(self, key: tuple[int, int], value: Any) -> None:
        if not isinstance(key, tuple):
            raise TypeError("assign elements with store[i, j] = value")
        i, j = key
        self.at(i)[j] = value

    def __iter__(self) -> Iterator[RowView]:
        for i in range(self._rows):
            yield RowView(self._buffer, i * self._cols, self._cols)

    def begin(self) -> Cursor:
        return self._buffer.begin()

    def end(self) -> Cursor:
        return self._buffer.end()

    def data(self) -> NDArray:
        """Writable flat (row-major) view of all elements."""
        return self._buffer.data()

    def to_numpy(self) -> NDArray:
        """Copy as a (rows, cols) NumPy array."""
        return self._buffer.data().reshape(self._rows, self._cols).copy()

    def tolist(self) -> list[list[Any]]:
        return self._buffer.data().reshape(self._rows, self._cols).tolist()

    def copy(self) -> DenseStore:
        return DenseStore._wrap(self._rows, self._cols, self._buffer.copy())

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> DenseStore:
        return self.copy()

    # -------------------------------------------------------------------------
    # Arithmetic (in place)
    # -------------------------------------------------------------------------

    def _replace(self, rows: int, cols: int, data: NDArray) -> None:
        self._buffer.adopt(np.ascontiguousarray(data, dtype=self.dtype).reshape(-1))
        self._rows = rows
        self._cols = cols

    def _check_operand_dtype(self, other: DenseStore, operation: str) -> None:
        if self.dtype.hasobject or other.dtype.hasobject:
            return
        if not can_store(other.dtype, self.dtype):
            raise ValidationError(
                f"{operation}: {other.dtype} operand cannot be combined with "
                f"{self.dtype} elements without changing their kind"
            )

    def _elementwise(self, other: DenseStore, ufunc: np.ufunc, operation: str) -> DenseStore:
        if not isinstance(other, DenseStore):
            return NotImplemented
        check_same_shape(self.shape, other.shape, operation)
        self._check_operand_dtype(other, operation)
        self._replace(self._rows, self._cols, ufunc(self.data(), other.data()))
        return self

    def __iadd__(self, other: DenseStore) -> DenseStore:
        return self._elementwise(other, np.add, "add")

    def __isub__(self, other: DenseStore) -> DenseStore:
        return self._elementwise(other, np.subtract, "subtract")

    def scale(self, value: Any) -> DenseStore:
        """Multiply every element by a scalar, in place."""
        value = check_scalar(value, self.dtype, "scalar")
        self._replace(self._rows, self._cols, self.data() * value)
        return self

    def divide(self, value: Any) -> DenseStore:
        """
        Divide every element by a scalar, in place.

        Integer storage uses floor division so the element type is kept.
        Negative quotients therefore round toward negative infinity
        (-7 / 2 gives -4), not toward zero as C-style integer division
        would (-3). Floating and object storage use true division.

        Raises:
            DivideByZeroError: If value is zero
        """
        value = check_scalar(value, self.dtype, "scalar")
        check_nonzero(value, self.dtype, "scalar")
        if np.issubdtype(self.dtype, np.integer):
            result = np.floor_divide(self.data(), value)
        else:
            result = self.data() / value
        self._replace(self._rows, self._cols, result)
        return self

    def matmul(self, other: DenseStore) -> DenseStore:
        """
        Replace self with self x other.

        Uses k-i-j loop order: for each shared index k and output row i, the
        scalar left[i][k] is read once and multiplied across row k of the
        right operand, accumulating into output row i. Both the row being
        read and the row being written are traversed sequentially.

        Raises:
            DimensionError: If self.cols != other.rows
        """
        check_chainable(self.shape, other.shape)
        self._check_operand_dtype(other, "matmul")
        n, m = self.shape
        p = other.cols
        left = self.data().reshape(n, m)
        right = other.data().reshape(m, p)
        result = np.full((n, p), zero_of(self.dtype), dtype=self.dtype)
        for k in range(m):
            right_row = right[k]
            for i in range(n):
                result[i] += left[i, k] * right_row
        self._replace(n, p, result)
        return self

    def __imul__(self, other: Any) -> DenseStore:
        if isinstance(other, DenseStore):
            return self.matmul(other)
        return self.scale(other)

    def __imatmul__(self, other: DenseStore) -> DenseStore:
        if not isinstance(other, DenseStore):
            return NotImplemented
        return self.matmul(other)

    def __itruediv__(self, value: Any) -> DenseStore:
        return self.divide(value)

    # -------------------------------------------------------------------------
    # Arithmetic (new value)
    # -------------------------------------------------------------------------

    def __add__(self, other: DenseStore) -> DenseStore:
        if not isinstance(other, DenseStore):
            return NotImplemented
        result = self.copy()
        result += other
        return result

    def __sub__(self, other: DenseStore) -> DenseStore:
        if not isinstance(other, DenseStore):
            return NotImplemented
        result = self.copy()
        result -= other
        return result

    def __mul__(self, other: Any) -> DenseStore:
        result = self.copy()
        result *= other
        return result

    def __rmul__(self, value: Any) -> DenseStore:
        return self.copy().scale(value)

    def __matmul__(self, other: DenseStore) -> DenseStore:
        if not isinstance(other, DenseStore):
            return NotImplemented
        return self.copy().matmul(other)

    def __truediv__(self, value: Any) -> DenseStore:
        return self.copy().divide(value)

    def __neg__(self) -> DenseStore:
        result = self.copy()
        result._replace(self._rows, self._cols, np.negative(self.data()))
        return result

    # -------------------------------------------------------------------------
    # Shape operations
    # -------------------------------------------------------------------------

    def trace(self) -> Any:
        """
        Sum of the diagonal.

        Walks a cursor from the first element with stride cols + 1.

        Raises:
            DimensionError: If the matrix is not square
        """
        n = check_square(self.shape, "trace")
        total = zero_of(self.dtype)
        cursor = self.begin()
        for _ in range(n):
            total = total + cursor.value
            cursor += n + 1
        return total

    def transpose(self) -> DenseStore:
        """
        Transpose in place and return self.

        Square matrices swap element pairs across the diagonal without
        reallocating. Rectangular matrices are copied into a fresh cols x rows
        buffer which then replaces the receiver.
        """
        rows, cols = self.shape
        if rows == cols:
            grid = self.data().reshape(rows, cols)
            upper = np.triu_indices(rows, k=1)
            lower = (upper[1], upper[0])
            grid[upper], grid[lower] = grid[lower], grid[upper]
            return self
        fresh = allocate(rows * cols, self.dtype)
        fresh.reshape(cols, rows)[...] = self.data().reshape(rows, cols).T
        self._replace(cols, rows, fresh)
        return self

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def equals(self, other: DenseStore, atol: float | None = None) -> bool:
        """
        Compare with another store.

        Differing shapes are never equal. If either operand holds floating
        elements, elements compare within ``atol``. The default is the
        loosest tier among the floating operands (1e-4 if either is float32,
        else 1e-6), so the comparison is symmetric. Otherwise elements
        compare exactly.
        """
        if self.shape != other.shape:
            return False
        a, b = self.data(), other.data()
        floating = [dt for dt in (self.dtype, other.dtype) if is_floating(dt)]
        if floating:
            tol = max(resolve_atol(dt, atol) for dt in floating)
            return bool(np.all(np.abs(a - b) <= tol))
        return bool(np.array_equal(a, b))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseStore):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"DenseStore({self._rows}x{self._cols}, dtype={self.dtype})"
