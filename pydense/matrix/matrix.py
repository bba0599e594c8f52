"""
Matrix: user-facing dense matrix.

Matrix wraps a DenseStore and keeps a cache of per-row (offset, length)
slots so that ``m[i]`` is an O(1) lookup. The cache is a secondary index
over the store's buffer: it is rebuilt whenever the store's storage is
replaced (construction, factories, arithmetic, transpose, assignment).

Determinants are computed by pydense.matrix.determinant.
"""

from __future__ import annotations

import sys
from typing import Any, Iterable, Iterator, Sequence, TextIO

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from pydense.matrix import determinant as _determinant
from pydense.matrix.dense import DenseStore, RowView
from pydense.matrix.render import render
from pydense.storage.cursor import Cursor


class Matrix:
    """
    Dense row-major matrix.

    Construction:
        Matrix(rows, cols, fill=0, dtype=None)
        Matrix.from_list(rows, cols, [1, 2, 3, 4])
        Matrix.from_rows([[1, 2], [3, 4]])
        Matrix.from_range(rows, cols, first, last)
        Matrix.from_array(ndarray)
        Matrix.zero(rows, cols) / Matrix.identity(n) / Matrix.diag(n, values)

    Element access:
        m[i]        -> RowView of row i
        m[i][j]     -> element
        m[i, j]     -> element (get and set)
    """

    __slots__ = ("_store", "_row_slots", "_slots_epoch")

    __array_ufunc__ = None

    def __init__(
        self,
        rows: int,
        cols: int,
        fill: Any = 0,
        dtype: DTypeLike | None = None,
    ):
        self._store = DenseStore(rows, cols, fill, dtype)
        self._rebuild_row_cache()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_store(cls, store: DenseStore) -> Matrix:
        """Wrap an existing store (not copied)."""
        matrix = cls.__new__(cls)
        matrix._store = store
        matrix._rebuild_row_cache()
        return matrix

    @classmethod
    def from_list(
        cls,
        rows: int,
        cols: int,
        values: Iterable[Any],
        dtype: DTypeLike | None = None,
    ) -> Matrix:
        return cls.from_store(DenseStore.from_list(rows, cols, values, dtype))

    @classmethod
    def from_range(
        cls,
        rows: int,
        cols: int,
        first: Cursor,
        last: Cursor,
        dtype: DTypeLike | None = None,
    ) -> Matrix:
        return cls.from_store(DenseStore.from_range(rows, cols, first, last, dtype))

    @classmethod
    def from_rows(
        cls,
        nested: Sequence[Sequence[Any]],
        dtype: DTypeLike | None = None,
    ) -> Matrix:
        return cls.from_store(DenseStore.from_rows(nested, dtype))

    @classmethod
    def from_array(cls, array: ArrayLike, dtype: DTypeLike | None = None) -> Matrix:
        return cls.from_store(DenseStore.from_array(array, dtype))

    @classmethod
    def zero(cls, rows: int, cols: int, dtype: DTypeLike | None = None) -> Matrix:
        return cls.from_store(DenseStore.zero(rows, cols, dtype))

    @classmethod
    def identity(cls, n: int, dtype: DTypeLike | None = None) -> Matrix:
        return cls.from_store(DenseStore.identity(n, dtype))

    @classmethod
    def diag(
        cls,
        n: int,
        values: Iterable[Any],
        dtype: DTypeLike | None = None,
    ) -> Matrix:
        return cls.from_store(DenseStore.diag(n, values, dtype))

    # -------------------------------------------------------------------------
    # Row cache
    # -------------------------------------------------------------------------

    def _rebuild_row_cache(self) -> None:
        cols = self._store.cols
        self._row_slots = [(i * cols, cols) for i in range(self._store.rows)]
        self._slots_epoch = self._store.epoch

    def _sync_row_cache(self) -> None:
        if self._slots_epoch != self._store.epoch:
            # Storage replaced behind our back (e.g. through .store)
            self._rebuild_row_cache()

    def _swap_rows(self, i: int, j: int) -> None:
        # Logical row exchange without moving data; used on private copies
        slots = self._row_slots
        slots[i], slots[j] = slots[j], slots[i]

    @property
    def row_slots(self) -> tuple[tuple[int, int], ...]:
        """Cached (offset, length) of every row."""
        self._sync_row_cache()
        return tuple(self._row_slots)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def store(self) -> DenseStore:
        return self._store

    @property
    def nrows(self) -> int:
        return self._store.rows

    @property
    def ncols(self) -> int:
        return self._store.cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._store.shape

    @property
    def dtype(self) -> np.dtype:
        return self._store.dtype

    @property
    def square(self) -> bool:
        return self._store.square

    def __len__(self) -> int:
        return self._store.rows

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def _row(self, row: int) -> RowView:
        self._sync_row_cache()
        n = len(self._row_slots)
        if row < 0:
            row += n
        if row < 0 or row >= n:
            raise IndexError(f"row {row} out of range [0, {n})")
        offset, length = self._row_slots[row]
        return RowView(self._store.buffer, offset, length)

    def __getitem__(self, key: int | tuple[int, int]) -> Any:
        if isinstance(key, tuple):
            i, j = key
            return self._row(i)[j]
        return self._row(key)

    def __setitem__(self, key: tuple[int, int], value: Any) -> None:
        if not isinstance(key, tuple):
            raise TypeError("assign elements with matrix[i, j] = value")
        i, j = key
        self._row(i)[j] = value

    def __iter__(self) -> Iterator[RowView]:
        for i in range(self._store.rows):
            yield self._row(i)

    def begin(self) -> Cursor:
        return self._store.begin()

    def end(self) -> Cursor:
        return self._store.end()

    def to_numpy(self) -> NDArray:
        """Copy as a (rows, cols) NumPy array."""
        return self._store.to_numpy()

    def tolist(self) -> list[list[Any]]:
        return self._store.tolist()

    # -------------------------------------------------------------------------
    # Copy / assignment
    # -------------------------------------------------------------------------

    def copy(self) -> Matrix:
        return Matrix.from_store(self._store.copy())

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> Matrix:
        return self.copy()

    def assign(self, other: Matrix) -> Matrix:
        """Replace contents with a copy of other. Self-assignment is a no-op."""
        if other is not self:
            self._store = other._store.copy()
            self._rebuild_row_cache()
        return self

    # -------------------------------------------------------------------------
    # Arithmetic (in place)
    # -------------------------------------------------------------------------

    def __iadd__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._store += other._store
        self._rebuild_row_cache()
        return self

    def __isub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._store -= other._store
        self._rebuild_row_cache()
        return self

    def __imul__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            self._store.matmul(other._store)
        else:
            self._store.scale(other)
        self._rebuild_row_cache()
        return self

    def __imatmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._store.matmul(other._store)
        self._rebuild_row_cache()
        return self

    def __itruediv__(self, value: Any) -> Matrix:
        self._store.divide(value)
        self._rebuild_row_cache()
        return self

    # -------------------------------------------------------------------------
    # Arithmetic (new value)
    # -------------------------------------------------------------------------

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix.from_store(self._store + other._store)

    def __sub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix.from_store(self._store - other._store)

    def __mul__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return Matrix.from_store(self._store @ other._store)
        return Matrix.from_store(self._store * other)

    def __rmul__(self, value: Any) -> Matrix:
        return Matrix.from_store(value * self._store)

    def __matmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix.from_store(self._store @ other._store)

    def __truediv__(self, value: Any) -> Matrix:
        return Matrix.from_store(self._store / value)

    def __neg__(self) -> Matrix:
        return Matrix.from_store(-self._store)

    # -------------------------------------------------------------------------
    # Shape operations
    # -------------------------------------------------------------------------

    def transpose(self) -> Matrix:
        """Transpose in place and return self."""
        self._store.transpose()
        self._rebuild_row_cache()
        return self

    @property
    def T(self) -> Matrix:
        """Transposed copy."""
        return self.copy().transpose()

    def trace(self) -> Any:
        return self._store.trace()

    def determinant(self, atol: float | None = None) -> Any:
        """
        Determinant in the element type.

        Floating matrices use pivoted elimination (a pivot within ``atol``
        of zero gives 0); integer and object matrices use exact cofactor
        expansion.

        Raises:
            DimensionError: If the matrix is not square
        """
        return _determinant.determinant(self, atol)

    # -------------------------------------------------------------------------
    # Comparison / display
    # -------------------------------------------------------------------------

    def equals(self, other: Matrix, atol: float | None = None) -> bool:
        return self._store.equals(other._store, atol)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._store.equals(other._store)

    __hash__ = None

    def dump(self, stream: TextIO | None = None) -> None:
        """Write the textual rendering to stream (default stdout)."""
        stream = sys.stdout if stream is None else stream
        stream.write(render(self) + "\n")

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"Matrix({self.nrows}x{self.ncols}, dtype={self.dtype})"
