"""
Determinant algorithms.

Two mutually exclusive algorithms share one input contract (a square
Matrix). Which one runs is decided by the element category of the dtype,
resolved once per dtype and cached:

    FLOATING -> pivoted Gaussian elimination, O(n^3)
    EXACT    -> recursive cofactor expansion along row 0, O(n!)

Cofactor expansion never divides, so integer and object (Fraction) inputs
produce exact results in their own element type. Elimination divides by the
pivot and is only used where division is well defined.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pydense.core.compute.tolerances import resolve_atol
from pydense.core.dtypes import ElementCategory, element_category, one_of, zero_of
from pydense.core.validation import check_square

if TYPE_CHECKING:
    from pydense.matrix.matrix import Matrix


# Cofactor expansion on matrices this large or larger emits a RuntimeWarning
COFACTOR_WARN_SIZE = 10


@dataclass(frozen=True)
class Outcome:
    """
    Raw output of a determinant algorithm.

    Attributes:
        value: The determinant, in the matrix element type
        row_swaps: Pivoting row exchanges performed (0 for cofactor)
        singular: True when the result is zero
    """
    value: Any
    row_swaps: int
    singular: bool


@dataclass(frozen=True)
class DeterminantAlgorithm:
    """A determinant algorithm bound to the element category it serves."""
    method: str
    backend_name: str
    run: Callable[['Matrix', float], Outcome]


def _pivot_row(work: 'Matrix', col: int) -> tuple[int, Any]:
    # First occurrence of the largest magnitude wins ties
    best_row = col
    best = abs(work[col][col])
    for r in range(col + 1, work.nrows):
        magnitude = abs(work[r][col])
        if magnitude > best:
            best_row, best = r, magnitude
    return best_row, best


def eliminate(matrix: 'Matrix', atol: float) -> Outcome:
    """
    Determinant by Gaussian elimination with partial pivoting.

    Works on a private copy. Row exchanges swap the copy's cached row slots
    instead of moving data. A pivot whose magnitude is within ``atol`` of
    zero ends the computation with determinant 0.
    """
    work = matrix.copy()
    n = work.nrows
    dtype = work.dtype
    sign = 1
    swaps = 0

    for i in range(n):
        pivot_row, magnitude = _pivot_row(work, i)
        if magnitude <= atol:
            return Outcome(value=zero_of(dtype), row_swaps=swaps, singular=True)
        if pivot_row != i:
            work._swap_rows(i, pivot_row)
            sign = -sign
            swaps += 1

        pivot = work[i].values
        for j in range(i + 1, n):
            row = work[j].values
            coef = row[i] / pivot[i]
            row[i:] -= coef * pivot[i:]

    value = dtype.type(sign)
    for i in range(n):
        value = value * work[i][i]
    return Outcome(value=value, row_swaps=swaps, singular=False)


def _expand(grid: NDArray, zero: Any, one: Any) -> Any:
    n = grid.shape[0]
    if n == 0:
        return one
    if n == 1:
        return grid[0, 0]
    if n == 2:
        return grid[0, 0] * grid[1, 1] - grid[0, 1] * grid[1, 0]

    columns = np.arange(n)
    total = zero
    for j in range(n):
        minor = grid[1:, columns != j]
        term = grid[0, j] * _expand(minor, zero, one)
        total = total + term if j % 2 == 0 else total - term
    return total


def expand_cofactors(matrix: 'Matrix', atol: float = 0.0) -> Outcome:
    """
    Determinant by recursive cofactor expansion along the first row.

    The accumulator has the matrix element type. Cost grows as n!, so a
    RuntimeWarning is issued for n >= COFACTOR_WARN_SIZE.
    """
    n = matrix.nrows
    if n >= COFACTOR_WARN_SIZE:
        warnings.warn(
            f"cofactor expansion on a {n}x{n} matrix takes O(n!) steps; "
            f"convert to a floating dtype for elimination",
            RuntimeWarning,
            stacklevel=2,
        )
    dtype = matrix.dtype
    value = _expand(matrix.to_numpy(), zero_of(dtype), one_of(dtype))
    return Outcome(value=value, row_swaps=0, singular=bool(value == zero_of(dtype)))


ELIMINATION = DeterminantAlgorithm(
    method='elimination',
    backend_name='cpu_elimination',
    run=eliminate,
)

COFACTOR = DeterminantAlgorithm(
    method='cofactor',
    backend_name='cpu_cofactor',
    run=expand_cofactors,
)

_BY_CATEGORY = {
    ElementCategory.FLOATING: ELIMINATION,
    ElementCategory.EXACT: COFACTOR,
}


@lru_cache(maxsize=None)
def algorithm_for(dtype: np.dtype) -> DeterminantAlgorithm:
    """The determinant algorithm for an element dtype."""
    return _BY_CATEGORY[element_category(dtype)]


def compute(matrix: 'Matrix', atol: float | None = None) -> Outcome:
    """
    Run the dtype's determinant algorithm.

    Args:
        matrix: Square matrix (not modified)
        atol: Singularity tolerance for elimination; defaults to the
              dtype's tolerance tier

    Raises:
        DimensionError: If the matrix is not square
    """
    check_square(matrix.shape, "determinant")
    algorithm = algorithm_for(matrix.dtype)
    return algorithm.run(matrix, resolve_atol(matrix.dtype, atol))


def determinant(matrix: 'Matrix', atol: float | None = None) -> Any:
    """Determinant of a square matrix, in its element type."""
    return compute(matrix, atol).value
