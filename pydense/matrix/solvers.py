"""
Free-function API for matrices.

Every function returns a new Matrix (or scalar) and leaves its operands
untouched; the compound operators on Matrix are the in-place forms.

Provides:
    add, subtract, scale, divide, matmul  - arithmetic
    transpose, trace                      - shape operations
    det, solve_determinant                - determinant (value / diagnostics)
    equal                                 - tolerance-aware comparison
"""

from __future__ import annotations

from typing import Any

from pydense.core.compute.timing import Timer
from pydense.core.compute.tolerances import resolve_atol
from pydense.core.result import Result
from pydense.core.validation import check_square
from pydense.matrix import determinant as _determinant
from pydense.matrix.matrix import Matrix
from pydense.matrix.solution import DeterminantParams, DeterminantSolution


def add(a: Matrix, b: Matrix) -> Matrix:
    """Element-wise a + b."""
    return a + b


def subtract(a: Matrix, b: Matrix) -> Matrix:
    """Element-wise a - b."""
    return a - b


def scale(a: Matrix, value: Any) -> Matrix:
    """Every element of a multiplied by value."""
    return a * value


def divide(a: Matrix, value: Any) -> Matrix:
    """Every element of a divided by value."""
    return a / value


def matmul(a: Matrix, b: Matrix) -> Matrix:
    """Matrix product a x b."""
    return a @ b


def transpose(a: Matrix) -> Matrix:
    """Transposed copy of a."""
    return a.copy().transpose()


def trace(a: Matrix) -> Any:
    """Sum of the diagonal of a square matrix."""
    return a.trace()


def equal(a: Matrix, b: Matrix, *, atol: float | None = None) -> bool:
    """
    Compare two matrices.

    Parameters
    ----------
    a, b : Matrix
        Operands. Differing shapes are never equal.
    atol : float, optional
        Absolute tolerance for floating elements. Defaults to the dtype's
        tolerance tier (1e-6 for float64). Ignored for integer and object
        elements, which compare exactly.
    """
    return a.equals(b, atol)


def det(a: Matrix, *, atol: float | None = None) -> Any:
    """
    Determinant of a square matrix.

    Parameters
    ----------
    a : Matrix
        Square matrix; not modified.
    atol : float, optional
        Pivot magnitude at or below which a floating matrix is treated as
        singular (determinant 0).

    Returns
    -------
    The determinant in the element type of ``a``.
    """
    return _determinant.determinant(a, atol)


def solve_determinant(a: Matrix, *, atol: float | None = None) -> DeterminantSolution:
    """
    Determinant with diagnostics.

    Runs the same algorithm as det() and reports the method used, the number
    of pivoting row swaps, singularity, timing and any warnings raised.

    Parameters
    ----------
    a : Matrix
        Square matrix; not modified.
    atol : float, optional
        Singularity tolerance for elimination.

    Returns
    -------
    DeterminantSolution
    """
    order = check_square(a.shape, "determinant")
    algorithm = _determinant.algorithm_for(a.dtype)

    with Timer() as timer:
        with timer.section('determinant'):
            outcome = _determinant.compute(a, atol)

    notes = []
    if algorithm is _determinant.COFACTOR and order >= _determinant.COFACTOR_WARN_SIZE:
        notes.append(f"cofactor expansion on a {order}x{order} matrix is O(n!)")
    if outcome.singular and algorithm is _determinant.ELIMINATION:
        notes.append("matrix is numerically singular")

    result = Result(
        params=DeterminantParams(value=outcome.value, order=order),
        info={
            'method': algorithm.method,
            'row_swaps': outcome.row_swaps,
            'singular': outcome.singular,
            'atol': resolve_atol(a.dtype, atol),
        },
        timing=timer.result(),
        backend_name=algorithm.backend_name,
        warnings=tuple(notes),
    )
    return DeterminantSolution(_result=result)
