"""
Dense matrix module.

Row-major dense matrices with element-wise and matrix arithmetic, transpose,
trace, tolerance-aware equality and a determinant engine that picks pivoted
elimination for floating dtypes and exact cofactor expansion otherwise.

Public API:
    Matrix              - dense matrix with O(1) row indexing
    DenseStore          - row-major storage underlying Matrix
    RowView             - bounds-carrying view of one row
    add, subtract, scale, divide, matmul, transpose, trace, equal
    det(m)              - determinant value
    solve_determinant(m)- determinant with diagnostics
    render(m)           - textual rendering
"""

from pydense.matrix.dense import DenseStore, RowView
from pydense.matrix.matrix import Matrix
from pydense.matrix.render import render
from pydense.matrix.solution import DeterminantParams, DeterminantSolution
from pydense.matrix.solvers import (
    add,
    subtract,
    scale,
    divide,
    matmul,
    transpose,
    trace,
    equal,
    det,
    solve_determinant,
)

__all__ = [
    "Matrix",
    "DenseStore",
    "RowView",
    "render",
    "add",
    "subtract",
    "scale",
    "divide",
    "matmul",
    "transpose",
    "trace",
    "equal",
    "det",
    "solve_determinant",
    "DeterminantParams",
    "DeterminantSolution",
]
