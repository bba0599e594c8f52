"""
pydense: growable contiguous storage and dense matrices for Python.

Submodules:
    storage: RawBuffer (amortized-growth buffer) and Cursor
    matrix: DenseStore, Matrix, arithmetic and determinants
    core: exceptions, validation, dtypes, tolerances, result envelope
"""

__version__ = "0.1.0"

from pydense import storage
from pydense import matrix
from pydense.core.exceptions import (
    PyDenseError,
    ValidationError,
    DimensionError,
    EmptyBufferError,
    NumericalError,
    DivideByZeroError,
    AllocationError,
)
from pydense.storage import RawBuffer, Cursor
from pydense.matrix import (
    Matrix,
    DenseStore,
    det,
    solve_determinant,
    render,
)

__all__ = [
    "__version__",
    "storage",
    "matrix",
    "RawBuffer",
    "Cursor",
    "Matrix",
    "DenseStore",
    "det",
    "solve_determinant",
    "render",
    "PyDenseError",
    "ValidationError",
    "DimensionError",
    "EmptyBufferError",
    "NumericalError",
    "DivideByZeroError",
    "AllocationError",
]
