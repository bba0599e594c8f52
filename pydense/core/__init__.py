"""
Core infrastructure for pydense.

This module provides shared abstractions used by the storage and matrix
packages.

Key components:
    exceptions: Exception hierarchy
    validation: Input validators
    dtypes: Element dtype normalization and category dispatch
    result: Generic Result[P] envelope
    compute: Tolerance tiers and timing
"""

from pydense.core.result import Result
from pydense.core.dtypes import ElementCategory, as_dtype, element_category
from pydense.core.exceptions import (
    PyDenseError,
    ValidationError,
    DimensionError,
    EmptyBufferError,
    NumericalError,
    DivideByZeroError,
    AllocationError,
)

__all__ = [
    # Result
    "Result",
    # Dtypes
    "ElementCategory",
    "as_dtype",
    "element_category",
    # Exceptions
    "PyDenseError",
    "ValidationError",
    "DimensionError",
    "EmptyBufferError",
    "NumericalError",
    "DivideByZeroError",
    "AllocationError",
]
