"""
Tolerance tiers for element comparison.

Defines the absolute tolerance used when comparing matrices and when
deciding that an elimination pivot is numerically zero:
- FLOAT64: default tier for double precision storage
- FLOAT32: relaxed for single precision storage
- EXACT: integer and object storage, compared bit-for-bit

Used by equality, the elimination determinant and the test suite.
"""

from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from pydense.core.exceptions import ValidationError


# Default absolute tolerance for floating comparisons
DEFAULT_ATOL: float = 1e-6


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for element comparison."""
    atol: float
    name: str
    description: str


# Double precision: equality within DEFAULT_ATOL
FLOAT64 = ToleranceTier(
    atol=DEFAULT_ATOL,
    name='float64',
    description='double precision, absolute tolerance 1e-6',
)

# Single precision carries ~7 significant digits
FLOAT32 = ToleranceTier(
    atol=1e-4,
    name='float32',
    description='single precision, absolute tolerance 1e-4',
)

# Integers and user objects compare exactly
EXACT = ToleranceTier(
    atol=0.0,
    name='exact',
    description='integral or object elements, exact comparison',
)


@lru_cache(maxsize=None)
def select_tolerance(dtype: np.dtype) -> ToleranceTier:
    """Select the tolerance tier for a given element dtype."""
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.inexact):
        return EXACT
    if dtype.itemsize <= 4 or dtype == np.complex64:
        return FLOAT32
    return FLOAT64


def resolve_atol(dtype: np.dtype, atol: float | None) -> float:
    """
    Return an explicit tolerance, or the tier default for dtype.

    Raises:
        ValidationError: If atol is negative
    """
    if atol is None:
        return select_tolerance(np.dtype(dtype)).atol
    if atol < 0:
        raise ValidationError(f"atol: must be non-negative, got {atol}")
    return float(atol)
