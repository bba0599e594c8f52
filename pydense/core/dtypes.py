"""
Element dtype handling.

Every pydense container stores a single NumPy dtype. The dtype decides two
things, both resolved once per dtype and cached:

    - whether the dtype is accepted at all (numeric or object storage)
    - its element category, which selects comparison and determinant
      semantics

Categories:
    FLOATING: real and complex floating dtypes (np.inexact). Compared within
              a tolerance; determinant by pivoted elimination.
    EXACT:    signed/unsigned integers and the object dtype (Python ints,
              fractions.Fraction, decimal.Decimal, ...). Compared exactly;
              determinant by cofactor expansion, which never divides.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any

import numpy as np
from numpy.typing import DTypeLike

from pydense.core.exceptions import ValidationError


DEFAULT_DTYPE = np.dtype(np.float64)


class ElementCategory(Enum):
    """Element-type category used for algorithm dispatch."""
    FLOATING = 'floating'
    EXACT = 'exact'


@lru_cache(maxsize=None)
def _normalize(dtype: np.dtype) -> np.dtype:
    if dtype == np.bool_:
        raise ValidationError(
            "dtype: bool elements are not supported, use an integer dtype"
        )
    if dtype.hasobject:
        if dtype != np.dtype(object):
            raise ValidationError(f"dtype: structured dtype {dtype} is not supported")
        return dtype
    if not np.issubdtype(dtype, np.number):
        raise ValidationError(
            f"dtype: non-numeric dtype {dtype}, expected numeric or object"
        )
    return dtype


def as_dtype(dtype: DTypeLike | None) -> np.dtype:
    """
    Validate and normalize a dtype-like argument.

    Args:
        dtype: Anything np.dtype() accepts, or None for float64

    Returns:
        numpy.dtype suitable for pydense storage

    Raises:
        ValidationError: If the dtype is boolean, structured or non-numeric
    """
    if dtype is None:
        return DEFAULT_DTYPE
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise ValidationError(f"dtype: cannot interpret {dtype!r}: {e}") from e
    return _normalize(resolved)


@lru_cache(maxsize=None)
def element_category(dtype: np.dtype) -> ElementCategory:
    """Return the element category of an (already normalized) dtype."""
    if np.issubdtype(dtype, np.inexact):
        return ElementCategory.FLOATING
    return ElementCategory.EXACT


def is_floating(dtype: np.dtype) -> bool:
    """Whether dtype compares within tolerance."""
    return element_category(dtype) is ElementCategory.FLOATING


def zero_of(dtype: np.dtype) -> Any:
    """Additive identity for dtype."""
    if dtype.hasobject:
        return 0
    return dtype.type(0)


def one_of(dtype: np.dtype) -> Any:
    """Multiplicative identity for dtype."""
    if dtype.hasobject:
        return 1
    return dtype.type(1)


def infer_dtype(values: list[Any]) -> np.dtype:
    """
    Infer storage dtype from a list of Python values.

    Plain ints infer int64, floats float64 and complex complex128. Anything
    NumPy cannot represent natively (Fraction, Decimal, ints beyond int64)
    lands in object storage. An empty list infers float64.
    """
    if not values:
        return DEFAULT_DTYPE
    try:
        inferred = np.asarray(values).dtype
    except (ValueError, TypeError, OverflowError):
        return np.dtype(object)
    if inferred.kind in 'US':
        raise ValidationError(
            f"values: non-numeric dtype {inferred}, expected numeric data"
        )
    if inferred == np.bool_:
        return np.dtype(np.int64)
    return as_dtype(inferred)
