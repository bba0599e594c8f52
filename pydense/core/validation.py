"""
Input validation utilities for pydense.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion of scalars across dtype kinds
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np

from pydense.core.dtypes import zero_of
from pydense.core.exceptions import (
    DimensionError,
    DivideByZeroError,
    ValidationError,
)


def check_count(value: Any, name: str) -> int:
    """
    Verify value is a non-negative integer count.

    Args:
        value: Candidate count (row count, capacity, ...)
        name: Parameter name for error messages

    Returns:
        value as a Python int

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name}: expected integer, got {type(value).__name__}")
    value = int(value)
    if value < 0:
        raise ValidationError(f"{name}: must be non-negative, got {value}")
    return value


def check_shape(rows: Any, cols: Any) -> tuple[int, int]:
    """
    Validate a (rows, cols) pair.

    Raises:
        ValidationError: If either dimension is not a non-negative integer
    """
    return check_count(rows, "rows"), check_count(cols, "cols")


def check_same_shape(
    lhs: tuple[int, int],
    rhs: tuple[int, int],
    operation: str,
) -> None:
    """
    Verify two operands of an element-wise operation have identical shapes.

    Raises:
        DimensionError: If shapes differ
    """
    if lhs != rhs:
        raise DimensionError(
            f"{operation}: shape mismatch, left is {lhs[0]}x{lhs[1]}, "
            f"right is {rhs[0]}x{rhs[1]}",
            expected=lhs,
            actual=rhs,
        )


def check_chainable(
    lhs: tuple[int, int],
    rhs: tuple[int, int],
) -> None:
    """
    Verify lhs.cols == rhs.rows for a matrix product.

    Raises:
        DimensionError: If the inner dimensions differ
    """
    if lhs[1] != rhs[0]:
        raise DimensionError(
            f"matmul: inner dimensions differ, left is {lhs[0]}x{lhs[1]}, "
            f"right is {rhs[0]}x{rhs[1]}",
            expected=f"{lhs[1]}xN",
            actual=rhs,
        )


def check_square(shape: tuple[int, int], operation: str) -> int:
    """
    Verify a matrix is square.

    Returns:
        The order n of the n x n matrix

    Raises:
        DimensionError: If rows != cols
    """
    rows, cols = shape
    if rows != cols:
        raise DimensionError(
            f"{operation}: requires a square matrix, got {rows}x{cols}",
            expected="square",
            actual=shape,
        )
    return rows


def can_store(source: np.dtype, target: np.dtype) -> bool:
    """
    Whether source elements can be stored as target without changing kind.

    Same-kind casts are allowed (float64 into float32), as is any integer
    into any integer dtype, so Python ints can populate unsigned storage.
    """
    if np.issubdtype(source, np.integer) and np.issubdtype(target, np.integer):
        return True
    return bool(np.can_cast(source, target, casting='same_kind'))


def check_scalar(value: Any, dtype: np.dtype, name: str) -> Any:
    """
    Validate a scalar operand against an element dtype.

    Object storage accepts any value. Numeric storage accepts scalars whose
    dtype can be cast to the element dtype without changing kind, so an
    integer matrix can be scaled by 3 but not by 2.5.

    Args:
        value: Scalar operand
        dtype: Element dtype of the matrix
        name: Parameter name for error messages

    Returns:
        value converted to the element dtype

    Raises:
        ValidationError: If value is not a scalar or changes dtype kind
    """
    if dtype.hasobject:
        return value
    if isinstance(value, (bool, np.bool_)):
        raise ValidationError(f"{name}: bool is not a valid scalar operand")
    scalar = np.asarray(value)
    if scalar.ndim != 0:
        raise ValidationError(f"{name}: expected scalar, got shape {scalar.shape}")
    if not np.issubdtype(scalar.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric scalar {value!r} ({scalar.dtype})"
        )
    if not can_store(scalar.dtype, dtype):
        raise ValidationError(
            f"{name}: {value!r} ({scalar.dtype}) cannot be combined with "
            f"{dtype} elements without changing their kind"
        )
    return dtype.type(value)


def check_nonzero(value: Any, dtype: np.dtype, name: str) -> None:
    """
    Verify a divisor is not the additive identity.

    Raises:
        DivideByZeroError: If value == 0
    """
    if value == zero_of(dtype):
        raise DivideByZeroError(f"{name}: division by zero", dtype=dtype)
