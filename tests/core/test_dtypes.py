"""
Tests for element dtype handling.

Validates:
    - as_dtype normalization and rejection of unsupported dtypes
    - element_category dispatch (FLOATING vs EXACT)
    - zero_of / one_of identities
    - infer_dtype from Python values
"""

from fractions import Fraction

import numpy as np
import pytest

from pydense.core.dtypes import (
    DEFAULT_DTYPE,
    ElementCategory,
    as_dtype,
    element_category,
    infer_dtype,
    is_floating,
    one_of,
    zero_of,
)
from pydense.core.exceptions import ValidationError


# ═══════════════════════════════════════════════════════════════════════
# as_dtype
# ═══════════════════════════════════════════════════════════════════════


class TestAsDtype:

    def test_none_is_float64(self):
        assert as_dtype(None) == np.float64
        assert DEFAULT_DTYPE == np.float64

    @pytest.mark.parametrize("dtype_like", [np.int8, np.uint16, "int32", np.float32, np.complex128, object])
    def test_accepted(self, dtype_like):
        assert as_dtype(dtype_like) == np.dtype(dtype_like)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="bool"):
            as_dtype(np.bool_)

    def test_string_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            as_dtype("U3")

    def test_uninterpretable_rejected(self):
        with pytest.raises(ValidationError, match="cannot interpret"):
            as_dtype("not-a-dtype")


# ═══════════════════════════════════════════════════════════════════════
# Element categories
# ═══════════════════════════════════════════════════════════════════════


class TestElementCategory:

    @pytest.mark.parametrize("dtype_like", [np.float64, np.float32, np.complex64])
    def test_floating(self, dtype_like):
        assert element_category(np.dtype(dtype_like)) is ElementCategory.FLOATING
        assert is_floating(np.dtype(dtype_like))

    @pytest.mark.parametrize("dtype_like", [np.int64, np.uint8, object])
    def test_exact(self, dtype_like):
        assert element_category(np.dtype(dtype_like)) is ElementCategory.EXACT
        assert not is_floating(np.dtype(dtype_like))


class TestIdentities:

    def test_numeric_identities_typed(self):
        dtype = np.dtype(np.int32)
        assert zero_of(dtype) == 0 and isinstance(zero_of(dtype), np.int32)
        assert one_of(dtype) == 1 and isinstance(one_of(dtype), np.int32)

    def test_object_identities_are_python_ints(self):
        dtype = np.dtype(object)
        assert type(zero_of(dtype)) is int
        assert type(one_of(dtype)) is int


# ═══════════════════════════════════════════════════════════════════════
# infer_dtype
# ═══════════════════════════════════════════════════════════════════════


class TestInferDtype:

    def test_empty_is_default(self):
        assert infer_dtype([]) == np.float64

    def test_ints(self):
        assert np.issubdtype(infer_dtype([1, 2, 3]), np.integer)

    def test_floats(self):
        assert infer_dtype([1, 2.5]) == np.float64

    def test_complex(self):
        assert infer_dtype([1 + 2j]) == np.complex128

    def test_fractions_are_object(self):
        assert infer_dtype([Fraction(1, 2), Fraction(3)]) == object

    def test_huge_ints_are_object(self):
        assert infer_dtype([2 ** 80, 1]) == object

    def test_bools_become_int64(self):
        assert infer_dtype([True, False]) == np.int64

    def test_strings_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            infer_dtype(["a", "b"])
