"""
Tests for the Result[P] envelope.

Validates:
    - Generic type parameter works with arbitrary payload types
    - Frozen immutability
    - Default factory for warnings
    - has_warning() method
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from pydense.core.result import Result


# ═══════════════════════════════════════════════════════════════════════
# Test payload types
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


# ═══════════════════════════════════════════════════════════════════════
# Construction and field access
# ═══════════════════════════════════════════════════════════════════════


class TestResultConstruction:
    """Result can be created with any payload type."""

    def test_basic_creation(self):
        result = Result(
            params=FakeParams(value=-2.0),
            info={"method": "elimination", "row_swaps": 1},
            timing={"total_seconds": 0.01},
            backend_name="cpu_elimination",
        )
        assert result.params.value == -2.0
        assert result.info["row_swaps"] == 1
        assert result.timing["total_seconds"] == 0.01
        assert result.backend_name == "cpu_elimination"

    def test_timing_optional(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="cpu")
        assert result.timing is None

    def test_warnings_default_empty(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="cpu")
        assert result.warnings == ()


class TestResultImmutability:

    def test_cannot_reassign_params(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="cpu")
        with pytest.raises(FrozenInstanceError):
            result.params = FakeParams(2.0)


# ═══════════════════════════════════════════════════════════════════════
# has_warning
# ═══════════════════════════════════════════════════════════════════════


class TestHasWarning:

    def test_substring_match(self):
        result = Result(
            params=FakeParams(0.0), info={}, timing=None, backend_name="cpu",
            warnings=("matrix is numerically singular",),
        )
        assert result.has_warning("singular")

    def test_no_match(self):
        result = Result(
            params=FakeParams(0.0), info={}, timing=None, backend_name="cpu",
            warnings=("matrix is numerically singular",),
        )
        assert not result.has_warning("O(n!)")

    def test_empty_warnings(self):
        result = Result(params=FakeParams(0.0), info={}, timing=None, backend_name="cpu")
        assert not result.has_warning("anything")
