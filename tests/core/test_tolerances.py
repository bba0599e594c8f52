"""
Tests for tolerance tiers and timing.
"""

import time
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from pydense.core.exceptions import ValidationError
from pydense.core.compute import (
    DEFAULT_ATOL,
    EXACT,
    FLOAT32,
    FLOAT64,
    Timer,
    resolve_atol,
    select_tolerance,
)


# ═══════════════════════════════════════════════════════════════════════
# Tolerance tiers
# ═══════════════════════════════════════════════════════════════════════


class TestSelectTolerance:

    def test_float64_tier(self):
        assert select_tolerance(np.dtype(np.float64)) is FLOAT64
        assert FLOAT64.atol == DEFAULT_ATOL == 1e-6

    def test_float32_tier(self):
        assert select_tolerance(np.dtype(np.float32)) is FLOAT32

    def test_complex64_tier(self):
        assert select_tolerance(np.dtype(np.complex64)) is FLOAT32

    def test_complex128_tier(self):
        assert select_tolerance(np.dtype(np.complex128)) is FLOAT64

    @pytest.mark.parametrize("dtype_like", [np.int64, np.uint8, object])
    def test_exact_tier(self, dtype_like):
        tier = select_tolerance(np.dtype(dtype_like))
        assert tier is EXACT
        assert tier.atol == 0.0

    def test_tiers_frozen(self):
        with pytest.raises(FrozenInstanceError):
            FLOAT64.atol = 1.0


class TestResolveAtol:

    def test_default_from_tier(self):
        assert resolve_atol(np.dtype(np.float32), None) == FLOAT32.atol

    def test_explicit_override(self):
        assert resolve_atol(np.dtype(np.float64), 0.5) == 0.5

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="atol: must be non-negative"):
            resolve_atol(np.dtype(np.float64), -1e-3)


# ═══════════════════════════════════════════════════════════════════════
# Timer
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:

    def test_sections_accumulate(self):
        with Timer() as timer:
            with timer.section('work'):
                time.sleep(0.001)
            with timer.section('work'):
                time.sleep(0.001)
        result = timer.result()
        assert result['work'] > 0.0
        assert result['total_seconds'] >= result['work']

    def test_running_inside_block(self):
        timer = Timer()
        assert not timer.running
        with timer:
            assert timer.running
        assert not timer.running

    def test_result_inside_block(self):
        with Timer() as timer:
            with pytest.raises(RuntimeError, match="after the timed block exits"):
                timer.result()

    def test_result_without_block(self):
        with pytest.raises(RuntimeError):
            Timer().result()

    def test_total_recorded_on_exception(self):
        timer = Timer()
        with pytest.raises(KeyError):
            with timer:
                raise KeyError("boom")
        assert timer.result()['total_seconds'] >= 0.0
