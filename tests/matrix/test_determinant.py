"""
Tests for determinant algorithms.

Validates:
    - Dispatch: floating dtypes use elimination, integer/object use cofactor
    - Elimination against np.linalg.det, pivoting and the singular short-circuit
    - Cofactor expansion exactness (int64, Fraction)
    - The O(n!) warning and the non-square error
    - solve_determinant diagnostics
"""

import warnings
from fractions import Fraction

import numpy as np
import pytest

from pydense.core.exceptions import DimensionError
from pydense.matrix import Matrix, det, solve_determinant
from pydense.matrix import determinant as determinant_module
from pydense.matrix.determinant import (
    COFACTOR,
    ELIMINATION,
    _pivot_row,
    algorithm_for,
    eliminate,
    expand_cofactors,
)


# ═══════════════════════════════════════════════════════════════════════
# Dispatch
# ═══════════════════════════════════════════════════════════════════════


class TestDispatch:

    @pytest.mark.parametrize("dtype_like", [np.float64, np.float32, np.complex128])
    def test_floating_uses_elimination(self, dtype_like):
        assert algorithm_for(np.dtype(dtype_like)) is ELIMINATION

    @pytest.mark.parametrize("dtype_like", [np.int64, np.int16, np.uint32, object])
    def test_exact_uses_cofactor(self, dtype_like):
        assert algorithm_for(np.dtype(dtype_like)) is COFACTOR

    def test_non_square(self):
        with pytest.raises(DimensionError, match="square"):
            det(Matrix(2, 3))

    @pytest.mark.parametrize("n", [0, 1, 2, 3, 6])
    @pytest.mark.parametrize("dtype_like", [np.float64, np.int64])
    def test_identity_is_one(self, n, dtype_like):
        assert det(Matrix.identity(n, dtype=dtype_like)) == 1


# ═══════════════════════════════════════════════════════════════════════
# Elimination
# ═══════════════════════════════════════════════════════════════════════


class TestElimination:

    def test_matches_numpy(self, random_square):
        expected = np.linalg.det(random_square.to_numpy())
        assert det(random_square) == pytest.approx(expected, rel=1e-10)

    @pytest.mark.parametrize("n", [2, 4, 7])
    def test_random_matches_numpy(self, rng, n):
        data = rng.standard_normal((n, n))
        assert det(Matrix.from_array(data)) == pytest.approx(np.linalg.det(data), rel=1e-9, abs=1e-12)

    def test_receiver_unchanged(self, random_square):
        before = random_square.to_numpy()
        slots = random_square.row_slots
        det(random_square)
        np.testing.assert_array_equal(random_square.to_numpy(), before)
        assert random_square.row_slots == slots

    def test_row_swap_flips_sign(self):
        outcome = eliminate(Matrix.from_rows([[0.0, 1.0], [1.0, 0.0]]), 1e-6)
        assert outcome.value == -1.0
        assert outcome.row_swaps == 1
        assert not outcome.singular

    def test_pivot_first_occurrence_wins(self):
        work = Matrix.from_rows([[0.0, 1.0], [2.0, 0.0], [-2.0, 3.0]])
        assert _pivot_row(work, 0) == (1, 2.0)

    def test_singular_short_circuit(self):
        outcome = eliminate(Matrix.from_rows([[1.0, 2.0], [2.0, 4.0]]), 1e-6)
        assert outcome.value == 0.0
        assert outcome.singular

    def test_tolerance_controls_singularity(self):
        m = Matrix.from_rows([[1.0, 0.0], [0.0, 1e-8]])
        assert det(m) == 0.0
        assert det(m, atol=0.0) == pytest.approx(1e-8)

    def test_float32_result_type(self):
        m = Matrix.from_rows([[2.0, 1.0], [1.0, 3.0]], dtype=np.float32)
        value = det(m)
        assert isinstance(value, np.float32)
        assert value == pytest.approx(5.0)

    def test_complex(self, rng):
        data = rng.standard_normal((3, 3)) + 1j * rng.standard_normal((3, 3))
        assert det(Matrix.from_array(data)) == pytest.approx(np.linalg.det(data))

    def test_method_on_matrix(self):
        assert Matrix.from_rows([[4.0, 3.0], [6.0, 3.0]]).determinant() == pytest.approx(-6.0)


# ═══════════════════════════════════════════════════════════════════════
# Cofactor expansion
# ═══════════════════════════════════════════════════════════════════════


class TestCofactor:

    def test_two_by_two(self):
        value = det(Matrix.from_rows([[1, 2], [3, 4]]))
        assert value == -2
        assert isinstance(value, np.integer)

    def test_three_by_three(self):
        assert det(Matrix.from_rows([[6, 1, 1], [4, -2, 5], [2, 8, 7]])) == -306

    def test_matches_rounded_numpy(self, rng):
        data = rng.integers(-5, 6, size=(5, 5))
        assert det(Matrix.from_array(data)) == round(np.linalg.det(data))

    def test_one_by_one(self):
        assert det(Matrix.from_rows([[-7]])) == -7

    def test_singular_integer(self, singular_pair):
        a, _ = singular_pair
        outcome = expand_cofactors(a)
        assert outcome.value == 0
        assert outcome.singular
        assert outcome.row_swaps == 0

    def test_fraction_exact(self, fraction_matrix):
        value = det(fraction_matrix)
        assert isinstance(value, Fraction)
        assert value == Fraction(-67, 24)

    def test_large_order_warns(self, monkeypatch):
        monkeypatch.setattr(determinant_module, "COFACTOR_WARN_SIZE", 3)
        with pytest.warns(RuntimeWarning, match=r"O\(n!\)"):
            det(Matrix.identity(3, dtype=np.int64))

    def test_small_order_silent(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            det(Matrix.identity(4, dtype=np.int64))


# ═══════════════════════════════════════════════════════════════════════
# solve_determinant
# ═══════════════════════════════════════════════════════════════════════


class TestSolveDeterminant:

    def test_elimination_diagnostics(self):
        solution = solve_determinant(Matrix.from_rows([[0.0, 1.0], [1.0, 0.0]]))
        assert solution.value == -1.0
        assert solution.order == 2
        assert solution.method == 'elimination'
        assert solution.backend_name == 'cpu_elimination'
        assert solution.row_swaps == 1
        assert not solution.singular
        assert solution.atol == 1e-6
        assert solution.warnings == ()

    def test_singular_reported(self):
        solution = solve_determinant(Matrix.from_rows([[1.0, 2.0], [2.0, 4.0]]))
        assert solution.value == 0.0
        assert solution.singular
        assert solution.row_swaps == 1
        assert any("singular" in w for w in solution.warnings)

    def test_cofactor_diagnostics(self, fraction_matrix):
        solution = solve_determinant(fraction_matrix)
        assert solution.value == Fraction(-67, 24)
        assert solution.method == 'cofactor'
        assert solution.backend_name == 'cpu_cofactor'
        assert solution.row_swaps == 0
        assert solution.atol == 0.0

    def test_cofactor_cost_note(self, monkeypatch):
        monkeypatch.setattr(determinant_module, "COFACTOR_WARN_SIZE", 2)
        with pytest.warns(RuntimeWarning):
            solution = solve_determinant(Matrix.from_rows([[1, 2], [3, 4]]))
        assert any("O(n!)" in w for w in solution.warnings)

    def test_timing(self):
        solution = solve_determinant(Matrix.identity(3))
        assert set(solution.timing) == {'total_seconds', 'determinant'}

    def test_summary(self):
        text = solve_determinant(Matrix.from_rows([[2.0, 0.0], [0.0, 3.0]])).summary()
        assert "Determinant of 2x2 matrix" in text
        assert "elimination (cpu_elimination)" in text
        assert "singular:  no" in text

    def test_summary_cofactor_omits_tolerance(self):
        text = solve_determinant(Matrix.from_rows([[2, 0], [0, 3]])).summary()
        assert "tolerance" not in text
        assert "value:     6" in text

    def test_repr(self):
        solution = solve_determinant(Matrix.from_rows([[2, 0], [0, 3]]))
        assert repr(solution).startswith("DeterminantSolution(")

    def test_non_square(self):
        with pytest.raises(DimensionError):
            solve_determinant(Matrix(3, 2))
