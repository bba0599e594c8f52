"""
pytest configuration and shared fixtures.
"""

from fractions import Fraction

import pytest
import numpy as np

from pydense.matrix import Matrix


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def singular_pair():
    """Two singular 2x2 integer matrices whose product is exactly zero."""
    a = Matrix.from_rows([[1, -2], [2, -4]])
    b = Matrix.from_rows([[2, 4], [1, 2]])
    return a, b


@pytest.fixture
def chain_pair():
    """3x3 by 3x1 integer product with a known result."""
    a = Matrix.from_rows([[3, -1, 2], [4, 2, 1], [-8, 3, 5]])
    b = Matrix.from_rows([[5], [-7], [2]])
    expected = Matrix.from_rows([[26], [8], [-51]])
    return a, b, expected


@pytest.fixture
def random_square(rng):
    """Well-conditioned 5x5 float64 matrix."""
    data = rng.standard_normal((5, 5)) + 5.0 * np.eye(5)
    return Matrix.from_array(data)


@pytest.fixture
def fraction_matrix():
    """3x3 matrix of Fractions (object storage)."""
    return Matrix.from_rows([
        [Fraction(1, 2), Fraction(1, 3), Fraction(0)],
        [Fraction(2), Fraction(-1, 4), Fraction(1)],
        [Fraction(0), Fraction(5, 6), Fraction(3)],
    ])
