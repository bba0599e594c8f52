"""
Compute support for pydense: comparison tolerances and timing.
"""

from pydense.core.compute.tolerances import (
    DEFAULT_ATOL,
    EXACT,
    FLOAT32,
    FLOAT64,
    ToleranceTier,
    resolve_atol,
    select_tolerance,
)
from pydense.core.compute.timing import Timer

__all__ = [
    "DEFAULT_ATOL",
    "EXACT",
    "FLOAT32",
    "FLOAT64",
    "ToleranceTier",
    "resolve_atol",
    "select_tolerance",
    "Timer",
]
