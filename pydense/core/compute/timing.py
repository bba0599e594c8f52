"""
Wall clock timing for solve_determinant().

A Timer is used as a context manager around a whole solve; named sections
inside it record the phases (currently just 'determinant').

    with Timer() as timer:
        with timer.section('determinant'):
            outcome = compute(matrix)
    timer.result()   # {'total_seconds': ..., 'determinant': ...}
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """Overall elapsed time plus accumulated per-section durations."""

    def __init__(self):
        self._sections: dict[str, float] = {}
        self._started: float | None = None
        self._total: float | None = None

    def __enter__(self) -> 'Timer':
        self._started = time.perf_counter()
        self._total = None
        return self

    def __exit__(self, *exc_info) -> None:
        self._total = time.perf_counter() - self._started

    @property
    def running(self) -> bool:
        return self._started is not None and self._total is None

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent in the block to section ``name``."""
        begin = time.perf_counter()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + (time.perf_counter() - begin)

    def result(self) -> dict[str, float]:
        """
        Timings keyed by section, plus 'total_seconds'.

        Raises:
            RuntimeError: If the timed block has not finished
        """
        if self._total is None:
            raise RuntimeError("timing is only available after the timed block exits")
        return {'total_seconds': self._total, **self._sections}
