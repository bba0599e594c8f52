"""
Storage primitives for pydense.

Public API:
    RawBuffer  - growable contiguous buffer with power-of-two growth
    Cursor     - random-access position into a RawBuffer
"""

from pydense.storage.buffer import DEFAULT_CAPACITY, RawBuffer, next_capacity
from pydense.storage.cursor import Cursor

__all__ = [
    "DEFAULT_CAPACITY",
    "RawBuffer",
    "Cursor",
    "next_capacity",
]
