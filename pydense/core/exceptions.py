"""
Exception hierarchy for pydense.

All exceptions inherit from PyDenseError to allow catching any
library-specific error. Where a builtin exception already describes the
failure (IndexError, ZeroDivisionError, MemoryError) the pydense exception
also inherits from it, so callers written against plain Python containers
keep working.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyDenseError(Exception):
    """Base exception for all pydense errors."""
    pass


class ValidationError(PyDenseError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Operand shapes are incompatible.

    Raised for element-wise operations on differently shaped matrices,
    matrix products whose inner dimensions do not chain, and square-only
    operations (trace, determinant) applied to rectangular matrices.

    Attributes:
        expected: Shape (or description) the operation required
        actual: Shape the operand actually had
    """

    def __init__(
        self,
        message: str,
        expected: tuple[int, ...] | str | None = None,
        actual: tuple[int, ...] | None = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class EmptyBufferError(ValidationError, IndexError):
    """
    Element access on an empty buffer.

    Raised by front(), last() and remove_last() when the buffer holds
    no live elements.
    """
    pass


class NumericalError(PyDenseError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class DivideByZeroError(NumericalError, ZeroDivisionError):
    """
    Scalar division by the additive identity.

    Attributes:
        dtype: Element dtype of the matrix being divided
    """

    def __init__(self, message: str, dtype: object | None = None):
        super().__init__(message)
        self.dtype = dtype


class AllocationError(PyDenseError, MemoryError):
    """
    Storage could not be obtained.

    Raised when growing or building a buffer exhausts available memory.
    Not recoverable internally; the buffer that attempted the allocation
    is left unchanged.

    Attributes:
        requested: Number of element slots requested
        dtype: Element dtype of the requested region
    """

    def __init__(
        self,
        message: str,
        requested: int | None = None,
        dtype: object | None = None,
    ):
        super().__init__(message)
        self.requested = requested
        self.dtype = dtype
