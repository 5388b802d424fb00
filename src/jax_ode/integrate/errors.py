"""Exceptions raised by the integration routines."""


class DimensionMismatch(ValueError):
    """
    Operands of a vector operation have inconsistent lengths.

    Attributes:
        expected: Length required by the operation.
        actual: Length that was supplied.
    """

    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class InvalidStep(ValueError):
    """Step size cannot be used to advance the solution."""

    def __init__(self, message: str, step_size=None):
        super().__init__(message)
        self.step_size = step_size
