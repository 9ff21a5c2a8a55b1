"""Formula failure taxonomy and the display sentinel."""

from __future__ import annotations

ERROR_VALUE = "#ERROR"


class FormulaError(Exception):
    """Base class for failures that make a formula display ``#ERROR``."""


class FormulaSyntaxError(FormulaError):
    """The formula body is not a well-formed expression."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)
        self.position = position


class CircularReferenceError(FormulaError):
    """A cell reference loops back onto the current resolution path."""

    def __init__(self, address: str, path: frozenset[str]) -> None:
        super().__init__(f"Circular reference detected at {address}")
        self.address = address
        self.path = path


class ArithmeticEvaluationError(FormulaError):
    """The reduced expression has no finite real value (e.g. x/0)."""


class RecursionDepthError(FormulaError):
    """Nested formula resolution went deeper than the configured limit."""

    def __init__(self, address: str, limit: int) -> None:
        super().__init__(f"Formula nesting deeper than {limit} at {address}")
        self.address = address
        self.limit = limit
