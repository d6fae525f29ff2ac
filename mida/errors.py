"""
Error taxonomy for Mida.

Every error raised by the library derives from MidaError, which carries a
`type` string naming the error kind (e.g. "InvalidDecimalError") and an
optional dict of details for logging.

The concrete errors also inherit from the matching built-in exception, so
callers can catch either the Mida kind or the standard Python one:

    try:
        decimal("abc")
    except ValueError:
        ...
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class MidaError(Exception):
    """Base class for all Mida errors."""

    type: str = "MidaError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type='{self.type}', message='{self.message}')"


class InvalidDecimalError(MidaError, ValueError):
    """Raised when a value cannot be converted to a decimal."""

    type = "InvalidDecimalError"


class DivisionByZeroError(MidaError, ZeroDivisionError):
    """Raised when a decimal is divided by a zero-valued operand."""

    type = "DivisionByZeroError"


class EmptyOperandsError(MidaError, ValueError):
    """Raised when min/max are called without operands."""

    type = "EmptyOperandsError"
