"""
Mida: exact fixed-point decimals for trading applications.

Quick start:
    from mida import decimal, MidaDecimal

    decimal("10") / 3              # 3.33333333333333333333333333333333
    decimal("1.005", 2)            # 1.01 (round half up)
"""
from mida.errors import (
    MidaError,
    InvalidDecimalError,
    DivisionByZeroError,
    EmptyOperandsError,
    )
from mida.utils.decimals import DEFAULT_DIGITS, MidaDecimal, decimal

__version__ = "0.1.0"

__all__ = [
    "decimal",
    "MidaDecimal",
    "DEFAULT_DIGITS",
    # Errors
    "MidaError",
    "InvalidDecimalError",
    "DivisionByZeroError",
    "EmptyOperandsError",
    ]
