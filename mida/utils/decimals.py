"""
Exact fixed-point decimals for financial computation.

A MidaDecimal stores its value as an arbitrary-precision Python int (the
"scaled value", i.e. value * 10^digits) plus the number of fractional
digits it represents. Arithmetic runs on the scaled ints only, no binary
floating point is ever involved in value computation.

Key concepts:
- Scale: number of fractional digits, fixed at construction (default 32)
- Rounding: half up (away from zero), always on
- Canonical string: sign + integer part + trimmed fractional part.
  Every operation renormalizes its result through this text form, so
  parse(render(x)) reproduces the same scaled value at a fixed scale.

Usage:
    from mida.utils.decimals import decimal, MidaDecimal

    price = decimal("1.10250")
    lots = decimal(2)
    notional = price * lots * 100000       # MidaDecimal('220500', digits=32)
    decimal("10") / 3                       # 3.33333333333333333333333333333333
    decimal("1.005", 2)                     # MidaDecimal('1.01', digits=2)
    MidaDecimal.max(3, "1.5", price)        # MidaDecimal('3', digits=32)

Accepted inputs (DecimalConvertible): MidaDecimal, int, float, str and
decimal.Decimal. Floats are read through their shortest repr, so
decimal(0.1) is exactly 0.1. Python operators accept numbers only;
the named methods (add, multiply, equals, ...) also accept strings.
`==` compares floats and decimal.Decimal by exact value, equals() reads
them at the default scale first.
"""
from __future__ import annotations

import re
from decimal import Decimal
from fractions import Fraction
from typing import Any, Final, Tuple, Union

from mida.errors import DivisionByZeroError, EmptyOperandsError, InvalidDecimalError
from mida.logging_config import get_logger

logger = get_logger(__name__)

# Scale used by the decimal() factory and for non-decimal operands
DEFAULT_DIGITS: Final[int] = 32

# Round half up when digits are dropped. Process-wide, never changed.
ROUNDED: Final[bool] = True

_INTEGER_DIGITS = re.compile(r"[0-9]+")
_FRACTION_DIGITS = re.compile(r"[0-9]*")
_SCIENTIFIC = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)[eE][+-]?([0-9]+)")

# Exponent slack beyond scale and mantissa length, covers every finite float
_EXPONENT_SLACK: Final[int] = 400

DecimalConvertible = Union["MidaDecimal", Decimal, int, float, str]


def decimal(value: DecimalConvertible = 0, digits: int = DEFAULT_DIGITS) -> MidaDecimal:
    """
    Create a MidaDecimal.

    Args:
        value: Number, string, decimal.Decimal or MidaDecimal (default 0)
        digits: Number of fractional digits (default 32)

    Returns:
        MidaDecimal rounded half up to `digits` fractional digits

    Raises:
        InvalidDecimalError: If value is not a finite decimal number

    Example:
        >>> decimal("1.004", 2)
        MidaDecimal('1', digits=2)
        >>> decimal(-0.5) < 0
        True
    """
    return MidaDecimal(value, digits)


# ============================================================================
# TEXT HELPERS
# ============================================================================

def _to_text(value: Any, digits: int) -> str:
    """
    Plain positional text for a convertible value.

    Scientific notation is expanded only when the exponent is within
    digits + mantissa length + _EXPONENT_SLACK. Larger exponents are left
    as is and fail validation.
    """
    if isinstance(value, float):
        text = repr(value)
    else:
        # str() keeps Decimal exponents unexpanded
        text = str(value)

    text = text.strip()

    # 1e-07 -> 0.0000001
    match = _SCIENTIFIC.fullmatch(text)
    if match:
        mantissa, exponent = match.groups()
        exponent = exponent.lstrip("0") or "0"
        limit = digits + len(mantissa) + _EXPONENT_SLACK

        if len(exponent) <= len(str(limit)) and int(exponent) <= limit:
            text = format(Decimal(text), "f")

    return text


def _render(value: int, digits: int) -> str:
    """Canonical text of a scaled value: trailing zeros and bare '.' removed."""
    descriptor = str(abs(value)).rjust(digits + 1, "0")

    if digits:
        integer_part = descriptor[:-digits]
        decimal_part = descriptor[-digits:].rstrip("0")
    else:
        integer_part, decimal_part = descriptor, ""

    text = f"{integer_part}.{decimal_part}" if decimal_part else integer_part
    return f"-{text}" if value < 0 else text


def _truncated_division(dividend: int, divisor: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


def _divide_round(dividend: int, divisor: int) -> int:
    """
    Integer division with round half up.

    trunc(2 * dividend / divisor) is odd exactly when the dropped fraction
    is >= 0.5, in which case the quotient moves one unit away from zero.
    """
    quotient = _truncated_division(dividend, divisor)

    if ROUNDED:
        doubled = _truncated_division(dividend * 2, divisor)
        if doubled % 2:
            quotient += 1 if doubled > 0 else -1

    return quotient


def _is_operand(value: Any) -> bool:
    """Types accepted by the Python operators."""
    return isinstance(value, (MidaDecimal, int, float, Decimal)) and not isinstance(value, bool)


# ============================================================================
# MIDA DECIMAL
# ============================================================================

class MidaDecimal:
    """
    Immutable fixed-point decimal backed by an arbitrary-precision int.

    Attributes:
        scaled_value: value * 10^digits (read-only)
        digits: number of fractional digits (read-only)

    Results of arithmetic take the larger scale of the two operands, numbers
    and strings count as decimals at the default scale. Equality and
    ordering compare values, the scale is not part of equality:

        >>> decimal("1.5", 2) == decimal("1.50000")
        True

    Raises:
        InvalidDecimalError: If the value or digits are invalid
    """
    __slots__ = ("_value", "_digits", "_shift")

    def __init__(self, value: DecimalConvertible, digits: int = DEFAULT_DIGITS):
        if isinstance(digits, bool) or not isinstance(digits, int) or digits < 0:
            logger.error("Decimal digits must be a non-negative integer", digits=repr(digits))
            raise InvalidDecimalError(
                f"Digits must be a non-negative integer, got {digits!r}",
                details={"digits": repr(digits)}
                )

        integer_part, decimal_part, is_negative = MidaDecimal._get_parts(_to_text(value, digits))

        if not _INTEGER_DIGITS.fullmatch(integer_part) or not _FRACTION_DIGITS.fullmatch(decimal_part):
            logger.error("Value cannot be converted to decimal", value=repr(value))
            raise InvalidDecimalError(
                f"{value!r} cannot be converted to decimal",
                details={"value": repr(value)}
                )

        sign = "-" if is_negative else ""
        scaled_value = int(sign + integer_part + decimal_part.ljust(digits, "0")[:digits])

        if ROUNDED and len(decimal_part) > digits and decimal_part[digits] >= "5":
            scaled_value += -1 if is_negative else 1

        object.__setattr__(self, "_value", scaled_value)
        object.__setattr__(self, "_digits", digits)
        object.__setattr__(self, "_shift", 10 ** digits)

    @staticmethod
    def _get_parts(value: str) -> Tuple[str, str, bool]:
        """
        Split decimal text into (integer part, decimal part, is negative).

        A leading minus on either part marks the value negative. In the
        decimal part it is turned into a 0 rather than rejected. An empty
        integer part becomes "0". Text without any digit is left as is so
        validation rejects it.
        """
        integer_part, _, decimal_part = value.partition(".")
        is_negative = False

        if integer_part.startswith("-"):
            is_negative = True
            integer_part = integer_part[1:]
        elif integer_part.startswith("+"):
            integer_part = integer_part[1:]

        if decimal_part.startswith("-"):
            is_negative = True
            decimal_part = "0" + decimal_part[1:]

        if not integer_part and decimal_part:
            integer_part = "0"

        return integer_part, decimal_part, is_negative

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __reduce__(self):
        return self.__class__, (str(self), self._digits)

    @property
    def scaled_value(self) -> int:
        """The value multiplied by 10^digits."""
        return self._value

    @property
    def digits(self) -> int:
        """Number of fractional digits represented exactly."""
        return self._digits

    # ------------------------------------------------------------------
    # Operand handling
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(operand: DecimalConvertible) -> MidaDecimal:
        """Decimals keep their own scale, anything else gets the default one."""
        if isinstance(operand, MidaDecimal):
            return operand
        return decimal(operand)

    def _align(self, other: MidaDecimal) -> Tuple[int, int, int]:
        """Both scaled values expressed at the larger of the two scales."""
        digits = max(self._digits, other._digits)
        return (
            self._value * 10 ** (digits - self._digits),
            other._value * 10 ** (digits - other._digits),
            digits,
            )

    @staticmethod
    def _from_scaled(value: int, digits: int) -> MidaDecimal:
        """Reparse a scaled value through its canonical text."""
        return MidaDecimal(_render(value, digits), digits)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, operand: DecimalConvertible) -> MidaDecimal:
        left, right, digits = self._align(self._coerce(operand))
        return self._from_scaled(left + right, digits)

    def subtract(self, operand: DecimalConvertible) -> MidaDecimal:
        left, right, digits = self._align(self._coerce(operand))
        return self._from_scaled(left - right, digits)

    def sub(self, operand: DecimalConvertible) -> MidaDecimal:
        return self.subtract(operand)

    def multiply(self, operand: DecimalConvertible) -> MidaDecimal:
        """Product at the larger operand scale, rounded half up."""
        left, right, digits = self._align(self._coerce(operand))
        return self._from_scaled(_divide_round(left * right, 10 ** digits), digits)

    def mul(self, operand: DecimalConvertible) -> MidaDecimal:
        return self.multiply(operand)

    def divide(self, operand: DecimalConvertible) -> MidaDecimal:
        """
        Quotient at the larger operand scale, rounded half up.

        Raises:
            DivisionByZeroError: If the operand is zero
        """
        other = self._coerce(operand)

        if other._value == 0:
            logger.error("Decimal division by zero", dividend=str(self), divisor=repr(operand))
            raise DivisionByZeroError(
                f"Cannot divide {self} by zero",
                details={"dividend": str(self), "divisor": repr(operand)}
                )

        left, right, digits = self._align(other)
        return self._from_scaled(_divide_round(left * 10 ** digits, right), digits)

    def div(self, operand: DecimalConvertible) -> MidaDecimal:
        return self.divide(operand)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def equals(self, operand: DecimalConvertible) -> bool:
        left, right, _ = self._align(self._coerce(operand))
        return left == right

    def eq(self, operand: DecimalConvertible) -> bool:
        return self.equals(operand)

    def greater_than(self, operand: DecimalConvertible) -> bool:
        left, right, _ = self._align(self._coerce(operand))
        return left > right

    def greater_than_or_equal(self, operand: DecimalConvertible) -> bool:
        return self.greater_than(operand) or self.equals(operand)

    def less_than(self, operand: DecimalConvertible) -> bool:
        left, right, _ = self._align(self._coerce(operand))
        return left < right

    def less_than_or_equal(self, operand: DecimalConvertible) -> bool:
        return self.less_than(operand) or self.equals(operand)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_fixed(self, digits: int) -> MidaDecimal:
        """
        Decimal limited to `digits` fractional digits.

        digits == 0 truncates to the integer part (keeping the default
        scale), any other value rounds half up to a decimal of that scale.

        Example:
            >>> decimal("2.7").to_fixed(0)
            MidaDecimal('2', digits=32)
            >>> decimal("2.75").to_fixed(1)
            MidaDecimal('2.8', digits=1)
        """
        if digits == 0:
            return decimal(str(self).split(".")[0])

        return decimal(self, digits)

    def to_number(self) -> float:
        """Lossy conversion to float, for interop with non-exact consumers only."""
        return float(str(self))

    def to_string(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return _render(self._value, self._digits)

    def __repr__(self) -> str:
        return f"MidaDecimal('{self}', digits={self._digits})"

    def __float__(self) -> float:
        return self.to_number()

    def __int__(self) -> int:
        return _truncated_division(self._value, self._shift)

    def __bool__(self) -> bool:
        return self._value != 0

    def __hash__(self) -> int:
        # Same hash as an equal int, float or Decimal
        return hash(Fraction(self._value, self._shift))

    # ------------------------------------------------------------------
    # Python operators
    # ------------------------------------------------------------------

    def __add__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self._coerce(other).add(self)

    def __sub__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self._coerce(other).subtract(self)

    def __mul__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self._coerce(other).multiply(self)

    def __truediv__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other: Any) -> MidaDecimal:
        if not _is_operand(other):
            return NotImplemented
        return self._coerce(other).divide(self)

    def __neg__(self) -> MidaDecimal:
        return self._from_scaled(-self._value, self._digits)

    def __pos__(self) -> MidaDecimal:
        return self

    def __abs__(self) -> MidaDecimal:
        return MidaDecimal.abs(self)

    def _equals_exactly(self, other: Any) -> bool:
        """
        Equality for ==. Floats and Decimals compare by their exact binary
        or decimal value instead of being rounded to the default scale, so
        equal objects hash equally.
        """
        if isinstance(other, (float, Decimal)):
            try:
                exact = Fraction(other)
            except (ValueError, OverflowError):
                # nan and infinities
                return False
            return Fraction(self._value, self._shift) == exact

        return self.equals(other)

    def __eq__(self, other: object) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self._equals_exactly(other)

    def __ne__(self, other: object) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return not self._equals_exactly(other)

    def __lt__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.less_than(other)

    def __le__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.less_than_or_equal(other)

    def __gt__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.greater_than(other)

    def __ge__(self, other: Any) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.greater_than_or_equal(other)

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------

    @staticmethod
    def abs(operand: DecimalConvertible) -> MidaDecimal:
        """Absolute value, negative operands are multiplied by -1."""
        value = MidaDecimal._coerce(operand)

        if value.less_than(0):
            return value.multiply(MidaDecimal(-1, value._digits))

        return value

    @staticmethod
    def min(*operands: DecimalConvertible) -> MidaDecimal:
        """
        Smallest operand (the first one wins ties).

        Raises:
            EmptyOperandsError: If no operand is given
        """
        if not operands:
            raise EmptyOperandsError("MidaDecimal.min() requires at least one operand")

        minimum = MidaDecimal._coerce(operands[0])

        for operand in operands[1:]:
            value = MidaDecimal._coerce(operand)
            if value.less_than(minimum):
                minimum = value

        return minimum

    @staticmethod
    def max(*operands: DecimalConvertible) -> MidaDecimal:
        """
        Largest operand (the first one wins ties).

        Raises:
            EmptyOperandsError: If no operand is given
        """
        if not operands:
            raise EmptyOperandsError("MidaDecimal.max() requires at least one operand")

        maximum = MidaDecimal._coerce(operands[0])

        for operand in operands[1:]:
            value = MidaDecimal._coerce(operand)
            if value.greater_than(maximum):
                maximum = value

        return maximum
