"""Assertions on single, non-array RESP values."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Pattern

from respcheck.values import AssertionFailed, RespAssertion, RespType, RespValue, _quote


@dataclass(frozen=True)
class ErrorAssertion(RespAssertion):
    """Expects an error with exactly this message."""

    expected_value: str

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.ERROR:
            raise AssertionFailed(f"Expected error, got {value.type}")
        if value.message != self.expected_value:
            raise AssertionFailed(
                f"Expected {_quote(self.expected_value)}, got {_quote(value.message)}"
            )


def _parse_float(text: str) -> Optional[float]:
    if text != text.strip() or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isinf(number) and text.lstrip("+-").lower() not in ("inf", "infinity"):
        return None
    return number


def _format_fixed(number: float) -> str:
    """Shortest decimal form without an exponent."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _format_general(number: float) -> str:
    """Shortest form, switching to an exponent for very small or large magnitudes."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, number) < 0 else ""
    if number == 0:
        return sign + "0"
    decimal = Decimal(repr(abs(number))).normalize()
    exponent = decimal.adjusted()
    if exponent < -4 or exponent >= 6:
        digits = "".join(str(d) for d in decimal.as_tuple().digits)
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if exponent < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(exponent):02d}"
    return sign + format(decimal, "f")


@dataclass(frozen=True)
class FloatingPointBulkStringAssertion(RespAssertion):
    """Expects a bulk string holding a number within a tolerance of the expected one."""

    expected_value: float
    tolerance: float

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.BULK_STRING:
            raise AssertionFailed(f"Expected bulk string, got {value.type}")
        text = value.text
        number = _parse_float(text)
        if number is None:
            raise AssertionFailed(f"Expected {_quote(text)} to be a floating point number")
        if abs(number - self.expected_value) > self.tolerance:
            suffix = f" (± {_format_general(self.tolerance)})" if self.tolerance != 0 else ""
            raise AssertionFailed(
                f"Expected {_format_fixed(self.expected_value)}{suffix}, got {text}"
            )


@dataclass(frozen=True)
class IntegerAssertion(RespAssertion):
    """Expects an integer with exactly this value."""

    expected_value: int

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.INTEGER:
            raise AssertionFailed(f"Expected integer, got {value.type}")
        if value.number != self.expected_value:
            raise AssertionFailed(f"Expected {self.expected_value}, got {value.number}")


@dataclass(frozen=True)
class NilArrayAssertion(RespAssertion):
    """Expects a null array."""

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.NIL_ARRAY:
            raise AssertionFailed(rf'Expected null array ("*-1\r\n"), got {value.type}')


@dataclass(frozen=True)
class NilAssertion(RespAssertion):
    """Expects a null bulk string."""

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.NIL:
            raise AssertionFailed(rf'Expected null bulk string ("$-1\r\n"), got {value.type}')


@dataclass(frozen=True)
class NoopAssertion(RespAssertion):
    """Accepts any value."""

    def run(self, value: RespValue) -> None:
        return None


@dataclass(frozen=True)
class RegexErrorAssertion(RespAssertion):
    """Expects an error whose message matches a regular expression."""

    expected_pattern: str
    _regex: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", re.compile(self.expected_pattern))

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.ERROR:
            raise AssertionFailed(f"Expected error, got {value.type}")
        if not self._regex.search(value.message):
            raise AssertionFailed(
                f"Expected error to match ({_quote(self.expected_pattern)}), "
                f"got ({_quote(value.message)})"
            )


@dataclass(frozen=True)
class RegexStringAssertion(RespAssertion):
    """Expects a string that matches a regular expression."""

    expected_pattern: str
    _regex: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", re.compile(self.expected_pattern))

    def run(self, value: RespValue) -> None:
        if not value.type.is_string:
            raise AssertionFailed(f"Expected simple string or bulk string, got {value.type}")
        if not self._regex.search(value.text):
            raise AssertionFailed(
                f"Expected {_quote(value.text)} to match the pattern "
                f"{_quote(self.expected_pattern)}."
            )


@dataclass(frozen=True)
class SimpleStringAssertion(RespAssertion):
    """Expects a simple string with exactly this content."""

    expected_value: str

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.SIMPLE_STRING:
            raise AssertionFailed(f"Expected simple string, got {value.type}")
        if value.text != self.expected_value:
            raise AssertionFailed(
                f"Expected {_quote(self.expected_value)}, got {_quote(value.text)}"
            )


@dataclass(frozen=True)
class StringAssertion(RespAssertion):
    """Expects a simple or bulk string with exactly this content."""

    expected_value: str

    def run(self, value: RespValue) -> None:
        if not value.type.is_string:
            raise AssertionFailed(f"Expected simple string or bulk string, got {value.type}")
        if value.text != self.expected_value:
            raise AssertionFailed(
                f"Expected {_quote(self.expected_value)}, got {_quote(value.text)}"
            )