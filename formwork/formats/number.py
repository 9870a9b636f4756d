"""Numeric Leaf Format

Accepts integers, floats, Decimals and strings formatted as an integer or a
float. Numeric strings are normalized (whitespace trimmed, redundant zeros
removed and so on) but stay strings, so no precision is lost.

Usage:
    age = NumberFormat().is_min(0).is_integer()
    age.extract(" +017 ", log)        # "17"
    age.extract("17.5", log)          # None, "Please provide an integer."
    NumberFormat.normalize("+00012.34000e005")  # "12.34e+5"

Range tests compare exact decimal values, so string numbers beyond float
precision compare correctly.
"""
from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Self

from formwork.config import get_settings
from formwork.diagnostics import DiagnosticsLog, Severity
from formwork.errors import ErrorCode, misconfigured

from .base import LeafFormat, Outcome, Rule

# 2^53: above this a double no longer holds every integer exactly.
MAX_SAFE_INTEGER = 9007199254740992

_NUMBER = re.compile(
    r"\s*(?P<sign>[+-])?"
    r"(?=\.?\d)(?P<int>\d*)(?:\.(?P<frac>\d*))?"
    r"(?:[eE](?P<exp_sign>[+-])?(?P<exp>\d+))?\s*",
    re.ASCII,
)
_INTEGER = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return False


def _exact(value: Any) -> Decimal:
    """Exact decimal value of a native number or numeric string."""
    if isinstance(value, str):
        return Decimal(value.strip())
    return Decimal(value)


def _bound(rule: str, value: Any) -> Decimal:
    """Exact value of a rule's bound; anything but a finite number is a schema error."""
    if isinstance(value, str) and _NUMBER.fullmatch(value) or _is_number(value):
        return _exact(value)
    raise misconfigured(f"Rule '{rule}' needs a finite number as its bound, got {value!r}.",
        code=ErrorCode.E9014_INVALID_RULE, rule=rule)


class NumberFormat(LeafFormat):
    """Numbers, native or as strings."""

    def __init__(self, max_length: int | None = None) -> None:
        super().__init__()
        self._max_length = get_settings().NUMBER_MAX_LENGTH if max_length is None else max_length

    @staticmethod
    def normalize(value: str) -> str:
        """Canonical formatting of a numeric string; the value itself is unchanged.

        - trims whitespace and drops a leading "+" on the mantissa
        - drops redundant leading zeros in the integer part and the exponent
        - restores a "0" before a bare decimal point (".10" -> "0.10")
        - drops trailing fraction zeros, and an all-zero fraction
        - drops a zero exponent
        - lowercases the exponent marker and always signs the exponent

        Strings that are not numbers are returned as they are.
        """
        match = _NUMBER.fullmatch(value)
        if match is None:
            return value

        sign = "-" if match["sign"] == "-" else ""
        integer = match["int"].lstrip("0") or "0"
        fraction = (match["frac"] or "").rstrip("0")
        exponent = (match["exp"] or "").lstrip("0")

        out = sign + integer
        if fraction:
            out += "." + fraction
        if exponent:
            out += "e" + ("-" if match["exp_sign"] == "-" else "+") + exponent
        return out

    def _structure(self, value: Any, mask: Severity, log: DiagnosticsLog | None, path: str | None) -> Outcome:
        if isinstance(value, str):
            if _NUMBER.fullmatch(value) is None:
                return self._reject(mask, log, path, "Please provide a number.")
            if len(value) > self._max_length:
                return self._reject(mask, log, path, "Please provide a number.", ErrorCode.E2020_PAYLOAD_TOO_LARGE)
            return Outcome(True, self.normalize(value))

        if _is_number(value):
            return Outcome(True, value)

        return self._reject(mask, log, path, "Please provide a number.")

    # ------------------------------------------------------------------
    # Tests
    # ------------------------------------------------------------------

    def is_min(self, min: int | float | str) -> Self:
        bound = _bound("min", min)
        return self._add_rule(Rule.test("min", lambda v: _exact(v) >= bound,
            "Please provide a number bigger than or equal to {min}.", code=ErrorCode.E2003_OUT_OF_RANGE, min=min))

    def is_max(self, max: int | float | str) -> Self:
        bound = _bound("max", max)
        return self._add_rule(Rule.test("max", lambda v: _exact(v) <= bound,
            "Please provide a number lesser than or equal to {max}.", code=ErrorCode.E2003_OUT_OF_RANGE, max=max))

    def is_in_range(self, min: int | float | str, max: int | float | str) -> Self:
        """A convenience combination of is_min() and is_max()."""
        return self.is_min(min).is_max(max)

    def is_positive(self) -> Self:
        """Same as is_min(0), with a dedicated message."""
        return self._add_rule(Rule.test("positive", lambda v: _exact(v) >= 0,
            "Please provide a positive number.", code=ErrorCode.E2003_OUT_OF_RANGE))

    def is_integer(self) -> Self:
        """Integers only.

        - a native int
        - a float with no fraction, within +/-2^53
        - a string with no fraction part and no exponent
        """
        return self._add_rule(Rule.test("integer", _is_integer, "Please provide an integer.",
            code=ErrorCode.E2002_INVALID_FORMAT))

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def to_native(self) -> Self:
        """Convert numeric strings to int (digit runs) or float; natives pass through."""
        return self._add_rule(Rule.filter("to_native", _to_native, "Please provide a number."))


def _is_integer(value: Any) -> bool:
    if isinstance(value, str):
        return _INTEGER.fullmatch(value) is not None
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer() and abs(value) <= MAX_SAFE_INTEGER
    if isinstance(value, Decimal):
        return value == value.to_integral_value()
    return False


def _to_native(value: Any) -> int | float | Decimal:
    if not isinstance(value, str):
        return value
    if _INTEGER.fullmatch(value):
        return int(value)
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"{value!r} overflows a float")
    return result

