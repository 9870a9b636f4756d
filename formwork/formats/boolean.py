"""Boolean Leaf Format

Accepts booleans plus the spellings HTML forms and query strings use for them.
An unchecked checkbox is never submitted, so a missing required boolean field
is read as False (see RecordFormat).
"""
from __future__ import annotations

from typing import Any, Self

from formwork.diagnostics import DiagnosticsLog, Severity
from formwork.errors import ErrorCode

from .base import LeafFormat, Outcome, Rule

_TRUE = frozenset({"1", "true", "on", "yes"})
_FALSE = frozenset({"0", "false", "off", "no"})


class BoolFormat(LeafFormat):
    """True/False, 1/0, and the strings "1"/"0", "true"/"false", "on"/"off", "yes"/"no"."""

    @property
    def missing_value(self) -> bool:
        return False

    def _structure(self, value: Any, mask: Severity, log: DiagnosticsLog | None, path: str | None) -> Outcome:
        if isinstance(value, bool):
            return Outcome(True, value)
        if isinstance(value, int) and value in (0, 1):
            return Outcome(True, value == 1)
        if isinstance(value, str):
            token = value.strip().lower()
            if token in _TRUE:
                return Outcome(True, True)
            if token in _FALSE:
                return Outcome(True, False)
        return self._reject(mask, log, path, "Please provide a boolean.")

    def is_true(self, message: str = "Please confirm this field.") -> Self:
        return self._add_rule(Rule.test("true", lambda v: v is True, message, code=ErrorCode.E2005_CONSTRAINT_VIOLATION))

    def is_false(self, message: str = "Please leave this field unchecked.") -> Self:
        return self._add_rule(Rule.test("false", lambda v: v is False, message, code=ErrorCode.E2005_CONSTRAINT_VIOLATION))
