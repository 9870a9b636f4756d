"""String Leaf Format"""
from __future__ import annotations

import re
from typing import Any, Self

from formwork.diagnostics import DiagnosticsLog, Severity
from formwork.errors import ErrorCode

from .base import LeafFormat, Outcome, Rule


class StringFormat(LeafFormat):
    """Text values. Rules run in the order they are chained, so call trim() first when needed."""

    def _structure(self, value: Any, mask: Severity, log: DiagnosticsLog | None, path: str | None) -> Outcome:
        if isinstance(value, str):
            return Outcome(True, value)
        return self._reject(mask, log, path, "Please provide a string.")

    def trim(self) -> Self:
        return self._add_rule(Rule.filter("trim", str.strip, "Please provide a string."))

    def is_not_empty(self) -> Self:
        return self._add_rule(Rule.test("not_empty", lambda v: v != "", "Please fill in this field.",
            code=ErrorCode.E2001_REQUIRED_FIELD_MISSING))

    def has_length(self, min: int | None = None, max: int | None = None) -> Self:
        if min is not None:
            self._add_rule(Rule.test("min_length", lambda v: len(v) >= min,
                "Please provide at least {min} characters.", code=ErrorCode.E2003_OUT_OF_RANGE, min=min))
        if max is not None:
            self._add_rule(Rule.test("max_length", lambda v: len(v) <= max,
                "Please provide at most {max} characters.", code=ErrorCode.E2003_OUT_OF_RANGE, max=max))
        return self

    def is_one_of(self, *options: str) -> Self:
        allowed = frozenset(options)
        return self._add_rule(Rule.test("one_of", lambda v: v in allowed, "Please choose one of: {options}.",
            options=", ".join(options)))

    def matches(self, pattern: str | re.Pattern[str], message: str = "Please provide a value in the expected format.") -> Self:
        compiled = re.compile(pattern)
        return self._add_rule(Rule.test("pattern", lambda v: compiled.fullmatch(v) is not None, message,
            code=ErrorCode.E2002_INVALID_FORMAT))
