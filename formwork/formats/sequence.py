"""Sequence Format

Validates a list (or tuple) and, when an item format is given, extracts every
item at ``path.<index>``. Like RecordFormat, a list never returns a partially
valid value: any new error below it fails the whole list.
"""
from __future__ import annotations

from typing import Any, Self

from formwork.diagnostics import DiagnosticsLog
from formwork.errors import ErrorCode
from formwork.paths import join_path

from .base import AbstractFormat, Format, Rule


class ListFormat(AbstractFormat):
    """Ordered collections, optionally with a format for every item."""

    def __init__(self, item_format: Format | None = None) -> None:
        super().__init__()
        self._item_format = item_format

    @property
    def item_format(self) -> Format | None:
        return self._item_format

    @property
    def missing_value(self) -> list:
        # A fresh list per use; callers may mutate what they get back.
        return []

    def each(self, item_format: Format) -> Self:
        """Set the format applied to every item."""
        self._ensure_no_rules("each")
        self._item_format = item_format
        return self

    def extract(self, value: Any, log: DiagnosticsLog, path: str | None = None) -> list | None:
        if not isinstance(value, (list, tuple)):
            log.add_error(path, "Please provide a list.", ErrorCode.E2004_INVALID_TYPE)
            return None

        item_format = self._item_format
        if item_format is None:
            return self._finish(list(value), log, path)

        error_count = log.get_error_count()
        items = [item_format.extract(item, log, join_path(path, index)) for index, item in enumerate(value)]

        if log.get_error_count() > error_count:
            return None
        return self._finish(items, log, path)

    def has_length(self, min: int | None = None, max: int | None = None) -> Self:
        if min is not None:
            self._add_rule(Rule.test("min_items", lambda v: len(v) >= min,
                "Please provide at least {min} items.", code=ErrorCode.E2003_OUT_OF_RANGE, min=min))
        if max is not None:
            self._add_rule(Rule.test("max_items", lambda v: len(v) <= max,
                "Please provide at most {max} items.", code=ErrorCode.E2003_OUT_OF_RANGE, max=max))
        return self

    def is_not_empty(self) -> Self:
        return self._add_rule(Rule.test("not_empty", lambda v: len(v) > 0, "Please provide at least one item.",
            code=ErrorCode.E2001_REQUIRED_FIELD_MISSING))
