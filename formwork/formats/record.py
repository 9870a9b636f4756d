"""Record Format

Validates a keyed container against an ordered list of declared fields. Lists
and tuples are records too: their fields are integer-like names ("0", 1)
addressed by index, and the output is always a dict keyed by field name.

Usage:
    signup = (RecordFormat()
        .required("email", StringFormat().trim().is_not_empty())
        .required("agree", BoolFormat().is_true())
        .optional("nickname", StringFormat())
        .optional_with_default("newsletter", False, BoolFormat()))

    log = DiagnosticsLog()
    data = signup.extract(request_body, log)

Field semantics:
- required: must be present. A missing boolean field reads as False and a
  missing record/list field reads as empty (HTML forms cannot submit those),
  otherwise the record itself (not the field) gets a "required field" error.
- optional: omitted from the output when missing.
- optional_with_default: the default is assigned verbatim when missing; it is
  not run through the field's format.

Field declarations must precede every test/filter rule.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

from formwork.config import get_settings
from formwork.diagnostics import DiagnosticsLog
from formwork.errors import ErrorCode, misconfigured
from formwork.paths import join_path, required_message

from .base import MISSING, AbstractFormat, Format, lookup


class Requiredness(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    OPTIONAL_WITH_DEFAULT = "optional_with_default"


@dataclass(frozen=True, slots=True)
class Field:
    """A declared record field."""
    name: str | int
    format: Format | None
    requiredness: Requiredness
    default: Any = None


class RecordFormat(AbstractFormat):
    """Keyed containers with declared required/optional fields."""

    def __init__(self, *, auto_promote: bool | None = None) -> None:
        super().__init__()
        self._fields: list[Field] = []
        self._allow_dynamic = False
        self._auto_promote = get_settings().AUTO_PROMOTE_MISSING if auto_promote is None else auto_promote

    @property
    def fields(self) -> tuple[Field, ...]:
        return tuple(self._fields)

    @property
    def missing_value(self) -> dict:
        return {}

    def required(self, name: str | int, format: Format | None = None) -> Self:
        return self._declare(Field(name, format, Requiredness.REQUIRED), "required")

    def optional(self, name: str | int, format: Format | None = None) -> Self:
        return self._declare(Field(name, format, Requiredness.OPTIONAL), "optional")

    def optional_with_default(self, name: str | int, default: Any = None, format: Format | None = None) -> Self:
        """Same as optional(), but a missing field is created with ``default``."""
        return self._declare(Field(name, format, Requiredness.OPTIONAL_WITH_DEFAULT, default), "optional_with_default")

    def allow_dynamic(self, allow_dynamic: bool = True) -> Self:
        """Pass undeclared keys through to the output, unvalidated.

        Declared fields still win over raw input keys of the same name.
        Records are not dynamic by default.
        """
        self._allow_dynamic = allow_dynamic
        return self

    def _declare(self, field: Field, method: str) -> Self:
        self._ensure_no_rules(method)
        if field.format is not None and not isinstance(field.format, Format):
            raise misconfigured(f"Field '{field.name}' needs a Format, got {type(field.format).__name__}.",
                format=self, field=str(field.name))
        if any(f.name == field.name for f in self._fields):
            raise misconfigured(f"Field '{field.name}' is already declared in this record.",
                format=self, field=str(field.name))
        self._fields.append(field)
        return self

    def extract(self, value: Any, log: DiagnosticsLog, path: str | None = None) -> dict | None:
        if not isinstance(value, (Mapping, list, tuple)):
            log.add_error(path, "Please provide a record.", ErrorCode.E2004_INVALID_TYPE)
            return None

        output: dict = {}
        error_count = log.get_error_count()

        for field in self._fields:
            name, format = field.name, field.format
            present, raw = lookup(value, name)

            if present:
                output[name] = format.extract(raw, log, join_path(path, name)) if format else raw

            elif field.requiredness is Requiredness.REQUIRED:
                stand_in = format.missing_value if format is not None and self._auto_promote else MISSING
                if stand_in is not MISSING:
                    output[name] = format.extract(stand_in, log, join_path(path, name))
                else:
                    # Dict-level error: reported at the record's path, not the field's.
                    log.add_error(path, required_message(name), ErrorCode.E2001_REQUIRED_FIELD_MISSING)

            elif field.requiredness is Requiredness.OPTIONAL_WITH_DEFAULT:
                output[name] = field.default

        if self._allow_dynamic:
            # Declared fields own their key however it is spelled (0 or "0").
            declared = {str(f.name) for f in self._fields}
            items = value.items() if isinstance(value, Mapping) else enumerate(value)
            for key, raw in items:
                if str(key) not in declared:
                    output[key] = raw

        if log.get_error_count() > error_count:
            return None
        return self._finish(output, log, path)
