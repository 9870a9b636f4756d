"""Variant Format (tagged union)

A variant reads a scalar "tag" field out of the input container and hands the
whole input, unmodified and at the same path, to the format registered for
that tag. Only the branch that matches reports errors.

The tag field is fixed before anything else. VariantBuilder is the first
stage and only offers tag(); the VariantFormat it returns offers add() and
rules:

    shape = (variant()
        .tag("type")
        .add("circle", RecordFormat().required("type").required("radius", NumberFormat().is_positive()))
        .add("square", RecordFormat().required("type").required("side", NumberFormat().is_positive())))

Tag values compare as scalars: the int 0, the float 0.0 and the string "0"
are the same tag. Tags are canonicalized to strings on registration and
lookup.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

from formwork.diagnostics import DiagnosticsLog
from formwork.errors import ErrorCode, misconfigured
from formwork.paths import join_path, required_message

from .base import AbstractFormat, Format, lookup


def tag_key(value: Any) -> str | None:
    """Canonical form of a scalar tag value, or None when it cannot be a tag."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return None


class VariantBuilder:
    """First stage of a variant: choose the tag field."""

    __slots__ = ()

    def tag(self, tag_field: str | int) -> VariantFormat:
        """Set the field name (or list index) whose value selects the branch."""
        return VariantFormat(tag_field)

    def add(self, tag_value: Any, format: Format) -> VariantFormat:
        raise misconfigured("You must call tag() before adding formats via add().",
            code=ErrorCode.E9011_BUILDER_ORDER, format=self)

    def extract(self, value: Any, log: DiagnosticsLog, path: str | None = None) -> Any:
        raise misconfigured("You must set the tag field name via tag() before you extract.",
            code=ErrorCode.E9011_BUILDER_ORDER, format=self)


def variant(tag_field: str | int | None = None) -> VariantBuilder | VariantFormat:
    """Start a variant; with ``tag_field`` the builder stage is skipped."""
    return VariantBuilder() if tag_field is None else VariantFormat(tag_field)


class VariantFormat(AbstractFormat):
    """Tagged union over mapping or list containers."""

    def __init__(self, tag_field: str | int) -> None:
        super().__init__()
        if isinstance(tag_field, bool) or not isinstance(tag_field, (str, int)):
            raise misconfigured(f"The tag field must be a field name or index, got {tag_field!r}.",
                code=ErrorCode.E9013_INVALID_TAG, format=self)
        self._tag_field = tag_field
        self._formats: dict[str, Format] = {}

    @property
    def tag_field(self) -> str | int:
        return self._tag_field

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._formats)

    def tag(self, tag_field: str | int) -> Self:
        raise misconfigured(f"The tag field is already set to {self._tag_field!r}.",
            code=ErrorCode.E9011_BUILDER_ORDER, format=self)

    def add(self, tag_value: str | int | float, format: Format) -> Self:
        """Register the format selected by ``tag_value``.

        Tag values must be strings, integers or floats with an integral value,
        and unique under scalar comparison.
        """
        key = tag_key(tag_value)
        if key is None:
            raise misconfigured("Tag values must be scalar (string, integer, or a float with an integer value).",
                code=ErrorCode.E9013_INVALID_TAG, format=self, tag=repr(tag_value))
        if key in self._formats:
            raise misconfigured(f'Tag value "{key}" has already been specified for another format in this variant.',
                code=ErrorCode.E9012_DUPLICATE_TAG, format=self, tag=key)
        self._ensure_no_rules("add")
        if not isinstance(format, Format):
            raise misconfigured(f'Tag value "{key}" needs a Format, got {type(format).__name__}.',
                format=self, tag=key)

        self._formats[key] = format
        return self

    def extract(self, value: Any, log: DiagnosticsLog, path: str | None = None) -> Any:
        if not isinstance(value, (Mapping, list, tuple)):
            log.add_error(path, "Please provide a valid value.", ErrorCode.E2004_INVALID_TYPE)
            return None

        present, tag_value = lookup(value, self._tag_field)
        if not present:
            log.add_error(path, required_message(self._tag_field), ErrorCode.E2001_REQUIRED_FIELD_MISSING)
            return None

        format = self._formats.get(tag_key(tag_value))
        if format is None:
            log.add_error(join_path(path, self._tag_field), "Please fill in a valid value.",
                ErrorCode.E2006_UNKNOWN_VARIANT)
            return None

        error_count = log.get_error_count()
        result = format.extract(value, log, path)

        if log.get_error_count() > error_count:
            return None
        return self._finish(result, log, path)
