"""Extraction at System Boundaries

Helpers for code that receives raw input (decoded query strings, form bodies,
JSON) and wants either a clean value or a structured failure:

- extract_or_raise: value, or ExtractionError
- extract_result: Ok(value) or Err(AppError)
- ExtractionBoundary: several named extractions sharing one log

The formats themselves never raise for bad data; these helpers turn the log
into the caller's preferred failure channel.
"""
from __future__ import annotations

from typing import Any

from formwork.diagnostics import DiagnosticsLog, ExtractionError
from formwork.errors import AppError, Err, Ok, Result
from formwork.formats import Format
from formwork.logging import bind_context, boundary_logger, unbind_context
from formwork.paths import display_path, join_path

log = boundary_logger()


def _run(format: Format, data: Any, path: str | None) -> tuple[Any, DiagnosticsLog]:
    diagnostics = DiagnosticsLog()
    value = format.extract(data, diagnostics, path)
    if diagnostics.has_errors():
        log.info("extraction_failed", format=type(format).__name__, path=path,
            error_count=diagnostics.get_error_count())
    else:
        log.debug("extraction_succeeded", format=type(format).__name__, path=path)
    return value, diagnostics


def extract_or_raise(format: Format, data: Any, *, path: str | None = None) -> Any:
    """Extract ``data`` or raise ExtractionError carrying every error diagnostic."""
    value, diagnostics = _run(format, data, path)
    diagnostics.raise_if_errors()
    return value


def extract_result(format: Format, data: Any, *, path: str | None = None, origin: str = "ingress") -> Result[Any, AppError]:
    """Extract ``data`` into a Result.

    Usage:
        match extract_result(signup, body):
            case Ok(data):
                create_account(data)
            case Err(error):
                return error.code.http_status, error.to_dict()
    """
    value, diagnostics = _run(format, data, path)
    if diagnostics.has_errors():
        return Err(ExtractionError("Extraction failed", diagnostics.get_errors()).to_app_error(origin))
    return Ok(value)


class ExtractionBoundary:
    """Context manager for several extractions sharing one log.

    Each extraction runs under its name as a path prefix, so diagnostics from
    different parts of a request stay distinguishable. While the block runs,
    log events carry ``extraction_boundary`` (the prefix, "$" without one).

    Usage:
        with ExtractionBoundary() as boundary:
            query = boundary.extract("query", QUERY_FORMAT, request_query)
            body = boundary.extract("body", BODY_FORMAT, request_body)
        # Raises ExtractionError if anything failed
    """

    def __init__(self, diagnostics: DiagnosticsLog | None = None, *, prefix: str | None = None):
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()
        self.prefix = prefix
        self._results: dict[str, Any] = {}

    def __enter__(self) -> ExtractionBoundary:
        bind_context(extraction_boundary=display_path(self.prefix))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        try:
            if exc_type is None:
                if self.diagnostics.has_errors():
                    log.info("boundary_failed", names=list(self._results),
                        error_count=self.diagnostics.get_error_count())
                self.diagnostics.raise_if_errors()
        finally:
            unbind_context("extraction_boundary")
        return False

    def extract(self, name: str, format: Format, data: Any) -> Any:
        """Extract ``data`` at ``prefix.name``; returns None on failure."""
        value = format.extract(data, self.diagnostics, join_path(self.prefix, name))
        self._results[name] = value
        return value

    def get(self, name: str) -> Any:
        """A previously extracted value."""
        return self._results.get(name)

    @property
    def has_errors(self) -> bool:
        return self.diagnostics.has_errors()
