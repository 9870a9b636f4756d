"""Diagnostics Log

An append-only, path-addressed event sink shared by reference across an entire
extraction call tree. Formats never return an explicit ok/fail flag to their
parent; a composite snapshots the error count before descending and compares
afterwards to learn whether anything below it failed.

Report Format:
{
    "error": {
        "type": "extraction_error",
        "message": "Extraction failed",
        "error_count": 1,
        "errors": [
            {
                "path": "shape.radius",
                "severity": "error",
                "code": "E2003_OUT_OF_RANGE",
                "message": "Please provide a positive number."
            }
        ]
    }
}

A log is a mutable accumulator: do not share one across concurrent
extractions.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field

from formwork.config import get_settings
from formwork.errors import AppError, ErrorCode, ErrorContext
from formwork.paths import display_path


class Severity(IntFlag):
    """Event severities, combinable into a mask.

    A mask tells a format which events the caller wants recorded. Probing a
    value with ``Severity.NONE`` yields pass/fail without touching any log.
    """
    NONE = 0
    ERROR = 1
    WARNING = 2
    INFO = 4
    SUCCESS = 8
    ALL = ERROR | WARNING | INFO | SUCCESS

    @property
    def label(self) -> str:
        return (self.name or "none").lower()


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single event: where, how severe, what happened."""
    path: str | None
    severity: Severity
    message: str
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, str | None]:
        return {"path": self.path, "severity": self.severity.label, "code": self.code.name, "message": self.message}


class DiagnosticEntry(BaseModel):
    """Serialized diagnostic for API responses."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Location in the input, '$' for the root")
    severity: str
    code: str
    message: str


class DiagnosticsReport(BaseModel):
    """Serialized diagnostics of one extraction."""
    model_config = ConfigDict(frozen=True)

    error_count: int = Field(ge=0)
    truncated: bool = False
    entries: list[DiagnosticEntry] = Field(default_factory=list)


class DiagnosticsLog:
    """Append-only diagnostics accumulator.

    Usage:
        log = DiagnosticsLog()
        value = schema.extract(raw, log)
        if log.has_errors():
            return log.to_report()
    """

    __slots__ = ("_events", "_error_count")

    def __init__(self) -> None:
        self._events: list[Diagnostic] = []
        self._error_count = 0

    def add(self, path: str | None, severity: Severity, message: str,
            code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC) -> None:
        self._events.append(Diagnostic(path=path, severity=severity, message=message, code=code))
        if severity is Severity.ERROR:
            self._error_count += 1

    def add_error(self, path: str | None, message: str,
                  code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC) -> None:
        self.add(path, Severity.ERROR, message, code)

    def add_warning(self, path: str | None, message: str,
                    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC) -> None:
        self.add(path, Severity.WARNING, message, code)

    def add_info(self, path: str | None, message: str) -> None:
        self.add(path, Severity.INFO, message)

    def get_error_count(self) -> int:
        return self._error_count

    def has_errors(self) -> bool:
        return self._error_count > 0

    def get_errors(self) -> list[Diagnostic]:
        return [e for e in self._events if e.is_error]

    def get_events(self, mask: Severity = Severity.ALL) -> list[Diagnostic]:
        """Events whose severity is included in ``mask``, in insertion order."""
        return [e for e in self._events if e.severity & mask]

    def has_events(self, mask: Severity = Severity.ALL) -> bool:
        return any(e.severity & mask for e in self._events)

    def errors_at(self, path: str | None) -> list[Diagnostic]:
        return [e for e in self._events if e.is_error and e.path == path]

    @property
    def field_errors(self) -> dict[str, list[Diagnostic]]:
        """Errors grouped by displayed path."""
        result: dict[str, list[Diagnostic]] = {}
        for event in self.get_errors():
            result.setdefault(display_path(event.path), []).append(event)
        return result

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._events)

    def to_report(self, max_errors: int | None = None) -> DiagnosticsReport:
        """Serialize the error events, capped at ``max_errors`` (defaults to settings)."""
        if max_errors is None:
            max_errors = get_settings().REPORT_MAX_ERRORS
        errors = self.get_errors()
        return DiagnosticsReport(
            error_count=len(errors),
            truncated=len(errors) > max_errors,
            entries=[DiagnosticEntry(path=display_path(e.path), severity=e.severity.label,
                code=e.code.name, message=e.message) for e in errors[:max_errors]],
        )

    def raise_if_errors(self, message: str = "Extraction failed") -> None:
        """Raise ExtractionError if any error was recorded."""
        if self._error_count:
            raise ExtractionError(message=message, details=self.get_errors())


@dataclass
class ExtractionError(Exception):
    """A failed extraction, with every error diagnostic that caused it."""
    message: str
    details: list[Diagnostic]

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        if len(self.details) == 1:
            d = self.details[0]
            return f"{display_path(d.path)}: {d.message}"
        return f"{self.message} ({len(self.details)} errors)"

    @property
    def first_error(self) -> Diagnostic | None:
        return self.details[0] if self.details else None

    def to_app_error(self, origin: str = "extraction") -> AppError:
        """Convert to AppError for boundary callers."""
        if len(self.details) == 1:
            d = self.details[0]
            return AppError(code=d.code, message=f"{display_path(d.path)}: {d.message}",
                context=ErrorContext(origin=origin), metadata={"path": display_path(d.path)})

        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC,
            message=f"{self.message}: {len(self.details)} errors", context=ErrorContext(origin=origin),
            metadata={"error_count": len(self.details), "errors": [d.to_dict() for d in self.details]})

    def to_dict(self) -> dict:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "extraction_error", "message": self.message,
            "error_count": len(self.details), "errors": [d.to_dict() for d in self.details]}}
