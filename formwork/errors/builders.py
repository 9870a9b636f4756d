"""Error Builders

Configuration errors are built (and logged) here and raised by the schema
node that detected them. Data problems never become exceptions inside the
engine; see DiagnosticsLog and ExtractionError.
"""
from __future__ import annotations

from typing import Any

from formwork.logging import format_logger

from .types import AppError, ErrorCode, ErrorContext, FormatConfigError


# =============================================================================
# Schema Configuration (E9xxx)
# =============================================================================

def misconfigured(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E9010_FORMAT_MISCONFIGURED,
    format: Any = None,
    **metadata: Any,
) -> FormatConfigError:
    """Build (and log) a configuration error for a schema node.

    Usage:
        if self._rules:
            raise misconfigured("Call required() before any rules.", code=ErrorCode.E9011_BUILDER_ORDER, format=self)
    """
    format_name = type(format).__name__ if format is not None else None
    meta = {"format": format_name, **metadata}
    meta = {k: v for k, v in meta.items() if v is not None}

    format_logger().error("format_misconfigured", error_code=code.name, message=message, **meta)

    return FormatConfigError(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin="schema"),
        metadata=meta,
    ))
