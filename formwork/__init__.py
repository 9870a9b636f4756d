"""formwork: declarative extraction for untyped nested data

A schema is a tree of formats. Extracting raw input (decoded query strings,
form bodies, JSON) through it yields either a normalized, type-checked value or
path-addressed diagnostics in a shared DiagnosticsLog.

Key Features:
- Records with required/optional/default fields and form-friendly promotion
  of missing booleans and collections
- Tagged unions (variants) dispatching on a scalar tag field
- Ordered, short-circuiting test/filter rule pipelines
- Leaf formats with a log-free fast path for cheap probing
- Schema mistakes raise FormatConfigError at construction time; bad data
  never raises

Usage:
    from formwork import DiagnosticsLog, RecordFormat, BoolFormat, NumberFormat, configure_from_settings

    configure_from_settings()  # FORMWORK_LOG_LEVEL, FORMWORK_LOG_JSON

    signup = (RecordFormat()
        .required("agree", BoolFormat())
        .required("age", NumberFormat().is_min(0).is_integer()))

    log = DiagnosticsLog()
    data = signup.extract({"age": " 017 "}, log)
    # {"agree": False, "age": "17"}
"""
from .boundaries import ExtractionBoundary, extract_or_raise, extract_result
from .diagnostics import (
    Diagnostic,
    DiagnosticEntry,
    DiagnosticsLog,
    DiagnosticsReport,
    ExtractionError,
    Severity,
)
from .errors import AppError, Err, ErrorCode, FormatConfigError, Ok, Result
from .formats import (
    MISSING,
    AbstractFormat,
    BoolFormat,
    Format,
    LeafFormat,
    ListFormat,
    NumberFormat,
    Outcome,
    RecordFormat,
    Rule,
    RulePipeline,
    StringFormat,
    VariantBuilder,
    VariantFormat,
    variant,
)
from .logging import configure_from_settings
from .paths import join_path

__version__ = "0.1.0"

__all__ = [
    "ExtractionBoundary",
    "extract_or_raise",
    "extract_result",
    "Diagnostic",
    "DiagnosticEntry",
    "DiagnosticsLog",
    "DiagnosticsReport",
    "ExtractionError",
    "Severity",
    "AppError",
    "Err",
    "ErrorCode",
    "FormatConfigError",
    "Ok",
    "Result",
    "MISSING",
    "AbstractFormat",
    "BoolFormat",
    "Format",
    "LeafFormat",
    "ListFormat",
    "NumberFormat",
    "Outcome",
    "RecordFormat",
    "Rule",
    "RulePipeline",
    "StringFormat",
    "VariantBuilder",
    "VariantFormat",
    "variant",
    "configure_from_settings",
    "join_path",
]
