"""Error Handling

Usage:
    from formwork.errors import FormatConfigError, Ok, Err, AppError

    try:
        VariantFormat("kind").add("a", a_format).add(0, b).add("0", c)
    except FormatConfigError as exc:
        print(exc.code)  # ErrorCode.E9012_DUPLICATE_TAG

    match extract_result(schema, data):
        case Ok(value):
            save(value)
        case Err(error):
            respond(error.code.http_status, error.to_dict())
"""
from .types import (
    AppError,
    AppErrorException,
    Err,
    ErrorCode,
    ErrorContext,
    FormatConfigError,
    Ok,
    Result,
)

from .builders import misconfigured

__all__ = [
    "AppError",
    "AppErrorException",
    "Err",
    "ErrorCode",
    "ErrorContext",
    "FormatConfigError",
    "Ok",
    "Result",
    "misconfigured",
]
