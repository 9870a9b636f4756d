"""Tests for error codes, Result helpers and configuration errors."""

import pytest

from formwork.errors import (
    AppError,
    Err,
    ErrorCode,
    FormatConfigError,
    Ok,
    misconfigured,
)
from formwork.formats import RecordFormat


@pytest.mark.parametrize("code, status, category", [
    (ErrorCode.E2001_REQUIRED_FIELD_MISSING, 400, "validation"),
    (ErrorCode.E2020_PAYLOAD_TOO_LARGE, 413, "validation"),
    (ErrorCode.E9011_BUILDER_ORDER, 500, "configuration"),
    (ErrorCode.E9001_UNEXPECTED_ERROR, 500, "internal"),
])
def test_error_code_mapping(code, status, category):
    assert code.http_status == status
    assert code.category == category


def test_app_error_serialization():
    error = AppError(code=ErrorCode.E2004_INVALID_TYPE, message="bad").with_metadata(path="a")
    payload = error.to_dict()["error"]

    assert payload["code"] == "E2004_INVALID_TYPE"
    assert payload["code_num"] == 2004
    assert payload["metadata"] == {"path": "a"}
    assert error.error_id.startswith("E2004_INVALID_TYPE:")


def test_with_context_keeps_the_correlation_id():
    error = AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message="bad")
    moved = error.with_context(origin="api", request_id="r-1")
    assert moved.context.correlation_id == error.context.correlation_id
    assert (moved.context.origin, moved.context.request_id) == ("api", "r-1")


def test_result_combinators():
    ok, err = Ok(2), Err(AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message="bad"))

    assert ok.map(lambda v: v + 1) == Ok(3)
    assert err.map(lambda v: v + 1) is err
    assert ok.flat_map(lambda v: Ok(v * 10)).unwrap() == 20
    assert err.unwrap_or(0) == 0
    assert ok.match(lambda v: f"ok {v}", lambda e: "err") == "ok 2"
    assert err.match(lambda v: "ok", lambda e: e.message) == "bad"
    assert list(ok) == [2] and list(err) == []

    with pytest.raises(ValueError):
        err.unwrap()
    with pytest.raises(ValueError):
        ok.unwrap_err()


def test_misconfigured_builds_a_raisable_error():
    record = RecordFormat()
    exc = misconfigured("Broken schema.", code=ErrorCode.E9012_DUPLICATE_TAG, format=record, tag="a")

    assert isinstance(exc, FormatConfigError)
    assert exc.code is ErrorCode.E9012_DUPLICATE_TAG
    assert exc.error.metadata == {"format": "RecordFormat", "tag": "a"}
    assert exc.error.context.origin == "schema"
    assert str(exc) == "Broken schema."


def test_configuration_errors_are_not_value_errors():
    # Schema mistakes must not be mistaken for rejected input by filter rules.
    assert not issubclass(FormatConfigError, (ValueError, TypeError, ArithmeticError))
