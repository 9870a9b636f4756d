"""Tests for the boundary helpers."""

import pytest
import structlog

from formwork import (
    DiagnosticsLog,
    Err,
    ErrorCode,
    ExtractionBoundary,
    ExtractionError,
    NumberFormat,
    Ok,
    RecordFormat,
    extract_or_raise,
    extract_result,
)

AGE = RecordFormat().required("age", NumberFormat().is_min(0))


def test_extract_or_raise_returns_the_value():
    assert extract_or_raise(AGE, {"age": "042"}) == {"age": "42"}


def test_extract_or_raise_raises_with_every_error():
    with pytest.raises(ExtractionError) as exc_info:
        extract_or_raise(AGE, {"age": -1}, path="body")

    assert [d.path for d in exc_info.value.details] == ["body.age"]
    assert str(exc_info.value) == "body.age: Please provide a number bigger than or equal to 0."


def test_extract_result_ok():
    result = extract_result(AGE, {"age": 3})
    assert result == Ok({"age": 3})
    assert result.unwrap() == {"age": 3}


def test_extract_result_err():
    result = extract_result(AGE, {}, origin="signup")

    assert isinstance(result, Err)
    error = result.unwrap_err()
    assert error.code is ErrorCode.E2001_REQUIRED_FIELD_MISSING
    assert error.message == '$: Please provide required field "age".'
    assert error.context.origin == "signup"
    assert error.code.http_status == 400


def test_extract_result_matches_structurally():
    match extract_result(AGE, {"age": "x"}):
        case Ok(_):
            pytest.fail("expected a failure")
        case Err(error):
            assert error.metadata == {"path": "age"}


def test_boundary_collects_under_prefixed_names():
    with pytest.raises(ExtractionError) as exc_info:
        with ExtractionBoundary(prefix="request") as boundary:
            query = boundary.extract("query", AGE, {"age": "1"})
            boundary.extract("body", AGE, {"age": "-5"})
            boundary.extract("headers", AGE, "nope")

    assert query == {"age": "1"}
    assert [d.path for d in exc_info.value.details] == ["request.body.age", "request.headers"]


def test_boundary_without_errors_keeps_results():
    with ExtractionBoundary() as boundary:
        boundary.extract("a", AGE, {"age": 1})
        boundary.extract("b", NumberFormat(), " 2 ")

    assert boundary.get("a") == {"age": 1}
    assert boundary.get("b") == "2"
    assert boundary.get("missing") is None
    assert not boundary.has_errors


def test_boundary_does_not_mask_other_exceptions():
    with pytest.raises(KeyError):
        with ExtractionBoundary() as boundary:
            boundary.extract("a", AGE, {"age": "x"})
            raise KeyError("boom")


def test_boundary_shares_a_given_log():
    log = DiagnosticsLog()
    log.add_warning(None, "heads up")

    with ExtractionBoundary(log) as boundary:
        boundary.extract("n", NumberFormat(), 1)

    assert boundary.diagnostics is log
    assert len(log) == 1


def test_boundary_binds_its_prefix_to_the_logging_context():
    with ExtractionBoundary(prefix="request") as boundary:
        assert structlog.contextvars.get_contextvars()["extraction_boundary"] == "request"
        boundary.extract("n", NumberFormat(), 1)

    assert "extraction_boundary" not in structlog.contextvars.get_contextvars()


def test_boundary_unbinds_the_context_when_it_raises():
    with pytest.raises(ExtractionError):
        with ExtractionBoundary() as boundary:
            assert structlog.contextvars.get_contextvars()["extraction_boundary"] == "$"
            boundary.extract("n", NumberFormat(), "x")

    assert "extraction_boundary" not in structlog.contextvars.get_contextvars()
