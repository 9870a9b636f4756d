"""Tests for VariantFormat and its builder."""

import pytest

from formwork import FormatConfigError, NumberFormat, RecordFormat, StringFormat, VariantBuilder, VariantFormat, variant
from formwork.errors import ErrorCode
from formwork.formats import ListFormat, tag_key


def _shapes() -> VariantFormat:
    return (variant()
        .tag("type")
        .add("circle", RecordFormat().required("type").required("radius", NumberFormat().is_positive()))
        .add("square", RecordFormat().required("type").required("side", NumberFormat().is_positive())))


@pytest.mark.parametrize("value, expected", [
    ("a", "a"),
    ("", ""),
    (0, "0"),
    (-3, "-3"),
    (0.0, "0"),
    (2.0, "2"),
    (2.5, None),
    (True, None),
    (None, None),
    ([], None),
])
def test_tag_key(value, expected):
    assert tag_key(value) == expected


def test_dispatches_on_the_tag(log):
    shapes = _shapes()

    assert shapes.extract({"type": "circle", "radius": "2.50"}, log) == {"type": "circle", "radius": "2.5"}
    assert shapes.extract({"type": "square", "side": 3}, log) == {"type": "square", "side": 3}
    assert not log.has_errors()


def test_branch_receives_the_same_path(log):
    assert _shapes().extract({"type": "circle", "radius": -1}, log, "shape") is None
    assert [(e.path, e.message) for e in log] == [("shape.radius", "Please provide a positive number.")]


def test_branch_errors_at_the_root(log):
    assert _shapes().extract({"type": "circle", "radius": -1}, log) is None
    assert log.get_errors()[0].path == "radius"


def test_unknown_tag_is_reported_at_the_tag_path(log):
    assert _shapes().extract({"type": "hexagon"}, log, "shape") is None
    assert [(e.path, e.message, e.code) for e in log] == [
        ("shape.type", "Please fill in a valid value.", ErrorCode.E2006_UNKNOWN_VARIANT),
    ]


def test_missing_tag_is_reported_at_the_variant_path(log):
    assert _shapes().extract({"radius": 1}, log, "shape") is None
    assert [(e.path, e.message) for e in log] == [("shape", 'Please provide required field "type".')]


@pytest.mark.parametrize("bad", [None, "circle", 3, 2.5])
def test_non_container_input_is_rejected(log, bad):
    assert _shapes().extract(bad, log) is None
    assert log.get_errors()[0].code is ErrorCode.E2004_INVALID_TYPE


def test_non_scalar_tag_value_is_unknown(log):
    assert _shapes().extract({"type": ["circle"]}, log) is None
    assert log.get_errors()[0].path == "type"


def test_boolean_tag_value_is_unknown(log):
    flags = variant("on").add(1, RecordFormat().required("on"))
    assert flags.extract({"on": True}, log) is None
    assert log.get_errors()[0].code is ErrorCode.E2006_UNKNOWN_VARIANT


def test_numeric_tags_compare_as_scalars(log):
    numbered = (variant("v")
        .add(1, RecordFormat().required("v").required("a"))
        .add("2", RecordFormat().required("v").required("b")))

    assert numbered.extract({"v": "1", "a": "x"}, log) == {"v": "1", "a": "x"}
    assert numbered.extract({"v": 1.0, "a": "x"}, log) == {"v": 1.0, "a": "x"}
    assert numbered.extract({"v": 2, "b": "y"}, log) == {"v": 2, "b": "y"}
    assert not log.has_errors()
    assert numbered.tags == ("1", "2")


def test_list_input_with_an_index_tag(log):
    pair = (variant(0)
        .add("point", ListFormat().has_length(3))
        .add("label", ListFormat(StringFormat())))

    assert pair.extract(["point", 1, 2], log) == ["point", 1, 2]
    assert pair.extract(("label", "a"), log) == ["label", "a"]
    assert not log.has_errors()

    assert pair.extract([], log, "p") is None
    assert [(e.path, e.message) for e in log] == [("p", 'Please provide required index "0".')]


def test_list_input_dispatches_to_a_record_branch(log):
    point = (variant(0)
        .add("pt", RecordFormat().required(0).required(1, NumberFormat()))
        .add("pair", RecordFormat().required(0).required(1).required(2)))

    assert point.extract(["pt", " 3 "], log) == {0: "pt", 1: "3"}
    assert not log.has_errors()

    assert point.extract(["pair", "a"], log, "p") is None
    assert point.extract(["pt", "x"], log, "q") is None
    assert [(e.path, e.message) for e in log] == [
        ("p", 'Please provide required index "2".'),
        ("q.1", "Please provide a number."),
    ]


def test_string_index_tag_on_a_list(log):
    pair = variant("1").add("x", ListFormat())
    assert pair.extract([0, "x"], log) == [0, "x"]


def test_variant_rules_run_on_the_branch_result(log):
    shapes = _shapes().test(lambda v: len(v) == 2, "Please send only the shape fields.", name="exact")

    assert shapes.extract({"type": "square", "side": 1}, log) == {"type": "square", "side": 1}
    assert shapes.extract({"type": "square", "side": 1, "color": "red"}, log) == {"type": "square", "side": 1}

    dynamic = variant("t").add("a", RecordFormat().required("t").allow_dynamic()).test(
        lambda v: len(v) == 1, "Too many fields.")
    assert dynamic.extract({"t": "a", "x": 1}, log, "d") is None
    assert [(e.path, e.message) for e in log] == [("d", "Too many fields.")]


def test_branch_failure_skips_variant_rules(log):
    calls = []
    shapes = _shapes().test(lambda v: calls.append(v) or True)
    shapes.extract({"type": "circle"}, log)
    assert calls == []


def test_earlier_errors_do_not_fail_a_valid_variant(log):
    log.add_error("elsewhere", "unrelated")
    assert _shapes().extract({"type": "square", "side": 2}, log) == {"type": "square", "side": 2}


def test_builder_requires_the_tag_first(log):
    builder = variant()
    assert isinstance(builder, VariantBuilder)

    with pytest.raises(FormatConfigError) as exc_info:
        builder.add("a", RecordFormat())
    assert exc_info.value.code is ErrorCode.E9011_BUILDER_ORDER

    with pytest.raises(FormatConfigError):
        builder.extract({"a": 1}, log)


def test_tag_can_only_be_set_once():
    with pytest.raises(FormatConfigError) as exc_info:
        variant("a").tag("b")
    assert exc_info.value.code is ErrorCode.E9011_BUILDER_ORDER


@pytest.mark.parametrize("tag_field", [True, None, 1.5, ["a"]])
def test_tag_field_must_be_a_name_or_index(tag_field):
    with pytest.raises(FormatConfigError) as exc_info:
        VariantFormat(tag_field)
    assert exc_info.value.code is ErrorCode.E9013_INVALID_TAG


@pytest.mark.parametrize("first, second", [("0", 0), (0, 0.0), ("1", 1.0), ("a", "a")])
def test_duplicate_tags_are_rejected(first, second):
    shapes = variant("t").add(first, RecordFormat())
    with pytest.raises(FormatConfigError) as exc_info:
        shapes.add(second, RecordFormat())
    assert exc_info.value.code is ErrorCode.E9012_DUPLICATE_TAG


@pytest.mark.parametrize("tag", [True, None, 1.5, ("a",)])
def test_non_scalar_tags_are_rejected(tag):
    with pytest.raises(FormatConfigError) as exc_info:
        variant("t").add(tag, RecordFormat())
    assert exc_info.value.code is ErrorCode.E9013_INVALID_TAG


def test_branches_must_be_added_before_rules():
    shapes = variant("t").add("a", RecordFormat()).test(bool)
    with pytest.raises(FormatConfigError) as exc_info:
        shapes.add("b", RecordFormat())
    assert exc_info.value.code is ErrorCode.E9011_BUILDER_ORDER


def test_branch_format_must_be_a_format():
    with pytest.raises(FormatConfigError):
        variant("t").add("a", dict)
