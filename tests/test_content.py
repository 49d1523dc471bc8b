from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from json2table import ExtractionMiss, parse_structure
from json2table.content import (
    PLACEHOLDER,
    ContentKind,
    classify,
    default_alignment,
    extract,
    plain_text,
    resolve,
)


@pytest.mark.parametrize(
    "value,kind",
    [
        (None, ContentKind.NULL),
        (True, ContentKind.BOOL),
        (0, ContentKind.NUMBER),
        (1.5, ContentKind.NUMBER),
        (Decimal("2.50"), ContentKind.NUMBER),
        ("x", ContentKind.TEXT),
        ([1, 2], ContentKind.LIST),
        ({"a": 1}, ContentKind.STRUCT),
    ],
)
def test_classify(value, kind):
    assert classify(value) is kind


def test_plain_text_scalars():
    assert plain_text(None) == ""
    assert plain_text(True) == "true"
    assert plain_text(False) == "false"
    assert plain_text(30) == "30"
    assert plain_text(30.0) == "30"
    assert plain_text(2.5) == "2.5"
    assert plain_text(Decimal("1.50")) == "1.50"
    assert plain_text("hi") == "hi"


def test_plain_text_dates_are_iso():
    assert plain_text(dt.date(2024, 3, 1)) == "2024-03-01"
    assert plain_text(dt.datetime(2024, 3, 1, 12, 30)) == "2024-03-01T12:30:00"


def test_plain_text_lists_and_objects():
    assert plain_text([1, "a", True]) == "1, a, true"
    assert plain_text({"x": 1, "y": "z"}) == "x: 1, y: z"
    assert plain_text({"x": {"deep": 1}}) == PLACEHOLDER
    assert plain_text({"x": [1]}) == PLACEHOLDER


def test_default_alignment():
    assert default_alignment(42) == "right"
    assert default_alignment(-1.5) == "right"
    assert default_alignment("42") == "right"
    assert default_alignment("3.14") == "right"
    assert default_alignment("4a") == "left"
    assert default_alignment(True) == "left"
    assert default_alignment(None) == "left"


def test_extract_nested_and_index():
    data = {"user": {"name": "Al"}, "items": [{"n": "x"}, {"n": "y"}]}
    assert extract(data, ("user", "name")) == "Al"
    assert extract(data, ("items", "1", "n")) == "y"


def test_extract_miss_raises():
    with pytest.raises(ExtractionMiss) as exc:
        extract({"user": {}}, ("user", "name"))
    assert exc.value.segment == "name"
    with pytest.raises(ExtractionMiss):
        extract({"items": []}, ("items", "0"))
    with pytest.raises(ExtractionMiss):
        extract({"user": "flat"}, ("user", "name"))


def test_resolve_returns_none_on_miss():
    (spec,) = parse_structure("user.name")
    assert resolve({"user": {"name": "Al"}}, spec) == "Al"
    assert resolve({"other": 1}, spec) is None


def test_resolve_applies_alt_path():
    (spec,) = parse_structure("lastBook(title)")
    assert resolve({"lastBook": {"title": "Dune"}}, spec) == "Dune"
    assert resolve({"lastBook": "flat"}, spec) is None


def test_extract_non_ascii_digit_is_a_miss():
    with pytest.raises(ExtractionMiss):
        extract({"a": [1, 2]}, ("a", "²"))
    (spec,) = parse_structure("a.²")
    assert resolve({"a": [1, 2]}, spec) is None
