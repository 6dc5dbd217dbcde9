"""Tests for the Value model: construction, accessors, display."""

import dataclasses

import pytest

from toolsystem.value import (
    Binary,
    Boolean,
    Integer,
    List,
    Map,
    MapList,
    Number,
    Text,
    Value,
    from_python,
)


# ─────────────────────────────────────────────────────────────────────────────
# Construction & Accessors
# ─────────────────────────────────────────────────────────────────────────────

def test_accessors_match_case() -> None:
    assert Text("hi").as_text() == "hi"
    assert Number(2.5).as_number() == 2.5
    assert Integer(7).as_integer() == 7
    assert Boolean(True).as_boolean() is True
    assert Binary(b"\x00\x01").as_binary() == b"\x00\x01"
    assert List(["a", 1]).as_list() == ("a", 1)
    assert Map({"k": "v"}).as_map() == {"k": "v"}
    assert MapList([{"a": 1}]).as_map_list() == ({"a": 1},)


def test_accessors_return_none_for_other_cases() -> None:
    value = Integer(3)
    assert value.as_number() is None
    assert value.as_text() is None
    assert value.as_map() is None
    assert Text("3").as_integer() is None


def test_values_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        Text("a").value = "b"  # type: ignore[misc]


def test_integer_rejects_bool_and_out_of_range() -> None:
    with pytest.raises(TypeError):
        Integer(True)
    with pytest.raises(ValueError):
        Integer(2**63)
    assert Integer(2**63 - 1).value == 2**63 - 1


def test_text_and_boolean_reject_other_payloads() -> None:
    with pytest.raises(TypeError):
        Text(5)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Boolean(1)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Boolean(0)  # type: ignore[arg-type]
    assert Boolean(False).value is False


def test_maps_are_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(Map({"a": 1}))
    with pytest.raises(TypeError):
        hash(MapList([{"a": 1}]))
    assert hash(Integer(1)) == hash(Integer(1))


def test_number_coerces_int_but_rejects_bool() -> None:
    assert Number(4).value == 4.0
    assert isinstance(Number(4).value, float)
    with pytest.raises(TypeError):
        Number(False)


def test_structured_cases_unwrap_scalar_values() -> None:
    assert List([Text("a"), Integer(1)]) == List(["a", 1])
    assert Map({"n": Boolean(False)}).as_map() == {"n": False}


def test_map_equality_ignores_order() -> None:
    assert Map({"a": 1, "b": 2}) == Map({"b": 2, "a": 1})


def test_maplist_accepts_map_instances() -> None:
    assert MapList([Map({"a": 1}), {"b": 2}]).as_map_list() == ({"a": 1}, {"b": 2})


def test_tags() -> None:
    tags = [v.tag for v in (Text(""), Number(0.0), Integer(0), Boolean(False), Binary(b""),
                            List(), Map(), MapList())]
    assert tags == ["string", "double", "int", "bool", "data", "array", "dictionary", "dictionaryArray"]


# ─────────────────────────────────────────────────────────────────────────────
# Display
# ─────────────────────────────────────────────────────────────────────────────

def test_scalar_display() -> None:
    assert str(Text("Hello")) == "Hello"
    assert str(Integer(42)) == "42"
    assert str(Number(3.14)) == "3.14"
    assert str(Number(4)) == "4.0"
    assert str(Boolean(True)) == "true"
    assert str(Boolean(False)) == "false"


def test_binary_display() -> None:
    assert str(Binary(b"abc")) == "Data(3 bytes)"


def test_list_display() -> None:
    assert str(List(["a", 1, False, 2.5])) == "[a, 1, false, 2.5]"
    assert str(List()) == "[]"


def test_map_display_is_sorted_pretty_json_with_literal_slashes() -> None:
    out = Map({"url": "https://example.com/a/b", "name": "John"})
    assert str(out) == '{\n  "name": "John",\n  "url": "https://example.com/a/b"\n}'


def test_maplist_display() -> None:
    out = MapList([{"b": 1, "a": True}])
    assert str(out) == '[\n  {\n    "a": true,\n    "b": 1\n  }\n]'


def test_map_display_keeps_unsupported_entries_as_text() -> None:
    assert '"missing": "None"' in str(Map({"missing": None}))


# ─────────────────────────────────────────────────────────────────────────────
# from_python
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    ("obj", "expected"),
    [
        (True, Boolean(True)),
        (5, Integer(5)),
        (1.5, Number(1.5)),
        ("x", Text("x")),
        (b"\x01", Binary(b"\x01")),
        ({"a": 1}, Map({"a": 1})),
        ([1, "a"], List([1, "a"])),
        ([{"a": 1}, {"b": 2}], MapList([{"a": 1}, {"b": 2}])),
        ([], List()),
    ],
)
def test_from_python(obj: object, expected: Value) -> None:
    assert from_python(obj) == expected


def test_from_python_passes_values_through_and_rejects_unknown() -> None:
    value = Text("same")
    assert from_python(value) is value
    with pytest.raises(TypeError):
        from_python(object())
