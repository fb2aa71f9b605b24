import math
from decimal import Decimal

import pytest
from common.normalize import is_negative_number, parse_opaque_json, to_non_negative_int


@pytest.mark.parametrize(
    "value,expected",
    [
        (3, 3),
        (-4, 0),
        (2.9, 2),
        ("7", 7),
        (" 12.5 ", 12),
        (Decimal("19.99"), 19),
        ("-1", 0),
    ],
)
def test_to_non_negative_int_coerces_numbers(value, expected):
    assert to_non_negative_int(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", math.inf, math.nan, [], {}, True])
def test_to_non_negative_int_uses_fallback_for_garbage(value):
    assert to_non_negative_int(value, fallback=5) == 5


def test_is_negative_number():
    assert is_negative_number(-1)
    assert is_negative_number("-0.5")
    assert not is_negative_number(0)
    assert not is_negative_number("abc")
    assert not is_negative_number(None)


def test_parse_opaque_json_accepts_objects_only():
    assert parse_opaque_json('{"id": "p1", "price": 100}') == {"id": "p1", "price": 100}
    assert parse_opaque_json(b'{"id": "p1"}') == {"id": "p1"}
    assert parse_opaque_json({"id": "p1"}) == {"id": "p1"}
    assert parse_opaque_json("[1, 2]") is None
    assert parse_opaque_json("not json") is None
    assert parse_opaque_json(None) is None
    assert parse_opaque_json(42) is None


def test_parse_opaque_json_returns_copy_of_mapping():
    source = {"id": "p1"}
    parsed = parse_opaque_json(source)
    parsed["id"] = "changed"
    assert source["id"] == "p1"
