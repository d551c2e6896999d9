"""
Tests for the value codec.
"""

import pytest
from dataclasses import dataclass
from datetime import date, datetime, timezone

from corvus import encode, decode, InvalidValueError
from corvus.values import to_millis, from_millis, encode_inputs


@dataclass
class Point:
    x: float
    y: float


# --- Encoding ---

class TestEncode:
    """Test native -> wire classification."""

    def test_number(self):
        assert encode(42) == {"Prim": {"Number": 42}}
        assert encode(1.5) == {"Prim": {"Number": 1.5}}

    def test_bool_is_not_a_number(self):
        """bool is an int subclass but must encode as Boolean."""
        assert encode(True) == {"Prim": {"Boolean": True}}
        assert encode(False) == {"Prim": {"Boolean": False}}

    def test_string(self):
        assert encode("hi") == {"Prim": {"String": "hi"}}

    def test_datetime(self):
        moment = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        assert encode(moment) == {"Prim": {"Time": 1704164645678}}

    def test_naive_datetime_is_utc(self):
        assert encode(datetime(1970, 1, 1, 0, 0, 1)) == {"Prim": {"Time": 1000}}

    def test_date_is_midnight_utc(self):
        assert encode(date(1970, 1, 2)) == {"Prim": {"Time": 86400000}}

    def test_negative_time(self):
        moment = datetime(1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert encode(moment) == {"Prim": {"Time": -1000}}

    def test_list(self):
        assert encode([1, "a"]) == {"List": [
            {"Prim": {"Number": 1}},
            {"Prim": {"String": "a"}},
        ]}
        assert encode((True,)) == {"List": [{"Prim": {"Boolean": True}}]}

    def test_record_preserves_key_order(self):
        encoded = encode({"b": 1, "a": [2]})
        assert list(encoded["Record"]) == ["b", "a"]
        assert encoded["Record"]["a"] == {"List": [{"Prim": {"Number": 2}}]}

    def test_dataclass_is_a_record(self):
        assert encode(Point(1.0, 2.0)) == {"Record": {
            "x": {"Prim": {"Number": 1.0}},
            "y": {"Prim": {"Number": 2.0}},
        }}

    def test_none_is_rejected(self):
        with pytest.raises(InvalidValueError) as exc:
            encode(None)
        assert exc.value.code == "E101"

    def test_nested_none_reports_path(self):
        with pytest.raises(InvalidValueError, match=r"at items\[1\]"):
            encode({"items": [1, None]})

    def test_unrecognised_shape_is_rejected(self):
        with pytest.raises(InvalidValueError):
            encode(object())
        with pytest.raises(InvalidValueError):
            encode({1, 2})
        with pytest.raises(InvalidValueError):
            encode(Point)  # the class, not an instance

    def test_non_string_record_key(self):
        with pytest.raises(InvalidValueError) as exc:
            encode({1: "one"})
        assert exc.value.code == "E102"

    def test_encode_inputs(self):
        assert encode_inputs(None) == {}
        assert encode_inputs({"n": 1}) == {"n": {"Prim": {"Number": 1}}}


# --- Decoding ---

class TestDecode:
    """Test wire -> native conversion."""

    def test_prims(self):
        assert decode({"Prim": {"Number": 3}}) == 3
        assert decode({"Prim": {"String": "s"}}) == "s"
        assert decode({"Prim": {"Boolean": False}}) is False

    def test_time_is_aware_datetime(self):
        result = decode({"Prim": {"Time": 0}})
        assert result == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert result.tzinfo is not None

    def test_nested(self):
        wire = {"Record": {"xs": {"List": [{"Prim": {"Number": 1}}]}}}
        assert decode(wire) == {"xs": [1]}

    def test_malformed(self):
        with pytest.raises(InvalidValueError):
            decode({"Tuple": []})
        with pytest.raises(InvalidValueError):
            decode({"Prim": {"Complex": 1}})
        with pytest.raises(InvalidValueError):
            decode(None)

    def test_malformed_container_bodies(self):
        with pytest.raises(InvalidValueError):
            decode({"Record": [1, 2]})
        with pytest.raises(InvalidValueError):
            decode({"List": {"a": 1}})
        with pytest.raises(InvalidValueError):
            decode({"List": "abc"})

    def test_block_requires_owner(self):
        with pytest.raises(ValueError):
            decode(None, block=7)


class TestRoundTrip:
    """decode(encode(v)) is structurally equal to v."""

    @pytest.mark.parametrize("value", [
        0,
        -2.5,
        "",
        "text",
        True,
        [],
        [1, [2, [3]]],
        {},
        {"name": "x", "tags": ["a", "b"], "nested": {"ok": False}},
        datetime(2020, 2, 29, 12, 0, 0, 123000, tzinfo=timezone.utc),
    ])
    def test_round_trip(self, value):
        assert decode(encode(value)) == value

    def test_record_round_trip_ignores_key_order(self):
        assert decode(encode({"a": 1, "b": 2})) == {"b": 2, "a": 1}

    def test_sub_millisecond_precision_truncated(self):
        moment = datetime(2020, 1, 1, 0, 0, 0, 999, tzinfo=timezone.utc)
        assert decode(encode(moment)) == datetime(2020, 1, 1, tzinfo=timezone.utc)

    def test_naive_values_come_back_as_utc(self):
        # Naive inputs keep their wall-clock reading but gain a UTC tzinfo.
        naive = datetime(2020, 1, 1, 12, 0)
        result = decode(encode(naive))
        assert result != naive
        assert result == naive.replace(tzinfo=timezone.utc)
        assert result.tzinfo is timezone.utc
        assert decode(encode(date(2020, 1, 1))) == datetime(2020, 1, 1, tzinfo=timezone.utc)

    def test_millis_helpers(self):
        assert from_millis(to_millis(date(2000, 1, 1))) == datetime(2000, 1, 1, tzinfo=timezone.utc)
