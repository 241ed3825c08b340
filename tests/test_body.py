"""Tests for magic_decoder.binding.body — JSON body binding."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from magic_decoder.binding.body import bind_json, decode_json
from magic_decoder.binding.fields import UInt, tag
from magic_decoder.errors import BodyError, DestinationError


@dataclass
class Nested:
    label: str = ""


@dataclass
class Payload:
    name: str = tag("", json="name")
    money: float = tag(0.0, json="money")
    count: int = 0
    size: UInt = UInt(0)
    active: bool = False
    when: datetime | None = None
    ids: list[int] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    extra: Any = None
    nested: Nested = field(default_factory=Nested)
    secret: str = tag("hidden", json="-")


class TestDecodeJSON:
    def test_object(self) -> None:
        assert decode_json(b'{"name": "foo"}') == {"name": "foo"}

    def test_empty_bytes(self) -> None:
        with pytest.raises(BodyError):
            decode_json(b"")

    def test_malformed(self) -> None:
        with pytest.raises(BodyError) as exc_info:
            decode_json(b"{nope")
        assert "malformed JSON body" in str(exc_info.value)

    def test_not_utf8(self) -> None:
        with pytest.raises(BodyError):
            decode_json(b'{"name": "\x80"}')

    def test_integer_past_digit_limit(self) -> None:
        with pytest.raises(BodyError):
            decode_json(b'{"count": 1' + b"0" * 5000 + b"}")

    def test_deep_nesting(self) -> None:
        with pytest.raises(BodyError):
            decode_json(b"[" * 1_000_000)


class TestBindJSON:
    def test_tagged_and_untagged_keys(self) -> None:
        p = Payload()
        bind_json({"name": "foo", "money": 12.34, "count": 3}, p)
        assert p.name == "foo"
        assert p.money == 12.34
        assert p.count == 3

    def test_case_insensitive_key(self) -> None:
        p = Payload()
        bind_json({"NAME": "foo", "Count": 2}, p)
        assert p.name == "foo"
        assert p.count == 2

    def test_exact_key_preferred(self) -> None:
        p = Payload()
        bind_json({"Name": "folded", "name": "exact"}, p)
        assert p.name == "exact"

    def test_numeric_string_into_float(self) -> None:
        p = Payload()
        bind_json({"money": "12.34"}, p)
        assert p.money == 12.34

    def test_int_into_float(self) -> None:
        p = Payload()
        bind_json({"money": 12}, p)
        assert p.money == 12.0
        assert isinstance(p.money, float)

    def test_integral_float_into_int(self) -> None:
        p = Payload()
        bind_json({"count": 4.0}, p)
        assert p.count == 4
        assert isinstance(p.count, int)

    def test_fractional_float_into_int_raises(self) -> None:
        with pytest.raises(BodyError) as exc_info:
            bind_json({"count": 4.5}, Payload())
        assert "'count'" in str(exc_info.value)

    def test_bool_into_int_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"count": True}, Payload())

    def test_negative_into_uint_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"size": -1}, Payload())

    def test_string_into_bool_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"active": "true"}, Payload())

    def test_bool(self) -> None:
        p = Payload()
        bind_json({"active": True}, p)
        assert p.active is True

    def test_timestamp(self) -> None:
        p = Payload()
        bind_json({"when": "2023-05-01T10:20:30+02:00"}, p)
        assert p.when == datetime(2023, 5, 1, 8, 20, 30, tzinfo=timezone.utc)
        assert p.when.utcoffset() == timedelta(hours=2)

    def test_naive_timestamp_gets_local_zone(self) -> None:
        p = Payload()
        bind_json({"when": "2023-05-01T10:20:30"}, p)
        assert p.when is not None
        assert p.when.tzinfo is not None

    def test_bad_timestamp_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"when": "yesterday"}, Payload())

    def test_lists(self) -> None:
        p = Payload()
        bind_json({"ids": [1, 2], "tags": ["a", "b"]}, p)
        assert p.ids == [1, 2]
        assert p.tags == ["a", "b"]

    def test_list_element_mismatch_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"ids": [1, "2"]}, Payload())

    def test_any_field_takes_value_verbatim(self) -> None:
        p = Payload()
        bind_json({"extra": {"any": [1, 2]}}, p)
        assert p.extra == {"any": [1, 2]}

    def test_numeric_string_is_strict(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"count": " 1_0 "}, Payload())

    def test_numeric_string_into_int(self) -> None:
        p = Payload()
        bind_json({"count": "-42", "size": "+7"}, p)
        assert p.count == -42
        assert p.size == 7

    def test_int_out_of_64_bits_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"count": 2**63}, Payload())
        with pytest.raises(BodyError):
            bind_json({"size": 2**64}, Payload())

    def test_int_list_out_of_64_bits_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"ids": [1, 2**63]}, Payload())

    def test_huge_number_into_float_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"money": 10**400}, Payload())

    def test_huge_literal_through_decode(self) -> None:
        document = decode_json(b'{"money": 1' + b"0" * 400 + b"}")
        with pytest.raises(BodyError):
            bind_json(document, Payload())

    def test_overflowing_numeric_string_into_float_raises(self) -> None:
        with pytest.raises(BodyError):
            bind_json({"money": "1e400"}, Payload())

    def test_null_leaves_field(self) -> None:
        p = Payload(name="kept")
        bind_json({"name": None}, p)
        assert p.name == "kept"

    def test_skip_tag(self) -> None:
        p = Payload()
        bind_json({"secret": "x", "-": "y"}, p)
        assert p.secret == "hidden"

    def test_nested_not_traversed(self) -> None:
        p = Payload()
        bind_json({"nested": {"label": "x"}}, p)
        assert p.nested == Nested()

    def test_unknown_keys_ignored(self) -> None:
        p = Payload()
        bind_json({"unknown": 1}, p)
        assert p == Payload()

    def test_custom_namespace(self) -> None:
        @dataclass
        class Renamed:
            name: str = tag("", body="full_name")

        r = Renamed()
        bind_json({"full_name": "Bob", "name": "ignored"}, r, namespace="body")
        assert r.name == "Bob"

    @pytest.mark.parametrize("document", [[1, 2], "text", 3, None])
    def test_non_object_raises(self, document: Any) -> None:
        with pytest.raises(BodyError):
            bind_json(document, Payload())

    def test_invalid_destination(self) -> None:
        with pytest.raises(DestinationError):
            bind_json({}, None)
