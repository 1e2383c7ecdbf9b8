"""
Canonical Encoding Unit Tests
Tests for imtree/schemas/canonical.py
"""
from datetime import datetime, timedelta, timezone
from enum import Enum

import pytest
from pydantic import BaseModel

from imtree.schemas.canonical import (
    canonicalize_value,
    dumps_canonical,
    encode_json_value,
    encode_value,
    format_datetime_canonical,
)
from imtree.schemas.errors import CanonicalizationException, ErrorCodes


class Color(Enum):
    RED = "red"


class Payment(BaseModel):
    amount: int
    memo: str | None = None


class TestEncodeValue:
    """Tests for encode_value()."""

    def test_bytes_verbatim(self):
        assert encode_value(b"\x00\x01") == b"\x00\x01"
        assert encode_value(bytearray(b"ab")) == b"ab"
        assert encode_value(memoryview(b"cd")) == b"cd"

    def test_str_is_utf8(self):
        assert encode_value("foo") == b"foo"
        assert encode_value("héllo") == "héllo".encode("utf-8")

    @pytest.mark.parametrize("value", [10, None, True, 1.5, {"a": 1}, [1], object()])
    def test_non_text_values_rejected(self, value):
        with pytest.raises(CanonicalizationException) as exc_info:
            encode_value(value)

        assert exc_info.value.code == ErrorCodes.CANONICALIZATION_ERROR
        assert "encode_json_value" in exc_info.value.message


class TestEncodeJsonValue:
    """Tests for encode_json_value()."""

    def test_scalars_are_json(self):
        assert encode_json_value(10) == b"10"
        assert encode_json_value("1") == b'"1"'
        assert encode_json_value(None) == b"null"
        assert encode_json_value(True) == b"true"

    def test_distinct_types_distinct_bytes(self):
        encodings = {encode_json_value(v) for v in (1, "1", b"1", True, "true", None, "null")}

        assert len(encodings) == 7

    def test_dict_keys_sorted(self):
        assert encode_json_value({"b": 2, "a": 1}) == b'{"a":1,"b":2}'

    def test_none_entries_kept(self):
        assert encode_json_value({"a": None}) != encode_json_value({})
        assert encode_json_value({"b": 2, "a": None}) == b'{"a":null,"b":2}'

    def test_non_string_keys_rejected(self):
        with pytest.raises(CanonicalizationException, match="keys must be strings"):
            encode_json_value({1: "x"})

    def test_pydantic_model_keeps_none(self):
        assert encode_json_value(Payment(amount=5)) == b'{"amount":5,"memo":null}'

    def test_unsupported_type_raises(self):
        with pytest.raises(CanonicalizationException):
            encode_json_value(object())


class TestCanonicalizeValue:
    """Tests for canonicalize_value() and dumps_canonical()."""

    def test_nested_structures(self):
        value = {"list": [1, (2, 3)], "none": None, "bytes": b"\xff"}

        assert canonicalize_value(value) == {"list": [1, [2, 3]], "bytes": "ff"}

    def test_enum_uses_value(self):
        assert dumps_canonical({"c": Color.RED}) == '{"c":"red"}'

    def test_non_finite_float_raises(self):
        with pytest.raises(CanonicalizationException, match="Non-finite"):
            dumps_canonical({"x": float("nan")})

    def test_datetime_formatted_utc(self):
        dt = datetime(2026, 1, 27, 23, 35, tzinfo=timezone(timedelta(hours=2)))

        assert format_datetime_canonical(dt) == "2026-01-27T21:35:00Z"
        assert dumps_canonical([dt]) == '["2026-01-27T21:35:00Z"]'

    def test_naive_datetime_treated_as_utc(self):
        assert format_datetime_canonical(datetime(2026, 1, 1)) == "2026-01-01T00:00:00Z"
