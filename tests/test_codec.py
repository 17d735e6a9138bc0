"""
Tests for the payload codec.
"""

from __future__ import annotations

import math

import pytest
from pydantic import BaseModel

from fcache.cache.codec import decode, encode
from fcache.exceptions import CacheDecodeError, CacheEncodeError


class Point(BaseModel):
    x: int
    y: int


class TestEncode:
    """Test serialization."""

    def test_nested_structures(self) -> None:
        """Test that nested mappings and sequences survive a round trip."""
        value = {"routes": [{"name": "default", "defaults": {"action": "index"}}], "n": 3}
        assert decode(encode(value)) == value

    def test_tuples_become_lists(self) -> None:
        """Test that tuples are stored as sequences."""
        assert decode(encode((1, 2))) == [1, 2]

    def test_pydantic_models_are_dumped(self) -> None:
        """Test that models are stored as their field mapping."""
        assert decode(encode({"p": Point(x=1, y=2)})) == {"p": {"x": 1, "y": 2}}

    @pytest.mark.parametrize("number", [2**70, -(2**70), 2**63, -(2**63) - 1])
    def test_wide_integers_round_trip(self, number: int) -> None:
        """Test that integers beyond 64 bits are stored losslessly."""
        assert decode(encode(number)) == number
        assert decode(encode({"n": [number, 1]})) == {"n": [number, 1]}

    def test_int64_bounds_stay_plain(self) -> None:
        """Test that integers orjson supports are not tagged."""
        assert encode(2**63 - 1) == b"9223372036854775807"
        assert encode(-(2**63)) == b"-9223372036854775808"

    def test_non_finite_floats_round_trip(self) -> None:
        """Test that NaN and infinities are not turned into null."""
        restored = decode(encode({"nan": math.nan, "inf": math.inf, "ninf": -math.inf}))

        assert math.isnan(restored["nan"])
        assert restored["inf"] == math.inf
        assert restored["ninf"] == -math.inf

    def test_bare_nan_round_trips(self) -> None:
        assert math.isnan(decode(encode(math.nan)))

    def test_wide_integer_inside_model(self) -> None:
        """Test that model fields get the same treatment as plain values."""
        assert decode(encode(Point(x=2**70, y=-1))) == {"x": 2**70, "y": -1}

    def test_callable_is_rejected(self) -> None:
        """Test that functions cannot be cached."""
        with pytest.raises(CacheEncodeError) as exc_info:
            encode([1, print])

        assert exc_info.value.context["type"] == "list"

    def test_non_string_keys_are_rejected(self) -> None:
        """Test that mapping keys must be strings."""
        with pytest.raises(CacheEncodeError):
            encode({1: "one"})

    def test_sets_are_rejected(self) -> None:
        """Test that unordered collections are not silently converted."""
        with pytest.raises(CacheEncodeError):
            encode({"tags": {"a", "b"}})


class TestDecode:
    """Test deserialization."""

    def test_garbage_raises_decode_error(self) -> None:
        """Test that invalid bytes raise CacheDecodeError."""
        with pytest.raises(CacheDecodeError) as exc_info:
            decode(b"\x00garbage")

        assert exc_info.value.context["size"] == 8

    def test_empty_payload_raises_decode_error(self) -> None:
        """Test that an empty file is not a valid payload."""
        with pytest.raises(CacheDecodeError):
            decode(b"")

    def test_malformed_tag_raises_decode_error(self) -> None:
        """Test that a tagged integer that is not a number counts as corrupt."""
        with pytest.raises(CacheDecodeError):
            decode(b'{"__fcache_int__": "twelve"}')
