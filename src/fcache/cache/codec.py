"""
Payload codec for cache entries.

Entries are stored as orjson-encoded JSON. Primitives, lists and
string-keyed mappings round-trip losslessly; tuples come back as lists.
Integers outside the signed 64-bit range and non-finite floats, which JSON
cannot carry, are stored as single-key tagged objects and restored on
decode. pydantic models are stored through model_dump(). Anything else is
rejected at encode time rather than silently stringified.
"""

from __future__ import annotations

import math
from typing import Any

import orjson

from fcache.exceptions import CacheDecodeError, CacheEncodeError

INT_TAG = "__fcache_int__"
FLOAT_TAG = "__fcache_float__"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _tag(value: Any) -> Any:
    """Replace values orjson cannot represent with tagged objects."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
        return {INT_TAG: str(int(value))}
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        return {FLOAT_TAG: repr(float(value))}
    if isinstance(value, dict):
        return {k: _tag(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_tag(v) for v in value]
    return value


def _untag(value: Any) -> Any:
    if isinstance(value, list):
        return [_untag(v) for v in value]
    if isinstance(value, dict):
        if len(value) == 1:
            if INT_TAG in value and isinstance(value[INT_TAG], str):
                return int(value[INT_TAG])
            if FLOAT_TAG in value and isinstance(value[FLOAT_TAG], str):
                return float(value[FLOAT_TAG])
        return {k: _untag(v) for k, v in value.items()}
    return value


def _default(obj: Any) -> Any:
    """Encode objects orjson does not know natively."""
    model_dump = getattr(obj, "model_dump", None)
    if callable(model_dump):
        return _tag(model_dump())
    raise TypeError(f"Type is not cacheable: {type(obj).__name__}")


def encode(value: Any) -> bytes:
    """Serialize a value for storage.

    Raises:
        CacheEncodeError: If the value (or anything nested in it) cannot be
            serialized.
    """
    try:
        return orjson.dumps(_tag(value), default=_default)
    except orjson.JSONEncodeError as e:
        raise CacheEncodeError(
            f"Value could not be serialized: {e}",
            context={"type": type(value).__name__},
        ) from e


def decode(data: bytes) -> Any:
    """Deserialize stored bytes.

    Raises:
        CacheDecodeError: If the bytes are not a valid payload.
    """
    try:
        return _untag(orjson.loads(data))
    except (orjson.JSONDecodeError, ValueError) as e:
        raise CacheDecodeError(
            "Cache payload is corrupt",
            context={"size": len(data)},
        ) from e
