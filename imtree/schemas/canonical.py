"""
Canonical leaf value encoding.

Every leaf value must have one deterministic byte encoding before it is
hashed. The default encoder takes raw bytes verbatim and text as UTF-8 and
rejects everything else, so that no two leaf values of different types share
an encoding. Structured values use the opt-in JSON encoder, which encodes
every value (text included) as strict canonical JSON (sorted keys, no
whitespace, None kept, string keys only).

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Format a datetime as ISO-8601 with Z suffix for UTC.

    Returns:
        ISO-8601 formatted string (e.g., "2026-01-27T21:35:00Z").
    """
    utc_dt = ensure_utc(dt)
    if utc_dt.microsecond == 0:
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _validate_float(value: float, path: str = "") -> None:
    if not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )


def canonicalize_value(value: Any, path: str = "", strict: bool = False) -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.
        strict: Keep None-valued dict entries and reject non-string dict
            keys, so distinct values never collapse to one form.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized
            (NaN/Infinity floats, unsupported types, non-string keys in
            strict mode).
    """
    if value is None:
        return None

    # bool before int: bool is a subclass of int
    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        _validate_float(value, path)
        return value

    if isinstance(value, str):
        return value

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return canonicalize_value(value.value, path, strict)

    if isinstance(value, BaseModel):
        dumped = value.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=not strict,
        )
        return canonicalize_value(dumped, path, strict)

    if isinstance(value, dict):
        if strict:
            for k in value:
                if not isinstance(k, str):
                    raise CanonicalizationException(
                        message=f"Dict keys must be strings, got {type(k).__name__}",
                        details={"path": path, "key": repr(k)},
                    )
        return {
            str(k): canonicalize_value(v, f"{path}.{k}" if path else str(k), strict)
            for k, v in value.items()
            if strict or v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]", strict)
            for i, item in enumerate(value)
        ]

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any, strict: bool = False) -> str:
    """
    Serialize an object to a canonical JSON string.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    canonicalized = canonicalize_value(obj, strict=strict)
    try:
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def encode_value(value: Any) -> bytes:
    """
    Produce the byte encoding of a leaf value.

    Rules:
        - bytes / bytearray / memoryview: used verbatim
        - str: UTF-8 (a string and its UTF-8 bytes are the same leaf)
        - anything else: rejected; inject encode_json_value or a custom
          encoder for structured leaves

    Raises:
        CanonicalizationException: If the value is not text or bytes.

    Example:
        >>> encode_value("foo")
        b'foo'
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    raise CanonicalizationException(
        message=(
            f"Default leaf encoding accepts only str or bytes, got "
            f"{type(value).__name__}; use encode_json_value for structured values"
        ),
        details={"type": type(value).__name__},
    )


def encode_json_value(value: Any) -> bytes:
    """
    Encode any JSON-representable leaf value as strict canonical JSON.

    Every value goes through JSON, so ``1``, ``"1"``, ``True`` and ``None``
    all encode differently, and ``{"a": None}`` differs from ``{}``.

    Example:
        >>> encode_json_value({"b": 2, "a": None})
        b'{"a":null,"b":2}'
        >>> encode_json_value("1")
        b'"1"'
    """
    return dumps_canonical(value, strict=True).encode("utf-8")
