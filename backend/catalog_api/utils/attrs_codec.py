"""Encode/decode product attribute bags to and from JSON bytes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

BYTE_TYPES = (bytes, bytearray, memoryview)


class AttrsCodecError(ValueError):
    """Raised when an attribute bag cannot be encoded or decoded."""


def coerce_attr_value(value: Any) -> str:
    """Return the string form of an attribute value.

    Strings pass through untouched; anything else becomes its compact JSON
    text, e.g. ``3`` -> ``"3"`` and ``True`` -> ``"true"``.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def encode_attrs(attrs: Mapping[str, Any] | None) -> bytes:
    """Serialize attributes to a UTF-8 JSON object. Empty maps encode as ``{}``."""
    if attrs is None:
        attrs = {}
    try:
        payload = {key: coerce_attr_value(value) for key, value in attrs.items()}
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (AttributeError, TypeError, ValueError) as e:
        raise AttrsCodecError(f"Cannot encode attributes: {e}") from e


def decode_attrs(data: Any) -> dict[str, str]:
    """Parse JSON object bytes back into a string-to-string mapping."""
    if not isinstance(data, BYTE_TYPES):
        raise AttrsCodecError(
            f"Cannot decode attributes from {type(data).__name__}, expected bytes"
        )
    try:
        decoded = json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise AttrsCodecError(f"Malformed attribute JSON: {e}") from e

    if not isinstance(decoded, dict):
        raise AttrsCodecError(
            f"Attribute JSON must be an object, got {type(decoded).__name__}"
        )
    return {key: coerce_attr_value(value) for key, value in decoded.items()}
