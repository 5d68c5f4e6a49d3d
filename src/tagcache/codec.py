"""Versioned value codec for serialized cache records.

A record is a fixed header naming the format version followed by the
UTF-8 JSON encoding of the value. Raw-mode entries never pass through here.
"""

import json
from typing import Any

from tagcache.exceptions import CodecError

HEADER = b"TCv1\n"


def encode(value: Any) -> bytes:
    """Encode a value into a record."""
    try:
        body = json.dumps(value, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise CodecError(f"Cannot encode value of type {type(value).__name__}: {e}") from e
    return HEADER + body.encode("utf-8")


def decode(data: bytes) -> Any:
    """Decode a record produced by :func:`encode`."""
    if not data.startswith(HEADER):
        raise CodecError("Unknown record header")
    try:
        return json.loads(data[len(HEADER) :].decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise CodecError(f"Corrupt record: {e}") from e


def to_raw(value: Any) -> bytes:
    """Coerce a computed value to the bytes stored in raw mode."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    return str(value).encode("utf-8")
