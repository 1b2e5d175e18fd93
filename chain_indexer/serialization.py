"""
serialization.py - Canonical JSON encoding of event payloads (RFC 8785 / JCS).

Records are written once and served verbatim, so the encoding must be
deterministic: the same log always produces the same bytes.

Rules:
1. Strings: UTF-8, NFC.
2. Numbers: integers as-is; floats shortest round-trip, no NaN/Infinity,
   no "+" in exponents, negative zero as "-0".
3. Objects: keys sorted by UTF-16 code units. Keys must be strings.
4. Arrays: order preserved. Tuples are arrays.
5. Byte strings (HexBytes from node clients): "0x" + lowercase hex.
"""

import json
import math
import struct
import unicodedata
from collections.abc import Mapping
from typing import Any

from chain_indexer.errors import SerializationError


def _float_to_string(f: float) -> str:
    if math.isnan(f) or math.isinf(f):
        raise SerializationError("NaN and Infinity are not permitted in JSON")

    if f == 0.0:
        if struct.pack(">d", f)[0] & 0x80:
            return "-0"
        return "0"

    if f.is_integer() and abs(f) < 1e21:
        return str(int(f))

    s = json.dumps(f, allow_nan=False)
    if "e+" in s:
        s = s.replace("e+", "e")
    return s


def _string_to_bytes(s: str) -> bytes:
    normalized = unicodedata.normalize("NFC", s)
    return json.dumps(normalized, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _utf16_sort_key(s: str) -> bytes:
    return s.encode("utf-16-be")


def canonicalize(data: Any) -> bytes:
    """
    Return the canonical JSON bytes of ``data``.

    Raises:
        SerializationError: If ``data`` (or anything nested in it) has no
            JSON representation.
    """
    if data is None:
        return b"null"

    # bool before int: bool is an int subclass
    if isinstance(data, bool):
        return b"true" if data else b"false"

    if isinstance(data, int):
        return str(data).encode("utf-8")

    if isinstance(data, float):
        return _float_to_string(data).encode("utf-8")

    if isinstance(data, str):
        return _string_to_bytes(data)

    if isinstance(data, (bytes, bytearray, memoryview)):
        return _string_to_bytes("0x" + bytes(data).hex())

    if isinstance(data, (list, tuple)):
        return b"[" + b",".join(canonicalize(item) for item in data) + b"]"

    if isinstance(data, Mapping):
        for key in data.keys():
            if not isinstance(key, str):
                raise SerializationError(
                    "Object keys must be strings",
                    details={"key_type": type(key).__name__},
                )
        parts = []
        for key in sorted(data.keys(), key=_utf16_sort_key):
            parts.append(_string_to_bytes(key) + b":" + canonicalize(data[key]))
        return b"{" + b",".join(parts) + b"}"

    raise SerializationError(
        f"Type {type(data).__name__} is not JSON serializable",
        details={"type": type(data).__name__},
    )


def serialize_payload(payload: Any) -> str:
    """Encode a decoded log notification as the text stored for its record."""
    try:
        return canonicalize(payload).decode("utf-8")
    except RecursionError as e:
        raise SerializationError("Payload is nested too deeply") from e
