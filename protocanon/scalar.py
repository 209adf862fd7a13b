"""Canonical JSON encoding of protobuf scalar field types."""

from __future__ import annotations

import base64
import binascii
import math
from enum import Enum
from typing import Any, Callable

from .errors import CanonicalError
from .number import (
    I32_MAX,
    I32_MIN,
    I64_MAX,
    I64_MIN,
    U32_MAX,
    U64_MAX,
    f32_from_f64,
    f32_from_int,
    f64_from_int,
    format_float32,
    format_float64,
    i32_from_f64,
    i32_from_str,
    i64_from_f64,
    i64_from_str,
    parse_float,
    u32_from_f64,
    u32_from_str,
    u64_from_f64,
    u64_from_str,
)


class ScalarKind(Enum):
    """Protobuf scalar types and their canonical JSON representation."""

    BOOL = "bool"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BYTES = "bytes"
    SINT32 = "int32"
    SFIXED32 = "int32"
    FIXED32 = "uint32"
    SINT64 = "int64"
    SFIXED64 = "int64"
    FIXED64 = "uint64"

    def encode(self, value: Any) -> Any:
        """Return the canonical JSON value for a Python value of this kind."""
        return _ENCODERS[self](value)

    def decode(self, data: Any) -> Any:
        """Return the Python value for a parsed JSON value of this kind."""
        return _DECODERS[self](data)


def _describe(data: Any) -> str:
    if data is None:
        return "null"
    if isinstance(data, bool):
        return f"boolean `{'true' if data else 'false'}`"
    if isinstance(data, int):
        return f"integer `{data}`"
    if isinstance(data, float):
        return f"floating point `{data}`"
    if isinstance(data, str):
        return f'string "{data}"'
    if isinstance(data, (list, tuple)):
        return "sequence"
    if isinstance(data, dict):
        return "map"
    return type(data).__name__


def _type_error(data: Any, expecting: str) -> CanonicalError:
    return CanonicalError(f"invalid type: {_describe(data)}, expected {expecting}")


def _is_int(data: Any) -> bool:
    return isinstance(data, int) and not isinstance(data, bool)


def _checked_int(value: Any, low: int, high: int, name: str) -> int:
    if not _is_int(value):
        raise _type_error(value, f"an integer for {name}")
    if not low <= value <= high:
        raise CanonicalError(f"{name} out of range")
    return int(value)


def _encode_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise _type_error(value, "a boolean")
    return value


def _encode_str(value: Any) -> str:
    if not isinstance(value, str):
        raise _type_error(value, "a string")
    return value


def _encode_bytes(value: Any) -> str:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise _type_error(value, "bytes")
    return base64.b64encode(bytes(value)).decode("ascii")


def _encode_float(value: Any, formatter: Callable[[float], str]) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _type_error(value, "a number")
    return formatter(float(value))


def _decode_bool(data: Any) -> bool:
    if not isinstance(data, bool):
        raise _type_error(data, "a boolean")
    return data


def _decode_str(data: Any) -> str:
    if not isinstance(data, str):
        raise _type_error(data, "a string")
    return data


def _decode_int32(data: Any) -> int:
    if _is_int(data):
        if not I32_MIN <= data <= I32_MAX:
            raise CanonicalError("i32 out of range")
        return data
    if isinstance(data, float):
        return i32_from_f64(data)
    if isinstance(data, str):
        return i32_from_str(data)
    raise _type_error(data, "i32 or string")


def _decode_uint32(data: Any) -> int:
    if _is_int(data):
        if not 0 <= data <= U32_MAX:
            raise CanonicalError("u32 out of range")
        return data
    if isinstance(data, float):
        return u32_from_f64(data)
    if isinstance(data, str):
        return u32_from_str(data)
    raise _type_error(data, "u32 or string")


def _decode_int64(data: Any) -> int:
    if _is_int(data):
        if not I64_MIN <= data <= I64_MAX:
            raise CanonicalError("i64 out of range")
        return data
    if isinstance(data, float):
        return i64_from_f64(data)
    if isinstance(data, str):
        return i64_from_str(data)
    raise _type_error(data, "i64 or string")


def _decode_uint64(data: Any) -> int:
    if _is_int(data):
        if not 0 <= data <= U64_MAX:
            raise CanonicalError("u64 out of range")
        return data
    if isinstance(data, float):
        return u64_from_f64(data)
    if isinstance(data, str):
        return u64_from_str(data)
    raise _type_error(data, "u64 or string")


def _decode_float(data: Any) -> float:
    if _is_int(data):
        return f32_from_int(data)
    if isinstance(data, float):
        if not math.isfinite(data):
            raise CanonicalError("float must be finite")
        return f32_from_f64(data)
    if isinstance(data, str):
        return f32_from_f64(parse_float(data))
    raise _type_error(data, "f32 or string")


def _decode_double(data: Any) -> float:
    if _is_int(data):
        return f64_from_int(data)
    if isinstance(data, float):
        if not math.isfinite(data):
            raise CanonicalError("float must be finite")
        return data
    if isinstance(data, str):
        return parse_float(data)
    raise _type_error(data, "f64 or string")


def _decode_bytes(data: Any) -> bytes:
    if not isinstance(data, str):
        raise _type_error(data, "a string")
    try:
        raw = data.encode("ascii")
        decoded = base64.b64decode(raw, validate=True)
    except (UnicodeEncodeError, binascii.Error, ValueError):
        raise CanonicalError("invalid base64") from None
    # Standard base64 with padding has exactly one spelling per byte string.
    if base64.b64encode(decoded) != raw:
        raise CanonicalError("invalid base64")
    return decoded


_ENCODERS: dict[ScalarKind, Callable[[Any], Any]] = {
    ScalarKind.BOOL: _encode_bool,
    ScalarKind.INT32: lambda value: _checked_int(value, I32_MIN, I32_MAX, "i32"),
    ScalarKind.UINT32: lambda value: _checked_int(value, 0, U32_MAX, "u32"),
    ScalarKind.INT64: lambda value: str(_checked_int(value, I64_MIN, I64_MAX, "i64")),
    ScalarKind.UINT64: lambda value: str(_checked_int(value, 0, U64_MAX, "u64")),
    ScalarKind.FLOAT: lambda value: _encode_float(value, format_float32),
    ScalarKind.DOUBLE: lambda value: _encode_float(value, format_float64),
    ScalarKind.STRING: _encode_str,
    ScalarKind.BYTES: _encode_bytes,
}

_DECODERS: dict[ScalarKind, Callable[[Any], Any]] = {
    ScalarKind.BOOL: _decode_bool,
    ScalarKind.INT32: _decode_int32,
    ScalarKind.UINT32: _decode_uint32,
    ScalarKind.INT64: _decode_int64,
    ScalarKind.UINT64: _decode_uint64,
    ScalarKind.FLOAT: _decode_float,
    ScalarKind.DOUBLE: _decode_double,
    ScalarKind.STRING: _decode_str,
    ScalarKind.BYTES: _decode_bytes,
}