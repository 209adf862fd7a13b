"""Number conversions used by the canonical protobuf JSON mapping."""

from __future__ import annotations

import math
import re
import struct
from decimal import Decimal

from .errors import CanonicalError

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
U32_MAX = 2**32 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1
U64_MAX = 2**64 - 1

# Integer bounds that survive a trip through a JSON double exactly.
MIN_SAFE_I64 = -9_007_199_254_740_992
MAX_SAFE_I64 = 9_007_199_254_740_992
MAX_SAFE_U64 = 18_014_398_509_481_984
# Integer bound that survives a trip through a single-precision float exactly.
MAX_SAFE_F32_INT = 16_777_216

F32_MAX = 3.4028234663852886e38

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_WORD = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


def _non_finite_name(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


def _plain_decimal(text: str) -> str:
    """Render a numeric literal without an exponent and without trailing zeros."""
    rendered = format(Decimal(text), "f")
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _is_integral(value: float) -> bool:
    return math.isfinite(value) and value % 1.0 == 0.0


def format_float64(value: float) -> str:
    """Format a double as its shortest exact decimal, or NaN/Infinity/-Infinity."""
    value = float(value)
    if not math.isfinite(value):
        return _non_finite_name(value)
    return _plain_decimal(repr(value))


def format_float32(value: float) -> str:
    """Format a single-precision float as its shortest exact decimal."""
    value = float(value)
    if not math.isfinite(value):
        return _non_finite_name(value)
    try:
        single = _to_f32(value)
    except OverflowError:
        raise CanonicalError("float out of range") from None
    text = repr(single)
    for precision in range(1, 10):
        candidate = f"{single:.{precision}g}"
        try:
            if _to_f32(float(candidate)) == single:
                text = candidate
                break
        except OverflowError:
            continue
    return _plain_decimal(text)


def parse_float(value: str) -> float:
    """Parse a canonical float string, accepting NaN, Infinity and -Infinity."""
    if value == "NaN":
        return math.nan
    if value == "Infinity":
        return math.inf
    if value == "-Infinity":
        return -math.inf
    if _FLOAT_WORD.fullmatch(value):
        raise CanonicalError("float out of range")
    if not _FLOAT.fullmatch(value):
        raise CanonicalError("invalid f64 string")
    parsed = float(value)
    if not math.isfinite(parsed):
        raise CanonicalError("float out of range")
    return parsed


def i32_from_str(value: str) -> int:
    """Parse an int32 from a decimal string or an integral float string."""
    if _SIGNED.fullmatch(value):
        number = int(value)
        if I32_MIN <= number <= I32_MAX:
            return number
    try:
        parsed = parse_float(value)
    except CanonicalError:
        raise CanonicalError("invalid i32 string") from None
    if not _is_integral(parsed):
        raise CanonicalError("invalid i32 string")
    if parsed < I32_MIN or parsed > I32_MAX:
        raise CanonicalError("i32 out of range")
    return int(parsed)


def _parse_int(value: str, pattern: re.Pattern[str], low: int, high: int, name: str) -> int:
    if pattern.fullmatch(value):
        number = int(value)
        if low <= number <= high:
            return number
    raise CanonicalError(f"invalid {name} string")


def u32_from_str(value: str) -> int:
    """Parse a uint32 from a decimal string."""
    return _parse_int(value, _UNSIGNED, 0, U32_MAX, "u32")


def i64_from_str(value: str) -> int:
    """Parse an int64 from a decimal string."""
    return _parse_int(value, _SIGNED, I64_MIN, I64_MAX, "i64")


def u64_from_str(value: str) -> int:
    """Parse a uint64 from a decimal string."""
    return _parse_int(value, _UNSIGNED, 0, U64_MAX, "u64")


def f64_from_int(value: int) -> float:
    """Convert a JSON integer to a double, refusing values that would lose precision."""
    if not MIN_SAFE_I64 <= value <= MAX_SAFE_U64:
        raise CanonicalError("integer out of range for f64")
    return float(value)


def f32_from_int(value: int) -> float:
    """Convert a JSON integer to a single-precision float exactly."""
    if abs(value) > MAX_SAFE_F32_INT:
        raise CanonicalError("integer out of range for f32")
    return float(value)


def i32_from_f64(value: float) -> int:
    """Convert an integral double to an int32."""
    if not _is_integral(value):
        raise CanonicalError("invalid i32")
    if value < I32_MIN or value > I32_MAX:
        raise CanonicalError("i32 out of range")
    return int(value)


def u32_from_f64(value: float) -> int:
    """Convert an integral double to a uint32."""
    if not _is_integral(value):
        raise CanonicalError("invalid u32")
    if value < 0.0 or value > U32_MAX:
        raise CanonicalError("u32 out of range")
    return int(value)


def i64_from_f64(value: float) -> int:
    """Convert an integral double within the exact-integer range to an int64."""
    if not _is_integral(value):
        raise CanonicalError("invalid i64")
    if not float(MIN_SAFE_I64) <= value <= float(MAX_SAFE_I64):
        raise CanonicalError("i64 out of range")
    return int(value)


def u64_from_f64(value: float) -> int:
    """Convert an integral double within the exact-integer range to a uint64."""
    if not _is_integral(value):
        raise CanonicalError("invalid u64")
    if not 0.0 <= value <= float(MAX_SAFE_U64):
        raise CanonicalError("u64 out of range")
    return int(value)


def f32_from_f64(value: float) -> float:
    """Narrow a double to single precision, rejecting finite values out of range."""
    if math.isnan(value):
        return math.nan
    if math.isinf(value):
        return value
    if value < -F32_MAX or value > F32_MAX:
        raise CanonicalError("float out of range")
    return _to_f32(value)