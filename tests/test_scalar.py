import json
import math

import pytest

from protocanon.errors import CanonicalError
from protocanon.scalar import ScalarKind


def test_bytes_encode_matches_standard_base64():
    assert ScalarKind.BYTES.encode(bytes([0, 1, 2, 255])) == "AAEC/w=="


def test_bytes_decode():
    assert ScalarKind.BYTES.decode("AAEC/w==") == bytes([0, 1, 2, 255])


@pytest.mark.parametrize("text", ["AAE", "AAEC/x==", "AA EC", "A!==", "AAEC_w=="])
def test_bytes_decode_rejects_non_canonical(text):
    with pytest.raises(CanonicalError, match="invalid base64"):
        ScalarKind.BYTES.decode(text)


@pytest.mark.parametrize("payload", [b"", b"a", b"ab", b"abc", bytes(range(256))])
def test_bytes_round_trip(payload):
    assert ScalarKind.BYTES.decode(ScalarKind.BYTES.encode(payload)) == payload


def test_64_bit_integers_are_strings():
    encoded = ScalarKind.UINT64.encode(2**64 - 1)
    assert encoded == "18446744073709551615"
    assert ScalarKind.UINT64.decode(encoded) == 2**64 - 1
    signed = ScalarKind.INT64.encode(9_007_199_254_740_993)
    assert isinstance(signed, str)
    assert ScalarKind.INT64.decode(signed) == 9_007_199_254_740_993


def test_32_bit_integers_are_numbers():
    assert ScalarKind.INT32.encode(123) == 123
    assert ScalarKind.INT32.decode(json.loads("123")) == 123
    assert ScalarKind.UINT32.decode("42") == 42


def test_aliases_share_behaviour():
    assert ScalarKind.SINT64 is ScalarKind.INT64
    assert ScalarKind.FIXED32.decode("7") == ScalarKind.UINT32.decode("7")


def test_int32_decode_accepts_integral_float():
    assert ScalarKind.INT32.decode(7.0) == 7


def test_int32_decode_errors():
    with pytest.raises(CanonicalError, match="invalid i32"):
        ScalarKind.INT32.decode(1.5)
    with pytest.raises(CanonicalError, match="i32 out of range"):
        ScalarKind.INT32.decode(2**31)
    with pytest.raises(CanonicalError, match="expected i32 or string"):
        ScalarKind.INT32.decode(True)
    with pytest.raises(CanonicalError, match="expected i32 or string"):
        ScalarKind.INT32.decode(None)


def test_unsigned_decode_rejects_negative():
    with pytest.raises(CanonicalError, match="u32 out of range"):
        ScalarKind.UINT32.decode(-1)
    with pytest.raises(CanonicalError, match="u64 out of range"):
        ScalarKind.UINT64.decode(-1)


def test_int64_decode_errors():
    with pytest.raises(CanonicalError, match="invalid i64 string"):
        ScalarKind.INT64.decode("1.0")
    with pytest.raises(CanonicalError, match="i64 out of range"):
        ScalarKind.INT64.decode(2**63)
    with pytest.raises(CanonicalError, match="i64 out of range"):
        ScalarKind.INT64.decode(2.0**63)


def test_encode_checks_ranges():
    with pytest.raises(CanonicalError, match="i32 out of range"):
        ScalarKind.INT32.encode(2**31)
    with pytest.raises(CanonicalError, match="u64 out of range"):
        ScalarKind.UINT64.encode(-1)


def test_floats_are_strings():
    assert ScalarKind.FLOAT.encode(12.5) == "12.5"
    assert ScalarKind.DOUBLE.encode(-3.25) == "-3.25"
    assert ScalarKind.DOUBLE.encode(math.nan) == "NaN"
    assert ScalarKind.FLOAT.encode(-math.inf) == "-Infinity"


@pytest.mark.parametrize("value", [0.1, 12.5, 1e-20, 3.0e38, -2.5])
def test_float_round_trip_is_single_precision(value):
    once = ScalarKind.FLOAT.decode(value)
    assert ScalarKind.FLOAT.decode(ScalarKind.FLOAT.encode(value)) == once


@pytest.mark.parametrize("value", [0.1, 12.5, 1e-300, 1.7976931348623157e308, -3.25])
def test_double_round_trip(value):
    assert ScalarKind.DOUBLE.decode(ScalarKind.DOUBLE.encode(value)) == value


def test_double_decode_string_specials():
    assert ScalarKind.DOUBLE.decode("Infinity") == math.inf
    assert math.isnan(ScalarKind.FLOAT.decode("NaN"))


def test_float_decode_rejects_non_finite_numbers():
    with pytest.raises(CanonicalError, match="float must be finite"):
        ScalarKind.DOUBLE.decode(math.nan)
    with pytest.raises(CanonicalError, match="float must be finite"):
        ScalarKind.FLOAT.decode(math.inf)


def test_float_decode_integer_limits():
    assert ScalarKind.DOUBLE.decode(2**54) == 2.0**54
    with pytest.raises(CanonicalError, match="integer out of range for f64"):
        ScalarKind.DOUBLE.decode(2**54 + 1)
    with pytest.raises(CanonicalError, match="integer out of range for f32"):
        ScalarKind.FLOAT.decode(2**24 + 1)


def test_bool_and_string_are_strict():
    assert ScalarKind.BOOL.decode(True) is True
    assert ScalarKind.STRING.decode("hello") == "hello"
    with pytest.raises(CanonicalError, match="expected a boolean"):
        ScalarKind.BOOL.decode(1)
    with pytest.raises(CanonicalError, match="expected a string"):
        ScalarKind.STRING.decode(5)