import math

import pytest

from protocanon.errors import CanonicalError
from protocanon.number import (
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


@pytest.mark.parametrize(
    "value, expected",
    [(math.nan, "NaN"), (math.inf, "Infinity"), (-math.inf, "-Infinity")],
)
def test_non_finite_names(value, expected):
    assert format_float64(value) == expected
    assert format_float32(value) == expected


def test_format_float64_has_no_exponent():
    assert format_float64(1e20) == "100000000000000000000"


def test_format_float64_drops_trailing_zero():
    assert format_float64(1.0) == "1"


@pytest.mark.parametrize("value", [12.5, -3.25, 0.1, 1e-7, 5e-324, 1.7976931348623157e308, 123456.789])
def test_format_float64_round_trips(value):
    text = format_float64(value)
    assert "e" not in text.lower()
    assert parse_float(text) == value


def test_parse_float_specials():
    assert math.isnan(parse_float("NaN"))
    assert parse_float("Infinity") == math.inf
    assert parse_float("-Infinity") == -math.inf


@pytest.mark.parametrize("text", ["inf", "-infinity", "nan", "1e400"])
def test_parse_float_rejects_non_finite_spellings(text):
    with pytest.raises(CanonicalError, match="float out of range"):
        parse_float(text)


@pytest.mark.parametrize("text", [" 1", "1_0", "", ".", "1e", "abc"])
def test_parse_float_rejects_malformed(text):
    with pytest.raises(CanonicalError, match="invalid f64 string"):
        parse_float(text)


def test_i32_from_str_accepts_integral_floats_and_bounds():
    assert i32_from_str("-2147483648") == -(2**31)
    assert i32_from_str("2.0") == 2


def test_i32_from_str_errors():
    with pytest.raises(CanonicalError, match="i32 out of range"):
        i32_from_str("2147483648")
    with pytest.raises(CanonicalError, match="invalid i32 string"):
        i32_from_str("1.5")
    with pytest.raises(CanonicalError, match="invalid i32 string"):
        i32_from_str("abc")
    with pytest.raises(CanonicalError, match="invalid i32 string"):
        i32_from_str("NaN")


def test_unsigned_strings():
    assert u32_from_str("+7") == 7
    assert u64_from_str(str(2**64 - 1)) == 2**64 - 1
    with pytest.raises(CanonicalError, match="invalid u32 string"):
        u32_from_str("-1")
    with pytest.raises(CanonicalError, match="invalid u32 string"):
        u32_from_str(str(2**32))
    with pytest.raises(CanonicalError, match="invalid u64 string"):
        u64_from_str("1.0")


def test_i64_strings():
    assert i64_from_str("-9223372036854775808") == -(2**63)
    with pytest.raises(CanonicalError, match="invalid i64 string"):
        i64_from_str("9223372036854775808")
    with pytest.raises(CanonicalError, match="invalid i64 string"):
        i64_from_str("1e3")


def test_f64_from_int_bounds():
    assert f64_from_int(-9_007_199_254_740_992) == -9_007_199_254_740_992
    assert f64_from_int(18_014_398_509_481_984) == 18_014_398_509_481_984
    with pytest.raises(CanonicalError, match="integer out of range for f64"):
        f64_from_int(-9_007_199_254_740_993)
    with pytest.raises(CanonicalError, match="integer out of range for f64"):
        f64_from_int(18_014_398_509_481_985)


def test_f32_from_int_bounds():
    assert f32_from_int(16_777_216) == 16_777_216
    assert f32_from_int(-16_777_216) == -16_777_216
    with pytest.raises(CanonicalError, match="integer out of range for f32"):
        f32_from_int(16_777_217)
    with pytest.raises(CanonicalError, match="integer out of range for f32"):
        f32_from_int(-16_777_217)


def test_i32_and_u32_from_f64():
    assert i32_from_f64(-2147483648.0) == -(2**31)
    assert u32_from_f64(4294967295.0) == 2**32 - 1
    with pytest.raises(CanonicalError, match="invalid i32"):
        i32_from_f64(0.5)
    with pytest.raises(CanonicalError, match="i32 out of range"):
        i32_from_f64(2147483648.0)
    with pytest.raises(CanonicalError, match="u32 out of range"):
        u32_from_f64(-1.0)
    with pytest.raises(CanonicalError, match="invalid u32"):
        u32_from_f64(math.nan)


def test_i64_and_u64_from_f64():
    assert i64_from_f64(9_007_199_254_740_992.0) == 9_007_199_254_740_992
    assert u64_from_f64(18_014_398_509_481_984.0) == 18_014_398_509_481_984
    with pytest.raises(CanonicalError, match="i64 out of range"):
        i64_from_f64(18_014_398_509_481_984.0)
    with pytest.raises(CanonicalError, match="invalid i64"):
        i64_from_f64(math.inf)
    with pytest.raises(CanonicalError, match="u64 out of range"):
        u64_from_f64(-1.0)
    with pytest.raises(CanonicalError, match="invalid u64"):
        u64_from_f64(2.5)


def test_f32_from_f64():
    assert f32_from_f64(math.inf) == math.inf
    assert f32_from_f64(-math.inf) == -math.inf
    assert math.isnan(f32_from_f64(math.nan))
    narrowed = f32_from_f64(0.1)
    assert narrowed != 0.1
    assert f32_from_f64(narrowed) == narrowed
    with pytest.raises(CanonicalError, match="float out of range"):
        f32_from_f64(1e39)
    with pytest.raises(CanonicalError, match="float out of range"):
        f32_from_f64(-1e39)