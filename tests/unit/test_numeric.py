"""Tests for numeric helpers."""

import math

import pytest

from input_masking.processors.numeric import (
    check_precision,
    count_decimals,
    is_number,
    parse_decimal,
    parse_float,
    to_fixed,
)


class TestParsing:
    """Test lenient parsing."""

    def test_is_number(self) -> None:
        """Test bools are not numbers."""
        assert is_number(1)
        assert is_number(1.5)
        assert not is_number(True)
        assert not is_number("1")

    def test_parse_float_prefix(self) -> None:
        """Test the leading float of a string is read."""
        assert parse_float("12.5abc") == 12.5
        assert parse_float("-3") == -3
        assert math.isnan(parse_float("abc"))
        assert math.isnan(parse_float(""))

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1,5", 1.5),
            ("1,234.56", 1234.56),
            (" 12 345 ", 12345),
            ("abc", 0),
            ("", 0),
            ("0", 0),
            (None, 0),
            (3, 3),
            (2.5, 2.5),
        ],
    )
    def test_parse_decimal(self, value, expected) -> None:
        """Test decimal parsing with comma handling."""
        assert parse_decimal(value) == expected


class TestCheckPrecision:
    """Test check_precision."""

    def test_rounds_absolute_value(self) -> None:
        """Test numbers are rounded half up on their magnitude."""
        assert check_precision(2.5) == 3
        assert check_precision(-2.4) == 2
        assert check_precision(3) == 3
        assert check_precision(1e300) == int(1e300)

    def test_falls_back_to_base(self) -> None:
        """Test non-numbers give the base."""
        assert check_precision("2", 4) == 4
        assert check_precision(None, 1) == 1
        assert check_precision(math.nan, 1) == 1
        assert check_precision(math.inf, 2) == 2
        assert check_precision(True, 5) == 5


class TestToFixed:
    """Test to_fixed."""

    def test_half_up_without_float_artifacts(self) -> None:
        """Test halves round up even when the float is slightly below."""
        assert to_fixed(1.235, 2) == "1.24"
        assert to_fixed(1.005, 2) == "1.01"
        assert to_fixed(1234.5, 0) == "1235"

    def test_pads_digits(self) -> None:
        """Test integers are padded with zero decimals."""
        assert to_fixed(12, 3) == "12.000"
        assert to_fixed("7", 1) == "7.0"

    def test_long_integer_string(self) -> None:
        """Test long integer strings are padded, never rounded."""
        assert to_fixed("1234567890123456", 2) == "1234567890123456.00"
        assert to_fixed("1234567890123456", 0) == "1234567890123456"

    def test_not_numeric(self) -> None:
        """Test non-numeric input gives NaN."""
        assert to_fixed("abc", 2) == "NaN"
        assert to_fixed(None, 2) == "NaN"

    def test_negative_zero(self) -> None:
        """Test a value rounding to zero has no sign."""
        assert to_fixed(-0.001, 2) == "0.00"

    def test_small_exponent(self) -> None:
        """Test values written with an exponent."""
        assert to_fixed(1e-7, 8) == "0.00000010"

    def test_many_digits(self) -> None:
        """Test large digit counts keep the value instead of overflowing."""
        assert to_fixed(1.5, 400) == "1." + "5" + "0" * 399
        assert to_fixed(-2.25, 40) == "-2.25" + "0" * 38

    def test_invalid_digits(self) -> None:
        """Test invalid digit counts fall back to zero."""
        assert to_fixed(1.6, "x") == "2"


class TestCountDecimals:
    """Test count_decimals."""

    def test_counts(self) -> None:
        """Test fractional digit counts."""
        assert count_decimals(1.25) == 2
        assert count_decimals(10) == 0
        assert count_decimals(1.50) == 1
        assert count_decimals(1e-7) == 7
        assert count_decimals("1.25") == 0
