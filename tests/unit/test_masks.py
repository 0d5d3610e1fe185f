"""Tests for mask compilers."""

import re

import phonenumbers
import pytest

from input_masking.core.exceptions import ConfigurationError
from input_masking.core.interfaces import Literal, ObfuscatedPattern, Pattern
from input_masking.core.matcher import match_mask
from input_masking.processors.masks import (
    CREDIT_CARD_MASK,
    apply_phone_mask,
    compile_date_format_mask,
    compile_date_mask,
    compile_number_mask,
    compile_phone_mask,
    format_example_number,
    get_phone_examples,
    load_phone_examples,
    sanitize_phone_number,
    sanitize_phone_value,
    to_mask,
)


class TestNumberMask:
    """Test compile_number_mask."""

    def test_grouping_and_separator(self) -> None:
        """Test raw digits get a delimiter and a decimal separator."""
        mask = compile_number_mask(",", 2, [], ".")
        assert match_mask("12345678", mask).masked == "123,456.78"

    def test_formatted_input(self) -> None:
        """Test an already formatted number is unchanged."""
        mask = compile_number_mask(",", 2, [], ".")
        assert match_mask("123,456.78", mask).masked == "123,456.78"

    def test_prefix(self) -> None:
        """Test prefix literals are inserted before the number."""
        mask = compile_number_mask(",", 2, ["$", " "], ".")
        result = match_mask("12345678", mask)
        assert result.masked == "$ 123,456.78"
        assert result.unmasked == "12345678"

    def test_short_leading_group(self) -> None:
        """Test the leading group may be shorter than three digits."""
        mask = compile_number_mask(",", 2, [], ".")
        assert match_mask("1234567", mask).masked == "12,345.67"

    def test_no_precision(self) -> None:
        """Test integers without a decimal separator."""
        mask = compile_number_mask(",", 0, [], ".")
        assert match_mask("1234567", mask).masked == "1,234,567"

    def test_short_value(self) -> None:
        """Test values not longer than the precision."""
        mask = compile_number_mask(",", 2, [], ".")
        assert match_mask("12", mask).masked == "12"

    def test_session_separators(self, fcfa_session) -> None:
        """Test separators default to the session currency."""
        mask = compile_number_mask(precision=0)
        assert match_mask("1234567", mask).masked == "1 234 567"


class TestDateMask:
    """Test compile_date_mask."""

    def test_full_date(self) -> None:
        """Test a complete date."""
        result = match_mask("31122024", compile_date_mask())
        assert result.masked == "31/12/2024"
        assert result.is_valid is True

    def test_day_after_three(self) -> None:
        """Test a day starting with 3 rejects digits above 1."""
        result = match_mask("35", compile_date_mask())
        assert result.masked == "3"
        assert result.is_valid is False

    def test_month_after_one(self) -> None:
        """Test a month starting with 1 rejects digits above 2."""
        result = match_mask("01132024", compile_date_mask())
        assert result.masked == "01/12/024"
        assert result.is_valid is False

    def test_separator(self) -> None:
        """Test a custom separator."""
        assert match_mask("31122024", compile_date_mask("-")).masked == "31-12-2024"

    def test_invalid_first_digit(self) -> None:
        """Test a day cannot start above 3."""
        result = match_mask("4", compile_date_mask())
        assert result.masked == ""
        assert result.is_valid is False


class TestDateFormatMask:
    """Test compile_date_format_mask."""

    def test_placeholder(self) -> None:
        """Test placeholder letters come from the format."""
        assert compile_date_format_mask("DD/MM/YYYY").placeholder == "DD/MM/YYYY"

    def test_valid_date(self) -> None:
        """Test a real date validates."""
        date_mask = compile_date_format_mask("DD/MM/YYYY")
        result = match_mask("31122024", date_mask.mask, validate=date_mask.validate)
        assert result.masked == "31/12/2024"
        assert result.is_valid is True

    def test_impossible_date(self) -> None:
        """Test February 31st does not validate."""
        date_mask = compile_date_format_mask("DD/MM/YYYY")
        result = match_mask("31022024", date_mask.mask, validate=date_mask.validate)
        assert result.masked == "31/02/2024"
        assert result.is_valid is False

    def test_partial_date(self) -> None:
        """Test incomplete input does not validate."""
        date_mask = compile_date_format_mask("DD/MM/YYYY")
        assert date_mask.validate("3112") is False
        assert date_mask.validate("") is False

    def test_time(self) -> None:
        """Test hour and minute tokens."""
        time_mask = compile_date_format_mask("HH:mm")
        result = match_mask("0930", time_mask.mask, validate=time_mask.validate)
        assert result.masked == "09:30"
        assert result.is_valid is True
        assert time_mask.validate("2561") is False

    def test_meridiem(self) -> None:
        """Test the AM/PM token completes its trailing letter."""
        time_mask = compile_date_format_mask("hh:mm A")
        assert time_mask.placeholder == "hh:mm AM"
        result = match_mask(
            "0930P", time_mask.mask, auto_complete=True, validate=time_mask.validate
        )
        assert result.masked == "09:30 PM"
        assert result.is_valid is True


class TestPhoneMask:
    """Test phone masks."""

    def test_country_code(self) -> None:
        """Test a mask built from a country example."""
        phone_mask = compile_phone_mask("US")
        assert phone_mask.country == "US"
        assert phone_mask.dial_code == "1"
        assert phone_mask.placeholder == "(___) ___-____"
        result = apply_phone_mask(phone_mask, "2015550123")
        assert result.masked == "(201) 555-0123"
        assert result.is_valid is True

    def test_dial_code_stripped(self) -> None:
        """Test the international prefix is removed before matching."""
        result = apply_phone_mask(compile_phone_mask("US"), "+1 201 555 0123")
        assert result.masked == "(201) 555-0123"
        assert result.unmasked == "2015550123"
        assert result.is_valid is True

    def test_incomplete_number(self) -> None:
        """Test a short number does not validate."""
        assert apply_phone_mask(compile_phone_mask("US"), "201555").is_valid is False

    def test_number_rules_checked(self) -> None:
        """Test a full-length number that breaks numbering rules is rejected."""
        result = apply_phone_mask(compile_phone_mask("US"), "0005550123")
        assert result.masked == "(000) 555-0123"
        assert result.is_valid is False

    def test_lowercase_country(self) -> None:
        """Test country codes are case-insensitive."""
        phone_mask = compile_phone_mask("fr")
        assert phone_mask.country == "FR"
        assert phone_mask.dial_code == "33"
        result = apply_phone_mask(phone_mask, "0612345678")
        assert result.masked == "06 12 34 56 78"
        assert result.is_valid is True

    def test_country_without_override(self) -> None:
        """Test countries missing from the overrides use libphonenumber's example."""
        assert "SE" not in get_phone_examples()
        phone_mask = compile_phone_mask("SE")
        digits = phonenumbers.national_significant_number(phonenumbers.example_number("SE"))
        assert phone_mask.country == "SE"
        assert phone_mask.dial_code == "46"
        assert phone_mask.example == format_example_number("SE")
        assert phone_mask.placeholder.count("_") == len(digits)
        result = apply_phone_mask(phone_mask, digits)
        assert result.unmasked == digits
        assert result.is_valid is True

    def test_country_with_example(self) -> None:
        """Test an explicit example shapes the mask, validation stays per country."""
        phone_mask = compile_phone_mask("US", "201-555-0123")
        assert phone_mask.placeholder == "___-___-____"
        result = apply_phone_mask(phone_mask, "2015550123")
        assert result.masked == "201-555-0123"
        assert result.is_valid is True

    def test_example_number(self) -> None:
        """Test a mask built from an example number."""
        phone_mask = compile_phone_mask("(201)555-0123")
        assert phone_mask.country is None
        assert phone_mask.dial_code is None
        assert phone_mask.example == "(201) 555-0123"
        assert phone_mask.placeholder == "(___) ___-____"
        assert phone_mask.validate("2015550123") is True
        assert phone_mask.validate("201555") is False

    def test_unknown_country(self) -> None:
        """Test an unknown country gives an empty mask that never validates."""
        phone_mask = compile_phone_mask("ZZ")
        assert phone_mask.mask == []
        assert phone_mask.country == "ZZ"
        assert phone_mask.validate("123") is False

    def test_sanitize(self) -> None:
        """Test a space is forced after the closing bracket."""
        assert sanitize_phone_number("(212)5550199") == "(212) 5550199"
        assert sanitize_phone_number("(212)   555") == "(212) 555"
        assert sanitize_phone_number(None) == ""

    def test_sanitize_value(self) -> None:
        """Test the dial code is dropped only when it matches the mask's country."""
        phone_mask = compile_phone_mask("FR")
        assert sanitize_phone_value(phone_mask, "+33 6 12 34 56 78") == "6 12 34 56 78"
        assert sanitize_phone_value(phone_mask, "+1 201") == "+1 201"


class TestPhoneExamples:
    """Test loading phone examples."""

    def test_bundled_examples(self) -> None:
        """Test the bundled file loads."""
        examples = load_phone_examples()
        assert "US" in examples
        assert examples["US"].example == "(201) 555-0123"

    def test_custom_file(self, tmp_path) -> None:
        """Test loading a custom file."""
        path = tmp_path / "phones.yaml"
        path.write_text(
            "countries:\n  - code: xx\n    name: Test\n    example: '12-34'\n",
            encoding="utf-8",
        )
        examples = load_phone_examples(str(path))
        assert examples["XX"].name == "Test"
        assert examples["XX"].example == "12-34"

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_phone_examples(str(tmp_path / "missing.yaml"))

    def test_missing_field(self, tmp_path) -> None:
        """Test an entry without a code raises ConfigurationError."""
        path = tmp_path / "phones.yaml"
        path.write_text("countries:\n  - name: Test\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_phone_examples(str(path))

    def test_invalid_yaml(self, tmp_path) -> None:
        """Test unparseable YAML raises ConfigurationError."""
        path = tmp_path / "phones.yaml"
        path.write_text("countries: [", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_phone_examples(str(path))


class TestCreditCardMask:
    """Test the credit card mask."""

    def test_obfuscated_middle_groups(self) -> None:
        """Test the middle eight digits are hidden."""
        result = match_mask(
            "4111111111111111",
            CREDIT_CARD_MASK.mask,
            "*",
            validate=CREDIT_CARD_MASK.validate,
        )
        assert result.masked == "4111 1111 1111 1111"
        assert result.obfuscated == "4111 **** **** 1111"
        assert result.has_obfuscation is True
        assert result.is_valid is True

    def test_placeholder(self) -> None:
        """Test the card placeholder."""
        assert CREDIT_CARD_MASK.placeholder == "____ ____ ____ ____"


class TestToMask:
    """Test to_mask."""

    def test_mixed_items(self) -> None:
        """Test conversion of strings, regexes and tuples."""
        tokens = to_mask(["(", re.compile(r"\d"), (r"\d", "X", "#"), (r"\d", None, False)])
        assert tokens[0] == Literal("(")
        assert isinstance(tokens[1], Pattern)
        assert isinstance(tokens[2], ObfuscatedPattern)
        assert tokens[2].marker == "#"
        assert tokens[2].placeholder == "X"
        assert isinstance(tokens[3], Pattern)

    def test_string_expands_to_literals(self) -> None:
        """Test a string gives one literal per character."""
        assert to_mask(["ab"]) == [Literal("a"), Literal("b")]
        assert to_mask(None) == []
