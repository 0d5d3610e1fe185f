"""Mask compilers: number, date, phone and credit card masks."""

import logging
import math
import re
from datetime import datetime
from pathlib import Path
from re import Pattern as RegexPattern
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

import phonenumbers
import yaml
from phonenumbers import NumberParseException

from ..config.settings import get_settings
from ..core.exceptions import ConfigurationError
from ..core.interfaces import (
    Literal,
    Mask,
    MaskFn,
    MaskResult,
    MaskToken,
    MaskWithValidation,
    ObfuscatedPattern,
    Pattern,
    PhoneMask,
    Validator,
)
from ..core.matcher import build_placeholder, match_mask
from ..core.session import get_session

logger = logging.getLogger(__name__)

DIGIT = r"\d"
_NON_DIGITS = re.compile(r"\D+")
_CLOSING_BRACKET = re.compile(r"\)\s*(\d)")


def to_mask(items: Iterable[Any]) -> Mask:
    """
    Convert loosely shaped mask items into mask tokens.

    Strings become one literal per character, compiled regexes become
    patterns, and ``(regex, placeholder, marker)`` tuples become obfuscated
    patterns unless the marker is ``False``.
    """
    tokens: Mask = []
    for item in items or []:
        if isinstance(item, (Literal, Pattern, ObfuscatedPattern)):
            tokens.append(item)
        elif isinstance(item, str):
            tokens.extend(Literal(ch) for ch in item)
        elif isinstance(item, RegexPattern):
            tokens.append(Pattern(item))
        elif isinstance(item, (tuple, list)) and item:
            placeholder = item[1] if len(item) > 1 and isinstance(item[1], str) else None
            marker = item[2] if len(item) > 2 else None
            if marker is False:
                tokens.append(Pattern(item[0], placeholder))
            else:
                tokens.append(
                    ObfuscatedPattern(item[0], marker if isinstance(marker, str) else None, placeholder)
                )
    return tokens


def compile_number_mask(
    delimiter: Optional[str] = None,
    precision: int = 2,
    prefix: Iterable[Any] = (),
    separator: Optional[str] = None,
) -> MaskFn:
    """
    Create a mask function for grouped decimal numbers.

    Delimiter and separator default to the session thousand and decimal
    separators.

    Example:
        mask = compile_number_mask(",", 2, ["$", " "], ".")
        match_mask("123456.78", mask).masked   # "$ 123,456.78"
    """
    currency = get_session().get_currency()
    if delimiter is None:
        delimiter = currency.thousand_separator
    if separator is None:
        separator = currency.decimal_separator
    prefix_tokens = to_mask(prefix)

    def number_mask(value: str) -> Mask:
        digits = _NON_DIGITS.sub("", value or "")
        mask: List[MaskToken] = [Pattern(DIGIT) for _ in digits]
        with_separator = precision > 0 and bool(separator)
        if with_separator and len(mask) > precision:
            mask.insert(len(mask) - precision, Literal(separator))
        if delimiter:
            groups = math.ceil((len(digits) - precision) / 3) - 1
            for i in range(groups):
                offset = precision + (1 if with_separator else 0) + i * 4 + 3
                mask.insert(max(len(mask) - offset, 0), Literal(delimiter))
        return prefix_tokens + mask

    return number_mask


def compile_date_mask(separator: str = "/") -> MaskFn:
    """
    Create a DD/MM/YYYY mask function narrowing digits as they are typed.

    A day starting with 3 allows only 0-1 next, a month starting with 1
    allows only 0-2 next.
    """
    sep = Literal((separator or "/")[:1])

    def date_mask(value: str) -> Mask:
        digits = _NON_DIGITS.sub("", value or "")
        first_day, first_month = digits[:1], digits[2:3]
        if first_day == "3":
            second_day = "[01]"
        elif first_day == "0":
            second_day = "[1-9]"
        else:
            second_day = DIGIT
        if first_month == "1":
            second_month = "[0-2]"
        elif first_month == "0":
            second_month = "[1-9]"
        else:
            second_month = DIGIT
        return [
            Pattern("[0-3]"),
            Pattern(second_day),
            sep,
            Pattern("[01]"),
            Pattern(second_month),
            sep,
            Pattern(DIGIT),
            Pattern(DIGIT),
            Pattern(DIGIT),
            Pattern(DIGIT),
        ]

    return date_mask


class _DateToken(NamedTuple):
    mask: List[MaskToken]
    directive: str
    render: Any


def _digits(count: int, placeholder: str) -> List[MaskToken]:
    return [Pattern(DIGIT, placeholder) for _ in range(count)]


_DATE_TOKENS: Dict[str, _DateToken] = {
    "YYYY": _DateToken(_digits(4, "Y"), "%Y", lambda d: f"{d.year:04d}"),
    "YY": _DateToken(_digits(2, "Y"), "%y", lambda d: f"{d.year % 100:02d}"),
    "MM": _DateToken(_digits(2, "M"), "%m", lambda d: f"{d.month:02d}"),
    "M": _DateToken(_digits(1, "M"), "%m", lambda d: str(d.month)),
    "DD": _DateToken(_digits(2, "D"), "%d", lambda d: f"{d.day:02d}"),
    "D": _DateToken(_digits(1, "D"), "%d", lambda d: str(d.day)),
    "HH": _DateToken(_digits(2, "H"), "%H", lambda d: f"{d.hour:02d}"),
    "H": _DateToken(_digits(1, "H"), "%H", lambda d: str(d.hour)),
    "hh": _DateToken(_digits(2, "h"), "%I", lambda d: f"{(d.hour % 12) or 12:02d}"),
    "h": _DateToken(_digits(1, "h"), "%I", lambda d: str((d.hour % 12) or 12)),
    "mm": _DateToken(_digits(2, "m"), "%M", lambda d: f"{d.minute:02d}"),
    "m": _DateToken(_digits(1, "m"), "%M", lambda d: str(d.minute)),
    "ss": _DateToken(_digits(2, "s"), "%S", lambda d: f"{d.second:02d}"),
    "s": _DateToken(_digits(1, "s"), "%S", lambda d: str(d.second)),
    "SSS": _DateToken(_digits(3, "S"), "%f", lambda d: f"{d.microsecond // 1000:03d}"),
    "A": _DateToken([Pattern("[AaPp]", "A"), Literal("M")], "%p", lambda d: d.strftime("%p").upper()),
    "a": _DateToken([Pattern("[AaPp]", "a"), Literal("m")], "%p", lambda d: d.strftime("%p").lower()),
}
_DATE_TOKEN_NAMES = sorted(_DATE_TOKENS, key=len, reverse=True)
_DATE_SEPARATORS = frozenset("/-. :T")


def _tokenize_date_format(date_format: str) -> List[Any]:
    parts: List[Any] = []
    i = 0
    while i < len(date_format):
        char = date_format[i]
        if char in _DATE_SEPARATORS:
            parts.append(char)
            i += 1
            continue
        for name in _DATE_TOKEN_NAMES:
            if date_format.startswith(name, i):
                parts.append(_DATE_TOKENS[name])
                i += len(name)
                break
        else:
            parts.append(char)
            i += 1
    return parts


def compile_date_format_mask(date_format: str) -> MaskWithValidation:
    """
    Create a mask from a moment-style date format such as "DD/MM/YYYY HH:mm".

    The validator rebuilds the masked value from the unmasked characters and
    accepts it only when it parses strictly and renders back identically.
    """
    parts = _tokenize_date_format(date_format or "")
    mask: Mask = []
    directives = []
    for part in parts:
        if isinstance(part, _DateToken):
            mask.extend(part.mask)
            directives.append(part.directive)
        else:
            mask.append(Literal(part))
            directives.append(part.replace("%", "%%"))
    strptime_format = "".join(directives)

    def validate(unmasked: str) -> bool:
        if not parts or not unmasked:
            return False
        text = match_mask(unmasked, mask, auto_complete=True).masked
        try:
            parsed = datetime.strptime(text, strptime_format)
        except ValueError:
            return False
        rendered = "".join(
            part.render(parsed) if isinstance(part, _DateToken) else part for part in parts
        )
        return rendered == text

    return MaskWithValidation(mask=mask, validate=validate, placeholder=build_placeholder(mask))


class PhoneExample(NamedTuple):
    """A country's preferred example number, as users type it."""

    code: str
    name: str
    example: str


def _resolve_examples_path(path: str) -> Path:
    examples_path = Path(path)
    if not examples_path.is_absolute() and not examples_path.exists():
        examples_path = Path(__file__).parent.parent / path
    if not examples_path.exists():
        raise ConfigurationError(f"Phone examples file not found: {path}")
    return examples_path


def load_phone_examples(path: Optional[str] = None) -> Dict[str, PhoneExample]:
    """
    Load phone example overrides from a YAML file.

    Args:
        path: YAML file path; defaults to the configured file

    Returns:
        Examples keyed by upper-case country code

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    examples_path = _resolve_examples_path(path or get_settings().phone_examples_file)
    try:
        with open(examples_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load phone examples: {e}")

    examples: Dict[str, PhoneExample] = {}
    for entry in data.get("countries", []):
        try:
            code = str(entry["code"]).strip().upper()
            examples[code] = PhoneExample(
                code=code,
                name=str(entry.get("name", code)),
                example=str(entry["example"]),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(f"Invalid phone example entry {entry!r}: {e}")
    logger.debug("Loaded %d phone examples from %s", len(examples), examples_path)
    return examples


_phone_examples: Optional[Dict[str, PhoneExample]] = None


def get_phone_examples() -> Dict[str, PhoneExample]:
    """Get cached phone examples."""
    global _phone_examples
    if _phone_examples is None:
        _phone_examples = load_phone_examples()
    return _phone_examples


def sanitize_phone_number(phone_number: Any) -> str:
    """Ensure exactly one space after a closing bracket."""
    if not isinstance(phone_number, str) or not phone_number:
        return ""
    return _CLOSING_BRACKET.sub(r") \1", phone_number, count=1)


def _never_valid(_: str) -> bool:
    return False


def format_example_number(region: str) -> str:
    """
    Format libphonenumber's example number for a region as it is typed.

    Returns:
        The formatted national number, empty when the region has no example
    """
    example = phonenumbers.example_number(region)
    if example is None:
        return ""
    formatter = phonenumbers.AsYouTypeFormatter(region)
    formatted = ""
    for digit in phonenumbers.national_significant_number(example):
        formatted = formatter.input_digit(digit)
    return formatted


def _region_validator(region: str) -> Validator:
    def validate(unmasked: str) -> bool:
        if not unmasked:
            return False
        try:
            number = phonenumbers.parse(unmasked, region)
        except NumberParseException:
            return False
        return phonenumbers.is_valid_number_for_region(number, region)

    return validate


def _digit_count_validator(count: int) -> Validator:
    def validate(unmasked: str) -> bool:
        return len(unmasked) == count and unmasked.isdigit()

    return validate


def compile_phone_mask(country_or_example: str, example: Optional[str] = None) -> PhoneMask:
    """
    Create a phone mask from a country code or an example number.

    A country's mask is shaped on ``example``, else on the configured
    override, else on libphonenumber's example for that country, and its
    values are validated with libphonenumber. A mask built from a bare
    example number has no country and only checks the digit count.

    Args:
        country_or_example: ISO country code ("US") or a number like "(201) 555-0123"
        example: Example number overriding the country's default shape

    Returns:
        PhoneMask; unknown countries give an empty mask that never validates
    """
    key = (country_or_example or "").strip()
    region: Optional[str] = None
    dial_code: Optional[str] = None

    if key.isalpha():
        region = key.upper()
        if region not in phonenumbers.SUPPORTED_REGIONS:
            return PhoneMask(mask=[], validate=_never_valid, country=region)
        override = get_phone_examples().get(region)
        template = example or (override.example if override else format_example_number(region))
        dial_code = str(phonenumbers.country_code_for_region(region))
    elif any(ch.isdigit() for ch in key):
        template = key
    else:
        return PhoneMask(mask=[], validate=_never_valid, country=key.upper() or None)

    template = sanitize_phone_number(template)
    digit_count = sum(1 for ch in template if ch.isdigit())
    if not digit_count:
        return PhoneMask(mask=[], validate=_never_valid, country=region)

    mask: Mask = [Pattern(DIGIT) if ch.isdigit() else Literal(ch) for ch in template]
    if region is not None:
        validate = _region_validator(region)
    else:
        validate = _digit_count_validator(digit_count)

    return PhoneMask(
        mask=mask,
        validate=validate,
        placeholder=build_placeholder(mask),
        country=region,
        dial_code=dial_code,
        example=template,
    )


def sanitize_phone_value(phone_mask: PhoneMask, value: Any) -> str:
    """Normalize a raw phone value before matching; drops a leading +dial code."""
    text = sanitize_phone_number(value)
    if phone_mask.dial_code:
        prefix = "+" + phone_mask.dial_code
        if text.startswith(prefix):
            text = text[len(prefix):].lstrip()
    return text


def apply_phone_mask(
    phone_mask: PhoneMask,
    value: Any,
    obfuscation_char: Optional[str] = None,
    auto_complete: bool = False,
) -> MaskResult:
    """Sanitize a phone value and match it against a phone mask."""
    return match_mask(
        sanitize_phone_value(phone_mask, value),
        phone_mask.mask,
        obfuscation_char,
        auto_complete,
        phone_mask.validate,
    )


def _credit_card_mask() -> MaskWithValidation:
    digit = Pattern(DIGIT)
    hidden = ObfuscatedPattern(DIGIT)
    space = Literal(" ")
    mask: Mask = (
        [digit] * 4 + [space] + [hidden] * 4 + [space] + [hidden] * 4 + [space] + [digit] * 4
    )
    return MaskWithValidation(
        mask=mask,
        validate=lambda unmasked: len(unmasked) == 16,
        placeholder=build_placeholder(mask),
    )


CREDIT_CARD_MASK = _credit_card_mask()
