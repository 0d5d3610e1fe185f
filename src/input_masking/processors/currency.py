"""Currency and number formatting on top of the session defaults.

Usage:
    from input_masking.processors.currency import format_money, unformat

    format_money(1234.56, "$", 2, ",", ".", "%s%v")   # "$1,234.56"
    unformat("(1,234.56)")                            # -1234.56
"""

import math
import re
from dataclasses import fields
from typing import Any, Mapping, NamedTuple, Optional, Union

from ..config.constants import ABBREVIATION_SUFFIXES, SYMBOL_PLACEHOLDER, VALUE_PLACEHOLDER
from ..core.interfaces import AbbreviateResult, CurrencyOptions, FormatMoneyResult
from ..core.session import currency_options, get_session
from .numeric import check_precision, count_decimals, is_number, parse_float, to_fixed

OptionsLike = Union[CurrencyOptions, Mapping[str, Any]]

_OPTION_FIELDS = tuple(f.name for f in fields(CurrencyOptions))
_FORMAT_DIGITS = re.compile(r"\.(#{0,9})\s*$")
_BRACKET_NEGATIVE = re.compile(r"\((?=\d)")
_GROUPS = re.compile(r"\B(?=(\d{3})+$)")


class ParsedFormat(NamedTuple):
    """A currency template split from its decimal-digit suffix."""

    format: str
    decimal_digits: Optional[int] = None


class CurrencyTemplates(NamedTuple):
    """Templates for positive, negative and zero amounts."""

    pos: str
    neg: str
    zero: str


def _is_options(value: Any) -> bool:
    return isinstance(value, (CurrencyOptions, Mapping))


def _as_mapping(options: Optional[OptionsLike]) -> Mapping[str, Any]:
    if options is None:
        return {}
    if isinstance(options, CurrencyOptions):
        return options.to_dict()
    return options


def parse_format(format: Optional[str]) -> ParsedFormat:
    """
    Split a trailing ``.###`` decimal-digit suffix off a template.

    The number of ``#`` after the dot becomes the decimal digits.

    Example:
        parse_format("%s%v .###")  # ParsedFormat("%s%v", 3)
    """
    format = format.strip() if isinstance(format, str) else ""
    match = _FORMAT_DIGITS.search(format)
    if not match:
        return ParsedFormat(format)
    return ParsedFormat(format[: match.start()].strip(), len(match.group(1)))


def prepare_options(options: Optional[OptionsLike] = None) -> CurrencyOptions:
    """
    Merge options over the session currency.

    A decimal-digit suffix in the resulting format takes precedence over
    any decimal digits given explicitly.
    """
    session = get_session().get_currency()
    overlay = {
        k: v for k, v in _as_mapping(options).items() if k in _OPTION_FIELDS and v is not None
    }
    result = session.copy(**overlay)
    if result.format:
        parsed = parse_format(result.format)
        result.format = parsed.format
        if parsed.decimal_digits is not None:
            result.decimal_digits = parsed.decimal_digits
    result.decimal_digits = check_precision(result.decimal_digits, session.decimal_digits)
    return result


def check_currency_format(format: Optional[str] = None) -> CurrencyTemplates:
    """Derive positive/negative/zero templates; falls back to the session template."""
    template = format.lower() if isinstance(format, str) else ""
    if VALUE_PLACEHOLDER not in template:
        template = get_session().get_currency().format.lower()
    if VALUE_PLACEHOLDER not in template:
        template = VALUE_PLACEHOLDER
    negative = template.replace("-", "").replace(VALUE_PLACEHOLDER, "-" + VALUE_PLACEHOLDER)
    return CurrencyTemplates(pos=template, neg=negative, zero=template)


def unformat(value: Any, decimal_separator: Optional[str] = None) -> float:
    """
    Turn a formatted amount back into a number.

    A "(" directly followed by a digit marks a negative amount, so
    "(1,234.56)" is negative while "($1,234.56)" is not.

    Returns:
        The parsed number, 0 when unparseable
    """
    if not value:
        return 0
    if is_number(value):
        return value
    text = value if isinstance(value, str) else str(value)
    decimal_separator = decimal_separator or get_session().get_currency().decimal_separator
    text = _BRACKET_NEGATIVE.sub("-", text)
    text = re.sub(r"[^0-9\-" + re.escape(decimal_separator) + "]", "", text)
    parsed = parse_float(text.replace(decimal_separator, "."))
    return 0 if parsed != parsed else parsed


def _group(digits: str, separator: str) -> str:
    return _GROUPS.sub(lambda _: separator, digits)


def format_number(
    value: Any,
    decimal_digits_or_options: Union[int, OptionsLike, None] = None,
    thousand_separator: Optional[str] = None,
    decimal_separator: Optional[str] = None,
) -> str:
    """
    Format a number with grouped thousands.

    Decimal digits resolve from the explicit argument, then the options,
    then the fractional digits already in the value, then the session.

    Args:
        value: Number or formatted string
        decimal_digits_or_options: Decimal digits, or currency options
        thousand_separator: Group separator override
        decimal_separator: Decimal separator override

    Returns:
        Formatted number string
    """
    session = get_session().get_currency()
    number = unformat(value)

    if _is_options(decimal_digits_or_options):
        source = prepare_options(decimal_digits_or_options)
        digits = source.decimal_digits
    else:
        source = session
        if is_number(decimal_digits_or_options):
            digits = check_precision(decimal_digits_or_options, session.decimal_digits)
        else:
            digits = count_decimals(number) or session.decimal_digits

    if thousand_separator is None:
        thousand_separator = source.thousand_separator
    if decimal_separator is None:
        decimal_separator = source.decimal_separator

    fixed = to_fixed(abs(number), digits)
    if fixed == "NaN":
        return fixed
    integer, _, fraction = fixed.partition(".")
    sign = "-" if number < 0 and fixed.strip("0.") else ""
    out = sign + _group(integer, thousand_separator)
    if digits > 0 and fraction:
        out += decimal_separator + fraction
    return out


def format_money_as_object(
    value: Any,
    symbol_or_options: Union[str, OptionsLike, None] = None,
    decimal_digits: Optional[int] = None,
    thousand_separator: Optional[str] = None,
    decimal_separator: Optional[str] = None,
    format: Optional[str] = None,
) -> FormatMoneyResult:
    """
    Format an amount through a currency template.

    Args:
        value: Number or formatted string
        symbol_or_options: Currency symbol, or full currency options
        decimal_digits: Decimal digits override
        thousand_separator: Group separator override
        decimal_separator: Decimal separator override
        format: Template with %v (value) and %s (symbol)

    Returns:
        FormatMoneyResult with the composed string and resolved options
    """
    if _is_options(symbol_or_options):
        raw = dict(_as_mapping(symbol_or_options))
    else:
        raw = {"symbol": symbol_or_options}
    explicit = {
        "decimal_digits": decimal_digits,
        "thousand_separator": thousand_separator,
        "decimal_separator": decimal_separator,
        "format": format,
    }
    raw.update({k: v for k, v in explicit.items() if v is not None})
    options = prepare_options(raw)

    number = unformat(value)
    templates = check_currency_format(options.format)
    if number > 0:
        used_format = templates.pos
    elif number < 0:
        used_format = templates.neg
    else:
        used_format = templates.zero

    formatted_number = format_number(
        abs(number),
        options.decimal_digits,
        options.thousand_separator,
        options.decimal_separator,
    )
    if options.symbol:
        formatted_value = used_format.replace(SYMBOL_PLACEHOLDER, options.symbol)
    else:
        formatted_value = used_format.replace(SYMBOL_PLACEHOLDER, "").strip()

    return FormatMoneyResult(
        result=formatted_value.replace(VALUE_PLACEHOLDER, formatted_number),
        formatted_value=formatted_value,
        formatted_number=formatted_number,
        used_format=used_format,
        value=number,
        symbol=options.symbol,
        decimal_digits=options.decimal_digits,
        thousand_separator=options.thousand_separator,
        decimal_separator=options.decimal_separator,
        format=options.format,
    )


def format_money(
    value: Any,
    symbol_or_options: Union[str, OptionsLike, None] = None,
    decimal_digits: Optional[int] = None,
    thousand_separator: Optional[str] = None,
    decimal_separator: Optional[str] = None,
    format: Optional[str] = None,
) -> str:
    """Format an amount through a currency template and return the string."""
    return format_money_as_object(
        value, symbol_or_options, decimal_digits, thousand_separator, decimal_separator, format
    ).result


def format_currency(
    value: Any,
    code: str,
    decimal_digits: Optional[int] = None,
    thousand_separator: Optional[str] = None,
    decimal_separator: Optional[str] = None,
    format: Optional[str] = None,
    locale: Optional[str] = None,
) -> str:
    """
    Format an amount in the currency identified by an ISO 4217 code.

    Raises:
        UnknownCurrencyError: If the code cannot be resolved
    """
    options = currency_options(code, locale)
    session_format = get_session().get_format(force=False)
    if session_format:
        options.format = session_format
    return format_money(
        value, options, decimal_digits, thousand_separator, decimal_separator, format
    )


def _is_finite(number: Any) -> bool:
    return is_number(number) and math.isfinite(number)


def _short(number: float) -> str:
    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def abbreviate_to_object(number: Any) -> AbbreviateResult:
    """Abbreviate a number (1200 -> 1.2K) and keep the parts."""
    if not _is_finite(number):
        return AbbreviateResult(result="", value=0)
    if number == 0:
        return AbbreviateResult(result="0", value=0, formatted_value="0")

    fixed = min(count_decimals(number), 5)
    exponent = int(f"{number:.1e}".split("e")[1])
    power = min(exponent, 14) // 3 if exponent >= 3 else 0
    if power < 1:
        value = float(to_fixed(number, fixed))
    else:
        value = float(to_fixed(number / 10 ** (power * 3), 1 + fixed))
    if value == 0:
        value = 0.0
    suffix = ABBREVIATION_SUFFIXES[power]
    formatted = _short(value)
    return AbbreviateResult(
        result=formatted + suffix,
        value=value,
        suffix=suffix,
        formatted_value=formatted,
    )


def abbreviate_number(number: Any) -> str:
    """Abbreviate a number with K/M/B/T suffixes, formatted with the session."""
    abbreviated = abbreviate_to_object(number)
    if not _is_finite(number):
        return abbreviated.result
    return format_number(abbreviated.value) + abbreviated.suffix


def abbreviate_money(
    number: Any,
    symbol_or_options: Union[str, OptionsLike, None] = None,
    decimal_digits: Optional[int] = None,
    thousand_separator: Optional[str] = None,
    decimal_separator: Optional[str] = None,
    format: Optional[str] = None,
) -> str:
    """Abbreviate an amount and render it through the currency template."""
    abbreviated = abbreviate_to_object(number)
    if not _is_finite(number):
        return abbreviated.formatted_value
    money = format_money_as_object(
        abbreviated.value,
        symbol_or_options,
        decimal_digits,
        thousand_separator,
        decimal_separator,
        format,
    )
    magnitude = format_number(
        abs(abbreviated.value),
        decimal_digits,
        money.thousand_separator,
        money.decimal_separator,
    )
    return money.formatted_value.replace(VALUE_PLACEHOLDER, magnitude + abbreviated.suffix)
