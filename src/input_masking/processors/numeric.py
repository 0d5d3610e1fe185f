"""Decimal parsing, precision checks and artifact-free rounding."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ..config.constants import MAX_SAFE_DIGITS

# Leading float literal, the way a lenient parser reads "12.5abc" as 12.5
_FLOAT_PREFIX = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_NUMERIC = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)$")
_NOT_FIXED_CHARS = re.compile(r"[^0-9.\-]")
_DECIMALS = re.compile(r"\.(\d+)")


def is_number(value: Any) -> bool:
    """Check for a real int/float (bools excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_float(text: str) -> float:
    """Read the leading float of a string; NaN when there is none."""
    match = _FLOAT_PREFIX.match(text or "")
    if not match:
        return math.nan
    return float(match.group())


def plain_number(value: Any) -> str:
    """Render a number without exponent notation."""
    if is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return str(value)
        return format(Decimal(repr(value)), "f")
    return str(value)


def parse_decimal(value: Any) -> float:
    """
    Parse a loosely formatted decimal.

    Numbers pass through; anything that is not a non-empty string gives 0.
    A comma is read as the decimal point only when no dot is present,
    otherwise commas are treated as grouping.

    Args:
        value: Value to parse

    Returns:
        Parsed number, 0 when unparseable
    """
    if is_number(value):
        return value
    if not value or not isinstance(value, str):
        return 0
    text = value.strip()
    if "." in text:
        text = text.replace(",", "")
    else:
        text = text.replace(",", ".", 1)
    parsed = parse_float(text.replace(" ", ""))
    if math.isnan(parsed) or not parsed:
        return 0
    return parsed


def check_precision(value: Any, base: int = 0) -> int:
    """Return round(|value|) for numbers, ``base`` otherwise."""
    if not is_number(value) or math.isnan(value) or math.isinf(value):
        return base
    return int(Decimal(abs(value)).to_integral_value(rounding=ROUND_HALF_UP))


def count_decimals(value: Any) -> int:
    """Count the fractional digits in the shortest rendering of a number."""
    if not is_number(value):
        return 0
    match = _DECIMALS.search(plain_number(value))
    if not match:
        return 0
    return len(match.group(1).rstrip("0"))


def _shift(number: Decimal, places: int) -> Decimal:
    # Move the decimal point through the exponent; exact at any size
    sign, digits, exponent = number.as_tuple()
    return Decimal((sign, digits, exponent + places))


def to_fixed(value: Any, decimal_digits: Any = 0) -> str:
    """
    Render a number with exactly ``decimal_digits`` fractional digits.

    Integer strings too long to survive a float conversion are returned
    verbatim, padded with zero decimals and never rounded.

    Args:
        value: Number or numeric string
        decimal_digits: Number of fractional digits

    Returns:
        Fixed-point string, or "NaN" when the value is not numeric
    """
    digits = check_precision(decimal_digits, 0)
    cleaned = _NOT_FIXED_CHARS.sub("", plain_number(value))

    if "." not in cleaned and len(cleaned) > MAX_SAFE_DIGITS and _NUMERIC.match(cleaned):
        return cleaned + ("." + "0" * digits if digits else "")

    if not _NUMERIC.match(cleaned):
        return "NaN"

    try:
        number = float(cleaned)
        exact = Decimal(repr(number)) if math.isfinite(number) else Decimal(cleaned)
        rounded = _shift(exact, digits).to_integral_value(rounding=ROUND_HALF_UP)
    except (ValueError, InvalidOperation):
        return "NaN"

    if rounded.is_zero():
        rounded = Decimal(0)
    return format(_shift(rounded, -digits), f".{digits}f")
