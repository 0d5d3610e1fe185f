"""Generic value formatting for display."""

import re
from datetime import date, datetime, time
from typing import Any, Callable, Optional, Union

from ..config.constants import DECIMAL_TYPES, DEFAULT_DATE_FORMATS, ValueType
from ..core.interfaces import FormatResult
from .currency import abbreviate_money, abbreviate_number, format_currency, format_money, format_number
from .numeric import is_number, parse_decimal

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")

_NAMED_FORMATS = {
    "money": format_money,
    "abbreviate": abbreviate_number,
    "abbreviate_money": abbreviate_money,
    "number": format_number,
}


def _value_type(type: Any) -> Optional[ValueType]:
    try:
        return ValueType(str(type).lower())
    except ValueError:
        return None


def _format_date(value: Any, value_type: Optional[ValueType], date_format: Optional[str]) -> Optional[str]:
    if not isinstance(value, (date, time)):
        return None
    if date_format:
        return value.strftime(date_format)
    if value_type not in DEFAULT_DATE_FORMATS:
        return None
    if isinstance(value, time) and value_type != ValueType.TIME:
        return None
    if not isinstance(value, datetime) and isinstance(value, date) and value_type == ValueType.TIME:
        return None
    return value.strftime(DEFAULT_DATE_FORMATS[value_type])


def _format_number(number: Any, format: Any) -> str:
    if isinstance(format, str):
        formatter = _NAMED_FORMATS.get(format.lower())
        if formatter is not None:
            return formatter(number)
        if _CURRENCY_CODE.match(format):
            return format_currency(number, format)
    return format_number(number)


def format_value_to_object(
    value: Any,
    type: Union[str, ValueType, None] = None,
    format: Union[str, Callable[..., str], None] = None,
    date_format: Optional[str] = None,
) -> FormatResult:
    """
    Format a value for display according to its type.

    Args:
        value: Raw value (string, number, date...)
        type: Value type; decimal/numeric/number parse the value as a decimal
        format: Callable receiving the value, or a named format
            ("money", "abbreviate", "abbreviate_money", "number" or an ISO
            currency code)
        date_format: strftime format for date values

    Returns:
        FormatResult with the formatted string and parsed values
    """
    value_type = _value_type(type)
    is_decimal_type = value_type in DECIMAL_TYPES
    if value is None or value is False or (not value and not is_number(value)):
        value = ""

    parsed_value: Any = value
    if is_decimal_type:
        parsed_value = parse_decimal(value)

    if callable(format):
        formatted_value = format(value)
    else:
        formatted_value = _format_date(value, value_type, date_format)
        if formatted_value is None:
            if is_number(parsed_value):
                formatted_value = _format_number(parsed_value, format)
            else:
                formatted_value = value if isinstance(value, str) else str(value)

    return FormatResult(
        formatted_value=formatted_value,
        parsed_value=parsed_value,
        decimal_value=parsed_value if is_number(parsed_value) else 0,
        is_decimal_type=is_decimal_type,
        value=value,
        format=format,
    )


def format_value(
    value: Any,
    type: Union[str, ValueType, None] = None,
    format: Union[str, Callable[..., str], None] = None,
    date_format: Optional[str] = None,
) -> str:
    """Format a value for display and return only the string."""
    return format_value_to_object(value, type, format, date_format).formatted_value
