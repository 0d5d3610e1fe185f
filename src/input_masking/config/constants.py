"""Constants and enums for input masking and number formatting."""

from enum import Enum


class TokenKind(str, Enum):
    """Kinds of mask tokens."""

    LITERAL = "literal"
    PATTERN = "pattern"
    OBFUSCATED = "obfuscated"


class ValueType(str, Enum):
    """Value types understood by the generic value formatter."""

    DECIMAL = "decimal"
    NUMERIC = "numeric"
    NUMBER = "number"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


DECIMAL_TYPES = frozenset({ValueType.DECIMAL, ValueType.NUMERIC, ValueType.NUMBER})

# Placeholders understood inside a currency template
VALUE_PLACEHOLDER = "%v"
SYMBOL_PLACEHOLDER = "%s"

# Default values
DEFAULT_CURRENCY_SYMBOL = "FCFA"
DEFAULT_CURRENCY_FORMAT = "%v %s"
DEFAULT_DECIMAL_SEPARATOR = "."
DEFAULT_THOUSAND_SEPARATOR = " "
DEFAULT_DECIMAL_DIGITS = 0
DEFAULT_PLACEHOLDER_CHARACTER = "_"
DEFAULT_OBFUSCATION_CHARACTER = "*"
DEFAULT_LOCALE = "en_US"
DEFAULT_PHONE_EXAMPLES_PATH = "config/phone_examples.yaml"

# Strings longer than this are not converted to float before rounding
MAX_SAFE_DIGITS = 15

ABBREVIATION_SUFFIXES = ("", "K", "M", "B", "T")

DEFAULT_DATE_FORMATS = {
    ValueType.DATE: "%d/%m/%Y",
    ValueType.TIME: "%H:%M:%S",
    ValueType.DATETIME: "%d/%m/%Y %H:%M:%S",
}
