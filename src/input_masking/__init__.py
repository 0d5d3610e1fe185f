"""Input masking and locale-aware number formatting."""

__version__ = "0.1.0"

from .core.exceptions import (
    ConfigurationError,
    InputMaskingError,
    UnknownCurrencyError,
)
from .core.interfaces import (
    CurrencyOptions,
    FormatMoneyResult,
    FormatResult,
    Literal,
    MaskResult,
    ObfuscatedPattern,
    Pattern,
)
from .core.matcher import match_mask
from .core.session import SessionDefaults, get_session, set_session
from .processors.currency import (
    format_money,
    format_money_as_object,
    format_number,
    unformat,
)
from .processors.masks import compile_date_mask, compile_number_mask, compile_phone_mask
from .processors.numeric import check_precision, parse_decimal, to_fixed

__all__ = [
    "InputMaskingError",
    "ConfigurationError",
    "UnknownCurrencyError",
    "CurrencyOptions",
    "FormatMoneyResult",
    "FormatResult",
    "Literal",
    "MaskResult",
    "ObfuscatedPattern",
    "Pattern",
    "match_mask",
    "SessionDefaults",
    "get_session",
    "set_session",
    "format_money",
    "format_money_as_object",
    "format_number",
    "unformat",
    "compile_date_mask",
    "compile_number_mask",
    "compile_phone_mask",
    "check_precision",
    "parse_decimal",
    "to_fixed",
]
