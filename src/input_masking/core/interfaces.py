"""Data models for input masking and number formatting."""

import re
from dataclasses import dataclass, field, fields, replace
from re import Pattern as RegexPattern
from typing import Any, Callable, Dict, List, Optional, Union

from ..config.constants import TokenKind


def _compile(pattern: Union[str, RegexPattern[str]]) -> RegexPattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


@dataclass(frozen=True)
class Literal:
    """A fixed character of a mask."""

    char: str
    kind: TokenKind = field(default=TokenKind.LITERAL, init=False, repr=False)


@dataclass(frozen=True)
class Pattern:
    """A character-class position of a mask."""

    regex: RegexPattern[str]
    placeholder: Optional[str] = None
    kind: TokenKind = field(default=TokenKind.PATTERN, init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", _compile(self.regex))

    def test(self, char: str) -> bool:
        """Check whether a single character satisfies the class."""
        return self.regex.match(char) is not None


@dataclass(frozen=True)
class ObfuscatedPattern:
    """A character-class position rendered with a marker in obfuscated output."""

    regex: RegexPattern[str]
    marker: Optional[str] = None
    placeholder: Optional[str] = None
    kind: TokenKind = field(default=TokenKind.OBFUSCATED, init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", _compile(self.regex))

    def test(self, char: str) -> bool:
        """Check whether a single character satisfies the class."""
        return self.regex.match(char) is not None


MaskToken = Union[Literal, Pattern, ObfuscatedPattern]
Mask = List[MaskToken]
MaskFn = Callable[[str], Mask]
Validator = Callable[[str], bool]


@dataclass
class MaskResult:
    """Result of matching a value against a mask."""

    masked: str
    unmasked: str
    obfuscated: str
    mask_array: Mask = field(default_factory=list)
    has_obfuscation: bool = False
    placeholder: str = ""
    is_valid: bool = True


@dataclass
class MaskWithValidation:
    """A mask (static or value-derived) paired with a validator."""

    mask: Union[Mask, MaskFn]
    validate: Validator
    placeholder: str = ""


@dataclass
class PhoneMask(MaskWithValidation):
    """Phone mask compiled from a country example number."""

    country: Optional[str] = None
    dial_code: Optional[str] = None
    example: str = ""


@dataclass
class CurrencyOptions:
    """Currency and number rendering options."""

    symbol: str = ""
    decimal_digits: int = 0
    thousand_separator: str = ","
    decimal_separator: str = "."
    format: str = "%v"

    def copy(self, **changes: Any) -> "CurrencyOptions":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class FormatResult:
    """Result of formatting an arbitrary input value."""

    formatted_value: str
    parsed_value: Union[float, int, str, Any]
    decimal_value: float = 0
    is_decimal_type: bool = False
    value: Any = None
    format: Any = None


@dataclass
class FormatMoneyResult:
    """Composed money string together with the options that produced it."""

    result: str
    formatted_value: str
    formatted_number: str
    used_format: str
    value: float
    symbol: str
    decimal_digits: int
    thousand_separator: str
    decimal_separator: str
    format: str


@dataclass
class AbbreviateResult:
    """Result of abbreviating a number."""

    result: str
    value: float
    suffix: str = ""
    formatted_value: str = ""
