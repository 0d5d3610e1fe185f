"""Two-cursor mask matching.

The matcher walks the mask and the value at the same time. Pattern tokens
always consume one input character, whether or not it satisfies the class,
so stray separators typed by the user are skipped. Literal tokens consume
input only when the typed character equals the literal; otherwise they are
inserted into the output.

Usage:
    from input_masking.core.interfaces import Literal, Pattern
    from input_masking.core.matcher import match_mask

    digit = Pattern(r"\\d")
    mask = [Literal("("), digit, digit, digit, Literal(")")]
    result = match_mask("212", mask)
    print(result.masked)   # "(212"
"""

from typing import Any, Optional, Sequence, Union

from ..config.settings import get_settings
from .interfaces import (
    Literal,
    Mask,
    MaskFn,
    MaskResult,
    MaskToken,
    ObfuscatedPattern,
    Pattern,
    Validator,
)


def build_placeholder(mask: Sequence[MaskToken], placeholder_char: Optional[str] = None) -> str:
    """Render the shape of a mask: literals as-is, patterns as blanks."""
    blank = (placeholder_char or get_settings().placeholder_character)[:1]
    out = []
    for token in mask:
        if isinstance(token, Literal):
            out.append(token.char)
        else:
            out.append((token.placeholder or blank)[:1])
    return "".join(out)


def _to_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def match_mask(
    value: Any,
    mask: Union[Sequence[MaskToken], MaskFn, None],
    obfuscation_char: Optional[str] = None,
    auto_complete: bool = False,
    validate: Optional[Validator] = None,
    placeholder_char: Optional[str] = None,
) -> MaskResult:
    """
    Match a raw value against a mask.

    Args:
        value: Raw user input; non-strings are converted with str()
        mask: Sequence of mask tokens, or a function deriving one from the value
        obfuscation_char: Replacement for obfuscated positions
        auto_complete: Append trailing literals once the input is exhausted
        validate: Custom validity check run on the unmasked value
        placeholder_char: Blank marker used in the placeholder

    Returns:
        MaskResult; never raises for malformed input
    """
    text = _to_text(value)
    tokens: Mask = list(mask(text) if callable(mask) else (mask or []))
    placeholder = build_placeholder(tokens, placeholder_char)

    if not tokens or not text:
        return MaskResult(
            masked=text,
            unmasked=text,
            obfuscated=text,
            mask_array=tokens,
            placeholder=placeholder,
            is_valid=True,
        )

    default_marker = (obfuscation_char or get_settings().obfuscation_character)[:1]
    masked = []
    unmasked = []
    obfuscated = []
    has_obfuscation = False
    mask_idx = 0
    value_idx = 0

    while mask_idx < len(tokens):
        token = tokens[mask_idx]

        if value_idx == len(text):
            if isinstance(token, Literal) and auto_complete:
                masked.append(token.char)
                obfuscated.append(token.char)
                mask_idx += 1
                continue
            break

        value_char = text[value_idx]

        if isinstance(token, Literal):
            masked.append(token.char)
            obfuscated.append(token.char)
            if token.char == value_char:
                value_idx += 1
            mask_idx += 1
            continue

        # Pattern tokens consume input whatever the outcome
        value_idx += 1
        if not token.test(value_char):
            continue
        masked.append(value_char)
        unmasked.append(value_char)
        if isinstance(token, ObfuscatedPattern):
            has_obfuscation = True
            obfuscated.append((token.marker or default_marker)[:1])
        else:
            obfuscated.append(value_char)
        mask_idx += 1

    unmasked_text = "".join(unmasked)
    if validate is not None:
        is_valid = bool(validate(unmasked_text))
    else:
        is_valid = mask_idx == len(tokens)

    return MaskResult(
        masked="".join(masked),
        unmasked=unmasked_text,
        obfuscated="".join(obfuscated),
        mask_array=tokens,
        has_obfuscation=has_obfuscation,
        placeholder=placeholder,
        is_valid=is_valid,
    )


def is_valid_mask(mask: Any) -> bool:
    """Check whether a mask is a token sequence or a mask function."""
    if callable(mask):
        return True
    if isinstance(mask, (list, tuple)):
        return all(isinstance(t, (Literal, Pattern, ObfuscatedPattern)) for t in mask)
    return False
