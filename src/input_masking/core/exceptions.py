"""Custom exceptions for input masking and formatting.

Formatting and matching never raise on malformed input; these errors are
reserved for configuration problems.
"""


class InputMaskingError(Exception):
    """Base exception for all input masking errors."""

    pass


class ConfigurationError(InputMaskingError):
    """Raised when settings or bundled data files cannot be loaded."""

    pass


class UnknownCurrencyError(ConfigurationError):
    """Raised when a currency code cannot be resolved."""

    pass
