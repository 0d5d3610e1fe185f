"""Session defaults for currency and number rendering.

The holder is the only long-lived state of the package. Reads return a
copy, writes are serialized with a lock; the last write wins.
"""

import logging
import threading
from dataclasses import fields
from typing import Any, Mapping, Optional, Union

from ..config.constants import VALUE_PLACEHOLDER
from ..config.settings import Settings, get_settings
from .exceptions import UnknownCurrencyError
from .interfaces import CurrencyOptions

logger = logging.getLogger(__name__)

_OPTION_FIELDS = frozenset(f.name for f in fields(CurrencyOptions))


def currency_options(code: str, locale: Optional[str] = None) -> CurrencyOptions:
    """
    Build currency options for an ISO 4217 code.

    Args:
        code: Currency code such as "USD" or "eur"
        locale: Babel locale used for symbol and separators

    Returns:
        CurrencyOptions resolved from CLDR data

    Raises:
        UnknownCurrencyError: If Babel does not know the code or locale
    """
    from babel import Locale, UnknownLocaleError
    from babel.numbers import (
        get_currency_name,
        get_currency_precision,
        get_currency_symbol,
        get_decimal_symbol,
        get_group_symbol,
    )

    locale = locale or get_settings().locale
    code = (code or "").strip().upper()
    try:
        loc = Locale.parse(locale)
    except (UnknownLocaleError, ValueError) as e:
        raise UnknownCurrencyError(f"Unknown locale '{locale}': {e}")

    # Babel echoes unknown codes back as their own name
    if len(code) != 3 or get_currency_name(code, locale=loc) == code:
        raise UnknownCurrencyError(f"Unknown currency code: {code!r}")

    return CurrencyOptions(
        symbol=get_currency_symbol(code, locale=loc),
        decimal_digits=get_currency_precision(code),
        thousand_separator=get_group_symbol(loc),
        decimal_separator=get_decimal_symbol(loc),
        format=get_settings().currency_format,
    )


class SessionDefaults:
    """Process-wide fallback currency configuration."""

    def __init__(self, currency: Optional[CurrencyOptions] = None) -> None:
        self._lock = threading.Lock()
        self._currency = (currency or CurrencyOptions()).copy()
        self._format: str = ""

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SessionDefaults":
        """Seed a holder from application settings."""
        settings = settings or get_settings()
        if settings.currency_code:
            currency = currency_options(settings.currency_code, settings.locale)
        else:
            currency = CurrencyOptions(
                symbol=settings.currency_symbol,
                decimal_digits=settings.decimal_digits,
                thousand_separator=settings.thousand_separator,
                decimal_separator=settings.decimal_separator,
                format=settings.currency_format,
            )
        return cls(currency)

    def get_currency(self) -> CurrencyOptions:
        """Return a copy of the current currency options."""
        with self._lock:
            currency = self._currency.copy()
            session_format = self._format
        if session_format and VALUE_PLACEHOLDER in session_format:
            currency.format = session_format
        return currency

    def get_format(self, force: bool = True) -> str:
        """Return the session format override, or the currency template when forced."""
        with self._lock:
            session_format = self._format
            currency_format = self._currency.format
        if session_format and VALUE_PLACEHOLDER in session_format:
            return session_format
        return currency_format if force else ""

    def set_format(self, format: Optional[str]) -> str:
        """Set a session-wide template override; empty clears it."""
        format = format.strip() if isinstance(format, str) else ""
        with self._lock:
            self._format = format
        logger.info("Session currency format set to %r", format)
        return format

    def set_currency(
        self, currency: Union[CurrencyOptions, Mapping[str, Any], str]
    ) -> CurrencyOptions:
        """
        Replace the session currency.

        Args:
            currency: Options object, mapping of option fields, or ISO code

        Returns:
            The stored currency options

        Raises:
            UnknownCurrencyError: If a code cannot be resolved
        """
        if isinstance(currency, CurrencyOptions):
            options = currency.copy()
        elif isinstance(currency, Mapping):
            base = CurrencyOptions()
            options = base.copy(
                **{k: v for k, v in currency.items() if k in _OPTION_FIELDS and v is not None}
            )
        else:
            options = currency_options(str(currency))
        with self._lock:
            self._currency = options
        logger.info("Session currency set to %s", options)
        return self.get_currency()

    def update(self, **changes: Any) -> CurrencyOptions:
        """Overlay individual option fields onto the session currency."""
        unknown = set(changes) - _OPTION_FIELDS
        if unknown:
            raise TypeError(f"Unknown currency option(s): {', '.join(sorted(unknown))}")
        with self._lock:
            self._currency = self._currency.copy(
                **{k: v for k, v in changes.items() if v is not None}
            )
        return self.get_currency()

    def reset(self, settings: Optional[Settings] = None) -> None:
        """Restore the settings-derived defaults."""
        fresh = SessionDefaults.from_settings(settings)
        with self._lock:
            self._currency = fresh._currency
            self._format = ""


_session: Optional[SessionDefaults] = None
_session_lock = threading.Lock()


def get_session() -> SessionDefaults:
    """Get the process session, creating it from settings on first use."""
    global _session
    if _session is None:
        with _session_lock:
            if _session is None:
                _session = SessionDefaults.from_settings()
    return _session


def set_session(session: Optional[SessionDefaults]) -> None:
    """Swap the process session; None recreates it from settings on next use."""
    global _session
    with _session_lock:
        _session = session
