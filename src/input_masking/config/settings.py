"""Application settings using pydantic-settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_CURRENCY_FORMAT,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_DECIMAL_DIGITS,
    DEFAULT_DECIMAL_SEPARATOR,
    DEFAULT_LOCALE,
    DEFAULT_OBFUSCATION_CHARACTER,
    DEFAULT_PHONE_EXAMPLES_PATH,
    DEFAULT_PLACEHOLDER_CHARACTER,
    DEFAULT_THOUSAND_SEPARATOR,
)


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Session currency
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    currency_format: str = DEFAULT_CURRENCY_FORMAT
    decimal_separator: str = DEFAULT_DECIMAL_SEPARATOR
    thousand_separator: str = DEFAULT_THOUSAND_SEPARATOR
    decimal_digits: int = DEFAULT_DECIMAL_DIGITS
    currency_code: Optional[str] = None
    locale: str = DEFAULT_LOCALE

    # Masking
    placeholder_character: str = DEFAULT_PLACEHOLDER_CHARACTER
    obfuscation_character: str = DEFAULT_OBFUSCATION_CHARACTER
    phone_examples_file: str = DEFAULT_PHONE_EXAMPLES_PATH

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    max_value_length: int = 256

    # Logging
    log_level: str = "INFO"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
