"""Shared fixtures."""

from typing import Iterator

import pytest

from input_masking.core.interfaces import CurrencyOptions
from input_masking.core.session import SessionDefaults, set_session


@pytest.fixture(autouse=True)
def reset_session() -> Iterator[None]:
    """Give every test a fresh settings-derived session."""
    set_session(None)
    yield
    set_session(None)


@pytest.fixture
def usd_session() -> SessionDefaults:
    """Session configured with dollar defaults."""
    session = SessionDefaults(
        CurrencyOptions(
            symbol="$",
            decimal_digits=2,
            thousand_separator=",",
            decimal_separator=".",
            format="%v %s",
        )
    )
    set_session(session)
    return session


@pytest.fixture
def fcfa_session() -> SessionDefaults:
    """Session configured with the FCFA defaults."""
    session = SessionDefaults(
        CurrencyOptions(
            symbol="FCFA",
            decimal_digits=0,
            thousand_separator=" ",
            decimal_separator=".",
            format="%v %s",
        )
    )
    set_session(session)
    return session
