from __future__ import annotations

from collections.abc import Iterator

import pytest
from faker import Faker

from sqlmock.config.settings import get_settings
from sqlmock.engine.session import MockSession


@pytest.fixture
def faker() -> Faker:
    """Provide a Faker instance for generated argument values."""
    return Faker()


@pytest.fixture
def session() -> MockSession:
    """A standalone mock session, not registered with the driver."""
    return MockSession("sqlmock://unit")


@pytest.fixture
def fresh_settings() -> Iterator[None]:
    """Drop the cached settings so environment changes take effect."""
    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()
