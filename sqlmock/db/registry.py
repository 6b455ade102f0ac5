"""Process-wide driver registry.

Host code opens connections with :func:`connect` and never names a concrete
driver: the DSN scheme selects it. Tests point the DSN at the mock driver,
production points it at PostgreSQL, and the calling code stays the same.
"""

from __future__ import annotations

import threading
from typing import Any

import structlog

from sqlmock.config.settings import get_settings
from sqlmock.infra.logging.config import redact_dsn
from sqlmock.infra.types.db import DriverFactory

LOGGER = structlog.get_logger(__name__)


class DriverRegistry:
    """Maps driver names to connection factories."""

    def __init__(self) -> None:
        self._factories: dict[str, DriverFactory] = {}
        self._lock = threading.RLock()

    def register(self, name: str, factory: DriverFactory) -> None:
        """Register ``factory`` under ``name``.

        Raises:
            ValueError: If a driver is already registered under that name.
        """
        key = name.lower()
        with self._lock:
            if key in self._factories:
                raise ValueError(f"Driver {name!r} is already registered")
            self._factories[key] = factory
        LOGGER.debug("sqlmock.driver.registered", driver=key)

    def unregister(self, name: str) -> None:
        with self._lock:
            self._factories.pop(name.lower(), None)

    def resolve(self, name: str) -> DriverFactory:
        """Return the factory registered under ``name``.

        Raises:
            KeyError: If no driver is registered under that name.
        """
        with self._lock:
            try:
                return self._factories[name.lower()]
            except KeyError:
                known = ", ".join(sorted(self._factories)) or "none"
                raise KeyError(f"Driver {name!r} is not registered (known: {known})") from None

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name.lower() in self._factories

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._factories)


def driver_name_from_dsn(dsn: str) -> str:
    scheme, sep, _ = dsn.partition("://")
    if not sep or not scheme:
        raise ValueError(f"Cannot determine driver from DSN without a scheme: {dsn!r}")
    # SQLAlchemy-style "postgresql+asyncpg" selects the base driver.
    return scheme.split("+", 1)[0].lower()


_REGISTRY = DriverRegistry()


def get_registry() -> DriverRegistry:
    return _REGISTRY


async def connect(dsn: str, *, driver: str | None = None) -> Any:
    """Open a connection through whichever driver the DSN (or ``driver``) names."""
    name = driver or driver_name_from_dsn(dsn)
    factory = _REGISTRY.resolve(name)
    LOGGER.info("sqlmock.driver.connect", driver=name, dsn=redact_dsn(dsn))
    return await factory(dsn)


def _register_builtin_drivers(registry: DriverRegistry) -> None:
    from sqlmock.db.driver import get_mock_driver
    from sqlmock.db.postgres import POSTGRES_DRIVER_NAMES, connect_postgres

    settings = get_settings()
    registry.register(settings.driver_name, get_mock_driver().open)
    if settings.register_postgres:
        for name in POSTGRES_DRIVER_NAMES:
            registry.register(name, connect_postgres)


_register_builtin_drivers(_REGISTRY)


__all__ = [
    "DriverRegistry",
    "connect",
    "driver_name_from_dsn",
    "get_registry",
]
