"""Real-driver registry entry backed by ``asyncpg``."""

from __future__ import annotations

from typing import Any, cast

import asyncpg
import structlog

from sqlmock.infra.logging.config import redact_dsn

LOGGER = structlog.get_logger(__name__)

POSTGRES_DRIVER_NAMES: tuple[str, ...] = ("postgresql", "postgres")


async def connect_postgres(dsn: str) -> asyncpg.Connection:
    """Open a real PostgreSQL connection for ``dsn``."""
    # SQLAlchemy-style DSNs ("postgresql+asyncpg://") are not understood by asyncpg.
    scheme, sep, rest = dsn.partition("://")
    if sep and "+" in scheme:
        dsn = f"{scheme.split('+', 1)[0]}://{rest}"
    _apg = cast(Any, asyncpg)
    connection = await _apg.connect(dsn=dsn)
    LOGGER.info("sqlmock.driver.postgres.connected", dsn=redact_dsn(dsn))
    return cast(asyncpg.Connection, connection)


__all__ = ["POSTGRES_DRIVER_NAMES", "connect_postgres"]
