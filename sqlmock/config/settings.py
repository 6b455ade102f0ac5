from __future__ import annotations

import logging
import re
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$")


class SqlMockSettings(BaseSettings):
    """Process-wide settings for the mock driver."""

    model_config = SettingsConfigDict(
        env_prefix="SQLMOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    driver_name: str = Field(default="sqlmock", min_length=1)
    log_level: str = Field(default="INFO")
    register_postgres: bool = Field(default=True)

    @field_validator("driver_name")
    @classmethod
    def validate_driver_name(cls, v: str) -> str:
        """The driver name doubles as a DSN scheme, so it must be a valid one."""
        name = v.strip().lower()
        if not _SCHEME_RE.match(name):
            raise ValueError(f"SQLMOCK_DRIVER_NAME must be a valid URL scheme, got {v!r}")
        return name

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> SqlMockSettings:
    return SqlMockSettings()
