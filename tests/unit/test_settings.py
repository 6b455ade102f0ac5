from __future__ import annotations

import pytest
from pydantic import ValidationError

from sqlmock.config.settings import SqlMockSettings, get_settings


@pytest.mark.unit
def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SQLMOCK_DRIVER_NAME", raising=False)
    monkeypatch.delenv("SQLMOCK_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SQLMOCK_REGISTER_POSTGRES", raising=False)

    settings = SqlMockSettings.model_validate({})

    assert settings.driver_name == "sqlmock"
    assert settings.log_level == "INFO"
    assert settings.register_postgres is True


@pytest.mark.unit
def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQLMOCK_DRIVER_NAME", " MockDB ")
    monkeypatch.setenv("SQLMOCK_LOG_LEVEL", "debug")
    monkeypatch.setenv("SQLMOCK_REGISTER_POSTGRES", "false")

    settings = SqlMockSettings.model_validate({})

    assert settings.driver_name == "mockdb"
    assert settings.log_level == "DEBUG"
    assert settings.register_postgres is False


@pytest.mark.unit
@pytest.mark.parametrize("name", ["not a scheme", "1sqlmock", "mock://"])
def test_driver_name_must_be_a_scheme(monkeypatch: pytest.MonkeyPatch, name: str) -> None:
    monkeypatch.setenv("SQLMOCK_DRIVER_NAME", name)
    with pytest.raises(ValidationError):
        SqlMockSettings.model_validate({})


@pytest.mark.unit
def test_unknown_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQLMOCK_LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError):
        SqlMockSettings.model_validate({})


@pytest.mark.unit
def test_get_settings_is_cached(fresh_settings: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQLMOCK_DRIVER_NAME", "cached")
    first = get_settings()
    monkeypatch.setenv("SQLMOCK_DRIVER_NAME", "changed")
    assert get_settings() is first
    assert first.driver_name == "cached"
