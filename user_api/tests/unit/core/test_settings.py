"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from user_api.core.config.settings import Settings, get_settings, settings


@pytest.mark.parametrize(
    "database_url, expected",
    [
        ("sqlite:///./users.db", "sqlite+aiosqlite:///./users.db"),
        ("postgresql://user:pass@db/users", "postgresql+asyncpg://user:pass@db/users"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_async_database_url_is_derived(database_url, expected):
    assert Settings(DATABASE_URL=database_url).ASYNC_DATABASE_URL == expected


def test_explicit_async_database_url_is_kept():
    configured = Settings(DATABASE_URL="sqlite:///a.db", ASYNC_DATABASE_URL="sqlite+aiosqlite:///b.db")

    assert configured.ASYNC_DATABASE_URL == "sqlite+aiosqlite:///b.db"
    assert configured.is_sqlite


def test_postgres_is_not_sqlite():
    assert not Settings(DATABASE_URL="postgresql://db/users").is_sqlite


def test_log_level_is_normalized():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_unknown_log_level_is_refused():
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="verbose")


def test_default_page_size_must_fit_maximum():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_PAGE_SIZE=50, MAX_PAGE_SIZE=20)


@pytest.mark.parametrize("size", [0, -5])
def test_page_size_must_be_positive(size):
    with pytest.raises(ValidationError):
        Settings(DEFAULT_PAGE_SIZE=size)


def test_debug_is_disabled_outside_development():
    assert Settings(ENVIRONMENT="production", DEBUG=True).DEBUG is False
    assert Settings(ENVIRONMENT="development", DEBUG=True).DEBUG is True


def test_get_settings_returns_global_instance():
    assert get_settings() is settings
