"""
Runtime configuration of the User API.

Values come from the environment or a ``.env`` file: server and CORS options,
the database URL, collection page sizes, logging and Sentry.
"""

import logging
from typing import Self

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables; names are case sensitive."""

    # API Information
    API_TITLE: str = "User API"
    API_DESCRIPTION: str = "User registry with validated CRUD, pagination, filtering and sorting"
    API_VERSION: str = "0.1.0"

    # Environment
    ENVIRONMENT: str = "development"  # development, test, production
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Server Settings
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8000
    UVICORN_WORKERS: int = 1

    # CORS Settings
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8000"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Database Settings
    DATABASE_URL: str = "sqlite:///./users.db"
    ASYNC_DATABASE_URL: str | None = None  # Derived from DATABASE_URL if None
    DB_ECHO_LOG: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Collection Settings
    DEFAULT_PAGE_SIZE: int = Field(default=10, gt=0)
    MAX_PAGE_SIZE: int = Field(default=1000, gt=0)

    # Logging Settings
    LOG_LEVEL: str = "INFO"

    # Monitoring and Error Tracking (Sentry)
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.2

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard level names in any case, stored upper case."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def ensure_async_database_url(self) -> Self:
        """Derive the async driver URL and check the page size limits."""
        if not self.ASYNC_DATABASE_URL:
            db_url = self.DATABASE_URL
            # A SQLite URL without an async driver gets aiosqlite
            if db_url.startswith("sqlite:///"):
                self.ASYNC_DATABASE_URL = db_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
            elif db_url.startswith("postgresql://"):
                self.ASYNC_DATABASE_URL = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
            else:
                self.ASYNC_DATABASE_URL = db_url
            logger.debug(f"Set ASYNC_DATABASE_URL to {self.ASYNC_DATABASE_URL} based on DATABASE_URL")

        if self.DEFAULT_PAGE_SIZE > self.MAX_PAGE_SIZE:
            raise ValueError("DEFAULT_PAGE_SIZE must not exceed MAX_PAGE_SIZE")

        if self.ENVIRONMENT in ("production", "test"):
            self.DEBUG = False

        return self

    @property
    def is_sqlite(self) -> bool:
        return bool(self.ASYNC_DATABASE_URL and self.ASYNC_DATABASE_URL.startswith("sqlite"))


# Settings of the running process
settings = Settings()


def get_settings() -> Settings:
    """
    Return the application settings.

    This function enables dependency injection of settings in FastAPI; tests
    pass their own instance to ``create_application`` instead.

    Returns:
        The application settings instance
    """
    return settings
