"""
Global test configuration for the entire test suite.

Provides test settings backed by a per-test SQLite file, an application whose
lifespan has been entered, an HTTP client bound to it, and the reference set
of five stored users.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.app_factory import create_application
from user_api.core.config.settings import Settings
from user_api.domain.entities.user import User
from user_api.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    SQLAlchemyUserRepository,
)
from user_api.tests.factories import build_reference_users

logger = logging.getLogger(__name__)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a fresh SQLite database file."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'users_test.db'}",
        API_PREFIX="/api",
        DEFAULT_PAGE_SIZE=10,
        MAX_PAGE_SIZE=1000,
        SENTRY_DSN=None,
        LOG_LEVEL="WARNING",
    )


@asynccontextmanager
async def lifespan_wrapper(app: FastAPI) -> AsyncGenerator[None, None]:
    """Runs the app's lifespan startup and shutdown."""
    async with app.router.lifespan_context(app):
        yield


@pytest_asyncio.fixture
async def app_instance(test_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    app = create_application(settings_override=test_settings)
    async with lifespan_wrapper(app):
        yield app


@pytest_asyncio.fixture
async def client(app_instance: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app_instance), base_url="http://test"
    ) as async_client:
        yield async_client


@pytest_asyncio.fixture
async def db_session(app_instance: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    async with app_instance.state.actual_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def reference_users(db_session: AsyncSession) -> dict[str, User]:
    """Store the reference users; keyed by the letter of their surname."""
    repository = SQLAlchemyUserRepository(db_session)
    stored = {}
    for user in build_reference_users():
        saved = await repository.save(user)
        stored[saved.surname[-1]] = saved
    logger.debug(f"Stored {len(stored)} reference users")
    return stored
