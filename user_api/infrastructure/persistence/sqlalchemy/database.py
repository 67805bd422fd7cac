"""
SQLAlchemy database access module.

Engine and session factory construction, schema creation, and the FastAPI
dependency that hands one session to each request.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from user_api.core.config import Settings
from user_api.infrastructure.persistence.sqlalchemy.config.base import Base

# Register models on Base.metadata
import user_api.infrastructure.persistence.sqlalchemy.models  # noqa: F401

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Create the async engine described by ``settings``.

    Args:
        settings: Application settings

    Returns:
        AsyncEngine: The configured engine
    """
    engine_args: dict[str, Any] = {"echo": settings.DB_ECHO_LOG}

    if settings.is_sqlite:
        # SQLite-specific settings (no pooling options)
        engine_args["connect_args"] = {"check_same_thread": False}
    else:
        engine_args.update(
            {
                "pool_pre_ping": True,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_recycle": 300,
            }
        )

    logger.info(f"Creating AsyncEngine for {settings.ASYNC_DATABASE_URL}")
    return create_async_engine(settings.ASYNC_DATABASE_URL, **engine_args)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table registered on ``Base.metadata`` that does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get an async session from the FastAPI app state.

    Args:
        request: The FastAPI request

    Yields:
        AsyncSession: An async SQLAlchemy session

    Raises:
        RuntimeError: If the session factory is not available on app state
    """
    session_factory = getattr(request.app.state, "actual_session_factory", None)
    if session_factory is None:
        logger.error("Database session factory not found on app.state")
        raise RuntimeError("Database not initialized. Session factory missing from app state.")

    session = session_factory()
    try:
        yield session
    except SQLAlchemyError as e:
        logger.error(f"Database session error: {e}", exc_info=True)
        await session.rollback()
        raise
    finally:
        await session.close()
