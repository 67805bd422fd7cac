"""
SQLAlchemy base configuration.

This module provides the declarative base for SQLAlchemy models
and the timestamp mixin shared by them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, MetaData
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import func

if TYPE_CHECKING:
    from sqlalchemy.orm import Mapped

# Deterministic constraint names across dialects
NAMING_CONVENTION = {
    "ix": "i_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase, AsyncAttrs):
    """
    SQLAlchemy 2.0 declarative base with async support.

    Combines DeclarativeBase for proper typing with AsyncAttrs for async
    attribute loading.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class TimestampMixin:
    """Mixin adding created_at and updated_at timestamps to models."""

    if TYPE_CHECKING:
        created_at: Mapped[DateTime]
        updated_at: Mapped[DateTime]
    else:
        created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
        updated_at = Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )
