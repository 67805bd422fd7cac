"""
SQLAlchemy model for user data.

This module defines the persistence model of the User resource. The domain
entity lives in ``user_api.domain.entities.user``; the repository converts
between the two through ``UserMapper``.
"""

import logging

from sqlalchemy import Boolean, Column, Enum, Index, String, Text, Uuid

from user_api.domain.enums import Gender, Role
from user_api.domain.utils.identifiers import uuid7
from user_api.domain.validation.user_constraints import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SURNAME_MAX_LENGTH,
)
from user_api.infrastructure.persistence.sqlalchemy.config.base import Base, TimestampMixin
from user_api.infrastructure.persistence.sqlalchemy.types import SimpleArray

logger = logging.getLogger(__name__)


class UserModel(Base, TimestampMixin):
    """SQLAlchemy model of a registered user."""

    __tablename__ = "users"
    __table_args__ = (
        Index("i_users_gender", "gender"),
        Index("i_users_active", "active"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid7, comment="Time-ordered UUID v7")
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    surname = Column(String(SURNAME_MAX_LENGTH), nullable=False)
    # Unique index settles concurrent registrations of the same email
    email = Column(String(EMAIL_MAX_LENGTH), nullable=False, unique=True)
    gender = Column(
        Enum(Gender, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    roles = Column(SimpleArray(Role), nullable=False, comment="Comma separated role values")
    note = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email})>"
