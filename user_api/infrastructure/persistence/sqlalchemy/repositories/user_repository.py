"""
User repository implementation using SQLAlchemy.

This module implements the UserRepository interface for persisting and retrieving
User entities with an async SQLAlchemy session.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import false, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.exceptions import DuplicateEntityError
from user_api.domain.entities.user import User
from user_api.domain.enums import Gender
from user_api.domain.repositories.user_repository import UserRepository
from user_api.domain.utils.datetime_utils import now_utc
from user_api.domain.value_objects.collection_query import CollectionQuery, SortDirection
from user_api.infrastructure.persistence.sqlalchemy.mappers.user_mapper import UserMapper
from user_api.infrastructure.persistence.sqlalchemy.models.user import UserModel

logger = logging.getLogger(__name__)


class SQLAlchemyUserRepository(UserRepository):
    """
    SQLAlchemy implementation of the UserRepository interface.

    The repository commits its own writes: every save or remove is a single
    row transaction.
    """

    def __init__(self, db_session: AsyncSession) -> None:
        """
        Initialize the repository.

        Args:
            db_session: The async session used for every operation
        """
        self._session = db_session

    async def get_by_id(self, user_id: UUID) -> User | None:
        """
        Retrieve a user by their ID.

        Args:
            user_id: The ID of the user to retrieve

        Returns:
            The User domain entity, or None if not found
        """
        model = await self._session.get(UserModel, user_id)
        if model is None:
            logger.debug(f"User {user_id} not found")
            return None
        return UserMapper.to_domain(model)

    async def find_by_unique_field(self, field: str, value: Any) -> User | None:
        if field not in self.UNIQUE_FIELDS:
            raise ValueError(f'"{field}" is not a unique attribute of users')

        stmt = select(UserModel).where(getattr(UserModel, field) == value)
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return UserMapper.to_domain(model) if model is not None else None

    async def save(self, user: User) -> User:
        """
        Insert or update a user.

        Args:
            user: The domain User entity to persist

        Returns:
            The persisted User domain entity

        Raises:
            DuplicateEntityError: If the email is already stored for another user
            SQLAlchemyError: If there's an error during database operations
        """
        try:
            model = await self._session.get(UserModel, user.id)
            if model is None:
                model = UserMapper.to_persistence(user)
                model.created_at = now_utc()
                model.updated_at = now_utc()
                self._session.add(model)
                logger.info(f"Creating user {user.id}")
            else:
                UserMapper.update_persistence_model(model, user)
                model.updated_at = now_utc()
                logger.info(f"Updating user {user.id}")

            await self._session.commit()
            await self._session.refresh(model)
            return UserMapper.to_domain(model)
        except IntegrityError as e:
            logger.warning(f"Integrity error when saving user {user.id}: {e}")
            await self._session.rollback()
            raise DuplicateEntityError(field="email", detail=str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error when saving user {user.id}: {e}")
            await self._session.rollback()
            raise

    async def remove(self, user: User) -> None:
        try:
            model = await self._session.get(UserModel, user.id)
            if model is None:
                logger.debug(f"User {user.id} already removed")
                return
            await self._session.delete(model)
            await self._session.commit()
            logger.info(f"Removed user {user.id}")
        except SQLAlchemyError as e:
            logger.error(f"Database error when removing user {user.id}: {e}")
            await self._session.rollback()
            raise

    async def find_all(self, query: CollectionQuery) -> tuple[list[User], int]:
        """
        Retrieve one page of users.

        Args:
            query: Pagination, ordering and filtering options

        Returns:
            The users of the page and the number of users matching the filters
        """
        stmt = select(UserModel)

        for field, value in query.exact_filters:
            if field == "gender" and value not in {g.value for g in Gender}:
                stmt = stmt.where(false())
                continue
            stmt = stmt.where(getattr(UserModel, field) == value)
        for field, value in query.partial_filters:
            stmt = stmt.where(getattr(UserModel, field).contains(value, autoescape=True))

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self._session.execute(count_stmt)).scalar_one()

        for field, direction in query.order_by:
            column = getattr(UserModel, field)
            stmt = stmt.order_by(column.desc() if direction is SortDirection.DESC else column.asc())
        # UUID v7 order is creation order
        stmt = stmt.order_by(UserModel.id.asc())
        stmt = stmt.offset(query.offset).limit(query.page_size)

        result = await self._session.execute(stmt)
        users = [UserMapper.to_domain(model) for model in result.scalars().all()]
        logger.debug(f"Loaded {len(users)} of {total} users (page {query.page_number})")
        return users, total
