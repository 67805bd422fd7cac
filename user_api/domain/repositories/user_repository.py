"""
User Repository domain interface.

This module defines the repository interface for User entities in the domain layer,
following the Repository pattern from Domain-Driven Design to abstract data access operations.
"""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from user_api.domain.entities.user import User
from user_api.domain.value_objects.collection_query import CollectionQuery


class UserRepository(ABC):
    """
    Repository interface for User entities in the domain layer.

    Concrete implementations decide how users are stored; the application
    layer only relies on this contract.
    """

    UNIQUE_FIELDS: tuple[str, ...] = ("id", "email")

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> User | None:
        """
        Retrieve a user by their unique ID.

        Args:
            user_id: The UUID of the user to retrieve

        Returns:
            The User entity if found, None otherwise
        """

    @abstractmethod
    async def find_by_unique_field(self, field: str, value: Any) -> User | None:
        """
        Retrieve the user holding ``value`` in a unique attribute.

        Args:
            field: Name of a unique attribute, one of ``UNIQUE_FIELDS``
            value: The value to look up

        Returns:
            The User entity if found, None otherwise

        Raises:
            ValueError: If ``field`` is not a unique attribute
        """

    @abstractmethod
    async def save(self, user: User) -> User:
        """
        Insert ``user`` or update the stored user with the same ID.

        Args:
            user: The entity to persist

        Returns:
            The persisted User entity

        Raises:
            DuplicateEntityError: If a unique constraint rejects the write
        """

    @abstractmethod
    async def remove(self, user: User) -> None:
        """
        Delete ``user``.

        Args:
            user: The entity to delete
        """

    @abstractmethod
    async def find_all(self, query: CollectionQuery) -> tuple[list[User], int]:
        """
        Retrieve one page of users.

        Args:
            query: Pagination, ordering and filtering options

        Returns:
            The users of the requested page and the total number of matches
        """
