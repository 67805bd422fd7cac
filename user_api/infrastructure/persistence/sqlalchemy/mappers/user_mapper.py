"""
User entity to SQLAlchemy model mapper.

This module provides bidirectional mapping between the domain User entity and
the SQLAlchemy User model.
"""

from user_api.domain.entities.user import User
from user_api.infrastructure.persistence.sqlalchemy.models.user import UserModel


class UserMapper:
    """Maps between domain User entities and SQLAlchemy User models."""

    @staticmethod
    def to_domain(model: UserModel) -> User:
        """
        Convert a SQLAlchemy User model to a domain User entity.

        Args:
            model: SQLAlchemy User model instance

        Returns:
            Equivalent domain User entity
        """
        return User(
            id=model.id,
            name=model.name,
            surname=model.surname,
            email=model.email,
            gender=model.gender,
            roles=list(model.roles or []),
            note=model.note,
            active=model.active,
        )

    @staticmethod
    def to_persistence(entity: User) -> UserModel:
        """
        Convert a domain User entity to a new SQLAlchemy User model.

        Args:
            entity: Domain User entity

        Returns:
            SQLAlchemy User model instance
        """
        model = UserModel(id=entity.id)
        UserMapper.update_persistence_model(model, entity)
        return model

    @staticmethod
    def update_persistence_model(model: UserModel, entity: User) -> UserModel:
        """Copy the attributes of ``entity`` onto an existing model."""
        model.name = entity.name
        model.surname = entity.surname
        model.email = entity.email
        model.gender = entity.gender
        model.roles = list(entity.roles)
        model.note = entity.note
        model.active = entity.active
        return model
