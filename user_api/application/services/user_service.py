"""
UserService implementation.

This service applies the write rules of the User resource before delegating
to the repository:

* an update may not change the resource identifier,
* submitted values must satisfy the attribute constraints,
* textual attributes are trimmed of surrounding whitespace,
* an email address may belong to one user only.
"""

import logging
from typing import Any
from uuid import UUID

from user_api.core.exceptions import (
    ConstraintViolation,
    DuplicateEntityError,
    IdentifierModificationException,
    ResourceNotFoundException,
    ValidationException,
)
from user_api.domain.entities.user import User
from user_api.domain.repositories.user_repository import UserRepository
from user_api.domain.utils.identifiers import parse_identifier, uuid7
from user_api.domain.utils.text_utils import mb_trim
from user_api.domain.validation.user_constraints import (
    ATTRIBUTE_ORDER,
    EMAIL_ALREADY_USED_MESSAGE,
    validate_user,
)
from user_api.domain.value_objects.collection_query import CollectionQuery

logger = logging.getLogger(__name__)

TEXTUAL_ATTRIBUTES = ("name", "surname", "email", "note")

# Attributes a freshly created or fully replaced user starts from
DEFAULT_STATE: dict[str, Any] = {"roles": [], "note": None}


class UserService:
    """
    Service for managing users.

    Orchestrates validation, normalization and the repository for every
    operation of the User resource.
    """

    def __init__(self, user_repository: UserRepository):
        """
        Initialize the service.

        Args:
            user_repository: Repository users are loaded from and stored in
        """
        self.user_repository = user_repository

    async def get_user(self, user_id: str | UUID) -> User:
        """
        Load a user.

        Args:
            user_id: Identifier taken from the request path

        Returns:
            The stored user

        Raises:
            ResourceNotFoundException: If the identifier is malformed or unknown
        """
        identifier = parse_identifier(user_id)
        user = await self.user_repository.get_by_id(identifier) if identifier else None
        if user is None:
            logger.info(f"User {user_id} not found")
            raise ResourceNotFoundException()
        return user

    async def list_users(self, query: CollectionQuery) -> tuple[list[User], int]:
        return await self.user_repository.find_all(query)

    async def create_user(self, changes: dict[str, Any]) -> User:
        """
        Create a user from submitted attribute values.

        Args:
            changes: Submitted attributes; a submitted ``id`` is ignored

        Returns:
            The created user

        Raises:
            ValidationException: If any attribute constraint is violated
        """
        state = {**DEFAULT_STATE, **self._without_identifier(changes), "id": uuid7()}
        user = await self._persist(state)
        logger.info(f"Created user {user.id}")
        return user

    async def replace_user(
        self, user_id: str, changes: dict[str, Any], submitted_id: Any = None
    ) -> User:
        """
        Replace every attribute of a user.

        Attributes missing from ``changes`` are treated as absent, so required
        ones are reported as blank.

        Raises:
            ResourceNotFoundException: If the user does not exist
            IdentifierModificationException: If ``submitted_id`` differs from ``user_id``
            ValidationException: If any attribute constraint is violated
        """
        current = await self.get_user(user_id)
        self.prevent_identifier_modification(current.id, submitted_id)

        state = {**DEFAULT_STATE, **self._without_identifier(changes), "id": current.id}
        user = await self._persist(state)
        logger.info(f"Replaced user {user.id}")
        return user

    async def update_user(
        self, user_id: str, changes: dict[str, Any], submitted_id: Any = None
    ) -> User:
        """
        Merge submitted attributes into a stored user.

        Raises:
            ResourceNotFoundException: If the user does not exist
            IdentifierModificationException: If ``submitted_id`` differs from ``user_id``
            ValidationException: If any attribute constraint is violated
        """
        current = await self.get_user(user_id)
        self.prevent_identifier_modification(current.id, submitted_id)

        state = {**current.model_dump(), **self._without_identifier(changes), "id": current.id}
        user = await self._persist(state)
        logger.info(f"Updated user {user.id} ({', '.join(sorted(changes)) or 'no changes'})")
        return user

    async def delete_user(self, user_id: str) -> None:
        """
        Delete a user.

        Raises:
            ResourceNotFoundException: If the user does not exist
        """
        user = await self.get_user(user_id)
        await self.user_repository.remove(user)
        logger.info(f"Deleted user {user.id}")

    @staticmethod
    def prevent_identifier_modification(current_id: UUID, submitted_id: Any) -> None:
        """
        Refuse a submitted identifier that differs from the stored one.

        Raises:
            IdentifierModificationException: If the identifiers differ
        """
        if submitted_id is None:
            return
        parsed = parse_identifier(submitted_id)
        submitted = str(parsed) if parsed is not None else str(submitted_id)
        if submitted != str(current_id):
            logger.warning(f"Refused identifier change of user {current_id} to {submitted_id!r}")
            raise IdentifierModificationException()

    @staticmethod
    def trim_textual_attributes(state: dict[str, Any]) -> dict[str, Any]:
        """Trim every non-null textual attribute of ``state`` in place."""
        for attribute in TEXTUAL_ATTRIBUTES:
            value = state.get(attribute)
            if isinstance(value, str):
                state[attribute] = mb_trim(value)
        return state

    async def _persist(self, state: dict[str, Any]) -> User:
        violations = validate_user(state)
        self.trim_textual_attributes(state)

        if not any(v.property_path == "email" for v in violations):
            if await self._email_taken(state["email"], state["id"]):
                violations.append(ConstraintViolation("email", EMAIL_ALREADY_USED_MESSAGE))

        if violations:
            violations.sort(key=lambda v: ATTRIBUTE_ORDER.index(v.property_path))
            logger.info(
                f"Rejected user {state['id']} with {len(violations)} violation(s): "
                f"{', '.join(sorted({v.property_path for v in violations}))}"
            )
            raise ValidationException(violations)

        user = User(**state)
        try:
            return await self.user_repository.save(user)
        except DuplicateEntityError as e:
            logger.info(f"Store rejected duplicate {e.field} of user {user.id}")
            raise ValidationException(
                [ConstraintViolation(e.field, EMAIL_ALREADY_USED_MESSAGE)]
            ) from e

    async def _email_taken(self, email: str, user_id: UUID) -> bool:
        owner = await self.user_repository.find_by_unique_field("email", email)
        return owner is not None and owner.id != user_id

    @staticmethod
    def _without_identifier(changes: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in changes.items() if key != "id"}
