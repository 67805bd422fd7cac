"""
Unit tests for the UserService.

The repository is replaced by an in-memory implementation so the write rules
(identifier immutability, validation, trimming, email uniqueness) are tested
without a database.
"""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from user_api.application.services.user_service import UserService
from user_api.core.exceptions import (
    DuplicateEntityError,
    IdentifierModificationException,
    ResourceNotFoundException,
    ValidationException,
)
from user_api.domain.entities.user import User
from user_api.domain.enums import Gender, Role
from user_api.domain.repositories.user_repository import UserRepository
from user_api.domain.value_objects.collection_query import CollectionQuery
from user_api.tests.factories import build_reference_users

NBSP = chr(0xA0)


class InMemoryUserRepository(UserRepository):
    """Dictionary backed repository keeping users in insertion order."""

    def __init__(self, users: list[User] | None = None):
        self.users: dict[UUID, User] = {user.id: user for user in users or []}

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    async def find_by_unique_field(self, field: str, value: Any) -> User | None:
        if field not in self.UNIQUE_FIELDS:
            raise ValueError(field)
        return next((u for u in self.users.values() if getattr(u, field) == value), None)

    async def save(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def remove(self, user: User) -> None:
        self.users.pop(user.id, None)

    async def find_all(self, query: CollectionQuery) -> tuple[list[User], int]:
        users = list(self.users.values())
        return users[query.offset : query.offset + query.page_size], len(users)


def changes(**overrides: Any) -> dict[str, Any]:
    values = {
        "name": "Emily-rose",
        "surname": "Dolor",
        "email": "emily.rose@foo.local",
        "gender": Gender.FEMALE,
        "roles": [Role.USER],
        "active": True,
    }
    values.update(overrides)
    return values


@pytest.fixture
def reference_users() -> list[User]:
    return build_reference_users()


@pytest.fixture
def repository(reference_users) -> InMemoryUserRepository:
    return InMemoryUserRepository(reference_users)


@pytest.fixture
def service(repository) -> UserService:
    return UserService(repository)


@pytest.mark.asyncio
class TestCreateUser:
    async def test_creates_user_with_new_identifier(self, service, repository):
        user = await service.create_user(changes(note="Lorem."))

        assert user.id.version == 7
        assert repository.users[user.id] == user
        assert user.note == "Lorem."

    async def test_submitted_identifier_is_ignored(self, service, reference_users):
        taken = reference_users[0].id

        user = await service.create_user(changes(id=str(taken)))

        assert user.id != taken

    async def test_missing_note_defaults_to_none(self, service):
        user = await service.create_user(changes())

        assert user.note is None

    async def test_empty_submission_reports_every_required_attribute(self, service):
        with pytest.raises(ValidationException) as exc_info:
            await service.create_user({})

        assert [v.property_path for v in exc_info.value.violations] == [
            "name",
            "surname",
            "email",
            "gender",
            "roles",
            "active",
        ]
        assert exc_info.value.status_code == 422

    async def test_textual_attributes_are_trimmed_after_validation(self, service):
        user = await service.create_user(
            changes(email=f"{NBSP}emily.rose@foo.local\t", note=f"  Lorem ipsum.{NBSP}")
        )

        assert user.email == "emily.rose@foo.local"
        assert user.note == "Lorem ipsum."

    async def test_leading_whitespace_in_name_is_rejected(self, service):
        with pytest.raises(ValidationException) as exc_info:
            await service.create_user(changes(name=" Emily"))

        assert [v.property_path for v in exc_info.value.violations] == ["name"]

    async def test_email_of_another_user_is_rejected(self, service):
        with pytest.raises(ValidationException) as exc_info:
            await service.create_user(changes(email="test.user.a@foo.local"))

        violation = exc_info.value.violations[0]
        assert violation.property_path == "email"
        assert violation.message == "This value is already used."

    async def test_email_is_compared_after_trimming(self, service):
        with pytest.raises(ValidationException):
            await service.create_user(changes(email=" test.user.a@foo.local "))

    async def test_duplicate_reported_by_store_becomes_violation(self, reference_users):
        repository = InMemoryUserRepository(reference_users)
        repository.save = AsyncMock(side_effect=DuplicateEntityError("email"))
        service = UserService(repository)

        with pytest.raises(ValidationException) as exc_info:
            await service.create_user(changes())

        assert exc_info.value.violations[0].message == "This value is already used."


@pytest.mark.asyncio
class TestReadAndDelete:
    async def test_get_user(self, service, reference_users):
        user = await service.get_user(str(reference_users[1].id))

        assert user == reference_users[1]

    @pytest.mark.parametrize("user_id", ["none", "", "0190a4b8-0000-7000-8000-000000000000"])
    async def test_unknown_or_malformed_identifier(self, service, user_id):
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await service.get_user(user_id)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Invalid identifier value or configuration."

    async def test_delete_user(self, service, repository, reference_users):
        await service.delete_user(str(reference_users[2].id))

        assert reference_users[2].id not in repository.users

    async def test_list_users_returns_page_and_total(self, service):
        users, total = await service.list_users(CollectionQuery(page_size=2, page_number=3))

        assert total == 5
        assert [u.surname for u in users] == ["User E"]


@pytest.mark.asyncio
class TestUpdateUser:
    async def test_empty_patch_keeps_the_user(self, service, reference_users):
        current = reference_users[3]

        user = await service.update_user(str(current.id), {})

        assert user == current

    async def test_patch_merges_submitted_attributes(self, service, reference_users):
        current = reference_users[3]

        user = await service.update_user(str(current.id), {"note": None, "active": False})

        assert user.note is None
        assert user.active is False
        assert user.roles == current.roles

    async def test_patch_with_same_identifier(self, service, reference_users):
        current = reference_users[0]

        user = await service.update_user(
            str(current.id), {"name": "Lorem"}, submitted_id=str(current.id).upper()
        )

        assert user.name == "Lorem"

    @pytest.mark.parametrize("submitted_id", ["none", 123, "0190a4b8-0000-7000-8000-000000000000"])
    async def test_patch_with_other_identifier(self, service, repository, reference_users, submitted_id):
        current = reference_users[0]

        with pytest.raises(IdentifierModificationException) as exc_info:
            await service.update_user(str(current.id), {"name": "Lorem"}, submitted_id=submitted_id)

        assert exc_info.value.status_code == 400
        assert repository.users[current.id].name == "Test"

    async def test_own_email_is_not_a_duplicate(self, service, reference_users):
        current = reference_users[1]

        user = await service.update_user(str(current.id), {"email": current.email})

        assert user.email == current.email

    async def test_put_resets_missing_attributes(self, service, reference_users):
        current = reference_users[3]

        user = await service.replace_user(
            str(current.id), changes(email="replaced@foo.local", roles=[Role.ADMIN])
        )

        assert user.id == current.id
        assert user.note is None
        assert user.roles == [Role.ADMIN]

    async def test_put_without_required_attributes(self, service, reference_users):
        with pytest.raises(ValidationException) as exc_info:
            await service.replace_user(str(reference_users[0].id), {"name": "Lorem"})

        assert "name" not in [v.property_path for v in exc_info.value.violations]

    async def test_put_checks_identifier_before_validation(self, service, reference_users):
        with pytest.raises(IdentifierModificationException):
            await service.replace_user(str(reference_users[0].id), {}, submitted_id="other")


class TestStaticHelpers:
    def test_trim_textual_attributes_skips_other_values(self):
        state = {"name": " Lorem ", "note": None, "active": True, "roles": [Role.USER]}

        assert UserService.trim_textual_attributes(state) == {
            "name": "Lorem",
            "note": None,
            "active": True,
            "roles": [Role.USER],
        }

    def test_missing_submitted_identifier_is_accepted(self, reference_users):
        UserService.prevent_identifier_modification(reference_users[0].id, None)
