"""User-related Pydantic schemas used by the API layer.

Request schemas are validated in strict mode from raw JSON, so a value of
the wrong JSON type is refused instead of coerced.
"""

from typing import Any, ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from user_api.domain.entities.user import User
from user_api.domain.enums import Gender, Role

__all__ = [
    "CollectionView",
    "UserCollectionResponse",
    "UserResponse",
    "UserWriteRequest",
]

# JSON type expected for each writable attribute, as reported in type errors
EXPECTED_TYPES: dict[str, str] = {
    "id": "string",
    "name": "string",
    "surname": "string",
    "email": "string",
    "gender": "string",
    "roles": "array",
    "note": "string",
    "active": "bool",
}


class UserWriteRequest(BaseModel):
    """Payload of POST, PUT and PATCH requests. Every attribute is optional."""

    id: str | None = None
    name: str | None = None
    surname: str | None = None
    email: str | None = None
    gender: Gender | None = None
    roles: list[Role] | None = None
    note: str | None = None
    active: bool | None = None

    model_config = ConfigDict(strict=True, extra="ignore")

    # Attributes for which an explicit null is a type error
    NON_NULLABLE: ClassVar[tuple[str, ...]] = ("id", "name", "surname", "email", "gender", "roles", "active")

    def null_attributes(self) -> list[str]:
        """Non-nullable attributes explicitly submitted as null, in declaration order."""
        return [
            name
            for name in type(self).model_fields
            if name in self.NON_NULLABLE and name in self.model_fields_set and getattr(self, name) is None
        ]

    def submitted_changes(self) -> dict[str, Any]:
        """Submitted attributes other than ``id``."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if name != "id" and name in self.model_fields_set
        }

    @property
    def submitted_id(self) -> str | None:
        return self.id if "id" in self.model_fields_set else None


class UserResponse(BaseModel):
    """Publicly exposed user representation."""

    id: UUID
    name: str
    surname: str
    email: str
    gender: Gender
    roles: list[Role]
    note: str | None = None
    active: bool

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            surname=user.surname,
            email=user.email,
            gender=user.gender,
            roles=user.roles,
            note=user.note or None,
            active=user.active,
        )


class CollectionView(BaseModel):
    """Links describing the requested page of a collection."""

    id: str
    first: str | None = None
    last: str | None = None
    previous: str | None = None
    next: str | None = None


class UserCollectionResponse(BaseModel):
    """Paginated user collection."""

    total_items: int = Field(..., serialization_alias="totalItems")
    member: list[UserResponse]
    view: CollectionView | None = None
