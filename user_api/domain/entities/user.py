"""
User Entity Module

This module defines the User entity for the domain layer. The entity only
holds data; attribute rules live in ``user_api.domain.validation``.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from user_api.domain.enums import Gender, Role


class User(BaseModel):
    """User domain entity representing a registered person."""

    id: UUID = Field(..., description="Time-ordered (v7) unique identifier")
    name: str = Field(..., description="Forenames")
    surname: str = Field(..., description="Surnames")
    email: str = Field(..., description="Email address, unique across users")
    gender: Gender = Field(..., description="Gender")
    roles: list[Role] = Field(default_factory=list, description="Roles held by the user")
    note: str | None = Field(default=None, description="Free-form note")
    active: bool = Field(..., description="Whether the user is active")

    model_config = ConfigDict(from_attributes=True)
