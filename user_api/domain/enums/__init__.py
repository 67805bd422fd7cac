"""Enumerations shared by the domain layer."""

from user_api.domain.enums.gender import Gender
from user_api.domain.enums.role import Role

__all__ = ["Gender", "Role"]
