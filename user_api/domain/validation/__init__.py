"""Attribute validation for the User resource."""

from user_api.domain.validation.unique_values import ContainsUniqueValues
from user_api.domain.validation.user_constraints import USER_CONSTRAINTS, validate_user

__all__ = ["ContainsUniqueValues", "USER_CONSTRAINTS", "validate_user"]
