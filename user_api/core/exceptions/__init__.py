"""
Core exceptions package.

This package contains all exceptions used throughout the application.
"""

from user_api.core.exceptions.base_exceptions import (
    AttributeTypeException,
    BaseException,
    DuplicateEntityError,
    IdentifierModificationException,
    InvalidArgumentError,
    InvalidQueryParameterException,
    MalformedRequestException,
    ResourceNotFoundException,
    UnexpectedValueError,
    UnsupportedMediaTypeException,
)
from user_api.core.exceptions.validation import ConstraintViolation, ValidationException

__all__ = [
    "AttributeTypeException",
    "BaseException",
    "ConstraintViolation",
    "DuplicateEntityError",
    "IdentifierModificationException",
    "InvalidArgumentError",
    "InvalidQueryParameterException",
    "MalformedRequestException",
    "ResourceNotFoundException",
    "UnexpectedValueError",
    "UnsupportedMediaTypeException",
    "ValidationException",
]
