"""
Validation exceptions for the application.

This module defines the constraint violation record and the exception that
carries a list of them back to the client.
"""

from dataclasses import dataclass
from typing import Any

from user_api.core.exceptions.base_exceptions import BaseException


@dataclass(frozen=True)
class ConstraintViolation:
    """A single failed rule, addressed by the attribute it applies to."""

    property_path: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"propertyPath": self.property_path, "message": self.message}


class ValidationException(BaseException):
    """Exception raised when one or more attribute constraints are violated."""

    status_code = 422

    def __init__(
        self,
        violations: list[ConstraintViolation],
        message: str | None = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        self.violations = list(violations)
        if message is None:
            message = "\n".join(f"{v.property_path}: {v.message}" for v in self.violations)
        super().__init__(message=message, detail=[v.message for v in self.violations], code=code)

    def __str__(self) -> str:
        return self.message
