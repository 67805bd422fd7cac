"""
Exception hierarchy of the User API.

Client-facing exceptions carry the HTTP status the application's exception
handlers render them with; the programming errors at the end of the module
are never shown to clients.
"""

from typing import Any


class BaseException(Exception):
    """
    Root of the User API exceptions.

    Attributes:
        message: Text shown to the client as the problem ``detail``
        detail: Extra context, logged but not rendered
        code: Stable machine-readable identifier
        status_code: HTTP status used when the exception reaches a client
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} - {self.detail}"
        return self.message


class MalformedRequestException(BaseException):
    """Exception raised when a request body or query cannot be interpreted."""

    status_code = 400

    def __init__(
        self,
        message: str = "Syntax error",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "MALFORMED_REQUEST",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class AttributeTypeException(MalformedRequestException):
    """Exception raised when a submitted attribute has the wrong JSON type."""

    def __init__(self, attribute: str, expected: str, given: str) -> None:
        self.attribute = attribute
        self.expected = expected
        self.given = given
        super().__init__(
            message=f'The type of the "{attribute}" attribute must be "{expected}", "{given}" given.',
            code="ATTRIBUTE_TYPE_MISMATCH",
        )


class IdentifierModificationException(MalformedRequestException):
    """Exception raised when an update tries to change the resource identifier."""

    def __init__(
        self,
        message: str = "Modification of resource identifier value refused.",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "IDENTIFIER_MODIFICATION",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class InvalidQueryParameterException(MalformedRequestException):
    """Exception raised for an invalid collection query parameter."""

    def __init__(
        self,
        message: str,
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "INVALID_QUERY_PARAMETER",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class UnsupportedMediaTypeException(BaseException):
    """Exception raised when the request content type is missing or not accepted."""

    status_code = 415

    def __init__(
        self,
        message: str = 'The "Content-Type" header must exist.',
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "UNSUPPORTED_MEDIA_TYPE",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class ResourceNotFoundException(BaseException):
    """The addressed user does not exist or the identifier is malformed."""

    status_code = 404

    def __init__(
        self,
        message: str = "Invalid identifier value or configuration.",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "RESOURCE_NOT_FOUND",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class DuplicateEntityError(BaseException):
    """
    Exception raised by a repository when a unique constraint rejects a write.

    Attributes:
        field: Name of the attribute whose value collided
    """

    status_code = 409

    def __init__(
        self,
        field: str,
        message: str = "Duplicate entity",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "DUPLICATE_ENTITY",
    ) -> None:
        self.field = field
        super().__init__(message=message, detail=detail, code=code)


class InvalidArgumentError(BaseException, ValueError):
    """Exception raised when a component is configured with an invalid argument."""

    def __init__(self, message: str, code: str = "INVALID_ARGUMENT") -> None:
        super().__init__(message=message, code=code)


class UnexpectedValueError(BaseException, TypeError):
    """Exception raised when a component receives a value of an unsupported type."""

    def __init__(self, message: str, code: str = "UNEXPECTED_VALUE") -> None:
        super().__init__(message=message, code=code)

    @classmethod
    def for_type(cls, value: Any, expected_type: str) -> "UnexpectedValueError":
        return cls(f'Expected argument of type "{expected_type}", "{type(value).__name__}" given')
