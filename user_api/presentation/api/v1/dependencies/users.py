"""
User resource dependencies for v1 API endpoints.

Repository and service injection, collection query parsing, and the request
body handling shared by the write endpoints: content type negotiation,
JSON decoding and attribute type checks.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.application.services.user_service import UserService
from user_api.core.exceptions import (
    AttributeTypeException,
    MalformedRequestException,
    UnsupportedMediaTypeException,
)
from user_api.domain.repositories.user_repository import UserRepository
from user_api.domain.value_objects.collection_query import CollectionQuery
from user_api.infrastructure.persistence.sqlalchemy.database import get_session
from user_api.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    SQLAlchemyUserRepository,
)
from user_api.presentation.api.v1.schemas.user import EXPECTED_TYPES, UserWriteRequest

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPES = ("application/ld+json", "application/json")
MERGE_PATCH_MEDIA_TYPES = ("application/merge-patch+json", "application/json")

# Validation error types meaning the body is not a JSON object at all
SYNTAX_ERROR_TYPES = frozenset({"json_invalid", "json_type", "model_type", "model_attributes_type"})


def get_user_repository(db_session: AsyncSession = Depends(get_session)) -> UserRepository:
    return SQLAlchemyUserRepository(db_session)


def get_user_service(
    user_repository: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(user_repository)


def get_collection_query(request: Request) -> CollectionQuery:
    """
    Parse pagination, ordering and filter parameters of a collection request.

    Raises:
        InvalidQueryParameterException: If a paging parameter is invalid
    """
    settings = request.app.state.settings
    return CollectionQuery.from_query_params(
        request.query_params.multi_items(),
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )


def json_type_name(value: Any) -> str:
    """Name of the JSON kind of a decoded value, as reported to clients."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | dict):
        return "array"
    return type(value).__name__


def require_content_type(request: Request, accepted: tuple[str, ...]) -> str:
    """
    Check the ``Content-Type`` header against ``accepted`` media types.

    Returns:
        The media type without parameters

    Raises:
        UnsupportedMediaTypeException: If the header is missing or not accepted
    """
    header = request.headers.get("content-type")
    if not header:
        raise UnsupportedMediaTypeException()

    media_type = header.split(";", 1)[0].strip().lower()
    if media_type not in accepted:
        supported = ", ".join(f'"{item}"' for item in accepted)
        raise UnsupportedMediaTypeException(
            f'The content-type "{media_type}" is not supported. Supported MIME types are {supported}.'
        )
    return media_type


def parse_user_payload(raw: bytes) -> UserWriteRequest:
    """
    Decode a write request body.

    Args:
        raw: The request body

    Returns:
        The decoded payload, remembering which attributes were submitted

    Raises:
        MalformedRequestException: If the body is not a JSON object, or an
            attribute has the wrong type or an unknown enum value
    """
    try:
        payload = UserWriteRequest.model_validate_json(raw or b"")
    except ValidationError as e:
        raise _malformed_request(e) from e

    null_attributes = payload.null_attributes()
    if null_attributes:
        attribute = null_attributes[0]
        raise AttributeTypeException(attribute, EXPECTED_TYPES[attribute], "NULL")
    return payload


def _malformed_request(error: ValidationError) -> MalformedRequestException:
    for detail in error.errors():
        loc = detail.get("loc") or ()
        if not loc or detail["type"] in SYNTAX_ERROR_TYPES:
            return MalformedRequestException()

        attribute = str(loc[0])
        if detail["type"] == "enum":
            expected = detail.get("ctx", {}).get("expected", "")
            return MalformedRequestException(
                f'The value of the "{attribute}" attribute must be one of {expected}, '
                f'"{detail.get("input")}" given.'
            )
        return AttributeTypeException(
            attribute, EXPECTED_TYPES.get(attribute, "mixed"), json_type_name(detail.get("input"))
        )
    return MalformedRequestException()


def user_payload(*accepted: str) -> Callable[[Request], Awaitable[UserWriteRequest]]:
    """Build a dependency reading a user payload sent with one of the ``accepted`` media types."""

    async def dependency(request: Request) -> UserWriteRequest:
        require_content_type(request, accepted)
        payload = parse_user_payload(await request.body())
        logger.debug(f"Decoded payload attributes: {sorted(payload.model_fields_set)}")
        return payload

    return dependency


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
CollectionQueryDep = Annotated[CollectionQuery, Depends(get_collection_query)]
JsonPayloadDep = Annotated[UserWriteRequest, Depends(user_payload(*JSON_MEDIA_TYPES))]
MergePatchPayloadDep = Annotated[UserWriteRequest, Depends(user_payload(*MERGE_PATCH_MEDIA_TYPES))]
