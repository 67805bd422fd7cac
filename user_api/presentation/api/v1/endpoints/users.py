"""
User API endpoints.

CRUD operations over the User resource plus the paginated, filterable and
sortable collection.
"""

import logging
import math
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Response, status

from user_api.domain.value_objects.collection_query import (
    PAGE_NUMBER_PARAMETER,
    CollectionQuery,
)
from user_api.presentation.api.v1.dependencies.users import (
    CollectionQueryDep,
    JsonPayloadDep,
    MergePatchPayloadDep,
    UserServiceDep,
)
from user_api.presentation.api.v1.schemas.user import (
    CollectionView,
    UserCollectionResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Users"],
)


def _page_url(path: str, params: list[tuple[str, str]], page_number: int | None = None) -> str:
    """URL of ``path`` with ``params`` in their original order, optionally pointing at another page."""
    if page_number is not None:
        replaced = False
        rewritten = []
        for name, value in params:
            if name == PAGE_NUMBER_PARAMETER:
                if replaced:
                    continue
                value = str(page_number)
                replaced = True
            rewritten.append((name, value))
        if not replaced:
            rewritten.append((PAGE_NUMBER_PARAMETER, str(page_number)))
        params = rewritten
    return f"{path}?{urlencode(params)}" if params else path


def build_collection_view(request: Request, query: CollectionQuery, total: int) -> CollectionView | None:
    """
    Describe the requested page.

    Returns:
        None for a request without query parameters; otherwise the view of
        the current URL, with page links when paging parameters were given
    """
    params = request.query_params.multi_items()
    if not params:
        return None

    path = request.url.path
    view = CollectionView(id=_page_url(path, params))
    if not query.paginated:
        return view

    last_page = max(1, math.ceil(total / query.page_size))
    view.first = _page_url(path, params, 1)
    view.last = _page_url(path, params, last_page)
    if query.page_number > 1:
        view.previous = _page_url(path, params, min(query.page_number, last_page + 1) - 1)
    if query.page_number < last_page:
        view.next = _page_url(path, params, query.page_number + 1)
    return view


@router.get(
    "",
    response_model=UserCollectionResponse,
    response_model_exclude_none=True,
    summary="List users",
)
async def list_users(
    request: Request,
    query: CollectionQueryDep,
    user_service: UserServiceDep,
) -> UserCollectionResponse:
    """
    Get one page of users.

    Supports ``page-size``, ``page-number``, ``order-by[<field>]=asc|desc``,
    exact ``gender``/``active`` filters and substring ``name``/``surname``/
    ``email``/``note`` filters.
    """
    logger.info(f"Listing users (page {query.page_number}, size {query.page_size})")
    users, total = await user_service.list_users(query)
    return UserCollectionResponse(
        total_items=total,
        member=[UserResponse.from_entity(user) for user in users],
        view=build_collection_view(request, query, total),
    )


@router.post(
    "",
    response_model=UserResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(
    request: Request,
    response: Response,
    payload: JsonPayloadDep,
    user_service: UserServiceDep,
) -> UserResponse:
    user = await user_service.create_user(payload.submitted_changes())
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{user.id}"
    return UserResponse.from_entity(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Get a user",
)
async def get_user(user_id: str, user_service: UserServiceDep) -> UserResponse:
    user = await user_service.get_user(user_id)
    return UserResponse.from_entity(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Replace a user",
)
async def replace_user(
    user_id: str,
    payload: JsonPayloadDep,
    user_service: UserServiceDep,
) -> UserResponse:
    """Replace every attribute of a user; omitted attributes are treated as absent."""
    user = await user_service.replace_user(
        user_id, payload.submitted_changes(), submitted_id=payload.submitted_id
    )
    return UserResponse.from_entity(user)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Update a user",
)
async def update_user(
    user_id: str,
    payload: MergePatchPayloadDep,
    user_service: UserServiceDep,
) -> UserResponse:
    """Merge the submitted attributes into a user."""
    user = await user_service.update_user(
        user_id, payload.submitted_changes(), submitted_id=payload.submitted_id
    )
    return UserResponse.from_entity(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
)
async def delete_user(user_id: str, user_service: UserServiceDep) -> Response:
    await user_service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
