"""
Collection query value object.

Pagination, ordering and filtering options for listing users, parsed from
the query string parameters of a collection request.
"""

import enum
import logging
import re
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from user_api.core.exceptions import InvalidQueryParameterException

logger = logging.getLogger(__name__)

PAGE_SIZE_PARAMETER = "page-size"
PAGE_NUMBER_PARAMETER = "page-number"
ORDER_BY_PATTERN = re.compile(r"^order-by\[(?P<field>[^\]]+)\]$")
POSITIVE_INTEGER_PATTERN = re.compile(r"[1-9][0-9]*")

ORDERABLE_FIELDS = ("id", "name", "surname", "email", "gender", "active")
EXACT_FILTER_FIELDS = ("gender", "active")
PARTIAL_FILTER_FIELDS = ("name", "surname", "email", "note")

_BOOLEAN_VALUES = {"true": True, "1": True, "false": False, "0": False}


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class CollectionQuery(BaseModel):
    """Immutable description of a page of users to load."""

    page_size: int = Field(default=10, gt=0)
    page_number: int = Field(default=1, gt=0)
    paginated: bool = Field(default=False, description="Whether paging parameters were given")
    order_by: tuple[tuple[str, SortDirection], ...] = ()
    exact_filters: tuple[tuple[str, Any], ...] = ()
    partial_filters: tuple[tuple[str, str], ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    @classmethod
    def from_query_params(
        cls,
        params: Iterable[tuple[str, str]],
        default_page_size: int = 10,
        max_page_size: int = 1000,
    ) -> "CollectionQuery":
        """
        Build a query from ``(name, value)`` pairs.

        Unknown parameters, unknown ordering fields or directions and
        unparsable filter values are ignored.

        Args:
            params: Query string parameters in request order
            default_page_size: Page size used when ``page-size`` is absent
            max_page_size: Largest accepted ``page-size``

        Returns:
            The parsed query

        Raises:
            InvalidQueryParameterException: If ``page-size`` or ``page-number``
                is not a positive integer, or the page size is too large
        """
        page_size = default_page_size
        page_number = 1
        paginated = False
        order_by: dict[str, SortDirection] = {}
        exact_filters: list[tuple[str, Any]] = []
        partial_filters: list[tuple[str, str]] = []

        for name, raw in params:
            if name == PAGE_SIZE_PARAMETER:
                page_size = _positive_integer(name, raw)
                if page_size > max_page_size:
                    raise InvalidQueryParameterException(
                        f'The "{name}" parameter must not be greater than {max_page_size}.'
                    )
                paginated = True
            elif name == PAGE_NUMBER_PARAMETER:
                page_number = _positive_integer(name, raw)
                paginated = True
            elif match := ORDER_BY_PATTERN.match(name):
                field = match.group("field")
                try:
                    direction = SortDirection(raw.lower())
                except ValueError:
                    logger.debug(f"Ignoring ordering {name}={raw!r}: unknown direction")
                    continue
                if field not in ORDERABLE_FIELDS or field in order_by:
                    logger.debug(f"Ignoring ordering {name}={raw!r}")
                    continue
                order_by[field] = direction
            elif name in EXACT_FILTER_FIELDS:
                value = _exact_filter_value(name, raw)
                if value is not None:
                    exact_filters.append((name, value))
            elif name in PARTIAL_FILTER_FIELDS and raw != "":
                partial_filters.append((name, raw))

        return cls(
            page_size=page_size,
            page_number=page_number,
            paginated=paginated,
            order_by=tuple(order_by.items()),
            exact_filters=tuple(exact_filters),
            partial_filters=tuple(partial_filters),
        )


def _positive_integer(name: str, raw: str) -> int:
    if not POSITIVE_INTEGER_PATTERN.fullmatch(raw):
        raise InvalidQueryParameterException(
            f'The "{name}" parameter must be a positive integer, "{raw}" given.'
        )
    return int(raw)


def _exact_filter_value(name: str, raw: str) -> Any:
    if name == "active":
        value = _BOOLEAN_VALUES.get(raw.lower())
        if value is None:
            logger.debug(f"Ignoring filter active={raw!r}: not a boolean")
        return value
    return raw if raw != "" else None
