"""Tests for collection query parsing."""

import pytest

from user_api.core.exceptions import InvalidQueryParameterException
from user_api.domain.value_objects.collection_query import CollectionQuery, SortDirection


def parse(*params: tuple[str, str], **kwargs) -> CollectionQuery:
    return CollectionQuery.from_query_params(list(params), **kwargs)


class TestPagination:
    def test_defaults(self):
        query = parse(default_page_size=10)

        assert query.page_size == 10
        assert query.page_number == 1
        assert query.offset == 0
        assert query.paginated is False

    def test_explicit_page(self):
        query = parse(("page-size", "2"), ("page-number", "3"))

        assert query.page_size == 2
        assert query.page_number == 3
        assert query.offset == 4
        assert query.paginated is True

    @pytest.mark.parametrize("name", ["page-size", "page-number"])
    @pytest.mark.parametrize("raw", ["-1", "0", "0.123", "null", "", "1e3", " 2", "+2"])
    def test_non_positive_integers_are_refused(self, name, raw):
        with pytest.raises(InvalidQueryParameterException) as exc_info:
            parse((name, raw))

        assert exc_info.value.status_code == 400
        assert f'"{name}"' in exc_info.value.message

    def test_page_size_limit(self):
        with pytest.raises(InvalidQueryParameterException):
            parse(("page-size", "11"), max_page_size=10)


class TestOrdering:
    def test_order_by_fields_keep_request_order(self):
        query = parse(("order-by[surname]", "desc"), ("order-by[name]", "ASC"))

        assert query.order_by == (("surname", SortDirection.DESC), ("name", SortDirection.ASC))

    def test_unknown_fields_and_directions_are_ignored(self):
        query = parse(
            ("order-by[password]", "asc"),
            ("order-by[surname]", "sideways"),
            ("order-by[email]", "asc"),
            ("order-by[email]", "desc"),
        )

        assert query.order_by == (("email", SortDirection.ASC),)


class TestFilters:
    def test_exact_and_partial_filters(self):
        query = parse(("gender", "MALE"), ("surname", "User"), ("active", "false"))

        assert query.exact_filters == (("gender", "MALE"), ("active", False))
        assert query.partial_filters == (("surname", "User"),)

    def test_unparsable_or_empty_filters_are_ignored(self):
        query = parse(("active", "maybe"), ("gender", ""), ("note", ""), ("unknown", "x"))

        assert query.exact_filters == ()
        assert query.partial_filters == ()
