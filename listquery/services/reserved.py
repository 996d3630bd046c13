from __future__ import annotations

import re
from typing import Mapping

from listquery.core.config import settings
from listquery.core.errors import (
    InvalidPageNumber,
    InvalidPageSize,
    InvalidQuickSearch,
    InvalidSearchColumn,
    InvalidSortDirection,
    InvalidSortField,
)
from listquery.schemas.query import PaginationRequest, QuickSearch, SortDirection, SortRequest
from listquery.services.field_index import FieldIndex
from listquery.services.operators import INT64_MAX, INT64_MAX_DIGITS, fits_int64

DEFAULT_PAGE_NUMBER = 1

PAGE_NUMBER = "pageNumber"
PAGE_SIZE = "pageSize"
SORT_BY = "sortBy"
SORT_DIRECTION = "sortDirection"
QUERY = "query"
QUERY_COLUMNS = "query_ColumnsToSearch"

RESERVED_KEYS = frozenset({PAGE_NUMBER, PAGE_SIZE, SORT_BY, SORT_DIRECTION, QUERY})

SEARCH_COLUMNS_SEPARATOR = "||"
VALUE_SEPARATOR = "|"

_INT_RE = re.compile(r"[+-]?\d+")


def _parse_int(raw: str) -> int | None:
    text = str(raw).strip()
    if not _INT_RE.fullmatch(text) or len(text.lstrip("+-").lstrip("0")) > INT64_MAX_DIGITS:
        return None
    value = int(text)
    return value if fits_int64(value) else None


def parse_page_number(args: Mapping[str, str]) -> int:
    if PAGE_NUMBER not in args:
        return DEFAULT_PAGE_NUMBER
    value = _parse_int(args[PAGE_NUMBER])
    if value is None or value < 0:
        raise InvalidPageNumber(PAGE_NUMBER)
    return value


def parse_page_size(args: Mapping[str, str]) -> int:
    if PAGE_SIZE not in args:
        return settings.QUERY_DEFAULT_PAGE_SIZE
    value = _parse_int(args[PAGE_SIZE])
    if value is None or value <= 0:
        raise InvalidPageSize(PAGE_SIZE)
    return value


def parse_pagination(args: Mapping[str, str]) -> PaginationRequest:
    pagination = PaginationRequest(page_number=parse_page_number(args), page_size=parse_page_size(args))
    if pagination.offset > INT64_MAX:
        raise InvalidPageNumber(PAGE_NUMBER, "Page number is out of range for this page size")
    return pagination


def parse_sorting(args: Mapping[str, str], index: FieldIndex, default_field_name: str) -> SortRequest:
    field_name = args.get(SORT_BY, default_field_name)
    accessor = index.resolve(field_name)
    if accessor is None:
        raise InvalidSortField(SORT_BY, f'Unknown sort field "{field_name}"')

    direction = SortDirection.ASC
    if SORT_DIRECTION in args:
        raw_direction = args[SORT_DIRECTION]
        # exact lowercase match only
        if raw_direction not in (SortDirection.ASC.value, SortDirection.DESC.value):
            raise InvalidSortDirection(SORT_DIRECTION)
        direction = SortDirection(raw_direction)

    return SortRequest(by=accessor.name, direction=direction)


def parse_quick_search(args: Mapping[str, str], index: FieldIndex) -> QuickSearch | None:
    if QUERY not in args:
        return None
    raw = args[QUERY]
    search_value, separator, columns_segment = raw.partition(SEARCH_COLUMNS_SEPARATOR)
    if not search_value.strip():
        raise InvalidQuickSearch(QUERY, "Quick search value must not be empty")

    if not separator:
        return QuickSearch(value=search_value.lower(), field_names=tuple(index.default_searchable_fields()))

    if not columns_segment.strip():
        raise InvalidSearchColumn(QUERY_COLUMNS, "Quick search column list must not be empty")

    field_names: list[str] = []
    for column in columns_segment.split(VALUE_SEPARATOR):
        accessor = index.resolve(column)
        if accessor is None:
            raise InvalidSearchColumn(QUERY_COLUMNS, f'Unknown quick search column "{column}"')
        if accessor.name not in field_names:
            field_names.append(accessor.name)
    return QuickSearch(value=search_value.lower(), field_names=tuple(field_names))
