from __future__ import annotations

import logging

from listquery.core.errors import QueryArgumentError
from listquery.schemas.query import FilterSpecification
from listquery.services.field_index import FieldIndex, build_index
from listquery.services.filters import parse_filters
from listquery.services.operators import OperatorRegistry
from listquery.services.reserved import parse_pagination, parse_quick_search, parse_sorting
from listquery.services.tokenizer import tokenize

_LOG = logging.getLogger("listquery.query")


def _index_for(record_type: type | FieldIndex) -> FieldIndex:
    if isinstance(record_type, FieldIndex):
        return record_type
    return build_index(record_type)


def parse(
    raw_query: str | None,
    record_type: type | FieldIndex,
    default_sort_field: str,
    registry: OperatorRegistry | None = None,
) -> FilterSpecification:
    """Parse a listing query string into a validated FilterSpecification.

    Raises the first QueryArgumentError met; nothing is returned for a
    partially valid query string.
    """
    index = _index_for(record_type)
    args = tokenize(raw_query)
    try:
        pagination = parse_pagination(args)
        sort = parse_sorting(args, index, default_sort_field)
        quick_search = parse_quick_search(args, index)
        filters = parse_filters(args, index, registry)
    except QueryArgumentError as exc:
        _LOG.info(
            "rejected query for %s: %s argument=%s",
            index.record_type.__name__,
            exc.kind,
            exc.argument,
        )
        raise
    return FilterSpecification(
        pagination=pagination,
        sort=sort,
        quick_search=quick_search,
        filters=tuple(filters),
    )
