from __future__ import annotations

import logging

from listquery.schemas.query import FilterSpecification, PagedResult
from listquery.services.sources import RecordSource

_LOG = logging.getLogger("listquery.query")


def execute_get_many_and_count(spec: FilterSpecification, source: RecordSource) -> PagedResult:
    """Run one listing request: filter, count, sort and cut one page.

    The count and the page are two separate reads of the source. Nothing
    here makes them atomic; run inside a transaction when concurrent writes
    must not skew ``total_count`` against ``items``.
    """
    matched = source.where(spec)
    total = matched.count()
    pagination = spec.pagination
    items = matched.order_by(spec.sort).page(pagination.offset, pagination.limit)
    _LOG.debug(
        "get_many_and_count total=%s page=%s size=%s sort=%s %s returned=%s",
        total,
        pagination.page_number,
        pagination.page_size,
        spec.sort.by,
        spec.sort.direction.value,
        len(items),
    )
    return PagedResult(
        items=items,
        total_count=total,
        page_number=pagination.page_number,
        page_size=pagination.page_size,
        sort=spec.sort,
    )
