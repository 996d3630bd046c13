from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from listquery.core.errors import MalformedFilterValue
from listquery.db.session import get_db
from listquery.schemas.query import PagedResult
from listquery.services.field_index import build_index
from listquery.services.operators import OperatorRegistry, coerce_filter_value
from listquery.services.repository import ReadOnlyRepository
from listquery.services.serialization import record_to_dict

Serializer = Callable[[Any], dict[str, Any]]


def paged_result_payload(result: PagedResult, serializer: Serializer = record_to_dict) -> dict[str, Any]:
    return result.map_items(serializer).model_dump(mode="json")


def build_listing_router(
    model: type,
    *,
    default_sort: str,
    serializer: Serializer = record_to_dict,
    registry: OperatorRegistry | None = None,
    path: str = "",
) -> APIRouter:
    """GET ``path`` lists ``model`` rows; GET ``path/{row_id}`` reads one.

    The raw query string is handed to the parser untouched, e.g.
    ``?pageSize=10&sortBy=name&status=Active|Pending||eq&query=acme``.
    """
    router = APIRouter()

    @router.get(path)
    def list_rows(request: Request, db: Session = Depends(get_db)):
        repo = ReadOnlyRepository(db, model, registry)
        result = repo.get_many_and_count(request.url.query, default_sort)
        return paged_result_payload(result, serializer)

    @router.get(f"{path}/{{row_id}}")
    def get_row(row_id: str, db: Session = Depends(get_db)):
        identifier = build_index(model).identifier
        try:
            key = coerce_filter_value(identifier, row_id) if identifier is not None else row_id
        except MalformedFilterValue:
            # an id that cannot exist in the key column is simply not found
            raise HTTPException(status_code=404, detail="Record not found")
        row = ReadOnlyRepository(db, model, registry).get(key)
        if row is None:
            raise HTTPException(status_code=404, detail="Record not found")
        return serializer(row)

    return router

