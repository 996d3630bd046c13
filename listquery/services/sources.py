from __future__ import annotations

from typing import Any, Iterable, Protocol

from sqlalchemy.orm import Query

from listquery.schemas.query import FilterSpecification, SortRequest
from listquery.services.compiler import compile_predicate, sort_records
from listquery.services.field_index import FieldIndex, build_index
from listquery.services.sql_compiler import compile_order_by, compile_where_clause


class RecordSource(Protocol):
    """Collection the executor pages through.

    ``where`` and ``order_by`` return a new source; ``page`` and ``count``
    are the reads against the backing store.
    """

    def where(self, spec: FilterSpecification) -> "RecordSource":
        ...

    def order_by(self, sort: SortRequest) -> "RecordSource":
        ...

    def page(self, offset: int, limit: int) -> list[Any]:
        ...

    def count(self) -> int:
        ...


class InMemorySource:
    def __init__(self, records: Iterable[Any], record_type: type | None = None, index: FieldIndex | None = None):
        self.records = list(records)
        if index is None:
            if record_type is None:
                raise ValueError("InMemorySource needs a record_type or a FieldIndex")
            index = build_index(record_type)
        self.index = index

    def _derive(self, records: Iterable[Any]) -> "InMemorySource":
        return InMemorySource(records, index=self.index)

    def where(self, spec: FilterSpecification) -> "InMemorySource":
        predicate = compile_predicate(spec, self.index)
        return self._derive(record for record in self.records if predicate(record))

    def order_by(self, sort: SortRequest) -> "InMemorySource":
        return self._derive(sort_records(self.records, sort, self.index))

    def page(self, offset: int, limit: int) -> list[Any]:
        return self.records[offset : offset + limit]

    def count(self) -> int:
        return len(self.records)


class SqlAlchemySource:
    def __init__(self, query: Query, model: type):
        self.query = query
        self.model = model
        self.index = build_index(model)

    def _derive(self, query: Query) -> "SqlAlchemySource":
        return SqlAlchemySource(query, self.model)

    def where(self, spec: FilterSpecification) -> "SqlAlchemySource":
        return self._derive(self.query.filter(compile_where_clause(self.model, spec, self.index)))

    def order_by(self, sort: SortRequest) -> "SqlAlchemySource":
        return self._derive(self.query.order_by(*compile_order_by(self.model, sort, self.index)))

    def page(self, offset: int, limit: int) -> list[Any]:
        return self.query.offset(offset).limit(limit).all()

    def count(self) -> int:
        return self.query.count()
