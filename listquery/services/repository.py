from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

from listquery.schemas.query import PagedResult
from listquery.services.executor import execute_get_many_and_count
from listquery.services.operators import OperatorRegistry
from listquery.services.query_parser import parse
from listquery.services.sources import SqlAlchemySource

ModelT = TypeVar("ModelT")


class ReadOnlyRepository(Generic[ModelT]):
    """Read access to one mapped model through a caller-owned session."""

    def __init__(self, session: Session, model: type[ModelT], registry: OperatorRegistry | None = None):
        self.session = session
        self.model = model
        self.registry = registry

    def count(self, *criteria: Any) -> int:
        return self.session.query(self.model).filter(*criteria).count()

    def get(self, id: Any) -> ModelT | None:
        return self.session.get(self.model, id)

    def get_all(self) -> list[ModelT]:
        return self.session.query(self.model).all()

    def get_where(self, *criteria: Any) -> list[ModelT]:
        return self.session.query(self.model).filter(*criteria).all()

    def get_many_and_count(self, query: str | None, default_sort: str) -> PagedResult:
        spec = parse(query, self.model, default_sort, self.registry)
        source = SqlAlchemySource(self.session.query(self.model), self.model)
        return execute_get_many_and_count(spec, source)
