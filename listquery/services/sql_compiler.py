from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import String, and_, asc, cast, desc, false, func, or_, true
from sqlalchemy.orm import Query

from listquery.core.errors import InvalidSearchColumn, InvalidSortField, UnresolvedFilterField
from listquery.schemas.query import (
    FieldFilter,
    FilterSpecification,
    QuickSearch,
    RelationalOperator,
    SortRequest,
)
from listquery.services.field_index import FieldAccessor, FieldIndex, build_index
from listquery.services.operators import coerce_filter_value, is_date_only_literal


def _as_text(col, accessor: FieldAccessor):
    if accessor.python_type is str:
        return col
    return cast(col, String)


def _equals_clause(col, accessor: FieldAccessor, raw: str):
    if accessor.python_type is str:
        return func.lower(col) == raw.lower()
    value = coerce_filter_value(accessor, raw)
    if accessor.python_type is datetime and is_date_only_literal(raw):
        day_start = value
        day_end = day_start + timedelta(days=1)
        return and_(col >= day_start, col < day_end)
    return col == value


def compile_branch_clause(col, accessor: FieldAccessor, operator: RelationalOperator, raw: str):
    if operator == RelationalOperator.EQUALS:
        return _equals_clause(col, accessor, raw)
    if operator == RelationalOperator.NOT_EQUALS:
        # NULL never equals anything, so it satisfies "not equals"
        return or_(col.is_(None), ~_equals_clause(col, accessor, raw))
    if operator == RelationalOperator.CONTAINS:
        return _as_text(col, accessor).icontains(raw, autoescape=True)
    if operator == RelationalOperator.STARTS_WITH:
        return _as_text(col, accessor).istartswith(raw, autoescape=True)
    if operator == RelationalOperator.ENDS_WITH:
        return _as_text(col, accessor).iendswith(raw, autoescape=True)

    value = coerce_filter_value(accessor, raw)
    if operator == RelationalOperator.GREATER_THAN:
        return col > value
    if operator == RelationalOperator.GREATER_OR_EQUAL:
        return col >= value
    if operator == RelationalOperator.LESS_THAN:
        return col < value
    return col <= value


def compile_filter_clause(model: type, field_filter: FieldFilter, index: FieldIndex):
    accessor = index.require(field_filter.field_name, UnresolvedFilterField)
    col = accessor.column(model)
    return or_(*[compile_branch_clause(col, accessor, field_filter.operator, raw) for raw in field_filter.values])


def compile_quick_search_clause(model: type, quick_search: QuickSearch, index: FieldIndex):
    branches = []
    for name in quick_search.field_names:
        accessor = index.require(name, InvalidSearchColumn)
        col = accessor.column(model)
        branches.append(_as_text(col, accessor).icontains(quick_search.value, autoescape=True))
    if not branches:
        return false()
    return or_(*branches)


def compile_where_clause(model: type, spec: FilterSpecification, index: FieldIndex | None = None):
    index = index or build_index(model)
    parts = [compile_filter_clause(model, f, index) for f in spec.filters]
    if spec.quick_search is not None:
        parts.append(compile_quick_search_clause(model, spec.quick_search, index))
    if not parts:
        return true()
    return and_(*parts)


def compile_order_by(model: type, sort: SortRequest, index: FieldIndex | None = None) -> list:
    index = index or build_index(model)
    accessor = index.require(sort.by, InvalidSortField)
    col = accessor.column(model)
    # NULLs first ascending and last descending, as the in-memory comparator does
    clauses = [desc(col).nulls_last() if sort.descending else asc(col).nulls_first()]
    identifier = index.identifier
    if identifier is not None and identifier.name != accessor.name:
        # deterministic pages when the sort field has duplicates
        clauses.append(asc(identifier.column(model)))
    return clauses


def apply_filter_specification(q: Query, model: type, spec: FilterSpecification) -> Query:
    index = build_index(model)
    return q.filter(compile_where_clause(model, spec, index)).order_by(*compile_order_by(model, spec.sort, index))
