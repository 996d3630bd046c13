from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import cmp_to_key
from typing import Any, Callable, Iterable

from listquery.core.errors import InvalidSearchColumn, InvalidSortField, UnresolvedFilterField
from listquery.schemas.query import (
    TEXT_OPERATORS,
    FieldFilter,
    FilterSpecification,
    QuickSearch,
    RelationalOperator,
    SortRequest,
)
from listquery.services.field_index import FieldAccessor, FieldIndex
from listquery.services.operators import coerce_filter_value, is_date_only_literal

Predicate = Callable[[Any], bool]
Comparator = Callable[[Any, Any], int]


def _accept_all(record: Any) -> bool:
    return True


def _as_text(value: Any) -> str:
    return str(value).lower()


def _aligned(left: Any, right: Any) -> tuple[Any, Any]:
    # naive datetimes are treated as UTC when compared with aware ones
    if isinstance(left, datetime) and isinstance(right, datetime):
        if left.tzinfo is None and right.tzinfo is not None:
            left = left.replace(tzinfo=timezone.utc)
        elif right.tzinfo is None and left.tzinfo is not None:
            right = right.replace(tzinfo=timezone.utc)
    return left, right


def _equals(accessor: FieldAccessor, raw: str) -> Predicate:
    if accessor.python_type is str:
        expected_text = raw.lower()

        def _text_equals(record: Any) -> bool:
            current = accessor.get(record)
            return current is not None and _as_text(current) == expected_text

        return _text_equals

    expected = coerce_filter_value(accessor, raw)
    if accessor.python_type is datetime and is_date_only_literal(raw):
        day_start = expected
        day_end = day_start + timedelta(days=1)

        def _same_day(record: Any) -> bool:
            current = accessor.get(record)
            if current is None:
                return False
            current, start = _aligned(current, day_start)
            current, end = _aligned(current, day_end)
            return start <= current < end

        return _same_day

    def _value_equals(record: Any) -> bool:
        current = accessor.get(record)
        if current is None:
            return False
        current, target = _aligned(current, expected)
        return current == target

    return _value_equals


def _ordering(accessor: FieldAccessor, operator: RelationalOperator, raw: str) -> Predicate:
    expected = coerce_filter_value(accessor, raw)
    if operator == RelationalOperator.GREATER_THAN:
        test = lambda current, target: current > target
    elif operator == RelationalOperator.GREATER_OR_EQUAL:
        test = lambda current, target: current >= target
    elif operator == RelationalOperator.LESS_THAN:
        test = lambda current, target: current < target
    else:
        test = lambda current, target: current <= target

    def _compare(record: Any) -> bool:
        current = accessor.get(record)
        if current is None:
            return False
        return test(*_aligned(current, expected))

    return _compare


def _text_match(accessor: FieldAccessor, operator: RelationalOperator, raw: str) -> Predicate:
    needle = raw.lower()
    if operator == RelationalOperator.STARTS_WITH:
        test = lambda text: text.startswith(needle)
    elif operator == RelationalOperator.ENDS_WITH:
        test = lambda text: text.endswith(needle)
    else:
        test = lambda text: needle in text

    def _match(record: Any) -> bool:
        current = accessor.get(record)
        return current is not None and test(_as_text(current))

    return _match


def compile_branch(accessor: FieldAccessor, operator: RelationalOperator, raw: str) -> Predicate:
    if operator in TEXT_OPERATORS:
        return _text_match(accessor, operator, raw)
    if operator == RelationalOperator.EQUALS:
        return _equals(accessor, raw)
    if operator == RelationalOperator.NOT_EQUALS:
        equals = _equals(accessor, raw)
        return lambda record: not equals(record)
    return _ordering(accessor, operator, raw)


def any_of(predicates: Iterable[Predicate]) -> Predicate:
    branches = tuple(predicates)
    return lambda record: any(branch(record) for branch in branches)


def all_of(predicates: Iterable[Predicate]) -> Predicate:
    branches = tuple(predicates)
    if not branches:
        return _accept_all
    return lambda record: all(branch(record) for branch in branches)


def compile_filter(field_filter: FieldFilter, index: FieldIndex) -> Predicate:
    accessor = index.require(field_filter.field_name, UnresolvedFilterField)
    return any_of(compile_branch(accessor, field_filter.operator, raw) for raw in field_filter.values)


def compile_quick_search(quick_search: QuickSearch, index: FieldIndex) -> Predicate:
    accessors = [index.require(name, InvalidSearchColumn) for name in quick_search.field_names]
    return any_of(_text_match(accessor, RelationalOperator.CONTAINS, quick_search.value) for accessor in accessors)


def compile_predicate(spec: FilterSpecification, index: FieldIndex) -> Predicate:
    """AND of every field filter, AND the quick search when present."""
    parts = [compile_filter(f, index) for f in spec.filters]
    if spec.quick_search is not None:
        parts.append(compile_quick_search(spec.quick_search, index))
    return all_of(parts)


def _natural_compare(left: Any, right: Any) -> int:
    if left is None and right is None:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1
    left, right = _aligned(left, right)
    return (left > right) - (left < right)


def compile_comparator(sort: SortRequest, index: FieldIndex) -> Comparator:
    """Compare two records on the sort field; None sorts lowest."""
    accessor = index.require(sort.by, InvalidSortField)
    sign = -1 if sort.descending else 1

    def _compare(left: Any, right: Any) -> int:
        return sign * _natural_compare(accessor.get(left), accessor.get(right))

    return _compare


def sort_records(records: Iterable[Any], sort: SortRequest, index: FieldIndex) -> list[Any]:
    return sorted(records, key=cmp_to_key(compile_comparator(sort, index)))
