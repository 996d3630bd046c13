from __future__ import annotations

from typing import Mapping

from listquery.core.errors import MalformedFilterValue, UnresolvedFilterField
from listquery.schemas.query import TEXT_OPERATORS, FieldFilter
from listquery.services.field_index import FieldIndex
from listquery.services.operators import OperatorRegistry, coerce_filter_values, default_registry
from listquery.services.reserved import RESERVED_KEYS, SEARCH_COLUMNS_SEPARATOR, VALUE_SEPARATOR


def parse_filter(
    name: str,
    raw_value: str,
    index: FieldIndex,
    registry: OperatorRegistry | None = None,
) -> FieldFilter:
    registry = registry or default_registry
    values_segment, separator, operator_segment = raw_value.partition(SEARCH_COLUMNS_SEPARATOR)
    if not separator:
        raise MalformedFilterValue(name, f'Filter "{name}" is missing its "||operator" suffix')
    operator = registry.resolve(operator_segment)
    if operator is None:
        raise MalformedFilterValue(name, f'Unknown filter operator "{operator_segment}" for "{name}"')
    if not values_segment:
        raise MalformedFilterValue(name, f'Filter "{name}" has no values')

    accessor = index.resolve(name)
    if accessor is None:
        raise UnresolvedFilterField(name, f'Unknown filter field "{name}"')

    values = tuple(values_segment.split(VALUE_SEPARATOR))
    if operator not in TEXT_OPERATORS:
        # fail on values the field type cannot hold before anything is compiled
        coerce_filter_values(accessor, values)

    return FieldFilter(
        field_name=accessor.name,
        values=values,
        operator=operator,
    )


def parse_filters(
    args: Mapping[str, str],
    index: FieldIndex,
    registry: OperatorRegistry | None = None,
) -> list[FieldFilter]:
    return [
        parse_filter(name, raw_value, index, registry)
        for name, raw_value in args.items()
        if name not in RESERVED_KEYS
    ]
