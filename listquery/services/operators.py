from __future__ import annotations

import math
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from listquery.core.errors import MalformedFilterValue
from listquery.schemas.query import RelationalOperator
from listquery.services.field_index import FieldAccessor

DEFAULT_OPERATOR_CODES: dict[str, RelationalOperator] = {
    "eq": RelationalOperator.EQUALS,
    "neq": RelationalOperator.NOT_EQUALS,
    "ne": RelationalOperator.NOT_EQUALS,
    "gt": RelationalOperator.GREATER_THAN,
    "gte": RelationalOperator.GREATER_OR_EQUAL,
    "ge": RelationalOperator.GREATER_OR_EQUAL,
    "lt": RelationalOperator.LESS_THAN,
    "lte": RelationalOperator.LESS_OR_EQUAL,
    "le": RelationalOperator.LESS_OR_EQUAL,
    "contains": RelationalOperator.CONTAINS,
    "like": RelationalOperator.CONTAINS,
    "startswith": RelationalOperator.STARTS_WITH,
    "endswith": RelationalOperator.ENDS_WITH,
}


class OperatorRegistry:
    """Maps the operator codes used after ``||`` in filter values."""

    def __init__(self, codes: Mapping[str, RelationalOperator] | None = None):
        self._codes: dict[str, RelationalOperator] = {}
        for code, operator in (codes or {}).items():
            self.register(code, operator)

    def register(self, code: str, operator: RelationalOperator | str) -> None:
        key = str(code or "").strip().lower()
        if not key:
            raise ValueError("Operator code must not be empty")
        self._codes[key] = RelationalOperator(operator)

    def resolve(self, code: str) -> RelationalOperator | None:
        return self._codes.get(str(code or "").strip().lower())

    def codes(self) -> list[str]:
        return sorted(self._codes)

    def copy(self) -> "OperatorRegistry":
        return OperatorRegistry(self._codes)


default_registry = OperatorRegistry(DEFAULT_OPERATOR_CODES)

# signed 64-bit, the widest integer a database column binds
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT64_MAX_DIGITS = 19


def fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def _bad_filter_value(field_name: str, kind: str) -> MalformedFilterValue:
    return MalformedFilterValue(field_name, f'Invalid filter value for field "{field_name}" ({kind})')


def _coerce_bool(field_name: str, value: str) -> bool:
    text = value.strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    raise _bad_filter_value(field_name, "boolean")


def _coerce_number(field_name: str, value: str, python_type: type):
    normalized = value.strip().replace(",", ".")
    if not normalized:
        raise _bad_filter_value(field_name, "number")
    if python_type is int:
        return _coerce_int64(field_name, normalized)
    try:
        number = float(normalized) if python_type is float else Decimal(normalized)
    except (ValueError, TypeError, InvalidOperation):
        raise _bad_filter_value(field_name, "number")
    finite = math.isfinite(number) if python_type is float else number.is_finite()
    if not finite:
        raise _bad_filter_value(field_name, "number")
    return number


def _coerce_int64(field_name: str, text: str) -> int:
    # longer digit runs would hit the interpreter's int conversion limit
    if len(text.lstrip("+-").lstrip("0")) > INT64_MAX_DIGITS:
        raise _bad_filter_value(field_name, "integer out of range")
    try:
        number = int(text)
    except ValueError:
        raise _bad_filter_value(field_name, "number")
    if not fits_int64(number):
        raise _bad_filter_value(field_name, "integer out of range")
    return number


def _coerce_date(field_name: str, value: str) -> date:
    text = value.strip()
    try:
        # Accept either YYYY-MM-DD or full ISO datetime and take its date part.
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise _bad_filter_value(field_name, "date")


def _coerce_datetime(field_name: str, value: str) -> datetime:
    text = value.strip()
    try:
        if is_date_only_literal(text):
            # Date-only filter value for timestamp fields -> start of the day.
            parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise _bad_filter_value(field_name, "datetime")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_date_only_literal(raw_value: str) -> bool:
    text = str(raw_value or "").strip()
    if not text or "T" in text or " " in text:
        return False
    try:
        date.fromisoformat(text)
        return True
    except ValueError:
        return False


def coerce_filter_value(accessor: FieldAccessor, value: str) -> Any:
    """Convert a raw filter value to the Python type of the target field."""
    python_type = accessor.python_type
    if python_type is None or python_type is str:
        return value
    if python_type is uuid.UUID:
        try:
            return uuid.UUID(value.strip())
        except ValueError:
            raise _bad_filter_value(accessor.name, "uuid")
    if python_type is bool:
        return _coerce_bool(accessor.name, value)
    if python_type in {int, float, Decimal}:
        return _coerce_number(accessor.name, value, python_type)
    # datetime is a date subclass, so it is checked first
    if python_type is datetime:
        return _coerce_datetime(accessor.name, value)
    if python_type is date:
        return _coerce_date(accessor.name, value)
    return value


def coerce_filter_values(accessor: FieldAccessor, values: Iterable[str]) -> list[Any]:
    return [coerce_filter_value(accessor, value) for value in values]
