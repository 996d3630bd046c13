from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Iterable

from sqlalchemy.inspection import inspect as sa_inspect

SEARCHABLE_TYPES = (str, int)


def _normalize_field_name(name: str) -> str:
    return str(name or "").strip().lower()


def _loose_field_name(name: str) -> str:
    # created_at, createdAt and CreatedAt all collapse to "createdat"
    return _normalize_field_name(name).replace("_", "")


@dataclass(frozen=True)
class FieldAccessor:
    name: str
    python_type: type | None
    is_identifier: bool = False

    def get(self, record: Any) -> Any:
        return getattr(record, self.name, None)

    def column(self, model: type) -> Any:
        return getattr(model, self.name)

    @property
    def is_searchable(self) -> bool:
        return not self.is_identifier and self.python_type in SEARCHABLE_TYPES


class FieldIndex:
    """Case-insensitive lookup of the fields of one record type.

    Read-only after construction, so a single instance is shared by every
    request that targets the same record type.
    """

    def __init__(self, record_type: type, fields: Iterable[FieldAccessor]):
        self.record_type = record_type
        self.fields: tuple[FieldAccessor, ...] = tuple(fields)
        self._exact = {_normalize_field_name(f.name): f for f in self.fields}
        self._loose: dict[str, FieldAccessor] = {}
        for f in self.fields:
            self._loose.setdefault(_loose_field_name(f.name), f)

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self.fields)

    def resolve(self, name: str) -> FieldAccessor | None:
        key = _normalize_field_name(name)
        if not key:
            return None
        found = self._exact.get(key)
        if found is not None:
            return found
        return self._loose.get(_loose_field_name(key))

    def require(self, name: str, error_factory: Callable[[str], Exception]) -> FieldAccessor:
        found = self.resolve(name)
        if found is None:
            raise error_factory(name)
        return found

    @property
    def identifier(self) -> FieldAccessor | None:
        for f in self.fields:
            if f.is_identifier:
                return f
        return None

    def default_searchable_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.is_searchable]


def _column_python_type(column) -> type | None:
    try:
        return column.type.python_type
    except Exception:
        return None


def _unwrap_optional(annotation) -> type | None:
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _unwrap_optional(args[0])
        return None
    if isinstance(annotation, type):
        return annotation
    return None


def _sqlalchemy_fields(mapper) -> list[FieldAccessor]:
    fields = []
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        fields.append(
            FieldAccessor(
                name=attr.key,
                python_type=_column_python_type(column),
                is_identifier=bool(column.primary_key),
            )
        )
    return fields


def _dataclass_fields(record_type: type) -> list[FieldAccessor]:
    hints = typing.get_type_hints(record_type)
    return [
        FieldAccessor(
            name=f.name,
            python_type=_unwrap_optional(hints.get(f.name)),
            is_identifier=f.name == "id",
        )
        for f in dataclasses.fields(record_type)
    ]


@lru_cache(maxsize=None)
def build_index(record_type: type) -> FieldIndex:
    mapper = sa_inspect(record_type, raiseerr=False)
    if mapper is not None and hasattr(mapper, "column_attrs"):
        return FieldIndex(record_type, _sqlalchemy_fields(mapper))
    if dataclasses.is_dataclass(record_type):
        return FieldIndex(record_type, _dataclass_fields(record_type))
    raise TypeError(f"{record_type!r} is neither a mapped SQLAlchemy model nor a dataclass")
