import dataclasses
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.inspection import inspect as sa_inspect


def serialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: serialize_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


def record_to_dict(record: Any) -> dict[str, Any]:
    if dataclasses.is_dataclass(record):
        return {f.name: serialize_value(getattr(record, f.name)) for f in dataclasses.fields(record)}
    mapper = sa_inspect(type(record))
    return {column.key: serialize_value(getattr(record, column.key)) for column in mapper.column_attrs}
