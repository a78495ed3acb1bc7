"""orjson helpers for attrs entities stored as JSON strings in Kvrocks."""

from datetime import datetime
from decimal import Decimal
from typing import Any

import attrs
import orjson


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f'Type is not JSON serializable: {type(value).__name__}')


def dumps(entity: Any) -> str:
    data = attrs.asdict(entity) if attrs.has(type(entity)) else entity
    return orjson.dumps(data, default=_default).decode()


def loads(raw: str | bytes) -> Any:
    return orjson.loads(raw)


def parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
