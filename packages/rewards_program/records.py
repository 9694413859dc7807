"""Tolerant accessors for transaction records.

Records arrive as plain mappings (JSON), as :class:`~rewards_program.models.Transaction`
models, or occasionally as garbage. These helpers read fields without raising
so aggregations can skip bad rows instead of aborting.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

# camelCase keys used in JSON mapped to ``Transaction`` attribute names.
_ATTR_NAMES = {
    "customerId": "customer_id",
    "customerName": "customer_name",
    "transactionId": "transaction_id",
}


def is_record_sequence(value: Any) -> bool:
    """Return ``True`` for list/tuple-like sequences of records.

    Strings and bytes are sequences in Python but never collections of records.
    """

    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def get_field(record: Any, key: str) -> Any:
    """Read ``key`` (camelCase JSON name) from a mapping or model, else ``None``."""

    if isinstance(record, Mapping):
        return record.get(key)
    if isinstance(record, BaseModel):
        return getattr(record, _ATTR_NAMES.get(key, key), None)
    return None


def to_plain_dict(record: Any) -> dict[str, Any]:
    """Return a new ``dict`` copy of ``record`` using JSON field names."""

    if isinstance(record, Mapping):
        return dict(record)
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json", by_alias=True)
    return {}


def jsonable(record: Any) -> Any:
    """Return ``record`` in a form ``json`` can encode (models are dumped by alias)."""

    if isinstance(record, BaseModel):
        return record.model_dump(mode="json", by_alias=True)
    return record


def parse_date(value: Any) -> dt.date | None:
    """Parse an ISO calendar date (or datetime) into a ``date``; ``None`` if invalid."""

    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(s).date()
    except ValueError:
        return None


def month_key(value: Any) -> str | None:
    """Return the ``"YYYY-MM"`` bucket for a date value, or ``None``."""

    d = parse_date(value)
    if d is None:
        return None
    return f"{d.year:04d}-{d.month:02d}"


__all__ = [
    "get_field",
    "is_record_sequence",
    "jsonable",
    "month_key",
    "parse_date",
    "to_plain_dict",
]
