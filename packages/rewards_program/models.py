"""Data models and type aliases for ``rewards_program``.

The engine works on raw, mapping-like records so it can tolerate dirty input
from JSON files and HTTP payloads. :class:`Transaction` is the validated shape
used when a caller asks for strict loading.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

# A single transaction as loaded from JSON. Expected keys are ``customerId``,
# ``customerName``, ``transactionId``, ``amount`` and ``date`` but nothing is
# enforced; any of them may be missing or malformed.
type TransactionRecord = Mapping[str, Any]

type Transactions = Sequence[TransactionRecord]

# Diagnostic hook: ``observer(event_name, fields)``. Not part of any result.
type RewardObserver = Callable[[str, Mapping[str, Any]], None]


class Transaction(BaseModel):
    """A validated purchase transaction.

    Field names follow Python conventions; the camelCase aliases match the
    JSON documents served and consumed by the API.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    customer_id: str = Field(alias="customerId")
    customer_name: str = Field(alias="customerName")
    transaction_id: str = Field(alias="transactionId")
    amount: float
    date: dt.date

    @field_validator("customer_id", "transaction_id")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("identifier must be non-empty")
        return v


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PaginationResult(Generic[T]):
    """One page of an ordered collection.

    ``start_index`` and ``end_index`` are 1-based and inclusive;
    ``page_items`` is exactly ``items[start_index - 1:end_index]`` of the input
    after the requested page has been clamped into range. An empty input gives
    ``start_index == 1`` and ``end_index == 0``.
    """

    page_items: list[T] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_items: int = 0
    has_next_page: bool = False
    has_prev_page: bool = False
    start_index: int = 1
    end_index: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Render with the camelCase keys used by the HTTP API."""

        return {
            "pageItems": list(self.page_items),
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
        }


__all__ = [
    "PaginationResult",
    "RewardObserver",
    "Transaction",
    "TransactionRecord",
    "Transactions",
]
