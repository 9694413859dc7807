"""Transaction filters used by the HTTP API and the CLI.

All filters return new lists and accept the same dirty input as the rewards
engine: a non-sequence yields ``[]`` and records with unreadable fields never
match.
"""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Any

from .records import get_field, is_record_sequence, parse_date


def filter_by_customer(transactions: Any, customer_id: str) -> list[Any]:
    if not is_record_sequence(transactions):
        return []
    return [tx for tx in transactions if get_field(tx, "customerId") == customer_id]


def filter_by_month_year(transactions: Any, month: int, year: int) -> list[Any]:
    """Return transactions dated in calendar ``month`` (1-12) of ``year``."""

    if not is_record_sequence(transactions):
        return []
    out: list[Any] = []
    for tx in transactions:
        d = parse_date(get_field(tx, "date"))
        if d is not None and d.month == month and d.year == year:
            out.append(tx)
    return out


def months_ago(today: dt.date, months: int) -> dt.date:
    """Return ``today`` shifted back by ``months`` calendar months.

    The day is clamped to the length of the target month, so
    ``months_ago(date(2025, 5, 31), 3)`` is ``2025-02-28``.
    """

    total = today.year * 12 + (today.month - 1) - months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return dt.date(year, month, day)


def filter_since(transactions: Any, since: dt.date) -> list[Any]:
    """Return transactions dated on or after ``since``."""

    if not is_record_sequence(transactions):
        return []
    out: list[Any] = []
    for tx in transactions:
        d = parse_date(get_field(tx, "date"))
        if d is not None and d >= since:
            out.append(tx)
    return out


__all__ = ["filter_by_customer", "filter_by_month_year", "filter_since", "months_ago"]
