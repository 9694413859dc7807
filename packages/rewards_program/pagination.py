"""Page slicing and page-number windows for list views.

``paginate`` clamps the requested page into range and never raises;
``page_window`` produces the contiguous run of page numbers shown in a pager
control, kept full-width whenever enough pages exist.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from .config import DEFAULT_PAGINATION_CONFIG, PaginationConfig
from .logging_setup import get_logger
from .models import PaginationResult, RewardObserver
from .records import get_field, is_record_sequence

_logger = get_logger("rewards_program.pagination")


def _emit(observer: RewardObserver | None, event: str, fields: Mapping[str, Any]) -> None:
    if observer is not None:
        observer(event, fields)
    else:
        _logger.debug("%s %s", event, dict(fields))


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def paginate(
    items: Any,
    current_page: Any = 1,
    items_per_page: int | None = None,
    *,
    config: PaginationConfig | None = None,
    observer: RewardObserver | None = None,
) -> PaginationResult[Any]:
    """Return the page of ``items`` at ``current_page`` (1-based).

    Non-sequence ``items`` are treated as empty. The page is clamped into
    ``[1, total_pages]``; with no items it is ``1`` and the slice is empty.
    """

    cfg = config or DEFAULT_PAGINATION_CONFIG
    per_page = max(1, _as_int(items_per_page, cfg.items_per_page))
    seq = list(items) if is_record_sequence(items) else []

    total_items = len(seq)
    total_pages = math.ceil(total_items / per_page)
    page = max(1, min(_as_int(current_page, 1), total_pages))

    start = (page - 1) * per_page
    end = min(start + per_page, total_items)

    result = PaginationResult(
        page_items=seq[start:end],
        current_page=page,
        total_pages=total_pages,
        total_items=total_items,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
        start_index=start + 1,
        end_index=end,
    )
    _emit(
        observer,
        "pagination_calculated",
        {
            "total_items": total_items,
            "total_pages": total_pages,
            "current_page": page,
            "items_per_page": per_page,
        },
    )
    return result


def page_window(
    current_page: int,
    total_pages: int,
    max_display: int | None = None,
    *,
    config: PaginationConfig | None = None,
) -> list[int]:
    """Return up to ``max_display`` consecutive page numbers around ``current_page``.

    >>> page_window(5, 20, 5)
    [3, 4, 5, 6, 7]
    >>> page_window(1, 3, 5)
    [1, 2, 3]
    """

    cfg = config or DEFAULT_PAGINATION_CONFIG
    if total_pages <= 0:
        return []
    size = cfg.max_pages_display if max_display is None else max_display

    start = max(1, current_page - size // 2)
    end = min(total_pages, start + size - 1)
    # Near the last page the window would shrink; slide it left instead.
    if end - start + 1 < size:
        start = max(1, end - size + 1)
    return list(range(start, end + 1))


def unique_customers(transactions: Any) -> list[dict[str, Any]]:
    """Return ``{customerId, customerName}`` per distinct customer, first seen first."""

    if not is_record_sequence(transactions):
        return []
    seen: dict[Any, dict[str, Any]] = {}
    for tx in transactions:
        customer_id = get_field(tx, "customerId")
        if customer_id is None:
            continue
        try:
            if customer_id in seen:
                continue
        except TypeError:
            # Unhashable ids (lists, tuples holding lists) cannot be deduplicated.
            continue
        seen[customer_id] = {
            "customerId": customer_id,
            "customerName": get_field(tx, "customerName"),
        }
    return list(seen.values())


def unique_customers_paginated(
    transactions: Any,
    current_page: Any = 1,
    items_per_page: int | None = None,
    *,
    config: PaginationConfig | None = None,
    observer: RewardObserver | None = None,
) -> PaginationResult[dict[str, Any]]:
    customers = unique_customers(transactions)
    _emit(observer, "unique_customers_extracted", {"total_customers": len(customers)})
    return paginate(customers, current_page, items_per_page, config=config, observer=observer)


__all__ = ["page_window", "paginate", "unique_customers", "unique_customers_paginated"]
