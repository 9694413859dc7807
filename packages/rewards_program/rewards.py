"""Reward points engine.

Points are a piecewise-linear function of a purchase amount:

- nothing for the first ``threshold_50`` dollars,
- ``points_per_dollar_50_to_100`` for every dollar between the two thresholds,
- ``points_per_dollar_over_100`` for every dollar above ``threshold_100``.

The final value is rounded half-up to an integer. Every operation here is
total: malformed amounts, dates or collections produce ``0``, ``{}`` or ``[]``
instead of an exception, so one dirty record never aborts an aggregation.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from .config import DEFAULT_REWARDS_CONFIG, RewardsConfig
from .filters import filter_by_customer
from .logging_setup import get_logger
from .models import RewardObserver
from .records import get_field, is_record_sequence, month_key, to_plain_dict

_logger = get_logger("rewards_program.rewards")


def _emit(
    observer: RewardObserver | None,
    event: str,
    fields: Mapping[str, Any],
    *,
    warning: bool = False,
) -> None:
    if observer is not None:
        observer(event, fields)
        return
    if warning:
        _logger.warning("%s %s", event, dict(fields))
    elif _logger.isEnabledFor(logging.DEBUG):
        _logger.debug("%s %s", event, dict(fields))


def _coerce_amount(amount: Any) -> float | None:
    """Return a finite positive float for ``amount`` or ``None``."""

    # bool is an int subclass; True is not a purchase amount.
    if isinstance(amount, bool):
        return None
    if not isinstance(amount, (int, float, Decimal, str)):
        return None
    try:
        value = float(amount.strip() if isinstance(amount, str) else amount)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def points_for_amount(
    amount: Any,
    *,
    config: RewardsConfig | None = None,
    observer: RewardObserver | None = None,
) -> int:
    """Return the reward points earned by a single purchase of ``amount``.

    Examples with the default tiers: ``120 -> 90``, ``75 -> 25``,
    ``120.25 -> 91`` (raw ``90.5`` rounds up).
    """

    cfg = config or DEFAULT_REWARDS_CONFIG
    value = _coerce_amount(amount)
    if value is None:
        _emit(observer, "invalid_amount", {"amount": amount}, warning=True)
        return 0

    points = 0.0
    if value > cfg.threshold_100:
        points += (value - cfg.threshold_100) * cfg.points_per_dollar_over_100
        points += (cfg.threshold_100 - cfg.threshold_50) * cfg.points_per_dollar_50_to_100
    elif value > cfg.threshold_50:
        points += (value - cfg.threshold_50) * cfg.points_per_dollar_50_to_100

    # Amounts near the float maximum overflow once multiplied by a rate.
    if not math.isfinite(points):
        _emit(observer, "invalid_amount", {"amount": amount}, warning=True)
        return 0

    result = math.floor(points + 0.5)
    _emit(observer, "points_calculated", {"amount": value, "points": result})
    return result


def total_points(
    transactions: Any,
    *,
    config: RewardsConfig | None = None,
    observer: RewardObserver | None = None,
) -> int:
    """Sum the points of every transaction; non-sequences yield ``0``."""

    if not is_record_sequence(transactions):
        _emit(observer, "invalid_transactions", {"operation": "total_points"}, warning=True)
        return 0

    total = sum(
        points_for_amount(get_field(tx, "amount"), config=config, observer=observer)
        for tx in transactions
    )
    _emit(
        observer,
        "total_points_calculated",
        {"transaction_count": len(transactions), "total_points": total},
    )
    return total


def points_by_month(
    transactions: Any,
    *,
    config: RewardsConfig | None = None,
    observer: RewardObserver | None = None,
) -> dict[str, int]:
    """Group points into ``"YYYY-MM"`` buckets.

    Each transaction is rounded before being added to its bucket. Transactions
    without a parseable date are left out of every bucket. Keys keep the order
    in which months were first seen.
    """

    if not is_record_sequence(transactions):
        _emit(observer, "invalid_transactions", {"operation": "points_by_month"}, warning=True)
        return {}

    monthly: dict[str, int] = {}
    skipped = 0
    for tx in transactions:
        key = month_key(get_field(tx, "date"))
        if key is None:
            skipped += 1
            continue
        points = points_for_amount(get_field(tx, "amount"), config=config, observer=observer)
        monthly[key] = monthly.get(key, 0) + points

    _emit(
        observer,
        "monthly_points_calculated",
        {"transaction_count": len(transactions), "skipped": skipped, "monthly_points": monthly},
    )
    return monthly


def enrich_with_points(
    transactions: Any,
    *,
    config: RewardsConfig | None = None,
    observer: RewardObserver | None = None,
) -> list[dict[str, Any]]:
    """Return copies of ``transactions`` with a ``rewardPoints`` field added."""

    if not is_record_sequence(transactions):
        _emit(observer, "invalid_transactions", {"operation": "enrich_with_points"}, warning=True)
        return []

    enriched: list[dict[str, Any]] = []
    for tx in transactions:
        row = to_plain_dict(tx)
        row["rewardPoints"] = points_for_amount(
            get_field(tx, "amount"), config=config, observer=observer
        )
        enriched.append(row)
    return enriched


def customer_rewards_summary(
    transactions: Any,
    customer_id: str,
    *,
    config: RewardsConfig | None = None,
    observer: RewardObserver | None = None,
) -> dict[str, Any]:
    """Totals for one customer: overall points, per-month points and count.

    An unknown customer gets a zero summary with ``customerName`` set to
    ``None``.
    """

    own = filter_by_customer(transactions, customer_id)
    name = next(
        (get_field(tx, "customerName") for tx in own if get_field(tx, "customerName")),
        None,
    )
    return {
        "customerId": customer_id,
        "customerName": name,
        "totalPoints": total_points(own, config=config, observer=observer),
        "transactionCount": len(own),
        "monthlyPoints": points_by_month(own, config=config, observer=observer),
    }


__all__ = [
    "customer_rewards_summary",
    "enrich_with_points",
    "points_by_month",
    "points_for_amount",
    "total_points",
]
