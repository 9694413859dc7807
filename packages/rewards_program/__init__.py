"""Public interface for the ``rewards_program`` package.

Re-exports the reward engine, pagination helpers, configuration and models as
the stable import surface. There is no runtime logic here.
"""

from .config import AppSettings, PaginationConfig, RewardsConfig, load_settings
from .filters import filter_by_customer, filter_by_month_year, filter_since, months_ago
from .loader import load_transactions, parse_transactions
from .models import (
    PaginationResult,
    RewardObserver,
    Transaction,
    TransactionRecord,
    Transactions,
)
from .pagination import page_window, paginate, unique_customers, unique_customers_paginated
from .rewards import (
    customer_rewards_summary,
    enrich_with_points,
    points_by_month,
    points_for_amount,
    total_points,
)

__all__ = [
    # Reward engine
    "points_for_amount",
    "total_points",
    "points_by_month",
    "enrich_with_points",
    "customer_rewards_summary",
    # Pagination
    "paginate",
    "page_window",
    "unique_customers",
    "unique_customers_paginated",
    # Filters
    "filter_by_customer",
    "filter_by_month_year",
    "filter_since",
    "months_ago",
    # Loading
    "load_transactions",
    "parse_transactions",
    # Config
    "AppSettings",
    "PaginationConfig",
    "RewardsConfig",
    "load_settings",
    # Models / types
    "PaginationResult",
    "RewardObserver",
    "Transaction",
    "TransactionRecord",
    "Transactions",
]
