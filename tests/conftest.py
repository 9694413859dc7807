"""Pytest configuration shared by the test suite.

Makes ``packages/`` importable without an editable install and keeps tests
hermetic with respect to ``REWARDS_*`` environment variables that a
developer's shell or ``.env`` might set.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
# ``packages/`` must precede the repo root so local packages resolve first.
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

_ENV_VARS = (
    "REWARDS_DATA_PATH",
    "REWARDS_HOST",
    "REWARDS_PORT",
    "PORT",
    "REWARDS_API_DELAY_MS",
    "REWARDS_PUBLIC_DIR",
    "REWARDS_ITEMS_PER_PAGE",
    "REWARDS_MAX_PAGES_DISPLAY",
    "REWARDS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def sample_transactions() -> list[dict[str, object]]:
    return [
        {"customerId": "C001", "customerName": "Alice", "transactionId": "T1", "amount": 120, "date": "2025-01-15"},
        {"customerId": "C001", "customerName": "Alice", "transactionId": "T2", "amount": 75, "date": "2025-01-22"},
        {"customerId": "C002", "customerName": "Bob", "transactionId": "T3", "amount": 200, "date": "2025-02-10"},
        {"customerId": "C001", "customerName": "Alice", "transactionId": "T4", "amount": 150, "date": "2025-02-28"},
        {"customerId": "C003", "customerName": "Carol", "transactionId": "T5", "amount": 40, "date": "2025-03-05"},
    ]
