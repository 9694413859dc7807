"""Load transaction records from a JSON document.

The document must be a JSON array of objects shaped like::

    {"customerId": "C001", "customerName": "Alice", "transactionId": "T001",
     "amount": 120.0, "date": "2025-01-15"}

By default rows are returned as plain dicts without validation; the rewards
engine tolerates malformed rows. ``strict=True`` validates every row as a
:class:`~rewards_program.models.Transaction` and raises on the first bad one.
"""

from __future__ import annotations

import json
from os import PathLike
from pathlib import Path
from typing import Any

from .logging_setup import get_logger
from .models import Transaction

_logger = get_logger("rewards_program.loader")


def parse_transactions(payload: Any, *, strict: bool = False) -> list[Any]:
    """Turn an already-decoded JSON payload into a list of transactions.

    Raises ``ValueError`` when the payload is not a JSON array and
    ``pydantic.ValidationError`` for invalid rows in strict mode.
    """

    if not isinstance(payload, list):
        raise ValueError(
            f"Expected a JSON array of transactions, got {type(payload).__name__}"
        )
    if strict:
        return [Transaction.model_validate(row) for row in payload]
    return list(payload)


def load_transactions(path: str | PathLike[str], *, strict: bool = False) -> list[Any]:
    """Read ``path`` (UTF-8 JSON) and return its transactions.

    ``FileNotFoundError`` and ``json.JSONDecodeError`` propagate unchanged.
    """

    p = Path(path)
    try:
        with p.open(encoding="utf-8") as f:
            payload = json.load(f)
        transactions = parse_transactions(payload, strict=strict)
    except Exception as e:
        _logger.error("Error loading transactions from %s: %s", p, e)
        raise
    _logger.info("Transactions loaded from %s (count=%d)", p, len(transactions))
    return transactions


__all__ = ["load_transactions", "parse_transactions"]
