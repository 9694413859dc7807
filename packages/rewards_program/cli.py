"""CLI for the ``rewards_program`` package.

Typer-based console interface. Environment variables are loaded from a local
``.env`` using ``python-dotenv`` in the root callback, which also configures
logging once. Business logic lives in :mod:`rewards_program.rewards` and
:mod:`rewards_program.pagination`; the command handlers here only load data,
call into them and print.
"""

from __future__ import annotations

import datetime as dt
import json
import sys
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import OptionInfo

from .logging_setup import configure_logging

app = typer.Typer(add_completion=False, help="Loyalty reward points over purchase transactions.")


# Module-level option object so the default is not a call in the signature.
DATA_PATH_OPTION: OptionInfo = typer.Option(
    None,
    "--data-path",
    help="JSON file with transactions (falls back to REWARDS_DATA_PATH).",
    dir_okay=False,
    file_okay=True,
)


def _load(data_path: Path | None) -> list[Any] | None:
    """Load transactions, printing a readable error and returning ``None`` on failure."""

    from .config import load_settings
    from .loader import load_transactions

    path = data_path or load_settings().data_path
    try:
        return load_transactions(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
    except PermissionError:
        print(f"Error: Permission denied: {path}", file=sys.stderr)
    except json.JSONDecodeError as e:
        print(f"Error: Failed to parse JSON: {e}", file=sys.stderr)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
    return None


def cmd_rewards(
    data_path: Path | None, *, customer_id: str | None = None, months: int | None = None
) -> int:
    """Print reward totals per customer, followed by their monthly buckets.

    Output is tab separated: one ``<customerId>\\t<customerName>\\t<total>``
    line per customer, then ``\\t<YYYY-MM>\\t<points>`` for each month.
    With ``months`` only transactions from the last ``months`` calendar months
    (up to today) are counted.
    """

    from .filters import filter_since, months_ago
    from .pagination import unique_customers
    from .rewards import customer_rewards_summary

    transactions = _load(data_path)
    if transactions is None:
        return 1
    if months is not None:
        transactions = filter_since(transactions, months_ago(dt.date.today(), months))

    if customer_id is not None:
        ids = [customer_id]
    else:
        ids = [c["customerId"] for c in unique_customers(transactions)]

    for cid in ids:
        summary = customer_rewards_summary(transactions, cid)
        print(f"{cid}\t{summary['customerName'] or ''}\t{summary['totalPoints']}")
        for month, points in summary["monthlyPoints"].items():
            print(f"\t{month}\t{points}")
    return 0


def cmd_customers(data_path: Path | None, *, page: int = 1, per_page: int | None = None) -> int:
    """Print one page of distinct customers and the pager window under it."""

    from .pagination import page_window, unique_customers_paginated

    transactions = _load(data_path)
    if transactions is None:
        return 1

    result = unique_customers_paginated(transactions, page, per_page)
    for customer in result.page_items:
        print(f"{customer['customerId']}\t{customer['customerName'] or ''}")
    pages = page_window(result.current_page, result.total_pages)
    print(
        f"Showing {result.start_index}-{result.end_index} of {result.total_items} "
        f"(page {result.current_page}/{result.total_pages}) "
        f"pages: {' '.join(str(p) for p in pages)}"
    )
    return 0


@app.command("rewards")
def rewards_cmd(
    data_path: Path | None = DATA_PATH_OPTION,
    customer_id: str | None = typer.Option(
        None, "--customer-id", help="Only report this customer."
    ),
    months: int | None = typer.Option(
        None, "--months", min=0, max=1200, help="Only count the last N calendar months."
    ),
) -> None:
    raise typer.Exit(cmd_rewards(data_path, customer_id=customer_id, months=months))


@app.command("customers")
def customers_cmd(
    data_path: Path | None = DATA_PATH_OPTION,
    page: int = typer.Option(1, help="1-based page number (clamped into range)."),
    per_page: int | None = typer.Option(
        None, "--per-page", min=1, help="Customers per page (default from settings)."
    ),
) -> None:
    raise typer.Exit(cmd_customers(data_path, page=page, per_page=per_page))


@app.command("serve")
def serve_cmd(
    data_path: Path | None = DATA_PATH_OPTION,
    host: str | None = typer.Option(None, help="Bind address (REWARDS_HOST)."),
    port: int | None = typer.Option(None, help="Port (REWARDS_PORT / PORT)."),
    delay_ms: int | None = typer.Option(
        None, "--delay-ms", min=0, help="Simulated API latency in milliseconds."
    ),
    public_dir: Path | None = typer.Option(
        None, "--public-dir", file_okay=False, help="Directory with index.html."
    ),
) -> None:
    """Run the HTTP API."""

    from .config import load_settings
    from .server import run_server

    try:
        settings = load_settings(
            data_path=data_path,
            host=host,
            port=port,
            api_delay_ms=delay_ms,
            public_dir=public_dir,
        )
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        raise typer.Exit(1) from e

    try:
        run_server(settings)
    except (OSError, ValueError) as e:
        print(f"Error: failed to start server: {e}", file=sys.stderr)
        raise typer.Exit(1) from e


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (falls back to REWARDS_LOG_LEVEL)."
    ),
) -> None:
    """Load ``.env`` from the current directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level, also=("werkzeug",))


if __name__ == "__main__":  # pragma: no cover
    app()
