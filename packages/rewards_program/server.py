"""Flask application exposing transactions, customers and reward totals.

Routes
------
- ``GET /api/transactions``: all transactions, optionally narrowed by
  ``customerId``, by ``month`` + ``year`` and by ``months`` (the last N
  calendar months up to today); ``withPoints=1`` adds
  ``rewardPoints`` to each row.
- ``GET /api/customers``: distinct customers; with ``page`` (and optional
  ``perPage``) a pagination envelope plus ``pageNumbers`` is returned instead.
- ``GET /api/rewards/<customer_id>``: total and monthly points for a customer.
- ``GET /``: ``index.html`` from the configured public directory, if any.

Every ``/api`` response is delayed by ``AppSettings.api_delay_ms`` to mimic a
remote service.
"""

from __future__ import annotations

import datetime as dt
import time
from collections.abc import Sequence
from typing import Any

from flask import Blueprint, Flask, abort, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import HTTPException

from .config import AppSettings, load_settings
from .filters import filter_by_customer, filter_by_month_year, filter_since, months_ago
from .loader import load_transactions
from .logging_setup import configure_logging, get_logger
from .pagination import page_window, unique_customers, unique_customers_paginated
from .records import jsonable
from .rewards import customer_rewards_summary, enrich_with_points

_logger = get_logger("rewards_program.server")

_TRUTHY = {"1", "true", "yes", "on"}

api_bp = Blueprint("api", __name__, url_prefix="/api")


class BadQuery(ValueError):
    """A query parameter could not be interpreted."""


def _settings() -> AppSettings:
    return current_app.config["REWARDS_SETTINGS"]


def _transactions() -> list[Any]:
    return current_app.config["REWARDS_TRANSACTIONS"]


def _int_arg(name: str, *, minimum: int | None = None, maximum: int | None = None) -> int | None:
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError as e:
        raise BadQuery(f"{name} must be an integer") from e
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        raise BadQuery(f"{name} is out of range")
    return value


@api_bp.before_request
def _simulate_latency() -> None:
    delay_ms = _settings().api_delay_ms
    if delay_ms:
        time.sleep(delay_ms / 1000)


@api_bp.errorhandler(BadQuery)
def _bad_query(err: BadQuery):
    _logger.warning("Bad query on %s: %s", request.path, err)
    return jsonify({"error": str(err)}), 400


@api_bp.route("/transactions", methods=["GET"])
def get_transactions():
    customer_id = request.args.get("customerId")
    month = _int_arg("month", minimum=1, maximum=12)
    year = _int_arg("year", minimum=1)
    months = _int_arg("months", minimum=0, maximum=1200)
    if (month is None) != (year is None):
        raise BadQuery("month and year must be given together")

    rows: Sequence[Any] = _transactions()
    if customer_id:
        rows = filter_by_customer(rows, customer_id)
        _logger.info("Transactions filtered by customer %s (count=%d)", customer_id, len(rows))
    if month is not None and year is not None:
        rows = filter_by_month_year(rows, month, year)
        _logger.info("Transactions filtered by %04d-%02d (count=%d)", year, month, len(rows))
    if months is not None:
        since = months_ago(dt.date.today(), months)
        rows = filter_since(rows, since)
        _logger.info("Transactions filtered since %s (count=%d)", since.isoformat(), len(rows))

    if request.args.get("withPoints", "").strip().lower() in _TRUTHY:
        return jsonify(enrich_with_points(rows, config=_settings().rewards))
    return jsonify([jsonable(r) for r in rows])


@api_bp.route("/customers", methods=["GET"])
def get_customers():
    settings = _settings()
    page = _int_arg("page")
    if page is None:
        customers = unique_customers(_transactions())
        _logger.info("Customers listed (count=%d)", len(customers))
        return jsonify(customers)

    per_page = _int_arg("perPage", minimum=1)
    result = unique_customers_paginated(
        _transactions(), page, per_page, config=settings.pagination
    )
    body = result.to_dict()
    body["pageNumbers"] = page_window(
        result.current_page, result.total_pages, config=settings.pagination
    )
    return jsonify(body)


@api_bp.route("/rewards/<customer_id>", methods=["GET"])
def get_rewards(customer_id: str):
    summary = customer_rewards_summary(
        _transactions(), customer_id, config=_settings().rewards
    )
    _logger.info(
        "Rewards computed for %s (total=%d)", customer_id, summary["totalPoints"]
    )
    return jsonify(summary)


def create_app(
    transactions: Sequence[Any] | None = None,
    *,
    settings: AppSettings | None = None,
) -> Flask:
    """Build the Flask app.

    When ``transactions`` is omitted they are loaded from
    ``settings.data_path``; loader errors propagate to the caller.
    """

    settings = settings or load_settings()
    if transactions is None:
        transactions = load_transactions(settings.data_path)

    public_dir = settings.public_dir.resolve() if settings.public_dir else None
    app = Flask(
        __name__,
        static_folder=str(public_dir) if public_dir else None,
        static_url_path="",
    )
    # Keep insertion order of monthly buckets in JSON output.
    app.json.sort_keys = False
    app.config["REWARDS_SETTINGS"] = settings
    app.config["REWARDS_TRANSACTIONS"] = list(transactions)
    app.register_blueprint(api_bp)

    @app.route("/", methods=["GET"])
    def index():
        if public_dir is None or not (public_dir / "index.html").is_file():
            abort(404)
        return send_from_directory(public_dir, "index.html")

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        if err.code == 404:
            _logger.warning("404 Not Found: %s", request.path)
            return jsonify({"error": "Not found"}), 404
        return jsonify({"error": err.name}), err.code

    @app.errorhandler(Exception)
    def _unhandled(err: Exception):
        _logger.exception("Unhandled error on %s: %s", request.path, err)
        return jsonify({"error": "Internal server error"}), 500

    return app


def run_server(settings: AppSettings) -> None:
    """Configure logging, load data and serve until interrupted."""

    configure_logging(settings.log_level, also=("werkzeug",))

    app = create_app(settings=settings)
    _logger.info(
        "Server starting on http://%s:%d (transactions=%d)",
        settings.host,
        settings.port,
        len(app.config["REWARDS_TRANSACTIONS"]),
    )
    app.run(host=settings.host, port=settings.port)


__all__ = ["create_app", "run_server"]
