import datetime as dt
import json
from pathlib import Path

import pytest

from rewards_program import AppSettings, RewardsConfig
from rewards_program.server import create_app


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(api_delay_ms=0)


@pytest.fixture()
def client(sample_transactions, settings):
    app = create_app(sample_transactions, settings=settings)
    app.config["TESTING"] = True
    return app.test_client()


def test_get_transactions_returns_all(client, sample_transactions):
    resp = client.get("/api/transactions")
    assert resp.status_code == 200
    assert resp.get_json() == sample_transactions


def test_get_transactions_filters_are_cumulative(client):
    resp = client.get("/api/transactions?customerId=C001&month=2&year=2025")
    assert [t["transactionId"] for t in resp.get_json()] == ["T4"]


def test_get_transactions_month_year_only(client):
    resp = client.get("/api/transactions?month=1&year=2025")
    assert [t["transactionId"] for t in resp.get_json()] == ["T1", "T2"]


def test_get_transactions_with_points(client):
    resp = client.get("/api/transactions?customerId=C001&withPoints=true")
    body = resp.get_json()
    assert [t["rewardPoints"] for t in body] == [90, 25, 150]


@pytest.mark.parametrize(
    "query",
    ["month=13&year=2025", "month=abc&year=2025", "month=2", "year=2025"],
)
def test_get_transactions_bad_month_year(client, query):
    resp = client.get(f"/api/transactions?{query}")
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_get_customers_unpaginated(client):
    resp = client.get("/api/customers")
    assert resp.get_json() == [
        {"customerId": "C001", "customerName": "Alice"},
        {"customerId": "C002", "customerName": "Bob"},
        {"customerId": "C003", "customerName": "Carol"},
    ]


def test_get_customers_paginated(client):
    resp = client.get("/api/customers?page=9&perPage=2")
    body = resp.get_json()
    assert body["currentPage"] == 2
    assert body["totalPages"] == 2
    assert body["pageItems"] == [{"customerId": "C003", "customerName": "Carol"}]
    assert body["pageNumbers"] == [1, 2]
    assert body["hasNextPage"] is False
    assert body["hasPrevPage"] is True


def test_get_rewards(client):
    resp = client.get("/api/rewards/C001")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["totalPoints"] == 265
    assert body["transactionCount"] == 3
    assert body["monthlyPoints"] == {"2025-01": 115, "2025-02": 150}


def test_get_rewards_keeps_month_insertion_order(sample_transactions, settings):
    txs = [
        {"customerId": "X", "customerName": "X", "amount": 120, "date": "2025-03-01"},
        {"customerId": "X", "customerName": "X", "amount": 120, "date": "2024-11-01"},
    ]
    client = create_app(txs, settings=settings).test_client()
    resp = client.get("/api/rewards/X")
    assert list(json.loads(resp.data)["monthlyPoints"]) == ["2025-03", "2024-11"]


def test_get_rewards_unknown_customer_is_zero(client):
    body = client.get("/api/rewards/NOPE").get_json()
    assert body["totalPoints"] == 0
    assert body["transactionCount"] == 0


def test_get_rewards_uses_configured_tiers(sample_transactions):
    settings = AppSettings(api_delay_ms=0, rewards=RewardsConfig(points_per_dollar_over_100=1))
    client = create_app(sample_transactions, settings=settings).test_client()
    # 120 -> 20 + 50, 75 -> 25, 150 -> 50 + 50
    assert client.get("/api/rewards/C001").get_json()["totalPoints"] == 195


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}


def test_index_without_public_dir_is_404(client):
    assert client.get("/").status_code == 404


def test_index_served_from_public_dir(tmp_path: Path, sample_transactions):
    (tmp_path / "index.html").write_text("<h1>Rewards</h1>", encoding="utf-8")
    settings = AppSettings(api_delay_ms=0, public_dir=tmp_path)
    client = create_app(sample_transactions, settings=settings).test_client()
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"Rewards" in resp.data


def test_create_app_loads_from_data_path(tmp_path: Path, sample_transactions):
    path = tmp_path / "tx.json"
    path.write_text(json.dumps(sample_transactions), encoding="utf-8")
    app = create_app(settings=AppSettings(api_delay_ms=0, data_path=path))
    assert app.test_client().get("/api/customers").status_code == 200


def test_create_app_missing_data_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        create_app(settings=AppSettings(api_delay_ms=0, data_path=tmp_path / "nope.json"))


def test_latency_is_applied_to_api_routes(sample_transactions, monkeypatch):
    import rewards_program.server as server_mod

    sleeps: list[float] = []
    monkeypatch.setattr(server_mod.time, "sleep", sleeps.append)
    client = create_app(sample_transactions, settings=AppSettings(api_delay_ms=250)).test_client()
    client.get("/api/customers")
    assert sleeps == [0.25]


def test_get_transactions_last_months_window(settings):
    today = dt.date.today()
    txs = [
        {"customerId": "C1", "customerName": "A", "transactionId": "old", "amount": 120,
         "date": (today - dt.timedelta(days=400)).isoformat()},
        {"customerId": "C1", "customerName": "A", "transactionId": "new", "amount": 120,
         "date": today.isoformat()},
    ]
    client = create_app(txs, settings=settings).test_client()
    resp = client.get("/api/transactions?customerId=C1&months=3")
    assert [t["transactionId"] for t in resp.get_json()] == ["new"]
    assert client.get("/api/transactions?months=-1").status_code == 400
