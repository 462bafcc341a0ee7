"""HTTP tests for the forecasting endpoint."""

import asyncio
from datetime import date

import duckdb

from routes import forecast as forecast_route
from services import projection_service
from services.projection_service import (
    MISSING_USER_MESSAGE,
    NO_DATA_MESSAGE,
    SUCCESS_MESSAGE,
    calculate_forecast,
)

URL = "/api/ai-features/forecasting"


def post(client, body):
    return client.post(URL, json=body)


class TestRequestValidation:
    """400 responses."""

    def test_missing_timeframe(self, client, example_transactions):
        response = post(client, {"transactions": example_transactions, "userId": "u1"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "timeframe is required"}

    def test_invalid_timeframe(self, client):
        response = post(client, {"timeframe": "forever", "userId": "u1"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid timeframe specified"

    def test_invalid_json(self, client):
        response = client.post(URL, content=b"{not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_non_object_body(self, client):
        response = post(client, [{"timeframe": "3months"}])
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_wrong_field_type(self, client):
        response = post(client, {"timeframe": "3months", "userId": "u1", "transactions": "lots"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request body: transactions")

    def test_user_cannot_be_determined(self, client, example_transactions):
        response = post(client, {"timeframe": "3months", "transactions": example_transactions})
        assert response.status_code == 400
        assert response.json()["error"] == MISSING_USER_MESSAGE


class TestProvidedData:
    """Requests carrying all their own data."""

    def test_example_payload(self, client, example_transactions):
        response = post(client, {
            "timeframe": "3months",
            "userId": "u1",
            "transactions": example_transactions,
            "recurring": [],
            "settings": {"default_currency": "GBP"},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True

        data = body["data"]
        assert data["message"] == SUCCESS_MESSAGE
        assert data["upcomingExpenses"] == []
        assert len(data["monthlyForecasts"]) == 5
        assert data["monthlyForecasts"][0] == {
            "month": "Jan 2024",
            "income": 1000,
            "expenses": 400,
            "savings": 600,
            "prediction": False,
            "currency": "GBP",
        }
        assert [m["income"] for m in data["monthlyForecasts"][2:]] == [1210, 1331, 1464]

        (category,) = data["categoryForecasts"]
        assert set(category) == {
            "categoryId", "category", "color", "current", "forecast",
            "change", "trend", "confidence", "currency",
        }
        assert category["categoryId"] == "uncategorized"

    def test_user_id_from_transactions(self, client, example_transactions):
        for tx in example_transactions:
            tx["user_id"] = "owner-7"
        response = post(client, {
            "timeframe": "6months", "transactions": example_transactions,
            "recurring": [], "settings": {},
        })
        assert response.status_code == 200

    def test_signaling_nan_amount_is_dropped(self, client, example_transactions):
        example_transactions.append({"date": "2024-02-21", "amount": "sNaN", "type": "expense"})
        response = post(client, {
            "timeframe": "3months", "userId": "u1",
            "transactions": example_transactions, "recurring": [], "settings": {},
        })
        assert response.status_code == 200
        feb = response.json()["data"]["monthlyForecasts"][1]
        assert feb["expenses"] == 420

    def test_empty_transactions(self, client):
        response = post(client, {
            "timeframe": "12months", "userId": "u1",
            "transactions": [], "recurring": [], "settings": {},
        })
        assert response.status_code == 200
        assert response.json()["data"] == {
            "monthlyForecasts": [],
            "categoryForecasts": [],
            "upcomingExpenses": [],
            "message": NO_DATA_MESSAGE,
        }

    def test_upcoming_row_shape(self, client, example_transactions):
        start = date.today().isoformat()
        response = post(client, {
            "timeframe": "3months", "userId": "u1",
            "transactions": example_transactions, "settings": {},
            "recurring": [{
                "id": "sub", "description": "Software", "amount": 49,
                "frequency": "monthly", "start_date": start,
                "category": {"name": "Tools", "color": "#0000ff"},
            }],
        })
        assert response.status_code == 200
        first = response.json()["data"]["upcomingExpenses"][0]
        assert first == {
            "id": f"sub-{start}",
            "description": "Software",
            "amount": 49,
            "date": start,
            "category": {"name": "Tools", "color": "#0000ff"},
            "frequency": "monthly",
            "currency": "USD",
        }


class TestStoredData:
    """Requests that rely on the store."""

    def test_user_id_only(self, client, seeded_db):
        response = post(client, {"timeframe": "3months", "userId": "user-1"})
        assert response.status_code == 200
        data = response.json()["data"]

        assert data["message"] == SUCCESS_MESSAGE
        assert all(m["currency"] == "EUR" for m in data["monthlyForecasts"])
        assert {c["categoryId"] for c in data["categoryForecasts"]} == {"cat-food", "cat-rent"}

        upcoming = data["upcomingExpenses"]
        assert len(upcoming) >= 3
        assert all(u["id"].startswith("rec-rent-") for u in upcoming)
        assert all(u["date"] >= date.today().isoformat() for u in upcoming)
        assert upcoming[0]["category"] == {"name": "Rent", "color": "#ff0000"}

    def test_unknown_user(self, client, seeded_db):
        response = post(client, {"timeframe": "3months", "userId": "nobody"})
        assert response.status_code == 200
        assert response.json()["data"]["message"] == NO_DATA_MESSAGE


class TestServerErrors:
    """500 responses and degraded sections."""

    def test_bad_recurring_definition(self, client, example_transactions):
        response = post(client, {
            "timeframe": "3months", "userId": "u1",
            "transactions": example_transactions, "settings": {},
            "recurring": [{"id": "r", "amount": 5, "frequency": "hourly", "start_date": "2025-01-01"}],
        })
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"].startswith("Error processing forecast data: ")

    def test_fetch_failure(self, client, monkeypatch):
        def broken(conn, user_id, start_date, end_date):
            raise duckdb.Error("boom")

        monkeypatch.setattr(projection_service, "get_transactions_in_range", broken)
        response = post(client, {"timeframe": "3months", "userId": "u1"})
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to fetch transactions: boom"}

    def test_category_failure_degrades(self, client, example_transactions, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("nope")

        monkeypatch.setattr(projection_service, "generate_category_forecasts", explode)
        response = post(client, {
            "timeframe": "3months", "userId": "u1",
            "transactions": example_transactions, "recurring": [], "settings": {},
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["categoryForecasts"] == []
        assert len(data["monthlyForecasts"]) == 5

    def test_unexpected_error_keeps_json_body(self, client, monkeypatch):
        def explode(**kwargs):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(forecast_route, "calculate_forecast", explode)
        response = post(client, {"timeframe": "3months", "userId": "u1"})
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to process forecasting request"}


def test_forecast_runs_off_the_event_loop(client, example_transactions, monkeypatch):
    loops_seen = []

    def spy(**kwargs):
        try:
            loops_seen.append(asyncio.get_running_loop())
        except RuntimeError:
            loops_seen.append(None)
        return calculate_forecast(**kwargs)

    monkeypatch.setattr(forecast_route, "calculate_forecast", spy)
    response = post(client, {
        "timeframe": "3months", "userId": "u1",
        "transactions": example_transactions, "recurring": [], "settings": {},
    })
    assert response.status_code == 200
    assert loops_seen == [None]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
