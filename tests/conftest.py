"""Test fixtures for the forecasting service tests."""

from datetime import date

import pytest
from dateutil.relativedelta import relativedelta
from fastapi.testclient import TestClient

import db
from repositories.settings_repository import add_category, upsert_company_settings
from repositories.transactions_repository import insert_transaction

USER_ID = "user-1"


def months_ago(n: int) -> date:
    return date.today() - relativedelta(months=n)


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    """Point the app at a fresh DuckDB file with the schema created."""
    path = tmp_path / "forecast.duckdb"
    monkeypatch.setattr(db, "DB_FILE", str(path))
    db.init_db()
    return path


@pytest.fixture
def seeded_db(db_file):
    """Database with settings, categories, history and one recurring rent definition.

    All dates are relative to today so the fiscal-year history window holds.
    """
    conn = db.get_db()
    try:
        upsert_company_settings(conn, USER_ID, default_currency="EUR",
                                fiscal_year_start="01", company_name="Acme Ltd")
        add_category(conn, "cat-rent", "Rent", user_id=USER_ID, color="#ff0000")
        add_category(conn, "cat-food", "Food", user_id=USER_ID, color="#00ff00")

        rows = [
            dict(id="tx-inc-1", user_id=USER_ID, date=months_ago(2), amount=3000.0, type="income",
                 description="Client payment"),
            dict(id="tx-inc-2", user_id=USER_ID, date=months_ago(1), amount=3300.0, type="income",
                 description="Client payment"),
            dict(id="tx-food-1", user_id=USER_ID, date=months_ago(2), amount=200.0, type="expense",
                 description="Groceries", category_id="cat-food"),
            dict(id="tx-food-2", user_id=USER_ID, date=months_ago(1), amount=250.0, type="expense",
                 description="Groceries", category_id="cat-food"),
            dict(id="rec-rent", user_id=USER_ID, date=months_ago(2), amount=1200.0, type="expense",
                 description="Office rent", category_id="cat-rent",
                 is_recurring=True, recurrence_frequency="monthly"),
            # outside the history window
            dict(id="tx-old", user_id=USER_ID, date=months_ago(36), amount=999.0, type="expense",
                 description="Ancient"),
            # someone else's data
            dict(id="tx-other", user_id="user-2", date=months_ago(1), amount=50.0, type="expense",
                 description="Not mine"),
        ]
        for row in rows:
            insert_transaction(conn, **row)
    finally:
        conn.close()
    return db_file


@pytest.fixture
def client(db_file):
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def example_transactions() -> list:
    """Two months of income and expenses."""
    return [
        {"id": "t1", "date": "2024-01-15", "amount": 1000, "type": "income"},
        {"id": "t2", "date": "2024-01-20", "amount": 400, "type": "expense"},
        {"id": "t3", "date": "2024-02-15", "amount": 1100, "type": "income"},
        {"id": "t4", "date": "2024-02-20", "amount": 420, "type": "expense"},
    ]
