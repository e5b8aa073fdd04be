"""Mini README: HTTP tests for the FastAPI ledger service.

Each test builds the application around an explicitly created store so the
ledger state stays isolated, then exercises the routes through
``fastapi.testclient.TestClient``.
"""

from __future__ import annotations

import inspect
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from budgetbook.configuration import BudgetbookSettings, get_settings
from budgetbook.finance import InMemoryStorage, LedgerStore, PersistenceError
from budgetbook.finance.aggregator import month_label
from budgetbook.interface import create_application


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> Iterator[None]:
    monkeypatch.setenv("BUDGETBOOK_DATA_DIRECTORY", str(tmp_path))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class ReadOnlyStorage(InMemoryStorage):
    def write(self, key: str, payload: str) -> None:
        raise PersistenceError("storage is read-only")


def test_post_then_summary_reflects_new_transactions() -> None:
    store = LedgerStore.open(InMemoryStorage())
    client = TestClient(create_application(store))

    rent = client.post(
        "/transactions",
        data={"description": "Rent", "amount": "1000", "kind": "expense", "category": "Housing"},
    )
    salary = client.post(
        "/transactions",
        data={"description": "Salary", "amount": "3000", "kind": "income", "category": "Other"},
    )

    assert rent.status_code == 201
    assert rent.json()["message"] == "Transaction added successfully"
    assert salary.json()["transaction"]["kind"] == "income"

    summary = client.get("/summary").json()
    assert summary["balance_display"] == "2000.00"
    assert summary["categories"] == [{"name": "Housing", "value": 1000.0}]
    assert summary["transaction_count"] == 2
    assert summary["load_warning"] is None


def test_post_uses_form_defaults() -> None:
    store = LedgerStore.open(InMemoryStorage())
    client = TestClient(create_application(store))

    response = client.post("/transactions", data={"description": "Snack", "amount": "2.50"})

    assert response.status_code == 201
    payload = response.json()["transaction"]
    assert payload["kind"] == "expense"
    assert payload["category"] == "Other"


def test_invalid_post_returns_400_without_mutation() -> None:
    store = LedgerStore.open(InMemoryStorage())
    client = TestClient(create_application(store))

    response = client.post("/transactions", data={"description": "", "amount": "abc"})

    assert response.status_code == 400
    assert "Description" in response.json()["detail"]
    assert store.snapshot() == ()


def test_persistence_failure_returns_503() -> None:
    store = LedgerStore.open(ReadOnlyStorage())
    client = TestClient(create_application(store))

    response = client.post("/transactions", data={"description": "Rent", "amount": "1000"})

    assert response.status_code == 503
    assert store.snapshot() == ()


def test_transactions_are_listed_newest_first() -> None:
    store = LedgerStore.open(InMemoryStorage())
    store.append("First", 1)
    store.append("Second", 2, "income")
    client = TestClient(create_application(store))

    rows = client.get("/transactions").json()["transactions"]
    limited = client.get("/transactions", params={"limit": 1}).json()["transactions"]

    assert [row["description"] for row in rows] == ["Second", "First"]
    assert rows[0]["display_amount"] == "+2.00"
    assert len(limited) == 1


def test_categories_route_lists_fixed_choices() -> None:
    client = TestClient(create_application(LedgerStore.open(InMemoryStorage())))

    payload = client.get("/categories").json()

    assert payload["categories"][0] == "Housing"
    assert payload["categories"][-1] == "Other"
    assert payload["kinds"] == ["income", "expense"]


def test_default_store_uses_configured_directory(tmp_path) -> None:
    """Without an injected store the app opens the file-backed ledger."""

    client = TestClient(create_application())
    client.post("/transactions", data={"description": "Fuel", "amount": "40", "category": "Transportation"})

    assert (tmp_path / "transactions.json").exists()
    reopened = TestClient(create_application())
    assert reopened.get("/summary").json()["transaction_count"] == 1


def test_add_route_runs_as_sync_handler() -> None:
    """Appending blocks on a lock and fsync, so it must stay off the event loop."""

    app = create_application(LedgerStore.open(InMemoryStorage()))
    (route,) = [
        route
        for route in app.routes
        if getattr(route, "path", None) == "/transactions" and "POST" in route.methods
    ]

    assert not inspect.iscoroutinefunction(route.endpoint)


def test_duplicate_generated_id_returns_500_without_mutation() -> None:
    store = LedgerStore.open(InMemoryStorage(), id_factory=lambda: "fixed")
    store.append("First", 1)
    client = TestClient(create_application(store))

    response = client.post("/transactions", data={"description": "Second", "amount": "2"})

    assert response.status_code == 500
    assert "fixed" in response.json()["detail"]
    assert len(store.snapshot()) == 1


def test_injected_store_does_not_touch_settings(tmp_path, monkeypatch) -> None:
    """Wiring an existing store must not create the default data directory."""

    workdir = tmp_path / "workdir"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("BUDGETBOOK_DATA_DIRECTORY")
    get_settings.cache_clear()

    client = TestClient(create_application(LedgerStore.open(InMemoryStorage())))

    assert client.get("/summary").status_code == 200
    assert not (workdir / "data").exists()


def test_explicit_settings_enable_year_labels(tmp_path) -> None:
    store = LedgerStore.open(InMemoryStorage())
    store.append("Rent", 1000, "expense", "Housing")
    settings = BudgetbookSettings(data_directory=tmp_path, month_labels_include_year=True)
    client = TestClient(create_application(store, settings))

    (row,) = client.get("/summary").json()["monthly"]

    assert row["month"] == month_label(store.snapshot()[0].occurred_at, include_year=True)
