"""Pytest configuration and shared fixtures for SpendBoard tests.

Two kinds of fixtures live here: a real Flask app backed by a temporary
SQLite file (for API, repository and end-to-end gateway tests), and an
in-memory ``FakeGateway`` that speaks the same wire shape without any I/O
(for store and coordinator tests that need fault injection).
"""

from __future__ import annotations

import itertools
import logging
from datetime import date
from typing import Any, Mapping, Optional

import pytest

from spendboard import create_app
from spendboard.config import TestConfig
from spendboard.domain.errors import ConflictError, NotFoundError, ValidationError
from spendboard.infra.gateway import HttpGateway
from spendboard.logging_config import ROOT_LOGGER_NAME
from spendboard.models import Category
from spendboard.state import EntityStore, MutationCoordinator


# =============================================================================
# Application Fixtures
# =============================================================================


def _close_log_handlers() -> None:
    """Release the rotating log file so tmp_path can be removed."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def config(tmp_path, monkeypatch) -> TestConfig:
    """Test configuration writing the database and logs under ``tmp_path``."""

    monkeypatch.setenv("SPENDBOARD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDBOARD_DEV_MODE", "true")
    return TestConfig(database_url=f"sqlite:///{tmp_path / 'test.db'}", data_dir=tmp_path)


@pytest.fixture
def app(config):
    """Create a Flask app bound to an isolated SQLite database."""

    flask_app = create_app(config=config)
    yield flask_app
    flask_app.extensions["spendboard"].engine.dispose()
    _close_log_handlers()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repos(app):
    return app.extensions["spendboard"]


@pytest.fixture
def category_factory(repos):
    """Factory for persisting categories directly through the repository.

    Returns:
        Callable: Function that creates and returns Category rows
    """

    def _create_category(name: str = "Food", category_type: str = "expense") -> Category:
        return repos.categories.create(Category(name=name, category_type=category_type))

    return _create_category


@pytest.fixture
def http_gateway(app) -> HttpGateway:
    return HttpGateway.for_app(app)


@pytest.fixture
def store() -> EntityStore:
    return EntityStore(selected_year=2024)


@pytest.fixture
def live_coordinator(store, http_gateway) -> MutationCoordinator:
    """Coordinator wired to the real API through the HTTP gateway."""
    return MutationCoordinator(store, http_gateway)


# =============================================================================
# In-memory Gateway
# =============================================================================


class FakeGateway:
    """Gateway double holding wire-shaped rows in dictionaries.

    ``fail(method, error)`` makes the next call to ``method`` raise ``error``;
    every call is recorded in ``calls`` as ``(method, args)``.
    """

    def __init__(self) -> None:
        self.transactions: dict[int, dict[str, Any]] = {}
        self.categories: dict[int, dict[str, Any]] = {}
        self.budgets: dict[int, dict[str, Any]] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._failures: dict[str, list[Exception]] = {}
        self._ids = itertools.count(1)

    # -- test helpers --------------------------------------------------------
    def fail(self, method: str, error: Exception, times: int = 1) -> None:
        self._failures.setdefault(method, []).extend([error] * times)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def add_category(self, name: str, category_type: str = "expense") -> dict[str, Any]:
        row = {"id": next(self._ids), "name": name, "type": category_type, "color": None, "icon": None}
        self.categories[row["id"]] = row
        return dict(row)

    def add_transaction(
        self,
        amount: float,
        description: str,
        on: str,
        category_id: Optional[int] = None,
        txn_type: Optional[str] = None,
    ) -> dict[str, Any]:
        row = {
            "id": next(self._ids),
            "amount": amount,
            "description": description,
            "date": on,
            "categoryId": category_id,
            "type": txn_type,
        }
        self.transactions[row["id"]] = row
        return self._transaction_wire(row)

    def add_budget(self, category_id: int, month: str, amount: float) -> dict[str, Any]:
        row = {"id": next(self._ids), "amount": amount, "month": month, "categoryId": category_id}
        self.budgets[row["id"]] = row
        return self._budget_wire(row)

    # -- internals -----------------------------------------------------------
    def _enter(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        pending = self._failures.get(method)
        if pending:
            raise pending.pop(0)

    def _ref(self, category_id: Optional[int]) -> Optional[dict[str, Any]]:
        row = self.categories.get(category_id) if category_id else None
        return {"id": row["id"], "name": row["name"]} if row else None

    def _transaction_wire(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {**row, "category": self._ref(row["categoryId"])}

    def _budget_wire(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {**row, "category": self._ref(row["categoryId"])}

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and category_id not in self.categories:
            raise ValidationError("Category not found")

    def _budget_for(self, category_id: int, month: str) -> Optional[dict[str, Any]]:
        for row in self.budgets.values():
            if row["categoryId"] == category_id and row["month"] == month:
                return row
        return None

    # -- Gateway protocol ----------------------------------------------------
    async def list_transactions(self, *, year: Optional[int] = None) -> list[dict[str, Any]]:
        self._enter("list_transactions", year)
        rows = [
            row for row in self.transactions.values()
            if year is None or row["date"][:4] == str(year)
        ]
        rows.sort(key=lambda row: (row["date"], row["id"]), reverse=True)
        return [self._transaction_wire(row) for row in rows]

    async def create_transaction(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        self._enter("create_transaction", dict(payload))
        self._check_category(payload.get("categoryId"))
        return self.add_transaction(
            payload["amount"],
            payload["description"],
            payload["date"],
            payload.get("categoryId"),
            payload.get("type"),
        )

    async def update_transaction(
        self, transaction_id: int, changes: Mapping[str, Any]
    ) -> dict[str, Any]:
        self._enter("update_transaction", transaction_id, dict(changes))
        row = self.transactions.get(transaction_id)
        if row is None:
            raise NotFoundError("Transaction not found")
        if "categoryId" in changes:
            self._check_category(changes["categoryId"])
        row.update(changes)
        return self._transaction_wire(row)

    async def delete_transaction(self, transaction_id: int) -> None:
        self._enter("delete_transaction", transaction_id)
        if self.transactions.pop(transaction_id, None) is None:
            raise NotFoundError("Transaction not found")

    async def list_categories(self) -> list[dict[str, Any]]:
        self._enter("list_categories")
        return [dict(row) for row in sorted(self.categories.values(), key=lambda row: row["name"])]

    async def create_category(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        self._enter("create_category", dict(payload))
        if any(row["name"] == payload["name"] for row in self.categories.values()):
            raise ConflictError("A category with this name already exists")
        return self.add_category(payload["name"], payload.get("type") or "expense")

    async def list_budgets(self, *, month: Optional[str] = None) -> list[dict[str, Any]]:
        self._enter("list_budgets", month)
        return [
            self._budget_wire(row) for row in self.budgets.values()
            if month is None or row["month"] == month
        ]

    async def upsert_budget(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        self._enter("upsert_budget", dict(payload))
        self._check_category(payload["categoryId"])
        existing = self._budget_for(payload["categoryId"], payload["month"])
        if existing is not None:
            existing["amount"] = payload["amount"]
            return self._budget_wire(existing)
        return self.add_budget(payload["categoryId"], payload["month"], payload["amount"])

    async def update_budget(self, budget_id: int, payload: Mapping[str, Any]) -> dict[str, Any]:
        self._enter("update_budget", budget_id, dict(payload))
        row = self.budgets.get(budget_id)
        if row is None:
            raise NotFoundError("Budget not found")
        occupant = self._budget_for(payload["categoryId"], payload["month"])
        if occupant is not None and occupant["id"] != budget_id:
            raise ConflictError("A budget for this category and month already exists")
        row.update(
            amount=payload["amount"], month=payload["month"], categoryId=payload["categoryId"]
        )
        return self._budget_wire(row)

    async def delete_budget(self, budget_id: int) -> None:
        self._enter("delete_budget", budget_id)
        if self.budgets.pop(budget_id, None) is None:
            raise NotFoundError("Budget not found")


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def coordinator(store, fake_gateway) -> MutationCoordinator:
    return MutationCoordinator(store, fake_gateway)


# =============================================================================
# Entity Builders
# =============================================================================


@pytest.fixture
def make_transaction():
    """Build a domain ``Transaction`` with sensible defaults."""

    from spendboard.domain.entities import CategoryRef, Transaction

    counter = itertools.count(1)

    def _make(
        amount: Optional[float] = 10.0,
        on: Optional[date] = date(2024, 3, 5),
        category_id: Optional[int] = None,
        category_name: Optional[str] = None,
        txn_type: Optional[str] = None,
        description: str = "Test transaction",
        txn_id: Optional[int] = None,
    ) -> Transaction:
        category = None
        if category_id and category_name:
            category = CategoryRef(id=category_id, name=category_name)
        return Transaction(
            id=txn_id if txn_id is not None else next(counter),
            amount=amount,
            description=description,
            date=on,
            category_id=category_id,
            category=category,
            type=txn_type,
        )

    return _make
