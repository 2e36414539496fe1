"""Tests for the composed dashboard summary."""

from __future__ import annotations

from datetime import date

import pytest

from spendboard.domain.entities import Budget, Category
from spendboard.services.dashboard import NO_CATEGORY_LABEL, build_dashboard
from spendboard.state.store import BUDGETS, CATEGORIES, TRANSACTIONS, EntityStore


def _loaded_store(make_transaction) -> EntityStore:
    store = EntityStore(selected_year=2024)
    store.mark_succeeded(CATEGORIES, [Category(id=3, name="Food"), Category(id=4, name="Housing")])
    store.mark_succeeded(
        TRANSACTIONS,
        [
            make_transaction(630, on=date(2024, 3, 2), category_id=4, category_name="Housing"),
            make_transaction(70, on=date(2024, 3, 5), category_id=3, category_name="Food"),
            make_transaction(50, on=date(2024, 3, 9), category_id=3, category_name="Food"),
            make_transaction(450, on=date(2024, 2, 9), category_id=3, category_name="Food"),
            make_transaction(1000, on=date(2024, 3, 1), txn_type="income"),
            make_transaction(99, on=date(2023, 7, 1), category_id=3, category_name="Food"),
        ],
    )
    store.mark_succeeded(BUDGETS, [Budget(id=1, amount=100, month="2024-03", category_id=3)])
    return store


def test_dashboard_not_ready_before_transactions_load():
    summary = build_dashboard(EntityStore(selected_year=2024).snapshot(), year=2024, month="2024-03")

    assert summary.ready is False
    assert summary.total_expenses == 0
    assert summary.top_category == NO_CATEGORY_LABEL
    assert len(summary.monthly_series) == 12


def test_dashboard_figures(make_transaction):
    store = _loaded_store(make_transaction)

    summary = build_dashboard(store.snapshot(), year=2024, month="2024-03")

    assert summary.ready is True
    assert summary.total_expenses == 1200
    assert summary.average_monthly == 100
    assert summary.top_category == "Housing"
    assert summary.monthly_series[1].amount == 450
    assert summary.monthly_series[2].amount == 750
    (food,) = summary.over_budget
    assert food.name == "Food"
    assert food.spent == 120
    assert food.over_budget == 20
    assert summary.total_budget == 100
    assert summary.month_over_month.change_percent == pytest.approx(200 / 3)
    assert summary.available_years == [2024, 2023]
    assert len(summary.recent_transactions) == 5


def test_dashboard_skips_budgets_when_budget_fetch_failed(make_transaction):
    store = _loaded_store(make_transaction)
    store.mark_failed(BUDGETS, "boom")

    summary = build_dashboard(store.snapshot(), year=2024, month="2024-03")

    assert summary.budget_comparison == []
    assert summary.total_budget == 0


def test_dashboard_with_no_spending_shows_placeholder():
    store = EntityStore(selected_year=2024)
    store.mark_succeeded(TRANSACTIONS, [])

    summary = build_dashboard(store.snapshot(), year=2024, month="2024-03")

    assert summary.ready is True
    assert summary.top_category == NO_CATEGORY_LABEL
    assert summary.pie_slices == []
    assert summary.to_dict()["monthly_series"][0] == {"name": "Jan", "amount": 0.0}
