"""Compose analytics into one plain summary a view can render."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from ..domain.entities import Transaction
from ..state.store import BUDGETS, TRANSACTIONS, StoreSnapshot
from . import analytics

NO_CATEGORY_LABEL = "No categories"


@dataclass(frozen=True)
class DashboardSummary:
    """Figures for the dashboard of one year, with budgets for one month.

    ``ready`` is False while transactions have not loaded successfully; the
    figures are then zero-valued defaults rather than partial totals.
    """

    year: int
    month: str
    ready: bool
    total_expenses: float = 0.0
    average_monthly: float = 0.0
    top_category: str = NO_CATEGORY_LABEL
    category_totals: list[analytics.CategoryTotal] = field(default_factory=list)
    pie_slices: list[analytics.CategoryTotal] = field(default_factory=list)
    monthly_series: list[analytics.MonthlyAmount] = field(default_factory=list)
    recent_transactions: list[Transaction] = field(default_factory=list)
    budget_comparison: list[analytics.BudgetComparison] = field(default_factory=list)
    over_budget: list[analytics.BudgetComparison] = field(default_factory=list)
    total_budget: float = 0.0
    month_over_month: analytics.MonthOverMonth | None = None
    available_years: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_dashboard(snapshot: StoreSnapshot, *, year: int, month: str) -> DashboardSummary:
    """Derive every dashboard figure from ``snapshot``."""

    if not snapshot.is_ready(TRANSACTIONS):
        return DashboardSummary(
            year=year,
            month=month,
            ready=False,
            monthly_series=analytics.monthly_series((), year),
        )

    all_transactions = list(snapshot.transactions)
    year_transactions = analytics.transactions_in_year(all_transactions, year)
    totals = analytics.category_totals(year_transactions, snapshot.categories)
    total = analytics.total_expenses(year_transactions)
    top = analytics.top_category(totals)

    budgets = snapshot.budgets if snapshot.is_ready(BUDGETS) else ()
    comparison = analytics.budget_vs_actual(
        all_transactions, budgets, snapshot.categories, month
    )

    return DashboardSummary(
        year=year,
        month=month,
        ready=True,
        total_expenses=total,
        average_monthly=analytics.average_monthly(total),
        top_category=top.name if top else NO_CATEGORY_LABEL,
        category_totals=totals,
        pie_slices=analytics.non_zero(totals),
        monthly_series=analytics.monthly_series(year_transactions, year),
        recent_transactions=analytics.recent_transactions(year_transactions),
        budget_comparison=comparison,
        over_budget=analytics.over_budget_categories(comparison),
        total_budget=analytics.total_budget_for_month(budgets, month),
        month_over_month=analytics.month_over_month(all_transactions, month),
        available_years=analytics.available_years(all_transactions, snapshot.selected_year),
    )
