"""Dashboard aggregates derived from store snapshots.

Everything here is a pure function of its arguments: the same transactions,
budgets and categories always give the same figures, and nothing is mutated.

Conventions shared by every aggregate:

* amounts are summed as ``abs(amount)``; a ``None`` amount contributes 0;
* a transaction whose ``type`` is ``"income"`` is not spending, any other
  (including a missing type) is;
* transactions without a parseable date are left out of month buckets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from ..domain.entities import UNCATEGORIZED_NAME, Budget, Category, Transaction
from ..domain.validation import validate_month

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
UNCATEGORIZED_KEY = "uncategorized"


@dataclass(frozen=True, slots=True)
class CategoryTotal:
    category_id: Union[int, str]
    name: str
    value: float


@dataclass(frozen=True, slots=True)
class MonthlyAmount:
    name: str
    amount: float


@dataclass(frozen=True, slots=True)
class BudgetComparison:
    """Budget versus actual spend for one category in one month."""

    category_id: int
    name: str
    budget: float
    spent: float
    remaining: float
    over_budget: float
    utilization_percent: float


@dataclass(frozen=True, slots=True)
class MonthOverMonth:
    month: str
    previous_month: str
    current: float
    previous: float
    change_percent: float


def is_expense(txn: Transaction) -> bool:
    return txn.type != "income"


def _magnitude(txn: Transaction) -> float:
    return abs(txn.amount) if txn.amount is not None else 0.0


def _month_parts(month: str) -> tuple[int, int]:
    month = validate_month(month)
    return int(month[:4]), int(month[5:7])


def previous_month(month: str) -> str:
    """``"2024-01"`` -> ``"2023-12"``."""

    year, number = _month_parts(month)
    if number == 1:
        return f"{year - 1}-12"
    return f"{year}-{number - 1:02d}"


def transactions_in_year(transactions: Iterable[Transaction], year: int) -> list[Transaction]:
    return [txn for txn in transactions if txn.date is not None and txn.date.year == year]


def transactions_in_month(transactions: Iterable[Transaction], month: str) -> list[Transaction]:
    year, number = _month_parts(month)
    return [
        txn for txn in transactions
        if txn.date is not None and txn.date.year == year and txn.date.month == number
    ]


def category_totals(
    transactions: Iterable[Transaction], categories: Iterable[Category] = ()
) -> list[CategoryTotal]:
    """Spending per category; rows without a category share one bucket.

    Names come from the transaction's category snapshot, then ``categories``,
    then an id placeholder, so a store whose categories have not loaded yet
    still produces usable labels.
    """

    lookup = {category.id: category.name for category in categories}
    totals: dict[Union[int, str], float] = {}
    names: dict[Union[int, str], str] = {}

    for txn in transactions:
        if not is_expense(txn):
            continue
        key: Union[int, str] = txn.category_id or UNCATEGORIZED_KEY
        if key not in totals:
            totals[key] = 0.0
            names[key] = _category_label(txn, lookup)
        totals[key] += _magnitude(txn)

    return [CategoryTotal(category_id=key, name=names[key], value=round(total, 2))
            for key, total in totals.items()]


def _category_label(txn: Transaction, lookup: dict[int, str]) -> str:
    if not txn.category_id:
        return UNCATEGORIZED_NAME
    if txn.category is not None:
        return txn.category.name
    return lookup.get(txn.category_id, f"Category {txn.category_id}")


def non_zero(totals: Iterable[CategoryTotal]) -> list[CategoryTotal]:
    """Pie-chart filter: drop empty slices."""

    return [total for total in totals if total.value > 0]


def monthly_series(transactions: Iterable[Transaction], year: int) -> list[MonthlyAmount]:
    """Twelve entries, January to December; empty months are 0."""

    buckets = [0.0] * 12
    for txn in transactions:
        if not is_expense(txn) or txn.date is None or txn.date.year != year:
            continue
        buckets[txn.date.month - 1] += _magnitude(txn)
    return [
        MonthlyAmount(name=name, amount=round(amount, 2))
        for name, amount in zip(MONTH_ABBREVIATIONS, buckets)
    ]


def top_category(totals: Iterable[CategoryTotal]) -> Optional[CategoryTotal]:
    """Largest positive total; equal totals resolve by name, then id."""

    candidates = [total for total in totals if total.value > 0]
    if not candidates:
        return None
    return min(
        candidates,
        key=lambda total: (-total.value, total.name.casefold(), str(total.category_id)),
    )


def total_expenses(transactions: Iterable[Transaction]) -> float:
    return round(sum(_magnitude(txn) for txn in transactions if is_expense(txn)), 2)


def average_monthly(total: float) -> float:
    """Always divides by 12, however many months actually have data."""

    return total / 12


def budget_vs_actual(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    categories: Iterable[Category],
    month: str,
) -> list[BudgetComparison]:
    """Compare each budget of ``month`` with what was spent, largest spend first.

    Budgets without a category id, or whose category is not among
    ``categories``, are skipped.
    """

    lookup = {category.id: category for category in categories}
    spending: dict[int, float] = {}
    for txn in transactions_in_month(transactions, month):
        if is_expense(txn) and txn.category_id:
            spending[txn.category_id] = spending.get(txn.category_id, 0.0) + _magnitude(txn)

    rows: list[BudgetComparison] = []
    for budget in budgets:
        if budget.month != month or not budget.category_id:
            continue
        category = lookup.get(budget.category_id)
        if category is None:
            continue
        spent = round(spending.get(budget.category_id, 0.0), 2)
        utilization = min(100.0, spent / budget.amount * 100) if budget.amount > 0 else 0.0
        rows.append(
            BudgetComparison(
                category_id=budget.category_id,
                name=category.name,
                budget=budget.amount,
                spent=spent,
                remaining=round(max(0.0, budget.amount - spent), 2),
                over_budget=round(max(0.0, spent - budget.amount), 2),
                utilization_percent=utilization,
            )
        )

    rows.sort(key=lambda row: row.spent, reverse=True)
    return rows


def over_budget_categories(comparisons: Iterable[BudgetComparison]) -> list[BudgetComparison]:
    return [row for row in comparisons if row.over_budget > 0]


def total_budget_for_month(budgets: Iterable[Budget], month: str) -> float:
    return round(sum(budget.amount for budget in budgets if budget.month == month), 2)


def period_over_period_change(current: float, previous: float) -> float:
    """Percentage change; a zero baseline yields 100 (growth) or 0."""

    if previous > 0:
        return ((current - previous) / previous) * 100
    return 100.0 if current > 0 else 0.0


def month_over_month(transactions: Sequence[Transaction], month: str) -> MonthOverMonth:
    prior = previous_month(month)
    current_total = total_expenses(transactions_in_month(transactions, month))
    previous_total = total_expenses(transactions_in_month(transactions, prior))
    return MonthOverMonth(
        month=month,
        previous_month=prior,
        current=current_total,
        previous=previous_total,
        change_percent=period_over_period_change(current_total, previous_total),
    )


def recent_transactions(transactions: Sequence[Transaction], limit: int = 5) -> list[Transaction]:
    """Newest first; undated rows sort last."""

    dated = [txn for txn in transactions if txn.date is not None]
    undated = [txn for txn in transactions if txn.date is None]
    dated.sort(key=lambda txn: txn.date, reverse=True)  # type: ignore[arg-type, return-value]
    return (dated + undated)[:limit]


def available_years(transactions: Iterable[Transaction], current_year: int) -> list[int]:
    """Years with data plus ``current_year``, newest first."""

    years = {txn.date.year for txn in transactions if txn.date is not None}
    years.add(current_year)
    return sorted(years, reverse=True)
