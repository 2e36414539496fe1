"""SQLModel implementation of Budget repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.budget import Budget
from ...models.timestamps import utc_now


class SQLModelBudgetRepository:
    """SQLModel-based budget repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, budget_id: int) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        with self.session_factory() as session:
            obj = session.get(Budget, budget_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_for_category_month(self, category_id: int, month: str) -> Optional[Budget]:
        """Return the single budget for a (category, month) pair, if any."""
        with self.session_factory() as session:
            statement = (
                select(Budget)
                .where(Budget.category_id == category_id)
                .where(Budget.month == month)
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, month: Optional[str] = None) -> list[Budget]:
        """List budgets, optionally restricted to one ``YYYY-MM`` month."""
        with self.session_factory() as session:
            statement = select(Budget)
            if month is not None:
                statement = statement.where(Budget.month == month)
            statement = statement.order_by(Budget.month, Budget.category_id)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert(self, *, category_id: int, month: str, amount: float) -> tuple[Budget, bool]:
        """Create or update the budget keyed by (category_id, month).

        Returns the stored row and whether it was newly created. A concurrent
        insert of the same key surfaces as ``sqlalchemy.exc.IntegrityError``.
        """
        with self.session_factory() as session:
            existing = session.exec(
                select(Budget)
                .where(Budget.category_id == category_id)
                .where(Budget.month == month)
            ).first()

            if existing:
                existing.amount = amount
                existing.updated_at = utc_now()
                session.add(existing)
                session.commit()
                session.refresh(existing)
                session.expunge(existing)
                return existing, False

            budget = Budget(category_id=category_id, month=month, amount=amount)
            session.add(budget)
            session.commit()
            session.refresh(budget)
            session.expunge(budget)
            return budget, True

    def update(self, budget: Budget) -> Budget:
        """Update an existing budget (may move it to another category/month)."""
        with self.session_factory() as session:
            budget.updated_at = utc_now()
            merged = session.merge(budget)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, budget_id: int) -> bool:
        """Delete a budget by ID; returns False when it did not exist."""
        with self.session_factory() as session:
            budget = session.get(Budget, budget_id)
            if budget is None:
                return False
            session.delete(budget)
            session.commit()
            return True
