"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from sqlmodel import Session, col, select

from ...models.transaction import Transaction
from ...models.timestamps import utc_now


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.get(Transaction, transaction_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, year: Optional[int] = None) -> list[Transaction]:
        """List transactions newest first, optionally limited to one calendar year."""
        with self.session_factory() as session:
            statement = select(Transaction)
            if year is not None:
                statement = statement.where(Transaction.occurred_on >= date(year, 1, 1))
                statement = statement.where(Transaction.occurred_on <= date(year, 12, 31))
            statement = statement.order_by(
                col(Transaction.occurred_on).desc(), col(Transaction.id).desc()
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        with self.session_factory() as session:
            transaction.updated_at = utc_now()
            merged = session.merge(transaction)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID; returns False when it did not exist."""
        with self.session_factory() as session:
            transaction = session.get(Transaction, transaction_id)
            if transaction is None:
                return False
            session.delete(transaction)
            session.commit()
            return True
