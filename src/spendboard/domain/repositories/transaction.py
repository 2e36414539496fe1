"""Transaction repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Repository for managing transactions."""

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def list_all(self, *, year: Optional[int] = None) -> list[Transaction]:
        """List transactions newest first."""
        ...

    def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        ...

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        ...

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID."""
        ...
