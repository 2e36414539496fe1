"""Remote data gateway protocol consumed by the mutation coordinator."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

WireObject = dict[str, Any]


class Gateway(Protocol):
    """Asynchronous request/response boundary to the persistence service.

    Every method returns JSON-shaped dicts (camelCase keys) or raises one of
    the ``spendboard.domain.errors`` types.
    """

    async def list_transactions(self, *, year: Optional[int] = None) -> list[WireObject]:
        """List transactions, newest first, optionally for one year."""
        ...

    async def create_transaction(self, payload: Mapping[str, Any]) -> WireObject:
        """Create a transaction from amount/description/date/categoryId."""
        ...

    async def update_transaction(
        self, transaction_id: int, changes: Mapping[str, Any]
    ) -> WireObject:
        """Apply a partial update and return the transaction with its category."""
        ...

    async def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        ...

    async def list_categories(self) -> list[WireObject]:
        """List all categories."""
        ...

    async def create_category(self, payload: Mapping[str, Any]) -> WireObject:
        """Create a category; duplicate names raise ConflictError."""
        ...

    async def list_budgets(self, *, month: Optional[str] = None) -> list[WireObject]:
        """List budgets, optionally for one ``YYYY-MM`` month."""
        ...

    async def upsert_budget(self, payload: Mapping[str, Any]) -> WireObject:
        """Create or update the budget keyed by categoryId+month."""
        ...

    async def update_budget(self, budget_id: int, payload: Mapping[str, Any]) -> WireObject:
        """Replace amount/month/categoryId of an existing budget."""
        ...

    async def delete_budget(self, budget_id: int) -> None:
        """Delete a budget."""
        ...
