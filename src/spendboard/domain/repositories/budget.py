"""Budget repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.budget import Budget


class BudgetRepository(Protocol):
    """Repository for managing budget entities."""

    def get_by_id(self, budget_id: int) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        ...

    def get_for_category_month(self, category_id: int, month: str) -> Optional[Budget]:
        """Get the budget for a category in a ``YYYY-MM`` month."""
        ...

    def list_all(self, *, month: Optional[str] = None) -> list[Budget]:
        """List budgets."""
        ...

    def upsert(self, *, category_id: int, month: str, amount: float) -> tuple[Budget, bool]:
        """Create or update by (category_id, month)."""
        ...

    def update(self, budget: Budget) -> Budget:
        """Update an existing budget."""
        ...

    def delete(self, budget_id: int) -> bool:
        """Delete a budget by ID."""
        ...
