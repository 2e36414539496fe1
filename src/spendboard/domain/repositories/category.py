"""Category repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing categories."""

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Category]:
        """Retrieve a category by name."""
        ...

    def list_all(self) -> list[Category]:
        """List all categories."""
        ...

    def lookup(self, category_ids: Iterable[int]) -> dict[int, Category]:
        """Fetch several categories keyed by id."""
        ...

    def create(self, category: Category) -> Category:
        """Create a new category."""
        ...
