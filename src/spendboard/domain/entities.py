"""Strict in-memory entity types held by the entity store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

UNCATEGORIZED_NAME = "Uncategorized"


@dataclass(frozen=True, slots=True)
class CategoryRef:
    """Denormalized id+name copy embedded in transactions and budgets."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class Category:
    id: int
    name: str
    type: str = "expense"
    color: Optional[str] = None
    icon: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A transaction as last reported by the gateway.

    ``amount`` and ``date`` are ``None`` when the wire value was missing or
    unparseable; aggregates skip them instead of failing.
    """

    id: int
    amount: Optional[float]
    description: str
    date: Optional[date]
    category_id: Optional[int] = None
    category: Optional[CategoryRef] = None
    type: Optional[str] = None

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else UNCATEGORIZED_NAME


@dataclass(frozen=True, slots=True)
class Budget:
    id: int
    amount: float
    month: str
    category_id: int
    category: Optional[CategoryRef] = None

    @property
    def key(self) -> str:
        """Natural key; at most one budget exists per key."""
        return budget_key(self.category_id, self.month)


def budget_key(category_id: int, month: str) -> str:
    return f"{category_id}-{month}"
