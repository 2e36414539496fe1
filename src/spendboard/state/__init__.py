"""Client-side state: entity store and mutation coordinator."""

from .coordinator import MutationCoordinator, Outcome
from .store import (
    BUDGETS,
    CATEGORIES,
    TRANSACTIONS,
    EntityStore,
    LoadStatus,
    StoreSnapshot,
)

__all__ = [
    "BUDGETS",
    "CATEGORIES",
    "TRANSACTIONS",
    "EntityStore",
    "LoadStatus",
    "MutationCoordinator",
    "Outcome",
    "StoreSnapshot",
]
