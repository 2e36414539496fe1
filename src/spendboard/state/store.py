"""Normalized in-memory store for transactions, categories and budgets.

The store holds the latest known state of each collection plus its load
status. It is a plain object handed to whoever needs it; the mutation
coordinator is its only writer and the derivation functions only ever see
``StoreSnapshot`` copies.

Fetch results are applied per collection:

* transactions and categories are **replaced** wholesale, so rows the server
  no longer returns disappear;
* budgets are **merged** by ``"{category_id}-{month}"``, because a
  month-filtered fetch must not erase budgets already known for other months.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..domain.entities import Budget, Category, Transaction, budget_key
from ..logging_config import get_logger

logger = get_logger("state.store")

TRANSACTIONS = "transactions"
CATEGORIES = "categories"
BUDGETS = "budgets"
COLLECTIONS = (TRANSACTIONS, CATEGORIES, BUDGETS)

# A failed fetch empties these so stale rows never look current.
CLEARED_ON_FAILURE = frozenset({TRANSACTIONS, BUDGETS})


class LoadStatus(str, Enum):
    """Request status of one collection."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class CollectionState:
    items: list[Any] = field(default_factory=list)
    status: LoadStatus = LoadStatus.IDLE
    error: Optional[str] = None
    last_fetched: Optional[datetime] = None


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of the store for the duration of one computation."""

    transactions: tuple[Transaction, ...]
    categories: tuple[Category, ...]
    budgets: tuple[Budget, ...]
    statuses: Mapping[str, LoadStatus]
    selected_year: int

    def is_ready(self, *names: str) -> bool:
        wanted = names or COLLECTIONS
        return all(self.statuses[name] is LoadStatus.SUCCEEDED for name in wanted)


def entity_key(collection: str, item: Any) -> Any:
    """Identity used when upserting: budget key for budgets, id otherwise."""

    if collection == BUDGETS:
        return item.key
    return item.id


class EntityStore:
    """Latest known transactions, categories and budgets with load bookkeeping."""

    def __init__(self, *, selected_year: Optional[int] = None) -> None:
        self._state: dict[str, CollectionState] = {name: CollectionState() for name in COLLECTIONS}
        self.selected_year = selected_year or date.today().year
        # Year filter of the last transactions fetch; refetch-after-write reuses it.
        self.transactions_year: Optional[int] = None

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    def _collection(self, name: str) -> CollectionState:
        try:
            return self._state[name]
        except KeyError:
            raise ValueError(f"Unknown collection: {name!r}") from None

    def transactions(self) -> list[Transaction]:
        return list(self._state[TRANSACTIONS].items)

    def categories(self) -> list[Category]:
        return list(self._state[CATEGORIES].items)

    def budgets(self) -> list[Budget]:
        return list(self._state[BUDGETS].items)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._find_by_id(TRANSACTIONS, transaction_id)

    def get_category(self, category_id: int) -> Optional[Category]:
        return self._find_by_id(CATEGORIES, category_id)

    def get_budget(self, budget_id: int) -> Optional[Budget]:
        return self._find_by_id(BUDGETS, budget_id)

    def _find_by_id(self, name: str, entity_id: int) -> Any:
        for item in self._state[name].items:
            if item.id == entity_id:
                return item
        return None

    def transactions_for_year(self, year: int) -> list[Transaction]:
        """Transactions dated in ``year``; undated rows are left out."""
        return [
            txn for txn in self._state[TRANSACTIONS].items
            if txn.date is not None and txn.date.year == year
        ]

    def transactions_for_month(self, year: int, month: int) -> list[Transaction]:
        return [
            txn for txn in self._state[TRANSACTIONS].items
            if txn.date is not None and txn.date.year == year and txn.date.month == month
        ]

    def budgets_for_month(self, month: str) -> list[Budget]:
        return [budget for budget in self._state[BUDGETS].items if budget.month == month]

    def budget_for(self, category_id: int, month: str) -> Optional[Budget]:
        key = budget_key(category_id, month)
        for budget in self._state[BUDGETS].items:
            if budget.key == key:
                return budget
        return None

    def status(self, name: str) -> LoadStatus:
        return self._collection(name).status

    def error(self, name: str) -> Optional[str]:
        return self._collection(name).error

    def last_fetched(self, name: str) -> Optional[datetime]:
        return self._collection(name).last_fetched

    def is_ready(self, *names: str) -> bool:
        wanted = names or COLLECTIONS
        return all(self.status(name) is LoadStatus.SUCCEEDED for name in wanted)

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            transactions=tuple(self._state[TRANSACTIONS].items),
            categories=tuple(self._state[CATEGORIES].items),
            budgets=tuple(self._state[BUDGETS].items),
            statuses={name: state.status for name, state in self._state.items()},
            selected_year=self.selected_year,
        )

    # ------------------------------------------------------------------
    # Mutation primitives
    # ------------------------------------------------------------------
    def replace_all(self, name: str, items: Iterable[Any]) -> None:
        """Set the collection to exactly ``items``."""
        state = self._collection(name)
        state.items = _rekey(name, items)

    def merge_by_key(self, name: str, items: Iterable[Any]) -> None:
        """Overwrite entries sharing a key with ``items``; keep every other key.

        Budgets without a category id or month cannot be keyed and are skipped.
        """
        state = self._collection(name)
        incoming = [
            item for item in items
            if name != BUDGETS or (item.category_id and item.month)
        ]
        incoming_ids = {item.id for item in incoming}
        incoming_keys = {entity_key(name, item) for item in incoming}

        merged: dict[Any, Any] = {}
        for existing in state.items:
            key = entity_key(name, existing)
            # Same id under another key means the server moved it.
            if existing.id in incoming_ids and key not in incoming_keys:
                continue
            merged[key] = existing
        for item in incoming:
            merged[entity_key(name, item)] = item
        state.items = list(merged.values())

    def upsert_one(self, name: str, item: Any, *, prepend: bool = False) -> None:
        """Replace the entry sharing ``item``'s key in place, or insert it."""
        state = self._collection(name)
        key = entity_key(name, item)
        items = [
            existing for existing in state.items
            if existing.id != item.id or entity_key(name, existing) == key
        ]
        for index, existing in enumerate(items):
            if entity_key(name, existing) == key:
                items[index] = item
                break
        else:
            if prepend:
                items.insert(0, item)
            else:
                items.append(item)
        state.items = items

    def remove_by_id(self, name: str, entity_id: int) -> bool:
        """Remove the entry with ``entity_id``; absent ids are a no-op."""
        state = self._collection(name)
        remaining = [item for item in state.items if item.id != entity_id]
        removed = len(remaining) != len(state.items)
        state.items = remaining
        return removed

    # ------------------------------------------------------------------
    # Fetch lifecycle
    # ------------------------------------------------------------------
    def mark_loading(self, name: str) -> None:
        state = self._collection(name)
        state.status = LoadStatus.LOADING
        state.error = None

    def mark_succeeded(self, name: str, items: Sequence[Any]) -> None:
        state = self._collection(name)
        if name == BUDGETS:
            self.merge_by_key(name, items)
        else:
            self.replace_all(name, items)
        state.status = LoadStatus.SUCCEEDED
        state.error = None
        state.last_fetched = datetime.now()

    def mark_failed(self, name: str, message: str) -> None:
        state = self._collection(name)
        state.status = LoadStatus.FAILED
        state.error = message
        if name in CLEARED_ON_FAILURE:
            state.items = []
        logger.info("Collection marked failed", extra={"collection": name, "error": message})

    def clear_error(self, name: str) -> None:
        self._collection(name).error = None

    def reset(self, name: str) -> None:
        self._collection(name)
        self._state[name] = CollectionState()


def _rekey(name: str, items: Iterable[Any]) -> list[Any]:
    """Collapse entries sharing a key, last one wins, first position kept."""

    keyed: dict[Any, Any] = {}
    for item in items:
        keyed[entity_key(name, item)] = item
    return list(keyed.values())
