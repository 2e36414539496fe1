"""Mutation coordinator: turns user intents into gateway calls and store updates.

Reads never raise: gateway failures land in the store as a ``failed`` status
with a message. Writes return an ``Outcome``; a failed write leaves the store
exactly as it was.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, TypeVar

from ..domain.entities import Budget, Category, Transaction
from ..domain.errors import (
    NetworkError,
    NotFoundError,
    ServerError,
    SpendBoardError,
    ValidationError,
)
from ..domain.gateway import Gateway
from ..domain.validation import (
    validate_budget_input,
    validate_category_input,
    validate_transaction_changes,
    validate_transaction_input,
)
from ..domain.wire import parse_budget, parse_category, parse_many, parse_transaction, to_wire
from ..logging_config import get_logger
from .store import BUDGETS, CATEGORIES, COLLECTIONS, TRANSACTIONS, EntityStore, LoadStatus

logger = get_logger("state.coordinator")

T = TypeVar("T")

# Store attribute compared against each partial-update wire field.
_TRANSACTION_ATTRS = {
    "amount": "amount",
    "description": "description",
    "date": "date",
    "categoryId": "category_id",
    "type": "type",
}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a write intent."""

    ok: bool
    value: Optional[T] = None
    error: Optional[SpendBoardError] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T] = None, *, message: Optional[str] = None) -> "Outcome[T]":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: SpendBoardError) -> "Outcome[T]":
        return cls(ok=False, error=error, message=error.message)

    def unwrap(self) -> T:
        """Return the value or re-raise the error of a failed outcome."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class MutationCoordinator:
    """Only writer of an ``EntityStore``; talks to a ``Gateway``."""

    def __init__(self, store: EntityStore, gateway: Gateway) -> None:
        self.store = store
        self.gateway = gateway

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def _fetch(
        self,
        name: str,
        request: Callable[[], Awaitable[Any]],
        parser: Callable[[Mapping[str, Any]], Any],
    ) -> LoadStatus:
        self.store.mark_loading(name)
        try:
            rows = await self._call(request())
        except SpendBoardError as exc:
            logger.warning("Fetch failed", extra={"collection": name, "error": exc.message})
            self.store.mark_failed(name, exc.message)
            return LoadStatus.FAILED

        self.store.mark_succeeded(name, parse_many(parser, rows, kind=name))
        return LoadStatus.SUCCEEDED

    async def fetch_transactions(self, year: Optional[int] = None) -> LoadStatus:
        self.store.transactions_year = year
        return await self._fetch(
            TRANSACTIONS,
            lambda: self.gateway.list_transactions(year=year),
            parse_transaction,
        )

    async def fetch_categories(self) -> LoadStatus:
        return await self._fetch(CATEGORIES, self.gateway.list_categories, parse_category)

    async def fetch_budgets(self, month: Optional[str] = None) -> LoadStatus:
        return await self._fetch(
            BUDGETS,
            lambda: self.gateway.list_budgets(month=month),
            parse_budget,
        )

    async def load_dashboard(self, year: int, month: Optional[str] = None) -> dict[str, LoadStatus]:
        """Fetch every collection concurrently; completion order is not assumed."""

        self.store.selected_year = year
        results = await asyncio.gather(
            self.fetch_transactions(year),
            self.fetch_categories(),
            self.fetch_budgets(month),
        )
        return dict(zip(COLLECTIONS, results))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    async def create_transaction(
        self,
        amount: Any,
        description: str,
        date: datetime.date | str,
        category_id: Optional[int] = None,
        txn_type: Optional[str] = None,
    ) -> Outcome[Transaction]:
        try:
            values = validate_transaction_input(
                {
                    "amount": amount,
                    "description": description,
                    "date": date,
                    "categoryId": category_id,
                    "type": txn_type,
                }
            )
            payload = to_wire({key: value for key, value in values.items() if value is not None})
            created = parse_transaction(await self._call(self.gateway.create_transaction(payload)))
        except SpendBoardError as exc:
            return self._rejected("create_transaction", exc)

        # Most-recent-first display order
        self.store.upsert_one(TRANSACTIONS, created, prepend=True)
        logger.info("Transaction created", extra={"transaction_id": created.id})
        return Outcome.success(created)

    async def update_transaction(self, transaction_id: int, **changes: Any) -> Outcome[Transaction]:
        """Send the changed fields, then refetch so category snapshots stay correct.

        Keyword names follow the wire: ``amount``, ``description``, ``date``,
        ``categoryId`` (``None`` disconnects) and ``type``.
        """
        try:
            values = validate_transaction_changes(changes)
        except ValidationError as exc:
            return self._rejected("update_transaction", exc)

        current = self.store.get_transaction(transaction_id)
        if current is not None:
            values = {
                key: value for key, value in values.items()
                if getattr(current, _TRANSACTION_ATTRS[key]) != value
            }
            if not values:
                return Outcome.success(current, message="Nothing to update")
        elif not values:
            return self._rejected("update_transaction", ValidationError("No changes supplied"))

        try:
            updated = parse_transaction(
                await self._call(self.gateway.update_transaction(transaction_id, to_wire(values)))
            )
        except SpendBoardError as exc:
            return self._rejected("update_transaction", exc)

        logger.info(
            "Transaction updated",
            extra={"transaction_id": transaction_id, "fields": sorted(values)},
        )
        await self.fetch_transactions(self.store.transactions_year)
        return Outcome.success(self.store.get_transaction(transaction_id) or updated)

    async def delete_transaction(self, transaction_id: int) -> Outcome[int]:
        message = None
        try:
            await self._call(self.gateway.delete_transaction(transaction_id))
        except NotFoundError:
            logger.warning("Transaction already deleted", extra={"transaction_id": transaction_id})
            message = "Transaction was already deleted"
        except SpendBoardError as exc:
            return self._rejected("delete_transaction", exc)

        # Optimistic removal; the refetch below is authoritative.
        self.store.remove_by_id(TRANSACTIONS, transaction_id)
        await self.fetch_transactions(self.store.transactions_year)
        return Outcome.success(transaction_id, message=message)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    async def create_category(
        self,
        name: str,
        category_type: str = "expense",
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Outcome[Category]:
        try:
            values = validate_category_input(
                {"name": name, "type": category_type, "color": color, "icon": icon}
            )
            created = parse_category(await self._call(self.gateway.create_category(values)))
        except SpendBoardError as exc:
            return self._rejected("create_category", exc)

        self.store.upsert_one(CATEGORIES, created)
        return Outcome.success(created)

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------
    async def save_budget(self, category_id: int, month: str, amount: Any) -> Outcome[Budget]:
        """Create or update the budget for (category_id, month)."""
        try:
            values = validate_budget_input(
                {"amount": amount, "month": month, "categoryId": category_id}
            )
            saved = parse_budget(await self._call(self.gateway.upsert_budget(values)))
        except SpendBoardError as exc:
            return self._rejected("save_budget", exc)

        saved = _with_key(saved, values)
        self.store.upsert_one(BUDGETS, saved)
        logger.info("Budget saved", extra={"budget_key": saved.key, "amount": saved.amount})
        return Outcome.success(saved)

    async def update_budget(
        self, budget_id: int, *, amount: Any, month: str, category_id: int
    ) -> Outcome[Budget]:
        try:
            values = validate_budget_input(
                {"amount": amount, "month": month, "categoryId": category_id}
            )
            updated = parse_budget(await self._call(self.gateway.update_budget(budget_id, values)))
        except SpendBoardError as exc:
            return self._rejected("update_budget", exc)

        updated = _with_key(updated, values)
        # upsert_one drops the entry this id held under its previous key
        self.store.upsert_one(BUDGETS, updated)
        return Outcome.success(updated)

    async def delete_budget(self, budget_id: int) -> Outcome[int]:
        message = None
        try:
            await self._call(self.gateway.delete_budget(budget_id))
        except NotFoundError:
            logger.warning("Budget already deleted", extra={"budget_id": budget_id})
            message = "Budget was already deleted"
        except SpendBoardError as exc:
            return self._rejected("delete_budget", exc)

        self.store.remove_by_id(BUDGETS, budget_id)
        return Outcome.success(budget_id, message=message)

    # ------------------------------------------------------------------
    async def _call(self, request: Awaitable[T]) -> T:
        """Await a gateway call, mapping transport and unexpected failures."""
        try:
            return await request
        except SpendBoardError:
            raise
        except OSError as exc:
            raise NetworkError() from exc
        except Exception as exc:
            logger.exception("Unexpected gateway failure")
            raise ServerError() from exc

    def _rejected(self, action: str, error: SpendBoardError) -> Outcome[Any]:
        level = logging.INFO if isinstance(error, ValidationError) else logging.WARNING
        logger.log(
            level,
            "Write rejected",
            extra={"action": action, "error_type": type(error).__name__, "error": error.message},
        )
        return Outcome.failure(error)


def _with_key(budget: Budget, values: Mapping[str, Any]) -> Budget:
    """Fill the natural key from the request when the response omitted it."""

    if budget.category_id:
        return budget
    return replace(budget, category_id=values["categoryId"])
