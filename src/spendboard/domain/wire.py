"""Translation between the gateway's JSON wire shape and internal entities.

This is the only module that knows about wire field names. Responses are
camelCase; some raw-SQL budget responses emit a lower-cased ``categoryid``,
and both forms are folded into ``Budget.category_id`` here.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Callable, Mapping, Optional, TypeVar

from ..logging_config import get_logger
from .entities import Budget, Category, CategoryRef, Transaction
from .errors import ServerError
from .validation import CATEGORY_TYPES, parse_iso_date

logger = get_logger("domain.wire")

T = TypeVar("T")


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _require_id(raw: Mapping[str, Any], kind: str) -> int:
    entity_id = _to_int(raw.get("id"))
    if entity_id is None:
        raise ServerError(f"Malformed {kind} in server response")
    return entity_id


def parse_category_ref(raw: Any) -> Optional[CategoryRef]:
    if not isinstance(raw, Mapping):
        return None
    category_id = _to_int(raw.get("id"))
    if not category_id:
        return None
    return CategoryRef(id=category_id, name=str(raw.get("name") or f"Category {category_id}"))


def parse_category(raw: Mapping[str, Any]) -> Category:
    category_id = _require_id(raw, "category")
    category_type = raw.get("type")
    return Category(
        id=category_id,
        name=str(raw.get("name") or f"Category {category_id}"),
        type=category_type if category_type in CATEGORY_TYPES else "expense",
        color=raw.get("color") or None,
        icon=raw.get("icon") or None,
    )


def parse_transaction(raw: Mapping[str, Any]) -> Transaction:
    category = parse_category_ref(raw.get("category"))
    category_id = _to_int(raw.get("categoryId")) or (category.id if category else None)
    txn_type = raw.get("type")
    return Transaction(
        id=_require_id(raw, "transaction"),
        amount=_to_float(raw.get("amount")),
        description=str(raw.get("description") or ""),
        date=parse_iso_date(raw.get("date")),
        category_id=category_id or None,
        category=category,
        type=txn_type if txn_type in CATEGORY_TYPES else None,
    )


def parse_budget(raw: Mapping[str, Any]) -> Budget:
    category = parse_category_ref(raw.get("category"))
    category_id = 0
    for candidate in (raw.get("categoryId"), raw.get("categoryid"), raw.get("category_id")):
        category_id = _to_int(candidate) or 0
        if category_id:
            break
    if not category_id and category is not None:
        category_id = category.id

    month = raw.get("month")
    if not isinstance(month, str) or not month:
        raise ServerError("Malformed budget in server response")

    return Budget(
        id=_require_id(raw, "budget"),
        amount=_to_float(raw.get("amount")) or 0.0,
        month=month[:7],
        category_id=category_id,
        category=category,
    )


def parse_many(parser: Callable[[Mapping[str, Any]], T], rows: Any, *, kind: str) -> list[T]:
    """Parse a list response, dropping (and logging) malformed rows."""

    if not isinstance(rows, list):
        logger.warning("Expected a list of %s, got %s", kind, type(rows).__name__)
        return []

    parsed: list[T] = []
    for row in rows:
        if not isinstance(row, Mapping):
            logger.warning("Skipping non-object %s row", kind)
            continue
        try:
            parsed.append(parser(row))
        except ServerError as exc:
            logger.warning("Skipping malformed %s row", kind, extra={"error": exc.message})
    return parsed


def to_wire(values: Mapping[str, Any]) -> dict[str, Any]:
    """Serialize validated payload values (dates become ISO strings)."""

    return {
        key: value.isoformat() if isinstance(value, date) else value
        for key, value in values.items()
    }
