"""Wire (camelCase JSON) representations of the SQLModel rows."""

from __future__ import annotations

from typing import Any, Optional

from ..models import Budget, Category, Transaction


def _timestamp(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def serialize_category_ref(category: Optional[Category]) -> Optional[dict[str, Any]]:
    if category is None:
        return None
    return {"id": category.id, "name": category.name}


def serialize_category(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "type": category.category_type,
        "color": category.color,
        "icon": category.icon,
        "createdAt": _timestamp(category.created_at),
        "updatedAt": _timestamp(category.updated_at),
    }


def serialize_transaction(txn: Transaction, category: Optional[Category]) -> dict[str, Any]:
    return {
        "id": txn.id,
        "amount": txn.amount,
        "description": txn.description,
        "date": txn.occurred_on.isoformat(),
        "categoryId": txn.category_id,
        "category": serialize_category_ref(category),
        "type": txn.txn_type,
        "createdAt": _timestamp(txn.created_at),
        "updatedAt": _timestamp(txn.updated_at),
    }


def serialize_budget(budget: Budget, category: Optional[Category]) -> dict[str, Any]:
    return {
        "id": budget.id,
        "amount": budget.amount,
        "month": budget.month,
        "categoryId": budget.category_id,
        "category": serialize_category_ref(category),
        "createdAt": _timestamp(budget.created_at),
        "updatedAt": _timestamp(budget.updated_at),
    }
