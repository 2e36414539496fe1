"""Transaction, category and budget endpoints."""

from __future__ import annotations

from typing import Any, Optional

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..domain.errors import ConflictError, NotFoundError, SpendBoardError, ValidationError
from ..domain.validation import (
    validate_budget_input,
    validate_category_input,
    validate_month,
    validate_transaction_changes,
    validate_transaction_input,
)
from ..extensions import Repositories
from ..logging_config import get_logger
from ..models import Budget, Category, Transaction
from . import bp
from .serializers import serialize_budget, serialize_category, serialize_transaction

logger = get_logger("api")

DUPLICATE_BUDGET = "A budget for this category and month already exists"


def _repos() -> Repositories:
    return current_app.extensions["spendboard"]


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    return data


def _require_category(category_id: Optional[int]) -> Optional[Category]:
    """Return the referenced category; an unknown id is a validation failure."""

    if category_id is None:
        return None
    category = _repos().categories.get_by_id(category_id)
    if category is None:
        raise ValidationError("Category not found")
    return category


# ----------------------------------------------------------------------
# Error translation
# ----------------------------------------------------------------------
@bp.errorhandler(SpendBoardError)
def _handle_domain_error(exc: SpendBoardError):
    return jsonify({"error": exc.code, "message": exc.message}), exc.status_code


@bp.errorhandler(IntegrityError)
def _handle_integrity_error(exc: IntegrityError):
    logger.warning("Integrity error", extra={"error": str(exc.orig)})
    error = ConflictError()
    return jsonify({"error": error.code, "message": error.message}), error.status_code


@bp.errorhandler(SQLAlchemyError)
def _handle_database_error(exc: SQLAlchemyError):
    logger.exception("Database error")
    return jsonify({"error": "server_error", "message": "An error occurred while accessing the database"}), 500


# ----------------------------------------------------------------------
# Transactions
# ----------------------------------------------------------------------
@bp.get("/transactions")
def list_transactions():
    raw_year = request.args.get("year")
    year = None
    if raw_year:
        try:
            year = int(raw_year)
        except ValueError:
            raise ValidationError("Invalid year") from None

    repos = _repos()
    rows = repos.transactions.list_all(year=year)
    lookup = repos.categories.lookup(row.category_id for row in rows)
    return jsonify([serialize_transaction(row, lookup.get(row.category_id)) for row in rows])


@bp.post("/transactions")
def create_transaction():
    values = validate_transaction_input(_json_body())
    category = _require_category(values["categoryId"])
    created = _repos().transactions.create(
        Transaction(
            amount=values["amount"],
            description=values["description"],
            occurred_on=values["date"],
            category_id=values["categoryId"],
            txn_type=values["type"],
        )
    )
    logger.info("Transaction created", extra={"transaction_id": created.id})
    return jsonify(serialize_transaction(created, category)), 201


@bp.patch("/transactions/<int:transaction_id>")
def update_transaction(transaction_id: int):
    changes = validate_transaction_changes(_json_body())
    repos = _repos()
    txn = repos.transactions.get_by_id(transaction_id)
    if txn is None:
        raise NotFoundError("Transaction not found")

    if "amount" in changes:
        txn.amount = changes["amount"]
    if "description" in changes:
        txn.description = changes["description"]
    if "date" in changes:
        txn.occurred_on = changes["date"]
    if "type" in changes:
        txn.txn_type = changes["type"]
    if "categoryId" in changes:
        # connect, or disconnect with null
        _require_category(changes["categoryId"])
        txn.category_id = changes["categoryId"]

    updated = repos.transactions.update(txn)
    category = repos.categories.get_by_id(updated.category_id) if updated.category_id else None
    return jsonify(serialize_transaction(updated, category))


@bp.delete("/transactions/<int:transaction_id>")
def delete_transaction(transaction_id: int):
    if not _repos().transactions.delete(transaction_id):
        raise NotFoundError("Transaction not found")
    return jsonify({"success": True})


# ----------------------------------------------------------------------
# Categories
# ----------------------------------------------------------------------
@bp.get("/categories")
def list_categories():
    return jsonify([serialize_category(row) for row in _repos().categories.list_all()])


@bp.post("/categories")
def create_category():
    values = validate_category_input(_json_body())
    repos = _repos()
    if repos.categories.get_by_name(values["name"]) is not None:
        raise ConflictError("A category with this name already exists")
    created = repos.categories.create(
        Category(
            name=values["name"],
            category_type=values["type"],
            color=values["color"],
            icon=values["icon"],
        )
    )
    return jsonify(serialize_category(created)), 201


# ----------------------------------------------------------------------
# Budgets
# ----------------------------------------------------------------------
def _serialize_budgets(rows: list[Budget]) -> list[dict[str, Any]]:
    lookup = _repos().categories.lookup(row.category_id for row in rows)
    # Budgets whose category vanished are not reported.
    joined = [(row, lookup[row.category_id]) for row in rows if row.category_id in lookup]
    joined.sort(key=lambda pair: (pair[1].name, pair[0].month))
    return [serialize_budget(row, category) for row, category in joined]


@bp.get("/budgets")
def list_budgets():
    month = request.args.get("month") or None
    if month is not None:
        month = validate_month(month)
    return jsonify(_serialize_budgets(_repos().budgets.list_all(month=month)))


@bp.post("/budgets")
def upsert_budget():
    values = validate_budget_input(_json_body())
    category = _require_category(values["categoryId"])
    budget, created = _repos().budgets.upsert(
        category_id=values["categoryId"], month=values["month"], amount=values["amount"]
    )
    logger.info(
        "Budget saved",
        extra={"budget_id": budget.id, "month": budget.month, "was_created": created},
    )
    return jsonify(serialize_budget(budget, category)), 201 if created else 200


@bp.put("/budgets/<int:budget_id>")
def update_budget(budget_id: int):
    values = validate_budget_input(_json_body())
    category = _require_category(values["categoryId"])
    repos = _repos()
    budget = repos.budgets.get_by_id(budget_id)
    if budget is None:
        raise NotFoundError("Budget not found")

    occupant = repos.budgets.get_for_category_month(values["categoryId"], values["month"])
    if occupant is not None and occupant.id != budget_id:
        raise ConflictError(DUPLICATE_BUDGET)

    budget.amount = values["amount"]
    budget.month = values["month"]
    budget.category_id = values["categoryId"]
    updated = repos.budgets.update(budget)
    return jsonify(serialize_budget(updated, category))


@bp.delete("/budgets/<int:budget_id>")
def delete_budget(budget_id: int):
    if not _repos().budgets.delete(budget_id):
        raise NotFoundError("Budget not found")
    return "", 204
