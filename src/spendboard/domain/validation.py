"""Input validators shared by the mutation coordinator and the HTTP API.

Every validator returns normalized values or raises ``ValidationError`` with a
message suitable for display.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

from .errors import ValidationError

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")
CATEGORY_TYPES = ("expense", "income")
TRANSACTION_FIELDS = ("amount", "description", "date", "categoryId", "type")


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` (or a full ISO timestamp) into a date; None when invalid."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def validate_amount(value: Any) -> float:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError("Amount must be a positive number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a positive number") from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    return amount


def validate_description(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Description is required")
    return value.strip()


def validate_date(value: Any) -> date:
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ValidationError("Invalid date. Use YYYY-MM-DD")
    return parsed


def validate_month(value: Any) -> str:
    """Accept ``YYYY-MM`` with a real month number."""

    if not isinstance(value, str) or not MONTH_PATTERN.match(value):
        raise ValidationError("Invalid month format. Use YYYY-MM")
    if not 1 <= int(value[5:7]) <= 12:
        raise ValidationError("Invalid month format. Use YYYY-MM")
    return value


def validate_category_id(value: Any, *, required: bool = True) -> Optional[int]:
    """Return a positive integer id; ``None``/"" is allowed when not required."""

    if value is None or value == "":
        if required:
            raise ValidationError("Category ID is required")
        return None
    if isinstance(value, bool):
        raise ValidationError("Category ID must be a positive integer")
    try:
        category_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Category ID must be a positive integer") from None
    if category_id <= 0:
        if required:
            raise ValidationError("Category ID is required")
        return None
    return category_id


def validate_category_type(value: Any, *, default: Optional[str] = "expense") -> Optional[str]:
    if value is None or value == "":
        return default
    if value not in CATEGORY_TYPES:
        raise ValidationError("Type must be 'expense' or 'income'")
    return value


def validate_transaction_input(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a full transaction payload (create)."""

    return {
        "amount": validate_amount(data.get("amount")),
        "description": validate_description(data.get("description")),
        "date": validate_date(data.get("date")),
        "categoryId": validate_category_id(data.get("categoryId"), required=False),
        "type": validate_category_type(data.get("type"), default=None),
    }


def validate_transaction_changes(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial transaction payload (update); only supplied keys are checked."""

    unknown = set(data) - set(TRANSACTION_FIELDS) - {"id"}
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    if "amount" in data:
        changes["amount"] = validate_amount(data["amount"])
    if "description" in data:
        changes["description"] = validate_description(data["description"])
    if "date" in data:
        changes["date"] = validate_date(data["date"])
    if "categoryId" in data:
        # None disconnects the category
        changes["categoryId"] = validate_category_id(data["categoryId"], required=False)
    if "type" in data:
        changes["type"] = validate_category_type(data["type"], default=None)
    return changes


def validate_budget_input(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "amount": validate_amount(data.get("amount")),
        "month": validate_month(data.get("month")),
        "categoryId": validate_category_id(data.get("categoryId")),
    }


def validate_category_input(data: Mapping[str, Any]) -> dict[str, Any]:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required")
    return {
        "name": name.strip(),
        "type": validate_category_type(data.get("type")),
        "color": data.get("color") or None,
        "icon": data.get("icon") or None,
    }
