"""Tests for shared input validators."""

from __future__ import annotations

from datetime import date

import pytest

from spendboard.domain.errors import ValidationError
from spendboard.domain.validation import (
    validate_amount,
    validate_budget_input,
    validate_category_id,
    validate_category_input,
    validate_month,
    validate_transaction_changes,
    validate_transaction_input,
)


@pytest.mark.parametrize("value", [0, -1, "", None, "abc", float("nan"), float("inf"), True])
def test_validate_amount_rejects(value):
    with pytest.raises(ValidationError, match="Amount must be a positive number"):
        validate_amount(value)


def test_validate_amount_accepts_numeric_strings():
    assert validate_amount("42.50") == 42.5


@pytest.mark.parametrize("value", ["2024-3", "2024-00", "2024-13", "24-03", 202403, None])
def test_validate_month_rejects(value):
    with pytest.raises(ValidationError, match="Invalid month format"):
        validate_month(value)


def test_validate_month_accepts():
    assert validate_month("2024-12") == "2024-12"


def test_validate_category_id():
    assert validate_category_id("3") == 3
    assert validate_category_id(None, required=False) is None
    with pytest.raises(ValidationError, match="Category ID is required"):
        validate_category_id(None)
    with pytest.raises(ValidationError):
        validate_category_id("three")


def test_validate_transaction_input_normalizes():
    values = validate_transaction_input(
        {"amount": "12", "description": "  Lunch ", "date": "2024-03-05", "categoryId": "3"}
    )

    assert values == {
        "amount": 12.0,
        "description": "Lunch",
        "date": date(2024, 3, 5),
        "categoryId": 3,
        "type": None,
    }


def test_validate_transaction_changes_only_checks_supplied_fields():
    assert validate_transaction_changes({"id": 4, "description": "Dinner"}) == {"description": "Dinner"}
    assert validate_transaction_changes({"categoryId": None}) == {"categoryId": None}


def test_validate_transaction_changes_rejects_unknown_fields():
    with pytest.raises(ValidationError, match="Unknown field"):
        validate_transaction_changes({"memo": "x"})


def test_validate_budget_input():
    assert validate_budget_input({"amount": 100, "month": "2024-03", "categoryId": 3}) == {
        "amount": 100.0,
        "month": "2024-03",
        "categoryId": 3,
    }


def test_validate_category_input_defaults():
    assert validate_category_input({"name": " Food "}) == {
        "name": "Food",
        "type": "expense",
        "color": None,
        "icon": None,
    }
    with pytest.raises(ValidationError, match="Type must be"):
        validate_category_input({"name": "Food", "type": "transfer"})
