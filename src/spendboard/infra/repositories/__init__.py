"""Concrete repository implementations using SQLModel."""

from .budget import SQLModelBudgetRepository
from .category import SQLModelCategoryRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelBudgetRepository",
    "SQLModelCategoryRepository",
    "SQLModelTransactionRepository",
]
