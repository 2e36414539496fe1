"""Repository protocol definitions for domain layer."""

from .budget import BudgetRepository
from .category import CategoryRepository
from .transaction import TransactionRepository

__all__ = [
    "BudgetRepository",
    "CategoryRepository",
    "TransactionRepository",
]
