"""SQLModel table exports."""

from .budget import Budget
from .category import Category
from .transaction import Transaction

__all__ = [
    "Budget",
    "Category",
    "Transaction",
]
