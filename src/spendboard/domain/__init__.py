"""Domain types, errors and the gateway contract."""

from .entities import Budget, Category, CategoryRef, Transaction
from .errors import (
    ConflictError,
    NetworkError,
    NotFoundError,
    ServerError,
    SpendBoardError,
    ValidationError,
)
from .gateway import Gateway

__all__ = [
    "Budget",
    "Category",
    "CategoryRef",
    "ConflictError",
    "Gateway",
    "NetworkError",
    "NotFoundError",
    "ServerError",
    "SpendBoardError",
    "Transaction",
    "ValidationError",
]
