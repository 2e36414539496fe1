"""SQLModel definitions for recorded transactions."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .timestamps import utc_now


class Transaction(SQLModel, table=True):
    """A single hand-entered spending (or income) record."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    amount: float = Field(nullable=False, description="Positive magnitude")
    description: str = Field(nullable=False, max_length=255)
    occurred_on: date = Field(nullable=False, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    # None means "expense" for every aggregate; see services.analytics.is_expense
    txn_type: Optional[str] = Field(default=None, max_length=16)
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)
