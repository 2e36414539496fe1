"""Budgeting tables."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .timestamps import utc_now


class Budget(SQLModel, table=True):
    """Monthly spending allocation for one category."""

    __tablename__: ClassVar[str] = "budget"
    __table_args__ = (UniqueConstraint("category_id", "month", name="uq_budget_category_month"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    amount: float = Field(nullable=False)
    month: str = Field(index=True, nullable=False, min_length=7, max_length=7)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)
