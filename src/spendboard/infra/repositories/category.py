"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from sqlmodel import Session, col, select

from ...models.category import Category


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        with self.session_factory() as session:
            obj = session.get(Category, category_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str) -> Optional[Category]:
        """Retrieve a category by its unique name."""
        with self.session_factory() as session:
            obj = session.exec(select(Category).where(Category.name == name)).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[Category]:
        """List all categories ordered by name."""
        with self.session_factory() as session:
            statement = select(Category).order_by(Category.name)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def lookup(self, category_ids: Iterable[int]) -> dict[int, Category]:
        """Return the categories for ``category_ids`` keyed by id."""
        wanted = {cid for cid in category_ids if cid is not None}
        if not wanted:
            return {}
        with self.session_factory() as session:
            statement = select(Category).where(col(Category.id).in_(wanted))
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return {row.id: row for row in rows if row.id is not None}

    def create(self, category: Category) -> Category:
        """Create a new category.

        Raises ``sqlalchemy.exc.IntegrityError`` when the name is taken.
        """
        with self.session_factory() as session:
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category
