"""Reference data seeding."""

from __future__ import annotations

from typing import Iterable

from ..domain.repositories import CategoryRepository
from ..logging_config import get_logger
from ..models.category import Category

logger = get_logger("services.seed")

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Food",
    "Transport",
    "Housing",
    "Entertainment",
    "Utilities",
)


def seed_default_categories(
    repository: CategoryRepository, names: Iterable[str] = DEFAULT_CATEGORIES
) -> int:
    """Create missing expense categories; existing names are skipped."""

    created = 0
    for name in names:
        if repository.get_by_name(name) is not None:
            continue
        repository.create(Category(name=name, category_type="expense"))
        created += 1
    logger.info("Seeded default categories", extra={"created_count": created})
    return created
