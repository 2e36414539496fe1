"""Database and repository wiring for the Flask application."""

from __future__ import annotations

from dataclasses import dataclass
from flask import Flask
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelTransactionRepository,
)


@dataclass
class Repositories:
    """Per-app repository bundle stored in ``app.extensions["spendboard"]``."""

    engine: Engine
    session_factory: SessionFactory
    transactions: SQLModelTransactionRepository
    categories: SQLModelCategoryRepository
    budgets: SQLModelBudgetRepository


def init_db(app: Flask) -> Repositories:
    """Create the engine/schema and attach repositories to the app."""

    config: BaseConfig = app.config["SPENDBOARD_CONFIG"]
    engine, session_factory = bootstrap_database(config)
    repos = Repositories(
        engine=engine,
        session_factory=session_factory,
        transactions=SQLModelTransactionRepository(session_factory),
        categories=SQLModelCategoryRepository(session_factory),
        budgets=SQLModelBudgetRepository(session_factory),
    )
    app.extensions["spendboard"] = repos
    return repos
