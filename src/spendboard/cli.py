"""Flask CLI commands for SpendBoard."""

from __future__ import annotations

import asyncio
import json
from datetime import date

import click
from flask import current_app


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("spendboard-seed")
    def spendboard_seed() -> None:
        """Create the default expense categories."""

        from .services.seed import seed_default_categories

        created = seed_default_categories(current_app.extensions["spendboard"].categories)
        click.echo(f"Seeded {created} categories.")

    @app.cli.command("spendboard-dashboard")
    @click.option("--year", type=int, default=None, help="Dashboard year (default: this year)")
    @click.option("--month", default=None, help="Budget month as YYYY-MM (default: this month)")
    def spendboard_dashboard(year: int | None, month: str | None) -> None:
        """Load every collection through the gateway and print the dashboard as JSON."""

        from .infra.gateway import HttpGateway
        from .services.dashboard import build_dashboard
        from .state import EntityStore, LoadStatus, MutationCoordinator

        today = date.today()
        year = year or today.year
        month = month or today.strftime("%Y-%m")

        store = EntityStore(selected_year=year)
        coordinator = MutationCoordinator(store, HttpGateway.for_app(current_app))
        statuses = asyncio.run(coordinator.load_dashboard(year, month))
        for name, status in statuses.items():
            if status is LoadStatus.FAILED:
                click.echo(f"Could not load {name}: {store.error(name)}", err=True)

        summary = build_dashboard(store.snapshot(), year=year, month=month)
        click.echo(json.dumps(summary.to_dict(), default=str, indent=2))
