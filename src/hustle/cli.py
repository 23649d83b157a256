"""Flask CLI commands for Hustle."""

from __future__ import annotations

from typing import Optional

import click
from flask import Flask

from .errors import HustleError


def init_app(app: Flask) -> None:
    """Register CLI commands on the Flask app."""

    from .extensions import get_context

    @app.cli.command("hustle-init-db")
    def hustle_init_db() -> None:
        """Create database tables (idempotent)."""

        from .infra.database import init_database

        ctx = get_context()
        init_database(ctx.engine)
        click.echo(f"Database ready: {ctx.config.DATABASE_URL}")

    @app.cli.command("hustle-stats")
    @click.argument("email")
    @click.option("--year", type=int, default=None, help="Defaults to the current year")
    @click.option("--month", type=click.IntRange(1, 12), default=None, help="Defaults to the current month")
    def hustle_stats(email: str, year: Optional[int], month: Optional[int]) -> None:
        """Print monthly stats for the user registered as EMAIL."""

        ctx = get_context()
        user = ctx.identity.get_user_by_email(email)
        if user is None:
            raise click.ClickException(f"No user registered as {email}")
        try:
            stats = ctx.tracker.get_user_stats(user.id, year, month)
        except HustleError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Days tracked:     {stats.total_days_tracked}")
        click.echo(f"Completion:       {stats.overall_completion}%")
        click.echo(f"Current streak:   {stats.current_streak}")
        click.echo(f"Perfect days:     {stats.perfect_days}")
