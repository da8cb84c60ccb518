"""Database commands."""

from __future__ import annotations

import sys

import click

from innovation_service.cli.utils import coro, error, info, success
from innovation_service.core.settings import get_db_settings
from innovation_service.infra.database import close_database, init_database
from innovation_service.utils.retry import RetryError


@click.group(name="db")
def db() -> None:
    """Database commands."""


@db.command()
@click.option(
    "--create-tables",
    is_flag=True,
    help="Create the mapped tables (local SQLite databases only)",
)
@coro
async def init(create_tables: bool) -> None:
    """Wait until the database answers."""
    # Registers the mapped tables on Base.metadata
    import innovation_service.features.notifications.models  # noqa: F401

    settings = get_db_settings()
    if create_tables and not settings.is_sqlite:
        error("--create-tables is only supported for SQLite URLs")
        sys.exit(1)

    info(f"Connecting to {settings.database_url.split('@')[-1]}")
    try:
        await init_database(create_tables=create_tables)
    except RetryError as exc:
        error(f"Database unreachable: {exc.last_exception}")
        sys.exit(1)
    finally:
        await close_database()
    success("Database ready")
