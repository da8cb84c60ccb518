"""Engine and session factory wiring.

Nothing connects at import time: the engine is built on first use from
``DatabaseSettings``. ``RecipientsService`` receives a session factory by
injection; ``get_session_factory`` is the default one used by entry points.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from innovation_service.core.database import Base
from innovation_service.core.settings import get_db_settings
from innovation_service.utils.retry import retry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from innovation_service.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)


def create_engine(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Build an async engine; pool sizing applies to server databases only."""
    settings = settings or get_db_settings()
    options: dict[str, Any] = {"echo": settings.echo}
    if not settings.is_sqlite:
        options |= {
            "pool_size": settings.pool_size,
            "max_overflow": settings.max_overflow,
            "pool_timeout": settings.pool_timeout,
            "pool_pre_ping": True,
        }
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    return create_engine()


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return create_session_factory(get_engine())


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    """Open a session from the default factory.

    Example:
        async with get_async_session() as session:
            await session.scalar(select(User).where(User.id == user_id))
    """
    async with get_session_factory()() as session:
        yield session


@retry(max_attempts=5, initial_delay=1.0, max_delay=30.0, exceptions=(OperationalError, OSError))
async def init_database(*, create_tables: bool = False) -> None:
    """Wait for the database to answer, optionally creating the mapped tables.

    ``create_tables`` is meant for local SQLite databases; shared
    environments get their schema from the platform's own migrations.
    """
    async with get_engine().begin() as conn:
        await conn.execute(text("SELECT 1"))
        if create_tables:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready", extra={"create_tables": create_tables})


async def close_database() -> None:
    """Dispose the cached engine, if one was created."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        logger.info("Database engine disposed")
    get_session_factory.cache_clear()
    get_engine.cache_clear()
