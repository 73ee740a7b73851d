"""Async engine and session factory helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine as _create_async_engine

from pathtree.core.settings import get_database_settings

if TYPE_CHECKING:
    from sqlalchemy import MetaData
    from sqlalchemy.ext.asyncio import AsyncEngine

    from pathtree.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)


def create_engine(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Create an async engine from database settings.

    Args:
        settings: Database settings; loaded from the environment if omitted.

    Returns:
        Configured AsyncEngine.
    """
    settings = settings or get_database_settings()
    engine = _create_async_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=settings.pool_pre_ping,
    )
    logger.info(
        "Database engine created",
        extra={"dialect": engine.dialect.name, "echo": settings.echo},
    )
    return engine


def create_session_factory(
    engine: AsyncEngine,
    settings: DatabaseSettings | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Create the session factory the SQLAlchemy store opens sessions from."""
    settings = settings or get_database_settings()
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=settings.expire_on_commit,
        autoflush=False,
    )


async def init_models(engine: AsyncEngine, metadata: MetaData | None = None) -> None:
    """Create tree tables that do not exist yet.

    Args:
        engine: Target engine.
        metadata: Metadata holding the tables; defaults to Base.metadata.
    """
    if metadata is None:
        from pathtree.infra.database.base import Base

        metadata = Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all, checkfirst=True)
    logger.info("Tree tables ensured", extra={"tables": sorted(metadata.tables)})


__all__ = ["create_engine", "create_session_factory", "init_models"]
