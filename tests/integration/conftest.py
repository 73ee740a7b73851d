"""Shared fixtures for integration tests.

Provides a real async SQLite database per test (a file, so every store
operation's separate session sees the same data), plus the SQLAlchemy
store and a tree facade over it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pathtree.core.hierarchy import PathTree
from pathtree.core.settings import DatabaseSettings
from pathtree.infra.database import (
    TreeNodeRecord,
    create_engine,
    create_session_factory,
    init_models,
)
from pathtree.infra.stores import SQLAlchemyTreeStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

    from pathtree.core.settings import TreeSettings


@pytest.fixture
def db_settings(tmp_path) -> DatabaseSettings:
    """Database settings pointing at a per-test SQLite file."""
    return DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'tree.db'}")


@pytest.fixture
async def engine(db_settings: DatabaseSettings) -> AsyncGenerator[AsyncEngine]:
    """Async engine with the tree tables created."""
    engine = create_engine(db_settings)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(
    engine: AsyncEngine, db_settings: DatabaseSettings
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(engine, db_settings)


@pytest.fixture
def sql_store(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLAlchemyTreeStore[TreeNodeRecord]:
    """SQLAlchemy store over the ready-made tree_nodes table."""
    return SQLAlchemyTreeStore(session_factory, TreeNodeRecord)


@pytest.fixture
def sql_tree(
    sql_store: SQLAlchemyTreeStore[TreeNodeRecord], tree_settings: TreeSettings
) -> PathTree[TreeNodeRecord]:
    """PathTree over the SQLAlchemy store."""
    return PathTree(sql_store, settings=tree_settings)
