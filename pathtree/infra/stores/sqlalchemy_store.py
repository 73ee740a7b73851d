"""SQLAlchemy-backed tree store.

Maps each store operation onto one SQL statement against a model that uses
MaterializedPathMixin:

    self and descendants   path >= 'ABC' AND path < 'ABCZZ'
    ancestors              path IN ('', 'A', 'AB')
    children               path LIKE 'ABC_' OR path LIKE 'ABCW__' OR ...
    seq allocation         UPDATE ... SET seq = n + 1 WHERE path = 'ABC' AND seq = n
    graft                  UPDATE ... SET path = 'NEW' || substr(path, 4), partition = ...
                           WHERE path >= 'ABC' AND path < 'ABCZZ'

Each operation runs in its own session and transaction. The graft is a
single UPDATE statement, which the database applies atomically.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import String, delete, func, literal, or_, select, update
from sqlalchemy.exc import IntegrityError

from pathtree.core.exceptions import DuplicatePathError, StoreError
from pathtree.core.hierarchy.ranges import self_and_descendants_range
from pathtree.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Collection, Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from pathtree.core.hierarchy.ranges import ChildPattern, PathRange
    from pathtree.infra.database.base import MaterializedPathMixin

logger = logging.getLogger(__name__)


class SQLAlchemyTreeStore[M: MaterializedPathMixin]:
    """TreeStore implementation over an async SQLAlchemy session factory.

    Args:
        session_factory: Factory producing AsyncSession instances; use
            expire_on_commit=False so returned nodes stay readable.
        model: Mapped class inheriting MaterializedPathMixin.

    Example:
        >>> engine = create_engine(DatabaseSettings(url="sqlite+aiosqlite:///trees.db"))
        >>> await init_models(engine)
        >>> store = SQLAlchemyTreeStore(create_session_factory(engine), TreeNodeRecord)
        >>> tree = PathTree(store)
    """

    __slots__ = ("_lazy", "_session_factory", "model")

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model: type[M],
    ) -> None:
        self._session_factory = session_factory
        self.model = model
        self._lazy = get_lazy_logger(__name__, model=model.__name__)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, partition: Any, path: str) -> M | None:
        stmt = select(self.model).where(
            self.model.partition == partition,
            self.model.path == path,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            instance = result.scalar_one_or_none()
        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({partition!r}, {path!r}) -> "
            f"{'found' if instance is not None else 'not found'}"
        )
        return instance

    def scan_range(
        self, partition: Any, path_range: PathRange, *, ordered: bool = True
    ) -> AsyncIterator[M]:
        stmt = select(self.model).where(
            self.model.partition == partition,
            self.model.path >= path_range.lo,
            self.model.path < path_range.hi,
        )
        return self._scan(stmt, ordered=ordered)

    def scan_prefix_union(
        self,
        partition: Any,
        patterns: Sequence[ChildPattern],
        *,
        ordered: bool = True,
    ) -> AsyncIterator[M]:
        stmt = select(self.model).where(
            self.model.partition == partition,
            or_(*(self.model.path.like(pattern.like()) for pattern in patterns)),
        )
        return self._scan(stmt, ordered=ordered)

    def scan_set(
        self, partition: Any, paths: Collection[str], *, ordered: bool = True
    ) -> AsyncIterator[M]:
        stmt = select(self.model).where(
            self.model.partition == partition,
            self.model.path.in_(list(paths)),
        )
        return self._scan(stmt, ordered=ordered)

    def scan_roots(self, *, ordered: bool = True) -> AsyncIterator[M]:
        stmt = select(self.model).where(self.model.path == "")
        if ordered:
            stmt = stmt.order_by(self.model.partition)
        return self._scan(stmt, ordered=False)

    async def _scan(self, stmt: Select[Any], *, ordered: bool) -> AsyncIterator[M]:
        if ordered:
            stmt = stmt.order_by(self.model.path)
        # Rows are fetched before yielding so no session stays open while the
        # consumer runs arbitrary code between items.
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            rows = result.all()
        self._lazy.debug(lambda: f"db.scan: {len(rows)} rows")
        for row in rows:
            yield row

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, node: M) -> M:
        async with self._session_factory() as session:
            session.add(node)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                logger.info(
                    "Duplicate path rejected",
                    extra={"partition": node.partition, "path": node.path},
                )
                raise DuplicatePathError(node.partition, node.path) from exc
        return node

    async def conditional_update(
        self, partition: Any, path: str, expected_seq: int, new_seq: int
    ) -> bool:
        stmt = (
            update(self.model)
            .where(
                self.model.partition == partition,
                self.model.path == path,
                self.model.seq == expected_seq,
            )
            .values(seq=new_seq)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session, session.begin():
            result = await session.execute(stmt)
        rowcount = result.rowcount
        if rowcount > 1:
            raise StoreError(
                "Conditional update matched more than one row",
                details={"partition": partition, "path": path, "rowcount": rowcount},
            )
        return rowcount == 1

    async def bulk_rewrite_prefix(
        self, partition: Any, old_prefix: str, new_prefix: str, new_partition: Any
    ) -> int:
        subtree = self_and_descendants_range(old_prefix)
        # SQL substr() is 1-based: position len + 1 is the first suffix symbol
        new_path = literal(new_prefix, String) + func.substr(
            self.model.path, len(old_prefix) + 1
        )
        stmt = (
            update(self.model)
            .where(
                self.model.partition == partition,
                self.model.path >= subtree.lo,
                self.model.path < subtree.hi,
            )
            .values(path=new_path, partition=new_partition)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
        except IntegrityError as exc:
            raise DuplicatePathError(new_partition, new_prefix) from exc
        return result.rowcount

    async def bulk_delete_range(self, partition: Any, path_range: PathRange) -> int:
        stmt = (
            delete(self.model)
            .where(
                self.model.partition == partition,
                self.model.path >= path_range.lo,
                self.model.path < path_range.hi,
            )
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session, session.begin():
            result = await session.execute(stmt)
        return result.rowcount

    def __repr__(self) -> str:
        return f"SQLAlchemyTreeStore(model={self.model.__name__})"


__all__ = ["SQLAlchemyTreeStore"]
