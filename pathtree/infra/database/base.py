"""Declarative base and the materialized-path column mixin.

Models add tree storage by inheriting MaterializedPathMixin:

    class Category(Base, IntegerPKMixin, MaterializedPathMixin):
        __tablename__ = "categories"
        name: Mapped[str] = mapped_column(String(255))

The mixin supplies the partition, path, seq and kind columns and a unique
constraint on (partition, path). The path column must sort bytewise: use a
"C" collation on PostgreSQL and a binary one on MySQL.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, BigInteger, MetaData, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

# Consistent naming convention for database constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Longest path the default column holds; roughly 28 levels of 9-symbol
# components, or 255 levels of single-symbol ones.
PATH_LENGTH = 255


class Base(DeclarativeBase):
    """Declarative base with constraint naming and automatic table names."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


class IntegerPKMixin:
    """Integer auto-increment primary key."""

    __allow_unmapped__ = True

    id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=True,
        comment="Auto-incrementing integer primary key",
    )


class MaterializedPathMixin:
    """Columns for storing a node of a materialized-path tree.

    Provides:
        partition: Scope value isolating independent trees in one table
        path: Encoded path, "" for the partition root
        seq: Next child sequence number to allocate
        kind: Optional variant tag (single-table polymorphism)
    """

    __allow_unmapped__ = True

    partition: Mapped[str] = mapped_column(
        String(64),
        default="",
        nullable=False,
        comment="Tree scope; nodes in different partitions are unrelated",
    )
    path: Mapped[str] = mapped_column(
        String(PATH_LENGTH),
        nullable=False,
        comment="Materialized path, empty string for the root",
    )
    seq: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        nullable=False,
        comment="Next unused child sequence number",
    )
    kind: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        default=None,
        comment="Node variant tag",
    )

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        return (UniqueConstraint("partition", "path"),)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(partition={self.partition!r}, "
            f"path={self.path!r}, seq={self.seq!r})"
        )


class TreeNodeRecord(Base, IntegerPKMixin, MaterializedPathMixin):
    """Ready-made tree table with a JSON payload column."""

    __tablename__ = "tree_nodes"

    data: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        comment="Application payload",
    )


__all__ = [
    "Base",
    "IntegerPKMixin",
    "MaterializedPathMixin",
    "NAMING_CONVENTION",
    "PATH_LENGTH",
    "TreeNodeRecord",
]
