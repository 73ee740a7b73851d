"""Ordered key-value stores the tree runs against.

Components:
    - TreeStore: the protocol the tree facade consumes
    - InMemoryTreeStore: dict + sorted keys, for tests and embedded use
    - SQLAlchemyTreeStore: async SQLAlchemy over a MaterializedPathMixin model
"""

from pathtree.infra.stores.base import TreeStore
from pathtree.infra.stores.memory import InMemoryTreeStore
from pathtree.infra.stores.sqlalchemy_store import SQLAlchemyTreeStore

__all__ = ["InMemoryTreeStore", "SQLAlchemyTreeStore", "TreeStore"]
