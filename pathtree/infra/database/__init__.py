"""SQLAlchemy models and session helpers for persistent trees."""

from pathtree.infra.database.base import (
    NAMING_CONVENTION,
    PATH_LENGTH,
    Base,
    IntegerPKMixin,
    MaterializedPathMixin,
    TreeNodeRecord,
)
from pathtree.infra.database.session import (
    create_engine,
    create_session_factory,
    init_models,
)

__all__ = [
    "NAMING_CONVENTION",
    "PATH_LENGTH",
    "Base",
    "IntegerPKMixin",
    "MaterializedPathMixin",
    "TreeNodeRecord",
    "create_engine",
    "create_session_factory",
    "init_models",
]
