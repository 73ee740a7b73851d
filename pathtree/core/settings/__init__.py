"""Pydantic Settings v2 configuration.

Settings are split by concern (tree behaviour, database, logging), each read
from environment variables with its own prefix and an optional .env file,
and frozen after validation.

Import settings via cached loaders:
    from pathtree.core.settings import get_tree_settings

    settings = get_tree_settings()
    print(settings.allocation_max_attempts)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .database import DatabaseSettings
from .loader import (
    clear_settings_cache,
    get_database_settings,
    get_logging_settings,
    get_tree_settings,
)
from .logs import LoggingSettings
from .tree import TreeSettings

__all__ = [
    "DatabaseSettings",
    "LoggingSettings",
    "TreeSettings",
    "clear_settings_cache",
    "get_database_settings",
    "get_logging_settings",
    "get_tree_settings",
]
