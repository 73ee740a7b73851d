"""Logging infrastructure.

Basic usage:
    import logging

    logger = logging.getLogger(__name__)
    logger.info("Grafted subtree", extra={"old_prefix": "XBBBB", "new_prefix": "WAA1"})

    # Lazy evaluation for expensive debug output
    from pathtree.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Ancestors: {ancestor_paths(path)}")

Applications configure handlers once:
    from pathtree.infra.logging import setup_logging

    setup_logging()
"""

from pathtree.infra.logging.config import (
    configure_logging,
    reset_logging_state,
    setup_logging,
)
from pathtree.infra.logging.formatters import JSONFormatter
from pathtree.infra.logging.lazy import LazyLoggerAdapter, LazyString, get_lazy_logger

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "LazyString",
    "configure_logging",
    "get_lazy_logger",
    "reset_logging_state",
    "setup_logging",
]
