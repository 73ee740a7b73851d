"""Logging configuration via dictConfig.

Library modules only create loggers; applications (and the CLI) call
setup_logging() once to attach handlers to the root logger.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathtree.core.settings import LoggingSettings

logger = logging.getLogger(__name__)

_LOGGING_INITIALIZED = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from pathtree.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    include_function_name: bool = False,
    capture_warnings: bool = True,
    service_name: str = "pathtree",
) -> None:
    """Configure root logging with a single stderr handler.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of human-readable text.
        include_function_name: Include function name in records.
        capture_warnings: Forward Python warnings to logging system.
        service_name: Static "service" field on JSON records.
    """
    if capture_warnings:
        logging.captureWarnings(True)

    formatter_name = "json" if json_logs else "text"
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _build_formatters_config(
            json_logs=json_logs,
            include_function_name=include_function_name,
            service_name=service_name,
        ),
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": formatter_name,
                "stream": "ext://sys.stderr",
            },
        },
        "root": {"level": log_level, "handlers": ["console"]},
    }
    logging.config.dictConfig(config)
    logger.debug("Logging configured", extra={"level": log_level, "json": json_logs})


def _build_formatters_config(
    json_logs: bool,
    include_function_name: bool,
    service_name: str,
) -> dict[str, Any]:
    """Build formatters configuration for dictConfig."""
    if json_logs:
        fmt_keys = {
            "level": "levelname",
            "logger": "name",
            "message": "message",
        }
        if include_function_name:
            fmt_keys["function"] = "funcName"
        return {
            "json": {
                "()": "pathtree.infra.logging.formatters.JSONFormatter",
                "fmt_keys": fmt_keys,
                "static": {"service": service_name},
            }
        }

    format_parts = ["%(asctime)s", "%(levelname)s", "%(name)s"]
    if include_function_name:
        format_parts.append("%(funcName)s")
    format_parts.append("%(message)s")
    return {
        "text": {
            "format": " - ".join(format_parts),
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
    }


def reset_logging_state() -> None:
    """Allow setup_logging() to run again (tests)."""
    global _LOGGING_INITIALIZED
    _LOGGING_INITIALIZED = False
