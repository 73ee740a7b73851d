"""CLI utilities for running async commands and formatting output."""

from pathtree.cli.utils.async_runner import coro
from pathtree.cli.utils.formatters import error, field, header, info, success

__all__ = [
    "coro",
    "error",
    "field",
    "header",
    "info",
    "success",
]
