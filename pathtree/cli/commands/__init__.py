"""CLI command modules."""

from pathtree.cli.commands import paths, tree

__all__ = [
    "paths",
    "tree",
]
