"""Main CLI entry point for pathtree commands."""

import click

from pathtree import __version__
from pathtree.cli.commands import paths, tree
from pathtree.infra.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="pathtree")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Pathtree CLI - materialized-path tree tools.

    \b
    Command Groups:
      path   Encode, decode and inspect paths (no storage needed)
      tree   Build and restructure trees stored in a database

    \b
    Quick Start:
      pathtree path encode 31 32 1024
      pathtree path inspect 0CW124
      pathtree tree init
      pathtree tree add-root catalog
      pathtree tree show catalog
    """
    ctx.ensure_object(dict)


cli.add_command(paths.path)
cli.add_command(tree.tree)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
