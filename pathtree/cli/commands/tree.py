"""Commands operating on trees stored in a database.

All commands use the ready-made ``tree_nodes`` table and read the database
URL from PATHTREE_DB_URL unless --url is given.

Example:bash
    # Create the table
    pathtree tree init

    # Build a small tree
    pathtree tree add-root catalog
    pathtree tree add catalog "" --kind folder --name books
    pathtree tree add catalog 0 --name fiction

    # Print it in pre-order
    pathtree tree show catalog

    # Move a subtree and delete another
    pathtree tree graft catalog 00 ""
    pathtree tree destroy catalog 0 --yes
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import json
import sys

import click

from pathtree.cli.utils import coro, error, header, info, success
from pathtree.core.exceptions import PathTreeError
from pathtree.core.hierarchy import PathTree
from pathtree.core.hierarchy.codec import path_level
from pathtree.core.settings import DatabaseSettings, get_database_settings
from pathtree.infra.database import (
    TreeNodeRecord,
    create_engine,
    create_session_factory,
    init_models,
)
from pathtree.infra.stores import SQLAlchemyTreeStore

url_option = click.option(
    "--url",
    envvar="PATHTREE_DB_URL",
    default=None,
    help="Async database URL (defaults to PATHTREE_DB_URL or a local SQLite file)",
)


def _database_settings(url: str | None) -> DatabaseSettings:
    if url is None:
        return get_database_settings()
    return DatabaseSettings(url=url)


@asynccontextmanager
async def open_tree(url: str | None, *, create: bool = False) -> AsyncIterator[PathTree[TreeNodeRecord]]:
    """Yield a PathTree over the tree_nodes table, disposing the engine on exit."""
    settings = _database_settings(url)
    engine = create_engine(settings)
    try:
        if create:
            await init_models(engine)
        store = SQLAlchemyTreeStore(create_session_factory(engine, settings), TreeNodeRecord)
        yield PathTree(store)
    finally:
        await engine.dispose()


async def _require_node(
    tree: PathTree[TreeNodeRecord], partition: str, path: str
) -> TreeNodeRecord:
    node = await tree.get(partition, path)
    if node is None:
        error(f"No node at path {path!r} in partition {partition!r}")
        sys.exit(1)
    return node


@click.group(name="tree")
def tree() -> None:
    """Create, inspect and restructure stored trees."""


@tree.command()
@url_option
@coro
async def init(url: str | None) -> None:
    """Create the tree_nodes table if it does not exist."""
    async with open_tree(url, create=True):
        pass
    success("Tree table ready")


@tree.command()
@click.argument("partition")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON lines")
@url_option
@coro
async def show(partition: str, as_json: bool, url: str | None) -> None:
    """Print every node of PARTITION in pre-order."""
    async with open_tree(url) as path_tree:
        nodes = await path_tree.tree(partition).all()

    if as_json:
        for node in nodes:
            record = {
                "path": node.path,
                "seq": node.seq,
                "kind": node.kind,
                "data": node.data,
            }
            click.echo(json.dumps(record))
        return

    if not nodes:
        info(f"Partition {partition!r} is empty")
        return

    header(f"Tree {partition!r} ({len(nodes)} nodes)")
    for node in nodes:
        indent = "  " * path_level(node.path)
        label = node.data.get("name", "") if node.data else ""
        kind = f" [{node.kind}]" if node.kind else ""
        click.echo(f"{indent}{node.path or '(root)'}{kind} {label}".rstrip())


@tree.command(name="add-root")
@click.argument("partition")
@click.option("--kind", default=None, help="Node kind tag")
@click.option("--name", default=None, help="Stored as data.name")
@url_option
@coro
async def add_root(partition: str, kind: str | None, name: str | None, url: str | None) -> None:
    """Create the root node of PARTITION."""
    data = {"name": name} if name else {}
    async with open_tree(url) as path_tree:
        try:
            await path_tree.create_root(TreeNodeRecord(partition=partition, kind=kind, data=data))
        except PathTreeError as exc:
            error(str(exc))
            sys.exit(1)
    success(f"Created root of {partition!r}")


@tree.command()
@click.argument("partition")
@click.argument("parent_path", metavar="PARENT")
@click.option("--kind", default=None, help="Node kind tag")
@click.option("--name", default=None, help="Stored as data.name")
@url_option
@coro
async def add(
    partition: str, parent_path: str, kind: str | None, name: str | None, url: str | None
) -> None:
    """Append a new child under the node at PARENT in PARTITION."""
    data = {"name": name} if name else {}
    async with open_tree(url) as path_tree:
        parent = await _require_node(path_tree, partition, parent_path)
        try:
            child = await path_tree.add_child(parent, TreeNodeRecord(kind=kind, data=data))
        except PathTreeError as exc:
            error(str(exc))
            sys.exit(1)
    success(f"Added {child.path!r} under {parent_path!r}")


@tree.command()
@click.argument("partition")
@click.argument("path_value", metavar="PATH")
@click.argument("parent_path", metavar="NEW_PARENT")
@url_option
@coro
async def graft(partition: str, path_value: str, parent_path: str, url: str | None) -> None:
    """Move the subtree at PATH under NEW_PARENT, both in PARTITION."""
    async with open_tree(url) as path_tree:
        node = await _require_node(path_tree, partition, path_value)
        parent = await _require_node(path_tree, partition, parent_path)
        try:
            rewritten = await path_tree.graft(parent, node)
        except PathTreeError as exc:
            error(str(exc))
            sys.exit(1)
    success(f"Moved {path_value!r} to {node.path!r} ({rewritten} nodes relabelled)")


@tree.command()
@click.argument("partition")
@click.argument("path_value", metavar="PATH")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@url_option
@coro
async def destroy(partition: str, path_value: str, yes: bool, url: str | None) -> None:
    """Delete the node at PATH and its whole subtree."""
    if not yes:
        click.confirm(f"Delete {path_value!r} and all its descendants?", abort=True)
    async with open_tree(url) as path_tree:
        node = await _require_node(path_tree, partition, path_value)
        removed = await path_tree.destroy(node)
    success(f"Removed {removed} nodes")
