"""Path encoding and inspection commands.

Example:bash
    # Encode child numbers as path components
    pathtree path encode 0 31 32 10000000

    # Decode a path into its child numbers
    pathtree path decode 0CW124

    # Show everything derivable from a path without touching a store
    pathtree path inspect 0CW124 --json
"""

import json
import sys

import click

from pathtree.cli.utils import error, field, header
from pathtree.core.exceptions import PathTreeError
from pathtree.core.hierarchy import codec, ranges


@click.group(name="path")
def path() -> None:
    """Encode, decode and inspect materialized paths."""


@path.command()
@click.argument("numbers", nargs=-1, required=True, type=int)
def encode(numbers: tuple[int, ...]) -> None:
    """Encode child sequence NUMBERS as path components."""
    try:
        for number in numbers:
            click.echo(f"{number}\t{codec.encode_component(number)}")
    except PathTreeError as exc:
        error(str(exc))
        sys.exit(1)


@path.command()
@click.argument("path_value", metavar="PATH")
def decode(path_value: str) -> None:
    """Split PATH into components and decode each one."""
    try:
        components = codec.split_path(path_value)
    except PathTreeError as exc:
        error(str(exc))
        sys.exit(1)
    for component in components:
        click.echo(f"{component}\t{codec.decode_component(component)}")


def describe_path(path_value: str) -> dict[str, object]:
    """Collect the store-independent facts about a path."""
    components = codec.split_path(path_value)
    subtree = ranges.self_and_descendants_range(path_value)
    descendants = ranges.descendants_range(path_value)
    siblings = ranges.siblings_patterns(path_value)
    return {
        "path": path_value,
        "components": components,
        "numbers": [codec.decode_component(c) for c in components],
        "level": len(components),
        "parent": codec.parent_path(path_value),
        "ancestors": ranges.ancestor_paths(path_value),
        "self_and_descendants": [subtree.lo, subtree.hi],
        "descendants": [descendants.lo, descendants.hi],
        "children_like": [p.like() for p in ranges.children_patterns(path_value)],
        "siblings_like": [p.like() for p in siblings] if siblings is not None else [],
    }


@path.command()
@click.argument("path_value", metavar="PATH")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def inspect(path_value: str, as_json: bool) -> None:
    """Show level, parent, ancestors and query ranges for PATH.

    An empty PATH ("") denotes a root.
    """
    if not codec.is_valid_path(path_value):
        error(f"Corrupt path: {path_value!r} does not match the component grammar")
        sys.exit(1)

    details = describe_path(path_value)

    if as_json:
        click.echo(json.dumps(details, indent=2))
        return

    header(f"Path {path_value!r}")
    field("Components", " ".join(details["components"]) or "(root)")
    field("Child numbers", details["numbers"])
    field("Level", details["level"])
    field("Parent", repr(details["parent"]))
    field("Ancestors", details["ancestors"])
    lo, hi = details["self_and_descendants"]
    field("Self + descendants", f"[{lo!r}, {hi!r})")
    lo, hi = details["descendants"]
    field("Descendants", f"[{lo!r}, {hi!r})")
    field("Children LIKE", " OR ".join(details["children_like"]))
    field("Siblings LIKE", " OR ".join(details["siblings_like"]) or "(none)")
