"""Lazy, restartable node queries.

Tree relations return a NodeQuery rather than a list. Nothing is read from
the store until the query is iterated, every iteration runs a fresh scan,
and queries can be narrowed before running:

    >>> query = tree.descendants(node).of_kind("folder")
    >>> async for folder in query:
    ...     print(folder.path)
    >>> await query.count()
"""

from __future__ import annotations

from contextlib import aclosing
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from pathtree.core.hierarchy.node import TreeNode

# Produces a fresh store scan; receives the ordered flag
type ScanFactory[N] = Callable[[bool], AsyncIterator[N]]


class NodeQuery[N: TreeNode]:
    """Deferred store scan with optional post-filters.

    Args:
        source: Factory starting the store scan, or None for an empty query
        ordered: Ask the store for ascending path (pre-order) order
        description: Human readable label for logs and repr
    """

    __slots__ = ("_exclude", "_kinds", "_source", "description", "ordered")

    def __init__(
        self,
        source: ScanFactory[N] | None,
        *,
        ordered: bool = True,
        description: str = "",
        exclude: frozenset[str] = frozenset(),
        kinds: frozenset[str | None] | None = None,
    ) -> None:
        self._source = source
        self.ordered = ordered
        self.description = description
        self._exclude = exclude
        self._kinds = kinds

    @classmethod
    def empty(cls, description: str = "empty") -> NodeQuery[Any]:
        """Query that never touches the store and yields nothing."""
        return cls(None, description=description)

    def _derive(self, **changes: Any) -> NodeQuery[N]:
        options: dict[str, Any] = {
            "ordered": self.ordered,
            "description": self.description,
            "exclude": self._exclude,
            "kinds": self._kinds,
        }
        options.update(changes)
        return NodeQuery(self._source, **options)

    # ------------------------------------------------------------------
    # Narrowing
    # ------------------------------------------------------------------

    def of_kind(self, *kinds: str | None) -> NodeQuery[N]:
        """Keep only nodes whose kind is one of kinds."""
        allowed = frozenset(kinds)
        if self._kinds is not None:
            allowed &= self._kinds
        return self._derive(kinds=allowed)

    def excluding(self, path: str) -> NodeQuery[N]:
        """Drop the node with this exact path."""
        return self._derive(exclude=self._exclude | {path})

    def unordered(self) -> NodeQuery[N]:
        """Let the store return nodes in whatever order is cheapest."""
        return self._derive(ordered=False)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def __aiter__(self) -> AsyncIterator[N]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[N]:
        if self._source is None:
            return
        async with aclosing(self._source(self.ordered)) as scan:
            async for node in scan:
                if node.path in self._exclude:
                    continue
                if self._kinds is not None and node.kind not in self._kinds:
                    continue
                yield node

    async def all(self) -> list[N]:
        """Run the query and collect every node."""
        return [node async for node in self]

    async def first(self) -> N | None:
        """First node in query order, or None."""
        async with aclosing(self._iterate()) as nodes:
            async for node in nodes:
                return node
        return None

    async def count(self) -> int:
        """Number of matching nodes."""
        total = 0
        async for _ in self:
            total += 1
        return total

    async def exists(self) -> bool:
        """Whether at least one node matches."""
        return await self.first() is not None

    async def paths(self) -> list[str]:
        """Paths of the matching nodes, in query order."""
        return [node.path async for node in self if node.path is not None]

    def __repr__(self) -> str:
        return f"NodeQuery({self.description!r}, ordered={self.ordered})"


__all__ = ["NodeQuery", "ScanFactory"]
