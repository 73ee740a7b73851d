"""Tests for the in-memory ordered store."""

from __future__ import annotations

import pytest

from pathtree.core.exceptions import DuplicatePathError
from pathtree.core.hierarchy import Node
from pathtree.core.hierarchy.ranges import (
    PathRange,
    children_patterns,
    self_and_descendants_range,
)
from pathtree.infra.stores import InMemoryTreeStore, TreeStore


async def _fill(store: InMemoryTreeStore, partition: str, paths: list[str]) -> None:
    for path in paths:
        await store.insert(Node(partition=partition, path=path, seq=0))


async def _collect(scan) -> list[str]:
    return [node.path async for node in scan]


@pytest.fixture
async def filled_store(memory_store: InMemoryTreeStore) -> InMemoryTreeStore:
    await _fill(memory_store, "t", ["1", "", "0", "01", "W10", "00", "0W10"])
    await _fill(memory_store, "u", ["", "0"])
    return memory_store


@pytest.mark.unit
class TestReads:
    """Lookups and scans."""

    async def test_get(self, filled_store: InMemoryTreeStore):
        """Test point lookups by (partition, path)."""
        node = await filled_store.get("t", "01")

        assert node is not None
        assert node.path == "01"
        assert await filled_store.get("t", "02") is None
        assert await filled_store.get("missing", "") is None

    async def test_returned_nodes_are_copies(self, filled_store: InMemoryTreeStore):
        """Test mutating a returned node does not change the store."""
        node = await filled_store.get("t", "0")
        node.seq = 99
        node.data["x"] = 1

        again = await filled_store.get("t", "0")
        assert again.seq == 0
        assert again.data == {}

    async def test_scan_range_ordered(self, filled_store: InMemoryTreeStore):
        """Test range scans return ascending paths."""
        paths = await _collect(filled_store.scan_range("t", self_and_descendants_range("0")))

        assert paths == ["0", "00", "01", "0W10"]

    async def test_scan_range_half_open(self, filled_store: InMemoryTreeStore):
        """Test the upper bound is exclusive."""
        paths = await _collect(filled_store.scan_range("t", PathRange("0", "01")))

        assert paths == ["0", "00"]

    async def test_scan_prefix_union(self, filled_store: InMemoryTreeStore):
        """Test child patterns select only immediate children."""
        paths = await _collect(filled_store.scan_prefix_union("t", children_patterns("")))

        assert paths == ["0", "1", "W10"]

    async def test_scan_set(self, filled_store: InMemoryTreeStore):
        """Test exact set scans ignore missing paths."""
        paths = await _collect(filled_store.scan_set("t", ["", "0", "0A"]))

        assert paths == ["", "0"]

    async def test_scan_roots(self, filled_store: InMemoryTreeStore):
        """Test one root per partition."""
        roots = [n async for n in filled_store.scan_roots()]

        assert sorted(r.partition for r in roots) == ["t", "u"]

    async def test_scans_are_snapshots(self, filled_store: InMemoryTreeStore):
        """Test writes during iteration do not change the running scan."""
        seen = []
        async for node in filled_store.scan_range("t", self_and_descendants_range("0")):
            seen.append(node.path)
            if node.path == "0":
                await filled_store.insert(Node(partition="t", path="02", seq=0))

        assert seen == ["0", "00", "01", "0W10"]
        assert await filled_store.get("t", "02") is not None


@pytest.mark.unit
class TestWrites:
    """Inserts, compare-and-swap and bulk operations."""

    async def test_insert_duplicate(self, filled_store: InMemoryTreeStore):
        """Test inserting a taken key fails."""
        with pytest.raises(DuplicatePathError):
            await filled_store.insert(Node(partition="t", path="0", seq=0))

        assert len(filled_store) == 9

    async def test_insert_requires_path(self, memory_store: InMemoryTreeStore):
        """Test nodes without a path are refused."""
        with pytest.raises(ValueError, match="without a path"):
            await memory_store.insert(Node(partition="t"))

    async def test_conditional_update(self, filled_store: InMemoryTreeStore):
        """Test the update applies only when seq still matches."""
        assert await filled_store.conditional_update("t", "0", 0, 1)
        assert not await filled_store.conditional_update("t", "0", 0, 1)
        assert await filled_store.conditional_update("t", "0", 1, 2)
        assert not await filled_store.conditional_update("t", "missing", 0, 1)

        assert (await filled_store.get("t", "0")).seq == 2

    async def test_conditional_update_treats_unset_seq_as_zero(
        self, memory_store: InMemoryTreeStore
    ):
        """Test a node stored without seq counts from zero."""
        await memory_store.insert(Node(partition="t", path=""))

        assert await memory_store.conditional_update("t", "", 0, 1)

    async def test_bulk_rewrite_prefix(self, filled_store: InMemoryTreeStore):
        """Test the subtree is relabelled and re-sorted."""
        count = await filled_store.bulk_rewrite_prefix("t", "0", "W11", "t")

        assert count == 4
        paths = await _collect(filled_store.scan_range("t", self_and_descendants_range("")))
        assert paths == ["", "1", "W10", "W11", "W110", "W111", "W11W10"]

    async def test_bulk_rewrite_missing_prefix(self, filled_store: InMemoryTreeStore):
        """Test rewriting an empty range changes nothing."""
        assert await filled_store.bulk_rewrite_prefix("t", "V", "W12", "t") == 0
        assert len(filled_store) == 9

    async def test_bulk_delete_range(self, filled_store: InMemoryTreeStore):
        """Test a range delete removes exactly the range."""
        removed = await filled_store.bulk_delete_range("t", self_and_descendants_range("0"))

        assert removed == 4
        assert len(filled_store) == 5
        assert await filled_store.get("t", "0W10") is None
        assert await filled_store.get("t", "W10") is not None

    async def test_empty_partition_dropped(self, filled_store: InMemoryTreeStore):
        """Test deleting a whole partition forgets it."""
        await filled_store.bulk_delete_range("u", self_and_descendants_range(""))

        assert repr(filled_store) == "InMemoryTreeStore(partitions=1, nodes=7)"


@pytest.mark.unit
def test_satisfies_protocol_methods():
    """Test the in-memory store provides every TreeStore operation."""
    store = InMemoryTreeStore()
    names = [n for n in vars(TreeStore) if not n.startswith("_")]

    assert names
    for name in names:
        assert callable(getattr(store, name))
