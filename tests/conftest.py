"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: tree settings without allocation backoff
    - Store Fixtures: in-memory store and a tree facade over it
    - Tree Builders: helpers that build small trees for navigation tests

When adding new features:
    1. Add fixtures to the appropriate section below
    2. Use @pytest.fixture with clear docstrings
    3. Make fixtures composable (fixtures can depend on other fixtures)
"""

from __future__ import annotations

import os

import pytest

from pathtree.core.hierarchy import Node, PathTree
from pathtree.core.settings import TreeSettings, clear_settings_cache
from pathtree.infra.stores import InMemoryTreeStore

# Keep a developer's .env or shell from leaking into test settings
os.environ.setdefault("PATHTREE_DB_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings around every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def tree_settings() -> TreeSettings:
    """Tree settings with zero backoff so contention tests run instantly."""
    return TreeSettings(
        allocation_initial_delay=0.0,
        allocation_max_delay=0.0,
        allocation_jitter=False,
    )


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def memory_store() -> InMemoryTreeStore:
    """Empty in-memory store."""
    return InMemoryTreeStore()


@pytest.fixture
def tree(memory_store: InMemoryTreeStore, tree_settings: TreeSettings) -> PathTree[Node]:
    """PathTree over the in-memory store."""
    return PathTree(memory_store, settings=tree_settings)


# ============================================================================
# Tree Builders
# ============================================================================


@pytest.fixture
def build_sample_tree(tree: PathTree[Node]):
    """Build a small tree in partition "t" and return its nodes by path.

    Shape:
        ""
        +-- "0"
        |   +-- "00"
        |   |   +-- "000"
        |   +-- "01"
        +-- "1"
        +-- "2"
    """

    async def _build() -> dict[str, Node]:
        root = await tree.create_root(Node(partition="t", data={"name": "root"}))
        a = await tree.add_child(root, Node(kind="folder", data={"name": "a"}))
        b = await tree.add_child(root, Node(kind="file", data={"name": "b"}))
        c = await tree.add_child(root, Node(kind="file", data={"name": "c"}))
        aa = await tree.add_child(a, Node(kind="folder", data={"name": "aa"}))
        ab = await tree.add_child(a, Node(kind="file", data={"name": "ab"}))
        aaa = await tree.add_child(aa, Node(kind="file", data={"name": "aaa"}))
        return {n.path: n for n in (root, a, b, c, aa, ab, aaa)}

    return _build
