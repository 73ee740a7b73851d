"""Tests for the database-backed tree CLI commands.

Testing approach:
- Uses Click's CliRunner for command invocation
- Each test gets its own SQLite file so commands share state across
  invocations the way they would from a shell
"""

import json

from click.testing import CliRunner
import pytest

from pathtree.cli.commands.tree import tree


@pytest.fixture
def cli_runner():
    """Create Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def db_url(tmp_path):
    """URL of a fresh SQLite database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'trees.db'}"


@pytest.fixture
def run(cli_runner, db_url):
    """Invoke a tree subcommand against the test database."""

    def _run(*args: str):
        return cli_runner.invoke(tree, [*args, "--url", db_url])

    return _run


def _show(run, partition: str) -> list[dict]:
    result = run("show", partition, "--json")
    assert result.exit_code == 0, result.output
    return [json.loads(line) for line in result.output.splitlines()]


@pytest.mark.unit
class TestTreeCommands:
    def test_build_and_show(self, run):
        """Test init, add-root and add build a tree shown in pre-order."""
        assert run("init").exit_code == 0
        assert run("add-root", "catalog", "--name", "root").exit_code == 0
        assert run("add", "catalog", "", "--kind", "folder", "--name", "books").exit_code == 0
        assert run("add", "catalog", "", "--name", "music").exit_code == 0
        result = run("add", "catalog", "0", "--name", "fiction")

        assert result.exit_code == 0
        assert "'00'" in result.output
        nodes = _show(run, "catalog")
        assert [n["path"] for n in nodes] == ["", "0", "00", "1"]
        assert nodes[1]["kind"] == "folder"
        assert nodes[1]["data"] == {"name": "books"}
        assert nodes[0]["seq"] == 2

    def test_show_tree_text(self, run):
        """Test the indented text view."""
        run("init")
        run("add-root", "docs")
        run("add", "docs", "", "--name", "intro")

        result = run("show", "docs")

        assert result.exit_code == 0
        assert "(root)" in result.output
        assert "  0 intro" in result.output

    def test_show_empty_partition(self, run):
        """Test an empty partition is reported, not an error."""
        run("init")

        result = run("show", "nothing")

        assert result.exit_code == 0
        assert "empty" in result.output

    def test_duplicate_root(self, run):
        """Test a second root in one partition fails."""
        run("init")
        run("add-root", "docs")

        result = run("add-root", "docs")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_under_missing_parent(self, run):
        """Test adding under a path that does not exist fails."""
        run("init")
        run("add-root", "docs")

        result = run("add", "docs", "7")

        assert result.exit_code == 1
        assert "No node" in result.output

    def test_graft(self, run):
        """Test a subtree moves under its new parent."""
        run("init")
        run("add-root", "docs")
        run("add", "docs", "")
        run("add", "docs", "")
        run("add", "docs", "1")

        result = run("graft", "docs", "1", "0")

        assert result.exit_code == 0
        assert "2 nodes relabelled" in result.output
        assert [n["path"] for n in _show(run, "docs")] == ["", "0", "00", "000"]

    def test_destroy(self, run):
        """Test a subtree is deleted with --yes."""
        run("init")
        run("add-root", "docs")
        run("add", "docs", "")
        run("add", "docs", "0")
        run("add", "docs", "")

        result = run("destroy", "docs", "0", "--yes")

        assert result.exit_code == 0
        assert "Removed 2 nodes" in result.output
        assert [n["path"] for n in _show(run, "docs")] == ["", "1"]

    def test_destroy_aborts_without_confirmation(self, cli_runner, db_url, run):
        """Test answering no to the prompt keeps the subtree."""
        run("init")
        run("add-root", "docs")

        result = cli_runner.invoke(tree, ["destroy", "docs", "", "--url", db_url], input="n\n")

        assert result.exit_code == 1
        assert [n["path"] for n in _show(run, "docs")] == [""]
