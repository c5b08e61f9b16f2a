"""
Tests for the gitch command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from services.author_stats.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestAuthorsCommand:
    """Test cases for `gitch authors`."""

    def test_text_output_by_count(self, runner, git_repo):
        """One line per author, ascending by commit count."""
        result = runner.invoke(cli, ["authors", "--repo-path", git_repo.working_tree_dir])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "Bob(b@example.com), 1, 0s(2024-1-5 ~ 2024-1-5)",
            "Alice(a@example.com), 2, 9d0h0m(2024-1-1 ~ 2024-1-10)",
        ]

    def test_alias_and_span_order(self, runner, git_repo):
        """`au` is an alias; span ordering puts the shortest span first."""
        result = runner.invoke(cli, ["au", "-p", git_repo.working_tree_dir, "-o", "span"])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("Bob(")
        assert lines[1].startswith("Alice(")

    def test_defaults_to_current_directory(self, runner, git_repo, monkeypatch):
        monkeypatch.chdir(git_repo.working_tree_dir)

        result = runner.invoke(cli, ["authors"])

        assert result.exit_code == 0, result.output
        assert len(result.output.splitlines()) == 2

    def test_json_output(self, runner, git_repo):
        result = runner.invoke(cli, ["authors", "-p", git_repo.working_tree_dir, "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["total_commits"] == 3
        assert [s["user"]["email"] for s in payload["statistics"]] == ["b@example.com", "a@example.com"]

    def test_table_output(self, runner, git_repo):
        result = runner.invoke(cli, ["authors", "-p", git_repo.working_tree_dir, "--format", "table"])

        assert result.exit_code == 0, result.output
        assert "Authors (3 commits)" in result.output

    def test_unknown_order_sorts_by_count(self, runner, git_repo):
        """An unrecognised order falls back to commit count ordering."""
        result = runner.invoke(cli, ["authors", "-p", git_repo.working_tree_dir, "-o", "name"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "Bob(b@example.com), 1, 0s(2024-1-5 ~ 2024-1-5)",
            "Alice(a@example.com), 2, 9d0h0m(2024-1-1 ~ 2024-1-10)",
        ]

    def test_not_a_repository(self, runner, tmp_path):
        """A bad path exits non-zero without printing results."""
        result = runner.invoke(cli, ["authors", "-p", str(tmp_path)])

        assert result.exit_code == 1
        assert "Failed to open repository" in result.output

    def test_enumeration_failure(self, runner, git_repo, monkeypatch):
        """A storage failure mid-traversal exits non-zero."""
        from services.author_stats import repository
        from shared.exceptions import EnumerationError

        def broken(self):
            raise EnumerationError("pack file is corrupt")
            yield

        monkeypatch.setattr(repository.ObjectEnumerator, "iter_objects", broken)

        result = runner.invoke(cli, ["authors", "-p", git_repo.working_tree_dir])

        assert result.exit_code == 1
        assert "pack file is corrupt" in result.output
        assert "Alice" not in result.output


class TestMiscCommands:
    """Test cases for version and config."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_alias_once(self, runner):
        """The `au` alias resolves but is not listed as its own command."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        names = [line.split()[0] for line in result.output.splitlines() if line.startswith("  ") and line.strip()]
        assert "authors" in names
        assert "au" not in names
        assert "alias: au" in result.output

    def test_config(self, runner):
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        assert json.loads(result.output)["app_name"] == "gitch"
