"""
Tests for the click command line interface.
"""

import pytest
from click.testing import CliRunner

import cli.main as cli_main
from api.client import TransientError
from api.models import Category, Entry
from storage.cache import SnapshotCache

from conftest import FakeSheetClient


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "lookup.db")


@pytest.fixture
def online(monkeypatch):
    client = FakeSheetClient()
    monkeypatch.setattr(cli_main, "SheetClient", lambda: client)
    return client


@pytest.fixture
def offline(monkeypatch):
    client = FakeSheetClient(failures={
        Category.CORNER: TransientError("down"),
        Category.EDGE: TransientError("down"),
    })
    monkeypatch.setattr(cli_main, "SheetClient", lambda: client)
    return client


def invoke(runner, db_path, *args, **kwargs):
    return runner.invoke(cli_main.cli, ["--db-path", db_path, *args], **kwargs)


class TestLookupCommand:
    """Test one-shot lookups."""

    def test_found_with_note(self, runner, db_path, online):
        result = invoke(runner, db_path, "lookup", "ab")

        assert result.exit_code == 0, result.output
        assert "AB" in result.output
        assert "Buffer UFR" in result.output
        assert "R U R' D R U' R' D'" in result.output
        assert "Found" in result.output

    def test_edge_category(self, runner, db_path, online):
        result = invoke(runner, db_path, "lookup", "CD", "--category", "edge")

        assert result.exit_code == 0, result.output
        assert "R2 U M U2 M' U R2" in result.output

    def test_not_found_exits_nonzero(self, runner, db_path, online):
        result = invoke(runner, db_path, "lookup", "ZZ")

        assert result.exit_code == 1
        assert "No results" in result.output

    def test_invalid_key_is_usage_error(self, runner, db_path, online):
        result = invoke(runner, db_path, "lookup", "ABC")

        assert result.exit_code == 2
        assert online.calls == []

    def test_invalid_key_message_names_length(self, runner, db_path, online):
        result = invoke(runner, db_path, "lookup", "A")

        assert result.exit_code == 2
        assert "Key must be exactly 2 characters" in result.output

    def test_key_is_trimmed_and_upper_cased(self, runner, db_path, online):
        result = invoke(runner, db_path, "lookup", " ab ")

        assert result.exit_code == 0, result.output
        assert "Buffer UFR" in result.output

    def test_empty_cached_snapshot_reports_no_results(self, runner, db_path, online):
        SnapshotCache(db_path).save({}, {})

        result = invoke(runner, db_path, "lookup", "AB")

        assert result.exit_code == 1
        assert "Loaded from cache" in result.output
        assert "AB: no corner entry" in result.output
        assert "No results" in result.output
        assert online.calls == []

    def test_uses_cache_without_fetching(self, runner, db_path, online):
        SnapshotCache(db_path).save({"AB": [Entry("", "cached alg")]}, {})

        result = invoke(runner, db_path, "lookup", "AB")

        assert result.exit_code == 0, result.output
        assert "cached alg" in result.output
        assert "Loaded from cache" in result.output
        assert online.calls == []

    def test_no_data_available(self, runner, db_path, offline):
        result = invoke(runner, db_path, "lookup", "AB")

        assert result.exit_code == 1
        assert "No data available" in result.output


class TestRefreshCommand:
    """Test forced refreshes."""

    def test_refresh_updates_cache(self, runner, db_path, online):
        result = invoke(runner, db_path, "refresh")

        assert result.exit_code == 0, result.output
        snapshot = SnapshotCache(db_path).load()
        assert f"Updated • Last: {snapshot.captured_at_text}" in result.output
        assert "Corners: 3 pairs, 4 rows, 2 discarded" in result.output

    def test_refresh_offline_with_cache(self, runner, db_path, offline):
        SnapshotCache(db_path).save({"AB": [Entry("", "v")]}, {})

        result = invoke(runner, db_path, "refresh")

        assert result.exit_code == 0, result.output
        assert "Offline - using cache" in result.output

    def test_refresh_offline_without_cache(self, runner, db_path, offline):
        result = invoke(runner, db_path, "refresh")

        assert result.exit_code == 1
        assert "No data available" in result.output


class TestStatusAndClear:
    """Test cache inspection and deletion."""

    def test_status_without_snapshot(self, runner, db_path):
        result = invoke(runner, db_path, "status")

        assert result.exit_code == 0
        assert "No snapshot stored" in result.output

    def test_status_with_snapshot(self, runner, db_path, online):
        invoke(runner, db_path, "refresh")

        result = invoke(runner, db_path, "status")

        assert result.exit_code == 0, result.output
        assert "Corners: 3 pairs, 4 entries" in result.output
        assert "Edges: 2 pairs, 2 entries" in result.output

    def test_cache_clear(self, runner, db_path):
        SnapshotCache(db_path).save({}, {})

        result = invoke(runner, db_path, "cache-clear", "--yes")

        assert result.exit_code == 0, result.output
        assert SnapshotCache(db_path).load() is None

    def test_cache_clear_needs_confirmation(self, runner, db_path):
        SnapshotCache(db_path).save({}, {})

        result = invoke(runner, db_path, "cache-clear", input="n\n")

        assert result.exit_code == 1
        assert SnapshotCache(db_path).load() is not None


class TestShell:
    """Test the interactive loop."""

    def test_lookup_switch_clear_quit(self, runner, db_path, online):
        result = invoke(runner, db_path, "shell", input="ab\n:s\nab\n\nzz\nA\n:q\n")

        assert result.exit_code == 0, result.output
        assert "Buffer UFR" in result.output
        assert "Switched to edge" in result.output
        assert "M' U M U2 M' U M" in result.output
        assert "Cleared" in result.output
        assert "No results" in result.output
        assert "exactly 2 characters" in result.output

    def test_refresh_from_shell(self, runner, db_path, online):
        SnapshotCache(db_path).save({}, {})

        result = invoke(runner, db_path, "shell", input=":r\n:q\n")

        assert result.exit_code == 0, result.output
        assert "Updated" in result.output
        assert len(online.calls) == 2
