"""
Unit Tests for the Command Line Entry Point.

The Neo4j store is replaced with an in-memory store; credential loading
runs for real against a temporary file.
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from org_hierarchy.cli import EXIT_CYCLES_FOUND, EXIT_ERROR, EXIT_OK, app
from org_hierarchy.exceptions import StoreReadError
from org_hierarchy.graph.manager_store import InMemoryManagerStore, ManagerStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_env_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ORG_HIERARCHY_CREDENTIALS", raising=False)
    monkeypatch.delenv("REPAIR_DRY_RUN", raising=False)


def failing_store() -> MagicMock:
    store = MagicMock(spec=ManagerStore)
    store.fetch_managers = AsyncMock(side_effect=StoreReadError("Failed to load manager records: store down"))
    store.close = AsyncMock()
    return store


class TestRepairCommand:
    """Test cases for `org-hierarchy repair`."""

    def test_breaks_cycle(self, cyclic_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=cyclic_store):
            result = runner.invoke(app, ["repair", str(credentials_file)])

        assert result.exit_code == EXIT_OK
        assert "Cycle found: Grace → Linus → Barbara → ..." in result.output
        assert "  Broke cycle: set Grace to have no reportsTo (now a root)." in result.output
        assert "All cycles fixed. Total updates: 1" in result.output
        assert cyclic_store.writes == ["cto"]

    def test_acyclic(self, acyclic_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=acyclic_store):
            result = runner.invoke(app, ["repair", str(credentials_file)])

        assert result.exit_code == EXIT_OK
        assert "No cycles found. Manager hierarchy is acyclic." in result.output
        assert acyclic_store.writes == []

    def test_missing_credentials(self) -> None:
        """Configuration errors stop the run before the store is touched."""
        with patch("org_hierarchy.cli.Neo4jManagerStore") as store_cls:
            result = runner.invoke(app, ["repair"])

        assert result.exit_code == EXIT_ERROR
        assert "ORG_HIERARCHY_CREDENTIALS" in result.output
        store_cls.assert_not_called()

    def test_unreadable_credentials(self, tmp_path: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore") as store_cls:
            result = runner.invoke(app, ["repair", str(tmp_path / "absent.json")])

        assert result.exit_code == EXIT_ERROR
        assert "Failed to read store credentials" in result.output
        store_cls.assert_not_called()

    def test_credentials_from_environment(
        self,
        cyclic_store: InMemoryManagerStore,
        credentials_file: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("ORG_HIERARCHY_CREDENTIALS", str(credentials_file))

        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=cyclic_store) as store_cls:
            result = runner.invoke(app, ["repair"])

        assert result.exit_code == EXIT_OK
        credentials = store_cls.call_args.args[0]
        assert credentials.database == "org"

    def test_dry_run(self, two_cycle_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=two_cycle_store):
            result = runner.invoke(app, ["repair", str(credentials_file), "--dry-run"])

        assert result.exit_code == EXIT_OK
        assert result.output.count("Would break cycle") == 2
        assert "Cycles that would be fixed: 2" in result.output
        assert two_cycle_store.writes == []

    def test_json_output(self, two_cycle_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=two_cycle_store):
            result = runner.invoke(app, ["repair", str(credentials_file), "--json"])

        assert result.exit_code == EXIT_OK
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["items_repaired"] == 2

    def test_store_failure(self, credentials_file: Path) -> None:
        store = failing_store()
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=store):
            result = runner.invoke(app, ["repair", str(credentials_file)])

        assert result.exit_code == EXIT_ERROR
        assert "Error: Failed to load manager records: store down" in result.output
        store.close.assert_awaited_once()


class TestCheckCommand:
    """Test cases for `org-hierarchy check`."""

    def test_healthy(self, acyclic_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=acyclic_store):
            result = runner.invoke(app, ["check", str(credentials_file)])

        assert result.exit_code == EXIT_OK
        assert "Managers: 5  reportsTo edges: 4" in result.output
        assert "No cycles found." in result.output

    def test_cycles_found(self, two_cycle_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=two_cycle_store):
            result = runner.invoke(app, ["check", str(credentials_file)])

        assert result.exit_code == EXIT_CYCLES_FOUND
        assert "Cycles found: 2" in result.output
        assert two_cycle_store.writes == []

    def test_json_output(self, cyclic_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=cyclic_store):
            result = runner.invoke(app, ["check", str(credentials_file), "--json"])

        assert result.exit_code == EXIT_CYCLES_FOUND
        payload = json.loads(result.stdout)
        assert payload["statistics"]["cycles"] == 1

    def test_store_failure(self, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=failing_store()):
            result = runner.invoke(app, ["check", str(credentials_file)])

        assert result.exit_code == EXIT_ERROR
        assert "store down" in result.output


class TestLogLevelOption:
    """Test cases for the global --log-level option."""

    def test_accepts_lowercase_level(self, acyclic_store: InMemoryManagerStore, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore", return_value=acyclic_store):
            result = runner.invoke(app, ["--log-level", "debug", "repair", str(credentials_file)])

        assert result.exit_code == EXIT_OK
        assert "No cycles found." in result.output

    def test_rejects_unknown_level(self, credentials_file: Path) -> None:
        with patch("org_hierarchy.cli.Neo4jManagerStore") as store_cls:
            result = runner.invoke(app, ["--log-level", "bogus", "repair", str(credentials_file)])

        assert result.exit_code == 2
        assert not isinstance(result.exception, AttributeError)
        store_cls.assert_not_called()
