"""
Command line entry point.

    org-hierarchy repair [CREDENTIALS] [--dry-run] [--json]
    org-hierarchy check  [CREDENTIALS] [--json]

The credential locator comes from the positional argument or, failing
that, from ORG_HIERARCHY_CREDENTIALS (environment or .env).

Exit codes: 0 success, 1 configuration or store error, 2 (check only)
cycles present.
"""

import asyncio
import json
from enum import Enum
from typing import Any, NoReturn, Optional

import structlog
import typer

from org_hierarchy.config.credentials import load_credentials
from org_hierarchy.config.settings import Settings, get_settings
from org_hierarchy.exceptions import ConfigurationError, StoreError
from org_hierarchy.graph.manager_store import ManagerStore, Neo4jManagerStore
from org_hierarchy.integrity.integrity_checker import HierarchyIntegrityChecker, IntegrityReport
from org_hierarchy.integrity.integrity_repair import CycleRepair, HierarchyRepair, RepairResult
from org_hierarchy.observability.logging import configure_logging

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CYCLES_FOUND = 2


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


app = typer.Typer(
    add_completion=False,
    help="Detect and break cycles in the manager reports-to hierarchy.",
)

CredentialsArgument = typer.Argument(
    None,
    help="Path to the store credential file (defaults to ORG_HIERARCHY_CREDENTIALS).",
    show_default=False,
)


def build_store(locator: str | None, settings: Settings) -> ManagerStore:
    """
    Create the manager store from a credential locator.

    Raises:
        ConfigurationError: If the locator is missing or unusable
    """
    credentials = load_credentials(locator or settings.credentials_path)
    return Neo4jManagerStore(credentials, settings.store)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=EXIT_ERROR)


def _open_store(locator: str | None, settings: Settings) -> ManagerStore:
    try:
        return build_store(locator, settings)
    except ConfigurationError as e:
        logger.error("Configuration error", error=str(e))
        _fail(str(e))


def _echo_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _echo_repair(repair: CycleRepair, dry_run: bool) -> None:
    typer.echo("Cycle found: " + " → ".join(repair.cycle_names) + " → ...")
    verb = "Would break" if dry_run else "Broke"
    typer.echo(f"  {verb} cycle: set {repair.broken_name} to have no reportsTo (now a root).")


def _echo_repair_summary(result: RepairResult) -> None:
    if result.items_repaired == 0:
        typer.echo("No cycles found. Manager hierarchy is acyclic.")
    elif result.dry_run:
        typer.echo(f"\nDry run complete. Cycles that would be fixed: {result.items_repaired}")
    else:
        typer.echo(f"\nAll cycles fixed. Total updates: {result.items_repaired}")


def _echo_report(report: IntegrityReport) -> None:
    typer.echo(
        f"Managers: {report.total_managers}  reportsTo edges: {report.total_edges}"
    )
    for issue in report.errors + report.warnings + report.info:
        typer.echo(f"  [{issue.severity.value}] {issue.description}")
    if report.is_healthy:
        typer.echo("No cycles found. Manager hierarchy is acyclic.")
    else:
        typer.echo(f"Cycles found: {report.cycles}")


async def _run_repair(store: ManagerStore, dry_run: bool, as_json: bool) -> RepairResult:
    on_repair = None if as_json else (lambda r: _echo_repair(r, dry_run))
    try:
        return await HierarchyRepair(store).repair(dry_run=dry_run, on_repair=on_repair)
    finally:
        await store.close()


async def _run_check(store: ManagerStore) -> IntegrityReport:
    try:
        return await HierarchyIntegrityChecker(store).check_all()
    finally:
        await store.close()


@app.callback()
def main(
    log_level: Optional[LogLevel] = typer.Option(
        None, "--log-level", case_sensitive=False, help="Override LOG_LEVEL."
    ),
) -> None:
    """Org hierarchy integrity tools."""
    settings = get_settings()
    configure_logging(
        level=log_level.value if log_level else settings.log_level,
        format=settings.observability.log_format,
    )


@app.command()
def repair(
    credentials: Optional[str] = CredentialsArgument,
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--apply", help="Plan repairs without writing (default: REPAIR_DRY_RUN)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Break every reports-to cycle, one edge per cycle, until none remain."""
    settings = get_settings()
    if dry_run is None:
        dry_run = settings.repair.dry_run

    store = _open_store(credentials, settings)
    result = asyncio.run(_run_repair(store, dry_run, as_json))

    if as_json:
        _echo_json(result.to_dict())
    elif result.success:
        _echo_repair_summary(result)

    if not result.success:
        _fail("Error: " + "; ".join(result.errors))


@app.command()
def check(
    credentials: Optional[str] = CredentialsArgument,
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """Report reports-to cycles and dangling references without changing anything."""
    settings = get_settings()
    store = _open_store(credentials, settings)

    try:
        report = asyncio.run(_run_check(store))
    except StoreError as e:
        logger.error("Integrity check failed", error=str(e))
        _fail(f"Error: {e}")

    if as_json:
        _echo_json(report.to_dict())
    else:
        _echo_report(report)

    if not report.is_healthy:
        raise typer.Exit(code=EXIT_CYCLES_FOUND)


if __name__ == "__main__":
    app()
