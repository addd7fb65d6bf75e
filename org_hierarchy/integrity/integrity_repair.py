"""
Hierarchy Integrity Repair.

Runs cycle repair to a fixed point:

    load -> detect -> (cycle) break, repeat
                   -> (none)  done

Each iteration removes exactly one edge and adds none, so the loop ends
after at most as many iterations as there were edges to begin with.
Store failures abort the loop; the result records the failure and the
repairs already persisted.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from org_hierarchy.exceptions import StoreError, StoreReadError
from org_hierarchy.graph.manager_store import ManagerStore
from org_hierarchy.integrity.cycle_breaker import CycleBreaker, choose_break_node, epoch_millis
from org_hierarchy.integrity.cycle_detector import find_cycle
from org_hierarchy.integrity.graph_loader import GraphLoader

logger = structlog.get_logger(__name__)


@dataclass
class CycleRepair:
    """One detected cycle and the node promoted to root to break it."""

    cycle: list[str]
    cycle_names: list[str]
    broken_uid: str
    broken_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "cycle": self.cycle,
            "cycle_names": self.cycle_names,
            "broken_uid": self.broken_uid,
            "broken_name": self.broken_name,
        }


@dataclass
class RepairResult:
    """Result of a repair run."""

    success: bool = True
    dry_run: bool = False
    items_repaired: int = 0
    details: list[CycleRepair] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    error_type: str | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = 0.0

    def add_repair(self, repair: CycleRepair) -> None:
        self.details.append(repair)
        self.items_repaired += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "dry_run": self.dry_run,
            "items_repaired": self.items_repaired,
            "details": [d.to_dict() for d in self.details],
            "errors": self.errors,
            "error_type": self.error_type,
            "started_at": self.started_at.isoformat(),
            "duration_seconds": round(self.duration_seconds, 2),
        }


RepairCallback = Callable[[CycleRepair], None]


class HierarchyRepair:
    """
    Breaks every cycle in the reports-to hierarchy.

    Usage:
        ```python
        repair = HierarchyRepair(store)

        # Preview (no writes)
        preview = await repair.repair(dry_run=True)
        print(f"Would break {preview.items_repaired} cycles")

        # Apply
        result = await repair.repair()
        ```
    """

    def __init__(
        self,
        store: ManagerStore,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._store = store
        self._loader = GraphLoader(store)
        self._breaker = CycleBreaker(store, clock=clock)

    async def repair(
        self,
        dry_run: bool = False,
        on_repair: RepairCallback | None = None,
    ) -> RepairResult:
        """
        Repair the hierarchy until no cycle remains.

        Args:
            dry_run: Plan the repairs against an in-memory copy without writing
            on_repair: Called after each cycle is broken (or planned)

        Returns:
            RepairResult; success is False if a store read or write failed
        """
        result = RepairResult(dry_run=dry_run)
        logger.info("Starting cycle repair", dry_run=dry_run)

        try:
            if dry_run:
                await self._plan(result, on_repair)
            else:
                await self._apply(result, on_repair)
        except StoreError as e:
            result.success = False
            result.errors.append(str(e))
            result.error_type = "read" if isinstance(e, StoreReadError) else "write"
            logger.error(
                "Cycle repair aborted",
                error=str(e),
                error_type=result.error_type,
                repaired=result.items_repaired,
            )

        result.duration_seconds = (datetime.now(timezone.utc) - result.started_at).total_seconds()

        if result.success:
            logger.info(
                "Cycle repair completed",
                repaired=result.items_repaired,
                dry_run=dry_run,
            )
        return result

    async def _apply(self, result: RepairResult, on_repair: RepairCallback | None) -> None:
        while True:
            # Reload every pass: the previous write invalidates the old graph
            graph = await self._loader.load_graph()
            cycle = find_cycle(graph.parent)
            if cycle is None:
                return

            broken = await self._breaker.break_cycle(cycle)
            repair = CycleRepair(
                cycle=cycle,
                cycle_names=graph.display_path(cycle),
                broken_uid=broken.uid,
                broken_name=graph.display_name(broken.uid),
            )
            result.add_repair(repair)
            if on_repair is not None:
                on_repair(repair)

    async def _plan(self, result: RepairResult, on_repair: RepairCallback | None) -> None:
        graph = await self._loader.load_graph()
        parent = dict(graph.parent)

        while True:
            cycle = find_cycle(parent)
            if cycle is None:
                return

            uid = choose_break_node(cycle)
            del parent[uid]

            repair = CycleRepair(
                cycle=cycle,
                cycle_names=graph.display_path(cycle),
                broken_uid=uid,
                broken_name=graph.display_name(uid),
            )
            result.add_repair(repair)
            logger.info(f"[DRY RUN] Would promote {uid} to root")
            if on_repair is not None:
                on_repair(repair)
