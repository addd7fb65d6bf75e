"""
Reports-To Cycle Breaker.

Breaks a cycle by promoting its entry node to a root: the entry node's
reportsTo field is deleted and updatedAt is stamped. Every other record,
including the other members of the cycle, is left untouched.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from org_hierarchy.graph.manager_store import ManagerStore

logger = structlog.get_logger(__name__)


def epoch_millis() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class BrokenEdge:
    """A reports-to edge removed from the hierarchy."""

    uid: str
    former_parent: str
    updated_at: int


def choose_break_node(cycle: list[str]) -> str:
    """The member of a cycle whose reportsTo edge is removed."""
    if not cycle:
        raise ValueError("Cannot break an empty cycle")
    return cycle[0]


class CycleBreaker:
    """Removes one reports-to edge per detected cycle."""

    def __init__(
        self,
        store: ManagerStore,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._store = store
        self._clock = clock

    async def break_cycle(self, cycle: list[str]) -> BrokenEdge:
        """
        Persist the removal of the entry node's reportsTo edge.

        Args:
            cycle: Cycle as returned by find_cycle()

        Returns:
            The removed edge

        Raises:
            ValueError: If the cycle is empty
            StoreWriteError: If the write fails
        """
        uid = choose_break_node(cycle)
        former_parent = cycle[1 % len(cycle)]
        updated_at = self._clock()

        await self._store.remove_reports_to(uid, updated_at)

        logger.info(
            "Cycle broken",
            uid=uid,
            former_parent=former_parent,
            cycle_length=len(cycle),
        )
        return BrokenEdge(uid=uid, former_parent=former_parent, updated_at=updated_at)
