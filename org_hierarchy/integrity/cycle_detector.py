"""
Reports-To Cycle Detection.

The parent mapping is a functional graph: every manager reports to at
most one other manager. Walking ``cur -> parent[cur] -> ...`` from any
start is therefore a single deterministic path, and the only way it can
revisit a node is by entering a cycle. Each walk stops at:

- a root (no parent entry, including dangling references),
- a settled node (already walked earlier in this pass), or
- a node seen earlier in the same walk, which closes a cycle.

Every node is walked at most once per pass, so a pass is O(n).
"""

from collections.abc import Mapping

import structlog

logger = structlog.get_logger(__name__)


def _walk(
    start: str,
    parent: Mapping[str, str],
    settled: set[str],
) -> tuple[list[str], int | None]:
    """
    Follow reports-to edges from ``start``.

    Returns:
        (path, entry) where entry is the index in path at which a cycle
        closes, or None if the walk ended at a root or a settled node
    """
    path: list[str] = []
    position: dict[str, int] = {}
    cur: str | None = start

    while cur is not None:
        if cur in position:
            return path, position[cur]
        if cur in settled:
            break
        position[cur] = len(path)
        path.append(cur)
        cur = parent.get(cur)

    return path, None


def find_cycle(parent: Mapping[str, str]) -> list[str] | None:
    """
    Find one reports-to cycle.

    Args:
        parent: child uid -> parent uid for every manager with a reportsTo

    Returns:
        The cycle as ordered uids, starting at the node where the walk
        entered it and following edges once around (the entry node is not
        repeated). None if the hierarchy is a forest.
    """
    settled: set[str] = set()

    for start in parent:
        if start in settled:
            continue
        path, entry = _walk(start, parent, settled)
        if entry is not None:
            return path[entry:]
        settled.update(path)

    return None


def find_all_cycles(parent: Mapping[str, str]) -> list[list[str]]:
    """
    Find every reports-to cycle in one pass.

    Cycles of a functional graph are disjoint, so each is reported once,
    in the same rotation find_cycle() would return for it.
    """
    settled: set[str] = set()
    cycles: list[list[str]] = []

    for start in parent:
        if start in settled:
            continue
        path, entry = _walk(start, parent, settled)
        if entry is not None:
            cycles.append(path[entry:])
        settled.update(path)

    if cycles:
        logger.debug("Cycles detected", count=len(cycles))
    return cycles


def is_forest(parent: Mapping[str, str]) -> bool:
    return find_cycle(parent) is None
