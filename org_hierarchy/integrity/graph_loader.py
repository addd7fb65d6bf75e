"""
Hierarchy Graph Loader.

Projects the current manager records into a parent mapping.
"""

import structlog

from org_hierarchy.graph.manager_store import ManagerStore
from org_hierarchy.graph.schema import HierarchyGraph

logger = structlog.get_logger(__name__)


class GraphLoader:
    """
    Loads the reports-to hierarchy from a manager store.

    Nothing is cached: every call reads the full record set, so a graph
    loaded after a write reflects that write.
    """

    def __init__(self, store: ManagerStore) -> None:
        self._store = store

    async def load_graph(self) -> HierarchyGraph:
        """
        Read every manager and build the parent mapping.

        Raises:
            StoreReadError: If the store cannot be read
        """
        managers = await self._store.fetch_managers()
        graph = HierarchyGraph.from_managers(managers)

        logger.debug(
            "Hierarchy loaded",
            managers=len(graph.names),
            edges=graph.edge_count,
        )
        return graph
