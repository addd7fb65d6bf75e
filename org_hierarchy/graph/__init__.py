"""
Hierarchy Graph Module.

Manager record schema and store backends.
"""

from org_hierarchy.graph.manager_store import (
    InMemoryManagerStore,
    ManagerStore,
    Neo4jManagerStore,
)
from org_hierarchy.graph.schema import HierarchyGraph, ManagerNode

__all__ = [
    # Schema
    "ManagerNode",
    "HierarchyGraph",
    # Stores
    "ManagerStore",
    "Neo4jManagerStore",
    "InMemoryManagerStore",
]
