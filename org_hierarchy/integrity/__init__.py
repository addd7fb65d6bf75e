"""
Hierarchy Integrity Management.

Detects and repairs cycles in the reports-to hierarchy:
- Cycle detection over the parent mapping
- Single-edge cycle breaking
- Repair loop to a verified fixed point
- Read-only integrity reports
"""

from org_hierarchy.integrity.cycle_breaker import BrokenEdge, CycleBreaker
from org_hierarchy.integrity.cycle_detector import find_all_cycles, find_cycle, is_forest
from org_hierarchy.integrity.graph_loader import GraphLoader
from org_hierarchy.integrity.integrity_checker import (
    HierarchyIntegrityChecker,
    IntegrityIssue,
    IntegrityReport,
    IssueSeverity,
    IssueType,
)
from org_hierarchy.integrity.integrity_repair import (
    CycleRepair,
    HierarchyRepair,
    RepairResult,
)

__all__ = [
    # Detection
    "find_cycle",
    "find_all_cycles",
    "is_forest",
    # Components
    "GraphLoader",
    "CycleBreaker",
    "BrokenEdge",
    # Checker
    "HierarchyIntegrityChecker",
    "IntegrityReport",
    "IntegrityIssue",
    "IssueType",
    "IssueSeverity",
    # Repair
    "HierarchyRepair",
    "RepairResult",
    "CycleRepair",
]
