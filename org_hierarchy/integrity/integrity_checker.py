"""
Hierarchy Integrity Checker.

Read-only validation of the reports-to hierarchy:
- Cycles (managers who end up reporting to themselves)
- Self references (a manager reporting directly to themselves)
- Dangling references (reportsTo pointing at a missing manager)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import structlog

from org_hierarchy.graph.manager_store import ManagerStore
from org_hierarchy.graph.schema import HierarchyGraph
from org_hierarchy.integrity.cycle_detector import find_all_cycles
from org_hierarchy.integrity.graph_loader import GraphLoader

logger = structlog.get_logger(__name__)


class IssueType(str, Enum):
    """Types of integrity issues."""

    CYCLE = "cycle"                            # Chain of managers that loops back
    SELF_REFERENCE = "self_reference"          # Manager reports to themselves
    DANGLING_REFERENCE = "dangling_reference"  # reportsTo names a missing manager


class IssueSeverity(str, Enum):
    """Severity levels for issues."""

    ERROR = "error"       # Must be fixed
    WARNING = "warning"   # Should be investigated
    INFO = "info"         # For information only


@dataclass
class IntegrityIssue:
    """Represents an integrity issue found in the hierarchy."""

    issue_type: IssueType
    severity: IssueSeverity
    description: str
    node_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "issue_type": self.issue_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "node_id": self.node_id,
            "details": self.details,
        }


@dataclass
class IntegrityReport:
    """Report of integrity check results."""

    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_healthy: bool = True

    # Counts
    total_managers: int = 0
    total_edges: int = 0
    issues_found: int = 0

    # Issues by severity
    errors: list[IntegrityIssue] = field(default_factory=list)
    warnings: list[IntegrityIssue] = field(default_factory=list)
    info: list[IntegrityIssue] = field(default_factory=list)

    # Statistics
    cycles: int = 0
    dangling_references: int = 0

    duration_seconds: float = 0.0

    def add_issue(self, issue: IntegrityIssue) -> None:
        """Add an issue to the report."""
        if issue.severity == IssueSeverity.ERROR:
            self.errors.append(issue)
            self.is_healthy = False
        elif issue.severity == IssueSeverity.WARNING:
            self.warnings.append(issue)
        else:
            self.info.append(issue)

        self.issues_found += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "checked_at": self.checked_at.isoformat(),
            "is_healthy": self.is_healthy,
            "summary": {
                "total_managers": self.total_managers,
                "total_edges": self.total_edges,
                "issues_found": self.issues_found,
                "errors": len(self.errors),
                "warnings": len(self.warnings),
                "info": len(self.info),
            },
            "statistics": {
                "cycles": self.cycles,
                "dangling_references": self.dangling_references,
            },
            "duration_seconds": round(self.duration_seconds, 2),
            "issues": {
                "errors": [e.to_dict() for e in self.errors],
                "warnings": [w.to_dict() for w in self.warnings],
                "info": [i.to_dict() for i in self.info],
            },
        }


class HierarchyIntegrityChecker:
    """
    Checks the reports-to hierarchy without modifying it.

    Usage:
        ```python
        checker = HierarchyIntegrityChecker(store)
        report = await checker.check_all()

        if not report.is_healthy:
            for error in report.errors:
                print(f"  - {error.description}")
        ```
    """

    def __init__(self, store: ManagerStore) -> None:
        self._loader = GraphLoader(store)

    async def check_all(self) -> IntegrityReport:
        """
        Load the hierarchy and check it.

        Raises:
            StoreReadError: If the store cannot be read
        """
        start_time = datetime.now(timezone.utc)
        logger.info("Starting hierarchy integrity check")

        graph = await self._loader.load_graph()
        report = self.check_graph(graph)
        report.checked_at = start_time
        report.duration_seconds = (datetime.now(timezone.utc) - start_time).total_seconds()

        logger.info(
            "Integrity check completed",
            is_healthy=report.is_healthy,
            cycles=report.cycles,
            dangling_references=report.dangling_references,
            duration_s=round(report.duration_seconds, 2),
        )
        return report

    def check_graph(self, graph: HierarchyGraph) -> IntegrityReport:
        """Check an already loaded hierarchy."""
        report = IntegrityReport(
            total_managers=len(graph.names),
            total_edges=graph.edge_count,
        )
        self._check_cycles(graph, report)
        self._check_dangling_references(graph, report)
        return report

    def _check_cycles(self, graph: HierarchyGraph, report: IntegrityReport) -> None:
        cycles = find_all_cycles(graph.parent)
        report.cycles = len(cycles)

        for cycle in cycles:
            names = graph.display_path(cycle)
            if len(cycle) == 1:
                report.add_issue(IntegrityIssue(
                    issue_type=IssueType.SELF_REFERENCE,
                    severity=IssueSeverity.ERROR,
                    description=f"Manager '{names[0]}' reports to themselves",
                    node_id=cycle[0],
                    details={"cycle": cycle},
                ))
            else:
                report.add_issue(IntegrityIssue(
                    issue_type=IssueType.CYCLE,
                    severity=IssueSeverity.ERROR,
                    description="Reporting cycle: " + " → ".join(names) + " → ...",
                    node_id=cycle[0],
                    details={"cycle": cycle, "cycle_names": names},
                ))

    def _check_dangling_references(self, graph: HierarchyGraph, report: IntegrityReport) -> None:
        # Tolerated: the chain simply ends there
        dangling = graph.dangling_references()
        report.dangling_references = len(dangling)

        for uid, target in dangling.items():
            report.add_issue(IntegrityIssue(
                issue_type=IssueType.DANGLING_REFERENCE,
                severity=IssueSeverity.INFO,
                description=f"Manager '{graph.display_name(uid)}' reports to unknown manager {target}",
                node_id=uid,
                details={"reports_to": target},
            ))
