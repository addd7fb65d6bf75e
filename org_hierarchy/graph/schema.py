"""
Hierarchy Schema Models.

Defines the manager record as stored and the in-memory parent mapping
projected from it.
"""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ManagerNode(BaseModel):
    """A manager record in the store."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str = Field(..., description="Unique, stable identifier")
    display_name: str | None = Field(
        default=None, alias="displayName", description="Human-readable name"
    )
    reports_to: str | None = Field(
        default=None, alias="reportsTo", description="uid of this manager's manager"
    )

    @field_validator("reports_to", mode="before")
    @classmethod
    def _blank_is_root(cls, v: object) -> object:
        # Empty references are stored by some writers instead of deleting the field
        if v == "":
            return None
        return v

    @property
    def is_root(self) -> bool:
        return self.reports_to is None


@dataclass
class HierarchyGraph:
    """
    Parent mapping of the reports-to hierarchy.

    ``parent`` holds one entry per manager with a reportsTo reference
    (child uid -> parent uid). A parent uid without an entry of its own
    ends the chain. ``names`` maps every loaded uid to its display name.
    """

    parent: dict[str, str] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_managers(cls, managers: list[ManagerNode]) -> "HierarchyGraph":
        graph = cls()
        for manager in managers:
            graph.names[manager.uid] = manager.display_name or manager.uid
            if manager.reports_to:
                graph.parent[manager.uid] = manager.reports_to
        return graph

    @property
    def edge_count(self) -> int:
        return len(self.parent)

    def display_name(self, uid: str) -> str:
        """Display name for a uid, falling back to the uid itself."""
        return self.names.get(uid) or uid

    def display_path(self, uids: list[str]) -> list[str]:
        return [self.display_name(uid) for uid in uids]

    def dangling_references(self) -> dict[str, str]:
        """Edges whose target uid is not a loaded manager."""
        return {
            child: target
            for child, target in self.parent.items()
            if target not in self.names
        }
