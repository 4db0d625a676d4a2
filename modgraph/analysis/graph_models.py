"""Data models for the package dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PackageNode:
    id: str  # name@version
    name: str
    version: str
    description: str
    directory: str
    depth: int = -1  # remaining depth budget at first registration
    is_multiple_versions: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "dir": self.directory,
            "depth": self.depth,
            "isMultipleVersions": self.is_multiple_versions,
        }


@dataclass
class DependencyEdge:
    source_id: str
    target_id: str
    is_circular: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source_id,
            "sourceId": self.source_id,
            "target": self.target_id,
            "targetId": self.target_id,
            "isCircular": self.is_circular,
        }


@dataclass
class ResolvedPackage:
    """A parsed manifest cached per directory."""
    node: PackageNode
    dependencies: dict[str, str] = field(default_factory=dict)  # name -> range


@dataclass
class GraphResult:
    nodes: list[PackageNode] = field(default_factory=list)
    edges: list[DependencyEdge] = field(default_factory=list)

    @property
    def circular_edges(self) -> list[DependencyEdge]:
        return [e for e in self.edges if e.is_circular]

    @property
    def duplicated_names(self) -> list[str]:
        return sorted({n.name for n in self.nodes if n.is_multiple_versions})

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodesList": [n.to_dict() for n in self.nodes],
            "edgesList": [e.to_dict() for e in self.edges],
        }
