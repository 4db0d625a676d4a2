"""Node registry: per-run resolution cache, adjacency index and degree table."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from modgraph.analysis.filesystem import declared_dependencies, load_manifest
from modgraph.analysis.graph_models import PackageNode, ResolvedPackage

logger = logging.getLogger(__name__)


@dataclass
class Adjacency:
    out_nodes: set[str] = field(default_factory=set)  # dependencies
    in_nodes: set[str] = field(default_factory=set)  # consumers

    def copy(self) -> Adjacency:
        return Adjacency(set(self.out_nodes), set(self.in_nodes))


@dataclass
class Degree:
    in_degree: int = 0
    out_degree: int = 0


class NodeRegistry:
    """Deduplicated table of packages discovered during one run.

    A registry is created per run and never shared between runs.
    """

    def __init__(self, include_dev_dependencies: bool = False):
        self.include_dev_dependencies = include_dev_dependencies
        self.nodes: dict[str, PackageNode] = {}
        self.adjacency: dict[str, Adjacency] = {}
        self.degrees: dict[str, Degree] = {}
        self.versions_by_name: dict[str, set[str]] = {}
        self._pending: dict[str, asyncio.Task] = {}  # directory -> manifest resolution
        self._resolved: dict[str, ResolvedPackage] = {}

    async def get_or_create_id(self, directory: Path) -> str | None:
        """Resolve *directory* to a ``name@version`` id, parsing its manifest at most once.

        Concurrent callers for the same directory share a single resolution task,
        so a directory can never yield two different ids.
        """
        key = str(directory)
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._resolve(directory))
            self._pending[key] = task
        resolved = await task
        return resolved.node.id if resolved else None

    async def _resolve(self, directory: Path) -> ResolvedPackage | None:
        manifest = await load_manifest(directory)
        if manifest is None:
            return None

        name = str(manifest.get("name", ""))
        version = str(manifest.get("version", ""))
        node = PackageNode(
            id=f"{name}@{version}",
            name=name,
            version=version,
            description=str(manifest.get("description") or ""),
            directory=str(directory),
        )
        resolved = ResolvedPackage(
            node=node,
            dependencies=declared_dependencies(manifest, self.include_dev_dependencies),
        )
        self._resolved[str(directory)] = resolved
        logger.debug("Parsed %s at %s", node.id, directory)
        return resolved

    def resolved(self, directory: Path) -> ResolvedPackage | None:
        return self._resolved.get(str(directory))

    def register(self, node_id: str, directory: Path, depth: int) -> None:
        """Add the node parsed from *directory*; the first registration of an id wins."""
        if node_id in self.nodes:
            return
        resolved = self._resolved.get(str(directory))
        if resolved is None:
            return

        node = resolved.node
        node.depth = depth
        self.nodes[node_id] = node
        self.versions_by_name.setdefault(node.name, set()).add(node_id)
        self.degrees[node_id] = Degree()
        self.adjacency[node_id] = Adjacency()

    def add_edge(self, source_id: str, target_id: str) -> bool:
        """Record ``source -> target``. Returns False if the edge already existed."""
        source = self.adjacency[source_id]
        if target_id in source.out_nodes:
            return False
        source.out_nodes.add(target_id)
        self.adjacency[target_id].in_nodes.add(source_id)
        self.degrees[source_id].out_degree += 1
        self.degrees[target_id].in_degree += 1
        return True

    def mark_multiple_versions(self) -> None:
        for ids in self.versions_by_name.values():
            if len(ids) < 2:
                continue
            for node_id in ids:
                self.nodes[node_id].is_multiple_versions = True

    def copy_adjacency(self) -> dict[str, Adjacency]:
        return {node_id: adj.copy() for node_id, adj in self.adjacency.items()}

    def copy_degrees(self) -> dict[str, Degree]:
        return {
            node_id: Degree(d.in_degree, d.out_degree)
            for node_id, d in self.degrees.items()
        }
