"""Dependency graph builder: walks node_modules breadth-first, resolves installed versions, marks cycles."""

from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from modgraph.analysis.cycles import find_circular_edges
from modgraph.analysis.graph_models import DependencyEdge, GraphResult
from modgraph.analysis.locator import DependencyLocator
from modgraph.analysis.registry import NodeRegistry
from modgraph.models import DEFAULT_DEPTH, CycleMode

logger = logging.getLogger(__name__)


@dataclass
class _Run:
    """State owned by a single build; discarded when the build returns."""
    root_dir: Path
    registry: NodeRegistry
    locator: DependencyLocator
    queue: deque[tuple[Path, int]] = field(default_factory=deque)
    expanded: set[str] = field(default_factory=set)


class DependencyGraphBuilder:
    """Build a package graph from an installed node_modules tree."""

    def __init__(self, cycle_mode: CycleMode = CycleMode.PEEL):
        self.cycle_mode = cycle_mode

    async def build(
        self,
        root_dir: Path,
        depth: int = DEFAULT_DEPTH,
        include_dev_dependencies: bool = False,
    ) -> GraphResult:
        root_dir = Path(os.path.abspath(root_dir))
        registry = NodeRegistry(include_dev_dependencies=include_dev_dependencies)
        run = _Run(
            root_dir=root_dir,
            registry=registry,
            locator=DependencyLocator(registry, root_dir),
        )

        run.queue.append((root_dir, depth))
        while run.queue:
            directory, budget = run.queue.popleft()
            await self._visit(run, directory, budget)

        registry.mark_multiple_versions()
        result = GraphResult(
            nodes=list(registry.nodes.values()),
            edges=self._annotate_edges(registry),
        )
        logger.info("nodes: %d  edges: %d", len(result.nodes), len(result.edges))
        return result

    async def _visit(self, run: _Run, directory: Path, depth: int) -> None:
        if depth < 1:
            return

        node_id = await run.registry.get_or_create_id(directory)
        if node_id is None:
            logger.debug("No package at %s", directory)
            return

        # non-root nodes are registered when an edge first reaches them
        if directory == run.root_dir:
            run.registry.register(node_id, directory, depth)

        if depth - 1 < 1 or node_id in run.expanded:
            return

        child_depth = depth - 1
        dependencies = run.registry.resolved(directory).dependencies
        for found in await run.locator.locate_all(dependencies, directory):
            run.registry.register(found.target_id, found.target_dir, child_depth)
            run.queue.append((found.target_dir, child_depth))
            run.registry.add_edge(node_id, found.target_id)

        run.expanded.add(node_id)

    def _annotate_edges(self, registry: NodeRegistry) -> list[DependencyEdge]:
        circular = find_circular_edges(
            registry.copy_adjacency(), registry.copy_degrees(), self.cycle_mode,
        )
        return [
            DependencyEdge(
                source_id=source,
                target_id=target,
                is_circular=(source, target) in circular,
            )
            for source, adj in registry.adjacency.items()
            for target in adj.out_nodes
        ]


async def analyze(
    root_dir: Path,
    depth: int = DEFAULT_DEPTH,
    include_dev_dependencies: bool = False,
    cycle_mode: CycleMode = CycleMode.PEEL,
) -> GraphResult:
    """Build the dependency graph rooted at *root_dir*.

    *depth* is the traversal budget; callers clamp it to [1, 64] beforehand.
    """
    builder = DependencyGraphBuilder(cycle_mode=cycle_mode)
    return await builder.build(root_dir, depth, include_dev_dependencies)
