"""Dependency graph construction over an installed node_modules tree."""

from modgraph.analysis.dependency_graph import DependencyGraphBuilder, analyze
from modgraph.analysis.graph_models import DependencyEdge, GraphResult, PackageNode

__all__ = [
    "DependencyGraphBuilder",
    "DependencyEdge",
    "GraphResult",
    "PackageNode",
    "analyze",
]
