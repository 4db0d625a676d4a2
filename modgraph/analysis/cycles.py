"""Circular edge detection.

``peel`` removes every node that can be reached by repeatedly stripping
in-degree-0 nodes, then every remaining node reachable by stripping
out-degree-0 nodes. Edges that survive both passes sit on some cycle.
This is an approximation: chains squeezed between two cycles survive too.

``scc`` is exact: an edge is circular iff both ends belong to the same
strongly connected component (or the edge is a self-loop).
"""

from __future__ import annotations

from collections import deque

from modgraph.analysis.registry import Adjacency, Degree
from modgraph.models import CycleMode


def peel(adjacency: dict[str, Adjacency], degrees: dict[str, Degree]) -> dict[str, Adjacency]:
    """Strip acyclic nodes from both ends. Mutates and returns the given copies."""
    queue = deque(node_id for node_id, d in degrees.items() if d.in_degree == 0)
    while queue:
        node_id = queue.popleft()
        for target in adjacency[node_id].out_nodes:
            degree = degrees[target]
            degree.in_degree -= 1
            if degree.in_degree == 0:
                queue.append(target)
            adjacency[target].in_nodes.discard(node_id)
        del adjacency[node_id]
        del degrees[node_id]

    # seeded from what the forward pass left behind
    queue = deque(node_id for node_id, d in degrees.items() if d.out_degree == 0)
    while queue:
        node_id = queue.popleft()
        for source in adjacency[node_id].in_nodes:
            degree = degrees[source]
            degree.out_degree -= 1
            if degree.out_degree == 0:
                queue.append(source)
            adjacency[source].out_nodes.discard(node_id)
        del adjacency[node_id]
        del degrees[node_id]

    return adjacency


def strongly_connected_components(adjacency: dict[str, Adjacency]) -> list[set[str]]:
    """Iterative Tarjan."""
    index: dict[str, int] = {}
    low: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    components: list[set[str]] = []
    counter = 0

    for start in adjacency:
        if start in index:
            continue
        index[start] = low[start] = counter
        counter += 1
        stack.append(start)
        on_stack.add(start)
        work = [(start, iter(adjacency[start].out_nodes))]

        while work:
            node_id, neighbors = work[-1]
            descended = False
            for nxt in neighbors:
                if nxt not in index:
                    index[nxt] = low[nxt] = counter
                    counter += 1
                    stack.append(nxt)
                    on_stack.add(nxt)
                    work.append((nxt, iter(adjacency[nxt].out_nodes)))
                    descended = True
                    break
                if nxt in on_stack:
                    low[node_id] = min(low[node_id], index[nxt])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node_id])
            if low[node_id] == index[node_id]:
                component: set[str] = set()
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.add(member)
                    if member == node_id:
                        break
                components.append(component)

    return components


def find_circular_edges(
    adjacency: dict[str, Adjacency],
    degrees: dict[str, Degree],
    mode: CycleMode = CycleMode.PEEL,
) -> set[tuple[str, str]]:
    """Return the (source, target) pairs considered circular.

    *adjacency* and *degrees* must be copies; the peel consumes them.
    """
    if mode is CycleMode.SCC:
        component_of: dict[str, int] = {}
        for i, component in enumerate(strongly_connected_components(adjacency)):
            for node_id in component:
                component_of[node_id] = i
        return {
            (source, target)
            for source, adj in adjacency.items()
            for target in adj.out_nodes
            # distinct endpoints sharing a component imply a component of size >= 2
            if source == target or component_of[source] == component_of[target]
        }

    remaining = peel(adjacency, degrees)
    return {
        (source, target)
        for source, adj in remaining.items()
        for target in adj.out_nodes
    }
