"""Tests for circular edge detection on hand-built adjacency tables."""

from modgraph.analysis.cycles import find_circular_edges, peel, strongly_connected_components
from modgraph.analysis.registry import Adjacency, Degree
from modgraph.models import CycleMode


def _tables(edges, extra_nodes=()):
    adjacency = {}
    degrees = {}
    for node_id in [n for e in edges for n in e] + list(extra_nodes):
        adjacency.setdefault(node_id, Adjacency())
        degrees.setdefault(node_id, Degree())
    for source, target in edges:
        adjacency[source].out_nodes.add(target)
        adjacency[target].in_nodes.add(source)
        degrees[source].out_degree += 1
        degrees[target].in_degree += 1
    return adjacency, degrees


def _circular(edges, mode=CycleMode.PEEL):
    adjacency, degrees = _tables(edges)
    return find_circular_edges(adjacency, degrees, mode)


TRIANGLE = [("a", "b"), ("b", "c"), ("c", "a")]
# two 2-cycles joined by a one-way bridge b -> c
BRIDGED = [("a", "b"), ("b", "a"), ("b", "c"), ("c", "d"), ("d", "c")]


class TestPeel:
    def test_three_node_cycle(self):
        assert _circular(TRIANGLE) == set(TRIANGLE)

    def test_acyclic_chain(self):
        assert _circular([("a", "b"), ("b", "c")]) == set()

    def test_empty(self):
        assert _circular([]) == set()

    def test_tails_removed(self):
        edges = TRIANGLE + [("root", "a"), ("c", "leaf")]
        assert _circular(edges) == set(TRIANGLE)

    def test_self_loop(self):
        assert _circular([("a", "a"), ("root", "a")]) == {("a", "a")}

    def test_bridge_between_cycles_survives(self):
        # the peel cannot strip b -> c: neither end ever reaches degree 0
        assert ("b", "c") in _circular(BRIDGED)

    def test_backward_pass_uses_forward_remainder(self):
        adjacency, degrees = _tables(TRIANGLE + [("root", "a"), ("c", "leaf")])
        remaining = peel(adjacency, degrees)
        assert set(remaining) == {"a", "b", "c"}
        assert remaining["c"].out_nodes == {"a"}
        assert remaining["a"].in_nodes == {"c"}

    def test_copies_consumed_not_originals(self):
        adjacency, degrees = _tables([("a", "b")])
        copy_adj = {k: v.copy() for k, v in adjacency.items()}
        copy_deg = {k: Degree(v.in_degree, v.out_degree) for k, v in degrees.items()}
        find_circular_edges(copy_adj, copy_deg)
        assert adjacency["a"].out_nodes == {"b"}
        assert degrees["b"].in_degree == 1


class TestScc:
    def test_components(self):
        adjacency, _ = _tables(BRIDGED, extra_nodes=["lonely"])
        components = strongly_connected_components(adjacency)
        assert sorted(sorted(c) for c in components) == [["a", "b"], ["c", "d"], ["lonely"]]

    def test_three_node_cycle(self):
        assert _circular(TRIANGLE, CycleMode.SCC) == set(TRIANGLE)

    def test_acyclic_chain(self):
        assert _circular([("a", "b"), ("b", "c")], CycleMode.SCC) == set()

    def test_bridge_not_circular(self):
        assert _circular(BRIDGED, CycleMode.SCC) == {
            ("a", "b"), ("b", "a"), ("c", "d"), ("d", "c"),
        }

    def test_self_loop(self):
        assert _circular([("a", "a")], CycleMode.SCC) == {("a", "a")}

    def test_long_chain_no_recursion_limit(self):
        edges = [(f"n{i}", f"n{i + 1}") for i in range(5000)]
        assert _circular(edges, CycleMode.SCC) == set()
