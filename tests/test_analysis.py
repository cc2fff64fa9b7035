"""Tests for analysis.py - cycle detection, hierarchy check, roots and BFS levels."""

from __future__ import annotations

import networkx as nx

from diagram_core.analysis import as_digraph, assign_levels, find_roots, has_cycle, is_hierarchical
from diagram_core.graph import Edge, Graph, Node, Point

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(*edges: tuple[str, str], extra_nodes: tuple[str, ...] = ()) -> Graph:
    """Build a Graph from (src, tgt) pairs; nodes appear in first-mention order."""
    ids: list[str] = []
    for src, tgt in edges:
        for node_id in (src, tgt):
            if node_id not in ids:
                ids.append(node_id)
    for node_id in extra_nodes:
        if node_id not in ids:
            ids.append(node_id)
    nodes = [Node(id=node_id, position=Point(0, 0)) for node_id in ids]
    edge_list = [Edge(id=f"E{i}", source=src, target=tgt) for i, (src, tgt) in enumerate(edges)]
    return Graph(nodes=nodes, edges=edge_list)


# ─── Cycle Detection Tests ────────────────────────────────────────────────────


class TestHasCycle:
    def test_three_cycle(self):
        """A → B → C → A reports a cycle."""
        assert has_cycle(make_graph(("A", "B"), ("B", "C"), ("C", "A")))

    def test_tree_has_no_cycle(self):
        """A → B, A → C, B → D reports no cycle."""
        assert not has_cycle(make_graph(("A", "B"), ("A", "C"), ("B", "D")))

    def test_diamond_is_not_a_cycle(self):
        """Two paths reaching the same node are not a cycle (visited ≠ on-stack)."""
        assert not has_cycle(make_graph(("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")))

    def test_self_loop(self):
        """A → A is a cycle."""
        assert has_cycle(make_graph(("A", "A")))

    def test_cycle_in_later_component(self):
        """A cycle unreachable from the first node is still found."""
        assert has_cycle(make_graph(("A", "B"), ("C", "D"), ("D", "C")))

    def test_empty_graph(self):
        """No nodes, no cycle."""
        assert not has_cycle(Graph())

    def test_deep_chain_does_not_recurse(self):
        """A 5000-node chain is walked without hitting the recursion limit."""
        chain = [(f"n{i}", f"n{i + 1}") for i in range(5000)]
        assert not has_cycle(make_graph(*chain))

    def test_accepts_digraph(self):
        """A prebuilt networkx DiGraph is used as-is."""
        g: nx.DiGraph = nx.DiGraph()
        g.add_edge("A", "B")
        g.add_edge("B", "A")
        assert as_digraph(g) is g
        assert has_cycle(g)


class TestIsHierarchical:
    def test_edgeless_graph_is_not_hierarchical(self):
        """Nothing to layer without edges."""
        assert not is_hierarchical(make_graph(extra_nodes=("A", "B")))

    def test_dag_is_hierarchical(self):
        """A → B → C can be layered."""
        assert is_hierarchical(make_graph(("A", "B"), ("B", "C")))

    def test_cyclic_graph_is_not_hierarchical(self):
        """A → B → A cannot be layered."""
        assert not is_hierarchical(make_graph(("A", "B"), ("B", "A")))


# ─── Roots and Levels Tests ───────────────────────────────────────────────────


class TestFindRoots:
    def test_zero_in_degree_nodes_in_input_order(self):
        """Every node without incoming edges is a root, in input order."""
        g = make_graph(("B", "C"), ("A", "C"))
        assert find_roots(g) == ["B", "A"]

    def test_isolated_node_is_a_root(self):
        """A node with no edges at all has zero in-degree."""
        g = make_graph(("A", "B"), extra_nodes=("Z",))
        assert find_roots(g) == ["A", "Z"]

    def test_rootless_falls_back_to_first_node(self):
        """All-cyclic input uses the first node as the only root."""
        assert find_roots(make_graph(("A", "B"), ("B", "A"))) == ["A"]

    def test_empty_graph_has_no_roots(self):
        assert find_roots(Graph()) == []


class TestAssignLevels:
    def test_chain_levels(self):
        """A → B → C gives levels 0, 1, 2."""
        levels = assign_levels(make_graph(("A", "B"), ("B", "C")))
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_first_visit_wins(self):
        """D is reached from B (level 1) first; the longer path via C does not push it down."""
        levels = assign_levels(make_graph(("A", "B"), ("A", "C"), ("C", "E"), ("B", "D"), ("E", "D")))
        assert levels["D"] == 2
        assert levels["E"] == 2

    def test_multi_source_bfs(self):
        """Every root starts on level 0 simultaneously."""
        levels = assign_levels(make_graph(("A", "C"), ("B", "C"), ("C", "D")))
        assert levels == {"A": 0, "C": 1, "B": 0, "D": 2}

    def test_unreachable_nodes_default_to_level_zero(self):
        """A cycle hanging off nothing is never reached from the root and sits on level 0."""
        levels = assign_levels(make_graph(("B", "C"), ("C", "B"), extra_nodes=("A",)))
        assert levels == {"B": 0, "C": 0, "A": 0}

    def test_rootless_cycle_uses_first_node(self):
        """A → B → C → A: A becomes the root, B and C follow."""
        levels = assign_levels(make_graph(("A", "B"), ("B", "C"), ("C", "A")))
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_preserves_input_order(self):
        """Returned mapping iterates in node input order."""
        levels = assign_levels(make_graph(("X", "Y"), extra_nodes=("W",)))
        assert list(levels) == ["X", "Y", "W"]
