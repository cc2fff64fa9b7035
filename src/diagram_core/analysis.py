"""Graph structure analysis - cycle detection, roots and BFS levels.

These helpers only decide which layout algorithm applies and how a layered
layout ranks its nodes. They are not a general graph validity check.

All functions accept either a ``Graph`` or a networkx ``DiGraph`` built by
``to_digraph`` (node ids as keys, inserted in input order).
"""

from __future__ import annotations

import logging
from collections import deque

import networkx as nx

from diagram_core.graph import Graph

logger = logging.getLogger(__name__)


def as_digraph(graph: Graph | nx.DiGraph) -> nx.DiGraph:
    if isinstance(graph, nx.DiGraph):
        return graph
    return graph.to_digraph()


# ─── Cycle detection ──────────────────────────────────────────────────────────


def has_cycle(graph: Graph | nx.DiGraph) -> bool:
    """Return True if any directed cycle is reachable from any node.

    Depth-first search that tracks the nodes currently on the DFS stack
    separately from nodes that are fully explored. Reaching an on-stack node
    means we followed a back-edge, i.e. a cycle (self-loops included).

    The walk is iterative (explicit stack of successor iterators) so long
    chains do not run into the interpreter recursion limit.
    """
    g = as_digraph(graph)
    visited: set[str] = set()
    on_stack: set[str] = set()

    for start in g.nodes:
        if start in visited:
            continue
        visited.add(start)
        on_stack.add(start)
        stack = [(start, iter(g.successors(start)))]

        while stack:
            node_id, successors = stack[-1]
            advanced = False
            for succ in successors:
                if succ in on_stack:
                    return True
                if succ not in visited:
                    visited.add(succ)
                    on_stack.add(succ)
                    stack.append((succ, iter(g.successors(succ))))
                    advanced = True
                    break
            if not advanced:
                on_stack.discard(node_id)
                stack.pop()

    return False


def is_hierarchical(graph: Graph | nx.DiGraph) -> bool:
    """True when the graph has edges and no cycles, i.e. it can be layered.

    An edgeless graph has nothing to layer and reports False.
    """
    g = as_digraph(graph)
    if g.number_of_edges() == 0:
        return False
    return not has_cycle(g)


# ─── Roots and levels ─────────────────────────────────────────────────────────


def find_roots(graph: Graph | nx.DiGraph) -> list[str]:
    """Nodes with zero in-degree, in input order.

    If every node has an incoming edge (all-cyclic input) the first node is
    used as the sole root. An empty graph has no roots.
    """
    g = as_digraph(graph)
    roots = [node_id for node_id in g.nodes if g.in_degree(node_id) == 0]
    if not roots and g.number_of_nodes() > 0:
        fallback = next(iter(g.nodes))
        logger.warning("No zero in-degree node found; using %r as the root", fallback)
        roots = [fallback]
    return roots


def assign_levels(graph: Graph | nx.DiGraph) -> dict[str, int]:
    """Assign a BFS depth to every node.

    Multi-source BFS seeded with all roots at level 0; a child gets its
    parent's level + 1 and the first visit wins when several parents reach
    it. Nodes the BFS never reaches are placed at level 0, which may overlap
    them with the roots.
    """
    g = as_digraph(graph)
    levels: dict[str, int] = {}
    queue: deque[str] = deque()

    for root in find_roots(g):
        levels[root] = 0
        queue.append(root)

    while queue:
        node_id = queue.popleft()
        for child in g.successors(node_id):
            if child not in levels:
                levels[child] = levels[node_id] + 1
                queue.append(child)

    unvisited = [node_id for node_id in g.nodes if node_id not in levels]
    if unvisited:
        logger.warning("%d node(s) unreachable from the roots placed at level 0: %s", len(unvisited), unvisited)
        for node_id in unvisited:
            levels[node_id] = 0

    # Preserve input order in the returned mapping.
    return {node_id: levels[node_id] for node_id in g.nodes}
