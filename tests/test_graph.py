"""Tests for graph.py - data model, dict codec, validation and the DiGraph adapter."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest
from pydantic import ValidationError

from diagram_core.errors import (
    DanglingEdgeError,
    DuplicateNodeError,
    GraphValidationError,
    ReferentialIntegrityError,
)
from diagram_core.graph import (
    DEFAULT_NODE_SIZE,
    Box,
    Edge,
    Graph,
    HandleSide,
    Node,
    Point,
    Size,
    to_digraph,
    validate_references,
)

# ─── Helpers ──────────────────────────────────────────────────────────────────


def node_dict(node_id: str, x: float = 0, y: float = 0, **extra) -> dict:
    return {"id": node_id, "label": node_id, "position": {"x": x, "y": y}, **extra}


# ─── Geometry Record Tests ────────────────────────────────────────────────────


class TestBox:
    def test_sides(self):
        """Box exposes left/right/top/bottom from its top-left corner and size."""
        box = Box(10, 20, 100, 50)
        assert (box.left, box.right, box.top, box.bottom) == (10, 110, 20, 70)
        assert box.center == Point(60, 45)

    def test_padded_grows_every_side(self):
        """padded(20) moves the corner out by 20 and grows size by 40."""
        assert Box(0, 0, 100, 50).padded(20) == Box(-20, -20, 140, 90)

    def test_contains_is_inclusive(self):
        """Points on the border count as inside."""
        box = Box(0, 0, 100, 50)
        assert box.contains(Point(100, 50))
        assert box.contains(Point(0, 0))
        assert not box.contains(Point(100.01, 25))


class TestHandleSide:
    def test_parse_string(self):
        assert HandleSide.parse("Right") is HandleSide.RIGHT

    def test_parse_passthrough(self):
        assert HandleSide.parse(HandleSide.TOP) is HandleSide.TOP

    def test_parse_unknown(self):
        with pytest.raises(GraphValidationError):
            HandleSide.parse("diagonal")


# ─── Node / Edge Tests ────────────────────────────────────────────────────────


class TestNode:
    def test_default_size_when_absent(self):
        """A node without an explicit size uses the default box."""
        node = Node(id="A", position=Point(5, 5))
        assert node.effective_size() == DEFAULT_NODE_SIZE
        assert node.box() == Box(5, 5, 192, 96)

    def test_moved_to_returns_new_record(self):
        """moved_to leaves the original node untouched."""
        node = Node(id="A", position=Point(1, 2), size=Size(10, 10), label="a")
        moved = node.moved_to(30, 40)
        assert moved.position == Point(30, 40)
        assert moved.size == node.size and moved.label == "a"
        assert node.position == Point(1, 2)

    def test_from_dict(self):
        node = Node.from_dict(node_dict("A", 3, 4, size={"width": 80, "height": 40}, markup="**hi**"))
        assert node == Node(id="A", position=Point(3, 4), size=Size(80, 40), label="A", markup="**hi**")

    def test_non_finite_position_rejected(self):
        with pytest.raises(GraphValidationError):
            Node.from_dict(node_dict("A", math.inf, 0))

    def test_missing_position_rejected(self):
        with pytest.raises(GraphValidationError):
            Node.from_dict({"id": "A"})

    def test_non_positive_size_rejected(self):
        with pytest.raises(GraphValidationError):
            Node.from_dict(node_dict("A", size={"width": 0, "height": 10}))

    def test_null_label_becomes_empty(self):
        """A JSON null label reads as an empty label, not the string "None"."""
        assert Node.from_dict(node_dict("A", label=None)).label == ""

    def test_non_string_label_rejected(self):
        with pytest.raises(GraphValidationError):
            Node.from_dict(node_dict("A", label=42))

    def test_schema_error_is_chained(self):
        """The pydantic error that caused a rejection stays reachable."""
        with pytest.raises(GraphValidationError) as exc_info:
            Node.from_dict({"id": "A", "position": {"x": "left", "y": 0}})
        assert isinstance(exc_info.value.__cause__, ValidationError)


class TestEdge:
    def test_directed_defaults_true(self):
        edge = Edge.from_dict({"id": "E1", "source": "A", "target": "B"})
        assert edge.directed is True
        assert edge.source_handle is None and edge.target_position is None

    def test_anchor_metadata(self):
        """sourceHandle and targetPosition are lifted out of metadata; other keys survive."""
        edge = Edge.from_dict(
            {
                "id": "E1",
                "source": "A",
                "target": "B",
                "metadata": {"sourceHandle": "bottom", "targetPosition": {"x": 1, "y": 2}, "weight": 3},
            }
        )
        assert edge.source_handle is HandleSide.BOTTOM
        assert edge.target_position == Point(1, 2)
        assert edge.extra_metadata == {"weight": 3}
        assert edge.to_dict()["metadata"] == {"weight": 3, "sourceHandle": "bottom", "targetPosition": {"x": 1, "y": 2}}

    def test_no_metadata_key_when_empty(self):
        assert "metadata" not in Edge(id="E1", source="A", target="B").to_dict()

    def test_missing_endpoint_rejected(self):
        with pytest.raises(GraphValidationError):
            Edge.from_dict({"id": "E1", "source": "A"})

    def test_bad_handle_rejected(self):
        with pytest.raises(GraphValidationError):
            Edge.from_dict({"id": "E1", "source": "A", "target": "B", "metadata": {"sourceHandle": "up"}})

    def test_handle_name_is_case_insensitive(self):
        edge = Edge.from_dict({"id": "E1", "source": "A", "target": "B", "metadata": {"sourceHandle": "Left"}})
        assert edge.source_handle is HandleSide.LEFT

    def test_non_string_label_rejected(self):
        with pytest.raises(GraphValidationError):
            Edge.from_dict({"id": "E1", "source": "A", "target": "B", "label": ["x"]})

    def test_hashable(self):
        """Frozen edges hash, metadata included or not."""
        plain = Edge(id="E1", source="A", target="B")
        tagged = Edge(id="E1", source="A", target="B", extra_metadata={"color": "red"})
        assert hash(plain) == hash(Edge(id="E1", source="A", target="B"))
        assert len({plain, tagged}) == 2

    def test_metadata_is_read_only_copy(self):
        """The record neither shares nor exposes a mutable metadata dict."""
        source = {"color": "red"}
        edge = Edge(id="E1", source="A", target="B", extra_metadata=source)
        source["color"] = "blue"
        assert edge.extra_metadata["color"] == "red"
        with pytest.raises(TypeError):
            edge.extra_metadata["color"] = "green"  # type: ignore[index]

    def test_replace_does_not_share_metadata(self):
        edge = Edge(id="E1", source="A", target="B", extra_metadata={"color": "red"})
        copy = replace(edge, label="moved")
        assert copy.extra_metadata == {"color": "red"}
        assert copy.extra_metadata is not edge.extra_metadata


# ─── Graph Tests ──────────────────────────────────────────────────────────────


class TestGraph:
    def test_from_dict_and_back(self):
        """A host payload survives from_dict → to_dict."""
        payload = {
            "nodes": [node_dict("A", 0, 0), node_dict("B", 10, 20)],
            "edges": [{"id": "E1", "source": "A", "target": "B", "directed": False, "label": "uses"}],
            "metadata": {"title": "demo"},
        }
        assert Graph.from_dict(payload).to_dict() == payload

    def test_duplicate_ids_rejected(self):
        with pytest.raises(DuplicateNodeError) as exc_info:
            Graph.from_dict({"nodes": [node_dict("A"), node_dict("A")], "edges": []})
        assert exc_info.value.node_id == "A"

    def test_node_lookup(self):
        g = Graph.from_dict({"nodes": [node_dict("A"), node_dict("B", 5, 5)]})
        assert g.node("B").position == Point(5, 5)
        with pytest.raises(KeyError):
            g.node("Z")

    def test_with_nodes_returns_copy(self):
        g = Graph.from_dict({"nodes": [node_dict("A")]})
        moved = g.with_nodes([g.node("A").moved_to(9, 9)])
        assert moved.node("A").position == Point(9, 9)
        assert g.node("A").position == Point(0, 0)

    def test_null_sections_are_empty(self):
        g = Graph.from_dict({"nodes": [node_dict("A")], "edges": [], "metadata": None})
        assert g.metadata == {}
        assert g.to_dict() == {"nodes": [node_dict("A")], "edges": []}

    def test_hashable_with_read_only_metadata(self):
        g = Graph.from_dict({"nodes": [node_dict("A")], "metadata": {"title": "demo"}})
        assert hash(g) == hash(Graph.from_dict({"nodes": [node_dict("A")], "metadata": {"title": "other"}}))
        with pytest.raises(TypeError):
            g.metadata["title"] = "changed"  # type: ignore[index]
        assert g.to_dict()["metadata"] == {"title": "demo"}

    def test_validate_dangling(self):
        g = Graph.from_dict(
            {"nodes": [node_dict("A")], "edges": [{"id": "E1", "source": "A", "target": "ghost"}]}
        )
        with pytest.raises(DanglingEdgeError):
            g.validate()


class TestReferences:
    def test_dangling_edge_names_edge_and_node(self):
        """The error carries the offending edge id and missing node id."""
        nodes = [Node(id="A", position=Point(0, 0))]
        edges = [Edge(id="E7", source="Z", target="A")]
        with pytest.raises(DanglingEdgeError) as exc_info:
            validate_references(nodes, edges)
        assert exc_info.value.edge_id == "E7"
        assert exc_info.value.node_id == "Z"
        assert isinstance(exc_info.value, ReferentialIntegrityError)

    def test_valid_references_pass(self):
        nodes = [Node(id="A", position=Point(0, 0)), Node(id="B", position=Point(0, 0))]
        validate_references(nodes, [Edge(id="E1", source="A", target="B")])


class TestToDigraph:
    def test_node_order_and_data(self):
        """Nodes are keyed by id in input order and carry their record."""
        nodes = [Node(id=i, position=Point(0, 0)) for i in ("C", "A", "B")]
        g = to_digraph(nodes, [Edge(id="E1", source="C", target="A")])
        assert list(g.nodes) == ["C", "A", "B"]
        assert g.nodes["A"]["data"] is nodes[1]
        assert g.has_edge("C", "A")

    def test_parallel_edges_collapse(self):
        """Parallel edges become one DiGraph edge holding the first record."""
        nodes = [Node(id=i, position=Point(0, 0)) for i in ("A", "B")]
        first = Edge(id="E1", source="A", target="B")
        g = to_digraph(nodes, [first, Edge(id="E2", source="A", target="B")])
        assert g.number_of_edges() == 1
        assert g.edges["A", "B"]["data"] is first

    def test_dangling_reference_fails_fast(self):
        with pytest.raises(DanglingEdgeError):
            to_digraph([Node(id="A", position=Point(0, 0))], [Edge(id="E1", source="A", target="B")])
