"""Graph data model - nodes, edges and the geometry records they carry.

Records are immutable: layout and editing operations return new instances
via ``dataclasses.replace`` so callers keep the pre-change graph around.
Metadata mappings are stored as read-only copies for the same reason.

The dict codec mirrors the JSON shape the editor exchanges with its host
application (camelCase keys inside edge metadata) and is validated with
pydantic schema models.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, TypeVar

import networkx as nx
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, FiniteFloat, ValidationError

from diagram_core.errors import DanglingEdgeError, DuplicateNodeError, GraphValidationError

# ─── Geometry records ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Point:
    """A 2D point in canvas coordinates."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Point:
        schema = parse_schema(PointSchema, data, "point")
        return cls(schema.x, schema.y)


@dataclass(frozen=True)
class Size:
    """Width and height of a node box."""

    width: float
    height: float

    def to_dict(self) -> dict[str, float]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Size:
        schema = parse_schema(SizeSchema, data, "size")
        return cls(schema.width, schema.height)


# Fallback box used wherever a node carries no explicit size.
DEFAULT_NODE_SIZE = Size(192.0, 96.0)


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle anchored at its top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def padded(self, amount: float) -> Box:
        """Grow the box outward by ``amount`` on every side."""
        return Box(self.x - amount, self.y - amount, self.width + 2 * amount, self.height + 2 * amount)

    def contains(self, point: Point) -> bool:
        """Inclusive containment test (points on the border count)."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    @classmethod
    def from_position(cls, position: Point, size: Size) -> Box:
        return cls(position.x, position.y, size.width, size.height)


class HandleSide(Enum):
    """Side of a node box that a connection handle sits on."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @classmethod
    def parse(cls, value: HandleSide | str) -> HandleSide:
        if isinstance(value, HandleSide):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise GraphValidationError(f"Unknown handle side: {value!r}") from exc


# ─── Wire schema ──────────────────────────────────────────────────────────────
#
# The JSON shape exchanged with the host application. Records below convert
# to and from these models; pydantic does the type and range checking.

_Side = Annotated[HandleSide, BeforeValidator(HandleSide.parse)]
_Extent = Annotated[float, Field(gt=0, allow_inf_nan=False)]


class PointSchema(BaseModel):
    x: FiniteFloat
    y: FiniteFloat


class SizeSchema(BaseModel):
    width: _Extent
    height: _Extent


class NodeSchema(BaseModel):
    id: str
    position: PointSchema
    size: SizeSchema | None = None
    label: str | None = None
    markup: str | None = None


class EdgeMetadataSchema(BaseModel):
    """Edge metadata: manual anchors under camelCase keys, anything else kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    source_handle: _Side | None = Field(default=None, alias="sourceHandle")
    target_position: PointSchema | None = Field(default=None, alias="targetPosition")


class EdgeSchema(BaseModel):
    id: str
    source: str
    target: str
    directed: bool = True
    label: str | None = None
    markup: str | None = None
    metadata: EdgeMetadataSchema | None = None


class GraphSchema(BaseModel):
    nodes: list[NodeSchema] = Field(default_factory=list)
    edges: list[EdgeSchema] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


_SchemaT = TypeVar("_SchemaT", bound=BaseModel)


def parse_schema(schema: type[_SchemaT], data: Any, what: str) -> _SchemaT:
    """Validate ``data`` against ``schema``, reporting failures as GraphValidationError."""
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise GraphValidationError(f"Invalid {what}: {exc}") from exc


def _frozen_mapping(data: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


# ─── Nodes and edges ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Node:
    """A diagram node.

    Attributes:
        id: Unique id within a graph.
        position: Top-left corner in canvas coordinates.
        size: Explicit box size, or None to use DEFAULT_NODE_SIZE.
        label: Display label.
        markup: Optional rich-text body, carried through untouched.
    """

    id: str
    position: Point
    size: Size | None = None
    label: str = ""
    markup: str | None = None

    def effective_size(self, default: Size = DEFAULT_NODE_SIZE) -> Size:
        return self.size if self.size is not None else default

    def box(self, default: Size = DEFAULT_NODE_SIZE) -> Box:
        return Box.from_position(self.position, self.effective_size(default))

    def moved_to(self, x: float, y: float) -> Node:
        """Return a copy of this node at a new position."""
        return replace(self, position=Point(x, y))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "label": self.label, "position": self.position.to_dict()}
        if self.markup is not None:
            out["markup"] = self.markup
        if self.size is not None:
            out["size"] = self.size.to_dict()
        return out

    @classmethod
    def from_schema(cls, schema: NodeSchema) -> Node:
        return cls(
            id=schema.id,
            position=Point(schema.position.x, schema.position.y),
            size=Size(schema.size.width, schema.size.height) if schema.size is not None else None,
            label=schema.label or "",
            markup=schema.markup,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Node:
        return cls.from_schema(parse_schema(NodeSchema, data, "node"))


@dataclass(frozen=True)
class Edge:
    """A connection between two nodes.

    ``source_handle`` and ``target_position`` are the manual anchors set by the
    connection tools; both are optional. Unrecognised metadata keys survive a
    from_dict/to_dict cycle in ``extra_metadata``, a read-only mapping.
    """

    id: str
    source: str
    target: str
    directed: bool = True
    label: str | None = None
    markup: str | None = None
    source_handle: HandleSide | None = None
    target_position: Point | None = None
    extra_metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_metadata", _frozen_mapping(self.extra_metadata))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "directed": self.directed,
        }
        if self.label is not None:
            out["label"] = self.label
        if self.markup is not None:
            out["markup"] = self.markup
        metadata = dict(self.extra_metadata)
        if self.source_handle is not None:
            metadata["sourceHandle"] = self.source_handle.value
        if self.target_position is not None:
            metadata["targetPosition"] = self.target_position.to_dict()
        if metadata:
            out["metadata"] = metadata
        return out

    @classmethod
    def from_schema(cls, schema: EdgeSchema) -> Edge:
        metadata = schema.metadata
        return cls(
            id=schema.id,
            source=schema.source,
            target=schema.target,
            directed=schema.directed,
            label=schema.label,
            markup=schema.markup,
            source_handle=metadata.source_handle if metadata is not None else None,
            target_position=_point(metadata.target_position) if metadata is not None else None,
            extra_metadata=(metadata.model_extra or {}) if metadata is not None else {},
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Edge:
        return cls.from_schema(parse_schema(EdgeSchema, data, "edge"))


def _point(schema: PointSchema | None) -> Point | None:
    return Point(schema.x, schema.y) if schema is not None else None


# ─── Graph ────────────────────────────────────────────────────────────────────


def check_unique_ids(nodes: Iterable[Node]) -> None:
    """Raise DuplicateNodeError on the first repeated node id."""
    seen: set[str] = set()
    for node in nodes:
        if node.id in seen:
            raise DuplicateNodeError(node.id)
        seen.add(node.id)


def validate_references(nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
    """Fail fast if any edge points at a node id that is not present."""
    known = {node.id for node in nodes}
    for edge in edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in known:
                raise DanglingEdgeError(edge.id, endpoint)


@dataclass(frozen=True)
class Graph:
    """A node list with unique ids plus the edges between them."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "metadata", _frozen_mapping(self.metadata))
        check_unique_ids(self.nodes)

    def node(self, node_id: str) -> Node:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    def with_nodes(self, nodes: Sequence[Node]) -> Graph:
        return replace(self, nodes=tuple(nodes))

    def validate(self) -> None:
        validate_references(self.nodes, self.edges)

    def to_digraph(self) -> nx.DiGraph:
        return to_digraph(self.nodes, self.edges)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Graph:
        schema = parse_schema(GraphSchema, data, "graph")
        return cls(
            nodes=tuple(Node.from_schema(n) for n in schema.nodes),
            edges=tuple(Edge.from_schema(e) for e in schema.edges),
            metadata=schema.metadata or {},
        )


def to_digraph(nodes: Sequence[Node], edges: Sequence[Edge]) -> nx.DiGraph:
    """Build a networkx DiGraph keyed by node id.

    Nodes are inserted in input order so iteration over ``graph.nodes`` follows
    the caller's ordering. Parallel edges collapse to one DiGraph edge; the
    ``data`` attribute keeps the first Edge record seen.
    """
    validate_references(nodes, edges)
    g: nx.DiGraph = nx.DiGraph()
    for node in nodes:
        g.add_node(node.id, data=node)
    for edge in edges:
        if not g.has_edge(edge.source, edge.target):
            g.add_edge(edge.source, edge.target, data=edge)
    return g
