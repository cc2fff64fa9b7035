"""Interactive connection session - the drag-a-new-edge state machine.

States:
  Idle    no gesture in progress
  Active  dragging from a source node's handle

Transitions:
  start()   Idle → Active
  commit()  Active → Idle when hovering a node other than the source,
            otherwise a no-op (the drag continues)
  cancel()  Active → Idle, discarding everything

``update_cursor`` is the per-frame input while Active; it never raises and
returns a snapshot for guide-line rendering. A session emits at most one
terminal event (a ConnectionRequest or Cancelled) per start.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from diagram_core.connection.geometry import closest_boundary_point, node_handle_anchor
from diagram_core.errors import SessionStateError, UnknownNodeError
from diagram_core.graph import Edge, HandleSide, Node, Point

logger = logging.getLogger(__name__)

# Targets are easier to hit when their box is grown by this much for hover tests.
HOVER_PADDING: float = 20.0


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class LineStyle(Enum):
    """How the guide line should be drawn."""

    SOLID = "solid"  # snapped to a target
    DASHED = "dashed"  # free-floating


@dataclass(frozen=True)
class HoverSnapshot:
    """What the guide line looks like after a cursor update."""

    source_id: str
    source_handle: HandleSide
    source_anchor: Point | None
    cursor: Point
    hovered_id: str | None
    snap_point: Point | None

    @property
    def is_snapped(self) -> bool:
        return self.snap_point is not None

    @property
    def line_end(self) -> Point:
        return self.snap_point if self.snap_point is not None else self.cursor

    @property
    def line_style(self) -> LineStyle:
        return LineStyle.SOLID if self.is_snapped else LineStyle.DASHED


@dataclass(frozen=True)
class ConnectionRequest:
    """Terminal event: the user dropped a new edge on a valid target."""

    source: str
    target: str
    snap_point: Point | None
    source_handle: HandleSide

    def to_edge(self, edge_id: str, directed: bool = True, label: str | None = None) -> Edge:
        """Build the edge the host application should add."""
        return Edge(
            id=edge_id,
            source=self.source,
            target=self.target,
            directed=directed,
            label=label,
            source_handle=self.source_handle,
            target_position=self.snap_point,
        )


@dataclass(frozen=True)
class Cancelled:
    """Terminal event: the gesture was abandoned."""

    source: str


def find_hover_target(position: Point, candidates: Iterable[Node], exclude: str | None = None) -> Node | None:
    """First candidate (other than ``exclude``) whose padded box contains ``position``."""
    for node in candidates:
        if node.id == exclude:
            continue
        if node.box().padded(HOVER_PADDING).contains(position):
            return node
    return None


class ConnectionSession:
    """Drives one in-progress edge draw at a time.

    Owned by a single interaction dispatcher; not safe for concurrent use.
    The only mutators are start, update_cursor, commit and cancel.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.state = SessionState.IDLE
        self.source_id: str | None = None
        self.source_handle: HandleSide | None = None
        self.cursor: Point | None = None
        self.hovered_id: str | None = None
        self.snap_point: Point | None = None

    def _source(self) -> tuple[str, HandleSide]:
        if self.source_id is None or self.source_handle is None:
            raise SessionStateError("Active session has no source node")
        return self.source_id, self.source_handle

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def start(self, source_node_id: str, handle_side: HandleSide | str, nodes: Iterable[Node]) -> None:
        """Begin dragging from ``source_node_id``'s handle on ``handle_side``.

        Raises UnknownNodeError if the id is not among ``nodes`` and
        SessionStateError if a drag is already in progress.
        """
        if self.is_active:
            raise SessionStateError(f"A connection from {self.source_id!r} is already in progress")
        if not any(node.id == source_node_id for node in nodes):
            raise UnknownNodeError(source_node_id)
        side = HandleSide.parse(handle_side)

        self._reset()
        self.state = SessionState.ACTIVE
        self.source_id = source_node_id
        self.source_handle = side
        logger.debug("Connection started from %r (%s handle)", source_node_id, side.value)

    def update_cursor(self, position: Point, candidate_nodes: Sequence[Node]) -> HoverSnapshot | None:
        """Track the pointer and recompute hover target and snap point.

        Returns None while Idle.
        """
        if not self.is_active:
            return None
        source_id, source_handle = self._source()

        self.cursor = position
        target = find_hover_target(position, candidate_nodes, exclude=source_id)
        hovered_id = target.id if target is not None else None
        if hovered_id != self.hovered_id:
            logger.debug("Connection hover target: %r -> %r", self.hovered_id, hovered_id)
        self.hovered_id = hovered_id
        self.snap_point = closest_boundary_point(target.box(), position) if target is not None else None

        source_anchor = None
        for node in candidate_nodes:
            if node.id == source_id:
                source_anchor = node_handle_anchor(node, source_handle)
                break

        return HoverSnapshot(
            source_id=source_id,
            source_handle=source_handle,
            source_anchor=source_anchor,
            cursor=position,
            hovered_id=self.hovered_id,
            snap_point=self.snap_point,
        )

    def commit(self) -> ConnectionRequest | None:
        """Finish the drag on the hovered node.

        Without a valid hovered target (none, or the source itself) nothing
        is emitted and the session stays Active.
        """
        if not self.is_active:
            return None
        source_id, source_handle = self._source()
        if self.hovered_id is None or self.hovered_id == source_id:
            logger.debug("Connection commit ignored: no valid target under the cursor")
            return None

        request = ConnectionRequest(
            source=source_id,
            target=self.hovered_id,
            snap_point=self.snap_point,
            source_handle=source_handle,
        )
        logger.debug("Connection committed: %r -> %r", request.source, request.target)
        self._reset()
        return request

    def cancel(self) -> Cancelled | None:
        """Abandon the drag. No-op (returns None) when Idle."""
        if not self.is_active:
            return None
        source_id, _ = self._source()
        event = Cancelled(source=source_id)
        logger.debug("Connection from %r cancelled", source_id)
        self._reset()
        return event
