"""Connection geometry - boundary projection and handle anchors.

Pure functions over ``Box``/``Point``; nothing here raises for in-range
finite input.
"""

from __future__ import annotations

import math
from dataclasses import replace

from diagram_core.graph import Box, Edge, HandleSide, Node, Point, Size

# The drawn handle is a HANDLE_SIZE circle sitting HANDLE_GAP outside the node
# border, so its centre is HANDLE_GAP + HANDLE_SIZE / 2 from the border. Any
# renderer drawing handles must use the same numbers.
HANDLE_SIZE: float = 16.0
HANDLE_GAP: float = 8.0
HANDLE_ANCHOR_OFFSET: float = HANDLE_GAP + HANDLE_SIZE / 2

DEFAULT_SOURCE_HANDLE = HandleSide.RIGHT

# Tie-break order when the point is equally close to several sides.
SIDE_PRIORITY: tuple[HandleSide, ...] = (HandleSide.LEFT, HandleSide.RIGHT, HandleSide.TOP, HandleSide.BOTTOM)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _outside(value: float, low: float, high: float) -> float:
    """How far ``value`` lies outside [low, high] (0 when inside)."""
    if value < low:
        return low - value
    if value > high:
        return value - high
    return 0.0


def side_distances(box: Box, point: Point) -> dict[HandleSide, float]:
    """Euclidean distance from ``point`` to each of the four side segments."""
    over_x = _outside(point.x, box.left, box.right)
    over_y = _outside(point.y, box.top, box.bottom)
    return {
        HandleSide.LEFT: math.hypot(point.x - box.left, over_y),
        HandleSide.RIGHT: math.hypot(point.x - box.right, over_y),
        HandleSide.TOP: math.hypot(point.y - box.top, over_x),
        HandleSide.BOTTOM: math.hypot(point.y - box.bottom, over_x),
    }


def nearest_side(box: Box, point: Point) -> HandleSide:
    distances = side_distances(box, point)
    # min() keeps the first minimum, so SIDE_PRIORITY decides exact ties.
    return min(SIDE_PRIORITY, key=lambda side: distances[side])


def closest_boundary_point(box: Box, point: Point) -> Point:
    """The point on the box *boundary* nearest to ``point``.

    Works for points inside the box too: they snap to the nearest side rather
    than staying in the interior. Exact ties between sides resolve in
    SIDE_PRIORITY order (left, right, top, bottom).
    """
    side = nearest_side(box, point)
    if side is HandleSide.LEFT:
        return Point(box.left, _clamp(point.y, box.top, box.bottom))
    if side is HandleSide.RIGHT:
        return Point(box.right, _clamp(point.y, box.top, box.bottom))
    if side is HandleSide.TOP:
        return Point(_clamp(point.x, box.left, box.right), box.top)
    return Point(_clamp(point.x, box.left, box.right), box.bottom)


def side_midpoint(box: Box, side: HandleSide | str) -> Point:
    """Midpoint of one side of the box, on the boundary."""
    side = HandleSide.parse(side)
    if side is HandleSide.TOP:
        return Point(box.x + box.width / 2, box.top)
    if side is HandleSide.RIGHT:
        return Point(box.right, box.y + box.height / 2)
    if side is HandleSide.BOTTOM:
        return Point(box.x + box.width / 2, box.bottom)
    return Point(box.left, box.y + box.height / 2)


def handle_anchor(position: Point, size: Size, side: HandleSide | str) -> Point:
    """Centre of the connection handle on ``side``: side midpoint pushed outward."""
    side = HandleSide.parse(side)
    mid = side_midpoint(Box.from_position(position, size), side)
    if side is HandleSide.TOP:
        return Point(mid.x, mid.y - HANDLE_ANCHOR_OFFSET)
    if side is HandleSide.RIGHT:
        return Point(mid.x + HANDLE_ANCHOR_OFFSET, mid.y)
    if side is HandleSide.BOTTOM:
        return Point(mid.x, mid.y + HANDLE_ANCHOR_OFFSET)
    return Point(mid.x - HANDLE_ANCHOR_OFFSET, mid.y)


def node_handle_anchor(node: Node, side: HandleSide | str) -> Point:
    return handle_anchor(node.position, node.effective_size(), side)


# ─── Existing edges ───────────────────────────────────────────────────────────


def edge_endpoints(edge: Edge, source_node: Node, target_node: Node) -> tuple[Point, Point]:
    """Where an existing edge is drawn from and to.

    Start is the source handle anchor (right side unless the edge pins
    another). End is the edge's manual target position, or the middle of the
    target node's right side.
    """
    start = node_handle_anchor(source_node, edge.source_handle or DEFAULT_SOURCE_HANDLE)
    if edge.target_position is not None:
        end = edge.target_position
    else:
        end = side_midpoint(target_node.box(), HandleSide.RIGHT)
    return start, end


def retarget_edge(
    edge: Edge,
    source_handle: HandleSide | str | None = None,
    target_side: HandleSide | str | None = None,
    target_node: Node | None = None,
) -> Edge:
    """Copy of ``edge`` with new manual anchors.

    ``source_handle`` re-pins the source side. ``target_side`` pins the target
    end to that side's midpoint on ``target_node``. Arguments left as None
    keep the edge's current value.
    """
    changes: dict[str, object] = {}
    if source_handle is not None:
        changes["source_handle"] = HandleSide.parse(source_handle)
    if target_side is not None:
        if target_node is None:
            raise ValueError("target_side needs the target node")
        if target_node.id != edge.target:
            raise ValueError(f"node {target_node.id!r} is not the target of edge {edge.id!r}")
        changes["target_position"] = side_midpoint(target_node.box(), target_side)
    return replace(edge, **changes)
