"""Interactive edge drawing: geometry helpers and the connection session."""

from __future__ import annotations

from diagram_core.connection.geometry import (
    HANDLE_ANCHOR_OFFSET,
    HANDLE_GAP,
    HANDLE_SIZE,
    SIDE_PRIORITY,
    closest_boundary_point,
    edge_endpoints,
    handle_anchor,
    nearest_side,
    node_handle_anchor,
    retarget_edge,
    side_midpoint,
)
from diagram_core.connection.session import (
    HOVER_PADDING,
    Cancelled,
    ConnectionRequest,
    ConnectionSession,
    HoverSnapshot,
    LineStyle,
    SessionState,
    find_hover_target,
)

__all__ = [
    "HANDLE_ANCHOR_OFFSET",
    "HANDLE_GAP",
    "HANDLE_SIZE",
    "HOVER_PADDING",
    "SIDE_PRIORITY",
    "Cancelled",
    "ConnectionRequest",
    "ConnectionSession",
    "HoverSnapshot",
    "LineStyle",
    "SessionState",
    "closest_boundary_point",
    "edge_endpoints",
    "find_hover_target",
    "handle_anchor",
    "nearest_side",
    "node_handle_anchor",
    "retarget_edge",
    "side_midpoint",
]
