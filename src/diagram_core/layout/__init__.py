"""Layout engine public API."""

from __future__ import annotations

from diagram_core.layout.engine import (
    apply_auto_layout,
    apply_force_directed_layout,
    apply_hierarchical_layout,
    apply_layout,
    is_layout_cluttered,
)
from diagram_core.layout.force import ForceSimulation
from diagram_core.layout.hierarchical import group_by_level
from diagram_core.layout.types import (
    CLUTTER_DISTANCE,
    COLLISION_STRENGTH,
    LEVEL_HEIGHT,
    LEVEL_NODE_WIDTH,
    LayoutKind,
    LayoutOptions,
    LayoutResult,
)

__all__ = [
    "CLUTTER_DISTANCE",
    "COLLISION_STRENGTH",
    "LEVEL_HEIGHT",
    "LEVEL_NODE_WIDTH",
    "ForceSimulation",
    "LayoutKind",
    "LayoutOptions",
    "LayoutResult",
    "apply_auto_layout",
    "apply_force_directed_layout",
    "apply_hierarchical_layout",
    "apply_layout",
    "group_by_level",
    "is_layout_cluttered",
]
