"""Hierarchical layout - BFS leveling and level-by-level placement.

Levels come from ``analysis.assign_levels``: roots (zero in-degree, or the
first node when there are none) sit on level 0 and each BFS step adds one
level. Within a level nodes get a fixed-width slot each, centred on the
canvas width; levels stack downward by a fixed height.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from diagram_core.analysis import assign_levels
from diagram_core.graph import Edge, Node, to_digraph
from diagram_core.layout.types import LEVEL_HEIGHT, LEVEL_NODE_WIDTH, LayoutOptions

logger = logging.getLogger(__name__)


def group_by_level(levels: dict[str, int]) -> dict[int, list[str]]:
    """Group node ids by level, keeping input order inside each level."""
    grouped: dict[int, list[str]] = {}
    for node_id, level in levels.items():
        grouped.setdefault(level, []).append(node_id)
    return grouped


def hierarchical_positions(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: LayoutOptions,
) -> dict[str, tuple[float, float]]:
    """Compute id → (x, y) for a layered layout."""
    levels = assign_levels(to_digraph(nodes, edges))
    by_level = group_by_level(levels)
    logger.debug("Hierarchical layout: %d nodes on %d level(s)", len(nodes), len(by_level))

    positions: dict[str, tuple[float, float]] = {}
    for level, level_ids in by_level.items():
        y = level * LEVEL_HEIGHT
        total_width = (len(level_ids) - 1) * LEVEL_NODE_WIDTH
        start_x = (options.width - total_width) / 2
        for index, node_id in enumerate(level_ids):
            positions[node_id] = (start_x + index * LEVEL_NODE_WIDTH, y)
    return positions
