"""Layout engine - public entry points, clutter heuristic and auto-selection."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from diagram_core.analysis import is_hierarchical
from diagram_core.errors import LayoutOptionsError
from diagram_core.graph import Edge, Node, to_digraph, validate_references
from diagram_core.layout.force import force_positions
from diagram_core.layout.hierarchical import hierarchical_positions
from diagram_core.layout.types import (
    CLUTTER_DISTANCE,
    LayoutKind,
    LayoutOptions,
    LayoutResult,
    resolve_options,
)

logger = logging.getLogger(__name__)

OptionsLike = LayoutOptions | Mapping[str, Any] | None


def _place(nodes: Sequence[Node], positions: dict[str, tuple[float, float]]) -> list[Node]:
    """New node records at the computed positions, in input order."""
    return [node.moved_to(*positions[node.id]) for node in nodes]


def apply_force_directed_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: OptionsLike = None,
) -> LayoutResult:
    """Lay out nodes with the force simulation; edges pass through unchanged."""
    opts = resolve_options(options)
    positions = force_positions(nodes, edges, opts)
    return LayoutResult(nodes=_place(nodes, positions), edges=list(edges), kind=LayoutKind.FORCE)


def apply_hierarchical_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: OptionsLike = None,
) -> LayoutResult:
    """Lay out nodes level by level from their roots; edges pass through unchanged."""
    opts = resolve_options(options)
    positions = hierarchical_positions(nodes, edges, opts)
    return LayoutResult(nodes=_place(nodes, positions), edges=list(edges), kind=LayoutKind.HIERARCHICAL)


def is_layout_cluttered(nodes: Sequence[Node]) -> bool:
    """True if any two distinct nodes sit closer than CLUTTER_DISTANCE.

    Measured between node positions. A UI hint only.
    """
    for i in range(len(nodes)):
        a = nodes[i].position
        for j in range(i + 1, len(nodes)):
            if a.distance_to(nodes[j].position) < CLUTTER_DISTANCE:
                return True
    return False


def apply_auto_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: OptionsLike = None,
) -> LayoutResult:
    """Pick a layout from the graph's shape.

    - no nodes: returned unchanged
    - one node: centred on the canvas
    - acyclic with edges: hierarchical
    - anything else: force-directed
    """
    opts = resolve_options(options)
    validate_references(nodes, edges)

    if not nodes:
        return LayoutResult(nodes=list(nodes), edges=list(edges), kind=LayoutKind.UNCHANGED)

    if len(nodes) == 1:
        cx, cy = opts.center
        return LayoutResult(nodes=[nodes[0].moved_to(cx, cy)], edges=list(edges), kind=LayoutKind.CENTERED)

    if is_hierarchical(to_digraph(nodes, edges)):
        logger.debug("Auto layout: acyclic graph with edges, using hierarchical layout")
        return apply_hierarchical_layout(nodes, edges, opts)

    logger.debug("Auto layout: cyclic or edgeless graph, using force-directed layout")
    return apply_force_directed_layout(nodes, edges, opts)


def apply_layout(
    kind: LayoutKind | str,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: OptionsLike = None,
) -> LayoutResult:
    """Run the layout named by ``kind``.

    Only AUTO, FORCE and HIERARCHICAL are selectable; the other kinds only
    describe a result. Anything else raises LayoutOptionsError.
    """
    if isinstance(kind, str):
        try:
            kind = LayoutKind(kind)
        except ValueError as exc:
            raise LayoutOptionsError(f"Unknown layout: {kind!r}") from exc
    match kind:
        case LayoutKind.AUTO:
            return apply_auto_layout(nodes, edges, options)
        case LayoutKind.FORCE:
            return apply_force_directed_layout(nodes, edges, options)
        case LayoutKind.HIERARCHICAL:
            return apply_hierarchical_layout(nodes, edges, options)
        case _:
            raise LayoutOptionsError(f"{kind} is a layout outcome, not a selectable layout")
