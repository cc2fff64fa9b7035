"""
diagram_core - layout and connection core for a node/edge diagram editor
=======================================================================

Computes node placement (force-directed or layered) and drives the
interactive "drag a new edge between nodes" gesture. Never draws anything.

  >>> from diagram_core import Graph, apply_auto_layout
  >>> g = Graph.from_dict({
  ...     "nodes": [{"id": "A", "position": {"x": 0, "y": 0}},
  ...               {"id": "B", "position": {"x": 0, "y": 0}}],
  ...     "edges": [{"id": "E1", "source": "A", "target": "B"}],
  ... })
  >>> result = apply_auto_layout(g.nodes, g.edges)
  >>> result.kind.value
  'hierarchical'
"""

import logging

from .analysis import (
    assign_levels as assign_levels,
    find_roots as find_roots,
    has_cycle as has_cycle,
    is_hierarchical as is_hierarchical,
)
from .connection import (
    Cancelled as Cancelled,
    ConnectionRequest as ConnectionRequest,
    ConnectionSession as ConnectionSession,
    HoverSnapshot as HoverSnapshot,
    closest_boundary_point as closest_boundary_point,
    edge_endpoints as edge_endpoints,
    handle_anchor as handle_anchor,
    retarget_edge as retarget_edge,
)
from .errors import (
    DanglingEdgeError as DanglingEdgeError,
    DiagramError as DiagramError,
    DuplicateNodeError as DuplicateNodeError,
    GraphValidationError as GraphValidationError,
    LayoutOptionsError as LayoutOptionsError,
    ReferentialIntegrityError as ReferentialIntegrityError,
    SessionError as SessionError,
    SessionStateError as SessionStateError,
    UnknownNodeError as UnknownNodeError,
)
from .graph import (
    DEFAULT_NODE_SIZE as DEFAULT_NODE_SIZE,
    Box as Box,
    Edge as Edge,
    Graph as Graph,
    HandleSide as HandleSide,
    Node as Node,
    Point as Point,
    Size as Size,
)
from .layout import (
    LayoutKind as LayoutKind,
    LayoutOptions as LayoutOptions,
    LayoutResult as LayoutResult,
    apply_auto_layout as apply_auto_layout,
    apply_force_directed_layout as apply_force_directed_layout,
    apply_hierarchical_layout as apply_hierarchical_layout,
    apply_layout as apply_layout,
    is_layout_cluttered as is_layout_cluttered,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())
