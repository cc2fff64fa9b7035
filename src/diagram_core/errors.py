"""Exception hierarchy for diagram_core."""

from __future__ import annotations


class DiagramError(Exception):
    """Base class for every error raised by diagram_core."""


class GraphValidationError(DiagramError, ValueError):
    """A node, edge or graph record is malformed."""


class DuplicateNodeError(GraphValidationError):
    """Two nodes share the same id."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Duplicate node id: {node_id!r}")
        self.node_id = node_id


class ReferentialIntegrityError(GraphValidationError):
    """An edge refers to something that is not in the graph."""


class DanglingEdgeError(ReferentialIntegrityError):
    """An edge endpoint names a node id that does not exist."""

    def __init__(self, edge_id: str, node_id: str) -> None:
        super().__init__(f"Edge {edge_id!r} references unknown node {node_id!r}")
        self.edge_id = edge_id
        self.node_id = node_id


class LayoutOptionsError(DiagramError, ValueError):
    """Layout options are out of range or unrecognised."""


class SessionError(DiagramError):
    """Base class for interactive connection session errors."""


class SessionStateError(SessionError):
    """A session operation was called in the wrong state."""


class UnknownNodeError(SessionError, KeyError):
    """A session was started from a node id that is not on the canvas."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown node: {self.node_id!r}"
