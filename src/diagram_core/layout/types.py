"""Layout types shared across the layout algorithms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, NonNegativeInt, ValidationError
from pydantic.alias_generators import to_camel

from diagram_core.errors import LayoutOptionsError
from diagram_core.graph import Edge, Node

# ─── Fixed layout constants ───────────────────────────────────────────────────

LEVEL_HEIGHT: float = 250.0  # vertical distance between hierarchical levels
LEVEL_NODE_WIDTH: float = 300.0  # horizontal slot per node within a level
CLUTTER_DISTANCE: float = 150.0  # centre-to-centre distance below which nodes read as cluttered
COLLISION_STRENGTH: float = 0.7


class LayoutKind(Enum):
    """Which layout algorithm to run (or which one ran)."""

    AUTO = "auto"
    FORCE = "force"
    HIERARCHICAL = "hierarchical"
    UNCHANGED = "unchanged"  # degenerate input, nothing to lay out
    CENTERED = "centered"  # single node moved to the canvas midpoint


_Positive = Annotated[float, Field(gt=0, allow_inf_nan=False)]


class LayoutOptionsSchema(BaseModel):
    """Accepted shape of layout options: snake_case or the host's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    width: _Positive = 1200.0
    height: _Positive = 800.0
    iterations: NonNegativeInt = 300
    node_spacing: Annotated[float, Field(ge=0, allow_inf_nan=False)] = 100.0
    link_distance: FiniteFloat = 200.0
    link_strength: FiniteFloat = 0.1
    repulsion_strength: FiniteFloat = -1000.0
    center_strength: FiniteFloat = 0.1


@dataclass(frozen=True)
class LayoutOptions:
    """Tuning knobs for the layout algorithms; every field has a default."""

    width: float = 1200.0
    height: float = 800.0
    iterations: int = 300
    node_spacing: float = 100.0
    link_distance: float = 200.0
    link_strength: float = 0.1
    repulsion_strength: float = -1000.0
    center_strength: float = 0.1

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def validate(self) -> LayoutOptions:
        """Range-check every field; returns a copy with coerced values (``300.0`` iterations become ``300``)."""
        return self._from_schema_input(asdict(self))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> LayoutOptions:
        """Build options from a partial mapping; missing or None keys take defaults.

        Accepts snake_case names or the camelCase names used by the host
        application. Unknown keys are rejected.
        """
        if not mapping:
            return cls()
        return cls._from_schema_input({key: value for key, value in mapping.items() if value is not None})

    @classmethod
    def _from_schema_input(cls, data: dict[str, Any]) -> LayoutOptions:
        try:
            schema = LayoutOptionsSchema.model_validate(data)
        except ValidationError as exc:
            raise LayoutOptionsError(f"Invalid layout options: {exc}") from exc
        return cls(**schema.model_dump())


def resolve_options(options: LayoutOptions | Mapping[str, Any] | None) -> LayoutOptions:
    if isinstance(options, LayoutOptions):
        return options.validate()
    return LayoutOptions.from_mapping(options)


@dataclass
class LayoutResult:
    """Nodes with updated positions, the untouched edges, and which algorithm ran."""

    nodes: list[Node]
    edges: list[Edge]
    kind: LayoutKind
