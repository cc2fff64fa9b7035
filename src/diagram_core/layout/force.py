"""Force-directed layout - velocity-Verlet relaxation with four forces.

Each tick:
  1. Cool: alpha moves toward alpha_target by alpha_decay.
  2. Link: springs along edges pull endpoints toward link_distance.
  3. Charge: all-pairs inverse-distance repulsion (O(n²)).
  4. Center: translate the whole layout so its mean sits on the canvas centre.
  5. Collision: push apart node circles of radius node_spacing.
  6. Integrate: velocity decays, position += velocity.

Positions are warm-started from the nodes' current coordinates, so repeated
runs on a stable graph converge to similar layouts.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass

from diagram_core.graph import Edge, Node, validate_references
from diagram_core.layout.types import COLLISION_STRENGTH, LayoutOptions

logger = logging.getLogger(__name__)

ALPHA_MIN: float = 0.001
ALPHA_DECAY: float = 1 - ALPHA_MIN ** (1 / 300)
VELOCITY_DECAY: float = 0.6  # velocity multiplier applied each tick
DISTANCE_MIN2: float = 1.0  # floor on squared distance in the charge force
JIGGLE_SEED: int = 0x5EED


@dataclass
class Body:
    """Mutable per-node simulation state."""

    id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0


class ForceSimulation:
    """Short-lived simulation context, built fresh for every layout call.

    Owns all mutable tick state (bodies, alpha, the jiggle RNG). Nothing here
    is shared between calls.
    """

    def __init__(self, nodes: Sequence[Node], edges: Sequence[Edge], options: LayoutOptions) -> None:
        validate_references(nodes, edges)
        self.options = options
        self.bodies: list[Body] = [Body(id=n.id, x=n.position.x, y=n.position.y) for n in nodes]
        index = {body.id: i for i, body in enumerate(self.bodies)}
        self.links: list[tuple[int, int]] = [(index[e.source], index[e.target]) for e in edges]

        # Degree counts (parallel edges and self-loops counted per link).
        degree = [0] * len(self.bodies)
        for s, t in self.links:
            degree[s] += 1
            degree[t] += 1
        self.link_bias: list[float] = [degree[s] / (degree[s] + degree[t]) for s, t in self.links]

        self.alpha = 1.0
        self.alpha_target = 0.0
        self._rng = random.Random(JIGGLE_SEED)

    def _jiggle(self) -> float:
        """Tiny deterministic offset used to separate coincident points."""
        return (self._rng.random() - 0.5) * 1e-6

    # ── forces ──

    def _apply_link(self, alpha: float) -> None:
        distance = self.options.link_distance
        strength = self.options.link_strength
        bodies = self.bodies
        for (s, t), bias in zip(self.links, self.link_bias):
            source, target = bodies[s], bodies[t]
            dx = target.x + target.vx - source.x - source.vx
            dy = target.y + target.vy - source.y - source.vy
            if dx == 0:
                dx = self._jiggle()
            if dy == 0:
                dy = self._jiggle()
            length = math.sqrt(dx * dx + dy * dy)
            k = (length - distance) / length * alpha * strength
            dx *= k
            dy *= k
            target.vx -= dx * bias
            target.vy -= dy * bias
            source.vx += dx * (1 - bias)
            source.vy += dy * (1 - bias)

    def _apply_charge(self, alpha: float) -> None:
        strength = self.options.repulsion_strength
        if strength == 0:
            return
        bodies = self.bodies
        # Snapshot positions: the force reads positions, writes velocities only.
        xs = [b.x for b in bodies]
        ys = [b.y for b in bodies]
        for i, body in enumerate(bodies):
            for j in range(len(bodies)):
                if i == j:
                    continue
                dx = xs[j] - xs[i]
                dy = ys[j] - ys[i]
                if dx == 0:
                    dx = self._jiggle()
                if dy == 0:
                    dy = self._jiggle()
                l2 = dx * dx + dy * dy
                if l2 < DISTANCE_MIN2:
                    l2 = math.sqrt(DISTANCE_MIN2 * l2)
                body.vx += dx * strength * alpha / l2
                body.vy += dy * strength * alpha / l2

    def _apply_center(self) -> None:
        bodies = self.bodies
        if not bodies:
            return
        cx, cy = self.options.center
        strength = self.options.center_strength
        sx = (sum(b.x for b in bodies) / len(bodies) - cx) * strength
        sy = (sum(b.y for b in bodies) / len(bodies) - cy) * strength
        for body in bodies:
            body.x -= sx
            body.y -= sy

    def _apply_collision(self) -> None:
        radius = self.options.node_spacing
        if radius <= 0:
            return
        r = radius + radius
        bodies = self.bodies
        for i, a in enumerate(bodies):
            xi = a.x + a.vx
            yi = a.y + a.vy
            for b in bodies[i + 1 :]:
                x = xi - b.x - b.vx
                y = yi - b.y - b.vy
                l2 = x * x + y * y
                if l2 >= r * r:
                    continue
                if x == 0:
                    x = self._jiggle()
                    l2 += x * x
                if y == 0:
                    y = self._jiggle()
                    l2 += y * y
                length = math.sqrt(l2)
                k = (r - length) / length * COLLISION_STRENGTH
                x *= k
                y *= k
                # Equal radii: each body takes half the correction.
                a.vx += x * 0.5
                a.vy += y * 0.5
                b.vx -= x * 0.5
                b.vy -= y * 0.5

    # ── stepping ──

    def tick(self) -> None:
        """Advance the simulation by one step."""
        self.alpha += (self.alpha_target - self.alpha) * ALPHA_DECAY
        alpha = self.alpha

        self._apply_link(alpha)
        self._apply_charge(alpha)
        self._apply_center()
        self._apply_collision()

        for body in self.bodies:
            body.vx *= VELOCITY_DECAY
            body.vy *= VELOCITY_DECAY
            body.x += body.vx
            body.y += body.vy

    def run(self, iterations: int | None = None) -> dict[str, tuple[float, float]]:
        """Run every tick to completion and return id → (x, y)."""
        steps = self.options.iterations if iterations is None else iterations
        for _ in range(steps):
            self.tick()
        return {b.id: (b.x, b.y) for b in self.bodies}


def force_positions(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: LayoutOptions,
) -> dict[str, tuple[float, float]]:
    """Compute force-directed positions without building node records."""
    logger.debug(
        "Force layout: %d nodes, %d edges, %d iterations",
        len(nodes),
        len(edges),
        options.iterations,
    )
    return ForceSimulation(nodes, edges, options).run()
