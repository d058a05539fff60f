"""
Distance-based position relaxation.

`RelaxationEngine.step` is one pass of the "approx_force" update: each node
is pulled or pushed along its edges until the distance to every neighbour
matches the edge's target distance. It is meant to be called once per
animation tick by whatever drives the renderer; it keeps no timer of its own.
"""

import logging
import math
import random
from enum import Enum
from typing import Optional

from .config import Bounds, LayoutConfig
from .graph import GraphModel

logger = logging.getLogger(__name__)

_UNSET = object()


class LayoutState(Enum):
    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    RELAXING = "relaxing"


class RelaxationEngine:
    """
    Moves node positions toward the distances stored on the edges.

    The first call to `step` only places nodes that have no position yet,
    close to the middle of the canvas. Every later call runs one relaxation
    pass.
    """

    def __init__(self, config: Optional[LayoutConfig] = None, seed=None):
        self.config = config or LayoutConfig()
        self.state = LayoutState.UNINITIALIZED
        self.ticks = 0
        self._random = random.Random(seed)

    def _jiggle(self) -> float:
        return (self._random.random() - 0.5) * 1e-6

    def seed_positions(self, graph: GraphModel, bounds: Optional[Bounds] = None) -> int:
        """Place unpositioned nodes in the band (0.8..1.0) * extent/2 on each axis."""
        if bounds is not None:
            width, height = bounds.width, bounds.height
        else:
            width, height = self.config.canvas_width, self.config.canvas_height
        seeded = 0
        for node in graph:
            if node.has_position:
                continue
            node.x = (self._random.random() / 5 + 0.8) * width / 2
            node.y = (self._random.random() / 5 + 0.8) * height / 2
            seeded += 1
        logger.debug("seeded %d of %d nodes near the centre", seeded, len(graph))
        return seeded

    def step(self, graph: GraphModel, step_size: Optional[float] = None, bounds=_UNSET) -> float:
        """
        Advance the layout by one tick.

        `step_size` and `bounds` default to the engine's config; pass
        `bounds=None` to leave nodes unclamped. Returns the largest distance
        any coordinate moved (0.0 on the seeding call).
        """
        if step_size is None:
            step_size = self.config.step_size
        if bounds is _UNSET:
            bounds = self.config.bounds

        if self.state is LayoutState.UNINITIALIZED:
            self.seed_positions(graph, bounds)
            self.state = LayoutState.SEEDED
            return 0.0

        self.state = LayoutState.RELAXING
        self.ticks += 1
        dead_band = self.config.dead_band
        nodes = graph.nodes
        moved = 0.0

        for node in graph:
            if not node.neighbors or node.fixed:
                continue
            gx = gy = 0.0
            for edge in node.neighbors:
                other = nodes[edge.target]
                dx = node.x - other.x
                dy = node.y - other.y
                if dx == 0 and dy == 0:
                    dx, dy = self._jiggle(), self._jiggle()
                diff = math.hypot(dx, dy) - edge.distance
                if dead_band is not None and edge.distance and abs(diff / edge.distance) <= dead_band:
                    continue
                diff *= step_size * edge.weight
                gx += diff * dx
                gy += diff * dy

            x, y = node.x - gx, node.y - gy
            if bounds is not None:
                x, y = bounds.clamp(x, y)
            moved = max(moved, abs(x - node.x), abs(y - node.y))
            node.x, node.y = x, y

        return moved

    def stress(self, graph: GraphModel) -> float:
        """Weighted squared distance error summed over all adjacency entries."""
        total = 0.0
        nodes = graph.nodes
        for edge in graph.edges():
            a, b = nodes[edge.source], nodes[edge.target]
            if not (a.has_position and b.has_position):
                continue
            error = math.hypot(a.x - b.x, a.y - b.y) - edge.distance
            total += edge.weight * error * error
        return total

    def propagate(self, graph: GraphModel, iterations: int) -> float:
        return graph.propagate(iterations, self.config.degenerate_policy)

