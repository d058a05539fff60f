"""
Whole-graph position helpers built on top of the model.

`resistance_embedding` lays a graph out from two propagation passes: the
first pins the left and right boundary nodes and keeps the result as x, the
second pins top and bottom and keeps it as y. `spring_positions` is the
stock NetworkX force layout, used where the relaxation loop is not wanted.
"""

import logging
from typing import Dict, Iterable, Tuple

import networkx as nx

from .config import CANVAS_HEIGHT, CANVAS_WIDTH, DEGENERATE_RAISE
from .graph import GraphModel

logger = logging.getLogger(__name__)


def _pass(graph: GraphModel, low: Iterable, high: Iterable, iterations: int, degenerate: str, key: str):
    graph.reset_values()
    for node_id in low:
        graph.set_value(node_id, 0.0)
    for node_id in high:
        graph.set_value(node_id, 1.0)
    graph.propagate(iterations, degenerate)
    graph.store_values(key)


def resistance_embedding(
    graph: GraphModel,
    left: Iterable,
    right: Iterable,
    top: Iterable,
    bottom: Iterable,
    iterations: int = 200,
    width: float = CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
    degenerate: str = DEGENERATE_RAISE,
) -> Dict[str, Tuple[float, float]]:
    """
    Place every node from its harmonic value between two pairs of borders.

    Fixed nodes keep their position. Values are reset afterwards; the raw
    0..1 coordinates stay available under `node.stored["x"]` / `["y"]`.
    """
    _pass(graph, left, right, iterations, degenerate, "x")
    _pass(graph, top, bottom, iterations, degenerate, "y")
    graph.reset_values()

    for node in graph:
        if node.fixed:
            continue
        node.x = node.stored["x"] * width
        node.y = node.stored["y"] * height
    return graph.positions()


def spring_positions(
    graph: GraphModel,
    width: float = CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
    seed: int = 42,
    iterations: int = 100,
) -> Dict[str, Tuple[float, float]]:
    """Positions from networkx.spring_layout, centred on the canvas."""
    G = nx.Graph()
    G.add_nodes_from(n.id for n in graph)
    G.add_edges_from((e.source, e.target, {"weight": e.weight}) for e in graph.edges())

    pos = nx.spring_layout(
        G,
        weight="weight",
        iterations=iterations,
        seed=seed,
        scale=min(width, height) * 0.45,
        center=(width / 2, height / 2),
    )
    for node_id, (x, y) in pos.items():
        node = graph.nodes[node_id]
        if node.fixed:
            continue
        node.x, node.y = float(x), float(y)
    logger.debug("spring layout placed %d nodes", len(pos))
    return graph.positions()
