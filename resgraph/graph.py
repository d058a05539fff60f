"""
Graph Model
===========

Adjacency-list graph with one scalar value per node.

Values are spread over the graph by repeated neighbour averaging
("resistance" propagation). Nodes pinned with `set_value` are terminal: they
keep their value and act as the boundary of the averaging, so with enough
rounds the free nodes approach the discrete harmonic function defined by the
terminals.
"""

import logging
import math
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Union

from .config import DEFAULT_DISTANCE, DEFAULT_WEIGHT, DEGENERATE_POLICIES, DEGENERATE_RAISE
from .errors import DegenerateNode, NodeNotFound, ParseError

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    """One adjacency entry, stored on its source node."""
    source: str
    target: str
    weight: float = DEFAULT_WEIGHT
    distance: float = DEFAULT_DISTANCE

    def reversed(self) -> "Edge":
        return Edge(self.target, self.source, self.weight, self.distance)


@dataclass
class Node:
    id: str
    value: float = 0.0
    terminal: bool = False
    x: Optional[float] = None
    y: Optional[float] = None
    # position pinned by the renderer (drag); relaxation leaves it alone
    fixed: bool = False
    neighbors: List[Edge] = field(default_factory=list)
    stored: Dict[str, float] = field(default_factory=dict)

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


def parse_number(value: Any, name: str, default: float) -> float:
    """
    Read a numeric record field.

    Accepts finite numbers and numeric strings ("2", " 3.5 "). A missing
    field (None) gives `default`.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise ParseError(f"{name}: expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            raise ParseError(f"{name}: expected a number, got {value!r}") from None
    else:
        raise ParseError(f"{name}: expected a number, got {type(value).__name__}")
    # float() takes "nan" and "inf", json takes NaN and Infinity
    if not math.isfinite(result):
        raise ParseError(f"{name}: expected a finite number, got {value!r}")
    return result


def _check_id(node_id, context: str):
    if isinstance(node_id, bool) or not isinstance(node_id, Hashable):
        raise ParseError(f"{context}: node id must be a string or number, got {node_id!r}")
    return node_id


def _node_id(record: Union[str, Mapping[str, Any]]):
    if isinstance(record, Mapping):
        if "id" not in record:
            raise ParseError(f"node record without an id: {dict(record)!r}")
        return _check_id(record["id"], "node")
    return _check_id(record, "node")


class GraphModel:
    """
    Graph built once from node and edge records.

    Every node starts at value 0. For an undirected graph each input edge is
    stored twice, once on each endpoint, with the same weight and distance.
    """

    def __init__(
        self,
        nodes: Iterable[Union[str, Mapping[str, Any]]],
        edges: Iterable[Mapping[str, Any]],
        directed: bool = False,
        distance_scale_target: Optional[float] = None,
    ):
        self.directed = directed
        self.nodes: Dict[str, Node] = {}
        for record in nodes:
            node_id = _node_id(record)
            if node_id in self.nodes:
                raise ParseError(f"duplicate node id '{node_id}'")
            self.nodes[node_id] = Node(node_id)

        parsed = [self._parse_edge(i, record) for i, record in enumerate(edges)]

        self.scale = 1.0
        if distance_scale_target is not None and parsed:
            mean = sum(e.distance for e in parsed) / len(parsed)
            if mean > 0:
                self.scale = distance_scale_target / mean
                parsed = [e._replace(distance=e.distance * self.scale) for e in parsed]
            else:
                logger.warning("mean edge distance is %s, skipping rescale", mean)

        for edge in parsed:
            self.nodes[edge.source].neighbors.append(edge)
            if not directed:
                self.nodes[edge.target].neighbors.append(edge.reversed())

        logger.debug(
            "built %s graph: %d nodes, %d edges, distance scale %.4g",
            "directed" if directed else "undirected",
            len(self.nodes), len(parsed), self.scale,
        )

    def _parse_edge(self, index: int, record: Mapping[str, Any]) -> Edge:
        context = f"edge {index}"
        for key in ("source", "target"):
            if record.get(key) is None:
                raise ParseError(f"{context}: missing '{key}'")
            _check_id(record[key], f"{context} {key}")
            if record[key] not in self.nodes:
                raise NodeNotFound(record[key], context)
        weight = parse_number(record.get("weight"), f"{context} weight", DEFAULT_WEIGHT)
        # `length` is the older name for distance; never a weight
        raw_distance = record.get("distance")
        if raw_distance is None:
            distance = parse_number(record.get("length"), f"{context} length", DEFAULT_DISTANCE)
        else:
            distance = parse_number(raw_distance, f"{context} distance", DEFAULT_DISTANCE)
        return Edge(record["source"], record["target"], weight, distance)

    # ----------- Lookup -----------

    def __len__(self):
        return len(self.nodes)

    def __contains__(self, node_id):
        return node_id in self.nodes

    def __iter__(self):
        return iter(self.nodes.values())

    def node(self, node_id) -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NodeNotFound(node_id) from None

    def edges(self) -> List[Edge]:
        """All adjacency entries, node by node in list order."""
        return [e for n in self.nodes.values() for e in n.neighbors]

    def mean_distance(self) -> Optional[float]:
        entries = self.edges()
        if not entries:
            return None
        return sum(e.distance for e in entries) / len(entries)

    def values(self) -> Dict[str, float]:
        return {n.id: n.value for n in self.nodes.values()}

    def positions(self) -> Dict[str, tuple]:
        return {n.id: (n.x, n.y) for n in self.nodes.values() if n.has_position}

    # ----------- Values -----------

    def set_value(self, node_id, value: float) -> None:
        """Pin a node: it keeps `value` through propagation."""
        node = self.node(node_id)
        node.value = value
        node.terminal = True

    def set_resistance(self, node_id, value: float) -> None:
        """Seed a node's value without pinning it."""
        self.node(node_id).value = value

    def store_values(self, key: str) -> None:
        for node in self.nodes.values():
            node.stored[key] = node.value

    def reset_values(self, value: float = 0) -> None:
        for node in self.nodes.values():
            node.value = value
            node.terminal = False

    def propagate(self, iterations: int, degenerate: str = DEGENERATE_RAISE) -> float:
        """
        Run `iterations` rounds of neighbour averaging.

        Each round computes every free node's new value from the values at
        the start of the round, then commits them all at once. Terminal nodes
        are never updated.

        A free node without neighbours has no mean. With the "raise" policy
        this raises DegenerateNode before anything changes; with "nan" the
        node takes NaN, as the old demo pages did.

        Returns the largest change made in the last round.
        """
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        if degenerate not in DEGENERATE_POLICIES:
            raise ValueError(f"unknown degenerate policy {degenerate!r}")

        free = [n for n in self.nodes.values() if not n.terminal]
        if iterations and degenerate == DEGENERATE_RAISE:
            for node in free:
                if not node.neighbors:
                    raise DegenerateNode(node.id)

        delta = 0.0
        for _ in range(iterations):
            new_values = {}
            for node in free:
                if node.neighbors:
                    total = sum(self.nodes[e.target].value for e in node.neighbors)
                    new_values[node.id] = total / len(node.neighbors)
                else:
                    new_values[node.id] = math.nan

            delta = 0.0
            for node in free:
                change = abs(new_values[node.id] - node.value)
                # NaN never compares greater, so isolated nodes don't poison delta
                if change > delta:
                    delta = change
                node.value = new_values[node.id]

        if iterations:
            logger.debug("propagated %d rounds over %d free nodes, last change %.3g",
                         iterations, len(free), delta)
        return delta

    def converge(self, tolerance: float = 1e-6, max_iterations: int = 10000,
                 degenerate: str = DEGENERATE_RAISE) -> int:
        """Propagate until a round changes no value by more than `tolerance`."""
        rounds = 0
        while rounds < max_iterations:
            delta = self.propagate(1, degenerate)
            rounds += 1
            if delta <= tolerance:
                break
        else:
            logger.warning("no convergence to %g after %d rounds", tolerance, max_iterations)
        return rounds

    # ----------- Positions -----------

    def pin_position(self, node_id, x: float, y: float) -> None:
        node = self.node(node_id)
        node.x, node.y = x, y
        node.fixed = True

    def release_position(self, node_id) -> None:
        self.node(node_id).fixed = False

    def __repr__(self):
        kind = "directed" if self.directed else "undirected"
        return f"GraphModel({kind}, {len(self.nodes)} nodes, {len(self.edges())} entries)"
