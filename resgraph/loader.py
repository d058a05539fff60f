"""
Reading graph records and converting to and from NetworkX.

A graph record is the JSON document the demo pages load:

    {"directed": false,
     "nodes": [{"id": "a"}, ...],
     "edges": [{"source": "a", "target": "b", "weight": 1, "distance": 30}, ...]}
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import networkx as nx

from .config import LayoutConfig
from .errors import ParseError
from .graph import GraphModel, parse_number  # noqa: F401  (parse_number re-exported)

logger = logging.getLogger(__name__)


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ParseError(message)


def validate_record(data: Any) -> None:
    """Structural checks on a parsed graph record. Raises ParseError."""
    _require(isinstance(data, Mapping), "graph record must be a JSON object")
    _require(isinstance(data.get("nodes"), list), "graph record: 'nodes' must be a list")
    _require(isinstance(data.get("edges", []), list), "graph record: 'edges' must be a list")
    directed = data.get("directed", False)
    _require(isinstance(directed, bool), f"graph record: 'directed' must be a boolean, got {directed!r}")

    for i, node in enumerate(data["nodes"]):
        _require(isinstance(node, Mapping) and "id" in node, f"node {i}: expected an object with an 'id'")
    for i, edge in enumerate(data.get("edges", [])):
        _require(isinstance(edge, Mapping), f"edge {i}: expected an object")
        for key in ("source", "target"):
            _require(key in edge, f"edge {i}: missing '{key}'")


def graph_from_record(data: Mapping[str, Any], config: Optional[LayoutConfig] = None) -> GraphModel:
    """
    Build a GraphModel from a record.

    The record's own `directed` flag wins when present; otherwise the config's.
    The config also supplies the distance rescaling target.
    """
    validate_record(data)
    config = config or LayoutConfig()
    directed = data.get("directed", config.directed)
    return GraphModel(
        data["nodes"],
        data.get("edges", []),
        directed=directed,
        distance_scale_target=config.distance_scale_target,
    )


def load_graph(path, config: Optional[LayoutConfig] = None) -> GraphModel:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ParseError(f"{path}: not valid JSON ({exc})") from exc
        except UnicodeDecodeError as exc:
            raise ParseError(f"{path}: not UTF-8 text ({exc.reason})") from exc
    model = graph_from_record(data, config)
    logger.debug("loaded %r from %s", model, path)
    return model


# ----------- NetworkX -----------

def graph_to_networkx(model: GraphModel) -> nx.MultiDiGraph:
    """One directed NetworkX edge per adjacency entry, with weight and distance."""
    G = nx.MultiDiGraph(directed=model.directed)
    for node in model:
        G.add_node(node.id, value=node.value, terminal=node.terminal)
    for edge in model.edges():
        G.add_edge(edge.source, edge.target, weight=edge.weight, distance=edge.distance)
    return G


def record_from_networkx(G: nx.Graph) -> Dict[str, Any]:
    """
    Graph record from any NetworkX graph.

    Edge attributes `weight` and `distance` (or `length`) are carried over
    when present.
    """
    edges = []
    for u, v, data in G.edges(data=True):
        edge = {"source": u, "target": v}
        if "weight" in data:
            edge["weight"] = data["weight"]
        if "distance" in data:
            edge["distance"] = data["distance"]
        elif "length" in data:
            edge["length"] = data["length"]
        edges.append(edge)
    return {
        "directed": G.is_directed(),
        "nodes": [{"id": n} for n in G.nodes()],
        "edges": edges,
    }


def grid_record(rows: int, cols: int) -> Dict[str, Any]:
    """
    Grid sample graph with ids "r,c".

    Both directions of every edge are listed and `directed` is False, as in
    the sample files shipped with the demo. An undirected model mirrors each
    listed edge, so every grid neighbour appears twice in the adjacency and
    pulls twice as hard during relaxation. That doubling is intentional:
    it keeps layouts identical to the old sample pages.
    """
    _require(rows > 0 and cols > 0, f"grid must be at least 1x1, got {rows}x{cols}")
    G = nx.grid_2d_graph(rows, cols)
    node_id = lambda n: f"{n[0]},{n[1]}"
    edges = []
    for node in sorted(G.nodes()):
        for other in sorted(G.neighbors(node)):
            edges.append({"source": node_id(node), "target": node_id(other)})
    return {
        "directed": False,
        "nodes": [{"id": node_id(n)} for n in sorted(G.nodes())],
        "edges": edges,
    }
