"""
Loader Tests
============

Record validation, file loading and NetworkX conversion.
"""

import json

import networkx as nx
import pytest

from resgraph.config import LayoutConfig
from resgraph.errors import NodeNotFound, ParseError
from resgraph.loader import (
    graph_from_record,
    graph_to_networkx,
    grid_record,
    load_graph,
    record_from_networkx,
    validate_record,
)

from conftest import path_record


class TestValidation:

    @pytest.mark.parametrize("record,message", [
        ([], "JSON object"),
        ({"edges": []}, "'nodes'"),
        ({"nodes": [], "edges": {}}, "'edges'"),
        ({"nodes": [], "directed": "yes"}, "'directed'"),
        ({"nodes": ["a"]}, "node 0"),
        ({"nodes": [{"id": "a"}], "edges": [{"source": "a"}]}, "missing 'target'"),
        ({"nodes": [{"id": "a"}], "edges": ["a-b"]}, "edge 0"),
    ])
    def test_malformed(self, record, message):
        with pytest.raises(ParseError, match=message):
            validate_record(record)

    def test_edges_are_optional(self):
        g = graph_from_record({"nodes": [{"id": "a"}]})
        assert len(g) == 1
        assert g.edges() == []


class TestGraphFromRecord:

    def test_record_direction_wins(self):
        record = path_record(3)
        record["directed"] = True
        g = graph_from_record(record, LayoutConfig(directed=False))
        assert len(g.edges()) == 2

    def test_config_direction_is_the_fallback(self):
        record = path_record(3)
        del record["directed"]
        g = graph_from_record(record, LayoutConfig(directed=True))
        assert g.directed

    def test_config_rescales_distances(self):
        record = path_record(3, distance=10)
        g = graph_from_record(record, LayoutConfig(distance_scale_target=50))
        assert all(e.distance == pytest.approx(50) for e in g.edges())

    def test_unknown_node(self):
        record = path_record(2)
        record["edges"].append({"source": "0", "target": "9"})
        with pytest.raises(NodeNotFound):
            graph_from_record(record)

    def test_load_graph(self, path_file):
        g = load_graph(path_file)
        assert len(g) == 5
        assert [e.target for e in g.node("1").neighbors] == ["0", "2"]

    def test_list_node_id_is_a_parse_error(self):
        with pytest.raises(ParseError):
            graph_from_record({"nodes": [{"id": ["a"]}], "edges": []})

    def test_list_endpoint_is_a_parse_error(self):
        record = path_record(2)
        record["edges"][0]["target"] = ["1"]
        with pytest.raises(ParseError):
            graph_from_record(record)

    def test_load_json_nan_literal(self, tmp_path):
        path = tmp_path / "nan.json"
        path.write_text('{"nodes": [{"id": "a"}, {"id": "b"}], "edges": [{"source": "a", "target": "b", "distance": NaN}]}',
                        encoding="utf-8")
        with pytest.raises(ParseError, match="finite"):
            load_graph(path)

    def test_load_non_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"nodes": [{"id": "caf\xe9"}]}')
        with pytest.raises(ParseError, match="UTF-8"):
            load_graph(path)

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nodes: ", encoding="utf-8")
        with pytest.raises(ParseError, match="not valid JSON"):
            load_graph(path)


class TestGrid:

    def test_grid_3x5(self):
        record = grid_record(3, 5)
        assert len(record["nodes"]) == 15
        # 22 grid edges, each listed in both directions
        assert len(record["edges"]) == 44
        corner = [e["target"] for e in record["edges"] if e["source"] == "0,0"]
        assert sorted(corner) == ["0,1", "1,0"]
        assert record["directed"] is False

    def test_grid_round_trips_through_json(self):
        record = json.loads(json.dumps(grid_record(10, 11)))
        g = graph_from_record(record)
        assert len(g) == 110
        assert len(g.node("5,5").neighbors) == 8

    def test_empty_grid(self):
        with pytest.raises(ParseError):
            grid_record(0, 3)


class TestNetworkX:

    def test_graph_to_networkx(self, path_graph):
        path_graph.set_value("0", 1.0)
        G = graph_to_networkx(path_graph)
        assert isinstance(G, nx.MultiDiGraph)
        assert G.number_of_nodes() == 5
        assert G.number_of_edges() == len(path_graph.edges())
        assert G.nodes["0"]["terminal"] is True
        assert G["1"]["2"][0]["distance"] == 30.0

    def test_record_from_networkx(self):
        G = nx.Graph()
        G.add_edge("a", "b", weight=2, distance=15)
        G.add_edge("b", "c", length=40)
        G.add_edge("c", "d")
        record = record_from_networkx(G)
        assert record["directed"] is False
        g = graph_from_record(record)
        assert g.node("a").neighbors[0].weight == 2.0
        assert g.node("a").neighbors[0].distance == 15.0
        assert g.node("c").neighbors[0].distance == 40.0
        assert g.node("d").neighbors[0].distance == 30.0

    def test_directed_networkx(self):
        record = record_from_networkx(nx.DiGraph([(1, 2), (2, 3)]))
        g = graph_from_record(record)
        assert g.directed
        assert g.node(3).neighbors == []
