import json

import pytest

from resgraph.graph import GraphModel
from resgraph.loader import grid_record


def path_record(n=5, distance=None):
    edges = []
    for i in range(n - 1):
        edge = {"source": str(i), "target": str(i + 1)}
        if distance is not None:
            edge["distance"] = distance
        edges.append(edge)
    return {"directed": False, "nodes": [{"id": str(i)} for i in range(n)], "edges": edges}


@pytest.fixture
def path_graph():
    record = path_record()
    return GraphModel(record["nodes"], record["edges"])


@pytest.fixture
def grid_graph():
    record = grid_record(3, 5)
    return GraphModel(record["nodes"], record["edges"])


@pytest.fixture
def path_file(tmp_path):
    path = tmp_path / "path.json"
    path.write_text(json.dumps(path_record()), encoding="utf-8")
    return path
