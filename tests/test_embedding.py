"""
Embedding Tests
===============
"""

import pytest

from resgraph.embedding import resistance_embedding, spring_positions
from resgraph.graph import GraphModel
from resgraph.loader import grid_record


def grid_sides(rows, cols):
    return dict(
        left=[f"{r},0" for r in range(rows)],
        right=[f"{r},{cols - 1}" for r in range(rows)],
        top=[f"0,{c}" for c in range(cols)],
        bottom=[f"{rows - 1},{c}" for c in range(cols)],
    )


class TestResistanceEmbedding:

    def test_grid_is_laid_out_as_a_grid(self, grid_graph):
        positions = resistance_embedding(grid_graph, iterations=500, width=400, height=200,
                                         **grid_sides(3, 5))
        for r in range(3):
            for c in range(5):
                x, y = positions[f"{r},{c}"]
                assert x == pytest.approx(c / 4 * 400, abs=1e-6)
                assert y == pytest.approx(r / 2 * 200, abs=1e-6)

    def test_values_reset_and_raw_passes_kept(self, grid_graph):
        resistance_embedding(grid_graph, iterations=500, **grid_sides(3, 5))
        assert all(n.value == 0 and not n.terminal for n in grid_graph)
        node = grid_graph.node("1,2")
        assert node.stored["x"] == pytest.approx(0.5, abs=1e-6)
        assert node.stored["y"] == pytest.approx(0.5, abs=1e-6)

    def test_fixed_nodes_keep_position(self, grid_graph):
        grid_graph.pin_position("1,2", 5.0, 5.0)
        resistance_embedding(grid_graph, iterations=100, **grid_sides(3, 5))
        node = grid_graph.node("1,2")
        assert (node.x, node.y) == (5.0, 5.0)


class TestSpringPositions:

    def test_nodes_land_on_the_canvas(self, grid_graph):
        positions = spring_positions(grid_graph, width=800, height=600)
        assert len(positions) == 15
        for x, y in positions.values():
            assert 0 <= x <= 800
            assert 0 <= y <= 600

    def test_seed_makes_it_repeatable(self):
        first = GraphModel(**_grid_kwargs())
        second = GraphModel(**_grid_kwargs())
        assert spring_positions(first, seed=1) == spring_positions(second, seed=1)


def _grid_kwargs():
    record = grid_record(4, 4)
    return {"nodes": record["nodes"], "edges": record["edges"]}
