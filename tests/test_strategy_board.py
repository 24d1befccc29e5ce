"""Tests for vertex label hit regions and strategy rotation."""

from __future__ import annotations

import random

import pytest

from core.strategy_board import StrategyBoard, label_at, label_region
from engine.component_registry import create_strategies
from geometry.simplex import Triangle, Vertex


def _board() -> StrategyBoard:
    rng = random.Random(0)
    return StrategyBoard(
        active=create_strategies(["Modest", "Fair", "Greedy"], rng),
        queue=create_strategies(["Mixed", "Quarter", "Super Greedy"], rng),
    )


def _triangle() -> Triangle:
    return Triangle.equilateral(500.0, 400.0, 500.0)


def test_rotation_cycles_through_queue() -> None:
    board = _board()

    incoming = board.rotate(Vertex.LEFT)

    assert incoming.name == "Mixed"
    assert [s.name for s in board.active] == ["Mixed", "Fair", "Greedy"]
    assert [s.name for s in board.queue] == ["Quarter", "Super Greedy", "Modest"]

    board.rotate(Vertex.TOP)
    assert board.strategy_at(Vertex.TOP).name == "Quarter"
    assert [s.name for s in board.queue] == ["Super Greedy", "Modest", "Fair"]


def test_rotation_with_empty_queue_returns_same_strategy() -> None:
    board = StrategyBoard(active=create_strategies(["Modest", "Fair", "Greedy"]))

    assert board.rotate(Vertex.RIGHT).name == "Greedy"
    assert board.queue == ()


def test_board_requires_three_strategies() -> None:
    with pytest.raises(ValueError):
        StrategyBoard(active=create_strategies(["Modest"]))


@pytest.mark.parametrize(
    "vertex, dx, dy",
    [
        (Vertex.LEFT, -10.0, -10.0),
        (Vertex.TOP, 30.0, -5.0),
        (Vertex.TOP, -30.0, -39.0),
        (Vertex.RIGHT, 70.0, -20.0),
    ],
)
def test_label_hit_regions(vertex: Vertex, dx: float, dy: float) -> None:
    triangle = _triangle()
    corner = triangle.vertex(vertex)

    assert label_at(corner.x + dx, corner.y + dy, triangle) == vertex


def test_label_regions_are_open_and_miss_elsewhere() -> None:
    triangle = _triangle()
    region = label_region(triangle, Vertex.LEFT)

    assert not region.contains(triangle.left.x, triangle.left.y - 10.0)
    assert not region.contains(triangle.left.x - 10.0, triangle.left.y)
    assert label_at(triangle.left.x + 10.0, triangle.left.y - 10.0, triangle) is None
    assert label_at(500.0, 400.0, triangle) is None


def test_snapshot_lists_labels_in_vertex_order() -> None:
    board = _board()

    state = board.snapshot(_triangle())

    assert [label.name for label in state.labels] == ["Modest", "Fair", "Greedy"]
    assert state.labels[1].color == "#219ebc"
    assert state.labels[1].anchor.x == pytest.approx(500.0)
