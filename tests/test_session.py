"""Tests for the headless per-tick simplex session."""

from __future__ import annotations

import pytest

from configs.loader import SimplexConfig
from core.render_state import BoardState, RenderFrame
from core.session import SimplexSession
from data.logger import SimulationLogger
from games.cake import DivideTheCake
from geometry.simplex import Vertex
from main import build_components, run_headless


def _config(**overrides) -> SimplexConfig:
    values = {"population_size": 30, "generations": 5, "seed": 3}
    values.update(overrides)
    return SimplexConfig(**values)


def _session(**overrides) -> tuple[SimplexSession, list[RenderFrame], list[BoardState]]:
    frames: list[RenderFrame] = []
    resets: list[BoardState] = []
    session = build_components(_config(**overrides), on_frame=frames.append, on_reset=resets.append)
    return session, frames, resets


def test_tick_without_population_does_nothing() -> None:
    session, frames, _ = _session()

    assert session.tick() is None
    assert session.frame_count == 1
    assert frames == []


def test_select_point_at_vertex_seeds_pure_population() -> None:
    session, frames, resets = _session()
    left = session.triangle.left

    frame = session.select_point(left.x, left.y)

    assert frame is not None
    assert frame.counts == (30, 0, 0)
    assert frame.point == pytest.approx(left)
    assert frame.previous_point is None
    assert frame.generation_index == 0
    assert len(resets) == 1
    assert frames == [frame]


def test_ticks_trace_a_connected_path() -> None:
    session, frames, _ = _session()
    session.seed_ratios((1 / 3, 1 / 3, 1 / 3))

    first = session.tick()
    second = session.tick()

    assert first is not None and second is not None
    assert first.previous_point == frames[0].point
    assert second.segment == (first.point, second.point)
    assert second.generation_index == 2
    assert sum(second.counts) == 30
    assert session.trajectory == [frame.point for frame in frames]


def test_held_pointer_reseeds_on_interval() -> None:
    session, frames, _ = _session(reseed_interval=3)
    right = session.triangle.right

    assert session.tick(pointer=(right.x, right.y)) is None
    assert session.tick(pointer=(right.x, right.y)) is None
    frame = session.tick(pointer=(right.x, right.y))

    assert frame is not None
    assert [f.generation_index for f in frames] == [0, 1]
    assert frames[0].counts == (0, 0, 30)


def test_click_on_label_rotates_without_reseeding() -> None:
    session, _, resets = _session()
    top = session.triangle.top
    session.seed_ratios((0.0, 1.0, 0.0))

    vertex = session.click(top.x, top.y - 10.0)

    assert vertex == Vertex.TOP
    assert [s.name for s in session.simulator.strategies] == ["Modest", "Mixed", "Greedy"]
    assert session.last_point is None
    assert resets[-1].labels[1].name == "Mixed"
    # Fair players are no longer active and fall into the last bucket.
    assert session.simulator.composition() == (0, 0, 30)


def test_click_outside_labels_is_ignored() -> None:
    session, _, resets = _session()

    assert session.click(0.0, 0.0) is None
    assert resets == []


def test_failing_frame_callback_does_not_stop_session() -> None:
    def explode(_frame: RenderFrame) -> None:
        raise RuntimeError("render failed")

    session = build_components(_config(), on_frame=explode)
    session.seed_ratios((0.5, 0.5, 0.0))

    assert session.tick() is not None


def test_session_validates_arguments() -> None:
    session, _, _ = _session()

    with pytest.raises(ValueError):
        SimplexSession(session.simulator, session.board, session.triangle, reseed_interval=0)


def test_run_headless_advances_configured_generations() -> None:
    session = run_headless(_config(generations=4, initial_ratios=(0.2, 0.3, 0.5)))

    assert session.simulator.generation_index == 4
    assert len(session.trajectory) == 5


def test_reseed_mid_run_logs_only_the_new_path(tmp_path) -> None:
    logger = SimulationLogger(tmp_path / "session.db")
    session = build_components(_config(), logger=logger)
    left = session.triangle.left
    right = session.triangle.right

    session.select_point(left.x, left.y)
    for _ in range(8):
        session.tick()
    session.select_point(right.x, right.y)
    session.tick()
    session.tick()
    rows = logger.fetch_trajectory(session.simulator.experiment_id)
    logger.close()

    assert [row["generation_index"] for row in rows] == [0, 1, 2]
    assert all(row["count_right"] == 30 for row in rows)
    assert all(row["count_left"] == 0 for row in rows)


def test_click_records_rotated_names_for_logged_rows(tmp_path) -> None:
    logger = SimulationLogger(tmp_path / "click.db")
    session = build_components(_config(), logger=logger)
    top = session.triangle.top
    session.seed_ratios((1 / 3, 1 / 3, 1 / 3))
    session.tick()

    session.click(top.x, top.y - 10.0)
    session.tick()
    experiment = logger.fetch_experiment(session.simulator.experiment_id)
    rows = logger.fetch_trajectory(session.simulator.experiment_id)
    logger.close()

    assert experiment is not None
    assert experiment["strategies"] == ["Modest", "Mixed", "Greedy"]
    assert [row["generation_index"] for row in rows] == [2]


def test_build_components_resolves_game_from_config() -> None:
    session, _, _ = _session(cake_size=2.0)

    assert session.simulator.payoff_rule == DivideTheCake(cake_size=2.0)


def test_build_components_rejects_unknown_game() -> None:
    with pytest.raises(ValueError, match="Unknown game"):
        build_components(_config(game="ultimatum"))
