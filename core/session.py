"""Headless per-tick driver tying the simulator, simplex and strategy board together."""

from __future__ import annotations

import logging
from typing import Callable

from core.render_state import BoardState, RenderFrame
from core.strategy_board import StrategyBoard, label_at
from engine.simulator import Simulator
from geometry.simplex import Point2D, Triangle, Vertex


LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[RenderFrame], None]
BoardCallback = Callable[[BoardState], None]


class SimplexSession:
    """Runs one generation per tick and traces composition inside the triangle.

    The session never draws. Rendering collaborators subscribe through
    ``on_frame`` (one call per plotted point) and ``on_reset`` (triangle and
    labels need redrawing, previous path is gone).
    """

    def __init__(
        self,
        simulator: Simulator,
        board: StrategyBoard,
        triangle: Triangle,
        population_size: int = 10000,
        reseed_interval: int = 6,
        on_frame: FrameCallback | None = None,
        on_reset: BoardCallback | None = None,
    ) -> None:
        if population_size < 0:
            raise ValueError("population_size must be >= 0")
        if reseed_interval < 1:
            raise ValueError("reseed_interval must be >= 1")
        self.simulator = simulator
        self.board = board
        self.triangle = triangle
        self.population_size = int(population_size)
        self.reseed_interval = int(reseed_interval)
        self.on_frame = on_frame
        self.on_reset = on_reset

        self.frame_count: int = 0
        self.last_point: Point2D | None = None
        self.trajectory: list[Point2D] = []

        self.simulator.set_strategies(self.board.active)
        self.simulator.triangle = triangle

    def restart(self) -> BoardState:
        """Forget the path trace and announce the current board."""
        self.last_point = None
        self.trajectory = []
        state = self.board.snapshot(self.triangle)
        if self.on_reset is not None:
            try:
                self.on_reset(state)
            except Exception:
                LOGGER.exception("Reset callback failed")
        return state

    def seed_ratios(self, ratios: tuple[float, float, float] | list[float]) -> RenderFrame | None:
        """Re-seed with a mixture in vertex order (left, top, right) and plot it."""
        self.simulator.reseed(ratios, self.population_size)
        self.restart()
        return self._plot()

    def select_point(self, x: float, y: float) -> RenderFrame | None:
        """Re-seed from the barycentric weights of a canvas point.

        Points outside the triangle are accepted and yield a skewed mixture.
        """
        ratios = self.triangle.weights_at(x, y)
        LOGGER.debug("Selected point (%.1f, %.1f) -> ratios %s", x, y, ratios)
        return self.seed_ratios(ratios)

    def click(self, x: float, y: float) -> Vertex | None:
        """Rotate the strategy whose label was clicked, if any.

        The population keeps its current strategies, so players of a strategy
        rotated out fall into the last composition bucket until the next
        re-seed.
        """
        vertex = label_at(x, y, self.triangle)
        if vertex is None:
            return None
        incoming = self.board.rotate(vertex)
        self.simulator.set_strategies(self.board.active)
        LOGGER.info("Rotated %s vertex to %s", vertex.name.lower(), incoming.name)
        self.restart()
        return vertex

    def tick(self, pointer: tuple[float, float] | None = None) -> RenderFrame | None:
        """Advance one frame.

        ``pointer`` is the held pointer position, or ``None`` when released.
        While held, the population is re-seeded at the pointer every
        ``reseed_interval`` frames before the generation runs.
        """
        self.frame_count += 1
        if pointer is not None and self.frame_count % self.reseed_interval == 0:
            self.select_point(float(pointer[0]), float(pointer[1]))

        if not self.simulator.population:
            return None

        self.simulator.run_generation()
        self.simulator.on_generation_end(self.simulator.generation_index)
        return self._plot()

    def _plot(self) -> RenderFrame | None:
        fractions = self.simulator.fractions()
        if fractions is None:
            return None
        point = self.triangle.point_for(*fractions)
        frame = RenderFrame(
            generation_index=self.simulator.generation_index,
            point=point,
            previous_point=self.last_point,
            counts=self.simulator.composition(),
            fractions=fractions,
            metrics=dict(self.simulator.last_generation_metrics or {}),
        )
        self.last_point = point
        self.trajectory.append(point)
        if self.on_frame is not None:
            try:
                self.on_frame(frame)
            except Exception:
                LOGGER.exception("Frame callback failed at generation %d", frame.generation_index)
        return frame
