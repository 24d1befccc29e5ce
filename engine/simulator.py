"""Generation-stepping orchestrator for divide-the-cake populations."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from agents.player import Player
from agents.strategy import Strategy
from core.deterministic_rng import DeterministicRNG
from data.logger import SimulationLogger, TrajectoryRow
from engine.population import (
    PayoffRule,
    composition,
    composition_fractions,
    initialize_population,
    step_generation,
)
from evolution.base import EvolutionStrategy
from evolution.truncation import TruncationCloneStrategy
from games.cake import divide_the_cake
from geometry.simplex import Point2D, Triangle


class SimulatorExecutionError(RuntimeError):
    """Raised when one simulator lifecycle phase fails."""


class Simulator:
    """Owns one population and its active strategies.

    Strategies are held in vertex order (left, top, right), which is also the
    order of seeding ratios and composition counts.
    """

    def __init__(
        self,
        strategies: Sequence[Strategy],
        population: Sequence[Player] | None = None,
        payoff_rule: PayoffRule = divide_the_cake,
        evolution_strategy: EvolutionStrategy | None = None,
        seed: int | None = None,
        rng: DeterministicRNG | None = None,
        triangle: Triangle | None = None,
        logger: SimulationLogger | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize simulator dependencies and deterministic state."""
        if len(strategies) != 3:
            raise ValueError("Simulator requires exactly three active strategies.")
        self.strategies: tuple[Strategy, ...] = tuple(strategies)
        self.population: list[Player] = list(population or [])
        self.payoff_rule = payoff_rule
        self.evolution_strategy = evolution_strategy or TruncationCloneStrategy()

        self.seed = seed
        self.rng = rng or DeterministicRNG(seed)
        self.triangle = triangle

        self.logger = logger
        self.config = dict(config or {})
        self.experiment_id: str | None = None
        if self.logger is not None:
            self.experiment_id = self.logger.start_experiment(
                config=self.config,
                seed=seed,
                strategies=[strategy.name for strategy in self.strategies],
                triangle=self._triangle_payload(),
                metadata={"simulator_version": "0.1.0"},
            )

        self.generation_index: int = 0
        self.last_generation_metrics: dict[str, float] | None = None

    def reseed(self, ratios: Sequence[float], total_count: int) -> list[Player]:
        """Replace the population with a fresh mixture and restart generation count.

        With a logger attached, the previous path's rows are dropped and the
        seeded composition is logged as generation 0.
        """
        self.population = initialize_population(self.strategies, ratios, total_count)
        self.generation_index = 0
        self.last_generation_metrics = None
        if self.logger is not None and self.experiment_id is not None:
            self._safe_call("logger.clear_trajectory", self.logger.clear_trajectory, self.experiment_id)
            self.on_generation_end(self.generation_index)
        return self.population

    def set_strategies(self, strategies: Sequence[Strategy]) -> None:
        """Bind a new active triple without touching the population.

        Logged rows are counted against the active names, so a changed triple
        replaces the experiment's strategy names and drops rows counted under
        the old ones.
        """
        if len(strategies) != 3:
            raise ValueError("Simulator requires exactly three active strategies.")
        previous = [strategy.name for strategy in self.strategies]
        self.strategies = tuple(strategies)
        names = [strategy.name for strategy in self.strategies]
        if names == previous or self.logger is None or self.experiment_id is None:
            return
        self._safe_call("logger.update_strategies", self.logger.update_strategies, self.experiment_id, names)
        self._safe_call("logger.clear_trajectory", self.logger.clear_trajectory, self.experiment_id)

    def run_generation(self) -> None:
        """Run one full generation lifecycle.

        Lifecycle:
          1) independent shuffle,
          2) pairwise play in shuffled order,
          3) selection and reproduction,
          4) metrics publication for the logger hook.

        An empty population is left untouched.
        """
        if not self.population:
            return

        outcome = step_generation(
            self.population,
            self.payoff_rule,
            self.rng.stream("shuffle"),
            self.evolution_strategy,
            guard=self._safe_call,
        )
        self.population = outcome.population

        self.last_generation_metrics = self._compute_metrics(outcome.scores, outcome.games, outcome.agreements)
        self.generation_index += 1

    def run(self, generations: int) -> None:
        """Run a fixed number of generations, logging each one."""
        if generations < 0:
            raise ValueError("generations must be non-negative")
        for _ in range(generations):
            if not self.population:
                break
            self.run_generation()
            self.on_generation_end(self.generation_index)

    def composition(self) -> tuple[int, int, int]:
        return composition(self.population, self.strategies)

    def fractions(self) -> tuple[float, float, float] | None:
        return composition_fractions(self.population, self.strategies)

    def plot_point(self) -> Point2D | None:
        """Project current composition into the triangle, if both exist."""
        fractions = self.fractions()
        if fractions is None or self.triangle is None:
            return None
        return self.triangle.point_for(*fractions)

    def _compute_metrics(self, scores: Sequence[float], games: int, agreements: int) -> dict[str, float]:
        """Compute generation metrics from the scored round."""
        metrics: dict[str, float] = {"population_size": float(len(self.population))}
        if scores:
            metrics["mean_points"] = float(sum(scores) / len(scores))
            metrics["max_points"] = float(max(scores))
        else:
            metrics["mean_points"] = 0.0
            metrics["max_points"] = 0.0
        metrics["games_played"] = float(games)
        metrics["agreement_rate"] = float(agreements) / float(games) if games else 0.0

        fractions = self.fractions() or (0.0, 0.0, 0.0)
        for label, value in zip(("left", "top", "right"), fractions):
            metrics[f"fraction_{label}"] = float(value)
        return metrics

    def on_generation_end(self, generation_index: int) -> None:
        """Persist composition for a completed generation if logger is configured."""
        if self.logger is None or self.experiment_id is None:
            return

        raw_metrics = self.last_generation_metrics or {}
        count_left, count_top, count_right = self.composition()
        point = self.plot_point() or Point2D(0.0, 0.0)
        row = TrajectoryRow(
            generation_index=generation_index,
            count_left=count_left,
            count_top=count_top,
            count_right=count_right,
            x=point.x,
            y=point.y,
            mean_points=float(raw_metrics.get("mean_points", 0.0)),
            agreement_rate=float(raw_metrics.get("agreement_rate", 0.0)),
        )
        self._safe_call("logger.log_generation", self.logger.log_generation, self.experiment_id, row)

    def _triangle_payload(self) -> dict[str, list[float]]:
        if self.triangle is None:
            return {}
        return {
            "top": list(self.triangle.top),
            "left": list(self.triangle.left),
            "right": list(self.triangle.right),
        }

    @staticmethod
    def _safe_call(label: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            raise SimulatorExecutionError(f"{label} failed: {exc}") from exc
