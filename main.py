"""Headless simplex trajectory runner for local validation."""

from __future__ import annotations

import logging
from pathlib import Path

from configs.loader import ConfigLoader, SimplexConfig
from core.deterministic_rng import DeterministicRNG
from core.session import BoardCallback, FrameCallback, SimplexSession
from core.strategy_board import StrategyBoard
from data.logger import SimulationLogger
from engine.component_registry import create_game, create_strategies
from engine.simulator import Simulator
from geometry.simplex import Triangle


LOGGER = logging.getLogger(__name__)

CENTROID_RATIOS: tuple[float, float, float] = (1 / 3, 1 / 3, 1 / 3)


def build_triangle(config: SimplexConfig) -> Triangle:
    """Centre an equilateral triangle on the configured canvas."""
    return Triangle.equilateral(
        center_x=config.canvas_width / 2.0,
        center_y=config.canvas_height / 2.0,
        side_length=config.side_length,
    )


def build_components(
    config: SimplexConfig,
    logger: SimulationLogger | None = None,
    on_frame: FrameCallback | None = None,
    on_reset: BoardCallback | None = None,
) -> SimplexSession:
    """Build an unseeded session from configuration."""
    rng = DeterministicRNG(config.seed)
    claims_rng = rng.stream("claims")
    board = StrategyBoard(
        active=create_strategies(config.strategies, claims_rng),
        queue=create_strategies(config.strategy_queue, claims_rng),
    )
    triangle = build_triangle(config)
    payoff_rule = create_game(config.game, cake_size=config.cake_size)

    simulator = Simulator(
        strategies=board.active,
        payoff_rule=payoff_rule,
        seed=config.seed,
        rng=rng,
        triangle=triangle,
        logger=logger,
        config=config.to_dict(),
    )
    return SimplexSession(
        simulator=simulator,
        board=board,
        triangle=triangle,
        population_size=config.population_size,
        reseed_interval=config.reseed_interval,
        on_frame=on_frame,
        on_reset=on_reset,
    )


def seed_session(session: SimplexSession, config: SimplexConfig) -> None:
    """Seed from ``initial_point``, else ``initial_ratios``, else the centroid."""
    if config.initial_point is not None:
        session.select_point(*config.initial_point)
    elif config.initial_ratios is not None:
        session.seed_ratios(config.initial_ratios)
    else:
        session.seed_ratios(CENTROID_RATIOS)


def run_headless(config: SimplexConfig, logger: SimulationLogger | None = None) -> SimplexSession:
    """Seed a session and advance it ``config.generations`` ticks."""
    session = build_components(config, logger=logger)
    seed_session(session, config)
    for _ in range(config.generations):
        if session.tick() is None:
            LOGGER.warning("Population is empty; stopping after %d frames", session.frame_count)
            break
    LOGGER.info(
        "Finished %d generations with composition %s",
        session.simulator.generation_index,
        session.simulator.composition(),
    )
    return session


def main(config_path: str = "configs/example_experiment.yaml") -> None:
    """Load config, run the session headless, and log the trajectory."""
    config = ConfigLoader.load(config_path)
    logger = SimulationLogger(Path("simulation_metrics.db"))
    try:
        run_headless(config, logger=logger)
    finally:
        logger.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
