"""Command-line entry points for running, batching, and plotting simplex trajectories."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, SimplexConfig
from data.logger import SimulationLogger
from main import run_headless
from visualization.plotting import plot_experiment


LOGGER = logging.getLogger(__name__)


def _run_single(config: SimplexConfig, db_path: Path) -> str:
    logger = SimulationLogger(db_path)
    experiment_id: str | None = None
    try:
        session = run_headless(config, logger=logger)
        experiment_id = session.simulator.experiment_id
    finally:
        logger.close()
    if experiment_id is None:
        raise RuntimeError("Expected experiment id when logger is configured.")
    return experiment_id


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="cake-simplex")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run")
    run_cmd.add_argument("--config", default="configs/example_experiment.yaml")
    run_cmd.add_argument("--db", default="simulation_metrics.db")

    batch_cmd = sub.add_parser("batch")
    batch_cmd.add_argument("--config", default="configs/example_batch.yaml")
    batch_cmd.add_argument("--db", default="simulation_metrics.db")

    plot_cmd = sub.add_parser("plot")
    plot_cmd.add_argument("--experiment")
    plot_cmd.add_argument("--db", default="simulation_metrics.db")
    plot_cmd.add_argument("--out", default="artifacts/trajectory.png")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

    if args.command == "run":
        config = ConfigLoader.load(args.config)
        exp_id = _run_single(config, Path(args.db))
        print(exp_id)
        return 0

    if args.command == "batch":
        configs = ConfigLoader.load_many(args.config)
        for index, config in enumerate(configs):
            exp_id = _run_single(config, Path(args.db))
            LOGGER.info("Batch item %d finished as %s", index, exp_id)
            print(exp_id)
        return 0

    if args.command == "plot":
        experiment_id = args.experiment
        if experiment_id is None:
            logger = SimulationLogger(args.db)
            try:
                experiment_id = logger.latest_experiment_id()
            finally:
                logger.close()
            if experiment_id is None:
                raise RuntimeError(f"No experiments logged in {args.db}.")
        path = plot_experiment(args.db, experiment_id, args.out)
        print(path)
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(run_cli())
