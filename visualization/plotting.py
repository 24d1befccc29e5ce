"""Plot utilities for persisted simplex trajectories."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from data.logger import SimulationLogger  # noqa: E402
from geometry.simplex import Point2D, Triangle, forward_many  # noqa: E402


TRAJECTORY_COLOR = "#2a9d8f"
BACKGROUND_COLOR = "#264653"
TRIANGLE_COLOR = "#fdf0d5"


def _triangle_from_payload(payload: dict[str, list[float]]) -> Triangle:
    return Triangle(
        top=Point2D(*payload["top"]),
        left=Point2D(*payload["left"]),
        right=Point2D(*payload["right"]),
    )


def trajectory_points(rows: list[dict[str, float]], triangle: Triangle) -> np.ndarray:
    """Recompute plot points from logged counts as an ``(N, 2)`` array."""
    weights = []
    for row in rows:
        total = float(row["count_left"] + row["count_top"] + row["count_right"])
        if total <= 0:
            continue
        weights.append(
            [
                row["count_top"] / total,
                row["count_left"] / total,
                row["count_right"] / total,
            ]
        )
    return forward_many(weights, triangle)


def plot_experiment(db_path: str | Path, experiment_id: str, output_path: str | Path) -> Path:
    """Render the logged composition trajectory inside its simplex triangle."""
    logger = SimulationLogger(db_path)
    try:
        experiment = logger.fetch_experiment(experiment_id)
        rows = logger.fetch_trajectory(experiment_id)
    finally:
        logger.close()
    if experiment is None:
        raise ValueError(f"Unknown experiment id: {experiment_id}")

    triangle = _triangle_from_payload(experiment["triangle"])
    points = trajectory_points(rows, triangle)
    labels = list(experiment["strategies"]) or ["left", "top", "right"]

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(7, 6))
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax.set_facecolor(BACKGROUND_COLOR)

    outline = np.array([triangle.top, triangle.left, triangle.right])
    ax.fill(outline[:, 0], outline[:, 1], facecolor=TRIANGLE_COLOR, edgecolor="black")
    for corner, label in zip((triangle.left, triangle.top, triangle.right), labels):
        ax.annotate(label, xy=corner, xytext=(0, 12), textcoords="offset points", ha="center", color="white")

    if len(points):
        ax.plot(points[:, 0], points[:, 1], color=TRAJECTORY_COLOR, linewidth=2)
        ax.scatter(points[:, 0], points[:, 1], color=TRAJECTORY_COLOR, s=20, zorder=3)

    ax.set_aspect("equal")
    ax.invert_yaxis()
    ax.axis("off")
    ax.set_title(f"Experiment {experiment_id}", color="white")

    fig.tight_layout()
    fig.savefig(output, facecolor=fig.get_facecolor())
    plt.close(fig)
    return output
