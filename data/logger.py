"""SQLite-backed experiment metadata and per-generation trajectory logging."""

from __future__ import annotations

import hashlib
import json
import platform
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class TrajectoryRow:
    """Structured per-generation composition payload."""

    generation_index: int
    count_left: int = 0
    count_top: int = 0
    count_right: int = 0
    x: float = 0.0
    y: float = 0.0
    mean_points: float = 0.0
    agreement_rate: float = 0.0


class SimulationLogger:
    """Persist experiment metadata and per-generation composition in SQLite."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.connection = sqlite3.connect(self.db_path)
        self.connection.row_factory = sqlite3.Row
        self._ensure_schema()

    def close(self) -> None:
        self.connection.close()

    def _ensure_schema(self) -> None:
        self.connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS experiment_metadata (
                experiment_id TEXT PRIMARY KEY,
                config_hash TEXT NOT NULL,
                seed INTEGER,
                config_json TEXT NOT NULL,
                runtime_metadata TEXT NOT NULL,
                strategies_json TEXT NOT NULL,
                triangle_json TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS generation_composition (
                experiment_id TEXT NOT NULL,
                generation_index INTEGER NOT NULL,
                count_left INTEGER NOT NULL,
                count_top INTEGER NOT NULL,
                count_right INTEGER NOT NULL,
                x REAL NOT NULL,
                y REAL NOT NULL,
                mean_points REAL NOT NULL,
                agreement_rate REAL NOT NULL,
                PRIMARY KEY (experiment_id, generation_index),
                FOREIGN KEY (experiment_id)
                    REFERENCES experiment_metadata (experiment_id)
                    ON DELETE CASCADE
            );
            """
        )
        self.connection.commit()

    def start_experiment(
        self,
        config: Mapping[str, Any],
        seed: int | None,
        strategies: Sequence[str] = (),
        triangle: Mapping[str, Sequence[float]] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        config_json = json.dumps(dict(config), sort_keys=True, default=str)
        runtime_metadata: dict[str, Any] = {
            "python_version": platform.python_version(),
            "platform": platform.platform(),
        }
        if metadata:
            runtime_metadata.update(dict(metadata))
        config_hash = hashlib.sha256(config_json.encode("utf-8")).hexdigest()
        deterministic_key = hashlib.sha256(f"{config_hash}:{seed}".encode("utf-8")).hexdigest()
        run_nonce = str(time.time_ns())
        experiment_id = hashlib.sha256(f"{deterministic_key}:{run_nonce}".encode("utf-8")).hexdigest()[:16]
        runtime_metadata["deterministic_key"] = deterministic_key
        metadata_json = json.dumps(runtime_metadata, sort_keys=True)
        triangle_payload = {key: [float(v) for v in value] for key, value in dict(triangle or {}).items()}

        self.connection.execute(
            """
            INSERT OR IGNORE INTO experiment_metadata (
                experiment_id, config_hash, seed, config_json, runtime_metadata,
                strategies_json, triangle_json
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                experiment_id,
                config_hash,
                seed,
                config_json,
                metadata_json,
                json.dumps(list(strategies)),
                json.dumps(triangle_payload, sort_keys=True),
            ),
        )
        self.connection.commit()
        return experiment_id

    def log_generation(self, experiment_id: str, row: TrajectoryRow) -> None:
        self.connection.execute(
            """
            INSERT OR REPLACE INTO generation_composition (
                experiment_id,
                generation_index,
                count_left,
                count_top,
                count_right,
                x,
                y,
                mean_points,
                agreement_rate
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                experiment_id,
                row.generation_index,
                row.count_left,
                row.count_top,
                row.count_right,
                row.x,
                row.y,
                row.mean_points,
                row.agreement_rate,
            ),
        )
        self.connection.commit()

    def clear_trajectory(self, experiment_id: str) -> None:
        """Drop every logged generation of one experiment."""
        self.connection.execute(
            "DELETE FROM generation_composition WHERE experiment_id = ?",
            (experiment_id,),
        )
        self.connection.commit()

    def update_strategies(self, experiment_id: str, strategies: Sequence[str]) -> None:
        """Replace the vertex strategy names recorded for one experiment."""
        self.connection.execute(
            "UPDATE experiment_metadata SET strategies_json = ? WHERE experiment_id = ?",
            (json.dumps(list(strategies)), experiment_id),
        )
        self.connection.commit()

    def fetch_trajectory(self, experiment_id: str) -> list[dict[str, float]]:
        """Return ordered trajectory rows for plotting/analysis."""
        rows = self.connection.execute(
            """
            SELECT generation_index, count_left, count_top, count_right, x, y,
                   mean_points, agreement_rate
            FROM generation_composition
            WHERE experiment_id = ?
            ORDER BY generation_index ASC
            """,
            (experiment_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def fetch_experiment(self, experiment_id: str) -> dict[str, Any] | None:
        """Return decoded metadata for one experiment, if present."""
        row = self.connection.execute(
            """
            SELECT experiment_id, seed, config_json, strategies_json, triangle_json
            FROM experiment_metadata
            WHERE experiment_id = ?
            """,
            (experiment_id,),
        ).fetchone()
        if row is None:
            return None
        return {
            "experiment_id": str(row["experiment_id"]),
            "seed": row["seed"],
            "config": json.loads(row["config_json"]),
            "strategies": json.loads(row["strategies_json"]),
            "triangle": json.loads(row["triangle_json"]),
        }

    def latest_experiment_id(self) -> str | None:
        """Return most recently created experiment id, if any."""
        row = self.connection.execute(
            """
            SELECT experiment_id
            FROM experiment_metadata
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """
        ).fetchone()
        return str(row[0]) if row is not None else None
