"""Configuration loading and validation utilities for simplex experiments."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from engine.component_registry import DEFAULT_ACTIVE_STRATEGIES, DEFAULT_STRATEGY_QUEUE


_REQUIRED_KEYS: tuple[str, ...] = (
    "population_size",
    "generations",
    "seed",
)

_KNOWN_KEYS: tuple[str, ...] = _REQUIRED_KEYS + (
    "side_length",
    "canvas_width",
    "canvas_height",
    "reseed_interval",
    "strategies",
    "strategy_queue",
    "initial_ratios",
    "initial_point",
    "game",
    "cake_size",
)


@dataclass(frozen=True)
class SimplexConfig:
    """Validated simulation configuration container.

    Provides typed field access for known parameters and dictionary-style
    access for extensible optional parameters.
    """

    population_size: int
    generations: int
    seed: int | None
    side_length: float = 500.0
    canvas_width: float = 1000.0
    canvas_height: float = 800.0
    reseed_interval: int = 6
    strategies: tuple[str, ...] = DEFAULT_ACTIVE_STRATEGIES
    strategy_queue: tuple[str, ...] = DEFAULT_STRATEGY_QUEUE
    initial_ratios: tuple[float, float, float] | None = None
    initial_point: tuple[float, float] | None = None
    game: str = "divide_the_cake"
    cake_size: float = 1.0
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a configuration value by key.

        Args:
            key: Configuration key name.
            default: Value to return if key does not exist.

        Returns:
            Value associated with ``key`` or ``default``.
        """
        if key in _KNOWN_KEYS:
            return getattr(self, key)
        return self.extras.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        payload: dict[str, Any] = {
            "population_size": self.population_size,
            "generations": self.generations,
            "seed": self.seed,
            "side_length": self.side_length,
            "canvas_width": self.canvas_width,
            "canvas_height": self.canvas_height,
            "reseed_interval": self.reseed_interval,
            "strategies": list(self.strategies),
            "strategy_queue": list(self.strategy_queue),
            "initial_ratios": list(self.initial_ratios) if self.initial_ratios is not None else None,
            "initial_point": list(self.initial_point) if self.initial_point is not None else None,
            "game": self.game,
            "cake_size": self.cake_size,
        }
        payload.update(self.extras)
        return payload


class ConfigLoader:
    """Load and validate configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> SimplexConfig:
        """Load a single config from ``path``.

        Args:
            path: Path to a YAML or JSON config file.

        Returns:
            A validated ``SimplexConfig`` instance.
        """
        payload = _read_config_payload(path)
        if not isinstance(payload, Mapping):
            raise ValueError("Single config file must contain a mapping object.")
        return build_config(payload)

    @staticmethod
    def load_many(path: str | Path) -> list[SimplexConfig]:
        """Load one or many configs from ``path``.

        Supports:
            - top-level mapping for single experiment
            - top-level list of mappings
            - top-level mapping with an ``experiments`` list
        """
        payload = _read_config_payload(path)

        if isinstance(payload, list):
            return [build_config(item) for item in payload]

        if isinstance(payload, Mapping) and "experiments" in payload:
            experiments = payload["experiments"]
            if not isinstance(experiments, list):
                raise ValueError("'experiments' must be a list of mappings.")
            return [build_config(item) for item in experiments]

        if isinstance(payload, Mapping):
            return [build_config(payload)]

        raise ValueError("Unsupported config file structure.")


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        return json.loads(content)

    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)

    raise ValueError(f"Unsupported config extension: {suffix}")


def _float_tuple(key: str, value: Any, length: int) -> tuple[float, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) != length:
        raise ValueError(f"{key} must be a list of {length} numbers")
    return tuple(float(item) for item in value)


def _name_tuple(key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise ValueError(f"{key} must be a list of strategy names")
    return tuple(str(item) for item in value)


def build_config(payload: Mapping[str, Any]) -> SimplexConfig:
    """Validate raw mapping and build ``SimplexConfig``."""
    if not isinstance(payload, Mapping):
        raise ValueError("Config entries must be mappings.")
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise ValueError(f"Missing required config keys: {', '.join(missing)}")

    population_size = int(payload["population_size"])
    generations = int(payload["generations"])
    seed = None if payload["seed"] is None else int(payload["seed"])
    side_length = float(payload.get("side_length", 500.0))
    canvas_width = float(payload.get("canvas_width", 1000.0))
    canvas_height = float(payload.get("canvas_height", 800.0))
    reseed_interval = int(payload.get("reseed_interval", 6))
    strategies = _name_tuple("strategies", payload.get("strategies", DEFAULT_ACTIVE_STRATEGIES))
    strategy_queue = _name_tuple("strategy_queue", payload.get("strategy_queue", DEFAULT_STRATEGY_QUEUE))
    game = str(payload.get("game", "divide_the_cake"))
    cake_size = float(payload.get("cake_size", 1.0))

    if population_size <= 0:
        raise ValueError("population_size must be > 0")
    if generations < 0:
        raise ValueError("generations must be >= 0")
    if side_length <= 0:
        raise ValueError("side_length must be > 0")
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError("canvas_width and canvas_height must be > 0")
    if reseed_interval < 1:
        raise ValueError("reseed_interval must be >= 1")
    if len(strategies) != 3:
        raise ValueError("strategies must name exactly three strategies")
    if cake_size <= 0:
        raise ValueError("cake_size must be > 0")

    # Ratios may sum to anything; skewed mixtures are accepted as given.
    initial_ratios = None
    if payload.get("initial_ratios") is not None:
        initial_ratios = _float_tuple("initial_ratios", payload["initial_ratios"], 3)
    initial_point = None
    if payload.get("initial_point") is not None:
        initial_point = _float_tuple("initial_point", payload["initial_point"], 2)
    if initial_ratios is not None and initial_point is not None:
        raise ValueError("initial_ratios and initial_point are mutually exclusive")

    extras = {k: v for k, v in payload.items() if k not in _KNOWN_KEYS}

    return SimplexConfig(
        population_size=population_size,
        generations=generations,
        seed=seed,
        side_length=side_length,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        reseed_interval=reseed_interval,
        strategies=strategies,
        strategy_queue=strategy_queue,
        initial_ratios=initial_ratios,  # type: ignore[arg-type]
        initial_point=initial_point,  # type: ignore[arg-type]
        game=game,
        cake_size=cake_size,
        extras=extras,
    )
