"""Tests for config loading and validation."""

from __future__ import annotations

import json

import pytest

from configs.loader import ConfigLoader, build_config


def test_load_yaml_config_with_defaults(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "population_size: 100\ngenerations: 5\nseed: 1\nnote: demo\n",
        encoding="utf-8",
    )

    config = ConfigLoader.load(config_path)

    assert config.population_size == 100
    assert config.side_length == 500.0
    assert config.reseed_interval == 6
    assert config.strategies == ("Modest", "Fair", "Greedy")
    assert config.strategy_queue == ("Mixed", "Quarter", "Super Greedy")
    assert config.initial_ratios is None
    assert config.game == "divide_the_cake"
    assert config.cake_size == 1.0
    assert config.get("note") == "demo"
    assert config.get("side_length") == 500.0
    assert config.to_dict()["note"] == "demo"


def test_load_json_config_with_mixture(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    payload = {
        "population_size": 10,
        "generations": 5,
        "seed": None,
        "strategies": ["Quarter", "Fair", "Super Greedy"],
        "initial_ratios": [0.7, 0.7, 0.7],
    }
    config_path.write_text(json.dumps(payload), encoding="utf-8")

    config = ConfigLoader.load(config_path)

    assert config.seed is None
    assert config.strategies == ("Quarter", "Fair", "Super Greedy")
    assert config.initial_ratios == (0.7, 0.7, 0.7)


def test_load_many_batch_yaml(tmp_path) -> None:
    config_path = tmp_path / "batch.yaml"
    config_path.write_text(
        """
experiments:
  - population_size: 10
    generations: 5
    seed: 1
  - population_size: 10
    generations: 6
    seed: 2
    initial_point: [500, 450]
""",
        encoding="utf-8",
    )

    configs = ConfigLoader.load_many(config_path)

    assert len(configs) == 2
    assert configs[1].generations == 6
    assert configs[1].initial_point == (500.0, 450.0)


def test_invalid_config_missing_required_key(tmp_path) -> None:
    config_path = tmp_path / "invalid.json"
    config_path.write_text(json.dumps({"population_size": 10, "generations": 5}), encoding="utf-8")

    with pytest.raises(ValueError, match="Missing required config keys: seed"):
        ConfigLoader.load(config_path)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"population_size": 0}, "population_size"),
        ({"generations": -1}, "generations"),
        ({"side_length": 0}, "side_length"),
        ({"reseed_interval": 0}, "reseed_interval"),
        ({"strategies": ["Fair", "Greedy"]}, "exactly three"),
        ({"initial_ratios": [0.5, 0.5]}, "initial_ratios"),
        ({"initial_ratios": [1, 0, 0], "initial_point": [1, 2]}, "mutually exclusive"),
        ({"cake_size": 0}, "cake_size"),
    ],
)
def test_invalid_values(overrides: dict, message: str) -> None:
    payload = {"population_size": 10, "generations": 5, "seed": 1}
    payload.update(overrides)

    with pytest.raises(ValueError, match=message):
        build_config(payload)


def test_unsupported_extension(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("population_size = 1", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported config extension"):
        ConfigLoader.load(config_path)
