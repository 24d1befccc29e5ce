"""Factories/registries for strategies and payoff rules."""

from __future__ import annotations

import random
from typing import Callable

from agents.strategy import Strategy, fixed_claim, random_claim
from games.base import PairwiseGame
from games.cake import DivideTheCake


StrategyFactory = Callable[[random.Random], Strategy]
GameFactory = Callable[[float], PairwiseGame]


DEFAULT_ACTIVE_STRATEGIES: tuple[str, ...] = ("Modest", "Fair", "Greedy")
DEFAULT_STRATEGY_QUEUE: tuple[str, ...] = ("Mixed", "Quarter", "Super Greedy")


_STRATEGY_FACTORIES: dict[str, StrategyFactory] = {}
_GAME_FACTORIES: dict[str, GameFactory] = {}


def register_strategy_factory(name: str, factory: StrategyFactory) -> None:
    _STRATEGY_FACTORIES[str(name)] = factory


def register_game_factory(name: str, factory: GameFactory) -> None:
    _GAME_FACTORIES[str(name)] = factory


def available_strategies() -> list[str]:
    return sorted(_STRATEGY_FACTORIES)


def available_games() -> list[str]:
    return sorted(_GAME_FACTORIES)


def create_strategy(name: str, rng: random.Random | None = None) -> Strategy:
    """Build a catalog strategy; ``rng`` feeds strategies with random claims."""
    factory = _STRATEGY_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_strategies()) or "<none>"
        raise ValueError(f"Unknown strategy '{name}'. Available: {available}")
    return factory(rng or random.Random())


def create_strategies(names: list[str] | tuple[str, ...], rng: random.Random | None = None) -> list[Strategy]:
    shared_rng = rng or random.Random()
    return [create_strategy(name, shared_rng) for name in names]


def create_game(name: str, cake_size: float = 1.0) -> PairwiseGame:
    factory = _GAME_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_games()) or "<none>"
        raise ValueError(f"Unknown game '{name}'. Available: {available}")
    return factory(cake_size)


def _fixed_factory(name: str, color: str, amount: float) -> StrategyFactory:
    def factory(_rng: random.Random) -> Strategy:
        return Strategy(name=name, color=color, claim_rule=fixed_claim(amount))

    return factory


def _mixed_strategy_factory(rng: random.Random) -> Strategy:
    return Strategy(name="Mixed", color="#C3ACD0", claim_rule=random_claim((1 / 3, 2 / 3), rng))


def _divide_the_cake_factory(cake_size: float) -> PairwiseGame:
    return DivideTheCake(cake_size=float(cake_size))


def _register_defaults() -> None:
    if _STRATEGY_FACTORIES:
        return
    register_strategy_factory("Modest", _fixed_factory("Modest", "#588157", 1 / 3))
    register_strategy_factory("Quarter", _fixed_factory("Quarter", "#7B66FF", 0.25))
    register_strategy_factory("Fair", _fixed_factory("Fair", "#219ebc", 1 / 2))
    register_strategy_factory("Greedy", _fixed_factory("Greedy", "#e76f51", 2 / 3))
    register_strategy_factory("Mixed", _mixed_strategy_factory)
    register_strategy_factory("Super Greedy", _fixed_factory("Super Greedy", "#F4AC45", 0.75))

    register_game_factory("divide_the_cake", _divide_the_cake_factory)


_register_defaults()
