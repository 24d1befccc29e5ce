"""Population seeding, round play and composition counting."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from agents.player import Player
from agents.strategy import Strategy
from evolution.base import EvolutionStrategy
from evolution.truncation import TruncationCloneStrategy


PayoffRule = Callable[[Player, Player], Any]
PhaseGuard = Callable[..., Any]


def initialize_population(
    strategies: Sequence[Strategy],
    ratios: Sequence[float],
    total_count: int,
) -> list[Player]:
    """Create ``total_count`` players split by cumulative ratio thresholds.

    Player ``i`` uses ``strategies[0]`` while ``i < floor(N * r0)``, then
    ``strategies[1]`` while ``i < floor(N * (r0 + r1))``, and
    ``strategies[2]`` for the rest. Ratios are not normalised, so a mixture
    that does not sum to one shifts the boundaries without raising.
    """
    if len(strategies) != 3 or len(ratios) != 3:
        raise ValueError("Exactly three strategies and three ratios are required.")
    count = int(total_count)
    if count < 0:
        raise ValueError("total_count must be >= 0")

    first_cut = math.floor(count * float(ratios[0]))
    second_cut = math.floor(count * (float(ratios[0]) + float(ratios[1])))

    population: list[Player] = []
    for index in range(count):
        if index < first_cut:
            population.append(Player(strategies[0]))
        elif index < second_cut:
            population.append(Player(strategies[1]))
        else:
            population.append(Player(strategies[2]))
    return population


def shuffle_population(population: Sequence[Player], rng: random.Random) -> list[Player]:
    """Return a uniformly shuffled copy of ``population``."""
    shuffled = list(population)
    rng.shuffle(shuffled)
    return shuffled


def play_round(population: Sequence[Player], payoff_rule: PayoffRule) -> tuple[int, int]:
    """Play ``(0, 1), (2, 3), ...`` in order; an odd leftover sits out.

    Returns:
        tuple[int, int]: Games played and games that paid out. Payoff rules
        returning ``None`` are counted as paid out.
    """
    games = 0
    agreements = 0
    for index in range(0, len(population) - 1, 2):
        outcome = payoff_rule(population[index], population[index + 1])
        games += 1
        if outcome is None or bool(outcome):
            agreements += 1
    return games, agreements


def _call_directly(_label: str, fn: Callable[..., Any], *args: Any) -> Any:
    return fn(*args)


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generation step.

    ``scores`` are the points each player held after the round, in shuffled
    order, before selection reset them.
    """

    population: list[Player]
    scores: list[float]
    games: int
    agreements: int


def step_generation(
    population: Sequence[Player],
    payoff_rule: PayoffRule,
    rng: random.Random,
    evolution_strategy: EvolutionStrategy,
    guard: PhaseGuard = _call_directly,
) -> GenerationOutcome:
    """Shuffle, play one round, then select and reproduce.

    ``guard`` receives each phase as ``guard(label, fn, *args)`` so callers
    can wrap collaborator failures; the default calls straight through.
    """
    if not population:
        return GenerationOutcome(population=[], scores=[], games=0, agreements=0)

    shuffled = shuffle_population(population, rng)
    games, agreements = guard("payoff_rule", play_round, shuffled, payoff_rule)
    scores = [float(player.points) for player in shuffled]
    next_population = guard("evolution_strategy.evolve", evolution_strategy.evolve, shuffled)
    return GenerationOutcome(
        population=list(next_population),
        scores=scores,
        games=games,
        agreements=agreements,
    )


def run_generation(
    population: Sequence[Player],
    payoff_rule: PayoffRule,
    rng: random.Random | None = None,
    evolution_strategy: EvolutionStrategy | None = None,
) -> list[Player]:
    """Run shuffle, pairing, scoring, selection and reproduction once.

    The result has ``2 * (n - n // 2)`` players, each with zero points. An
    empty population is returned unchanged as an empty list.
    """
    outcome = step_generation(
        population,
        payoff_rule,
        rng or random.Random(),
        evolution_strategy or TruncationCloneStrategy(),
    )
    return outcome.population


def composition(population: Sequence[Player], strategies: Sequence[Strategy]) -> tuple[int, int, int]:
    """Count players per active strategy.

    Matching is by strategy name against ``strategies[0]`` then
    ``strategies[1]``; every other player is counted in the third bucket,
    including players whose strategy is no longer active.
    """
    first = 0
    second = 0
    third = 0
    for player in population:
        if player.strategy == strategies[0]:
            first += 1
        elif player.strategy == strategies[1]:
            second += 1
        else:
            third += 1
    return first, second, third


def composition_fractions(
    population: Sequence[Player],
    strategies: Sequence[Strategy],
) -> tuple[float, float, float] | None:
    """Return composition as fractions, or ``None`` for an empty population."""
    size = len(population)
    if size == 0:
        return None
    first, second, third = composition(population, strategies)
    return first / size, second / size, third / size
