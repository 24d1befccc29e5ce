"""Truncation selection with clonal reproduction."""

from __future__ import annotations

from typing import Sequence

from agents.player import Player
from evolution.base import EvolutionStrategy


class TruncationCloneStrategy(EvolutionStrategy):
    """Keep the better-scoring half and let each survivor clone itself once."""

    def __init__(self) -> None:
        self.last_survivor_count: int = 0

    def evolve(self, population: Sequence[Player]) -> list[Player]:
        """Return survivors interleaved with their clones.

        Players are sorted ascending by score (stable, so ties keep their
        shuffled order) and the first ``len(population) // 2`` are dropped.
        For odd sizes the extra player therefore survives.
        """
        if not population:
            self.last_survivor_count = 0
            return []

        ranked = sorted(population, key=lambda player: player.points)
        survivors = ranked[len(ranked) // 2 :]
        self.last_survivor_count = len(survivors)

        next_population: list[Player] = []
        for survivor in survivors:
            survivor.reset()
            next_population.append(survivor)
            next_population.append(survivor.clone())
        return next_population
