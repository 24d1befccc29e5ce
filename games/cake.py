"""Divide-the-cake payoff rule."""

from __future__ import annotations

from dataclasses import dataclass

from agents.player import Player
from games.base import PairwiseGame


@dataclass(frozen=True)
class DivideTheCake(PairwiseGame):
    """Both players claim a share; compatible claims are paid, greedy pairs get nothing.

    Each player draws a claim from its strategy. If the two claims fit inside
    ``cake_size`` each player adds its own claim to its score. Otherwise the
    cake is spoiled and neither score changes.
    """

    cake_size: float = 1.0

    def play(self, first: Player, second: Player) -> bool:
        first_claim = first.strategy.contribution()
        second_claim = second.strategy.contribution()
        if first_claim + second_claim <= self.cake_size:
            first.points += first_claim
            second.points += second_claim
            return True
        return False


divide_the_cake = DivideTheCake()
