"""Pairwise game contracts for population rounds."""

from __future__ import annotations

from abc import ABC, abstractmethod

from agents.player import Player


class PairwiseGame(ABC):
    """Abstract interface for one-shot games between two players.

    Implementations update player scores in place. They are invoked once per
    pair per generation and must not retain references to the players.
    """

    @abstractmethod
    def play(self, first: Player, second: Player) -> bool:
        """Play one game and apply payoffs to both players.

        Args:
            first (Player): First player of the pair.
            second (Player): Second player of the pair.

        Returns:
            bool: ``True`` when payoffs were applied, ``False`` when the
                game ended without reward.

        Invariants:
            - Only ``points`` of the two players may change.
            - Strategy references must never be reassigned.
        """

    def __call__(self, first: Player, second: Player) -> bool:
        return self.play(first, second)
