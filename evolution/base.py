"""Selection strategy contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from agents.player import Player


class EvolutionStrategy(ABC):
    """Abstract interface for turning a scored population into the next one.

    Concrete strategies decide who survives and how survivors reproduce. They
    read ``points`` accumulated during the round and never play games
    themselves.
    """

    @abstractmethod
    def evolve(self, population: Sequence[Player]) -> list[Player]:
        """Generate the next population from scored players.

        Args:
            population (Sequence[Player]): Current generation after scoring.

        Returns:
            list[Player]: Next generation population with zeroed scores.

        Invariants:
            - Must not mutate the input sequence container in place.
            - Every returned player must have ``points == 0``.
        """
