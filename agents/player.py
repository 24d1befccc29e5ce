"""Population member definitions."""

from __future__ import annotations

from dataclasses import dataclass

from agents.strategy import Strategy


@dataclass(eq=False)
class Player:
    """Agent holding a strategy reference and a per-generation score."""

    strategy: Strategy
    points: float = 0.0

    def reset(self) -> None:
        self.points = 0.0

    def clone(self) -> "Player":
        """Return an offspring with the same strategy and a zero score."""
        return Player(strategy=self.strategy)
