"""Strategy value objects for the divide-the-cake game."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Sequence


ClaimRule = Callable[[], float]


@dataclass(frozen=True)
class Strategy:
    """Named claim rule shared by every player that uses it.

    Equality and hashing use ``name`` only, so two instances created for the
    same catalog entry are interchangeable when counting composition.
    """

    name: str
    color: str = field(default="#000000", compare=False)
    claim_rule: ClaimRule = field(default=lambda: 0.0, compare=False, repr=False)

    def contribution(self) -> float:
        """Return the share of the cake claimed for one game."""
        return float(self.claim_rule())


def fixed_claim(amount: float) -> ClaimRule:
    """Return a claim rule that always asks for ``amount``."""
    value = float(amount)
    return lambda: value


def random_claim(choices: Sequence[float], rng: random.Random) -> ClaimRule:
    """Return a claim rule drawing uniformly from ``choices`` on every call."""
    options = [float(choice) for choice in choices]
    if not options:
        raise ValueError("Random claim rule needs at least one choice.")
    return lambda: rng.choice(options)
