"""Seedable RNG container with independent named streams."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field


@dataclass
class DeterministicRNG:
    """Owns random streams without touching global random state.

    With ``seed=None`` every stream is seeded from system entropy, so runs
    are not reproducible but streams stay independent.
    """

    seed: int | None = None
    _streams: dict[str, random.Random] = field(default_factory=dict, init=False, repr=False)

    def stream(self, name: str) -> random.Random:
        """Return independent stream by name, creating it on first use."""
        if name not in self._streams:
            if self.seed is None:
                self._streams[name] = random.Random()
            else:
                # Use stable cross-process seed derivation instead of built-in hash().
                digest = hashlib.sha256(f"{self.seed}:{name}".encode("utf-8")).digest()
                derived_seed = int.from_bytes(digest[:8], byteorder="big", signed=False) & 0xFFFFFFFF
                self._streams[name] = random.Random(derived_seed)
        return self._streams[name]

    def names(self) -> list[str]:
        return sorted(self._streams)
