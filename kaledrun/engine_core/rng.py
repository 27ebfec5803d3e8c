"""
Deterministic random source.

Every random draw in the engine goes through a GameRandom instance owned
by the reducer. Two runs with the same seed and the same actions produce
identical states.
"""

from __future__ import annotations
import random

from .constants import COMBAT_DIE_SIDES


class GameRandom:
    """Seedable uniform source: floats in [0, 1) and integers in [0, n)."""

    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = random.SystemRandom().randrange(2**31)
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def set_seed(self, seed: int) -> None:
        """Restart the sequence from a new seed."""
        self._seed = seed
        self._random.seed(seed)

    def next(self) -> float:
        return self._random.random()

    def next_int(self, n: int) -> int:
        """Uniform integer in [0, n); 0 when n <= 0."""
        if n <= 0:
            return 0
        return int(self.next() * n)

    def randint_inclusive(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi]."""
        if hi < lo:
            return lo
        return lo + self.next_int(hi - lo + 1)

    def roll_die(self, sides: int = COMBAT_DIE_SIDES) -> int:
        return 1 + self.next_int(sides)

    def chance(self, p: float) -> bool:
        return self.next() < p

    def __repr__(self) -> str:
        return f"GameRandom(seed={self._seed})"
