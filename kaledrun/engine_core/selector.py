"""
Weighted candidate selection.
"""

from __future__ import annotations
from typing import Sequence

from ..catalog.schema import WeightedCandidate
from .rng import GameRandom


def select_weighted_candidate(
    candidates: Sequence[WeightedCandidate], rng: GameRandom
) -> str | None:
    """
    Draw one candidate id proportionally to weight.

    Negative weights count as zero. Returns None when the pool is empty
    or the total weight is not positive.
    """
    if not candidates:
        return None

    weights = [max(0.0, c.weight) for c in candidates]
    total = sum(weights)
    if total <= 0:
        return None

    roll = rng.next() * total
    for candidate, weight in zip(candidates, weights):
        if roll < weight:
            return candidate.request_id
        roll -= weight

    # Floating point leftovers land on the last candidate with weight
    for candidate, weight in zip(reversed(candidates), reversed(weights)):
        if weight > 0:
            return candidate.request_id
    return None


def select_uniform(items: Sequence[str], rng: GameRandom) -> str | None:
    """Draw one item uniformly, None if empty."""
    if not items:
        return None
    return items[rng.next_int(len(items))]
