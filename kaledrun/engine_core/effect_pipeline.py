"""
Effect Pipeline - Commit an option's effects through the modifier hooks.

Steps:
1. Start from the option's base effect
2. Run each modifier hook in order, collecting their audit entries
3. Apply the final delta to stats and needs
4. Record one "base" change per nonzero stat delta
5. Clamp
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from ..catalog.schema import STAT_KEYS, Effect, Request
from .modifiers import Modifier
from .rng import GameRandom
from .state import AppliedChange, GameState, Needs, Stats

SOURCE_BASE = "base"


@dataclass(frozen=True)
class PipelineResult:
    stats: Stats
    needs: Needs
    applied_changes: tuple[AppliedChange, ...]


def base_changes(delta: Effect) -> list[AppliedChange]:
    return [
        AppliedChange(stat=key, amount=getattr(delta, key), source=SOURCE_BASE)
        for key in STAT_KEYS
        if getattr(delta, key)
    ]


def apply_effect(stats: Stats, needs: Needs, effect: Effect | None) -> tuple[Stats, Needs]:
    """Apply an effect without modifiers; stats come back clamped."""
    if effect is None:
        return stats.clamped(), needs
    return stats.with_delta(effect).clamped(), needs.with_assignments(effect.need_assignments())


def apply_option_with_modifiers(
    state: GameState,
    request: Request,
    option_index: int,
    modifiers: Sequence[Modifier],
    rng: GameRandom,
) -> PipelineResult:
    """
    Run an option's effect through the modifier hooks and commit it.

    The state passed in is not touched; the caller decides what to keep.
    """
    option = request.options[option_index]
    delta = option.effects
    changes: list[AppliedChange] = []

    for modifier in modifiers:
        result = modifier(state, request, option_index, delta, list(changes), rng)
        delta = result.delta
        changes.extend(result.extra_changes)

    stats, needs = apply_effect(state.stats, state.needs, delta)
    changes.extend(base_changes(delta))

    return PipelineResult(stats=stats, needs=needs, applied_changes=tuple(changes))
