"""
Need modifiers - event-reactive bonuses from active needs.

A modifier hook receives the delta accumulated so far and may rewrite it,
returning any extra audit entries alongside. Hooks only run for event
requests, never for need or info requests, and never for the baseline
economy.

Rounding is floor throughout.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, TYPE_CHECKING

from ..catalog.schema import Effect, Request
from .constants import FIREWOOD_HALVE_CHANCE, WELL_BONUS_CHANCE, WELL_BONUS_HEALTH
from .rng import GameRandom
from .state import AppliedChange

if TYPE_CHECKING:
    from .state import GameState


@dataclass(frozen=True)
class ModifierResult:
    delta: Effect
    extra_changes: tuple[AppliedChange, ...] = ()


Modifier = Callable[
    ["GameState", Request, int, Effect, "list[AppliedChange]", GameRandom],
    ModifierResult,
]


def firewood_modifier(
    state: GameState,
    request: Request,
    option_index: int,
    delta: Effect,
    changes: list[AppliedChange],
    rng: GameRandom,
) -> ModifierResult:
    """With firewood active, a fire risk increase has a 25% chance to be halved."""
    if not state.needs.firewood:
        return ModifierResult(delta)

    increase = delta.fire_risk
    if not increase or increase <= 0:
        return ModifierResult(delta)
    if not rng.chance(FIREWOOD_HALVE_CHANCE):
        return ModifierResult(delta)

    reduced = increase // 2
    correction = AppliedChange(
        stat="fire_risk",
        amount=-(increase - reduced),
        source="need:firewood",
        note=f"Firewood supply reduced fire risk increase from {increase} to {reduced}",
    )
    return ModifierResult(delta.with_stat("fire_risk", reduced), (correction,))


def well_modifier(
    state: GameState,
    request: Request,
    option_index: int,
    delta: Effect,
    changes: list[AppliedChange],
    rng: GameRandom,
) -> ModifierResult:
    """With the well active, a health increase has a 50% chance of +1."""
    if not state.needs.well:
        return ModifierResult(delta)

    increase = delta.health
    if not increase or increase <= 0:
        return ModifierResult(delta)
    if not rng.chance(WELL_BONUS_CHANCE):
        return ModifierResult(delta)

    bonus = AppliedChange(
        stat="health",
        amount=WELL_BONUS_HEALTH,
        source="need:well",
        note="Well provided additional health benefit",
    )
    return ModifierResult(delta.with_stat("health", increase + WELL_BONUS_HEALTH), (bonus,))


# Applied in order to event decisions
NEED_MODIFIERS: tuple[Modifier, ...] = (firewood_modifier, well_modifier)
