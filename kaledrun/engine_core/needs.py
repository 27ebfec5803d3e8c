"""
Needs Tracker - Population-driven needs, buildings and cooldowns.

- A need unlocks once farmers reach its threshold
- Required buildings grow with population above the threshold
- Building counts never decrease
- Declining a need request puts it on cooldown
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..catalog.needs import NeedDefinition
from .constants import DECLINE_COOLDOWN_TICKS
from .state import PRIORITY_INFO, NeedTracking, Needs, ScheduledEvent


@dataclass(frozen=True)
class NeedFulfillment:
    tracking: dict[str, NeedTracking]
    info_event: ScheduledEvent | None = None


def is_need_unlocked(definition: NeedDefinition, farmers: int) -> bool:
    return farmers >= definition.unlock_threshold


def calculate_required_buildings(definition: NeedDefinition, farmers: int) -> int:
    if farmers < definition.unlock_threshold:
        return 0
    return 1 + (farmers - definition.unlock_threshold) // definition.population_per_building


def is_need_required(definition: NeedDefinition, tracking: NeedTracking, farmers: int) -> bool:
    return tracking.building_count < calculate_required_buildings(definition, farmers)


def is_need_on_cooldown(tick: int, next_eligible_tick: int) -> bool:
    return tick < next_eligible_tick


def detect_newly_unlocked_need(
    needs: Needs,
    farmers_before: int,
    farmers_after: int,
    definitions: Sequence[NeedDefinition],
) -> str | None:
    """First need (in enumeration order) whose threshold was crossed upward."""
    for definition in definitions:
        if needs.is_active(definition.need):
            continue
        threshold = definition.unlock_threshold
        if farmers_before < threshold <= farmers_after:
            return definition.need
    return None


def fulfill_need(
    tracking: dict[str, NeedTracking],
    definition: NeedDefinition,
    farmers: int,
    tick: int,
    scheduled_events: Iterable[ScheduledEvent] = (),
) -> NeedFulfillment:
    """
    Record one more building for a need.

    The first-ever fulfillment that also satisfies the requirement schedules
    the need's info screen for the next tick.
    """
    current = tracking.get(definition.need, NeedTracking())
    required = calculate_required_buildings(definition, farmers)
    was_deficient = current.building_count < required

    updated = NeedTracking(
        building_count=current.building_count + 1,
        next_eligible_tick=current.next_eligible_tick,
    )
    new_tracking = {**tracking, definition.need: updated}

    info_event = None
    is_met = updated.building_count >= required
    if was_deficient and is_met and updated.building_count == 1:
        already_queued = any(e.request_id == definition.info_request_id for e in scheduled_events)
        if not already_queued:
            info_event = ScheduledEvent(
                target_tick=tick + 1,
                request_id=definition.info_request_id,
                scheduled_at_tick=tick,
                priority=PRIORITY_INFO,
            )

    return NeedFulfillment(tracking=new_tracking, info_event=info_event)


def decline_need(tracking: dict[str, NeedTracking], need: str, tick: int) -> dict[str, NeedTracking]:
    current = tracking.get(need, NeedTracking())
    updated = NeedTracking(
        building_count=current.building_count,
        next_eligible_tick=tick + 1 + DECLINE_COOLDOWN_TICKS,
    )
    return {**tracking, need: updated}


def sync_need_unlock_tokens(
    needs: Needs,
    tracking: dict[str, NeedTracking],
    unlocks: frozenset[str],
    definitions: Sequence[NeedDefinition],
) -> frozenset[str]:
    """A need's token is present while its flag is set or it has a building."""
    tokens = set(unlocks)
    for definition in definitions:
        if not definition.unlock_token:
            continue
        count = tracking.get(definition.need, NeedTracking()).building_count
        if needs.is_active(definition.need) or count > 0:
            tokens.add(definition.unlock_token)
        else:
            tokens.discard(definition.unlock_token)
    return frozenset(tokens)
