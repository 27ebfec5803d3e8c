"""
Request Picker - Select the next request to present.

Strict precedence, first tier with a result wins:
1. Active combat -> combat round
2. Due scheduled events (info priority first, FIFO within a priority)
3. Due scheduled combats -> battle begins (a crisis preempts it)
4. Crises: fire, disease, unrest (never the previous request)
5. Required needs
6. Random event pool

The random tier has relaxed fallbacks that only trigger when the catalog
is exhausted; validate_catalog rules this out for well-formed content.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from ..catalog import Catalog
from ..catalog.schema import CRISIS_DISEASE_ID, CRISIS_FIRE_ID, CRISIS_UNREST_ID, Request
from .constants import (
    CRISIS_FIRE_RISK_ABOVE,
    CRISIS_HEALTH_BELOW,
    CRISIS_SATISFACTION_BELOW,
)
from .needs import is_need_on_cooldown, is_need_required, is_need_unlocked
from .presentable import (
    CatalogRequest,
    CombatReport,
    CombatRound,
    CombatStart,
    PresentableRequest,
    parse_request_id,
)
from .rng import GameRandom
from .scheduler import due_events_in_order, is_eligible_for_random_trigger
from .selector import select_uniform
from .state import (
    ActiveCombat,
    ChainStatus,
    GameState,
    NeedTracking,
    Needs,
    ScheduledCombat,
    ScheduledEvent,
    Stats,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickerInput:
    """Everything the picker reads."""
    tick: int
    stats: Stats
    needs: Needs = field(default_factory=Needs)
    needs_tracking: dict[str, NeedTracking] = field(default_factory=dict)
    last_request_id: str | None = None
    scheduled_events: tuple[ScheduledEvent, ...] = ()
    scheduled_combats: tuple[ScheduledCombat, ...] = ()
    active_combat: ActiveCombat | None = None
    chain_status: dict[str, ChainStatus] = field(default_factory=dict)
    request_trigger_counts: dict[str, int] = field(default_factory=dict)
    unlocks: frozenset[str] = frozenset()

    @classmethod
    def from_state(cls, state: GameState) -> PickerInput:
        return cls(
            tick=state.tick,
            stats=state.stats,
            needs=state.needs,
            needs_tracking=state.needs_tracking,
            last_request_id=state.last_request_id,
            scheduled_events=tuple(state.scheduled_events),
            scheduled_combats=tuple(state.scheduled_combats),
            active_combat=state.active_combat,
            chain_status=state.chain_status,
            request_trigger_counts=state.request_trigger_counts,
            unlocks=state.unlocks,
        )

    def trigger_count(self, request_id: str) -> int:
        return self.request_trigger_counts.get(request_id, 0)

    def is_at_trigger_cap(self, request: Request) -> bool:
        return request.max_triggers is not None and self.trigger_count(request.id) >= request.max_triggers

    def meets_requirements(self, request: Request) -> bool:
        return all(token in self.unlocks for token in request.requires)


@dataclass
class Picker:
    """
    Picks the next presentable request.

    Stateless apart from the random source; the catalog is read-only.
    """
    catalog: Catalog
    rng: GameRandom

    def pick(self, data: PickerInput) -> PresentableRequest:
        if data.active_combat is not None:
            return CombatRound(combat_id=data.active_combat.combat_id)

        scheduled = self._pick_scheduled_event(data)
        if scheduled is not None:
            return scheduled

        due_combat = self._due_combat(data)
        crisis = self._pick_crisis(data)
        if due_combat is not None:
            if crisis is not None:
                return CatalogRequest(crisis)
            return CombatStart(combat_id=due_combat.combat_id)

        if crisis is not None:
            return CatalogRequest(crisis)

        need = self._pick_need(data)
        if need is not None:
            return CatalogRequest(need)

        return CatalogRequest(self._pick_random_event(data))

    def pick_from_state(self, state: GameState) -> PresentableRequest:
        return self.pick(PickerInput.from_state(state))

    # ------------------------------------------------------------------

    def _pick_scheduled_event(self, data: PickerInput) -> PresentableRequest | None:
        for event in due_events_in_order(data.scheduled_events, data.tick):
            variant = parse_request_id(event.request_id)
            if isinstance(variant, CombatReport):
                return variant
            if not isinstance(variant, CatalogRequest):
                logger.warning("Skipping unexpected scheduled id %s", event.request_id)
                continue

            request = self.catalog.get(variant.request_id)
            if request is None:
                logger.warning("Skipping scheduled request missing from catalog: %s", event.request_id)
                continue
            if data.is_at_trigger_cap(request):
                continue
            if not data.meets_requirements(request):
                continue
            return variant
        return None

    def _due_combat(self, data: PickerInput) -> ScheduledCombat | None:
        due = [c for c in data.scheduled_combats if c.due_tick <= data.tick]
        if not due:
            return None
        return min(due, key=lambda c: (c.scheduled_at_tick, c.due_tick))

    def _pick_crisis(self, data: PickerInput) -> str | None:
        stats = data.stats
        conditions = (
            (stats.fire_risk > CRISIS_FIRE_RISK_ABOVE, CRISIS_FIRE_ID),
            (stats.health < CRISIS_HEALTH_BELOW, CRISIS_DISEASE_ID),
            (stats.satisfaction < CRISIS_SATISFACTION_BELOW, CRISIS_UNREST_ID),
        )
        for triggered, crisis_id in conditions:
            if triggered and crisis_id != data.last_request_id and crisis_id in self.catalog:
                return crisis_id
        return None

    def _pick_need(self, data: PickerInput) -> str | None:
        farmers = data.stats.farmers
        eligible = []
        for definition in self.catalog.need_definitions:
            if not is_need_unlocked(definition, farmers):
                continue
            tracking = data.needs_tracking.get(definition.need, NeedTracking())
            if is_need_on_cooldown(data.tick, tracking.next_eligible_tick):
                continue
            if is_need_required(definition, tracking, farmers) and definition.request_id in self.catalog:
                eligible.append(definition.request_id)

        available = [rid for rid in eligible if rid != data.last_request_id]
        # Only the previous request is eligible: fall through to the random pool
        return select_uniform(available, self.rng)

    def _is_authority_gated(self, request: Request, authority: float) -> bool:
        if request.authority_min is not None and authority < request.authority_min:
            return True
        if request.authority_max is not None and authority > request.authority_max:
            return True
        return False

    def _pick_random_event(self, data: PickerInput) -> str:
        crisis_ids = set(self.catalog.crisis_ids)
        non_crisis = [r for r in self.catalog.event_requests if r.id not in crisis_ids]
        eligible = [
            r for r in non_crisis
            if is_eligible_for_random_trigger(r, data)
            and not self._is_authority_gated(r, data.stats.authority)
        ]

        preferred = [r.id for r in eligible if r.id != data.last_request_id]
        if preferred:
            return select_uniform(preferred, self.rng)

        fallbacks = (
            ("allowing the previous request", [r.id for r in eligible]),
            ("ignoring eligibility", [r.id for r in non_crisis]),
            ("allowing crisis events", self.catalog.event_ids()),
        )
        for level, pool in fallbacks:
            if pool:
                logger.warning("Random event pool exhausted at tick %d, %s", data.tick, level)
                return select_uniform(pool, self.rng)

        raise RuntimeError("Catalog has no event requests")
