"""
Tests for the request picker.

Tests:
- Tier precedence (combat, scheduled, due combat, crisis, needs, random)
- Scheduled event filtering
- Random pool gating and no-repeat rule
- Exhausted pool fallbacks
"""

import logging

import pytest

from ..catalog import Catalog
from ..catalog.schema import Option, Request
from ..engine_core.picker import Picker, PickerInput
from ..engine_core.presentable import (
    CatalogRequest,
    CombatReport,
    CombatReportPayload,
    CombatRound,
    CombatStart,
    combat_report,
    encode_request_id,
)
from ..engine_core.rng import GameRandom
from ..engine_core.state import (
    ActiveCombat,
    GameState,
    NeedTracking,
    ScheduledCombat,
    ScheduledEvent,
    Stats,
)
from .conftest import ScriptedRandom


def _combat(combat_id="combat-0-0", due_tick=1, scheduled_at_tick=0) -> ScheduledCombat:
    return ScheduledCombat(
        combat_id=combat_id,
        origin_request_id="SKIRMISH",
        due_tick=due_tick,
        scheduled_at_tick=scheduled_at_tick,
        enemy_forces=2,
        committed_forces=3,
    )


def _event(request_id: str) -> Request:
    return Request(id=request_id, title=request_id, text=".", options=(Option("Ok"),))


class TestPrecedence:
    """Tests for tier precedence."""

    @pytest.fixture
    def picker(self, village_catalog):
        """Picker over the synthetic catalog."""
        return Picker(catalog=village_catalog, rng=GameRandom(11))

    def test_active_combat_first(self, picker):
        """An active combat always presents its round screen."""
        combat = ActiveCombat("combat-0-0", "SKIRMISH", 2, 3, 2, 3)
        data = PickerInput(
            tick=1,
            stats=Stats(fire_risk=90),
            active_combat=combat,
            scheduled_events=(ScheduledEvent(1, "FOLLOW_TARGET", 0),),
        )
        assert picker.pick(data) == CombatRound("combat-0-0")

    def test_scheduled_before_crisis(self, picker):
        """A due scheduled event beats a crisis."""
        data = PickerInput(
            tick=1,
            stats=Stats(fire_risk=90),
            scheduled_events=(ScheduledEvent(1, "FOLLOW_TARGET", 0),),
        )
        assert picker.pick(data) == CatalogRequest("FOLLOW_TARGET")

    def test_info_before_normal(self, picker):
        """Info priority wins over an earlier normal event."""
        data = PickerInput(
            tick=2,
            stats=Stats(),
            scheduled_events=(
                ScheduledEvent(1, "FOLLOW_TARGET", 0),
                ScheduledEvent(2, "INFO_OK", 1, priority="info"),
            ),
        )
        assert picker.pick(data) == CatalogRequest("INFO_OK")

    def test_future_event_not_picked(self, picker):
        """Events are only presented once due."""
        data = PickerInput(
            tick=0,
            stats=Stats(),
            last_request_id="CALM",
            scheduled_events=(ScheduledEvent(3, "FOLLOW_TARGET", 0),),
        )
        assert picker.pick(data) == CatalogRequest("PAY_TEN")

    def test_combat_report_returned(self, picker):
        """A queued report screen is presented."""
        report = combat_report("combat-0-0", CombatReportPayload("win", 0, 2))
        data = PickerInput(
            tick=1,
            stats=Stats(),
            scheduled_events=(ScheduledEvent(1, encode_request_id(report), 1, priority="info"),),
        )
        picked = picker.pick(data)
        assert isinstance(picked, CombatReport)
        assert picked.payload.outcome == "win"

    def test_due_combat(self, picker):
        """A due combat presents its start screen."""
        data = PickerInput(tick=1, stats=Stats(), scheduled_combats=(_combat(),))
        assert picker.pick(data) == CombatStart("combat-0-0")

    def test_oldest_due_combat_first(self, picker):
        """With several due combats the earliest scheduled starts first."""
        data = PickerInput(
            tick=5,
            stats=Stats(),
            scheduled_combats=(_combat("combat-2-0", 4, 2), _combat("combat-1-0", 5, 1)),
        )
        assert picker.pick(data) == CombatStart("combat-1-0")

    def test_crisis_preempts_due_combat(self, picker):
        """A crisis is presented before a due combat."""
        data = PickerInput(tick=1, stats=Stats(fire_risk=71), scheduled_combats=(_combat(),))
        assert picker.pick(data) == CatalogRequest("EVT_CRISIS_FIRE")

    def test_combat_not_yet_due(self, picker):
        """A combat still preparing is not started."""
        data = PickerInput(tick=0, stats=Stats(), last_request_id="CALM", scheduled_combats=(_combat(),))
        assert picker.pick(data) == CatalogRequest("PAY_TEN")


class TestScheduledFiltering:
    """Tests for scheduled events that cannot be presented."""

    @pytest.fixture
    def picker(self, village_catalog):
        """Picker over the synthetic catalog."""
        return Picker(catalog=village_catalog, rng=GameRandom(11))

    def test_unknown_id_skipped(self, picker, caplog):
        """Ids missing from the catalog are skipped with a warning."""
        data = PickerInput(
            tick=1,
            stats=Stats(),
            scheduled_events=(ScheduledEvent(1, "NO_SUCH_REQUEST", 0), ScheduledEvent(1, "FOLLOW_TARGET", 0)),
        )
        with caplog.at_level(logging.WARNING):
            assert picker.pick(data) == CatalogRequest("FOLLOW_TARGET")
        assert "NO_SUCH_REQUEST" in caplog.text

    def test_unmet_requirements_skipped(self, picker):
        """Scheduled requests with missing unlocks are skipped."""
        data = PickerInput(
            tick=1,
            stats=Stats(),
            last_request_id="CALM",
            scheduled_events=(ScheduledEvent(1, "MARKET_DAY", 0),),
        )
        assert picker.pick(data) == CatalogRequest("PAY_TEN")

    def test_capped_request_skipped(self):
        """Scheduled requests at their trigger cap are skipped."""
        once = Request(id="ONCE", title="Once", text=".", options=(Option("Ok"),), max_triggers=1)
        catalog = Catalog(event_requests=(once, _event("A"), _event("B")), need_definitions=())
        picker = Picker(catalog=catalog, rng=ScriptedRandom([0.0]))
        data = PickerInput(
            tick=1,
            stats=Stats(),
            scheduled_events=(ScheduledEvent(1, "ONCE", 0),),
            request_trigger_counts={"ONCE": 1},
        )
        assert picker.pick(data) == CatalogRequest("A")


class TestCrises:
    """Tests for the crisis tier."""

    @pytest.fixture
    def picker(self, village_catalog):
        """Picker over the synthetic catalog."""
        return Picker(catalog=village_catalog, rng=GameRandom(11))

    def test_fire(self, picker):
        """Fire risk above 70 presents the fire crisis."""
        assert picker.pick(PickerInput(tick=0, stats=Stats(fire_risk=71))) == CatalogRequest("EVT_CRISIS_FIRE")

    def test_fire_boundary(self, picker):
        """Fire risk of exactly 70 is not a crisis."""
        picked = picker.pick(PickerInput(tick=0, stats=Stats(fire_risk=70)))
        assert picked.request_id in ("PAY_TEN", "CALM")

    def test_disease_and_unrest(self, picker):
        """Low health and low satisfaction present their crises."""
        assert picker.pick(PickerInput(tick=0, stats=Stats(health=29))) == CatalogRequest("EVT_CRISIS_DISEASE")
        assert picker.pick(PickerInput(tick=0, stats=Stats(satisfaction=29))) == CatalogRequest("EVT_CRISIS_UNREST")

    def test_crisis_never_repeats(self, picker):
        """The previous crisis is skipped in favor of the next one."""
        data = PickerInput(tick=0, stats=Stats(fire_risk=90, health=10), last_request_id="EVT_CRISIS_FIRE")
        assert picker.pick(data) == CatalogRequest("EVT_CRISIS_DISEASE")

    def test_only_previous_crisis_falls_through(self, picker):
        """If the only crisis was just shown, a random event follows."""
        data = PickerInput(tick=0, stats=Stats(fire_risk=90), last_request_id="EVT_CRISIS_FIRE")
        assert picker.pick(data).request_id in ("PAY_TEN", "CALM")


class TestNeeds:
    """Tests for the needs tier."""

    @pytest.fixture
    def picker(self, village_catalog):
        """Picker over the synthetic catalog."""
        return Picker(catalog=village_catalog, rng=GameRandom(11))

    def test_required_need(self, picker):
        """An unlocked need without buildings is presented."""
        assert picker.pick(PickerInput(tick=0, stats=Stats(farmers=30))) == CatalogRequest("NEED_MARKETPLACE")

    def test_below_threshold(self, picker):
        """A locked need is not presented."""
        picked = picker.pick(PickerInput(tick=0, stats=Stats(farmers=29)))
        assert picked.request_id in ("PAY_TEN", "CALM")

    def test_cooldown(self, picker):
        """A declined need waits for its cooldown."""
        data = PickerInput(
            tick=3,
            stats=Stats(farmers=30),
            needs_tracking={"marketplace": NeedTracking(next_eligible_tick=6)},
        )
        assert picker.pick(data).request_id in ("PAY_TEN", "CALM")

    def test_satisfied(self, picker):
        """A need with enough buildings is not presented."""
        data = PickerInput(
            tick=0,
            stats=Stats(farmers=30),
            needs_tracking={"marketplace": NeedTracking(building_count=1)},
        )
        assert picker.pick(data).request_id in ("PAY_TEN", "CALM")

    def test_no_repeat(self, picker):
        """The need just answered falls through to the random pool."""
        data = PickerInput(tick=0, stats=Stats(farmers=30), last_request_id="NEED_MARKETPLACE")
        assert picker.pick(data).request_id in ("PAY_TEN", "CALM")


class TestRandomPool:
    """Tests for the random tier."""

    def test_never_repeats_previous(self, village_catalog):
        """The previous request is never drawn while others are eligible."""
        picker = Picker(catalog=village_catalog, rng=GameRandom(3))
        data = PickerInput(tick=0, stats=Stats(), last_request_id="CALM")
        assert {picker.pick(data).request_id for _ in range(30)} == {"PAY_TEN"}

    def test_uniform_over_eligible(self, village_catalog):
        """The draw indexes the eligible events in catalog order."""
        picker = Picker(catalog=village_catalog, rng=ScriptedRandom([0.9]))
        assert picker.pick(PickerInput(tick=0, stats=Stats())) == CatalogRequest("CALM")

    def test_requirements_unlock_events(self, village_catalog):
        """Events with met requirements join the pool."""
        picker = Picker(catalog=village_catalog, rng=ScriptedRandom([0.9]))
        data = PickerInput(
            tick=0, stats=Stats(), last_request_id="CALM", unlocks=frozenset({"need:marketplace"})
        )
        assert picker.pick(data) == CatalogRequest("MARKET_DAY")

    def test_authority_gating(self, village_catalog):
        """Events outside their authority window are excluded."""
        picker = Picker(catalog=village_catalog, rng=ScriptedRandom([0.9, 0.9]))
        low = PickerInput(tick=0, stats=Stats(authority=20), last_request_id="CALM")
        high = PickerInput(tick=0, stats=Stats(authority=60), last_request_id="CALM")
        assert picker.pick(low) == CatalogRequest("PAY_TEN")
        assert picker.pick(high) == CatalogRequest("NOBLE_AUDIENCE")

    def test_pick_from_state(self, village_catalog):
        """Picking from a state reads the same inputs."""
        picker = Picker(catalog=village_catalog, rng=GameRandom(1))
        state = GameState(stats=Stats(fire_risk=80))
        assert picker.pick_from_state(state) == CatalogRequest("EVT_CRISIS_FIRE")


class TestFallbacks:
    """Tests for exhausted random pools."""

    def test_previous_allowed(self, caplog):
        """With a single event the previous request may repeat."""
        catalog = Catalog(event_requests=(_event("ONLY"),), need_definitions=())
        picker = Picker(catalog=catalog, rng=GameRandom(1))
        with caplog.at_level(logging.WARNING):
            picked = picker.pick(PickerInput(tick=4, stats=Stats(), last_request_id="ONLY"))
        assert picked == CatalogRequest("ONLY")
        assert "allowing the previous request" in caplog.text

    def test_eligibility_ignored(self, caplog):
        """When nothing is eligible, ineligible events are drawn."""
        locked = Request(id="LOCKED", title="L", text=".", options=(Option("Ok"),), requires=("never",))
        catalog = Catalog(event_requests=(locked,), need_definitions=())
        picker = Picker(catalog=catalog, rng=GameRandom(1))
        with caplog.at_level(logging.WARNING):
            picked = picker.pick(PickerInput(tick=0, stats=Stats()))
        assert picked == CatalogRequest("LOCKED")
        assert "ignoring eligibility" in caplog.text

    def test_crises_allowed(self, caplog):
        """A catalog of crises only still yields a request."""
        catalog = Catalog(event_requests=(_event("EVT_CRISIS_FIRE"),), need_definitions=())
        picker = Picker(catalog=catalog, rng=GameRandom(1))
        with caplog.at_level(logging.WARNING):
            picked = picker.pick(PickerInput(tick=0, stats=Stats()))
        assert picked == CatalogRequest("EVT_CRISIS_FIRE")
        assert "allowing crisis events" in caplog.text

    def test_empty_catalog(self):
        """A catalog without events cannot pick anything."""
        picker = Picker(catalog=Catalog(need_definitions=()), rng=GameRandom(1))
        with pytest.raises(RuntimeError):
            picker.pick(PickerInput(tick=0, stats=Stats()))
