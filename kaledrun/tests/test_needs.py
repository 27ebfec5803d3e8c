"""
Tests for the needs tracker.

Tests:
- Unlock thresholds and required buildings
- Fulfilling and declining need requests
- Threshold crossing detection
- Unlock token sync
"""

from ..catalog.needs import NEED_DEFINITIONS
from ..engine_core.needs import (
    calculate_required_buildings,
    decline_need,
    detect_newly_unlocked_need,
    fulfill_need,
    is_need_on_cooldown,
    is_need_required,
    is_need_unlocked,
    sync_need_unlock_tokens,
)
from ..engine_core.state import NeedTracking, Needs, ScheduledEvent, initial_needs_tracking

MARKETPLACE = NEED_DEFINITIONS[0]
BREAD = NEED_DEFINITIONS[1]


class TestRequirements:
    """Tests for unlock and building requirements."""

    def test_unlock_threshold(self):
        """Marketplace unlocks at 30 farmers."""
        assert not is_need_unlocked(MARKETPLACE, 29)
        assert is_need_unlocked(MARKETPLACE, 30)

    def test_required_buildings(self):
        """One building at the threshold, one more per population step."""
        assert calculate_required_buildings(MARKETPLACE, 29) == 0
        assert calculate_required_buildings(MARKETPLACE, 30) == 1
        assert calculate_required_buildings(MARKETPLACE, 129) == 1
        assert calculate_required_buildings(MARKETPLACE, 130) == 2

    def test_is_required(self):
        """A need is required while buildings lag behind."""
        assert is_need_required(MARKETPLACE, NeedTracking(), 30)
        assert not is_need_required(MARKETPLACE, NeedTracking(building_count=1), 30)
        assert is_need_required(MARKETPLACE, NeedTracking(building_count=1), 130)

    def test_cooldown(self):
        """Cooldown lasts until next_eligible_tick."""
        assert is_need_on_cooldown(5, 6)
        assert not is_need_on_cooldown(6, 6)


class TestFulfillment:
    """Tests for fulfill_need and decline_need."""

    def test_first_fulfillment_schedules_info(self):
        """The first building queues the info screen for the next tick."""
        result = fulfill_need(initial_needs_tracking(), MARKETPLACE, farmers=30, tick=4)

        assert result.tracking["marketplace"].building_count == 1
        assert result.info_event == ScheduledEvent(
            target_tick=5,
            request_id="INFO_NEED_MARKETPLACE",
            scheduled_at_tick=4,
            priority="info",
        )

    def test_second_building_no_info(self):
        """Later buildings never queue the info screen again."""
        tracking = {**initial_needs_tracking(), "marketplace": NeedTracking(building_count=1)}
        result = fulfill_need(tracking, MARKETPLACE, farmers=130, tick=4)
        assert result.tracking["marketplace"].building_count == 2
        assert result.info_event is None

    def test_info_not_duplicated(self):
        """An already queued info screen is not queued twice."""
        queued = [ScheduledEvent(5, "INFO_NEED_MARKETPLACE", 4, priority="info")]
        result = fulfill_need(initial_needs_tracking(), MARKETPLACE, farmers=30, tick=4, scheduled_events=queued)
        assert result.info_event is None

    def test_input_not_mutated(self):
        """Tracking dicts are replaced, not modified."""
        tracking = initial_needs_tracking()
        fulfill_need(tracking, MARKETPLACE, farmers=30, tick=0)
        assert tracking["marketplace"].building_count == 0

    def test_decline_sets_cooldown(self):
        """Declining makes the need eligible again six ticks later."""
        tracking = decline_need(initial_needs_tracking(), "marketplace", tick=3)
        assert tracking["marketplace"] == NeedTracking(building_count=0, next_eligible_tick=9)


class TestUnlockDetection:
    """Tests for detect_newly_unlocked_need and unlock tokens."""

    def test_crossing_detected(self):
        """Growing past a threshold reports the need."""
        assert detect_newly_unlocked_need(Needs(), 29, 30, NEED_DEFINITIONS) == "marketplace"

    def test_no_crossing(self):
        """Staying on one side reports nothing."""
        assert detect_newly_unlocked_need(Needs(), 30, 31, NEED_DEFINITIONS) is None
        assert detect_newly_unlocked_need(Needs(), 28, 29, NEED_DEFINITIONS) is None

    def test_active_need_skipped(self):
        """An already active need is not reported."""
        assert detect_newly_unlocked_need(Needs(marketplace=True), 29, 30, NEED_DEFINITIONS) is None

    def test_first_in_order(self):
        """Crossing two thresholds at once reports the first need."""
        assert detect_newly_unlocked_need(Needs(), 29, 61, NEED_DEFINITIONS) == "marketplace"

    def test_token_from_building(self):
        """A building keeps the unlock token present."""
        tracking = {**initial_needs_tracking(), "marketplace": NeedTracking(building_count=1)}
        tokens = sync_need_unlock_tokens(Needs(), tracking, frozenset(), NEED_DEFINITIONS)
        assert "need:marketplace" in tokens

    def test_token_from_flag(self):
        """An active flag sets the token."""
        tokens = sync_need_unlock_tokens(Needs(beer=True), initial_needs_tracking(), frozenset(), NEED_DEFINITIONS)
        assert tokens == frozenset({"need:beer"})

    def test_token_removed(self):
        """Tokens disappear when neither flag nor building remain."""
        tokens = sync_need_unlock_tokens(
            Needs(), initial_needs_tracking(), frozenset({"need:marketplace", "other"}), NEED_DEFINITIONS
        )
        assert tokens == frozenset({"other"})
