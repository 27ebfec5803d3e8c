"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through Reducer.apply() or apply_action().

Design principles:
- Pure given (state, action, rng draws): the input state is never modified
- Validates before applying; a rejected action returns the prior state
- Returns ActionResult with success/failure
- Delegates to the combat, authority, needs and scheduler subsystems

Per-action order for a catalog request:
1. Option effects (combat commit, authority commit or plain pipeline)
2. Need bookkeeping, unlock tokens, chain status, trigger counts
3. "Request Decision" log, follow-ups, dequeue, need info screen
4. Bankruptcy check
5. Tickless requests stop here
6. Baseline economy, bread bonus, bankruptcy recheck
7. Authority checks due next tick, tick + 1, pick the next request
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace

from ..catalog import Catalog, default_catalog
from ..catalog.schema import Request, RequestCategory
from .action import Action, ActionResult, ActionType, ErrorCode
from .authority import create_pending_check, resolve_due_authority_checks, validate_authority_commit
from .combat import (
    create_scheduled_combat,
    finish_combat,
    resolve_round,
    start_combat,
    validate_combat_commit,
    validate_force_accounting,
    withdraw,
)
from .constants import (
    BANKRUPTCY_REASON,
    BREAD_BONUS_CHANCE,
    BREAD_BONUS_FARMERS,
    GOLD_FLOOR,
    GROWTH_HEALTH_DIVISOR,
    GROWTH_HEALTH_OFFSET,
    SOURCE_COMBAT_COMMIT,
    SOURCE_DECISION,
    SOURCE_GROWTH,
    SOURCE_TAX,
    TAX_PERCENT,
    TAX_SATISFACTION_OFFSET,
)
from .effect_pipeline import apply_option_with_modifiers
from .modifiers import NEED_MODIFIERS, Modifier
from .needs import decline_need, detect_newly_unlocked_need, fulfill_need, sync_need_unlock_tokens
from .picker import Picker, PickerInput
from .presentable import (
    STAT_LABELS,
    CatalogRequest,
    CombatReport,
    CombatRound,
    CombatStart,
    encode_request_id,
    option_count,
    parse_request_id,
    resolve_request,
)
from .rng import GameRandom
from .scheduler import (
    draw_delay,
    increment_trigger_count,
    remove_scheduled_event,
    schedule_follow_ups,
    update_chain_status,
)
from .state import AppliedChange, GameState, LogEntry, Stats

logger = logging.getLogger(__name__)

OPTION_FIGHT = 0
OPTION_WITHDRAW = 1


def baseline_income(stats: Stats) -> int:
    """Tax: 10% of farmers scaled by (satisfaction - 10) / 100, floored."""
    return stats.farmers * TAX_PERCENT * (stats.satisfaction - TAX_SATISFACTION_OFFSET) // 10000


def baseline_growth(stats: Stats) -> int:
    """Population growth: (health - 25) / 20, floored (may be negative)."""
    return (stats.health - GROWTH_HEALTH_OFFSET) // GROWTH_HEALTH_DIVISOR


def describe_changes(before: Stats, after: Stats) -> list[str]:
    """Human-readable stat changes, e.g. ["Gold -10"]."""
    lines = []
    for key, delta in after.diff(before).items():
        sign = "+" if delta > 0 else ""
        lines.append(f"{STAT_LABELS[key]} {sign}{delta}")
    return lines


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Owns the random source; all draws of a transition come from it, so a
    seeded reducer replays identically. The catalog is read-only.
    """
    catalog: Catalog = field(default_factory=default_catalog)
    rng: GameRandom = field(default_factory=GameRandom)
    modifiers: tuple[Modifier, ...] = NEED_MODIFIERS

    picker: Picker = field(init=False, repr=False)

    def __post_init__(self):
        self.picker = Picker(catalog=self.catalog, rng=self.rng)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error. On failure new_state
        is the unchanged input state.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            code, message = validation_error
            logger.warning("Rejected action: %s", message)
            return ActionResult.failure(message, error_code=code, state=state)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
                state=state,
            )

        try:
            return handler(state, action)
        except Exception as e:
            logger.error("Handler failed for %s: %s", state.current_request_id, e, exc_info=True)
            return ActionResult.failure(str(e), error_code=ErrorCode.HANDLER_ERROR, state=state)

    def reduce(self, state: GameState, action: Action) -> GameState:
        """Apply an action and return only the resulting state."""
        return self.apply(state, action).new_state

    def initial_state(self, initial_stats: Stats | None = None) -> GameState:
        """A fresh game with its first request already picked."""
        stats = (initial_stats or Stats()).clamped()
        state = GameState(stats=stats)
        state = state._copy_with(
            unlocks=sync_need_unlock_tokens(
                state.needs, state.needs_tracking, state.unlocks, self.catalog.need_definitions
            )
        )
        variant = self.picker.pick(PickerInput.from_state(state))
        return state._copy_with(current_request_id=encode_request_id(variant))

    # ------------------------------------------------------------------
    # Validation and dispatch
    # ------------------------------------------------------------------

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action is legal in the current state.

        Returns (error_code, message) if invalid, None if valid.
        """
        if state.game_over:
            return ErrorCode.GAME_OVER, f"Game is over: {state.game_over_reason}"

        if action.action_type == ActionType.CHOOSE_OPTION:
            index = action.payload.option_index
            if isinstance(index, bool) or not isinstance(index, int):
                return ErrorCode.INVALID_ACTION, f"Option index must be an integer, got {index!r}"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.CHOOSE_OPTION: self._handle_choose_option,
        }
        return handlers.get(action_type)

    def _handle_choose_option(self, state: GameState, action: Action) -> ActionResult:
        if state.current_request_id is None:
            return self._internal_error(state, "No current request to answer")

        variant = parse_request_id(state.current_request_id)
        index = action.payload.option_index
        count = option_count(variant, self.catalog)
        if count == 0:
            return self._internal_error(state, f"Current request not found: {state.current_request_id}")
        if not 0 <= index < count:
            return self._reject(state, f"Invalid option index {index} for {state.current_request_id}")

        if isinstance(variant, CombatStart):
            return self._handle_combat_start(state, variant)
        if isinstance(variant, CombatReport):
            return self._handle_combat_report(state)
        if isinstance(variant, CombatRound):
            return self._handle_combat_round(state, variant, index)
        return self._handle_request(state, variant, action)

    # ------------------------------------------------------------------
    # Combat screens (tickless)
    # ------------------------------------------------------------------

    def _handle_combat_start(self, state: GameState, variant: CombatStart) -> ActionResult:
        new_state = start_combat(state, variant.combat_id)
        if new_state is None:
            return self._internal_error(state, f"Scheduled combat not found: {variant.combat_id}")
        if not validate_force_accounting(new_state, f"Combat Start ({variant.combat_id})", state):
            return self._internal_error(state, "Negative land forces after combat start")

        new_state = self._present_next(new_state, answered_id=state.current_request_id)
        return ActionResult.success_with_state(new_state, changes=["The battle begins"])

    def _handle_combat_round(self, state: GameState, variant: CombatRound, index: int) -> ActionResult:
        combat = state.active_combat
        if combat is None or combat.combat_id != variant.combat_id:
            return self._internal_error(state, f"Active combat not found: {variant.combat_id}")

        if index == OPTION_WITHDRAW:
            new_state = withdraw(state, self.rng)
            context = f"Combat Withdraw ({combat.combat_id})"
        else:
            outcome = resolve_round(combat, self.rng)
            if outcome.outcome is None:
                new_state = state._copy_with(active_combat=outcome.combat)
            else:
                new_state = finish_combat(state, outcome.combat, outcome.outcome, self.rng)
            context = f"Combat Round ({combat.combat_id})"

        if not validate_force_accounting(new_state, context, state):
            return self._internal_error(state, f"Negative land forces after {context}")

        changes = describe_changes(state.stats, new_state.stats)
        new_state = self._present_next(new_state, answered_id=state.current_request_id)
        if new_state.stats.gold <= GOLD_FLOOR:
            # The battle report stays presented on the final screen
            new_state = self._bankrupt(new_state, state.current_request_id, advance_tick=False)
        return ActionResult.success_with_state(new_state, changes)

    def _handle_combat_report(self, state: GameState) -> ActionResult:
        events = remove_scheduled_event(state.scheduled_events, state.current_request_id, state.tick)
        new_state = state._copy_with(scheduled_events=events)
        new_state = self._present_next(new_state, answered_id=state.current_request_id)
        return ActionResult.success_with_state(new_state)

    # ------------------------------------------------------------------
    # Catalog requests
    # ------------------------------------------------------------------

    def _handle_request(self, state: GameState, variant: CatalogRequest, action: Action) -> ActionResult:
        request = self.catalog.get(variant.request_id)
        index = action.payload.option_index
        option = request.options[index]
        before = state.stats
        modifiers = self.modifiers if request.category == RequestCategory.EVENT else ()

        work = state
        entries: list[LogEntry] = []
        is_combat_commit = request.combat is not None and index == OPTION_FIGHT
        authority_commit = None

        if is_combat_commit:
            commit = action.payload.combat_commit
            error = validate_combat_commit(commit, before.land_forces)
            if error:
                return self._reject(state, error)

            combat_id, work = work.next_id("combat")
            delay = draw_delay(request.combat.prep_delay_min_ticks, request.combat.prep_delay_max_ticks, self.rng)
            scheduled = create_scheduled_combat(combat_id, request, commit, state.tick, delay)

            result = apply_option_with_modifiers(work, request, index, modifiers, self.rng)
            stats = replace(result.stats, land_forces=before.land_forces - commit)
            entries.append(LogEntry(
                tick=state.tick,
                request_id=request.id,
                option_text=option.text,
                source=SOURCE_COMBAT_COMMIT,
                deltas={"land_forces": -commit},
            ))
            work = work._copy_with(scheduled_combats=work.scheduled_combats + [scheduled])
            logger.info(
                "Committed %d land forces to %s, due at tick %d", commit, combat_id, scheduled.due_tick
            )

        elif option.authority_check is not None and action.payload.authority_commit is not None:
            authority_commit = action.payload.authority_commit
            check = option.authority_check
            error = validate_authority_commit(check, authority_commit, before.authority)
            if error:
                return self._reject(state, error)

            check_id, work = work.next_id("authority")
            pending = create_pending_check(check_id, request.id, index, authority_commit, check, state.tick)

            result = apply_option_with_modifiers(work, request, index, modifiers, self.rng)
            stats = result.stats.with_deltas({"authority": -authority_commit}).clamped()
            work = work._copy_with(pending_authority_checks=work.pending_authority_checks + [pending])
            logger.debug("Committed %d authority to %s", authority_commit, check_id)

        else:
            result = apply_option_with_modifiers(work, request, index, modifiers, self.rng)
            stats = result.stats

        needs = result.needs
        tracking = work.needs_tracking
        info_event = None
        need = self.catalog.need_for_request(request.id) if request.category == RequestCategory.NEED else None
        if need is not None:
            definition = self.catalog.need_definition(need)
            if option.effects.sets_need(need):
                fulfillment = fulfill_need(
                    tracking, definition, before.farmers, state.tick, work.scheduled_events
                )
                tracking = fulfillment.tracking
                info_event = fulfillment.info_event
            else:
                tracking = decline_need(tracking, need, state.tick)

        unlocks = sync_need_unlock_tokens(needs, tracking, work.unlocks, self.catalog.need_definitions)
        chain_status = update_chain_status(work.chain_status, request, state.tick)
        trigger_counts = increment_trigger_count(work.request_trigger_counts, request.id)

        if not is_combat_commit:
            deltas = stats.diff(before)
            if deltas:
                need_changes = tuple(c for c in result.applied_changes if c.source.startswith("need:"))
                entries.append(LogEntry(
                    tick=state.tick,
                    request_id=request.id,
                    option_text=option.text,
                    source=SOURCE_DECISION,
                    deltas=deltas,
                    applied_changes=need_changes,
                ))

        events = schedule_follow_ups(
            request, option, index, state.tick, work.scheduled_events, self.rng, authority_commit
        )
        events = remove_scheduled_event(events, request.id, state.tick)
        if info_event is not None:
            events.append(info_event)

        work = work._copy_with(
            stats=stats,
            needs=needs,
            needs_tracking=tracking,
            unlocks=unlocks,
            chain_status=chain_status,
            request_trigger_counts=trigger_counts,
            scheduled_events=events,
            log=work.log + entries,
            newly_unlocked_need=None,
        )

        if is_combat_commit and not validate_force_accounting(work, f"Combat Commit ({request.id})", state):
            return self._internal_error(state, "Negative land forces after combat commit")

        changes = [f"{request.title or request.id}: {option.text}"] + describe_changes(before, stats)

        if stats.gold <= GOLD_FLOOR:
            return ActionResult.success_with_state(
                self._bankrupt(work, request.id, advance_tick=True), changes
            )

        if not request.advances_tick:
            work = self._present_next(work, answered_id=request.id)
            return ActionResult.success_with_state(work, changes)

        work = self._apply_baseline(work, request.id)
        if work.stats.gold <= GOLD_FLOOR:
            return ActionResult.success_with_state(
                self._bankrupt(work, request.id, advance_tick=True), changes
            )

        work = resolve_due_authority_checks(work, state.tick + 1, self.rng)
        work = work._copy_with(tick=state.tick + 1)
        work = self._present_next(work, answered_id=request.id)
        return ActionResult.success_with_state(work, changes)

    def _apply_baseline(self, state: GameState, request_id: str) -> GameState:
        """Tax income, population growth and the bread bonus."""
        before = state.stats
        entries = []

        after_tax = before.with_deltas({"gold": baseline_income(before)}).clamped()
        if after_tax.gold != before.gold:
            entries.append(LogEntry(
                tick=state.tick,
                request_id=request_id,
                option_text="",
                source=SOURCE_TAX,
                deltas=after_tax.diff(before),
            ))

        after_growth = after_tax.with_deltas({"farmers": baseline_growth(before)}).clamped()
        if after_growth.farmers != after_tax.farmers:
            entries.append(LogEntry(
                tick=state.tick,
                request_id=request_id,
                option_text="",
                source=SOURCE_GROWTH,
                deltas=after_growth.diff(after_tax),
            ))

        newly_unlocked = detect_newly_unlocked_need(
            state.needs, before.farmers, after_growth.farmers, self.catalog.need_definitions
        )

        stats = after_growth
        if state.needs.bread and self.rng.chance(BREAD_BONUS_CHANCE):
            stats = after_growth.with_deltas({"farmers": BREAD_BONUS_FARMERS}).clamped()
            entries.append(LogEntry(
                tick=state.tick,
                request_id=request_id,
                option_text="",
                source=SOURCE_GROWTH,
                deltas=stats.diff(after_growth),
                applied_changes=(
                    AppliedChange(
                        "farmers", BREAD_BONUS_FARMERS, "need:bread",
                        "Bread production boosted population growth",
                    ),
                ),
            ))

        if newly_unlocked:
            logger.info("Need unlocked at %d farmers: %s", stats.farmers, newly_unlocked)

        return state._copy_with(
            stats=stats,
            log=state.log + entries,
            newly_unlocked_need=newly_unlocked,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _present_next(self, state: GameState, answered_id: str) -> GameState:
        """Pick the next request, remembering the one just answered."""
        state = state._copy_with(last_request_id=answered_id)
        variant = self.picker.pick(PickerInput.from_state(state))
        return state._copy_with(current_request_id=encode_request_id(variant))

    def _bankrupt(self, state: GameState, answered_id: str, advance_tick: bool) -> GameState:
        logger.info("Game over at tick %d: gold %s", state.tick, state.stats.gold)
        return state._copy_with(
            tick=state.tick + 1 if advance_tick else state.tick,
            game_over=True,
            game_over_reason=BANKRUPTCY_REASON,
            last_request_id=answered_id,
        )

    def _reject(self, state: GameState, message: str) -> ActionResult:
        logger.warning("Invalid action on %s: %s", state.current_request_id, message)
        return ActionResult.failure(message, error_code=ErrorCode.INVALID_ACTION, state=state)

    def _internal_error(self, state: GameState, message: str) -> ActionResult:
        logger.error(message, stack_info=True)
        return ActionResult.failure(message, error_code=ErrorCode.INTERNAL_ERROR, state=state)


def apply_action(
    state: GameState,
    action: Action,
    rng: GameRandom,
    catalog: Catalog | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(catalog=catalog or default_catalog(), rng=rng)
    return reducer.apply(state, action)


def initialize_game(
    catalog: Catalog | None = None,
    rng: GameRandom | None = None,
    initial_stats: Stats | None = None,
) -> GameState:
    """Create a new game at tick 0 with its first request picked."""
    reducer = Reducer(catalog=catalog or default_catalog(), rng=rng or GameRandom())
    return reducer.initial_state(initial_stats)


def get_current_request(state: GameState, catalog: Catalog | None = None) -> Request | None:
    """The presentable request for state.current_request_id, synthetic screens included."""
    if state.current_request_id is None:
        return None
    return resolve_request(parse_request_id(state.current_request_id), state, catalog or default_catalog())
