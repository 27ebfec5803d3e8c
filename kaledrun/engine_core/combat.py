"""
Combat - Scheduled, round-based battles with reserved forces.

States per combat:
    Scheduled -> Active -> Won | Lost | Withdrawn

- Commit: forces leave the available pool and are reserved in a
  ScheduledCombat due after a random preparation delay
- Start: the scheduled combat becomes the active combat (tickless)
- Round: min(player, enemy) duels of one die each; higher roll wins the
  duel, ties cost nothing (tickless)
- End: survivors return, outcome effects apply, outcome follow-ups are
  queued, and a report screen is queued with info priority

Force accounting: available + reserved (scheduled) + remaining (active)
never increases through combat and available forces are never negative.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from ..catalog.schema import Request
from .constants import SOURCE_COMBAT_OUTCOME
from .effect_pipeline import apply_effect, base_changes
from .presentable import (
    OUTCOME_LOSE,
    OUTCOME_WIN,
    OUTCOME_WITHDRAW,
    CombatReport,
    CombatReportPayload,
    combat_report,
    encode_request_id,
)
from .rng import GameRandom
from .scheduler import schedule_combat_follow_ups
from .state import (
    PRIORITY_INFO,
    ActiveCombat,
    AppliedChange,
    GameState,
    LogEntry,
    RoundResult,
    ScheduledCombat,
    ScheduledEvent,
    Stats,
)

logger = logging.getLogger(__name__)

OUTCOME_LABELS = {
    OUTCOME_WIN: "Victory",
    OUTCOME_LOSE: "Defeat",
    OUTCOME_WITHDRAW: "Withdrawal",
}


@dataclass(frozen=True)
class ForceAccounting:
    available: int
    reserved_scheduled: int
    reserved_active: int

    @property
    def total(self) -> int:
        return self.available + self.reserved_scheduled + self.reserved_active


@dataclass(frozen=True)
class RoundOutcome:
    combat: ActiveCombat
    outcome: str | None = None  # None while the combat continues


def force_accounting(state: GameState) -> ForceAccounting:
    return ForceAccounting(
        available=state.stats.land_forces,
        reserved_scheduled=sum(c.committed_forces for c in state.scheduled_combats),
        reserved_active=state.active_combat.committed_remaining if state.active_combat else 0,
    )


def validate_force_accounting(
    state: GameState, context: str, previous: GameState | None = None
) -> bool:
    """
    Check the force invariants after a combat transition.

    Returns False when available forces are negative. An increase of the
    total is logged but not treated as fatal.
    """
    current = force_accounting(state)
    before = force_accounting(previous) if previous is not None else None
    logger.debug(
        "Force accounting at %s: available=%d scheduled=%d active=%d total=%d previous=%s",
        context, current.available, current.reserved_scheduled, current.reserved_active,
        current.total, before.total if before else "n/a",
    )

    if current.available < 0:
        logger.error(
            "Negative land forces at %s: %d", context, current.available, stack_info=True
        )
        return False

    if before is not None and current.total > before.total:
        logger.warning(
            "Total forces increased at %s: %d -> %d", context, before.total, current.total
        )
    return True


def validate_combat_commit(combat_commit, available: int) -> str | None:
    """Return an error message if the commit is not allowed, None if valid."""
    if combat_commit is None:
        return "Combat option requires a combat commit"
    if isinstance(combat_commit, bool) or not isinstance(combat_commit, int):
        return f"Combat commit must be an integer, got {combat_commit!r}"
    if combat_commit < 1:
        return f"Combat commit must be at least 1, got {combat_commit}"
    if combat_commit > available:
        return f"Combat commit {combat_commit} exceeds available land forces {available}"
    return None


def create_scheduled_combat(
    combat_id: str, request: Request, combat_commit: int, tick: int, delay: int
) -> ScheduledCombat:
    combat = request.combat
    return ScheduledCombat(
        combat_id=combat_id,
        origin_request_id=request.id,
        due_tick=tick + delay,
        scheduled_at_tick=tick,
        enemy_forces=combat.enemy_forces,
        committed_forces=combat_commit,
        on_win=combat.on_win,
        on_lose=combat.on_lose,
        follow_ups_on_win=combat.follow_ups_on_win,
        follow_ups_on_lose=combat.follow_ups_on_lose,
    )


def start_combat(state: GameState, combat_id: str) -> GameState | None:
    """Move a scheduled combat to active. None if it is not scheduled."""
    scheduled = next((c for c in state.scheduled_combats if c.combat_id == combat_id), None)
    if scheduled is None:
        return None

    active = ActiveCombat(
        combat_id=scheduled.combat_id,
        origin_request_id=scheduled.origin_request_id,
        enemy_remaining=scheduled.enemy_forces,
        committed_remaining=scheduled.committed_forces,
        initial_enemy_forces=scheduled.enemy_forces,
        initial_committed_forces=scheduled.committed_forces,
        on_win=scheduled.on_win,
        on_lose=scheduled.on_lose,
        follow_ups_on_win=scheduled.follow_ups_on_win,
        follow_ups_on_lose=scheduled.follow_ups_on_lose,
    )
    logger.info(
        "Combat %s begins: %d committed vs %d enemies",
        combat_id, active.committed_remaining, active.enemy_remaining,
    )
    return state._copy_with(
        active_combat=active,
        scheduled_combats=[c for c in state.scheduled_combats if c.combat_id != combat_id],
    )


def resolve_round(combat: ActiveCombat, rng: GameRandom) -> RoundOutcome:
    """
    Fight one round.

    Both sides reaching zero together counts as a loss for the player.
    """
    duels = min(combat.committed_remaining, combat.enemy_remaining)
    player_losses = 0
    enemy_losses = 0
    for _ in range(duels):
        player_roll = rng.roll_die()
        enemy_roll = rng.roll_die()
        if player_roll > enemy_roll:
            enemy_losses += 1
        elif enemy_roll > player_roll:
            player_losses += 1

    committed_remaining = max(0, combat.committed_remaining - player_losses)
    enemy_remaining = max(0, combat.enemy_remaining - enemy_losses)
    updated = ActiveCombat(
        combat_id=combat.combat_id,
        origin_request_id=combat.origin_request_id,
        enemy_remaining=enemy_remaining,
        committed_remaining=committed_remaining,
        initial_enemy_forces=combat.initial_enemy_forces,
        initial_committed_forces=combat.initial_committed_forces,
        round=combat.round + 1,
        last_round=RoundResult(player_losses=player_losses, enemy_losses=enemy_losses),
        on_win=combat.on_win,
        on_lose=combat.on_lose,
        follow_ups_on_win=combat.follow_ups_on_win,
        follow_ups_on_lose=combat.follow_ups_on_lose,
    )

    if committed_remaining <= 0:
        outcome = OUTCOME_LOSE
    elif enemy_remaining <= 0:
        outcome = OUTCOME_WIN
    else:
        outcome = None
    return RoundOutcome(combat=updated, outcome=outcome)


def build_combat_report(
    combat: ActiveCombat, outcome: str, stats_before: Stats, stats_after: Stats
) -> CombatReport:
    payload = CombatReportPayload(
        outcome=outcome,
        player_losses=combat.initial_committed_forces - combat.committed_remaining,
        enemy_losses=combat.initial_enemy_forces - combat.enemy_remaining,
        stat_deltas=stats_after.diff(stats_before),
    )
    return combat_report(combat.combat_id, payload)


def finish_combat(state: GameState, combat: ActiveCombat, outcome: str, rng: GameRandom) -> GameState:
    """
    Apply a terminal outcome and clear the active combat.

    Survivors return on a win or withdrawal. A withdrawal otherwise counts
    as a loss: on_lose effects and follow-ups apply.
    """
    won = outcome == OUTCOME_WIN
    survivors = combat.committed_remaining if outcome in (OUTCOME_WIN, OUTCOME_WITHDRAW) else 0
    effect = combat.on_win if won else combat.on_lose
    follow_ups = combat.follow_ups_on_win if won else combat.follow_ups_on_lose

    stats_before = state.stats
    stats, needs = apply_effect(state.stats.with_deltas({"land_forces": survivors}), state.needs, effect)

    events = schedule_combat_follow_ups(follow_ups, state.tick, state.scheduled_events, rng)
    report = build_combat_report(combat, outcome, stats_before, stats)
    events.append(ScheduledEvent(
        target_tick=state.tick,
        request_id=encode_request_id(report),
        scheduled_at_tick=state.tick,
        priority=PRIORITY_INFO,
    ))

    changes = []
    if survivors:
        changes.append(AppliedChange("land_forces", survivors, "combat:survivors"))
    if effect is not None:
        changes.extend(AppliedChange(c.stat, c.amount, f"combat:{outcome}") for c in base_changes(effect))
    entry = LogEntry(
        tick=state.tick,
        request_id=combat.origin_request_id,
        option_text=OUTCOME_LABELS[outcome],
        source=SOURCE_COMBAT_OUTCOME,
        deltas=stats.diff(stats_before),
        applied_changes=tuple(changes),
    )

    logger.info(
        "Combat %s ended: %s, survivors returned=%d, player losses=%d, enemy losses=%d",
        combat.combat_id, outcome, survivors,
        report.payload.player_losses, report.payload.enemy_losses,
    )
    return state._copy_with(
        stats=stats,
        needs=needs,
        active_combat=None,
        scheduled_events=events,
        log=state.log + [entry],
    )


def withdraw(state: GameState, rng: GameRandom) -> GameState:
    """Leave the active combat, keeping the surviving forces."""
    return finish_combat(state, state.active_combat, OUTCOME_WITHDRAW, rng)
