"""
Authority Checks - Wager authority on an uncertain outcome.

Lifecycle:
1. Commit: the amount is validated and deducted immediately; a pending
   check is queued to resolve exactly one tick later
2. Resolve: success is decided, the refund credited, extra loss and
   outcome effects applied, and the feedback request scheduled

A check without on_success/on_failure is "boost-only": the commit only
reweights follow-ups and is refunded in full at resolution.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Sequence

from ..catalog.schema import (
    AuthorityCheck,
    AuthorityFollowUpBoost,
    BoostType,
    Effect,
    WeightedCandidate,
)
from .constants import DEFAULT_BOOST_STEPS, SOURCE_AUTHORITY_CHECK
from .effect_pipeline import apply_effect, base_changes
from .rng import GameRandom
from .state import (
    PRIORITY_NORMAL,
    AppliedChange,
    GameState,
    LogEntry,
    PendingAuthorityCheck,
    ScheduledEvent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorityCheckResult:
    success: bool
    committed: int
    refunded: int
    total_loss: int
    applied_effects: Effect | None = None
    feedback_request_id: str | None = None
    boost_only: bool = False


def validate_authority_commit(check: AuthorityCheck, committed, available: float) -> str | None:
    """Return an error message if the commit is not allowed, None if valid."""
    if isinstance(committed, bool) or not isinstance(committed, int):
        return f"Authority commit must be an integer, got {committed!r}"
    if committed < check.min_commit or committed > check.max_commit:
        return (
            f"Authority commit {committed} outside allowed range "
            f"[{check.min_commit}, {check.max_commit}]"
        )
    if committed > available:
        return f"Authority commit {committed} exceeds available authority {available}"
    return None


def create_pending_check(
    check_id: str,
    origin_request_id: str,
    option_index: int,
    committed: int,
    config: AuthorityCheck,
    tick: int,
) -> PendingAuthorityCheck:
    return PendingAuthorityCheck(
        check_id=check_id,
        initiated_tick=tick,
        resolve_tick=tick + 1,
        origin_request_id=origin_request_id,
        option_index=option_index,
        committed=committed,
        config=config,
    )


def resolve_authority_check(check: PendingAuthorityCheck, rng: GameRandom) -> AuthorityCheckResult:
    """
    Decide the outcome of a pending check.

    - committed >= threshold (including threshold 0): success, no draw
    - otherwise success with probability committed / threshold
    """
    config = check.config
    committed = check.committed

    if config.is_boost_only:
        return AuthorityCheckResult(
            success=True,
            committed=committed,
            refunded=committed,
            total_loss=0,
            boost_only=True,
        )

    if config.threshold <= 0 or committed >= config.threshold:
        success = True
    else:
        success = rng.chance(committed / config.threshold)

    refund_percent = config.refund_on_success_percent if success else 0
    refunded = (committed * refund_percent) // 100
    total_loss = committed - refunded
    if not success:
        total_loss += config.extra_loss_on_failure

    return AuthorityCheckResult(
        success=success,
        committed=committed,
        refunded=refunded,
        total_loss=total_loss,
        applied_effects=config.on_success if success else config.on_failure,
        feedback_request_id=(
            config.success_feedback_request_id if success else config.failure_feedback_request_id
        ),
    )


def boost_increase(
    boost: AuthorityFollowUpBoost, committed: int, max_commit: int, threshold: int
) -> float:
    """Weight added to a boost's target candidate (never negative)."""
    commit_ratio = committed / max_commit if max_commit > 0 else 0

    if boost.boost_type == BoostType.LINEAR:
        increase = commit_ratio * boost.boost_value
    elif boost.boost_type == BoostType.THRESHOLD:
        increase = boost.boost_value if committed >= threshold else 0
    elif boost.boost_type == BoostType.STEPPED:
        steps = max(1, boost.steps if boost.steps is not None else DEFAULT_BOOST_STEPS)
        increase = math.floor(commit_ratio / (1 / steps)) * boost.boost_value
    else:
        logger.warning("Unknown boost type %r", boost.boost_type)
        increase = 0
    return max(0, increase)


def apply_authority_boosts(
    candidates: Sequence[WeightedCandidate],
    boosts: Sequence[AuthorityFollowUpBoost],
    committed: int,
    max_commit: int,
    threshold: int,
) -> tuple[WeightedCandidate, ...]:
    """Return candidates with boosted weights; the input is not modified."""
    weights = {c.request_id: c.weight for c in candidates}

    for boost in boosts:
        if boost.target_request_id not in weights:
            logger.warning("Authority boost target not among candidates: %s", boost.target_request_id)
            continue
        increase = boost_increase(boost, committed, max_commit, threshold)
        if increase > 0:
            logger.debug(
                "Authority boost %s: +%.2f weight (%s, committed %d/%d)",
                boost.target_request_id, increase, boost.boost_type.value, committed, max_commit,
            )
        weights[boost.target_request_id] += increase

    return tuple(WeightedCandidate(c.request_id, weights[c.request_id]) for c in candidates)


def _result_changes(result: AuthorityCheckResult, extra_loss: int) -> list[AppliedChange]:
    changes = []
    if result.refunded:
        changes.append(AppliedChange("authority", result.refunded, "authority:refund"))
    if extra_loss:
        changes.append(AppliedChange("authority", -extra_loss, "authority:extra_loss"))
    if result.applied_effects is not None:
        source = "authority:success" if result.success else "authority:failure"
        changes.extend(
            AppliedChange(c.stat, c.amount, source) for c in base_changes(result.applied_effects)
        )
    return changes


def resolve_due_authority_checks(state: GameState, resolve_at: int, rng: GameRandom) -> GameState:
    """
    Resolve every pending check due at or before resolve_at.

    Checks are resolved in the order they were committed. Feedback requests
    are scheduled for resolve_at with normal priority.
    """
    due = [c for c in state.pending_authority_checks if c.resolve_tick <= resolve_at]
    if not due:
        return state

    stats = state.stats
    needs = state.needs
    scheduled_events = list(state.scheduled_events)
    log_entries = []

    for check in due:
        result = resolve_authority_check(check, rng)
        extra_loss = 0 if result.success else check.config.extra_loss_on_failure

        before = stats
        stats = stats.with_deltas({"authority": result.refunded - extra_loss})
        stats, needs = apply_effect(stats, needs, result.applied_effects)

        if result.feedback_request_id:
            scheduled_events.append(ScheduledEvent(
                target_tick=resolve_at,
                request_id=result.feedback_request_id,
                scheduled_at_tick=state.tick,
                priority=PRIORITY_NORMAL,
            ))

        outcome = "Refund" if result.boost_only else ("Success" if result.success else "Failure")
        log_entries.append(LogEntry(
            tick=state.tick,
            request_id=check.origin_request_id,
            option_text=f"{outcome} (committed {check.committed})",
            source=SOURCE_AUTHORITY_CHECK,
            deltas=stats.diff(before),
            applied_changes=tuple(_result_changes(result, extra_loss)),
        ))
        logger.info(
            "Authority check %s resolved: %s, committed=%d refunded=%d loss=%d",
            check.check_id, outcome.lower(), result.committed, result.refunded, result.total_loss,
        )

    remaining = [c for c in state.pending_authority_checks if c.resolve_tick > resolve_at]
    return state._copy_with(
        stats=stats,
        needs=needs,
        scheduled_events=scheduled_events,
        pending_authority_checks=remaining,
        log=state.log + log_entries,
    )
