"""
Follow-Up and Chain Scheduler.

Handles:
- Follow-ups: draw one candidate per triggered pool, queue it after a delay
- Combat follow-ups: queued relative to the resolving tick
- Chain bookkeeping: start/end roles, restart cooldowns
- Trigger counts: lifetime caps per request
- Due-event ordering shared by the picker and the dequeue step
"""

from __future__ import annotations
import logging
from typing import Iterable, Sequence

from ..catalog.schema import ChainRole, FollowUp, Option, Request
from .authority import apply_authority_boosts
from .rng import GameRandom
from .selector import select_weighted_candidate
from .state import AuthorityCommitContext, ChainStatus, GameState, ScheduledEvent

logger = logging.getLogger(__name__)


def draw_delay(delay_min: int, delay_max: int, rng: GameRandom) -> int:
    """delay_min + uniform integer in [0, delay_max - delay_min]."""
    return delay_min + rng.next_int(max(0, delay_max - delay_min) + 1)


def schedule_follow_ups(
    request: Request,
    option: Option,
    option_index: int,
    tick: int,
    scheduled_events: Sequence[ScheduledEvent],
    rng: GameRandom,
    authority_commit: int | None = None,
) -> list[ScheduledEvent]:
    """
    Queue one event per follow-up pool triggered by the chosen option.

    With a nonzero authority commit the option's boosts reweight the pool
    first, and events drawn from boosted candidates carry the commit context.
    """
    events = list(scheduled_events)
    check = option.authority_check
    boosting = bool(
        authority_commit
        and authority_commit > 0
        and check is not None
        and check.follow_up_boosts
    )
    boosted_ids = {b.target_request_id for b in check.follow_up_boosts} if boosting else set()

    for follow_up in request.follow_ups_for(option_index):
        candidates = follow_up.candidates
        if boosting:
            candidates = apply_authority_boosts(
                candidates, check.follow_up_boosts, authority_commit, check.max_commit, check.threshold
            )

        selected = select_weighted_candidate(candidates, rng)
        if selected is None:
            logger.debug("Follow-up pool of %s yielded no candidate", request.id)
            continue

        delay = draw_delay(follow_up.delay_min_ticks, follow_up.delay_max_ticks, rng)
        context = None
        if boosting and selected in boosted_ids:
            context = AuthorityCommitContext(committed=authority_commit, origin_request_id=request.id)

        events.append(ScheduledEvent(
            target_tick=tick + 1 + delay,
            request_id=selected,
            scheduled_at_tick=tick,
            authority_commit_context=context,
        ))
        logger.debug("Scheduled %s for tick %d (from %s)", selected, tick + 1 + delay, request.id)

    return events


def schedule_combat_follow_ups(
    follow_ups: Iterable[FollowUp],
    tick: int,
    scheduled_events: Sequence[ScheduledEvent],
    rng: GameRandom,
) -> list[ScheduledEvent]:
    """
    Queue combat outcome follow-ups at tick + delay.

    Every pool fires; trigger_on_option_index does not apply to outcomes.
    """
    events = list(scheduled_events)
    for follow_up in follow_ups:
        selected = select_weighted_candidate(follow_up.candidates, rng)
        if selected is None:
            continue
        delay = draw_delay(follow_up.delay_min_ticks, follow_up.delay_max_ticks, rng)
        events.append(ScheduledEvent(
            target_tick=tick + delay,
            request_id=selected,
            scheduled_at_tick=tick,
        ))
    return events


def update_chain_status(
    chain_status: dict[str, ChainStatus], request: Request, tick: int
) -> dict[str, ChainStatus]:
    if request.chain_id is None or request.chain_role is None:
        return chain_status
    if request.chain_role == ChainRole.START:
        return {**chain_status, request.chain_id: ChainStatus(active=True)}
    if request.chain_role == ChainRole.END:
        return {**chain_status, request.chain_id: ChainStatus(active=False, completed_tick=tick)}
    return chain_status


def increment_trigger_count(counts: dict[str, int], request_id: str) -> dict[str, int]:
    return {**counts, request_id: counts.get(request_id, 0) + 1}


def _fifo_key(event: ScheduledEvent) -> tuple[int, int]:
    return event.scheduled_at_tick, event.target_tick


def due_events_in_order(events: Iterable[ScheduledEvent], tick: int) -> list[ScheduledEvent]:
    """Due events, info priority first, each partition FIFO."""
    due = [e for e in events if e.target_tick <= tick]
    info = sorted((e for e in due if e.is_info), key=_fifo_key)
    normal = sorted((e for e in due if not e.is_info), key=_fifo_key)
    return info + normal


def remove_scheduled_event(
    events: Sequence[ScheduledEvent], request_id: str, tick: int
) -> list[ScheduledEvent]:
    """Drop the first due entry for request_id, in picker order."""
    for event in due_events_in_order(events, tick):
        if event.request_id == request_id:
            remaining = list(events)
            remaining.remove(event)
            return remaining
    return list(events)


def is_eligible_for_random_trigger(request: Request, state: GameState) -> bool:
    """
    Whether a request may be drawn from the random pool.

    Excludes non-random requests, capped requests, unmet requirements and
    chain starts whose chain is active or cooling down.
    """
    if not request.can_trigger_randomly:
        return False
    if state.is_at_trigger_cap(request):
        return False
    if not state.meets_requirements(request):
        return False
    if request.is_chain_start:
        status = state.chain_status.get(request.chain_id)
        if status is not None:
            if status.active:
                return False
            cooldown = request.chain_restart_cooldown_ticks or 0
            if status.completed_tick is not None and state.tick < status.completed_tick + cooldown:
                return False
    return True
