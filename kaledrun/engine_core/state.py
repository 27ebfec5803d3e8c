"""
Game State - The aggregate root the reducer operates on.

Design principles:
- Immutable-friendly: all mutations return new state
- Leaf records (stats, log entries, queued work) are frozen dataclasses
- Collections on GameState are replaced, never mutated in place
- Comparable: two states from the same seed and actions compare equal
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Any

from ..catalog.schema import (
    NEED_KEYS,
    STAT_KEYS,
    AuthorityCheck,
    Effect,
    FollowUp,
    Request,
)
from .constants import (
    AUTHORITY_MAX,
    AUTHORITY_MIN,
    GOLD_FLOOR,
    PERCENT_MAX,
    PERCENT_MIN,
    STARTING_STATS,
)

PRIORITY_INFO = "info"
PRIORITY_NORMAL = "normal"


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class Stats:
    """Village statistics. Every transition ends with clamped()."""
    gold: int = STARTING_STATS["gold"]
    satisfaction: int = STARTING_STATS["satisfaction"]
    health: int = STARTING_STATS["health"]
    fire_risk: int = STARTING_STATS["fire_risk"]
    farmers: int = STARTING_STATS["farmers"]
    land_forces: int = STARTING_STATS["land_forces"]
    authority: float = STARTING_STATS["authority"]

    def clamped(self) -> Stats:
        """Return a copy with every stat inside its domain."""
        return Stats(
            gold=max(GOLD_FLOOR, self.gold),
            satisfaction=_clamp(self.satisfaction, PERCENT_MIN, PERCENT_MAX),
            health=_clamp(self.health, PERCENT_MIN, PERCENT_MAX),
            fire_risk=_clamp(self.fire_risk, PERCENT_MIN, PERCENT_MAX),
            farmers=max(0, self.farmers),
            land_forces=max(0, self.land_forces),
            authority=_clamp(self.authority, AUTHORITY_MIN, AUTHORITY_MAX),
        )

    def with_delta(self, effect: Effect) -> Stats:
        """Add an effect's stat deltas (unclamped)."""
        return self.with_deltas(effect.stat_deltas())

    def with_deltas(self, deltas: dict[str, float]) -> Stats:
        """Add stat deltas keyed by stat name (unclamped)."""
        if not deltas:
            return self
        return replace(self, **{k: getattr(self, k) + v for k, v in deltas.items()})

    def diff(self, other: Stats) -> dict[str, float]:
        """Nonzero changes going from other to self."""
        changes = {}
        for key in STAT_KEYS:
            delta = getattr(self, key) - getattr(other, key)
            if delta:
                changes[key] = delta
        return changes

    def is_within_domain(self) -> bool:
        return self == self.clamped()

    def to_dict(self) -> dict[str, float]:
        return {key: getattr(self, key) for key in STAT_KEYS}


@dataclass(frozen=True)
class Needs:
    """Which need benefits are currently active."""
    marketplace: bool = False
    bread: bool = False
    beer: bool = False
    firewood: bool = False
    well: bool = False

    def is_active(self, need: str) -> bool:
        return getattr(self, need)

    def with_assignments(self, assignments: dict[str, bool]) -> Needs:
        if not assignments:
            return self
        return replace(self, **assignments)

    def to_dict(self) -> dict[str, bool]:
        return {key: getattr(self, key) for key in NEED_KEYS}


@dataclass(frozen=True)
class NeedTracking:
    """Persistent per-need counters."""
    building_count: int = 0
    next_eligible_tick: int = 0


@dataclass(frozen=True)
class AppliedChange:
    """Audit record of a committed stat change."""
    stat: str
    amount: float
    source: str
    note: str | None = None


@dataclass(frozen=True)
class LogEntry:
    """One line of the causal log."""
    tick: int
    request_id: str
    option_text: str
    source: str
    deltas: dict[str, float]
    applied_changes: tuple[AppliedChange, ...] = ()


@dataclass(frozen=True)
class AuthorityCommitContext:
    """Commit that reweighted the draw which produced a scheduled event."""
    committed: int
    origin_request_id: str


@dataclass(frozen=True)
class ScheduledEvent:
    """A request queued for presentation at or after target_tick."""
    target_tick: int
    request_id: str
    scheduled_at_tick: int
    priority: str | None = None
    authority_commit_context: AuthorityCommitContext | None = None

    @property
    def is_info(self) -> bool:
        return self.priority == PRIORITY_INFO


@dataclass(frozen=True)
class ScheduledCombat:
    """A committed combat waiting for its due tick. Forces are already reserved."""
    combat_id: str
    origin_request_id: str
    due_tick: int
    scheduled_at_tick: int
    enemy_forces: int
    committed_forces: int
    on_win: Effect | None = None
    on_lose: Effect | None = None
    follow_ups_on_win: tuple[FollowUp, ...] = ()
    follow_ups_on_lose: tuple[FollowUp, ...] = ()


@dataclass(frozen=True)
class RoundResult:
    """Losses of one combat round."""
    player_losses: int
    enemy_losses: int


@dataclass(frozen=True)
class ActiveCombat:
    """A combat in progress."""
    combat_id: str
    origin_request_id: str
    enemy_remaining: int
    committed_remaining: int
    initial_enemy_forces: int
    initial_committed_forces: int
    round: int = 0  # rounds fought so far
    last_round: RoundResult | None = None
    on_win: Effect | None = None
    on_lose: Effect | None = None
    follow_ups_on_win: tuple[FollowUp, ...] = ()
    follow_ups_on_lose: tuple[FollowUp, ...] = ()


@dataclass(frozen=True)
class PendingAuthorityCheck:
    """An authority wager waiting for resolve_tick. The amount is already deducted."""
    check_id: str
    initiated_tick: int
    resolve_tick: int
    origin_request_id: str
    option_index: int
    committed: int
    config: AuthorityCheck


@dataclass(frozen=True)
class ChainStatus:
    active: bool = False
    completed_tick: int | None = None


def initial_needs_tracking() -> dict[str, NeedTracking]:
    return {need: NeedTracking() for need in NEED_KEYS}


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    tick: int = 0
    stats: Stats = field(default_factory=Stats)
    needs: Needs = field(default_factory=Needs)
    needs_tracking: dict[str, NeedTracking] = field(default_factory=initial_needs_tracking)

    current_request_id: str | None = None
    last_request_id: str | None = None

    # Append-only causal log
    log: list[LogEntry] = field(default_factory=list)

    game_over: bool = False
    game_over_reason: str | None = None

    # Pending work
    scheduled_events: list[ScheduledEvent] = field(default_factory=list)
    scheduled_combats: list[ScheduledCombat] = field(default_factory=list)
    active_combat: ActiveCombat | None = None
    pending_authority_checks: list[PendingAuthorityCheck] = field(default_factory=list)
    chain_status: dict[str, ChainStatus] = field(default_factory=dict)

    request_trigger_counts: dict[str, int] = field(default_factory=dict)
    unlocks: frozenset[str] = frozenset()

    # Need whose threshold was crossed on the last transition (for notification)
    newly_unlocked_need: str | None = None

    # Counter for deterministic combat/check ids
    sequence: int = 0

    def total_land_forces(self) -> int:
        """Available + reserved in scheduled combats + remaining in the active combat."""
        total = self.stats.land_forces
        total += sum(c.committed_forces for c in self.scheduled_combats)
        if self.active_combat:
            total += self.active_combat.committed_remaining
        return total

    def has_unlock(self, token: str) -> bool:
        return token in self.unlocks

    def meets_requirements(self, request: Request) -> bool:
        return all(token in self.unlocks for token in request.requires)

    def trigger_count(self, request_id: str) -> int:
        return self.request_trigger_counts.get(request_id, 0)

    def is_at_trigger_cap(self, request: Request) -> bool:
        return request.max_triggers is not None and self.trigger_count(request.id) >= request.max_triggers

    def tracking_for(self, need: str) -> NeedTracking:
        return self.needs_tracking.get(need, NeedTracking())

    def with_stats(self, stats: Stats) -> GameState:
        """Return new state with clamped stats."""
        return self._copy_with(stats=stats.clamped())

    def with_log(self, *entries: LogEntry) -> GameState:
        """Return new state with log entries appended."""
        if not entries:
            return self
        return self._copy_with(log=self.log + list(entries))

    def next_id(self, prefix: str) -> tuple[str, GameState]:
        """Mint a deterministic id for a new combat or authority check."""
        return f"{prefix}-{self.tick}-{self.sequence}", self._copy_with(sequence=self.sequence + 1)

    def _copy_with(self, **kwargs: Any) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

    def summary(self) -> dict[str, Any]:
        """Flat view for logging and CLI output."""
        return {
            "tick": self.tick,
            "game_over": self.game_over,
            "current_request_id": self.current_request_id,
            **self.stats.to_dict(),
        }
