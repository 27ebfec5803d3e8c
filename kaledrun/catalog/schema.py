"""
Catalog Schema - Immutable definitions of requests and their options.

A request is a decision point presented to the player. Its definition is
static content: the engine never mutates it, it only reads:
- Options and their base effects
- Optional combat descriptor (fight branch)
- Optional authority checks (commit a wager)
- Follow-ups (future requests drawn from a weighted pool)
- Chain membership, trigger caps, unlock requirements
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from enum import Enum


# Stat fields in display/log order
STAT_KEYS: tuple[str, ...] = (
    "gold",
    "satisfaction",
    "health",
    "fire_risk",
    "farmers",
    "land_forces",
    "authority",
)

# Need types in their fixed enumeration order
NEED_KEYS: tuple[str, ...] = ("marketplace", "bread", "beer", "firewood", "well")

# Well-known request ids
CRISIS_FIRE_ID = "EVT_CRISIS_FIRE"
CRISIS_DISEASE_ID = "EVT_CRISIS_DISEASE"
CRISIS_UNREST_ID = "EVT_CRISIS_UNREST"
CRISIS_IDS: tuple[str, ...] = (CRISIS_FIRE_ID, CRISIS_DISEASE_ID, CRISIS_UNREST_ID)


class RequestCategory(Enum):
    """Which catalog table a request belongs to."""
    NEED = "need"
    INFO = "info"
    EVENT = "event"


class ChainRole(Enum):
    """Role of a request inside a narrative chain."""
    START = "start"
    MEMBER = "member"
    END = "end"


class BoostType(Enum):
    """How an authority commitment raises a follow-up candidate's weight."""
    LINEAR = "linear"
    THRESHOLD = "threshold"
    STEPPED = "stepped"


@dataclass(frozen=True)
class Effect:
    """
    Sparse set of stat deltas and need-flag assignments.

    None means "not touched". Stat fields are deltas; need fields are
    assignments (True activates the need's benefit).
    """
    gold: int | None = None
    satisfaction: int | None = None
    health: int | None = None
    fire_risk: int | None = None
    farmers: int | None = None
    land_forces: int | None = None
    authority: float | None = None

    marketplace: bool | None = None
    bread: bool | None = None
    beer: bool | None = None
    firewood: bool | None = None
    well: bool | None = None

    def stat_deltas(self) -> dict[str, float]:
        """Nonzero stat deltas, keyed by stat name."""
        deltas = {}
        for key in STAT_KEYS:
            value = getattr(self, key)
            if value:
                deltas[key] = value
        return deltas

    def need_assignments(self) -> dict[str, bool]:
        """Need flags this effect assigns."""
        return {
            key: getattr(self, key)
            for key in NEED_KEYS
            if getattr(self, key) is not None
        }

    def sets_need(self, need: str) -> bool:
        """True if this effect activates the given need."""
        return getattr(self, need) is True

    def with_stat(self, stat: str, value: float | None) -> Effect:
        """Return a copy with one stat delta replaced."""
        return replace(self, **{stat: value})

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True)
class WeightedCandidate:
    """A possible follow-up request with its selection weight."""
    request_id: str
    weight: float


@dataclass(frozen=True)
class FollowUp:
    """
    A pool of possible future requests.

    One candidate is drawn by weight and scheduled at
    tick + 1 + uniform(delay_min_ticks, delay_max_ticks).
    """
    trigger_on_option_index: int
    delay_min_ticks: int
    delay_max_ticks: int
    candidates: tuple[WeightedCandidate, ...]


@dataclass(frozen=True)
class AuthorityFollowUpBoost:
    """
    Raises the weight of one follow-up candidate when authority is committed.

    - linear: weight += commit_ratio * boost_value
    - threshold: weight += boost_value if committed >= threshold
    - stepped: weight += floor(commit_ratio / (1 / steps)) * boost_value
    """
    target_request_id: str
    boost_type: BoostType
    boost_value: float
    steps: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class AuthorityCheck:
    """
    A wager of authority attached to an option.

    The committed amount is deducted immediately and resolved one tick
    later. Without on_success/on_failure the commit is "boost-only":
    it only reweights follow-ups and is refunded in full.
    """
    min_commit: int
    max_commit: int
    threshold: int = 0
    on_success: Effect | None = None
    on_failure: Effect | None = None
    refund_on_success_percent: int = 100
    extra_loss_on_failure: int = 0
    success_feedback_request_id: str | None = None
    failure_feedback_request_id: str | None = None
    follow_up_boosts: tuple[AuthorityFollowUpBoost, ...] = ()

    @property
    def is_boost_only(self) -> bool:
        return self.on_success is None and self.on_failure is None


@dataclass(frozen=True)
class CombatSpec:
    """Combat triggered by the fight branch (option 0) of a request."""
    enemy_forces: int
    prep_delay_min_ticks: int
    prep_delay_max_ticks: int
    on_win: Effect | None = None
    on_lose: Effect | None = None
    follow_ups_on_win: tuple[FollowUp, ...] = ()
    follow_ups_on_lose: tuple[FollowUp, ...] = ()


@dataclass(frozen=True)
class Option:
    """A player choice: display text, base effects, optional authority check."""
    text: str
    effects: Effect = field(default_factory=Effect)
    authority_check: AuthorityCheck | None = None


@dataclass(frozen=True)
class Request:
    """
    Immutable catalog entry.

    Note: category is assigned by the Catalog from the table the request
    is registered in.
    """
    id: str
    title: str
    text: str
    options: tuple[Option, ...]
    category: RequestCategory = RequestCategory.EVENT

    follow_ups: tuple[FollowUp, ...] = ()
    can_trigger_randomly: bool = True
    advances_tick: bool = True
    max_triggers: int | None = None
    requires: tuple[str, ...] = ()

    # Chain membership
    chain_id: str | None = None
    chain_role: ChainRole | None = None
    chain_restart_cooldown_ticks: int | None = None

    # Optional mechanics
    combat: CombatSpec | None = None
    authority_min: float | None = None
    authority_max: float | None = None

    def get_option(self, index: int) -> Option | None:
        """Get option by index, None if out of range."""
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self.options):
            return self.options[index]
        return None

    def follow_ups_for(self, option_index: int) -> list[FollowUp]:
        """Follow-ups triggered by the given option."""
        return [f for f in self.follow_ups if f.trigger_on_option_index == option_index]

    @property
    def is_chain_start(self) -> bool:
        return self.chain_id is not None and self.chain_role == ChainRole.START
