"""
Presentable requests - what the player is looking at right now.

Internally the current request is one of four variants:
- CatalogRequest: a request from the catalog
- CombatStart: a due combat waiting for "Begin Battle"
- CombatRound: the active combat, fight or withdraw
- CombatReport: outcome screen after a combat ends

Externally (GameState.current_request_id, scheduled events) variants are
stored as id strings. The three combat variants use reserved namespaces:

    COMBAT_START::<combat_id>
    COMBAT_ROUND::<combat_id>
    COMBAT_REPORT::<combat_id>::<url-encoded JSON payload>
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Union, TYPE_CHECKING
from urllib.parse import quote, unquote

from ..catalog.schema import STAT_KEYS, Option, Request, RequestCategory

if TYPE_CHECKING:
    from ..catalog import Catalog
    from .state import GameState

logger = logging.getLogger(__name__)

SEPARATOR = "::"
COMBAT_START_PREFIX = "COMBAT_START"
COMBAT_ROUND_PREFIX = "COMBAT_ROUND"
COMBAT_REPORT_PREFIX = "COMBAT_REPORT"

OUTCOME_WIN = "win"
OUTCOME_LOSE = "lose"
OUTCOME_WITHDRAW = "withdraw"

# Characters encodeURIComponent leaves alone
_URI_SAFE = "-_.!~*'()"

STAT_LABELS = {
    "gold": "Gold",
    "satisfaction": "Satisfaction",
    "health": "Health",
    "fire_risk": "Fire Risk",
    "farmers": "Farmers",
    "land_forces": "Land Forces",
    "authority": "Authority",
}


@dataclass(frozen=True)
class CombatReportPayload:
    outcome: str
    player_losses: int
    enemy_losses: int
    stat_deltas: dict[str, float] = field(default_factory=dict)

    def encode(self) -> str:
        data = {
            "outcome": self.outcome,
            "playerLosses": self.player_losses,
            "enemyLosses": self.enemy_losses,
            "statDeltas": self.stat_deltas,
        }
        return quote(json.dumps(data, separators=(",", ":")), safe=_URI_SAFE)

    @classmethod
    def decode(cls, raw: str) -> CombatReportPayload | None:
        """Parse an encoded payload; None if it is malformed."""
        try:
            data = json.loads(unquote(raw))
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        outcome = data.get("outcome")
        deltas = data.get("statDeltas")
        if outcome not in (OUTCOME_WIN, OUTCOME_LOSE, OUTCOME_WITHDRAW) or not isinstance(deltas, dict):
            return None
        try:
            return cls(
                outcome=outcome,
                player_losses=int(data.get("playerLosses") or 0),
                enemy_losses=int(data.get("enemyLosses") or 0),
                stat_deltas={k: v for k, v in deltas.items() if k in STAT_KEYS},
            )
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class CatalogRequest:
    request_id: str


@dataclass(frozen=True)
class CombatStart:
    combat_id: str


@dataclass(frozen=True)
class CombatRound:
    combat_id: str


@dataclass(frozen=True)
class CombatReport:
    combat_id: str
    raw_payload: str = ""
    payload: CombatReportPayload | None = None


PresentableRequest = Union[CatalogRequest, CombatStart, CombatRound, CombatReport]


def encode_request_id(variant: PresentableRequest) -> str:
    """Convert a variant to its external id string."""
    if isinstance(variant, CatalogRequest):
        return variant.request_id
    if isinstance(variant, CombatStart):
        return f"{COMBAT_START_PREFIX}{SEPARATOR}{variant.combat_id}"
    if isinstance(variant, CombatRound):
        return f"{COMBAT_ROUND_PREFIX}{SEPARATOR}{variant.combat_id}"
    if isinstance(variant, CombatReport):
        raw = variant.payload.encode() if variant.payload is not None else variant.raw_payload
        return f"{COMBAT_REPORT_PREFIX}{SEPARATOR}{variant.combat_id}{SEPARATOR}{raw}"
    raise TypeError(f"Unknown presentable request: {variant!r}")


def parse_request_id(request_id: str) -> PresentableRequest:
    """Convert an external id string to a variant. Never raises."""
    parts = request_id.split(SEPARATOR, 2)
    prefix = parts[0]
    if len(parts) >= 2:
        if prefix == COMBAT_START_PREFIX:
            return CombatStart(combat_id=SEPARATOR.join(parts[1:]))
        if prefix == COMBAT_ROUND_PREFIX:
            return CombatRound(combat_id=SEPARATOR.join(parts[1:]))
        if prefix == COMBAT_REPORT_PREFIX:
            raw = parts[2] if len(parts) == 3 else ""
            return CombatReport(combat_id=parts[1], raw_payload=raw, payload=CombatReportPayload.decode(raw))
    elif prefix == COMBAT_REPORT_PREFIX:
        return CombatReport(combat_id="")
    return CatalogRequest(request_id=request_id)


def combat_report(combat_id: str, payload: CombatReportPayload) -> CombatReport:
    return CombatReport(combat_id=combat_id, raw_payload=payload.encode(), payload=payload)


# ============================================================
# Rendering
# ============================================================

def _synthetic(request_id: str, title: str, text: str, *option_texts: str) -> Request:
    return Request(
        id=request_id,
        title=title,
        text=text,
        options=tuple(Option(t) for t in option_texts),
        category=RequestCategory.INFO,
        can_trigger_randomly=False,
        advances_tick=False,
    )


def render_combat_round(request_id: str, state: GameState) -> Request | None:
    combat = state.active_combat
    if combat is None:
        return None
    text = f"Your Forces: {combat.committed_remaining}\nEnemy Forces: {combat.enemy_remaining}"
    if combat.last_round:
        text += (
            f"\n\nLast Round:\nYour Losses: {combat.last_round.player_losses}"
            f"\nEnemy Losses: {combat.last_round.enemy_losses}"
        )
    return _synthetic(
        request_id,
        f"Battle - Round {combat.round + 1}",
        text,
        "Continue Fighting",
        "Withdraw",
    )


def render_combat_start(request_id: str, combat_id: str, state: GameState, catalog: Catalog) -> Request:
    text = "Your forces are ready. The battle is about to commence!"
    scheduled = next((c for c in state.scheduled_combats if c.combat_id == combat_id), None)
    if scheduled:
        text += f"\n\nThis is the battle from: {catalog.title_of(scheduled.origin_request_id)}"
    return _synthetic(request_id, "Battle Begins", text, "Begin Battle")


def render_combat_report(request_id: str, report: CombatReport) -> Request:
    payload = report.payload
    if payload is None:
        logger.warning("Failed to parse combat report payload for %s", report.combat_id or request_id)
        return _synthetic(request_id, "Battle Report", "The battle has ended.", "Continue")

    outcome_text = {
        OUTCOME_WIN: "Victory!",
        OUTCOME_WITHDRAW: "Withdrawal",
    }.get(payload.outcome, "Defeat")
    losses_text = f"Casualties:\nYou: {payload.player_losses}\nEnemy: {payload.enemy_losses}"

    consequences = []
    for key in STAT_KEYS:
        delta = payload.stat_deltas.get(key)
        if delta:
            sign = "+" if delta > 0 else ""
            consequences.append(f"{STAT_LABELS[key]}: {sign}{delta}")
    consequences_text = "\n\nConsequences:\n" + "\n".join(consequences) if consequences else ""

    return _synthetic(
        request_id,
        "Battle Report",
        f"{outcome_text}\n\n{losses_text}{consequences_text}",
        "Continue",
    )


def resolve_request(variant: PresentableRequest, state: GameState, catalog: Catalog) -> Request | None:
    """Build the presentable Request for a variant; None if it cannot be shown."""
    request_id = encode_request_id(variant)
    if isinstance(variant, CombatRound):
        return render_combat_round(request_id, state)
    if isinstance(variant, CombatStart):
        return render_combat_start(request_id, variant.combat_id, state, catalog)
    if isinstance(variant, CombatReport):
        return render_combat_report(request_id, variant)
    return catalog.get(variant.request_id)


def option_count(variant: PresentableRequest, catalog: Catalog) -> int:
    """Number of options the player can choose from for a variant."""
    if isinstance(variant, CombatRound):
        return 2
    if isinstance(variant, (CombatStart, CombatReport)):
        return 1
    request = catalog.get(variant.request_id)
    return len(request.options) if request else 0
