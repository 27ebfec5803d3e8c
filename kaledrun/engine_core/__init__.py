"""
Engine Core - Deterministic village state management and request selection.

The engine is the runtime that:
1. Reads the immutable Catalog
2. Manages GameState
3. Applies choose-option actions via the reducer
4. Runs combat, authority checks and follow-ups over ticks
5. Picks the next request to present
"""

from .rng import GameRandom
from .state import GameState, Stats, Needs, NeedTracking, LogEntry, AppliedChange, ScheduledEvent
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .presentable import (
    PresentableRequest,
    CatalogRequest,
    CombatStart,
    CombatRound,
    CombatReport,
    encode_request_id,
    parse_request_id,
)
from .picker import Picker, PickerInput
from .reducer import Reducer, apply_action, initialize_game, get_current_request

__all__ = [
    "GameRandom",
    "GameState",
    "Stats",
    "Needs",
    "NeedTracking",
    "LogEntry",
    "AppliedChange",
    "ScheduledEvent",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "PresentableRequest",
    "CatalogRequest",
    "CombatStart",
    "CombatRound",
    "CombatReport",
    "encode_request_id",
    "parse_request_id",
    "Picker",
    "PickerInput",
    "Reducer",
    "apply_action",
    "initialize_game",
    "get_current_request",
]
