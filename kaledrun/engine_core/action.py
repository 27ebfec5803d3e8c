"""
Action System - Actions, payloads, and results.

The engine accepts one inbound action: choosing an option of the current
request, optionally committing land forces (combat fight branch) or
authority (authority check).

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    CHOOSE_OPTION = "choose_option"


class ErrorCode:
    """Error codes carried by failed results."""
    INVALID_ACTION = "INVALID_ACTION"
    GAME_OVER = "GAME_OVER"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    HANDLER_ERROR = "HANDLER_ERROR"
    NO_HANDLER = "NO_HANDLER"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Validation happens in the reducer.
    """
    option_index: int | None = None
    combat_commit: int | None = None
    authority_commit: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload

    @classmethod
    def choose_option(
        cls,
        option_index: int,
        combat_commit: int | None = None,
        authority_commit: int | None = None,
    ) -> Action:
        """Factory for choose-option action."""
        return cls(
            action_type=ActionType.CHOOSE_OPTION,
            payload=ActionPayload(
                option_index=option_index,
                combat_commit=combat_commit,
                authority_commit=authority_commit,
            ),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (the unchanged prior state on failure)
    - Errors (if failed)
    - Human-readable changes (for UI updates)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None, state: Any | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
