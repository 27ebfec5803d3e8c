"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions
3. Formats engine state for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .schemas import (
    AppliedChangeView,
    ChooseOptionRequest,
    CommitRange,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    LogEntryView,
    OptionView,
    RequestView,
    SessionStatus,
    StatsView,
)
from .. import __version__
from ..bots.policy import authority_commit_range, combat_commit_range
from ..catalog.schema import Request
from ..engine_core.action import Action, ErrorCode as EngineErrorCode
from ..engine_core.reducer import get_current_request
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)

RECENT_LOG_ENTRIES = 10

ENGINE_ERROR_CODES = {
    EngineErrorCode.INVALID_ACTION: ErrorCode.INVALID_ACTION,
    EngineErrorCode.GAME_OVER: ErrorCode.GAME_OVER,
}


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        state = service.create_session(CreateSessionRequest(seed=42))
        state = service.choose_option(state.session_id, ChooseOptionRequest(option_index=0))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest) -> GameStateResponse:
        """Create a new game session."""
        session = self.session_manager.create_session(seed=request.seed)
        return self._session_to_response(session)

    def get_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """Get the game state of a session."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def choose_option(
        self, session_id: str, request: ChooseOptionRequest
    ) -> GameStateResponse | ErrorResponse:
        """
        Answer the presented request of a session.

        Rejected choices leave the session untouched and return an error.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        action = Action.choose_option(
            request.option_index,
            combat_commit=request.combat_commit,
            authority_commit=request.authority_commit,
        )
        result = self.session_manager.choose_option(session_id, action)
        if not result.success:
            code = ENGINE_ERROR_CODES.get(result.error_code, ErrorCode.INTERNAL_ERROR)
            return ErrorResponse(
                error=result.error or "Action rejected",
                error_code=code,
                details={"tick": session.game_state.tick, "request_id": session.game_state.current_request_id},
            )
        return self._session_to_response(session, changes=result.state_changes)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def health(self) -> dict[str, str]:
        return {"status": "healthy", "service": "kaledrun-engine", "version": __version__}

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )

    def _session_to_response(self, session: Session, changes: list[str] | None = None) -> GameStateResponse:
        state = session.game_state
        request = get_current_request(state, session.reducer.catalog)
        return GameStateResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            seed=session.seed,
            tick=state.tick,
            stats=StatsView.model_validate(state.stats),
            needs=state.needs.to_dict(),
            current_request=self._request_view(session, request) if request else None,
            game_over=state.game_over,
            game_over_reason=state.game_over_reason,
            newly_unlocked_need=state.newly_unlocked_need,
            scheduled_events=len(state.scheduled_events),
            scheduled_combats=len(state.scheduled_combats),
            pending_authority_checks=len(state.pending_authority_checks),
            recent_log=[
                LogEntryView(
                    tick=entry.tick,
                    request_id=entry.request_id,
                    option_text=entry.option_text,
                    source=entry.source,
                    deltas=entry.deltas,
                    applied_changes=[AppliedChangeView.model_validate(c) for c in entry.applied_changes],
                )
                for entry in state.log[-RECENT_LOG_ENTRIES:]
            ],
            last_changes=changes or [],
        )

    def _request_view(self, session: Session, request: Request) -> RequestView:
        state = session.game_state
        options = []
        for index, option in enumerate(request.options):
            combat = combat_commit_range(state, request, index)
            authority = authority_commit_range(state, request, index)
            options.append(OptionView(
                index=index,
                text=option.text,
                combat_commit=CommitRange(min=combat[0], max=combat[1]) if combat else None,
                authority_commit=CommitRange(min=authority[0], max=authority[1]) if authority else None,
            ))
        return RequestView(
            request_id=request.id,
            title=request.title,
            text=request.text,
            category=request.category.value,
            options=options,
        )

