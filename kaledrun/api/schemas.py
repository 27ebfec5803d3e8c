"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- INVALID_ACTION: Option index or commit rejected, state unchanged
- GAME_OVER: The game has ended, no further choices accepted
- VALIDATION_ERROR: Request body failed schema validation
- INTERNAL_ERROR: Engine consistency failure, state unchanged
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    GAME_OVER = "GAME_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class StatsView(BaseModel):
    """Village statistics."""
    gold: int
    satisfaction: int
    health: int
    fire_risk: int
    farmers: int
    land_forces: int
    authority: float

    model_config = {"from_attributes": True}


class CommitRange(BaseModel):
    """Inclusive range of a legal commit."""
    min: int
    max: int


class OptionView(BaseModel):
    """One choice of the presented request."""
    index: int
    text: str
    combat_commit: Optional[CommitRange] = Field(
        None, description="Required land forces commit for the fight option"
    )
    authority_commit: Optional[CommitRange] = Field(
        None, description="Optional authority commit; omit to take the plain effect"
    )


class RequestView(BaseModel):
    """The request the player is looking at."""
    request_id: str
    title: str
    text: str
    category: str = Field(description="need, info or event")
    options: list[OptionView] = Field(default_factory=list)


class AppliedChangeView(BaseModel):
    stat: str
    amount: float
    source: str
    note: Optional[str] = None

    model_config = {"from_attributes": True}


class LogEntryView(BaseModel):
    """One line of the causal log."""
    tick: int
    request_id: str
    option_text: str
    source: str
    deltas: dict[str, float] = Field(default_factory=dict)
    applied_changes: list[AppliedChangeView] = Field(default_factory=list)

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    seed: Optional[int] = Field(None, ge=0, description="Seed for reproducible games")


class ChooseOptionRequest(BaseModel):
    """Answer the presented request."""
    option_index: int = Field(..., ge=0, description="Index into the request's options")
    combat_commit: Optional[int] = Field(None, description="Land forces to commit (fight option)")
    authority_commit: Optional[int] = Field(None, description="Authority to wager (authority check)")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    seed: int
    tick: int
    stats: StatsView
    needs: dict[str, bool] = Field(default_factory=dict)
    current_request: Optional[RequestView] = None
    game_over: bool = False
    game_over_reason: Optional[str] = None
    newly_unlocked_need: Optional[str] = None
    scheduled_events: int = Field(0, description="Queued follow-ups and screens")
    scheduled_combats: int = 0
    pending_authority_checks: int = 0
    recent_log: list[LogEntryView] = Field(default_factory=list)
    last_changes: list[str] = Field(
        default_factory=list, description="Human-readable changes of the last choice"
    )
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
