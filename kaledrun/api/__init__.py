"""
API Module - HTTP interface.

Exposes the engine via a REST API:
1. Create a game session (optionally seeded)
2. Read the state and the presented request
3. Answer the request
4. End the session

All state is session-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    ChooseOptionRequest,
    # Responses
    GameStateResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Shared
    StatsView,
    OptionView,
    RequestView,
    LogEntryView,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "ChooseOptionRequest",
    # Responses
    "GameStateResponse",
    "ErrorResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    # Shared
    "StatsView",
    "OptionView",
    "RequestView",
    "LogEntryView",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
