"""
FastAPI Application - REST API for playing sessions over HTTP.

Endpoints:
    GET    /api/v1/health               Health check
    POST   /api/v1/sessions             Create game session
    GET    /api/v1/sessions             List active sessions
    GET    /api/v1/sessions/{id}        Get game state
    POST   /api/v1/sessions/{id}/choose Answer the presented request
    DELETE /api/v1/sessions/{id}        End session

All responses are JSON with explicit Pydantic schemas. Errors use
ErrorResponse with a machine-readable error_code.
"""

from typing import Optional, Union
import logging
import os

from .. import __version__

logger = logging.getLogger(__name__)

# Environment configuration
KALEDRUN_ENV = os.getenv("KALEDRUN_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

ERROR_STATUS = {
    "SESSION_NOT_FOUND": 404,
    "INVALID_ACTION": 400,
    "VALIDATION_ERROR": 400,
    "GAME_OVER": 409,
    "INTERNAL_ERROR": 500,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        ChooseOptionRequest,
        CreateSessionRequest,
        EndSessionResponse,
        ErrorCode,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        SessionListResponse,
    )

    is_production = KALEDRUN_ENV == "production"

    app = FastAPI(
        title="Kaledrun Engine API",
        description="""
Village management decision engine.

Each session is one game. Read the presented request from the session state,
then answer it with `POST /choose`.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_ACTION` | Option index or commit rejected, state unchanged |
| `GAME_OVER` | The game has ended |
| `VALIDATION_ERROR` | Request body failed validation |
| `INTERNAL_ERROR` | Engine consistency failure, state unchanged |
        """,
        version=__version__,
        docs_url=None if is_production else "/api/docs",
        redoc_url=None if is_production else "/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=ERROR_STATUS.get(error_code.value, 400),
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def to_response(result) -> Union[GameStateResponse, JSONResponse]:
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, result.details)
        return result

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Request validation failed for %s: %s", request.url.path, exc.errors())
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            details={"errors": [str(e.get("msg")) for e in exc.errors()]},
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(request: Optional[CreateSessionRequest] = None) -> GameStateResponse:
        """
        Create a new game session.

        Pass a `seed` for a reproducible game.
        """
        return api_service.create_session(request or CreateSessionRequest())

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get game state",
    )
    async def get_session(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the current state and presented request of a session."""
        return to_response(api_service.get_state(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/choose",
        response_model=GameStateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid option or commit"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Game is over"},
        },
        tags=["Sessions"],
        summary="Answer the presented request",
    )
    async def choose_option(
        session_id: str, request: ChooseOptionRequest
    ) -> Union[GameStateResponse, JSONResponse]:
        """
        Choose an option of the presented request.

        The fight option of a combat request needs `combat_commit`. Options
        with an authority check accept an optional `authority_commit`.
        """
        return to_response(api_service.choose_option(session_id, request))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(**api_service.health())

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Kaledrun Engine API",
            "version": __version__,
            "environment": KALEDRUN_ENV,
            "docs": None if is_production else "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn kaledrun.api.app:app
app = create_app()
