"""
FastAPI Application - REST API for playing against the AI.

Endpoints:
    GET    /health                           Health check
    GET    /                                 Service info
    POST   /api/v1/sessions                  Create game session
    GET    /api/v1/sessions                  List active sessions
    GET    /api/v1/sessions/{id}             Get session status
    DELETE /api/v1/sessions/{id}             End session
    GET    /api/v1/sessions/{id}/state       Get visible game state
    GET    /api/v1/sessions/{id}/actions     List legal actions
    POST   /api/v1/sessions/{id}/actions     Submit an action
    GET    /api/v1/cards                     Card catalog
    POST   /api/v1/decks/validate            Validate a deck list

Play Flow:
    1. POST /sessions deals a game; any AI moves owed first are already played
    2. GET /actions lists the human seat's legal actions with indices
    3. POST /actions with an index applies it, then the AI replies
    4. The response carries the AI's moves and the new visible state

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging

from .. import __version__
from ..config import ALLOWED_ORIGINS, MYTHOS_ENV, configure_logging

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        SubmitActionRequest,
        DeckValidationRequest,
        # Response models
        SessionResponse,
        GameStateResponse,
        ActionListResponse,
        ActionResultResponse,
        CardListResponse,
        DeckValidationResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    configure_logging()

    app = FastAPI(
        title="Mythos Engine API",
        description="""
Two-player trading card game engine with AI opponents.

## Play Flow

1. `POST /api/v1/sessions` deals a new game against the AI
2. `GET /api/v1/sessions/{id}/actions` lists your legal actions
3. `POST /api/v1/sessions/{id}/actions` with `action_index` plays one
4. The response includes the AI's replies and your new view of the board

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist or has expired |
| `INVALID_ACTION` | The engine rejected the action |
| `INVALID_DECK` | Deck or starter deck name is unknown |
| `VALIDATION_ERROR` | Request parameters are malformed |
| `GAME_OVER` | The game has already ended |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_status(error_code: ErrorCode) -> int:
        if error_code == ErrorCode.SESSION_NOT_FOUND:
            return 404
        if error_code == ErrorCode.GAME_OVER:
            return 409
        return 400

    def from_service_error(response: ErrorResponse) -> JSONResponse:
        return make_error_response(
            response.error_code,
            response.error,
            status_code=error_status(response.error_code),
            details=response.details,
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Check if the API is running."""
        return HealthResponse(status="healthy", service="mythos-engine", version=__version__)

    @app.get("/", tags=["Health"], summary="Service info")
    async def root():
        return {
            "service": "Mythos Engine API",
            "version": __version__,
            "environment": MYTHOS_ENV,
            "docs": "/api/docs",
        }

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unknown difficulty or deck"},
        },
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Deal a new game against the AI.

        The human plays `player1`. If the AI owes moves before the human
        can act, they have already been played in the returned state.
        """
        response = api_service.create_session(body)
        if isinstance(response, ErrorResponse):
            return from_service_error(response)
        return response

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
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        response = api_service.get_session(session_id)
        if hasattr(response, "error"):
            return from_service_error(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the visible game state",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """
        The board as the human seat sees it.

        The AI's hand is a count only and its hidden characters carry no card.
        """
        response = api_service.get_game_state(session_id)
        if hasattr(response, "error"):
            return from_service_error(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionListResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="List legal actions",
    )
    async def list_actions(session_id: str) -> Union[ActionListResponse, JSONResponse]:
        """List the human seat's legal actions. An empty list means it is not your move."""
        response = api_service.list_actions(session_id)
        if hasattr(response, "error"):
            return from_service_error(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionResultResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid action"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Game is over"},
        },
        tags=["Game"],
        summary="Submit an action",
    )
    async def submit_action(
        session_id: str,
        body: SubmitActionRequest,
    ) -> Union[ActionResultResponse, JSONResponse]:
        """
        Apply an action and run the AI's replies.

        **Request Body:**
        ```json
        {"action_index": 0}
        ```
        or
        ```json
        {"action": {"type": "PLAY_HIDDEN", "card_index": 2, "mission_index": 0}}
        ```
        """
        response = api_service.submit_action(session_id, body)
        if hasattr(response, "error"):
            return from_service_error(response)
        return response

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/cards",
        response_model=CardListResponse,
        tags=["Cards"],
        summary="List the card catalog",
    )
    async def list_cards() -> CardListResponse:
        return api_service.list_cards()

    @app.post(
        "/api/v1/decks/validate",
        response_model=DeckValidationResponse,
        responses={400: {"model": ErrorResponse, "description": "Unknown card ids"}},
        tags=["Cards"],
        summary="Validate a deck list",
    )
    async def validate_deck(body: DeckValidationRequest) -> Union[DeckValidationResponse, JSONResponse]:
        """Check card counts, copy limits and the mission selection."""
        response = api_service.validate_deck(body)
        if hasattr(response, "error"):
            return from_service_error(response)
        return response

    return app


# For running directly: uvicorn mythos.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
