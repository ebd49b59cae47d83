"""
API Module - HTTP interface for playing against the AI.

Clients:
1. Create a session with a difficulty and starter decks
2. Read their view of the board and their legal actions
3. Submit actions and receive the AI's replies

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    SubmitActionRequest,
    DeckValidationRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    ActionListResponse,
    ActionResultResponse,
    CardListResponse,
    DeckValidationResponse,
    ErrorResponse,
    # Shared
    ActionInfo,
    CardInfo,
    PlayerInfo,
    OpponentInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService, describe_action
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "SubmitActionRequest",
    "DeckValidationRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "ActionListResponse",
    "ActionResultResponse",
    "CardListResponse",
    "DeckValidationResponse",
    "ErrorResponse",
    # Shared
    "ActionInfo",
    "CardInfo",
    "PlayerInfo",
    "OpponentInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "describe_action",
    "create_app",
]
