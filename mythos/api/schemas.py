"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_ACTION: The engine rejected the submitted action
- INVALID_DECK: Deck lists reference unknown cards
- VALIDATION_ERROR: Request parameters are malformed
- GAME_OVER: The game has already ended
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
    INVALID_DECK = "INVALID_DECK"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    GAME_OVER = "GAME_OVER"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class EffectInfo(BaseModel):
    """One printed effect."""
    trigger: str
    description: str
    continuous: bool = False

    model_config = {"from_attributes": True}


class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    name: str
    title: str = ""
    card_type: str = "character"
    chakra: int = 0
    power: int = 0
    group: str = ""
    keywords: list[str] = Field(default_factory=list)
    rarity: str = "C"
    base_points: int = 0
    effects: list[EffectInfo] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class CharacterInfo(BaseModel):
    """A character on a mission. `card` and `power` are null when concealed."""
    instance_id: str
    mission_index: int
    controller: str
    hidden: bool
    power_tokens: int = 0
    card: Optional[CardInfo] = None
    power: Optional[int] = None
    stack_size: int = 1


class MissionInfo(BaseModel):
    """An active mission from the viewer's side."""
    index: int
    card: CardInfo
    rank: str
    base_points: int
    rank_bonus: int
    value: int
    won_by: Optional[str] = None
    my_characters: list[CharacterInfo] = Field(default_factory=list)
    opponent_characters: list[CharacterInfo] = Field(default_factory=list)
    my_power: int = 0
    opponent_power: int = 0


class PlayerInfo(BaseModel):
    """The viewer's own seat."""
    player_id: str
    label: str
    hand: list[CardInfo] = Field(default_factory=list)
    hand_size: int = 0
    deck_size: int = 0
    discard_size: int = 0
    chakra: int = 0
    mission_points: int = 0
    passed: bool = False
    has_mulliganed: bool = False
    characters_in_play: int = 0


class OpponentInfo(BaseModel):
    """The opponent's seat: public information only."""
    player_id: str
    label: str
    hand_size: int = 0
    deck_size: int = 0
    discard_size: int = 0
    chakra: int = 0
    mission_points: int = 0
    passed: bool = False
    has_mulliganed: bool = False
    characters_in_play: int = 0


class PendingActionInfo(BaseModel):
    """A choice the viewer must make before play continues."""
    action_id: str
    kind: str
    description: str
    options: list[str] = Field(default_factory=list)
    min_selections: int = 1
    max_selections: int = 1


class LogEntryInfo(BaseModel):
    turn: int
    phase: str
    player: Optional[str] = None
    action: str
    details: str

    model_config = {"from_attributes": True}


class ActionInfo(BaseModel):
    """A legal action, indexed for submission."""
    index: Optional[int] = None
    type: str
    description: str = ""
    card_index: Optional[int] = None
    mission_index: Optional[int] = None
    instance_id: Optional[str] = None
    do_mulligan: Optional[bool] = None
    pending_id: Optional[str] = None
    targets: list[str] = Field(default_factory=list)


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    difficulty: Optional[str] = Field(None, description="easy, medium, hard or expert")
    seed: Optional[int] = Field(None, description="Seed for reproducible games")
    human_deck: str = Field("leaf", description="Starter deck for the human seat")
    ai_deck: str = Field("sound_sand", description="Starter deck for the AI seat")


class ActionBody(BaseModel):
    """An explicit action, in the engine's flat dict form."""
    type: str = Field(..., description="Action type, e.g. PLAY_CHARACTER or PASS")
    card_index: Optional[int] = None
    mission_index: Optional[int] = None
    instance_id: Optional[str] = None
    do_mulligan: Optional[bool] = None
    pending_id: Optional[str] = None
    targets: list[str] = Field(default_factory=list)


class SubmitActionRequest(BaseModel):
    """Submit either an index into GET /actions or an explicit action."""
    action_index: Optional[int] = Field(None, ge=0)
    action: Optional[ActionBody] = None


class DeckValidationRequest(BaseModel):
    """Card ids for a deck and its missions."""
    cards: list[str] = Field(..., description="Character card ids")
    missions: list[str] = Field(default_factory=list, description="Mission card ids")


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
    """Game state as the human seat sees it."""
    session_id: str
    game_id: str
    viewer: str
    turn: int
    phase: str
    active_player: str
    edge_holder: str
    acting_player: Optional[str] = None
    is_game_over: bool = False
    winner: Optional[str] = None
    you: PlayerInfo
    opponent: OpponentInfo
    missions: list[MissionInfo] = Field(default_factory=list)
    mission_deck_size: int = 0
    pending_actions: list[PendingActionInfo] = Field(default_factory=list)
    log: list[LogEntryInfo] = Field(default_factory=list)
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    difficulty: str
    human_player_id: str
    ai_player_id: str
    created_at: float = 0.0
    game_state: Optional[GameStateResponse] = None
    api_version: str = "v1"


class ActionListResponse(BaseModel):
    """Legal actions for the human seat."""
    session_id: str
    actions: list[ActionInfo] = Field(default_factory=list)
    count: int = 0


class ActionResultResponse(BaseModel):
    """Result of a human action and the AI replies that followed."""
    session_id: str
    success: bool
    applied: ActionInfo
    ai_actions: list[ActionInfo] = Field(default_factory=list)
    game_state: GameStateResponse
    winner: Optional[str] = None
    api_version: str = "v1"


class CardListResponse(BaseModel):
    cards: list[CardInfo]
    count: int


class DeckValidationResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    card_count: int = 0
    mission_count: int = 0


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
