"""
Session Manager - Creates and manages game sessions.

A session is one game between a human seat and an AI seat:
1. Created from a difficulty and starter deck names
2. Holds the canonical GameState and the AIPlayer
3. Advanced through GameLoop
4. Ended explicitly or expired after the idle TTL

PERSISTENCE RULES:
- Sessions live in memory only
- Ending a session drops its state
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .. import config
from ..bots import AIPlayer, STRATEGIES
from ..cards.catalog import build_starter_deck
from ..engine_core.constants import opponent_of
from ..engine_core.engine import create_game
from ..engine_core.state import GameConfig, GameState, PlayerConfig

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # User quit or session expired


@dataclass
class Session:
    """
    An in-memory game session.

    The human always plays `human_player_id`; the AI plays the other seat.
    """
    session_id: str
    created_at: float
    difficulty: str
    ai: AIPlayer
    human_player_id: str = "player1"

    state: SessionState = SessionState.ACTIVE
    game_state: GameState | None = None
    last_active: float = 0.0

    # Session metadata (deck names, seed)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.last_active:
            self.last_active = self.created_at

    @property
    def ai_player_id(self) -> str:
        return opponent_of(self.human_player_id)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def touch(self, now: float):
        self.last_active = now


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a fresh game and AI opponent
    - Track sessions by id
    - Expire idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, ttl_seconds: int | None = None, clock: Callable[[], float] = time.time):
        self._sessions: dict[str, Session] = {}
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else config.SESSION_TTL_SECONDS
        self._clock = clock

    def create_session(
        self,
        difficulty: str | None = None,
        human_deck: str = "leaf",
        ai_deck: str = "sound_sand",
        seed: int | None = None,
        human_player_id: str = "player1",
    ) -> Session:
        """
        Create a new session and deal a new game.

        Any AI moves owed before the human can act (its mulligan, or its
        first turn) are played before returning.

        Raises:
            ValueError: for an unknown difficulty
            KeyError: for an unknown starter deck
        """
        from .game_loop import GameLoop

        difficulty = (difficulty or config.DEFAULT_DIFFICULTY).lower()
        if difficulty not in STRATEGIES:
            raise ValueError(f"Unknown difficulty: {difficulty}. Choose from {', '.join(STRATEGIES)}")

        ai_player_id = opponent_of(human_player_id)
        human_cards, human_missions = build_starter_deck(human_deck)
        ai_cards, ai_missions = build_starter_deck(ai_deck)
        seats = {
            human_player_id: PlayerConfig(human_cards, human_missions, label="You"),
            ai_player_id: PlayerConfig(
                ai_cards, ai_missions, label=f"AI ({difficulty})", is_ai=True, ai_difficulty=difficulty
            ),
        }
        game_state = create_game(GameConfig(player1=seats["player1"], player2=seats["player2"], seed=seed))

        now = self._clock()
        session = Session(
            session_id=str(uuid.uuid4()),
            created_at=now,
            difficulty=difficulty,
            ai=AIPlayer(difficulty, ai_player_id, seed=seed),
            human_player_id=human_player_id,
            game_state=game_state,
            metadata={"human_deck": human_deck, "ai_deck": ai_deck, "seed": seed},
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s (%s, game %s)", session.session_id, difficulty, game_state.game_id)

        GameLoop(session).run_ai_turns()
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID, refreshing its idle timer."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.touch(self._clock())
        return session

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop its state.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        session.game_state = None
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [sid for sid, session in self._sessions.items() if session.is_active()]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> int:
        """
        End sessions idle for longer than the TTL.

        Returns the number of sessions removed.
        """
        max_age = max_age_seconds if max_age_seconds is not None else self.ttl_seconds
        now = self._clock()
        stale = [
            sid for sid, session in self._sessions.items()
            if now - session.last_active > max_age
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)
