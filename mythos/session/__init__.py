"""
Session Module - Manages in-memory game sessions.

A session represents one game against the AI:
- Created when a user starts a game
- Holds the current game state and the AI player
- Runs AI replies after each human action
- Destroyed when the game ends or the session expires

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult, MatchResult, simulate_match

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "MatchResult",
    "simulate_match",
]
