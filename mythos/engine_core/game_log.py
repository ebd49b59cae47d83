"""
Game log helpers.

The log is part of the state and only ever appended to. These helpers
write into the (already cloned) state they are given.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .state import LogEntry

if TYPE_CHECKING:
    from .state import GameState


def log_action(state: GameState, player: str | None, action: str, details: str) -> None:
    """Append a player (or system, when player is None) entry."""
    state.log.append(
        LogEntry(
            turn=state.turn,
            phase=state.phase.value,
            player=player,
            action=action,
            details=details,
        )
    )


def log_system(state: GameState, action: str, details: str) -> None:
    log_action(state, None, action, details)


def entries_for(state: GameState, action: str) -> list[LogEntry]:
    """All log entries with the given action code."""
    return [entry for entry in state.log if entry.action == action]
