"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player moves (play, play hidden, reveal, upgrade, pass)
2. Setup decisions (mulligan)
3. Answers to suspended effects (select target, decline)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions a player can submit."""
    PLAY_CHARACTER = "PLAY_CHARACTER"
    PLAY_HIDDEN = "PLAY_HIDDEN"
    REVEAL_CHARACTER = "REVEAL_CHARACTER"
    UPGRADE_CHARACTER = "UPGRADE_CHARACTER"
    PASS = "PASS"
    MULLIGAN = "MULLIGAN"

    # Responses to a pending effect
    SELECT_TARGET = "SELECT_TARGET"
    DECLINE_OPTIONAL_EFFECT = "DECLINE_OPTIONAL_EFFECT"


class ErrorCode:
    """Reasons an action is rejected."""
    WRONG_PHASE = "WRONG_PHASE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ALREADY_PASSED = "ALREADY_PASSED"
    ALREADY_DECIDED = "ALREADY_DECIDED"
    INVALID_CARD = "INVALID_CARD"
    INVALID_MISSION = "INVALID_MISSION"
    INSUFFICIENT_CHAKRA = "INSUFFICIENT_CHAKRA"
    NAME_CONFLICT = "NAME_CONFLICT"
    PLAY_RESTRICTED = "PLAY_RESTRICTED"
    INVALID_UPGRADE = "INVALID_UPGRADE"
    INVALID_TARGET = "INVALID_TARGET"
    PENDING_SELECTION = "PENDING_SELECTION"
    NO_HANDLER = "NO_HANDLER"


@dataclass(frozen=True)
class ActionPayload:
    """
    Parameters of an action.

    Different action types use different fields; validation happens
    in the reducer.
    """
    card_index: int | None = None
    mission_index: int | None = None
    instance_id: str | None = None  # Reveal / upgrade target
    do_mulligan: bool | None = None
    pending_id: str | None = None  # Pending action or pending effect id
    targets: tuple[str, ...] = ()


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Actions are value objects: two actions with the same type and payload
    compare equal, which lets callers check membership in get_valid_actions.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def play_character(cls, card_index: int, mission_index: int) -> Action:
        """Factory for a face-up play."""
        return cls(
            action_type=ActionType.PLAY_CHARACTER,
            payload=ActionPayload(card_index=card_index, mission_index=mission_index),
        )

    @classmethod
    def play_hidden(cls, card_index: int, mission_index: int) -> Action:
        """Factory for a face-down play."""
        return cls(
            action_type=ActionType.PLAY_HIDDEN,
            payload=ActionPayload(card_index=card_index, mission_index=mission_index),
        )

    @classmethod
    def reveal(cls, mission_index: int, instance_id: str) -> Action:
        """Factory for revealing a hidden character."""
        return cls(
            action_type=ActionType.REVEAL_CHARACTER,
            payload=ActionPayload(mission_index=mission_index, instance_id=instance_id),
        )

    @classmethod
    def upgrade(cls, card_index: int, mission_index: int, target_instance_id: str) -> Action:
        """Factory for upgrading a character with a same-name card."""
        return cls(
            action_type=ActionType.UPGRADE_CHARACTER,
            payload=ActionPayload(
                card_index=card_index,
                mission_index=mission_index,
                instance_id=target_instance_id,
            ),
        )

    @classmethod
    def pass_turn(cls) -> Action:
        return cls(action_type=ActionType.PASS)

    @classmethod
    def mulligan(cls, do_mulligan: bool) -> Action:
        return cls(action_type=ActionType.MULLIGAN, payload=ActionPayload(do_mulligan=do_mulligan))

    @classmethod
    def select_target(cls, pending_action_id: str, targets: list[str] | tuple[str, ...]) -> Action:
        """Factory for answering a pending selection."""
        return cls(
            action_type=ActionType.SELECT_TARGET,
            payload=ActionPayload(pending_id=pending_action_id, targets=tuple(targets)),
        )

    @classmethod
    def decline(cls, pending_effect_id: str) -> Action:
        """Factory for declining an optional pending effect."""
        return cls(
            action_type=ActionType.DECLINE_OPTIONAL_EFFECT,
            payload=ActionPayload(pending_id=pending_effect_id),
        )

    def to_dict(self) -> dict[str, Any]:
        """Flat JSON-friendly form."""
        data: dict[str, Any] = {"type": self.action_type.value}
        p = self.payload
        if p.card_index is not None:
            data["card_index"] = p.card_index
        if p.mission_index is not None:
            data["mission_index"] = p.mission_index
        if p.instance_id is not None:
            data["instance_id"] = p.instance_id
        if p.do_mulligan is not None:
            data["do_mulligan"] = p.do_mulligan
        if p.pending_id is not None:
            data["pending_id"] = p.pending_id
        if p.targets:
            data["targets"] = list(p.targets)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        action_type = ActionType(data["type"])
        return cls(
            action_type=action_type,
            payload=ActionPayload(
                card_index=data.get("card_index"),
                mission_index=data.get("mission_index"),
                instance_id=data.get("instance_id"),
                do_mulligan=data.get("do_mulligan"),
                pending_id=data.get("pending_id"),
                targets=tuple(data.get("targets", ())),
            ),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error message and code (if failed)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
