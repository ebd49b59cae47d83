"""
Engine Core - Deterministic game state management and effect resolution.

The engine is the runtime that:
1. Creates a GameState from a GameConfig
2. Generates legal actions
3. Applies actions via the reducer
4. Resolves card effects, suspending for player choices
5. Projects state to what each player may see
"""

from .state import (
    GameState, PlayerState, Card, CardEffect, CardType, CharacterInPlay, ActiveMission,
    GamePhase, EffectTrigger, PendingEffect, PendingAction, PendingKind,
    GameConfig, PlayerConfig,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .reducer import Reducer, apply_action, apply_action_result
from .action_generator import ActionGenerator, get_valid_actions, is_legal
from .effect_resolver import EffectResolver
from .effect_registry import EffectContext, AwaitingSelection, RESOLVED
from .visibility import VisibleGameState, get_visible_state
from .engine import GameEngine, create_game, get_winner, get_acting_player

__all__ = [
    "GameState",
    "PlayerState",
    "Card",
    "CardEffect",
    "CardType",
    "CharacterInPlay",
    "ActiveMission",
    "GamePhase",
    "EffectTrigger",
    "PendingEffect",
    "PendingAction",
    "PendingKind",
    "GameConfig",
    "PlayerConfig",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "Reducer",
    "apply_action",
    "apply_action_result",
    "ActionGenerator",
    "get_valid_actions",
    "is_legal",
    "EffectResolver",
    "EffectContext",
    "AwaitingSelection",
    "RESOLVED",
    "VisibleGameState",
    "get_visible_state",
    "GameEngine",
    "create_game",
    "get_winner",
    "get_acting_player",
]
