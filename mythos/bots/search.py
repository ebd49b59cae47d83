"""
Search helpers shared by the Hard and Expert strategies.

- Cheap action ordering used for pruning and chance weights
- Branching limits
- Safe application of hypothetical actions
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..engine_core.action import ActionType
from ..engine_core.reducer import apply_action

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

SEARCH_PENALTY = -1000.0


class SearchFault(Exception):
    """A hypothetical action raised while being explored."""


def quick_score(
    action: Action,
    state: GameState,
    player_id: str,
    pass_score: float = -1.0,
    default: float = 0.0,
) -> float:
    """Cheap ordering heuristic: no cloning, no evaluation."""
    kind = action.action_type
    if kind in (ActionType.PLAY_CHARACTER, ActionType.UPGRADE_CHARACTER):
        hand = state.player(player_id).hand
        index = action.payload.card_index
        if index is None or not 0 <= index < len(hand):
            return 0.0
        card = hand[index]
        if kind == ActionType.PLAY_CHARACTER:
            return card.power * 3.0 + len(card.effects) * 2
        return card.power * 4.0 + 5
    if kind == ActionType.REVEAL_CHARACTER:
        return 15.0
    if kind == ActionType.PLAY_HIDDEN:
        return 5.0
    if kind == ActionType.PASS:
        return pass_score
    return default


def order_actions(actions: list[Action], state: GameState, player_id: str, **score_kwargs) -> list[Action]:
    """Best-first by quick_score; ties keep generation order."""
    return sorted(actions, key=lambda a: quick_score(a, state, player_id, **score_kwargs), reverse=True)


def limit_actions(
    actions: list[Action],
    state: GameState,
    player_id: str,
    max_branching: int,
    keep_pass: bool = False,
    **score_kwargs,
) -> list[Action]:
    """
    Top `max_branching` actions by quick_score.

    With keep_pass, PASS replaces the last kept action when it would
    otherwise be cut.
    """
    ordered = order_actions(actions, state, player_id, **score_kwargs)
    if len(ordered) <= max_branching:
        return ordered

    limited = ordered[:max_branching]
    if keep_pass and not any(a.action_type == ActionType.PASS for a in limited):
        for action in actions:
            if action.action_type == ActionType.PASS:
                limited[-1] = action
                break
    return limited


def explore(state: GameState, player_id: str, action: Action) -> GameState:
    """
    Apply a hypothetical action.

    Raises:
        SearchFault: if the engine raised while applying it
    """
    try:
        return apply_action(state, player_id, action)
    except Exception as e:
        logger.debug("Search branch %s for %s failed: %s", action.action_type.value, player_id, e)
        raise SearchFault(str(e)) from e
