"""
AI Player - Wraps a strategy and drives it against the engine.

The player:
1. Asks the engine for its legal actions
2. Skips the strategy when there is zero or one option
3. Sanitizes the state so the strategy never sees concealed cards
4. Returns the strategy's choice, falling back to the first legal
   action if the strategy returns something illegal
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..engine_core.action_generator import get_valid_actions
from ..engine_core.reducer import apply_action
from .easy import EasyStrategy
from .expert import ExpertStrategy
from .hard import HardStrategy
from .medium import MediumStrategy
from .policy import AIStrategy, BotDecision, sanitize_state

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

STRATEGIES: dict[str, type[AIStrategy]] = {
    "easy": EasyStrategy,
    "medium": MediumStrategy,
    "hard": HardStrategy,
    "expert": ExpertStrategy,
}


def create_strategy(difficulty: str, seed: int | None = None) -> AIStrategy:
    """
    Build the strategy for a difficulty name.

    Raises:
        ValueError: for an unknown difficulty
    """
    strategy_cls = STRATEGIES.get(difficulty.lower())
    if strategy_cls is None:
        raise ValueError(f"Unknown difficulty: {difficulty}. Choose from {', '.join(STRATEGIES)}")
    return strategy_cls(seed=seed)


class AIPlayer:
    """
    One AI-controlled seat.

    Usage:
        ai = AIPlayer("hard", "player2")
        action = ai.get_action(state)
        if action is not None:
            state = apply_action(state, "player2", action)
    """

    def __init__(
        self,
        difficulty: str,
        player_id: str,
        seed: int | None = None,
        strategy: AIStrategy | None = None,
    ):
        self.player_id = player_id
        self.strategy = strategy or create_strategy(difficulty, seed)

    @property
    def difficulty(self) -> str:
        return self.strategy.difficulty

    def decide(self, state: GameState) -> BotDecision | None:
        """Full decision record, or None when the seat has nothing to do."""
        legal = get_valid_actions(state, self.player_id)
        if not legal:
            return None
        if len(legal) == 1:
            return BotDecision(action=legal[0], explanation="Only legal action", evaluated_actions=1)

        sanitized = sanitize_state(state, self.player_id, self.strategy.rng)
        decision = self.strategy.select_action(sanitized, self.player_id, legal)
        if decision.action not in legal:
            logger.warning(
                "%s chose an illegal %s; using first legal action",
                self.strategy.get_name(), decision.action.action_type.value,
            )
            decision = BotDecision(action=legal[0], explanation="Fallback to first legal action")
        return decision

    def get_action(self, state: GameState) -> Action | None:
        decision = self.decide(state)
        return decision.action if decision else None

    def execute_turn(self, state: GameState) -> GameState:
        """Choose and apply one action; unchanged state if there is nothing to do."""
        action = self.get_action(state)
        if action is None:
            return state
        return apply_action(state, self.player_id, action)
