"""
Easy AI - Random legal moves.

Biased toward keeping the opening hand and toward playing over passing.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.action import ActionType
from ..engine_core.state import GamePhase
from .policy import AIStrategy, BotDecision, mulligan_action

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import GameState


class EasyStrategy(AIStrategy):
    difficulty = "easy"

    def select_action(
        self,
        state: GameState,
        player_id: str,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        if state.phase == GamePhase.MULLIGAN:
            keep = self.rng.random() < self.personality.keep_probability
            return BotDecision(
                action=mulligan_action(legal_actions, keep=keep),
                explanation="Kept hand" if keep else "Redrew hand",
                evaluated_actions=len(legal_actions),
            )

        plays = [a for a in legal_actions if a.action_type != ActionType.PASS]
        passes = [a for a in legal_actions if a.action_type == ActionType.PASS]
        if plays and passes:
            if self.rng.random() < self.personality.play_probability:
                action = self.rng.choice(plays)
            else:
                action = passes[0]
        else:
            action = self.rng.choice(legal_actions)

        return BotDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )
