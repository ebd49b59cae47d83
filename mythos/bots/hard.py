"""
Hard AI - Minimax with alpha-beta pruning.

Looks ahead `search_depth` plies on the sanitized state. Each node
explores at most `max_branching` actions, ordered by a cheap heuristic
to improve pruning. The side to move at each node is whoever the
engine says must act, so passes and pending selections are searched
correctly.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.action_generator import get_valid_actions
from ..engine_core.engine import get_acting_player
from ..engine_core.state import GamePhase
from .policy import AIStrategy, BotDecision, mulligan_action
from .search import SEARCH_PENALTY, SearchFault, explore, limit_actions

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import GameState

INF = float("inf")


class HardStrategy(AIStrategy):
    difficulty = "hard"

    def select_action(
        self,
        state: GameState,
        player_id: str,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        if state.phase == GamePhase.MULLIGAN:
            return self.decide_mulligan(state, player_id, legal_actions)

        candidates = limit_actions(legal_actions, state, player_id, self.personality.max_branching)
        best_action, best_score = candidates[0], -INF
        for action in candidates:
            try:
                child = explore(state, player_id, action)
                score = self.minimax(child, self.personality.search_depth - 1, -INF, INF, player_id)
            except SearchFault:
                score = SEARCH_PENALTY
            if score > best_score:
                best_action, best_score = action, score

        return BotDecision(
            action=best_action,
            explanation=f"Minimax depth {self.personality.search_depth} ({best_score:.1f})",
            evaluated_actions=len(candidates),
            best_score=best_score,
        )

    def minimax(self, state: GameState, depth: int, alpha: float, beta: float, ai_player: str) -> float:
        if depth <= 0 or state.is_over:
            return self.evaluator.evaluate_terminal(state, ai_player)

        current = get_acting_player(state)
        if current is None:
            return self.evaluator.score(state, ai_player)
        actions = get_valid_actions(state, current)
        if not actions:
            return self.evaluator.score(state, ai_player)

        maximizing = current == ai_player
        best = -INF if maximizing else INF
        for action in limit_actions(actions, state, current, self.personality.max_branching):
            try:
                child = explore(state, current, action)
            except SearchFault:
                continue
            value = self.minimax(child, depth - 1, alpha, beta, ai_player)
            if maximizing:
                best = max(best, value)
                alpha = max(alpha, value)
            else:
                best = min(best, value)
                beta = min(beta, value)
            if beta <= alpha:
                break

        if best in (INF, -INF):
            return SEARCH_PENALTY
        return best

    def decide_mulligan(self, state: GameState, player_id: str, legal_actions: list[Action]) -> BotDecision:
        """Keep a hand with an early curve and playable power."""
        hand = state.player(player_id).hand

        early = sum(1 for c in hand if c.chakra <= 3)
        mid = sum(1 for c in hand if 4 <= c.chakra <= 6)
        score = early * 3 + mid * 2
        score += sum(1 for c in hand if c.effects)
        score += sum(c.power for c in hand) * 0.5
        if early == 0:
            score -= 5

        keep = score >= self.personality.mulligan_keep_threshold
        return BotDecision(
            action=mulligan_action(legal_actions, keep=keep),
            explanation=f"Hand score {score:.1f}",
            best_score=score,
        )
