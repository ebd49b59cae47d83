"""
Medium AI - Greedy single-ply scoring.

Scores every legal action with a hand-crafted heuristic and plays the
best one. No lookahead, no opponent modelling.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.action import ActionType
from ..engine_core.constants import opponent_of
from ..engine_core.state import EffectTrigger, GamePhase
from .heuristics import card_efficiency, evaluate_single_mission, turns_left
from .policy import AIStrategy, BotDecision, mulligan_action

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import Card, GameState

INVALID = -100.0


class MediumStrategy(AIStrategy):
    difficulty = "medium"

    def select_action(
        self,
        state: GameState,
        player_id: str,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        if state.phase == GamePhase.MULLIGAN:
            playable = sum(1 for c in state.player(player_id).hand if c.chakra <= 5)
            keep = playable >= self.personality.mulligan_keep_threshold
            return BotDecision(
                action=mulligan_action(legal_actions, keep=keep),
                explanation=f"{playable} playable cards in hand",
            )

        scored = [(action, self.score_action(action, state, player_id)) for action in legal_actions]
        best_action, best_score = max(scored, key=lambda pair: pair[1])
        return BotDecision(
            action=best_action,
            explanation=f"Greedy choice ({best_score:.1f})",
            evaluated_actions=len(scored),
            best_score=best_score,
        )

    def score_action(self, action: Action, state: GameState, player_id: str) -> float:
        handler = {
            ActionType.PLAY_CHARACTER: self._score_play,
            ActionType.PLAY_HIDDEN: self._score_hidden,
            ActionType.REVEAL_CHARACTER: self._score_reveal,
            ActionType.UPGRADE_CHARACTER: self._score_upgrade,
            ActionType.PASS: self._score_pass,
        }.get(action.action_type)
        if handler is not None:
            return handler(action, state, player_id)
        if action.action_type == ActionType.SELECT_TARGET:
            return 10.0
        return 0.0

    # =========================================================================
    # Per-action scores
    # =========================================================================

    def _hand_card(self, action: Action, state: GameState, player_id: str) -> Card | None:
        hand = state.player(player_id).hand
        index = action.payload.card_index
        if index is None or not 0 <= index < len(hand):
            return None
        return hand[index]

    def _score_play(self, action: Action, state: GameState, player_id: str) -> float:
        card = self._hand_card(action, state, player_id)
        index = action.payload.mission_index
        if card is None or index is None or index >= len(state.active_missions):
            return INVALID
        mission = state.active_missions[index]

        score = card.power * 5.0
        score += mission.value * 3
        score += evaluate_single_mission(state, mission, player_id) * 2

        if card.effects:
            score += len(card.effects) * 2
            if card.has_trigger(EffectTrigger.SCORE):
                score += 4
            score += card.total_powerup * 3
            score += card.total_chakra_bonus * turns_left(state) * 2

        score += card_efficiency(card) * 2
        return score

    def _score_hidden(self, action: Action, state: GameState, player_id: str) -> float:
        card = self._hand_card(action, state, player_id)
        if card is None:
            return INVALID

        score = 5.0
        if card.chakra >= 4:
            # Revealed later for full value
            score += 3
        if card.has_trigger(EffectTrigger.AMBUSH):
            score += 8

        index = action.payload.mission_index
        if index is not None and index < len(state.active_missions):
            score += state.active_missions[index].value * 0.5
        return score

    def _score_reveal(self, action: Action, state: GameState, player_id: str) -> float:
        for index, _, char in state.iter_characters(player_id):
            if char.instance_id != action.payload.instance_id:
                continue
            score = char.card.power * 4.0
            if char.card.has_trigger(EffectTrigger.AMBUSH):
                score += 10
            score += state.active_missions[index].value * 2
            return score
        return 0.0

    def _score_upgrade(self, action: Action, state: GameState, player_id: str) -> float:
        card = self._hand_card(action, state, player_id)
        if card is None:
            return INVALID
        score = card.power * 4.0
        if card.has_trigger(EffectTrigger.UPGRADE):
            score += 8
        # Only the difference is paid
        return score + 5

    def _score_pass(self, action: Action, state: GameState, player_id: str) -> float:
        if state.player(player_id).chakra <= 0:
            return 3.0
        if state.player(opponent_of(player_id)).passed:
            return -5.0
        if state.edge_holder != player_id:
            # Passing first takes the Edge
            return 2.0
        return -2.0
