"""
Board Evaluator - Scores game states for AI decision-making.

The evaluator assigns a numeric score to a state from one player's
perspective, combining:
- Position features (mission points, projected mission control)
- Board features (presence, power per mission, hidden threats)
- Resource features (chakra, hand size and quality, the Edge)

Weights can be adjusted per difficulty through Personality.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.constants import opponent_of
from ..engine_core.state import EffectTrigger, GamePhase
from .heuristics import evaluate_chakra_advantage, evaluate_mission_control, side_power

if TYPE_CHECKING:
    from ..engine_core.state import GameState

WIN_SCORE = 10000.0


@dataclass
class EvaluationWeights:
    """
    Weights for the board evaluator.

    Higher values = more importance.
    """
    # Position
    mission_points: float = 100.0
    mission_control: float = 40.0

    # Board
    board_presence: float = 10.0
    hidden_threats: float = 4.0

    # Resources
    chakra_advantage: float = 5.0
    hand_size: float = 3.0
    hand_quality: float = 2.0
    edge: float = 8.0


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    total_score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


def hand_size(state: GameState, player_id: str) -> int:
    """Hand size, falling back to the count kept when the hand was concealed."""
    hand = state.player(player_id).hand
    if hand:
        return len(hand)
    return state.metadata.get("concealed_hand_size", {}).get(player_id, 0)


class BoardEvaluator:
    """
    Evaluates game states using weighted heuristics.

    Used by the search strategies at their leaves and by the player
    wrapper for reporting.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, state: GameState, player_id: str) -> StateEvaluation:
        """
        Evaluate a state from a player's perspective.

        Positive is favourable, negative unfavourable.
        """
        w = self.weights
        opponent = opponent_of(player_id)
        features = {
            "mission_points": float(
                state.player(player_id).mission_points - state.player(opponent).mission_points
            ),
            "mission_control": evaluate_mission_control(state, player_id),
            "board_presence": self.evaluate_board_presence(state, player_id),
            "chakra_advantage": evaluate_chakra_advantage(state, player_id),
            "hand_size": float(hand_size(state, player_id) - hand_size(state, opponent)),
            "edge": 1.0 if state.edge_holder == player_id else 0.0,
            "hand_quality": self.evaluate_hand_quality(state, player_id),
            "hidden_threats": self.evaluate_hidden_threats(state, player_id),
        }
        total = sum(getattr(w, name) * value for name, value in features.items())
        return StateEvaluation(total_score=total, feature_breakdown=features)

    def score(self, state: GameState, player_id: str) -> float:
        return self.evaluate(state, player_id).total_score

    def evaluate_terminal(self, state: GameState, player_id: str) -> float:
        """Fixed win/loss score for finished games, the board score otherwise."""
        if state.phase != GamePhase.GAME_OVER:
            return self.score(state, player_id)

        mine = state.player(player_id).mission_points
        theirs = state.player(opponent_of(player_id)).mission_points
        if mine > theirs:
            return WIN_SCORE
        if theirs > mine:
            return -WIN_SCORE
        return WIN_SCORE if state.edge_holder == player_id else -WIN_SCORE

    def evaluate_board_presence(self, state: GameState, player_id: str) -> float:
        """Character count and power difference on each mission, weighted by its value."""
        opponent = opponent_of(player_id)
        score = 0.0
        for mission in state.active_missions:
            score += len(mission.characters(player_id)) - len(mission.characters(opponent))
            power_diff = side_power(state, mission, player_id) - side_power(state, mission, opponent)
            score += power_diff * mission.value * 0.5
        return score

    def evaluate_hand_quality(self, state: GameState, player_id: str) -> float:
        player = state.player(player_id)
        score = 0.0
        for card in player.hand:
            score += card.power * 0.5
            if card.effects:
                score += 1
            if card.has_trigger(EffectTrigger.SCORE):
                score += 2
            score += card.total_powerup * 1.5
            score += card.total_chakra_bonus * 2
            if card.chakra > player.chakra + 5:
                score -= 0.5
        return score

    def evaluate_hidden_threats(self, state: GameState, player_id: str) -> float:
        """Own hidden characters threaten; the opponent's are a risk."""
        opponent = opponent_of(player_id)
        mine = sum(1 for _, _, c in state.iter_characters(player_id) if c.hidden)
        theirs = sum(1 for _, _, c in state.iter_characters(opponent) if c.hidden)
        return mine * 2 - theirs * 1.5
