"""
Bots module - AI opponents.

Provides:
- AIStrategy: Interface for AI decision-making
- AIPlayer: Runs a strategy for one seat on sanitized state
- BoardEvaluator: Scores game states
- Easy, Medium, Hard and Expert strategies
- Personality: Per-difficulty tuning
"""

from .policy import AIStrategy, BotDecision, sanitize_state
from .evaluator import BoardEvaluator, EvaluationWeights, StateEvaluation
from .personality import Personality, PERSONALITIES
from .easy import EasyStrategy
from .medium import MediumStrategy
from .hard import HardStrategy
from .expert import ExpertStrategy
from .player import AIPlayer, STRATEGIES, create_strategy

__all__ = [
    "AIStrategy",
    "BotDecision",
    "sanitize_state",
    "BoardEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
    "Personality",
    "PERSONALITIES",
    "EasyStrategy",
    "MediumStrategy",
    "HardStrategy",
    "ExpertStrategy",
    "AIPlayer",
    "STRATEGIES",
    "create_strategy",
]
