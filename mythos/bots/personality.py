"""
AI Personalities - Tuning for each difficulty.

A personality bundles:
- Evaluation weights (what the AI values)
- Search bounds (depth, branching, simulations)
- Mulligan thresholds
- Randomness for the easy level
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .evaluator import EvaluationWeights


@dataclass
class Personality:
    """
    Tuning constants read by a strategy.

    Fields that a strategy does not use are simply ignored.
    """
    name: str
    description: str = ""

    # Evaluation weights
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)

    # Search bounds
    search_depth: int = 0
    max_branching: int = 8
    simulations: int = 0
    min_simulations: int = 0

    # Mulligan: keep when the hand score reaches this
    mulligan_keep_threshold: float = 0.0

    # Easy level coin flips
    keep_probability: float = 0.6
    play_probability: float = 0.7

    # Metadata
    metadata: dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Predefined Personalities
# ============================================================================

EASY = Personality(
    name="Easy",
    description="Random legal moves with a bias toward keeping and playing",
    keep_probability=0.6,
    play_probability=0.7,
)


MEDIUM = Personality(
    name="Medium",
    description="Greedy single-ply scoring of each legal move",
    # Keep with at least this many cards costing 5 or less
    mulligan_keep_threshold=2,
)


HARD = Personality(
    name="Hard",
    description="Depth-3 minimax with alpha-beta pruning",
    search_depth=3,
    max_branching=8,
    mulligan_keep_threshold=8,
)


EXPERT = Personality(
    name="Expert",
    description="Sampled expectimax over plausible opponent hands",
    search_depth=3,
    max_branching=8,
    simulations=30,
    min_simulations=10,
    mulligan_keep_threshold=10,
)


# All predefined personalities, keyed by difficulty
PERSONALITIES: dict[str, Personality] = {
    "easy": EASY,
    "medium": MEDIUM,
    "hard": HARD,
    "expert": EXPERT,
}
