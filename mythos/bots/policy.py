"""
AI Policy - Interface for AI decision-making.

An AIStrategy takes a sanitized game state and the legal actions and
returns a decision wrapping exactly one of those actions.

Sanitization hides what the AI's seat could not know:
- Opponent hand and deck contents (sizes are kept in state.metadata)
- Card data of the opponent's hidden characters
- The opponent's mission cards, and the order of every face-down pile
- The game RNG, which is reseeded
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.action import ActionType
from ..engine_core.constants import opponent_of
from ..engine_core.state import Card
from .evaluator import BoardEvaluator
from .personality import PERSONALITIES, Personality

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by an AI.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    - Evaluation details
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class AIStrategy(ABC):
    """
    Abstract base class for AI strategies.

    Strategies never see concealed information: AIPlayer sanitizes the
    state before calling select_action.
    """
    difficulty: str = ""

    def __init__(self, personality: Personality | None = None, seed: int | None = None):
        self.personality = personality or PERSONALITIES[self.difficulty]
        self.evaluator = BoardEvaluator(self.personality.weights)
        self.rng = random.Random(seed)

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        player_id: str,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Sanitized game state
            player_id: The AI's seat
            legal_actions: Non-empty list of legal actions

        Returns:
            BotDecision with one of legal_actions
        """
        pass

    def get_name(self) -> str:
        return self.__class__.__name__


def mulligan_action(legal_actions: list[Action], keep: bool) -> Action:
    """The keep or redraw action, falling back to the first legal action."""
    for action in legal_actions:
        if action.action_type == ActionType.MULLIGAN and action.payload.do_mulligan is (not keep):
            return action
    return legal_actions[0]


def sanitize_state(state: GameState, ai_player: str, rng: random.Random | None = None) -> GameState:
    """
    Copy of `state` with everything the AI's seat could not know removed.

    The shape of the state is unchanged, so strategies can run the
    engine on it during search. Face-down orders (mission deck, own deck)
    are reshuffled with `rng` and the game RNG is replaced, so a search
    that crosses a round boundary cannot read future draws.
    """
    rng = rng or random.Random()
    opponent = opponent_of(ai_player)
    sanitized = state.clone()
    opp = sanitized.player(opponent)

    sanitized.metadata["concealed_hand_size"] = {opponent: len(opp.hand)}
    sanitized.metadata["concealed_deck_size"] = {opponent: len(opp.deck)}
    opp.hand = []
    opp.deck = []
    opp.mission_cards = []
    opp.unused_mission = None

    for _, _, char in sanitized.iter_characters(opponent):
        if char.hidden:
            char.stack = (Card.concealed(),)

    rng.shuffle(sanitized.player(ai_player).deck)
    rng.shuffle(sanitized.mission_deck)
    sanitized.random_seed = None
    sanitized.random_state = random.Random(rng.getrandbits(64))
    return sanitized
