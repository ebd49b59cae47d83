"""
Game Loop - Drives play between a human seat and an AI seat.

The loop:
1. Human submits an action
2. Engine validates and applies it
3. AI moves until the human must act again or the game ends
4. Caller shows the new visible state and the AI's moves
5. Repeat

simulate_match runs the same engine with an AI in both seats.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..bots import AIPlayer, AIStrategy, create_strategy
from ..cards.catalog import build_starter_deck
from ..engine_core.action_generator import get_valid_actions
from ..engine_core.constants import PLAYER_IDS
from ..engine_core.engine import create_game, get_acting_player, get_winner
from ..engine_core.reducer import apply_action, apply_action_result
from ..engine_core.state import GameConfig, PlayerConfig

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import GameState
    from .manager import Session

logger = logging.getLogger(__name__)

# Safety limits on actions taken without human input
MAX_AI_ACTIONS = 200
MAX_MATCH_ACTIONS = 2000


class LoopState(Enum):
    """State of the game loop."""
    WAITING_HUMAN_ACTION = "waiting_human_action"
    RUNNING_AI = "running_ai"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a human action.

    Contains the AI moves that followed and any errors.
    """
    success: bool
    loop_state: LoopState

    # AI actions taken, in order
    ai_actions: list[Action] = field(default_factory=list)

    # Errors (rejected human action)
    errors: list[str] = field(default_factory=list)
    error_code: str | None = None

    # Game over info
    winner: str | None = None


class GameLoop:
    """
    The main game loop driver for a session.

    Usage:
        loop = GameLoop(session)
        result = loop.submit_action(action)
        if not result.success:
            show(result.errors)
    """

    def __init__(self, session: Session):
        self.session = session
        self.state = LoopState.WAITING_HUMAN_ACTION

    def submit_action(self, action: Action) -> TurnResult:
        """Apply the human's action, then let the AI reply."""
        from .manager import SessionState

        game_state = self.session.game_state
        if game_state is None or game_state.is_over:
            return TurnResult(
                success=False,
                loop_state=LoopState.GAME_OVER,
                errors=["Game is over"],
                winner=get_winner(game_state) if game_state else None,
            )

        result = apply_action_result(game_state, self.session.human_player_id, action)
        if not result.success:
            logger.debug("Rejected human action in %s: %s", self.session.session_id, result.error)
            return TurnResult(
                success=False,
                loop_state=self.state,
                errors=[result.error or "Action rejected"],
                error_code=result.error_code,
            )

        self.session.game_state = result.new_state
        turn = self.run_ai_turns()
        if turn.loop_state == LoopState.GAME_OVER:
            self.session.state = SessionState.GAME_OVER
        return turn

    def run_ai_turns(self) -> TurnResult:
        """
        Run AI actions until the AI has nothing to do.

        The AI also moves when the human is not blocked, for example
        during the mulligan where both seats decide independently.
        """
        ai = self.session.ai
        ai_actions: list[Action] = []
        self.state = LoopState.RUNNING_AI

        for _ in range(MAX_AI_ACTIONS):
            game_state = self.session.game_state
            if game_state is None or game_state.is_over:
                break
            decision = ai.decide(game_state)
            if decision is None:
                break
            new_state = apply_action(game_state, ai.player_id, decision.action)
            if new_state is game_state:
                logger.warning("AI action %s was rejected; stopping", decision.action.action_type.value)
                break
            self.session.game_state = new_state
            ai_actions.append(decision.action)
        else:
            logger.warning("AI action limit reached in session %s", self.session.session_id)

        game_state = self.session.game_state
        if game_state is not None and game_state.is_over:
            self.state = LoopState.GAME_OVER
            return TurnResult(
                success=True, loop_state=self.state, ai_actions=ai_actions, winner=get_winner(game_state)
            )

        self.state = LoopState.WAITING_HUMAN_ACTION
        return TurnResult(success=True, loop_state=self.state, ai_actions=ai_actions)


# =============================================================================
# AI vs AI
# =============================================================================

@dataclass
class MatchResult:
    """Outcome of an AI-vs-AI match."""
    game_id: str
    winner: str | None
    points: dict[str, int]
    turns: int
    actions: int
    completed: bool
    final_state: GameState | None = None


def _ai_player(choice: str | AIStrategy, seat: str, seed: int | None) -> AIPlayer:
    if isinstance(choice, AIStrategy):
        return AIPlayer(choice.difficulty, seat, strategy=choice)
    return AIPlayer(choice, seat, strategy=create_strategy(choice, seed))


def simulate_match(
    difficulty_a: str | AIStrategy,
    difficulty_b: str | AIStrategy,
    seed: int | None = None,
    decks: tuple[str, str] = ("leaf", "sound_sand"),
    max_actions: int = MAX_MATCH_ACTIONS,
) -> MatchResult:
    """
    Play a full game between two AIs.

    Each side may be a difficulty name or a ready strategy instance.
    Stops early if no seat can act or the action cap is reached.
    """
    seats = {}
    for seat, deck_name in zip(PLAYER_IDS, decks):
        cards, missions = build_starter_deck(deck_name)
        seats[seat] = PlayerConfig(cards, missions, label=f"{seat} ({deck_name})", is_ai=True)
    state = create_game(GameConfig(player1=seats["player1"], player2=seats["player2"], seed=seed))

    players = {
        "player1": _ai_player(difficulty_a, "player1", seed),
        "player2": _ai_player(difficulty_b, "player2", None if seed is None else seed + 1),
    }

    actions = 0
    while not state.is_over and actions < max_actions:
        acting = get_acting_player(state)
        if acting is None or not get_valid_actions(state, acting):
            logger.warning("No seat can act in %s (phase %s)", state.game_id, state.phase.value)
            break
        action = players[acting].get_action(state)
        new_state = apply_action(state, acting, action)
        if new_state is state:
            logger.warning("Rejected %s for %s; stopping match", action.action_type.value, acting)
            break
        state = new_state
        actions += 1

    logger.info("Match %s finished after %d actions: winner %s", state.game_id, actions, get_winner(state))
    return MatchResult(
        game_id=state.game_id,
        winner=get_winner(state),
        points={p.player_id: p.mission_points for p in state.players},
        turns=state.turn,
        actions=actions,
        completed=state.is_over,
        final_state=state,
    )
