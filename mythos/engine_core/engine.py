"""
Game Engine - The public boundary of the rules engine.

This module provides:
- create_game: GameConfig -> initial GameState (mulligan phase)
- apply_action / get_valid_actions / get_visible_state (re-exported)
- get_winner and get_acting_player queries
- GameEngine, a small facade bundling the above for callers that
  prefer an object

Setup follows the base rules: random starting player (who takes the
Edge), 2 of 3 missions per side shuffled into a shared mission deck,
shuffled decks, 5-card hands.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field

from .action import Action, ActionResult
from .action_generator import get_valid_actions
from .board import draw_cards
from .constants import INITIAL_HAND_SIZE, MISSIONS_SELECTED_PER_PLAYER, PLAYER_IDS
from .game_log import log_system
from .reducer import Reducer
from .state import GameConfig, GamePhase, GameState, PlayerConfig, PlayerState
from .visibility import VisibleGameState, get_visible_state

logger = logging.getLogger(__name__)


# =============================================================================
# Setup
# =============================================================================

def _create_player(player_id: str, config: PlayerConfig, rng: random.Random) -> tuple[PlayerState, list]:
    """Shuffle the deck and pick missions; returns the player and their selected missions."""
    deck = list(config.deck)
    rng.shuffle(deck)

    missions = list(config.mission_cards)
    rng.shuffle(missions)
    selected = missions[:MISSIONS_SELECTED_PER_PLAYER]
    unused = missions[MISSIONS_SELECTED_PER_PLAYER] if len(missions) > MISSIONS_SELECTED_PER_PLAYER else None

    player = PlayerState(
        player_id=player_id,
        label=config.label or player_id,
        deck=deck,
        mission_cards=list(config.mission_cards),
        unused_mission=unused,
        is_ai=config.is_ai,
        ai_difficulty=config.ai_difficulty,
    )
    return player, selected


def create_game(config: GameConfig) -> GameState:
    """
    Create a new game ready for the mulligan.

    Args:
        config: Both players' decks and mission pools, plus an optional seed

    Returns:
        Initial GameState in the mulligan phase, turn 1

    Raises:
        DeckValidationError: if config.validate_decks is set and a deck is illegal
    """
    if config.validate_decks:
        from ..cards.deck import DeckValidationError, validate_deck
        for seat, player_config in zip(PLAYER_IDS, (config.player1, config.player2)):
            result = validate_deck(player_config.deck, player_config.mission_cards)
            if not result.valid:
                raise DeckValidationError(f"{seat}: " + "; ".join(result.errors))

    rng = random.Random(config.seed)

    player1, missions1 = _create_player("player1", config.player1, rng)
    player2, missions2 = _create_player("player2", config.player2, rng)

    mission_deck = missions1 + missions2
    rng.shuffle(mission_deck)

    starting = rng.choice(PLAYER_IDS)
    game_id = f"mythos_{config.seed if config.seed is not None else rng.randint(0, 999999)}"

    state = GameState(
        game_id=game_id,
        player1=player1,
        player2=player2,
        turn=1,
        phase=GamePhase.MULLIGAN,
        active_player=starting,
        edge_holder=starting,
        mission_deck=mission_deck,
        random_seed=config.seed,
        random_state=rng,
    )
    if config.mission_base_points:
        state.metadata["mission_base_points"] = dict(config.mission_base_points)

    for seat in PLAYER_IDS:
        draw_cards(state, seat, INITIAL_HAND_SIZE)

    log_system(state, "GAME_START",
               f"Game started. {state.player(starting).label} goes first and holds the Edge.")
    logger.debug("Created game %s, %s starts", game_id, starting)
    return state


# =============================================================================
# Queries
# =============================================================================

def get_winner(state: GameState) -> str | None:
    """
    Winner of a finished game: more mission points, tie to the Edge holder.

    None while the game is still running.
    """
    if state.phase != GamePhase.GAME_OVER:
        return None
    p1, p2 = state.player1.mission_points, state.player2.mission_points
    if p1 > p2:
        return "player1"
    if p2 > p1:
        return "player2"
    return state.edge_holder


def get_acting_player(state: GameState) -> str | None:
    """Who must act next, or None if nobody can."""
    if state.phase == GamePhase.GAME_OVER:
        return None
    if state.phase == GamePhase.MULLIGAN:
        for player in state.players:
            if not player.has_mulliganed:
                return player.player_id
        return None
    if state.pending_actions:
        return state.pending_actions[0].player
    if state.phase == GamePhase.ACTION:
        active = state.player(state.active_player)
        if not active.passed:
            return state.active_player
        for player in state.players:
            if not player.passed:
                return player.player_id
    return None


# =============================================================================
# Facade
# =============================================================================

@dataclass
class GameEngine:
    """
    Object-style access to the engine.

    Holds no game state; every method takes and returns a GameState.
    """
    reducer: Reducer = field(default_factory=Reducer)

    def create_game(self, config: GameConfig) -> GameState:
        return create_game(config)

    def apply(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        return self.reducer.apply(state, player_id, action)

    def apply_action(self, state: GameState, player_id: str, action: Action) -> GameState:
        result = self.reducer.apply(state, player_id, action)
        if not result.success:
            logger.debug("Rejected %s for %s: %s", action.action_type.value, player_id, result.error)
            return state
        return result.new_state

    def get_valid_actions(self, state: GameState, player_id: str) -> list[Action]:
        return get_valid_actions(state, player_id)

    def get_visible_state(self, state: GameState, player_id: str) -> VisibleGameState:
        return get_visible_state(state, player_id)

    def get_winner(self, state: GameState) -> str | None:
        return get_winner(state)

    def get_acting_player(self, state: GameState) -> str | None:
        return get_acting_player(state)
