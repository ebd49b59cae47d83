"""
Phase Executors - Mulligan, Start, Mission and End.

The action phase lives in the reducer, since it is driven by player
input. Every function here works in place on a state the caller has
already cloned.

Flow:
    mulligan -> start -> action -> mission -> end -> start ... -> game_over
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from .board import draw_cards, refresh_character_counts, return_to_hand
from .constants import (
    CARDS_DRAWN_PER_TURN, DEFAULT_MISSION_BASE_POINTS, INITIAL_HAND_SIZE,
    MISSION_RANKS, PLAYER_IDS, RANK_ORDER, TOTAL_TURNS, opponent_of,
)
from .continuous import (
    calculate_chakra_income, calculate_mission_power, retains_tokens, returns_at_end_of_round,
)
from .defeat import end_of_round_defeats, end_of_round_moves, move_after_lost_mission
from .game_log import log_action, log_system
from .state import ActiveMission, GamePhase

if TYPE_CHECKING:
    from .effect_resolver import EffectResolver
    from .state import GameState

logger = logging.getLogger(__name__)


# =============================================================================
# Mulligan
# =============================================================================

def apply_mulligan(state: GameState, player_id: str, do_mulligan: bool) -> None:
    """Keep, or shuffle the hand back and draw a fresh one."""
    player = state.player(player_id)
    if do_mulligan:
        player.deck = player.deck + player.hand
        player.hand = []
        state.random_state.shuffle(player.deck)
        draw_cards(state, player_id, INITIAL_HAND_SIZE)
        log_action(state, player_id, "MULLIGAN", f"{player.label} mulligans.")
    else:
        log_action(state, player_id, "KEEP_HAND", f"{player.label} keeps their hand.")
    player.has_mulliganed = True


def both_decided(state: GameState) -> bool:
    return all(p.has_mulliganed for p in state.players)


# =============================================================================
# Start
# =============================================================================

def transition_to_start(state: GameState) -> GameState:
    for player in state.players:
        player.passed = False
    state.first_passer = None
    return run_start_phase(state)


def mission_base_points(state: GameState, card_id: str, printed: int) -> int:
    overrides = state.metadata.get("mission_base_points", {})
    if card_id in overrides:
        return overrides[card_id]
    return printed if printed > 0 else DEFAULT_MISSION_BASE_POINTS


def run_start_phase(state: GameState) -> GameState:
    """
    Reveal a mission, grant chakra, draw, then hand the action phase to
    the Edge holder.
    """
    state.phase = GamePhase.START

    if state.mission_deck:
        card = state.mission_deck.pop(0)
        rank, bonus = MISSION_RANKS[state.turn]
        mission = ActiveMission(
            card=card,
            rank=rank,
            base_points=mission_base_points(state, card.card_id, card.base_points),
            rank_bonus=bonus,
        )
        state.active_missions.append(mission)
        log_system(state, "REVEAL_MISSION",
                   f"Mission {card.name} revealed as rank {rank} "
                   f"({mission.base_points} base + {bonus} bonus).")
    else:
        logger.warning("Mission deck empty at start of turn %d", state.turn)

    refresh_character_counts(state)
    for seat in PLAYER_IDS:
        income = calculate_chakra_income(state, seat)
        state.player(seat).chakra += income
        log_action(state, seat, "GAIN_CHAKRA", f"{seat} gains {income} chakra.")

    for seat in PLAYER_IDS:
        drawn = draw_cards(state, seat, CARDS_DRAWN_PER_TURN)
        log_action(state, seat, "DRAW", f"{seat} draws {len(drawn)} card(s).")

    state.phase = GamePhase.ACTION
    state.active_player = state.edge_holder
    return state


# =============================================================================
# Mission
# =============================================================================

def begin_mission_phase(state: GameState, resolver: EffectResolver) -> GameState:
    state.phase = GamePhase.MISSION
    for mission in state.active_missions:
        mission.won_by = None

    order = {rank: i for i, rank in enumerate(RANK_ORDER)}
    indices = sorted(range(len(state.active_missions)), key=lambda i: order[state.active_missions[i].rank])
    state.missions_to_score = indices
    return continue_mission_phase(state, resolver)


def continue_mission_phase(state: GameState, resolver: EffectResolver) -> GameState:
    """Score remaining missions; stop whenever a SCORE effect suspends."""
    state = resolver.drain_queue(state)
    while state.missions_to_score and not state.pending_actions:
        index = state.missions_to_score.pop(0)
        state = score_mission(state, index, resolver)

    if state.pending_actions or state.trigger_queue:
        return state
    return run_end_phase(state)


def determine_mission_winner(state: GameState, p1_power: int, p2_power: int) -> str | None:
    if p1_power == 0 and p2_power == 0:
        return None
    if p1_power > p2_power:
        return "player1"
    if p2_power > p1_power:
        return "player2"
    # Tie: the Edge holder wins
    return state.edge_holder


def score_mission(state: GameState, index: int, resolver: EffectResolver) -> GameState:
    mission = state.active_missions[index]
    p1_power = calculate_mission_power(state, index, "player1")
    p2_power = calculate_mission_power(state, index, "player2")
    log_system(state, "SCORE_MISSION",
               f"Mission {index + 1} ({mission.rank}) {mission.card.name}: "
               f"player1 {p1_power} vs player2 {p2_power}.")

    winner = determine_mission_winner(state, p1_power, p2_power)
    mission.won_by = winner
    if winner is None:
        log_system(state, "NO_WINNER", f"No winner on mission {index + 1}.")
        return state

    if p1_power == p2_power:
        log_system(state, "TIE_BREAK", f"Tie on mission {index + 1}; {winner} holds the Edge.")

    player = state.player(winner)
    player.mission_points += mission.value
    log_action(state, winner, "WIN_MISSION",
               f"{winner} wins mission {index + 1} for {mission.value} points "
               f"({mission.base_points} base + {mission.rank_bonus} bonus). "
               f"Total: {player.mission_points}.")
    move_after_lost_mission(state, index, opponent_of(winner))

    return resolver.resolve_score_effects(state, winner, index)


# =============================================================================
# End
# =============================================================================

def run_end_phase(state: GameState) -> GameState:
    """
    Clear chakra and tokens, apply end-of-round defeats, moves and returns,
    then either start the next turn or end the game.
    """
    state.phase = GamePhase.END

    for player in state.players:
        player.chakra = 0
        player.cost_surcharge = 0

    for _, _, char in state.iter_characters():
        if char.power_tokens and not retains_tokens(char):
            char.power_tokens = 0

    end_of_round_defeats(state)
    end_of_round_moves(state)

    returning = [
        char for _, _, char in state.iter_characters() if returns_at_end_of_round(state, char)
    ]
    for char in returning:
        card = return_to_hand(state, char.instance_id)
        if card is not None:
            log_action(state, char.owner, "RETURN_TO_HAND", f"{card.name} returns to hand.")

    if state.turn >= TOTAL_TURNS:
        state.phase = GamePhase.GAME_OVER
        log_system(state, "GAME_OVER",
                   f"Game over. player1 {state.player1.mission_points} - "
                   f"player2 {state.player2.mission_points}.")
        return state

    state.turn += 1
    return transition_to_start(state)


# =============================================================================
# Flow
# =============================================================================

def advance(state: GameState, resolver: EffectResolver) -> GameState:
    """Run automatic phases until a player must act."""
    if state.pending_actions:
        return state
    if state.phase == GamePhase.MULLIGAN and both_decided(state):
        return transition_to_start(state)
    if state.phase == GamePhase.ACTION and all(p.passed for p in state.players):
        return begin_mission_phase(state, resolver)
    if state.phase == GamePhase.MISSION:
        return continue_mission_phase(state, resolver)
    return state
