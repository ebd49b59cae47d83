"""
Mission and chakra heuristics shared by the evaluators and strategies.

Everything here reads structured card data only (power, chakra,
trigger kinds, effect metadata). No function looks at effect text.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.constants import BASE_CHAKRA, TOTAL_TURNS, opponent_of
from ..engine_core.continuous import calculate_character_power

if TYPE_CHECKING:
    from ..engine_core.state import ActiveMission, Card, GameState


# =============================================================================
# Missions
# =============================================================================

def side_power(state: GameState, mission: ActiveMission, player_id: str) -> int:
    return sum(calculate_character_power(state, c) for c in mission.characters(player_id))


def evaluate_single_mission(state: GameState, mission: ActiveMission, player_id: str) -> float:
    """
    Projected value of one mission for a player.

    Positive when the player would win it now, negative when losing,
    scaled by what the mission is worth.
    """
    my_power = side_power(state, mission, player_id)
    their_power = side_power(state, mission, opponent_of(player_id))
    value = mission.value
    diff = my_power - their_power

    if diff > 0:
        return value * 1.5
    if diff == 0:
        if my_power == 0:
            return 0.0
        if state.edge_holder == player_id:
            return value * 1.2
        return -value * 0.3
    if -diff <= 2:
        # Still contestable
        return -value * 0.3
    return -value * 0.8


def evaluate_mission_control(state: GameState, player_id: str) -> float:
    return sum(evaluate_single_mission(state, m, player_id) for m in state.active_missions)


def point_spread(state: GameState, player_id: str) -> float:
    """Scored points plus projected wins on unscored missions, mine minus theirs."""
    opponent = opponent_of(player_id)
    mine = state.player(player_id).mission_points
    theirs = state.player(opponent).mission_points
    for mission in state.active_missions:
        if mission.won_by:
            continue
        standing = evaluate_single_mission(state, mission, player_id)
        if standing > 0:
            mine += mission.value
        elif standing < 0:
            theirs += mission.value
    return mine - theirs


# =============================================================================
# Chakra
# =============================================================================

def estimate_chakra_income(state: GameState, player_id: str) -> int:
    """Next start phase income: base, one per character, plus printed CHAKRA bonuses."""
    income = BASE_CHAKRA
    for _, _, char in state.iter_characters(player_id):
        income += 1
        if not char.hidden:
            income += char.card.total_chakra_bonus
    return income


def evaluate_chakra_advantage(state: GameState, player_id: str) -> float:
    opponent = opponent_of(player_id)
    score = state.player(player_id).chakra - state.player(opponent).chakra
    score += (estimate_chakra_income(state, player_id) - estimate_chakra_income(state, opponent)) * 2
    return float(score)


def card_efficiency(card: Card) -> float:
    """Power per chakra; free cards count double their power."""
    if card.chakra == 0:
        return card.power * 2.0
    return card.power / card.chakra


def turns_left(state: GameState) -> int:
    return TOTAL_TURNS - state.turn + 1
