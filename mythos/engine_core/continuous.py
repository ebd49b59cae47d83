"""
Continuous Effect Calculator - Pure functions over the current board.

Everything here is re-derived on every call; nothing is cached between
mutations. Card-specific behaviour comes only from the typed rules on
each card (see card_rules.py).
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .card_rules import (
    RuleScope, ChakraBonus, SelfPower, PowerAura, CostAura, SelfCost, EnemyCostAura, EnemyPowerAura,
    NullifyStrongestEnemy, RetainTokens, ReturnAtEndOfRound, rules_of, has_rule,
)
from .constants import BASE_CHAKRA, opponent_of

if TYPE_CHECKING:
    from .state import Card, CharacterInPlay, GameState


# =============================================================================
# Power
# =============================================================================

def calculate_character_power(state: GameState, char: CharacterInPlay) -> int:
    """
    Effective power of a character.

    Hidden characters have 0 and neither give nor receive modifiers.
    """
    if char.hidden:
        return 0
    if _nullified(state, char):
        return 0
    return _modified_power(state, char)


def _nullified(state: GameState, char: CharacterInPlay) -> bool:
    """Strongest visible character facing an enemy NullifyStrongestEnemy; ties go to the first played."""
    mission = state.active_missions[char.mission_index]
    enemy = opponent_of(char.controller)
    if not any(c.visible and has_rule(c.card, NullifyStrongestEnemy) for c in mission.characters(enemy)):
        return False
    side = [c for c in mission.characters(char.controller) if c.visible]
    strongest = max(side, key=lambda c: _modified_power(state, c))
    return strongest.instance_id == char.instance_id


def _modified_power(state: GameState, char: CharacterInPlay) -> int:
    card = char.card
    controller = char.controller
    scope = RuleScope(state, card, char.mission_index, controller, char)

    power = card.power + char.power_tokens
    for rule in rules_of(card, SelfPower):
        power += rule.value(scope)

    mission = state.active_missions[char.mission_index]
    for other in mission.characters(controller):
        if other.instance_id == char.instance_id or other.hidden:
            continue
        for aura in rules_of(other.card, PowerAura):
            if card.has_keyword(aura.keyword):
                power += aura.amount

    for enemy in mission.characters(opponent_of(controller)):
        if enemy.visible:
            power += sum(aura.amount for aura in rules_of(enemy.card, EnemyPowerAura))

    return max(0, power)


def calculate_mission_power(state: GameState, mission_index: int, player_id: str) -> int:
    """Total effective power of one side of a mission, floored at 0."""
    mission = state.active_missions[mission_index]
    total = sum(calculate_character_power(state, c) for c in mission.characters(player_id))
    return max(0, total)


def is_winning_mission(state: GameState, player_id: str, mission_index: int) -> bool:
    """Strictly ahead, or tied above 0 while holding the Edge."""
    mine = calculate_mission_power(state, mission_index, player_id)
    theirs = calculate_mission_power(state, mission_index, opponent_of(player_id))
    if mine > theirs:
        return True
    return mine == theirs and mine > 0 and state.edge_holder == player_id


# =============================================================================
# Chakra
# =============================================================================

def count_characters(state: GameState, player_id: str) -> int:
    """Characters a player controls, hidden included."""
    return sum(len(m.characters(player_id)) for m in state.active_missions)


def calculate_chakra_bonus(state: GameState, player_id: str) -> int:
    """Sum of CHAKRA +X rules on the player's visible characters."""
    bonus = 0
    for index, _, char in state.iter_characters(player_id):
        if char.hidden:
            continue
        scope = RuleScope(state, char.card, index, player_id, char)
        for rule in rules_of(char.card, ChakraBonus):
            bonus += rule.value(scope)
    return bonus


def calculate_chakra_income(state: GameState, player_id: str) -> int:
    """Chakra granted in the start phase."""
    return BASE_CHAKRA + count_characters(state, player_id) + calculate_chakra_bonus(state, player_id)


# =============================================================================
# Cost
# =============================================================================

def calculate_effective_cost(
    state: GameState,
    card: Card,
    player_id: str,
    mission_index: int,
    is_reveal: bool = False,
    character: CharacterInPlay | None = None,
) -> int:
    """
    Chakra price of playing (or revealing) a card face-up on a mission.

    `character` is the hidden character being revealed, so that it does
    not count as its own companion.
    """
    cost = card.chakra
    scope = RuleScope(state, card, mission_index, player_id, character)

    for rule in rules_of(card, SelfCost):
        if rule.on_reveal and not is_reveal:
            continue
        if rule.condition.holds(scope):
            cost -= rule.discount

    for other in scope.friendlies():
        for aura in rules_of(other.card, CostAura):
            if card.has_keyword(aura.keyword) and cost > aura.minimum:
                cost = max(aura.minimum, cost - aura.discount)

    for enemy in scope.enemies():
        for surcharge in rules_of(enemy.card, EnemyCostAura):
            cost += surcharge.surcharge

    cost += state.player(player_id).cost_surcharge
    return max(0, cost)


# =============================================================================
# End phase
# =============================================================================

def retains_tokens(char: CharacterInPlay) -> bool:
    """Only visible characters keep their tokens."""
    return char.visible and has_rule(char.card, RetainTokens)


def returns_at_end_of_round(state: GameState, char: CharacterInPlay) -> bool:
    if char.hidden:
        return False
    scope = RuleScope(state, char.card, char.mission_index, char.controller, char)
    return any(rule.condition.holds(scope) for rule in rules_of(char.card, ReturnAtEndOfRound))
