"""
Validation Rules - Pure predicates for player actions.

Each check returns None when the action is legal, or a RuleViolation
describing why not. The reducer turns violations into failed
ActionResults; the action generator uses the same checks to enumerate
legal moves.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .action import ErrorCode
from .card_rules import NoEnemyHiddenPlays, OnlyWhereWinning, UpgradeOver, has_rule, rules_of
from .constants import HIDDEN_PLAY_COST, opponent_of
from .continuous import calculate_effective_cost, is_winning_mission

if TYPE_CHECKING:
    from .state import Card, CharacterInPlay, GameState


@dataclass(frozen=True)
class RuleViolation:
    code: str
    message: str


def _hand_card(state: GameState, player_id: str, card_index: int | None) -> Card | None:
    hand = state.player(player_id).hand
    if card_index is None or card_index < 0 or card_index >= len(hand):
        return None
    return hand[card_index]


def _valid_mission(state: GameState, mission_index: int | None) -> bool:
    return mission_index is not None and 0 <= mission_index < len(state.active_missions)


def check_name_uniqueness(
    state: GameState,
    player_id: str,
    mission_index: int,
    card: Card,
    exclude_instance_id: str | None = None,
) -> RuleViolation | None:
    """A player may not have two visible same-named characters on one mission."""
    mission = state.active_missions[mission_index]
    for char in mission.characters(player_id):
        if char.hidden or char.instance_id == exclude_instance_id:
            continue
        if char.card.same_name(card):
            return RuleViolation(
                ErrorCode.NAME_CONFLICT,
                f"{card.name} is already in play on mission {mission_index + 1}",
            )
    return None


def check_play_character(
    state: GameState, player_id: str, card_index: int | None, mission_index: int | None
) -> RuleViolation | None:
    card = _hand_card(state, player_id, card_index)
    if card is None:
        return RuleViolation(ErrorCode.INVALID_CARD, f"No card at hand index {card_index}")
    if not _valid_mission(state, mission_index):
        return RuleViolation(ErrorCode.INVALID_MISSION, f"No mission at index {mission_index}")

    if has_rule(card, OnlyWhereWinning) and not is_winning_mission(state, player_id, mission_index):
        return RuleViolation(
            ErrorCode.PLAY_RESTRICTED,
            f"{card.name} can only be played on a mission you are winning",
        )

    violation = check_name_uniqueness(state, player_id, mission_index, card)
    if violation:
        return violation

    cost = calculate_effective_cost(state, card, player_id, mission_index)
    if cost > state.player(player_id).chakra:
        return RuleViolation(
            ErrorCode.INSUFFICIENT_CHAKRA,
            f"{card.name} costs {cost}, only {state.player(player_id).chakra} available",
        )
    return None


def check_play_hidden(
    state: GameState, player_id: str, card_index: int | None, mission_index: int | None
) -> RuleViolation | None:
    """Hidden plays cost a flat 1 and skip the name check."""
    if _hand_card(state, player_id, card_index) is None:
        return RuleViolation(ErrorCode.INVALID_CARD, f"No card at hand index {card_index}")
    if not _valid_mission(state, mission_index):
        return RuleViolation(ErrorCode.INVALID_MISSION, f"No mission at index {mission_index}")
    if state.player(player_id).chakra < HIDDEN_PLAY_COST:
        return RuleViolation(ErrorCode.INSUFFICIENT_CHAKRA, "Not enough chakra to play hidden")
    if hidden_plays_blocked(state, player_id, mission_index):
        return RuleViolation(ErrorCode.PLAY_RESTRICTED, "Hidden plays are blocked in this mission")
    return None


def hidden_plays_blocked(state: GameState, player_id: str, mission_index: int) -> bool:
    """A visible enemy NoEnemyHiddenPlays character shuts the mission to hidden plays."""
    enemies = state.active_missions[mission_index].characters(opponent_of(player_id))
    return any(c.visible and has_rule(c.card, NoEnemyHiddenPlays) for c in enemies)


def find_own_character(
    state: GameState, player_id: str, mission_index: int | None, instance_id: str | None
) -> CharacterInPlay | None:
    if not _valid_mission(state, mission_index) or instance_id is None:
        return None
    for char in state.active_missions[mission_index].characters(player_id):
        if char.instance_id == instance_id:
            return char
    return None


def reveal_cost(state: GameState, char: CharacterInPlay) -> int:
    return calculate_effective_cost(
        state, char.card, char.controller, char.mission_index, is_reveal=True, character=char
    )


def check_reveal(
    state: GameState, player_id: str, mission_index: int | None, instance_id: str | None
) -> RuleViolation | None:
    char = find_own_character(state, player_id, mission_index, instance_id)
    if char is None:
        return RuleViolation(ErrorCode.INVALID_TARGET, f"No character {instance_id} under your control there")
    if not char.hidden:
        return RuleViolation(ErrorCode.INVALID_TARGET, f"{char.card.name} is not hidden")

    violation = check_name_uniqueness(
        state, player_id, mission_index, char.card, exclude_instance_id=char.instance_id
    )
    if violation:
        return violation

    cost = reveal_cost(state, char)
    if cost > state.player(player_id).chakra:
        return RuleViolation(
            ErrorCode.INSUFFICIENT_CHAKRA,
            f"Revealing {char.card.name} costs {cost}",
        )
    return None


def upgrade_cost(current: Card, new_card: Card) -> int:
    """Only the difference in printed cost is paid."""
    return new_card.chakra - current.chakra


def check_upgrade(
    state: GameState,
    player_id: str,
    card_index: int | None,
    mission_index: int | None,
    target_instance_id: str | None,
) -> RuleViolation | None:
    card = _hand_card(state, player_id, card_index)
    if card is None:
        return RuleViolation(ErrorCode.INVALID_CARD, f"No card at hand index {card_index}")
    char = find_own_character(state, player_id, mission_index, target_instance_id)
    if char is None:
        return RuleViolation(ErrorCode.INVALID_TARGET, f"No character {target_instance_id} to upgrade")

    if not card.same_name(char.card):
        if not any(rule.allows(char.card) for rule in rules_of(card, UpgradeOver)):
            return RuleViolation(ErrorCode.INVALID_UPGRADE, f"{card.name} cannot upgrade {char.card.name}")
        violation = check_name_uniqueness(state, player_id, mission_index, card, exclude_instance_id=char.instance_id)
        if violation:
            return violation

    cost = upgrade_cost(char.card, card)
    if cost <= 0:
        return RuleViolation(
            ErrorCode.INVALID_UPGRADE,
            f"Upgrade must cost more than {char.card.chakra}",
        )
    if cost > state.player(player_id).chakra:
        return RuleViolation(ErrorCode.INSUFFICIENT_CHAKRA, f"Upgrade costs {cost}")
    return None
