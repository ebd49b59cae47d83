"""
Target Resolver - Enumerates candidate characters for effect handlers.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .constants import opponent_of
from .continuous import calculate_character_power

if TYPE_CHECKING:
    from .state import CharacterInPlay, GameState


class TargetType(Enum):
    FRIENDLY = "friendly"
    ENEMY = "enemy"
    FRIENDLY_HIDDEN = "friendly_hidden"
    ENEMY_HIDDEN = "enemy_hidden"
    ANY = "any"


@dataclass(frozen=True)
class TargetFilter:
    """
    Optional restrictions on candidates.

    Power filters use effective power, so hidden characters count as 0.
    Cost filters use the printed chakra cost of the active card.
    """
    max_power: int | None = None
    min_power: int | None = None
    max_cost: int | None = None
    group: str | None = None
    keyword: str | None = None
    name: str | None = None
    same_mission: int | None = None
    exclude_ids: frozenset[str] = frozenset()
    non_hidden_only: bool = False
    hidden_only: bool = False
    min_tokens: int | None = None


def _sides(target_type: TargetType, source_player: str) -> tuple[str, ...]:
    opponent = opponent_of(source_player)
    if target_type in (TargetType.FRIENDLY, TargetType.FRIENDLY_HIDDEN):
        return (source_player,)
    if target_type in (TargetType.ENEMY, TargetType.ENEMY_HIDDEN):
        return (opponent,)
    return (source_player, opponent)


def _matches(state: GameState, char: CharacterInPlay, flt: TargetFilter) -> bool:
    if char.instance_id in flt.exclude_ids:
        return False
    if flt.same_mission is not None and char.mission_index != flt.same_mission:
        return False
    if flt.non_hidden_only and char.hidden:
        return False
    if flt.hidden_only and not char.hidden:
        return False
    if flt.min_tokens is not None and char.power_tokens < flt.min_tokens:
        return False

    card = char.card
    if flt.group is not None and card.group != flt.group:
        return False
    if flt.keyword is not None and not card.has_keyword(flt.keyword):
        return False
    if flt.name is not None and not card.same_name(flt.name):
        return False
    if flt.max_cost is not None and card.chakra > flt.max_cost:
        return False

    if flt.max_power is not None or flt.min_power is not None:
        power = calculate_character_power(state, char)
        if flt.max_power is not None and power > flt.max_power:
            return False
        if flt.min_power is not None and power < flt.min_power:
            return False
    return True


def find_targets(
    state: GameState,
    source_player: str,
    target_type: TargetType,
    flt: TargetFilter | None = None,
) -> list[CharacterInPlay]:
    """Candidates in mission order, source player's side first for ANY."""
    flt = flt or TargetFilter()
    hidden_types = (TargetType.FRIENDLY_HIDDEN, TargetType.ENEMY_HIDDEN)
    result = []
    for side in _sides(target_type, source_player):
        for mission in state.active_missions:
            for char in mission.characters(side):
                if target_type in hidden_types and not char.hidden:
                    continue
                if _matches(state, char, flt):
                    result.append(char)
    return result


def find_target_ids(
    state: GameState,
    source_player: str,
    target_type: TargetType,
    flt: TargetFilter | None = None,
) -> list[str]:
    return [c.instance_id for c in find_targets(state, source_player, target_type, flt)]
