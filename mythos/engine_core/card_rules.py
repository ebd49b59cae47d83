"""
Card Rules - Typed continuous rule objects.

Each card carries a tuple of these on `Card.rules`, resolved once when
the catalog is built. The shared calculators in `continuous.py` only
dispatch on rule type; no calculator knows any card by id.

Rule kinds:
- ChakraBonus / SelfPower / PowerAura / EnemyPowerAura / NullifyStrongestEnemy: income and power modifiers
- CostAura / SelfCost / EnemyCostAura: play and reveal price modifiers
- RetainTokens / ReturnAtEndOfRound / MoveAtEndOfRound / DefeatIfEmptyHand: end phase exceptions
- HideInsteadOfDefeat / SacrificeFor / ImmuneToEnemy / DefeatedToHand: defeat replacement
- OnDefeatChakra / OnEnemyPlayed: reactions to other characters
- OnlyWhereWinning / NoEnemyHiddenPlays / UpgradeOver: play restrictions and permissions
- LookOnMove / HideOnMove / NoMovesFrom / MoveOnMissionLoss: movement
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from .state import ActiveMission, Card, CharacterInPlay, GameState


R = TypeVar("R")


@dataclass(frozen=True)
class RuleScope:
    """Where a rule is being evaluated: whose card, which mission."""
    state: GameState
    card: Card
    mission_index: int
    controller: str
    character: CharacterInPlay | None = None

    @property
    def mission(self) -> ActiveMission:
        return self.state.active_missions[self.mission_index]

    def friendlies(self, visible_only: bool = True, include_self: bool = False) -> list[CharacterInPlay]:
        """Friendly characters in this mission."""
        result = []
        for char in self.mission.characters(self.controller):
            if not include_self and self.character is not None and char.instance_id == self.character.instance_id:
                continue
            if visible_only and char.hidden:
                continue
            result.append(char)
        return result

    def enemies(self, visible_only: bool = True) -> list[CharacterInPlay]:
        from .constants import opponent_of
        chars = self.mission.characters(opponent_of(self.controller))
        return [c for c in chars if not (visible_only and c.hidden)]


# =============================================================================
# Conditions
# =============================================================================

class Condition:
    """Base condition: always true."""

    def holds(self, scope: RuleScope) -> bool:
        return True


ALWAYS = Condition()


@dataclass(frozen=True)
class CompanionInMission(Condition):
    """A visible friendly character with one of these names shares the mission."""
    names: tuple[str, ...]

    def holds(self, scope: RuleScope) -> bool:
        wanted = {n.lower() for n in self.names}
        return any(c.card.name.lower() in wanted for c in scope.friendlies())


@dataclass(frozen=True)
class NoCompanionInMission(Condition):
    names: tuple[str, ...]

    def holds(self, scope: RuleScope) -> bool:
        return not CompanionInMission(self.names).holds(scope)


@dataclass(frozen=True)
class OtherGroupInMission(Condition):
    """Another visible friendly character of this group shares the mission."""
    group: str

    def holds(self, scope: RuleScope) -> bool:
        return any(c.card.group == self.group for c in scope.friendlies())


@dataclass(frozen=True)
class EnemyInMission(Condition):
    """At least one non-hidden enemy character is in the mission."""

    def holds(self, scope: RuleScope) -> bool:
        return len(scope.enemies()) > 0


@dataclass(frozen=True)
class HoldsEdge(Condition):
    def holds(self, scope: RuleScope) -> bool:
        return scope.state.edge_holder == scope.controller


# =============================================================================
# Scaling
# =============================================================================

class Scaling:
    """Multiplier for a rule amount."""

    def count(self, scope: RuleScope) -> int:
        return 1


@dataclass(frozen=True)
class MissionsWithKeyword(Scaling):
    """Number of missions where the controller has a visible character with the keyword."""
    keyword: str

    def count(self, scope: RuleScope) -> int:
        return count_missions_with_keyword(scope.state, scope.controller, self.keyword)


@dataclass(frozen=True)
class OtherVisibleFriendlies(Scaling):
    def count(self, scope: RuleScope) -> int:
        return len(scope.friendlies())


def count_missions_with_keyword(state: GameState, player_id: str, keyword: str) -> int:
    total = 0
    for mission in state.active_missions:
        if any(c.visible and c.card.has_keyword(keyword) for c in mission.characters(player_id)):
            total += 1
    return total


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class ChakraBonus:
    """CHAKRA +X during the start phase while this character is visible."""
    amount: int = 1
    condition: Condition = field(default=ALWAYS)
    scaling: Scaling | None = None

    def value(self, scope: RuleScope) -> int:
        if not self.condition.holds(scope):
            return 0
        if self.scaling is not None:
            return self.amount * self.scaling.count(scope)
        return self.amount


@dataclass(frozen=True)
class SelfPower:
    """Power modifier on the character itself."""
    amount: int
    condition: Condition = field(default=ALWAYS)
    scaling: Scaling | None = None

    def value(self, scope: RuleScope) -> int:
        if not self.condition.holds(scope):
            return 0
        if self.scaling is not None:
            return self.amount * self.scaling.count(scope)
        return self.amount


@dataclass(frozen=True)
class PowerAura:
    """Other friendly characters with the keyword in this mission get +amount."""
    keyword: str
    amount: int = 1


@dataclass(frozen=True)
class CostAura:
    """Other friendly characters with the keyword cost less to play in this mission."""
    keyword: str
    discount: int = 1
    minimum: int = 1


@dataclass(frozen=True)
class SelfCost:
    """
    Discount on this card's own price.

    on_reveal=True limits it to revealing from hidden.
    """
    discount: int
    condition: Condition = field(default=ALWAYS)
    on_reveal: bool = False


@dataclass(frozen=True)
class RetainTokens:
    """Power tokens survive the end phase while visible."""


@dataclass(frozen=True)
class ReturnAtEndOfRound:
    """The top card returns to its owner's hand at the end of the round."""
    condition: Condition = field(default=ALWAYS)


@dataclass(frozen=True)
class HideInsteadOfDefeat:
    """Would-be defeats hide this character instead."""
    enemy_only: bool = False


@dataclass(frozen=True)
class SacrificeFor:
    """This character may be defeated instead of a friendly of the group in its mission."""
    group: str


@dataclass(frozen=True)
class OnDefeatChakra:
    """Gain chakra whenever a (friendly) character is defeated."""
    amount: int
    friendly_only: bool = True


@dataclass(frozen=True)
class OnlyWhereWinning:
    """Face-up play limited to missions the controller is currently winning."""


@dataclass(frozen=True)
class LookOnMove:
    """On moving while visible, look at a hidden character on the destination."""


@dataclass(frozen=True)
class HideOnMove:
    """The character is hidden whenever it moves."""


@dataclass(frozen=True)
class NoMovesFrom:
    """No character can be moved away from this character's mission."""


@dataclass(frozen=True)
class MoveOnMissionLoss:
    """After losing this character's mission, it moves on to the next unscored mission."""


@dataclass(frozen=True)
class EnemyCostAura:
    """Enemy characters cost more to play or reveal in this mission."""
    surcharge: int = 1


@dataclass(frozen=True)
class NullifyStrongestEnemy:
    """The strongest non-hidden enemy character in this mission has Power 0."""


@dataclass(frozen=True)
class ImmuneToEnemy:
    """Cannot be hidden or defeated by enemy effects."""


@dataclass(frozen=True)
class DefeatedToHand:
    """Defeated friendly characters go to their owner's hand instead of the discard pile."""


@dataclass(frozen=True)
class OnEnemyPlayed:
    """React when the opponent plays a character in this mission."""
    chakra: int = 0
    powerup: int = 0


@dataclass(frozen=True)
class EnemyPowerAura:
    """Every enemy character in this mission gets `amount` Power."""
    amount: int = -1


@dataclass(frozen=True)
class NoEnemyHiddenPlays:
    """The opponent cannot play characters hidden in this mission."""


@dataclass(frozen=True)
class MoveAtEndOfRound:
    """At the end of the round this character moves to another mission, if able."""


@dataclass(frozen=True)
class DefeatIfEmptyHand:
    """At the end of the round this character is defeated if its controller has no cards in hand."""


@dataclass(frozen=True)
class UpgradeOver:
    """
    This card may upgrade a character with a different name.

    Either any of `names`, or any character of `group`.
    """
    names: tuple[str, ...] = ()
    group: str | None = None

    def allows(self, current: Card) -> bool:
        if any(current.same_name(name) for name in self.names):
            return True
        return self.group is not None and current.group == self.group


def rules_of(card: Card, rule_type: type[R]) -> list[R]:
    """All rules of a given type on a card."""
    return [r for r in card.rules if isinstance(r, rule_type)]


def has_rule(card: Card, rule_type: type) -> bool:
    return any(isinstance(r, rule_type) for r in card.rules)
