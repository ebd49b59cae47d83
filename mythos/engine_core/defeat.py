"""
Defeat, hide and move - the board changes that replacement rules can
intercept.

A would-be defeat consults replacement rules first:
- ImmuneToEnemy on the character itself stops enemy defeats and hides
- HideInsteadOfDefeat on the character itself (optionally only against
  enemy effects)
- SacrificeFor on another visible friendly in the same mission. This one
  is the protecting player's choice: callers look up the candidates with
  `sacrifice_candidates` and pass the chosen one as `sacrifice_id`.

Only then is the character removed, its stack sent to the original
owner's discard (or hand, under DefeatedToHand), and OnDefeatChakra
triggers fired.

Reactions to plays, lost missions and the end of the round live here too, since they are
board changes driven by continuous rules.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from .board import add_power_tokens, discard_stack, locate, remove_from_board
from .card_rules import (
    DefeatIfEmptyHand, DefeatedToHand, HideInsteadOfDefeat, HideOnMove, ImmuneToEnemy, LookOnMove,
    MoveAtEndOfRound, MoveOnMissionLoss, NoMovesFrom, OnDefeatChakra, OnEnemyPlayed, SacrificeFor,
    has_rule, rules_of,
)
from .constants import opponent_of
from .game_log import log_action
from .rules import check_name_uniqueness

if TYPE_CHECKING:
    from .state import CharacterInPlay, GameState

logger = logging.getLogger(__name__)


def sacrifice_candidates(state: GameState, instance_id: str, by_enemy: bool) -> list[CharacterInPlay]:
    """Visible friendlies whose SacrificeFor rule covers this character."""
    found = locate(state, instance_id)
    if found is None or not by_enemy:
        return []
    char, mission_index, controller = found
    if char.hidden:
        return []
    guards = []
    for other in state.active_missions[mission_index].characters(controller):
        if other.instance_id == char.instance_id or other.hidden:
            continue
        if any(char.card.group == rule.group for rule in rules_of(other.card, SacrificeFor)):
            guards.append(other)
    return guards


def _chosen_sacrifice(
    state: GameState, char: CharacterInPlay, by_enemy: bool, sacrifice_id: str | None
) -> CharacterInPlay | None:
    if sacrifice_id is None:
        return None
    for guard in sacrifice_candidates(state, char.instance_id, by_enemy):
        if guard.instance_id == sacrifice_id:
            return guard
    logger.debug("Sacrifice %s no longer available for %s", sacrifice_id, char.instance_id)
    return None


def _immune(char: CharacterInPlay, by_enemy: bool) -> bool:
    return by_enemy and char.visible and has_rule(char.card, ImmuneToEnemy)


def _hides_instead(char: CharacterInPlay, by_enemy: bool) -> bool:
    if char.hidden:
        return False
    for rule in rules_of(char.card, HideInsteadOfDefeat):
        if not rule.enemy_only or by_enemy:
            return True
    return False


def defeat_character(
    state: GameState,
    instance_id: str,
    source_player: str | None = None,
    by_enemy: bool = False,
    sacrifice_id: str | None = None,
) -> bool:
    """
    Defeat a character, honouring replacement rules.

    Returns True if some character left play (the target or a sacrifice).
    """
    found = locate(state, instance_id)
    if found is None:
        return False
    char, _, controller = found

    if _immune(char, by_enemy):
        log_action(state, controller, "DEFEAT_PREVENTED", f"{char.card.name} cannot be defeated by enemy effects.")
        return False

    if _hides_instead(char, by_enemy):
        char.hidden = True
        log_action(state, controller, "DEFEAT_REPLACED",
                   f"{char.card.name} is hidden instead of being defeated.")
        return False

    sacrifice = _chosen_sacrifice(state, char, by_enemy, sacrifice_id)
    if sacrifice is not None:
        log_action(state, controller, "SACRIFICE",
                   f"{sacrifice.card.name} is defeated instead of {char.card.name}.")
        return _remove_defeated(state, sacrifice, source_player)

    return _remove_defeated(state, char, source_player)


def _remove_defeated(state: GameState, char: CharacterInPlay, source_player: str | None) -> bool:
    removed = remove_from_board(state, char.instance_id)
    if removed is None:
        return False
    if _goes_to_hand(state, removed):
        owner = state.player(removed.owner)
        owner.hand.append(removed.card)
        owner.discard.extend(removed.stack[:-1])
        log_action(state, source_player, "DEFEAT", f"{removed.card.name} is defeated and returns to hand.")
    else:
        discard_stack(state, removed)
        log_action(state, source_player, "DEFEAT", f"{removed.card.name} is defeated.")
    trigger_on_defeat(state, removed)
    return True


def _goes_to_hand(state: GameState, defeated: CharacterInPlay) -> bool:
    if defeated.owner != defeated.controller:
        return False
    return any(
        char.visible and has_rule(char.card, DefeatedToHand)
        for _, _, char in state.iter_characters(defeated.controller)
    )


def trigger_on_defeat(state: GameState, defeated: CharacterInPlay) -> None:
    """Fire OnDefeatChakra rules on visible characters still in play."""
    for _, seat, char in list(state.iter_characters()):
        if char.hidden:
            continue
        for rule in rules_of(char.card, OnDefeatChakra):
            if rule.friendly_only and defeated.controller != seat:
                continue
            state.player(seat).chakra += rule.amount
            log_action(state, seat, "EFFECT_CHAKRA",
                       f"{char.card.name}: gain {rule.amount} chakra ({defeated.card.name} was defeated).")


def hide_character(
    state: GameState, instance_id: str, by_enemy: bool = False, sacrifice_id: str | None = None
) -> bool:
    """Flip a visible character face-down; a chosen protector may be defeated instead."""
    found = locate(state, instance_id)
    if found is None:
        return False
    char, _, controller = found
    if char.hidden:
        return False

    if _immune(char, by_enemy):
        log_action(state, controller, "HIDE_PREVENTED", f"{char.card.name} cannot be hidden by enemy effects.")
        return False

    sacrifice = _chosen_sacrifice(state, char, by_enemy, sacrifice_id)
    if sacrifice is not None:
        log_action(state, controller, "SACRIFICE",
                   f"{sacrifice.card.name} is defeated instead of {char.card.name} being hidden.")
        return _remove_defeated(state, sacrifice, None)

    char.hidden = True
    log_action(state, controller, "HIDE", f"{char.card.name} is hidden.")
    return True


# =============================================================================
# Moves
# =============================================================================

def moves_locked(state: GameState, mission_index: int) -> bool:
    """True while a visible NoMovesFrom character sits on the mission."""
    mission = state.active_missions[mission_index]
    for seat in ("player1", "player2"):
        if any(c.visible and has_rule(c.card, NoMovesFrom) for c in mission.characters(seat)):
            return True
    return False


def move_character(
    state: GameState, instance_id: str, destination: int, by_enemy: bool = False
) -> bool:
    """
    Move a character to another mission on the same side.

    Fails if the origin is locked, or if the destination already holds a
    visible same-named friendly. Enemy moves of characters with an
    enemy-only HideInsteadOfDefeat rule hide them instead.
    """
    found = locate(state, instance_id)
    if found is None:
        return False
    char, origin, controller = found
    if destination == origin or not 0 <= destination < len(state.active_missions):
        return False

    if moves_locked(state, origin):
        log_action(state, controller, "MOVE_PREVENTED", f"{char.card.name} cannot leave mission {origin + 1}.")
        return False

    if by_enemy and char.visible and any(
        r.enemy_only for r in rules_of(char.card, HideInsteadOfDefeat)
    ):
        char.hidden = True
        log_action(state, controller, "MOVE_REPLACED", f"{char.card.name} is hidden instead of being moved.")
        return False

    if char.visible and check_name_uniqueness(state, controller, destination, char.card):
        logger.debug("Move of %s blocked by name uniqueness", char.card.name)
        return False

    source = state.active_missions[origin]
    source.set_characters(controller, [c for c in source.characters(controller) if c.instance_id != instance_id])
    char.mission_index = destination
    state.active_missions[destination].characters(controller).append(char)
    log_action(state, controller, "MOVE",
               f"{char.card.name} moves from mission {origin + 1} to mission {destination + 1}.")

    if char.visible and has_rule(char.card, LookOnMove):
        _look_on_move(state, char, destination)
    if char.visible and has_rule(char.card, HideOnMove):
        char.hidden = True
        log_action(state, controller, "HIDE", f"{char.card.name} is hidden after moving.")
    return True


def _look_on_move(state: GameState, char: CharacterInPlay, destination: int) -> None:
    mission = state.active_missions[destination]
    for seat in ("player1", "player2"):
        for other in mission.characters(seat):
            if other.hidden:
                log_action(state, char.controller, "LOOK",
                           f"{char.card.name} looks at a hidden character on mission {destination + 1}.")
                return


def move_after_lost_mission(state: GameState, mission_index: int, loser: str) -> None:
    """MoveOnMissionLoss: the loser's characters go on to the next mission still to score."""
    if not state.missions_to_score:
        return
    destination = state.missions_to_score[0]
    movers = [
        c for c in state.active_missions[mission_index].characters(loser)
        if c.visible and has_rule(c.card, MoveOnMissionLoss)
    ]
    for char in movers:
        move_character(state, char.instance_id, destination)


def end_of_round_defeats(state: GameState) -> None:
    """DefeatIfEmptyHand: visible characters whose controller has no cards left in hand."""
    doomed = [
        c for _, _, c in state.iter_characters()
        if c.visible and has_rule(c.card, DefeatIfEmptyHand) and not state.player(c.controller).hand
    ]
    for char in doomed:
        defeat_character(state, char.instance_id, char.controller)


def end_of_round_moves(state: GameState) -> None:
    """MoveAtEndOfRound: each mover goes to the next mission along that will take it."""
    movers = [c for _, _, c in state.iter_characters() if c.visible and has_rule(c.card, MoveAtEndOfRound)]
    count = len(state.active_missions)
    for char in movers:
        origin = char.mission_index
        destinations = [
            (origin + step) % count for step in range(1, count)
            if not check_name_uniqueness(state, char.controller, (origin + step) % count, char.card)
        ]
        if destinations:
            move_character(state, char.instance_id, destinations[0])


# =============================================================================
# Plays
# =============================================================================

def trigger_on_play(state: GameState, played: CharacterInPlay) -> None:
    """Fire OnEnemyPlayed rules on the opponent's visible characters in the same mission."""
    watcher = opponent_of(played.controller)
    for char in list(state.active_missions[played.mission_index].characters(watcher)):
        if char.hidden:
            continue
        for rule in rules_of(char.card, OnEnemyPlayed):
            if rule.chakra:
                state.player(watcher).chakra += rule.chakra
                log_action(state, watcher, "EFFECT_CHAKRA",
                           f"{char.card.name}: gain {rule.chakra} chakra (enemy character played).")
            if rule.powerup and add_power_tokens(state, char.instance_id, rule.powerup):
                log_action(state, watcher, "EFFECT_POWERUP",
                           f"{char.card.name}: POWERUP {rule.powerup} (enemy character played).")
