"""
Board primitives.

Small in-place operations on a state the caller has already cloned.
Effect handlers and phases compose these; none of them consult
replacement rules (see defeat.py for that).
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .constants import PLAYER_IDS
from .state import CharacterInPlay
from .continuous import count_characters

if TYPE_CHECKING:
    from .state import Card, GameState


def draw_cards(state: GameState, player_id: str, count: int) -> list[Card]:
    """Draw up to `count` cards; an empty deck simply yields fewer."""
    player = state.player(player_id)
    drawn = player.deck[:count]
    player.deck = player.deck[len(drawn):]
    player.hand.extend(drawn)
    return drawn


def discard_from_hand(state: GameState, player_id: str, card_index: int) -> Card:
    player = state.player(player_id)
    card = player.hand.pop(card_index)
    player.discard.append(card)
    return card


def put_on_top_of_deck(state: GameState, player_id: str, card_index: int) -> Card:
    player = state.player(player_id)
    card = player.hand.pop(card_index)
    player.deck.insert(0, card)
    return card


def locate(state: GameState, instance_id: str) -> tuple[CharacterInPlay, int, str] | None:
    """Find a character anywhere: (character, mission index, controller)."""
    for index, seat, char in state.iter_characters():
        if char.instance_id == instance_id:
            return char, index, seat
    return None


def place_character(
    state: GameState,
    player_id: str,
    mission_index: int,
    card: Card,
    hidden: bool = False,
    owner: str | None = None,
) -> CharacterInPlay:
    """Put a new character on a mission under `player_id`'s control."""
    char = CharacterInPlay(
        instance_id=state.next_id("char"),
        stack=(card,),
        controller=player_id,
        owner=owner or player_id,
        mission_index=mission_index,
        hidden=hidden,
    )
    state.active_missions[mission_index].characters(player_id).append(char)
    refresh_character_counts(state)
    return char


def remove_from_board(state: GameState, instance_id: str) -> CharacterInPlay | None:
    found = locate(state, instance_id)
    if found is None:
        return None
    char, index, seat = found
    mission = state.active_missions[index]
    mission.set_characters(seat, [c for c in mission.characters(seat) if c.instance_id != instance_id])
    refresh_character_counts(state)
    return char


def add_power_tokens(state: GameState, instance_id: str, amount: int) -> bool:
    char = state.find_character(instance_id)
    if char is None or amount <= 0:
        return False
    char.power_tokens += amount
    return True


def remove_power_tokens(state: GameState, instance_id: str, amount: int) -> int:
    """Remove up to `amount` tokens; returns how many were removed."""
    char = state.find_character(instance_id)
    if char is None:
        return 0
    removed = min(amount, char.power_tokens)
    char.power_tokens -= removed
    return removed


def return_to_hand(state: GameState, instance_id: str) -> Card | None:
    """
    Top card goes to the original owner's hand; anything under it goes
    to the owner's discard.
    """
    char = remove_from_board(state, instance_id)
    if char is None:
        return None
    owner = state.player(char.owner)
    owner.hand.append(char.card)
    owner.discard.extend(char.stack[:-1])
    return char.card


def discard_top_card(state: GameState, instance_id: str) -> Card | None:
    """Peel the top card off an upgraded stack; the card underneath becomes active."""
    char = state.find_character(instance_id)
    if char is None or len(char.stack) < 2:
        return None
    top = char.card
    char.stack = char.stack[:-1]
    state.player(char.owner).discard.append(top)
    return top


def discard_stack(state: GameState, char: CharacterInPlay) -> None:
    """The whole stack goes to the original owner's discard."""
    state.player(char.owner).discard.extend(char.stack)


def change_controller(state: GameState, instance_id: str, new_controller: str) -> bool:
    found = locate(state, instance_id)
    if found is None:
        return False
    char, index, seat = found
    if seat == new_controller:
        return False
    mission = state.active_missions[index]
    mission.set_characters(seat, [c for c in mission.characters(seat) if c.instance_id != instance_id])
    char.controller = new_controller
    mission.characters(new_controller).append(char)
    refresh_character_counts(state)
    return True


def refresh_character_counts(state: GameState) -> None:
    for seat in PLAYER_IDS:
        state.player(seat).characters_in_play = count_characters(state, seat)
