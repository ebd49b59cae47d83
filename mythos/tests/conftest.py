"""
Pytest fixtures for Mythos tests.

Scenario states are built directly, without shuffling, so every test
knows exactly which cards are where.
"""

import random

import pytest

from ..cards.catalog import build_starter_deck, get_card
from ..engine_core.board import place_character
from ..engine_core.engine import create_game
from ..engine_core.state import (
    ActiveMission, CharacterInPlay, GameConfig, GamePhase, GameState, PlayerConfig, PlayerState,
)


def card(card_id: str):
    """Catalog lookup accepting the short number: card("009") -> 009/130."""
    if "/" not in card_id and not card_id.startswith("MSS"):
        card_id = f"{card_id}/130"
    return get_card(card_id)


def make_mission(mission_id: str = "MSS 02", rank: str = "D", base_points: int = 3, rank_bonus: int = 1):
    return ActiveMission(card=card(mission_id), rank=rank, base_points=base_points, rank_bonus=rank_bonus)


def make_state(
    missions: int = 1,
    phase: GamePhase = GamePhase.ACTION,
    turn: int = 1,
    active: str = "player1",
    edge: str = "player1",
    chakra: tuple[int, int] = (5, 5),
    hands: tuple[list[str], list[str]] = ((), ()),
    deck_size: int = 10,
) -> GameState:
    """
    A game in progress with empty missions.

    Decks hold copies of Zabuza (no effects) so draws always succeed.
    """
    filler = card("086")
    players = []
    for seat, points, hand in zip(("player1", "player2"), chakra, hands):
        players.append(
            PlayerState(
                player_id=seat,
                deck=[filler] * deck_size,
                hand=[card(c) for c in hand],
                chakra=points,
                has_mulliganed=True,
            )
        )

    mission_ids = ["MSS 02", "MSS 10", "MSS 02", "MSS 10"]
    return GameState(
        game_id="test_game",
        player1=players[0],
        player2=players[1],
        turn=turn,
        phase=phase,
        active_player=active,
        edge_holder=edge,
        active_missions=[make_mission(mission_ids[i]) for i in range(missions)],
        random_state=random.Random(7),
    )


def put(
    state: GameState,
    player_id: str,
    card_id: str,
    mission_index: int = 0,
    hidden: bool = False,
    tokens: int = 0,
) -> CharacterInPlay:
    """Place a character directly, without paying or triggering anything."""
    char = place_character(state, player_id, mission_index, card(card_id), hidden=hidden)
    char.power_tokens = tokens
    return char


@pytest.fixture
def state() -> GameState:
    """Action phase, one mission, both players holding 5 chakra."""
    return make_state()


@pytest.fixture
def two_missions() -> GameState:
    return make_state(missions=2)


@pytest.fixture
def starter_config() -> GameConfig:
    """Two legal starter decks and a fixed seed."""
    leaf_cards, leaf_missions = build_starter_deck("leaf")
    sound_cards, sound_missions = build_starter_deck("sound_sand")
    return GameConfig(
        player1=PlayerConfig(leaf_cards, leaf_missions, label="Leaf"),
        player2=PlayerConfig(sound_cards, sound_missions, label="Sound"),
        seed=42,
    )


@pytest.fixture
def new_game(starter_config: GameConfig) -> GameState:
    return create_game(starter_config)
