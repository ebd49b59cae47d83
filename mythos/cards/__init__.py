"""
Cards - Catalog data, continuous rule table, effect handlers and deck
validation for the base set.
"""

from .catalog import (
    CHARACTER_CARDS, MISSION_CARDS, STARTER_DECKS,
    all_character_cards, all_mission_cards, build_starter_deck, get_card,
)
from .deck import DeckValidationError, DeckValidationResult, load_deck_file, validate_deck

__all__ = [
    "CHARACTER_CARDS",
    "MISSION_CARDS",
    "STARTER_DECKS",
    "all_character_cards",
    "all_mission_cards",
    "build_starter_deck",
    "get_card",
    "DeckValidationError",
    "DeckValidationResult",
    "load_deck_file",
    "validate_deck",
]
