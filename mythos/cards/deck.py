"""
Deck Validation - Construction rules for a player's deck.

- At least 30 character cards
- Exactly 3 mission cards
- At most 2 copies of the same version; an "A" (rare art) suffix is the
  same version as the plain card number
"""

from __future__ import annotations
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from ..engine_core.constants import MAX_COPIES_PER_VERSION, MIN_DECK_SIZE, MISSION_CARDS_PER_PLAYER
from ..engine_core.state import Card
from .catalog import get_card

_VARIANT_SUFFIX = re.compile(r"\s*A$")


class DeckValidationError(ValueError):
    """An illegal deck was supplied where a legal one is required."""


@dataclass
class DeckValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def base_version(card_id: str) -> str:
    """Strip the rare-art suffix: "108/130 A" -> "108/130"."""
    return _VARIANT_SUFFIX.sub("", card_id).strip()


def validate_deck(characters: list[Card], missions: list[Card]) -> DeckValidationResult:
    """Check a deck against the construction rules."""
    errors = []

    if len(characters) < MIN_DECK_SIZE:
        errors.append(f"Deck needs at least {MIN_DECK_SIZE} character cards (has {len(characters)}).")

    non_characters = [c.card_id for c in characters if c.is_mission]
    if non_characters:
        errors.append(f"Mission cards in the character deck: {', '.join(non_characters)}.")

    if len(missions) != MISSION_CARDS_PER_PLAYER:
        errors.append(f"Must select exactly {MISSION_CARDS_PER_PLAYER} mission cards (has {len(missions)}).")

    non_missions = [c.card_id for c in missions if not c.is_mission]
    if non_missions:
        errors.append(f"Character cards among the missions: {', '.join(non_missions)}.")

    counts = Counter(base_version(card.card_id) for card in characters)
    for version, count in sorted(counts.items()):
        if count > MAX_COPIES_PER_VERSION:
            errors.append(f"Too many copies of version {version}: {count} (max {MAX_COPIES_PER_VERSION}).")

    return DeckValidationResult(valid=not errors, errors=errors)


def parse_deck_lines(lines: list[str]) -> tuple[list[Card], list[Card]]:
    """
    Parse card ids, one per line. Blank lines and `#` comments are skipped.

    Raises:
        KeyError: for an id not in the catalog
    """
    characters: list[Card] = []
    missions: list[Card] = []
    for raw in lines:
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        card = get_card(line)
        (missions if card.is_mission else characters).append(card)
    return characters, missions


def load_deck_file(path: str | Path) -> tuple[list[Card], list[Card]]:
    """Read a deck list file into (characters, missions)."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_deck_lines(text.splitlines())
