"""
Game State - Typed containers for a Naruto Mythos game.

Design principles:
- Cards are immutable catalog values, shared freely between states
- Everything else is a plain dataclass that the reducer mutates on a clone
- Callers never observe mutation: every public entry point returns a new state
- Serializable: only dataclasses, enums, lists and tuples
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator
from copy import deepcopy
from enum import Enum
import random
import time

from .constants import PLAYER_IDS


class GamePhase(Enum):
    """Phases of a game, in play order."""
    MULLIGAN = "mulligan"
    START = "start"
    ACTION = "action"
    MISSION = "mission"
    END = "end"
    GAME_OVER = "game_over"


class EffectTrigger(Enum):
    """When a printed effect fires."""
    MAIN = "MAIN"
    UPGRADE = "UPGRADE"
    AMBUSH = "AMBUSH"
    SCORE = "SCORE"


class CardType(Enum):
    CHARACTER = "character"
    MISSION = "mission"


class PendingKind(Enum):
    """What kind of choice a suspended effect is waiting for."""
    SELECT_TARGET = "SELECT_TARGET"
    CHOOSE_CARD_FROM_LIST = "CHOOSE_CARD_FROM_LIST"
    DISCARD_CARD = "DISCARD_CARD"
    PUT_CARD_ON_DECK = "PUT_CARD_ON_DECK"


# =============================================================================
# Cards
# =============================================================================

@dataclass(frozen=True)
class CardEffect:
    """
    One printed effect of a card.

    The description is display text only. Anything the engine or the AI
    needs to know is carried in the structured fields.
    """
    trigger: EffectTrigger
    description: str
    continuous: bool = False
    powerup: int = 0  # POWERUP X granted by this effect
    chakra_bonus: int = 0  # CHAKRA +X granted by this effect


@dataclass(frozen=True)
class Card:
    """
    Immutable card data.

    `rules` holds the typed continuous rule objects resolved when the
    catalog is built; calculators only ever look at those.
    """
    card_id: str
    name: str
    title: str = ""
    chakra: int = 0
    power: int = 0
    group: str = ""
    keywords: tuple[str, ...] = ()
    effects: tuple[CardEffect, ...] = ()
    card_type: CardType = CardType.CHARACTER
    rarity: str = "C"
    base_points: int = 0
    rules: tuple[Any, ...] = ()

    def __deepcopy__(self, memo):
        return self

    @classmethod
    def concealed(cls) -> Card:
        """A placeholder for a card the viewer may not see."""
        return cls(card_id="hidden", name="Hidden")

    @property
    def is_mission(self) -> bool:
        return self.card_type == CardType.MISSION

    @property
    def is_concealed(self) -> bool:
        return self.card_id == "hidden"

    def has_keyword(self, keyword: str) -> bool:
        return keyword in self.keywords

    def has_trigger(self, trigger: EffectTrigger) -> bool:
        return any(e.trigger == trigger for e in self.effects)

    def same_name(self, other: Card | str) -> bool:
        """Case-insensitive name comparison used by upgrades and uniqueness."""
        other_name = other if isinstance(other, str) else other.name
        return self.name.lower() == other_name.lower()

    @property
    def total_powerup(self) -> int:
        return sum(e.powerup for e in self.effects)

    @property
    def total_chakra_bonus(self) -> int:
        return sum(e.chakra_bonus for e in self.effects)


# =============================================================================
# Board
# =============================================================================

@dataclass
class CharacterInPlay:
    """
    A character on a mission.

    The stack is an immutable tuple: bottom is the card originally played,
    top is the active face after upgrades.
    """
    instance_id: str
    stack: tuple[Card, ...]
    controller: str
    owner: str
    mission_index: int
    hidden: bool = False
    power_tokens: int = 0

    def __post_init__(self):
        if not self.stack:
            raise ValueError(f"Character {self.instance_id} has an empty stack")
        if not isinstance(self.stack, tuple):
            self.stack = tuple(self.stack)

    @property
    def card(self) -> Card:
        """The effective card (top of stack)."""
        return self.stack[-1]

    @property
    def visible(self) -> bool:
        return not self.hidden

    def push(self, card: Card):
        """Upgrade: the new card becomes the active face."""
        self.stack = self.stack + (card,)


@dataclass
class ActiveMission:
    """A revealed mission with both players' characters."""
    card: Card
    rank: str
    base_points: int
    rank_bonus: int
    player1_characters: list[CharacterInPlay] = field(default_factory=list)
    player2_characters: list[CharacterInPlay] = field(default_factory=list)
    won_by: str | None = None

    @property
    def value(self) -> int:
        """Points awarded to the winner."""
        return self.base_points + self.rank_bonus

    def characters(self, player_id: str) -> list[CharacterInPlay]:
        if player_id == "player1":
            return self.player1_characters
        return self.player2_characters

    def set_characters(self, player_id: str, characters: list[CharacterInPlay]):
        if player_id == "player1":
            self.player1_characters = characters
        else:
            self.player2_characters = characters


# =============================================================================
# Players
# =============================================================================

@dataclass
class PlayerState:
    """
    State for one seat.

    Deck order matters: index 0 is the top card.
    """
    player_id: str
    label: str = ""
    deck: list[Card] = field(default_factory=list)
    hand: list[Card] = field(default_factory=list)
    discard: list[Card] = field(default_factory=list)
    mission_cards: list[Card] = field(default_factory=list)
    unused_mission: Card | None = None

    chakra: int = 0
    mission_points: int = 0
    passed: bool = False
    has_mulliganed: bool = False

    # Added to every face-up play and reveal until the end of the round
    cost_surcharge: int = 0

    # Cached count, refreshed by the reducer after every action
    characters_in_play: int = 0

    is_ai: bool = False
    ai_difficulty: str | None = None

    def __post_init__(self):
        if not self.label:
            self.label = self.player_id


# =============================================================================
# Log and continuation records
# =============================================================================

@dataclass(frozen=True)
class LogEntry:
    """One line of the append-only game log."""
    turn: int
    phase: str
    player: str | None
    action: str
    details: str
    timestamp: float = field(default_factory=time.time)

    def __deepcopy__(self, memo):
        return self


@dataclass
class PendingEffect:
    """
    An effect suspended while it waits for a player's choice.

    `selection_type` names the registered routine that applies the choice.
    `data` carries whatever that routine needs to continue (for example the
    character chosen in an earlier step). `remaining_triggers` are the
    trigger kinds this card still owes once the choice resolves.
    """
    effect_id: str
    source_card_id: str
    source_instance_id: str | None
    source_mission_index: int
    trigger: EffectTrigger
    description: str
    selection_type: str
    source_player: str
    valid_targets: list[str] = field(default_factory=list)
    requires_selection: bool = True
    is_optional: bool = True
    is_upgrade: bool = False
    remaining_triggers: list[EffectTrigger] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class PendingAction:
    """The choice a player must submit to resume a PendingEffect."""
    action_id: str
    kind: PendingKind
    player: str
    description: str
    options: list[str] = field(default_factory=list)
    min_selections: int = 1
    max_selections: int = 1
    source_effect_id: str | None = None


@dataclass(frozen=True)
class QueuedTrigger:
    """
    A trigger owed by another source after the current suspension resolves.

    Used by mission scoring: the mission card's SCORE may suspend before
    the winner's characters have had their SCORE effects.
    """
    source_instance_id: str | None
    mission_index: int
    player: str
    trigger: EffectTrigger


# =============================================================================
# Game state
# =============================================================================

@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str
    player1: PlayerState
    player2: PlayerState

    turn: int = 1
    phase: GamePhase = GamePhase.MULLIGAN
    active_player: str = "player1"
    edge_holder: str = "player1"
    first_passer: str | None = None

    mission_deck: list[Card] = field(default_factory=list)
    active_missions: list[ActiveMission] = field(default_factory=list)
    log: list[LogEntry] = field(default_factory=list)

    # Suspension mechanism
    pending_effects: list[PendingEffect] = field(default_factory=list)
    pending_actions: list[PendingAction] = field(default_factory=list)
    trigger_queue: list[QueuedTrigger] = field(default_factory=list)

    # Mission indices still to score this mission phase, in rank order
    missions_to_score: list[int] = field(default_factory=list)

    # Deterministic id generation
    id_counter: int = 0

    random_seed: int | None = None
    random_state: random.Random = field(default_factory=random.Random)

    # Metadata (sanitisation hints, session info)
    metadata: dict[str, Any] = field(default_factory=dict)

    def player(self, player_id: str) -> PlayerState:
        """Get a player's state by seat id."""
        if player_id == "player1":
            return self.player1
        if player_id == "player2":
            return self.player2
        raise KeyError(f"Unknown player: {player_id}")

    @property
    def players(self) -> list[PlayerState]:
        return [self.player1, self.player2]

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def next_id(self, prefix: str) -> str:
        """Generate a deterministic unique id within this game."""
        self.id_counter += 1
        return f"{prefix}-{self.id_counter}"

    def iter_characters(
        self, player_id: str | None = None
    ) -> Iterator[tuple[int, str, CharacterInPlay]]:
        """Yield (mission_index, controller, character) across all missions."""
        seats = (player_id,) if player_id else PLAYER_IDS
        for index, mission in enumerate(self.active_missions):
            for seat in seats:
                for char in mission.characters(seat):
                    yield index, seat, char

    def find_character(self, instance_id: str) -> CharacterInPlay | None:
        for _, _, char in self.iter_characters():
            if char.instance_id == instance_id:
                return char
        return None

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class PlayerConfig:
    """Everything a seat brings to the table."""
    deck: list[Card]
    mission_cards: list[Card]
    label: str = ""
    is_ai: bool = False
    ai_difficulty: str | None = None


@dataclass
class GameConfig:
    """
    Input to create_game.

    `mission_base_points` overrides the base points printed in the
    catalog, keyed by mission card id.
    """
    player1: PlayerConfig
    player2: PlayerConfig
    seed: int | None = None
    mission_base_points: dict[str, int] = field(default_factory=dict)
    validate_decks: bool = False
