"""
Visibility - Projects full state down to what one player may see.

- The viewer's own hand is listed; the opponent's collapses to a count
- Decks are counts only
- Opponent hidden characters collapse to existence-only records
- Only the viewer's pending selections are shown
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .constants import opponent_of
from .continuous import calculate_character_power, calculate_mission_power
from .state import GamePhase

if TYPE_CHECKING:
    from .state import Card, CharacterInPlay, GameState, LogEntry, PendingAction, PlayerState


@dataclass
class VisibleCharacter:
    """A character as seen by the viewer. `card` is None when concealed."""
    instance_id: str
    mission_index: int
    controller: str
    hidden: bool
    power_tokens: int
    card: Card | None = None
    power: int | None = None
    stack_size: int = 1


@dataclass
class VisibleMission:
    index: int
    card: Card
    rank: str
    base_points: int
    rank_bonus: int
    won_by: str | None
    my_characters: list[VisibleCharacter] = field(default_factory=list)
    opponent_characters: list[VisibleCharacter] = field(default_factory=list)
    my_power: int = 0
    opponent_power: int = 0

    @property
    def value(self) -> int:
        return self.base_points + self.rank_bonus


@dataclass
class VisiblePlayerState:
    """The viewer's own seat, hand included."""
    player_id: str
    label: str
    hand: list[Card]
    deck_size: int
    discard: list[Card]
    chakra: int
    mission_points: int
    passed: bool
    has_mulliganed: bool
    characters_in_play: int

    @property
    def hand_size(self) -> int:
        return len(self.hand)


@dataclass
class VisibleOpponentState:
    """The opponent's seat: public information only."""
    player_id: str
    label: str
    hand_size: int
    deck_size: int
    discard: list[Card]
    chakra: int
    mission_points: int
    passed: bool
    has_mulliganed: bool
    characters_in_play: int


@dataclass
class VisibleGameState:
    game_id: str
    viewer: str
    turn: int
    phase: GamePhase
    active_player: str
    edge_holder: str
    my_state: VisiblePlayerState
    opponent_state: VisibleOpponentState
    missions: list[VisibleMission]
    mission_deck_size: int
    pending_actions: list[PendingAction]
    log: list[LogEntry]

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER


def _visible_character(state: GameState, char: CharacterInPlay, viewer: str) -> VisibleCharacter:
    if char.hidden and char.controller != viewer:
        return VisibleCharacter(
            instance_id=char.instance_id,
            mission_index=char.mission_index,
            controller=char.controller,
            hidden=True,
            power_tokens=char.power_tokens,
        )
    return VisibleCharacter(
        instance_id=char.instance_id,
        mission_index=char.mission_index,
        controller=char.controller,
        hidden=char.hidden,
        power_tokens=char.power_tokens,
        card=char.card,
        power=calculate_character_power(state, char),
        stack_size=len(char.stack),
    )


def _own_state(player: PlayerState) -> VisiblePlayerState:
    return VisiblePlayerState(
        player_id=player.player_id,
        label=player.label,
        hand=list(player.hand),
        deck_size=len(player.deck),
        discard=list(player.discard),
        chakra=player.chakra,
        mission_points=player.mission_points,
        passed=player.passed,
        has_mulliganed=player.has_mulliganed,
        characters_in_play=player.characters_in_play,
    )


def _opponent_state(player: PlayerState) -> VisibleOpponentState:
    return VisibleOpponentState(
        player_id=player.player_id,
        label=player.label,
        hand_size=len(player.hand),
        deck_size=len(player.deck),
        discard=list(player.discard),
        chakra=player.chakra,
        mission_points=player.mission_points,
        passed=player.passed,
        has_mulliganed=player.has_mulliganed,
        characters_in_play=player.characters_in_play,
    )


def get_visible_state(state: GameState, player_id: str) -> VisibleGameState:
    """Project the full state to `player_id`'s view."""
    opponent = opponent_of(player_id)
    missions = []
    for index, mission in enumerate(state.active_missions):
        missions.append(
            VisibleMission(
                index=index,
                card=mission.card,
                rank=mission.rank,
                base_points=mission.base_points,
                rank_bonus=mission.rank_bonus,
                won_by=mission.won_by,
                my_characters=[_visible_character(state, c, player_id) for c in mission.characters(player_id)],
                opponent_characters=[_visible_character(state, c, player_id) for c in mission.characters(opponent)],
                my_power=calculate_mission_power(state, index, player_id),
                opponent_power=calculate_mission_power(state, index, opponent),
            )
        )

    return VisibleGameState(
        game_id=state.game_id,
        viewer=player_id,
        turn=state.turn,
        phase=state.phase,
        active_player=state.active_player,
        edge_holder=state.edge_holder,
        my_state=_own_state(state.player(player_id)),
        opponent_state=_opponent_state(state.player(opponent)),
        missions=missions,
        mission_deck_size=len(state.mission_deck),
        pending_actions=[p for p in state.pending_actions if p.player == player_id],
        log=list(state.log),
    )
