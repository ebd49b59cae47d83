"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. AI strategies to enumerate possible moves
2. The API to show available actions
3. Validation (is this action in get_valid_actions?)

Design: Generates Action objects, not just action types.
Every generated action passes the same rule checks the reducer applies,
so applying any of them changes the state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .action import Action
from .constants import opponent_of
from .rules import check_play_character, check_play_hidden, check_reveal, check_upgrade
from .state import GamePhase

if TYPE_CHECKING:
    from .state import GameState


@dataclass
class ActionGenerator:
    """Generates legal actions for one player."""

    def generate(self, state: GameState, player_id: str) -> list[Action]:
        """
        Generate all legal actions for a player right now.

        An empty list means the player has nothing to do.
        """
        if state.phase == GamePhase.GAME_OVER:
            return []

        if state.phase == GamePhase.MULLIGAN:
            return self._generate_mulligan_actions(state, player_id)

        # While waiting for a choice, only answers to it are legal
        if state.pending_actions:
            return self._generate_pending_actions(state, player_id)

        if state.phase != GamePhase.ACTION:
            return []

        player = state.player(player_id)
        if player.passed:
            return []
        if not state.player(opponent_of(player_id)).passed and state.active_player != player_id:
            return []

        actions = [Action.pass_turn()]
        actions.extend(self._generate_hand_actions(state, player_id))
        actions.extend(self._generate_reveal_actions(state, player_id))
        return actions

    def _generate_mulligan_actions(self, state: GameState, player_id: str) -> list[Action]:
        if state.player(player_id).has_mulliganed:
            return []
        return [Action.mulligan(True), Action.mulligan(False)]

    def _generate_pending_actions(self, state: GameState, player_id: str) -> list[Action]:
        """One SELECT_TARGET per option, plus DECLINE for optional effects."""
        actions = []
        for pending in state.pending_actions:
            if pending.player != player_id:
                continue
            for option in pending.options:
                actions.append(Action.select_target(pending.action_id, [option]))

        for effect in state.pending_effects:
            if effect.source_player == player_id and effect.is_optional:
                actions.append(Action.decline(effect.effect_id))
        return actions

    def _generate_hand_actions(self, state: GameState, player_id: str) -> list[Action]:
        """Play, hidden play and upgrades for each hand card on each mission."""
        actions = []
        hand = state.player(player_id).hand
        for card_index in range(len(hand)):
            for mission_index, mission in enumerate(state.active_missions):
                if check_play_character(state, player_id, card_index, mission_index) is None:
                    actions.append(Action.play_character(card_index, mission_index))
                if check_play_hidden(state, player_id, card_index, mission_index) is None:
                    actions.append(Action.play_hidden(card_index, mission_index))
                for char in mission.characters(player_id):
                    if check_upgrade(state, player_id, card_index, mission_index, char.instance_id) is None:
                        actions.append(Action.upgrade(card_index, mission_index, char.instance_id))
        return actions

    def _generate_reveal_actions(self, state: GameState, player_id: str) -> list[Action]:
        actions = []
        for mission_index, _, char in state.iter_characters(player_id):
            if not char.hidden:
                continue
            if check_reveal(state, player_id, mission_index, char.instance_id) is None:
                actions.append(Action.reveal(mission_index, char.instance_id))
        return actions


def get_valid_actions(state: GameState, player_id: str) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    return ActionGenerator().generate(state, player_id)


def is_legal(state: GameState, player_id: str, action: Action) -> bool:
    """Check if a specific action is legal."""
    return action in get_valid_actions(state, player_id)
