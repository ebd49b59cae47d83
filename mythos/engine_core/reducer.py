"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure from the caller's view: (state, player, action) -> new state
- Validates before applying; illegal actions come back as failures
- Works on a clone, so a rejected action never touches the input
- Delegates card effects to EffectResolver and automatic phases to phases.py
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, TYPE_CHECKING

from .action import Action, ActionResult, ActionType, ErrorCode
from .board import place_character
from .constants import HIDDEN_PLAY_COST, opponent_of
from .continuous import calculate_effective_cost
from .defeat import trigger_on_play
from .effect_resolver import EffectResolver
from .game_log import log_action
from .phases import advance, apply_mulligan
from .rules import (
    RuleViolation, check_play_character, check_play_hidden, check_reveal,
    check_upgrade, find_own_character, reveal_cost, upgrade_cost,
)
from .state import EffectTrigger, GamePhase

if TYPE_CHECKING:
    from .state import GameState

logger = logging.getLogger(__name__)

Handler = Callable[["GameState", str, Action], ActionResult]

_PLAYER_MOVES = {
    ActionType.PLAY_CHARACTER,
    ActionType.PLAY_HIDDEN,
    ActionType.REVEAL_CHARACTER,
    ActionType.UPGRADE_CHARACTER,
    ActionType.PASS,
}


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """
    resolver: EffectResolver = field(default_factory=EffectResolver)

    def apply(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        """
        Apply an action for a player.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, player_id, action)
        if validation_error:
            return ActionResult.failure(validation_error.message, error_code=validation_error.code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
            )

        working = state.clone()
        result = handler(working, player_id, action)
        if result.success and result.new_state is not None:
            result.new_state = advance(result.new_state, self.resolver)
        return result

    def _validate_action(self, state: GameState, player_id: str, action: Action) -> RuleViolation | None:
        """
        Validate that an action may be attempted now.

        Card-level legality (cost, names, targets) is checked by the handlers.
        """
        if state.phase == GamePhase.GAME_OVER:
            return RuleViolation(ErrorCode.WRONG_PHASE, "Game is over - no actions allowed")

        if action.action_type == ActionType.MULLIGAN:
            if state.phase != GamePhase.MULLIGAN:
                return RuleViolation(ErrorCode.WRONG_PHASE, "Mulligan only happens before the first turn")
            if state.player(player_id).has_mulliganed:
                return RuleViolation(ErrorCode.ALREADY_DECIDED, f"{player_id} already decided")
            return None

        if action.action_type in (ActionType.SELECT_TARGET, ActionType.DECLINE_OPTIONAL_EFFECT):
            if not state.pending_effects and not state.pending_actions:
                return RuleViolation(ErrorCode.INVALID_TARGET, "Nothing is waiting for a selection")
            return None

        if action.action_type in _PLAYER_MOVES:
            if state.phase != GamePhase.ACTION:
                return RuleViolation(ErrorCode.WRONG_PHASE, f"Cannot act during {state.phase.value}")
            if state.pending_actions:
                return RuleViolation(ErrorCode.PENDING_SELECTION, "A pending selection must be resolved first")
            player = state.player(player_id)
            if player.passed:
                return RuleViolation(ErrorCode.ALREADY_PASSED, f"{player_id} has already passed")
            opponent = state.player(opponent_of(player_id))
            if not opponent.passed and state.active_player != player_id:
                return RuleViolation(ErrorCode.NOT_YOUR_TURN, f"Not {player_id}'s turn")
        return None

    def _get_handler(self, action_type: ActionType) -> Handler | None:
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLAY_CHARACTER: self._handle_play_character,
            ActionType.PLAY_HIDDEN: self._handle_play_hidden,
            ActionType.REVEAL_CHARACTER: self._handle_reveal,
            ActionType.UPGRADE_CHARACTER: self._handle_upgrade,
            ActionType.PASS: self._handle_pass,
            ActionType.MULLIGAN: self._handle_mulligan,
            ActionType.SELECT_TARGET: self._handle_select_target,
            ActionType.DECLINE_OPTIONAL_EFFECT: self._handle_decline,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Player moves
    # =========================================================================

    def _handle_play_character(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        """Play a card face-up, paying its effective cost."""
        p = action.payload
        violation = check_play_character(state, player_id, p.card_index, p.mission_index)
        if violation:
            return ActionResult.failure(violation.message, violation.code)

        player = state.player(player_id)
        card = player.hand[p.card_index]
        cost = calculate_effective_cost(state, card, player_id, p.mission_index)
        player.hand.pop(p.card_index)
        player.chakra -= cost

        char = place_character(state, player_id, p.mission_index, card)
        log_action(state, player_id, "PLAY_CHARACTER",
                   f"{player_id} plays {card.name} on mission {p.mission_index + 1} for {cost} chakra.")
        trigger_on_play(state, char)

        state = self.resolver.resolve_character_triggers(
            state, char.instance_id, player_id, [EffectTrigger.MAIN]
        )
        return self._after_move(state, player_id, action)

    def _handle_play_hidden(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        """Play a card face-down for a flat cost."""
        p = action.payload
        violation = check_play_hidden(state, player_id, p.card_index, p.mission_index)
        if violation:
            return ActionResult.failure(violation.message, violation.code)

        player = state.player(player_id)
        card = player.hand.pop(p.card_index)
        player.chakra -= HIDDEN_PLAY_COST
        char = place_character(state, player_id, p.mission_index, card, hidden=True)
        log_action(state, player_id, "PLAY_HIDDEN",
                   f"{player_id} plays a hidden character on mission {p.mission_index + 1}.")
        trigger_on_play(state, char)
        return self._after_move(state, player_id, action)

    def _handle_reveal(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        """Reveal a hidden character, then resolve MAIN and AMBUSH."""
        p = action.payload
        violation = check_reveal(state, player_id, p.mission_index, p.instance_id)
        if violation:
            return ActionResult.failure(violation.message, violation.code)

        char = find_own_character(state, player_id, p.mission_index, p.instance_id)
        cost = reveal_cost(state, char)
        state.player(player_id).chakra -= cost
        char.hidden = False
        log_action(state, player_id, "REVEAL_CHARACTER",
                   f"{player_id} reveals {char.card.name} on mission {p.mission_index + 1} for {cost} chakra.")

        state = self.resolver.resolve_character_triggers(
            state, char.instance_id, player_id, [EffectTrigger.MAIN, EffectTrigger.AMBUSH]
        )
        return self._after_move(state, player_id, action)

    def _handle_upgrade(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        """Stack a same-name, more expensive card on a character."""
        p = action.payload
        violation = check_upgrade(state, player_id, p.card_index, p.mission_index, p.instance_id)
        if violation:
            return ActionResult.failure(violation.message, violation.code)

        player = state.player(player_id)
        char = find_own_character(state, player_id, p.mission_index, p.instance_id)
        card = player.hand[p.card_index]
        cost = upgrade_cost(char.card, card)
        player.hand.pop(p.card_index)
        player.chakra -= cost
        char.push(card)
        log_action(state, player_id, "UPGRADE_CHARACTER",
                   f"{player_id} upgrades {card.name} on mission {p.mission_index + 1} for {cost} chakra.")

        if char.visible:
            state = self.resolver.resolve_character_triggers(
                state, char.instance_id, player_id,
                [EffectTrigger.MAIN, EffectTrigger.UPGRADE], is_upgrade=True,
            )
        return self._after_move(state, player_id, action)

    def _handle_pass(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        """Pass; the first player to pass takes the Edge."""
        player = state.player(player_id)
        player.passed = True
        if state.first_passer is None:
            state.first_passer = player_id
            state.edge_holder = player_id
            log_action(state, player_id, "PASS", f"{player_id} passes first and takes the Edge.")
        else:
            log_action(state, player_id, "PASS", f"{player_id} passes.")

        opponent = opponent_of(player_id)
        if not state.player(opponent).passed:
            state.active_player = opponent
        return ActionResult.success_with_state(state)

    def _after_move(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        """Alternate turns while neither player has passed."""
        if not any(p.passed for p in state.players):
            state.active_player = opponent_of(player_id)
        return ActionResult.success_with_state(state)

    # =========================================================================
    # Setup and selections
    # =========================================================================

    def _handle_mulligan(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        apply_mulligan(state, player_id, bool(action.payload.do_mulligan))
        return ActionResult.success_with_state(state)

    def _handle_select_target(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        return self.resolver.apply_selection(
            state, player_id, action.payload.pending_id, action.payload.targets
        )

    def _handle_decline(self, state: GameState, player_id: str, action: Action) -> ActionResult:
        return self.resolver.decline(state, player_id, action.payload.pending_id)


_DEFAULT_REDUCER: Reducer | None = None


def default_reducer() -> Reducer:
    global _DEFAULT_REDUCER
    if _DEFAULT_REDUCER is None:
        _DEFAULT_REDUCER = Reducer()
    return _DEFAULT_REDUCER


def apply_action_result(state: GameState, player_id: str, action: Action) -> ActionResult:
    """Apply an action and report success or the reason for rejection."""
    return default_reducer().apply(state, player_id, action)


def apply_action(state: GameState, player_id: str, action: Action) -> GameState:
    """
    Convenience function to apply an action.

    Illegal actions return the input state unchanged.
    """
    result = apply_action_result(state, player_id, action)
    if not result.success:
        logger.debug("Rejected %s for %s: %s", action.action_type.value, player_id, result.error)
        return state
    return result.new_state
