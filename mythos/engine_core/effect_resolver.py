"""
Effect Resolver - Dispatches card effects and manages suspensions.

This module handles:
- Running a card's owed trigger chain (e.g. MAIN then AMBUSH)
- Suspending when a handler awaits a choice (PendingEffect + PendingAction)
- Applying a submitted choice through the registered selection routine
- Declining optional effects
- Draining triggers owed by other sources (mission SCORE sequences)

Every handler runs against its own clone of the state. A handler that
raises is logged and treated as fizzled: the state from before that
handler is kept and resolution carries on.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .action import ActionResult, ErrorCode
from .effect_registry import (
    AwaitingSelection, EffectContext, EffectRegistry, load_card_handlers,
)
from .game_log import log_action
from .state import Card, EffectTrigger, PendingAction, PendingEffect, QueuedTrigger

if TYPE_CHECKING:
    from .state import CharacterInPlay, GameState

logger = logging.getLogger(__name__)


@dataclass
class EffectResolver:
    """
    Resolves effects against an already-cloned state.

    Stateless - all continuation data lives in GameState.
    """
    registry: EffectRegistry = field(default_factory=load_card_handlers)

    # =========================================================================
    # Entry points
    # =========================================================================

    def resolve_character_triggers(
        self,
        state: GameState,
        instance_id: str,
        player_id: str,
        triggers: list[EffectTrigger],
        is_upgrade: bool = False,
    ) -> GameState:
        """Run a character's owed triggers in order, stopping at the first suspension."""
        state = self._run_chain(state, instance_id, player_id, triggers, is_upgrade)
        return self.drain_queue(state)

    def resolve_score_effects(self, state: GameState, winner: str, mission_index: int) -> GameState:
        """
        Queue the SCORE effects of a won mission: the mission card first,
        then each of the winner's visible characters in mission order.
        """
        mission = state.active_missions[mission_index]
        queued = [QueuedTrigger(None, mission_index, winner, EffectTrigger.SCORE)]
        for char in mission.characters(winner):
            if char.visible and char.card.has_trigger(EffectTrigger.SCORE):
                queued.append(QueuedTrigger(char.instance_id, mission_index, winner, EffectTrigger.SCORE))
        state.trigger_queue = queued + state.trigger_queue
        return self.drain_queue(state)

    def drain_queue(self, state: GameState) -> GameState:
        """Process queued triggers until empty or until something suspends."""
        while state.trigger_queue and not state.pending_actions:
            queued = state.trigger_queue.pop(0)
            if queued.source_instance_id is None:
                mission = state.active_missions[queued.mission_index]
                state = self._run_one(
                    state, mission.card, None, queued.mission_index, queued.player, queued.trigger, False, []
                )
                continue

            char = state.find_character(queued.source_instance_id)
            if char is None or char.hidden:
                continue
            state = self._run_one(
                state, char.card, char.instance_id, char.mission_index,
                queued.player, queued.trigger, False, [],
            )
        return state

    def apply_selection(
        self, state: GameState, player_id: str, pending_action_id: str | None, targets: tuple[str, ...]
    ) -> ActionResult:
        """Resume a suspended effect with the player's choice."""
        pending_action = next((p for p in state.pending_actions if p.action_id == pending_action_id), None)
        if pending_action is None:
            return ActionResult.failure(f"No pending action {pending_action_id}", ErrorCode.INVALID_TARGET)
        if pending_action.player != player_id:
            return ActionResult.failure("That choice belongs to the other player", ErrorCode.NOT_YOUR_TURN)
        if not targets or any(t not in pending_action.options for t in targets):
            return ActionResult.failure(f"Invalid selection {list(targets)}", ErrorCode.INVALID_TARGET)
        if len(targets) > pending_action.max_selections:
            return ActionResult.failure("Too many selections", ErrorCode.INVALID_TARGET)

        effect = self._pop_pending(state, pending_action.source_effect_id, pending_action.action_id)

        if effect is None:
            return ActionResult.success_with_state(self.drain_queue(state))

        routine = self.registry.get_selection(effect.selection_type)
        if routine is None:
            logger.warning("No selection routine for %s; effect fizzles", effect.selection_type)
            return ActionResult.success_with_state(self._continue(state, effect))

        ctx_state = state.clone()
        ctx = self._context_for(ctx_state, effect)
        try:
            outcome = routine(ctx, targets[0])
        except Exception:
            logger.exception("Selection routine %s failed; effect fizzles", effect.selection_type)
            return ActionResult.success_with_state(self._continue(state, effect))

        state = ctx.state
        if isinstance(outcome, AwaitingSelection) and outcome.targets:
            state = self._suspend(state, ctx, outcome, effect.remaining_triggers)
            return ActionResult.success_with_state(state)
        return ActionResult.success_with_state(self._continue(state, effect))

    def decline(self, state: GameState, player_id: str, pending_effect_id: str | None) -> ActionResult:
        """Skip an optional pending effect."""
        effect = next((e for e in state.pending_effects if e.effect_id == pending_effect_id), None)
        if effect is None:
            return ActionResult.failure(f"No pending effect {pending_effect_id}", ErrorCode.INVALID_TARGET)
        if effect.source_player != player_id:
            return ActionResult.failure("That effect belongs to the other player", ErrorCode.NOT_YOUR_TURN)
        if not effect.is_optional:
            return ActionResult.failure("This effect is mandatory", ErrorCode.INVALID_TARGET)

        self._pop_pending(state, effect.effect_id, None)
        log_action(state, player_id, "DECLINE_EFFECT", f"Declined: {effect.description}")
        return ActionResult.success_with_state(self._continue(state, effect))

    # =========================================================================
    # Chain processing
    # =========================================================================

    def _run_chain(
        self,
        state: GameState,
        instance_id: str | None,
        player_id: str,
        triggers: list[EffectTrigger],
        is_upgrade: bool,
    ) -> GameState:
        for position, trigger in enumerate(triggers):
            char = state.find_character(instance_id) if instance_id else None
            if char is None or char.hidden:
                return state
            remaining = list(triggers[position + 1:])
            state = self._run_one(
                state, char.card, char.instance_id, char.mission_index,
                player_id, trigger, is_upgrade, remaining,
            )
            if state.pending_actions:
                return state
        return state

    def _run_one(
        self,
        state: GameState,
        card: Card,
        instance_id: str | None,
        mission_index: int,
        player_id: str,
        trigger: EffectTrigger,
        is_upgrade: bool,
        remaining: list[EffectTrigger],
    ) -> GameState:
        handler = self.registry.get_effect(card.card_id, trigger)
        if handler is None:
            return state

        working = state.clone()
        ctx = EffectContext(
            state=working,
            source_player=player_id,
            source_card=card,
            source_instance_id=instance_id,
            mission_index=mission_index,
            trigger=trigger,
            is_upgrade=is_upgrade,
        )
        try:
            outcome = handler(ctx)
        except Exception:
            logger.exception("Effect %s %s failed; treating as fizzled", card.card_id, trigger.value)
            return state

        state = ctx.state
        if isinstance(outcome, AwaitingSelection):
            if not outcome.targets:
                ctx.log("no valid target, effect fizzles.", action="EFFECT_FIZZLE")
                return state
            return self._suspend(state, ctx, outcome, remaining)
        return state

    def _continue(self, state: GameState, effect: PendingEffect) -> GameState:
        """After a pending effect is done: the card's owed triggers, then the queue."""
        if effect.remaining_triggers and effect.source_instance_id:
            state = self._run_chain(
                state, effect.source_instance_id, effect.source_player,
                effect.remaining_triggers, effect.is_upgrade,
            )
            if state.pending_actions:
                return state
        return self.drain_queue(state)

    # =========================================================================
    # Suspension bookkeeping
    # =========================================================================

    def _suspend(
        self,
        state: GameState,
        ctx: EffectContext,
        outcome: AwaitingSelection,
        remaining: list[EffectTrigger],
    ) -> GameState:
        effect_id = state.next_id("effect")
        state.pending_effects.append(
            PendingEffect(
                effect_id=effect_id,
                source_card_id=ctx.source_card.card_id,
                source_instance_id=ctx.source_instance_id,
                source_mission_index=ctx.mission_index,
                trigger=ctx.trigger,
                description=outcome.description,
                selection_type=outcome.selection_type,
                source_player=ctx.source_player,
                valid_targets=list(outcome.targets),
                is_optional=outcome.optional,
                is_upgrade=ctx.is_upgrade,
                remaining_triggers=list(remaining),
                data=dict(outcome.data),
            )
        )
        state.pending_actions.append(
            PendingAction(
                action_id=state.next_id("pending"),
                kind=outcome.kind,
                player=outcome.player or ctx.source_player,
                description=outcome.description,
                options=list(outcome.targets),
                source_effect_id=effect_id,
            )
        )
        return state

    def _pop_pending(
        self, state: GameState, effect_id: str | None, action_id: str | None
    ) -> PendingEffect | None:
        effect = next((e for e in state.pending_effects if e.effect_id == effect_id), None)
        state.pending_effects = [e for e in state.pending_effects if e.effect_id != effect_id]
        state.pending_actions = [
            p for p in state.pending_actions
            if p.action_id != action_id and (effect_id is None or p.source_effect_id != effect_id)
        ]
        return effect

    def _context_for(self, state: GameState, effect: PendingEffect) -> EffectContext:
        return EffectContext(
            state=state,
            source_player=effect.source_player,
            source_card=self._source_card(state, effect),
            source_instance_id=effect.source_instance_id,
            mission_index=effect.source_mission_index,
            trigger=effect.trigger,
            is_upgrade=effect.is_upgrade,
            data=dict(effect.data),
        )

    @staticmethod
    def _source_card(state: GameState, effect: PendingEffect) -> Card:
        if effect.source_instance_id is None:
            return state.active_missions[effect.source_mission_index].card
        char: CharacterInPlay | None = state.find_character(effect.source_instance_id)
        if char is not None:
            return char.card
        # The source left play while its effect was pending
        return Card(card_id=effect.source_card_id, name=effect.source_card_id)

