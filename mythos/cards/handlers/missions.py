"""
Mission SCORE handlers.

The source player is the winner of the mission. MSS 02 and MSS 10
have no effect and register nothing.
"""

from __future__ import annotations

from ...engine_core.board import add_power_tokens, discard_from_hand, place_character, return_to_hand
from ...engine_core.effect_registry import (
    EffectContext, EffectOutcome, RESOLVED, register_effect, register_selection,
)
from ...engine_core.state import EffectTrigger, PendingKind
from ...engine_core.targets import TargetFilter, TargetType, find_target_ids
from .helpers import choose, choose_destination, defeat_targets, draw, hand_options

SCORE = EffectTrigger.SCORE


@register_effect("MSS 01", SCORE)
def call_for_support(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY,
                              TargetFilter(non_hidden_only=True))
    return choose(ctx, "MISSION_POWERUP", targets,
                  "Select a friendly character to give POWERUP 2.", apply_mission_powerup)


@register_selection("MISSION_POWERUP")
def apply_mission_powerup(ctx: EffectContext, target: str) -> EffectOutcome:
    if add_power_tokens(ctx.state, target, 2):
        ctx.log("POWERUP 2.", action="EFFECT_POWERUP")
    return RESOLVED


@register_effect("MSS 03", SCORE)
def find_the_traitor(ctx: EffectContext) -> EffectOutcome:
    """The opponent chooses which card to discard."""
    return choose(ctx, "MISSION_OPPONENT_DISCARD", hand_options(ctx, ctx.opponent),
                  "Choose a card from your hand to discard.", apply_opponent_discard,
                  kind=PendingKind.DISCARD_CARD, optional=False, player=ctx.opponent)


@register_selection("MISSION_OPPONENT_DISCARD")
def apply_opponent_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.opponent, int(target))
    ctx.log(f"{ctx.opponent} discards {card.name}.", action="EFFECT_DISCARD")
    return RESOLVED


@register_effect("MSS 04", SCORE)
def assassination(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY_HIDDEN)
    return choose(ctx, "MISSION_DEFEAT_HIDDEN", targets,
                  "Select a hidden enemy character to defeat.", apply_defeat_hidden)


@register_selection("MISSION_DEFEAT_HIDDEN")
def apply_defeat_hidden(ctx: EffectContext, target: str) -> EffectOutcome:
    return defeat_targets(ctx, [target])


@register_effect("MSS 05", SCORE)
def bring_it_back(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY,
                              TargetFilter(same_mission=ctx.mission_index, non_hidden_only=True))
    return choose(ctx, "MISSION_RETURN_TO_HAND", targets,
                  "Choose a friendly character in this mission to return to your hand.", apply_return_to_hand,
                  optional=False)


@register_selection("MISSION_RETURN_TO_HAND")
def apply_return_to_hand(ctx: EffectContext, target: str) -> EffectOutcome:
    card = return_to_hand(ctx.state, target)
    if card is not None:
        ctx.log(f"{card.name} returns to hand.", action="RETURN_TO_HAND")
    return RESOLVED


@register_effect("MSS 06", SCORE)
def rescue_a_friend(ctx: EffectContext) -> EffectOutcome:
    draw(ctx)
    return RESOLVED


@register_effect("MSS 07", SCORE)
def i_have_to_go(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY_HIDDEN)
    if len(ctx.state.active_missions) < 2:
        targets = []
    return choose(ctx, "MISSION_MOVE_HIDDEN", targets,
                  "Select a friendly hidden character to move.", apply_move_hidden)


@register_selection("MISSION_MOVE_HIDDEN")
def apply_move_hidden(ctx: EffectContext, target: str) -> EffectOutcome:
    return choose_destination(ctx, target)


@register_effect("MSS 08", SCORE)
def set_a_trap(ctx: EffectContext) -> EffectOutcome:
    return choose(ctx, "MISSION_TRAP_CARD", hand_options(ctx),
                  "Choose a card to put hidden on a mission for free.", apply_trap_card)


@register_selection("MISSION_TRAP_CARD")
def apply_trap_card(ctx: EffectContext, target: str) -> EffectOutcome:
    missions = [str(i) for i in range(len(ctx.state.active_missions))]
    return choose(ctx, "MISSION_TRAP_MISSION", missions,
                  "Choose a mission for the hidden character.", apply_trap_mission, card_index=int(target))


@register_selection("MISSION_TRAP_MISSION")
def apply_trap_mission(ctx: EffectContext, target: str) -> EffectOutcome:
    card = ctx.state.player(ctx.source_player).hand.pop(ctx.data["card_index"])
    place_character(ctx.state, ctx.source_player, int(target), card, hidden=True)
    ctx.log(f"puts a hidden character on mission {int(target) + 1}.")
    return RESOLVED
