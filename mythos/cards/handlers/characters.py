"""
Character effect handlers.

Only triggered effects live here. Continuous effects (chakra bonuses,
power auras, cost changes, defeat replacement, end-of-round returns)
are typed rules in rules_table.py and need no handler.
"""

from __future__ import annotations

from ...engine_core.board import (
    add_power_tokens, change_controller, discard_from_hand, place_character,
    put_on_top_of_deck, remove_power_tokens,
)
from ...engine_core.card_rules import count_missions_with_keyword
from ...engine_core.defeat import defeat_character
from ...engine_core.effect_registry import (
    EffectContext, EffectOutcome, RESOLVED, register_effect, register_selection,
)
from ...engine_core.state import EffectTrigger, PendingKind
from ...engine_core.targets import TargetFilter, TargetType, find_target_ids
from .helpers import (
    choose, choose_card_to_play, choose_destination, choose_next_move, defeat_targets, draw,
    hand_options, hide_targets, powerup_self,
)

MAIN = EffectTrigger.MAIN
AMBUSH = EffectTrigger.AMBUSH
UPGRADE = EffectTrigger.UPGRADE
SCORE = EffectTrigger.SCORE


def _self_excluded(ctx: EffectContext) -> frozenset[str]:
    return frozenset({ctx.source_instance_id}) if ctx.source_instance_id else frozenset()


# =============================================================================
# POWERUP
# =============================================================================

@register_effect("017/130", MAIN)
def choji_powerup(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, 3)


@register_effect("038/130", AMBUSH)
def rock_lee_ambush(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, 1)


@register_effect("039/130", UPGRADE)
def rock_lee_upgrade(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, 2)


@register_effect("043/130", UPGRADE)
def gai_upgrade(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, 3)


@register_effect("074/130", MAIN)
def gaara_hidden_count(ctx: EffectContext) -> EffectOutcome:
    """POWERUP X, X = friendly hidden characters in this mission."""
    hidden = sum(1 for c in ctx.mission.characters(ctx.source_player) if c.hidden)
    return powerup_self(ctx, hidden)


@register_effect("019/130", MAIN)
def ino_team_10(ctx: EffectContext) -> EffectOutcome:
    others = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        keyword="Team 10", same_mission=ctx.mission_index, non_hidden_only=True,
        exclude_ids=_self_excluded(ctx),
    ))
    if others:
        return powerup_self(ctx, 1)
    return RESOLVED


@register_effect("057/130", MAIN)
def jirobo_sound_four(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, count_missions_with_keyword(ctx.state, ctx.source_player, "Sound Four"))


@register_effect("098/130", MAIN)
def katsuyu_tsunade(ctx: EffectContext) -> EffectOutcome:
    tsunade = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY,
                              TargetFilter(name="Tsunade", non_hidden_only=True))
    if tsunade:
        return powerup_self(ctx, 2)
    return RESOLVED


@register_effect("001/130", MAIN)
def hiruzen_powerup(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        group="Leaf Village", exclude_ids=_self_excluded(ctx),
    ))
    return choose(ctx, "HIRUZEN_POWERUP", targets,
                  "Select a friendly Leaf Village character to give POWERUP 2.", apply_hiruzen_powerup)


@register_selection("HIRUZEN_POWERUP")
def apply_hiruzen_powerup(ctx: EffectContext, target: str) -> EffectOutcome:
    if add_power_tokens(ctx.state, target, 2):
        ctx.log("POWERUP 2 on a friendly Leaf Village character.", action="EFFECT_POWERUP")
    return RESOLVED


# =============================================================================
# Draw and chakra
# =============================================================================

@register_effect("081/130", SCORE)
def baki_score(ctx: EffectContext) -> EffectOutcome:
    draw(ctx)
    return RESOLVED


@register_effect("011/130", MAIN)
def sakura_team_7(ctx: EffectContext) -> EffectOutcome:
    others = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        keyword="Team 7", same_mission=ctx.mission_index, non_hidden_only=True,
        exclude_ids=_self_excluded(ctx),
    ))
    if others:
        draw(ctx)
    return RESOLVED


@register_effect("021/130", MAIN)
def shikamaru_edge(ctx: EffectContext) -> EffectOutcome:
    if ctx.state.edge_holder == ctx.source_player:
        draw(ctx)
    return RESOLVED


@register_effect("032/130", MAIN)
def shino_both_draw(ctx: EffectContext) -> EffectOutcome:
    draw(ctx)
    draw(ctx, player_id=ctx.opponent)
    return RESOLVED


@register_effect("046/130", MAIN)
def ebisu_weaker_friend(ctx: EffectContext) -> EffectOutcome:
    """Printed power comparison; tokens do not count."""
    power = ctx.source_card.power
    weaker = [
        c for c in ctx.mission.characters(ctx.source_player)
        if c.visible and c.instance_id != ctx.source_instance_id and c.card.power < power
    ]
    if weaker:
        draw(ctx)
    return RESOLVED


@register_effect("061/130", MAIN)
def sakon_draw(ctx: EffectContext) -> EffectOutcome:
    count = count_missions_with_keyword(ctx.state, ctx.source_player, "Sound Four")
    if count:
        draw(ctx, count)
    return RESOLVED


@register_effect("095/130", MAIN)
def gamahiro_draw(ctx: EffectContext) -> EffectOutcome:
    friends = [c for c in ctx.mission.characters(ctx.source_player) if c.instance_id != ctx.source_instance_id]
    if friends:
        draw(ctx)
    return RESOLVED


@register_effect("072/130", MAIN)
def kin_opponent_draws(ctx: EffectContext) -> EffectOutcome:
    draw(ctx, player_id=ctx.opponent)
    return RESOLVED


@register_effect("070/130", MAIN)
def zaku_opponent_chakra(ctx: EffectContext) -> EffectOutcome:
    ctx.state.player(ctx.opponent).chakra += 1
    ctx.log(f"{ctx.opponent} gains 1 chakra.", action="EFFECT_CHAKRA")
    return RESOLVED


@register_effect("088/130", MAIN)
def haku_draw_then_return(ctx: EffectContext) -> EffectOutcome:
    if not draw(ctx):
        return RESOLVED
    return choose(ctx, "HAKU_PUT_ON_DECK", hand_options(ctx),
                  "Choose a card from your hand to put on top of your deck.", apply_haku_put_on_deck,
                  kind=PendingKind.PUT_CARD_ON_DECK, optional=False)


@register_selection("HAKU_PUT_ON_DECK")
def apply_haku_put_on_deck(ctx: EffectContext, target: str) -> EffectOutcome:
    put_on_top_of_deck(ctx.state, ctx.source_player, int(target))
    ctx.log("puts a card on top of the deck.")
    return RESOLVED


@register_effect("012/130", UPGRADE)
def sakura_draw_then_discard(ctx: EffectContext) -> EffectOutcome:
    if not draw(ctx):
        return RESOLVED
    return choose(ctx, "SAKURA_DISCARD", hand_options(ctx),
                  "Choose a card to discard.", apply_sakura_discard,
                  kind=PendingKind.DISCARD_CARD, optional=False)


@register_selection("SAKURA_DISCARD")
def apply_sakura_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.source_player, int(target))
    ctx.log(f"discards {card.name}.", action="EFFECT_DISCARD")
    return RESOLVED


# =============================================================================
# Tokens
# =============================================================================

@register_effect("030/130", MAIN)
@register_effect("036/130", MAIN)
def remove_enemy_tokens(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(min_tokens=1))
    return choose(ctx, "REMOVE_ENEMY_TOKENS", targets,
                  "Select an enemy character to remove up to 2 Power tokens from.", apply_remove_enemy_tokens)


@register_selection("REMOVE_ENEMY_TOKENS")
def apply_remove_enemy_tokens(ctx: EffectContext, target: str) -> EffectOutcome:
    removed = remove_power_tokens(ctx.state, target, 2)
    ctx.log(f"removes {removed} Power token(s) from an enemy character.", action="EFFECT_REMOVE_TOKENS")
    return RESOLVED


@register_effect("092/130", AMBUSH)
def kisame_steal_tokens(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY,
                              TargetFilter(same_mission=ctx.mission_index, min_tokens=1))
    return choose(ctx, "KISAME_STEAL_TOKENS", targets,
                  "Select an enemy character in this mission to steal up to 2 Power tokens from.",
                  apply_kisame_steal_tokens)


@register_selection("KISAME_STEAL_TOKENS")
def apply_kisame_steal_tokens(ctx: EffectContext, target: str) -> EffectOutcome:
    removed = remove_power_tokens(ctx.state, target, 2)
    if removed and ctx.source_instance_id:
        add_power_tokens(ctx.state, ctx.source_instance_id, removed)
    ctx.log(f"steals {removed} Power token(s).", action="EFFECT_STEAL_TOKENS")
    return RESOLVED


# =============================================================================
# Moves
# =============================================================================

@register_effect("023/130", MAIN)
def asuma_move_team_10(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        keyword="Team 10", same_mission=ctx.mission_index, non_hidden_only=True,
        exclude_ids=_self_excluded(ctx),
    ))
    return choose(ctx, "MOVE_CHARACTER", targets,
                  "Select another Team 10 character in this mission to move.", apply_move_choice)


@register_effect("047/130", MAIN)
def iruka_move_naruto(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY,
                              TargetFilter(name="Naruto Uzumaki", non_hidden_only=True))
    return choose(ctx, "MOVE_CHARACTER", targets, "Select a Naruto Uzumaki to move.", apply_move_choice)


@register_selection("MOVE_CHARACTER")
def apply_move_choice(ctx: EffectContext, target: str) -> EffectOutcome:
    return choose_destination(ctx, target)


@register_effect("059/130", MAIN)
def kidomaru_move_x(ctx: EffectContext) -> EffectOutcome:
    count = count_missions_with_keyword(ctx.state, ctx.source_player, "Sound Four")
    if count <= 0:
        return RESOLVED
    return choose_next_move(ctx, count, [])


@register_effect("099/130", SCORE)
def pakkun_move_self(ctx: EffectContext) -> EffectOutcome:
    if ctx.source_instance_id is None:
        return RESOLVED
    return choose_destination(ctx, ctx.source_instance_id)


# =============================================================================
# Hidden characters
# =============================================================================

@register_effect("068/130", MAIN)
def dosu_look(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(hidden_only=True))
    return choose(ctx, "DOSU_LOOK", targets, "Select a hidden character to look at.", apply_dosu_look)


@register_selection("DOSU_LOOK")
def apply_dosu_look(ctx: EffectContext, target: str) -> EffectOutcome:
    char = ctx.state.find_character(target)
    if char is not None:
        ctx.log(f"looks at a hidden character on mission {char.mission_index + 1}.", action="LOOK")
    return RESOLVED


@register_effect("068/130", AMBUSH)
def dosu_defeat_hidden(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(hidden_only=True))
    return choose(ctx, "DOSU_DEFEAT_HIDDEN", targets, "Select a hidden character to defeat.",
                  apply_dosu_defeat_hidden)


@register_selection("DOSU_DEFEAT_HIDDEN")
def apply_dosu_defeat_hidden(ctx: EffectContext, target: str) -> EffectOutcome:
    return defeat_targets(ctx, [target])


@register_effect("055/130", AMBUSH)
def kimimaro_discard_to_hide(ctx: EffectContext) -> EffectOutcome:
    """Discard is the cost; with nothing to hide afterwards the effect is not used."""
    if not ctx.state.player(ctx.source_player).hand or not _kimimaro_targets(ctx):
        return RESOLVED
    return choose(ctx, "KIMIMARO_DISCARD", hand_options(ctx),
                  "Discard a card to hide a character with cost 3 or less.", apply_kimimaro_discard,
                  kind=PendingKind.DISCARD_CARD)


def _kimimaro_targets(ctx: EffectContext) -> list[str]:
    return find_target_ids(ctx.state, ctx.source_player, TargetType.ANY,
                           TargetFilter(max_cost=3, non_hidden_only=True))


@register_selection("KIMIMARO_DISCARD")
def apply_kimimaro_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.source_player, int(target))
    ctx.log(f"discards {card.name}.", action="EFFECT_DISCARD")
    return choose(ctx, "KIMIMARO_HIDE", _kimimaro_targets(ctx),
                  "Select a character with cost 3 or less to hide.", apply_kimimaro_hide, optional=False)


@register_selection("KIMIMARO_HIDE")
def apply_kimimaro_hide(ctx: EffectContext, target: str) -> EffectOutcome:
    return hide_targets(ctx, [target])


@register_effect("050/130", AMBUSH)
def orochimaru_look_and_take(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY_HIDDEN,
                              TargetFilter(same_mission=ctx.mission_index))
    return choose(ctx, "OROCHIMARU_TAKE", targets,
                  "Select a hidden enemy character in this mission to look at.", apply_orochimaru_take)


@register_selection("OROCHIMARU_TAKE")
def apply_orochimaru_take(ctx: EffectContext, target: str) -> EffectOutcome:
    char = ctx.state.find_character(target)
    if char is None:
        return RESOLVED
    ctx.log(f"looks at a hidden character on mission {char.mission_index + 1}.", action="LOOK")
    if char.card.chakra <= 3 and change_controller(ctx.state, target, ctx.source_player):
        ctx.log("takes control of a hidden character.", action="EFFECT_TAKE_CONTROL")
    return RESOLVED


@register_effect("052/130", AMBUSH)
def kabuto_take_top_card(ctx: EffectContext) -> EffectOutcome:
    if not ctx.state.player(ctx.opponent).deck:
        return RESOLVED
    missions = [str(i) for i in range(len(ctx.state.active_missions))]
    return choose(ctx, "KABUTO_PLACE", missions,
                  "Choose a mission to put the opponent's top card hidden on.", apply_kabuto_place)


@register_selection("KABUTO_PLACE")
def apply_kabuto_place(ctx: EffectContext, target: str) -> EffectOutcome:
    opponent = ctx.state.player(ctx.opponent)
    if not opponent.deck:
        return RESOLVED
    card = opponent.deck.pop(0)
    place_character(ctx.state, ctx.source_player, int(target), card, hidden=True, owner=ctx.opponent)
    ctx.log(f"puts the opponent's top card hidden on mission {int(target) + 1}.")
    return RESOLVED


# =============================================================================
# Summons
# =============================================================================

@register_effect("007/130", MAIN)
def jiraiya_summon(ctx: EffectContext) -> EffectOutcome:
    return choose_card_to_play(ctx, "Choose a Summon to play, paying 1 less.", discount=1, keyword="Summon")


# =============================================================================
# Defeat
# =============================================================================

@register_effect("136/130", UPGRADE)
def sasuke_double_defeat(ctx: EffectContext) -> EffectOutcome:
    friendly = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, exclude_ids=_self_excluded(ctx),
    ))
    if not friendly:
        return _sasuke_choose_enemy(ctx)
    return choose(ctx, "SASUKE_DEFEAT_FRIENDLY", friendly,
                  "Choose a friendly character in this mission to defeat.", apply_sasuke_defeat_friendly,
                  optional=False)


def _sasuke_choose_enemy(ctx: EffectContext) -> EffectOutcome:
    enemies = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY,
                              TargetFilter(same_mission=ctx.mission_index))
    return choose(ctx, "SASUKE_DEFEAT_ENEMY", enemies,
                  "Choose an enemy character in this mission to defeat.", apply_sasuke_defeat_enemy,
                  optional=False)


@register_selection("SASUKE_DEFEAT_FRIENDLY")
def apply_sasuke_defeat_friendly(ctx: EffectContext, target: str) -> EffectOutcome:
    defeat_character(ctx.state, target, ctx.source_player)
    return _sasuke_choose_enemy(ctx)


@register_selection("SASUKE_DEFEAT_ENEMY")
def apply_sasuke_defeat_enemy(ctx: EffectContext, target: str) -> EffectOutcome:
    return defeat_targets(ctx, [target])
