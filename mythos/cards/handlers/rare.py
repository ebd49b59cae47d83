"""
Rare character effect handlers.

Upgrades that refer back to the MAIN effect ("POWERUP X, where X is ...")
are resolved inside the MAIN handler, since X is only known there.
"""

from __future__ import annotations

from ...engine_core.board import add_power_tokens, discard_from_hand, discard_top_card, remove_power_tokens
from ...engine_core.continuous import calculate_character_power
from ...engine_core.defeat import defeat_character, hide_character, move_character
from ...engine_core.effect_registry import (
    EffectContext, EffectOutcome, RESOLVED, register_effect, register_selection,
)
from ...engine_core.state import CharacterInPlay, EffectTrigger, PendingKind
from ...engine_core.targets import TargetFilter, TargetType, find_target_ids, find_targets
from .helpers import (
    choose, choose_card_to_play, choose_destination, copy_main_of, defeat_targets, has_instant_main,
    hand_options, hide_targets, move_destinations, powerup_self,
)
from .uncommon import COPY_EFFECT_CARDS

MAIN = EffectTrigger.MAIN
AMBUSH = EffectTrigger.AMBUSH
UPGRADE = EffectTrigger.UPGRADE
SCORE = EffectTrigger.SCORE


def _others(ctx: EffectContext) -> frozenset[str]:
    return frozenset({ctx.source_instance_id}) if ctx.source_instance_id else frozenset()


def _movable(ctx: EffectContext, chars: list[CharacterInPlay]) -> list[str]:
    return [c.instance_id for c in chars if move_destinations(ctx, c)]


def _weakest(ctx: EffectContext, chars: list[CharacterInPlay]) -> list[CharacterInPlay]:
    if not chars:
        return []
    powers = {c.instance_id: calculate_character_power(ctx.state, c) for c in chars}
    lowest = min(powers.values())
    return [c for c in chars if powers[c.instance_id] == lowest]


def _in_mission(ctx: EffectContext) -> list[CharacterInPlay]:
    return [c for seat in (ctx.source_player, ctx.opponent) for c in ctx.mission.characters(seat)]


@register_selection("R_DEFEAT")
def apply_defeat(ctx: EffectContext, target: str) -> EffectOutcome:
    return defeat_targets(ctx, [target])


@register_selection("R_HIDE")
def apply_hide(ctx: EffectContext, target: str) -> EffectOutcome:
    return hide_targets(ctx, [target])


@register_selection("R_MOVE")
def apply_move(ctx: EffectContext, target: str) -> EffectOutcome:
    return choose_destination(ctx, target)


def _hide_weak_enemy_here(ctx: EffectContext, limit: int) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_power=limit,
    ))
    return choose(ctx, "R_HIDE", targets,
                  f"Select an enemy character with Power {limit} or less in this mission to hide.", apply_hide)


def _defeat_weak_enemy_here(ctx: EffectContext, limit: int) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_power=limit,
    ))
    return choose(ctx, "R_DEFEAT", targets,
                  f"Select an enemy character with Power {limit} or less in this mission to defeat.", apply_defeat)


# =============================================================================
# Leaf Village
# =============================================================================

@register_effect("104/130", MAIN)
def tsunade_spend_chakra(ctx: EffectContext) -> EffectOutcome:
    chakra = ctx.state.player(ctx.source_player).chakra
    if chakra <= 0:
        return RESOLVED
    return choose(ctx, "TSUNADE_R_SPEND", [str(n) for n in range(chakra + 1)],
                  "Choose how much additional Chakra to spend.", apply_tsunade_spend, optional=False)


@register_selection("TSUNADE_R_SPEND")
def apply_tsunade_spend(ctx: EffectContext, target: str) -> EffectOutcome:
    """As an upgrade, the chakra spent counts twice: once for MAIN, once for UPGRADE."""
    amount = int(target)
    ctx.state.player(ctx.source_player).chakra -= amount
    if amount:
        ctx.log(f"spends {amount} additional Chakra.", action="EFFECT_CHAKRA")
    return powerup_self(ctx, amount * 2 if ctx.is_upgrade else amount)


@register_effect("105/130", MAIN)
def jiraiya_summon_cheaper(ctx: EffectContext) -> EffectOutcome:
    return choose_card_to_play(ctx, "Choose a Summon to play, paying 3 less.", discount=3, keyword="Summon")


@register_effect("105/130", UPGRADE)
def jiraiya_move_enemy(ctx: EffectContext) -> EffectOutcome:
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY,
                           TargetFilter(same_mission=ctx.mission_index))
    return choose(ctx, "R_MOVE", _movable(ctx, enemies),
                  "Select an enemy character in this mission to move.", apply_move)


@register_effect("106/130", MAIN)
def kakashi_curse_sealing(ctx: EffectContext) -> EffectOutcome:
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(non_hidden_only=True))
    targets = [c.instance_id for c in enemies if len(c.stack) > 1]
    return choose(ctx, "KAKASHI_R_DISCARD", targets,
                  "Select an upgraded enemy character to discard the top card of.", apply_kakashi_discard)


@register_selection("KAKASHI_R_DISCARD")
def apply_kakashi_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    discarded = discard_top_card(ctx.state, target)
    if discarded is None:
        return RESOLVED
    ctx.log(f"discards {discarded.name} from the top of an enemy character.", action="EFFECT_DISCARD")
    if ctx.is_upgrade and discarded.card_id not in COPY_EFFECT_CARDS and has_instant_main(discarded):
        return copy_main_of(ctx, discarded)
    return RESOLVED


@register_effect("107/130", MAIN)
def sasuke_clear_mission(ctx: EffectContext) -> EffectOutcome:
    """Every other visible friend here must leave; as an upgrade, POWERUP 1 per character moved."""
    return _sasuke_next(ctx, 0, ())


def _sasuke_next(ctx: EffectContext, moved: int, tried: tuple[str, ...]) -> EffectOutcome:
    remaining = [
        c for c in ctx.mission.characters(ctx.source_player)
        if c.visible and c.instance_id != ctx.source_instance_id
        and c.instance_id not in tried and move_destinations(ctx, c)
    ]
    if not remaining:
        return powerup_self(ctx, moved) if ctx.is_upgrade else RESOLVED
    char = remaining[0]
    return choose(ctx, "SASUKE_R_DESTINATION", move_destinations(ctx, char),
                  f"Choose a mission to move {char.card.name} to.", apply_sasuke_destination,
                  optional=False, character=char.instance_id, moved=moved, tried=[*tried, char.instance_id])


@register_selection("SASUKE_R_DESTINATION")
def apply_sasuke_destination(ctx: EffectContext, target: str) -> EffectOutcome:
    moved = ctx.data["moved"]
    if move_character(ctx.state, ctx.data["character"], int(target)):
        moved += 1
    return _sasuke_next(ctx, moved, tuple(ctx.data["tried"]))


@register_effect("108/130", MAIN)
def naruto_hide_enemy(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_power=3,
    ))
    return choose(ctx, "NARUTO_R_HIDE", targets,
                  "Select an enemy character with Power 3 or less in this mission to hide.", apply_naruto_hide)


@register_selection("NARUTO_R_HIDE")
def apply_naruto_hide(ctx: EffectContext, target: str) -> EffectOutcome:
    """As an upgrade, POWERUP X where X is the Power of the character being hidden."""
    char = ctx.state.find_character(target)
    if char is None:
        return RESOLVED
    if ctx.is_upgrade:
        powerup_self(ctx, calculate_character_power(ctx.state, char))
    return hide_targets(ctx, [target])


@register_effect("109/130", MAIN)
def sakura_revive_leaf(ctx: EffectContext) -> EffectOutcome:
    discount = 2 if ctx.is_upgrade else 0
    return choose_card_to_play(
        ctx, "Choose a Leaf Village character in your discard pile to play.",
        pile="discard", group="Leaf Village", discount=discount,
    )


@register_effect("110/130", MAIN)
def ino_move_weakest(ctx: EffectContext) -> EffectOutcome:
    """As an upgrade, the moved character is hidden afterwards."""
    enemies = ctx.mission.characters(ctx.opponent)
    if len(enemies) < 2:
        return RESOLVED
    weakest = _weakest(ctx, [c for c in enemies if c.visible])
    return choose(ctx, "INO_R_TARGET", _movable(ctx, weakest),
                  "Select the weakest enemy character in this mission to move.", apply_ino_target, optional=False)


@register_selection("INO_R_TARGET")
def apply_ino_target(ctx: EffectContext, target: str) -> EffectOutcome:
    char = ctx.state.find_character(target)
    if char is None:
        return RESOLVED
    return choose(ctx, "INO_R_DESTINATION", move_destinations(ctx, char),
                  f"Choose a mission to move {char.card.name} to.", apply_ino_destination,
                  optional=False, character=target)


@register_selection("INO_R_DESTINATION")
def apply_ino_destination(ctx: EffectContext, target: str) -> EffectOutcome:
    instance_id = ctx.data["character"]
    moved = move_character(ctx.state, instance_id, int(target), by_enemy=True)
    if moved and ctx.is_upgrade:
        return hide_targets(ctx, [instance_id])
    return RESOLVED


@register_effect("111/130", UPGRADE)
def shikamaru_hide_enemy(ctx: EffectContext) -> EffectOutcome:
    return _hide_weak_enemy_here(ctx, 3)


@register_effect("112/130", MAIN)
@register_effect("112/130", UPGRADE)
def choji_discard_for_power(ctx: EffectContext) -> EffectOutcome:
    return choose(ctx, "CHOJI_R_DISCARD", hand_options(ctx),
                  "Discard a card; POWERUP X where X is its cost.", apply_choji_discard,
                  kind=PendingKind.DISCARD_CARD, optional=False)


@register_selection("CHOJI_R_DISCARD")
def apply_choji_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.source_player, int(target))
    ctx.log(f"discards {card.name}.", action="EFFECT_DISCARD")
    return powerup_self(ctx, card.chakra)


@register_effect("113/130", MAIN)
def kiba_fang_over_fang(ctx: EffectContext) -> EffectOutcome:
    """Hide a friendly Akamaru, then another character here; as an upgrade, defeat both."""
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        name="Akamaru", non_hidden_only=True,
    ))
    return choose(ctx, "KIBA_R_AKAMARU", targets, "Select a friendly Akamaru.", apply_kiba_akamaru)


@register_selection("KIBA_R_AKAMARU")
def apply_kiba_akamaru(ctx: EffectContext, target: str) -> EffectOutcome:
    if ctx.is_upgrade:
        done = defeat_character(ctx.state, target, ctx.source_player)
    else:
        done = hide_character(ctx.state, target)
    if not done:
        return RESOLVED
    others = [
        c.instance_id for c in _in_mission(ctx)
        if c.instance_id not in (ctx.source_instance_id, target) and (ctx.is_upgrade or c.visible)
    ]
    verb = "defeat" if ctx.is_upgrade else "hide"
    return choose(ctx, "KIBA_R_SECOND", others, f"Select another character in this mission to {verb}.",
                  apply_kiba_second, optional=False)


@register_selection("KIBA_R_SECOND")
def apply_kiba_second(ctx: EffectContext, target: str) -> EffectOutcome:
    if ctx.is_upgrade:
        return defeat_targets(ctx, [target])
    return hide_targets(ctx, [target])


@register_effect("114/130", MAIN)
def hinata_protective_palms(ctx: EffectContext) -> EffectOutcome:
    powerup_self(ctx, 2)
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(
        non_hidden_only=True, exclude_ids=_others(ctx),
    ))
    return choose(ctx, "R_POWERUP_1", targets, "Select another character to give POWERUP 1.", apply_powerup_1)


@register_selection("R_POWERUP_1")
def apply_powerup_1(ctx: EffectContext, target: str) -> EffectOutcome:
    if add_power_tokens(ctx.state, target, 1):
        ctx.log("POWERUP 1.", action="EFFECT_POWERUP")
    return RESOLVED


@register_effect("114/130", UPGRADE)
def hinata_clear_tokens(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(min_tokens=1))
    return choose(ctx, "HINATA_R_CLEAR", targets,
                  "Select an enemy character to remove all Power tokens from.", apply_hinata_clear)


@register_selection("HINATA_R_CLEAR")
def apply_hinata_clear(ctx: EffectContext, target: str) -> EffectOutcome:
    char = ctx.state.find_character(target)
    if char is None:
        return RESOLVED
    removed = remove_power_tokens(ctx.state, target, char.power_tokens)
    ctx.log(f"removes {removed} Power token(s) from an enemy character.", action="EFFECT_REMOVE_TOKENS")
    return RESOLVED


@register_effect("116/130", MAIN)
def neji_defeat_power_4(ctx: EffectContext) -> EffectOutcome:
    return _defeat_exact_power(ctx, 4)


@register_effect("116/130", UPGRADE)
def neji_defeat_power_6(ctx: EffectContext) -> EffectOutcome:
    return _defeat_exact_power(ctx, 6)


def _defeat_exact_power(ctx: EffectContext, power: int) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, min_power=power, max_power=power,
        exclude_ids=_others(ctx),
    ))
    return choose(ctx, "R_DEFEAT", targets,
                  f"Select a character in this mission with exactly Power {power} to defeat.", apply_defeat)


@register_effect("117/130", UPGRADE)
def rock_lee_mill_for_power(ctx: EffectContext) -> EffectOutcome:
    player = ctx.state.player(ctx.source_player)
    if not player.deck:
        return RESOLVED
    card = player.deck.pop(0)
    player.discard.append(card)
    ctx.log(f"reveals and discards {card.name} from the top of the deck.", action="EFFECT_DISCARD")
    return powerup_self(ctx, card.chakra)


@register_effect("118/130", AMBUSH)
def tenten_twin_dragons(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(
        same_mission=ctx.mission_index, hidden_only=True,
    ))
    return choose(ctx, "TENTEN_R_FIRST", targets,
                  "Select a hidden character in this mission to defeat.", apply_tenten_first)


@register_selection("TENTEN_R_FIRST")
def apply_tenten_first(ctx: EffectContext, target: str) -> EffectOutcome:
    char = ctx.state.find_character(target)
    if char is None:
        return RESOLVED
    printed = char.card.power
    defeat_targets(ctx, [target])
    if ctx.state.find_character(target) is not None or printed > 3:
        return RESOLVED
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(hidden_only=True))
    return choose(ctx, "R_DEFEAT", targets, "Select a hidden character in play to defeat.", apply_defeat)


# =============================================================================
# Sand Village
# =============================================================================

@register_effect("119/130", MAIN)
def kankuro_iron_maiden(ctx: EffectContext) -> EffectOutcome:
    return _defeat_weak_enemy_here(ctx, 3)


@register_effect("119/130", UPGRADE)
@register_effect("121/130", UPGRADE)
def move_any_character(ctx: EffectContext) -> EffectOutcome:
    chars = find_targets(ctx.state, ctx.source_player, TargetType.ANY)
    return choose(ctx, "R_MOVE", _movable(ctx, chars), "Select a character in play to move.", apply_move)


@register_effect("120/130", MAIN)
def gaara_sand_coffin(ctx: EffectContext) -> EffectOutcome:
    """Up to one weak enemy per mission; as an upgrade, POWERUP 1 per character chosen."""
    return _gaara_pick(ctx, 0, [])


def _gaara_pick(ctx: EffectContext, start: int, picked: list[str]) -> EffectOutcome:
    for index in range(start, len(ctx.state.active_missions)):
        candidates = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
            same_mission=index, non_hidden_only=True, max_power=1,
        ))
        if len(candidates) == 1:
            picked.append(candidates[0])
        elif candidates:
            return ctx.await_selection(
                "GAARA_R_PICK", candidates,
                f"Select an enemy character with Power 1 or less in mission {index + 1} to defeat.",
                optional=False, next_mission=index + 1, picked=picked,
            )
    if ctx.is_upgrade:
        powerup_self(ctx, len(picked))
    return defeat_targets(ctx, picked)


@register_selection("GAARA_R_PICK")
def apply_gaara_pick(ctx: EffectContext, target: str) -> EffectOutcome:
    return _gaara_pick(ctx, ctx.data["next_mission"], [*ctx.data["picked"], target])


@register_effect("121/130", MAIN)
@register_effect("128/130", UPGRADE)
def move_friendly_character(ctx: EffectContext) -> EffectOutcome:
    friends = find_targets(ctx.state, ctx.source_player, TargetType.FRIENDLY,
                           TargetFilter(exclude_ids=_others(ctx)))
    return choose(ctx, "R_MOVE", _movable(ctx, friends), "Select a friendly character in play to move.", apply_move)


# =============================================================================
# Sound Village
# =============================================================================

@register_effect("122/130", MAIN)
def jirobo_count_mission(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, len(_in_mission(ctx)))


@register_effect("122/130", UPGRADE)
def jirobo_defeat_weak_enemy(ctx: EffectContext) -> EffectOutcome:
    return _defeat_weak_enemy_here(ctx, 1)


@register_effect("123/130", UPGRADE)
def kimimaro_discard_to_defeat(ctx: EffectContext) -> EffectOutcome:
    if not ctx.state.player(ctx.source_player).hand or not _kimimaro_targets(ctx):
        return RESOLVED
    return choose(ctx, "KIMIMARO_R_DISCARD", hand_options(ctx),
                  "Discard a card to defeat a character with cost 5 or less.", apply_kimimaro_discard,
                  kind=PendingKind.DISCARD_CARD)


def _kimimaro_targets(ctx: EffectContext) -> list[str]:
    return find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(
        max_cost=5, non_hidden_only=True, exclude_ids=_others(ctx),
    ))


@register_selection("KIMIMARO_R_DISCARD")
def apply_kimimaro_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.source_player, int(target))
    ctx.log(f"discards {card.name}.", action="EFFECT_DISCARD")
    return choose(ctx, "R_DEFEAT", _kimimaro_targets(ctx),
                  "Select a character with cost 5 or less to defeat.", apply_defeat, optional=False)


@register_effect("124/130", AMBUSH)
@register_effect("124/130", UPGRADE)
def kidomaru_spider_bow(ctx: EffectContext) -> EffectOutcome:
    limit = 5 if ctx.is_upgrade else 3
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        non_hidden_only=True, max_power=limit,
    ))
    targets = [c.instance_id for c in enemies if c.mission_index != ctx.mission_index]
    return choose(ctx, "R_DEFEAT", targets,
                  f"Select an enemy character with Power {limit} or less in another mission to defeat.",
                  apply_defeat)


@register_effect("125/130", UPGRADE)
def tayuya_play_sound(ctx: EffectContext) -> EffectOutcome:
    return choose_card_to_play(ctx, "Choose a Sound Village character to play, paying 2 less.",
                               discount=2, group="Sound Village")


@register_effect("126/130", SCORE)
def orochimaru_kusanagi(ctx: EffectContext) -> EffectOutcome:
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(non_hidden_only=True))
    targets = [c.instance_id for c in _weakest(ctx, enemies)]
    return choose(ctx, "R_DEFEAT", targets, "Select the weakest enemy character in play to defeat.",
                  apply_defeat, optional=False)


@register_effect("126/130", UPGRADE)
def orochimaru_powerup(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, 3)


# =============================================================================
# Independent and Akatsuki
# =============================================================================

@register_effect("130/130", UPGRADE)
def ichibi_clear_mission(ctx: EffectContext) -> EffectOutcome:
    missions = [
        str(index) for index in range(len(ctx.state.active_missions))
        if _hidden_enemies(ctx, index)
    ]
    return choose(ctx, "ICHIBI_R_MISSION", missions,
                  "Choose a mission; all hidden enemy characters there are defeated.", apply_ichibi_mission)


def _hidden_enemies(ctx: EffectContext, mission_index: int) -> list[str]:
    return find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY_HIDDEN,
                           TargetFilter(same_mission=mission_index))


@register_selection("ICHIBI_R_MISSION")
def apply_ichibi_mission(ctx: EffectContext, target: str) -> EffectOutcome:
    return defeat_targets(ctx, _hidden_enemies(ctx, int(target)))
