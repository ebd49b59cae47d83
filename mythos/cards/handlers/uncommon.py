"""
Uncommon character effect handlers.

"MAIN effect: Instead" upgrades are handled inside the MAIN handler by
checking `ctx.is_upgrade`. "MAIN effect: In addition" upgrades register
a separate UPGRADE handler, which the resolver runs after MAIN.
"""

from __future__ import annotations

from ...engine_core.board import (
    add_power_tokens, change_controller, discard_from_hand, place_character,
    remove_power_tokens,
)
from ...engine_core.constants import HIDDEN_PLAY_COST
from ...engine_core.continuous import calculate_character_power
from ...engine_core.defeat import defeat_character, move_character
from ...engine_core.effect_registry import (
    EffectContext, EffectOutcome, RESOLVED, register_effect, register_selection,
)
from ...engine_core.rules import hidden_plays_blocked, reveal_cost
from ...engine_core.state import CharacterInPlay, EffectTrigger, PendingKind, QueuedTrigger
from ...engine_core.targets import TargetFilter, TargetType, find_target_ids, find_targets
from .helpers import (
    choose, choose_card_to_play, choose_destination, defeat_targets, draw, hand_options,
    has_instant_main, hide_targets, move_destinations, powerup_self, random_hand_index,
    run_copied_main,
)

MAIN = EffectTrigger.MAIN
AMBUSH = EffectTrigger.AMBUSH
UPGRADE = EffectTrigger.UPGRADE
SCORE = EffectTrigger.SCORE

# Cards whose own effect copies another; copying them again would loop
COPY_EFFECT_CARDS = frozenset({"016/130", "062/130", "106/130"})

KANKURO_HIDDEN_COST = max(0, HIDDEN_PLAY_COST - 1)


def _others(ctx: EffectContext) -> frozenset[str]:
    return frozenset({ctx.source_instance_id}) if ctx.source_instance_id else frozenset()


def _lowest_cost(chars: list[CharacterInPlay]) -> list[str]:
    if not chars:
        return []
    cheapest = min(c.card.chakra for c in chars)
    return [c.instance_id for c in chars if c.card.chakra == cheapest]


def _movable_to(ctx: EffectContext, char: CharacterInPlay, destination: int) -> bool:
    return str(destination) in move_destinations(ctx, char)


def _powerup_each(ctx: EffectContext, targets: list[str], amount: int, label: str) -> EffectOutcome:
    for target in targets:
        add_power_tokens(ctx.state, target, amount)
    if targets:
        ctx.log(f"POWERUP {amount} on {len(targets)} {label}.", action="EFFECT_POWERUP")
    return RESOLVED


@register_selection("UC_POWERUP_1")
def apply_powerup_1(ctx: EffectContext, target: str) -> EffectOutcome:
    if add_power_tokens(ctx.state, target, 1):
        ctx.log("POWERUP 1.", action="EFFECT_POWERUP")
    return RESOLVED


@register_selection("UC_POWERUP_2")
def apply_powerup_2(ctx: EffectContext, target: str) -> EffectOutcome:
    if add_power_tokens(ctx.state, target, 2):
        ctx.log("POWERUP 2.", action="EFFECT_POWERUP")
    return RESOLVED


@register_selection("UC_DEFEAT")
def apply_defeat(ctx: EffectContext, target: str) -> EffectOutcome:
    return defeat_targets(ctx, [target])


@register_selection("UC_HIDE")
def apply_hide(ctx: EffectContext, target: str) -> EffectOutcome:
    return hide_targets(ctx, [target])


@register_selection("UC_MOVE")
def apply_move(ctx: EffectContext, target: str) -> EffectOutcome:
    return choose_destination(ctx, target)


def _move_self(ctx: EffectContext) -> EffectOutcome:
    if ctx.source_instance_id is None:
        return RESOLVED
    return choose_destination(ctx, ctx.source_instance_id)


# =============================================================================
# Leaf Village
# =============================================================================

@register_effect("002/130", MAIN)
def hiruzen_play_leaf(ctx: EffectContext) -> EffectOutcome:
    """As an upgrade, the character played this way also gets POWERUP 2."""
    return choose_card_to_play(
        ctx, "Choose a Leaf Village character to play, paying 1 less.",
        discount=1, group="Leaf Village", powerup=2 if ctx.is_upgrade else 0,
    )


@register_effect("004/130", UPGRADE)
def tsunade_recover(ctx: EffectContext) -> EffectOutcome:
    discard = ctx.state.player(ctx.source_player).discard
    return choose(ctx, "TSUNADE_RECOVER", [str(i) for i in range(len(discard))],
                  "Choose a character in your discard pile to put into your hand.", apply_tsunade_recover,
                  kind=PendingKind.CHOOSE_CARD_FROM_LIST)


@register_selection("TSUNADE_RECOVER")
def apply_tsunade_recover(ctx: EffectContext, target: str) -> EffectOutcome:
    player = ctx.state.player(ctx.source_player)
    card = player.discard.pop(int(target))
    player.hand.append(card)
    ctx.log(f"puts {card.name} from the discard pile into hand.", action="EFFECT_RECOVER")
    return RESOLVED


@register_effect("006/130", MAIN)
def shizune_move_enemy(ctx: EffectContext) -> EffectOutcome:
    if ctx.is_upgrade:
        ctx.state.player(ctx.source_player).chakra += 2
        ctx.log("gains 2 Chakra.", action="EFFECT_CHAKRA")
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_power=3,
    ))
    return choose(ctx, "UC_MOVE", targets,
                  "Select an enemy character with Power 3 or less to move.", apply_move)


@register_effect("008/130", MAIN)
def jiraiya_summon_discounted(ctx: EffectContext) -> EffectOutcome:
    return choose_card_to_play(ctx, "Choose a Summon to play, paying 2 less.", discount=2, keyword="Summon")


@register_effect("008/130", UPGRADE)
def jiraiya_hide_cheap_enemy(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_cost=3,
    ))
    return choose(ctx, "UC_HIDE", targets,
                  "Select an enemy character with cost 3 or less to hide.", apply_hide)


@register_effect("010/130", AMBUSH)
@register_effect("018/130", UPGRADE)
@register_effect("033/130", UPGRADE)
@register_effect("080/130", UPGRADE)
def move_this_character(ctx: EffectContext) -> EffectOutcome:
    return _move_self(ctx)


@register_effect("014/130", AMBUSH)
def sasuke_peek(ctx: EffectContext) -> EffectOutcome:
    _peek(ctx)
    return RESOLVED


@register_effect("091/130", MAIN)
def itachi_peek(ctx: EffectContext) -> EffectOutcome:
    """As an upgrade, the opponent also discards the card and draws."""
    index = _peek(ctx)
    if index is not None and ctx.is_upgrade:
        _discard_and_replace(ctx, index)
    return RESOLVED


@register_effect("014/130", UPGRADE)
def sasuke_discard_random(ctx: EffectContext) -> EffectOutcome:
    index = _peek(ctx)
    if index is not None:
        _discard_and_replace(ctx, index)
    return RESOLVED


def _peek(ctx: EffectContext) -> int | None:
    index = random_hand_index(ctx, ctx.opponent)
    if index is not None:
        ctx.log("looks at a random card in the opponent's hand.", action="LOOK")
    return index


def _discard_and_replace(ctx: EffectContext, index: int) -> None:
    card = discard_from_hand(ctx.state, ctx.opponent, index)
    ctx.log(f"{ctx.opponent} discards {card.name}.", action="EFFECT_DISCARD")
    draw(ctx, player_id=ctx.opponent)


@register_effect("016/130", MAIN)
def kakashi_copy_enemy(ctx: EffectContext) -> EffectOutcome:
    max_cost = None if ctx.is_upgrade else 4
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_cost=max_cost,
    ))
    targets = [
        c.instance_id for c in enemies
        if c.card.card_id not in COPY_EFFECT_CARDS and has_instant_main(c.card)
    ]
    return choose(ctx, "KAKASHI_COPY", targets,
                  "Select an enemy character whose MAIN effect to copy.", apply_copy)


@register_selection("KAKASHI_COPY")
def apply_copy(ctx: EffectContext, target: str) -> EffectOutcome:
    return run_copied_main(ctx, target)


@register_effect("020/130", MAIN)
def ino_take_control(ctx: EffectContext) -> EffectOutcome:
    limit = 3 if ctx.is_upgrade else 2
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_cost=limit,
    ))
    return choose(ctx, "INO_TAKE_CONTROL", targets,
                  f"Select an enemy character with cost {limit} or less to take control of.",
                  apply_ino_take_control)


@register_selection("INO_TAKE_CONTROL")
def apply_ino_take_control(ctx: EffectContext, target: str) -> EffectOutcome:
    char = ctx.state.find_character(target)
    if char is not None and change_controller(ctx.state, target, ctx.source_player):
        ctx.log(f"takes control of {char.card.name}.", action="EFFECT_TAKE_CONTROL")
    return RESOLVED


@register_effect("022/130", AMBUSH)
def shikamaru_pull_enemy(ctx: EffectContext) -> EffectOutcome:
    latest = len(ctx.state.active_missions) - 1
    if latest == ctx.mission_index:
        return RESOLVED
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=latest, non_hidden_only=True,
    ))
    targets = [c.instance_id for c in enemies if _movable_to(ctx, c, ctx.mission_index)]
    return choose(ctx, "UC_PULL_ENEMY", targets,
                  "Select an enemy character to move to this mission.", apply_pull_enemy)


@register_selection("UC_PULL_ENEMY")
def apply_pull_enemy(ctx: EffectContext, target: str) -> EffectOutcome:
    move_character(ctx.state, target, ctx.mission_index, by_enemy=True)
    return RESOLVED


@register_effect("024/130", AMBUSH)
def asuma_draw_discard(ctx: EffectContext) -> EffectOutcome:
    draw(ctx)
    return choose(ctx, "ASUMA_DISCARD", hand_options(ctx),
                  "Choose a card to discard; a Team 10 character gives POWERUP 3.", apply_asuma_discard,
                  kind=PendingKind.DISCARD_CARD, optional=False)


@register_selection("ASUMA_DISCARD")
def apply_asuma_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.source_player, int(target))
    ctx.log(f"discards {card.name}.", action="EFFECT_DISCARD")
    if card.has_keyword("Team 10"):
        return powerup_self(ctx, 3)
    return RESOLVED


@register_effect("026/130", MAIN)
@register_effect("029/130", UPGRADE)
def hide_lowest_cost_enemy(ctx: EffectContext) -> EffectOutcome:
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True,
    ))
    return choose(ctx, "UC_HIDE", _lowest_cost(enemies),
                  "Select the lowest cost enemy character to hide.", apply_hide, optional=False)


@register_effect("026/130", UPGRADE)
def kiba_fetch_akamaru(ctx: EffectContext) -> EffectOutcome:
    return choose_card_to_play(ctx, "Choose an Akamaru from your deck to play in this mission.",
                               pile="deck", name="Akamaru", free=True, mission=ctx.mission_index)


@register_effect("028/130", AMBUSH)
def akamaru_powerup_kiba(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, name="Kiba Inuzuka",
    ))
    return choose(ctx, "UC_POWERUP_2", targets, "Select a Kiba Inuzuka to give POWERUP 2.", apply_powerup_2)


@register_effect("033/130", AMBUSH)
def shino_raise_costs(ctx: EffectContext) -> EffectOutcome:
    ctx.state.player(ctx.opponent).cost_surcharge += 1
    ctx.log(f"characters played by {ctx.opponent} cost 1 more this round.", action="EFFECT_COST")
    return RESOLVED


@register_effect("035/130", UPGRADE)
@register_effect("060/130", AMBUSH)
def defeat_weak_enemy(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_power=1,
    ))
    return choose(ctx, "UC_DEFEAT", targets,
                  "Select an enemy character with Power 1 or less to defeat.", apply_defeat)


@register_effect("037/130", UPGRADE)
def neji_remove_tokens(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(min_tokens=1))
    return choose(ctx, "NEJI_REMOVE_TOKENS", targets,
                  "Select an enemy character to remove up to 3 Power tokens from.", apply_neji_remove_tokens)


@register_selection("NEJI_REMOVE_TOKENS")
def apply_neji_remove_tokens(ctx: EffectContext, target: str) -> EffectOutcome:
    removed = remove_power_tokens(ctx.state, target, 3)
    ctx.log(f"removes {removed} Power token(s) from an enemy character.", action="EFFECT_REMOVE_TOKENS")
    return RESOLVED


@register_effect("041/130", MAIN)
def tenten_defeat_hidden(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(
        same_mission=ctx.mission_index, hidden_only=True,
    ))
    return choose(ctx, "UC_DEFEAT", targets, "Select a hidden character in this mission to defeat.", apply_defeat)


@register_effect("041/130", UPGRADE)
def tenten_powerup_leaf(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, group="Leaf Village", exclude_ids=_others(ctx),
    ))
    return choose(ctx, "UC_POWERUP_1", targets,
                  "Select another Leaf Village character to give POWERUP 1.", apply_powerup_1)


@register_effect("045/130", AMBUSH)
def defeat_hidden_enemy_anywhere(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY_HIDDEN)
    return choose(ctx, "UC_DEFEAT", targets, "Select a hidden enemy character to defeat.", apply_defeat)


# =============================================================================
# Sound Village
# =============================================================================

@register_effect("051/130", UPGRADE)
def orochimaru_defeat_hidden(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY_HIDDEN,
                              TargetFilter(same_mission=ctx.mission_index))
    return choose(ctx, "UC_DEFEAT", targets,
                  "Select a hidden enemy character in this mission to defeat.", apply_defeat)


@register_effect("053/130", MAIN)
def kabuto_draw(ctx: EffectContext) -> EffectOutcome:
    draw(ctx)
    return RESOLVED


@register_effect("053/130", UPGRADE)
def kabuto_raise_dead(ctx: EffectContext) -> EffectOutcome:
    return choose_card_to_play(ctx, "Choose a character in your discard pile to play, paying 3 less.",
                               pile="discard", discount=3)


@register_effect("054/130", MAIN)
def kabuto_powerup(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, 1)


@register_effect("054/130", UPGRADE)
def kabuto_hide_weaker(ctx: EffectContext) -> EffectOutcome:
    me = ctx.state.find_character(ctx.source_instance_id) if ctx.source_instance_id else None
    if me is None:
        return RESOLVED
    power = calculate_character_power(ctx.state, me)
    weaker = [
        c.instance_id for c in ctx.mission.characters(ctx.opponent)
        if c.visible and calculate_character_power(ctx.state, c) < power
    ]
    return hide_targets(ctx, weaker)


@register_effect("056/130", UPGRADE)
def kimimaro_discard_to_hide_5(ctx: EffectContext) -> EffectOutcome:
    if not ctx.state.player(ctx.source_player).hand or not _kimimaro_targets(ctx):
        return RESOLVED
    return choose(ctx, "KIMIMARO_5_DISCARD", hand_options(ctx),
                  "Discard a card to hide a character with cost 5 or less.", apply_kimimaro_5_discard,
                  kind=PendingKind.DISCARD_CARD)


def _kimimaro_targets(ctx: EffectContext) -> list[str]:
    return find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(
        max_cost=5, non_hidden_only=True, exclude_ids=_others(ctx),
    ))


@register_selection("KIMIMARO_5_DISCARD")
def apply_kimimaro_5_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.source_player, int(target))
    ctx.log(f"discards {card.name}.", action="EFFECT_DISCARD")
    return choose(ctx, "UC_HIDE", _kimimaro_targets(ctx),
                  "Select a character with cost 5 or less to hide.", apply_hide, optional=False)


@register_effect("058/130", MAIN)
def jirobo_powerup_sound_four(ctx: EffectContext) -> EffectOutcome:
    """As an upgrade, every mission instead of this one."""
    mission = None if ctx.is_upgrade else ctx.mission_index
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        keyword="Sound Four", same_mission=mission, non_hidden_only=True, exclude_ids=_others(ctx),
    ))
    return _powerup_each(ctx, targets, 1, "Sound Four character(s)")


@register_effect("060/130", MAIN)
def kidomaru_move_friend(ctx: EffectContext) -> EffectOutcome:
    friends = find_targets(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        same_mission=ctx.mission_index, exclude_ids=_others(ctx),
    ))
    targets = [c.instance_id for c in friends if move_destinations(ctx, c)]
    return choose(ctx, "UC_MOVE", targets, "Select a friendly character in this mission to move.", apply_move)


@register_effect("062/130", AMBUSH)
def sakon_copy_sound_four(ctx: EffectContext) -> EffectOutcome:
    friends = find_targets(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        keyword="Sound Four", non_hidden_only=True, exclude_ids=_others(ctx),
    ))
    targets = [
        c.instance_id for c in friends
        if c.card.card_id not in COPY_EFFECT_CARDS and has_instant_main(c.card)
    ]
    return choose(ctx, "KAKASHI_COPY", targets,
                  "Select a friendly Sound Four character whose MAIN effect to copy.", apply_copy)


@register_effect("065/130", AMBUSH)
def tayuya_powerup_sound(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        group="Sound Village", non_hidden_only=True,
    ))
    return choose(ctx, "UC_POWERUP_2", targets,
                  "Select a friendly Sound Village character to give POWERUP 2.", apply_powerup_2)


@register_effect("065/130", UPGRADE)
def tayuya_fetch_summon(ctx: EffectContext) -> EffectOutcome:
    return choose_card_to_play(ctx, "Choose a Summon from your deck to play in this mission.",
                               pile="deck", keyword="Summon", free=True, mission=ctx.mission_index)


@register_effect("066/130", MAIN)
def doki_steal_chakra(ctx: EffectContext) -> EffectOutcome:
    sound_four = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        keyword="Sound Four", non_hidden_only=True,
    ))
    opponent = ctx.state.player(ctx.opponent)
    if not sound_four or opponent.chakra <= 0:
        return RESOLVED
    opponent.chakra -= 1
    ctx.state.player(ctx.source_player).chakra += 1
    ctx.log(f"steals 1 Chakra from {ctx.opponent}.", action="EFFECT_CHAKRA")
    return RESOLVED


@register_effect("069/130", MAIN)
def dosu_force_reveal(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY_HIDDEN,
                              TargetFilter(same_mission=ctx.mission_index))
    return choose(ctx, "DOSU_FORCE_TARGET", targets,
                  "Select a hidden enemy character to force out.", apply_dosu_force_target)


@register_selection("DOSU_FORCE_TARGET")
def apply_dosu_force_target(ctx: EffectContext, target: str) -> EffectOutcome:
    """The opponent decides: reveal it at its reveal cost, or let it be defeated."""
    char = ctx.state.find_character(target)
    if char is None or char.visible:
        return RESOLVED
    options = ["defeat"]
    if reveal_cost(ctx.state, char) <= ctx.state.player(char.controller).chakra:
        options.insert(0, "reveal")
    return choose(ctx, "DOSU_FORCE_CHOICE", options,
                  "Reveal your hidden character, or it is defeated.", apply_dosu_force_choice,
                  optional=False, player=char.controller, character=target)


@register_selection("DOSU_FORCE_CHOICE")
def apply_dosu_force_choice(ctx: EffectContext, target: str) -> EffectOutcome:
    instance_id = ctx.data["character"]
    char = ctx.state.find_character(instance_id)
    if char is None:
        return RESOLVED
    if target == "defeat":
        return defeat_targets(ctx, [instance_id])

    cost = reveal_cost(ctx.state, char)
    ctx.state.player(char.controller).chakra -= cost
    char.hidden = False
    ctx.log(f"{char.controller} reveals {char.card.name} for {cost} chakra.", action="REVEAL_CHARACTER")
    for trigger in (AMBUSH, MAIN):
        ctx.state.trigger_queue.insert(
            0, QueuedTrigger(instance_id, char.mission_index, char.controller, trigger)
        )
    return RESOLVED


@register_effect("069/130", UPGRADE)
def dosu_look_hidden(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(hidden_only=True))
    return choose(ctx, "DOSU_UC_LOOK", targets, "Select a hidden character to look at.", apply_dosu_uc_look)


@register_selection("DOSU_UC_LOOK")
def apply_dosu_uc_look(ctx: EffectContext, target: str) -> EffectOutcome:
    char = ctx.state.find_character(target)
    if char is not None:
        ctx.log(f"looks at a hidden character on mission {char.mission_index + 1}.", action="LOOK")
    return RESOLVED


@register_effect("071/130", MAIN)
def zaku_push_enemy(ctx: EffectContext) -> EffectOutcome:
    mine = sum(1 for c in ctx.mission.characters(ctx.source_player) if c.visible)
    enemies = [c for c in ctx.mission.characters(ctx.opponent) if c.visible]
    if mine >= len(enemies):
        return RESOLVED
    return choose(ctx, "UC_MOVE", [c.instance_id for c in enemies],
                  "Select an enemy character in this mission to move.", apply_move)


@register_effect("071/130", UPGRADE)
def zaku_powerup(ctx: EffectContext) -> EffectOutcome:
    return powerup_self(ctx, 2)


@register_effect("073/130", MAIN)
def kin_discard_to_hide(ctx: EffectContext) -> EffectOutcome:
    """As an upgrade, the top card of the deck goes hidden into this mission instead."""
    if ctx.is_upgrade:
        player = ctx.state.player(ctx.source_player)
        if not player.deck:
            return RESOLVED
        place_character(ctx.state, ctx.source_player, ctx.mission_index, player.deck.pop(0), hidden=True)
        ctx.log(f"puts the top card of the deck hidden on mission {ctx.mission_index + 1}.", action="PLAY_HIDDEN")
        return RESOLVED
    if not ctx.state.player(ctx.source_player).hand or not _kin_targets(ctx):
        return RESOLVED
    return choose(ctx, "KIN_DISCARD", hand_options(ctx),
                  "Discard a card to hide an enemy character with Power 4 or less.", apply_kin_discard,
                  kind=PendingKind.DISCARD_CARD)


def _kin_targets(ctx: EffectContext) -> list[str]:
    return find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        same_mission=ctx.mission_index, non_hidden_only=True, max_power=4,
    ))


@register_selection("KIN_DISCARD")
def apply_kin_discard(ctx: EffectContext, target: str) -> EffectOutcome:
    card = discard_from_hand(ctx.state, ctx.source_player, int(target))
    ctx.log(f"discards {card.name}.", action="EFFECT_DISCARD")
    return choose(ctx, "UC_HIDE", _kin_targets(ctx),
                  "Select an enemy character with Power 4 or less to hide.", apply_hide, optional=False)


# =============================================================================
# Sand Village
# =============================================================================

@register_effect("078/130", AMBUSH)
def kankuro_pull_enemy(ctx: EffectContext) -> EffectOutcome:
    enemies = find_targets(ctx.state, ctx.source_player, TargetType.ENEMY, TargetFilter(
        non_hidden_only=True, max_power=4,
    ))
    targets = [
        c.instance_id for c in enemies
        if c.mission_index != ctx.mission_index and _movable_to(ctx, c, ctx.mission_index)
    ]
    return choose(ctx, "UC_PULL_ENEMY", targets,
                  "Select an enemy character with Power 4 or less to move to this mission.", apply_pull_enemy)


@register_effect("078/130", UPGRADE)
def kankuro_hidden_play(ctx: EffectContext) -> EffectOutcome:
    if ctx.state.player(ctx.source_player).chakra < KANKURO_HIDDEN_COST:
        return RESOLVED
    if hidden_plays_blocked(ctx.state, ctx.source_player, ctx.mission_index):
        return RESOLVED
    return choose(ctx, "KANKURO_HIDDEN_PLAY", hand_options(ctx),
                  "Choose a card to play hidden in this mission, paying 1 less.", apply_kankuro_hidden_play,
                  kind=PendingKind.CHOOSE_CARD_FROM_LIST)


@register_selection("KANKURO_HIDDEN_PLAY")
def apply_kankuro_hidden_play(ctx: EffectContext, target: str) -> EffectOutcome:
    player = ctx.state.player(ctx.source_player)
    card = player.hand.pop(int(target))
    player.chakra -= KANKURO_HIDDEN_COST
    place_character(ctx.state, ctx.source_player, ctx.mission_index, card, hidden=True)
    ctx.log(f"plays a hidden character on mission {ctx.mission_index + 1}.", action="PLAY_HIDDEN")
    return RESOLVED


@register_effect("080/130", MAIN)
def temari_move_sand(ctx: EffectContext) -> EffectOutcome:
    friends = find_targets(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        group="Sand Village", non_hidden_only=True, exclude_ids=_others(ctx),
    ))
    targets = [c.instance_id for c in friends if move_destinations(ctx, c)]
    return choose(ctx, "UC_MOVE", targets, "Select a friendly Sand Village character to move.", apply_move)


@register_effect("082/130", SCORE)
def baki_defeat_hidden(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY_HIDDEN)
    return choose(ctx, "UC_DEFEAT", targets, "Select a hidden enemy character to defeat.", apply_defeat)


@register_effect("082/130", UPGRADE)
def baki_powerup_sand(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        group="Sand Village", same_mission=ctx.mission_index, non_hidden_only=True,
    ))
    return _powerup_each(ctx, targets, 1, "Sand Village character(s)")


@register_effect("083/130", SCORE)
def rasa_bonus_point(ctx: EffectContext) -> EffectOutcome:
    sand = find_target_ids(ctx.state, ctx.source_player, TargetType.FRIENDLY, TargetFilter(
        group="Sand Village", same_mission=ctx.mission_index, non_hidden_only=True, exclude_ids=_others(ctx),
    ))
    if sand:
        ctx.state.player(ctx.source_player).mission_points += 1
        ctx.log("gains 1 additional mission point.", action="EFFECT_MISSION_POINT")
    return RESOLVED


@register_effect("085/130", SCORE)
def yashamaru_self_destruct(ctx: EffectContext) -> EffectOutcome:
    if ctx.source_instance_id is None:
        return RESOLVED
    if not defeat_character(ctx.state, ctx.source_instance_id, ctx.source_player):
        return RESOLVED
    targets = [
        c.instance_id
        for seat in (ctx.source_player, ctx.opponent)
        for c in ctx.mission.characters(seat)
    ]
    return choose(ctx, "UC_DEFEAT", targets,
                  "Select another character in this mission to defeat.", apply_defeat, optional=False)


# =============================================================================
# Independent and Akatsuki
# =============================================================================

@register_effect("087/130", MAIN)
def zabuza_lone_enemy(ctx: EffectContext) -> EffectOutcome:
    """Hide the only non-hidden enemy here; as an upgrade, defeat it instead."""
    enemies = [c.instance_id for c in ctx.mission.characters(ctx.opponent) if c.visible]
    if len(enemies) != 1:
        return RESOLVED
    if ctx.is_upgrade:
        return defeat_targets(ctx, enemies)
    return hide_targets(ctx, enemies)


@register_effect("089/130", MAIN)
def haku_mill(ctx: EffectContext) -> EffectOutcome:
    victim = ctx.source_player if ctx.is_upgrade else ctx.opponent
    count = len(ctx.mission.characters(ctx.source_player))
    player = ctx.state.player(victim)
    milled = player.deck[:count]
    player.deck = player.deck[len(milled):]
    player.discard.extend(milled)
    if milled:
        ctx.log(f"discards the top {len(milled)} card(s) of {victim}'s deck.", action="EFFECT_DISCARD")
    return powerup_self(ctx, count)


@register_effect("093/130", MAIN)
def kisame_drain_tokens(ctx: EffectContext) -> EffectOutcome:
    """As an upgrade, any mission instead of this one."""
    mission = None if ctx.is_upgrade else ctx.mission_index
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ENEMY,
                              TargetFilter(same_mission=mission, min_tokens=1))
    return choose(ctx, "KISAME_DRAIN_TOKENS", targets,
                  "Select an enemy character to steal up to 2 Power tokens from.", apply_kisame_drain)


@register_selection("KISAME_DRAIN_TOKENS")
def apply_kisame_drain(ctx: EffectContext, target: str) -> EffectOutcome:
    removed = remove_power_tokens(ctx.state, target, 2)
    if removed and ctx.source_instance_id:
        add_power_tokens(ctx.state, ctx.source_instance_id, removed)
    ctx.log(f"steals {removed} Power token(s).", action="EFFECT_STEAL_TOKENS")
    return RESOLVED


@register_effect("102/130", AMBUSH)
def manda_defeat_summon(ctx: EffectContext) -> EffectOutcome:
    targets = find_target_ids(ctx.state, ctx.source_player, TargetType.ANY, TargetFilter(
        keyword="Summon", non_hidden_only=True, exclude_ids=_others(ctx),
    ))
    return choose(ctx, "UC_DEFEAT", targets, "Select a Summon character to defeat.", apply_defeat)