"""
Shared pieces for card effect handlers.

Targets passed to selection routines are strings:
- character choices use instance ids
- hand choices use the hand index ("0", "1", ...), and likewise for
  discard pile and deck choices
- mission choices use the mission index
"""

from __future__ import annotations
from dataclasses import replace
from typing import Callable

from ...engine_core.board import add_power_tokens, draw_cards, place_character
from ...engine_core.card_rules import OnlyWhereWinning, has_rule
from ...engine_core.continuous import calculate_effective_cost, is_winning_mission
from ...engine_core.defeat import (
    defeat_character, hide_character, move_character, moves_locked, sacrifice_candidates, trigger_on_play,
)
from ...engine_core.effect_registry import (
    REGISTRY, EffectContext, EffectOutcome, RESOLVED, register_selection,
)
from ...engine_core.rules import check_name_uniqueness
from ...engine_core.state import Card, CharacterInPlay, EffectTrigger, PendingKind, QueuedTrigger

MOVE_DESTINATION = "MOVE_DESTINATION"
CHAINED_MOVE = "CHAINED_MOVE"
SACRIFICE_CHOICE = "SACRIFICE_CHOICE"


def choose(
    ctx: EffectContext,
    selection_type: str,
    targets: list[str],
    description: str,
    apply: Callable[[EffectContext, str], EffectOutcome],
    kind: PendingKind = PendingKind.SELECT_TARGET,
    optional: bool = True,
    player: str | None = None,
    **data,
) -> EffectOutcome:
    """
    Ask for a choice, or resolve it directly when there is exactly one
    candidate. No candidates means the effect fizzles.
    """
    if len(targets) == 1:
        ctx.data = dict(data)
        return apply(ctx, targets[0])
    return ctx.await_selection(
        selection_type, targets, description, kind=kind, optional=optional, player=player, **data
    )


def hand_options(ctx: EffectContext, player_id: str | None = None) -> list[str]:
    hand = ctx.state.player(player_id or ctx.source_player).hand
    return [str(i) for i in range(len(hand))]


def powerup_self(ctx: EffectContext, amount: int) -> EffectOutcome:
    if amount > 0 and ctx.source_instance_id and add_power_tokens(ctx.state, ctx.source_instance_id, amount):
        ctx.log(f"POWERUP {amount}.", action="EFFECT_POWERUP")
    return RESOLVED


def draw(ctx: EffectContext, count: int = 1, player_id: str | None = None) -> int:
    player_id = player_id or ctx.source_player
    drawn = draw_cards(ctx.state, player_id, count)
    if drawn:
        ctx.log(f"{player_id} draws {len(drawn)} card(s).", action="EFFECT_DRAW")
    return len(drawn)


# =============================================================================
# Moves
# =============================================================================

def move_destinations(ctx: EffectContext, char: CharacterInPlay) -> list[str]:
    """Missions a character could legally move to."""
    if moves_locked(ctx.state, char.mission_index):
        return []
    options = []
    for index in range(len(ctx.state.active_missions)):
        if index == char.mission_index:
            continue
        if char.visible and check_name_uniqueness(ctx.state, char.controller, index, char.card):
            continue
        options.append(str(index))
    return options


def choose_destination(
    ctx: EffectContext, instance_id: str, moves_left: int = 0, moved: tuple[str, ...] = ()
) -> EffectOutcome:
    """Second step of every move effect: pick where the character goes."""
    char = ctx.state.find_character(instance_id)
    if char is None:
        return RESOLVED
    return choose(
        ctx,
        MOVE_DESTINATION,
        move_destinations(ctx, char),
        f"Choose a mission to move {char.card.name if char.visible else 'the hidden character'} to.",
        apply_move_destination,
        character=instance_id,
        moves_left=moves_left,
        moved=list(moved),
    )


@register_selection(MOVE_DESTINATION)
def apply_move_destination(ctx: EffectContext, target: str) -> EffectOutcome:
    instance_id = ctx.data["character"]
    by_enemy = False
    char = ctx.state.find_character(instance_id)
    if char is not None:
        by_enemy = char.controller != ctx.source_player
    move_character(ctx.state, instance_id, int(target), by_enemy=by_enemy)

    moves_left = ctx.data.get("moves_left", 0)
    if moves_left <= 0:
        return RESOLVED

    moved = list(ctx.data.get("moved", [])) + [instance_id]
    return choose_next_move(ctx, moves_left, moved)


def choose_next_move(ctx: EffectContext, moves_left: int, moved: list[str]) -> EffectOutcome:
    """Pick a friendly character for a multi-move effect, skipping ones already moved."""
    candidates = [
        c.instance_id for _, _, c in ctx.state.iter_characters(ctx.source_player)
        if c.instance_id not in moved and move_destinations(ctx, c)
    ]
    return choose(
        ctx,
        CHAINED_MOVE,
        candidates,
        f"Choose a friendly character to move ({moves_left} left).",
        apply_chained_move,
        moves_left=moves_left,
        moved=list(moved),
    )


@register_selection(CHAINED_MOVE)
def apply_chained_move(ctx: EffectContext, target: str) -> EffectOutcome:
    moves_left = ctx.data.get("moves_left", 1)
    return choose_destination(ctx, target, moves_left - 1, tuple(ctx.data.get("moved", [])))


# =============================================================================
# Defeat and hide
# =============================================================================

def defeat_targets(ctx: EffectContext, targets: list[str]) -> EffectOutcome:
    """
    Defeat each target in order.

    A target covered by a SacrificeFor protector pauses the effect: its
    controller picks the protector to defeat instead, or the target
    itself to let the defeat stand.
    """
    return _strike(ctx, "defeat", list(targets))


def hide_targets(ctx: EffectContext, targets: list[str]) -> EffectOutcome:
    """Hide each target in order; see defeat_targets for protected characters."""
    return _strike(ctx, "hide", list(targets))


def _strike(ctx: EffectContext, mode: str, targets: list[str]) -> EffectOutcome:
    while targets:
        target = targets.pop(0)
        char = ctx.state.find_character(target)
        if char is None:
            continue
        by_enemy = char.controller != ctx.source_player
        guards = sacrifice_candidates(ctx.state, target, by_enemy)
        if guards:
            verb = "defeated" if mode == "defeat" else "hidden"
            return ctx.await_selection(
                SACRIFICE_CHOICE,
                [g.instance_id for g in guards] + [target],
                f"{char.card.name} would be {verb}. Choose a protector to defeat instead, "
                f"or {char.card.name} to let it happen.",
                optional=False,
                player=char.controller,
                mode=mode,
                target=target,
                remaining=targets,
            )
        _apply_strike(ctx, mode, target, by_enemy, None)
    return RESOLVED


def _apply_strike(ctx: EffectContext, mode: str, target: str, by_enemy: bool, sacrifice_id: str | None) -> None:
    if mode == "defeat":
        defeat_character(ctx.state, target, ctx.source_player, by_enemy=by_enemy, sacrifice_id=sacrifice_id)
    else:
        hide_character(ctx.state, target, by_enemy=by_enemy, sacrifice_id=sacrifice_id)


@register_selection(SACRIFICE_CHOICE)
def apply_sacrifice_choice(ctx: EffectContext, target: str) -> EffectOutcome:
    victim = ctx.data["target"]
    sacrifice_id = None if target == victim else target
    _apply_strike(ctx, ctx.data["mode"], victim, True, sacrifice_id)
    return _strike(ctx, ctx.data["mode"], list(ctx.data.get("remaining", [])))


# =============================================================================
# Playing cards through effects
# =============================================================================

def effect_play_cost(ctx: EffectContext, card: Card, mission_index: int, discount: int = 0) -> int:
    cost = calculate_effective_cost(ctx.state, card, ctx.source_player, mission_index)
    return max(0, cost - discount)


def playable_missions(ctx: EffectContext, card: Card, discount: int = 0, free: bool = False) -> list[str]:
    """Missions where `card` could enter play face-up at the given price."""
    chakra = ctx.state.player(ctx.source_player).chakra
    options = []
    for index in range(len(ctx.state.active_missions)):
        if check_name_uniqueness(ctx.state, ctx.source_player, index, card):
            continue
        if has_rule(card, OnlyWhereWinning) and not is_winning_mission(ctx.state, ctx.source_player, index):
            continue
        if free or effect_play_cost(ctx, card, index, discount) <= chakra:
            options.append(str(index))
    return options


def play_from_effect(
    ctx: EffectContext, card: Card, mission_index: int, cost: int = 0, hidden: bool = False
) -> CharacterInPlay:
    """
    Put a card into play for the source player.

    The caller has already taken the card out of its pile. A face-up
    play owes its MAIN effect, which runs once the current effect is done.
    """
    ctx.state.player(ctx.source_player).chakra -= cost
    char = place_character(ctx.state, ctx.source_player, mission_index, card, hidden=hidden)
    if hidden:
        ctx.log(f"plays a hidden character on mission {mission_index + 1}.", action="PLAY_HIDDEN")
    else:
        ctx.log(f"plays {card.name} on mission {mission_index + 1} for {cost} chakra.", action="PLAY_CHARACTER")
        ctx.state.trigger_queue.insert(
            0, QueuedTrigger(char.instance_id, mission_index, ctx.source_player, EffectTrigger.MAIN)
        )
    trigger_on_play(ctx.state, char)
    return char


# =============================================================================
# Copy and peek
# =============================================================================

def has_instant_main(card: Card) -> bool:
    if not REGISTRY.has_effect(card.card_id, EffectTrigger.MAIN):
        return False
    return any(e.trigger == EffectTrigger.MAIN and not e.continuous for e in card.effects)


def run_copied_main(ctx: EffectContext, target: str) -> EffectOutcome:
    """Resolve another character's MAIN effect as if the source card had it."""
    char = ctx.state.find_character(target)
    if char is None:
        return RESOLVED
    return copy_main_of(ctx, char.card)


def copy_main_of(ctx: EffectContext, card: Card) -> EffectOutcome:
    handler = REGISTRY.get_effect(card.card_id, EffectTrigger.MAIN)
    if handler is None:
        return RESOLVED
    ctx.log(f"copies the MAIN effect of {card.name}.", action="EFFECT_COPY")
    return handler(replace(ctx, source_card=card, trigger=EffectTrigger.MAIN, is_upgrade=False, data={}))


def random_hand_index(ctx: EffectContext, player_id: str) -> int | None:
    hand = ctx.state.player(player_id).hand
    if not hand:
        return None
    return ctx.state.random_state.randrange(len(hand))


PLAY_FROM_PILE = "PLAY_FROM_PILE"
PLAY_ON_MISSION = "PLAY_ON_MISSION"


def _fits(card: Card, keyword: str | None, group: str | None, name: str | None) -> bool:
    if keyword and not card.has_keyword(keyword):
        return False
    if name and not card.same_name(name):
        return False
    return not group or card.group == group


def _missions_for(ctx: EffectContext, card: Card, terms: dict) -> list[str]:
    options = playable_missions(ctx, card, terms["discount"], terms["free"])
    if terms["mission"] is not None:
        options = [m for m in options if int(m) == terms["mission"]]
    return options


def choose_card_to_play(
    ctx: EffectContext,
    description: str,
    pile: str = "hand",
    discount: int = 0,
    keyword: str | None = None,
    group: str | None = None,
    name: str | None = None,
    powerup: int = 0,
    free: bool = False,
    mission: int | None = None,
) -> EffectOutcome:
    """
    Play a character face-up from the hand, discard pile or deck.

    Only cards with at least one affordable mission are offered; `mission`
    pins the destination. `powerup` tokens go on the character once it is
    on the board. Playing from the deck shuffles it afterwards.
    """
    terms = dict(pile=pile, discount=discount, free=free, mission=mission, powerup=powerup)
    cards = getattr(ctx.state.player(ctx.source_player), pile)
    options = [
        str(i) for i, card in enumerate(cards)
        if _fits(card, keyword, group, name) and _missions_for(ctx, card, terms)
    ]
    return choose(ctx, PLAY_FROM_PILE, options, description, apply_play_from_pile,
                  kind=PendingKind.CHOOSE_CARD_FROM_LIST, **terms)


@register_selection(PLAY_FROM_PILE)
def apply_play_from_pile(ctx: EffectContext, target: str) -> EffectOutcome:
    terms = {k: ctx.data.get(k) for k in ("pile", "discount", "free", "mission", "powerup")}
    card = getattr(ctx.state.player(ctx.source_player), terms["pile"])[int(target)]
    return choose(ctx, PLAY_ON_MISSION, _missions_for(ctx, card, terms),
                  f"Choose a mission for {card.name}.", apply_play_on_mission, optional=False,
                  card_index=int(target), **terms)


@register_selection(PLAY_ON_MISSION)
def apply_play_on_mission(ctx: EffectContext, target: str) -> EffectOutcome:
    mission_index = int(target)
    player = ctx.state.player(ctx.source_player)
    cards = getattr(player, ctx.data["pile"])
    card = cards[ctx.data["card_index"]]
    cost = 0 if ctx.data["free"] else effect_play_cost(ctx, card, mission_index, ctx.data["discount"])
    cards.pop(ctx.data["card_index"])
    if ctx.data["pile"] == "deck":
        ctx.state.random_state.shuffle(player.deck)
    char = play_from_effect(ctx, card, mission_index, cost)
    powerup = ctx.data.get("powerup") or 0
    if powerup and add_power_tokens(ctx.state, char.instance_id, powerup):
        ctx.log(f"POWERUP {powerup} on {card.name}.", action="EFFECT_POWERUP")
    return RESOLVED
