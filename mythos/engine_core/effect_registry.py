"""
Effect Registry - Handler contract and lookup tables.

Card effects are plain functions registered under (card id, trigger):

    @register_effect("017/130", EffectTrigger.MAIN)
    def choji_powerup(ctx: EffectContext) -> EffectOutcome:
        add_power_tokens(ctx.state, ctx.source_instance_id, 3)
        return RESOLVED

A handler mutates `ctx.state` (a private working copy) and returns
either RESOLVED or an AwaitingSelection. Awaiting a selection names a
selection routine, registered separately:

    @register_selection("HIRUZEN_POWERUP")
    def apply_hiruzen(ctx: EffectContext, target: str) -> EffectOutcome:
        ...

The pair (AwaitingSelection, selection routine) is the continuation:
"awaiting a choice of kind K from candidates S, then run F".
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, TYPE_CHECKING

from .constants import opponent_of
from .game_log import log_action
from .state import EffectTrigger, PendingKind

if TYPE_CHECKING:
    from .state import ActiveMission, Card, CharacterInPlay, GameState


# =============================================================================
# Outcomes
# =============================================================================

@dataclass(frozen=True)
class Resolved:
    """The handler finished; nothing is owed."""


RESOLVED = Resolved()


@dataclass(frozen=True)
class AwaitingSelection:
    """
    The handler needs a player's choice before it can finish.

    `player` defaults to the effect's source player. An empty target
    list means the effect fizzles.
    """
    selection_type: str
    targets: tuple[str, ...]
    description: str
    kind: PendingKind = PendingKind.SELECT_TARGET
    optional: bool = True
    player: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.targets, tuple):
            object.__setattr__(self, "targets", tuple(self.targets))


EffectOutcome = Resolved | AwaitingSelection


# =============================================================================
# Context
# =============================================================================

@dataclass
class EffectContext:
    """
    Everything a handler may read, plus the working state it may mutate.

    `data` is empty for fresh triggers and holds the continuation payload
    when a selection routine runs.
    """
    state: GameState
    source_player: str
    source_card: Card
    source_instance_id: str | None
    mission_index: int
    trigger: EffectTrigger
    is_upgrade: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def opponent(self) -> str:
        return opponent_of(self.source_player)

    @property
    def mission(self) -> ActiveMission:
        return self.state.active_missions[self.mission_index]

    def log(self, details: str, action: str = "EFFECT") -> None:
        log_action(self.state, self.source_player, action, f"{self.source_card.name}: {details}")

    def await_selection(
        self,
        selection_type: str,
        targets: list[str],
        description: str,
        kind: PendingKind = PendingKind.SELECT_TARGET,
        optional: bool = True,
        player: str | None = None,
        **data: Any,
    ) -> AwaitingSelection:
        """Build an AwaitingSelection; keyword arguments become continuation data."""
        return AwaitingSelection(
            selection_type=selection_type,
            targets=tuple(targets),
            description=description,
            kind=kind,
            optional=optional,
            player=player,
            data=data,
        )


EffectHandler = Callable[[EffectContext], EffectOutcome]
SelectionHandler = Callable[[EffectContext, str], EffectOutcome]


# =============================================================================
# Registry
# =============================================================================

class EffectRegistry:
    """Lookup tables for effect handlers and selection routines."""

    def __init__(self):
        self._effects: dict[tuple[str, EffectTrigger], EffectHandler] = {}
        self._selections: dict[str, SelectionHandler] = {}

    def register_effect(self, card_id: str, trigger: EffectTrigger) -> Callable[[EffectHandler], EffectHandler]:
        def decorator(fn: EffectHandler) -> EffectHandler:
            self._effects[(card_id, trigger)] = fn
            return fn
        return decorator

    def register_selection(self, selection_type: str) -> Callable[[SelectionHandler], SelectionHandler]:
        def decorator(fn: SelectionHandler) -> SelectionHandler:
            if selection_type in self._selections:
                raise ValueError(f"Selection routine already registered: {selection_type}")
            self._selections[selection_type] = fn
            return fn
        return decorator

    def get_effect(self, card_id: str, trigger: EffectTrigger) -> EffectHandler | None:
        return self._effects.get((card_id, trigger))

    def get_selection(self, selection_type: str) -> SelectionHandler | None:
        return self._selections.get(selection_type)

    def has_effect(self, card_id: str, trigger: EffectTrigger) -> bool:
        return (card_id, trigger) in self._effects

    @property
    def registered_effects(self) -> list[tuple[str, EffectTrigger]]:
        return sorted(self._effects, key=lambda key: (key[0], key[1].value))


REGISTRY = EffectRegistry()
register_effect = REGISTRY.register_effect
register_selection = REGISTRY.register_selection

_handlers_loaded = False


def load_card_handlers() -> EffectRegistry:
    """Import the card handler modules once so they register themselves."""
    global _handlers_loaded
    if not _handlers_loaded:
        from ..cards import handlers  # noqa: F401
        _handlers_loaded = True
    return REGISTRY
