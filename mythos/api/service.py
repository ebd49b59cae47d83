"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their game loops
3. Projects state to the human seat's view
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateSessionRequest,
    SubmitActionRequest,
    DeckValidationRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    ActionListResponse,
    ActionResultResponse,
    CardListResponse,
    DeckValidationResponse,
    ErrorResponse,
    # Shared
    ActionInfo,
    CardInfo,
    CharacterInfo,
    EffectInfo,
    LogEntryInfo,
    MissionInfo,
    OpponentInfo,
    PendingActionInfo,
    PlayerInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..cards.catalog import all_character_cards, all_mission_cards, get_card
from ..cards.deck import validate_deck
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import get_valid_actions
from ..engine_core.engine import get_acting_player, get_winner
from ..engine_core.state import Card, GameState
from ..engine_core.visibility import VisibleCharacter, VisibleGameState, get_visible_state
from ..session import GameLoop, Session, SessionManager, SessionState

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a game against the AI
        session_response = service.create_session(CreateSessionRequest(difficulty="hard"))

        # Play
        actions = service.list_actions(session_id)
        result = service.submit_action(session_id, SubmitActionRequest(action_index=0))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """
        Create a new game session against the AI.

        Idle sessions past their TTL are dropped first.
        """
        removed = self.session_manager.cleanup_stale_sessions()
        if removed:
            logger.info("Removed %d stale sessions", removed)
        for session_id in list(self._game_loops):
            if self.session_manager.get_session(session_id) is None:
                self._game_loops.pop(session_id)

        try:
            session = self.session_manager.create_session(
                difficulty=request.difficulty,
                human_deck=request.human_deck,
                ai_deck=request.ai_deck,
                seed=request.seed,
            )
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)
        except KeyError as e:
            return ErrorResponse(error=str(e.args[0]) if e.args else "Unknown deck", error_code=ErrorCode.INVALID_DECK)

        self._game_loops[session.session_id] = GameLoop(session)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """
        Get session status.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get the game state as the human seat sees it.
        """
        session = self.session_manager.get_session(session_id)
        if not session or session.game_state is None:
            return self._session_not_found(session_id)
        return self._build_game_state(session)

    def list_actions(self, session_id: str) -> ActionListResponse | ErrorResponse:
        """
        List the human seat's legal actions, indexed for submission.
        """
        session = self.session_manager.get_session(session_id)
        if not session or session.game_state is None:
            return self._session_not_found(session_id)

        state = session.game_state
        actions = get_valid_actions(state, session.human_player_id)
        infos = [
            self._action_info(action, index, describe_action(state, session.human_player_id, action))
            for index, action in enumerate(actions)
        ]
        return ActionListResponse(session_id=session_id, actions=infos, count=len(infos))

    def submit_action(
        self,
        session_id: str,
        request: SubmitActionRequest,
    ) -> ActionResultResponse | ErrorResponse:
        """
        Apply the human's action, then let the AI reply.

        The action is either an index into list_actions or an explicit
        action body.
        """
        session = self.session_manager.get_session(session_id)
        if not session or session.game_state is None:
            return self._session_not_found(session_id)

        state = session.game_state
        if state.is_over:
            return ErrorResponse(
                error="Game is over",
                error_code=ErrorCode.GAME_OVER,
                details={"winner": get_winner(state)},
            )

        if request.action_index is not None:
            valid = get_valid_actions(state, session.human_player_id)
            if request.action_index >= len(valid):
                return ErrorResponse(
                    error=f"Action index {request.action_index} out of range",
                    error_code=ErrorCode.INVALID_ACTION,
                    details={"available": len(valid)},
                )
            action = valid[request.action_index]
        elif request.action is not None:
            try:
                action = Action.from_dict(request.action.model_dump(exclude_none=True))
            except ValueError:
                return ErrorResponse(
                    error=f"Unknown action type: {request.action.type}",
                    error_code=ErrorCode.VALIDATION_ERROR,
                )
        else:
            return ErrorResponse(
                error="Provide action_index or action",
                error_code=ErrorCode.VALIDATION_ERROR,
            )

        description = describe_action(state, session.human_player_id, action)
        applied = self._action_info(action, request.action_index, description)
        result = self._loop_for(session).submit_action(action)
        if not result.success:
            return ErrorResponse(
                error=result.errors[0] if result.errors else "Action rejected",
                error_code=ErrorCode.INVALID_ACTION,
                details={"reason": result.error_code} if result.error_code else None,
            )

        ai_actions = [
            self._action_info(a, None, describe_action(None, session.ai_player_id, a))
            for a in result.ai_actions
        ]
        return ActionResultResponse(
            session_id=session_id,
            success=True,
            applied=applied,
            ai_actions=ai_actions,
            game_state=self._build_game_state(session),
            winner=result.winner,
        )

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session.
        """
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """
        List active session IDs.
        """
        return self.session_manager.list_active_sessions()

    def list_cards(self) -> CardListResponse:
        cards = [card_info(card) for card in all_character_cards() + all_mission_cards()]
        return CardListResponse(cards=cards, count=len(cards))

    def validate_deck(self, request: DeckValidationRequest) -> DeckValidationResponse | ErrorResponse:
        """
        Check a deck against the construction rules.

        Unknown card ids are an INVALID_DECK error rather than a result.
        """
        unknown = []
        cards: list[Card] = []
        for card_id in list(request.cards) + list(request.missions):
            try:
                cards.append(get_card(card_id))
            except KeyError:
                unknown.append(card_id)
        if unknown:
            return ErrorResponse(
                error=f"Unknown card ids: {', '.join(unknown)}",
                error_code=ErrorCode.INVALID_DECK,
                details={"unknown": unknown},
            )

        characters = cards[:len(request.cards)]
        missions = cards[len(request.cards):]
        result = validate_deck(characters, missions)
        return DeckValidationResponse(
            valid=result.valid,
            errors=result.errors,
            card_count=len(characters),
            mission_count=len(missions),
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _loop_for(self, session: Session) -> GameLoop:
        loop = self._game_loops.get(session.session_id)
        if loop is None:
            loop = GameLoop(session)
            self._game_loops[session.session_id] = loop
        return loop

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        return SessionResponse(
            session_id=session.session_id,
            status=self._session_state_to_status(session),
            difficulty=session.difficulty,
            human_player_id=session.human_player_id,
            ai_player_id=session.ai_player_id,
            created_at=session.created_at,
            game_state=self._build_game_state(session) if session.game_state else None,
        )

    def _session_state_to_status(self, session: Session) -> SessionStatus:
        """Convert session state to API status."""
        if session.game_state is not None and session.game_state.is_over:
            return SessionStatus.GAME_OVER
        mapping = {
            SessionState.ACTIVE: SessionStatus.ACTIVE,
            SessionState.GAME_OVER: SessionStatus.GAME_OVER,
            SessionState.ABANDONED: SessionStatus.ABANDONED,
        }
        return mapping.get(session.state, SessionStatus.ACTIVE)

    def _build_game_state(self, session: Session) -> GameStateResponse:
        """Build the human seat's game state response."""
        state = session.game_state
        visible = get_visible_state(state, session.human_player_id)
        return visible_state_response(session.session_id, visible, state)

    def _action_info(self, action: Action, index: int | None, description: str) -> ActionInfo:
        p = action.payload
        return ActionInfo(
            index=index,
            type=action.action_type.value,
            description=description,
            card_index=p.card_index,
            mission_index=p.mission_index,
            instance_id=p.instance_id,
            do_mulligan=p.do_mulligan,
            pending_id=p.pending_id,
            targets=list(p.targets),
        )


# =============================================================================
# Conversions
# =============================================================================

def card_info(card: Card) -> CardInfo:
    return CardInfo(
        card_id=card.card_id,
        name=card.name,
        title=card.title,
        card_type=card.card_type.value,
        chakra=card.chakra,
        power=card.power,
        group=card.group,
        keywords=list(card.keywords),
        rarity=card.rarity,
        base_points=card.base_points,
        effects=[
            EffectInfo(trigger=e.trigger.value, description=e.description, continuous=e.continuous)
            for e in card.effects
        ],
    )


def _character_info(char: VisibleCharacter) -> CharacterInfo:
    return CharacterInfo(
        instance_id=char.instance_id,
        mission_index=char.mission_index,
        controller=char.controller,
        hidden=char.hidden,
        power_tokens=char.power_tokens,
        card=card_info(char.card) if char.card is not None else None,
        power=char.power,
        stack_size=char.stack_size,
    )


def visible_state_response(session_id: str, visible: VisibleGameState, state: GameState) -> GameStateResponse:
    """
    Convert a VisibleGameState to the response schema.

    `state` is only consulted for public facts (who acts next, the winner).
    """
    me = visible.my_state
    them = visible.opponent_state
    return GameStateResponse(
        session_id=session_id,
        game_id=visible.game_id,
        viewer=visible.viewer,
        turn=visible.turn,
        phase=visible.phase.value,
        active_player=visible.active_player,
        edge_holder=visible.edge_holder,
        acting_player=get_acting_player(state),
        is_game_over=visible.is_game_over,
        winner=get_winner(state),
        you=PlayerInfo(
            player_id=me.player_id,
            label=me.label,
            hand=[card_info(c) for c in me.hand],
            hand_size=me.hand_size,
            deck_size=me.deck_size,
            discard_size=len(me.discard),
            chakra=me.chakra,
            mission_points=me.mission_points,
            passed=me.passed,
            has_mulliganed=me.has_mulliganed,
            characters_in_play=me.characters_in_play,
        ),
        opponent=OpponentInfo(
            player_id=them.player_id,
            label=them.label,
            hand_size=them.hand_size,
            deck_size=them.deck_size,
            discard_size=len(them.discard),
            chakra=them.chakra,
            mission_points=them.mission_points,
            passed=them.passed,
            has_mulliganed=them.has_mulliganed,
            characters_in_play=them.characters_in_play,
        ),
        missions=[
            MissionInfo(
                index=m.index,
                card=card_info(m.card),
                rank=m.rank,
                base_points=m.base_points,
                rank_bonus=m.rank_bonus,
                value=m.value,
                won_by=m.won_by,
                my_characters=[_character_info(c) for c in m.my_characters],
                opponent_characters=[_character_info(c) for c in m.opponent_characters],
                my_power=m.my_power,
                opponent_power=m.opponent_power,
            )
            for m in visible.missions
        ],
        mission_deck_size=visible.mission_deck_size,
        pending_actions=[
            PendingActionInfo(
                action_id=p.action_id,
                kind=p.kind.value,
                description=p.description,
                options=list(p.options),
                min_selections=p.min_selections,
                max_selections=p.max_selections,
            )
            for p in visible.pending_actions
        ],
        log=[LogEntryInfo.model_validate(entry) for entry in visible.log],
    )


_VERBS = {
    ActionType.PLAY_CHARACTER: "Play",
    ActionType.PLAY_HIDDEN: "Play hidden",
    ActionType.UPGRADE_CHARACTER: "Upgrade with",
}


def describe_action(state: GameState | None, player_id: str, action: Action) -> str:
    """
    One-line description of an action.

    Card names are looked up in `player_id`'s own hand, so pass no state
    when describing the opponent's moves.
    """
    p = action.payload
    kind = action.action_type

    if kind == ActionType.PASS:
        return "Pass"
    if kind == ActionType.MULLIGAN:
        return "Mulligan" if p.do_mulligan else "Keep hand"
    if kind == ActionType.REVEAL_CHARACTER:
        name = _character_name(state, p.instance_id)
        return f"Reveal {name} on mission {p.mission_index + 1}"
    if kind == ActionType.SELECT_TARGET:
        if not p.targets:
            return "Select nothing"
        return f"Select {', '.join(p.targets)}"
    if kind == ActionType.DECLINE_OPTIONAL_EFFECT:
        return "Decline optional effect"

    name = "a card"
    if state is not None and p.card_index is not None:
        hand = state.player(player_id).hand
        if 0 <= p.card_index < len(hand):
            name = hand[p.card_index].name
    text = f"{_VERBS[kind]} {name} on mission {p.mission_index + 1}"
    if kind == ActionType.UPGRADE_CHARACTER:
        text += f" ({p.instance_id})"
    elif kind == ActionType.PLAY_HIDDEN:
        text += " for 1 chakra"
    return text


def _character_name(state: GameState | None, instance_id: str | None) -> str:
    if state is None or instance_id is None:
        return "a character"
    char = state.find_character(instance_id)
    return char.card.name if char is not None else "a character"
