"""
Tests for sessions and the human-vs-AI game loop.
"""

import pytest

from ..engine_core.action import Action, ErrorCode
from ..engine_core.action_generator import get_valid_actions
from ..engine_core.engine import get_acting_player
from ..engine_core.state import GamePhase
from ..session import GameLoop, LoopState, SessionManager, SessionState


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clock):
    return SessionManager(ttl_seconds=60, clock=clock)


@pytest.fixture
def session(manager):
    return manager.create_session("easy", seed=5)


def play_until_human_blocked_or_over(session, limit=400):
    """Let the human seat always take its first legal action."""
    loop = GameLoop(session)
    results = []
    for _ in range(limit):
        state = session.game_state
        if state.is_over:
            break
        actions = get_valid_actions(state, session.human_player_id)
        assert actions, "human must have an action whenever the loop waits on them"
        results.append(loop.submit_action(actions[0]))
    return loop, results


class TestSessionManager:
    """Tests for session lifecycle."""

    def test_create_session(self, manager, session):
        assert session.is_active()
        assert session.difficulty == "easy"
        assert session.human_player_id == "player1"
        assert session.ai_player_id == "player2"
        assert manager.get_session(session.session_id) is session
        assert len(manager) == 1

    def test_ai_mulligan_done_on_create(self, session):
        """The AI decides its mulligan right away; the human still has to."""
        state = session.game_state
        assert state.phase == GamePhase.MULLIGAN
        assert state.player2.has_mulliganed
        assert not state.player1.has_mulliganed
        assert get_acting_player(state) == "player1"

    def test_ai_seat_labels(self, session):
        assert session.game_state.player1.label == "You"
        assert session.game_state.player2.is_ai
        assert session.metadata["human_deck"] == "leaf"

    def test_unknown_difficulty(self, manager):
        with pytest.raises(ValueError):
            manager.create_session("godlike")

    def test_unknown_deck(self, manager):
        with pytest.raises(KeyError):
            manager.create_session("easy", human_deck="mist")

    def test_default_difficulty(self, manager):
        session = manager.create_session(seed=1)
        assert session.difficulty == "medium"

    def test_end_session(self, manager, session):
        assert manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert session.state == SessionState.GAME_OVER
        assert session.game_state is None
        assert not manager.end_session(session.session_id)

    def test_end_session_abandoned(self, manager, session):
        manager.end_session(session.session_id, reason="user_quit")
        assert session.state == SessionState.ABANDONED

    def test_list_sessions(self, manager, session):
        other = manager.create_session("easy", seed=6)
        assert set(manager.list_active_sessions()) == {session.session_id, other.session_id}
        assert len(manager.list_sessions()) == 2

    def test_cleanup_stale(self, manager, session, clock):
        fresh = manager.create_session("easy", seed=6)
        clock.now += 45
        manager.get_session(fresh.session_id)
        clock.now += 30

        assert manager.cleanup_stale_sessions() == 1
        assert manager.get_session(session.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh
        assert session.state == SessionState.ABANDONED


class TestGameLoop:
    """Tests for GameLoop.submit_action."""

    def test_rejected_action(self, session):
        loop = GameLoop(session)
        result = loop.submit_action(Action.pass_turn())
        assert not result.success
        assert result.error_code == ErrorCode.WRONG_PHASE
        assert result.errors
        assert session.game_state.phase == GamePhase.MULLIGAN

    def test_keep_hand_starts_game(self, session):
        loop = GameLoop(session)
        result = loop.submit_action(Action.mulligan(False))

        assert result.success
        assert result.loop_state == LoopState.WAITING_HUMAN_ACTION
        state = session.game_state
        assert state.phase == GamePhase.ACTION
        assert get_acting_player(state) == "player1"

    def test_ai_replies_after_human_move(self, session):
        loop = GameLoop(session)
        loop.submit_action(Action.mulligan(False))
        state = session.game_state
        actions = get_valid_actions(state, "player1")
        result = loop.submit_action(actions[-1])

        assert result.success
        new_state = session.game_state
        if not new_state.is_over:
            assert get_acting_player(new_state) in ("player1", None)
        assert all(a is not None for a in result.ai_actions)

    def test_full_game_through_loop(self, session):
        _, results = play_until_human_blocked_or_over(session)
        assert session.game_state.is_over
        assert results[-1].loop_state == LoopState.GAME_OVER
        assert results[-1].winner in ("player1", "player2")
        assert session.state == SessionState.GAME_OVER

    def test_action_after_game_over(self, session):
        loop, _ = play_until_human_blocked_or_over(session)
        result = loop.submit_action(Action.pass_turn())
        assert not result.success
        assert result.loop_state == LoopState.GAME_OVER
        assert result.winner in ("player1", "player2")
