"""
Tests for the per-player view of the game.
"""

from ..engine_core.action import Action
from ..engine_core.reducer import apply_action
from ..engine_core.visibility import get_visible_state
from .conftest import make_state, put


class TestVisibleState:
    """Each player only sees what the rules let them see."""

    def test_own_hand_listed_opponent_hand_counted(self):
        state = make_state(hands=(["009", "086"], ["017"]))
        view = get_visible_state(state, "player1")

        assert [c.card_id for c in view.my_state.hand] == ["009/130", "086/130"]
        assert view.opponent_state.hand_size == 1
        assert not hasattr(view.opponent_state, "hand")

    def test_decks_are_counts(self):
        state = make_state(deck_size=7)
        view = get_visible_state(state, "player2")
        assert view.my_state.deck_size == 7
        assert view.opponent_state.deck_size == 7

    def test_opponent_hidden_character_concealed(self):
        """Existence only: no card, no power."""
        state = make_state()
        hidden = put(state, "player2", "136", hidden=True, tokens=1)

        view = get_visible_state(state, "player1")
        seen = view.missions[0].opponent_characters[0]
        assert seen.instance_id == hidden.instance_id
        assert seen.hidden
        assert seen.card is None
        assert seen.power is None

    def test_own_hidden_character_shown(self):
        state = make_state()
        put(state, "player1", "136", hidden=True)

        view = get_visible_state(state, "player1")
        mine = view.missions[0].my_characters[0]
        assert mine.card.name == "Sasuke Uchiha"
        assert mine.power == 0

    def test_visible_power_is_effective(self):
        state = make_state()
        put(state, "player2", "009")
        put(state, "player2", "015")

        view = get_visible_state(state, "player1")
        powers = [c.power for c in view.missions[0].opponent_characters]
        assert powers == [4, 3]
        assert view.missions[0].opponent_power == 7
        assert view.missions[0].my_power == 0

    def test_mission_power_hides_nothing_extra(self):
        """A hidden character adds 0 to its side's total either way."""
        state = make_state()
        put(state, "player2", "086", hidden=True)
        view = get_visible_state(state, "player1")
        assert view.missions[0].opponent_power == 0

    def test_only_own_pending_actions(self):
        state = make_state(hands=(["001"], []))
        put(state, "player1", "009")
        put(state, "player1", "011")

        state = apply_action(state, "player1", Action.play_character(0, 0))

        assert len(get_visible_state(state, "player1").pending_actions) == 1
        assert get_visible_state(state, "player2").pending_actions == []

    def test_view_reports_header(self):
        state = make_state(turn=2, edge="player2")
        view = get_visible_state(state, "player2")
        assert view.viewer == "player2"
        assert view.turn == 2
        assert view.edge_holder == "player2"
        assert not view.is_game_over
        assert view.missions[0].value == 4
