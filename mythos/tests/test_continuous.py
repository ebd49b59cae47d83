"""
Tests for continuous effects: power, cost, income and play restrictions.
"""

from ..engine_core.action import Action, ErrorCode
from ..engine_core.continuous import (
    calculate_character_power, calculate_chakra_income, calculate_effective_cost,
    calculate_mission_power, is_winning_mission,
)
from ..engine_core.reducer import apply_action, apply_action_result
from ..engine_core.rules import reveal_cost
from .conftest import card, make_state, put


class TestPower:
    """Tests for effective power."""

    def test_printed_power_plus_tokens(self, state):
        char = put(state, "player1", "009", tokens=2)
        assert calculate_character_power(state, char) == 5

    def test_hidden_has_zero_power(self, state):
        """Tokens do not count while hidden."""
        char = put(state, "player1", "086", hidden=True, tokens=3)
        assert calculate_character_power(state, char) == 0

    def test_team_aura(self, state):
        """Kakashi gives other Team 7 characters +1."""
        naruto = put(state, "player1", "009")
        kakashi = put(state, "player1", "015")
        assert calculate_character_power(state, naruto) == 4
        assert calculate_character_power(state, kakashi) == 3

    def test_hidden_aura_source_gives_nothing(self, state):
        naruto = put(state, "player1", "009")
        put(state, "player1", "015", hidden=True)
        assert calculate_character_power(state, naruto) == 3

    def test_aura_only_affects_own_side(self, state):
        naruto = put(state, "player2", "009")
        put(state, "player1", "015")
        assert calculate_character_power(state, naruto) == 3

    def test_aura_only_in_same_mission(self, two_missions):
        state = two_missions
        lee = put(state, "player1", "038", mission_index=1)
        put(state, "player1", "042", mission_index=0)
        assert calculate_character_power(state, lee) == 3

    def test_sasuke_penalty_counts_visible_friendlies(self, state):
        """-1 per other non-hidden friendly in the mission."""
        sasuke = put(state, "player1", "013")
        put(state, "player1", "086")
        put(state, "player1", "088")
        put(state, "player1", "009", hidden=True)
        assert calculate_character_power(state, sasuke) == 2

    def test_power_floors_at_zero(self, state):
        sasuke = put(state, "player1", "013")
        for card_id in ("086", "088", "009", "017", "072"):
            put(state, "player1", card_id)
        assert calculate_character_power(state, sasuke) == 0

    def test_temari_with_edge(self):
        state = make_state(edge="player1")
        temari = put(state, "player1", "079")
        assert calculate_character_power(state, temari) == 4

        state.edge_holder = "player2"
        assert calculate_character_power(state, temari) == 2

    def test_yashamaru_with_gaara(self, state):
        yashamaru = put(state, "player1", "084")
        assert calculate_character_power(state, yashamaru) == 1
        put(state, "player1", "074")
        assert calculate_character_power(state, yashamaru) == 3

    def test_mission_power_sums_side(self, state):
        put(state, "player1", "009")
        put(state, "player1", "086", tokens=1)
        put(state, "player1", "088", hidden=True)
        put(state, "player2", "072")
        assert calculate_mission_power(state, 0, "player1") == 9
        assert calculate_mission_power(state, 0, "player2") == 3


class TestWinning:
    """is_winning_mission: strictly ahead, or tied above zero with the Edge."""

    def test_strictly_ahead(self, state):
        put(state, "player1", "086")
        put(state, "player2", "009")
        assert is_winning_mission(state, "player1", 0)
        assert not is_winning_mission(state, "player2", 0)

    def test_tie_with_edge(self):
        state = make_state(edge="player2")
        put(state, "player1", "009")
        put(state, "player2", "009")
        assert is_winning_mission(state, "player2", 0)
        assert not is_winning_mission(state, "player1", 0)

    def test_empty_mission_not_winning(self, state):
        assert not is_winning_mission(state, "player1", 0)


class TestCost:
    """Tests for effective play and reveal costs."""

    def test_printed_cost(self, state):
        assert calculate_effective_cost(state, card("086"), "player1", 0) == 3

    def test_cost_aura_discount(self, state):
        """Kurenai: other Team 8 cost 1 less, minimum 1."""
        put(state, "player1", "034")
        assert calculate_effective_cost(state, card("025"), "player1", 0) == 1
        assert calculate_effective_cost(state, card("027"), "player1", 0) == 1
        assert calculate_effective_cost(state, card("086"), "player1", 0) == 3

    def test_cost_aura_needs_same_mission(self, two_missions):
        state = two_missions
        put(state, "player1", "034", mission_index=1)
        assert calculate_effective_cost(state, card("025"), "player1", 0) == 2

    def test_cost_aura_ignores_hidden_source(self, state):
        put(state, "player1", "034", hidden=True)
        assert calculate_effective_cost(state, card("025"), "player1", 0) == 2

    def test_gamakichi_discount_with_naruto(self, state):
        assert calculate_effective_cost(state, card("096"), "player1", 0) == 2
        put(state, "player1", "009")
        assert calculate_effective_cost(state, card("096"), "player1", 0) == 1

    def test_gaara_reveal_discount(self, state):
        """Gaara 075 costs 3 face-up but 1 to reveal."""
        assert calculate_effective_cost(state, card("075"), "player1", 0) == 3
        gaara = put(state, "player1", "075", hidden=True)
        assert reveal_cost(state, gaara) == 1

    def test_gaara_reveal_through_reducer(self, state):
        gaara = put(state, "player1", "075", hidden=True)
        new_state = apply_action(state, "player1", Action.reveal(0, gaara.instance_id))
        assert new_state.player1.chakra == 4

    def test_itachi_reveal_with_sasuke(self, state):
        itachi = put(state, "player1", "090", hidden=True)
        assert reveal_cost(state, itachi) == 3
        put(state, "player1", "013")
        assert reveal_cost(state, itachi) == 0


class TestIncome:
    """Start-phase chakra: 5 + characters + CHAKRA bonuses."""

    def test_base_income(self, state):
        assert calculate_chakra_income(state, "player1") == 5

    def test_hidden_characters_count_but_give_no_bonus(self, state):
        put(state, "player1", "005", hidden=True)
        assert calculate_chakra_income(state, "player1") == 6

    def test_visible_bonus(self, state):
        put(state, "player1", "005")
        assert calculate_chakra_income(state, "player1") == 7

    def test_kiba_needs_akamaru(self, state):
        put(state, "player1", "025")
        assert calculate_chakra_income(state, "player1") == 6
        put(state, "player1", "027")
        assert calculate_chakra_income(state, "player1") == 8

    def test_kankuro_needs_visible_enemy(self, state):
        put(state, "player1", "077")
        put(state, "player2", "009", hidden=True)
        assert calculate_chakra_income(state, "player1") == 6
        put(state, "player2", "086")
        assert calculate_chakra_income(state, "player1") == 7

    def test_tayuya_scales_with_missions(self, two_missions):
        """CHAKRA +1 per mission holding a visible Sound Four."""
        state = two_missions
        put(state, "player1", "064", mission_index=0)
        put(state, "player1", "057", mission_index=1)
        assert calculate_chakra_income(state, "player1") == 5 + 2 + 2


class TestPlayRestriction:
    """Tenten may only be played face-up where the player is winning."""

    def test_rejected_where_not_winning(self):
        state = make_state(hands=(["040"], []))
        result = apply_action_result(state, "player1", Action.play_character(0, 0))
        assert result.error_code == ErrorCode.PLAY_RESTRICTED

    def test_allowed_where_winning(self):
        state = make_state(hands=(["040"], []))
        put(state, "player1", "086")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert len(new_state.active_missions[0].characters("player1")) == 2

    def test_hidden_play_unrestricted(self):
        state = make_state(hands=(["040"], []))
        new_state = apply_action(state, "player1", Action.play_hidden(0, 0))
        assert new_state.active_missions[0].characters("player1")[0].hidden
