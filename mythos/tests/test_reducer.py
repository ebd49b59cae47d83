"""
Tests for the reducer (state transitions).

Tests:
- Face-up, hidden, reveal and upgrade costs
- Name uniqueness
- Turn order and passing
- Rejected actions leave the state untouched
"""

import pytest

from ..engine_core.action import Action, ActionType, ErrorCode
from ..engine_core.action_generator import get_valid_actions, is_legal
from ..engine_core.reducer import apply_action, apply_action_result
from ..engine_core.state import GamePhase
from .conftest import make_state, put


class TestPlayCharacter:
    """Tests for face-up plays."""

    def test_play_pays_printed_cost(self):
        """Playing Naruto (cost 2) from 5 chakra leaves 3."""
        state = make_state(hands=(["009"], []))
        new_state = apply_action(state, "player1", Action.play_character(0, 0))

        assert new_state is not state
        assert new_state.player1.chakra == 3
        assert new_state.player1.hand == []
        chars = new_state.active_missions[0].characters("player1")
        assert len(chars) == 1
        assert chars[0].card.name == "Naruto Uzumaki"
        assert not chars[0].hidden

    def test_play_does_not_mutate_input(self):
        """The input state is never modified."""
        state = make_state(hands=(["009"], []))
        apply_action(state, "player1", Action.play_character(0, 0))

        assert state.player1.chakra == 5
        assert len(state.player1.hand) == 1
        assert state.active_missions[0].characters("player1") == []

    def test_play_passes_turn_to_opponent(self):
        """Moves alternate while nobody has passed."""
        state = make_state(hands=(["009"], []))
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.active_player == "player2"

    def test_insufficient_chakra_rejected(self):
        """A card costing more than the pool is rejected and the state is unchanged."""
        state = make_state(hands=(["136"], []))
        result = apply_action_result(state, "player1", Action.play_character(0, 0))

        assert not result.success
        assert result.error_code == ErrorCode.INSUFFICIENT_CHAKRA
        assert apply_action(state, "player1", Action.play_character(0, 0)) is state

    def test_invalid_card_index_rejected(self):
        state = make_state(hands=(["009"], []))
        result = apply_action_result(state, "player1", Action.play_character(3, 0))
        assert result.error_code == ErrorCode.INVALID_CARD

    def test_invalid_mission_index_rejected(self):
        state = make_state(hands=(["009"], []))
        result = apply_action_result(state, "player1", Action.play_character(0, 4))
        assert result.error_code == ErrorCode.INVALID_MISSION


class TestNameUniqueness:
    """A player may not have two visible same-named characters on one mission."""

    def test_second_visible_copy_rejected(self):
        """Playing a second visible Naruto on the same mission fails."""
        state = make_state(hands=(["009"], []))
        put(state, "player1", "009")

        result = apply_action_result(state, "player1", Action.play_character(0, 0))
        assert not result.success
        assert result.error_code == ErrorCode.NAME_CONFLICT

    def test_name_check_ignores_title(self):
        """Different versions with the same name still conflict."""
        state = make_state(hands=(["012"], []))
        put(state, "player1", "011")

        result = apply_action_result(state, "player1", Action.play_character(0, 0))
        assert result.error_code == ErrorCode.NAME_CONFLICT

    def test_hidden_duplicate_allowed(self):
        """A hidden copy does not conflict."""
        state = make_state(hands=(["009"], []))
        put(state, "player1", "009")

        new_state = apply_action(state, "player1", Action.play_hidden(0, 0))
        assert len(new_state.active_missions[0].characters("player1")) == 2

    def test_other_mission_allowed(self):
        """The same name on a different mission is fine."""
        state = make_state(missions=2, hands=(["009"], []))
        put(state, "player1", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 1))
        assert len(new_state.active_missions[1].characters("player1")) == 1

    def test_opponent_copy_does_not_conflict(self):
        state = make_state(hands=(["009"], []))
        put(state, "player2", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state is not state

    def test_reveal_blocked_by_visible_copy(self):
        """Revealing a hidden Naruto next to a visible one is rejected."""
        state = make_state()
        put(state, "player1", "009")
        hidden = put(state, "player1", "009", hidden=True)

        result = apply_action_result(state, "player1", Action.reveal(0, hidden.instance_id))
        assert result.error_code == ErrorCode.NAME_CONFLICT


class TestHiddenPlay:
    """Hidden plays always cost exactly 1."""

    @pytest.mark.parametrize("card_id", ["009", "086", "136"])
    def test_hidden_play_costs_one(self, card_id):
        """Printed cost does not matter for a hidden play."""
        state = make_state(hands=([card_id], []))
        new_state = apply_action(state, "player1", Action.play_hidden(0, 0))

        assert new_state.player1.chakra == 4
        char = new_state.active_missions[0].characters("player1")[0]
        assert char.hidden

    def test_hidden_play_needs_one_chakra(self):
        state = make_state(hands=(["009"], []), chakra=(0, 5))
        result = apply_action_result(state, "player1", Action.play_hidden(0, 0))
        assert result.error_code == ErrorCode.INSUFFICIENT_CHAKRA

    def test_hidden_play_skips_main_effect(self):
        """Choji's POWERUP does not fire when played hidden."""
        state = make_state(hands=(["017"], []))
        new_state = apply_action(state, "player1", Action.play_hidden(0, 0))
        assert new_state.active_missions[0].characters("player1")[0].power_tokens == 0


class TestReveal:
    """Revealing pays the printed (modified) cost."""

    def test_reveal_pays_printed_cost(self):
        """Revealing Zabuza (cost 3) from 5 chakra leaves 2."""
        state = make_state()
        hidden = put(state, "player1", "086", hidden=True)

        new_state = apply_action(state, "player1", Action.reveal(0, hidden.instance_id))
        assert new_state.player1.chakra == 2
        assert not new_state.find_character(hidden.instance_id).hidden

    def test_reveal_visible_rejected(self):
        state = make_state()
        char = put(state, "player1", "086")
        result = apply_action_result(state, "player1", Action.reveal(0, char.instance_id))
        assert result.error_code == ErrorCode.INVALID_TARGET

    def test_reveal_opponent_character_rejected(self):
        state = make_state()
        hidden = put(state, "player2", "086", hidden=True)
        result = apply_action_result(state, "player1", Action.reveal(0, hidden.instance_id))
        assert result.error_code == ErrorCode.INVALID_TARGET

    def test_reveal_triggers_ambush(self):
        """Rock Lee 038 gains POWERUP 1 only when revealed."""
        state = make_state()
        hidden = put(state, "player1", "038", hidden=True)
        new_state = apply_action(state, "player1", Action.reveal(0, hidden.instance_id))
        assert new_state.find_character(hidden.instance_id).power_tokens == 1


class TestUpgrade:
    """Upgrades cost the difference in printed cost."""

    def test_upgrade_pays_difference(self):
        """Rock Lee 038 (2) -> 039 (4) costs 2 and fires the UPGRADE POWERUP 2."""
        state = make_state(hands=(["039"], []))
        lee = put(state, "player1", "038")

        new_state = apply_action(state, "player1", Action.upgrade(0, 0, lee.instance_id))
        upgraded = new_state.find_character(lee.instance_id)

        assert new_state.player1.chakra == 3
        assert upgraded.card.card_id == "039/130"
        assert len(upgraded.stack) == 2
        assert upgraded.power_tokens == 2

    def test_upgrade_to_cheaper_rejected(self):
        """A difference of 0 or less is rejected."""
        state = make_state(hands=(["038"], []))
        lee = put(state, "player1", "039")

        result = apply_action_result(state, "player1", Action.upgrade(0, 0, lee.instance_id))
        assert result.error_code == ErrorCode.INVALID_UPGRADE
        assert apply_action(state, "player1", Action.upgrade(0, 0, lee.instance_id)) is state

    def test_upgrade_same_cost_rejected(self):
        state = make_state(hands=(["011"], []))
        sakura = put(state, "player1", "011")
        result = apply_action_result(state, "player1", Action.upgrade(0, 0, sakura.instance_id))
        assert result.error_code == ErrorCode.INVALID_UPGRADE

    def test_upgrade_different_name_rejected(self):
        state = make_state(hands=(["039"], []))
        naruto = put(state, "player1", "009")
        result = apply_action_result(state, "player1", Action.upgrade(0, 0, naruto.instance_id))
        assert result.error_code == ErrorCode.INVALID_UPGRADE

    def test_upgrade_keeps_tokens(self):
        state = make_state(hands=(["039"], []))
        lee = put(state, "player1", "038", tokens=1)
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, lee.instance_id))
        assert new_state.find_character(lee.instance_id).power_tokens == 3


class TestTurnOrder:
    """Tests for turn order and passing."""

    def test_not_your_turn(self):
        state = make_state(hands=([], ["009"]))
        result = apply_action_result(state, "player2", Action.play_character(0, 0))
        assert result.error_code == ErrorCode.NOT_YOUR_TURN

    def test_first_passer_takes_edge(self):
        """Passing first takes the Edge and hands the turn over."""
        state = make_state(edge="player2")
        new_state = apply_action(state, "player1", Action.pass_turn())

        assert new_state.player1.passed
        assert new_state.edge_holder == "player1"
        assert new_state.first_passer == "player1"
        assert new_state.active_player == "player2"

    def test_second_passer_does_not_take_edge(self):
        state = make_state(edge="player2", missions=1)
        state.player1.passed = True
        state.first_passer = "player1"
        state.edge_holder = "player1"
        state.active_player = "player2"

        new_state = apply_action(state, "player2", Action.pass_turn())
        assert new_state.edge_holder == "player1"

    def test_passed_player_cannot_act(self):
        state = make_state(hands=(["009"], []))
        state.player1.passed = True
        result = apply_action_result(state, "player1", Action.play_character(0, 0))
        assert result.error_code == ErrorCode.ALREADY_PASSED

    def test_opponent_keeps_acting_after_pass(self):
        """Once one player passes the other acts repeatedly."""
        state = make_state(hands=([], ["009", "086"]), active="player2")
        state.player1.passed = True
        state.first_passer = "player1"

        state = apply_action(state, "player2", Action.play_hidden(0, 0))
        assert state.active_player == "player2"
        assert get_valid_actions(state, "player2")

    def test_both_pass_ends_round(self):
        """Both passing moves on to scoring and the next turn."""
        state = make_state()
        state = apply_action(state, "player1", Action.pass_turn())
        state = apply_action(state, "player2", Action.pass_turn())

        assert state.turn == 2
        assert state.phase == GamePhase.ACTION
        assert not state.player1.passed

    def test_actions_rejected_during_mulligan(self):
        state = make_state(phase=GamePhase.MULLIGAN, hands=(["009"], []))
        result = apply_action_result(state, "player1", Action.play_character(0, 0))
        assert result.error_code == ErrorCode.WRONG_PHASE


class TestChakraInvariant:
    """Chakra never goes negative through legal play."""

    def test_every_legal_action_keeps_chakra_non_negative(self):
        """Apply each generated action from a crowded board; the pool stays >= 0."""
        state = make_state(missions=2, hands=(["009", "017", "039", "086", "001"], []), chakra=(4, 0))
        put(state, "player1", "038")
        put(state, "player1", "086", mission_index=1, hidden=True)

        for action in get_valid_actions(state, "player1"):
            new_state = apply_action(state, "player1", action)
            assert new_state is not state
            assert 0 <= new_state.player1.chakra <= state.player1.chakra

    def test_generated_actions_are_legal(self):
        state = make_state(hands=(["009", "086"], []))
        for action in get_valid_actions(state, "player1"):
            assert is_legal(state, "player1", action)

    def test_pass_listed_first(self):
        state = make_state(hands=(["009"], []))
        assert get_valid_actions(state, "player1")[0].action_type == ActionType.PASS


class TestActionSerialization:
    def test_to_dict_omits_unused_fields(self):
        assert Action.pass_turn().to_dict() == {"type": "PASS"}
        assert Action.reveal(1, "p1-3").to_dict() == {
            "type": "REVEAL_CHARACTER", "mission_index": 1, "instance_id": "p1-3",
        }

    def test_from_dict_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            Action.from_dict({"type": "FLY"})

    def test_from_dict_builds_selection(self):
        action = Action.from_dict({"type": "SELECT_TARGET", "pending_id": "pa-1", "targets": ["x"]})
        assert action == Action.select_target("pa-1", ["x"])
