"""
Tests for game setup and the automatic phases.

Tests:
- create_game setup and mulligan
- Start phase income and draws
- Mission scoring and tie-breaks
- End phase cleanup and game over
"""

import random

import pytest

from ..cards.deck import DeckValidationError
from ..engine_core.action import Action
from ..engine_core.action_generator import get_valid_actions
from ..engine_core.effect_resolver import EffectResolver
from ..engine_core.engine import create_game, get_acting_player, get_winner
from ..engine_core.game_log import entries_for
from ..engine_core.phases import determine_mission_winner, run_end_phase, run_start_phase, score_mission
from ..engine_core.reducer import apply_action
from ..engine_core.state import GameConfig, GamePhase, PlayerConfig
from .conftest import card, make_mission, make_state, put


class TestCreateGame:
    """Tests for game creation."""

    def test_initial_state(self, new_game):
        """Mulligan phase, turn 1, five-card hands."""
        state = new_game
        assert state.phase == GamePhase.MULLIGAN
        assert state.turn == 1
        for player in state.players:
            assert len(player.hand) == 5
            assert len(player.deck) == 25
            assert player.chakra == 0
            assert player.unused_mission is not None

    def test_mission_deck_holds_two_per_player(self, new_game):
        assert len(new_game.mission_deck) == 4
        assert new_game.active_missions == []

    def test_starting_player_holds_edge(self, new_game):
        assert new_game.active_player == new_game.edge_holder

    def test_game_start_logged(self, new_game):
        assert len(entries_for(new_game, "GAME_START")) == 1

    def test_same_seed_same_game(self, starter_config):
        """Setup is reproducible from the seed."""
        a = create_game(starter_config)
        b = create_game(starter_config)
        assert [c.card_id for c in a.player1.hand] == [c.card_id for c in b.player1.hand]
        assert [c.card_id for c in a.mission_deck] == [c.card_id for c in b.mission_deck]
        assert a.edge_holder == b.edge_holder

    def test_mission_base_points_override(self, starter_config):
        """Configured base points replace the printed ones."""
        starter_config.mission_base_points = {c.card_id: 9 for c in starter_config.player1.mission_cards}
        starter_config.mission_base_points.update({c.card_id: 9 for c in starter_config.player2.mission_cards})
        state = create_game(starter_config)
        state = apply_action(state, "player1", Action.mulligan(False))
        state = apply_action(state, "player2", Action.mulligan(False))
        assert state.active_missions[0].base_points == 9

    def test_validate_decks_rejects_short_deck(self):
        config = GameConfig(
            player1=PlayerConfig([card("009")] * 10, [card("MSS 01"), card("MSS 02"), card("MSS 03")]),
            player2=PlayerConfig([card("009")] * 10, [card("MSS 01"), card("MSS 02"), card("MSS 03")]),
            validate_decks=True,
        )
        with pytest.raises(DeckValidationError):
            create_game(config)


class TestMulligan:
    """Tests for the mulligan decision."""

    def test_both_decide_in_any_order(self, new_game):
        state = apply_action(new_game, "player2", Action.mulligan(False))
        assert state.phase == GamePhase.MULLIGAN
        state = apply_action(state, "player1", Action.mulligan(False))
        assert state.phase == GamePhase.ACTION

    def test_mulligan_redraws_five(self, new_game):
        state = apply_action(new_game, "player1", Action.mulligan(True))
        assert len(state.player1.hand) == 5
        assert len(state.player1.deck) == 25
        assert state.player1.has_mulliganed

    def test_decide_only_once(self, new_game):
        state = apply_action(new_game, "player1", Action.mulligan(False))
        assert apply_action(state, "player1", Action.mulligan(True)) is state
        assert get_valid_actions(state, "player1") == []

    def test_acting_player_is_first_undecided(self, new_game):
        assert get_acting_player(new_game) == "player1"
        state = apply_action(new_game, "player1", Action.mulligan(False))
        assert get_acting_player(state) == "player2"

    def test_first_turn_after_mulligan(self, new_game):
        """Start phase: mission revealed, 5 chakra, 2 cards drawn, Edge holder acts."""
        state = apply_action(new_game, "player1", Action.mulligan(False))
        state = apply_action(state, "player2", Action.mulligan(False))

        assert len(state.active_missions) == 1
        assert state.active_missions[0].rank == "D"
        assert state.active_missions[0].rank_bonus == 1
        assert len(state.mission_deck) == 3
        for player in state.players:
            assert player.chakra == 5
            assert len(player.hand) == 7
        assert state.active_player == state.edge_holder


class TestStartPhase:
    """Income is 5 + characters in play + CHAKRA bonuses."""

    def test_income_counts_characters(self):
        state = make_state(chakra=(0, 0), phase=GamePhase.START)
        put(state, "player1", "086")
        put(state, "player1", "009", hidden=True)

        state = run_start_phase(state)
        assert state.player1.chakra == 7
        assert state.player2.chakra == 5

    def test_income_includes_chakra_bonus(self):
        """Visible Shizune adds CHAKRA +1; hidden she only counts as a character."""
        state = make_state(chakra=(0, 0), phase=GamePhase.START)
        put(state, "player1", "005")
        put(state, "player2", "005", hidden=True)

        state = run_start_phase(state)
        assert state.player1.chakra == 7
        assert state.player2.chakra == 6

    def test_start_reveals_next_mission_at_turn_rank(self):
        state = make_state(turn=3, phase=GamePhase.START)
        state.mission_deck = [card("MSS 06")]
        state = run_start_phase(state)

        mission = state.active_missions[-1]
        assert mission.card.card_id == "MSS 06"
        assert mission.rank == "B"
        assert mission.value == 2 + 3


class TestMissionScoring:
    """Tests for mission scoring."""

    def test_winner_gets_base_plus_rank_bonus(self):
        """Base 3, rank D, 5 power vs 2 power: the winner scores exactly 4."""
        state = make_state(phase=GamePhase.MISSION)
        put(state, "player1", "086")  # power 5
        put(state, "player2", "088")  # power 2

        state = score_mission(state, 0, EffectResolver())
        assert state.player1.mission_points == 4
        assert state.player2.mission_points == 0
        assert state.active_missions[0].won_by == "player1"

    def test_tie_goes_to_edge_holder(self):
        """3 vs 3: the side without the Edge scores nothing."""
        state = make_state(phase=GamePhase.MISSION, edge="player2")
        put(state, "player1", "009")
        put(state, "player2", "009")

        state = score_mission(state, 0, EffectResolver())
        assert state.player1.mission_points == 0
        assert state.player2.mission_points == 4
        assert state.active_missions[0].won_by == "player2"
        assert entries_for(state, "TIE_BREAK")

    def test_no_power_no_winner(self):
        """0 vs 0: nobody wins, even with the Edge."""
        state = make_state(phase=GamePhase.MISSION, edge="player1")
        put(state, "player1", "009", hidden=True)

        state = score_mission(state, 0, EffectResolver())
        assert state.active_missions[0].won_by is None
        assert state.player1.mission_points == 0

    def test_determine_winner_requires_power(self):
        state = make_state(edge="player1")
        assert determine_mission_winner(state, 0, 0) is None
        assert determine_mission_winner(state, 2, 2) == "player1"
        assert determine_mission_winner(state, 0, 1) == "player2"

    def test_power_tokens_count(self):
        state = make_state(phase=GamePhase.MISSION)
        put(state, "player1", "009", tokens=3)  # 6
        put(state, "player2", "086")  # 5

        state = score_mission(state, 0, EffectResolver())
        assert state.active_missions[0].won_by == "player1"

    def test_score_effect_resolves(self):
        """MSS 06 draws its winner a card."""
        state = make_state(phase=GamePhase.MISSION)
        state.active_missions[0] = make_mission("MSS 06", base_points=2)
        put(state, "player1", "086")

        state = score_mission(state, 0, EffectResolver())
        assert len(state.player1.hand) == 1
        assert state.player1.mission_points == 3

    def test_missions_score_in_rank_order(self):
        """The mission phase scores D before C regardless of board position."""
        state = make_state(missions=2)
        state.active_missions[0].rank = "C"
        state.active_missions[1].rank = "D"
        put(state, "player1", "086", mission_index=0)
        put(state, "player1", "009", mission_index=1)

        state = apply_action(state, "player1", Action.pass_turn())
        state = apply_action(state, "player2", Action.pass_turn())
        wins = [e.details for e in entries_for(state, "WIN_MISSION")]
        assert "mission 2" in wins[0]
        assert "mission 1" in wins[1]


class TestEndPhase:
    """Tests for end-of-round cleanup."""

    def test_chakra_cleared(self):
        """7 chakra before the end phase, 0 after."""
        state = make_state(turn=4, phase=GamePhase.MISSION, chakra=(7, 3))
        state = run_end_phase(state)
        assert state.player1.chakra == 0
        assert state.player2.chakra == 0

    def test_retain_tokens(self):
        """Rock Lee 039 keeps 3 tokens; a plain character loses its 3."""
        state = make_state(turn=4, phase=GamePhase.MISSION)
        lee = put(state, "player1", "039", tokens=3)
        zabuza = put(state, "player1", "086", tokens=3)

        state = run_end_phase(state)
        assert state.find_character(lee.instance_id).power_tokens == 3
        assert state.find_character(zabuza.instance_id).power_tokens == 0

    def test_hidden_character_loses_tokens(self):
        """Retaining only works while visible."""
        state = make_state(turn=4, phase=GamePhase.MISSION)
        lee = put(state, "player1", "039", hidden=True, tokens=2)
        state = run_end_phase(state)
        assert state.find_character(lee.instance_id).power_tokens == 0

    def test_summon_returns_to_hand(self):
        state = make_state(turn=4, phase=GamePhase.MISSION)
        bunta = put(state, "player1", "094")

        state = run_end_phase(state)
        assert state.find_character(bunta.instance_id) is None
        assert [c.card_id for c in state.player1.hand] == ["094/130"]

    def test_akamaru_stays_with_kiba(self):
        state = make_state(turn=4, phase=GamePhase.MISSION)
        akamaru = put(state, "player1", "027")
        put(state, "player1", "025")
        state = run_end_phase(state)
        assert state.find_character(akamaru.instance_id) is not None

    def test_akamaru_returns_alone(self):
        state = make_state(turn=4, phase=GamePhase.MISSION)
        akamaru = put(state, "player1", "027")
        state = run_end_phase(state)
        assert state.find_character(akamaru.instance_id) is None

    def test_game_over_after_fourth_turn(self):
        state = make_state(turn=4, phase=GamePhase.MISSION)
        state.player2.mission_points = 5
        state = run_end_phase(state)
        assert state.phase == GamePhase.GAME_OVER
        assert get_winner(state) == "player2"

    def test_earlier_turn_starts_next(self):
        state = make_state(turn=2, phase=GamePhase.MISSION)
        state.mission_deck = [card("MSS 06")]
        state = run_end_phase(state)
        assert state.turn == 3
        assert state.phase == GamePhase.ACTION
        assert state.active_missions[-1].rank == "B"


class TestWinner:
    """Tests for get_winner."""

    def test_no_winner_while_running(self):
        assert get_winner(make_state()) is None

    def test_points_tie_goes_to_edge(self):
        state = make_state(phase=GamePhase.GAME_OVER, edge="player2")
        state.player1.mission_points = 6
        state.player2.mission_points = 6
        assert get_winner(state) == "player2"


class TestFullGame:
    """Random legal play from setup to game over."""

    def test_random_game_reaches_game_over(self, new_game):
        """Mission points never decrease and the game ends after turn 4."""
        rng = random.Random(3)
        state = new_game
        points = {"player1": 0, "player2": 0}

        for _ in range(2000):
            acting = get_acting_player(state)
            if acting is None:
                break
            actions = get_valid_actions(state, acting)
            assert actions, f"{acting} must act but has no actions"
            state = apply_action(state, acting, rng.choice(actions))
            for player in state.players:
                assert player.chakra >= 0
                assert player.mission_points >= points[player.player_id]
                points[player.player_id] = player.mission_points

        assert state.phase == GamePhase.GAME_OVER
        assert state.turn == 4
        assert get_winner(state) in ("player1", "player2")
