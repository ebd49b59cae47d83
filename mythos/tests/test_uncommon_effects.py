"""
Tests for the uncommon cards.

Tests:
- Every registered handler has a catalog entry
- MAIN, AMBUSH, UPGRADE and SCORE effects by village
- "MAIN effect: Instead" variants when played as an upgrade
- Continuous rules: immunity, move locks, cost auras, reactions to plays
"""

from ..cards.catalog import get_card
from ..engine_core.action import Action, ErrorCode
from ..engine_core.continuous import (
    calculate_character_power, calculate_effective_cost, returns_at_end_of_round,
)
from ..engine_core.defeat import defeat_character, hide_character, move_character
from ..engine_core.effect_registry import load_card_handlers
from ..engine_core.effect_resolver import EffectResolver
from ..engine_core.game_log import entries_for
from ..engine_core.phases import run_end_phase, score_mission
from ..engine_core.reducer import apply_action, apply_action_result
from ..engine_core.state import GamePhase
from .conftest import card, make_state, put


def ids(cards):
    return [c.card_id for c in cards]


def _side(state, player_id, mission_index=0):
    return state.active_missions[mission_index].characters(player_id)


class TestCatalog:
    def test_every_handler_has_a_card(self):
        for card_id, _ in load_card_handlers().registered_effects:
            assert get_card(card_id).card_id == card_id

    def test_uncommon_rarity(self):
        assert card("056").rarity == "UC"
        assert card("076").title == "One-Tail"


class TestLeafVillage:
    def test_hiruzen_plays_leaf_character_cheaper(self):
        state = make_state(chakra=(7, 5), hands=(["002", "009"], []))
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert ids(c.card for c in _side(new_state, "player1")) == ["002/130", "009/130"]
        assert new_state.player1.chakra == 1

    def test_hiruzen_upgrade_powers_up_played_character(self):
        state = make_state(hands=(["002", "009"], []))
        hiruzen = put(state, "player1", "001")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, hiruzen.instance_id))
        naruto = _side(new_state, "player1")[1]
        assert naruto.card.card_id == "009/130"
        assert naruto.power_tokens == 2
        assert new_state.player1.chakra == 2

    def test_tsunade_upgrade_recovers_from_discard(self):
        state = make_state(hands=(["004"], []))
        state.player1.discard = [card("009")]
        tsunade = put(state, "player1", "003")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, tsunade.instance_id))
        assert ids(new_state.player1.hand) == ["009/130"]
        assert new_state.player1.discard == []

    def test_tsunade_sends_defeated_friends_to_hand(self, state):
        put(state, "player1", "004")
        naruto = put(state, "player1", "009")
        defeat_character(state, naruto.instance_id, "player2", by_enemy=True)
        assert ids(state.player1.hand) == ["009/130"]
        assert state.player1.discard == []

    def test_shizune_moves_weak_enemy(self, two_missions):
        state = two_missions
        state.player1.hand = [card("006")]
        naruto = put(state, "player2", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(naruto.instance_id).mission_index == 1

    def test_shizune_upgrade_gains_chakra(self):
        state = make_state(hands=(["006"], []))
        shizune = put(state, "player1", "005")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, shizune.instance_id))
        assert new_state.player1.chakra == 6

    def test_jiraiya_plays_summon_two_cheaper(self):
        state = make_state(hands=(["008", "096"], []))
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert ids(c.card for c in _side(new_state, "player1")) == ["008/130", "096/130"]
        assert new_state.player1.chakra == 0

    def test_naruto_ambush_moves_itself(self, two_missions):
        state = two_missions
        naruto = put(state, "player1", "010", hidden=True)
        new_state = apply_action(state, "player1", Action.reveal(0, naruto.instance_id))
        assert new_state.find_character(naruto.instance_id).mission_index == 1

    def test_sasuke_ambush_only_looks(self):
        state = make_state(hands=([], ["009"]))
        sasuke = put(state, "player1", "014", hidden=True)
        new_state = apply_action(state, "player1", Action.reveal(0, sasuke.instance_id))
        assert entries_for(new_state, "LOOK")
        assert ids(new_state.player2.hand) == ["009/130"]

    def test_sasuke_upgrade_discards_and_replaces(self):
        state = make_state(hands=(["014"], ["009"]))
        sasuke = put(state, "player1", "013")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, sasuke.instance_id))
        assert ids(new_state.player2.discard) == ["009/130"]
        assert ids(new_state.player2.hand) == ["086/130"]

    def test_kakashi_copies_enemy_main(self):
        """Copying Choji's POWERUP 3 puts the tokens on Kakashi."""
        state = make_state(hands=(["016"], []))
        choji = put(state, "player2", "017")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        kakashi = _side(new_state, "player1")[0]
        assert kakashi.power_tokens == 3
        assert new_state.find_character(choji.instance_id).power_tokens == 0
        assert entries_for(new_state, "EFFECT_COPY")

    def test_kakashi_cost_limit(self):
        state = make_state(hands=(["016"], []))
        put(state, "player2", "002")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert not entries_for(new_state, "EFFECT_COPY")

    def test_ino_takes_control(self):
        state = make_state(hands=(["020"], []))
        naruto = put(state, "player2", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        taken = new_state.find_character(naruto.instance_id)
        assert taken.controller == "player1"
        assert taken.owner == "player2"

    def test_shikamaru_pulls_from_newest_mission(self, two_missions):
        state = two_missions
        shikamaru = put(state, "player1", "022", hidden=True)
        naruto = put(state, "player2", "009", mission_index=1)
        new_state = apply_action(state, "player1", Action.reveal(0, shikamaru.instance_id))
        assert new_state.find_character(naruto.instance_id).mission_index == 0

    def _asuma_revealed(self):
        state = make_state(hands=(["019"], []))
        asuma = put(state, "player1", "024", hidden=True)
        return apply_action(state, "player1", Action.reveal(0, asuma.instance_id)), asuma

    def test_asuma_team_10_discard_powers_up(self):
        state, asuma = self._asuma_revealed()
        pending = state.pending_actions[0]
        assert pending.options == ["0", "1"]
        assert not state.pending_effects[0].is_optional

        new_state = apply_action(state, "player1", Action.select_target(pending.action_id, ["0"]))
        assert new_state.find_character(asuma.instance_id).power_tokens == 3

    def test_asuma_other_discard_no_powerup(self):
        state, asuma = self._asuma_revealed()
        pending = state.pending_actions[0]
        new_state = apply_action(state, "player1", Action.select_target(pending.action_id, ["1"]))
        assert new_state.find_character(asuma.instance_id).power_tokens == 0
        assert ids(new_state.player1.hand) == ["019/130"]

    def test_kiba_hides_cheapest_enemy(self):
        state = make_state(hands=(["026"], []))
        naruto = put(state, "player2", "009")
        zabuza = put(state, "player2", "086")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(naruto.instance_id).hidden
        assert new_state.find_character(zabuza.instance_id).visible

    def test_kiba_upgrade_fetches_akamaru(self):
        state = make_state(hands=(["026"], []))
        state.player1.deck = [card("086")] * 5 + [card("027")]
        kiba = put(state, "player1", "025")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kiba.instance_id))
        assert "027/130" in ids(c.card for c in _side(new_state, "player1"))
        assert len(new_state.player1.deck) == 5
        assert new_state.player1.chakra == 4

    def test_akamaru_powers_up_kiba(self):
        state = make_state()
        kiba = put(state, "player1", "025")
        akamaru = put(state, "player1", "028", hidden=True)
        new_state = apply_action(state, "player1", Action.reveal(0, akamaru.instance_id))
        assert new_state.find_character(kiba.instance_id).power_tokens == 2

    def test_akamaru_returns_without_kiba(self, state):
        akamaru = put(state, "player1", "028")
        assert returns_at_end_of_round(state, akamaru)
        put(state, "player1", "025")
        assert not returns_at_end_of_round(state, akamaru)

    def test_akamaru_upgrades_over_kiba(self):
        state = make_state(hands=(["029"], []))
        kiba = put(state, "player1", "025")
        naruto = put(state, "player2", "009")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kiba.instance_id))
        assert new_state.find_character(kiba.instance_id).card.card_id == "029/130"
        assert new_state.find_character(naruto.instance_id).hidden
        assert new_state.player1.chakra == 3

    def test_hinata_gains_chakra_on_enemy_play(self):
        state = make_state(hands=(["009"], []))
        put(state, "player2", "031")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.player2.chakra == 6

    def test_shino_raises_opponent_costs(self):
        state = make_state(hands=([], ["009"]))
        shino = put(state, "player1", "033", hidden=True)
        state = apply_action(state, "player1", Action.reveal(0, shino.instance_id))
        assert state.player2.cost_surcharge == 1

        new_state = apply_action(state, "player2", Action.play_character(0, 0))
        assert new_state.player2.chakra == 2

    def test_shino_surcharge_ends_with_round(self):
        state = make_state(phase=GamePhase.MISSION)
        state.player2.cost_surcharge = 1
        state = run_end_phase(state)
        assert state.player2.cost_surcharge == 0

    def test_kurenai_locks_mission(self, two_missions):
        state = two_missions
        put(state, "player2", "035")
        naruto = put(state, "player1", "009")
        assert not move_character(state, naruto.instance_id, 1)
        assert entries_for(state, "MOVE_PREVENTED")

    def test_hidden_kurenai_does_not_lock(self, two_missions):
        state = two_missions
        put(state, "player2", "035", hidden=True)
        naruto = put(state, "player1", "009")
        assert move_character(state, naruto.instance_id, 1)

    def test_kurenai_upgrade_defeats_weak_enemy(self):
        state = make_state(hands=(["035"], []))
        kurenai = put(state, "player1", "034")
        choji = put(state, "player2", "017")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kurenai.instance_id))
        assert new_state.find_character(choji.instance_id) is None

    def test_neji_powers_up_on_enemy_play(self):
        state = make_state(hands=(["009"], []))
        neji = put(state, "player2", "037")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(neji.instance_id).power_tokens == 1

    def test_neji_upgrade_removes_three_tokens(self):
        state = make_state(hands=(["037"], []))
        neji = put(state, "player1", "036")
        zabuza = put(state, "player2", "086", tokens=4)
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, neji.instance_id))
        assert new_state.find_character(zabuza.instance_id).power_tokens == 1

    def test_tenten_defeats_hidden_character(self):
        state = make_state(hands=(["041"], []))
        hidden = put(state, "player2", "086", hidden=True)
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(hidden.instance_id) is None

    def test_tenten_upgrade_powers_up_leaf_friend(self):
        state = make_state(hands=(["041"], []))
        tenten = put(state, "player1", "040")
        naruto = put(state, "player1", "009")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, tenten.instance_id))
        assert new_state.find_character(naruto.instance_id).power_tokens == 1
        assert new_state.find_character(tenten.instance_id).power_tokens == 0

    def test_anko_defeats_hidden_enemy_anywhere(self, two_missions):
        state = two_missions
        anko = put(state, "player1", "045", hidden=True)
        hidden = put(state, "player2", "086", mission_index=1, hidden=True)
        new_state = apply_action(state, "player1", Action.reveal(0, anko.instance_id))
        assert new_state.find_character(hidden.instance_id) is None


class TestSoundVillage:
    def test_orochimaru_moves_on_after_losing(self, two_missions):
        state = two_missions
        state.phase = GamePhase.MISSION
        state.missions_to_score = [1]
        orochimaru = put(state, "player1", "051")
        put(state, "player2", "086", tokens=2)

        state = score_mission(state, 0, EffectResolver())
        assert state.player2.mission_points == 4
        assert state.find_character(orochimaru.instance_id).mission_index == 1

    def test_orochimaru_stays_after_winning(self, two_missions):
        state = two_missions
        state.phase = GamePhase.MISSION
        state.missions_to_score = [1]
        orochimaru = put(state, "player1", "051")
        state = score_mission(state, 0, EffectResolver())
        assert state.find_character(orochimaru.instance_id).mission_index == 0

    def test_kabuto_draws(self):
        state = make_state(hands=(["053"], []))
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert len(new_state.player1.hand) == 1

    def test_kabuto_upgrade_plays_from_discard(self):
        state = make_state(hands=(["053"], []))
        state.player1.discard = [card("009")]
        kabuto = put(state, "player1", "052")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kabuto.instance_id))
        assert "009/130" in ids(c.card for c in _side(new_state, "player1"))
        assert new_state.player1.discard == []
        assert new_state.player1.chakra == 4

    def test_kabuto_upgrade_hides_weaker_enemies(self):
        state = make_state(hands=(["054"], []))
        kabuto = put(state, "player1", "052")
        naruto = put(state, "player2", "009")
        zabuza = put(state, "player2", "086")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kabuto.instance_id))
        assert new_state.find_character(kabuto.instance_id).power_tokens == 1
        assert new_state.find_character(naruto.instance_id).hidden
        assert new_state.find_character(zabuza.instance_id).visible

    def test_kimimaro_raises_enemy_cost(self, two_missions):
        state = two_missions
        put(state, "player2", "056")
        assert calculate_effective_cost(state, card("009"), "player1", 0) == 3
        assert calculate_effective_cost(state, card("009"), "player1", 1) == 2
        assert calculate_effective_cost(state, card("009"), "player2", 0) == 2

    def test_kimimaro_upgrade_discards_to_hide(self):
        state = make_state(hands=(["056", "009"], []))
        kimimaro = put(state, "player1", "055")
        zabuza = put(state, "player2", "086")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kimimaro.instance_id))
        assert new_state.find_character(zabuza.instance_id).hidden
        assert new_state.find_character(kimimaro.instance_id).visible
        assert ids(new_state.player1.discard) == ["009/130"]

    def test_jirobo_powers_up_sound_four_here(self, two_missions):
        state = two_missions
        state.player1.hand = [card("058")]
        here = put(state, "player1", "061")
        there = put(state, "player1", "064", mission_index=1)
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(here.instance_id).power_tokens == 1
        assert new_state.find_character(there.instance_id).power_tokens == 0

    def test_jirobo_upgrade_reaches_every_mission(self, two_missions):
        state = two_missions
        state.player1.hand = [card("058")]
        jirobo = put(state, "player1", "057")
        there = put(state, "player1", "061", mission_index=1)
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, jirobo.instance_id))
        assert new_state.find_character(there.instance_id).power_tokens == 1

    def test_kidomaru_moves_friend_away(self, two_missions):
        state = two_missions
        state.player1.hand = [card("060")]
        naruto = put(state, "player1", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(naruto.instance_id).mission_index == 1

    def test_sakon_copies_sound_four_main(self):
        """Copying Jirobo's POWERUP X: one mission holds Sound Four."""
        state = make_state()
        jirobo = put(state, "player1", "057")
        sakon = put(state, "player1", "062", hidden=True)
        new_state = apply_action(state, "player1", Action.reveal(0, sakon.instance_id))
        assert new_state.find_character(sakon.instance_id).power_tokens == 1
        assert new_state.find_character(jirobo.instance_id).power_tokens == 0

    def test_ukon_upgrades_over_sound_character(self):
        state = make_state(hands=(["063"], []))
        kin = put(state, "player1", "072")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kin.instance_id))
        assert new_state.find_character(kin.instance_id).card.card_id == "063/130"
        assert new_state.player1.chakra == 2

    def test_ukon_cannot_upgrade_leaf_character(self):
        state = make_state(hands=(["063"], []))
        naruto = put(state, "player1", "009")
        result = apply_action_result(state, "player1", Action.upgrade(0, 0, naruto.instance_id))
        assert result.error_code == ErrorCode.INVALID_UPGRADE

    def test_tayuya_ambush_choice_includes_herself(self):
        state = make_state()
        jirobo = put(state, "player1", "057")
        tayuya = put(state, "player1", "065", hidden=True)
        state = apply_action(state, "player1", Action.reveal(0, tayuya.instance_id))
        pending = state.pending_actions[0]
        assert set(pending.options) == {jirobo.instance_id, tayuya.instance_id}

        new_state = apply_action(state, "player1", Action.select_target(pending.action_id, [jirobo.instance_id]))
        assert new_state.find_character(jirobo.instance_id).power_tokens == 2

    def test_tayuya_upgrade_fetches_summon(self):
        state = make_state(hands=(["065"], []))
        state.player1.deck = [card("086")] * 3 + [card("096")]
        tayuya = put(state, "player1", "064")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, tayuya.instance_id))
        assert "096/130" in ids(c.card for c in _side(new_state, "player1"))
        assert len(new_state.player1.deck) == 3

    def test_doki_steals_chakra_with_sound_four(self):
        state = make_state(hands=(["066"], []))
        put(state, "player1", "057")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.player1.chakra == 4
        assert new_state.player2.chakra == 4

    def test_doki_alone_steals_nothing(self):
        state = make_state(hands=(["066"], []))
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.player2.chakra == 5

    def test_rempart_nullifies_strongest_enemy(self, state):
        put(state, "player1", "067")
        zabuza = put(state, "player2", "086")
        naruto = put(state, "player2", "009")
        assert calculate_character_power(state, zabuza) == 0
        assert calculate_character_power(state, naruto) == 3
        assert returns_at_end_of_round(state, _side(state, "player1")[0])

    def _dosu_forces(self, chakra):
        state = make_state(chakra=chakra, hands=(["069"], []))
        hidden = put(state, "player2", "009", hidden=True)
        return apply_action(state, "player1", Action.play_character(0, 0)), hidden

    def test_dosu_opponent_chooses(self):
        state, hidden = self._dosu_forces((5, 5))
        pending = state.pending_actions[0]
        assert pending.player == "player2"
        assert pending.options == ["reveal", "defeat"]

        new_state = apply_action(state, "player2", Action.select_target(pending.action_id, ["defeat"]))
        assert new_state.find_character(hidden.instance_id) is None

    def test_dosu_opponent_pays_to_reveal(self):
        state, hidden = self._dosu_forces((5, 5))
        pending = state.pending_actions[0]
        new_state = apply_action(state, "player2", Action.select_target(pending.action_id, ["reveal"]))
        assert new_state.find_character(hidden.instance_id).visible
        assert new_state.player2.chakra == 3

    def test_dosu_defeats_when_reveal_unaffordable(self):
        state, hidden = self._dosu_forces((5, 0))
        assert not state.pending_actions
        assert state.find_character(hidden.instance_id) is None

    def test_zaku_moves_enemy_when_outnumbered(self, two_missions):
        state = two_missions
        state.player1.hand = [card("071")]
        naruto = put(state, "player2", "009")
        put(state, "player2", "086")

        state = apply_action(state, "player1", Action.play_character(0, 0))
        pending = state.pending_actions[0]
        assert len(pending.options) == 2
        new_state = apply_action(state, "player1", Action.select_target(pending.action_id, [naruto.instance_id]))
        assert new_state.find_character(naruto.instance_id).mission_index == 1

    def test_zaku_upgrade_powerup(self):
        state = make_state(hands=(["071"], []))
        zaku = put(state, "player1", "070")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, zaku.instance_id))
        assert new_state.find_character(zaku.instance_id).power_tokens == 2
        assert new_state.player2.chakra == 5

    def test_kin_discards_to_hide(self):
        state = make_state(hands=(["073", "009"], []))
        naruto = put(state, "player2", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(naruto.instance_id).hidden
        assert ids(new_state.player1.discard) == ["009/130"]

    def test_kin_upgrade_plays_top_card_hidden(self):
        state = make_state(hands=(["073"], []))
        kin = put(state, "player1", "072")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kin.instance_id))
        hidden = [c for c in _side(new_state, "player1") if c.hidden]
        assert len(hidden) == 1
        assert len(new_state.player1.deck) == 9


class TestSandVillage:
    def test_ichibi_upgrades_over_gaara(self):
        state = make_state(hands=(["076"], []))
        gaara = put(state, "player1", "074")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, gaara.instance_id))
        assert new_state.find_character(gaara.instance_id).card.card_id == "076/130"
        assert new_state.player1.chakra == 1

    def test_ichibi_immune_to_enemy_effects(self, state):
        ichibi = put(state, "player1", "076")
        assert not defeat_character(state, ichibi.instance_id, "player2", by_enemy=True)
        assert not hide_character(state, ichibi.instance_id, by_enemy=True)
        assert state.find_character(ichibi.instance_id).visible
        assert entries_for(state, "DEFEAT_PREVENTED")

    def test_ichibi_own_effects_still_apply(self, state):
        ichibi = put(state, "player1", "076")
        assert defeat_character(state, ichibi.instance_id, "player1", by_enemy=False)

    def test_kankuro_pulls_enemy(self, two_missions):
        state = two_missions
        kankuro = put(state, "player1", "078", hidden=True)
        naruto = put(state, "player2", "009", mission_index=1)
        new_state = apply_action(state, "player1", Action.reveal(0, kankuro.instance_id))
        assert new_state.find_character(naruto.instance_id).mission_index == 0

    def test_kankuro_upgrade_plays_hidden(self):
        state = make_state(hands=(["078", "009"], []))
        kankuro = put(state, "player1", "077")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kankuro.instance_id))
        hidden = [c for c in _side(new_state, "player1") if c.hidden]
        assert ids(c.card for c in hidden) == ["009/130"]
        assert new_state.player1.hand == []
        assert new_state.player1.chakra == 3

    def test_temari_moves_sand_friend(self, two_missions):
        state = two_missions
        state.player1.hand = [card("080")]
        gaara = put(state, "player1", "074")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(gaara.instance_id).mission_index == 1

    def test_baki_score_defeats_hidden_enemy(self):
        state = make_state(phase=GamePhase.MISSION)
        put(state, "player1", "082")
        hidden = put(state, "player2", "086", hidden=True)
        state = score_mission(state, 0, EffectResolver())
        assert state.find_character(hidden.instance_id) is None

    def test_baki_upgrade_powers_up_sand(self):
        state = make_state(hands=(["082"], []))
        baki = put(state, "player1", "081")
        gaara = put(state, "player1", "074")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, baki.instance_id))
        assert new_state.find_character(gaara.instance_id).power_tokens == 1
        assert new_state.find_character(baki.instance_id).power_tokens == 1

    def test_rasa_bonus_point_with_sand_friend(self):
        state = make_state(phase=GamePhase.MISSION)
        put(state, "player1", "083")
        put(state, "player1", "074")
        state = score_mission(state, 0, EffectResolver())
        assert state.player1.mission_points == 5

    def test_rasa_alone_no_bonus(self):
        state = make_state(phase=GamePhase.MISSION)
        put(state, "player1", "083")
        state = score_mission(state, 0, EffectResolver())
        assert state.player1.mission_points == 4

    def test_yashamaru_takes_another_down(self):
        state = make_state(phase=GamePhase.MISSION)
        yashamaru = put(state, "player1", "085")
        choji = put(state, "player2", "017")
        state = score_mission(state, 0, EffectResolver())
        assert state.find_character(yashamaru.instance_id) is None
        assert state.find_character(choji.instance_id) is None


class TestIndependentAndAkatsuki:
    def test_zabuza_hides_lone_enemy(self):
        state = make_state(hands=(["087"], []))
        naruto = put(state, "player2", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(naruto.instance_id).hidden

    def test_zabuza_ignores_crowd(self):
        state = make_state(hands=(["087"], []))
        naruto = put(state, "player2", "009")
        put(state, "player2", "017")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.find_character(naruto.instance_id).visible

    def test_zabuza_upgrade_defeats_instead(self):
        state = make_state(hands=(["087"], []))
        zabuza = put(state, "player1", "086")
        naruto = put(state, "player2", "009")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, zabuza.instance_id))
        assert new_state.find_character(naruto.instance_id) is None

    def test_haku_mills_opponent(self):
        state = make_state(hands=(["089"], []))
        put(state, "player1", "009")
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        haku = _side(new_state, "player1")[1]
        assert len(new_state.player2.deck) == 8
        assert len(new_state.player2.discard) == 2
        assert haku.power_tokens == 2

    def test_haku_upgrade_mills_own_deck(self):
        state = make_state(hands=(["089"], []))
        haku = put(state, "player1", "088")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, haku.instance_id))
        assert len(new_state.player1.deck) == 9
        assert len(new_state.player2.deck) == 10
        assert new_state.find_character(haku.instance_id).power_tokens == 1

    def test_itachi_upgrade_discards_and_replaces(self):
        state = make_state(hands=(["091"], ["009"]))
        itachi = put(state, "player1", "090")
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, itachi.instance_id))
        assert ids(new_state.player2.discard) == ["009/130"]
        assert len(new_state.player2.hand) == 1

    def test_itachi_played_only_looks(self):
        state = make_state(hands=(["091"], ["009"]))
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        assert new_state.player2.discard == []
        assert entries_for(new_state, "LOOK")

    def test_kisame_drains_tokens_here(self):
        state = make_state(chakra=(6, 5), hands=(["093"], []))
        naruto = put(state, "player2", "009", tokens=3)
        new_state = apply_action(state, "player1", Action.play_character(0, 0))
        kisame = _side(new_state, "player1")[0]
        assert kisame.power_tokens == 2
        assert new_state.find_character(naruto.instance_id).power_tokens == 1

    def test_kisame_upgrade_reaches_other_missions(self, two_missions):
        state = two_missions
        state.player1.hand = [card("093")]
        kisame = put(state, "player1", "092")
        far = put(state, "player2", "009", mission_index=1, tokens=2)
        new_state = apply_action(state, "player1", Action.upgrade(0, 0, kisame.instance_id))
        assert new_state.find_character(far.instance_id).power_tokens == 0
        assert new_state.find_character(kisame.instance_id).power_tokens == 2

    def test_manda_defeats_summon(self):
        state = make_state()
        manda = put(state, "player1", "102", hidden=True)
        gamakichi = put(state, "player2", "096")
        new_state = apply_action(state, "player1", Action.reveal(0, manda.instance_id))
        assert new_state.find_character(gamakichi.instance_id) is None
        assert returns_at_end_of_round(new_state, new_state.find_character(manda.instance_id))

    def test_kyodaigumo_returns_at_end_of_round(self, state):
        spider = put(state, "player1", "103")
        assert returns_at_end_of_round(state, spider)
