"""
Expert AI - Expectimax with Monte Carlo sampling of hidden information.

For each simulation the opponent's concealed hand (and deck) is rebuilt
from the cards the AI has not seen, then every legal action is scored
by a depth-limited expectimax. Opponent nodes are chance nodes weighted
by the cheap ordering heuristic. The final choice adds hand-authored
strategic bonuses (tempo, Edge management, synergy) to the average.
"""

from __future__ import annotations
from collections import Counter
from typing import TYPE_CHECKING

from .. import config
from ..cards.catalog import all_character_cards
from ..engine_core.action import ActionType
from ..engine_core.action_generator import get_valid_actions
from ..engine_core.constants import MAX_COPIES_PER_VERSION, opponent_of
from ..engine_core.engine import get_acting_player
from ..engine_core.state import EffectTrigger, GamePhase
from .heuristics import point_spread
from .personality import Personality
from .policy import AIStrategy, BotDecision, mulligan_action
from .search import SEARCH_PENALTY, SearchFault, explore, limit_actions, quick_score

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import Card, GameState

# Opponent weighting: passing is a plausible reply, anything else is neutral
CHANCE_SCORES = {"pass_score": 2.0, "default": 1.0}


class ExpertStrategy(AIStrategy):
    difficulty = "expert"

    def __init__(
        self,
        personality: Personality | None = None,
        seed: int | None = None,
        simulation_cap: int | None = None,
    ):
        super().__init__(personality, seed)
        self.simulation_cap = simulation_cap if simulation_cap is not None else config.EXPERT_SIMULATION_CAP

    def select_action(
        self,
        state: GameState,
        player_id: str,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        if state.phase == GamePhase.MULLIGAN:
            return self.decide_mulligan(state, player_id, legal_actions)

        simulations = self.simulation_count(len(legal_actions))
        totals = [0.0] * len(legal_actions)
        depth = self.personality.search_depth

        for _ in range(simulations):
            sampled = self.sample_hidden_info(state, player_id)
            for i, action in enumerate(legal_actions):
                try:
                    child = explore(sampled, player_id, action)
                    totals[i] += self.expectimax(child, depth - 1, player_id)
                except SearchFault:
                    totals[i] += SEARCH_PENALTY

        best_index, best_score = 0, float("-inf")
        for i, action in enumerate(legal_actions):
            score = totals[i] / simulations + self.strategic_bonus(action, state, player_id)
            if score > best_score:
                best_index, best_score = i, score

        return BotDecision(
            action=legal_actions[best_index],
            explanation=f"Expectimax over {simulations} samples ({best_score:.1f})",
            evaluated_actions=len(legal_actions),
            best_score=best_score,
            evaluation_details={"simulations": simulations},
        )

    def simulation_count(self, num_actions: int) -> int:
        """Fewer samples when there are many actions to score."""
        p = self.personality
        count = min(p.simulations, max(p.min_simulations, 50 - num_actions * 2))
        if self.simulation_cap is not None:
            count = min(count, self.simulation_cap)
        return max(1, count)

    # =========================================================================
    # Search
    # =========================================================================

    def expectimax(self, state: GameState, depth: int, ai_player: str) -> float:
        if depth <= 0 or state.is_over:
            return self.evaluator.evaluate_terminal(state, ai_player)

        current = get_acting_player(state)
        if current is None:
            return self.evaluator.score(state, ai_player)
        actions = get_valid_actions(state, current)
        if not actions:
            return self.evaluator.score(state, ai_player)

        limited = limit_actions(
            actions, state, current, self.personality.max_branching, keep_pass=True, **CHANCE_SCORES
        )

        if current != ai_player:
            weights = [max(1.0, quick_score(a, state, current, **CHANCE_SCORES)) for a in limited]
            total_weight = sum(weights)
            expected = 0.0
            for action, weight in zip(limited, weights):
                try:
                    child = explore(state, current, action)
                except SearchFault:
                    continue
                expected += self.expectimax(child, depth - 1, ai_player) * (weight / total_weight)
            return expected

        best = float("-inf")
        for action in limited:
            try:
                child = explore(state, current, action)
            except SearchFault:
                continue
            best = max(best, self.expectimax(child, depth - 1, ai_player))
        if best == float("-inf"):
            return self.evaluator.score(state, ai_player)
        return best

    # =========================================================================
    # Hidden information
    # =========================================================================

    def unknown_pool(self, state: GameState, ai_player: str) -> list[Card]:
        """
        Every catalog character (two copies each) minus the cards the AI
        has seen: its own hand, deck, discard and characters, the
        opponent's discard, and all visible characters.
        """
        opponent = opponent_of(ai_player)
        me = state.player(ai_player)
        seen = Counter(c.card_id for c in me.hand + me.deck + me.discard)
        seen.update(c.card_id for c in state.player(opponent).discard)
        for _, controller, char in state.iter_characters():
            if controller == ai_player or char.visible:
                seen.update(c.card_id for c in char.stack if not c.is_concealed)

        pool = []
        for card in all_character_cards():
            remaining = MAX_COPIES_PER_VERSION - seen.get(card.card_id, 0)
            pool.extend([card] * max(0, remaining))
        return pool

    def sample_hidden_info(self, state: GameState, ai_player: str) -> GameState:
        """A copy of the sanitized state with a plausible opponent hand and deck."""
        sampled = state.clone()
        opponent = opponent_of(ai_player)
        opp = sampled.player(opponent)
        if opp.hand:
            return sampled

        hand_size = sampled.metadata.get("concealed_hand_size", {}).get(opponent, 0)
        deck_size = sampled.metadata.get("concealed_deck_size", {}).get(opponent, 0)

        pool = self.unknown_pool(sampled, ai_player)
        self.rng.shuffle(pool)
        opp.hand = pool[:hand_size]
        opp.deck = pool[hand_size:hand_size + deck_size]
        return sampled

    # =========================================================================
    # Strategic bonuses
    # =========================================================================

    def strategic_bonus(self, action: Action, state: GameState, player_id: str) -> float:
        kind = action.action_type
        player = state.player(player_id)
        payload = action.payload
        bonus = 0.0

        if kind in (ActionType.PLAY_CHARACTER, ActionType.PLAY_HIDDEN):
            if payload.card_index is None or payload.card_index >= len(player.hand):
                return bonus
            card = player.hand[payload.card_index]

            if kind == ActionType.PLAY_HIDDEN:
                if card.has_trigger(EffectTrigger.AMBUSH):
                    bonus += 10
                if card.chakra >= 5:
                    bonus += 4
                return bonus

            if payload.mission_index is None or payload.mission_index >= len(state.active_missions):
                return bonus
            mission = state.active_missions[payload.mission_index]

            if card.has_trigger(EffectTrigger.SCORE):
                bonus += mission.value * 2
            bonus += card.total_powerup * 3
            if card.total_chakra_bonus and state.turn <= 2:
                bonus += 8

            for existing in mission.characters(player_id):
                if card.group and existing.card.group == card.group:
                    bonus += 2
                if set(card.keywords) & set(existing.card.keywords):
                    bonus += 3

        elif kind == ActionType.REVEAL_CHARACTER:
            if state.player(opponent_of(player_id)).passed:
                # No reply possible
                bonus += 5

        elif kind == ActionType.PASS:
            if state.edge_holder != player_id and state.first_passer is None:
                bonus += 5
            if point_spread(state, player_id) > 5:
                bonus += 3
            if player.chakra > 5:
                # Chakra is lost at the end of the turn
                bonus -= player.chakra * 0.5

        return bonus

    def decide_mulligan(self, state: GameState, player_id: str, legal_actions: list[Action]) -> BotDecision:
        """Keep a hand with a sound cost curve, effects and group synergy."""
        hand = state.player(player_id).hand
        score = 0.0

        cheap = sum(1 for c in hand if c.chakra <= 2)
        mid = sum(1 for c in hand if 3 <= c.chakra <= 4)
        high = sum(1 for c in hand if 5 <= c.chakra <= 6)
        top = sum(1 for c in hand if c.chakra >= 7)
        if cheap >= 1:
            score += 3
        if mid >= 2:
            score += 4
        if high >= 1:
            score += 2
        if top >= 3:
            score -= 5

        for card in hand:
            if card.effects:
                score += 1
            if card.has_trigger(EffectTrigger.AMBUSH):
                score += 2
            if card.has_trigger(EffectTrigger.SCORE):
                score += 1.5

        for count in Counter(c.group for c in hand if c.group).values():
            if count >= 2:
                score += 2
            if count >= 3:
                score += 3

        score += sum(c.power for c in hand) * 0.3

        keep = score >= self.personality.mulligan_keep_threshold
        return BotDecision(
            action=mulligan_action(legal_actions, keep=keep),
            explanation=f"Hand score {score:.1f}",
            best_score=score,
        )
