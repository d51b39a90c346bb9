"""Decision making for computer-controlled seats.

``choose_action`` draws a single uniform number per decision and hands it to a
``Strategy``; the strategy itself is pure, so a fixed roll always produces the
same decision for the same snapshot.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from .evaluator import HandCategory, evaluate
from .game import get_valid_actions, min_raise_to
from .models import ActionType, GameState, Phase, PlayerState

_RNG = random.Random()


@dataclass(frozen=True)
class Decision:
    action: ActionType
    amount: Optional[int] = None


class Strategy(ABC):
    """Pluggable skill level for AI seats."""

    name = "strategy"

    @abstractmethod
    def decide(
        self,
        state: GameState,
        player: PlayerState,
        valid: Sequence[ActionType],
        roll: float,
    ) -> Decision:
        raise NotImplementedError


class PassiveStrategy(Strategy):
    """Never bets: checks when free, otherwise calls, otherwise folds."""

    name = "passive"

    def decide(self, state, player, valid, roll):
        if ActionType.CHECK in valid:
            return Decision(ActionType.CHECK)
        if ActionType.CALL in valid:
            return Decision(ActionType.CALL)
        return Decision(ActionType.FOLD)


class HeuristicStrategy(Strategy):
    """Bucketed hand strength with a little randomness mixed in."""

    name = "heuristic"

    def decide(self, state, player, valid, roll):
        if state.phase == Phase.PREFLOP:
            return self._preflop(state, player, valid, roll)
        return self._postflop(state, player, valid, roll)

    def _preflop(self, state, player, valid, roll):
        strength = preflop_strength(player)
        to_call = state.current_bet - player.bet
        bb = state.big_blind

        if strength == "strong":
            if ActionType.RAISE in valid:
                target = state.current_bet + bb * (3 if roll < 0.5 else 4)
                return Decision(ActionType.RAISE, _cap(target, player))
            if ActionType.CALL in valid:
                return Decision(ActionType.CALL)
            if ActionType.CHECK in valid:
                return Decision(ActionType.CHECK)
            return Decision(ActionType.ALL_IN)

        if strength == "medium":
            if to_call > bb * 6:
                return Decision(ActionType.CALL if roll < 0.3 else ActionType.FOLD)
            if ActionType.CALL in valid:
                return Decision(ActionType.CALL)
            if ActionType.CHECK in valid:
                return Decision(ActionType.CHECK)
            if ActionType.RAISE in valid and roll < 0.2:
                return Decision(ActionType.RAISE, _cap(state.current_bet + bb * 2, player))
            return Decision(ActionType.FOLD)

        if to_call <= 0 and ActionType.CHECK in valid:
            return Decision(ActionType.CHECK)
        if roll < 0.15 and ActionType.CALL in valid and to_call <= bb * 2:
            return Decision(ActionType.CALL)
        return Decision(ActionType.FOLD)

    def _postflop(self, state, player, valid, roll):
        tier = postflop_strength(player, state)
        to_call = state.current_bet - player.bet
        pot = state.pot
        bb = state.big_blind

        if tier == "very_strong":
            if player.chips < bb * 10 and ActionType.ALL_IN in valid:
                return Decision(ActionType.ALL_IN)
            if ActionType.RAISE in valid:
                target = state.current_bet + int(pot * (0.5 + roll * 0.5))
                return Decision(ActionType.RAISE, _cap(target, player))
            if ActionType.CALL in valid:
                return Decision(ActionType.CALL)
            if ActionType.CHECK in valid:
                return Decision(ActionType.CHECK)
            return Decision(ActionType.ALL_IN)

        if tier == "strong":
            if ActionType.RAISE in valid and roll < 0.4:
                return Decision(ActionType.RAISE, _cap(state.current_bet + pot // 2, player))
            if ActionType.CALL in valid:
                return Decision(ActionType.CALL)
            if ActionType.CHECK in valid:
                return Decision(ActionType.CHECK)
            return Decision(ActionType.FOLD)

        if tier == "medium":
            if to_call <= 0 and ActionType.CHECK in valid:
                if ActionType.RAISE in valid and roll < 0.3:
                    return Decision(ActionType.RAISE, _cap(state.current_bet + pot * 2 // 5, player))
                return Decision(ActionType.CHECK)
            if to_call * 10 <= pot * 3 and ActionType.CALL in valid:
                return Decision(ActionType.CALL)
            return Decision(ActionType.CALL if roll < 0.2 else ActionType.FOLD)

        if to_call <= 0 and ActionType.CHECK in valid:
            if state.phase == Phase.RIVER and roll < 0.1 and ActionType.RAISE in valid:
                return Decision(ActionType.RAISE, _cap(state.current_bet + pot // 2, player))
            return Decision(ActionType.CHECK)
        if to_call <= bb * 2 and roll < 0.15 and ActionType.CALL in valid:
            return Decision(ActionType.CALL)
        return Decision(ActionType.FOLD)


def _cap(target: int, player: PlayerState) -> int:
    return min(target, player.bet + player.chips)


def preflop_strength(player: PlayerState) -> str:
    """Bucket two hole cards into strong / medium / weak."""
    first, second = player.hole_cards[0], player.hole_cards[1]
    high, low = max(first.value, second.value), min(first.value, second.value)
    paired = high == low
    suited = first.suit == second.suit

    if paired and high >= 9:
        return "strong"
    if high == 14 and low >= 12:
        return "strong"
    if suited and ((high == 14 and low == 11) or (high == 13 and low == 12)):
        return "strong"

    if paired and high >= 5:
        return "medium"
    if high == 14:
        return "medium"
    if high == 13 and low >= 11:
        return "medium"
    if suited and high == 12 and low == 11:
        return "medium"
    if suited and high - low == 1 and low >= 8:
        return "medium"
    return "weak"


def postflop_strength(player: PlayerState, state: GameState) -> str:
    """Tier the best current hand: very_strong / strong / medium / weak."""
    value = evaluate(player.hole_cards, state.community_cards)
    if value.category >= HandCategory.THREE_OF_A_KIND:
        return "very_strong"
    if value.category >= HandCategory.TWO_PAIR:
        return "strong"
    if value.category == HandCategory.PAIR and state.community_cards:
        top_board = max(card.value for card in state.community_cards)
        if any(card.value == top_board or card.value >= 11 for card in player.hole_cards):
            return "medium"
    return "weak"


_FALLBACKS = {
    ActionType.CALL: (ActionType.CHECK, ActionType.ALL_IN, ActionType.FOLD),
    ActionType.RAISE: (ActionType.CALL, ActionType.CHECK, ActionType.ALL_IN, ActionType.FOLD),
    ActionType.ALL_IN: (ActionType.CALL, ActionType.CHECK, ActionType.FOLD),
    ActionType.CHECK: (ActionType.FOLD,),
}


def _legalize(decision: Decision, valid: Sequence[ActionType]) -> Decision:
    if decision.action in valid:
        return decision
    for fallback in _FALLBACKS[decision.action]:
        if fallback in valid:
            return Decision(fallback)
    return Decision(ActionType.FOLD)


def choose_action(
    state: GameState,
    player_id: str,
    rng: Optional[random.Random] = None,
    strategy: Optional[Strategy] = None,
) -> Decision:
    player = state.find_player(player_id)
    if player is None:
        return Decision(ActionType.FOLD)
    valid = get_valid_actions(state, player_id)
    if not valid:
        return Decision(ActionType.CHECK)

    roll = (rng or _RNG).random()
    decision = _legalize((strategy or HeuristicStrategy()).decide(state, player, valid, roll), valid)
    if decision.action is ActionType.RAISE and decision.amount is not None:
        # Small pots can size a bet below the minimum raise.
        decision = Decision(ActionType.RAISE, max(decision.amount, min_raise_to(state)))
    return decision
