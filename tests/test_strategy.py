import random
from dataclasses import replace

import pytest

from holdem.cards import parse_cards
from holdem.game import apply_action, get_valid_actions, initialize_hand
from holdem.models import ActionType, Blinds, Phase
from holdem.strategy import (
    Decision,
    HeuristicStrategy,
    PassiveStrategy,
    Strategy,
    choose_action,
    postflop_strength,
    preflop_strength,
)

from .helpers import make_players, play_out, stacked_deck

BOARD = ["2c", "3d", "8s", "9c", "Jd"]


class FixedRandom(random.Random):
    """Returns the same roll every time and counts how often it was asked."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


class AlwaysRaise(Strategy):
    name = "always-raise"

    def decide(self, state, player, valid, roll):
        return Decision(ActionType.RAISE, 50)


def heads_up(hero, villain=("7c", "2d"), stacks=(100, 100)):
    deck = stacked_deck(0, [list(hero), list(villain)], BOARD)
    return initialize_hand(make_players(stacks, ai=True), 0, Blinds(1, 2), deck=deck)


@pytest.mark.parametrize(
    "hole, bucket",
    [
        (("Ah", "As"), "strong"),
        (("9h", "9s"), "strong"),
        (("Ah", "Kd"), "strong"),
        (("Ah", "Jh"), "strong"),
        (("Ah", "Jd"), "medium"),
        (("5h", "5s"), "medium"),
        (("Kh", "Jd"), "medium"),
        (("Th", "9h"), "medium"),
        (("4h", "4s"), "weak"),
        (("7h", "2d"), "weak"),
    ],
)
def test_preflop_strength_buckets(hole, bucket):
    player = make_players([100])[0]
    assert preflop_strength(replace(player, hole_cards=tuple(parse_cards(hole)))) == bucket


@pytest.mark.parametrize(
    "hole, board, tier",
    [
        (("7c", "7d"), ["7h", "2s", "Kd"], "very_strong"),
        (("Kc", "2c"), ["Kd", "2s", "9h"], "strong"),
        (("Kc", "4d"), ["Kd", "2s", "9h"], "medium"),
        (("Jc", "2d"), ["Kd", "2s", "9h"], "medium"),
        (("5c", "2d"), ["Kd", "2s", "9h"], "weak"),
        (("5c", "3d"), ["Kd", "8s", "9h"], "weak"),
    ],
)
def test_postflop_strength_tiers(hole, board, tier):
    state = replace(heads_up(("Ah", "As")), community_cards=tuple(parse_cards(board)), phase=Phase.FLOP)
    player = replace(state.players[0], hole_cards=tuple(parse_cards(hole)))
    assert postflop_strength(player, state) == tier


def test_strong_preflop_hand_raises_by_roll():
    state = heads_up(("Ah", "Ad"))
    player = state.players[0]
    valid = get_valid_actions(state, player.id)
    strategy = HeuristicStrategy()
    assert strategy.decide(state, player, valid, 0.1) == Decision(ActionType.RAISE, 8)
    assert strategy.decide(state, player, valid, 0.9) == Decision(ActionType.RAISE, 10)


def test_choose_action_draws_exactly_one_roll():
    state = heads_up(("Ah", "Ad"))
    rng = FixedRandom(0.1)
    assert choose_action(state, "p0", rng=rng) == Decision(ActionType.RAISE, 8)
    assert rng.calls == 1


def test_choose_action_without_a_decision_to_make():
    state = heads_up(("Ah", "Ad"), stacks=(100, 2))
    assert state.players[1].is_all_in
    rng = FixedRandom(0.5)
    assert choose_action(state, "ghost", rng=rng) == Decision(ActionType.FOLD)
    assert choose_action(state, "p1", rng=rng) == Decision(ActionType.CHECK)
    assert rng.calls == 0


def test_weak_hand_takes_the_free_check():
    state = heads_up(("Ah", "Ad"))
    state = apply_action(state, "p0", ActionType.CALL)
    assert state.current_player.id == "p1"
    assert choose_action(state, "p1", rng=FixedRandom(0.9)) == Decision(ActionType.CHECK)


def test_weak_hand_folds_to_a_raise():
    state = heads_up(("Ah", "Ad"))
    state = apply_action(state, "p0", ActionType.RAISE, 20)
    assert choose_action(state, "p1", rng=FixedRandom(0.9)) == Decision(ActionType.FOLD)


def test_passive_strategy_never_bets():
    state = heads_up(("Ah", "Ad"))
    passive = PassiveStrategy()
    assert choose_action(state, "p0", rng=FixedRandom(0.0), strategy=passive) == Decision(ActionType.CALL)
    state = apply_action(state, "p0", ActionType.CALL)
    assert choose_action(state, "p1", rng=FixedRandom(0.0), strategy=passive) == Decision(ActionType.CHECK)


def test_custom_strategy_is_legalized():
    state = heads_up(("Ah", "Ad"))
    assert choose_action(state, "p0", strategy=AlwaysRaise()) == Decision(ActionType.RAISE, 50)

    short = heads_up(("Ah", "Ad"), stacks=(2, 100))
    assert get_valid_actions(short, "p0") == (ActionType.FOLD, ActionType.ALL_IN)
    assert choose_action(short, "p0", strategy=AlwaysRaise()) == Decision(ActionType.ALL_IN)


@pytest.mark.parametrize("seed", range(25))
def test_heuristic_decisions_are_always_legal(seed):
    rng = random.Random(seed)
    stacks = [rng.randint(20, 400) for _ in range(rng.randint(2, 6))]
    state = initialize_hand(make_players(stacks, ai=True), 0, Blinds(5, 10), rng=rng)
    for snapshot in play_out(state, rng):
        actor = snapshot.current_player
        if actor is None:
            continue
        decision = choose_action(snapshot, actor.id, rng=random.Random(seed))
        assert decision.action in get_valid_actions(snapshot, actor.id)
        if decision.amount is not None:
            assert decision.action is ActionType.RAISE
            assert decision.amount <= actor.bet + actor.chips


def test_undersized_raise_is_lifted_to_the_minimum():
    class TinyRaise(Strategy):
        def decide(self, state, player, valid, roll):
            return Decision(ActionType.RAISE, 1)

    state = heads_up(("Ah", "Ad"))
    assert choose_action(state, "p0", strategy=TinyRaise()) == Decision(ActionType.RAISE, 4)
