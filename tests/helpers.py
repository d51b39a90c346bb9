from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence

from holdem.cards import RANKS, SUITS, Card, parse_cards
from holdem.game import apply_action, get_valid_actions
from holdem.models import ActionType, GameState, PlayerState
from holdem.strategy import choose_action


def make_players(stacks: Sequence[int], ai: bool = False) -> List[PlayerState]:
    return [
        PlayerState(id=f"p{idx}", name=f"Player{idx}", chips=stack, is_ai=ai)
        for idx, stack in enumerate(stacks)
    ]


def stacked_deck(dealer_index: int, holes: Sequence[Sequence[str]], board: Sequence[str]) -> List[Card]:
    """Arrange a deck so each seat receives ``holes[seat]`` and the board runs out in order."""
    count = len(holes)
    sequence: List[Card] = []
    for round_idx in range(2):
        for offset in range(count):
            seat = (dealer_index + 1 + offset) % count
            sequence.append(parse_cards(holes[seat])[round_idx])
    sequence.extend(parse_cards(board))
    used = set(sequence)
    filler = [Card(rank, suit) for suit in SUITS for rank in RANKS if Card(rank, suit) not in used]
    # Dealing pops from the end of the deck.
    return filler + list(reversed(sequence))


def act(state: GameState, action: ActionType, amount: Optional[int] = None) -> GameState:
    """Apply an action for whoever is currently due to act."""
    actor = state.current_player
    assert actor is not None, "no player is due to act"
    return apply_action(state, actor.id, action, amount)


def check_down(state: GameState, limit: int = 200) -> GameState:
    """Check or call for every actor until the hand ends."""
    for _ in range(limit):
        if state.is_over:
            return state
        actor = state.current_player
        legal = get_valid_actions(state, actor.id)
        if ActionType.CHECK in legal:
            state = apply_action(state, actor.id, ActionType.CHECK)
        elif ActionType.CALL in legal:
            state = apply_action(state, actor.id, ActionType.CALL)
        else:
            state = apply_action(state, actor.id, ActionType.ALL_IN)
    raise AssertionError("hand did not finish")


def play_out(state: GameState, rng: random.Random, limit: int = 500) -> Iterable[GameState]:
    """Yield every snapshot while heuristic decisions drive the hand to showdown."""
    yield state
    for _ in range(limit):
        if state.is_over:
            return
        actor = state.current_player
        decision = choose_action(state, actor.id, rng=rng)
        state = apply_action(state, actor.id, decision.action, decision.amount)
        yield state
    raise AssertionError("hand did not finish")


def chips_in_play(state: GameState) -> int:
    return sum(player.chips + player.total_bet for player in state.players)
