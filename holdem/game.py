from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .cards import Card, create_deck, deal
from .evaluator import HandValue, evaluate
from .models import (
    BETTING_PHASES,
    Action,
    ActionType,
    Blinds,
    GameState,
    Phase,
    PlayerState,
    Winner,
)
from .pots import build_side_pots

# Pure hand state machine. Every public function takes a snapshot and returns
# a new one; nothing here mutates its inputs or touches I/O.

LOGGER = logging.getLogger(__name__)

_NEXT_STREET = {
    Phase.PREFLOP: (Phase.FLOP, 3),
    Phase.FLOP: (Phase.TURN, 1),
    Phase.TURN: (Phase.RIVER, 1),
}


# Hand lifecycle --------------------------------------------------------

def initialize_hand(
    players: Sequence[PlayerState],
    dealer_index: int,
    blinds: Union[Blinds, Tuple[int, int]],
    hand_number: int = 1,
    rng: Optional[random.Random] = None,
    deck: Optional[Sequence[Card]] = None,
) -> GameState:
    """Deal a new hand and post the blinds.

    ``deck`` replaces the shuffled deck when given; cards are dealt from its end.
    """
    if len(players) < 2:
        raise ValueError("At least two players are required")
    if not 0 <= dealer_index < len(players):
        raise ValueError(f"Dealer index {dealer_index} out of range")
    if any(player.chips <= 0 for player in players):
        raise ValueError("Every seated player needs chips to start a hand")
    if not isinstance(blinds, Blinds):
        blinds = Blinds(*blinds)

    cards = list(deck) if deck is not None else create_deck(rng)
    count = len(players)

    holes: List[List[Card]] = [[] for _ in range(count)]
    for _ in range(2):
        for offset in range(count):
            holes[(dealer_index + 1 + offset) % count].extend(deal(cards, 1))

    seats = [
        replace(
            player,
            hole_cards=tuple(holes[idx]),
            bet=0,
            total_bet=0,
            is_all_in=False,
            is_folded=False,
            is_dealer=idx == dealer_index,
            last_action=None,
        )
        for idx, player in enumerate(players)
    ]

    if count == 2:
        sb_index = dealer_index
        bb_index = (dealer_index + 1) % count
    else:
        sb_index = (dealer_index + 1) % count
        bb_index = (dealer_index + 2) % count
    seats[sb_index] = _commit(seats[sb_index], blinds.small)
    seats[bb_index] = _commit(seats[bb_index], blinds.big)

    first = _next_seat(seats, bb_index)
    state = GameState(
        players=tuple(seats),
        deck=tuple(cards),
        phase=Phase.PREFLOP,
        pot=sum(seat.total_bet for seat in seats),
        current_player_index=first if first != -1 else bb_index,
        dealer_index=dealer_index,
        small_blind_index=sb_index,
        big_blind_index=bb_index,
        current_bet=blinds.big,
        small_blind=blinds.small,
        big_blind=blinds.big,
        hand_number=hand_number,
    )
    LOGGER.debug(
        "Hand %s dealt: dealer=%s sb=%s bb=%s pot=%s",
        hand_number,
        dealer_index,
        sb_index,
        bb_index,
        state.pot,
    )

    # Blinds alone can leave nobody with a decision to make.
    actionable = [seat for seat in seats if seat.can_act]
    if not actionable or (len(actionable) == 1 and actionable[0].bet >= state.current_bet):
        return _close_round(state)
    return state


def _commit(player: PlayerState, amount: int) -> PlayerState:
    amount = min(amount, player.chips)
    chips = player.chips - amount
    return replace(
        player,
        chips=chips,
        bet=player.bet + amount,
        total_bet=player.total_bet + amount,
        is_all_in=chips == 0,
    )


def _next_seat(players: Sequence[PlayerState], start: int) -> int:
    """First seat after ``start`` that can still act, or -1."""
    count = len(players)
    for step in range(1, count + 1):
        idx = (start + step) % count
        if players[idx].can_act:
            return idx
    return -1


# Action handling ---------------------------------------------------------

def get_valid_actions(state: GameState, player_id: str) -> Tuple[ActionType, ...]:
    player = state.find_player(player_id)
    if player is None or not player.can_act or state.phase not in BETTING_PHASES:
        return ()

    legal: List[ActionType] = [ActionType.FOLD]
    to_call = state.current_bet - player.bet
    if to_call <= 0:
        legal.append(ActionType.CHECK)
    # A stack that cannot fully cover the call is only offered all-in.
    if to_call > 0 and player.chips > to_call:
        legal.append(ActionType.CALL)
    if player.chips > state.current_bet + state.big_blind - player.bet:
        legal.append(ActionType.RAISE)
    if player.chips > 0:
        legal.append(ActionType.ALL_IN)
    return tuple(legal)


def min_raise_to(state: GameState) -> int:
    return state.current_bet + state.big_blind


def apply_action(
    state: GameState,
    player_id: str,
    action: Union[Action, ActionType, str],
    amount: Optional[int] = None,
) -> GameState:
    """Apply one decision and return the next snapshot.

    Stale or illegal input (unknown player, out of turn, finished hand, an
    action not in ``get_valid_actions``) returns ``state`` unchanged.
    """
    decision = _coerce(action, amount)
    if decision is None:
        LOGGER.debug("Ignoring malformed action %r from %s", action, player_id)
        return state

    idx = state.index_of(player_id)
    if idx == -1:
        LOGGER.debug("Ignoring %s from unknown player %s", decision.kind.value, player_id)
        return state
    if state.phase not in BETTING_PHASES or idx != state.current_player_index:
        LOGGER.debug("Ignoring %s from %s: not their turn", decision.kind.value, player_id)
        return state
    if decision.kind not in get_valid_actions(state, player_id):
        LOGGER.debug("Ignoring illegal %s from %s", decision.kind.value, player_id)
        return state

    player = state.players[idx]
    current_bet = state.current_bet
    reopened = False

    if decision.kind is ActionType.FOLD:
        updated = replace(player, is_folded=True)
        text = f"{player.name} folded"
    elif decision.kind is ActionType.CHECK:
        updated = player
        text = f"{player.name} checked"
    elif decision.kind is ActionType.CALL:
        updated = _commit(player, current_bet - player.bet)
        text = f"{player.name} called ${updated.bet - player.bet}"
    elif decision.kind is ActionType.RAISE:
        floor = min_raise_to(state)
        ceiling = player.bet + player.chips
        target = decision.amount if decision.amount is not None else floor
        target = max(floor, min(target, ceiling))
        updated = _commit(player, target - player.bet)
        current_bet = updated.bet
        reopened = True
        text = f"{player.name} raised to ${current_bet}"
    elif decision.kind is ActionType.ALL_IN:
        updated = _commit(player, player.chips)
        if updated.bet > current_bet:
            current_bet = updated.bet
            reopened = True
        text = f"{player.name} went all-in for ${updated.bet - player.bet}"
    else:
        raise ValueError(f"Unsupported action {decision.kind}")

    updated = replace(updated, last_action=decision.kind)
    paid = updated.total_bet - player.total_bet

    players = list(state.players)
    players[idx] = updated
    if reopened:
        # Everyone still able to act must answer the new bet.
        for other, seat in enumerate(players):
            if other != idx and seat.can_act and seat.last_action is not None:
                players[other] = replace(seat, last_action=None)

    state = replace(
        state,
        players=tuple(players),
        pot=state.pot + paid,
        current_bet=current_bet,
        last_action=text,
    )
    LOGGER.debug("Hand %s: %s", state.hand_number, text)

    if _round_complete(state):
        return _close_round(state)

    next_idx = _next_to_act(state.players, idx, current_bet)
    if next_idx == -1:
        return _close_round(state)
    return replace(state, current_player_index=next_idx)


def _coerce(action: Union[Action, ActionType, str], amount: Optional[int]) -> Optional[Action]:
    if isinstance(action, Action):
        return action
    try:
        kind = ActionType(action)
        return Action(kind, amount if kind is ActionType.RAISE else None)
    except ValueError:
        return None


def _round_complete(state: GameState) -> bool:
    live = [player for player in state.players if not player.is_folded]
    if len(live) <= 1:
        return True
    active = [player for player in live if not player.is_all_in]
    if not active:
        return True
    if len(active) == 1 and active[0].bet >= state.current_bet:
        return True
    return all(
        player.bet == state.current_bet and player.last_action is not None for player in active
    )


def _next_to_act(players: Sequence[PlayerState], start: int, current_bet: int) -> int:
    count = len(players)
    for step in range(1, count + 1):
        idx = (start + step) % count
        player = players[idx]
        if player.can_act and (player.last_action is None or player.bet < current_bet):
            return idx
    return -1


# Street transitions ------------------------------------------------------

def _close_round(state: GameState) -> GameState:
    state = replace(state, side_pots=build_side_pots(state.players))
    return _advance_phase(state)


def _advance_phase(state: GameState) -> GameState:
    while True:
        live = [player for player in state.players if not player.is_folded]
        if len(live) <= 1 or state.phase == Phase.RIVER:
            return _showdown(state)

        next_phase, count = _NEXT_STREET[state.phase]
        deck = list(state.deck)
        dealt = deal(deck, count)
        players = tuple(replace(player, bet=0, last_action=None) for player in state.players)
        state = replace(
            state,
            players=players,
            deck=tuple(deck),
            community_cards=state.community_cards + tuple(dealt),
            phase=next_phase,
            current_bet=0,
        )
        LOGGER.debug(
            "Hand %s: %s %s",
            state.hand_number,
            next_phase.value,
            " ".join(card.label for card in dealt),
        )

        # With at most one seat able to bet, run the board out.
        if sum(1 for player in players if player.can_act) <= 1:
            continue
        return replace(state, current_player_index=_next_seat(players, state.dealer_index))


def _showdown(state: GameState) -> GameState:
    winners = determine_winners(state)
    LOGGER.debug(
        "Hand %s finished: %s",
        state.hand_number,
        ", ".join(f"{winner.player_id}+{winner.amount}" for winner in winners),
    )
    return replace(
        state,
        phase=Phase.SHOWDOWN,
        side_pots=build_side_pots(state.players),
        winners=winners,
    )


def determine_winners(state: GameState) -> Tuple[Winner, ...]:
    """Award every pot layer to its best eligible hand(s)."""
    live = [player for player in state.players if not player.is_folded]
    if len(live) == 1:
        total = sum(player.total_bet for player in state.players)
        return (Winner(player_id=live[0].id, amount=total, description="Uncontested"),)

    values: Dict[str, HandValue] = {
        player.id: evaluate(player.hole_cards, state.community_cards) for player in live
    }
    seat_order = {player.id: idx for idx, player in enumerate(state.players)}
    totals: Dict[str, int] = {}

    for pot in build_side_pots(state.players):
        contenders = [pid for pid in pot.eligible_player_ids if pid in values]
        if not contenders:
            continue
        best = max(values[pid].score for pid in contenders)
        tied = sorted((pid for pid in contenders if values[pid].score == best), key=seat_order.__getitem__)
        share, remainder = divmod(pot.amount, len(tied))
        for position, pid in enumerate(tied):
            payout = share + (remainder if position == 0 else 0)
            totals[pid] = totals.get(pid, 0) + payout

    return tuple(
        Winner(
            player_id=pid,
            amount=amount,
            category=values[pid].category,
            description=values[pid].description,
        )
        for pid, amount in sorted(totals.items(), key=lambda item: seat_order[item[0]])
    )
