from __future__ import annotations

from typing import Dict, List, Optional

from .cards import cards_to_labels
from .game import get_valid_actions, min_raise_to
from .models import GameState, Phase

# JSON-ready projections of a snapshot for renderers and spectators. Hole cards
# are hidden unless the viewer owns them or the hand reached a contested showdown.


def public_view(state: GameState, viewer_id: Optional[str] = None) -> Dict[str, object]:
    live = [player for player in state.players if not player.is_folded]
    contested = state.phase == Phase.SHOWDOWN and len(live) > 1
    current = state.current_player

    seats: List[Dict[str, object]] = []
    for idx, player in enumerate(state.players):
        reveal = player.id == viewer_id or (contested and not player.is_folded)
        seats.append(
            {
                "seat": idx,
                "id": player.id,
                "name": player.name,
                "chips": player.chips,
                "bet": player.bet,
                "total_bet": player.total_bet,
                "is_all_in": player.is_all_in,
                "is_folded": player.is_folded,
                "is_dealer": player.is_dealer,
                "is_ai": player.is_ai,
                "last_action": player.last_action.value if player.last_action else None,
                "hole": cards_to_labels(player.hole_cards) if reveal else None,
            }
        )

    payload: Dict[str, object] = {
        "hand_number": state.hand_number,
        "phase": state.phase.value,
        "pot": state.pot,
        "side_pots": [
            {"amount": pot.amount, "eligible": list(pot.eligible_player_ids)}
            for pot in state.side_pots
        ],
        "community": cards_to_labels(state.community_cards),
        "current_bet": state.current_bet,
        "blinds": {"small": state.small_blind, "big": state.big_blind},
        "dealer_index": state.dealer_index,
        "small_blind_index": state.small_blind_index,
        "big_blind_index": state.big_blind_index,
        "next_actor": current.id if current else None,
        "last_action": state.last_action,
        "seats": seats,
        "winners": None,
    }
    if state.winners is not None:
        payload["winners"] = [
            {
                "id": winner.player_id,
                "amount": winner.amount,
                "hand": winner.category.slug if winner.category else None,
                "description": winner.description,
            }
            for winner in state.winners
        ]

    if current is not None and current.id == viewer_id:
        payload["legal"] = [action.value for action in get_valid_actions(state, viewer_id)]
        payload["to_call"] = max(state.current_bet - current.bet, 0)
        payload["min_raise_to"] = min_raise_to(state)
        payload["max_raise_to"] = current.bet + current.chips
    return payload
