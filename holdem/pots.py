"""Side-pot accounting: split hand contributions into layers by all-in level."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import PlayerState, SidePot


def build_side_pots(players: Sequence[PlayerState]) -> Tuple[SidePot, ...]:
    """Return pot layers ordered from the main pot upward.

    Folded players' chips stay in the layers they reached but they are never
    eligible. The layer amounts always add up to the sum of contributions.
    """
    total = sum(player.total_bet for player in players)
    if total <= 0:
        return ()

    live = [player for player in players if not player.is_folded]
    caps = sorted({player.total_bet for player in live if player.is_all_in})
    if not caps:
        return (SidePot(amount=total, eligible_player_ids=tuple(player.id for player in live)),)

    layers: List[SidePot] = []
    previous = 0
    for cap in caps:
        amount = sum(
            min(player.total_bet, cap) - min(player.total_bet, previous) for player in players
        )
        eligible = tuple(player.id for player in live if player.total_bet >= cap)
        _add_layer(layers, amount, eligible)
        previous = cap

    top = caps[-1]
    overflow = sum(max(0, player.total_bet - top) for player in players)
    eligible = tuple(player.id for player in live if player.total_bet > top)
    _add_layer(layers, overflow, eligible)
    return tuple(layers)


def _add_layer(layers: List[SidePot], amount: int, eligible: Tuple[str, ...]) -> None:
    if amount <= 0:
        return
    if not eligible and layers:
        # Only folded chips reach this level; they stay with the layer below.
        below = layers[-1]
        layers[-1] = SidePot(amount=below.amount + amount, eligible_player_ids=below.eligible_player_ids)
        return
    layers.append(SidePot(amount=amount, eligible_player_ids=eligible))
