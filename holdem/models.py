from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .cards import Card
from .evaluator import HandCategory


class Phase(str, Enum):
    WAITING = "waiting"
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"


BETTING_PHASES = (Phase.PREFLOP, Phase.FLOP, Phase.TURN, Phase.RIVER)


class ActionType(str, Enum):
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    RAISE = "raise"
    ALL_IN = "all_in"


@dataclass(frozen=True)
class Action:
    """One player decision. Only a raise carries an amount (the raise-to total)."""

    kind: ActionType
    amount: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ActionType):
            raise ValueError(f"Unsupported action {self.kind!r}")
        if self.amount is not None:
            if self.kind is not ActionType.RAISE:
                raise ValueError(f"{self.kind.value} does not take an amount")
            if isinstance(self.amount, bool) or not isinstance(self.amount, int):
                raise ValueError("Raise amount must be a whole number of chips")
            if self.amount <= 0:
                raise ValueError("Raise amount must be positive")


@dataclass(frozen=True)
class Blinds:
    small: int
    big: int

    def __post_init__(self) -> None:
        if self.small <= 0 or self.big < self.small:
            raise ValueError("Blinds must satisfy 0 < small <= big")


@dataclass(frozen=True)
class PlayerState:
    id: str
    name: str
    chips: int
    hole_cards: Tuple[Card, ...] = ()
    bet: int = 0
    total_bet: int = 0
    is_all_in: bool = False
    is_folded: bool = False
    is_dealer: bool = False
    is_ai: bool = False
    last_action: Optional[ActionType] = None

    @property
    def can_act(self) -> bool:
        return not self.is_folded and not self.is_all_in


@dataclass(frozen=True)
class SidePot:
    amount: int
    eligible_player_ids: Tuple[str, ...]


@dataclass(frozen=True)
class Winner:
    player_id: str
    amount: int
    category: Optional[HandCategory] = None
    description: str = ""


@dataclass(frozen=True)
class GameState:
    # One immutable snapshot of a hand; every action produces a new one.
    players: Tuple[PlayerState, ...]
    deck: Tuple[Card, ...]
    community_cards: Tuple[Card, ...] = ()
    phase: Phase = Phase.WAITING
    pot: int = 0
    side_pots: Tuple[SidePot, ...] = ()
    current_player_index: int = 0
    dealer_index: int = 0
    small_blind_index: int = 0
    big_blind_index: int = 0
    current_bet: int = 0
    small_blind: int = 0
    big_blind: int = 0
    hand_number: int = 1
    last_action: Optional[str] = None
    winners: Optional[Tuple[Winner, ...]] = field(default=None)

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.SHOWDOWN

    @property
    def current_player(self) -> Optional[PlayerState]:
        if self.phase not in BETTING_PHASES:
            return None
        return self.players[self.current_player_index]

    def find_player(self, player_id: str) -> Optional[PlayerState]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def index_of(self, player_id: str) -> int:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        return -1
