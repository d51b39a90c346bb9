from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class TableConfig:
    starting_chips: int = 1_000
    small_blind: int = 10
    big_blind: int = 20
    opponents: int = 3
    move_time_ms: int = 30_000
    ai_delay_ms: int = 800
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not 1 <= self.opponents <= 8:
            raise ValueError("opponents must be between 1 and 8")
        if self.small_blind <= 0 or self.big_blind < self.small_blind:
            raise ValueError("Blinds must satisfy 0 < small <= big")
        if self.starting_chips < self.big_blind:
            raise ValueError("starting_chips must cover the big blind")
