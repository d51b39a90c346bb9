from __future__ import annotations

import itertools
from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

from .cards import Card

KICKER_BASE = 15
KICKER_SLOTS = 5


class HandCategory(IntEnum):
    """Hand categories ordered from weakest to strongest."""

    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def slug(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class HandValue:
    category: HandCategory
    score: int
    description: str
    cards: Tuple[Card, ...] = ()


_PLURAL = {11: "Jacks", 12: "Queens", 13: "Kings", 14: "Aces"}
_SINGULAR = {11: "Jack", 12: "Queen", 13: "King", 14: "Ace"}


def _plural(value: int) -> str:
    return _PLURAL.get(value, f"{value}s")


def _singular(value: int) -> str:
    return _SINGULAR.get(value, str(value))


def encode_score(category: HandCategory, kickers: Sequence[int]) -> int:
    """Pack the category and up to five kickers into one comparable integer."""
    score = int(category) * KICKER_BASE**KICKER_SLOTS
    for idx, kicker in enumerate(kickers[:KICKER_SLOTS]):
        score += kicker * KICKER_BASE ** (KICKER_SLOTS - 1 - idx)
    return score


def evaluate(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> HandValue:
    """Best hand from hole + community cards.

    With five or more cards every 5-card subset is scored and the highest wins.
    With fewer, the available cards are ranked by grouping alone; such scores
    are only meaningful relative to each other.
    """
    pool = list(hole_cards) + list(community_cards)
    if len(pool) < 5:
        return evaluate_five(pool)

    best: Optional[HandValue] = None
    for combo in itertools.combinations(pool, 5):
        value = evaluate_five(combo)
        if best is None or value.score > best.score:
            best = value
    assert best is not None
    return best


def evaluate_five(cards: Sequence[Card]) -> HandValue:
    category, kickers = _classify(cards)
    return HandValue(
        category=category,
        score=encode_score(category, kickers),
        description=_describe(category, kickers),
        cards=tuple(cards),
    )


def _classify(cards: Sequence[Card]) -> Tuple[HandCategory, List[int]]:
    values = sorted((card.value for card in cards), reverse=True)
    if not values:
        return HandCategory.HIGH_CARD, []

    counts = Counter(values)
    ordered = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    grouped = [value for value, _ in ordered]
    shape = [count for _, count in ordered]

    complete = len(cards) == 5
    is_flush = complete and len({card.suit for card in cards}) == 1
    straight_high = _straight_high(values) if complete else None

    if is_flush and straight_high:
        if straight_high == 14:
            return HandCategory.ROYAL_FLUSH, [14]
        return HandCategory.STRAIGHT_FLUSH, [straight_high]
    if shape[0] == 4:
        return HandCategory.FOUR_OF_A_KIND, grouped
    if shape[0] == 3 and len(shape) > 1 and shape[1] == 2:
        return HandCategory.FULL_HOUSE, grouped
    if is_flush:
        return HandCategory.FLUSH, values
    if straight_high:
        return HandCategory.STRAIGHT, [straight_high]
    if shape[0] == 3:
        return HandCategory.THREE_OF_A_KIND, grouped
    if shape[0] == 2 and len(shape) > 1 and shape[1] == 2:
        return HandCategory.TWO_PAIR, grouped
    if shape[0] == 2:
        return HandCategory.PAIR, grouped
    return HandCategory.HIGH_CARD, values


def _straight_high(values: Sequence[int]) -> Optional[int]:
    unique = sorted(set(values), reverse=True)
    if len(unique) != 5:
        return None
    if unique[0] - unique[4] == 4:
        return unique[0]
    if unique == [14, 5, 4, 3, 2]:  # wheel plays five-high
        return 5
    return None


def _describe(category: HandCategory, kickers: Sequence[int]) -> str:
    if not kickers:
        return "High Card"
    top = kickers[0]
    if category is HandCategory.ROYAL_FLUSH:
        return "Royal Flush"
    if category is HandCategory.STRAIGHT_FLUSH:
        return f"Straight Flush, {_singular(top)} high"
    if category is HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(top)}"
    if category is HandCategory.FULL_HOUSE:
        return f"Full House, {_plural(top)} over {_plural(kickers[1])}"
    if category is HandCategory.FLUSH:
        return f"Flush, {_singular(top)} high"
    if category is HandCategory.STRAIGHT:
        return f"Straight, {_singular(top)} high"
    if category is HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(top)}"
    if category is HandCategory.TWO_PAIR:
        return f"Two Pair, {_plural(top)} and {_plural(kickers[1])}"
    if category is HandCategory.PAIR:
        return f"Pair of {_plural(top)}"
    return f"High Card, {_singular(top)}"
