"""No-Limit Texas Hold'em hand engine: deck, evaluator, pots, betting and AI."""

from .cards import RANKS, SUITS, Card, create_deck, deal, parse_cards, parse_label
from .evaluator import HandCategory, HandValue, evaluate
from .game import apply_action, determine_winners, get_valid_actions, initialize_hand
from .models import (
    Action,
    ActionType,
    Blinds,
    GameState,
    Phase,
    PlayerState,
    SidePot,
    Winner,
)
from .pots import build_side_pots
from .strategy import Decision, HeuristicStrategy, PassiveStrategy, Strategy, choose_action
from .views import public_view

__all__ = [
    "RANKS",
    "SUITS",
    "Card",
    "create_deck",
    "deal",
    "parse_cards",
    "parse_label",
    "HandCategory",
    "HandValue",
    "evaluate",
    "apply_action",
    "determine_winners",
    "get_valid_actions",
    "initialize_hand",
    "Action",
    "ActionType",
    "Blinds",
    "GameState",
    "Phase",
    "PlayerState",
    "SidePot",
    "Winner",
    "build_side_pots",
    "Decision",
    "HeuristicStrategy",
    "PassiveStrategy",
    "Strategy",
    "choose_action",
    "public_view",
]
