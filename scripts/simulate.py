#!/usr/bin/env python3
"""Play many AI-only hands in-process and check chip conservation.

Every seat is driven by a strategy, so no terminal input is needed. The total
number of chips on the table must be identical before and after every hand.

Example:
    python scripts/simulate.py --players 6 --hands 500 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import random
from collections import Counter

from holdem.models import PlayerState
from holdem.strategy import HeuristicStrategy, PassiveStrategy
from table.config import TableConfig
from table.session import TableSession

LOGGER = logging.getLogger("holdem_simulate")

STRATEGIES = {"heuristic": HeuristicStrategy, "passive": PassiveStrategy}


def run_simulation(args: argparse.Namespace) -> Counter:
    config = TableConfig(
        starting_chips=args.starting_chips,
        small_blind=args.sb,
        big_blind=args.bb,
        opponents=args.players - 1,
        seed=args.seed,
    )
    players = [
        PlayerState(id=f"bot-{idx}", name=f"SimBot{idx}", chips=config.starting_chips, is_ai=True)
        for idx in range(args.players)
    ]
    session = TableSession(
        config,
        rng=random.Random(args.seed),
        strategy=STRATEGIES[args.strategy](),
        players=players,
    )

    categories: Counter = Counter()
    for _ in range(args.hands):
        session.start_hand()
        before = session.total_chips()
        state = session.run_ai_turns()
        for winner in state.winners or ():
            categories[winner.category.slug if winner.category else "uncontested"] += 1
        session.finish_hand()
        after = session.total_chips()
        if after != before:
            raise RuntimeError(f"Chip total drifted from {before} to {after} in hand {state.hand_number}")
        LOGGER.debug("Hand %s: %s", state.hand_number, state.last_action)

    LOGGER.info("Played %s hands; stacks: %s", args.hands, {p.name: p.chips for p in session.players})
    return categories


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run AI-only Hold'em hands and verify chip totals")
    parser.add_argument("--players", type=int, default=6)
    parser.add_argument("--hands", type=int, default=200)
    parser.add_argument("--starting-chips", type=int, default=1_000)
    parser.add_argument("--sb", type=int, default=10)
    parser.add_argument("--bb", type=int, default=20)
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="heuristic")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    categories = run_simulation(args)
    for name, count in categories.most_common():
        LOGGER.info("%-16s %s", name, count)


if __name__ == "__main__":
    main()
