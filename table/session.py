from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import replace
from typing import Deque, Dict, List, Optional

from holdem.game import apply_action, get_valid_actions, initialize_hand
from holdem.models import ActionType, Blinds, GameState, PlayerState
from holdem.strategy import HeuristicStrategy, Strategy, choose_action

from .config import TableConfig

LOGGER = logging.getLogger("holdem_table")

HUMAN_ID = "human"
AI_NAMES = ("Lucky", "Ace", "Bluff King", "Shark", "Maverick", "Wildcard", "Dealer Dan", "River Rat")

# TableSession plays the host role around the pure engine: it owns stacks
# between hands, rotates the button and credits winnings after showdown.


class TableError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def build_players(config: TableConfig, human_name: str, rng: random.Random) -> List[PlayerState]:
    names = list(AI_NAMES)
    rng.shuffle(names)
    players = [PlayerState(id=HUMAN_ID, name=human_name, chips=config.starting_chips)]
    for idx in range(config.opponents):
        players.append(
            PlayerState(
                id=f"ai-{idx}",
                name=names[idx % len(names)],
                chips=config.starting_chips,
                is_ai=True,
            )
        )
    return players


class TableSession:
    """One human against heuristic seats, hand after hand."""

    def __init__(
        self,
        config: TableConfig,
        human_name: str = "You",
        rng: Optional[random.Random] = None,
        strategy: Optional[Strategy] = None,
        players: Optional[List[PlayerState]] = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.strategy = strategy or HeuristicStrategy()
        self.players = list(players) if players is not None else build_players(config, human_name, self.rng)
        self.dealer_index = -1
        self.hand_number = 0
        self.state: Optional[GameState] = None
        self.settled = True
        self.history: Deque[str] = deque(maxlen=5)

    # Hand lifecycle --------------------------------------------------

    @property
    def human(self) -> Optional[PlayerState]:
        source = self.state.players if self.state and not self.settled else self.players
        for player in source:
            if not player.is_ai:
                return player
        return None

    @property
    def needs_rebuy(self) -> bool:
        human = self.human
        return self.settled and human is not None and human.chips <= 0

    def total_chips(self) -> int:
        if self.state is not None and not self.settled:
            return sum(player.chips for player in self.state.players) + self.state.pot
        return sum(player.chips for player in self.players)

    def start_hand(self) -> GameState:
        if not self.settled:
            raise RuntimeError("Current hand has not been settled")
        if self.needs_rebuy:
            raise TableError("REBUY_REQUIRED", "Human seat has no chips left")

        seated = [player for player in self.players if player.chips > 0]
        if len(seated) < 2:
            # Restock the computer seats so the human always has a game.
            self.players = [
                replace(player, chips=self.config.starting_chips) if player.is_ai and player.chips <= 0 else player
                for player in self.players
            ]
            seated = [player for player in self.players if player.chips > 0]
            LOGGER.info("Restocked busted AI seats")
        if len(seated) < 2:
            raise RuntimeError("Not enough active players to start a hand")

        self.players = seated
        self.dealer_index = (self.dealer_index + 1) % len(seated)
        self.hand_number += 1
        self.history.clear()
        self.state = initialize_hand(
            self.players,
            self.dealer_index,
            Blinds(self.config.small_blind, self.config.big_blind),
            self.hand_number,
            rng=self.rng,
        )
        self.settled = False
        LOGGER.info(
            "Hand %s started: dealer=%s players=%s",
            self.hand_number,
            self.players[self.dealer_index].name,
            len(self.players),
        )
        return self.state

    def finish_hand(self) -> Dict[str, int]:
        """Credit the showdown results back onto the stacks."""
        state = self._require_state()
        if not state.is_over:
            raise TableError("HAND_IN_PROGRESS", "Hand has not reached showdown")
        if self.settled:
            return {}

        winnings: Dict[str, int] = {}
        for winner in state.winners or ():
            winnings[winner.player_id] = winnings.get(winner.player_id, 0) + winner.amount
        self.players = [
            replace(player, chips=player.chips + winnings.get(player.id, 0)) for player in state.players
        ]
        self.settled = True
        LOGGER.info(
            "Hand %s settled: %s",
            state.hand_number,
            ", ".join(f"{pid}+{amount}" for pid, amount in winnings.items()),
        )
        return winnings

    def rebuy(self, player_id: str = HUMAN_ID) -> PlayerState:
        if not self.settled:
            raise TableError("HAND_IN_PROGRESS", "Cannot rebuy during a hand")
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                if player.is_ai:
                    raise TableError("NOT_HUMAN", "Only the human seat can rebuy")
                if player.chips > 0:
                    raise TableError("HAS_CHIPS", "Rebuy is only offered to a busted seat")
                self.players[idx] = replace(player, chips=self.config.starting_chips)
                LOGGER.info("%s rebought for %s", player.name, self.config.starting_chips)
                return self.players[idx]
        raise TableError("UNKNOWN_PLAYER", f"No seat for {player_id}")

    # Actions -----------------------------------------------------------

    def act(self, player_id: str, action: ActionType, amount: Optional[int] = None) -> GameState:
        state = self._require_state()
        current = state.current_player
        if current is None or current.id != player_id:
            raise TableError("OUT_OF_TURN", "Not your turn")
        if action not in get_valid_actions(state, player_id):
            raise TableError("ILLEGAL_ACTION", f"{action} is not allowed now")

        updated = apply_action(state, player_id, action, amount)
        if updated is state:
            raise TableError("ILLEGAL_ACTION", f"Invalid raise amount: {amount}")
        self.state = updated
        if updated.last_action:
            self.history.append(updated.last_action)
        return updated

    def play_ai_turn(self) -> GameState:
        state = self._require_state()
        current = state.current_player
        if current is None or not current.is_ai:
            raise TableError("OUT_OF_TURN", "No AI seat is due to act")
        decision = choose_action(state, current.id, rng=self.rng, strategy=self.strategy)
        return self.act(current.id, decision.action, decision.amount)

    def run_ai_turns(self) -> GameState:
        """Let AI seats act until the human is up or the hand ends."""
        state = self._require_state()
        while not state.is_over and state.current_player is not None and state.current_player.is_ai:
            state = self.play_ai_turn()
        return state

    def timeout_fold(self) -> GameState:
        state = self._require_state()
        current = state.current_player
        if current is None or current.is_ai:
            raise TableError("OUT_OF_TURN", "No human seat is due to act")
        LOGGER.info("%s timed out and folds", current.name)
        return self.act(current.id, ActionType.FOLD)

    def _require_state(self) -> GameState:
        if self.state is None:
            raise TableError("NO_HAND", "No hand has been dealt")
        return self.state
