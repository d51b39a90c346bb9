import argparse
import asyncio
import contextlib
import logging
import sys
import threading
from typing import Optional

from holdem.strategy import HeuristicStrategy, PassiveStrategy
from holdem.views import public_view

from .config import TableConfig
from .console import parse_command, render_prompt, render_results, render_table
from .server import SpectatorServer
from .session import HUMAN_ID, TableError, TableSession

LOGGER = logging.getLogger("holdem_table")

STRATEGIES = {"heuristic": HeuristicStrategy, "passive": PassiveStrategy}


class LineReader:
    """Feeds stdin lines into an asyncio queue from a daemon thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop
        self.queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        thread = threading.Thread(target=self._pump, daemon=True)
        thread.start()

    def _pump(self) -> None:
        for line in sys.stdin:
            self.loop.call_soon_threadsafe(self.queue.put_nowait, line)
        self.loop.call_soon_threadsafe(self.queue.put_nowait, None)

    async def readline(self, prompt: str, timeout: Optional[float]) -> Optional[str]:
        while not self.queue.empty():
            self.queue.get_nowait()  # drop input typed out of turn
        print(prompt, end="", flush=True)
        return await asyncio.wait_for(self.queue.get(), timeout=timeout)


async def human_turn(session: TableSession, reader: LineReader, move_time_ms: int) -> None:
    timeout = move_time_ms / 1000 if move_time_ms > 0 else None
    while True:
        view = public_view(session.state, HUMAN_ID)
        try:
            line = await reader.readline(render_prompt(view), timeout)
        except asyncio.TimeoutError:
            print("\nOut of time.")
            session.timeout_fold()
            return
        if line is None:
            raise EOFError
        try:
            action, amount = parse_command(line)
            session.act(HUMAN_ID, action, amount)
            return
        except ValueError as exc:
            print(exc)
        except TableError as exc:
            print(f"{exc.code}: {exc.msg}")


async def play(
    session: TableSession,
    reader: LineReader,
    spectators: Optional[SpectatorServer],
    max_hands: int,
) -> None:
    config = session.config
    played = 0

    async def show() -> None:
        print(render_table(public_view(session.state, HUMAN_ID)))
        if spectators is not None:
            await spectators.publish(session.state)

    while max_hands <= 0 or played < max_hands:
        if session.needs_rebuy:
            answer = await reader.readline(f"Out of chips. Rebuy {config.starting_chips}? [y/N] ", None)
            if not answer or answer.strip().lower() not in ("y", "yes"):
                break
            session.rebuy(HUMAN_ID)

        session.start_hand()
        await show()
        while not session.state.is_over:
            current = session.state.current_player
            if current is not None and current.is_ai:
                await asyncio.sleep(config.ai_delay_ms / 1000)
                session.play_ai_turn()
            else:
                await human_turn(session, reader, config.move_time_ms)
            await show()

        print(render_results(public_view(session.state, HUMAN_ID)))
        session.finish_hand()
        played += 1


async def run(args: argparse.Namespace) -> None:
    config = TableConfig(
        starting_chips=args.starting_chips,
        small_blind=args.sb,
        big_blind=args.bb,
        opponents=args.opponents,
        move_time_ms=args.move_time,
        ai_delay_ms=args.ai_delay,
        seed=args.seed,
    )
    session = TableSession(config, human_name=args.name, strategy=STRATEGIES[args.strategy]())
    reader = LineReader(asyncio.get_running_loop())

    if args.spectate_port:
        spectators = SpectatorServer()
        async with spectators.serve(args.host, args.spectate_port):
            await play(session, reader, spectators, args.hands)
    else:
        await play(session, reader, None, args.hands)


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Texas Hold'em against AI seats")
    parser.add_argument("--name", default="You")
    parser.add_argument("--opponents", type=int, default=3)
    parser.add_argument("--starting-chips", type=int, default=1_000)
    parser.add_argument("--sb", type=int, default=10)
    parser.add_argument("--bb", type=int, default=20)
    parser.add_argument(
        "--move-time",
        type=int,
        default=30_000,
        help="Milliseconds before an idle human auto-folds (0 disables)",
    )
    parser.add_argument("--ai-delay", type=int, default=800, help="Pause before AI moves in milliseconds")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="heuristic")
    parser.add_argument("--hands", type=int, default=0, help="Stop after this many hands (0 plays on)")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--spectate-port", type=int, default=0, help="Serve a spectator WebSocket feed")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))
    with contextlib.suppress(KeyboardInterrupt, EOFError):
        asyncio.run(run(args))


if __name__ == "__main__":
    main()
