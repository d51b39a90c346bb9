from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

import websockets

from holdem.models import GameState
from holdem.views import public_view

LOGGER = logging.getLogger("holdem_spectator")

# Read-only WebSocket feed of table snapshots. Spectators never act; the game
# itself is driven locally by TableSession.


class SpectatorServer:
    def __init__(self) -> None:
        self.spectators: Set[Any] = set()
        self.lock = asyncio.Lock()
        self.latest: Optional[Dict[str, object]] = None

    def serve(self, host: str = "127.0.0.1", port: int = 8765):
        """Return the websockets server context; use with ``async with``."""
        LOGGER.info("Spectator feed on ws://%s:%s", host, port)
        return websockets.serve(self._handle_connection, host, port)

    async def _handle_connection(self, websocket: Any) -> None:
        LOGGER.info("Spectator connected")
        async with self.lock:
            self.spectators.add(websocket)
            snapshot = self.latest
        if snapshot is not None:
            await self._send_json(websocket, "spectator/snapshot", snapshot)
        try:
            async for _ in websocket:
                LOGGER.warning("Spectator sent a message; closing connection")
                await websocket.close(code=4403, reason="Spectators are read-only")
                break
        except websockets.ConnectionClosed:
            pass
        finally:
            async with self.lock:
                self.spectators.discard(websocket)
            LOGGER.info("Spectator disconnected")

    async def publish(self, state: GameState) -> None:
        payload = public_view(state)
        async with self.lock:
            self.latest = payload
            targets = list(self.spectators)
        if not targets:
            return
        message = self._envelope("spectator/snapshot", payload)
        await asyncio.gather(*(socket.send(message) for socket in targets), return_exceptions=True)

    async def _send_json(self, websocket: Any, msg_type: str, payload: Dict[str, object]) -> None:
        try:
            await websocket.send(self._envelope(msg_type, payload))
        except websockets.ConnectionClosed:
            pass

    def _envelope(self, msg_type: str, payload: Dict[str, object]) -> str:
        body: Dict[str, object] = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
        body.update(payload)
        return json.dumps(body)
