"""Realtime hub — WebSocket connections, team channels and fan-out.

``ConnectionManager`` is the production ``Notifier``. ``emit`` is called
from synchronous session handlers and only enqueues; the pump task started
in the application lifespan does the actual socket I/O, so a slow or dead
client never blocks a trade.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket

from src.ms_common.enums import Notification

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Connection:
    websocket: WebSocket
    team_ids: set[str] = field(default_factory=set)
    is_admin: bool = False


class ConnectionManager:
    def __init__(self) -> None:
        self._connections: dict[WebSocket, Connection] = {}
        self._queue: asyncio.Queue[tuple[str, Any, tuple[str, ...] | None]] = asyncio.Queue()
        self._pump: asyncio.Task[None] | None = None

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if self._pump is None:
            self._pump = asyncio.create_task(self._run(), name="realtime-pump")

    async def stop(self) -> None:
        if self._pump is not None:
            self._pump.cancel()
            await asyncio.gather(self._pump, return_exceptions=True)
            self._pump = None
        self._connections.clear()

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    async def connect(self, websocket: WebSocket) -> Connection:
        await websocket.accept()
        conn = Connection(websocket)
        self._connections[websocket] = conn
        logger.info("Client connected (%d total)", len(self._connections))
        return conn

    def disconnect(self, websocket: WebSocket) -> None:
        if self._connections.pop(websocket, None) is not None:
            logger.info("Client disconnected (%d total)", len(self._connections))

    # ------------------------------------------------------------------
    # Notifier
    # ------------------------------------------------------------------

    def emit(
        self,
        event: Notification,
        payload: Any,
        team_ids: Sequence[str] | None = None,
    ) -> None:
        targets = tuple(team_ids) if team_ids is not None else None
        self._queue.put_nowait((event.value, payload, targets))

    async def send(self, conn: Connection, event: str, payload: Any) -> None:
        await self._send(conn, {"event": event, "data": payload})

    async def send_ack(self, conn: Connection, ack: int, payload: dict) -> None:
        await self._send(conn, {"event": "ack", "ack": ack, "data": payload})

    async def _run(self) -> None:
        while True:
            event, payload, team_ids = await self._queue.get()
            try:
                await self._deliver(event, payload, team_ids)
            finally:
                self._queue.task_done()

    async def _deliver(
        self, event: str, payload: Any, team_ids: tuple[str, ...] | None
    ) -> None:
        if team_ids is None:
            targets = list(self._connections.values())
        else:
            wanted = set(team_ids)
            targets = [c for c in self._connections.values() if c.team_ids & wanted]
        message = {"event": event, "data": payload}
        for conn in targets:
            await self._send(conn, message)

    async def _send(self, conn: Connection, message: dict) -> None:
        try:
            await conn.websocket.send_json(message)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Dropping client after send failure: %s", exc)
            self.disconnect(conn.websocket)
