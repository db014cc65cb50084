"""WebSocket endpoint carrying the event/ack protocol.

Inbound frame:  {"event": "execute_trade", "data": {...}, "ack": 7}
Ack frame:      {"event": "ack", "ack": 7, "data": {"success": true, ...}}
Push frame:     {"event": "trade_executed", "data": {...}}
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from src.ms_common.enums import Notification
from src.ms_common.response import ack_error
from src.ms_gateway.realtime.dispatcher import EventDispatcher
from src.ms_gateway.realtime.hub import ConnectionManager
from src.ms_session.platform import PlatformSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime(websocket: WebSocket) -> None:
    state = websocket.app.state
    hub: ConnectionManager = state.hub
    session: PlatformSession = state.session
    dispatcher: EventDispatcher = state.dispatcher

    conn = await hub.connect(websocket)
    await hub.send(conn, Notification.GAME_STATE.value, session.snapshot())
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame: Any = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("Ignoring non-JSON frame")
                continue
            if not isinstance(frame, dict):
                continue

            ack = frame.get("ack")
            event = frame.get("event")
            if not isinstance(event, str):
                result = ack_error(9003, "Invalid payload: event name is required")
            else:
                result = dispatcher.handle(conn, event, frame.get("data"))
            if isinstance(ack, int):
                await hub.send_ack(conn, ack, result)
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)
