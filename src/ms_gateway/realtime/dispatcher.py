"""Inbound realtime events -> session calls -> ack payloads.

Each handler validates its payload with the same pydantic schemas the REST
routers use, calls the session synchronously and returns the ack dict the
client's callback receives. ``AppError`` becomes a failed ack; it never
escapes to the socket loop.
"""

import hmac
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from src.ms_account.application.publisher import team_payload, trade_payload
from src.ms_account.application.schemas import (
    CreateTeamRequest,
    JoinTeamRequest,
    WsAllocateFundsRequest,
)
from src.ms_common.errors import (
    AdminAuthRequiredError,
    AppError,
    InvalidPayloadError,
)
from src.ms_common.response import ack_error, ack_success
from src.ms_game.application.schemas import StartPhaseRequest
from src.ms_gateway.realtime.hub import Connection
from src.ms_market.application.schemas import WsUpdatePriceRequest
from src.ms_session.platform import PlatformSession
from src.ms_trading.application.schemas import (
    ExecuteTradeRequest,
    SendTradeRequest,
    WsCancelTradeRequest,
    WsRespondTradeRequest,
)
from src.ms_trading.engine.negotiation import request_payload

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
Handler = Callable[[Connection, Any], dict[str, Any]]


def _parse(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data if data is not None else {})
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in e['loc']) or 'payload'}: {e['msg']}"
            for e in exc.errors()
        )
        raise InvalidPayloadError(errors) from None


class EventDispatcher:
    def __init__(self, session: PlatformSession, admin_password: str) -> None:
        self._session = session
        self._admin_password = admin_password
        self._handlers: dict[str, tuple[Handler, bool]] = {
            # event: (handler, admin only)
            "admin_login": (self._admin_login, False),
            "team_join": (self._team_join, False),
            "execute_trade": (self._execute_trade, False),
            "send_trade_request": (self._send_trade_request, False),
            "respond_trade_request": (self._respond_trade_request, False),
            "cancel_trade_request": (self._cancel_trade_request, False),
            "get_trade_requests": (self._get_trade_requests, False),
            "create_team": (self._create_team, True),
            "allocate_funds": (self._allocate_funds, True),
            "start_phase": (self._start_phase, True),
            "toggle_circuit_freeze": (self._toggle_circuit_freeze, True),
            "toggle_market_trading": (self._toggle_market_trading, True),
            "toggle_short_freeze": (self._toggle_short_freeze, True),
            "update_stock_price": (self._update_stock_price, True),
            "reset_platform": (self._reset_platform, True),
        }

    def handle(self, conn: Connection, event: str, data: Any) -> dict[str, Any]:
        entry = self._handlers.get(event)
        if entry is None:
            return ack_error(9003, f"Unknown event: {event}")
        handler, admin_only = entry
        try:
            if admin_only and not conn.is_admin:
                raise AdminAuthRequiredError()
            return handler(conn, data)
        except AppError as exc:
            logger.info("Event %s rejected: [%d] %s", event, exc.code, exc.message)
            return ack_error(exc.code, exc.message)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def _admin_login(self, conn: Connection, data: Any) -> dict[str, Any]:
        password = data.get("password") if isinstance(data, dict) else data
        if not isinstance(password, str) or not hmac.compare_digest(
            password.encode(), self._admin_password.encode()
        ):
            raise AdminAuthRequiredError()
        conn.is_admin = True
        logger.info("Admin logged in")
        return ack_success()

    def _team_join(self, conn: Connection, data: Any) -> dict[str, Any]:
        if isinstance(data, str):
            data = {"join_code": data}
        req = _parse(JoinTeamRequest, data)
        team = self._session.join_team(req.join_code)
        conn.team_ids.add(team.id)
        logger.info("Client joined team %s", team.name)
        return ack_success(team=team_payload(team))

    # ------------------------------------------------------------------
    # Team actions
    # ------------------------------------------------------------------

    def _execute_trade(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(ExecuteTradeRequest, data)
        team, trade = self._session.execute_trade(
            req.team_id, req.action, req.symbol, req.quantity, req.price
        )
        return ack_success(team=team_payload(team), trade=trade_payload(trade))

    def _send_trade_request(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(SendTradeRequest, data)
        trade_request = self._session.send_trade_request(
            req.from_team_id, req.to_team_id, req.action, req.symbol, req.quantity, req.price
        )
        return ack_success(request=request_payload(trade_request))

    def _respond_trade_request(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(WsRespondTradeRequest, data)
        trade_request = self._session.respond_trade_request(
            req.request_id, req.accept, req.team_id
        )
        return ack_success(request=request_payload(trade_request))

    def _cancel_trade_request(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(WsCancelTradeRequest, data)
        trade_request = self._session.cancel_trade_request(req.request_id, req.team_id)
        return ack_success(request=request_payload(trade_request))

    def _get_trade_requests(self, conn: Connection, data: Any) -> dict[str, Any]:
        if isinstance(data, dict):
            team_id = data.get("team_id", data.get("teamId"))
        else:
            team_id = data
        if not isinstance(team_id, str):
            raise InvalidPayloadError("team_id is required")
        requests = self._session.negotiation.pending_for(team_id)
        return ack_success(requests=[request_payload(r) for r in requests])

    # ------------------------------------------------------------------
    # Admin actions
    # ------------------------------------------------------------------

    def _create_team(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(CreateTeamRequest, data)
        team = self._session.create_team(req.name, req.starting_balance)
        return ack_success(team=team_payload(team))

    def _allocate_funds(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(WsAllocateFundsRequest, data)
        team = self._session.allocate_funds(req.team_id, req.amount, req.note)
        return ack_success(team=team_payload(team))

    def _start_phase(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(StartPhaseRequest, data)
        self._session.start_phase(req.phase, req.duration, req.rounds, req.trading_round_time)
        return ack_success(game_config=self._session.phases.payload())

    def _toggle_circuit_freeze(self, conn: Connection, data: Any) -> dict[str, Any]:
        return ack_success(frozen=self._session.toggle_circuit_freeze())

    def _toggle_market_trading(self, conn: Connection, data: Any) -> dict[str, Any]:
        return ack_success(enabled=self._session.toggle_market_trading())

    def _toggle_short_freeze(self, conn: Connection, data: Any) -> dict[str, Any]:
        return ack_success(frozen=self._session.toggle_short_freeze())

    def _update_stock_price(self, conn: Connection, data: Any) -> dict[str, Any]:
        req = _parse(WsUpdatePriceRequest, data)
        instrument = self._session.update_stock_price(req.symbol, req.price)
        return ack_success(updated=instrument is not None)

    def _reset_platform(self, conn: Connection, data: Any) -> dict[str, Any]:
        self._session.reset()
        return ack_success()
