"""Bilateral trade requests between two teams.

A request lives in ``_pending`` from ``propose`` until exactly one of
accept, reject, cancel or expiry removes it. Presence in ``_pending`` is the
single authority: every exit path pops the request first and does nothing
if it is already gone, so whichever path runs first wins and the others
report ``TradeRequestNotFoundError``.

Settlement only uses the seller's long book. Short positions are never
checked or touched by a negotiated trade.
"""

import logging
from collections.abc import Callable
from datetime import timedelta

from src.ms_account.application.publisher import LedgerPublisher
from src.ms_account.domain.ledger import TeamLedger
from src.ms_account.domain.models import Trade
from src.ms_common.clock import Scheduler, TimerHandle
from src.ms_common.enums import Notification, RequestAction, RequestState, TradeAction
from src.ms_common.errors import (
    AppError,
    SelfTradeRequestError,
    TradeRequestNotFoundError,
)
from src.ms_common.ids import new_id
from src.ms_common.notifier import Notifier
from src.ms_game.domain.models import GameConfig
from src.ms_market.domain.registry import InstrumentRegistry
from src.ms_risk.rules.balance_check import check_funds, check_holdings
from src.ms_risk.rules.circuit_limit import DEFAULT_CIRCUIT_LIMIT_PCT, check_circuit_limit
from src.ms_risk.rules.trade_limits import check_price, check_quantity
from src.ms_trading.application.schemas import TradeRequestResponse
from src.ms_trading.domain.models import TradeRequest

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TTL_SECONDS: float = 20.0


def request_payload(req: TradeRequest) -> dict:
    return TradeRequestResponse.from_domain(req).model_dump(mode="json")


class NegotiationDesk:
    def __init__(
        self,
        ledger: TeamLedger,
        registry: InstrumentRegistry,
        scheduler: Scheduler,
        notifier: Notifier,
        publisher: LedgerPublisher,
        config: Callable[[], GameConfig],
        ttl_seconds: float = DEFAULT_REQUEST_TTL_SECONDS,
        circuit_limit_pct: float = DEFAULT_CIRCUIT_LIMIT_PCT,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._scheduler = scheduler
        self._notifier = notifier
        self._publisher = publisher
        self._config = config
        self._ttl = ttl_seconds
        self._circuit_pct = circuit_limit_pct
        self._pending: dict[str, TradeRequest] = {}
        self._expiry: dict[str, TimerHandle] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, request_id: str) -> TradeRequest | None:
        return self._pending.get(request_id)

    def pending(self) -> list[TradeRequest]:
        return list(self._pending.values())

    def pending_for(self, team_id: str) -> list[TradeRequest]:
        return [r for r in self._pending.values() if team_id in r.parties]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def propose(
        self,
        from_team_id: str,
        to_team_id: str,
        action: RequestAction,
        symbol: str,
        quantity: int,
        price: float,
    ) -> TradeRequest:
        requester = self._ledger.require(from_team_id)
        recipient = self._ledger.require(to_team_id)
        instrument = self._registry.require(symbol)
        if requester.id == recipient.id:
            raise SelfTradeRequestError()
        check_quantity(quantity)
        check_price(price)
        check_circuit_limit(
            price, instrument.price, self._config().circuit_limit_frozen, self._circuit_pct
        )

        now = self._scheduler.now()
        req = TradeRequest(
            id=new_id(),
            from_team_id=requester.id,
            from_team_name=requester.name,
            to_team_id=recipient.id,
            to_team_name=recipient.name,
            action=action,
            symbol=symbol,
            quantity=quantity,
            price=price,
            created_at=now,
            expires_at=now + timedelta(seconds=self._ttl),
        )
        self._pending[req.id] = req
        self._expiry[req.id] = self._scheduler.call_later(
            self._ttl, lambda: self.expire(req.id)
        )
        logger.info(
            "Trade request %s: %s -> %s %s %d %s @ %.2f",
            req.id,
            requester.name,
            recipient.name,
            action.value,
            quantity,
            symbol,
            price,
        )

        payload = request_payload(req)
        self._notifier.emit(Notification.TRADE_REQUEST_SENT, payload, [requester.id])
        self._notifier.emit(Notification.TRADE_REQUEST_RECEIVED, payload, [recipient.id])
        return req

    def respond(
        self, request_id: str, accept: bool, responder_id: str | None = None
    ) -> TradeRequest:
        req = self._pending.get(request_id)
        if req is None or (responder_id is not None and responder_id != req.to_team_id):
            raise TradeRequestNotFoundError(request_id)
        if self._scheduler.now() >= req.expires_at:
            # The expiry callback is late; the deadline still wins.
            self.expire(request_id)
            raise TradeRequestNotFoundError(request_id)

        if not accept:
            self._close(req, RequestState.CANCELLED)
            logger.info("Trade request %s declined by %s", req.id, req.to_team_name)
            self._notify_parties(req, Notification.TRADE_REQUEST_CANCELLED)
            return req

        try:
            trades = self._settle(req)
        except AppError as exc:
            logger.info("Trade request %s settlement failed: %s", req.id, exc.message)
            self._notify_parties(
                req,
                Notification.TRADE_REQUEST_FAILED,
                {"request": request_payload(req), "error": exc.message, "code": exc.code},
            )
            raise

        self._close(req, RequestState.ACCEPTED)
        self._notify_parties(req, Notification.TRADE_REQUEST_COMPLETED)
        buyer = self._ledger.require(req.buyer_id)
        seller = self._ledger.require(req.seller_id)
        self._publisher.publish([buyer, seller], trades)
        return req

    def cancel(self, request_id: str, team_id: str) -> TradeRequest:
        """Withdrawal by the requester."""
        req = self._pending.get(request_id)
        if req is None or req.from_team_id != team_id:
            raise TradeRequestNotFoundError(request_id)
        self._close(req, RequestState.CANCELLED)
        logger.info("Trade request %s cancelled by %s", req.id, req.from_team_name)
        self._notify_parties(req, Notification.TRADE_REQUEST_CANCELLED)
        return req

    def expire(self, request_id: str) -> None:
        """Expiry callback. No-op if the request already left the pending set."""
        req = self._pending.get(request_id)
        if req is None:
            return
        self._close(req, RequestState.EXPIRED)
        logger.info("Trade request %s expired", req.id)
        self._notify_parties(req, Notification.TRADE_REQUEST_EXPIRED)

    def clear(self) -> None:
        """Drop every pending request and cancel every expiry timer."""
        for handle in self._expiry.values():
            handle.cancel()
        self._expiry.clear()
        self._pending.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _close(self, req: TradeRequest, state: RequestState) -> None:
        self._pending.pop(req.id, None)
        handle = self._expiry.pop(req.id, None)
        if handle is not None:
            handle.cancel()
        req.state = state

    def _settle(self, req: TradeRequest) -> list[Trade]:
        """Move cash and shares between both teams in one step."""
        buyer = self._ledger.require(req.buyer_id)
        seller = self._ledger.require(req.seller_id)
        instrument = self._registry.require(req.symbol)
        total = req.total

        check_circuit_limit(
            req.price, instrument.price, self._config().circuit_limit_frozen, self._circuit_pct
        )
        check_funds(buyer, total)
        check_holdings(seller, req.symbol, req.quantity)

        buyer.cash -= total
        self._ledger.add_long(buyer, req.symbol, req.quantity)
        seller.cash += total
        self._ledger.remove_long(seller, req.symbol, req.quantity)

        buy_leg = self._ledger.record_trade(
            buyer, TradeAction.BUY, req.symbol, req.quantity, req.price,
            note=f"Negotiated with {seller.name}", counterparty=seller.name,
        )
        sell_leg = self._ledger.record_trade(
            seller, TradeAction.SELL, req.symbol, req.quantity, req.price,
            note=f"Negotiated with {buyer.name}", counterparty=buyer.name,
        )
        logger.info(
            "Trade request %s settled: %s buys %d %s from %s @ %.2f",
            req.id,
            buyer.name,
            req.quantity,
            req.symbol,
            seller.name,
            req.price,
        )
        return [buy_leg, sell_leg]

    def _notify_parties(
        self, req: TradeRequest, event: Notification, payload: dict | None = None
    ) -> None:
        self._notifier.emit(event, payload or request_payload(req), list(req.parties))
