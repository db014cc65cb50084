"""The one owned object holding all live session state.

Every transport handler receives the session explicitly; nothing here is a
module-level global. Handlers are synchronous and run to completion on the
event loop, so each one sees a consistent snapshot and leaves one.

Lifecycle: ``init()`` on startup, ``reset()`` for reset_platform,
``shutdown()`` on application exit.
"""

import logging
from dataclasses import dataclass

from config.settings import settings
from src.ms_account.application.publisher import (
    LedgerPublisher,
    team_payload,
    trade_payload,
)
from src.ms_account.domain.ledger import TeamLedger
from src.ms_account.domain.models import Team, Trade
from src.ms_common.clock import Scheduler
from src.ms_common.enums import Notification, Phase, RequestAction, TradeAction
from src.ms_common.errors import InsufficientFundsError
from src.ms_common.notifier import Notifier
from src.ms_game.domain.models import GameConfig
from src.ms_game.engine.controller import PhaseController
from src.ms_market.application.schemas import StockResponse
from src.ms_market.domain.models import Instrument
from src.ms_market.domain.registry import InstrumentRegistry
from src.ms_risk.short_enforcer import force_cover_all
from src.ms_trading.engine.execution import ExecutionEngine
from src.ms_trading.domain.models import TradeRequest
from src.ms_trading.engine.negotiation import NegotiationDesk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionOptions:
    starting_balance: float = 100_000
    portfolio_allocation_time: int = 600
    trade_request_ttl_seconds: float = 20.0
    circuit_limit_pct: float = 0.08
    tick_interval_seconds: float = 1.0
    join_code_length: int = 6

    @classmethod
    def from_settings(cls) -> "SessionOptions":
        return cls(
            starting_balance=settings.STARTING_BALANCE,
            portfolio_allocation_time=settings.PORTFOLIO_ALLOCATION_TIME,
            trade_request_ttl_seconds=settings.TRADE_REQUEST_TTL_SECONDS,
            circuit_limit_pct=settings.CIRCUIT_LIMIT_PCT,
            tick_interval_seconds=settings.TICK_INTERVAL_SECONDS,
            join_code_length=settings.JOIN_CODE_LENGTH,
        )


class PlatformSession:
    def __init__(
        self,
        scheduler: Scheduler,
        notifier: Notifier,
        options: SessionOptions | None = None,
    ) -> None:
        self.options = options or SessionOptions()
        self._scheduler = scheduler
        self._notifier = notifier

        self.registry = InstrumentRegistry()
        self.ledger = TeamLedger(
            clock=scheduler.now, join_code_length=self.options.join_code_length
        )
        self.publisher = LedgerPublisher(self.ledger, self.registry, notifier)
        self.phases = PhaseController(
            self._default_config(),
            scheduler,
            notifier,
            tick_interval=self.options.tick_interval_seconds,
        )
        self.engine = ExecutionEngine(self.ledger, self.registry)
        self.negotiation = NegotiationDesk(
            self.ledger,
            self.registry,
            scheduler,
            notifier,
            self.publisher,
            config=lambda: self.phases.config,
            ttl_seconds=self.options.trade_request_ttl_seconds,
            circuit_limit_pct=self.options.circuit_limit_pct,
        )

    @property
    def config(self) -> GameConfig:
        return self.phases.config

    def _default_config(self) -> GameConfig:
        return GameConfig(
            starting_balance=self.options.starting_balance,
            portfolio_allocation_time=self.options.portfolio_allocation_time,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        logger.info(
            "Session started: %d instruments, starting balance %.2f",
            len(self.registry.instruments()),
            self.options.starting_balance,
        )

    def reset(self) -> None:
        """Back to session defaults. Cancels the ticker and every expiry timer."""
        self.phases.replace_config(self._default_config())
        self.negotiation.clear()
        self.ledger.reset()
        self.registry.reset()
        logger.info("Platform reset")
        self._notifier.emit(Notification.PLATFORM_RESET, None)

    def shutdown(self) -> None:
        self.phases.stop()
        self.negotiation.clear()
        logger.info("Session shut down")

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def create_team(self, name: str, starting_balance: float | None = None) -> Team:
        balance = self.config.starting_balance if starting_balance is None else starting_balance
        team = self.ledger.create_team(name, balance)
        self.publisher.team_created(team)
        return team

    def join_team(self, join_code: str) -> Team:
        return self.ledger.find_by_join_code(join_code)

    def allocate_funds(self, team_id: str, amount: float, note: str | None = None) -> Team:
        """Admin cash adjustment, recorded as a fund_allocation trade."""
        team = self.ledger.require(team_id)
        if amount < 0 and team.cash < -amount:
            raise InsufficientFundsError(-amount, team.cash)
        team.cash += amount
        trade = self.ledger.record_trade(
            team, TradeAction.FUND_ALLOCATION, "CASH", 0, amount, note=note
        )
        logger.info("Funds allocated: team=%s amount=%.2f cash=%.2f", team.name, amount, team.cash)
        self.publisher.publish([team], [trade])
        return team

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    def execute_trade(
        self,
        team_id: str,
        action: TradeAction,
        symbol: str,
        quantity: int,
        price: float,
    ) -> tuple[Team, Trade]:
        team, trade = self.engine.execute(
            team_id, action, symbol, quantity, price, self.config
        )
        self.publisher.publish([team], [trade])
        return team, trade

    def send_trade_request(
        self,
        from_team_id: str,
        to_team_id: str,
        action: RequestAction,
        symbol: str,
        quantity: int,
        price: float,
    ) -> TradeRequest:
        return self.negotiation.propose(
            from_team_id, to_team_id, action, symbol, quantity, price
        )

    def respond_trade_request(
        self, request_id: str, accept: bool, team_id: str | None = None
    ) -> TradeRequest:
        return self.negotiation.respond(request_id, accept, team_id)

    def cancel_trade_request(self, request_id: str, team_id: str) -> TradeRequest:
        return self.negotiation.cancel(request_id, team_id)

    # ------------------------------------------------------------------
    # Admin controls
    # ------------------------------------------------------------------

    def start_phase(
        self,
        phase: Phase,
        duration: int,
        rounds: int | None = None,
        trading_round_time: int | None = None,
    ) -> GameConfig:
        return self.phases.start_phase(phase, duration, rounds, trading_round_time)

    def toggle_circuit_freeze(self) -> bool:
        config = self.config
        config.circuit_limit_frozen = not config.circuit_limit_frozen
        logger.info("Circuit limit frozen: %s", config.circuit_limit_frozen)
        self._notifier.emit(Notification.CONFIG_UPDATE, self.phases.payload())
        return config.circuit_limit_frozen

    def toggle_market_trading(self) -> bool:
        config = self.config
        config.market_trading_enabled = not config.market_trading_enabled
        logger.info("Market trading enabled: %s", config.market_trading_enabled)
        self._notifier.emit(Notification.CONFIG_UPDATE, self.phases.payload())
        return config.market_trading_enabled

    def toggle_short_freeze(self) -> bool:
        """Flip the short-selling freeze; freezing force-covers every short."""
        config = self.config
        config.short_selling_frozen = not config.short_selling_frozen
        logger.info("Short selling frozen: %s", config.short_selling_frozen)
        if config.short_selling_frozen:
            affected = force_cover_all(self.ledger, self.registry)
            if affected:
                self.publisher.publish(
                    [team for team, _ in affected],
                    [trade for _, trades in affected for trade in trades],
                )
        self._notifier.emit(Notification.CONFIG_UPDATE, self.phases.payload())
        return config.short_selling_frozen

    def update_stock_price(self, symbol: str, price: float) -> Instrument | None:
        instrument = self.registry.update_price(symbol, price)
        if instrument is None:
            return None
        self._notifier.emit(
            Notification.STOCK_PRICE_UPDATE, {"symbol": symbol, "price": price}
        )
        self._notifier.emit(Notification.STOCKS_UPDATE, self.stocks_payload())
        return instrument

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def stocks_payload(self) -> list[dict]:
        return [StockResponse.from_domain(i).model_dump() for i in self.registry.instruments()]

    def snapshot(self) -> dict:
        """``game_state`` payload sent to each new realtime connection."""
        return {
            "teams": [team_payload(t) for t in self.ledger.teams()],
            "stocks": self.stocks_payload(),
            "trades": [trade_payload(t) for t in self.ledger.trade_log],
            "game_config": self.phases.payload(),
            "leaderboard": self.publisher.leaderboard(),
        }
