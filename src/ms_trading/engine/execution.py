"""Direct buy, sell, short and cover against the team ledger.

The price is supplied by the caller (admin-set or quoted by the client) and
trusted; the registry is consulted only to reject unknown symbols.
"""

import logging

from src.ms_account.domain.ledger import TeamLedger
from src.ms_account.domain.models import Team, Trade
from src.ms_common.enums import DIRECT_TRADE_ACTIONS, TradeAction
from src.ms_common.errors import InvalidPayloadError
from src.ms_game.domain.models import GameConfig
from src.ms_market.domain.registry import InstrumentRegistry
from src.ms_risk.rules.balance_check import (
    check_collateral,
    check_funds,
    check_holdings,
    check_short_position,
)
from src.ms_risk.rules.phase_gate import check_short_allowed
from src.ms_risk.rules.trade_limits import check_price, check_quantity

logger = logging.getLogger(__name__)


class ExecutionEngine:
    def __init__(self, ledger: TeamLedger, registry: InstrumentRegistry) -> None:
        self._ledger = ledger
        self._registry = registry

    def execute(
        self,
        team_id: str,
        action: TradeAction,
        symbol: str,
        quantity: int,
        price: float,
        config: GameConfig,
    ) -> tuple[Team, Trade]:
        """Validate then apply one direct trade. Returns (team, trade).

        Every check runs before the first write, so any raised AppError
        leaves the ledger untouched.
        """
        team = self._ledger.require(team_id)
        self._registry.require(symbol)
        if action not in DIRECT_TRADE_ACTIONS:
            raise InvalidPayloadError(f"action {action.value} cannot be executed directly")
        check_quantity(quantity)
        check_price(price)

        total = quantity * price
        ledger = self._ledger

        if action == TradeAction.BUY:
            check_funds(team, total)
            team.cash -= total
            ledger.add_long(team, symbol, quantity)

        elif action == TradeAction.SELL:
            check_holdings(team, symbol, quantity)
            team.cash += total
            ledger.remove_long(team, symbol, quantity)

        elif action == TradeAction.SHORT_SELL:
            check_short_allowed(config)
            check_collateral(team, total)
            team.cash += total
            ledger.add_short(team, symbol, quantity)

        else:  # COVER_SHORT
            check_short_position(team, symbol, quantity)
            check_funds(team, total)
            team.cash -= total
            ledger.remove_short(team, symbol, quantity)

        trade = ledger.record_trade(team, action, symbol, quantity, price)
        logger.info(
            "Trade executed: team=%s %s %d %s @ %.2f cash=%.2f",
            team.name,
            action.value,
            quantity,
            symbol,
            price,
            team.cash,
        )
        return team, trade
