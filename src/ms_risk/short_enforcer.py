"""Platform-wide forced cover when short selling is frozen."""

import logging

from src.ms_account.domain.ledger import TeamLedger
from src.ms_account.domain.models import Team, Trade
from src.ms_common.enums import TradeAction
from src.ms_market.domain.registry import InstrumentRegistry

logger = logging.getLogger(__name__)

FORCED_COVER_NOTE = "Short selling frozen: position force-closed at live price"


def force_cover_all(
    ledger: TeamLedger, registry: InstrumentRegistry
) -> list[tuple[Team, list[Trade]]]:
    """Buy back every open short at the live price and clear all short books.

    No affordability check: a forced buyback may leave cash negative.
    Returns (team, forced trades) for each team that had a short position.
    Calling it with no open shorts is a no-op.
    """
    affected: list[tuple[Team, list[Trade]]] = []
    for team in ledger.teams():
        if not team.short_holdings:
            continue
        trades: list[Trade] = []
        for symbol, quantity in team.short_holdings.items():
            instrument = registry.get(symbol)
            price = instrument.price if instrument is not None else 0.0
            team.cash -= quantity * price
            trades.append(
                ledger.record_trade(
                    team,
                    TradeAction.COVER_SHORT_FORCED,
                    symbol,
                    quantity,
                    price,
                    note=FORCED_COVER_NOTE,
                )
            )
        team.short_holdings = {}
        logger.info(
            "Forced cover: team=%s closed %d short position(s), cash=%.2f",
            team.name,
            len(trades),
            team.cash,
        )
        affected.append((team, trades))
    return affected
