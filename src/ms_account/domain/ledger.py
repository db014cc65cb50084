"""Per-team cash, long and short books, and trade history.

All quantity mutations go through the helpers below so that a symbol never
stays in ``holdings`` or ``short_holdings`` with a zero quantity. The helpers
do not check affordability; callers run the ms_risk rules first so that a
rejected action leaves the ledger untouched.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from src.ms_account.domain.models import Team, Trade
from src.ms_common.datetime_utils import utc_now
from src.ms_common.enums import TradeAction
from src.ms_common.errors import InvalidJoinCodeError, TeamNotFoundError
from src.ms_common.ids import generate_join_code, new_id
from src.ms_market.domain.registry import InstrumentRegistry

logger = logging.getLogger(__name__)


def _add(book: dict[str, int], symbol: str, quantity: int) -> None:
    book[symbol] = book.get(symbol, 0) + quantity


def _remove(book: dict[str, int], symbol: str, quantity: int) -> None:
    remaining = book.get(symbol, 0) - quantity
    if remaining > 0:
        book[symbol] = remaining
    else:
        book.pop(symbol, None)


class TeamLedger:
    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        join_code_length: int = 6,
    ) -> None:
        self._clock = clock
        self._join_code_length = join_code_length
        self._teams: dict[str, Team] = {}
        self._trade_log: list[Trade] = []  # newest first

    def reset(self) -> None:
        self._teams = {}
        self._trade_log = []

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def create_team(self, name: str, starting_balance: float) -> Team:
        taken = {t.join_code for t in self._teams.values()}
        team = Team(
            id=new_id(),
            name=name,
            cash=starting_balance,
            starting_balance=starting_balance,
            join_code=generate_join_code(self._join_code_length, taken),
        )
        self._teams[team.id] = team
        logger.info("Team created: %s (%s) balance=%.2f", team.name, team.id, starting_balance)
        return team

    def get(self, team_id: str) -> Team | None:
        return self._teams.get(team_id)

    def require(self, team_id: str) -> Team:
        team = self._teams.get(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        return team

    def find_by_join_code(self, join_code: str) -> Team:
        code = join_code.strip().upper()
        for team in self._teams.values():
            if team.join_code == code:
                return team
        raise InvalidJoinCodeError()

    def teams(self) -> list[Team]:
        return list(self._teams.values())

    @property
    def trade_log(self) -> list[Trade]:
        return self._trade_log

    # ------------------------------------------------------------------
    # Book mutations
    # ------------------------------------------------------------------

    @staticmethod
    def add_long(team: Team, symbol: str, quantity: int) -> None:
        _add(team.holdings, symbol, quantity)

    @staticmethod
    def remove_long(team: Team, symbol: str, quantity: int) -> None:
        _remove(team.holdings, symbol, quantity)

    @staticmethod
    def add_short(team: Team, symbol: str, quantity: int) -> None:
        _add(team.short_holdings, symbol, quantity)

    @staticmethod
    def remove_short(team: Team, symbol: str, quantity: int) -> None:
        _remove(team.short_holdings, symbol, quantity)

    def record_trade(
        self,
        team: Team,
        action: TradeAction,
        symbol: str,
        quantity: int,
        price: float,
        note: str | None = None,
        counterparty: str | None = None,
    ) -> Trade:
        """Append a settled leg to the team history and the global log."""
        trade = Trade(
            id=new_id(),
            team_id=team.id,
            team_name=team.name,
            action=action,
            symbol=symbol,
            quantity=quantity,
            price=price,
            timestamp=self._clock(),
            note=note,
            counterparty=counterparty,
        )
        team.trades.append(trade)
        self._trade_log.insert(0, trade)
        return trade

    # ------------------------------------------------------------------
    # Valuation
    # ------------------------------------------------------------------

    @staticmethod
    def portfolio_value(team: Team, registry: InstrumentRegistry) -> float:
        """Cash plus long value minus short liability at live prices."""
        value = team.cash
        for symbol, qty in team.holdings.items():
            instrument = registry.get(symbol)
            if instrument is not None:
                value += qty * instrument.price
        for symbol, qty in team.short_holdings.items():
            instrument = registry.get(symbol)
            if instrument is not None:
                value -= qty * instrument.price
        return value

    def leaderboard(self, registry: InstrumentRegistry) -> list[tuple[Team, float]]:
        ranked = [(t, self.portfolio_value(t, registry)) for t in self._teams.values()]
        ranked.sort(key=lambda pair: pair[1], reverse=True)
        return ranked
