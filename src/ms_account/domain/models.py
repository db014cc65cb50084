"""Domain models for ms_account — pure dataclasses, no transport dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.ms_common.enums import TradeAction


@dataclass(frozen=True)
class Trade:
    """One settled leg. Immutable once recorded."""

    id: str
    team_id: str
    team_name: str
    action: TradeAction
    symbol: str
    quantity: int
    price: float
    timestamp: datetime
    note: str | None = None
    counterparty: str | None = None  # counterparty team name for negotiated legs

    @property
    def total(self) -> float:
        return self.quantity * self.price


@dataclass
class Team:
    id: str
    name: str
    cash: float
    starting_balance: float
    join_code: str
    # symbol -> quantity; a symbol is removed as soon as it reaches zero
    holdings: dict[str, int] = field(default_factory=dict)
    short_holdings: dict[str, int] = field(default_factory=dict)
    trades: list[Trade] = field(default_factory=list)

    def held(self, symbol: str) -> int:
        return self.holdings.get(symbol, 0)

    def shorted(self, symbol: str) -> int:
        return self.short_holdings.get(symbol, 0)
