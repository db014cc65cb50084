"""Pydantic schemas for ms_account API and realtime payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.ms_account.domain.models import Team, Trade
from src.ms_common.schemas import InboundModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateTeamRequest(InboundModel):
    name: str = Field(..., min_length=1, max_length=64)
    starting_balance: float | None = Field(
        None, ge=0, description="Opening cash; defaults to the session starting balance"
    )


class JoinTeamRequest(InboundModel):
    join_code: str = Field(..., min_length=1)


class AllocateFundsRequest(InboundModel):
    amount: float = Field(..., description="Positive credits cash, negative debits it")
    note: str | None = None


class WsAllocateFundsRequest(AllocateFundsRequest):
    team_id: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TradeResponse(BaseModel):
    id: str
    team_id: str
    team_name: str
    action: str
    symbol: str
    quantity: int
    price: float
    total: float
    timestamp: datetime
    note: str | None = None
    counterparty: str | None = None

    @classmethod
    def from_domain(cls, trade: Trade) -> "TradeResponse":
        return cls(
            id=trade.id,
            team_id=trade.team_id,
            team_name=trade.team_name,
            action=trade.action.value,
            symbol=trade.symbol,
            quantity=trade.quantity,
            price=trade.price,
            total=trade.total,
            timestamp=trade.timestamp,
            note=trade.note,
            counterparty=trade.counterparty,
        )


class TeamResponse(BaseModel):
    id: str
    name: str
    cash: float
    starting_balance: float
    join_code: str
    holdings: dict[str, int]
    short_holdings: dict[str, int]
    trades: list[TradeResponse]

    @classmethod
    def from_domain(cls, team: Team) -> "TeamResponse":
        return cls(
            id=team.id,
            name=team.name,
            cash=team.cash,
            starting_balance=team.starting_balance,
            join_code=team.join_code,
            holdings=dict(team.holdings),
            short_holdings=dict(team.short_holdings),
            trades=[TradeResponse.from_domain(t) for t in team.trades],
        )


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    portfolio_value: float
