"""Pydantic schemas for ms_trading API and realtime payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.ms_common.datetime_utils import to_epoch_ms
from src.ms_common.enums import RequestAction, TradeAction
from src.ms_common.schemas import InboundModel
from src.ms_trading.domain.models import TradeRequest

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ExecuteTradeRequest(InboundModel):
    team_id: str
    action: TradeAction
    symbol: str
    quantity: int = Field(..., ge=1)
    price: float = Field(..., gt=0)


class SendTradeRequest(InboundModel):
    from_team_id: str
    to_team_id: str
    action: RequestAction
    symbol: str
    quantity: int = Field(..., ge=1)
    price: float = Field(..., gt=0)


class RespondTradeRequest(InboundModel):
    accept: bool
    team_id: str | None = Field(None, description="Responding team; must be the recipient")


class WsRespondTradeRequest(RespondTradeRequest):
    request_id: str


class CancelTradeRequest(InboundModel):
    team_id: str


class WsCancelTradeRequest(CancelTradeRequest):
    request_id: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TradeRequestResponse(BaseModel):
    id: str
    from_team_id: str
    from_team_name: str
    to_team_id: str
    to_team_name: str
    action: RequestAction
    symbol: str
    quantity: int
    price: float
    total: float
    state: str
    created_at: datetime
    expires_at: datetime
    expires_at_ms: int

    @classmethod
    def from_domain(cls, req: TradeRequest) -> "TradeRequestResponse":
        return cls(
            id=req.id,
            from_team_id=req.from_team_id,
            from_team_name=req.from_team_name,
            to_team_id=req.to_team_id,
            to_team_name=req.to_team_name,
            action=req.action,
            symbol=req.symbol,
            quantity=req.quantity,
            price=req.price,
            total=req.total,
            state=req.state.value,
            created_at=req.created_at,
            expires_at=req.expires_at,
            expires_at_ms=to_epoch_ms(req.expires_at),
        )
