from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.ms_account.application.publisher import team_payload, trade_payload
from src.ms_common.response import ApiResponse
from src.ms_session.dependencies import envelope, get_session
from src.ms_session.platform import PlatformSession
from src.ms_trading.application.schemas import ExecuteTradeRequest

router = APIRouter(prefix="/trades", tags=["trades"])


@router.post("")
async def execute_trade(
    body: ExecuteTradeRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    team, trade = session.execute_trade(
        body.team_id, body.action, body.symbol, body.quantity, body.price
    )
    return envelope(request, {"team": team_payload(team), "trade": trade_payload(trade)})


@router.get("")
async def list_trades(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
    team_id: str | None = Query(None, description="Only this team's trades"),
    limit: int = Query(100, ge=1, le=1000, description="Newest first"),
) -> ApiResponse:
    if team_id is not None:
        # team history is oldest-first; the API is newest-first like the global log
        trades = list(reversed(session.ledger.require(team_id).trades))
    else:
        trades = session.ledger.trade_log
    return envelope(request, [trade_payload(t) for t in trades[:limit]])
