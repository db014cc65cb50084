from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.ms_common.response import ApiResponse
from src.ms_session.dependencies import envelope, get_session
from src.ms_session.platform import PlatformSession
from src.ms_trading.application.schemas import (
    CancelTradeRequest,
    RespondTradeRequest,
    SendTradeRequest,
)
from src.ms_trading.engine.negotiation import request_payload

router = APIRouter(prefix="/trade-requests", tags=["trade-requests"])


@router.post("", status_code=201)
async def send_trade_request(
    body: SendTradeRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    req = session.send_trade_request(
        body.from_team_id, body.to_team_id, body.action, body.symbol, body.quantity, body.price
    )
    return envelope(request, request_payload(req))


@router.get("")
async def list_trade_requests(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
    team_id: str = Query(..., description="Incoming and outgoing requests of this team"),
) -> ApiResponse:
    session.ledger.require(team_id)
    pending = session.negotiation.pending_for(team_id)
    return envelope(request, [request_payload(r) for r in pending])


@router.post("/{request_id}/respond")
async def respond_trade_request(
    request_id: str,
    body: RespondTradeRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    req = session.respond_trade_request(request_id, body.accept, body.team_id)
    return envelope(request, request_payload(req))


@router.post("/{request_id}/cancel")
async def cancel_trade_request(
    request_id: str,
    body: CancelTradeRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    req = session.cancel_trade_request(request_id, body.team_id)
    return envelope(request, request_payload(req))
