"""ms_market REST API — instrument list and admin price updates."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.ms_common.errors import StockNotFoundError
from src.ms_common.response import ApiResponse
from src.ms_gateway.auth.admin import require_admin
from src.ms_market.application.schemas import StockResponse, UpdatePriceRequest
from src.ms_session.dependencies import envelope, get_session
from src.ms_session.platform import PlatformSession

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("")
async def list_stocks(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    return envelope(request, session.stocks_payload())


@router.get("/{symbol}")
async def get_stock(
    symbol: str,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    instrument = session.registry.require(symbol)
    return envelope(request, StockResponse.from_domain(instrument).model_dump())


@router.put("/{symbol}/price", dependencies=[Depends(require_admin)])
async def update_price(
    symbol: str,
    body: UpdatePriceRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    instrument = session.update_stock_price(symbol, body.price)
    if instrument is None:
        raise StockNotFoundError(symbol)
    return envelope(request, StockResponse.from_domain(instrument).model_dump())
