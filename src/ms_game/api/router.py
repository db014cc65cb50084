"""ms_game REST API — game config, phases, toggles and reset (admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.ms_common.response import ApiResponse
from src.ms_game.application.schemas import StartPhaseRequest, ToggleResponse
from src.ms_gateway.auth.admin import require_admin
from src.ms_session.dependencies import envelope, get_session
from src.ms_session.platform import PlatformSession

router = APIRouter(prefix="/game", tags=["game"])
admin_router = APIRouter(
    prefix="/game", tags=["game"], dependencies=[Depends(require_admin)]
)


@router.get("")
async def get_config(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    return envelope(request, session.phases.payload())


@admin_router.post("/phase")
async def start_phase(
    body: StartPhaseRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    session.start_phase(body.phase, body.duration, body.rounds, body.trading_round_time)
    return envelope(request, session.phases.payload())


@admin_router.post("/toggles/circuit-freeze")
async def toggle_circuit_freeze(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    state = ToggleResponse(frozen=session.toggle_circuit_freeze())
    return envelope(request, state.model_dump(exclude_none=True))


@admin_router.post("/toggles/market-trading")
async def toggle_market_trading(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    state = ToggleResponse(enabled=session.toggle_market_trading())
    return envelope(request, state.model_dump(exclude_none=True))


@admin_router.post("/toggles/short-freeze")
async def toggle_short_freeze(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    state = ToggleResponse(frozen=session.toggle_short_freeze())
    return envelope(request, state.model_dump(exclude_none=True))


@admin_router.post("/reset")
async def reset_platform(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    session.reset()
    return envelope(request, session.phases.payload())
