"""ms_account REST API — teams, fund allocation and the leaderboard."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.ms_account.application.publisher import team_payload
from src.ms_account.application.schemas import (
    AllocateFundsRequest,
    CreateTeamRequest,
    JoinTeamRequest,
)
from src.ms_common.response import ApiResponse
from src.ms_gateway.auth.admin import require_admin
from src.ms_session.dependencies import envelope, get_session
from src.ms_session.platform import PlatformSession

router = APIRouter(prefix="/teams", tags=["teams"])
leaderboard_router = APIRouter(prefix="/leaderboard", tags=["teams"])


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
async def create_team(
    body: CreateTeamRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    team = session.create_team(body.name, body.starting_balance)
    return envelope(request, team_payload(team))


@router.get("")
async def list_teams(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    return envelope(request, [team_payload(t) for t in session.ledger.teams()])


@router.post("/join")
async def join_team(
    body: JoinTeamRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    team = session.join_team(body.join_code)
    return envelope(request, team_payload(team))


@router.get("/{team_id}")
async def get_team(
    team_id: str,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    return envelope(request, team_payload(session.ledger.require(team_id)))


@router.post("/{team_id}/funds", dependencies=[Depends(require_admin)])
async def allocate_funds(
    team_id: str,
    body: AllocateFundsRequest,
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    team = session.allocate_funds(team_id, body.amount, body.note)
    return envelope(request, team_payload(team))


@leaderboard_router.get("")
async def get_leaderboard(
    session: Annotated[PlatformSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    return envelope(request, session.publisher.leaderboard())
