"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.ms_account.api.router import leaderboard_router
from src.ms_account.api.router import router as team_router
from src.ms_common.clock import AsyncioScheduler, Scheduler
from src.ms_common.errors import AppError
from src.ms_common.response import error_response
from src.ms_game.api.router import admin_router as game_admin_router
from src.ms_game.api.router import router as game_router
from src.ms_gateway.middleware.request_log import RequestLogMiddleware
from src.ms_gateway.realtime.dispatcher import EventDispatcher
from src.ms_gateway.realtime.hub import ConnectionManager
from src.ms_gateway.realtime.router import router as realtime_router
from src.ms_market.api.router import router as stock_router
from src.ms_session.platform import PlatformSession, SessionOptions
from src.ms_trading.api.requests_router import router as trade_request_router
from src.ms_trading.api.trades_router import router as trade_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: start fan-out, init session. Shutdown: cancel timers, stop fan-out."""
    hub: ConnectionManager = app.state.hub
    session: PlatformSession = app.state.session
    await hub.start()
    session.init()
    yield
    session.shutdown()
    await hub.stop()


def create_app(
    scheduler: Scheduler | None = None,
    options: SessionOptions | None = None,
) -> FastAPI:
    """Build the app with its own session, hub and dispatcher."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
    )

    hub = ConnectionManager()
    session = PlatformSession(
        scheduler or AsyncioScheduler(),
        hub,
        options or SessionOptions.from_settings(),
    )
    app.state.hub = hub
    app.state.session = session
    app.state.dispatcher = EventDispatcher(session, settings.ADMIN_PASSWORD)

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message)
        resp.request_id = getattr(request.state, "request_id", resp.request_id)
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(team_router, prefix="/api/v1")
    app.include_router(leaderboard_router, prefix="/api/v1")
    app.include_router(trade_router, prefix="/api/v1")
    app.include_router(trade_request_router, prefix="/api/v1")
    app.include_router(stock_router, prefix="/api/v1")
    app.include_router(game_router, prefix="/api/v1")
    app.include_router(game_admin_router, prefix="/api/v1")
    app.include_router(realtime_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()
