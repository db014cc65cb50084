"""Shared test fixtures."""

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.main import create_app
from src.ms_common.clock import ManualScheduler
from src.ms_common.notifier import RecordingNotifier
from src.ms_session.platform import PlatformSession, SessionOptions


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def session(scheduler: ManualScheduler, notifier: RecordingNotifier) -> PlatformSession:
    """Session on manual time with default options (TTL 20s, ±8% circuit)."""
    return PlatformSession(scheduler, notifier, SessionOptions())


@pytest.fixture
def api_app(scheduler: ManualScheduler) -> FastAPI:
    """A fresh app whose session runs on the manual scheduler."""
    return create_app(scheduler=scheduler, options=SessionOptions())


@pytest.fixture
async def client(api_app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
