"""Integration-test fixtures.

The realtime tests use Starlette's TestClient so that the app lifespan runs
and the fan-out pump delivers broadcasts to connected sockets.
"""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture
def ws_client(api_app: FastAPI) -> Iterator[TestClient]:
    with TestClient(api_app) as tc:
        yield tc
