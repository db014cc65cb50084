"""FastAPI dependencies exposing the app-owned PlatformSession."""

from fastapi import Request

from src.ms_common.response import ApiResponse, success_response
from src.ms_session.platform import PlatformSession


def get_session(request: Request) -> PlatformSession:
    return request.app.state.session


def envelope(request: Request, data: object = None) -> ApiResponse:
    """success_response carrying the middleware's request_id."""
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
