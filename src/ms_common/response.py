"""Response shapes for both transports.

REST endpoints return the ApiResponse envelope:
{
    "code": 0,           // 0=success, otherwise the AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."
}

WebSocket acks are plain dicts: ``{"success": true, ...}`` on success and
``{"success": false, "error": "...", "code": n}`` on failure.
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field

from src.ms_common.datetime_utils import utc_now


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)


def ack_success(**data: Any) -> dict[str, Any]:
    return {"success": True, **data}


def ack_error(code: int, message: str) -> dict[str, Any]:
    return {"success": False, "error": message, "code": code}
