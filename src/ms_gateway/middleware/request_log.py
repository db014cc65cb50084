"""HTTP access log and request ids.

Each request gets a short id on ``request.state.request_id``; routers copy
it into the ApiResponse envelope and it is echoed in the ``X-Request-ID``
response header. Health checks log at DEBUG so they do not drown out
trading traffic.

Log format:
    INFO [POST] /api/v1/trades → 200 (3ms) req_a1b2c3d4e5f6
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.ms_common.response import new_request_id

logger = logging.getLogger("ms.request")

QUIET_PATHS: frozenset[str] = frozenset({"/health"})


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = new_request_id()
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        level = logging.DEBUG if request.url.path in QUIET_PATHS else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
