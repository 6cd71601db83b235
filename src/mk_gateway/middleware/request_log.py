"""Per-request access log and request id.

Every request gets a short id, exposed as request.state.request_id (echoed
in the error envelope) and as the X-Request-ID response header. An incoming
X-Request-ID from an upstream proxy is kept.

    INFO    [POST] /api/v1/orders → 201 (23ms) req_a1b2c3d4e5f6
    WARNING [GET] /api/v1/orders/x → 503 (5012ms) req_0f9e8d7c6b5a
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("mk.request")

_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(_HEADER) or f"req_{uuid.uuid4().hex[:12]}"
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[_HEADER] = request_id
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method, request.url.path, response.status_code, elapsed_ms, request_id,
        )
        return response
