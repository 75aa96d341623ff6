"""Request logging + timing middleware.

Logs every HTTP request with method, path, status code, latency, and
a short request ID for correlation, and stamps the latency onto the
response as X-Response-Time (whole milliseconds).

Log format:
    INFO [GET] /transaction/list → 200 (23ms) req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pl.request")

RESPONSE_TIME_HEADER = "X-Response-Time"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.0f}"
        logger.info(
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        return response
