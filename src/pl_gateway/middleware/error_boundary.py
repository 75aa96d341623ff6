"""Last-resort error mapping.

Anything that escapes the routers and the registered exception handlers
(database errors, Redis errors, bugs) is logged with its traceback and
answered with 400 {"error": "<detail>"}. Clients tell failures apart by
the detail, not by the status code.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.pl_common.response import error_response

logger = logging.getLogger(__name__)


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(
                "Unhandled error on [%s] %s", request.method, request.url.path
            )
            return error_response(str(exc) or exc.__class__.__name__)
