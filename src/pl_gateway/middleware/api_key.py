"""API-key gate for every route under a path prefix.

The caller's X-API-KEY header must equal the configured secret. On
mismatch the request is answered with 401 before the body is read and
before any handler or dependency runs.
"""

import hmac

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.pl_common.errors import UnauthorizedError
from src.pl_common.response import error_response

API_KEY_HEADER = "X-API-KEY"


class ApiKeyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, api_key: str, prefix: str = "/transaction") -> None:
        super().__init__(app)
        self._api_key = api_key.encode()
        self._prefix = prefix.rstrip("/")

    def _is_protected(self, path: str) -> bool:
        return path == self._prefix or path.startswith(self._prefix + "/")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._is_protected(request.url.path):
            supplied = request.headers.get(API_KEY_HEADER, "").encode()
            if not hmac.compare_digest(supplied, self._api_key):
                err = UnauthorizedError()
                return error_response(err.message, err.http_status)
        return await call_next(request)
