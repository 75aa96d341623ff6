"""Response body helpers.

Success bodies carry "ok": true plus endpoint-specific fields:
    {"ok": true}
    {"ok": true, "data": [...]}
    {"ok": true, "start_at": "...", "end_at": "...", "data": [...]}

Every failure, whatever its cause, is rendered as:
    {"error": <detail>}
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class OkResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: Any


def error_response(detail: Any, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=detail).model_dump(mode="json"),
    )
