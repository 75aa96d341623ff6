"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text

from config.settings import settings
from src.pl_common.database import engine
from src.pl_common.errors import AppError
from src.pl_common.redis_client import close_redis, get_redis
from src.pl_common.response import error_response
from src.pl_gateway.middleware.api_key import ApiKeyMiddleware
from src.pl_gateway.middleware.error_boundary import ErrorBoundaryMiddleware
from src.pl_gateway.middleware.request_log import RequestLogMiddleware
from src.pl_transaction.api.router import router as transaction_router

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    redis = await get_redis()
    await redis.ping()
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


# Last added runs first: request log → error boundary → API-key gate → routes
app.add_middleware(ApiKeyMiddleware, api_key=settings.API_KEY, prefix="/transaction")
app.add_middleware(ErrorBoundaryMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc.message, exc.http_status)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail = [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    return error_response(detail)


app.include_router(transaction_router)


@app.get("/", response_class=PlainTextResponse)
async def index() -> str:
    return f"Hello from {settings.APP_NAME}!"


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}
