"""Shared test fixtures.

The app is exercised through httpx's ASGITransport with the database
session, cache and service swapped for in-memory fakes, so no PostgreSQL
or Redis is needed. ASGITransport does not run the lifespan hook.
"""

import os

os.environ.setdefault("API_KEY", "test-api-key")

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.pl_common.database import get_db_session
from src.pl_transaction.api.dependencies import (
    get_transaction_cache,
    get_transaction_service,
)
from src.pl_transaction.application.service import TransactionApplicationService
from tests.fakes import InMemoryCache, InMemoryTransactionRepository

API_KEY = os.environ["API_KEY"]

# 2024-01-01 12:30:00 in Asia/Shanghai
FIXED_NOW = datetime(2024, 1, 1, 4, 30, tzinfo=UTC)


@pytest.fixture
def repo() -> InMemoryTransactionRepository:
    return InMemoryTransactionRepository(clock=lambda: FIXED_NOW)


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def db_session() -> MagicMock:
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
async def client(repo, cache, db_session) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints (no API key set)."""
    service = TransactionApplicationService(
        repo=repo, timezone_name="Asia/Shanghai", cache_ttl_seconds=3600
    )

    async def _db() -> AsyncGenerator[MagicMock, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_transaction_cache] = lambda: cache
    app.dependency_overrides[get_transaction_service] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Client that sends the configured X-API-KEY on every request."""
    client.headers.update({"X-API-KEY": API_KEY})
    return client
