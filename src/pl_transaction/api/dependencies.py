"""FastAPI dependencies for pl_transaction.

Both the cache adapter and the service are resolved through Depends so
tests can swap them via app.dependency_overrides without a live Redis
or PostgreSQL.
"""

from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends

from src.pl_common.redis_client import get_redis
from src.pl_transaction.application.service import TransactionApplicationService
from src.pl_transaction.domain.cache import TransactionCacheProtocol
from src.pl_transaction.infrastructure.cache import RedisTransactionCache

_service = TransactionApplicationService()


async def get_transaction_cache(
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> TransactionCacheProtocol:
    return RedisTransactionCache(redis)


def get_transaction_service() -> TransactionApplicationService:
    return _service
