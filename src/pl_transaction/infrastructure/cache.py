"""RedisTransactionCache — concrete implementation of TransactionCacheProtocol.

Values are stored as JSON text and decoded on read, so a hit hands back
exactly the payload that was cached.
"""

import json
import logging
from typing import Any

import redis.asyncio as aioredis

from src.pl_transaction.domain.cache import CACHE_NAMESPACE

logger = logging.getLogger(__name__)


class RedisTransactionCache:
    def __init__(self, redis: aioredis.Redis, namespace: str = CACHE_NAMESPACE) -> None:
        self._redis = redis
        self._namespace = namespace

    async def get(self, key: str) -> Any | None:
        raw = await self._redis.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        await self._redis.set(key, json.dumps(value), ex=ttl_seconds)

    async def invalidate_namespace(self) -> int:
        """Delete every key under `<namespace>:*`. Returns the number deleted."""
        keys = [key async for key in self._redis.scan_iter(match=f"{self._namespace}:*")]
        if not keys:
            return 0
        deleted = await self._redis.delete(*keys)
        logger.debug("Flushed %d cache keys under %s:*", deleted, self._namespace)
        return deleted
