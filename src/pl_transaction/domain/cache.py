"""Response cache contract for transaction reads.

Cache-aside:
  - Read: check cache → DB on miss → populate cache (fixed TTL)
  - Write: DB first, then flush every key under the namespace

Keys are built from the literal query strings, not the resolved UTC
instants, so "2024-01-01"/"2024-01-01" always maps to the same entry.
"""

from typing import Any, Protocol

CACHE_NAMESPACE = "transaction"


def list_cache_key(start_at: str, end_at: str) -> str:
    return f"{CACHE_NAMESPACE}:list-{start_at}-{end_at}"


def overview_cache_key(start_at: str, end_at: str) -> str:
    return f"{CACHE_NAMESPACE}:overview-{start_at}-{end_at}"


class TransactionCacheProtocol(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    async def invalidate_namespace(self) -> int: ...
