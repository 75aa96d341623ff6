"""TransactionApplicationService — thin composition layer.

Writes: repository call → commit (rollback on failure) → flush the
transaction cache namespace. The flush happens only after a successful
commit, so a failed write leaves the cache untouched.

Reads: resolve the local-day window first (so a bad date never reaches the
cache), then cache-aside against the repository.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pl_common.datetime_utils import (
    format_local,
    get_zone,
    resolve_local_day_window,
    utc_now,
)
from src.pl_transaction.application.schemas import (
    AddTransactionRequest,
    OverviewResponse,
    TransactionListItem,
    TransactionListResponse,
    TypeSummaryItem,
    UpdateTransactionRequest,
    to_money,
)
from src.pl_transaction.domain.cache import (
    TransactionCacheProtocol,
    list_cache_key,
    overview_cache_key,
)
from src.pl_transaction.domain.models import NewTransaction
from src.pl_transaction.domain.repository import TransactionRepositoryProtocol
from src.pl_transaction.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)


class TransactionApplicationService:
    def __init__(
        self,
        repo: TransactionRepositoryProtocol | None = None,
        timezone_name: str | None = None,
        cache_ttl_seconds: int | None = None,
    ) -> None:
        self._repo: TransactionRepositoryProtocol = repo or TransactionRepository()
        if timezone_name is None:
            timezone_name = settings.LOCAL_TIMEZONE
        if cache_ttl_seconds is None:
            cache_ttl_seconds = settings.CACHE_TTL_SECONDS
        self._zone = get_zone(timezone_name)
        self._ttl = cache_ttl_seconds

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add(
        self,
        db: AsyncSession,
        cache: TransactionCacheProtocol,
        body: AddTransactionRequest,
    ) -> int:
        new_tx = NewTransaction(
            amount=to_money(body.amount),
            title=body.title,
            type=body.type,
            kind=body.kind,
            currency=body.currency,
            remark=body.remark,
        )
        try:
            tx_id = await self._repo.insert(db, new_tx)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await cache.invalidate_namespace()
        logger.info("Transaction added: id=%s type=%s", tx_id, new_tx.type)
        return tx_id

    async def update(
        self,
        db: AsyncSession,
        cache: TransactionCacheProtocol,
        body: UpdateTransactionRequest,
    ) -> None:
        if body.is_delete:
            await self.delete(db, cache, body.id)
            return

        amount = to_money(body.amount)  # type: ignore[arg-type]
        try:
            touched = await self._repo.update_amount(db, body.id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await cache.invalidate_namespace()
        logger.info("Transaction amount updated: id=%s rows=%s", body.id, touched)

    async def delete(
        self,
        db: AsyncSession,
        cache: TransactionCacheProtocol,
        tx_id: int,
    ) -> None:
        """Soft delete: stamps deleted_at; the row stays in storage."""
        try:
            touched = await self._repo.soft_delete(db, tx_id, utc_now())
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await cache.invalidate_namespace()
        logger.info("Transaction soft-deleted: id=%s rows=%s", tx_id, touched)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_transactions(
        self,
        db: AsyncSession,
        cache: TransactionCacheProtocol,
        start_at: str,
        end_at: str,
    ) -> TransactionListResponse:
        window = resolve_local_day_window(start_at, end_at, self._zone)
        key = list_cache_key(start_at, end_at)

        cached = await cache.get(key)
        if cached is not None:
            return TransactionListResponse(data=cached)

        rows = await self._repo.list_active_between(db, window.start_utc, window.end_utc)
        items = [
            TransactionListItem.from_domain(tx, format_local(tx.created_at, self._zone))
            for tx in rows
        ]
        # Empty windows are not cached: the next add may land in them.
        if items:
            await cache.set(key, [i.model_dump() for i in items], self._ttl)
        return TransactionListResponse(data=items)

    async def overview(
        self,
        db: AsyncSession,
        cache: TransactionCacheProtocol,
        start_at: str,
        end_at: str,
    ) -> OverviewResponse:
        window = resolve_local_day_window(start_at, end_at, self._zone)
        local_start, local_end = window.local_bounds()
        key = overview_cache_key(start_at, end_at)

        cached = await cache.get(key)
        if cached is not None:
            return OverviewResponse(start_at=local_start, end_at=local_end, data=cached)

        summaries = await self._repo.summarize_active_between(
            db, window.start_utc, window.end_utc
        )
        items = [TypeSummaryItem.from_domain(s) for s in summaries]
        await cache.set(key, [i.model_dump() for i in items], self._ttl)
        return OverviewResponse(start_at=local_start, end_at=local_end, data=items)
