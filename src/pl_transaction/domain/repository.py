# src/pl_transaction/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock or an in-memory fake conforming to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_transaction.domain.models import NewTransaction, Transaction, TypeSummary


class TransactionRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, tx: NewTransaction) -> int: ...

    async def update_amount(
        self, db: AsyncSession, tx_id: int, amount: Decimal
    ) -> int: ...

    async def soft_delete(
        self, db: AsyncSession, tx_id: int, deleted_at: datetime
    ) -> int: ...

    async def list_active_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[Transaction]: ...

    async def summarize_active_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[TypeSummary]: ...
