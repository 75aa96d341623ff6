"""TransactionRepository — concrete implementation of TransactionRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Reads only ever see active rows (deleted_at IS NULL); the window bounds are
UTC instants and BETWEEN is inclusive on both ends.
The caller owns the transaction: nothing here commits.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_transaction.domain.models import NewTransaction, Transaction, TypeSummary

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_INSERT_SQL = text("""
    INSERT INTO transactions (amount, title, type, kind, currency, remark)
    VALUES (:amount, :title, :type, :kind, :currency, :remark)
    RETURNING id
""")

_UPDATE_AMOUNT_SQL = text("""
    UPDATE transactions
    SET amount = :amount
    WHERE id = :id
""")

# Soft delete is terminal: a second delete keeps the first timestamp.
_SOFT_DELETE_SQL = text("""
    UPDATE transactions
    SET deleted_at = :deleted_at
    WHERE id = :id
      AND deleted_at IS NULL
""")

_LIST_ACTIVE_SQL = text("""
    SELECT id, amount, title, type, kind, currency, remark,
           created_at, updated_at, deleted_at
    FROM transactions
    WHERE created_at BETWEEN :start AND :end
      AND deleted_at IS NULL
    ORDER BY created_at ASC, id ASC
""")

_SUMMARY_SQL = text("""
    SELECT type,
           SUM(amount)   AS total,
           COUNT(amount) AS cnt
    FROM transactions
    WHERE created_at BETWEEN :start AND :end
      AND deleted_at IS NULL
    GROUP BY type
    ORDER BY type
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        kind=row.kind,  # type: ignore[attr-defined]
        currency=row.currency,  # type: ignore[attr-defined]
        remark=row.remark,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        deleted_at=row.deleted_at,  # type: ignore[attr-defined]
    )


def _row_to_summary(row: object) -> TypeSummary:
    return TypeSummary(
        type=row.type,  # type: ignore[attr-defined]
        sum=row.total,  # type: ignore[attr-defined]
        count=row.cnt,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TransactionRepository:
    async def insert(self, db: AsyncSession, tx: NewTransaction) -> int:
        result = await db.execute(
            _INSERT_SQL,
            {
                "amount": tx.amount,
                "title": tx.title,
                "type": tx.type,
                "kind": tx.kind,
                "currency": tx.currency,
                "remark": tx.remark,
            },
        )
        return result.scalar_one()

    async def update_amount(self, db: AsyncSession, tx_id: int, amount: Decimal) -> int:
        """Returns the number of rows touched (0 for an unknown id)."""
        result = await db.execute(_UPDATE_AMOUNT_SQL, {"id": tx_id, "amount": amount})
        return result.rowcount

    async def soft_delete(
        self, db: AsyncSession, tx_id: int, deleted_at: datetime
    ) -> int:
        result = await db.execute(
            _SOFT_DELETE_SQL, {"id": tx_id, "deleted_at": deleted_at}
        )
        return result.rowcount

    async def list_active_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[Transaction]:
        result = await db.execute(_LIST_ACTIVE_SQL, {"start": start, "end": end})
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def summarize_active_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[TypeSummary]:
        result = await db.execute(_SUMMARY_SQL, {"start": start, "end": end})
        return [_row_to_summary(row) for row in result.fetchall()]
