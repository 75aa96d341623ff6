"""SQLAlchemy ORM model for the transactions table.

Mirror of the table for typing and `alembic check`; persistence.py uses raw
text() SQL. Alembic revisions 002/003 are the authoritative DDL source.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.pl_common.database import Base


class TransactionORM(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    title: Mapped[str] = mapped_column(String(32), nullable=False)
    type: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[int] = mapped_column(Integer, nullable=False)
    remark: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
