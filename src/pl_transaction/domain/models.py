"""Domain models for pl_transaction: pure dataclasses, no I/O."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class TransactionState(str, Enum):
    """Record lifecycle: ACTIVE until soft-deleted, then DELETED for good."""

    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


@dataclass
class NewTransaction:
    """Fields supplied by the caller on insert; id and timestamps are server-side."""

    amount: Decimal
    title: str
    type: int
    kind: int
    currency: int
    remark: str | None = None


@dataclass
class Transaction:
    id: int
    amount: Decimal
    title: str
    type: int
    kind: int
    currency: int
    remark: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @property
    def state(self) -> TransactionState:
        if self.deleted_at is None:
            return TransactionState.ACTIVE
        return TransactionState.DELETED

    @property
    def is_active(self) -> bool:
        return self.state is TransactionState.ACTIVE


@dataclass
class TypeSummary:
    """Per-type aggregate of active records inside a window."""

    type: int
    sum: Decimal
    count: int
