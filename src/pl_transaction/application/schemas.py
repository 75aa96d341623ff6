"""Pydantic schemas for pl_transaction API requests and responses.

Numeric request fields are strict: a JSON string such as "12.5" is rejected
rather than coerced. Amounts travel as JSON numbers inbound and as
two-decimal strings outbound ("12.50"), matching NUMERIC(10,2) storage.
"""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field, model_validator

from src.pl_transaction.domain.models import Transaction, TypeSummary

_CENT = Decimal("0.01")


def to_money(value: float | int) -> Decimal:
    """Float from JSON → two-decimal Decimal, without binary float noise."""
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def money_str(value: Decimal) -> str:
    return f"{value.quantize(_CENT, rounding=ROUND_HALF_UP):f}"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AddTransactionRequest(BaseModel):
    amount: float = Field(..., ge=0, strict=True)
    title: str = Field(..., min_length=1, max_length=32, strict=True)
    type: int = Field(..., ge=0, strict=True, description="Category code, e.g. income/expense")
    kind: int = Field(..., ge=0, strict=True, description="Sub-category code")
    currency: int = Field(..., ge=0, strict=True)
    remark: str | None = Field(None, strict=True)


class UpdateTransactionRequest(BaseModel):
    id: int = Field(..., ge=0, strict=True)
    is_delete: bool = False
    # Only checked on the amount branch; a delete ignores it.
    amount: float | None = Field(None, strict=True)

    @model_validator(mode="after")
    def check_amount_branch(self) -> "UpdateTransactionRequest":
        if self.is_delete:
            return self
        if self.amount is None:
            raise ValueError("amount is required unless is_delete is true")
        if to_money(self.amount) <= 0:
            raise ValueError("amount must be greater than 0.00 after rounding to cents")
        return self


class DeleteTransactionRequest(BaseModel):
    id: int = Field(..., ge=0, strict=True)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionListItem(BaseModel):
    id: int
    title: str
    amount: str
    type: int
    date: str  # local time, YYYY-MM-DD HH:MM:SS

    @classmethod
    def from_domain(cls, tx: Transaction, date: str) -> "TransactionListItem":
        return cls(
            id=tx.id,
            title=tx.title,
            amount=money_str(tx.amount),
            type=tx.type,
            date=date,
        )


class TypeSummaryItem(BaseModel):
    type: int
    sum: str
    count: int

    @classmethod
    def from_domain(cls, s: TypeSummary) -> "TypeSummaryItem":
        return cls(type=s.type, sum=money_str(s.sum), count=s.count)


class TransactionListResponse(BaseModel):
    ok: bool = True
    data: list[TransactionListItem]


class OverviewResponse(BaseModel):
    ok: bool = True
    start_at: str
    end_at: str
    data: list[TypeSummaryItem]
