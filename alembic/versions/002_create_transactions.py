"""002: create transactions table

Revision ID: 002
Revises: 001
Create Date: 2024-01-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              SERIAL          PRIMARY KEY,
            amount          NUMERIC(10, 2)  NOT NULL,
            type            INTEGER         NOT NULL,
            kind            INTEGER         NOT NULL,
            currency        INTEGER         NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_amount_gte_0    CHECK (amount >= 0),
            CONSTRAINT ck_transactions_type_gte_0      CHECK (type >= 0),
            CONSTRAINT ck_transactions_kind_gte_0      CHECK (kind >= 0),
            CONSTRAINT ck_transactions_currency_gte_0  CHECK (currency >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_created_at ON transactions (created_at);")
    op.execute("""
        CREATE TRIGGER trg_transactions_updated_at
            BEFORE UPDATE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE transactions IS 'Income/expense records';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
