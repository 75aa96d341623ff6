"""003: add title, remark and soft delete to transactions

Revision ID: 003
Revises: 002
Create Date: 2024-01-01

Rows that predate this revision get an empty title.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("ALTER TABLE transactions ADD COLUMN title VARCHAR(32) NOT NULL DEFAULT '';")
    op.execute("ALTER TABLE transactions ALTER COLUMN title DROP DEFAULT;")
    op.execute("ALTER TABLE transactions ADD COLUMN remark TEXT;")
    op.execute("ALTER TABLE transactions ADD COLUMN deleted_at TIMESTAMPTZ;")
    # list/overview only ever read live rows
    op.execute("""
        CREATE INDEX idx_transactions_active_created_at
            ON transactions (created_at)
            WHERE deleted_at IS NULL;
    """)


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_transactions_active_created_at;")
    op.execute("ALTER TABLE transactions DROP COLUMN IF EXISTS deleted_at;")
    op.execute("ALTER TABLE transactions DROP COLUMN IF EXISTS remark;")
    op.execute("ALTER TABLE transactions DROP COLUMN IF EXISTS title;")
