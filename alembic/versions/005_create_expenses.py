"""005: create expenses table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE expenses (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            account_id      UUID            NOT NULL REFERENCES merchants (id) ON DELETE CASCADE,
            amount          BIGINT          NOT NULL,
            reason          VARCHAR(500)    NOT NULL,
            category        VARCHAR(100),
            spent_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_expenses_amount_gt_0 CHECK (amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_expenses_account_spent_at ON expenses (account_id, spent_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS expenses CASCADE;")
