"""004: create payments table (append-only)

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE payments (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            client_id       UUID            NOT NULL REFERENCES clients (id) ON DELETE CASCADE,
            amount          BIGINT          NOT NULL,
            notes           VARCHAR(500),
            paid_at         TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_payments_amount_gt_0 CHECK (amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_payments_client_paid_at ON payments (client_id, paid_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS payments CASCADE;")
