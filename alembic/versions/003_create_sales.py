"""003: create sales table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE sales (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            account_id      UUID            NOT NULL REFERENCES merchants (id) ON DELETE CASCADE,
            amount          BIGINT          NOT NULL,
            payment_mode    VARCHAR(10)     NOT NULL,
            customer_name   VARCHAR(200),
            client_id       UUID            REFERENCES clients (id) ON DELETE SET NULL,
            notes           VARCHAR(500),
            sold_at         TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_sales_amount_gt_0     CHECK (amount > 0),
            CONSTRAINT ck_sales_payment_mode    CHECK (payment_mode IN ('cash', 'credit'))
        );
    """)
    op.execute("CREATE INDEX idx_sales_account_sold_at ON sales (account_id, sold_at DESC);")
    op.execute("CREATE INDEX idx_sales_client ON sales (client_id) WHERE client_id IS NOT NULL;")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS sales CASCADE;")
