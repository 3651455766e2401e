"""006: create subscriptions table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE subscriptions (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            account_id          UUID            NOT NULL REFERENCES merchants (id) ON DELETE CASCADE,
            status              VARCHAR(20)     NOT NULL DEFAULT 'trial',
            trial_start         TIMESTAMPTZ     NOT NULL,
            trial_end           TIMESTAMPTZ     NOT NULL,
            period_start        TIMESTAMPTZ,
            period_end          TIMESTAMPTZ,
            plan                VARCHAR(20),
            amount              BIGINT,
            payment_method      VARCHAR(30),
            transaction_ref     VARCHAR(100),
            last_payment_date   TIMESTAMPTZ,
            last_payment_amount BIGINT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_subscriptions_account UNIQUE (account_id),
            CONSTRAINT ck_subscriptions_status
                CHECK (status IN ('trial', 'active', 'expired', 'cancelled')),
            CONSTRAINT ck_subscriptions_trial_window CHECK (trial_end > trial_start)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_subscriptions_updated_at
            BEFORE UPDATE ON subscriptions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS subscriptions CASCADE;")
