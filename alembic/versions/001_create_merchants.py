"""001: create merchants table and shared trigger function

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE merchants (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            phone           VARCHAR(20)     NOT NULL,
            email           VARCHAR(255),
            password_hash   VARCHAR(255)    NOT NULL,
            business_name   VARCHAR(200)    NOT NULL,
            business_type   VARCHAR(100),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_merchants_phone   UNIQUE (phone),
            CONSTRAINT uq_merchants_email   UNIQUE (email)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_merchants_updated_at
            BEFORE UPDATE ON merchants
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE merchants IS 'Merchant accounts: login by phone, tenant boundary';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS merchants CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
