"""002: create clients table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE clients (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            account_id      UUID            NOT NULL REFERENCES merchants (id) ON DELETE CASCADE,
            name            VARCHAR(200)    NOT NULL,
            phone           VARCHAR(32),
            address         VARCHAR(500),
            total_credit    BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_clients_total_credit_gte_0 CHECK (total_credit >= 0),
            CONSTRAINT ck_clients_name_not_blank     CHECK (LENGTH(TRIM(name)) > 0)
        );
    """)
    op.execute("CREATE INDEX idx_clients_account ON clients (account_id, created_at);")
    op.execute("CREATE INDEX idx_clients_account_lower_name ON clients (account_id, LOWER(name));")
    op.execute("""
        CREATE TRIGGER trg_clients_updated_at
            BEFORE UPDATE ON clients
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON COLUMN clients.total_credit IS "
        "'Outstanding credit in francs: credit sales minus payments';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS clients CASCADE;")
