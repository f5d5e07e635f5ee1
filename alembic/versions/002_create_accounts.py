"""002: create accounts table

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
        CREATE TABLE accounts (
            id              BIGSERIAL       PRIMARY KEY,
            username        VARCHAR(64)     NOT NULL,
            role            VARCHAR(16)     NOT NULL,
            balance         BIGINT          NOT NULL DEFAULT 0,
            assigned_to     BIGINT          REFERENCES accounts (id),
            is_blocked      BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_accounts_username UNIQUE (username),
            CONSTRAINT ck_accounts_role CHECK (role IN ('admin', 'subadmin', 'player')),
            CONSTRAINT ck_accounts_balance_gte_0 CHECK (balance >= 0),
            CONSTRAINT ck_accounts_not_self_assigned CHECK (assigned_to IS NULL OR assigned_to <> id)
        );
    """)
    op.execute("CREATE INDEX idx_accounts_assigned_to ON accounts (assigned_to);")
    op.execute("""
        CREATE TRIGGER trg_accounts_updated_at
            BEFORE UPDATE ON accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE accounts IS 'Role-hierarchical accounts; balance in subunits';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
