"""003: create transactions table

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
        CREATE TABLE transactions (
            id              BIGSERIAL       PRIMARY KEY,
            account_id      BIGINT          NOT NULL REFERENCES accounts (id),
            amount          BIGINT          NOT NULL,
            balance_after   BIGINT          NOT NULL,
            performed_by    BIGINT          NOT NULL REFERENCES accounts (id),
            description     VARCHAR(500)    NOT NULL,
            reference_type  VARCHAR(30),
            reference_id    BIGINT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_reference_type CHECK (
                reference_type IS NULL OR reference_type IN (
                    'TRANSFER', 'WALLET_REQUEST', 'PLATFORM_INVESTMENT',
                    'BET_STAKE', 'BET_PAYOUT'
                )
            ),
            CONSTRAINT ck_transactions_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_account ON transactions (account_id, id DESC);")
    op.execute("""
        CREATE INDEX idx_transactions_reference
        ON transactions (reference_type, reference_id)
        WHERE reference_id IS NOT NULL;
    """)
    op.execute("""
        CREATE TRIGGER trg_transactions_append_only
            BEFORE UPDATE OR DELETE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)
    op.execute("COMMENT ON TABLE transactions IS 'Append-only balance history; amounts in subunits';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
