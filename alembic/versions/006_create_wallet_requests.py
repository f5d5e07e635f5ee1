"""006: create wallet_requests table

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
        CREATE TABLE wallet_requests (
            id              BIGSERIAL       PRIMARY KEY,
            account_id      BIGINT          NOT NULL REFERENCES accounts (id),
            amount          BIGINT          NOT NULL,
            request_type    VARCHAR(32)     NOT NULL,
            payment_mode    VARCHAR(16),
            payment_details JSONB,
            status          VARCHAR(16)     NOT NULL DEFAULT 'pending',
            notes           VARCHAR(500),
            reviewed_by     BIGINT          REFERENCES accounts (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            reviewed_at     TIMESTAMPTZ,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wallet_requests_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_wallet_requests_type CHECK (
                request_type IN ('deposit', 'withdrawal', 'platform_investment')
            ),
            CONSTRAINT ck_wallet_requests_payment_mode CHECK (
                payment_mode IS NULL OR payment_mode IN ('upi', 'bank')
            ),
            CONSTRAINT ck_wallet_requests_status CHECK (
                status IN ('pending', 'approved', 'rejected')
            )
        );
    """)
    op.execute("CREATE INDEX idx_wallet_requests_account ON wallet_requests (account_id, id DESC);")
    op.execute("""
        CREATE INDEX idx_wallet_requests_pending
        ON wallet_requests (id)
        WHERE status = 'pending';
    """)
    op.execute("""
        CREATE TRIGGER trg_wallet_requests_updated_at
            BEFORE UPDATE ON wallet_requests
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wallet_requests CASCADE;")
