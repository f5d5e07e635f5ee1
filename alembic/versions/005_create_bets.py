"""005: create bets table

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
        CREATE TABLE bets (
            id                  BIGSERIAL       PRIMARY KEY,
            account_id          BIGINT          NOT NULL REFERENCES accounts (id),
            market_id           BIGINT          NOT NULL REFERENCES markets (id),
            mode                VARCHAR(16)     NOT NULL,
            prediction          VARCHAR(64)     NOT NULL,
            stake               BIGINT          NOT NULL,
            potential_payout    BIGINT          NOT NULL,
            payout              BIGINT          NOT NULL DEFAULT 0,
            result              VARCHAR(16)     NOT NULL DEFAULT 'pending',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            settled_at          TIMESTAMPTZ,
            CONSTRAINT ck_bets_mode CHECK (
                mode IN ('jodi', 'harf', 'crossing', 'odd_even', 'team_toss')
            ),
            CONSTRAINT ck_bets_result CHECK (result IN ('pending', 'win', 'loss')),
            CONSTRAINT ck_bets_stake_gt_0 CHECK (stake > 0),
            CONSTRAINT ck_bets_payout_gte_0 CHECK (payout >= 0),
            CONSTRAINT ck_bets_loss_pays_nothing CHECK (result <> 'loss' OR payout = 0)
        );
    """)
    op.execute("""
        CREATE INDEX idx_bets_market_pending
        ON bets (market_id, id)
        WHERE result = 'pending';
    """)
    op.execute("CREATE INDEX idx_bets_account ON bets (account_id, id DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
