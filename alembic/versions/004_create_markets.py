"""004: create markets table

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
        CREATE TABLE markets (
            id              BIGSERIAL       PRIMARY KEY,
            name            VARCHAR(128)    NOT NULL,
            kind            VARCHAR(16)     NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'waiting',
            result          VARCHAR(16),
            team_a          VARCHAR(64),
            team_b          VARCHAR(64),
            resulted_at     TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_kind CHECK (kind IN ('number', 'toss')),
            CONSTRAINT ck_markets_status CHECK (
                status IN ('waiting', 'open', 'closed', 'resulted')
            ),
            CONSTRAINT ck_markets_result CHECK (
                result IS NULL
                OR (kind = 'number' AND result ~ '^[0-9]{2}$')
                OR (kind = 'toss' AND result IN ('team_a', 'team_b'))
            ),
            CONSTRAINT ck_markets_resulted_has_result CHECK (
                (status = 'resulted') = (result IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_markets_status ON markets (status);")
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
