"""007: create commission, discount, odds and settings tables

Revision ID: 007
Revises: 006
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE deposit_commissions (
            id              BIGSERIAL       PRIMARY KEY,
            subadmin_id     BIGINT          NOT NULL REFERENCES accounts (id),
            commission_rate INTEGER         NOT NULL,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_deposit_commissions_subadmin UNIQUE (subadmin_id),
            CONSTRAINT ck_deposit_commissions_rate CHECK (
                commission_rate BETWEEN 0 AND 10000
            )
        );
    """)
    op.execute("""
        CREATE TABLE player_deposit_discounts (
            id              BIGSERIAL       PRIMARY KEY,
            account_id      BIGINT          NOT NULL REFERENCES accounts (id),
            subadmin_id     BIGINT          NOT NULL REFERENCES accounts (id),
            discount_rate   INTEGER         NOT NULL,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_player_deposit_discounts UNIQUE (account_id, subadmin_id),
            CONSTRAINT ck_player_deposit_discounts_rate CHECK (
                discount_rate BETWEEN 0 AND 10000
            )
        );
    """)
    op.execute("""
        CREATE TABLE game_odds (
            id              BIGSERIAL       PRIMARY KEY,
            game_type       VARCHAR(32)     NOT NULL,
            odds            INTEGER         NOT NULL,
            set_by_admin    BOOLEAN         NOT NULL DEFAULT FALSE,
            subadmin_id     BIGINT          REFERENCES accounts (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_game_odds_positive CHECK (odds > 0),
            CONSTRAINT ck_game_odds_owner CHECK (
                (set_by_admin AND subadmin_id IS NULL)
                OR (NOT set_by_admin AND subadmin_id IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_game_odds_lookup ON game_odds (game_type, subadmin_id);")
    op.execute("""
        CREATE TABLE system_settings (
            id              BIGSERIAL       PRIMARY KEY,
            setting_type    VARCHAR(64)     NOT NULL,
            setting_key     VARCHAR(64)     NOT NULL,
            setting_value   VARCHAR(255)    NOT NULL,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_system_settings UNIQUE (setting_type, setting_key)
        );
    """)
    for table in ("deposit_commissions", "player_deposit_discounts", "game_odds", "system_settings"):
        op.execute(f"""
            CREATE TRIGGER trg_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
        """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS system_settings CASCADE;")
    op.execute("DROP TABLE IF EXISTS game_odds CASCADE;")
    op.execute("DROP TABLE IF EXISTS player_deposit_discounts CASCADE;")
    op.execute("DROP TABLE IF EXISTS deposit_commissions CASCADE;")
