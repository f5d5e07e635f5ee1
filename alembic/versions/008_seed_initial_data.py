"""008: seed initial data

Revision ID: 008
Revises: 007
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Root admin; funds enter the platform through platform investment
    op.execute("""
        INSERT INTO accounts (username, role, balance)
        VALUES ('admin', 'admin', 0);
    """)
    op.execute("""
        INSERT INTO system_settings (setting_type, setting_key, setting_value)
        VALUES ('commission_default', 'deposit', '10000');
    """)
    # Admin-wide odds on the 10000 scale (900000 == 90x)
    op.execute("""
        INSERT INTO game_odds (game_type, odds, set_by_admin) VALUES
            ('satamatka_jodi',     900000, TRUE),
            ('satamatka_harf',      90000, TRUE),
            ('satamatka_crossing',  90000, TRUE),
            ('satamatka_odd_even',  19000, TRUE),
            ('team_toss',           19000, TRUE);
    """)


def downgrade() -> None:
    op.execute("DELETE FROM game_odds WHERE set_by_admin;")
    op.execute("DELETE FROM system_settings WHERE setting_type = 'commission_default';")
    op.execute("DELETE FROM accounts WHERE username = 'admin';")
