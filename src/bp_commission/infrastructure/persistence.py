"""CommissionRepository — reads commission/discount configuration rows."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_GET_DEPOSIT_COMMISSION_SQL = text("""
    SELECT commission_rate
    FROM deposit_commissions
    WHERE subadmin_id = :subadmin_id AND is_active = TRUE
    LIMIT 1
""")

_GET_DEFAULT_COMMISSION_SQL = text("""
    SELECT setting_value
    FROM system_settings
    WHERE setting_type = 'commission_default' AND setting_key = 'deposit'
    LIMIT 1
""")

_GET_PLAYER_DISCOUNT_SQL = text("""
    SELECT discount_rate
    FROM player_deposit_discounts
    WHERE account_id = :player_id
      AND subadmin_id = :subadmin_id
      AND is_active = TRUE
    LIMIT 1
""")

_UPSERT_DEPOSIT_COMMISSION_SQL = text("""
    INSERT INTO deposit_commissions (subadmin_id, commission_rate, is_active)
    VALUES (:subadmin_id, :rate, TRUE)
    ON CONFLICT (subadmin_id) DO UPDATE
        SET commission_rate = EXCLUDED.commission_rate,
            is_active = TRUE,
            updated_at = NOW()
""")


class CommissionRepository:
    async def get_deposit_commission(
        self, db: AsyncSession, subadmin_id: int
    ) -> int | None:
        row = (
            await db.execute(_GET_DEPOSIT_COMMISSION_SQL, {"subadmin_id": subadmin_id})
        ).fetchone()
        return int(row.commission_rate) if row else None

    async def get_default_deposit_commission(self, db: AsyncSession) -> int | None:
        row = (await db.execute(_GET_DEFAULT_COMMISSION_SQL)).fetchone()
        if row is None:
            return None
        try:
            return int(row.setting_value)
        except ValueError:
            logger.warning(
                "Ignoring non-integer default deposit commission %r", row.setting_value
            )
            return None

    async def get_player_deposit_discount(
        self, db: AsyncSession, player_id: int, subadmin_id: int
    ) -> int | None:
        row = (
            await db.execute(
                _GET_PLAYER_DISCOUNT_SQL,
                {"player_id": player_id, "subadmin_id": subadmin_id},
            )
        ).fetchone()
        return int(row.discount_rate) if row else None

    async def upsert_deposit_commission(
        self, db: AsyncSession, subadmin_id: int, rate_bps: int
    ) -> None:
        await db.execute(
            _UPSERT_DEPOSIT_COMMISSION_SQL, {"subadmin_id": subadmin_id, "rate": rate_bps}
        )
