"""Commission Resolver — effective rates for transfers, never blocking on config.

Deposit commission for a subadmin (10000 scale), resolved in order:
  1. the subadmin's active row in deposit_commissions
  2. the platform default in system_settings (commission_default / deposit)
  3. settings.DEFAULT_COMMISSION_BPS (10000 = admin pays the full amount)

Deposit discount for a player funded by their subadmin: active row in
player_deposit_discounts, else 0 (no bonus).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bp_commission.domain.repository import CommissionRepositoryProtocol
from src.bp_commission.infrastructure.persistence import CommissionRepository
from src.bp_common.subunits import RATE_SCALE

logger = logging.getLogger(__name__)


def _clamp(rate_bps: int) -> int:
    return max(0, min(RATE_SCALE, rate_bps))


class CommissionResolver:
    def __init__(self, repo: CommissionRepositoryProtocol | None = None) -> None:
        self._repo: CommissionRepositoryProtocol = repo or CommissionRepository()

    async def rate_for(self, db: AsyncSession, subadmin_id: int) -> int:
        rate = await self._repo.get_deposit_commission(db, subadmin_id)
        if rate is not None:
            return _clamp(rate)

        # system_settings.setting_value is free text, so clamp it as well
        rate = await self._repo.get_default_deposit_commission(db)
        if rate is not None:
            return _clamp(rate)

        logger.info(
            "No deposit commission configured for subadmin=%d, using default %d bps",
            subadmin_id,
            settings.DEFAULT_COMMISSION_BPS,
        )
        return settings.DEFAULT_COMMISSION_BPS

    async def discount_for(
        self, db: AsyncSession, player_id: int, subadmin_id: int
    ) -> int:
        rate = await self._repo.get_player_deposit_discount(db, player_id, subadmin_id)
        return _clamp(rate) if rate is not None else 0
