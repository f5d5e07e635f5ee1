"""MarketService — status progression, result declaration and settlement triggers.

declare_result commits the `resulted` status first, then hands the market to
SettlementEngine, which owns one transaction per bet. A crash between the two
leaves pending bets on a resulted market; resettle() is the recovery path.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_common.enums import MarketStatus
from src.bp_common.errors import InvalidTransitionError, MarketNotFoundError
from src.bp_market.domain.models import Market
from src.bp_market.domain.repository import MarketRepositoryProtocol
from src.bp_market.domain.rules import check_transition, validate_result
from src.bp_market.infrastructure.persistence import MarketRepository
from src.bp_settlement.domain.engine import SettlementEngine
from src.bp_settlement.domain.models import SettlementSummary

logger = logging.getLogger(__name__)


class MarketService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        settlement: SettlementEngine | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._settlement = settlement or SettlementEngine()

    async def get_market(self, db: AsyncSession, market_id: int) -> Market:
        market = await self._repo.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    async def transition_status(
        self, db: AsyncSession, market_id: int, status: str
    ) -> Market:
        target = MarketStatus(status).value
        try:
            market = await self._repo.lock_market(db, market_id)
            if market is None:
                raise MarketNotFoundError(market_id)
            check_transition(market_id, market.status, target)
            await self._repo.update_status(db, market_id, target)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Market %d: %s -> %s", market_id, market.status, target)
        market.status = target
        return market

    async def declare_result(
        self, db: AsyncSession, market_id: int, result: str, actor_id: int
    ) -> SettlementSummary:
        try:
            market = await self._repo.lock_market(db, market_id)
            if market is None:
                raise MarketNotFoundError(market_id)
            if market.status != MarketStatus.CLOSED:
                raise InvalidTransitionError(
                    f"result can only be declared on a closed market "
                    f"(market {market_id} is {market.status})"
                )
            declared = validate_result(market.kind, result.strip())
            await self._repo.record_result(db, market_id, declared)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Market %d resulted %s by account=%d", market_id, declared, actor_id)
        return await self._settlement.settle_market(
            db, market_id, declared, performed_by=actor_id
        )

    async def resettle(
        self, db: AsyncSession, market_id: int, actor_id: int
    ) -> SettlementSummary:
        market = await self.get_market(db, market_id)
        if market.status != MarketStatus.RESULTED or market.result is None:
            raise InvalidTransitionError(
                f"market {market_id} has no declared result to settle against"
            )
        logger.info("Re-running settlement for market %d by account=%d", market_id, actor_id)
        return await self._settlement.settle_market(
            db, market_id, market.result, performed_by=actor_id
        )
