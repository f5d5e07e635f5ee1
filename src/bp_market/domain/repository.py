"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_market.domain.models import Market


class MarketRepositoryProtocol(Protocol):
    async def get_market(
        self, db: AsyncSession, market_id: int
    ) -> Market | None: ...

    async def lock_market(
        self, db: AsyncSession, market_id: int, shared: bool = False
    ) -> Market | None: ...

    async def update_status(
        self, db: AsyncSession, market_id: int, status: str
    ) -> None: ...

    async def record_result(
        self, db: AsyncSession, market_id: int, result: str
    ) -> None: ...
