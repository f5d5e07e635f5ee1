"""Repository Protocol for commission and deposit-discount configuration."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class CommissionRepositoryProtocol(Protocol):
    async def get_deposit_commission(
        self, db: AsyncSession, subadmin_id: int
    ) -> int | None: ...

    async def get_default_deposit_commission(self, db: AsyncSession) -> int | None: ...

    async def get_player_deposit_discount(
        self, db: AsyncSession, player_id: int, subadmin_id: int
    ) -> int | None: ...

    async def upsert_deposit_commission(
        self, db: AsyncSession, subadmin_id: int, rate_bps: int
    ) -> None: ...
