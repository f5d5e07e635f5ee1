"""Repository Protocols for settlement: bets to claim and odds to pay at."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_settlement.domain.models import PendingBet


class SettlementRepositoryProtocol(Protocol):
    async def list_pending_bets(
        self, db: AsyncSession, market_id: int
    ) -> list[PendingBet]: ...

    async def claim_bet(
        self, db: AsyncSession, bet_id: int, result: str, payout: int
    ) -> bool:
        """pending → result exactly once. False when another run already claimed it."""
        ...


class OddsRepositoryProtocol(Protocol):
    async def get_subadmin_odds(
        self, db: AsyncSession, subadmin_id: int, game_type: str
    ) -> int | None: ...

    async def get_admin_odds(
        self, db: AsyncSession, game_type: str
    ) -> int | None: ...
