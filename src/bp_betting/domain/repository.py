"""Bet repository Protocol. Writes run in the caller's transaction."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_betting.domain.models import Bet, NewBet


class BetRepositoryProtocol(Protocol):
    async def insert_bet(self, db: AsyncSession, bet: NewBet) -> Bet: ...
