"""Odds resolution for payouts (multiplier on a 10000 scale).

For a bet owner assigned to a subadmin, a subadmin override for the game type
wins; otherwise the admin-wide odds; otherwise settings.DEFAULT_ODDS_SCALED.
One OddsResolver lives for one settlement run (or one bet placement), so each
(superior, game type) pair hits the database at most once.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bp_settlement.domain.modes import BetMode
from src.bp_settlement.domain.repository import OddsRepositoryProtocol

logger = logging.getLogger(__name__)

GAME_TYPES: dict[BetMode, str] = {
    BetMode.JODI: "satamatka_jodi",
    BetMode.HARF: "satamatka_harf",
    BetMode.CROSSING: "satamatka_crossing",
    BetMode.ODD_EVEN: "satamatka_odd_even",
    BetMode.TEAM_TOSS: "team_toss",
}

if set(GAME_TYPES) != set(BetMode):
    raise RuntimeError("every BetMode needs a game_odds game type")


class OddsResolver:
    def __init__(self, repo: OddsRepositoryProtocol) -> None:
        self._repo = repo
        self._cache: dict[tuple[int | None, str], int] = {}

    async def odds_for(
        self, db: AsyncSession, mode: str, superior_id: int | None
    ) -> int:
        game_type = GAME_TYPES[BetMode(mode)]
        key = (superior_id, game_type)
        if key not in self._cache:
            self._cache[key] = await self._resolve(db, game_type, superior_id)
        return self._cache[key]

    async def _resolve(
        self, db: AsyncSession, game_type: str, superior_id: int | None
    ) -> int:
        if superior_id is not None:
            odds = await self._repo.get_subadmin_odds(db, superior_id, game_type)
            if odds is not None:
                return odds
        odds = await self._repo.get_admin_odds(db, game_type)
        if odds is not None:
            return odds
        logger.warning(
            "ConfigurationMissing: no odds for game_type=%s, using default %d",
            game_type,
            settings.DEFAULT_ODDS_SCALED,
        )
        return settings.DEFAULT_ODDS_SCALED
