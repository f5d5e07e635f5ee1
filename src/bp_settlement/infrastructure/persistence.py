"""SettlementRepository and OddsRepository — raw text() SQL over bets / game_odds.

claim_bet is the exactly-once guard: the UPDATE only matches a bet that is
still pending, inside the same transaction that credits the payout.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_settlement.domain.models import PendingBet

_LIST_PENDING_BETS_SQL = text("""
    SELECT b.id, b.account_id, b.market_id, b.mode, b.prediction, b.stake,
           a.assigned_to AS owner_assigned_to
    FROM bets b
    JOIN accounts a ON a.id = b.account_id
    WHERE b.market_id = :market_id AND b.result = 'pending'
    ORDER BY b.id
""")

_CLAIM_BET_SQL = text("""
    UPDATE bets
    SET result = :result,
        payout = :payout,
        settled_at = NOW()
    WHERE id = :bet_id AND result = 'pending'
    RETURNING id
""")

_SUBADMIN_ODDS_SQL = text("""
    SELECT odds
    FROM game_odds
    WHERE subadmin_id = :subadmin_id AND game_type = :game_type
    ORDER BY updated_at DESC
    LIMIT 1
""")

_ADMIN_ODDS_SQL = text("""
    SELECT odds
    FROM game_odds
    WHERE set_by_admin = TRUE AND subadmin_id IS NULL AND game_type = :game_type
    ORDER BY updated_at DESC
    LIMIT 1
""")


class SettlementRepository:
    async def list_pending_bets(
        self, db: AsyncSession, market_id: int
    ) -> list[PendingBet]:
        rows = (await db.execute(_LIST_PENDING_BETS_SQL, {"market_id": market_id})).fetchall()
        return [
            PendingBet(
                id=row.id,
                account_id=row.account_id,
                market_id=row.market_id,
                mode=row.mode,
                prediction=row.prediction,
                stake=row.stake,
                owner_assigned_to=row.owner_assigned_to,
            )
            for row in rows
        ]

    async def claim_bet(
        self, db: AsyncSession, bet_id: int, result: str, payout: int
    ) -> bool:
        row = (
            await db.execute(
                _CLAIM_BET_SQL, {"bet_id": bet_id, "result": result, "payout": payout}
            )
        ).fetchone()
        return row is not None


class OddsRepository:
    async def get_subadmin_odds(
        self, db: AsyncSession, subadmin_id: int, game_type: str
    ) -> int | None:
        row = (
            await db.execute(
                _SUBADMIN_ODDS_SQL, {"subadmin_id": subadmin_id, "game_type": game_type}
            )
        ).fetchone()
        return row.odds if row else None

    async def get_admin_odds(self, db: AsyncSession, game_type: str) -> int | None:
        row = (await db.execute(_ADMIN_ODDS_SQL, {"game_type": game_type})).fetchone()
        return row.odds if row else None
