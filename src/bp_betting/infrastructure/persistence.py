"""BetRepository — raw text() SQL over the bets table."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_betting.domain.models import Bet, NewBet
from src.bp_common.errors import InternalError

_BET_COLUMNS = """
    id, account_id, market_id, mode, prediction, stake, potential_payout,
    payout, result, created_at, settled_at
"""

_INSERT_BET_SQL = text(f"""
    INSERT INTO bets
        (account_id, market_id, mode, prediction, stake, potential_payout)
    VALUES
        (:account_id, :market_id, :mode, :prediction, :stake, :potential_payout)
    RETURNING {_BET_COLUMNS}
""")


def _row_to_bet(row: object) -> Bet:
    return Bet(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        market_id=row.market_id,  # type: ignore[attr-defined]
        mode=row.mode,  # type: ignore[attr-defined]
        prediction=row.prediction,  # type: ignore[attr-defined]
        stake=row.stake,  # type: ignore[attr-defined]
        potential_payout=row.potential_payout,  # type: ignore[attr-defined]
        payout=row.payout,  # type: ignore[attr-defined]
        result=row.result,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        settled_at=row.settled_at,  # type: ignore[attr-defined]
    )


class BetRepository:
    async def insert_bet(self, db: AsyncSession, bet: NewBet) -> Bet:
        row = (
            await db.execute(
                _INSERT_BET_SQL,
                {
                    "account_id": bet.account_id,
                    "market_id": bet.market_id,
                    "mode": bet.mode,
                    "prediction": bet.prediction,
                    "stake": bet.stake,
                    "potential_payout": bet.potential_payout,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError(f"bet insert returned no row for account {bet.account_id}")
        return _row_to_bet(row)
