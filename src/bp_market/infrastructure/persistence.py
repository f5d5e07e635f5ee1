"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM). Writes run in the caller's
transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_market.domain.models import Market

_COLUMNS = "id, name, kind, status, result, team_a, team_b, resulted_at, created_at"

_GET_MARKET_SQL = text(f"SELECT {_COLUMNS} FROM markets WHERE id = :market_id")

_LOCK_MARKET_SQL = text(
    f"SELECT {_COLUMNS} FROM markets WHERE id = :market_id FOR UPDATE"
)

# Bet placement holds a shared lock so the market cannot close mid-placement.
_SHARE_MARKET_SQL = text(
    f"SELECT {_COLUMNS} FROM markets WHERE id = :market_id FOR SHARE"
)

_UPDATE_STATUS_SQL = text("""
    UPDATE markets
    SET status = :status, updated_at = NOW()
    WHERE id = :market_id
""")

_RECORD_RESULT_SQL = text("""
    UPDATE markets
    SET status = 'resulted',
        result = :result,
        resulted_at = NOW(),
        updated_at = NOW()
    WHERE id = :market_id
""")


def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        kind=row.kind,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        result=row.result,  # type: ignore[attr-defined]
        team_a=row.team_a,  # type: ignore[attr-defined]
        team_b=row.team_b,  # type: ignore[attr-defined]
        resulted_at=row.resulted_at,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class MarketRepository:
    async def get_market(self, db: AsyncSession, market_id: int) -> Market | None:
        row = (await db.execute(_GET_MARKET_SQL, {"market_id": market_id})).fetchone()
        return _row_to_market(row) if row else None

    async def lock_market(
        self, db: AsyncSession, market_id: int, shared: bool = False
    ) -> Market | None:
        sql = _SHARE_MARKET_SQL if shared else _LOCK_MARKET_SQL
        row = (await db.execute(sql, {"market_id": market_id})).fetchone()
        return _row_to_market(row) if row else None

    async def update_status(
        self, db: AsyncSession, market_id: int, status: str
    ) -> None:
        await db.execute(_UPDATE_STATUS_SQL, {"market_id": market_id, "status": status})

    async def record_result(
        self, db: AsyncSession, market_id: int, result: str
    ) -> None:
        await db.execute(_RECORD_RESULT_SQL, {"market_id": market_id, "result": result})
