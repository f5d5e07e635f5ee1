"""WalletRequestRepository — raw text() SQL over wallet_requests.

asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
payment_details is JSONB; it is bound as a JSON string and cast server-side.
"""

import json

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_common.errors import InternalError
from src.bp_wallet.domain.models import NewWalletRequest, WalletRequest

_COLUMNS = """
    id, account_id, amount, request_type, status, payment_mode,
    payment_details, notes, reviewed_by, created_at, reviewed_at
"""

_INSERT_REQUEST_SQL = text(f"""
    INSERT INTO wallet_requests
        (account_id, amount, request_type, payment_mode, payment_details, notes)
    VALUES
        (:account_id, :amount, :request_type, :payment_mode,
         CAST(:payment_details AS JSONB), :notes)
    RETURNING {_COLUMNS}
""")

_LOCK_REQUEST_SQL = text(
    f"SELECT {_COLUMNS} FROM wallet_requests WHERE id = :request_id FOR UPDATE"
)

_MARK_REVIEWED_SQL = text(f"""
    UPDATE wallet_requests
    SET status = :status,
        reviewed_by = :reviewed_by,
        notes = COALESCE(CAST(:notes AS TEXT), notes),
        reviewed_at = NOW(),
        updated_at = NOW()
    WHERE id = :request_id AND status = 'pending'
    RETURNING {_COLUMNS}
""")

# owner_id / superior_id both NULL → every request (admin view).
_LIST_REQUESTS_SQL = text("""
    SELECT w.id, w.account_id, w.amount, w.request_type, w.status, w.payment_mode,
           w.payment_details, w.notes, w.reviewed_by, w.created_at, w.reviewed_at
    FROM wallet_requests w
    JOIN accounts a ON a.id = w.account_id
    WHERE (
            (CAST(:owner_id AS BIGINT) IS NULL AND CAST(:superior_id AS BIGINT) IS NULL)
            OR w.account_id = CAST(:owner_id AS BIGINT)
            OR a.assigned_to = CAST(:superior_id AS BIGINT)
          )
      AND (CAST(:status AS TEXT) IS NULL OR w.status = CAST(:status AS TEXT))
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR w.id < CAST(:cursor_id AS BIGINT))
    ORDER BY w.id DESC
    LIMIT :limit
""")


def _row_to_request(row: object) -> WalletRequest:
    details = row.payment_details  # type: ignore[attr-defined]
    if isinstance(details, str):
        details = json.loads(details)
    return WalletRequest(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        request_type=row.request_type,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        payment_mode=row.payment_mode,  # type: ignore[attr-defined]
        payment_details=details,
        notes=row.notes,  # type: ignore[attr-defined]
        reviewed_by=row.reviewed_by,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        reviewed_at=row.reviewed_at,  # type: ignore[attr-defined]
    )


class WalletRequestRepository:
    async def insert_request(
        self, db: AsyncSession, request: NewWalletRequest
    ) -> WalletRequest:
        row = (
            await db.execute(
                _INSERT_REQUEST_SQL,
                {
                    "account_id": request.account_id,
                    "amount": request.amount,
                    "request_type": request.request_type,
                    "payment_mode": request.payment_mode,
                    "payment_details": (
                        json.dumps(request.payment_details)
                        if request.payment_details is not None
                        else None
                    ),
                    "notes": request.notes,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError("wallet request insert returned no rows")
        return _row_to_request(row)

    async def lock_request(
        self, db: AsyncSession, request_id: int
    ) -> WalletRequest | None:
        row = (await db.execute(_LOCK_REQUEST_SQL, {"request_id": request_id})).fetchone()
        return _row_to_request(row) if row else None

    async def mark_reviewed(
        self,
        db: AsyncSession,
        request_id: int,
        status: str,
        reviewed_by: int,
        notes: str | None,
    ) -> WalletRequest | None:
        row = (
            await db.execute(
                _MARK_REVIEWED_SQL,
                {
                    "request_id": request_id,
                    "status": status,
                    "reviewed_by": reviewed_by,
                    "notes": notes,
                },
            )
        ).fetchone()
        return _row_to_request(row) if row else None

    async def list_requests(
        self,
        db: AsyncSession,
        owner_id: int | None,
        superior_id: int | None,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[WalletRequest]:
        rows = (
            await db.execute(
                _LIST_REQUESTS_SQL,
                {
                    "owner_id": owner_id,
                    "superior_id": superior_id,
                    "status": status,
                    "cursor_id": cursor_id,
                    "limit": limit,
                },
            )
        ).fetchall()
        return [_row_to_request(row) for row in rows]
