"""Ledger reconciliation: balances must be explained by their transaction records."""
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_SUM_MISMATCH_SQL = text("""
    SELECT a.id, a.balance, COALESCE(SUM(t.amount), 0) AS total
    FROM accounts a
    LEFT JOIN transactions t ON t.account_id = a.id
    GROUP BY a.id, a.balance
    HAVING a.balance <> COALESCE(SUM(t.amount), 0)
    ORDER BY a.id
""")
_LATEST_SNAPSHOT_MISMATCH_SQL = text("""
    SELECT a.id, a.balance, t.balance_after
    FROM accounts a
    JOIN LATERAL (
        SELECT balance_after
        FROM transactions
        WHERE account_id = a.id
        ORDER BY id DESC
        LIMIT 1
    ) t ON TRUE
    WHERE a.balance <> t.balance_after
    ORDER BY a.id
""")
_NEGATIVE_BALANCE_SQL = text(
    "SELECT id, balance FROM accounts WHERE balance < 0 ORDER BY id"
)


async def verify_ledger(db: AsyncSession) -> list[str]:
    """Returns a list of violation strings; empty means the ledger reconciles."""
    violations: list[str] = []

    for account_id, balance, total in (await db.execute(_SUM_MISMATCH_SQL)).fetchall():
        violations.append(
            f"account {account_id}: balance {balance} != sum of transactions {total}"
        )
    for account_id, balance, balance_after in (
        await db.execute(_LATEST_SNAPSHOT_MISMATCH_SQL)
    ).fetchall():
        violations.append(
            f"account {account_id}: balance {balance} != latest balance_after {balance_after}"
        )
    for account_id, balance in (await db.execute(_NEGATIVE_BALANCE_SQL)).fetchall():
        violations.append(f"account {account_id}: negative balance {balance}")

    for msg in violations:
        logger.error("Ledger reconciliation violated: %s", msg)
    return violations
