"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

All balance mutations are single atomic PostgreSQL UPDATE ... RETURNING
statements. A debit carries its feasibility check in the WHERE clause, so the
read that decides "enough balance?" and the write happen in one statement
inside the caller's transaction: 0 rows means the check failed.

Transaction ownership: the CALLER (engine or application service) commits or
rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account, NewTransaction, Transaction
from src.bp_common.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InternalError,
)

# ---------------------------------------------------------------------------
# SQL: accounts
# ---------------------------------------------------------------------------

_GET_ACCOUNT_SQL = text("""
    SELECT id, username, role, balance, assigned_to, is_blocked, created_at
    FROM accounts
    WHERE id = :account_id
""")

# Ascending id order so two transfers over the same pair never deadlock.
_LOCK_ACCOUNTS_SQL = text("""
    SELECT id, username, role, balance, assigned_to, is_blocked, created_at
    FROM accounts
    WHERE id = ANY(CAST(:account_ids AS BIGINT[]))
    ORDER BY id
    FOR UPDATE
""")

_CREDIT_SQL = text("""
    UPDATE accounts
    SET balance = balance + :amount,
        updated_at = NOW()
    WHERE id = :account_id
    RETURNING balance
""")

_DEBIT_SQL = text("""
    UPDATE accounts
    SET balance = balance - :amount,
        updated_at = NOW()
    WHERE id = :account_id AND balance >= :amount
    RETURNING balance
""")

# ---------------------------------------------------------------------------
# SQL: transactions (append-only)
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions
        (account_id, amount, balance_after, performed_by,
         description, reference_type, reference_id)
    VALUES
        (:account_id, :amount, :balance_after, :performed_by,
         :description, :reference_type, :reference_id)
    RETURNING id, account_id, amount, balance_after, performed_by,
              description, reference_type, reference_id, created_at
""")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT id, account_id, amount, balance_after, performed_by,
           description, reference_type, reference_id, created_at
    FROM transactions
    WHERE account_id = :account_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:reference_type AS TEXT) IS NULL
           OR reference_type = CAST(:reference_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_account(row: object) -> Account:
    return Account(
        id=row.id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        role=row.role,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        assigned_to=row.assigned_to,  # type: ignore[attr-defined]
        is_blocked=row.is_blocked,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        performed_by=row.performed_by,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository — all operations atomic at the SQL level."""

    async def get_account(self, db: AsyncSession, account_id: int) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"account_id": account_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def lock_accounts(
        self, db: AsyncSession, account_ids: list[int]
    ) -> dict[int, Account]:
        """Row-lock the given accounts until the caller's transaction ends."""
        result = await db.execute(
            _LOCK_ACCOUNTS_SQL, {"account_ids": sorted(set(account_ids))}
        )
        return {row.id: _row_to_account(row) for row in result.fetchall()}

    async def credit(self, db: AsyncSession, account_id: int, amount: int) -> int:
        result = await db.execute(
            _CREDIT_SQL, {"account_id": account_id, "amount": amount}
        )
        row = result.fetchone()
        if row is None:
            raise AccountNotFoundError(account_id)
        return int(row.balance)

    async def debit(self, db: AsyncSession, account_id: int, amount: int) -> int:
        result = await db.execute(
            _DEBIT_SQL, {"account_id": account_id, "amount": amount}
        )
        row = result.fetchone()
        if row is None:
            account = await self.get_account(db, account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            raise InsufficientBalanceError(account_id, amount, account.balance)
        return int(row.balance)

    async def append_transaction(
        self, db: AsyncSession, entry: NewTransaction
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "account_id": entry.account_id,
                "amount": entry.amount,
                "balance_after": entry.balance_after,
                "performed_by": entry.performed_by,
                "description": entry.description,
                "reference_type": entry.reference_type,
                "reference_id": entry.reference_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_transaction(row)

    async def list_transactions(
        self,
        db: AsyncSession,
        account_id: int,
        cursor_id: int | None,
        limit: int,
        reference_type: str | None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "account_id": account_id,
                "cursor_id": cursor_id,
                "reference_type": reference_type,
                "limit": limit,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]
