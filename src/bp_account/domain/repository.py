"""Account Store Protocol — the only way balances change.

Unit tests inject an in-memory fake conforming to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.

Every mutating method runs inside the CALLER's transaction; nothing here
commits.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account, NewTransaction, Transaction


class AccountRepositoryProtocol(Protocol):
    async def get_account(
        self, db: AsyncSession, account_id: int
    ) -> Account | None: ...

    async def lock_accounts(
        self, db: AsyncSession, account_ids: list[int]
    ) -> dict[int, Account]: ...

    async def credit(
        self, db: AsyncSession, account_id: int, amount: int
    ) -> int: ...

    async def debit(
        self, db: AsyncSession, account_id: int, amount: int
    ) -> int: ...

    async def append_transaction(
        self, db: AsyncSession, entry: NewTransaction
    ) -> Transaction: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        account_id: int,
        cursor_id: int | None,
        limit: int,
        reference_type: str | None,
    ) -> list[Transaction]: ...
