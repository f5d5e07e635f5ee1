"""AccountApplicationService — read-only queries over the Account Store.

Balance mutations never happen here; they belong to the Transfer engine,
bet placement and settlement.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.application.schemas import (
    BalanceResponse,
    TransactionItem,
    TransactionListResponse,
    cursor_decode,
    cursor_encode,
)
from src.bp_account.domain.repository import AccountRepositoryProtocol
from src.bp_account.infrastructure.persistence import AccountRepository
from src.bp_common.errors import AccountNotFoundError


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, account_id: int) -> BalanceResponse:
        account = await self._repo.get_account(db, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return BalanceResponse.from_subunits(account.id, account.role, account.balance)

    async def list_transactions(
        self,
        db: AsyncSession,
        account_id: int,
        cursor: str | None,
        limit: int,
        reference_type: str | None,
    ) -> TransactionListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_transactions(
            db, account_id, cursor_id, limit + 1, reference_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(
            items=[TransactionItem.from_domain(t) for t in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
