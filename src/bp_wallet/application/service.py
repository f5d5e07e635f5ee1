"""WalletService — deposit / withdrawal / platform-investment requests.

Approval moves money through TransferEngine.execute() inside the same
transaction as the pending → approved flip, so a request is either approved
with its transfer applied or left pending with nothing applied.

  deposit              reviewer → requester, credit
  withdrawal           reviewer ← requester, debit
  platform_investment  requester self-funding (admin reviewer, admin requester)
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.application.schemas import cursor_decode, cursor_encode
from src.bp_account.domain.models import Account
from src.bp_account.domain.repository import AccountRepositoryProtocol
from src.bp_account.infrastructure.persistence import AccountRepository
from src.bp_common.enums import (
    ReferenceType,
    TransferDirection,
    WalletRequestStatus,
    WalletRequestType,
)
from src.bp_common.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidTransitionError,
    PermissionDeniedError,
    WalletRequestNotFoundError,
)
from src.bp_ledger.domain.engine import TransferEngine
from src.bp_ledger.domain.models import TransactionPair
from src.bp_wallet.application.schemas import (
    WalletRequestItem,
    WalletRequestListResponse,
)
from src.bp_wallet.domain.models import NewWalletRequest, ReviewResult, WalletRequest
from src.bp_wallet.domain.repository import WalletRequestRepositoryProtocol
from src.bp_wallet.infrastructure.persistence import WalletRequestRepository

logger = logging.getLogger(__name__)

_DECISIONS = {WalletRequestStatus.APPROVED.value, WalletRequestStatus.REJECTED.value}


class WalletService:
    def __init__(
        self,
        repo: WalletRequestRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        engine: TransferEngine | None = None,
    ) -> None:
        self._repo: WalletRequestRepositoryProtocol = repo or WalletRequestRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._engine = engine or TransferEngine(accounts=self._accounts)

    async def create_request(
        self,
        db: AsyncSession,
        requester: Account,
        amount: int,
        request_type: str,
        payment_mode: str | None = None,
        payment_details: dict[str, Any] | None = None,
        notes: str | None = None,
    ) -> WalletRequest:
        if amount <= 0:
            raise InvalidTransitionError(f"request amount must be positive, got {amount}")
        kind = WalletRequestType(request_type)
        if kind == WalletRequestType.PLATFORM_INVESTMENT:
            if not requester.is_admin:
                raise PermissionDeniedError("only admins can request platform investment")
        elif requester.assigned_to is None:
            raise PermissionDeniedError(
                f"{kind.value} requests need a superior account to review them"
            )

        try:
            if kind == WalletRequestType.WITHDRAWAL:
                account = await self._accounts.get_account(db, requester.id)
                if account is None:
                    raise AccountNotFoundError(requester.id)
                if account.balance < amount:
                    raise InsufficientBalanceError(requester.id, amount, account.balance)
            request = await self._repo.insert_request(
                db,
                NewWalletRequest(
                    account_id=requester.id,
                    amount=amount,
                    request_type=kind.value,
                    payment_mode=payment_mode,
                    payment_details=payment_details,
                    notes=notes,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Wallet request %d created: account=%d type=%s amount=%d",
            request.id, requester.id, request.request_type, amount,
        )
        return request

    async def list_requests(
        self,
        db: AsyncSession,
        viewer: Account,
        status: str | None,
        cursor: str | None,
        limit: int,
    ) -> WalletRequestListResponse:
        if viewer.is_admin:
            owner_id, superior_id = None, None
        elif viewer.is_subadmin:
            owner_id, superior_id = viewer.id, viewer.id
        else:
            owner_id, superior_id = viewer.id, None

        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without COUNT(*)
        rows = await self._repo.list_requests(
            db, owner_id, superior_id, status, cursor_id, limit + 1
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        items = [WalletRequestItem.from_domain(r) for r in page]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return WalletRequestListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def review_request(
        self,
        db: AsyncSession,
        request_id: int,
        decision: str,
        reviewer: Account,
        notes: str | None = None,
    ) -> ReviewResult:
        if decision not in _DECISIONS:
            raise InvalidTransitionError(f"unknown review decision {decision!r}")

        try:
            request = await self._repo.lock_request(db, request_id)
            if request is None:
                raise WalletRequestNotFoundError(request_id)
            if request.status != WalletRequestStatus.PENDING:
                raise InvalidTransitionError(
                    f"wallet request {request_id} is already {request.status}"
                )
            await self._authorize_review(db, request, reviewer)

            reviewed = await self._repo.mark_reviewed(
                db, request_id, decision, reviewer.id, notes
            )
            if reviewed is None:
                raise InvalidTransitionError(f"wallet request {request_id} is no longer pending")

            transfer = None
            if decision == WalletRequestStatus.APPROVED:
                transfer = await self._apply(db, request, reviewer, notes)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Wallet request %d %s by account=%d (type=%s amount=%d)",
            request_id, decision, reviewer.id, request.request_type, request.amount,
        )
        return ReviewResult(request=reviewed, transfer=transfer)

    async def _authorize_review(
        self, db: AsyncSession, request: WalletRequest, reviewer: Account
    ) -> None:
        if reviewer.id == request.account_id:
            raise PermissionDeniedError("cannot review your own request")
        if request.request_type == WalletRequestType.PLATFORM_INVESTMENT:
            if not reviewer.is_admin:
                raise PermissionDeniedError("only admins can approve platform investment")
            return
        if reviewer.is_admin:
            return
        requester = await self._accounts.get_account(db, request.account_id)
        if requester is None:
            raise AccountNotFoundError(request.account_id)
        if not reviewer.is_subadmin or requester.assigned_to != reviewer.id:
            raise PermissionDeniedError(
                f"account {request.account_id} is not assigned to account {reviewer.id}"
            )

    async def _apply(
        self,
        db: AsyncSession,
        request: WalletRequest,
        reviewer: Account,
        notes: str | None,
    ) -> TransactionPair:
        kind = request.request_type
        note = notes or f"{kind.replace('_', ' ').capitalize()} request #{request.id}"
        if kind == WalletRequestType.PLATFORM_INVESTMENT:
            actor_id, direction = request.account_id, TransferDirection.CREDIT
        elif kind == WalletRequestType.DEPOSIT:
            actor_id, direction = reviewer.id, TransferDirection.CREDIT
        else:
            actor_id, direction = reviewer.id, TransferDirection.DEBIT
        return await self._engine.execute(
            db,
            actor_id,
            request.account_id,
            request.amount,
            direction.value,
            note=note,
            reference_type=ReferenceType.WALLET_REQUEST.value,
            reference_id=request.id,
        )
