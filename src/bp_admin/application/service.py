"""Admin application service.

Admin-initiated transfers and platform investment go through the one
TransferEngine; commission configuration writes deposit_commissions; ledger
verification reconciles balances against their transaction records.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account
from src.bp_account.domain.repository import AccountRepositoryProtocol
from src.bp_account.infrastructure.persistence import AccountRepository
from src.bp_admin.application.schemas import CommissionResponse, LedgerReport
from src.bp_commission.domain.repository import CommissionRepositoryProtocol
from src.bp_commission.domain.resolver import CommissionResolver
from src.bp_commission.infrastructure.persistence import CommissionRepository
from src.bp_common.enums import ReferenceType, TransferDirection
from src.bp_common.errors import (
    AccountNotFoundError,
    InvalidTransitionError,
    PermissionDeniedError,
)
from src.bp_common.subunits import validate_rate_bps
from src.bp_ledger.domain.engine import TransferEngine
from src.bp_ledger.domain.models import TransactionPair
from src.bp_ledger.domain.reconciliation import verify_ledger

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        accounts: AccountRepositoryProtocol | None = None,
        commissions: CommissionRepositoryProtocol | None = None,
        engine: TransferEngine | None = None,
    ) -> None:
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._commissions: CommissionRepositoryProtocol = (
            commissions or CommissionRepository()
        )
        self._resolver = CommissionResolver(self._commissions)
        self._engine = engine or TransferEngine(self._accounts, self._resolver)

    async def admin_transaction(
        self,
        db: AsyncSession,
        actor: Account,
        target_id: int,
        amount: int,
        direction: str,
        note: str | None = None,
    ) -> TransactionPair:
        if target_id == actor.id:
            raise InvalidTransitionError("use platform investment to fund your own account")
        return await self._engine.transfer(
            db, actor.id, target_id, amount, TransferDirection(direction).value, note=note
        )

    async def platform_investment(
        self, db: AsyncSession, actor: Account, amount: int, note: str | None = None
    ) -> TransactionPair:
        return await self._engine.transfer(
            db,
            actor.id,
            actor.id,
            amount,
            TransferDirection.CREDIT.value,
            note=note,
            reference_type=ReferenceType.PLATFORM_INVESTMENT.value,
        )

    async def get_commission(self, db: AsyncSession, subadmin_id: int) -> CommissionResponse:
        await self._require_subadmin(db, subadmin_id)
        configured = await self._commissions.get_deposit_commission(db, subadmin_id)
        rate = await self._resolver.rate_for(db, subadmin_id)
        return CommissionResponse(
            subadmin_id=subadmin_id, rate_bps=rate, configured=configured is not None
        )

    async def set_commission(
        self, db: AsyncSession, actor: Account, subadmin_id: int, rate_bps: int
    ) -> CommissionResponse:
        if not actor.is_admin:
            raise PermissionDeniedError("only admins can set commission rates")
        try:
            validate_rate_bps(rate_bps)
        except ValueError as exc:
            raise InvalidTransitionError(str(exc)) from exc

        try:
            await self._require_subadmin(db, subadmin_id)
            await self._commissions.upsert_deposit_commission(db, subadmin_id, rate_bps)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Deposit commission for subadmin=%d set to %d bps by account=%d",
            subadmin_id, rate_bps, actor.id,
        )
        return CommissionResponse(subadmin_id=subadmin_id, rate_bps=rate_bps, configured=True)

    async def verify_ledger(self, db: AsyncSession) -> LedgerReport:
        violations = await verify_ledger(db)
        return LedgerReport(ok=not violations, violations=violations)

    async def _require_subadmin(self, db: AsyncSession, subadmin_id: int) -> Account:
        account = await self._accounts.get_account(db, subadmin_id)
        if account is None:
            raise AccountNotFoundError(subadmin_id)
        if not account.is_subadmin:
            raise InvalidTransitionError(f"account {subadmin_id} is not a subadmin")
        return account
