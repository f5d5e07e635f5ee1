"""TransferEngine — the single money-moving primitive.

Every call site that moves funds between accounts (admin transactions, wallet
request approval, platform investment) goes through execute(). One call is
one database transaction:

  1. SELECT ... FOR UPDATE both accounts (ascending id)
  2. resolve commission / discount rates
  3. plan the legs (pure, see planner.py)
  4. check every deducting leg against the locked balances
  5. apply debits, then credits, appending one record per leg

execute() runs inside the caller's transaction so a wallet review can flip
its status in the same commit. transfer() is the standalone form that owns
commit / rollback.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import NewTransaction
from src.bp_account.domain.repository import AccountRepositoryProtocol
from src.bp_account.infrastructure.persistence import AccountRepository
from src.bp_commission.domain.resolver import CommissionResolver
from src.bp_common.enums import ReferenceType, TransferDirection
from src.bp_common.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidTransitionError,
)
from src.bp_ledger.domain.models import TransactionPair, TransferPlan
from src.bp_ledger.domain.planner import plan_transfer

logger = logging.getLogger(__name__)


class TransferEngine:
    def __init__(
        self,
        accounts: AccountRepositoryProtocol | None = None,
        commissions: CommissionResolver | None = None,
    ) -> None:
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._commissions = commissions or CommissionResolver()

    async def transfer(
        self,
        db: AsyncSession,
        actor_id: int,
        target_id: int,
        amount: int,
        direction: str,
        note: str | None = None,
        reference_type: str | None = None,
        reference_id: int | None = None,
    ) -> TransactionPair:
        try:
            pair = await self.execute(
                db, actor_id, target_id, amount, direction,
                note=note, reference_type=reference_type, reference_id=reference_id,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return pair

    async def execute(
        self,
        db: AsyncSession,
        actor_id: int,
        target_id: int,
        amount: int,
        direction: str,
        note: str | None = None,
        reference_type: str | None = None,
        reference_id: int | None = None,
    ) -> TransactionPair:
        """Apply one transfer inside the caller's transaction. Does not commit."""
        if amount <= 0:
            raise InvalidTransitionError(f"transfer amount must be positive, got {amount}")

        locked = await self._accounts.lock_accounts(db, sorted({actor_id, target_id}))
        actor = locked.get(actor_id)
        if actor is None:
            raise AccountNotFoundError(actor_id)
        target = locked.get(target_id)
        if target is None:
            raise AccountNotFoundError(target_id)

        commission_bps: int | None = None
        discount_bps = 0
        if actor_id != target_id:
            if actor.is_admin and target.is_subadmin:
                commission_bps = await self._commissions.rate_for(db, target.id)
            elif (
                actor.is_subadmin
                and target.is_player
                and direction == TransferDirection.CREDIT
            ):
                discount_bps = await self._commissions.discount_for(db, target.id, actor.id)

        plan = plan_transfer(
            actor, target, amount, direction,
            commission_bps=commission_bps, discount_bps=discount_bps, note=note,
        )

        # Feasibility against the locked rows, before any write
        for leg in plan.legs:
            available = locked[leg.account_id].balance
            if leg.delta < 0 and available < -leg.delta:
                raise InsufficientBalanceError(leg.account_id, -leg.delta, available)

        if reference_type is None:
            reference_type = (
                ReferenceType.PLATFORM_INVESTMENT.value
                if plan.is_self_funding
                else ReferenceType.TRANSFER.value
            )

        entries = []
        for leg in plan.legs:
            if leg.delta < 0:
                balance_after = await self._accounts.debit(db, leg.account_id, -leg.delta)
            else:
                balance_after = await self._accounts.credit(db, leg.account_id, leg.delta)
            entries.append(
                await self._accounts.append_transaction(
                    db,
                    NewTransaction(
                        account_id=leg.account_id,
                        amount=leg.delta,
                        balance_after=balance_after,
                        performed_by=actor_id,
                        description=leg.description,
                        reference_type=reference_type,
                        reference_id=reference_id,
                    ),
                )
            )

        _log_transfer(plan)
        by_account = {e.account_id: e for e in entries}
        if plan.is_self_funding:
            return TransactionPair(actor_entry=entries[0], target_entry=None, plan=plan)
        return TransactionPair(
            actor_entry=by_account[actor_id],
            target_entry=by_account[target_id],
            plan=plan,
        )


def _log_transfer(plan: TransferPlan) -> None:
    if plan.is_self_funding:
        logger.info(
            "Platform investment: account=%d amount=%d", plan.actor_id, plan.amount
        )
        return
    logger.info(
        "Transfer %s: actor=%d target=%d amount=%d commission_bps=%s bonus=%d net=%d",
        plan.direction,
        plan.actor_id,
        plan.target_id,
        plan.amount,
        plan.commission_bps,
        plan.bonus,
        plan.net_delta,
    )
