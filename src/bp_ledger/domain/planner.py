"""Pure transfer planning: who is debited and credited, and by how much.

No I/O. The engine feeds in the locked accounts and resolved rates and
applies the returned legs.

Rules:
  credit  admin → subadmin : actor -floor(amount*commission/10000), target +amount
  credit  subadmin → player: actor -(amount+bonus), target +(amount+bonus)
                             bonus = floor(amount*discount/10000)
  credit  otherwise        : actor -amount, target +amount
  debit   admin ← subadmin : target -amount, actor +floor(amount*commission/10000)
  debit   otherwise        : target -amount, actor +amount
  self    admin only       : actor +amount (platform investment)
"""

from src.bp_account.domain.models import Account
from src.bp_common.enums import TransferDirection
from src.bp_common.errors import (
    AccountBlockedError,
    InvalidTransitionError,
    PermissionDeniedError,
)
from src.bp_common.subunits import apply_rate
from src.bp_ledger.domain.models import Leg, TransferPlan

# transactions.description is VARCHAR(500)
DESCRIPTION_MAX_LENGTH = 500


def _describe(text: str, suffix: str = "") -> str:
    """Join text and suffix, cutting text so the result fits the description column."""
    room = DESCRIPTION_MAX_LENGTH - len(suffix)
    if len(text) > room:
        text = text[: room - 3] + "..."
    return text + suffix


def check_hierarchy(actor: Account, target: Account) -> None:
    """Admins reach every account; subadmins only the accounts assigned to them."""
    if actor.is_admin:
        return
    if actor.is_subadmin and target.assigned_to == actor.id:
        return
    if actor.is_player:
        raise PermissionDeniedError("players cannot move funds")
    raise PermissionDeniedError(
        f"account {target.id} is not assigned to subadmin {actor.id}"
    )


def plan_transfer(
    actor: Account,
    target: Account,
    amount: int,
    direction: str,
    commission_bps: int | None = None,
    discount_bps: int = 0,
    note: str | None = None,
) -> TransferPlan:
    if amount <= 0:
        raise InvalidTransitionError(f"transfer amount must be positive, got {amount}")
    if direction not in (TransferDirection.CREDIT, TransferDirection.DEBIT):
        raise InvalidTransitionError(f"unknown transfer direction {direction!r}")
    if actor.is_blocked:
        raise AccountBlockedError(actor.id)

    if actor.id == target.id:
        return _plan_self_funding(actor, amount, direction, note)

    if target.is_blocked:
        raise AccountBlockedError(target.id)
    check_hierarchy(actor, target)

    use_commission = actor.is_admin and target.is_subadmin and commission_bps is not None
    if direction == TransferDirection.CREDIT:
        return _plan_credit(actor, target, amount, commission_bps if use_commission else None,
                            discount_bps, note)
    return _plan_debit(actor, target, amount, commission_bps if use_commission else None, note)


def _plan_self_funding(
    actor: Account, amount: int, direction: str, note: str | None
) -> TransferPlan:
    if not actor.is_admin:
        raise PermissionDeniedError("only admins can fund their own account")
    if direction != TransferDirection.CREDIT:
        raise InvalidTransitionError("self-transfer supports credit only")
    description = _describe(f"Platform investment: {note}" if note else "Platform investment")
    return TransferPlan(
        actor_id=actor.id,
        target_id=actor.id,
        amount=amount,
        direction=direction,
        legs=(Leg(actor.id, amount, description),),
    )


def _plan_credit(
    actor: Account,
    target: Account,
    amount: int,
    commission_bps: int | None,
    discount_bps: int,
    note: str | None,
) -> TransferPlan:
    bonus = 0
    if commission_bps is not None:
        deduction = apply_rate(amount, commission_bps)
        actor_desc = (
            f"Funds transferred to {target.username} "
            f"({deduction} of {amount}, commission rate {commission_bps} bps, "
            f"commission: {amount - deduction})"
        )
    elif actor.is_subadmin and target.is_player and discount_bps > 0:
        bonus = apply_rate(amount, discount_bps)
        deduction = amount + bonus
        actor_desc = (
            f"Funds transferred to {target.username} "
            f"(deposit discount applied: +{bonus}, total deducted: {deduction})"
        )
    else:
        deduction = amount
        actor_desc = f"Funds transferred to {target.username}"

    received = amount + bonus
    target_desc = _describe(
        note or f"Funds added by {actor.username}",
        f" (includes {bonus} bonus)" if bonus else "",
    )

    return TransferPlan(
        actor_id=actor.id,
        target_id=target.id,
        amount=amount,
        direction=TransferDirection.CREDIT.value,
        legs=(
            Leg(actor.id, -deduction, actor_desc),
            Leg(target.id, received, target_desc),
        ),
        commission_bps=commission_bps,
        bonus=bonus,
    )


def _plan_debit(
    actor: Account,
    target: Account,
    amount: int,
    commission_bps: int | None,
    note: str | None,
) -> TransferPlan:
    if commission_bps is not None:
        addition = apply_rate(amount, commission_bps)
        actor_desc = (
            f"Funds recovered from {target.username} "
            f"({addition} of {amount}, commission rate {commission_bps} bps)"
        )
    else:
        addition = amount
        actor_desc = f"Funds recovered from {target.username}"

    return TransferPlan(
        actor_id=actor.id,
        target_id=target.id,
        amount=amount,
        direction=TransferDirection.DEBIT.value,
        legs=(
            Leg(target.id, -amount, _describe(note or f"Funds deducted by {actor.username}")),
            Leg(actor.id, addition, actor_desc),
        ),
        commission_bps=commission_bps,
    )
