"""Pydantic schemas for bp_admin API."""

from pydantic import BaseModel, Field

from src.bp_account.application.schemas import TransactionItem
from src.bp_common.enums import TransferDirection
from src.bp_ledger.domain.models import TransactionPair


class AdminTransactionRequest(BaseModel):
    target_id: int
    amount: int = Field(..., gt=0, description="Amount in subunits")
    direction: TransferDirection
    note: str | None = Field(None, max_length=500)


class PlatformInvestmentRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in subunits")
    note: str | None = Field(None, max_length=500)


class CommissionUpdateRequest(BaseModel):
    rate_bps: int = Field(..., ge=0, le=10000, description="10000 == admin pays 100%")


class CommissionResponse(BaseModel):
    subadmin_id: int
    rate_bps: int
    configured: bool


class TransferResponse(BaseModel):
    direction: str
    amount: int
    commission_bps: int | None
    bonus: int
    entries: list[TransactionItem]

    @classmethod
    def from_pair(cls, pair: TransactionPair) -> "TransferResponse":
        return cls(
            direction=pair.plan.direction,
            amount=pair.plan.amount,
            commission_bps=pair.plan.commission_bps,
            bonus=pair.plan.bonus,
            entries=[TransactionItem.from_domain(e) for e in pair.entries],
        )


class LedgerReport(BaseModel):
    ok: bool
    violations: list[str]
