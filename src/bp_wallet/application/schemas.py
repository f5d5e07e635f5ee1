"""Pydantic schemas for bp_wallet API."""

from typing import Any

from pydantic import BaseModel, Field

from src.bp_common.enums import PaymentMode, WalletRequestStatus, WalletRequestType
from src.bp_common.subunits import subunits_to_display
from src.bp_wallet.domain.models import ReviewResult, WalletRequest


class CreateWalletRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in subunits")
    request_type: WalletRequestType
    payment_mode: PaymentMode | None = None
    payment_details: dict[str, Any] | None = None
    notes: str | None = Field(None, max_length=500)


class ReviewWalletRequest(BaseModel):
    decision: WalletRequestStatus
    notes: str | None = Field(None, max_length=500)


class WalletRequestItem(BaseModel):
    id: int
    account_id: int
    amount: int
    amount_display: str
    request_type: str
    status: str
    payment_mode: str | None
    payment_details: dict[str, Any] | None
    notes: str | None
    reviewed_by: int | None
    created_at: str | None
    reviewed_at: str | None

    @classmethod
    def from_domain(cls, r: WalletRequest) -> "WalletRequestItem":
        return cls(
            id=r.id,
            account_id=r.account_id,
            amount=r.amount,
            amount_display=subunits_to_display(r.amount),
            request_type=r.request_type,
            status=r.status,
            payment_mode=r.payment_mode,
            payment_details=r.payment_details,
            notes=r.notes,
            reviewed_by=r.reviewed_by,
            created_at=r.created_at.isoformat() if r.created_at else None,
            reviewed_at=r.reviewed_at.isoformat() if r.reviewed_at else None,
        )


class WalletRequestListResponse(BaseModel):
    items: list[WalletRequestItem]
    next_cursor: str | None
    has_more: bool


class ReviewResponse(BaseModel):
    request: WalletRequestItem
    transaction_ids: list[int]

    @classmethod
    def from_result(cls, result: ReviewResult) -> "ReviewResponse":
        ids = [e.id for e in result.transfer.entries] if result.transfer else []
        return cls(request=WalletRequestItem.from_domain(result.request), transaction_ids=ids)
