"""Domain models for bp_wallet — pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.bp_ledger.domain.models import TransactionPair


@dataclass
class NewWalletRequest:
    account_id: int
    amount: int                          # subunits
    request_type: str                    # WalletRequestType value
    payment_mode: str | None = None      # PaymentMode value
    payment_details: dict[str, Any] | None = None
    notes: str | None = None


@dataclass
class WalletRequest:
    id: int
    account_id: int
    amount: int
    request_type: str
    status: str                          # WalletRequestStatus value
    payment_mode: str | None = None
    payment_details: dict[str, Any] | None = None
    notes: str | None = None
    reviewed_by: int | None = None
    created_at: datetime | None = None
    reviewed_at: datetime | None = None


@dataclass
class ReviewResult:
    request: WalletRequest
    transfer: TransactionPair | None = None    # None when rejected
