"""Pydantic schemas and cursor utilities for bp_account API."""

import base64
import json

from pydantic import BaseModel

from src.bp_account.domain.models import Transaction
from src.bp_common.subunits import subunits_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    account_id: int
    role: str
    balance_subunits: int
    balance_display: str

    @classmethod
    def from_subunits(cls, account_id: int, role: str, balance: int) -> "BalanceResponse":
        return cls(
            account_id=account_id,
            role=role,
            balance_subunits=balance,
            balance_display=subunits_to_display(balance),
        )


class TransactionItem(BaseModel):
    id: int
    account_id: int
    amount_subunits: int
    amount_display: str
    balance_after_subunits: int
    balance_after_display: str
    performed_by: int
    description: str
    reference_type: str | None
    reference_id: int | None
    created_at: str

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionItem":
        return cls(
            id=t.id,
            account_id=t.account_id,
            amount_subunits=t.amount,
            amount_display=subunits_to_display(t.amount),
            balance_after_subunits=t.balance_after,
            balance_after_display=subunits_to_display(t.balance_after),
            performed_by=t.performed_by,
            description=t.description,
            reference_type=t.reference_type,
            reference_id=t.reference_id,
            created_at=t.created_at.isoformat() if t.created_at else "",
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool
