"""Domain models for bp_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.bp_common.enums import AccountRole


@dataclass
class Account:
    id: int
    username: str
    role: str                    # AccountRole value
    balance: int                 # subunits, never negative
    assigned_to: int | None = None
    is_blocked: bool = False
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    @property
    def is_subadmin(self) -> bool:
        return self.role == AccountRole.SUBADMIN

    @property
    def is_player(self) -> bool:
        return self.role == AccountRole.PLAYER


@dataclass
class NewTransaction:
    """A transaction record before insertion (no id / created_at yet)."""

    account_id: int
    amount: int                      # subunits, positive=credit negative=debit
    balance_after: int               # subunits, balance snapshot after the mutation
    performed_by: int
    description: str
    reference_type: str | None = None
    reference_id: int | None = None


@dataclass
class Transaction:
    id: int
    account_id: int
    amount: int
    balance_after: int
    performed_by: int
    description: str
    reference_type: str | None = None
    reference_id: int | None = None
    created_at: datetime | None = None
