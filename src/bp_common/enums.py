"""Global enums — must match DB CHECK constraints exactly.

Bet modes are not here: BetMode lives with its predicates in
src/bp_settlement/domain/modes.py so the two cannot drift apart.
"""

from enum import Enum


class AccountRole(str, Enum):
    ADMIN = "admin"
    SUBADMIN = "subadmin"
    PLAYER = "player"


class TransferDirection(str, Enum):
    """credit: funds move toward the target. debit: funds move away from it."""
    CREDIT = "credit"
    DEBIT = "debit"


class MarketKind(str, Enum):
    NUMBER = "number"  # two-digit result "00"-"99"
    TOSS = "toss"      # team_a / team_b


class MarketStatus(str, Enum):
    WAITING = "waiting"
    OPEN = "open"
    CLOSED = "closed"
    RESULTED = "resulted"


class TossTeam(str, Enum):
    TEAM_A = "team_a"
    TEAM_B = "team_b"


class BetResult(str, Enum):
    PENDING = "pending"
    WIN = "win"
    LOSS = "loss"


class WalletRequestType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    PLATFORM_INVESTMENT = "platform_investment"


class WalletRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentMode(str, Enum):
    UPI = "upi"
    BANK = "bank"


class ReferenceType(str, Enum):
    """What a transaction record links to (transactions.reference_type)."""
    TRANSFER = "TRANSFER"
    WALLET_REQUEST = "WALLET_REQUEST"
    PLATFORM_INVESTMENT = "PLATFORM_INVESTMENT"
    BET_STAKE = "BET_STAKE"
    BET_PAYOUT = "BET_PAYOUT"
