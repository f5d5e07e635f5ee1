"""Domain models for bp_settlement."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PendingBet:
    """A bet awaiting settlement, with its owner's superior for odds lookup."""

    id: int
    account_id: int
    market_id: int
    mode: str
    prediction: str
    stake: int
    owner_assigned_to: int | None = None


@dataclass
class SettlementSummary:
    market_id: int
    declared_result: str
    processed: int = 0
    won: int = 0
    lost: int = 0
    failed: int = 0
    total_payout: int = 0
    failed_bet_ids: list[int] = field(default_factory=list)
