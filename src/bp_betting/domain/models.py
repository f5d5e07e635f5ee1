"""Domain models for bp_betting — pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class NewBet:
    account_id: int
    market_id: int
    mode: str                 # BetMode value
    prediction: str
    stake: int                # subunits
    potential_payout: int     # subunits, at the odds resolved at placement


@dataclass
class Bet:
    id: int
    account_id: int
    market_id: int
    mode: str
    prediction: str
    stake: int
    potential_payout: int
    payout: int = 0
    result: str = "pending"   # BetResult value
    created_at: datetime | None = None
    settled_at: datetime | None = None
