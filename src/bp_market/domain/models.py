"""Domain models for bp_market — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Market:
    id: int
    name: str
    kind: str                        # MarketKind value
    status: str                      # MarketStatus value
    result: str | None = None
    team_a: str | None = None        # toss matches only
    team_b: str | None = None
    resulted_at: datetime | None = None
    created_at: datetime | None = None
