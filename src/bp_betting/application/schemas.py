"""Pydantic schemas for bp_betting API."""

from pydantic import BaseModel, Field

from src.bp_betting.domain.models import Bet
from src.bp_common.subunits import subunits_to_display


class PlaceBetRequest(BaseModel):
    market_id: int
    mode: str = Field(..., min_length=1, max_length=32)
    prediction: str = Field(..., min_length=1, max_length=64)
    stake: int = Field(..., gt=0, description="Stake in subunits")


class BetResponse(BaseModel):
    id: int
    market_id: int
    mode: str
    prediction: str
    stake: int
    stake_display: str
    potential_payout: int
    potential_payout_display: str
    result: str
    created_at: str | None

    @classmethod
    def from_domain(cls, b: Bet) -> "BetResponse":
        return cls(
            id=b.id,
            market_id=b.market_id,
            mode=b.mode,
            prediction=b.prediction,
            stake=b.stake,
            stake_display=subunits_to_display(b.stake),
            potential_payout=b.potential_payout,
            potential_payout_display=subunits_to_display(b.potential_payout),
            result=b.result,
            created_at=b.created_at.isoformat() if b.created_at else None,
        )
