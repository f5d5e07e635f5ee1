"""Pydantic request/response schemas for bp_market."""

from pydantic import BaseModel, Field

from src.bp_common.enums import MarketStatus
from src.bp_common.subunits import subunits_to_display
from src.bp_market.domain.models import Market
from src.bp_settlement.domain.models import SettlementSummary


class StatusUpdateRequest(BaseModel):
    status: MarketStatus


class DeclareResultRequest(BaseModel):
    result: str = Field(..., min_length=1, max_length=16)


class MarketResponse(BaseModel):
    id: int
    name: str
    kind: str
    status: str
    result: str | None
    team_a: str | None
    team_b: str | None
    resulted_at: str | None

    @classmethod
    def from_domain(cls, m: Market) -> "MarketResponse":
        return cls(
            id=m.id,
            name=m.name,
            kind=m.kind,
            status=m.status,
            result=m.result,
            team_a=m.team_a,
            team_b=m.team_b,
            resulted_at=m.resulted_at.isoformat() if m.resulted_at else None,
        )


class SettlementSummaryResponse(BaseModel):
    market_id: int
    declared_result: str
    processed: int
    won: int
    lost: int
    failed: int
    total_payout: int
    total_payout_display: str
    failed_bet_ids: list[int]

    @classmethod
    def from_summary(cls, s: SettlementSummary) -> "SettlementSummaryResponse":
        return cls(
            market_id=s.market_id,
            declared_result=s.declared_result,
            processed=s.processed,
            won=s.won,
            lost=s.lost,
            failed=s.failed,
            total_payout=s.total_payout,
            total_payout_display=subunits_to_display(s.total_payout),
            failed_bet_ids=list(s.failed_bet_ids),
        )
