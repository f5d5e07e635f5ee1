"""bp_market admin endpoints.

PATCH /admin/markets/{market_id}/status   — waiting → open → closed
POST  /admin/markets/{market_id}/result   — declare result and settle
POST  /admin/markets/{market_id}/settle   — re-run settlement of leftover pending bets
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account
from src.bp_common.database import get_db_session
from src.bp_common.enums import AccountRole
from src.bp_common.response import ApiResponse, success_response
from src.bp_gateway.auth.dependencies import require_roles
from src.bp_market.application.schemas import (
    DeclareResultRequest,
    MarketResponse,
    SettlementSummaryResponse,
    StatusUpdateRequest,
)
from src.bp_market.application.service import MarketService

router = APIRouter(prefix="/admin/markets", tags=["markets"])

_service = MarketService()
_require_admin = require_roles(AccountRole.ADMIN)


@router.patch("/{market_id}/status")
async def transition_status(
    market_id: int,
    body: StatusUpdateRequest,
    request: Request,
    actor: Annotated[Account, Depends(_require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    market = await _service.transition_status(db, market_id, body.status.value)
    return success_response(
        MarketResponse.from_domain(market).model_dump(),
        getattr(request.state, "request_id", None),
    )


@router.post("/{market_id}/result")
async def declare_result(
    market_id: int,
    body: DeclareResultRequest,
    request: Request,
    actor: Annotated[Account, Depends(_require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    summary = await _service.declare_result(db, market_id, body.result, actor.id)
    return success_response(
        SettlementSummaryResponse.from_summary(summary).model_dump(),
        getattr(request.state, "request_id", None),
    )


@router.post("/{market_id}/settle")
async def resettle_market(
    market_id: int,
    request: Request,
    actor: Annotated[Account, Depends(_require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    summary = await _service.resettle(db, market_id, actor.id)
    return success_response(
        SettlementSummaryResponse.from_summary(summary).model_dump(),
        getattr(request.state, "request_id", None),
    )
