"""bp_betting REST API.

POST /bets — place a bet for the calling player
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account
from src.bp_betting.application.schemas import BetResponse, PlaceBetRequest
from src.bp_betting.application.service import BetService
from src.bp_common.database import get_db_session
from src.bp_common.enums import AccountRole
from src.bp_common.response import ApiResponse, success_response
from src.bp_gateway.auth.dependencies import require_roles

router = APIRouter(prefix="/bets", tags=["bets"])

_service = BetService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def place_bet(
    body: PlaceBetRequest,
    request: Request,
    player: Annotated[Account, Depends(require_roles(AccountRole.PLAYER))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    bet = await _service.create_bet(
        db, player.id, body.market_id, body.mode, body.prediction, body.stake
    )
    return success_response(
        BetResponse.from_domain(bet).model_dump(),
        getattr(request.state, "request_id", None),
    )
