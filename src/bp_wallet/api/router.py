"""bp_wallet REST API.

POST /wallet/requests                      — create a request for the caller
GET  /wallet/requests                      — requests visible to the caller
POST /wallet/requests/{request_id}/review  — approve / reject (admin, subadmin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account
from src.bp_common.database import get_db_session
from src.bp_common.enums import AccountRole, WalletRequestStatus
from src.bp_common.response import ApiResponse, success_response
from src.bp_gateway.auth.dependencies import get_current_account, require_roles
from src.bp_wallet.application.schemas import (
    CreateWalletRequest,
    ReviewResponse,
    ReviewWalletRequest,
    WalletRequestItem,
)
from src.bp_wallet.application.service import WalletService

router = APIRouter(prefix="/wallet", tags=["wallet"])

_service = WalletService()


@router.post("/requests", status_code=status.HTTP_201_CREATED)
async def create_request(
    body: CreateWalletRequest,
    request: Request,
    current: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    created = await _service.create_request(
        db,
        current,
        body.amount,
        body.request_type.value,
        payment_mode=body.payment_mode.value if body.payment_mode else None,
        payment_details=body.payment_details,
        notes=body.notes,
    )
    return success_response(
        WalletRequestItem.from_domain(created).model_dump(),
        getattr(request.state, "request_id", None),
    )


@router.get("/requests")
async def list_requests(
    request: Request,
    current: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status_filter: WalletRequestStatus | None = Query(None, alias="status"),
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    data = await _service.list_requests(
        db, current, status_filter.value if status_filter else None, cursor, limit
    )
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.post("/requests/{request_id}/review")
async def review_request(
    request_id: int,
    body: ReviewWalletRequest,
    request: Request,
    reviewer: Annotated[
        Account, Depends(require_roles(AccountRole.ADMIN, AccountRole.SUBADMIN))
    ],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.review_request(
        db, request_id, body.decision.value, reviewer, body.notes
    )
    return success_response(
        ReviewResponse.from_result(result).model_dump(),
        getattr(request.state, "request_id", None),
    )
