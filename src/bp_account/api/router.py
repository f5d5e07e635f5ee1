"""bp_account REST API — balance and transaction history of the caller."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.application.service import AccountApplicationService
from src.bp_account.domain.models import Account
from src.bp_common.database import get_db_session
from src.bp_common.response import ApiResponse, success_response
from src.bp_gateway.auth.dependencies import get_current_account

router = APIRouter(prefix="/account", tags=["account"])

_service = AccountApplicationService()


@router.get("/balance")
async def get_balance(
    current: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, current.id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.get("/transactions")
async def list_transactions(
    current: Annotated[Account, Depends(get_current_account)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    reference_type: str | None = Query(None, description="Filter by ReferenceType"),
) -> ApiResponse:
    data = await _service.list_transactions(db, current.id, cursor, limit, reference_type)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
