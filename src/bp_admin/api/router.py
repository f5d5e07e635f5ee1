"""Admin REST API.

POST /admin/transactions                  — transfer with a subordinate account
POST /admin/platform-investment           — admin self-funding
GET  /admin/commissions/{subadmin_id}     — effective deposit commission
PUT  /admin/commissions/{subadmin_id}     — set deposit commission
GET  /admin/ledger/verify                 — reconcile balances against records
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account
from src.bp_admin.application.schemas import (
    AdminTransactionRequest,
    CommissionUpdateRequest,
    PlatformInvestmentRequest,
    TransferResponse,
)
from src.bp_admin.application.service import AdminService
from src.bp_common.database import get_db_session
from src.bp_common.enums import AccountRole
from src.bp_common.response import ApiResponse, success_response
from src.bp_gateway.auth.dependencies import require_roles

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()
_require_admin = require_roles(AccountRole.ADMIN)
_require_superior = require_roles(AccountRole.ADMIN, AccountRole.SUBADMIN)


@router.post("/transactions")
async def admin_transaction(
    body: AdminTransactionRequest,
    request: Request,
    actor: Annotated[Account, Depends(_require_superior)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    pair = await _service.admin_transaction(
        db, actor, body.target_id, body.amount, body.direction.value, body.note
    )
    return success_response(
        TransferResponse.from_pair(pair).model_dump(),
        getattr(request.state, "request_id", None),
    )


@router.post("/platform-investment")
async def platform_investment(
    body: PlatformInvestmentRequest,
    request: Request,
    actor: Annotated[Account, Depends(_require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    pair = await _service.platform_investment(db, actor, body.amount, body.note)
    return success_response(
        TransferResponse.from_pair(pair).model_dump(),
        getattr(request.state, "request_id", None),
    )


@router.get("/commissions/{subadmin_id}")
async def get_commission(
    subadmin_id: int,
    request: Request,
    actor: Annotated[Account, Depends(_require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_commission(db, subadmin_id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.put("/commissions/{subadmin_id}")
async def set_commission(
    subadmin_id: int,
    body: CommissionUpdateRequest,
    request: Request,
    actor: Annotated[Account, Depends(_require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.set_commission(db, actor, subadmin_id, body.rate_bps)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.get("/ledger/verify")
async def verify_ledger(
    request: Request,
    actor: Annotated[Account, Depends(_require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.verify_ledger(db)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
