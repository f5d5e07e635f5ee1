"""FastAPI dependencies: get_current_account and role guards.

Usage in any protected router:
    from src.bp_gateway.auth.dependencies import get_current_account, require_roles

    @router.post("/admin/thing")
    async def thing(actor: Account = Depends(require_roles(AccountRole.ADMIN))):
        ...
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import Account
from src.bp_account.infrastructure.db_models import AccountORM
from src.bp_common.database import get_db_session
from src.bp_common.enums import AccountRole
from src.bp_common.errors import (
    AccountBlockedError,
    InvalidCredentialsError,
    PermissionDeniedError,
)
from src.bp_gateway.auth.jwt_handler import decode_access_token

# tokenUrl only feeds Swagger UI's "Authorize" button; tokens come from upstream
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_account(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Account:
    """Resolve the Bearer token to the acting Account.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an
    unknown account. Raises AccountBlockedError (403) for blocked accounts.
    """
    try:
        account_id = decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(AccountORM).where(AccountORM.id == account_id))
    orm = result.scalar_one_or_none()
    if orm is None:
        raise _CREDENTIALS_EXCEPTION
    if orm.is_blocked:
        raise AccountBlockedError(orm.id)

    return Account(
        id=orm.id,
        username=orm.username,
        role=orm.role,
        balance=orm.balance,
        assigned_to=orm.assigned_to,
        is_blocked=orm.is_blocked,
        created_at=orm.created_at,
    )


def require_roles(*roles: AccountRole) -> Callable[..., Awaitable[Account]]:
    """Build a dependency that admits only the given roles."""
    allowed = {r.value for r in roles}

    async def _guard(current: Account = Depends(get_current_account)) -> Account:
        if current.role not in allowed:
            raise PermissionDeniedError(
                f"role {current.role} cannot access this endpoint"
            )
        return current

    return _guard
