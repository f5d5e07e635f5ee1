"""JWT access-token creation and verification.

Login/registration are outside this service: an upstream identity provider
issues tokens signed with the shared JWT_SECRET. create_access_token exists
for operator tooling and tests.

HS256 (symmetric HMAC). `sub` carries the integer account id as a string.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.bp_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(account_id: int) -> str:
    """Issue a short-lived access token (default: 30 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": str(account_id),
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> int:
    """Validate an access token and return the account id it names.

    Raises:
        InvalidCredentialsError: signature/expiry invalid, wrong token type,
            or a `sub` that is not an integer account id.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidCredentialsError() from None
