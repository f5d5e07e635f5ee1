"""Fixed-window rate limiting for money-moving endpoints.

Only write requests (POST/PUT/PATCH) under the guarded prefixes are counted;
reads pass straight through. The caller is identified by the bearer token
when present, otherwise by client IP (X-Forwarded-For aware).

Redis logic per request:
    count = INCR  ratelimit:{caller}:{group}:{minute}
    EXPIRE on first hit (60s)
    count > limit  → 429 with Retry-After
"""

import hashlib
import logging
import time
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.bp_common.errors import RateLimitError
from src.bp_common.redis_client import get_redis
from src.bp_common.response import error_response

logger = logging.getLogger(__name__)

_GUARDED_PREFIXES = ("/api/v1/admin", "/api/v1/wallet", "/api/v1/bets")
_WRITE_METHODS = {"POST", "PUT", "PATCH"}
_WINDOW_SECONDS = 60


def _caller_key(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        # Hash so raw tokens never land in Redis
        return "tok:" + hashlib.sha256(auth[7:].encode()).hexdigest()[:16]
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return "ip:" + forwarded.split(",")[0].strip()
    return "ip:" + (request.client.host if request.client else "unknown")


def _route_group(path: str) -> str | None:
    for prefix in _GUARDED_PREFIXES:
        if path.startswith(prefix):
            return prefix.rsplit("/", 1)[-1]
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit: int | None = None,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        self._limit = limit if limit is not None else settings.RATE_LIMIT_PER_MINUTE
        self._redis_factory = redis_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        group = _route_group(request.url.path)
        if group is None or request.method not in _WRITE_METHODS:
            return await call_next(request)

        window = int(time.time()) // _WINDOW_SECONDS
        key = f"ratelimit:{_caller_key(request)}:{group}:{window}"
        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS)
        except RedisError:
            # Fail open when Redis is down
            logger.warning("Rate limiter unavailable, admitting %s", request.url.path)
            return await call_next(request)

        if count > self._limit:
            err = RateLimitError()
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message).model_dump(),
                headers={"Retry-After": str(_WINDOW_SECONDS)},
            )
        return await call_next(request)
