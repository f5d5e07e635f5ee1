"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.bp_account.api.router import router as account_router
from src.bp_admin.api.router import router as admin_router
from src.bp_betting.api.router import router as bet_router
from src.bp_common.database import engine
from src.bp_common.errors import AppError
from src.bp_common.redis_client import close_redis, get_redis
from src.bp_common.response import error_response
from src.bp_gateway.middleware.rate_limit import RateLimitMiddleware
from src.bp_gateway.middleware.request_log import RequestLogMiddleware
from src.bp_market.api.router import router as market_router
from src.bp_wallet.api.router import router as wallet_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Last added runs first: request ids exist before the limiter answers 429s
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        resp.request_id = request_id
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(account_router, prefix="/api/v1")
app.include_router(bet_router, prefix="/api/v1")
app.include_router(wallet_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(market_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
