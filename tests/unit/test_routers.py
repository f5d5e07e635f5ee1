"""HTTP-layer tests: envelope, error rendering and role guards.

Services are replaced with AsyncMocks; authentication and the DB session are
overridden, so no PostgreSQL or Redis is needed.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.bp_account.application.schemas import BalanceResponse
from src.bp_account.domain.models import Account
from src.bp_betting.domain.models import Bet
from src.bp_common import redis_client
from src.bp_common.database import get_db_session
from src.bp_common.errors import InsufficientBalanceError, MarketNotFoundError
from src.bp_gateway.auth.dependencies import get_current_account
from src.bp_settlement.domain.models import SettlementSummary

ADMIN = Account(id=1, username="admin", role="admin", balance=1_000_000)
PLAYER = Account(id=3, username="player3", role="player", balance=5000, assigned_to=2)


class _CounterRedis:
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        return True


async def _no_db():
    yield None


@pytest.fixture
async def api(monkeypatch):
    """Yields (client, set_caller) with auth and DB overridden."""
    from src.main import app

    monkeypatch.setattr(redis_client, "_redis_pool", _CounterRedis())
    caller = {"account": PLAYER}

    async def _current() -> Account:
        return caller["account"]

    def set_caller(account: Account) -> None:
        caller["account"] = account

    app.dependency_overrides[get_current_account] = _current
    app.dependency_overrides[get_db_session] = _no_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac, set_caller
    app.dependency_overrides.clear()


class TestEnvelope:
    async def test_health(self, api) -> None:
        client, _ = api
        resp = await client.get("/health")
        assert resp.json() == {"status": "ok", "version": "0.1.0"}

    async def test_balance_success_envelope(self, api, monkeypatch) -> None:
        from src.bp_account.api import router as account_router

        client, _ = api
        monkeypatch.setattr(
            account_router._service,
            "get_balance",
            AsyncMock(return_value=BalanceResponse.from_subunits(3, "player", 5000)),
        )

        resp = await client.get("/api/v1/account/balance")

        body = resp.json()
        assert resp.status_code == 200
        assert body["code"] == 0
        assert body["message"] == "success"
        assert body["data"]["balance_subunits"] == 5000
        assert body["request_id"].startswith("req_")
        assert resp.headers["X-Request-ID"] == body["request_id"]

    async def test_app_error_rendered(self, api, monkeypatch) -> None:
        from src.bp_betting.api import router as bet_router

        client, _ = api
        monkeypatch.setattr(
            bet_router._service,
            "create_bet",
            AsyncMock(side_effect=InsufficientBalanceError(3, 9000, 5000)),
        )

        resp = await client.post(
            "/api/v1/bets",
            json={"market_id": 7, "mode": "jodi", "prediction": "42", "stake": 9000},
        )

        body = resp.json()
        assert resp.status_code == 422
        assert body["code"] == 2001
        assert body["data"] is None
        assert body["request_id"].startswith("req_")


class TestBets:
    async def test_place_bet_returns_201(self, api, monkeypatch) -> None:
        from src.bp_betting.api import router as bet_router

        client, _ = api
        bet = Bet(
            id=11, account_id=3, market_id=7, mode="jodi", prediction="42",
            stake=1000, potential_payout=90000, created_at=datetime.now(UTC),
        )
        create = AsyncMock(return_value=bet)
        monkeypatch.setattr(bet_router._service, "create_bet", create)

        resp = await client.post(
            "/api/v1/bets",
            json={"market_id": 7, "mode": "jodi", "prediction": "42", "stake": 1000},
        )

        assert resp.status_code == 201
        assert resp.json()["data"]["potential_payout_display"] == "₹900.00"
        assert create.await_args.args[1:] == (3, 7, "jodi", "42", 1000)

    async def test_zero_stake_rejected_by_schema(self, api) -> None:
        client, _ = api
        resp = await client.post(
            "/api/v1/bets",
            json={"market_id": 7, "mode": "jodi", "prediction": "42", "stake": 0},
        )
        assert resp.status_code == 422

    async def test_admin_cannot_bet(self, api) -> None:
        client, set_caller = api
        set_caller(ADMIN)
        resp = await client.post(
            "/api/v1/bets",
            json={"market_id": 7, "mode": "jodi", "prediction": "42", "stake": 1000},
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == 1003


class TestAdminGuards:
    async def test_player_cannot_declare_result(self, api) -> None:
        client, _ = api
        resp = await client.post("/api/v1/admin/markets/7/result", json={"result": "42"})
        assert resp.status_code == 403

    async def test_player_cannot_verify_ledger(self, api) -> None:
        client, _ = api
        resp = await client.get("/api/v1/admin/ledger/verify")
        assert resp.status_code == 403

    async def test_declare_result_returns_summary(self, api, monkeypatch) -> None:
        from src.bp_market.api import router as market_router

        client, set_caller = api
        set_caller(ADMIN)
        summary = SettlementSummary(
            market_id=7, declared_result="42", processed=2, won=1, lost=1, total_payout=90000
        )
        declare = AsyncMock(return_value=summary)
        monkeypatch.setattr(market_router._service, "declare_result", declare)

        resp = await client.post("/api/v1/admin/markets/7/result", json={"result": "42"})

        data = resp.json()["data"]
        assert resp.status_code == 200
        assert (data["won"], data["lost"], data["failed"]) == (1, 1, 0)
        assert declare.await_args.args[1:] == (7, "42", 1)

    async def test_unknown_market_is_404(self, api, monkeypatch) -> None:
        from src.bp_market.api import router as market_router

        client, set_caller = api
        set_caller(ADMIN)
        monkeypatch.setattr(
            market_router._service,
            "transition_status",
            AsyncMock(side_effect=MarketNotFoundError(404)),
        )

        resp = await client.patch("/api/v1/admin/markets/404/status", json={"status": "open"})

        assert resp.status_code == 404
        assert resp.json()["code"] == 3001

    async def test_invalid_status_rejected_by_schema(self, api) -> None:
        client, set_caller = api
        set_caller(ADMIN)
        resp = await client.patch("/api/v1/admin/markets/7/status", json={"status": "paused"})
        assert resp.status_code == 422
