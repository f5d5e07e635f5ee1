"""Shared test fixtures.

In-memory repositories conforming to the repository Protocols all share one
LedgerState. FakeDb snapshots that state on commit and restores it on
rollback, so "no mutation on failure" can be asserted without PostgreSQL.
"""

# ruff: noqa: E402  -- JWT_SECRET must be set before config.settings is imported

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from src.bp_account.domain.models import Account, NewTransaction, Transaction
from src.bp_betting.domain.models import Bet, NewBet
from src.bp_commission.domain.resolver import CommissionResolver
from src.bp_common.errors import AccountNotFoundError, InsufficientBalanceError
from src.bp_ledger.domain.engine import TransferEngine
from src.bp_market.domain.models import Market
from src.bp_settlement.domain.engine import SettlementEngine
from src.bp_settlement.domain.models import PendingBet
from src.bp_wallet.domain.models import NewWalletRequest, WalletRequest


@dataclass
class LedgerState:
    accounts: dict[int, Account] = field(default_factory=dict)
    transactions: list[Transaction] = field(default_factory=list)
    markets: dict[int, Market] = field(default_factory=dict)
    bets: dict[int, Bet] = field(default_factory=dict)
    wallet_requests: dict[int, WalletRequest] = field(default_factory=dict)
    commissions: dict[int, int] = field(default_factory=dict)
    default_commission: int | None = None
    discounts: dict[tuple[int, int], int] = field(default_factory=dict)
    subadmin_odds: dict[tuple[int, str], int] = field(default_factory=dict)
    admin_odds: dict[str, int] = field(default_factory=dict)
    next_id: int = 1000

    def new_id(self) -> int:
        self.next_id += 1
        return self.next_id

    def add_account(
        self,
        account_id: int,
        role: str,
        balance: int = 0,
        assigned_to: int | None = None,
        is_blocked: bool = False,
    ) -> Account:
        account = Account(
            id=account_id,
            username=f"{role}{account_id}",
            role=role,
            balance=balance,
            assigned_to=assigned_to,
            is_blocked=is_blocked,
            created_at=datetime.now(UTC),
        )
        self.accounts[account_id] = account
        return account

    def add_market(
        self, market_id: int, kind: str = "number", status: str = "open", name: str = "Kalyan"
    ) -> Market:
        market = Market(id=market_id, name=name, kind=kind, status=status)
        self.markets[market_id] = market
        return market

    def add_bet(
        self,
        bet_id: int,
        account_id: int,
        market_id: int,
        mode: str,
        prediction: str,
        stake: int,
    ) -> Bet:
        bet = Bet(
            id=bet_id,
            account_id=account_id,
            market_id=market_id,
            mode=mode,
            prediction=prediction,
            stake=stake,
            potential_payout=0,
        )
        self.bets[bet_id] = bet
        return bet

    def balance(self, account_id: int) -> int:
        return self.accounts[account_id].balance

    def records_for(self, account_id: int) -> list[Transaction]:
        return [t for t in self.transactions if t.account_id == account_id]


class FakeDb:
    """Stands in for AsyncSession: commit snapshots, rollback restores."""

    def __init__(self, state: LedgerState) -> None:
        self.state = state
        self.commits = 0
        self.rollbacks = 0
        self._snapshot = copy.deepcopy(state.__dict__)

    def checkpoint(self) -> None:
        self._snapshot = copy.deepcopy(self.state.__dict__)

    async def commit(self) -> None:
        self.commits += 1
        self.checkpoint()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.state.__dict__.update(copy.deepcopy(self._snapshot))


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------

class FakeAccountRepository:
    def __init__(self, state: LedgerState) -> None:
        self.state = state
        self.lock_calls: list[list[int]] = []

    async def get_account(self, db: Any, account_id: int) -> Account | None:
        account = self.state.accounts.get(account_id)
        return copy.copy(account) if account else None

    async def lock_accounts(self, db: Any, account_ids: list[int]) -> dict[int, Account]:
        ordered = sorted(set(account_ids))
        self.lock_calls.append(ordered)
        return {
            i: copy.copy(self.state.accounts[i]) for i in ordered if i in self.state.accounts
        }

    async def credit(self, db: Any, account_id: int, amount: int) -> int:
        account = self.state.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        account.balance += amount
        return account.balance

    async def debit(self, db: Any, account_id: int, amount: int) -> int:
        account = self.state.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        if account.balance < amount:
            raise InsufficientBalanceError(account_id, amount, account.balance)
        account.balance -= amount
        return account.balance

    async def append_transaction(self, db: Any, entry: NewTransaction) -> Transaction:
        txn = Transaction(
            id=self.state.new_id(),
            account_id=entry.account_id,
            amount=entry.amount,
            balance_after=entry.balance_after,
            performed_by=entry.performed_by,
            description=entry.description,
            reference_type=entry.reference_type,
            reference_id=entry.reference_id,
            created_at=datetime.now(UTC),
        )
        self.state.transactions.append(txn)
        return txn

    async def list_transactions(
        self,
        db: Any,
        account_id: int,
        cursor_id: int | None,
        limit: int,
        reference_type: str | None,
    ) -> list[Transaction]:
        rows = [
            t
            for t in reversed(self.state.transactions)
            if t.account_id == account_id
            and (cursor_id is None or t.id < cursor_id)
            and (reference_type is None or t.reference_type == reference_type)
        ]
        return rows[:limit]


class FakeCommissionRepository:
    def __init__(self, state: LedgerState) -> None:
        self.state = state

    async def get_deposit_commission(self, db: Any, subadmin_id: int) -> int | None:
        return self.state.commissions.get(subadmin_id)

    async def get_default_deposit_commission(self, db: Any) -> int | None:
        return self.state.default_commission

    async def get_player_deposit_discount(
        self, db: Any, player_id: int, subadmin_id: int
    ) -> int | None:
        return self.state.discounts.get((player_id, subadmin_id))

    async def upsert_deposit_commission(
        self, db: Any, subadmin_id: int, rate_bps: int
    ) -> None:
        self.state.commissions[subadmin_id] = rate_bps


class FakeOddsRepository:
    def __init__(self, state: LedgerState) -> None:
        self.state = state
        self.calls = 0

    async def get_subadmin_odds(
        self, db: Any, subadmin_id: int, game_type: str
    ) -> int | None:
        self.calls += 1
        return self.state.subadmin_odds.get((subadmin_id, game_type))

    async def get_admin_odds(self, db: Any, game_type: str) -> int | None:
        self.calls += 1
        return self.state.admin_odds.get(game_type)


class FakeSettlementRepository:
    def __init__(self, state: LedgerState) -> None:
        self.state = state

    async def list_pending_bets(self, db: Any, market_id: int) -> list[PendingBet]:
        return [
            PendingBet(
                id=b.id,
                account_id=b.account_id,
                market_id=b.market_id,
                mode=b.mode,
                prediction=b.prediction,
                stake=b.stake,
                owner_assigned_to=self.state.accounts[b.account_id].assigned_to,
            )
            for b in sorted(self.state.bets.values(), key=lambda b: b.id)
            if b.market_id == market_id and b.result == "pending"
        ]

    async def claim_bet(self, db: Any, bet_id: int, result: str, payout: int) -> bool:
        bet = self.state.bets.get(bet_id)
        if bet is None or bet.result != "pending":
            return False
        bet.result = result
        bet.payout = payout
        bet.settled_at = datetime.now(UTC)
        return True


class FakeBetRepository:
    def __init__(self, state: LedgerState) -> None:
        self.state = state

    async def insert_bet(self, db: Any, bet: NewBet) -> Bet:
        created = Bet(
            id=self.state.new_id(),
            account_id=bet.account_id,
            market_id=bet.market_id,
            mode=bet.mode,
            prediction=bet.prediction,
            stake=bet.stake,
            potential_payout=bet.potential_payout,
            created_at=datetime.now(UTC),
        )
        self.state.bets[created.id] = created
        return copy.copy(created)


class FakeMarketRepository:
    def __init__(self, state: LedgerState) -> None:
        self.state = state

    async def get_market(self, db: Any, market_id: int) -> Market | None:
        market = self.state.markets.get(market_id)
        return copy.copy(market) if market else None

    async def lock_market(
        self, db: Any, market_id: int, shared: bool = False
    ) -> Market | None:
        return await self.get_market(db, market_id)

    async def update_status(self, db: Any, market_id: int, status: str) -> None:
        self.state.markets[market_id].status = status

    async def record_result(self, db: Any, market_id: int, result: str) -> None:
        market = self.state.markets[market_id]
        market.status = "resulted"
        market.result = result
        market.resulted_at = datetime.now(UTC)


class FakeWalletRequestRepository:
    def __init__(self, state: LedgerState) -> None:
        self.state = state

    async def insert_request(self, db: Any, request: NewWalletRequest) -> WalletRequest:
        created = WalletRequest(
            id=self.state.new_id(),
            account_id=request.account_id,
            amount=request.amount,
            request_type=request.request_type,
            status="pending",
            payment_mode=request.payment_mode,
            payment_details=request.payment_details,
            notes=request.notes,
            created_at=datetime.now(UTC),
        )
        self.state.wallet_requests[created.id] = created
        return copy.copy(created)

    async def lock_request(self, db: Any, request_id: int) -> WalletRequest | None:
        request = self.state.wallet_requests.get(request_id)
        return copy.copy(request) if request else None

    async def mark_reviewed(
        self,
        db: Any,
        request_id: int,
        status: str,
        reviewed_by: int,
        notes: str | None,
    ) -> WalletRequest | None:
        request = self.state.wallet_requests.get(request_id)
        if request is None or request.status != "pending":
            return None
        request.status = status
        request.reviewed_by = reviewed_by
        request.notes = notes if notes is not None else request.notes
        request.reviewed_at = datetime.now(UTC)
        return copy.copy(request)

    async def list_requests(
        self,
        db: Any,
        owner_id: int | None,
        superior_id: int | None,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[WalletRequest]:
        def visible(r: WalletRequest) -> bool:
            if owner_id is None and superior_id is None:
                return True
            owner = self.state.accounts.get(r.account_id)
            return r.account_id == owner_id or (
                owner is not None and superior_id is not None and owner.assigned_to == superior_id
            )

        rows = [
            copy.copy(r)
            for r in sorted(self.state.wallet_requests.values(), key=lambda r: -r.id)
            if visible(r)
            and (status is None or r.status == status)
            and (cursor_id is None or r.id < cursor_id)
        ]
        return rows[:limit]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def state() -> LedgerState:
    return LedgerState()


@pytest.fixture
def db(state: LedgerState) -> FakeDb:
    return FakeDb(state)


@pytest.fixture
def account_repo(state: LedgerState) -> FakeAccountRepository:
    return FakeAccountRepository(state)


@pytest.fixture
def commission_repo(state: LedgerState) -> FakeCommissionRepository:
    return FakeCommissionRepository(state)


@pytest.fixture
def odds_repo(state: LedgerState) -> FakeOddsRepository:
    return FakeOddsRepository(state)


@pytest.fixture
def settlement_repo(state: LedgerState) -> FakeSettlementRepository:
    return FakeSettlementRepository(state)


@pytest.fixture
def bet_repo(state: LedgerState) -> FakeBetRepository:
    return FakeBetRepository(state)


@pytest.fixture
def market_repo(state: LedgerState) -> FakeMarketRepository:
    return FakeMarketRepository(state)


@pytest.fixture
def wallet_repo(state: LedgerState) -> FakeWalletRequestRepository:
    return FakeWalletRequestRepository(state)


@pytest.fixture
def transfer_engine(
    account_repo: FakeAccountRepository, commission_repo: FakeCommissionRepository
) -> TransferEngine:
    return TransferEngine(account_repo, CommissionResolver(commission_repo))


@pytest.fixture
def settlement_engine(
    settlement_repo: FakeSettlementRepository,
    account_repo: FakeAccountRepository,
    odds_repo: FakeOddsRepository,
) -> SettlementEngine:
    return SettlementEngine(settlement_repo, account_repo, odds_repo)


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    from src.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
