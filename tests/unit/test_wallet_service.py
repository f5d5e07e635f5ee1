"""Tests for WalletService: request creation, visibility and review."""

import pytest

from src.bp_common.errors import (
    InsufficientBalanceError,
    InvalidTransitionError,
    PermissionDeniedError,
    WalletRequestNotFoundError,
)
from src.bp_wallet.application.service import WalletService


@pytest.fixture
def svc(wallet_repo, account_repo, transfer_engine) -> WalletService:
    return WalletService(wallet_repo, account_repo, transfer_engine)


@pytest.fixture
def world(state, db):
    state.add_account(1, "admin", balance=1000000)
    state.add_account(2, "subadmin", balance=100000, assigned_to=1)
    state.add_account(3, "player", balance=5000, assigned_to=2)
    state.add_account(4, "player", balance=0, assigned_to=1)
    state.add_account(5, "subadmin", balance=0, assigned_to=1)
    state.add_account(6, "admin", balance=0)
    db.checkpoint()
    return state


def _acct(world, account_id):
    return world.accounts[account_id]


class TestCreateRequest:
    async def test_player_deposit(self, world, db, svc) -> None:
        req = await svc.create_request(
            db, _acct(world, 3), 20000, "deposit", "upi", {"utr": "XYZ123"}
        )
        assert req.status == "pending"
        assert req.payment_details == {"utr": "XYZ123"}
        assert db.commits == 1

    async def test_withdrawal_checks_balance(self, world, db, svc) -> None:
        with pytest.raises(InsufficientBalanceError):
            await svc.create_request(db, _acct(world, 3), 5001, "withdrawal", "bank")
        assert world.wallet_requests == {}

    async def test_admin_cannot_deposit(self, world, db, svc) -> None:
        with pytest.raises(PermissionDeniedError):
            await svc.create_request(db, _acct(world, 1), 100, "deposit")

    async def test_platform_investment_admin_only(self, world, db, svc) -> None:
        with pytest.raises(PermissionDeniedError):
            await svc.create_request(db, _acct(world, 2), 100, "platform_investment")
        req = await svc.create_request(db, _acct(world, 1), 100, "platform_investment")
        assert req.request_type == "platform_investment"

    async def test_amount_must_be_positive(self, world, db, svc) -> None:
        with pytest.raises(InvalidTransitionError):
            await svc.create_request(db, _acct(world, 3), 0, "deposit")


class TestReview:
    async def test_deposit_approval_credits_player(self, world, db, svc) -> None:
        req = await svc.create_request(db, _acct(world, 3), 20000, "deposit", "upi")

        result = await svc.review_request(db, req.id, "approved", _acct(world, 2))

        assert result.request.status == "approved"
        assert result.request.reviewed_by == 2
        assert world.balance(3) == 25000
        assert world.balance(2) == 80000
        assert {t.reference_type for t in result.transfer.entries} == {"WALLET_REQUEST"}
        assert {t.reference_id for t in result.transfer.entries} == {req.id}

    async def test_subadmin_deposit_approved_by_admin_uses_commission(
        self, world, db, svc
    ) -> None:
        world.commissions[2] = 2000
        db.checkpoint()
        req = await svc.create_request(db, _acct(world, 2), 50000, "deposit")

        await svc.review_request(db, req.id, "approved", _acct(world, 1))

        assert world.balance(1) == 990000
        assert world.balance(2) == 150000

    async def test_withdrawal_approval_debits_player(self, world, db, svc) -> None:
        req = await svc.create_request(db, _acct(world, 3), 3000, "withdrawal", "bank")

        await svc.review_request(db, req.id, "approved", _acct(world, 2))

        assert world.balance(3) == 2000
        assert world.balance(2) == 103000

    async def test_withdrawal_failing_at_approval_keeps_request_pending(
        self, world, db, svc
    ) -> None:
        req = await svc.create_request(db, _acct(world, 3), 3000, "withdrawal", "bank")
        world.accounts[3].balance = 1000
        db.checkpoint()

        with pytest.raises(InsufficientBalanceError):
            await svc.review_request(db, req.id, "approved", _acct(world, 2))

        assert world.wallet_requests[req.id].status == "pending"
        assert world.balance(3) == 1000

    async def test_platform_investment_self_funds_requester(self, world, db, svc) -> None:
        req = await svc.create_request(db, _acct(world, 1), 500000, "platform_investment")

        result = await svc.review_request(db, req.id, "approved", _acct(world, 6))

        assert world.balance(1) == 1500000
        assert result.transfer.target_entry is None
        assert len(world.transactions) == 1

    async def test_admin_cannot_approve_own_platform_investment(
        self, world, db, svc
    ) -> None:
        req = await svc.create_request(db, _acct(world, 1), 500000, "platform_investment")

        with pytest.raises(PermissionDeniedError):
            await svc.review_request(db, req.id, "approved", _acct(world, 1))

        assert world.wallet_requests[req.id].status == "pending"
        assert world.balance(1) == 1000000
        assert world.transactions == []

    async def test_subadmin_cannot_approve_platform_investment(
        self, world, db, svc
    ) -> None:
        req = await svc.create_request(db, _acct(world, 1), 500000, "platform_investment")
        with pytest.raises(PermissionDeniedError):
            await svc.review_request(db, req.id, "approved", _acct(world, 2))

    async def test_rejection_moves_no_money(self, world, db, svc) -> None:
        req = await svc.create_request(db, _acct(world, 3), 20000, "deposit")

        result = await svc.review_request(db, req.id, "rejected", _acct(world, 2), "no UTR")

        assert result.transfer is None
        assert result.request.status == "rejected"
        assert result.request.notes == "no UTR"
        assert world.transactions == []

    async def test_cannot_review_twice(self, world, db, svc) -> None:
        req = await svc.create_request(db, _acct(world, 3), 1000, "deposit")
        await svc.review_request(db, req.id, "approved", _acct(world, 2))

        with pytest.raises(InvalidTransitionError):
            await svc.review_request(db, req.id, "approved", _acct(world, 2))
        assert world.balance(3) == 6000

    async def test_foreign_subadmin_cannot_review(self, world, db, svc) -> None:
        req = await svc.create_request(db, _acct(world, 3), 1000, "deposit")
        with pytest.raises(PermissionDeniedError):
            await svc.review_request(db, req.id, "approved", _acct(world, 5))

    async def test_unknown_request(self, world, db, svc) -> None:
        with pytest.raises(WalletRequestNotFoundError):
            await svc.review_request(db, 404, "approved", _acct(world, 1))

    async def test_pending_is_not_a_decision(self, world, db, svc) -> None:
        req = await svc.create_request(db, _acct(world, 3), 1000, "deposit")
        with pytest.raises(InvalidTransitionError):
            await svc.review_request(db, req.id, "pending", _acct(world, 2))


class TestListRequests:
    async def test_visibility_by_role(self, world, db, svc) -> None:
        own = await svc.create_request(db, _acct(world, 3), 1000, "deposit")
        other = await svc.create_request(db, _acct(world, 4), 1000, "deposit")
        sub_own = await svc.create_request(db, _acct(world, 2), 1000, "deposit")

        admin_view = await svc.list_requests(db, _acct(world, 1), None, None, 20)
        sub_view = await svc.list_requests(db, _acct(world, 2), None, None, 20)
        player_view = await svc.list_requests(db, _acct(world, 3), None, None, 20)

        assert {i.id for i in admin_view.items} == {own.id, other.id, sub_own.id}
        assert {i.id for i in sub_view.items} == {own.id, sub_own.id}
        assert {i.id for i in player_view.items} == {own.id}

    async def test_pagination(self, world, db, svc) -> None:
        for _ in range(3):
            await svc.create_request(db, _acct(world, 3), 1000, "deposit")

        first = await svc.list_requests(db, _acct(world, 3), None, None, 2)
        second = await svc.list_requests(db, _acct(world, 3), None, first.next_cursor, 2)

        assert first.has_more is True
        assert len(first.items) == 2
        assert second.has_more is False
        assert len(second.items) == 1
