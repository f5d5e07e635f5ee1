"""Unit tests for AccountApplicationService using in-memory repositories."""

import pytest

from src.bp_account.application.schemas import (
    BalanceResponse,
    cursor_decode,
    cursor_encode,
)
from src.bp_account.application.service import AccountApplicationService
from src.bp_account.domain.models import NewTransaction
from src.bp_common.errors import AccountNotFoundError


@pytest.fixture
def svc(account_repo) -> AccountApplicationService:
    return AccountApplicationService(repo=account_repo)


class TestGetBalance:
    async def test_returns_balance_response(self, state, db, svc) -> None:
        state.add_account(3, "player", balance=150000)

        result = await svc.get_balance(db, 3)

        assert isinstance(result, BalanceResponse)
        assert result.balance_subunits == 150000
        assert result.balance_display == "₹1,500.00"
        assert result.role == "player"

    async def test_unknown_account(self, db, svc) -> None:
        with pytest.raises(AccountNotFoundError):
            await svc.get_balance(db, 404)


class TestListTransactions:
    async def _seed(self, state, account_repo, db, n: int) -> None:
        state.add_account(3, "player")
        for i in range(n):
            await account_repo.append_transaction(
                db,
                NewTransaction(
                    account_id=3,
                    amount=100,
                    balance_after=100 * (i + 1),
                    performed_by=1,
                    description=f"entry {i}",
                    reference_type="TRANSFER" if i % 2 else "BET_STAKE",
                ),
            )

    async def test_newest_first_with_cursor(self, state, db, svc, account_repo) -> None:
        await self._seed(state, account_repo, db, 5)

        first = await svc.list_transactions(db, 3, None, 3, None)
        second = await svc.list_transactions(db, 3, first.next_cursor, 3, None)

        assert [i.balance_after_subunits for i in first.items] == [500, 400, 300]
        assert first.has_more is True
        assert [i.balance_after_subunits for i in second.items] == [200, 100]
        assert second.has_more is False
        assert second.next_cursor is None

    async def test_reference_type_filter(self, state, db, svc, account_repo) -> None:
        await self._seed(state, account_repo, db, 4)

        page = await svc.list_transactions(db, 3, None, 20, "TRANSFER")

        assert {i.reference_type for i in page.items} == {"TRANSFER"}
        assert len(page.items) == 2

    async def test_display_fields(self, state, db, svc, account_repo) -> None:
        await self._seed(state, account_repo, db, 1)
        item = (await svc.list_transactions(db, 3, None, 20, None)).items[0]
        assert item.amount_display == "₹1.00"


class TestCursor:
    def test_round_trip(self) -> None:
        assert cursor_decode(cursor_encode(42)) == 42

    def test_none(self) -> None:
        assert cursor_decode(None) is None

    def test_garbage_is_ignored(self) -> None:
        assert cursor_decode("not-base64!!") is None
