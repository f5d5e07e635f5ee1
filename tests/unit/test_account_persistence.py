"""Unit tests for AccountRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.bp_account.domain.models import NewTransaction
from src.bp_account.infrastructure.persistence import AccountRepository
from src.bp_common.errors import AccountNotFoundError, InsufficientBalanceError


def _make_account_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", 3)
    row.username = kwargs.get("username", "player3")
    row.role = kwargs.get("role", "player")
    row.balance = kwargs.get("balance", 5000)
    row.assigned_to = kwargs.get("assigned_to", 2)
    row.is_blocked = False
    row.created_at = datetime.now(UTC)
    return row


def _result(row):
    result = MagicMock()
    result.fetchone.return_value = row
    return result


@pytest.fixture
def db():
    return MagicMock()


class TestDebit:
    async def test_returns_new_balance(self, db) -> None:
        balance_row = MagicMock()
        balance_row.balance = 4000
        db.execute = AsyncMock(return_value=_result(balance_row))

        assert await AccountRepository().debit(db, 3, 1000) == 4000
        params = db.execute.call_args[0][1]
        assert params == {"account_id": 3, "amount": 1000}

    async def test_zero_rows_means_insufficient(self, db) -> None:
        db.execute = AsyncMock(
            side_effect=[_result(None), _result(_make_account_row(balance=500))]
        )

        with pytest.raises(InsufficientBalanceError) as exc_info:
            await AccountRepository().debit(db, 3, 1000)

        assert exc_info.value.available == 500
        assert exc_info.value.required == 1000

    async def test_zero_rows_and_no_account(self, db) -> None:
        db.execute = AsyncMock(side_effect=[_result(None), _result(None)])
        with pytest.raises(AccountNotFoundError):
            await AccountRepository().debit(db, 404, 1000)

    def test_sql_is_conditional(self) -> None:
        from src.bp_account.infrastructure.persistence import _DEBIT_SQL

        assert "balance >= :amount" in str(_DEBIT_SQL)


class TestCredit:
    async def test_unknown_account(self, db) -> None:
        db.execute = AsyncMock(return_value=_result(None))
        with pytest.raises(AccountNotFoundError):
            await AccountRepository().credit(db, 404, 1000)


class TestLockAccounts:
    async def test_ids_sorted_and_deduplicated(self, db) -> None:
        result = MagicMock()
        result.fetchall.return_value = [
            _make_account_row(id=2, role="subadmin"),
            _make_account_row(id=9, role="admin"),
        ]
        db.execute = AsyncMock(return_value=result)

        locked = await AccountRepository().lock_accounts(db, [9, 2, 9])

        assert db.execute.call_args[0][1] == {"account_ids": [2, 9]}
        assert set(locked) == {2, 9}
        assert locked[9].is_admin

    def test_lock_sql_orders_by_id(self) -> None:
        from src.bp_account.infrastructure.persistence import _LOCK_ACCOUNTS_SQL

        sql = str(_LOCK_ACCOUNTS_SQL)
        assert "ORDER BY id" in sql
        assert "FOR UPDATE" in sql


class TestAppendTransaction:
    async def test_maps_returned_row(self, db) -> None:
        row = MagicMock()
        row.id = 77
        row.account_id = 3
        row.amount = -1000
        row.balance_after = 4000
        row.performed_by = 3
        row.description = "Bet #5"
        row.reference_type = "BET_STAKE"
        row.reference_id = 5
        row.created_at = datetime.now(UTC)
        db.execute = AsyncMock(return_value=_result(row))

        txn = await AccountRepository().append_transaction(
            db,
            NewTransaction(
                account_id=3,
                amount=-1000,
                balance_after=4000,
                performed_by=3,
                description="Bet #5",
                reference_type="BET_STAKE",
                reference_id=5,
            ),
        )

        assert txn.id == 77
        assert txn.reference_type == "BET_STAKE"
