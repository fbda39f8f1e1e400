"""Unit tests for AccountLedger using the in-memory store."""

from unittest.mock import AsyncMock

import pytest

from src.eco_account.application.service import AccountLedger
from src.eco_account.domain.models import Account
from src.eco_common.enums import TransactionType
from src.eco_common.errors import (
    AccountExistsError,
    AccountNotFoundError,
    EconomyNotFoundError,
    EntityAlreadyExistsError,
)
from src.eco_user.domain.models import User
from tests.fakes import FIXED_NOW, FakeStore


@pytest.fixture
async def economies(store: FakeStore, registry, db):
    gold = store.add_economy("Gold", 100.0)
    gems = store.add_economy("Gems", 5.0, increase_multiplier=2.0)
    await registry.refresh(db)
    return gold, gems


class TestCreateAccount:
    async def test_starts_at_economy_start_value(self, ledger: AccountLedger, economies, db) -> None:
        gold, _ = economies

        account = await ledger.create_account(db, 1, gold.id)

        assert account.economy == gold
        assert account.amount == 100.0
        db.commit.assert_awaited_once()

    async def test_two_economies_give_two_accounts(
        self, ledger: AccountLedger, store: FakeStore, economies, db
    ) -> None:
        gold, gems = economies

        first = await ledger.create_account(db, 1, gold)
        second = await ledger.create_account(db, 1, gems)

        assert first.id != second.id
        assert {a.economy_id for a in store.accounts.values()} == {gold.id, gems.id}

    async def test_second_create_same_pair_fails(self, ledger: AccountLedger, economies, db) -> None:
        gold, _ = economies
        await ledger.create_account(db, 1, gold.id)

        with pytest.raises(AccountExistsError):
            await ledger.create_account(db, 1, gold.id)

    async def test_duplicate_from_check_ends_transaction(
        self, ledger: AccountLedger, economies, db
    ) -> None:
        gold, _ = economies
        await ledger.create_account(db, 1, gold.id)
        db.reset_mock()

        with pytest.raises(AccountExistsError):
            await ledger.create_account(db, 1, gold.id)

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_accepts_user_instance(self, ledger: AccountLedger, economies, db) -> None:
        gold, _ = economies
        user = User(id=7)

        await ledger.create_account(db, user, gold)

        assert await ledger.has_account(db, user, gold) is True
        assert await ledger.has_account(db, 7, 9999) is False

    async def test_unknown_economy_id(self, ledger: AccountLedger, economies, db) -> None:
        with pytest.raises(EconomyNotFoundError):
            await ledger.create_account(db, 1, 9999)

    async def test_store_rejection_after_check_maps_to_same_error(
        self, ledger: AccountLedger, store: FakeStore, economies, db
    ) -> None:
        gold, _ = economies
        store.add_account(1, gold.id, 100.0)  # a concurrent request won the race
        ledger._repo.account_exists = AsyncMock(return_value=False)

        with pytest.raises(AccountExistsError) as exc_info:
            await ledger.create_account(db, 1, gold.id)

        assert isinstance(exc_info.value, EntityAlreadyExistsError)
        assert exc_info.value.http_status == 409
        assert len(store.accounts) == 1
        db.rollback.assert_awaited_once()


class TestMutation:
    async def test_sequence_balance_and_transactions(
        self, ledger: AccountLedger, store: FakeStore, transaction_log, economies, db
    ) -> None:
        gold, _ = economies
        account = await ledger.create_account(db, 1, gold)

        account = await ledger.increase(db, account, 30.0)
        account = await ledger.decrease(db, account, 12.5, comment="shop")
        account = await ledger.increase(db, account, 2.5)

        assert account.amount == 100.0 + 30.0 - 12.5 + 2.5
        assert store.accounts[account.id].amount == account.amount
        transactions = await transaction_log.get_all_transactions(db, account.id)
        assert [(t.type, t.amount) for t in transactions] == [
            (TransactionType.INCREASE, 30.0),
            (TransactionType.DECREASE, 12.5),
            (TransactionType.INCREASE, 2.5),
        ]
        assert transactions[1].comment == "shop"
        assert all(t.timestamp == FIXED_NOW for t in transactions)

    async def test_balance_equals_start_plus_signed_sum(
        self, ledger: AccountLedger, transaction_log, economies, db
    ) -> None:
        gold, _ = economies
        account = await ledger.create_account(db, 1, gold)
        for amount in (5.0, 7.0, 1.0):
            account = await ledger.decrease(db, account, amount)
        account = await ledger.increase(db, account, 40.0)

        transactions = await transaction_log.get_all_transactions(db, account.id)

        assert account.amount == gold.start_value + sum(t.signed_amount for t in transactions)

    async def test_multiplier_is_not_applied(
        self, ledger: AccountLedger, transaction_log, economies, db
    ) -> None:
        _, gems = economies
        account = await ledger.create_account(db, 1, gems)

        account = await ledger.increase(db, account, 10.0)

        assert account.amount == 15.0
        (transaction,) = await transaction_log.get_all_transactions(db, account.id)
        assert transaction.amount == 10.0

    async def test_blind_update_from_stale_snapshot_loses_update(
        self, ledger: AccountLedger, store: FakeStore, economies, db
    ) -> None:
        gold, _ = economies
        snapshot = await ledger.create_account(db, 1, gold)

        await ledger.increase(db, snapshot, 10.0)
        await ledger.increase(db, snapshot, 20.0)  # same stale snapshot

        assert store.accounts[snapshot.id].amount == 120.0

    async def test_does_not_reread_store(
        self, ledger: AccountLedger, store: FakeStore, economies, db
    ) -> None:
        gold, _ = economies
        account = await ledger.create_account(db, 1, gold)

        await ledger.increase(db, account, 1.0)

        assert store.calls["get_account_by_id"] == 0

    async def test_failed_log_write_rolls_back(
        self, ledger: AccountLedger, transaction_log, economies, db
    ) -> None:
        gold, _ = economies
        account = await ledger.create_account(db, 1, gold)
        db.reset_mock()
        transaction_log._repo.insert_transaction = AsyncMock(side_effect=RuntimeError("db down"))

        with pytest.raises(RuntimeError):
            await ledger.increase(db, account, 1.0)

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()


class TestGetAccount:
    async def test_get_by_id(self, ledger: AccountLedger, economies, db) -> None:
        gold, _ = economies
        created = await ledger.create_account(db, 1, gold)

        assert await ledger.get_account_by_id(db, created.id) == created

    async def test_absent_is_none(self, ledger: AccountLedger, economies, db) -> None:
        assert await ledger.get_account_by_id(db, 4242) is None

    async def test_or_raise(self, ledger: AccountLedger, economies, db) -> None:
        with pytest.raises(AccountNotFoundError):
            await ledger.get_account_by_id_or_raise(db, 4242)


class TestEconomyScans:
    @pytest.fixture
    async def seeded(self, ledger: AccountLedger, economies, db) -> list[Account]:
        gold, gems = economies
        accounts = []
        for user_id, delta in ((1, -50.0), (2, 0.0), (3, 50.0)):
            account = await ledger.create_account(db, user_id, gold)
            accounts.append(await ledger.increase(db, account, delta))
        await ledger.create_account(db, 1, gems)
        return accounts

    async def test_of_economy_by_id_and_instance(
        self, ledger: AccountLedger, economies, seeded, db
    ) -> None:
        gold, _ = economies

        by_id = await ledger.list_accounts_of_economy(db, gold.id)
        by_instance = await ledger.list_accounts_of_economy(db, gold)

        assert {a.id for a in by_id} == {a.id for a in seeded}
        assert by_id == by_instance

    async def test_above_and_under(self, ledger: AccountLedger, economies, seeded, db) -> None:
        gold, _ = economies

        above = await ledger.list_accounts_above_amount(db, gold.id, 100.0)
        under = await ledger.list_accounts_under_amount(db, gold, 100.0)

        assert [a.amount for a in above] == [150.0]
        assert [a.amount for a in under] == [50.0]

    async def test_unknown_economy_id(self, ledger: AccountLedger, economies, db) -> None:
        with pytest.raises(EconomyNotFoundError):
            await ledger.list_accounts_above_amount(db, 9999, 0.0)

    def test_scans_are_marked_high_load(self) -> None:
        assert AccountLedger.list_accounts_of_economy.__high_load__ is True
        assert AccountLedger.list_accounts_above_amount.__high_load__ is True
        assert AccountLedger.list_accounts_under_amount.__high_load__ is True
