"""Unit tests for TransactionLog."""

from unittest.mock import AsyncMock

import pytest

from src.eco_common.enums import TransactionType
from src.eco_transaction.application.service import TransactionLog
from src.eco_transaction.domain.models import Transaction
from tests.fakes import FakeStore, FakeTransactionRepository


@pytest.fixture
def ticking_log(store: FakeStore) -> TransactionLog:
    ticks = iter(range(1_000, 100_000, 10))
    return TransactionLog(repo=FakeTransactionRepository(store), clock=lambda: next(ticks))


async def _seed(log: TransactionLog, db) -> None:
    await log.append(db, 1, 10.0, TransactionType.INCREASE)
    await log.append(db, 1, 3.0, TransactionType.DECREASE, "fee")
    await log.append(db, 2, 99.0, TransactionType.INCREASE)
    await log.append(db, 1, 4.0, TransactionType.INCREASE)


class TestAppend:
    async def test_append_does_not_commit(self, ticking_log: TransactionLog, db) -> None:
        transaction = await ticking_log.append(db, 1, 10.0, TransactionType.INCREASE)

        assert transaction.amount == 10.0
        assert transaction.type == TransactionType.INCREASE
        assert transaction.comment is None
        assert transaction.timestamp == 1_000
        db.commit.assert_not_awaited()

    async def test_create_transaction_commits(self, ticking_log: TransactionLog, db) -> None:
        transaction = await ticking_log.create_transaction(
            db, 5, 2.0, TransactionType.DECREASE, "refund"
        )

        assert transaction.comment == "refund"
        db.commit.assert_awaited_once()

    async def test_create_transaction_rolls_back(self, db) -> None:
        repo = AsyncMock()
        repo.insert_transaction.side_effect = RuntimeError("connection lost")
        log = TransactionLog(repo=repo, clock=lambda: 1)

        with pytest.raises(RuntimeError):
            await log.create_transaction(db, 5, 2.0, TransactionType.DECREASE)

        db.rollback.assert_awaited_once()


class TestReads:
    async def test_all_in_write_order(self, ticking_log: TransactionLog, db) -> None:
        await _seed(ticking_log, db)

        result = await ticking_log.get_all_transactions(db, 1)

        assert [t.amount for t in result] == [10.0, 3.0, 4.0]

    async def test_recent_newest_first_with_limit(self, ticking_log: TransactionLog, db) -> None:
        await _seed(ticking_log, db)

        result = await ticking_log.get_recent_transactions(db, 1, 2)

        assert [t.amount for t in result] == [4.0, 3.0]

    async def test_filtered_by_type(self, ticking_log: TransactionLog, db) -> None:
        await _seed(ticking_log, db)

        increases = await ticking_log.get_all_transactions_of_type(
            db, 1, TransactionType.INCREASE
        )
        recent_decreases = await ticking_log.get_recent_transactions_of_type(
            db, 1, 5, TransactionType.DECREASE
        )

        assert [t.amount for t in increases] == [10.0, 4.0]
        assert [t.comment for t in recent_decreases] == ["fee"]

    async def test_reads_always_hit_store(
        self, ticking_log: TransactionLog, store: FakeStore, db
    ) -> None:
        await ticking_log.get_all_transactions(db, 1)
        await ticking_log.get_all_transactions(db, 1)

        assert store.calls["list_transactions"] == 2


class TestSignedAmount:
    def test_increase_positive(self) -> None:
        t = Transaction(1, 1, 5.0, 0, TransactionType.INCREASE)
        assert t.signed_amount == 5.0

    def test_decrease_negative(self) -> None:
        t = Transaction(1, 1, 5.0, 0, TransactionType.DECREASE)
        assert t.signed_amount == -5.0
