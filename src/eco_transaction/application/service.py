"""TransactionLog: append-only writer/reader of balance changes.

No caching: every read goes to the store. append() joins the caller's unit
of work (the account ledger writes the balance and the log entry together);
create_transaction() is the standalone variant and commits on its own.
"""

from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_common.clock import epoch_millis
from src.eco_common.enums import TransactionType
from src.eco_transaction.domain.models import Transaction
from src.eco_transaction.domain.repository import TransactionRepositoryProtocol
from src.eco_transaction.infrastructure.persistence import TransactionRepository


class TransactionLog:
    def __init__(
        self,
        repo: TransactionRepositoryProtocol | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._repo: TransactionRepositoryProtocol = repo or TransactionRepository()
        self._clock = clock

    async def append(
        self,
        db: AsyncSession,
        account_id: int,
        amount: float,
        transaction_type: TransactionType,
        comment: str | None = None,
    ) -> Transaction:
        return await self._repo.insert_transaction(
            db, account_id, amount, self._clock(), comment, transaction_type
        )

    async def create_transaction(
        self,
        db: AsyncSession,
        account_id: int,
        amount: float,
        transaction_type: TransactionType,
        comment: str | None = None,
    ) -> Transaction:
        try:
            transaction = await self.append(db, account_id, amount, transaction_type, comment)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return transaction

    async def get_all_transactions(
        self, db: AsyncSession, account_id: int
    ) -> list[Transaction]:
        return await self._repo.list_transactions(db, account_id)

    async def get_recent_transactions(
        self, db: AsyncSession, account_id: int, limit: int
    ) -> list[Transaction]:
        return await self._repo.list_recent_transactions(db, account_id, limit)

    async def get_all_transactions_of_type(
        self, db: AsyncSession, account_id: int, transaction_type: TransactionType
    ) -> list[Transaction]:
        return await self._repo.list_transactions(db, account_id, transaction_type)

    async def get_recent_transactions_of_type(
        self,
        db: AsyncSession,
        account_id: int,
        limit: int,
        transaction_type: TransactionType,
    ) -> list[Transaction]:
        return await self._repo.list_recent_transactions(
            db, account_id, limit, transaction_type
        )
