"""Repository Protocol for the append-only transaction log."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_common.enums import TransactionType
from src.eco_transaction.domain.models import Transaction


class TransactionRepositoryProtocol(Protocol):
    async def insert_transaction(
        self,
        db: AsyncSession,
        account_id: int,
        amount: float,
        timestamp: int,
        comment: str | None,
        transaction_type: TransactionType,
    ) -> Transaction: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        account_id: int,
        transaction_type: TransactionType | None = None,
    ) -> list[Transaction]:
        """All matching transactions in write order."""
        ...

    async def list_recent_transactions(
        self,
        db: AsyncSession,
        account_id: int,
        limit: int,
        transaction_type: TransactionType | None = None,
    ) -> list[Transaction]:
        """Newest first, at most `limit` rows."""
        ...
