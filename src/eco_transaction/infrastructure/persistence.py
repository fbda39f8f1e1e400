"""TransactionRepository: concrete implementation of TransactionRepositoryProtocol.

Append-only: there is no UPDATE or DELETE statement for this table.
Transaction ownership: the CALLER commits.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_common.enums import TransactionType
from src.eco_common.errors import InternalError
from src.eco_transaction.domain.models import Transaction

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO economy_transactions (account_id, amount, timestamp, comment, type)
    VALUES (:account_id, :amount, :timestamp, :comment, :type)
    RETURNING id, account_id, amount, timestamp, comment, type
""")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT id, account_id, amount, timestamp, comment, type
    FROM economy_transactions
    WHERE account_id = :account_id
      AND (:type IS NULL OR type = :type)
    ORDER BY id ASC
""")

_LIST_RECENT_TRANSACTIONS_SQL = text("""
    SELECT id, account_id, amount, timestamp, comment, type
    FROM economy_transactions
    WHERE account_id = :account_id
      AND (:type IS NULL OR type = :type)
    ORDER BY timestamp DESC, id DESC
    LIMIT :limit
""")


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        timestamp=row.timestamp,  # type: ignore[attr-defined]
        comment=row.comment,  # type: ignore[attr-defined]
        type=TransactionType(row.type),  # type: ignore[attr-defined]
    )


class TransactionRepository:
    async def insert_transaction(
        self,
        db: AsyncSession,
        account_id: int,
        amount: float,
        timestamp: int,
        comment: str | None,
        transaction_type: TransactionType,
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "account_id": account_id,
                "amount": amount,
                "timestamp": timestamp,
                "comment": comment,
                "type": transaction_type.value,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_transaction(row)

    async def list_transactions(
        self,
        db: AsyncSession,
        account_id: int,
        transaction_type: TransactionType | None = None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "account_id": account_id,
                "type": transaction_type.value if transaction_type else None,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def list_recent_transactions(
        self,
        db: AsyncSession,
        account_id: int,
        limit: int,
        transaction_type: TransactionType | None = None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_RECENT_TRANSACTIONS_SQL,
            {
                "account_id": account_id,
                "type": transaction_type.value if transaction_type else None,
                "limit": limit,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]
