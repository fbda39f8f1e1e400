"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

The economy scans (of/above/under) are unindexed on amount and can touch every
account of an economy; callers treat them as high-load operations.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_account.domain.models import Account, StoredAccount
from src.eco_common.errors import AccountExistsError
from src.eco_economy.domain.models import Economy

logger = logging.getLogger(__name__)

_ACCOUNT_EXISTS_SQL = text("""
    SELECT 1
    FROM economy_users_accounts
    WHERE user_id = :user_id AND economy_id = :economy_id
    LIMIT 1
""")

# ON CONFLICT DO NOTHING: zero returned rows means the UNIQUE (user_id, economy_id)
# constraint rejected the insert.
_INSERT_ACCOUNT_SQL = text("""
    INSERT INTO economy_users_accounts (user_id, economy_id, amount)
    VALUES (:user_id, :economy_id, :amount)
    ON CONFLICT (user_id, economy_id) DO NOTHING
    RETURNING id
""")

_GET_ACCOUNT_SQL = text("""
    SELECT id, user_id, economy_id, amount
    FROM economy_users_accounts
    WHERE id = :account_id
""")

_UPDATE_AMOUNT_SQL = text("""
    UPDATE economy_users_accounts
    SET amount = :amount
    WHERE id = :account_id
""")

_LIST_OF_ECONOMY_SQL = text("""
    SELECT id, user_id, economy_id, amount
    FROM economy_users_accounts
    WHERE economy_id = :economy_id
""")

_LIST_ABOVE_AMOUNT_SQL = text("""
    SELECT id, user_id, economy_id, amount
    FROM economy_users_accounts
    WHERE economy_id = :economy_id AND amount > :amount
""")

_LIST_UNDER_AMOUNT_SQL = text("""
    SELECT id, user_id, economy_id, amount
    FROM economy_users_accounts
    WHERE economy_id = :economy_id AND amount < :amount
""")


def _row_to_stored(row: object) -> StoredAccount:
    return StoredAccount(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        economy_id=row.economy_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
    )


def _row_to_account(row: object, economy: Economy) -> Account:
    return Account(
        id=row.id,  # type: ignore[attr-defined]
        economy=economy,
        amount=row.amount,  # type: ignore[attr-defined]
    )


class AccountRepository:
    async def account_exists(
        self, db: AsyncSession, user_id: int, economy_id: int
    ) -> bool:
        result = await db.execute(
            _ACCOUNT_EXISTS_SQL, {"user_id": user_id, "economy_id": economy_id}
        )
        return result.fetchone() is not None

    async def insert_account(
        self, db: AsyncSession, user_id: int, economy: Economy
    ) -> Account:
        result = await db.execute(
            _INSERT_ACCOUNT_SQL,
            {
                "user_id": user_id,
                "economy_id": economy.id,
                "amount": economy.start_value,
            },
        )
        row = result.fetchone()
        if row is None:
            logger.warning(
                "Store rejected duplicate account user=%d economy=%s after pre-check passed",
                user_id,
                economy.name,
            )
            raise AccountExistsError(user_id, economy.name)
        return Account(id=row.id, economy=economy, amount=economy.start_value)

    async def get_account_by_id(
        self, db: AsyncSession, account_id: int
    ) -> StoredAccount | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"account_id": account_id})
        row = result.fetchone()
        return _row_to_stored(row) if row else None

    async def update_account_amount(
        self, db: AsyncSession, account_id: int, amount: float
    ) -> None:
        await db.execute(_UPDATE_AMOUNT_SQL, {"account_id": account_id, "amount": amount})

    async def list_accounts_of_economy(
        self, db: AsyncSession, economy: Economy
    ) -> list[Account]:
        result = await db.execute(_LIST_OF_ECONOMY_SQL, {"economy_id": economy.id})
        return [_row_to_account(row, economy) for row in result.fetchall()]

    async def list_accounts_above_amount(
        self, db: AsyncSession, economy: Economy, amount: float
    ) -> list[Account]:
        result = await db.execute(
            _LIST_ABOVE_AMOUNT_SQL, {"economy_id": economy.id, "amount": amount}
        )
        return [_row_to_account(row, economy) for row in result.fetchall()]

    async def list_accounts_under_amount(
        self, db: AsyncSession, economy: Economy, amount: float
    ) -> list[Account]:
        result = await db.execute(
            _LIST_UNDER_AMOUNT_SQL, {"economy_id": economy.id, "amount": amount}
        )
        return [_row_to_account(row, economy) for row in result.fetchall()]
