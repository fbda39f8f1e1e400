"""UserRepository: concrete implementation of UserRepositoryProtocol.

Every user query is the same user LEFT JOIN accounts projection with a
different WHERE clause. The LEFT JOIN keeps users that have no account yet;
their single row carries NULL account columns.

Transaction ownership: the CALLER commits.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_common.errors import InternalError
from src.eco_user.domain.models import ExternalIdentifier, UserAccountRow

_USER_ACCOUNTS_SELECT = """
    SELECT u.id          AS user_id,
           u.suspended   AS suspended,
           u.created_at  AS created_at,
           a.id          AS account_id,
           a.economy_id  AS economy_id,
           a.amount      AS account_amount
    FROM economy_users u
    LEFT JOIN economy_users_accounts a ON a.user_id = u.id
"""

_ROWS_BY_ID_SQL = text(_USER_ACCOUNTS_SELECT + """
    WHERE u.id = :user_id
""")

_ROWS_BY_IDENTIFIER_SQL = text(_USER_ACCOUNTS_SELECT + """
    WHERE u.id = (
        SELECT i.user_id
        FROM economy_users_identifiers i
        WHERE i.key = :key AND i.value = :value AND i.active = TRUE
        ORDER BY i.id
        LIMIT 1
    )
""")

_ROWS_SUSPENDED_SQL = text(_USER_ACCOUNTS_SELECT + """
    WHERE u.suspended = TRUE
""")

_ROWS_CREATED_BEFORE_SQL = text(_USER_ACCOUNTS_SELECT + """
    WHERE u.created_at < :timestamp
""")

_ROWS_CREATED_AFTER_SQL = text(_USER_ACCOUNTS_SELECT + """
    WHERE u.created_at > :timestamp
""")

_ACTIVE_IDENTIFIERS_SQL = text("""
    SELECT id, key, value, active, created_at
    FROM economy_users_identifiers
    WHERE user_id = :user_id AND active = TRUE
    ORDER BY id
""")

_INSERT_USER_SQL = text("""
    INSERT INTO economy_users (suspended, created_at)
    VALUES (FALSE, :created_at)
    RETURNING id
""")

_INSERT_IDENTIFIER_SQL = text("""
    INSERT INTO economy_users_identifiers (user_id, key, value, active, created_at)
    VALUES (:user_id, :key, :value, TRUE, :created_at)
    RETURNING id
""")


def _row_to_user_account(row: object) -> UserAccountRow:
    return UserAccountRow(
        user_id=row.user_id,  # type: ignore[attr-defined]
        suspended=row.suspended,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        economy_id=row.economy_id,  # type: ignore[attr-defined]
        account_amount=row.account_amount,  # type: ignore[attr-defined]
    )


def _row_to_identifier(row: object) -> ExternalIdentifier:
    return ExternalIdentifier(
        id=row.id,  # type: ignore[attr-defined]
        key=row.key,  # type: ignore[attr-defined]
        value=row.value,  # type: ignore[attr-defined]
        active=row.active,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class UserRepository:
    async def insert_user(self, db: AsyncSession, created_at: int) -> int:
        result = await db.execute(_INSERT_USER_SQL, {"created_at": created_at})
        row = result.fetchone()
        if row is None:
            raise InternalError("User insert returned no rows")
        return row.id

    async def insert_identifier(
        self, db: AsyncSession, user_id: int, key: str, value: str, created_at: int
    ) -> int:
        result = await db.execute(
            _INSERT_IDENTIFIER_SQL,
            {"user_id": user_id, "key": key, "value": value, "created_at": created_at},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Identifier insert returned no rows")
        return row.id

    async def list_active_identifiers(
        self, db: AsyncSession, user_id: int
    ) -> list[ExternalIdentifier]:
        result = await db.execute(_ACTIVE_IDENTIFIERS_SQL, {"user_id": user_id})
        return [_row_to_identifier(row) for row in result.fetchall()]

    async def query_rows_by_id(
        self, db: AsyncSession, user_id: int
    ) -> list[UserAccountRow]:
        result = await db.execute(_ROWS_BY_ID_SQL, {"user_id": user_id})
        return [_row_to_user_account(row) for row in result.fetchall()]

    async def query_rows_by_identifier(
        self, db: AsyncSession, key: str, value: str
    ) -> list[UserAccountRow]:
        result = await db.execute(_ROWS_BY_IDENTIFIER_SQL, {"key": key, "value": value})
        return [_row_to_user_account(row) for row in result.fetchall()]

    async def query_rows_suspended(self, db: AsyncSession) -> list[UserAccountRow]:
        result = await db.execute(_ROWS_SUSPENDED_SQL)
        return [_row_to_user_account(row) for row in result.fetchall()]

    async def query_rows_created_before(
        self, db: AsyncSession, timestamp: int
    ) -> list[UserAccountRow]:
        result = await db.execute(_ROWS_CREATED_BEFORE_SQL, {"timestamp": timestamp})
        return [_row_to_user_account(row) for row in result.fetchall()]

    async def query_rows_created_after(
        self, db: AsyncSession, timestamp: int
    ) -> list[UserAccountRow]:
        result = await db.execute(_ROWS_CREATED_AFTER_SQL, {"timestamp": timestamp})
        return [_row_to_user_account(row) for row in result.fetchall()]
