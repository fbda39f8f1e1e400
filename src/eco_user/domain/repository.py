"""Repository Protocol: dependency inversion for testability.

Unit tests inject an in-memory double that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_user.domain.models import ExternalIdentifier, UserAccountRow


class UserRepositoryProtocol(Protocol):
    async def insert_user(self, db: AsyncSession, created_at: int) -> int: ...

    async def insert_identifier(
        self, db: AsyncSession, user_id: int, key: str, value: str, created_at: int
    ) -> int: ...

    async def list_active_identifiers(
        self, db: AsyncSession, user_id: int
    ) -> list[ExternalIdentifier]: ...

    async def query_rows_by_id(
        self, db: AsyncSession, user_id: int
    ) -> list[UserAccountRow]: ...

    async def query_rows_by_identifier(
        self, db: AsyncSession, key: str, value: str
    ) -> list[UserAccountRow]: ...

    async def query_rows_suspended(self, db: AsyncSession) -> list[UserAccountRow]: ...

    async def query_rows_created_before(
        self, db: AsyncSession, timestamp: int
    ) -> list[UserAccountRow]: ...

    async def query_rows_created_after(
        self, db: AsyncSession, timestamp: int
    ) -> list[UserAccountRow]: ...
