"""Repository Protocol: dependency inversion for testability.

Unit tests inject an in-memory double that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_account.domain.models import Account, StoredAccount
from src.eco_economy.domain.models import Economy


class AccountRepositoryProtocol(Protocol):
    async def account_exists(
        self, db: AsyncSession, user_id: int, economy_id: int
    ) -> bool: ...

    async def insert_account(
        self, db: AsyncSession, user_id: int, economy: Economy
    ) -> Account:
        """Raises AccountExistsError when the (user, economy) pair is taken."""
        ...

    async def get_account_by_id(
        self, db: AsyncSession, account_id: int
    ) -> StoredAccount | None: ...

    async def update_account_amount(
        self, db: AsyncSession, account_id: int, amount: float
    ) -> None: ...

    async def list_accounts_of_economy(
        self, db: AsyncSession, economy: Economy
    ) -> list[Account]: ...

    async def list_accounts_above_amount(
        self, db: AsyncSession, economy: Economy, amount: float
    ) -> list[Account]: ...

    async def list_accounts_under_amount(
        self, db: AsyncSession, economy: Economy, amount: float
    ) -> list[Account]: ...
