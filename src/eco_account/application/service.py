"""AccountLedger: account creation and balance mutation with transaction logging.

Creation: the (user, economy) existence check runs first, but the store's
UNIQUE constraint is the final arbiter. A race that slips past the check
surfaces as the same AccountExistsError the check raises.

Mutation: increase()/decrease() are a blind read-modify-write. The new balance
is computed from the caller-supplied account snapshot and written as-is; there
is no compare-and-swap against the stored balance. Two concurrent mutations
of the same account built from the same snapshot lose one update. Callers
must pass an up-to-date account (e.g. fresh from get_account_by_id_or_raise).

Multipliers on Economy are NOT applied: the recorded amount is the raw amount.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_account.domain.models import Account
from src.eco_account.domain.repository import AccountRepositoryProtocol
from src.eco_account.infrastructure.persistence import AccountRepository
from src.eco_common.enums import TransactionType
from src.eco_common.errors import AccountExistsError, AccountNotFoundError
from src.eco_common.high_load import high_load
from src.eco_economy.application.registry import EconomyRegistry
from src.eco_economy.domain.models import Economy
from src.eco_transaction.application.service import TransactionLog
from src.eco_user.domain.models import User

logger = logging.getLogger(__name__)


class AccountLedger:
    def __init__(
        self,
        economies: EconomyRegistry,
        transactions: TransactionLog,
        repo: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._economies = economies
        self._transactions = transactions
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    def _resolve_economy(self, economy: int | Economy) -> Economy:
        if isinstance(economy, Economy):
            return economy
        return self._economies.get_by_id_or_raise(economy)

    async def has_account(
        self, db: AsyncSession, user: int | User, economy: int | Economy
    ) -> bool:
        user_id = user.id if isinstance(user, User) else user
        economy_id = economy.id if isinstance(economy, Economy) else economy
        return await self._repo.account_exists(db, user_id, economy_id)

    async def create_account(
        self, db: AsyncSession, user: int | User, economy: int | Economy
    ) -> Account:
        """Create the account of `user` in `economy` with the economy's start value.

        Raises EconomyNotFoundError for an unknown economy id and
        AccountExistsError when the user already holds an account there.
        """
        resolved = self._resolve_economy(economy)
        user_id = user.id if isinstance(user, User) else user

        try:
            if await self._repo.account_exists(db, user_id, resolved.id):
                raise AccountExistsError(user_id, resolved.name)
            account = await self._repo.insert_account(db, user_id, resolved)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Created account %d for user %d in economy %s", account.id, user_id, resolved.name
        )
        return account

    async def increase(
        self,
        db: AsyncSession,
        account: Account,
        amount: float,
        comment: str | None = None,
    ) -> Account:
        return await self._apply(db, account, amount, TransactionType.INCREASE, comment)

    async def decrease(
        self,
        db: AsyncSession,
        account: Account,
        amount: float,
        comment: str | None = None,
    ) -> Account:
        return await self._apply(db, account, amount, TransactionType.DECREASE, comment)

    async def _apply(
        self,
        db: AsyncSession,
        account: Account,
        amount: float,
        transaction_type: TransactionType,
        comment: str | None,
    ) -> Account:
        if transaction_type == TransactionType.INCREASE:
            new_amount = account.amount + amount
        else:
            new_amount = account.amount - amount

        try:
            await self._repo.update_account_amount(db, account.id, new_amount)
            await self._transactions.append(db, account.id, amount, transaction_type, comment)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.debug(
            "%s account %d by %s: %s -> %s",
            transaction_type.value,
            account.id,
            amount,
            account.amount,
            new_amount,
        )
        return account.with_amount(new_amount)

    async def get_account_by_id(self, db: AsyncSession, account_id: int) -> Account | None:
        """Load an account. Raises EconomyNotFoundError if its economy is unknown."""
        stored = await self._repo.get_account_by_id(db, account_id)
        if stored is None:
            return None
        economy = self._economies.get_by_id_or_raise(stored.economy_id)
        return Account(id=stored.id, economy=economy, amount=stored.amount)

    async def get_account_by_id_or_raise(self, db: AsyncSession, account_id: int) -> Account:
        account = await self.get_account_by_id(db, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    @high_load
    async def list_accounts_of_economy(
        self, db: AsyncSession, economy: int | Economy
    ) -> list[Account]:
        return await self._repo.list_accounts_of_economy(db, self._resolve_economy(economy))

    @high_load
    async def list_accounts_above_amount(
        self, db: AsyncSession, economy: int | Economy, amount: float
    ) -> list[Account]:
        return await self._repo.list_accounts_above_amount(
            db, self._resolve_economy(economy), amount
        )

    @high_load
    async def list_accounts_under_amount(
        self, db: AsyncSession, economy: int | Economy, amount: float
    ) -> list[Account]:
        return await self._repo.list_accounts_under_amount(
            db, self._resolve_economy(economy), amount
        )
