"""EconomyRuntime: composition root for the ledger core.

Constructs the registry, transaction log, account ledger and user cache once
per process and injects them into each other. Lifecycle:

    start()   -> bootstrap refresh + periodic economy refresh task
    refresh() -> operator "refresh" command: reload economies, drop user cache
    close()   -> stop the refresh task, dispose the engine
"""

import asyncio
import contextlib
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.eco_account.application.service import AccountLedger
from src.eco_common.database import async_session_factory, engine
from src.eco_economy.application.registry import EconomyRegistry
from src.eco_transaction.application.service import TransactionLog
from src.eco_user.application.cache import UserCache

logger = logging.getLogger(__name__)


class EconomyRuntime:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        refresh_interval: float = settings.ECONOMY_REFRESH_INTERVAL_SECONDS,
        economies: EconomyRegistry | None = None,
        transactions: TransactionLog | None = None,
        accounts: AccountLedger | None = None,
        users: UserCache | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._refresh_interval = refresh_interval
        self.economies = economies or EconomyRegistry()
        self.transactions = transactions or TransactionLog()
        self.accounts = accounts or AccountLedger(self.economies, self.transactions)
        self.users = users or UserCache(self.economies, session_factory=session_factory)
        self._refresh_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        await self.refresh()
        self._refresh_task = asyncio.create_task(self._refresh_periodically())
        logger.info(
            "Economy runtime started, refreshing economies every %.0fs", self._refresh_interval
        )

    async def refresh(self) -> None:
        await self.refresh_economies()
        self.users.invalidate_all()

    async def refresh_economies(self) -> None:
        async with self._session_factory() as db:
            await self.economies.refresh(db)

    async def _refresh_periodically(self) -> None:
        while True:
            await asyncio.sleep(self._refresh_interval)
            try:
                await self.refresh_economies()
            except Exception:
                # Keep the previous snapshot; the next tick retries.
                logger.exception("Scheduled economy refresh failed")

    async def close(self, dispose_engine: bool = True) -> None:
        if self._refresh_task is not None:
            self._refresh_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._refresh_task
            self._refresh_task = None
        if dispose_engine:
            await engine.dispose()
        logger.info("Economy runtime stopped")
