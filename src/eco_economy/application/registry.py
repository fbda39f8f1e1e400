"""EconomyRegistry: in-memory snapshot of every economy.

All lookups are pure scans over the current snapshot and never touch the
store. refresh() loads the full table and swaps the snapshot in a single
assignment, so a concurrent reader sees either the old tuple or the new one,
never a half-filled list.

create() does NOT insert into the snapshot. A newly created economy becomes
visible to lookups after the next refresh().
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_common.errors import EconomyNameExistsError, EconomyNotFoundError
from src.eco_economy.domain.models import Economy
from src.eco_economy.domain.repository import EconomyRepositoryProtocol
from src.eco_economy.infrastructure.persistence import EconomyRepository

logger = logging.getLogger(__name__)


class EconomyRegistry:
    def __init__(self, repo: EconomyRepositoryProtocol | None = None) -> None:
        self._repo: EconomyRepositoryProtocol = repo or EconomyRepository()
        self._economies: tuple[Economy, ...] = ()

    async def refresh(self, db: AsyncSession) -> None:
        economies = tuple(await self._repo.list_economies(db))
        self._economies = economies
        logger.info("Economy registry refreshed: %d economies", len(economies))

    async def create(self, db: AsyncSession, name: str, start_value: float) -> Economy:
        try:
            if self.get_by_name(name) is not None:
                raise EconomyNameExistsError(name)
            economy = await self._repo.create_economy(db, name, start_value)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Created economy %s (id=%d)", economy.name, economy.id)
        return economy

    def get_by_id(self, economy_id: int) -> Economy | None:
        return next((e for e in self._economies if e.id == economy_id), None)

    def get_by_id_or_raise(self, economy_id: int) -> Economy:
        economy = self.get_by_id(economy_id)
        if economy is None:
            raise EconomyNotFoundError(economy_id)
        return economy

    def get_by_name(self, name: str) -> Economy | None:
        return next((e for e in self._economies if e.has_name(name)), None)

    def list_all(self) -> list[Economy]:
        return list(self._economies)

    def list_with_increase_multiplier(self) -> list[Economy]:
        return [e for e in self._economies if e.increase_multiplier != 1.0]

    def list_with_decrease_multiplier(self) -> list[Economy]:
        return [e for e in self._economies if e.decrease_multiplier != 1.0]
