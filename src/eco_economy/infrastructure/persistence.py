"""EconomyRepository: concrete implementation of EconomyRepositoryProtocol.

Transaction ownership: the CALLER commits. Inserts use ON CONFLICT DO NOTHING,
so an empty RETURNING result is the store's duplicate signal.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_common.errors import EconomyNameExistsError
from src.eco_economy.domain.models import Economy

logger = logging.getLogger(__name__)

_LIST_ECONOMIES_SQL = text("""
    SELECT id, name, start_value, increase_multiplier, decrease_multiplier
    FROM economy_economies
""")

_INSERT_ECONOMY_SQL = text("""
    INSERT INTO economy_economies (name, start_value)
    VALUES (:name, :start_value)
    ON CONFLICT DO NOTHING
    RETURNING id, name, start_value, increase_multiplier, decrease_multiplier
""")


def _row_to_economy(row: object) -> Economy:
    return Economy(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        start_value=row.start_value,  # type: ignore[attr-defined]
        increase_multiplier=row.increase_multiplier,  # type: ignore[attr-defined]
        decrease_multiplier=row.decrease_multiplier,  # type: ignore[attr-defined]
    )


class EconomyRepository:
    async def list_economies(self, db: AsyncSession) -> list[Economy]:
        result = await db.execute(_LIST_ECONOMIES_SQL)
        return [_row_to_economy(row) for row in result.fetchall()]

    async def create_economy(
        self, db: AsyncSession, name: str, start_value: float
    ) -> Economy:
        result = await db.execute(
            _INSERT_ECONOMY_SQL, {"name": name, "start_value": start_value}
        )
        row = result.fetchone()
        if row is None:
            logger.warning("Store rejected duplicate economy name %r", name)
            raise EconomyNameExistsError(name)
        return _row_to_economy(row)
