"""Repository Protocol: dependency inversion for testability.

Unit tests inject an in-memory double that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.eco_economy.domain.models import Economy


class EconomyRepositoryProtocol(Protocol):
    async def list_economies(self, db: AsyncSession) -> list[Economy]: ...

    async def create_economy(
        self, db: AsyncSession, name: str, start_value: float
    ) -> Economy:
        """Raises EconomyNameExistsError when the store rejects the name."""
        ...
