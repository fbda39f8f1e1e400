"""UserCache: per-user read-through cache in front of the user/account join.

get_user_by_id() is the only cached path. Entries expire a fixed time after
they were written (cachetools.TTLCache). Concurrent misses for the same id
share one in-flight load task, so N callers cost one store round-trip. The
shared load opens its own session from the session factory; it never borrows
a caller's session, so cancelling one waiter cannot fail the others.

invalidate_all() bumps a generation counter: a load that started before the
invalidation still answers its waiters but is not written back into the cache.

Lookups by identifier and the bulk scans bypass the cache entirely.
"""

import asyncio
import functools
import logging
import time
from collections.abc import Callable

from cachetools import TTLCache
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.eco_common.clock import epoch_millis
from src.eco_common.database import async_session_factory
from src.eco_common.errors import UserNotFoundError
from src.eco_economy.application.registry import EconomyRegistry
from src.eco_user.domain.assembly import (
    assemble_user,
    group_rows_by_user,
    split_identifier_pairs,
)
from src.eco_user.domain.models import ExternalIdentifier, User, UserAccountRow
from src.eco_user.domain.repository import UserRepositoryProtocol
from src.eco_user.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)


class UserCache:
    def __init__(
        self,
        economies: EconomyRegistry,
        repo: UserRepositoryProtocol | None = None,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        clock: Callable[[], int] = epoch_millis,
        ttl_seconds: float = settings.USER_CACHE_TTL_SECONDS,
        max_size: int = settings.USER_CACHE_MAX_SIZE,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._economies = economies
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._session_factory = session_factory
        self._clock = clock
        self._cache: TTLCache[int, User] = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        self._loading: dict[int, asyncio.Task[User]] = {}
        self._generation = 0

    # ------------------------------------------------------------------
    # Cached path
    # ------------------------------------------------------------------

    async def get_user_by_id(self, user_id: int) -> User:
        """Return the user with all accounts. Raises UserNotFoundError."""
        user = self._cache.get(user_id)
        if user is not None:
            logger.debug("User cache hit: %d", user_id)
            return user

        task = self._loading.get(user_id)
        if task is None:
            logger.debug("User cache miss: %d", user_id)
            task = asyncio.ensure_future(self._load_by_id(user_id))
            self._loading[user_id] = task
            # Registered before any waiter, so the cache is filled before they resume.
            task.add_done_callback(functools.partial(self._on_loaded, user_id, self._generation))
        return await asyncio.shield(task)

    def invalidate_all(self) -> None:
        self._generation += 1
        self._cache.clear()
        self._loading.clear()
        logger.info("User cache invalidated")

    def _on_loaded(self, user_id: int, generation: int, task: asyncio.Task[User]) -> None:
        if self._loading.get(user_id) is task:
            del self._loading[user_id]
        if task.cancelled() or task.exception() is not None:
            return
        if generation == self._generation:
            self._cache[user_id] = task.result()

    async def _load_by_id(self, user_id: int) -> User:
        async with self._session_factory() as db:
            rows = await self._repo.query_rows_by_id(db, user_id)
            user = await self._assemble_one(db, rows)
        if user is None:
            raise UserNotFoundError(f"id={user_id}")
        return user

    # ------------------------------------------------------------------
    # Uncached paths
    # ------------------------------------------------------------------

    async def get_user_by_identifier(self, db: AsyncSession, key: str, value: str) -> User:
        rows = await self._repo.query_rows_by_identifier(db, key, value)
        user = await self._assemble_one(db, rows)
        if user is None:
            raise UserNotFoundError(f"{key}={value}")
        return user

    async def get_external_identifiers(
        self, db: AsyncSession, user_id: int
    ) -> list[ExternalIdentifier]:
        return await self._repo.list_active_identifiers(db, user_id)

    async def list_suspended_users(self, db: AsyncSession) -> list[User]:
        return await self._assemble_many(db, await self._repo.query_rows_suspended(db))

    async def list_users_created_before(self, db: AsyncSession, timestamp: int) -> list[User]:
        rows = await self._repo.query_rows_created_before(db, timestamp)
        return await self._assemble_many(db, rows)

    async def list_users_created_after(self, db: AsyncSession, timestamp: int) -> list[User]:
        rows = await self._repo.query_rows_created_after(db, timestamp)
        return await self._assemble_many(db, rows)

    async def create_user(self, db: AsyncSession, *identifier_pairs: str) -> User:
        """Create a user from flat key, value, key, value... identifier pairs.

        Odd-length input raises MalformedIdentifiersError before any store write.
        """
        pairs = split_identifier_pairs(identifier_pairs)
        created_at = self._clock()

        try:
            user_id = await self._repo.insert_user(db, created_at)
            identifiers: list[ExternalIdentifier] = []
            for key, value in pairs:
                identifier_id = await self._repo.insert_identifier(
                    db, user_id, key, value, created_at
                )
                identifiers.append(
                    ExternalIdentifier(
                        id=identifier_id,
                        key=key,
                        value=value,
                        active=True,
                        created_at=created_at,
                    )
                )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Created user %d with %d identifiers", user_id, len(identifiers))
        return User(
            id=user_id,
            external_identifiers=tuple(identifiers),
            accounts=(),
            suspended=False,
            created_at=created_at,
        )

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    async def _assemble_one(
        self, db: AsyncSession, rows: list[UserAccountRow]
    ) -> User | None:
        if not rows:
            return None
        identifiers = await self._repo.list_active_identifiers(db, rows[0].user_id)
        return assemble_user(rows, identifiers, self._economies.get_by_id)

    async def _assemble_many(
        self, db: AsyncSession, rows: list[UserAccountRow]
    ) -> list[User]:
        users: list[User] = []
        for user_rows in group_rows_by_user(rows).values():
            user = await self._assemble_one(db, user_rows)
            if user is not None:
                users.append(user)
        return users
