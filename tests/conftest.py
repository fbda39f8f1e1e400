"""Shared test fixtures: in-memory store plus wired-up services."""

from unittest.mock import AsyncMock

import pytest

from src.eco_account.application.service import AccountLedger
from src.eco_economy.application.registry import EconomyRegistry
from src.eco_transaction.application.service import TransactionLog
from src.eco_user.application.cache import UserCache
from tests.fakes import (
    FIXED_NOW,
    FakeAccountRepository,
    FakeEconomyRepository,
    FakeSessionFactory,
    FakeStore,
    FakeTransactionRepository,
    FakeUserRepository,
)


@pytest.fixture
def db() -> AsyncMock:
    """Stand-in AsyncSession: services only await commit()/rollback() on it."""
    return AsyncMock()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def registry(store: FakeStore) -> EconomyRegistry:
    return EconomyRegistry(repo=FakeEconomyRepository(store))


@pytest.fixture
def transaction_log(store: FakeStore) -> TransactionLog:
    return TransactionLog(repo=FakeTransactionRepository(store), clock=lambda: FIXED_NOW)


@pytest.fixture
def ledger(
    store: FakeStore, registry: EconomyRegistry, transaction_log: TransactionLog
) -> AccountLedger:
    return AccountLedger(registry, transaction_log, repo=FakeAccountRepository(store))


@pytest.fixture
def user_repo(store: FakeStore) -> FakeUserRepository:
    return FakeUserRepository(store)


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def user_cache(
    registry: EconomyRegistry,
    user_repo: FakeUserRepository,
    session_factory: FakeSessionFactory,
) -> UserCache:
    return UserCache(
        registry, repo=user_repo, session_factory=session_factory, clock=lambda: FIXED_NOW
    )
