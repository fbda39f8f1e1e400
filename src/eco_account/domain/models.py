"""Domain models for eco_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, replace

from src.eco_economy.domain.models import Economy


@dataclass(frozen=True)
class Account:
    """A user's balance within one economy. The economy is always resolved."""

    id: int
    economy: Economy
    amount: float

    def with_amount(self, amount: float) -> "Account":
        return replace(self, amount=amount)


@dataclass(frozen=True)
class StoredAccount:
    """An account row as the store returns it, before economy resolution."""

    id: int
    user_id: int
    economy_id: int
    amount: float
