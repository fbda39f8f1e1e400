"""Domain models for eco_transaction: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass

from src.eco_common.enums import TransactionType


@dataclass(frozen=True)
class Transaction:
    id: int
    account_id: int
    amount: float                    # magnitude as passed in; sign comes from type
    timestamp: int                   # epoch millis, assigned at write time
    type: TransactionType
    comment: str | None = None

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == TransactionType.INCREASE else -self.amount
