"""SQLAlchemy ORM model for eco_account.

The UNIQUE (user_id, economy_id) constraint is the final arbiter of the
one-account-per-user-per-economy rule. The ledger's existence check runs
first but cannot close the race on its own.
"""

from sqlalchemy import Double, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.eco_common.database import Base


class AccountORM(Base):
    __tablename__ = "economy_users_accounts"
    __table_args__ = (
        UniqueConstraint("user_id", "economy_id", name="uq_economy_users_accounts_user_economy"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("economy_users.id"), nullable=False
    )
    economy_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("economy_economies.id"), nullable=False
    )
    amount: Mapped[float] = mapped_column(Double, nullable=False)
