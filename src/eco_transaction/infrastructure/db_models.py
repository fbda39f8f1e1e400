"""SQLAlchemy ORM model for eco_transaction."""

from sqlalchemy import BigInteger, Double, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.eco_common.database import Base


class TransactionORM(Base):
    __tablename__ = "economy_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("economy_users_accounts.id"), nullable=False, index=True
    )
    amount: Mapped[float] = mapped_column(Double, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    comment: Mapped[str | None] = mapped_column(String(500), nullable=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    # NOTE: No updated_at: economy_transactions is append-only
