"""SQLAlchemy ORM models for eco_user.

Identifiers are never deleted; deactivated rows keep active = false and are
excluded when a user is assembled.
"""

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.eco_common.database import Base


class UserORM(Base):
    __tablename__ = "economy_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    suspended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class ExternalIdentifierORM(Base):
    __tablename__ = "economy_users_identifiers"
    __table_args__ = (
        Index("ix_economy_users_identifiers_key_value", "key", "value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("economy_users.id"), nullable=False, index=True
    )
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
