"""SQLAlchemy ORM model for eco_economy.

Maps the economy_economies table. The functional unique index on lower(name)
is the final arbiter of name uniqueness; the registry pre-check only avoids a
round-trip in the common case.
"""

from sqlalchemy import Double, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.eco_common.database import Base


class EconomyORM(Base):
    __tablename__ = "economy_economies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    start_value: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    increase_multiplier: Mapped[float] = mapped_column(Double, nullable=False, default=1.0)
    decrease_multiplier: Mapped[float] = mapped_column(Double, nullable=False, default=1.0)


Index("uq_economy_economies_name_lower", func.lower(EconomyORM.name), unique=True)
