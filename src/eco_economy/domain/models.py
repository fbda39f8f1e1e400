"""Domain models for eco_economy: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Economy:
    """A named virtual currency, e.g. "gold" or "gems".

    The multipliers scale raw amounts on increase/decrease. They are exposed as
    pure helpers only; the account mutation path records raw amounts.
    """

    id: int
    name: str                         # unique, case-insensitive
    start_value: float                # balance of every new account
    increase_multiplier: float = 1.0
    decrease_multiplier: float = 1.0

    def increase_value_by_multiplier(self, amount: float) -> float:
        return amount * self.increase_multiplier

    def decrease_value_by_multiplier(self, amount: float) -> float:
        return amount * self.decrease_multiplier

    def has_name(self, name: str) -> bool:
        return self.name.casefold() == name.casefold()
