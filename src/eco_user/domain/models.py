"""Domain models for eco_user: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass

from src.eco_account.domain.models import Account


@dataclass(frozen=True)
class ExternalIdentifier:
    """A foreign-system key (e.g. a discord id) pointing at a user."""

    id: int
    key: str
    value: str
    active: bool
    created_at: int                  # epoch millis


@dataclass(frozen=True)
class User:
    """A user with all of its accounts attached.

    Only active identifiers are loaded. Accounts whose economy is unknown to
    the registry are left out rather than surfaced as errors.

    Collections are tuples: one cached instance is shared by every caller.
    """

    id: int
    external_identifiers: tuple[ExternalIdentifier, ...] = ()
    accounts: tuple[Account, ...] = ()
    suspended: bool = False
    created_at: int = 0              # epoch millis

    def get_account(self, economy_id: int) -> Account | None:
        return next((a for a in self.accounts if a.economy.id == economy_id), None)


@dataclass(frozen=True)
class UserAccountRow:
    """One row of the user LEFT JOIN accounts query.

    account_id/economy_id/account_amount are None for a user without accounts.
    """

    user_id: int
    suspended: bool
    created_at: int
    account_id: int | None = None
    economy_id: int | None = None
    account_amount: float | None = None
