"""Assemble User aggregates from joined user/account rows.

Pure functions, no I/O: the caller fetches the rows and identifiers and passes
an economy lookup (normally EconomyRegistry.get_by_id).
"""

import logging
from collections.abc import Callable, Iterable

from src.eco_account.domain.models import Account
from src.eco_common.errors import MalformedIdentifiersError
from src.eco_economy.domain.models import Economy
from src.eco_user.domain.models import ExternalIdentifier, User, UserAccountRow

logger = logging.getLogger(__name__)

EconomyLookup = Callable[[int], Economy | None]


def group_rows_by_user(rows: Iterable[UserAccountRow]) -> dict[int, list[UserAccountRow]]:
    """Group rows by user id, preserving first-seen order of users."""
    grouped: dict[int, list[UserAccountRow]] = {}
    for row in rows:
        grouped.setdefault(row.user_id, []).append(row)
    return grouped


def assemble_user(
    rows: list[UserAccountRow],
    identifiers: list[ExternalIdentifier],
    economy_lookup: EconomyLookup,
) -> User | None:
    """Build one User from all rows of that user. Returns None for no rows."""
    if not rows:
        return None

    first = rows[0]
    accounts: list[Account] = []
    for row in rows:
        if row.account_id is None or row.economy_id is None:
            continue  # user without accounts
        economy = economy_lookup(row.economy_id)
        if economy is None:
            logger.warning(
                "Dropping account %d of user %d: unknown economy %d",
                row.account_id,
                row.user_id,
                row.economy_id,
            )
            continue
        accounts.append(
            Account(id=row.account_id, economy=economy, amount=row.account_amount or 0.0)
        )

    return User(
        id=first.user_id,
        external_identifiers=tuple(i for i in identifiers if i.active),
        accounts=tuple(accounts),
        suspended=first.suspended,
        created_at=first.created_at,
    )


def split_identifier_pairs(pairs: tuple[str, ...] | list[str]) -> list[tuple[str, str]]:
    """Split a flat key, value, key, value... sequence into (key, value) pairs.

    Raises MalformedIdentifiersError (an IndexError) for odd-length input.
    """
    keys = list(pairs[0::2])
    values = list(pairs[1::2])
    if len(keys) != len(values):
        raise MalformedIdentifiersError(len(keys), len(values))
    return list(zip(keys, values))
