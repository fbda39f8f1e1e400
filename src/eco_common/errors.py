"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Economy
  2xxx: Account
  3xxx: User
  9xxx: System

Every concrete error also belongs to one of three families so callers can
handle a whole class of failure at once:
  EntityAlreadyExistsError  -> uniqueness violated, never retried
  EntityNotFoundError       -> referenced economy/account/user absent
  MalformedInputError       -> rejected locally before any store access
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class EntityAlreadyExistsError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


class EntityNotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class MalformedInputError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


# --- 1xxx: Economy ---

class EconomyNameExistsError(EntityAlreadyExistsError):
    def __init__(self, name: str) -> None:
        super().__init__(1001, f"There is already an economy with the name {name}")


class EconomyNotFoundError(EntityNotFoundError):
    def __init__(self, economy_id: int) -> None:
        super().__init__(1002, f"Economy not found: {economy_id}")


# --- 2xxx: Account ---

class AccountExistsError(EntityAlreadyExistsError):
    def __init__(self, user_id: int, economy_name: str) -> None:
        super().__init__(
            2001,
            f"There is already an account for user {user_id} of economy {economy_name}",
        )


class AccountNotFoundError(EntityNotFoundError):
    def __init__(self, account_id: int) -> None:
        super().__init__(2002, f"Account not found: {account_id}")


# --- 3xxx: User ---

class UserNotFoundError(EntityNotFoundError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, f"User not found: {detail}")


class MalformedIdentifiersError(MalformedInputError, IndexError):
    """Identifier pairs are a flat key, value, key, value... sequence."""

    def __init__(self, keys: int, values: int) -> None:
        super().__init__(
            3002,
            f"Keys size ({keys}) and values size ({values}) does not match",
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
