"""Exception hierarchy for ledger operations.

Every exception here is an expected, recoverable rejection of a single
operation. ``kind`` gives callers a stable identifier that does not depend
on the class name or message wording.
"""


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    kind = "LedgerError"


class InvalidAmountError(LedgerError):
    """Raised when an amount is not a positive cents-precision number."""

    kind = "InvalidAmount"


class AccountNotFoundError(LedgerError):
    """Raised when no account matches the requested account number."""

    kind = "AccountNotFound"


class AccountClosedError(AccountNotFoundError):
    """Raised when a mutation targets a closed account.

    Subclasses AccountNotFoundError: a closed account cannot be found for
    mutation purposes.
    """

    kind = "AccountClosed"


class MinimumBalanceViolationError(LedgerError):
    """Raised when a Current account would fall below its minimum balance."""

    kind = "MinimumBalanceViolation"


class InsufficientFundsError(LedgerError):
    """Raised when the balance does not cover the requested amount."""

    kind = "InsufficientFunds"


class SameAccountError(LedgerError):
    """Raised when a transfer names the same account on both sides."""

    kind = "SameAccount"


class NonZeroBalanceError(LedgerError):
    """Raised when closing an account whose balance is not exactly zero."""

    kind = "NonZeroBalance"


class ConcurrentModificationError(LedgerError):
    """Raised when a conditional balance write finds a changed balance."""

    kind = "ConcurrentModification"


class StorageUnavailableError(LedgerError):
    """Raised when the storage backend cannot be reached."""

    kind = "StorageUnavailable"


__all__ = [
    "LedgerError",
    "InvalidAmountError",
    "AccountNotFoundError",
    "AccountClosedError",
    "MinimumBalanceViolationError",
    "InsufficientFundsError",
    "SameAccountError",
    "NonZeroBalanceError",
    "ConcurrentModificationError",
    "StorageUnavailableError",
]
