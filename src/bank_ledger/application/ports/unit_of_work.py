"""Unit of work ports.

A scope groups account store and transaction log calls so they commit or
roll back together. Scopes are context managers: leaving the ``with`` block
without calling ``commit()``, or because of an exception, rolls back.
"""

from types import TracebackType
from typing import Protocol

from bank_ledger.application.ports.account_store import AccountStorePort
from bank_ledger.application.ports.transaction_log import TransactionLogPort


class UnitOfWorkScope(Protocol):
    """Open atomic, isolated scope over the ledger storage."""

    accounts: AccountStorePort
    transactions: TransactionLogPort

    def commit(self) -> None:
        """Make every write in the scope durable."""

    def rollback(self) -> None:
        """Discard every write in the scope."""

    def __enter__(self) -> "UnitOfWorkScope":
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...


class UnitOfWorkPort(Protocol):
    """Port opening unit of work scopes."""

    def begin(self) -> UnitOfWorkScope:
        """Open a new scope."""


__all__ = ["UnitOfWorkScope", "UnitOfWorkPort"]
