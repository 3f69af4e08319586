"""Process-local ledger storage for tests and demos.

A scope holds the storage lock from ``begin()`` until commit or rollback,
so scopes are serialized. Writes are staged inside the scope and published
on commit; a rolled back scope leaves no trace.
"""

from dataclasses import replace
from decimal import Decimal
import threading
from types import TracebackType

from bank_ledger.application.ports.account_store import AccountStorePort
from bank_ledger.application.ports.transaction_log import TransactionLogPort
from bank_ledger.application.ports.unit_of_work import (
    UnitOfWorkPort,
    UnitOfWorkScope,
)
from bank_ledger.domain.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    StorageUnavailableError,
)
from bank_ledger.domain.models import Account, AccountStatus, LedgerEntry

DEFAULT_LOCK_TIMEOUT = 5.0


class InMemoryLedgerStorage:
    """Committed state shared by every scope of one unit of work."""

    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self.entries: list[LedgerEntry] = []
        self.next_account_number = 1
        self.next_sequence_id = 1
        self.lock = threading.Lock()


class InMemoryAccountStore(AccountStorePort):
    """Account store over a scope's staged copy."""

    def __init__(self, scope: "InMemoryUnitOfWorkScope") -> None:
        self._scope = scope

    def get(self, account_number: int) -> Account | None:
        return self._scope.staged_accounts.get(account_number)

    def create(self, account: Account) -> int:
        account_number = self._scope.next_account_number
        self._scope.next_account_number += 1
        self._scope.staged_accounts[account_number] = replace(
            account,
            account_number=account_number,
        )
        return account_number

    def update_balance(
        self,
        account_number: int,
        new_balance: Decimal,
        expected_prior_balance: Decimal,
    ) -> None:
        current = self._scope.staged_accounts.get(account_number)
        if (
            current is None
            or not current.is_active
            or current.balance != expected_prior_balance
        ):
            raise ConcurrentModificationError(
                f"Account {account_number} changed while the operation was "
                f"in progress"
            )
        self._scope.staged_accounts[account_number] = current.with_balance(
            new_balance
        )

    def set_status(
        self,
        account_number: int,
        status: AccountStatus,
        expected_prior_balance: Decimal | None = None,
    ) -> None:
        current = self._scope.staged_accounts.get(account_number)
        if current is None:
            raise AccountNotFoundError(f"Account {account_number} not found")
        if (
            expected_prior_balance is not None
            and current.balance != expected_prior_balance
        ):
            raise ConcurrentModificationError(
                f"Account {account_number} changed while the operation was "
                f"in progress"
            )
        self._scope.staged_accounts[account_number] = current.with_status(status)

    def list_all(self) -> list[Account]:
        accounts = self._scope.staged_accounts
        return [accounts[number] for number in sorted(accounts)]


class InMemoryTransactionLog(TransactionLogPort):
    """Append-only log over committed entries plus the scope's new ones."""

    def __init__(self, scope: "InMemoryUnitOfWorkScope") -> None:
        self._scope = scope

    def append(self, entry: LedgerEntry) -> int:
        sequence_id = self._scope.next_sequence_id
        self._scope.next_sequence_id += 1
        self._scope.staged_entries.append(replace(entry, sequence_id=sequence_id))
        return sequence_id

    def recent(self, account_number: int, limit: int) -> list[LedgerEntry]:
        entries = self._scope.committed_entries + self._scope.staged_entries
        matching = [
            entry for entry in entries if entry.account_number == account_number
        ]
        matching.sort(key=lambda entry: entry.sequence_id, reverse=True)
        return matching[:limit]


class InMemoryUnitOfWorkScope(UnitOfWorkScope):
    """Serialized scope staging writes until commit."""

    def __init__(self, storage: InMemoryLedgerStorage, lock_timeout: float) -> None:
        if not storage.lock.acquire(timeout=lock_timeout):
            raise StorageUnavailableError(
                f"Timed out after {lock_timeout}s waiting for ledger storage"
            )
        self._storage = storage
        self._finished = False
        self.staged_accounts = dict(storage.accounts)
        self.committed_entries = storage.entries
        self.staged_entries: list[LedgerEntry] = []
        self.next_account_number = storage.next_account_number
        self.next_sequence_id = storage.next_sequence_id
        self.accounts = InMemoryAccountStore(self)
        self.transactions = InMemoryTransactionLog(self)

    def commit(self) -> None:
        if self._finished:
            raise RuntimeError("Unit of work scope is already finished")
        storage = self._storage
        storage.accounts = self.staged_accounts
        storage.entries = self.committed_entries + self.staged_entries
        storage.next_account_number = self.next_account_number
        storage.next_sequence_id = self.next_sequence_id
        self._finish()

    def rollback(self) -> None:
        if not self._finished:
            self._finish()

    def _finish(self) -> None:
        self._finished = True
        self._storage.lock.release()

    def __enter__(self) -> "InMemoryUnitOfWorkScope":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()


class InMemoryUnitOfWork(UnitOfWorkPort):
    """Unit of work factory over process-local storage."""

    def __init__(
        self,
        storage: InMemoryLedgerStorage | None = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ) -> None:
        self.storage = storage or InMemoryLedgerStorage()
        self._lock_timeout = lock_timeout

    def prepare_storage(self) -> None:
        """Nothing to prepare for process-local storage."""

    def begin(self) -> InMemoryUnitOfWorkScope:
        return InMemoryUnitOfWorkScope(self.storage, self._lock_timeout)

    def close(self) -> None:
        """Nothing to release for process-local storage."""


__all__ = [
    "InMemoryLedgerStorage",
    "InMemoryAccountStore",
    "InMemoryTransactionLog",
    "InMemoryUnitOfWorkScope",
    "InMemoryUnitOfWork",
]
