"""Port for the append-only ledger entry log."""

from typing import Protocol

from bank_ledger.domain.models import LedgerEntry


class TransactionLogPort(Protocol):
    """Port exposing append and newest-first reads of ledger entries."""

    def append(self, entry: LedgerEntry) -> int:
        """Append an entry and return its store-assigned sequence id."""

    def recent(self, account_number: int, limit: int) -> list[LedgerEntry]:
        """Return at most ``limit`` entries for the account, newest first."""


__all__ = ["TransactionLogPort"]
