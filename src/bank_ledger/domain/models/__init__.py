"""Domain models package."""

from .accounts import (
    Account,
    AccountDetails,
    AccountKind,
    AccountStatus,
    InterestReportRow,
)
from .ledger import EntryType, LedgerEntry, transfer_descriptions

__all__ = [
    "Account",
    "AccountDetails",
    "AccountKind",
    "AccountStatus",
    "InterestReportRow",
    "EntryType",
    "LedgerEntry",
    "transfer_descriptions",
]
