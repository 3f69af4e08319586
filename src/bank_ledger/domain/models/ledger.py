"""Domain models for ledger entries."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class EntryType(str, Enum):
    """Kind of balance-affecting event recorded in the log."""

    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    TRANSFER = "Transfer"


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable record of one balance mutation on one account.

    Attributes:
        sequence_id: Store-assigned, increasing in append order. None until
            the entry has been appended.
        account_number: Account whose balance changed.
        entry_type: Deposit, Withdrawal or Transfer.
        amount: Positive amount moved.
        balance_after: Account balance immediately after this entry.
        timestamp: UTC capture time of the operation.
        description: Free text, e.g. "Transfer to account 42".
    """

    sequence_id: int | None
    account_number: int
    entry_type: EntryType
    amount: Decimal
    balance_after: Decimal
    timestamp: datetime
    description: str = ""


def transfer_descriptions(from_account: int, to_account: int) -> tuple[str, str]:
    """Return the (source, destination) descriptions for a transfer."""
    return (
        f"Transfer to account {to_account}",
        f"Transfer from account {from_account}",
    )


__all__ = ["EntryType", "LedgerEntry", "transfer_descriptions"]
