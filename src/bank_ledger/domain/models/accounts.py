"""Domain models for ledger accounts."""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum


class AccountKind(str, Enum):
    """Account variants; fixed when the account is opened."""

    SAVINGS = "Savings"
    CURRENT = "Current"


class AccountStatus(str, Enum):
    """Account lifecycle status. CLOSED is terminal."""

    ACTIVE = "Active"
    CLOSED = "Closed"


@dataclass(frozen=True)
class Account:
    """Stored account as seen by the ledger engine.

    Attributes:
        account_number: Store-assigned identifier, None before creation.
        holder_name: Name of the account holder.
        phone: Contact phone number.
        email: Contact email address.
        address: Postal address.
        kind: Savings or Current.
        balance: Balance in major currency units, cents precision.
        status: Active or Closed.
        created_at: UTC timestamp captured when the account was opened.
    """

    account_number: int | None
    holder_name: str
    phone: str
    email: str
    address: str
    kind: AccountKind
    balance: Decimal
    status: AccountStatus = AccountStatus.ACTIVE
    created_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status is AccountStatus.ACTIVE

    def with_balance(self, balance: Decimal) -> "Account":
        """Return a copy of the account carrying a new balance."""
        return replace(self, balance=balance)

    def with_status(self, status: AccountStatus) -> "Account":
        """Return a copy of the account carrying a new status."""
        return replace(self, status=status)


@dataclass(frozen=True)
class AccountDetails:
    """Account plus the values derived from its kind and balance."""

    account: Account
    interest: Decimal
    minimum_balance: Decimal
    minimum_balance_satisfied: bool
    penalty_fee: Decimal


@dataclass(frozen=True)
class InterestReportRow:
    """Informational annual interest for one Savings account."""

    account_number: int
    holder_name: str
    balance: Decimal
    interest: Decimal


__all__ = [
    "AccountKind",
    "AccountStatus",
    "Account",
    "AccountDetails",
    "InterestReportRow",
]
