"""Domain package for business rules and core models."""

from .constants import (
    CURRENT_MINIMUM_BALANCE,
    CURRENT_PENALTY_FEE,
    DEFAULT_HISTORY_LIMIT,
    SAVINGS_INTEREST_RATE,
)
from .exceptions import LedgerError
from .models import (
    Account,
    AccountDetails,
    AccountKind,
    AccountStatus,
    EntryType,
    InterestReportRow,
    LedgerEntry,
)
from .services import (
    build_account_details,
    calculate_interest,
    minimum_balance_for,
    minimum_balance_satisfied,
)

__all__ = [
    "CURRENT_MINIMUM_BALANCE",
    "CURRENT_PENALTY_FEE",
    "DEFAULT_HISTORY_LIMIT",
    "SAVINGS_INTEREST_RATE",
    "LedgerError",
    "Account",
    "AccountDetails",
    "AccountKind",
    "AccountStatus",
    "EntryType",
    "InterestReportRow",
    "LedgerEntry",
    "build_account_details",
    "calculate_interest",
    "minimum_balance_for",
    "minimum_balance_satisfied",
]
