"""Domain constants for the ledger."""

from decimal import Decimal

CURRENT_MINIMUM_BALANCE = Decimal("1000.00")
CURRENT_PENALTY_FEE = Decimal("25.00")
SAVINGS_INTEREST_RATE = Decimal("0.04")

# Largest amount whose cents fit a signed 64-bit integer column.
MAX_AMOUNT = Decimal("92233720368547758.07")

INITIAL_DEPOSIT_DESCRIPTION = "Initial Deposit"
DEPOSIT_DESCRIPTION = "Deposit"
WITHDRAWAL_DESCRIPTION = "Withdrawal"

DEFAULT_HISTORY_LIMIT = 10


__all__ = [
    "CURRENT_MINIMUM_BALANCE",
    "CURRENT_PENALTY_FEE",
    "SAVINGS_INTEREST_RATE",
    "MAX_AMOUNT",
    "INITIAL_DEPOSIT_DESCRIPTION",
    "DEPOSIT_DESCRIPTION",
    "WITHDRAWAL_DESCRIPTION",
    "DEFAULT_HISTORY_LIMIT",
]
