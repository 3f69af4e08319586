"""Domain services package."""

from .account_rules import (
    build_account_details,
    calculate_interest,
    minimum_balance_for,
    minimum_balance_satisfied,
    penalty_fee_for,
)
from .validation import (
    ensure_account_active,
    ensure_can_debit,
    ensure_credit_within_limit,
    ensure_zero_balance,
    validate_initial_deposit,
    validate_positive_amount,
)

__all__ = [
    "build_account_details",
    "calculate_interest",
    "minimum_balance_for",
    "minimum_balance_satisfied",
    "penalty_fee_for",
    "ensure_account_active",
    "ensure_can_debit",
    "ensure_credit_within_limit",
    "ensure_zero_balance",
    "validate_initial_deposit",
    "validate_positive_amount",
]
