"""Kind-specific account rules.

Interest and minimum-balance figures are pure functions of an account's
kind and balance. Nothing here posts interest or assesses fees.
"""

from decimal import Decimal

from bank_ledger.domain.constants import (
    CURRENT_MINIMUM_BALANCE,
    CURRENT_PENALTY_FEE,
    SAVINGS_INTEREST_RATE,
)
from bank_ledger.domain.models import Account, AccountDetails, AccountKind
from bank_ledger.utils.decimal_utils import CENT

ZERO = Decimal("0.00")


def calculate_interest(kind: AccountKind, balance: Decimal) -> Decimal:
    """Return the informational annual interest for a balance.

    Args:
        kind: Account kind.
        balance: Current balance.

    Returns:
        Decimal: Simple annual interest quantized to cents; zero for
        Current accounts.
    """
    if kind is AccountKind.SAVINGS:
        return (balance * SAVINGS_INTEREST_RATE).quantize(CENT)
    return ZERO


def minimum_balance_for(kind: AccountKind) -> Decimal:
    """Return the minimum balance a kind must keep after outgoing money."""
    if kind is AccountKind.CURRENT:
        return CURRENT_MINIMUM_BALANCE
    return ZERO


def minimum_balance_satisfied(kind: AccountKind, balance: Decimal) -> bool:
    """Return whether the balance meets the kind's minimum balance."""
    if kind is AccountKind.CURRENT:
        return balance >= CURRENT_MINIMUM_BALANCE
    return True


def penalty_fee_for(kind: AccountKind) -> Decimal:
    if kind is AccountKind.CURRENT:
        return CURRENT_PENALTY_FEE
    return ZERO


def build_account_details(account: Account) -> AccountDetails:
    """Attach the derived kind-specific values to an account.

    Args:
        account: Account read from the store.

    Returns:
        AccountDetails: Account with interest and minimum-balance figures.
    """
    return AccountDetails(
        account=account,
        interest=calculate_interest(account.kind, account.balance),
        minimum_balance=minimum_balance_for(account.kind),
        minimum_balance_satisfied=minimum_balance_satisfied(
            account.kind,
            account.balance,
        ),
        penalty_fee=penalty_fee_for(account.kind),
    )


__all__ = [
    "calculate_interest",
    "minimum_balance_for",
    "minimum_balance_satisfied",
    "penalty_fee_for",
    "build_account_details",
]
