"""Domain validation helpers.

Each helper raises the matching LedgerError subclass; none of them touch
storage, so every check can run before the first write.
"""

from decimal import Decimal

from bank_ledger.domain.constants import MAX_AMOUNT
from bank_ledger.domain.exceptions import (
    AccountClosedError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    MinimumBalanceViolationError,
    NonZeroBalanceError,
)
from bank_ledger.domain.models import Account, AccountKind
from bank_ledger.domain.services.account_rules import minimum_balance_for
from bank_ledger.utils.decimal_utils import format_money, parse_amount


def validate_positive_amount(value) -> Decimal:
    """Parse an amount that must be strictly positive.

    Args:
        value: Raw caller amount.

    Returns:
        Decimal: Parsed amount.

    Raises:
        InvalidAmountError: If the amount is unparsable, not positive, or
            above MAX_AMOUNT.
    """
    amount = parse_amount(value)
    if amount is None or amount <= 0 or amount > MAX_AMOUNT:
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    return amount


def validate_initial_deposit(kind: AccountKind, value) -> Decimal:
    """Parse an opening deposit and apply the kind's minimum.

    Args:
        kind: Kind of the account being opened.
        value: Raw caller amount.

    Returns:
        Decimal: Parsed amount, zero allowed for Savings.

    Raises:
        InvalidAmountError: If the amount is unparsable, negative, or above
            MAX_AMOUNT.
        MinimumBalanceViolationError: If a Current deposit is below minimum.
    """
    amount = parse_amount(value)
    if amount is None or amount < 0 or amount > MAX_AMOUNT:
        raise InvalidAmountError(f"Invalid initial deposit: {value!r}")
    minimum = minimum_balance_for(kind)
    if amount < minimum:
        raise MinimumBalanceViolationError(
            f"{kind.value} account requires minimum balance of "
            f"{format_money(minimum)}"
        )
    return amount


def ensure_credit_within_limit(account: Account, amount: Decimal) -> Decimal:
    """Return the balance after a credit, refusing balances above MAX_AMOUNT.

    Raises:
        InvalidAmountError: If the new balance cannot be stored.
    """
    new_balance = account.balance + amount
    if new_balance > MAX_AMOUNT:
        raise InvalidAmountError(
            f"Amount {format_money(amount)} would take account "
            f"{account.account_number} above the maximum balance of "
            f"{format_money(MAX_AMOUNT)}"
        )
    return new_balance


def ensure_account_active(account: Account | None, account_number: int) -> Account:
    """Return the account when it exists and is active.

    Raises:
        AccountNotFoundError: If no account was found.
        AccountClosedError: If the account is closed.
    """
    if account is None:
        raise AccountNotFoundError(f"Account {account_number} not found")
    if not account.is_active:
        raise AccountClosedError(f"Account {account_number} is closed")
    return account


def ensure_can_debit(account: Account, amount: Decimal) -> Decimal:
    """Check outgoing money against the minimum balance, then the balance.

    The minimum-balance check runs first so a Current account at its
    minimum reports the minimum-balance error.

    Args:
        account: Active source account.
        amount: Positive amount leaving the account.

    Returns:
        Decimal: The balance after the debit.

    Raises:
        MinimumBalanceViolationError: If a Current account would drop below
            its minimum balance.
        InsufficientFundsError: If the balance does not cover the amount.
    """
    new_balance = account.balance - amount
    if account.kind is AccountKind.CURRENT and new_balance < minimum_balance_for(
        account.kind
    ):
        raise MinimumBalanceViolationError(
            f"Operation would violate minimum balance requirement of "
            f"{format_money(minimum_balance_for(account.kind))} "
            f"for account {account.account_number}"
        )
    if account.balance < amount:
        raise InsufficientFundsError(
            f"Insufficient balance in account {account.account_number}"
        )
    return new_balance


def ensure_zero_balance(account: Account) -> None:
    """Raise NonZeroBalanceError unless the balance is exactly zero."""
    if account.balance != 0:
        raise NonZeroBalanceError(
            f"Cannot close account {account.account_number} with balance "
            f"{format_money(account.balance)}. Please withdraw all funds first."
        )


__all__ = [
    "validate_positive_amount",
    "validate_initial_deposit",
    "ensure_credit_within_limit",
    "ensure_account_active",
    "ensure_can_debit",
    "ensure_zero_balance",
]
