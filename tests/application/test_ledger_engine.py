"""Tests for the LedgerEngine use case."""

from decimal import Decimal

import pytest

from bank_ledger.application.use_cases.ledger_engine import LedgerEngine
from bank_ledger.domain.exceptions import (
    AccountClosedError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    MinimumBalanceViolationError,
    NonZeroBalanceError,
    SameAccountError,
)
from bank_ledger.domain.models import AccountKind, AccountStatus, EntryType


def _balance(engine, account_number: int) -> Decimal:
    return engine.get_account(account_number).account.balance


def test_open_current_account_at_minimum(engine, open_account) -> None:
    """Opening a Current account with 1000.00 logs one initial deposit."""
    number = open_account(AccountKind.CURRENT, "1000.00")

    assert _balance(engine, number) == Decimal("1000.00")
    history = engine.transaction_history(number)
    assert len(history) == 1
    assert history[0].entry_type is EntryType.DEPOSIT
    assert history[0].amount == Decimal("1000.00")
    assert history[0].balance_after == Decimal("1000.00")
    assert history[0].description == "Initial Deposit"


def test_open_current_account_below_minimum_creates_nothing(
    engine,
    open_account,
) -> None:
    """A Current deposit of 999.99 is rejected and no account is stored."""
    with pytest.raises(MinimumBalanceViolationError):
        open_account(AccountKind.CURRENT, "999.99")

    assert list(engine.list_accounts()) == []


def test_open_account_rejects_negative_deposit(engine, open_account) -> None:
    """Negative opening deposits are invalid amounts."""
    with pytest.raises(InvalidAmountError):
        open_account(AccountKind.SAVINGS, "-0.01")


def test_open_savings_account_with_zero_deposit(engine, open_account) -> None:
    """A zero Savings deposit still logs its initial deposit entry."""
    number = open_account(AccountKind.SAVINGS, "0")

    details = engine.get_account(number)
    assert details.account.balance == Decimal("0.00")
    assert details.account.status is AccountStatus.ACTIVE
    history = engine.transaction_history(number)
    assert len(history) == 1
    assert history[0].amount == Decimal("0.00")
    assert history[0].balance_after == Decimal("0.00")
    assert history[0].description == "Initial Deposit"


def test_open_account_assigns_increasing_numbers(engine, open_account) -> None:
    first = open_account(AccountKind.SAVINGS, "10.00")
    second = open_account(AccountKind.SAVINGS, "10.00", holder="Grace")

    assert first > 0
    assert second > first


def test_deposit_updates_balance_and_logs_entry(engine, open_account) -> None:
    """Depositing 500.00 into 1000.00 yields 1500.00 and one new entry."""
    number = open_account(AccountKind.CURRENT, "1000.00")

    new_balance = engine.deposit(number, Decimal("500.00"))

    assert new_balance == Decimal("1500.00")
    latest = engine.transaction_history(number)[0]
    assert latest.entry_type is EntryType.DEPOSIT
    assert latest.amount == Decimal("500.00")
    assert latest.balance_after == Decimal("1500.00")
    assert len(engine.transaction_history(number)) == 2


@pytest.mark.parametrize("amount", ["0", "-5", "abc", "1.005", None])
def test_deposit_rejects_invalid_amounts(engine, open_account, amount) -> None:
    number = open_account(AccountKind.SAVINGS, "100.00")

    with pytest.raises(InvalidAmountError):
        engine.deposit(number, amount)

    assert _balance(engine, number) == Decimal("100.00")


def test_deposit_into_missing_account(engine) -> None:
    with pytest.raises(AccountNotFoundError):
        engine.deposit(999, Decimal("10.00"))


def test_withdraw_below_current_minimum_is_rejected(engine, open_account) -> None:
    """Withdrawing 600.00 from 1500.00 would leave 900.00 < 1000.00."""
    number = open_account(AccountKind.CURRENT, "1500.00")

    with pytest.raises(MinimumBalanceViolationError):
        engine.withdraw(number, Decimal("600.00"))

    assert _balance(engine, number) == Decimal("1500.00")
    assert len(engine.transaction_history(number)) == 1


def test_withdraw_down_to_current_minimum_boundary(engine, open_account) -> None:
    """Exactly reaching 1000.00 succeeds; one cent more is rejected."""
    number = open_account(AccountKind.CURRENT, "1500.00")

    with pytest.raises(MinimumBalanceViolationError):
        engine.withdraw(number, Decimal("500.01"))
    assert engine.withdraw(number, Decimal("500.00")) == Decimal("1000.00")

    latest = engine.transaction_history(number)[0]
    assert latest.entry_type is EntryType.WITHDRAWAL
    assert latest.balance_after == Decimal("1000.00")


def test_withdraw_at_minimum_reports_minimum_balance_first(
    engine,
    open_account,
) -> None:
    """A Current account at its minimum reports the minimum-balance error."""
    number = open_account(AccountKind.CURRENT, "1000.00")

    with pytest.raises(MinimumBalanceViolationError):
        engine.withdraw(number, Decimal("1000.01"))


def test_withdraw_more_than_savings_balance(engine, open_account) -> None:
    number = open_account(AccountKind.SAVINGS, "50.00")

    with pytest.raises(InsufficientFundsError):
        engine.withdraw(number, Decimal("50.01"))
    assert engine.withdraw(number, Decimal("50.00")) == Decimal("0.00")


def test_transfer_between_savings_accounts(engine, open_account) -> None:
    """Transferring 200.00 from 1000.00 to 300.00 gives 800.00 and 500.00."""
    source = open_account(AccountKind.SAVINGS, "1000.00")
    destination = open_account(AccountKind.SAVINGS, "300.00", holder="Grace")

    new_from_balance = engine.transfer(source, destination, Decimal("200.00"))

    assert new_from_balance == Decimal("800.00")
    assert _balance(engine, destination) == Decimal("500.00")
    outgoing = engine.transaction_history(source)[0]
    incoming = engine.transaction_history(destination)[0]
    assert outgoing.entry_type is EntryType.TRANSFER
    assert outgoing.description == f"Transfer to account {destination}"
    assert outgoing.balance_after == Decimal("800.00")
    assert incoming.entry_type is EntryType.TRANSFER
    assert incoming.description == f"Transfer from account {source}"
    assert incoming.balance_after == Decimal("500.00")
    assert len(engine.transaction_history(source)) == 2
    assert len(engine.transaction_history(destination)) == 2


@pytest.mark.parametrize("amount", ["0.01", "250.00", "1999.99"])
def test_transfer_conserves_money(engine, open_account, amount) -> None:
    source = open_account(AccountKind.SAVINGS, "2000.00")
    destination = open_account(AccountKind.CURRENT, "1000.00", holder="Grace")
    before = _balance(engine, source) + _balance(engine, destination)

    engine.transfer(source, destination, Decimal(amount))

    after = _balance(engine, source) + _balance(engine, destination)
    assert after == before


def test_transfer_validation_order(engine, open_account) -> None:
    source = open_account(AccountKind.CURRENT, "1200.00")
    destination = open_account(AccountKind.SAVINGS, "0.00", holder="Grace")

    with pytest.raises(InvalidAmountError):
        engine.transfer(source, source, Decimal("0"))
    with pytest.raises(SameAccountError):
        engine.transfer(source, source, Decimal("1.00"))
    with pytest.raises(AccountNotFoundError):
        engine.transfer(source, 999, Decimal("1.00"))
    with pytest.raises(MinimumBalanceViolationError):
        engine.transfer(source, destination, Decimal("200.01"))
    with pytest.raises(InsufficientFundsError):
        engine.transfer(destination, source, Decimal("0.01"))

    assert _balance(engine, source) == Decimal("1200.00")
    assert _balance(engine, destination) == Decimal("0.00")


def test_close_account_requires_exact_zero(engine, open_account) -> None:
    """Closing with 0.01 fails; at 0.00 the account closes for good."""
    number = open_account(AccountKind.SAVINGS, "0.01")

    with pytest.raises(NonZeroBalanceError):
        engine.close_account(number)

    engine.withdraw(number, Decimal("0.01"))
    engine.close_account(number)

    assert engine.get_account(number).account.status is AccountStatus.CLOSED
    with pytest.raises(AccountClosedError):
        engine.deposit(number, Decimal("10.00"))


def test_closed_account_rejects_every_mutation(engine, open_account) -> None:
    closed = open_account(AccountKind.SAVINGS, "0")
    other = open_account(AccountKind.SAVINGS, "100.00", holder="Grace")
    engine.close_account(closed)

    with pytest.raises(AccountClosedError):
        engine.withdraw(closed, Decimal("1.00"))
    with pytest.raises(AccountClosedError):
        engine.transfer(other, closed, Decimal("1.00"))
    with pytest.raises(AccountClosedError):
        engine.transfer(closed, other, Decimal("1.00"))
    with pytest.raises(AccountClosedError):
        engine.close_account(closed)
    # Closed accounts are also "not found" for mutation purposes.
    with pytest.raises(AccountNotFoundError):
        engine.deposit(closed, Decimal("1.00"))

    assert _balance(engine, other) == Decimal("100.00")


def test_close_missing_account(engine) -> None:
    with pytest.raises(AccountNotFoundError):
        engine.close_account(42)


def test_transaction_history_is_newest_first_and_limited(
    engine,
    open_account,
) -> None:
    number = open_account(AccountKind.SAVINGS, "1.00")
    for cents in range(2, 14):
        engine.deposit(number, Decimal(cents))

    history = engine.transaction_history(number)
    short = engine.transaction_history(number, limit=3)

    assert len(history) == 10
    ids = [entry.sequence_id for entry in history]
    assert ids == sorted(ids, reverse=True)
    assert [entry.amount for entry in short] == [
        Decimal("13.00"),
        Decimal("12.00"),
        Decimal("11.00"),
    ]


def test_transaction_history_errors(engine) -> None:
    with pytest.raises(AccountNotFoundError):
        engine.transaction_history(7)
    with pytest.raises(ValueError):
        engine.transaction_history(7, limit=0)


def test_reads_are_idempotent(engine, open_account) -> None:
    """Repeated reads without mutations return identical results."""
    number = open_account(AccountKind.SAVINGS, "100.00")
    engine.deposit(number, Decimal("5.00"))

    listing = engine.list_accounts()
    assert list(listing) == list(listing)
    assert engine.transaction_history(number) == engine.transaction_history(
        number
    )


def test_list_accounts_reflects_state_at_iteration(engine, open_account) -> None:
    listing = engine.list_accounts()
    assert list(listing) == []

    first = open_account(AccountKind.SAVINGS, "1.00")
    second = open_account(AccountKind.CURRENT, "1000.00", holder="Grace")

    assert [account.account_number for account in listing] == [first, second]


def test_report_interest_covers_savings_only(engine, open_account) -> None:
    savings = open_account(AccountKind.SAVINGS, "1000.00")
    open_account(AccountKind.CURRENT, "5000.00", holder="Grace")

    rows = engine.report_interest()

    assert len(rows) == 1
    assert rows[0].account_number == savings
    assert rows[0].holder_name == "Ada"
    assert rows[0].balance == Decimal("1000.00")
    assert rows[0].interest == Decimal("40.00")
    assert _balance(engine, savings) == Decimal("1000.00")


def test_get_account_details_for_current_account(engine, open_account) -> None:
    number = open_account(AccountKind.CURRENT, "1000.00")

    details = engine.get_account(number)

    assert details.account.holder_name == "Ada"
    assert details.account.created_at is not None
    assert details.minimum_balance == Decimal("1000.00")
    assert details.minimum_balance_satisfied is True
    assert details.penalty_fee == Decimal("25.00")
    assert details.interest == Decimal("0.00")


def test_balances_never_negative(engine, open_account) -> None:
    """Random-ish mix of operations keeps every balance within its floor."""
    savings = open_account(AccountKind.SAVINGS, "10.00")
    current = open_account(AccountKind.CURRENT, "1100.00", holder="Grace")
    operations = [
        lambda: engine.withdraw(savings, Decimal("7.50")),
        lambda: engine.withdraw(savings, Decimal("7.50")),
        lambda: engine.transfer(current, savings, Decimal("100.00")),
        lambda: engine.transfer(current, savings, Decimal("0.01")),
        lambda: engine.withdraw(savings, Decimal("102.50")),
        lambda: engine.withdraw(savings, Decimal("0.01")),
    ]
    for operation in operations:
        try:
            operation()
        except (MinimumBalanceViolationError, InsufficientFundsError):
            pass
        for account in engine.list_accounts():
            assert account.balance >= 0
            if account.kind is AccountKind.CURRENT:
                assert account.balance >= Decimal("1000.00")


def test_rejections_are_logged(engine, open_account, logger) -> None:
    number = open_account(AccountKind.SAVINGS, "10.00")

    with pytest.raises(InsufficientFundsError):
        engine.withdraw(number, Decimal("20.00"))

    warning = logger.warning.call_args[0][0]
    assert "withdraw rejected" in warning
    assert "InsufficientFunds" in warning


def test_negative_conflict_retries_are_rejected(unit_of_work, logger) -> None:
    with pytest.raises(ValueError):
        LedgerEngine(unit_of_work, logger=logger, conflict_retries=-1)


def test_amounts_beyond_storable_range_are_invalid(engine, open_account) -> None:
    """Amounts whose cents overflow a 64-bit column are refused up front."""
    number = open_account(AccountKind.SAVINGS, "1.00")
    huge = Decimal("100000000000000000.00")

    with pytest.raises(InvalidAmountError):
        engine.deposit(number, huge)
    with pytest.raises(InvalidAmountError):
        engine.withdraw(number, huge)
    with pytest.raises(InvalidAmountError):
        open_account(AccountKind.SAVINGS, str(huge))

    assert _balance(engine, number) == Decimal("1.00")
    assert len(engine.transaction_history(number)) == 1


def test_balance_cannot_grow_past_storable_range(engine, open_account) -> None:
    """A credit pushing a balance past the maximum is an invalid amount."""
    largest = "92233720368547758.07"
    full = open_account(AccountKind.SAVINGS, largest)
    other = open_account(AccountKind.SAVINGS, "5.00", holder="Grace")

    with pytest.raises(InvalidAmountError):
        engine.deposit(full, Decimal("0.01"))
    with pytest.raises(InvalidAmountError):
        engine.transfer(other, full, Decimal("0.01"))

    assert _balance(engine, full) == Decimal(largest)
    assert _balance(engine, other) == Decimal("5.00")
    assert engine.withdraw(full, Decimal("0.07")) == Decimal(
        "92233720368547758.00"
    )


def test_unknown_account_kind_is_a_caller_error(engine) -> None:
    with pytest.raises(ValueError):
        engine.open_account("Ada", "", "", "", "Checking", Decimal("10.00"))

    assert list(engine.list_accounts()) == []
