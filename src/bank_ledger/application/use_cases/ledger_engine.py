"""Ledger engine: balance-mutating operations and ledger reads.

Every operation runs inside one unit of work. Business rules are checked
against the state read in that scope before the first write, and the
balance updates plus their ledger entries are committed together. A
transfer debits, credits and logs both sides in a single scope, so a
failure at any step rolls back all of it.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterator, TypeVar

from bank_ledger.application.ports.unit_of_work import (
    UnitOfWorkPort,
    UnitOfWorkScope,
)
from bank_ledger.domain.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEPOSIT_DESCRIPTION,
    INITIAL_DEPOSIT_DESCRIPTION,
    WITHDRAWAL_DESCRIPTION,
)
from bank_ledger.domain.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    LedgerError,
    SameAccountError,
)
from bank_ledger.domain.models import (
    Account,
    AccountDetails,
    AccountKind,
    AccountStatus,
    EntryType,
    InterestReportRow,
    LedgerEntry,
    transfer_descriptions,
)
from bank_ledger.domain.services import (
    build_account_details,
    calculate_interest,
    ensure_account_active,
    ensure_can_debit,
    ensure_credit_within_limit,
    ensure_zero_balance,
    validate_initial_deposit,
    validate_positive_amount,
)
from bank_ledger.infrastructure.logging.logger import get_app_logger

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AccountListing:
    """Restartable view over every stored account.

    Each iteration reads the store afresh, so the accounts reflect store
    state at the moment iteration starts.
    """

    def __init__(self, unit_of_work: UnitOfWorkPort) -> None:
        self._unit_of_work = unit_of_work

    def __iter__(self) -> Iterator[Account]:
        with self._unit_of_work.begin() as scope:
            accounts = scope.accounts.list_all()
        return iter(accounts)


class LedgerEngine:
    """Apply deposits, withdrawals, transfers and closures to accounts."""

    def __init__(
        self,
        unit_of_work: UnitOfWorkPort,
        logger=None,
        conflict_retries: int = 0,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            unit_of_work: Port opening atomic storage scopes.
            logger: Optional logger compatible with logging.Logger-like API.
            conflict_retries: Re-runs allowed after a concurrent modification.
            history_limit: Default number of entries for history reads.
            clock: Optional callable returning the capture timestamp.
        """
        if conflict_retries < 0:
            raise ValueError("conflict_retries must be >= 0")
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._conflict_retries = conflict_retries
        self._history_limit = history_limit
        self._clock = clock or _utc_now

    def open_account(
        self,
        holder_name: str,
        phone: str,
        email: str,
        address: str,
        kind: AccountKind | str,
        initial_deposit,
    ) -> int:
        """Open an account funded by an initial deposit.

        Args:
            holder_name: Name of the account holder.
            phone: Contact phone number.
            email: Contact email address.
            address: Postal address.
            kind: Savings or Current.
            initial_deposit: Opening amount, at least the kind's minimum.

        Returns:
            int: The store-assigned account number.

        Raises:
            ValueError: If ``kind`` is not an account kind. This is a caller
                bug, not a ledger rejection, and is raised before any read.
            InvalidAmountError: If the deposit is negative, unparsable or
                above MAX_AMOUNT.
            MinimumBalanceViolationError: If a Current deposit is below
                1000.00.
        """
        account_kind = AccountKind(kind)

        def work() -> int:
            amount = validate_initial_deposit(account_kind, initial_deposit)
            now = self._clock()
            with self._unit_of_work.begin() as scope:
                account_number = scope.accounts.create(
                    Account(
                        account_number=None,
                        holder_name=holder_name,
                        phone=phone,
                        email=email,
                        address=address,
                        kind=account_kind,
                        balance=amount,
                        status=AccountStatus.ACTIVE,
                        created_at=now,
                    )
                )
                self._append(
                    scope,
                    account_number,
                    EntryType.DEPOSIT,
                    amount,
                    amount,
                    INITIAL_DEPOSIT_DESCRIPTION,
                    now,
                )
                scope.commit()
            self._logger.info(
                f"Opened {account_kind.value} account {account_number} "
                f"with initial deposit {amount}"
            )
            return account_number

        return self._execute("open_account", work)

    def deposit(self, account_number: int, amount) -> Decimal:
        """Add money to an active account.

        Returns:
            Decimal: The new balance.

        Raises:
            InvalidAmountError: If the amount is not positive or the
                resulting balance would exceed MAX_AMOUNT.
            AccountNotFoundError: If the account does not exist.
            AccountClosedError: If the account is closed.
        """

        def work() -> Decimal:
            value = validate_positive_amount(amount)
            with self._unit_of_work.begin() as scope:
                account = ensure_account_active(
                    scope.accounts.get(account_number),
                    account_number,
                )
                new_balance = ensure_credit_within_limit(account, value)
                scope.accounts.update_balance(
                    account_number,
                    new_balance,
                    expected_prior_balance=account.balance,
                )
                self._append(
                    scope,
                    account_number,
                    EntryType.DEPOSIT,
                    value,
                    new_balance,
                    DEPOSIT_DESCRIPTION,
                )
                scope.commit()
            self._logger.info(
                f"Deposited {value} into account {account_number}; "
                f"balance={new_balance}"
            )
            return new_balance

        return self._execute("deposit", work)

    def withdraw(self, account_number: int, amount) -> Decimal:
        """Take money out of an active account.

        The minimum-balance rule is checked before the available balance.

        Returns:
            Decimal: The new balance.

        Raises:
            InvalidAmountError: If the amount is not positive or above
                MAX_AMOUNT.
            AccountNotFoundError: If the account does not exist.
            AccountClosedError: If the account is closed.
            MinimumBalanceViolationError: If a Current account would drop
                below 1000.00.
            InsufficientFundsError: If the balance does not cover the amount.
        """

        def work() -> Decimal:
            value = validate_positive_amount(amount)
            with self._unit_of_work.begin() as scope:
                account = ensure_account_active(
                    scope.accounts.get(account_number),
                    account_number,
                )
                new_balance = ensure_can_debit(account, value)
                scope.accounts.update_balance(
                    account_number,
                    new_balance,
                    expected_prior_balance=account.balance,
                )
                self._append(
                    scope,
                    account_number,
                    EntryType.WITHDRAWAL,
                    value,
                    new_balance,
                    WITHDRAWAL_DESCRIPTION,
                )
                scope.commit()
            self._logger.info(
                f"Withdrew {value} from account {account_number}; "
                f"balance={new_balance}"
            )
            return new_balance

        return self._execute("withdraw", work)

    def transfer(self, from_account: int, to_account: int, amount) -> Decimal:
        """Move money between two active accounts atomically.

        Returns:
            Decimal: The new balance of the source account.

        Raises:
            InvalidAmountError: If the amount is not positive or the
                resulting balance would exceed MAX_AMOUNT.
            SameAccountError: If both account numbers are equal.
            AccountNotFoundError: If either account does not exist.
            AccountClosedError: If either account is closed.
            MinimumBalanceViolationError: If a Current source would drop
                below 1000.00.
            InsufficientFundsError: If the source balance does not cover
                the amount.
        """

        def work() -> Decimal:
            value = validate_positive_amount(amount)
            if from_account == to_account:
                raise SameAccountError("Cannot transfer to same account")
            with self._unit_of_work.begin() as scope:
                # Ascending order keeps row locks ordered across transfers.
                loaded = {
                    number: scope.accounts.get(number)
                    for number in sorted((from_account, to_account))
                }
                source = ensure_account_active(loaded[from_account], from_account)
                destination = ensure_account_active(
                    loaded[to_account],
                    to_account,
                )
                new_from_balance = ensure_can_debit(source, value)
                new_to_balance = ensure_credit_within_limit(destination, value)
                now = self._clock()
                outgoing, incoming = transfer_descriptions(
                    from_account,
                    to_account,
                )

                scope.accounts.update_balance(
                    from_account,
                    new_from_balance,
                    expected_prior_balance=source.balance,
                )
                scope.accounts.update_balance(
                    to_account,
                    new_to_balance,
                    expected_prior_balance=destination.balance,
                )
                self._append(
                    scope,
                    from_account,
                    EntryType.TRANSFER,
                    value,
                    new_from_balance,
                    outgoing,
                    now,
                )
                self._append(
                    scope,
                    to_account,
                    EntryType.TRANSFER,
                    value,
                    new_to_balance,
                    incoming,
                    now,
                )
                scope.commit()
            self._logger.info(
                f"Transferred {value} from account {from_account} to account "
                f"{to_account}; source balance={new_from_balance}"
            )
            return new_from_balance

        return self._execute("transfer", work)

    def close_account(self, account_number: int) -> None:
        """Close an active account whose balance is exactly zero.

        Raises:
            AccountNotFoundError: If the account does not exist.
            AccountClosedError: If the account is already closed.
            NonZeroBalanceError: If the balance is not exactly zero.
        """

        def work() -> None:
            with self._unit_of_work.begin() as scope:
                account = ensure_account_active(
                    scope.accounts.get(account_number),
                    account_number,
                )
                ensure_zero_balance(account)
                scope.accounts.set_status(
                    account_number,
                    AccountStatus.CLOSED,
                    expected_prior_balance=account.balance,
                )
                scope.commit()
            self._logger.info(f"Closed account {account_number}")

        self._execute("close_account", work)

    def get_account(self, account_number: int) -> AccountDetails:
        """Return an account with its derived interest and minimum figures.

        Closed accounts are returned too; they are only rejected for
        mutations.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """

        def work() -> AccountDetails:
            with self._unit_of_work.begin() as scope:
                account = scope.accounts.get(account_number)
            if account is None:
                raise AccountNotFoundError(f"Account {account_number} not found")
            return build_account_details(account)

        return self._execute("get_account", work)

    def list_accounts(self) -> AccountListing:
        """Return a restartable view over every account."""
        return AccountListing(self._unit_of_work)

    def transaction_history(
        self,
        account_number: int,
        limit: int | None = None,
    ) -> list[LedgerEntry]:
        """Return the most recent ledger entries, newest first.

        Args:
            account_number: Account whose entries are read.
            limit: Maximum number of entries; defaults to the configured
                history limit.

        Returns:
            list[LedgerEntry]: At most ``limit`` entries.

        Raises:
            ValueError: If ``limit`` is below 1.
            AccountNotFoundError: If the account does not exist.
        """
        resolved_limit = self._history_limit if limit is None else limit
        if resolved_limit < 1:
            raise ValueError(f"limit must be >= 1, got {resolved_limit}")

        def work() -> list[LedgerEntry]:
            with self._unit_of_work.begin() as scope:
                if scope.accounts.get(account_number) is None:
                    raise AccountNotFoundError(
                        f"Account {account_number} not found"
                    )
                return scope.transactions.recent(account_number, resolved_limit)

        return self._execute("transaction_history", work)

    def report_interest(self) -> list[InterestReportRow]:
        """Return informational annual interest for every Savings account."""
        rows = [
            InterestReportRow(
                account_number=account.account_number,
                holder_name=account.holder_name,
                balance=account.balance,
                interest=calculate_interest(account.kind, account.balance),
            )
            for account in self.list_accounts()
            if account.kind is AccountKind.SAVINGS
        ]
        self._logger.info(f"Computed interest for {len(rows)} savings accounts")
        return rows

    def _append(
        self,
        scope: UnitOfWorkScope,
        account_number: int,
        entry_type: EntryType,
        amount: Decimal,
        balance_after: Decimal,
        description: str,
        timestamp: datetime | None = None,
    ) -> int:
        return scope.transactions.append(
            LedgerEntry(
                sequence_id=None,
                account_number=account_number,
                entry_type=entry_type,
                amount=amount,
                balance_after=balance_after,
                timestamp=timestamp or self._clock(),
                description=description,
            )
        )

    def _execute(self, operation: str, work: Callable[[], T]) -> T:
        """Run one operation, re-running it after concurrent modifications.

        Args:
            operation: Operation name used in log lines.
            work: Callable performing one read-validate-write sequence.

        Returns:
            T: Whatever ``work`` returns.
        """
        attempt = 0
        while True:
            try:
                return work()
            except ConcurrentModificationError as exc:
                attempt += 1
                if attempt > self._conflict_retries:
                    self._logger.warning(
                        f"{operation} rejected: {exc.kind}: {exc}"
                    )
                    raise
                self._logger.info(
                    f"{operation} hit a concurrent modification; "
                    f"retry {attempt}/{self._conflict_retries}"
                )
            except LedgerError as exc:
                self._logger.warning(f"{operation} rejected: {exc.kind}: {exc}")
                raise


__all__ = ["LedgerEngine", "AccountListing"]
