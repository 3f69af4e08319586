"""Command interface over the ledger engine.

Each command returns a CommandResult carrying a success flag, a message
ready to display, and the raw value produced by the engine. Ledger errors
become failed results; any other exception propagates.
"""

from dataclasses import dataclass
from typing import Any, Callable

from bank_ledger.application.use_cases.ledger_engine import LedgerEngine
from bank_ledger.domain.exceptions import LedgerError
from bank_ledger.domain.models import (
    Account,
    AccountDetails,
    InterestReportRow,
    LedgerEntry,
)
from bank_ledger.infrastructure.logging.logger import get_usage_logger
from bank_ledger.utils.decimal_utils import format_money

TABLE_RULE = "-" * 70


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command.

    Attributes:
        success: Whether the engine accepted the operation.
        message: User-displayable text.
        value: Value returned by the engine, None on failure.
        error_kind: Stable error identifier on failure.
    """

    success: bool
    message: str
    value: Any = None
    error_kind: str | None = None


def format_account_details(details: AccountDetails) -> str:
    """Render the account information block."""
    account = details.account
    lines = [
        "=== Account Information ===",
        f"Account Number: {account.account_number}",
        f"Account Holder: {account.holder_name}",
        f"Account Type: {account.kind.value}",
        f"Balance: {format_money(account.balance)}",
        f"Phone: {account.phone}",
        f"Email: {account.email}",
        f"Address: {account.address}",
        f"Status: {account.status.value}",
    ]
    if details.minimum_balance > 0:
        status = (
            "Maintained" if details.minimum_balance_satisfied else "Below Minimum"
        )
        lines.extend(
            [
                f"Minimum Balance Required: {format_money(details.minimum_balance)}",
                f"Penalty Fee: {format_money(details.penalty_fee)}",
                f"Minimum Balance Status: {status}",
            ]
        )
    else:
        lines.append(f"Annual Interest: {format_money(details.interest)}")
    return "\n".join(lines)


def format_entry(entry: LedgerEntry) -> str:
    """Render one ledger entry line, with its description when present."""
    line = (
        f"ID: {entry.sequence_id} | Date: {entry.timestamp:%Y-%m-%d %H:%M:%S} "
        f"| Type: {entry.entry_type.value} | Amount: {format_money(entry.amount)} "
        f"| Balance After: {format_money(entry.balance_after)}"
    )
    if entry.description:
        line += f"\n  Description: {entry.description}"
    return line


def format_accounts_table(accounts: list[Account]) -> str:
    """Render the all-accounts table."""
    header = (
        f"{'Account No':<15}{'Holder Name':<25}{'Type':<15}"
        f"{'Balance':<15}Status"
    )
    rows = [
        f"{account.account_number:<15}{account.holder_name:<25}"
        f"{account.kind.value:<15}{format_money(account.balance):<15}"
        f"{account.status.value}"
        for account in accounts
    ]
    return "\n".join(["=== All Accounts ===", header, TABLE_RULE, *rows])


def format_interest_report(rows: list[InterestReportRow]) -> str:
    """Render the savings interest report."""
    lines = ["=== Interest Calculation for Savings Accounts ==="]
    lines.extend(
        f"Account: {row.account_number} | Holder: {row.holder_name} "
        f"| Balance: {format_money(row.balance)} "
        f"| Annual Interest: {format_money(row.interest)}"
        for row in rows
    )
    if not rows:
        lines.append("No savings accounts found.")
    return "\n".join(lines)


class LedgerCommands:
    """The nine ledger commands offered to callers."""

    def __init__(self, engine: LedgerEngine, usage_logger=None) -> None:
        """Initialize the command interface.

        Args:
            engine: Ledger engine executing the operations.
            usage_logger: Optional logger receiving one line per command.
        """
        self._engine = engine
        self._usage_logger = usage_logger or get_usage_logger()

    def open_account(
        self,
        holder_name: str,
        phone: str,
        email: str,
        address: str,
        kind: str,
        initial_deposit,
    ) -> CommandResult:
        return self._run(
            "open_account",
            lambda: self._engine.open_account(
                holder_name,
                phone,
                email,
                address,
                kind,
                initial_deposit,
            ),
            lambda number: (
                "Account created successfully! "
                f"Your Account Number is: {number}"
            ),
        )

    def deposit(self, account_number: int, amount) -> CommandResult:
        return self._run(
            "deposit",
            lambda: self._engine.deposit(account_number, amount),
            lambda balance: (
                f"Deposit successful! New balance: {format_money(balance)}"
            ),
        )

    def withdraw(self, account_number: int, amount) -> CommandResult:
        return self._run(
            "withdraw",
            lambda: self._engine.withdraw(account_number, amount),
            lambda balance: (
                f"Withdrawal successful! New balance: {format_money(balance)}"
            ),
        )

    def transfer(
        self,
        from_account: int,
        to_account: int,
        amount,
    ) -> CommandResult:
        return self._run(
            "transfer",
            lambda: self._engine.transfer(from_account, to_account, amount),
            lambda balance: (
                "Transfer successful! New balance in account "
                f"{from_account}: {format_money(balance)}"
            ),
        )

    def account_details(self, account_number: int) -> CommandResult:
        return self._run(
            "account_details",
            lambda: self._engine.get_account(account_number),
            format_account_details,
        )

    def transaction_history(
        self,
        account_number: int,
        limit: int | None = None,
    ) -> CommandResult:
        def _render(entries: list[LedgerEntry]) -> str:
            if not entries:
                return "No transactions found for this account."
            lines = [f"=== Last {len(entries)} Transactions ==="]
            lines.extend(format_entry(entry) for entry in entries)
            return "\n".join(lines)

        return self._run(
            "transaction_history",
            lambda: self._engine.transaction_history(account_number, limit),
            _render,
        )

    def list_accounts(self) -> CommandResult:
        return self._run(
            "list_accounts",
            lambda: list(self._engine.list_accounts()),
            format_accounts_table,
        )

    def report_interest(self) -> CommandResult:
        return self._run(
            "report_interest",
            self._engine.report_interest,
            format_interest_report,
        )

    def close_account(self, account_number: int) -> CommandResult:
        return self._run(
            "close_account",
            lambda: self._engine.close_account(account_number),
            lambda _: "Account closed successfully!",
        )

    def _run(
        self,
        command: str,
        action: Callable[[], Any],
        render: Callable[[Any], str],
    ) -> CommandResult:
        """Execute a command and convert ledger errors into results."""
        try:
            value = action()
        except LedgerError as exc:
            self._usage_logger.info(
                f"command={command} success=False kind={exc.kind}"
            )
            return CommandResult(
                success=False,
                message=str(exc),
                error_kind=exc.kind,
            )
        self._usage_logger.info(f"command={command} success=True")
        return CommandResult(success=True, message=render(value), value=value)


__all__ = [
    "CommandResult",
    "LedgerCommands",
    "format_account_details",
    "format_entry",
    "format_accounts_table",
    "format_interest_report",
]
