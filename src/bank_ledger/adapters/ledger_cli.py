"""CLI adapter exposing the ledger commands.

This module wires the LedgerCommands interface to the composition root and
provides one sub-command per ledger command. The process exits with status
0 when the operation succeeds and 1 when the ledger rejects it or the
storage cannot be set up.
"""

import argparse
import sys

from bank_ledger.adapters.ledger_commands import LedgerCommands
from bank_ledger.domain.exceptions import LedgerError
from bank_ledger.domain.models import AccountKind
from bank_ledger.infrastructure.container import build_ledger_container
from bank_ledger.infrastructure.logging.logger import get_app_logger


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(
            f"expected a positive integer, got {value}"
        )
    return number


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser with one sub-command per ledger command."""
    parser = argparse.ArgumentParser(
        prog="bank-ledger",
        description="Account ledger: balances, transfers and history",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    open_parser = subparsers.add_parser("open", help="Open a new account")
    open_parser.add_argument("--holder", required=True, help="Holder name")
    open_parser.add_argument("--phone", default="", help="Phone number")
    open_parser.add_argument("--email", default="", help="Email address")
    open_parser.add_argument("--address", default="", help="Postal address")
    open_parser.add_argument(
        "--kind",
        required=True,
        choices=[kind.value for kind in AccountKind],
        help="Account kind",
    )
    open_parser.add_argument(
        "--initial-deposit",
        required=True,
        help="Opening deposit (at least 1000.00 for Current accounts)",
    )

    for name, help_text in (
        ("deposit", "Deposit money"),
        ("withdraw", "Withdraw money"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("account", type=int, help="Account number")
        sub.add_argument("amount", help="Amount, e.g. 250.00")

    transfer_parser = subparsers.add_parser("transfer", help="Transfer money")
    transfer_parser.add_argument("source", type=int, help="Source account")
    transfer_parser.add_argument(
        "destination",
        type=int,
        help="Destination account",
    )
    transfer_parser.add_argument("amount", help="Amount, e.g. 250.00")

    details_parser = subparsers.add_parser("details", help="Show an account")
    details_parser.add_argument("account", type=int, help="Account number")

    history_parser = subparsers.add_parser(
        "history",
        help="Show recent transactions",
    )
    history_parser.add_argument("account", type=int, help="Account number")
    history_parser.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        help="Number of entries (defaults to LEDGER_HISTORY_LIMIT)",
    )

    subparsers.add_parser("list", help="List all accounts")
    subparsers.add_parser("interest", help="Report savings interest")

    close_parser = subparsers.add_parser("close", help="Close an account")
    close_parser.add_argument("account", type=int, help="Account number")

    return parser


def dispatch(commands: LedgerCommands, args: argparse.Namespace):
    """Run the command selected on the command line.

    Args:
        commands: Command interface bound to an engine.
        args: Parsed arguments.

    Returns:
        CommandResult: Result of the selected command.
    """
    if args.command == "open":
        return commands.open_account(
            args.holder,
            args.phone,
            args.email,
            args.address,
            args.kind,
            args.initial_deposit,
        )
    if args.command == "deposit":
        return commands.deposit(args.account, args.amount)
    if args.command == "withdraw":
        return commands.withdraw(args.account, args.amount)
    if args.command == "transfer":
        return commands.transfer(args.source, args.destination, args.amount)
    if args.command == "details":
        return commands.account_details(args.account)
    if args.command == "history":
        return commands.transaction_history(args.account, args.limit)
    if args.command == "list":
        return commands.list_accounts()
    if args.command == "interest":
        return commands.report_interest()
    if args.command == "close":
        return commands.close_account(args.account)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run one ledger command and print its message."""
    args = build_parser().parse_args(argv)
    logger = get_app_logger()
    try:
        container = build_ledger_container(logger=logger)
    except (LedgerError, RuntimeError, ValueError) as exc:
        logger.error(f"Ledger startup failed: {exc}")
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    with container:
        result = dispatch(LedgerCommands(container.engine), args)
    print(result.message)
    return 0 if result.success else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
