"""Tests for the ledger CLI adapter."""

import argparse

import pytest

from bank_ledger.adapters import ledger_cli
from bank_ledger.adapters import ledger_commands
from bank_ledger.application.use_cases.ledger_engine import LedgerEngine
from bank_ledger.domain.exceptions import StorageUnavailableError
from bank_ledger.infrastructure.container import LedgerContainer
from bank_ledger.infrastructure.memory_ledger_store import InMemoryUnitOfWork


@pytest.fixture(autouse=True)
def cli_container(monkeypatch, logger):
    """Route the CLI to one shared in-memory ledger without log files."""
    unit_of_work = InMemoryUnitOfWork()

    def _build(settings=None, logger=None):
        return LedgerContainer(
            engine=LedgerEngine(unit_of_work, logger=logger),
            unit_of_work=unit_of_work,
        )

    monkeypatch.setattr(ledger_cli, "build_ledger_container", _build)
    monkeypatch.setattr(ledger_cli, "get_app_logger", lambda: logger)
    monkeypatch.setattr(ledger_commands, "get_usage_logger", lambda: logger)
    return unit_of_work


def test_open_deposit_and_history(capsys):
    assert (
        ledger_cli.main(
            [
                "open",
                "--holder",
                "Ada",
                "--kind",
                "Savings",
                "--initial-deposit",
                "100",
            ]
        )
        == 0
    )
    assert ledger_cli.main(["deposit", "1", "25.00"]) == 0
    assert ledger_cli.main(["history", "1", "--limit", "1"]) == 0

    output = capsys.readouterr().out.splitlines()
    assert output[0] == "Account created successfully! Your Account Number is: 1"
    assert output[1] == "Deposit successful! New balance: $125.00"
    assert output[2] == "=== Last 1 Transactions ==="


def test_rejected_command_exits_with_one(capsys):
    """A ledger rejection prints its message and returns status 1."""
    code = ledger_cli.main(["withdraw", "7", "10"])

    assert code == 1
    assert capsys.readouterr().out.strip() == "Account 7 not found"


def test_transfer_list_interest_and_close(capsys, cli_container):
    for holder, deposit in (("Ada", "500"), ("Grace", "0")):
        ledger_cli.main(
            [
                "open",
                "--holder",
                holder,
                "--kind",
                "Savings",
                "--initial-deposit",
                deposit,
            ]
        )
    capsys.readouterr()

    assert ledger_cli.main(["transfer", "1", "2", "500"]) == 0
    assert ledger_cli.main(["close", "1"]) == 0
    assert ledger_cli.main(["list"]) == 0
    assert ledger_cli.main(["interest"]) == 0
    assert ledger_cli.main(["details", "2"]) == 0

    output = capsys.readouterr().out
    assert "Transfer successful! New balance in account 1: $0.00" in output
    assert "Account closed successfully!" in output
    assert "=== All Accounts ===" in output
    assert "Annual Interest: $20.00" in output
    assert cli_container.storage.accounts[1].status.value == "Closed"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["history", "1", "--limit", "0"],
        ["open", "--holder", "Ada", "--kind", "Checking", "--initial-deposit", "1"],
        ["deposit", "one", "10"],
    ],
)
def test_parser_rejects_bad_arguments(argv):
    with pytest.raises(SystemExit) as exit_info:
        ledger_cli.build_parser().parse_args(argv)

    assert exit_info.value.code == 2


def test_dispatch_rejects_unknown_command():
    with pytest.raises(ValueError, match="Unknown command"):
        ledger_cli.dispatch(None, argparse.Namespace(command="audit"))


@pytest.mark.parametrize(
    "failure",
    [
        StorageUnavailableError("Ledger storage unavailable: no such host"),
        RuntimeError("SQLAlchemy backend requires a LEDGER_DB_URL value."),
        ValueError("Unsupported ledger backend: oracle."),
    ],
)
def test_startup_failure_exits_with_one(monkeypatch, capsys, logger, failure):
    """Storage and configuration errors end the CLI with a one-line error."""

    def _fail(settings=None, logger=None):
        raise failure

    monkeypatch.setattr(ledger_cli, "build_ledger_container", _fail)

    code = ledger_cli.main(["list"])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert captured.err.strip() == f"Error: {failure}"
    logger.error.assert_called_once()
