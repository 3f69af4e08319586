"""Pytest configuration and fixtures."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from bank_ledger.application.use_cases.ledger_engine import LedgerEngine
from bank_ledger.domain.models import AccountKind
from bank_ledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from bank_ledger.infrastructure.memory_ledger_store import InMemoryUnitOfWork
from bank_ledger.infrastructure.sql_ledger_store import SqlAlchemyUnitOfWork


@pytest.fixture
def logger() -> MagicMock:
    """Logger stand-in so tests never write log files."""
    return MagicMock()


@pytest.fixture
def sqlite_unit_of_work(tmp_path, logger):
    """SQLAlchemy unit of work over a fresh SQLite file."""
    db_port = SqlAlchemyDatabaseEngineAdapter(
        f"sqlite:///{tmp_path / 'ledger.db'}"
    )
    unit_of_work = SqlAlchemyUnitOfWork(db_port, logger=logger)
    unit_of_work.prepare_storage()
    yield unit_of_work
    unit_of_work.close()


@pytest.fixture(params=["memory", "sqlite"])
def unit_of_work(request):
    """Every supported unit of work, one test run per backend."""
    if request.param == "memory":
        return InMemoryUnitOfWork()
    return request.getfixturevalue("sqlite_unit_of_work")


@pytest.fixture
def engine(unit_of_work, logger) -> LedgerEngine:
    """Ledger engine over the parametrized backend."""
    return LedgerEngine(unit_of_work, logger=logger)


@pytest.fixture
def open_account(engine):
    """Open an account with placeholder contact details."""

    def _open(kind: AccountKind, deposit: str, holder: str = "Ada") -> int:
        return engine.open_account(
            holder,
            "555-0100",
            f"{holder.lower()}@example.com",
            "1 Main St",
            kind,
            Decimal(deposit),
        )

    return _open
