"""SQLAlchemy-backed account store, transaction log and unit of work.

Amounts are stored as integer cents so the conditional balance update
compares exact values on every dialect. Timestamps are stored as ISO 8601
text to keep their UTC offset on SQLite.
"""

from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from types import TracebackType

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    select,
    update,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import InterfaceError, OperationalError

from bank_ledger.application.ports.account_store import AccountStorePort
from bank_ledger.application.ports.database import DatabaseEnginePort
from bank_ledger.application.ports.transaction_log import TransactionLogPort
from bank_ledger.application.ports.unit_of_work import (
    UnitOfWorkPort,
    UnitOfWorkScope,
)
from bank_ledger.domain.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    StorageUnavailableError,
)
from bank_ledger.domain.models import (
    Account,
    AccountKind,
    AccountStatus,
    EntryType,
    LedgerEntry,
)
from bank_ledger.infrastructure.logging.logger import get_app_logger
from bank_ledger.utils.decimal_utils import from_cents, to_cents

metadata = MetaData()

accounts_table = Table(
    "accounts",
    metadata,
    Column("account_number", Integer, primary_key=True, autoincrement=True),
    Column("holder_name", String(100), nullable=False),
    Column("phone", String(32), nullable=False, default=""),
    Column("email", String(100), nullable=False, default=""),
    Column("address", String(255), nullable=False, default=""),
    Column("account_type", String(16), nullable=False),
    Column("balance_cents", BigInteger, nullable=False),
    Column("status", String(16), nullable=False),
    Column("created_at", String(40), nullable=True),
)

ledger_entries_table = Table(
    "ledger_entries",
    metadata,
    Column("sequence_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "account_number",
        Integer,
        ForeignKey("accounts.account_number"),
        nullable=False,
    ),
    Column("entry_type", String(16), nullable=False),
    Column("amount_cents", BigInteger, nullable=False),
    Column("balance_after_cents", BigInteger, nullable=False),
    Column("created_at", String(40), nullable=False),
    Column("description", String(255), nullable=False, default=""),
)

Index(
    "ix_ledger_entries_account_sequence",
    ledger_entries_table.c.account_number,
    ledger_entries_table.c.sequence_id,
)


@contextmanager
def translate_storage_errors():
    """Re-raise connectivity failures as StorageUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        raise StorageUnavailableError(
            f"Ledger storage unavailable: {exc.orig or exc}"
        ) from exc


def create_schema(engine: Engine) -> None:
    """Create the ledger tables if they do not exist."""
    with translate_storage_errors():
        metadata.create_all(engine)


def _to_text(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_text(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _row_to_account(row) -> Account:
    return Account(
        account_number=row.account_number,
        holder_name=row.holder_name,
        phone=row.phone,
        email=row.email,
        address=row.address,
        kind=AccountKind(row.account_type),
        balance=from_cents(row.balance_cents),
        status=AccountStatus(row.status),
        created_at=_from_text(row.created_at),
    )


def _row_to_entry(row) -> LedgerEntry:
    return LedgerEntry(
        sequence_id=row.sequence_id,
        account_number=row.account_number,
        entry_type=EntryType(row.entry_type),
        amount=from_cents(row.amount_cents),
        balance_after=from_cents(row.balance_after_cents),
        timestamp=_from_text(row.created_at),
        description=row.description,
    )


class SqlAlchemyAccountStore(AccountStorePort):
    """Account store bound to one open connection and transaction."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def get(self, account_number: int) -> Account | None:
        """Return the account, locking its row where the dialect allows."""
        query = (
            select(accounts_table)
            .where(accounts_table.c.account_number == account_number)
            .with_for_update()
        )
        with translate_storage_errors():
            row = self._connection.execute(query).first()
        return _row_to_account(row) if row is not None else None

    def create(self, account: Account) -> int:
        statement = accounts_table.insert().values(
            holder_name=account.holder_name,
            phone=account.phone,
            email=account.email,
            address=account.address,
            account_type=account.kind.value,
            balance_cents=to_cents(account.balance),
            status=account.status.value,
            created_at=_to_text(account.created_at),
        )
        with translate_storage_errors():
            result = self._connection.execute(statement)
        return int(result.inserted_primary_key[0])

    def update_balance(
        self,
        account_number: int,
        new_balance: Decimal,
        expected_prior_balance: Decimal,
    ) -> None:
        statement = (
            update(accounts_table)
            .where(accounts_table.c.account_number == account_number)
            .where(
                accounts_table.c.balance_cents
                == to_cents(expected_prior_balance)
            )
            .where(accounts_table.c.status == AccountStatus.ACTIVE.value)
            .values(balance_cents=to_cents(new_balance))
        )
        with translate_storage_errors():
            result = self._connection.execute(statement)
        if result.rowcount != 1:
            raise ConcurrentModificationError(
                f"Account {account_number} changed while the operation was "
                f"in progress"
            )

    def set_status(
        self,
        account_number: int,
        status: AccountStatus,
        expected_prior_balance: Decimal | None = None,
    ) -> None:
        statement = (
            update(accounts_table)
            .where(accounts_table.c.account_number == account_number)
            .values(status=status.value)
        )
        if expected_prior_balance is not None:
            statement = statement.where(
                accounts_table.c.balance_cents
                == to_cents(expected_prior_balance)
            )
        with translate_storage_errors():
            result = self._connection.execute(statement)
        if result.rowcount == 1:
            return
        if expected_prior_balance is not None and self.get(account_number):
            raise ConcurrentModificationError(
                f"Account {account_number} changed while the operation was "
                f"in progress"
            )
        raise AccountNotFoundError(f"Account {account_number} not found")

    def list_all(self) -> list[Account]:
        query = select(accounts_table).order_by(accounts_table.c.account_number)
        with translate_storage_errors():
            rows = self._connection.execute(query).all()
        return [_row_to_account(row) for row in rows]


class SqlAlchemyTransactionLog(TransactionLogPort):
    """Append-only ledger entry log bound to one open connection."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def append(self, entry: LedgerEntry) -> int:
        statement = ledger_entries_table.insert().values(
            account_number=entry.account_number,
            entry_type=entry.entry_type.value,
            amount_cents=to_cents(entry.amount),
            balance_after_cents=to_cents(entry.balance_after),
            created_at=_to_text(entry.timestamp),
            description=entry.description,
        )
        with translate_storage_errors():
            result = self._connection.execute(statement)
        return int(result.inserted_primary_key[0])

    def recent(self, account_number: int, limit: int) -> list[LedgerEntry]:
        query = (
            select(ledger_entries_table)
            .where(ledger_entries_table.c.account_number == account_number)
            .order_by(ledger_entries_table.c.sequence_id.desc())
            .limit(limit)
        )
        with translate_storage_errors():
            rows = self._connection.execute(query).all()
        return [_row_to_entry(row) for row in rows]


class SqlAlchemyUnitOfWorkScope(UnitOfWorkScope):
    """One connection and one database transaction."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection
        with translate_storage_errors():
            self._transaction = connection.begin()
        self._finished = False
        self.accounts = SqlAlchemyAccountStore(connection)
        self.transactions = SqlAlchemyTransactionLog(connection)

    def commit(self) -> None:
        try:
            with translate_storage_errors():
                self._transaction.commit()
        finally:
            self._finish()

    def rollback(self) -> None:
        if self._finished:
            return
        try:
            with translate_storage_errors():
                if self._transaction.is_active:
                    self._transaction.rollback()
        finally:
            self._finish()

    def _finish(self) -> None:
        self._finished = True
        self._connection.close()

    def __enter__(self) -> "SqlAlchemyUnitOfWorkScope":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()


class SqlAlchemyUnitOfWork(UnitOfWorkPort):
    """Unit of work factory backed by a SQLAlchemy engine."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the unit of work.

        Args:
            db_port: Port providing access to the ledger engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def prepare_storage(self) -> None:
        """Ensure the ledger tables exist."""
        create_schema(self._db_port.get_ledger_engine())
        self._logger.info("Ledger schema is ready")

    def begin(self) -> SqlAlchemyUnitOfWorkScope:
        engine = self._db_port.get_ledger_engine()
        with translate_storage_errors():
            connection = engine.connect()
        try:
            return SqlAlchemyUnitOfWorkScope(connection)
        except StorageUnavailableError:
            connection.close()
            raise

    def close(self) -> None:
        """Release pooled connections held by the engine."""
        self._db_port.dispose()


__all__ = [
    "metadata",
    "accounts_table",
    "ledger_entries_table",
    "translate_storage_errors",
    "create_schema",
    "SqlAlchemyAccountStore",
    "SqlAlchemyTransactionLog",
    "SqlAlchemyUnitOfWorkScope",
    "SqlAlchemyUnitOfWork",
]
