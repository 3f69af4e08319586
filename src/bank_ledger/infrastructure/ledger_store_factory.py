"""Factory helpers to select the ledger storage backend."""

from bank_ledger.application.ports.database import DatabaseEnginePort
from bank_ledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from bank_ledger.infrastructure.logging.logger import get_app_logger
from bank_ledger.infrastructure.memory_ledger_store import InMemoryUnitOfWork
from bank_ledger.infrastructure.settings import LedgerSettings
from bank_ledger.infrastructure.sql_ledger_store import SqlAlchemyUnitOfWork


def create_unit_of_work(
    settings: LedgerSettings,
    db_port: DatabaseEnginePort | None = None,
    logger=None,
) -> SqlAlchemyUnitOfWork | InMemoryUnitOfWork:
    """Return a unit of work implementation based on configuration.

    Args:
        settings: Ledger settings naming the backend.
        db_port: Optional database port for the sqlalchemy backend.
        logger: Optional logger compatible with logging.Logger-like API.

    Returns:
        SqlAlchemyUnitOfWork | InMemoryUnitOfWork: Concrete unit of work.

    Raises:
        RuntimeError: If the sqlalchemy backend has no database URL.
        ValueError: If the backend is unknown.
    """
    resolved_logger = logger or get_app_logger()
    backend = settings.backend.strip().lower()

    if backend == "sqlalchemy":
        if db_port is None:
            if not settings.db_url:
                raise RuntimeError(
                    "SQLAlchemy backend requires a LEDGER_DB_URL value."
                )
            db_port = SqlAlchemyDatabaseEngineAdapter(settings.db_url)
        return SqlAlchemyUnitOfWork(db_port, logger=resolved_logger)

    if backend == "memory":
        resolved_logger.warning(
            "Using the in-memory ledger backend; data is lost on exit"
        )
        return InMemoryUnitOfWork()

    raise ValueError(
        "Unsupported ledger backend: "
        f"{settings.backend}. Expected sqlalchemy or memory."
    )


__all__ = ["create_unit_of_work"]
