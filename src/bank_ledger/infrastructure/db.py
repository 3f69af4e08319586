"""Database infrastructure for the ledger.

This module exposes concrete helpers to create and reuse SQLAlchemy engines
connected to the ledger database. It belongs to the infrastructure layer
because it deals with external systems (SQLite, PostgreSQL).
"""

import os

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool, StaticPool

from bank_ledger.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _is_memory_sqlite(db_url: str) -> bool:
    url = make_url(db_url)
    return url.get_backend_name() == "sqlite" and url.database in (
        None,
        "",
        ":memory:",
    )


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine for the ledger database.

    Server databases get a small connection pool with health checks. SQLite
    files get the driver's default pool; in-memory SQLite shares a single
    connection so every scope sees the same database.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A configured SQLAlchemy engine instance.
    """
    if _is_memory_sqlite(db_url):
        return create_engine(
            db_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    if make_url(db_url).get_backend_name() == "sqlite":
        return create_engine(db_url)
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
    )


_ledger_engines: dict[str, Engine] = {}


def get_ledger_engine(db_url: str | None = None) -> Engine:
    """Get a cached SQLAlchemy engine for the ledger database.

    Args:
        db_url: Optional URL; defaults to the LEDGER_DB_URL variable.

    Returns:
        Engine: Lazily initialized engine, one per database URL.
    """
    resolved_url = db_url or _get_env_var("LEDGER_DB_URL")
    engine = _ledger_engines.get(resolved_url)
    if engine is None:
        engine = _create_engine(resolved_url)
        _ledger_engines[resolved_url] = engine
    return engine


def dispose_ledger_engine(db_url: str) -> None:
    """Dispose and forget the cached engine for a URL, if any."""
    engine = _ledger_engines.pop(db_url, None)
    if engine is not None:
        engine.dispose()


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by SQLAlchemy engines.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so the storage adapters can depend only on the protocol.
    """

    def __init__(self, db_url: str | None = None) -> None:
        """Initialize the adapter.

        Args:
            db_url: Optional URL; defaults to the LEDGER_DB_URL variable.
        """
        self._db_url = db_url or _get_env_var("LEDGER_DB_URL")

    @property
    def db_url(self) -> str:
        return self._db_url

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger store.
        """
        return get_ledger_engine(self._db_url)

    def dispose(self) -> None:
        """Release pooled connections held by the engine."""
        dispose_ledger_engine(self._db_url)


__all__ = [
    "get_ledger_engine",
    "dispose_ledger_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
