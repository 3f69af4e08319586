"""Simple CLI to validate the ledger database connection.

This adapter is meant for local operations: it instantiates the concrete
database adapter from the infrastructure layer, runs a basic health check
and makes sure the ledger tables exist.
"""

from bank_ledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from bank_ledger.infrastructure.logging.logger import get_app_logger
from bank_ledger.infrastructure.sql_ledger_store import (
    create_schema,
    translate_storage_errors,
)


def main() -> None:
    """Run a connectivity check against the configured ledger database."""
    adapter = SqlAlchemyDatabaseEngineAdapter()
    logger = get_app_logger()

    engine = adapter.get_ledger_engine()
    logger.info(f"Ledger DB: {engine.url.render_as_string(hide_password=True)}")

    with translate_storage_errors():
        with engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
    create_schema(engine)

    logger.info("Ledger connection is working.")


if __name__ == "__main__":  # pragma: no cover
    main()
