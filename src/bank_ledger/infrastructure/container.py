"""Composition root for wiring infrastructure adapters."""

from dataclasses import dataclass

from bank_ledger.application.use_cases.ledger_engine import LedgerEngine
from bank_ledger.infrastructure.ledger_store_factory import create_unit_of_work
from bank_ledger.infrastructure.logging.logger import get_app_logger
from bank_ledger.infrastructure.memory_ledger_store import InMemoryUnitOfWork
from bank_ledger.infrastructure.settings import LedgerSettings
from bank_ledger.infrastructure.sql_ledger_store import SqlAlchemyUnitOfWork


@dataclass
class LedgerContainer:
    """Engine plus the storage resource it was built on.

    Attributes:
        engine: Ready ledger engine.
        unit_of_work: Storage unit of work owned by this container.
    """

    engine: LedgerEngine
    unit_of_work: SqlAlchemyUnitOfWork | InMemoryUnitOfWork

    def close(self) -> None:
        """Release the storage resources."""
        self.unit_of_work.close()

    def __enter__(self) -> "LedgerContainer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_settings() -> LedgerSettings:
    """Return settings sourced from the environment."""
    return LedgerSettings.from_env()


def build_unit_of_work(
    settings: LedgerSettings | None = None,
) -> SqlAlchemyUnitOfWork | InMemoryUnitOfWork:
    """Return the configured unit of work with its storage prepared."""
    resolved_settings = settings or build_settings()
    unit_of_work = create_unit_of_work(
        resolved_settings,
        logger=get_app_logger(),
    )
    unit_of_work.prepare_storage()
    return unit_of_work


def build_ledger_container(
    settings: LedgerSettings | None = None,
    logger=None,
) -> LedgerContainer:
    """Return a container holding a ready ledger engine."""
    resolved_settings = settings or build_settings()
    unit_of_work = build_unit_of_work(resolved_settings)
    engine = LedgerEngine(
        unit_of_work,
        logger=logger or get_app_logger(),
        conflict_retries=resolved_settings.conflict_retries,
        history_limit=resolved_settings.history_limit,
    )
    return LedgerContainer(engine=engine, unit_of_work=unit_of_work)


__all__ = [
    "LedgerContainer",
    "build_settings",
    "build_unit_of_work",
    "build_ledger_container",
]
