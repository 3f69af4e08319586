"""Application ports package."""

from .account_store import AccountStorePort
from .database import DatabaseEnginePort
from .transaction_log import TransactionLogPort
from .unit_of_work import UnitOfWorkPort, UnitOfWorkScope

__all__ = [
    "AccountStorePort",
    "DatabaseEnginePort",
    "TransactionLogPort",
    "UnitOfWorkPort",
    "UnitOfWorkScope",
]
