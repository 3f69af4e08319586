"""Application use cases package."""

from .ledger_engine import AccountListing, LedgerEngine

__all__ = ["AccountListing", "LedgerEngine"]
