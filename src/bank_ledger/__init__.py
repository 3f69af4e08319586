"""Account ledger engine with an append-only transaction log."""

__version__ = "0.1.0"
