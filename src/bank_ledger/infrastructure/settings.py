"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from bank_ledger.domain.constants import DEFAULT_HISTORY_LIMIT

SUPPORTED_BACKENDS = ("sqlalchemy", "memory")


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for the ledger storage and engine behaviour.

    Attributes:
        backend: Storage backend identifier (sqlalchemy or memory).
        db_url: SQLAlchemy database URL, required by the sqlalchemy backend.
        conflict_retries: How many times an operation is re-run after a
            concurrent modification before the error is surfaced.
        history_limit: Default number of entries returned by history reads.
    """

    backend: str = "sqlalchemy"
    db_url: str | None = None
    conflict_retries: int = 0
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        A ``.env`` file in the working directory is loaded first; variables
        already set in the environment win.

        Returns:
            LedgerSettings: Settings sourced from environment variables.

        Raises:
            ValueError: If a variable holds an unsupported value.
        """
        dotenv.load_dotenv()
        backend = os.getenv("LEDGER_BACKEND", "sqlalchemy").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Unsupported ledger backend: {backend}. "
                f"Expected one of {', '.join(SUPPORTED_BACKENDS)}."
            )
        db_url = os.getenv("LEDGER_DB_URL") or None
        conflict_retries = cls._read_int("LEDGER_CONFLICT_RETRIES", 0, minimum=0)
        history_limit = cls._read_int(
            "LEDGER_HISTORY_LIMIT",
            DEFAULT_HISTORY_LIMIT,
            minimum=1,
        )
        return cls(
            backend=backend,
            db_url=db_url,
            conflict_retries=conflict_retries,
            history_limit=history_limit,
        )

    @staticmethod
    def _read_int(name: str, default: int, minimum: int) -> int:
        """Read an integer environment variable with a lower bound.

        Args:
            name: Environment variable name.
            default: Value used when the variable is unset or empty.
            minimum: Smallest accepted value.

        Returns:
            int: Parsed value.
        """
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
        if value < minimum:
            raise ValueError(f"{name} must be >= {minimum}, got {value}")
        return value


__all__ = ["LedgerSettings", "SUPPORTED_BACKENDS"]
